import json

import pytest

from ecsnetsim.cli import main

TEXT_PLAN = (
    "# node name type category cycles v1 v2\n"
    "n1 src ecsnetpp.stask.StreamingSource src 10 100 5\n"
    "n1 op ecsnetpp.stask.StreamingOperator op 20 1 1\n"
)

XML_PLAN = """<devices>
  <device>
    <name>dev</name>
    <index-range>0..1</index-range>
    <tasks>
      <task>
        <name>src</name>
        <category>src</category>
        <type>ecsnetpp.stask.StreamingSource</type>
        <processingdelay><cpucycles>100</cpucycles></processingdelay>
        <msgsize>64</msgsize>
        <eventrate>10</eventrate>
      </task>
    </tasks>
  </device>
</devices>
"""


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def _run_json(capsys, argv):
    code = main([*argv, "--json"])
    out = capsys.readouterr().out
    return code, json.loads(out)


def test_text_plan_direct_link(tmp_path, capsys):
    plan = _write(tmp_path, "plan.txt", TEXT_PLAN)
    topo = _write(tmp_path, "topo.txt", "src op 1\n")
    code, data = _run_json(capsys, [plan, topo])
    assert code == 0
    assert [t["name"] for t in data["tasks"]] == ["src", "op"]
    assert len(data["connections"]) == 1
    conn = data["connections"][0]
    assert (conn["source"], conn["source_gate"]) == ("src", "outgoingStream")
    assert (conn["target"], conn["target_gate"]) == ("op", "incomingStream")
    senders = {item["task"]: item["senders"] for item in data["senders"]}
    assert senders == {"src": "", "op": "src"}
    assert data["downstream_nodes"] == {"src": ["n1"]}


def test_tasks_on_different_nodes_go_through_supervisor(tmp_path, capsys):
    plan = _write(
        tmp_path,
        "plan.txt",
        "a src ecsnetpp.stask.StreamingSource src 1 1 1\n"
        "b op ecsnetpp.stask.StreamingOperator op 1 1 1\n",
    )
    topo = _write(tmp_path, "topo.txt", "src op 1\n")
    code, data = _run_json(capsys, [plan, topo])
    assert code == 0
    pairs = {(c["node"], c["source"], c["target"]) for c in data["connections"]}
    assert pairs == {("a", "src", "supervisor"), ("b", "supervisor", "op")}
    assert data["downstream_nodes"] == {"src": ["b"]}


def test_ackers_add_one_link_per_task(tmp_path, capsys):
    plan = _write(tmp_path, "plan.txt", TEXT_PLAN)
    topo = _write(tmp_path, "topo.txt", "src op 1\n")
    code, data = _run_json(capsys, [plan, topo, "--ackers"])
    assert code == 0
    acker_links = [c for c in data["connections"] if c["source_gate"] == "ackerOut"]
    assert len(acker_links) == len(data["tasks"])
    assert all(c["target"] == "supervisor" for c in acker_links)


def test_xml_plan_expands_index_range(tmp_path, capsys):
    plan = _write(tmp_path, "plan.xml", XML_PLAN)
    topo = _write(tmp_path, "topo.txt", "# nothing connected\n")
    code, data = _run_json(capsys, [plan, topo])
    assert code == 0
    assert [(t["node"], t["name"]) for t in data["tasks"]] == [
        ("dev[0]", "src0"),
        ("dev[1]", "src1"),
    ]
    assert data["connections"] == []


def test_node_filter_drops_missing_devices(tmp_path, capsys):
    plan = _write(tmp_path, "plan.xml", XML_PLAN)
    topo = _write(tmp_path, "topo.txt", "")
    code, data = _run_json(capsys, [plan, topo, "--node", "dev[1]"])
    assert code == 0
    assert [t["node"] for t in data["tasks"]] == ["dev[1]"]


def test_text_output_lists_connection(tmp_path, capsys):
    plan = _write(tmp_path, "plan.txt", TEXT_PLAN)
    topo = _write(tmp_path, "topo.txt", "src op 1\n")
    assert main([plan, topo]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "connect n1 src.outgoingStream[0] -> op.incomingStream[0]" in lines
    assert "senders n1 op: src" in lines


def test_bad_topology_line_is_error(tmp_path, capsys):
    plan = _write(tmp_path, "plan.txt", TEXT_PLAN)
    topo = _write(tmp_path, "topo.txt", "src op\n")
    assert main([plan, topo]) == 1
    assert "3 items required" in capsys.readouterr().err


def test_incomplete_text_plan_is_error(tmp_path, capsys):
    plan = _write(tmp_path, "plan.txt", "n1 src type cat 1 2\n")
    topo = _write(tmp_path, "topo.txt", "")
    assert main([plan, topo]) == 1
    assert "7 parameters required" in capsys.readouterr().err


def test_missing_plan_file_is_error(tmp_path, capsys):
    topo = _write(tmp_path, "topo.txt", "")
    assert main([str(tmp_path / "absent.xml"), topo]) == 1
    assert capsys.readouterr().err.startswith("error:")


def test_malformed_xml_root_is_error(tmp_path, capsys):
    plan = _write(tmp_path, "plan.xml", "<other/>")
    topo = _write(tmp_path, "topo.txt", "")
    assert main([plan, topo]) == 1
    assert "Root is null" in capsys.readouterr().err


def test_missing_arguments_exit_with_usage_error():
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
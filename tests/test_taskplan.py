import pytest

from ecsnetsim.taskplan import (
    PlannedTask,
    parse_task_plan,
    read_task_plan,
    to_placements,
)
from ecsnetsim.topology import TaskPlacement, TopologyError

SOURCE = "ecsnetpp.stask.StreamingSource"
OPERATOR = "ecsnetpp.stask.StreamingOperator"
SINK = "ecsnetpp.stask.StreamingSink"

PLAN = f"""# node name type category cycles v1 v2
edge[0] src0 {SOURCE} src 100 64 10

edge[0] op0 {OPERATOR} op 200 0.5 2
cloud sink0 {SINK} sink 50 0 0
"""


def test_parse_reads_every_task_in_order():
    tasks = parse_task_plan(PLAN)
    assert [t.name for t in tasks] == ["src0", "op0", "sink0"]
    assert [t.node for t in tasks] == ["edge[0]", "edge[0]", "cloud"]
    assert [t.category for t in tasks] == ["src", "op", "sink"]


def test_source_parameters():
    src = parse_task_plan(PLAN)[0]
    assert src.is_source and not src.is_operator
    assert src.cycles_per_event == 100.0
    assert src.params["msgSize"] == 64.0
    assert src.params["eventRate"] == 10.0
    assert src.params["isSourceMsgSizeDistributed"] is False
    assert src.params["isSourceEvRateDistributed"] is False
    assert src.params["mySTaskCategory"] == "src"


def test_operator_parameters():
    op = parse_task_plan(PLAN)[1]
    assert op.is_operator
    assert op.params["selectivityRatio"] == 0.5
    assert op.params["productivityRatio"] == 2.0
    assert op.params["isOperatorSelectivityDistributed"] is False
    assert op.params["isOperatorProductivityDistributed"] is False
    assert "msgSize" not in op.params


def test_other_type_gets_only_common_parameters():
    sink = parse_task_plan(PLAN)[2]
    assert set(sink.params) == {"cyclesPerEvent", "mySTaskCategory"}
    assert sink.params["cyclesPerEvent"] == 50.0


def test_wrong_field_count_raises():
    with pytest.raises(TopologyError, match="7 parameters required"):
        parse_task_plan("edge src0 type cat 1 2\n")


def test_wrong_field_count_raises_even_for_unknown_node():
    with pytest.raises(TopologyError):
        parse_task_plan("ghost a b c d e f g\n", known_nodes={"edge"})


def test_unknown_nodes_are_skipped():
    tasks = parse_task_plan(PLAN, known_nodes={"cloud"})
    assert [t.name for t in tasks] == ["sink0"]


def test_non_numeric_values_read_as_numeric_prefix_or_zero():
    task = parse_task_plan(f"n t {SOURCE} c abc 12kb 3.5e1x\n")[0]
    assert task.cycles_per_event == 0.0
    assert task.params["msgSize"] == 12.0
    assert task.params["eventRate"] == 35.0


def test_comments_and_blank_lines_only_give_empty_plan():
    assert parse_task_plan("# nothing\n\n#more\n") == []


def test_read_from_file_matches_parse(tmp_path):
    path = tmp_path / "plan.txt"
    path.write_text(PLAN, encoding="utf-8")
    assert read_task_plan(path) == parse_task_plan(PLAN)
    assert [t.name for t in read_task_plan(path, known_nodes=["edge[0]"])] == [
        "src0",
        "op0",
    ]


def test_to_placements():
    placements = to_placements(parse_task_plan(PLAN))
    assert placements == [
        TaskPlacement("edge[0]", "src0", "src"),
        TaskPlacement("edge[0]", "op0", "op"),
        TaskPlacement("cloud", "sink0", "sink"),
    ]


def test_planned_task_equality_ignores_params():
    a = PlannedTask("n", "t", SINK, "c", 1.0, {"x": 1})
    b = PlannedTask("n", "t", SINK, "c", 1.0, {"x": 2})
    assert a == b
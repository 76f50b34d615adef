"""Command line: place streaming tasks from a plan and print the wiring."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from typing import Any, Optional, Sequence

from . import taskplan, xmlplan
from .topology import TaskPlacement, TopologyError, Wiring, build_wiring, read_topology


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ecsnetsim",
        description=(
            "Read an allocation plan and a DSP topology and print how the "
            "streaming tasks and node supervisors are connected."
        ),
    )
    parser.add_argument("plan", help="allocation plan file (XML or line based)")
    parser.add_argument("topology", help="DSP topology file")
    parser.add_argument(
        "--plan-format",
        choices=("auto", "xml", "text"),
        default="auto",
        help="format of the allocation plan (default: detect from content)",
    )
    parser.add_argument(
        "--ackers", action="store_true", help="connect every task to its acker"
    )
    parser.add_argument(
        "--node",
        action="append",
        dest="nodes",
        metavar="NODE",
        help="a node present in the network, e.g. 'pi[0]'; may be repeated. "
        "Without it every node in the plan is taken as present.",
    )
    parser.add_argument("--json", action="store_true", help="print JSON")
    return parser


def _is_xml(text: str) -> bool:
    return text.lstrip().startswith("<")


def _load_placements(
    path: str, plan_format: str, nodes: Optional[set[str]]
) -> list[TaskPlacement]:
    with open(path, encoding="utf-8") as handle:
        text = handle.read()
    if plan_format == "xml" or (plan_format == "auto" and _is_xml(text)):
        node_exists = None
        if nodes is not None:
            known = nodes

            def node_exists(name: str, index: int) -> bool:
                return f"{name}[{index}]" in known

        return xmlplan.to_placements(xmlplan.parse_allocation_plan(text, node_exists))
    return taskplan.to_placements(taskplan.parse_task_plan(text, nodes))


def _as_json(placements: list[TaskPlacement], wiring: Wiring) -> dict[str, Any]:
    return {
        "tasks": [asdict(placement) for placement in placements],
        "senders": [
            {"node": node, "task": task, "senders": senders}
            for (node, task), senders in wiring.senders.items()
        ],
        "connections": [asdict(connection) for connection in wiring.connections],
        "downstream_nodes": wiring.downstream_nodes,
    }


def _gate(module: str, gate: str, index: Optional[int]) -> str:
    return f"{module}.{gate}" if index is None else f"{module}.{gate}[{index}]"


def _as_lines(placements: list[TaskPlacement], wiring: Wiring) -> list[str]:
    lines = [f"task {p.node} {p.name} {p.category}" for p in placements]
    lines.extend(
        f"senders {node} {task}: {senders}"
        for (node, task), senders in wiring.senders.items()
    )
    lines.extend(
        f"connect {c.node} {_gate(c.source, c.source_gate, c.source_index)}"
        f" -> {_gate(c.target, c.target_gate, c.target_index)}"
        for c in wiring.connections
    )
    lines.extend(
        f"downstream {sender}: {','.join(nodes)}"
        for sender, nodes in wiring.downstream_nodes.items()
    )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command; return the process exit status."""
    args = _parser().parse_args(argv)
    nodes = set(args.nodes) if args.nodes else None
    try:
        placements = _load_placements(args.plan, args.plan_format, nodes)
        topology = read_topology(args.topology)
        wiring = build_wiring(placements, topology, args.ackers)
    except (xmlplan.AllocationPlanError, TopologyError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    if args.json:
        print(json.dumps(_as_json(placements, wiring), indent=2))
    else:
        for line in _as_lines(placements, wiring):
            print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
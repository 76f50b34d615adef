"""Streaming topology between task categories and the wiring it implies."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from os import PathLike
from typing import Iterable, Optional, Union

SUPERVISOR = "supervisor"

TASK_IN = "incomingStream"
TASK_OUT = "outgoingStream"
SUPERVISOR_IN = "streamingPortIn"
SUPERVISOR_OUT = "streamingPortOut"
ACKER_OUT = "ackerOut"
SUPERVISOR_ACKER_IN = "sendToAcker"


class TopologyError(ValueError):
    """A topology file or task placement is malformed."""


@dataclass(frozen=True)
class TaskPlacement:
    """A streaming task of a given category placed on a node."""

    node: str
    name: str
    category: str


@dataclass
class DspTopology:
    """Which task categories stream to which."""

    connected: dict[str, dict[str, bool]] = field(default_factory=dict)
    senders: dict[str, list[str]] = field(default_factory=dict)
    downstream: dict[str, list[str]] = field(default_factory=dict)

    def senders_of(self, category: str) -> list[str]:
        """Categories that stream into ``category``, in file order."""
        return list(self.senders.get(category, []))

    def is_connected(self, src: str, dest: str) -> bool:
        """Whether ``src`` streams into ``dest``."""
        return self.connected.get(src, {}).get(dest, False)


@dataclass(frozen=True)
class Connection:
    """A link from one gate on a node to another on the same node."""

    node: str
    source: str
    source_gate: str
    source_index: Optional[int]
    target: str
    target_gate: str
    target_index: Optional[int]


@dataclass
class Wiring:
    """Everything needed to connect placed tasks and their supervisors.

    ``senders`` maps (node, task) to the comma-separated upstream categories;
    ``downstream_nodes`` maps a sender category to the nodes that host its
    downstream tasks, one entry per hosted task.
    """

    connections: list[Connection] = field(default_factory=list)
    senders: dict[tuple[str, str], str] = field(default_factory=dict)
    downstream_nodes: dict[str, list[str]] = field(default_factory=dict)


def parse_topology(text: str) -> DspTopology:
    """Parse lines of ``source-category dest-category connected``.

    Blank lines and lines starting with ``#`` are skipped; a pair counts as
    connected when its flag starts with ``1``.
    """
    topology = DspTopology()
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue
        tokens = line.split()
        if len(tokens) != 3:
            raise TopologyError(
                f'wrong line in parameters file: 3 items required, line: "{line}"'
            )
        src, dest, flag = tokens
        connected = flag.startswith("1")
        topology.connected.setdefault(src, {})[dest] = connected
        if connected:
            topology.senders.setdefault(dest, []).append(src)
            topology.downstream.setdefault(src, []).append(dest)
    return topology


def read_topology(path: Union[str, PathLike]) -> DspTopology:
    """Read and parse a topology file."""
    with open(path, encoding="utf-8") as handle:
        return parse_topology(handle.read())


def _group_by_node(
    placements: Iterable[TaskPlacement],
) -> dict[str, list[TaskPlacement]]:
    grouped: dict[str, list[TaskPlacement]] = {}
    seen: set[tuple[str, str]] = set()
    for placement in placements:
        key = (placement.node, placement.name)
        if key in seen:
            raise TopologyError(
                f"task {placement.name!r} is placed twice on node {placement.node!r}"
            )
        seen.add(key)
        grouped.setdefault(placement.node, []).append(placement)
    return {node: grouped[node] for node in sorted(grouped)}


def build_wiring(
    placements: Iterable[TaskPlacement],
    topology: DspTopology,
    ackers_enabled: bool = False,
) -> Wiring:
    """Work out the links between tasks and their node's supervisor.

    Tasks on one node whose categories are connected are linked directly;
    every stream still missing goes through the node's supervisor.
    """
    placements = list(placements)
    by_node = _group_by_node(placements)
    wiring = Wiring()
    gate_counters: dict[tuple[str, str, str], int] = defaultdict(int)
    incoming_used: dict[tuple[str, str], int] = defaultdict(int)
    outgoing_used: dict[tuple[str, str], int] = defaultdict(int)

    def next_gate(node: str, module: str, gate: str) -> int:
        index = gate_counters[(node, module, gate)]
        gate_counters[(node, module, gate)] = index + 1
        return index

    def link(node: str, source: str, source_gate: str, target: str, target_gate: str) -> None:
        wiring.connections.append(
            Connection(
                node,
                source,
                source_gate,
                next_gate(node, source, source_gate),
                target,
                target_gate,
                next_gate(node, target, target_gate),
            )
        )

    for node, tasks in by_node.items():
        for src in tasks:
            wiring.senders[(node, src.name)] = ",".join(topology.senders_of(src.category))
            for dest in tasks:
                if src.name == dest.name:
                    continue
                if topology.is_connected(src.category, dest.category):
                    link(node, src.name, TASK_OUT, dest.name, TASK_IN)
                    incoming_used[(node, dest.name)] += 1
                    outgoing_used[(node, src.name)] += 1

    for node, tasks in by_node.items():
        for task in tasks:
            key = (node, task.name)
            needed_in = len(topology.senders.get(task.category, []))
            while incoming_used[key] < needed_in:
                link(node, SUPERVISOR, SUPERVISOR_OUT, task.name, TASK_IN)
                incoming_used[key] += 1
            needed_out = len(topology.downstream.get(task.category, []))
            while outgoing_used[key] < needed_out:
                link(node, task.name, TASK_OUT, SUPERVISOR, SUPERVISOR_IN)
                outgoing_used[key] += 1
            if ackers_enabled:
                wiring.connections.append(
                    Connection(
                        node,
                        task.name,
                        ACKER_OUT,
                        None,
                        SUPERVISOR,
                        SUPERVISOR_ACKER_IN,
                        next_gate(node, SUPERVISOR, SUPERVISOR_ACKER_IN),
                    )
                )

    category_nodes: dict[str, list[str]] = {}
    for placement in placements:
        category_nodes.setdefault(placement.category, []).append(placement.node)
    for sender in sorted(topology.downstream):
        nodes = wiring.downstream_nodes.setdefault(sender, [])
        for category in topology.downstream[sender]:
            nodes.extend(category_nodes.get(category, []))
    return wiring
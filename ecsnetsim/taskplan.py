"""Reading a line-based task allocation plan into placed streaming tasks."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from os import PathLike
from typing import Any, Collection, Iterable, Optional, Union

from .topology import TaskPlacement, TopologyError

_log = logging.getLogger(__name__)

STREAMING_SOURCE = "ecsnetpp.stask.StreamingSource"
STREAMING_OPERATOR = "ecsnetpp.stask.StreamingOperator"

_FIELDS = 7

_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _leading_float(text: str) -> float:
    """Parse the longest numeric prefix of ``text``; 0.0 if there is none."""
    match = _FLOAT_PREFIX.match(text.lstrip())
    return float(match.group(0)) if match else 0.0


@dataclass(frozen=True)
class PlannedTask:
    """One streaming task from the allocation plan, with its parameters."""

    node: str
    name: str
    type: str
    category: str
    cycles_per_event: float
    params: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def is_source(self) -> bool:
        return self.type == STREAMING_SOURCE

    @property
    def is_operator(self) -> bool:
        return self.type == STREAMING_OPERATOR


def _task_params(
    task_type: str, category: str, cycles: float, first: float, second: float
) -> dict[str, Any]:
    params: dict[str, Any] = {"cyclesPerEvent": cycles}
    if task_type == STREAMING_SOURCE:
        params.update(
            msgSize=first,
            isSourceMsgSizeDistributed=False,
            eventRate=second,
            isSourceEvRateDistributed=False,
        )
    elif task_type == STREAMING_OPERATOR:
        params.update(
            selectivityRatio=first,
            isOperatorSelectivityDistributed=False,
            productivityRatio=second,
            isOperatorProductivityDistributed=False,
        )
    params["mySTaskCategory"] = category
    return params


def parse_task_plan(
    text: str, known_nodes: Optional[Collection[str]] = None
) -> list[PlannedTask]:
    """Parse lines of ``node name type category cycles value1 value2``.

    Blank lines and lines starting with ``#`` are skipped. For sources the
    two values are message size and event rate; for operators they are
    selectivity and productivity ratios. Tasks on nodes not in
    ``known_nodes`` are left out; ``None`` accepts every node.
    """
    tasks: list[PlannedTask] = []
    for line in text.splitlines():
        if not line or line.startswith("#"):
            continue
        tokens = line.split()
        if len(tokens) != _FIELDS:
            raise TopologyError(
                "Incomplete allocation plan parameters: 7 parameters required, "
                f'line: "{line}"'
            )
        node, name, task_type, category = tokens[:4]
        cycles, first, second = (_leading_float(token) for token in tokens[4:])
        if known_nodes is not None and node not in known_nodes:
            _log.warning("Node %s is not present in the network.", node)
            continue
        tasks.append(
            PlannedTask(
                node=node,
                name=name,
                type=task_type,
                category=category,
                cycles_per_event=cycles,
                params=_task_params(task_type, category, cycles, first, second),
            )
        )
    return tasks


def read_task_plan(
    path: Union[str, PathLike], known_nodes: Optional[Collection[str]] = None
) -> list[PlannedTask]:
    """Read and parse a task allocation plan file."""
    with open(path, encoding="utf-8") as handle:
        return parse_task_plan(handle.read(), known_nodes)


def to_placements(tasks: Iterable[PlannedTask]) -> list[TaskPlacement]:
    """Reduce planned tasks to the placements used for wiring."""
    return [TaskPlacement(task.node, task.name, task.category) for task in tasks]
"""Reading an XML allocation plan that places streaming tasks on device ranges."""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from os import PathLike
from typing import Any, Callable, Iterable, Optional, Union

from .topology import TaskPlacement

_log = logging.getLogger(__name__)

STREAMING_SOURCE = "ecsnetpp.stask.StreamingSource"
STREAMING_OPERATOR = "ecsnetpp.stask.StreamingOperator"

NodeExists = Callable[[str, int], bool]

_FLOAT_PREFIX = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


class AllocationPlanError(ValueError):
    """An allocation plan cannot be read or is malformed."""


@dataclass(frozen=True)
class _DistributionSlot:
    element: str
    enabled_par: str
    module_par: str
    fixed_element: str
    fixed_par: str


_SOURCE_SLOTS = (
    _DistributionSlot(
        "msgsizedistribution",
        "isSourceMsgSizeDistributed",
        "mySourceMsgSizeDistributionModuleName",
        "msgsize",
        "msgSize",
    ),
    _DistributionSlot(
        "sourceevdistribution",
        "isSourceEvRateDistributed",
        "mySourceEvRateDistributionModuleName",
        "eventrate",
        "eventRate",
    ),
)

_OPERATOR_SLOTS = (
    _DistributionSlot(
        "selectivitydistribution",
        "isOperatorSelectivityDistributed",
        "myOperatorSelectivityDistributionModuleName",
        "selectivity",
        "selectivityRatio",
    ),
    _DistributionSlot(
        "productivitydistribution",
        "isOperatorProductivityDistributed",
        "myOperatorProductivityDistributionModuleName",
        "productivity",
        "productivityRatio",
    ),
)


@dataclass(frozen=True)
class DistributionSpec:
    """A distribution module to create on a node, with its numeric parameters."""

    name: str
    type: str
    node: str
    values: dict[str, float] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class DeviceTask:
    """One streaming task instance placed on one indexed device."""

    node: str
    name: str
    type: str
    category: str
    processing_delay: float
    delay_in_cpu_cycles: bool
    params: dict[str, Any] = field(default_factory=dict, compare=False)
    distributions: tuple[DistributionSpec, ...] = ()

    @property
    def is_source(self) -> bool:
        return self.type.startswith(STREAMING_SOURCE)

    @property
    def is_operator(self) -> bool:
        return self.type.startswith(STREAMING_OPERATOR)


def _to_float(text: Optional[str]) -> float:
    match = _FLOAT_PREFIX.match((text or "").lstrip())
    return float(match.group(0)) if match else 0.0


def _child(element: ET.Element, tag: str, context: str) -> ET.Element:
    found = element.find(tag)
    if found is None:
        raise AllocationPlanError(f"Malformed XML! <{tag}> missing in {context}.")
    return found


def _child_text(element: ET.Element, tag: str, context: str) -> str:
    return (_child(element, tag, context).text or "").strip()


def _index_range(text: str) -> range:
    tokens = [token for token in text.split(".") if token.strip()]
    if not tokens:
        raise AllocationPlanError(f"Malformed index range: {text!r}")
    try:
        indices = [int(token) for token in tokens]
    except ValueError as exc:
        raise AllocationPlanError(f"Malformed index range: {text!r}") from exc
    first = indices[0]
    last = indices[1] if len(indices) > 1 else first
    return range(first, last + 1)


def _processing_delay(task: ET.Element) -> tuple[float, bool]:
    delay_element = task.find("processingdelay")
    if delay_element is None:
        return 0.0, False
    cycles = delay_element.find("cpucycles")
    if cycles is not None:
        return _to_float(cycles.text), True
    measured = delay_element.find("measuredtime")
    if measured is not None:
        return _to_float(measured.text), False
    return 0.0, False


def _setup_distribution(
    task: ET.Element,
    slot: _DistributionSlot,
    node: str,
    params: dict[str, Any],
    context: str,
) -> Optional[DistributionSpec]:
    dist_element = task.find(slot.element)
    if dist_element is None:
        fixed = task.find(slot.fixed_element)
        if fixed is None:
            raise AllocationPlanError(
                f"Malformed XML! neither <{slot.element}> nor <{slot.fixed_element}> "
                f"given in {context}."
            )
        params[slot.fixed_par] = _to_float(fixed.text)
        params[slot.enabled_par] = False
        return None
    dist_context = f"{slot.element} of {context}"
    dist_name = _child_text(dist_element, "name", dist_context)
    dist_type = _child_text(dist_element, "type", dist_context)
    params[slot.module_par] = dist_name
    values_element = dist_element.find("values")
    values = (
        {value.tag: _to_float(value.text) for value in values_element}
        if values_element is not None
        else {}
    )
    params[slot.enabled_par] = True
    return DistributionSpec(dist_name, dist_type, node, values)


def _parse_root(root: ET.Element, node_exists: Optional[NodeExists]) -> list[DeviceTask]:
    if root.tag != "devices":
        raise AllocationPlanError("Malformed XML! Root is null.")
    placed: list[DeviceTask] = []
    for device in root.findall("device"):
        device_name = _child_text(device, "name", "device")
        indices = _index_range(_child_text(device, "index-range", f"device {device_name}"))
        tasks = _child(device, "tasks", f"device {device_name}")
        for task in tasks.findall("task"):
            context = f"task of device {device_name}"
            task_name = _child_text(task, "name", context)
            category = _child_text(task, "category", context)
            task_type = _child_text(task, "type", context)
            context = f"task {task_name}"
            delay, in_cycles = _processing_delay(task)
            for index in indices:
                if node_exists is not None and not node_exists(device_name, index):
                    _log.warning(
                        "Node %s[%d] is not present in the network.", device_name, index
                    )
                    continue
                node = f"{device_name}[{index}]"
                params: dict[str, Any] = {
                    "processingDelayPerEvent": delay,
                    "isProcessingDelayInCpuCycles": in_cycles,
                    "mySTaskCategory": category,
                }
                if task_type.startswith(STREAMING_SOURCE):
                    slots: tuple[_DistributionSlot, ...] = _SOURCE_SLOTS
                elif task_type.startswith(STREAMING_OPERATOR):
                    slots = _OPERATOR_SLOTS
                else:
                    slots = ()
                specs = tuple(
                    spec
                    for spec in (
                        _setup_distribution(task, slot, node, params, context)
                        for slot in slots
                    )
                    if spec is not None
                )
                placed.append(
                    DeviceTask(
                        node=node,
                        name=f"{task_name}{index}",
                        type=task_type,
                        category=category,
                        processing_delay=delay,
                        delay_in_cpu_cycles=in_cycles,
                        params=params,
                        distributions=specs,
                    )
                )
    return placed


def parse_allocation_plan(
    text: str, node_exists: Optional[NodeExists] = None
) -> list[DeviceTask]:
    """Parse an XML allocation plan into task instances, one per device index.

    ``node_exists(name, index)`` says whether a device is in the network;
    tasks on missing devices are left out. ``None`` accepts every device.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError as exc:
        raise AllocationPlanError(f"Unable to parse the allocation plan: {exc}") from exc
    return _parse_root(root, node_exists)


def read_allocation_plan(
    path: Union[str, PathLike], node_exists: Optional[NodeExists] = None
) -> list[DeviceTask]:
    """Read and parse an XML allocation plan file."""
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise AllocationPlanError(f"Unable to read the xml file : {path}") from exc
    return parse_allocation_plan(text, node_exists)


def to_placements(tasks: Iterable[DeviceTask]) -> list[TaskPlacement]:
    """Reduce task instances to the placements used for wiring."""
    return [TaskPlacement(task.node, task.name, task.category) for task in tasks]
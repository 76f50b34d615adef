"""A CPU core that holds streaming messages for their processing delay."""

from __future__ import annotations

import enum
import math
from collections import deque
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

_NS_PER_SECOND = 1_000_000_000


class CpuState(enum.Enum):
    """Whether a core is working on a message."""

    BUSY = "busy"
    IDLE = "idle"


@dataclass
class StreamingMessage:
    """A message travelling between streaming tasks, with its timing record."""

    sender: str = ""
    sender_id: int = 0
    sender_module: Any = None
    delay_in_cpu_cycles: bool = False
    processing_delay_per_event: float = 0.0
    selectivity_ratio: float = 1.0
    processing_delay: float = 0.0
    edge_processing_delay: float = 0.0
    operator_ingress_time: float = 0.0

    def copy(self) -> "StreamingMessage":
        """Return an independent copy of this message."""
        return replace(self)


class CpuCore:
    """Queues messages per sender and releases them after their processing delay.

    ``accept`` returns the time at which the message's processing finishes;
    the caller then calls ``complete`` for that sender at that time.
    """

    def __init__(
        self,
        per_core_freq: float,
        parallelisation_factor: float = 1.0,
        threads_per_core: int = 1,
        total_cores: int = 1,
        is_edge_device: bool = False,
        on_state_change: Optional[Callable[[CpuState], None]] = None,
    ) -> None:
        if total_cores < 1:
            raise ValueError(f"a CPU needs at least one core, got {total_cores}")
        if threads_per_core < 1:
            raise ValueError(
                f"a core needs at least one thread, got {threads_per_core}"
            )
        self.per_core_freq = float(per_core_freq)
        self.parallelisation_factor = float(parallelisation_factor)
        self.threads_per_core = int(threads_per_core)
        self.total_cores = int(total_cores)
        self.is_edge_device = is_edge_device
        self._on_state_change = on_state_change
        self._queues: dict[int, deque[StreamingMessage]] = {}

    @property
    def pending(self) -> dict[int, int]:
        """Number of queued messages for each sender that has any."""
        return {sender: len(queue) for sender, queue in self._queues.items()}

    def _emit(self, state: CpuState) -> None:
        if self._on_state_change is not None:
            self._on_state_change(state)

    def calculate_delay(
        self, delay_in_cpu_cycles: bool, processing_delay: float, threads: int = 0
    ) -> float:
        """Return the processing time in seconds for one message.

        A delay given as measured time is in nanoseconds and is spread over
        all cores; a delay in CPU cycles is divided by the core frequency and
        scaled by the number of busy threads.
        """
        if not delay_in_cpu_cycles:
            return (
                processing_delay
                * self.parallelisation_factor
                / (self.total_cores * _NS_PER_SECOND)
            )
        delay = processing_delay / self.per_core_freq if self.per_core_freq != 0 else 0.0
        delay = max(delay, 0.0)
        if threads > 0:
            delay = delay * threads / self.threads_per_core
        return delay

    def accept(self, message: StreamingMessage, now: float) -> float:
        """Queue ``message`` arriving at ``now``; return when it will be done."""
        self._emit(CpuState.BUSY)
        message.operator_ingress_time = now
        delay = self.calculate_delay(
            message.delay_in_cpu_cycles,
            message.processing_delay_per_event,
            len(self._queues),
        )
        self._queues.setdefault(message.sender_id, deque()).append(message)
        return now + delay

    def complete(self, sender_id: int, now: float) -> list[StreamingMessage]:
        """Finish the oldest message of ``sender_id`` and return what goes back.

        A selectivity ratio above one yields that many copies, rounded.
        """
        queue = self._queues.get(sender_id)
        if not queue:
            raise KeyError(f"no message queued for sender {sender_id}")
        message = queue.popleft()
        elapsed = now - message.operator_ingress_time
        message.processing_delay += elapsed
        if self.is_edge_device:
            message.edge_processing_delay += elapsed
        if not queue:
            del self._queues[sender_id]
        if message.selectivity_ratio > 1:
            count = math.floor(message.selectivity_ratio + 0.5)
            outputs = [message.copy() for _ in range(count)]
        else:
            outputs = [message]
        self._emit(CpuState.IDLE)
        return outputs

    def finish(self) -> int:
        """Drop every queued message; return how many were dropped."""
        dropped = sum(len(queue) for queue in self._queues.values())
        self._queues.clear()
        return dropped
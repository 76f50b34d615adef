"""Counting packets and deciding when a simulation run ends."""

from __future__ import annotations

import logging
from typing import Callable, Optional

_log = logging.getLogger(__name__)

_REPORT_EVERY = 1000


class SimulationController:
    """Tracks packets seen at sinks and sources against a packet-count limit.

    A negative limit means the run continues until stopped by hand.
    """

    def __init__(
        self,
        packet_count_limit: int,
        enable_limit_from_source: bool = False,
        warmup_period: float = 0.0,
        start_time: float = 0.0,
        on_end: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.packet_count_limit = int(packet_count_limit)
        self.enable_limit_from_source = enable_limit_from_source
        self.warmup_period = float(warmup_period)
        self.start_time = float(start_time)
        self._on_end = on_end
        self.packet_count = 0
        self.source_packet_count = 0
        self.stop_event_generation = False
        self.stop_edge_idle_energy_recording = False
        self.ended = False
        self.total_sim_time: Optional[float] = None

    def packet_received(self, now: float) -> bool:
        """Record a packet reaching a sink; return whether the run has ended."""
        if now < self.warmup_period or self.ended:
            return self.ended
        self.packet_count += 1
        if 0 <= self.packet_count_limit <= self.packet_count:
            _log.info(
                "Packet count limit of %d reached. Ending simulation...",
                self.packet_count_limit,
            )
            self.total_sim_time = now - self.start_time
            self.ended = True
            if self._on_end is not None:
                self._on_end(self.total_sim_time)
        if self.packet_count % _REPORT_EVERY == 0:
            _log.info("Sink PKT COUNT=%d", self.packet_count)
        return self.ended

    def packet_generated(self, now: float) -> bool:
        """Record a packet produced by a source; return whether sources should stop."""
        if now < self.warmup_period:
            return self.stop_event_generation
        self.source_packet_count += 1
        if 0 <= self.packet_count_limit <= self.source_packet_count:
            if self.enable_limit_from_source:
                self.stop_event_generation = True
            self.stop_edge_idle_energy_recording = True
            _log.info(
                "Stopping event generation now. Source PKT COUNT=%d",
                self.source_packet_count,
            )
        if self.source_packet_count % _REPORT_EVERY == 0:
            _log.info("Source PKT COUNT=%d", self.source_packet_count)
        return self.stop_event_generation
"""Choosing the CPU core that handles the next unit of work."""

from __future__ import annotations


class CpuCoreScheduler:
    """Base scheduler; concrete schedulers decide which core runs next."""

    def next_core_index(self) -> int:
        """Return the index of the core to use next."""
        raise NotImplementedError(
            "A CPU scheduler is not assigned to get the next CPU core index."
        )


class RoundRobinCpuCoreScheduler(CpuCoreScheduler):
    """Hands out core indices in turn, wrapping after the last core."""

    def __init__(self, cores: int) -> None:
        if cores < 1:
            raise ValueError(f"a scheduler needs at least one core, got {cores}")
        self.cores = cores
        self._last_index = 0

    def next_core_index(self) -> int:
        """Advance to the following core and return its index."""
        self._last_index = (self._last_index + 1) % self.cores
        return self._last_index
"""Operator selectivity: the share of input messages an operator emits."""

from __future__ import annotations

import math


def _round_half_away(value: float) -> int:
    magnitude = math.floor(abs(value) + 0.5)
    return -magnitude if value < 0 else magnitude


class OperatorSelectivityDistribution:
    """Base selectivity model; subclasses supply ratio and window length."""

    def selectivity_ratio(self) -> float:
        """Return the selectivity ratio."""
        raise NotImplementedError(
            "Operator selectivity distribution function is not implemented."
        )

    def selectivity_window_length(self) -> float:
        """Return how many inputs make up one selectivity window."""
        raise NotImplementedError(
            "Operator selectivity distribution window length function is not implemented."
        )


class FixedSelectivityDistribution(OperatorSelectivityDistribution):
    """Selectivity fixed at one ratio; the window is its rounded reciprocal."""

    def __init__(self, selectivityratio: float) -> None:
        ratio = float(selectivityratio)
        if ratio == 0:
            raise ValueError("selectivity ratio must not be zero")
        self._ratio = ratio
        self._window_length = _round_half_away(1 / ratio)

    def selectivity_ratio(self) -> float:
        return self._ratio

    def selectivity_window_length(self) -> float:
        return float(self._window_length)
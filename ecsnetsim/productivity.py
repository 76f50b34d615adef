"""Operator productivity: how much an operator's output grows per input."""

from __future__ import annotations


class OperatorProductivityDistribution:
    """Base productivity model; subclasses supply the ratio."""

    def productivity_ratio(self) -> float:
        """Return the productivity ratio for the next message."""
        raise NotImplementedError(
            "Operator productivity distribution function is not implemented."
        )


class FixedProductivityDistribution(OperatorProductivityDistribution):
    """Productivity that stays at one configured value."""

    def __init__(self, productivityratio: float) -> None:
        self._ratio = float(productivityratio)

    def productivity_ratio(self) -> float:
        return self._ratio
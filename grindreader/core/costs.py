"""Conversion of raw costs to percent, millisecond, and microsecond values.

All rounding is half away from zero and done on ``Decimal`` so that results
are exact for every 32-bit raw cost.
"""

from __future__ import annotations

from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal

from grindreader.core.models import Cost, CostFormat, TimeUnit

_TWO_PLACES = Decimal("0.01")
_UNIT = Decimal("1")


def to_percent(raw_cost: int, total: float) -> str:
    """Share of ``total`` as a fixed-point string with two decimals."""
    if total == 0:
        return "0.00"
    share = Decimal(raw_cost) * 100 / Decimal(total)
    return f"{share.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP):f}"


def to_whole_units(raw_cost: int, divisor: int) -> int:
    """``raw_cost / divisor`` rounded to the nearest integer."""
    return int((Decimal(raw_cost) / divisor).quantize(_UNIT, rounding=ROUND_HALF_UP))


class CostFormatter:
    """Formats raw costs for one data file.

    ``total`` is called only when a percentage is requested, so the header
    block is not read for millisecond or microsecond output.
    """

    def __init__(
        self,
        time_unit: TimeUnit,
        default_format: CostFormat,
        total: Callable[[], float],
    ) -> None:
        self.time_unit = time_unit
        self.default_format = default_format
        self._total = total

    def format(self, raw_cost: int, cost_format: CostFormat | str | None = None) -> Cost:
        resolved = self.default_format if cost_format is None else CostFormat.parse(cost_format)

        if resolved is CostFormat.PERCENT:
            return to_percent(raw_cost, self._total())
        if resolved is CostFormat.MSEC:
            return to_whole_units(raw_cost, self.time_unit.msec_divisor)
        return to_whole_units(raw_cost, self.time_unit.usec_divisor)

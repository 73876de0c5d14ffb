"""Data models for grindreader."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Formatted cost: a two-decimal string for percentages, an integer otherwise.
Cost = str | int


class TimeUnit(Enum):
    """Time unit of the raw costs, as announced by the ``events`` header."""

    MICROSECONDS = "µs"
    NANOSECONDS = "ns"

    @property
    def msec_divisor(self) -> int:
        """Divisor converting a raw cost to milliseconds."""
        return 1_000 if self is TimeUnit.MICROSECONDS else 1_000_000

    @property
    def usec_divisor(self) -> int:
        """Divisor converting a raw cost to microseconds."""
        return 1 if self is TimeUnit.MICROSECONDS else 1_000


class CostFormat(Enum):
    """Representations a raw cost can be converted to."""

    PERCENT = "percent"
    MSEC = "msec"
    USEC = "usec"

    @classmethod
    def parse(cls, value: CostFormat | str | None) -> CostFormat:
        """Resolve a format name. Anything unrecognised falls back to USEC."""
        if isinstance(value, CostFormat):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.USEC


@dataclass
class FileHeader:
    """The three words at the start of every data file."""

    version: int
    header_offset: int
    function_count: int


@dataclass
class FunctionRecord:
    """Aggregate costs and call relationships of one profiled function."""

    file: str
    line: int
    function_name: str
    summed_self_cost: Cost
    summed_inclusive_cost: Cost
    summed_self_cost_raw: int
    summed_inclusive_cost_raw: int
    invocation_count: int
    called_from_count: int
    sub_call_count: int


@dataclass
class CallRecord:
    """One caller or callee edge of a function.

    ``function_nr`` is the other end of the edge: the caller for a
    "called from" record, the callee for a "sub call" record.
    """

    function_nr: int
    line: int
    call_count: int
    summed_call_cost: Cost
    summed_call_cost_raw: int

"""Decoding of function and call information blocks."""

from __future__ import annotations

from dataclasses import dataclass

from grindreader.core.costs import CostFormatter
from grindreader.core.datafile import layout
from grindreader.core.datafile.primitives import BinarySource
from grindreader.core.exceptions import IndexOutOfRange, TruncatedRecord
from grindreader.core.models import CallRecord, FunctionRecord


@dataclass
class FunctionCounts:
    """The six fixed words at the start of a function information block."""

    line: int
    summed_self_cost: int
    summed_inclusive_cost: int
    invocation_count: int
    called_from_count: int
    sub_call_count: int


class RecordDecoder:
    """Reads records addressed through the function offset index."""

    def __init__(
        self,
        source: BinarySource,
        function_offsets: tuple[int, ...],
        formatter: CostFormatter,
    ) -> None:
        self._source = source
        self._function_offsets = function_offsets
        self._formatter = formatter

    def function_info(self, function_nr: int) -> FunctionRecord:
        counts = self._read_counts(function_nr)
        self._source.skip_words(
            layout.call_blocks_span(counts.called_from_count, counts.sub_call_count)
        )
        file = self._read_text(function_nr, "file path")
        function_name = self._read_text(function_nr, "function name")

        return FunctionRecord(
            file=file,
            line=counts.line,
            function_name=function_name,
            summed_self_cost=self._formatter.format(counts.summed_self_cost),
            summed_inclusive_cost=self._formatter.format(counts.summed_inclusive_cost),
            summed_self_cost_raw=counts.summed_self_cost,
            summed_inclusive_cost_raw=counts.summed_inclusive_cost,
            invocation_count=counts.invocation_count,
            called_from_count=counts.called_from_count,
            sub_call_count=counts.sub_call_count,
        )

    def called_from_info(self, function_nr: int, called_from_nr: int) -> CallRecord:
        counts = self._read_counts(function_nr)
        _check_range("called from", called_from_nr, counts.called_from_count)

        base = self._function_offsets[function_nr]
        return self._read_call(layout.called_from_offset(base, called_from_nr))

    def sub_call_info(self, function_nr: int, sub_call_nr: int) -> CallRecord:
        counts = self._read_counts(function_nr)
        _check_range("sub call", sub_call_nr, counts.sub_call_count)

        # Sub calls are stored after every called-from block of the function.
        base = self._function_offsets[function_nr]
        self._source.seek(layout.called_from_counter_offset(base))
        called_from_count = self._source.read_word()
        return self._read_call(layout.sub_call_offset(base, called_from_count, sub_call_nr))

    def _read_counts(self, function_nr: int) -> FunctionCounts:
        _check_range("function", function_nr, len(self._function_offsets))
        self._source.seek(self._function_offsets[function_nr])
        return FunctionCounts(*self._source.read_words(layout.FUNCTION_INFO_WORDS))

    def _read_call(self, offset: int) -> CallRecord:
        self._source.seek(offset)
        function_nr, line, call_count, cost = self._source.read_words(layout.CALL_INFO_WORDS)
        return CallRecord(
            function_nr=function_nr,
            line=line,
            call_count=call_count,
            summed_call_cost=self._formatter.format(cost),
            summed_call_cost_raw=cost,
        )

    def _read_text(self, function_nr: int, what: str) -> str:
        raw = self._source.read_line()
        if raw is None:
            raise TruncatedRecord(f"Missing {what} of function {function_nr}")
        return raw.decode("utf-8", errors="surrogateescape")


def _check_range(kind: str, nr: int, count: int) -> None:
    if not 0 <= nr < count:
        raise IndexOutOfRange(f"No {kind} number {nr} (have {count})")

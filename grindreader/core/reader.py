"""Random-access reader for preprocessed profile data files."""

from __future__ import annotations

import logging
import os
import re
import threading
from collections.abc import Iterator
from typing import BinaryIO

from grindreader.core.costs import CostFormatter
from grindreader.core.datafile import layout
from grindreader.core.datafile.headers import HeaderStore, HeaderValue
from grindreader.core.datafile.primitives import BinarySource
from grindreader.core.datafile.records import RecordDecoder
from grindreader.core.exceptions import (
    FormatVersionMismatch,
    ReaderClosedError,
    SourceUnavailable,
)
from grindreader.core.models import (
    CallRecord,
    Cost,
    CostFormat,
    FileHeader,
    FunctionRecord,
    TimeUnit,
)

logger = logging.getLogger(__name__)

# Both the micro sign and the greek small mu are accepted for microseconds.
_TIME_EVENT = re.compile(r"Time_\(\d*(?P<unit>[µμ]s|ns)\)")

Source = str | os.PathLike[str] | BinaryIO


def detect_time_unit(events: str) -> TimeUnit:
    """Find the unit in an ``events`` header like ``Time_(10ns) Memory_(bytes)``.

    Defaults to microseconds when the header carries no unit annotation.
    """
    match = _TIME_EVENT.search(events)
    if match is None:
        return TimeUnit.MICROSECONDS
    if match.group("unit") == "ns":
        return TimeUnit.NANOSECONDS
    return TimeUnit.MICROSECONDS


class Reader:
    """Decodes function and call records of one data file on demand.

    ``source`` is either a path, which the reader opens and closes itself,
    or a readable and seekable binary stream, which is borrowed and left open.
    Construction reads the file header and offset index; any failure there
    raises and leaves no reader behind.
    """

    def __init__(self, source: Source, cost_format: CostFormat | str = CostFormat.USEC) -> None:
        self._lock = threading.RLock()
        self._stream, self._owns_stream = _open_source(source)
        self._closed = False

        try:
            self._initialize(CostFormat.parse(cost_format))
        except BaseException:
            self.close()
            raise

    def _initialize(self, cost_format: CostFormat) -> None:
        self._source = BinarySource(self._stream)

        self._source.seek(0)
        version, header_offset, function_count = self._source.read_words(
            layout.FILE_HEADER_WORDS
        )
        if version != layout.FILE_FORMAT_VERSION:
            raise FormatVersionMismatch(version, layout.FILE_FORMAT_VERSION)
        self._file_header = FileHeader(version, header_offset, function_count)

        self._source.seek(layout.index_offset())
        self._function_offsets = self._source.read_words(function_count)
        self._headers = HeaderStore(self._source, header_offset)

        events = self._headers.get("events")
        time_unit = detect_time_unit(str(events))

        self._formatter = CostFormatter(time_unit, cost_format, self._summary_total)
        self._records = RecordDecoder(self._source, self._function_offsets, self._formatter)

        logger.debug(
            "Opened data file version %d with %d functions, time unit %s",
            version,
            function_count,
            time_unit.name.lower(),
        )

    def close(self) -> None:
        """Release the underlying stream. Further queries raise ReaderClosedError."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            if self._owns_stream:
                self._stream.close()

    def __enter__(self) -> Reader:
        return self

    def __exit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def file_header(self) -> FileHeader:
        return self._file_header

    @property
    def time_unit(self) -> TimeUnit:
        return self._formatter.time_unit

    @property
    def cost_format(self) -> CostFormat:
        return self._formatter.default_format

    def get_function_count(self) -> int:
        """Return the number of functions in the file."""
        self._ensure_open()
        return len(self._function_offsets)

    def get_function_info(self, function_nr: int) -> FunctionRecord:
        """Decode the function record with number ``function_nr``."""
        with self._lock:
            self._ensure_open()
            return self._records.function_info(function_nr)

    def get_called_from_info(self, function_nr: int, called_from_nr: int) -> CallRecord:
        """Decode one of the places function ``function_nr`` was called from."""
        with self._lock:
            self._ensure_open()
            return self._records.called_from_info(function_nr, called_from_nr)

    def get_sub_call_info(self, function_nr: int, sub_call_nr: int) -> CallRecord:
        """Decode one of the functions called by function ``function_nr``."""
        with self._lock:
            self._ensure_open()
            return self._records.sub_call_info(function_nr, sub_call_nr)

    def get_header(self, key: str) -> HeaderValue:
        """Return a header value.

        ``runs`` is the number of summary lines and ``summary`` the sum of
        their time components. Keys missing from the file read as ``""``.
        """
        with self._lock:
            self._ensure_open()
            return self._headers.get(key)

    def format_cost(self, raw_cost: int, cost_format: CostFormat | str | None = None) -> Cost:
        """Format a raw cost, using the reader's default format when none is given."""
        with self._lock:
            self._ensure_open()
            return self._formatter.format(raw_cost, cost_format)

    def iter_functions(self) -> Iterator[FunctionRecord]:
        """Yield every function record in function-number order."""
        for function_nr in range(self.get_function_count()):
            yield self.get_function_info(function_nr)

    def iter_called_from(self, function_nr: int) -> Iterator[CallRecord]:
        """Yield every called-from record of a function."""
        count = self.get_function_info(function_nr).called_from_count
        for called_from_nr in range(count):
            yield self.get_called_from_info(function_nr, called_from_nr)

    def iter_sub_calls(self, function_nr: int) -> Iterator[CallRecord]:
        """Yield every sub-call record of a function."""
        count = self.get_function_info(function_nr).sub_call_count
        for sub_call_nr in range(count):
            yield self.get_sub_call_info(function_nr, sub_call_nr)

    def _summary_total(self) -> float:
        return float(self._headers.get("summary") or 0)

    def _ensure_open(self) -> None:
        if self._closed:
            raise ReaderClosedError("Reader is closed")


def open_reader(source: Source, cost_format: CostFormat | str = CostFormat.USEC) -> Reader:
    """Open a data file for reading."""
    return Reader(source, cost_format)


def _open_source(source: Source) -> tuple[BinaryIO, bool]:
    if isinstance(source, (str, os.PathLike)):
        try:
            return open(source, "rb"), True
        except OSError as e:
            raise SourceUnavailable(f"Error opening file {os.fspath(source)}: {e}") from e
    return source, False

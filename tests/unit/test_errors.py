"""Tests for error handling paths."""

import io
import struct
from collections.abc import Callable
from pathlib import Path

import pytest

from datafiles import FunctionSpec, build_datafile
from grindreader.core.exceptions import (
    FormatVersionMismatch,
    GrindReaderError,
    HeaderParseError,
    IndexOutOfRange,
    ReaderClosedError,
    SourceUnavailable,
    TruncatedRecord,
)
from grindreader.core.reader import Reader


class TestConstructionErrors:
    """Tests for failures while opening a data file."""

    def test_missing_file(self, temp_dir: Path) -> None:
        """Test that a missing file raises SourceUnavailable."""
        missing = temp_dir / "missing.dat"
        with pytest.raises(SourceUnavailable) as exc_info:
            Reader(missing)

        assert "missing.dat" in str(exc_info.value)

    @pytest.mark.parametrize("version", [0, 6, 8, 0xFFFFFFFF])
    def test_version_mismatch(self, write_datafile: Callable[..., Path], version: int) -> None:
        """Test that any version other than the supported one is rejected."""
        path = write_datafile([FunctionSpec(name="main")], version=version)

        with pytest.raises(FormatVersionMismatch) as exc_info:
            Reader(path)

        assert exc_info.value.found == version
        assert exc_info.value.expected == 7
        assert f"Found {version} expected 7" in str(exc_info.value)

    def test_empty_file(self) -> None:
        """Test that a file shorter than the file header raises TruncatedRecord."""
        with pytest.raises(TruncatedRecord):
            Reader(io.BytesIO(b""))

    def test_truncated_offset_index(self) -> None:
        """Test that an index shorter than the function count is fatal."""
        data = struct.pack("<5I", 7, 0, 4, 100, 200)
        with pytest.raises(TruncatedRecord):
            Reader(io.BytesIO(data))

    def test_malformed_header_is_fatal(self) -> None:
        """Test that the events lookup at construction surfaces header errors."""
        data = struct.pack("<3I", 7, 12, 0) + b"not a header\n"
        with pytest.raises(HeaderParseError):
            Reader(io.BytesIO(data))

    def test_owned_file_closed_on_failure(
        self, write_datafile: Callable[..., Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that a file opened by the reader is closed when construction fails."""
        path = write_datafile([], version=3)
        opened = []
        real_open = open

        def tracking_open(*args: object, **kwargs: object):  # type: ignore[no-untyped-def]
            handle = real_open(*args, **kwargs)  # type: ignore[call-overload]
            opened.append(handle)
            return handle

        monkeypatch.setattr("builtins.open", tracking_open)
        with pytest.raises(FormatVersionMismatch):
            Reader(path)

        assert len(opened) == 1
        assert opened[0].closed

    def test_errors_share_base_class(self) -> None:
        """Test that every error can be caught as GrindReaderError."""
        with pytest.raises(GrindReaderError):
            Reader(io.BytesIO(b"\x07\x00"))


class TestQueryErrors:
    """Tests for failures on a successfully opened reader."""

    def test_function_nr_out_of_range(self, call_graph_file: Path) -> None:
        with Reader(call_graph_file) as reader:
            with pytest.raises(IndexOutOfRange):
                reader.get_function_info(3)
            with pytest.raises(IndexOutOfRange):
                reader.get_function_info(-1)

    def test_index_out_of_range_is_an_index_error(self, call_graph_file: Path) -> None:
        with Reader(call_graph_file) as reader:
            with pytest.raises(IndexError):
                reader.get_function_info(99)

    def test_called_from_nr_out_of_range(self, call_graph_file: Path) -> None:
        """Function 0 has no callers, function 1 has two."""
        with Reader(call_graph_file) as reader:
            with pytest.raises(IndexOutOfRange):
                reader.get_called_from_info(0, 0)
            with pytest.raises(IndexOutOfRange):
                reader.get_called_from_info(1, 2)
            with pytest.raises(IndexOutOfRange):
                reader.get_called_from_info(1, -1)

    def test_sub_call_nr_out_of_range(self, call_graph_file: Path) -> None:
        """Function 1 calls nothing, function 0 calls two functions."""
        with Reader(call_graph_file) as reader:
            with pytest.raises(IndexOutOfRange):
                reader.get_sub_call_info(1, 0)
            with pytest.raises(IndexOutOfRange):
                reader.get_sub_call_info(0, 2)

    def test_call_info_for_unknown_function(self, call_graph_file: Path) -> None:
        with Reader(call_graph_file) as reader:
            with pytest.raises(IndexOutOfRange):
                reader.get_called_from_info(7, 0)
            with pytest.raises(IndexOutOfRange):
                reader.get_sub_call_info(7, 0)

    def test_truncated_function_record(self) -> None:
        """Test that a function offset pointing past the data raises TruncatedRecord."""
        data = struct.pack("<4I", 7, 16, 1, 1000) + b"\n"
        with Reader(io.BytesIO(data)) as reader:
            with pytest.raises(TruncatedRecord):
                reader.get_function_info(0)

    def test_missing_function_name(self) -> None:
        """Test that a record ending before its name raises TruncatedRecord."""
        full = build_datafile([FunctionSpec(name="main", file="a.php")], [])
        # Keep everything up to and including the file path line.
        cut = full.index(b"a.php\n") + len(b"a.php\n")
        # The header offset now points past the end, which reads as no headers.
        data = full[:cut]

        with Reader(io.BytesIO(data)) as reader:
            with pytest.raises(TruncatedRecord) as exc_info:
                reader.get_function_info(0)

        assert "function name" in str(exc_info.value)

    def test_query_after_close(self, call_graph_file: Path) -> None:
        reader = Reader(call_graph_file)
        reader.close()

        assert reader.closed
        with pytest.raises(ReaderClosedError):
            reader.get_function_info(0)
        with pytest.raises(ReaderClosedError):
            reader.get_header("cmd")
        with pytest.raises(ReaderClosedError):
            reader.get_function_count()
        with pytest.raises(ReaderClosedError):
            reader.format_cost(10)

    def test_close_is_idempotent(self, call_graph_file: Path) -> None:
        reader = Reader(call_graph_file)
        reader.close()
        reader.close()
        assert reader.closed

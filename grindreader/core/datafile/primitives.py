"""Fixed-width word and text line primitives over a seekable byte source."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

from grindreader.core.datafile.layout import WORD_FORMAT, WORD_SIZE
from grindreader.core.exceptions import SourceUnavailable, TruncatedRecord


class BinarySource:
    """Cursor-based access to unsigned 32-bit words and newline-terminated lines."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> None:
        """Move the cursor. This never reads."""
        try:
            self._stream.seek(offset, whence)
        except (OSError, ValueError) as e:
            raise SourceUnavailable(f"Cannot seek to {offset}: {e}") from e

    def skip_words(self, count: int) -> None:
        """Advance the cursor past ``count`` words without decoding them."""
        self.seek(WORD_SIZE * count, io.SEEK_CUR)

    def read_words(self, count: int) -> tuple[int, ...]:
        """Read ``count`` little-endian u32 values at the cursor."""
        if count == 0:
            return ()
        size = WORD_SIZE * count
        data = self._read(size)
        if len(data) < size:
            raise TruncatedRecord(f"Expected {size} bytes, got {len(data)}")
        return struct.unpack(f"<{count}{WORD_FORMAT}", data)

    def read_word(self) -> int:
        """Read a single u32 at the cursor."""
        return self.read_words(1)[0]

    def read_line(self) -> bytes | None:
        """Read one line, without its terminator. Returns None at end of stream."""
        try:
            line = self._stream.readline()
        except OSError as e:
            raise SourceUnavailable(f"Cannot read line: {e}") from e
        if not line:
            return None
        return line.rstrip(b"\r\n")

    def _read(self, size: int) -> bytes:
        try:
            return self._stream.read(size)
        except OSError as e:
            raise SourceUnavailable(f"Cannot read {size} bytes: {e}") from e

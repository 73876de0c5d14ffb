"""grindreader custom exceptions."""

from __future__ import annotations


class GrindReaderError(Exception):
    """Base exception for grindreader errors."""


class SourceUnavailable(GrindReaderError):
    """The data file could not be opened or read."""


class FormatVersionMismatch(GrindReaderError):
    """The data file was written in a format version this reader does not understand."""

    def __init__(self, found: int, expected: int) -> None:
        super().__init__(f"Datafile not correct version. Found {found} expected {expected}")
        self.found = found
        self.expected = expected


class TruncatedRecord(GrindReaderError):
    """Fewer bytes were available than a fixed-width read requires."""


class HeaderParseError(GrindReaderError):
    """A header line is not a valid ``key: value`` pair."""


class IndexOutOfRange(GrindReaderError, IndexError):
    """A function, called-from, or sub-call number is outside the recorded bounds."""


class ReaderClosedError(GrindReaderError):
    """The reader was queried after being closed."""

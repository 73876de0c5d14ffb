"""
Core module: data models, exceptions, and the data file reader.

Models (models.py):
    - FunctionRecord: Costs and call counts of one profiled function
    - CallRecord: One caller or callee edge of a function
    - FileHeader: Version, header offset, and function count
    - TimeUnit/CostFormat: Enums for raw cost interpretation

Exceptions (exceptions.py):
    - GrindReaderError: Base exception for all grindreader errors
    - FormatVersionMismatch: Data file written in another format version
    - IndexOutOfRange: Function or call number outside recorded bounds

Reader (reader.py):
    - Reader: Facade over the offset index, header block, and records
    - Layout and decoding live in datafile/
"""

from grindreader.core.exceptions import (
    FormatVersionMismatch,
    GrindReaderError,
    HeaderParseError,
    IndexOutOfRange,
    ReaderClosedError,
    SourceUnavailable,
    TruncatedRecord,
)
from grindreader.core.models import CallRecord, CostFormat, FileHeader, FunctionRecord, TimeUnit
from grindreader.core.reader import Reader, detect_time_unit, open_reader

__all__ = [
    # Models
    "FunctionRecord",
    "CallRecord",
    "FileHeader",
    "TimeUnit",
    "CostFormat",
    # Exceptions
    "GrindReaderError",
    "SourceUnavailable",
    "FormatVersionMismatch",
    "TruncatedRecord",
    "HeaderParseError",
    "IndexOutOfRange",
    "ReaderClosedError",
    # Reader
    "Reader",
    "open_reader",
    "detect_time_unit",
]

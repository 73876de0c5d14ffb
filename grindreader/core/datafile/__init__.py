"""
Data file layer: random access to the preprocessed binary format.

Components:
    - BinarySource: u32 words and text lines at an explicit cursor
    - layout: word sizes, block lengths, and offset formulas
    - HeaderStore: lazily parsed ``key: value`` header block
    - RecordDecoder: function, called-from, and sub-call blocks
"""

from grindreader.core.datafile.headers import HeaderState, HeaderStore
from grindreader.core.datafile.layout import FILE_FORMAT_VERSION
from grindreader.core.datafile.primitives import BinarySource
from grindreader.core.datafile.records import RecordDecoder

__all__ = [
    "FILE_FORMAT_VERSION",
    "BinarySource",
    "HeaderState",
    "HeaderStore",
    "RecordDecoder",
]

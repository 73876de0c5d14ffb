"""Byte layout of the data file and the offset formulas derived from it.

Every integer in the file is an unsigned 32-bit little-endian word::

    [version][header offset][function count]
    [function offset 0] ... [function offset N-1]

    @function offset:
        [line][self cost][inclusive cost][invocations][called from count][sub call count]
        called from count x [function nr][line][call count][cost]
        sub call count    x [function nr][line][call count][cost]
        <file path>\\n
        <function name>\\n
"""

from __future__ import annotations

FILE_FORMAT_VERSION = 7

WORD_FORMAT = "I"
WORD_SIZE = 4

FILE_HEADER_WORDS = 3
FUNCTION_INFO_WORDS = 6
CALL_INFO_WORDS = 4

# Position of the called-from count inside the function information block.
CALLED_FROM_COUNT_WORD = 4


def index_offset() -> int:
    """Offset of the function offset table."""
    return WORD_SIZE * FILE_HEADER_WORDS


def call_blocks_span(called_from_count: int, sub_call_count: int) -> int:
    """Words occupied by all call information blocks of a function."""
    return CALL_INFO_WORDS * (called_from_count + sub_call_count)


def called_from_counter_offset(function_offset: int) -> int:
    """Offset of the stored called-from count of a function."""
    return function_offset + WORD_SIZE * CALLED_FROM_COUNT_WORD


def called_from_offset(function_offset: int, called_from_nr: int) -> int:
    """Offset of the ``called_from_nr``-th called-from block of a function."""
    return function_offset + WORD_SIZE * (
        CALL_INFO_WORDS * called_from_nr + FUNCTION_INFO_WORDS
    )


def sub_call_offset(function_offset: int, called_from_count: int, sub_call_nr: int) -> int:
    """Offset of the ``sub_call_nr``-th sub-call block of a function.

    Sub-call blocks follow all called-from blocks of the same function, so
    they are addressed as ``(called_from_count + sub_call_nr) * 4 + 1`` words
    past the word following the stored called-from count.
    """
    after_counter = called_from_counter_offset(function_offset) + WORD_SIZE
    return after_counter + WORD_SIZE * (
        CALL_INFO_WORDS * (called_from_count + sub_call_nr) + 1
    )

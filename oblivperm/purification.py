"""Plain evaluation of the purification circuit over tagged rows.

The circuit compacts the rows tagged real to the front and fills the
remaining positions with copies of real rows. It then compacts a second
time and finally copies the first half over the untagged second half. Every
row is a vector of 32-bit words, so values are reduced modulo 2**32.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from .compaction import compact, half_copy

_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF
_BOUND = 1 << 32


def _depth(size: int) -> int:
    """Number of levels, ceil(log2(size))."""
    return (size - 1).bit_length()


def _prepare(rows: Iterable[Sequence[int]], tags: Iterable[Any]) -> tuple[list[tuple[int, ...]], list[bool]]:
    table = [tuple(int(word) & _MASK32 for word in row) for row in rows]
    flags = [bool(tag) for tag in tags]
    if not table:
        raise ValueError("no rows given")
    if len(table) != len(flags):
        raise ValueError(f"{len(table)} rows but {len(flags)} tags")
    width = len(table[0])
    if any(len(row) != width for row in table):
        raise ValueError("all rows must have the same number of words")
    return table, flags


def _duplicate(
    rows: list[tuple[int, ...]], flags: list[bool], real_count: int
) -> tuple[list[tuple[int, ...]], list[bool]]:
    """The duplication layer: jumps run from 2**depth down to 2."""
    size = len(rows)
    for level in range(_depth(size), 0, -1):
        jump = 1 << level
        if jump >= size:
            continue
        ignore = real_count > jump
        new_rows = rows[:jump] + [
            current if (flag or ignore) else earlier
            for earlier, current, flag in zip(rows, rows[jump:], flags[jump:])
        ]
        new_flags = flags[:jump] + [
            current if (current or ignore) else earlier
            for earlier, current in zip(flags, flags[jump:])
        ]
        rows, flags = new_rows, new_flags
    return rows, flags


def _purify(rows: Iterable[Sequence[int]], tags: Iterable[Any]) -> tuple[list[list[int]], int]:
    table, flags = _prepare(rows, tags)
    table, flags, real_count = compact(table, flags)
    table, flags = _duplicate(table, flags, real_count)
    table, flags, _ = compact(table, flags)
    table, _ = half_copy(table, flags)
    return [list(row) for row in table], real_count


def purification_circuit(rows: Iterable[Sequence[int]], tags: Iterable[Any]) -> tuple[list[list[int]], int]:
    """Purify ``rows`` word by word.

    Returns the purified rows and the number of rows originally tagged real.
    """
    return _purify(rows, tags)


def purification_circuit_multi(
    rows: Iterable[Sequence[int]], tags: Iterable[Any]
) -> tuple[list[list[int]], int]:
    """Purify ``rows``, moving each row as one vector.

    Gives the same result as :func:`purification_circuit`.
    """
    return _purify(rows, tags)


def reduce_last_column(rows: Iterable[Sequence[int]]) -> list[list[int]]:
    """Bring the last word of each 64-bit row back below 2**32.

    A last word greater than 2**32 has 2**32 subtracted once; the other
    words are only reduced modulo 2**64.
    """
    table = [[int(word) & _MASK64 for word in row] for row in rows]
    if not table:
        raise ValueError("no rows given")
    for row in table:
        if not row:
            raise ValueError("rows must not be empty")
        if row[-1] > _BOUND:
            row[-1] -= _BOUND
    return table
"""Plain compaction, duplication and half-copy networks over tagged values."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import accumulate
from typing import Any


def _depth(size: int) -> int:
    """Number of levels, ceil(log2(size))."""
    return (size - 1).bit_length()


def _prepare(values: Iterable[Any], tags: Iterable[Any]) -> tuple[list[Any], list[bool]]:
    vals = list(values)
    flags = [bool(tag) for tag in tags]
    if len(vals) != len(flags):
        raise ValueError(f"{len(vals)} values but {len(flags)} tags")
    if not vals:
        raise ValueError("no values given")
    return vals, flags


def compact(values: Iterable[Any], tags: Iterable[Any]) -> tuple[list[Any], list[bool], int]:
    """Move the values tagged real to the front, keeping their order.

    Returns the new values, the new tags (true for the first ``real_count``
    positions) and ``real_count``.
    """
    vals, flags = _prepare(values, tags)
    size = len(vals)
    dummies_before = list(accumulate(int(not flag) for flag in flags))
    real_count = size - dummies_before[-1]
    layer = [(steps if flag else 0, value) for steps, flag, value in zip(dummies_before, flags, vals)]
    for level in range(_depth(size)):
        jump = 1 << level
        moved = [
            ahead if (ahead[0] >> level) & 1 else current
            for current, ahead in zip(layer, layer[jump:])
        ]
        layer = moved + layer[size - jump:]
    return [value for _, value in layer], [i < real_count for i in range(size)], real_count


def duplicate(values: Iterable[Any], tags: Iterable[Any], real_count: int) -> tuple[list[Any], list[bool]]:
    """Fill untagged positions with copies taken from earlier positions."""
    if real_count < 0:
        raise ValueError("real_count must not be negative")
    vals, flags = _prepare(values, tags)
    for level in reversed(range(_depth(len(vals)))):
        jump = 1 << level
        keep_all = jump < real_count
        new_vals = vals[:jump] + [
            current if (flag or keep_all) else earlier
            for earlier, current, flag in zip(vals, vals[jump:], flags[jump:])
        ]
        new_flags = flags[:jump] + [
            current if (current or keep_all) else earlier
            for earlier, current in zip(flags, flags[jump:])
        ]
        vals, flags = new_vals, new_flags
    return vals, flags


def half_copy(values: Iterable[Any], tags: Iterable[Any]) -> tuple[list[Any], list[bool]]:
    """Replace each untagged value in the second half by its first-half counterpart."""
    vals, flags = _prepare(values, tags)
    half = (len(vals) + 1) // 2
    copied = vals[:half] + [
        current if flag else earlier
        for earlier, current, flag in zip(vals, vals[half:], flags[half:])
    ]
    return copied, [True] * len(copied)


def purify(values: Sequence[Any], tags: Sequence[Any]) -> tuple[list[Any], list[bool], int]:
    """Run compaction, duplication, a second compaction and a half copy in turn.

    Returns the final values, their tags and the real count of the second compaction.
    """
    vals, flags, real_count = compact(values, tags)
    vals, flags = duplicate(vals, flags, real_count)
    vals, flags, real_count = compact(vals, flags)
    vals, flags = half_copy(vals, flags)
    return vals, flags, real_count
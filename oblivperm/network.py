"""Plain evaluation of the permutation network and set-intersection circuits.

These functions compute in the clear what the two-party circuits compute on
shares: a Waksman network that permutes rows of 32-bit words, and the
sort-compare-shuffle intersection circuit. That circuit merges two sets with
a bitonic network, keeps the elements that meet a duplicate neighbour, and
shuffles the result.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from .waksman import WaksmanNetwork, estimate_gates

_BITLEN = 32
_MASK = (1 << _BITLEN) - 1

T = TypeVar("T")


def cond_swap(a: T, b: T, select: Any) -> tuple[T, T]:
    """Return ``(b, a)`` when ``select`` is true, otherwise ``(a, b)``."""
    return (b, a) if select else (a, b)


def _switch_bits(switch_bits: Sequence[Any], size: int) -> list[bool]:
    """Normalise switch bits; an empty sequence means every switch is straight."""
    bits = [bool(bit) for bit in switch_bits]
    gates = estimate_gates(size)
    if not bits:
        return [False] * gates
    if len(bits) != gates:
        raise ValueError(f"expected {gates} switch bits for {size} inputs, got {len(bits)}")
    return bits


def _word(value: Any) -> int:
    number = int(value)
    if not 0 <= number <= _MASK:
        raise ValueError(f"value {value!r} does not fit in {_BITLEN} bits")
    return number


def permutation_network(
    switch_bits: Sequence[Any], weights: Sequence[Sequence[int]]
) -> list[list[int]]:
    """Route each row of ``weights`` through a Waksman network.

    Every row is a vector of 32-bit words that travels as one unit. Values are
    reduced modulo 2**32. An empty ``switch_bits`` leaves every switch straight.
    """
    rows = [[int(word) & _MASK for word in row] for row in weights]
    if not rows:
        raise ValueError("no rows to permute")
    width = len(rows[0])
    if any(len(row) != width for row in rows):
        raise ValueError("all rows must have the same number of words")
    network = WaksmanNetwork(len(rows))
    bits = _switch_bits(switch_bits, len(rows))
    return [list(row) for row in network.evaluate(rows, bits)]


def bitonic_sort(server_set: Sequence[int], client_set: Sequence[int]) -> list[int]:
    """Concatenate both sets and pass them through a bitonic merging network.

    The network sorts in ascending order when the concatenation is bitonic
    (for example the server set ascending and the client set descending) and
    the combined length is a power of two.
    """
    server = [_word(value) for value in server_set]
    client = [_word(value) for value in client_set]
    if not server:
        raise ValueError("the sets must not be empty")
    if len(server) != len(client):
        raise ValueError(f"set sizes differ: {len(server)} and {len(client)}")
    seq = server + client
    size = len(seq)
    step = 1 << ((size - 1).bit_length() - 1)
    while step:
        pairs: list[tuple[int, int]] = []
        for top in range(size - 1, -1, -2 * step):
            for k in range(step):
                low = top - step - k
                if low < 0:
                    break
                pairs.append((low, top - k))
        for low, high in pairs:
            seq[low], seq[high] = cond_swap(seq[low], seq[high], seq[low] > seq[high])
        step >>= 1
    return seq


def dup_select3(x1: int, x2: int, x3: int) -> int:
    """Return ``x2`` if it equals one of its neighbours, otherwise 0."""
    return x2 if (x1 == x2 or x2 == x3) else 0


def dup_select2(x1: int, x2: int) -> int:
    """Return ``x2`` if it equals ``x1``, otherwise 0."""
    return x2 if x1 == x2 else 0


def psi_circuit(
    server_set: Sequence[int], client_set: Sequence[int], switch_bits: Sequence[Any]
) -> list[int]:
    """Compute the shuffled intersection of two equally sized sets.

    The result has one slot per server element; slots hold intersection
    elements or 0, permuted by the Waksman network set by ``switch_bits``.
    """
    merged = bitonic_sort(server_set, client_set)
    count = len(merged) // 2
    selected = [
        dup_select3(merged[2 * j], merged[2 * j + 1], merged[2 * j + 2])
        for j in range(count - 1)
    ]
    selected.append(dup_select2(merged[-2], merged[-1]))
    network = WaksmanNetwork(count)
    return network.evaluate(selected, _switch_bits(switch_bits, count))
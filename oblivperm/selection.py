"""Selection bits for Waksman networks and their evaluation with additive blinders.

Gate bits are laid out recursively: the left column of a network first, then
the whole upper sub-network, then the whole lower sub-network, then the
right column. A set bit swaps the two wires of its gate. The bits produced
for ``permutation`` make output ``i`` carry input ``permutation[i]``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from .waksman import estimate_gates

_MASK = 0xFFFFFFFF


class _WordSource(Protocol):
    def next_uint32(self) -> int: ...


@dataclass(frozen=True)
class Label:
    """Random masks on the two input and two output wires of one gate."""

    input1: int
    input2: int
    output1: int
    output2: int


@dataclass(frozen=True)
class GateBlinder:
    """Additive offsets applied to the upper and lower outputs of one gate."""

    upper: int
    lower: int


def compute_gate_num(size: int) -> int:
    """Return the number of gates, the sum of ceil(log2(i)) for i = 1..size."""
    if size < 0:
        raise ValueError("size must not be negative")
    if size <= 1:
        return 0
    power = size.bit_length()
    return power * size + 1 - (1 << power)


def _check_permutation(permutation: Sequence[int]) -> list[int]:
    perm = [int(p) for p in permutation]
    if sorted(perm) != list(range(len(perm))):
        raise ValueError(f"not a permutation of range({len(perm)}): {perm!r}")
    return perm


def _fill_bits(perm: list[int], bits: list[bool], offset: int) -> None:
    size = len(perm)
    if size == 2:
        bits[offset] = bool(perm[0])
    if size <= 2:
        return

    inverse = [0] * size
    for position, source in enumerate(perm):
        inverse[source] = position
    odd = size & 1

    # 0: unassigned, 1: upper sub-network, 2: lower sub-network
    left = [0] * size
    right = [0] * size

    def walk(start: int, stop_at_last: bool) -> None:
        r = start
        while right[r] == 0:
            right[r] = 2
            l = perm[r]
            left[l] = 2
            if stop_at_last and l == size - 1:
                break
            l ^= 1
            left[l] = 1
            r = inverse[l]
            right[r] = 1
            r ^= 1

    walk(size - 1, bool(odd))
    for start in range(size - 1):
        walk(start, False)

    half = size // 2
    for i in range(half):
        bits[offset + i] = left[2 * i] == 2

    upper_index = offset + half
    upper_gates = compute_gate_num(half)
    lower_index = upper_index + upper_gates
    right_index = lower_index + (compute_gate_num(half + 1) if odd else upper_gates)
    for i in range(half - 1):
        bits[right_index + i] = right[2 * i] == 2
    if odd:
        bits[right_index + half - 1] = right[size - 2] == 1

    paired = half - 1 + odd
    upper = [perm[2 * i + int(bits[right_index + i])] // 2 for i in range(paired)]
    if not odd:
        upper.append(perm[size - 2] // 2)
    _fill_bits(upper, bits, upper_index)

    lower = [perm[2 * i + 1 - int(bits[right_index + i])] // 2 for i in range(paired)]
    if odd:
        lower.append(perm[size - 1] // 2)
    else:
        lower.append(perm[2 * half - 1] // 2)
    _fill_bits(lower, bits, lower_index)


def gen_selection_bits(permutation: Sequence[int]) -> list[bool]:
    """Return gate bits that send input ``permutation[i]`` to output ``i``."""
    perm = _check_permutation(permutation)
    bits = [False] * compute_gate_num(len(perm))
    _fill_bits(perm, bits, 0)
    return bits


def permutation_to_bits(permutation: Sequence[int]) -> list[int]:
    """Return the selection bits for ``permutation`` as 0/1 words, one per swap gate."""
    perm = _check_permutation(permutation)
    if not perm:
        raise ValueError("the permutation must not be empty")
    bits = gen_selection_bits(perm)
    if len(bits) != estimate_gates(len(perm)):
        raise ValueError("gate count mismatch")
    return [int(bit) for bit in bits]


def _gate(values: list[Any], i: int, bit: bool, blinder: GateBlinder | None) -> None:
    a, b = values[i], values[i + 1]
    if bit:
        a, b = b, a
    if blinder is not None:
        a = (a + blinder.upper) & _MASK
        b = (b + blinder.lower) & _MASK
    values[i], values[i + 1] = a, b


def _evaluate(
    values: list[Any],
    bits: list[bool],
    blinders: list[GateBlinder] | None,
    offset: int,
) -> list[Any]:
    size = len(values)

    def blinder_at(index: int) -> GateBlinder | None:
        return None if blinders is None else blinders[index]

    if size == 2:
        _gate(values, 0, bits[offset], blinder_at(offset))
    if size <= 2:
        return values

    odd = size & 1
    half = size // 2
    for i in range(half):
        _gate(values, 2 * i, bits[offset + i], blinder_at(offset + i))
    pos = offset + half

    upper = _evaluate(values[0 : 2 * half : 2], bits, blinders, pos)
    pos += compute_gate_num(half)
    lower_in = values[1 : 2 * half : 2]
    if odd:
        lower_in.append(values[-1])
    lower = _evaluate(lower_in, bits, blinders, pos)
    pos += compute_gate_num(len(lower))

    for i in range(half):
        values[2 * i] = upper[i]
        values[2 * i + 1] = lower[i]
    if odd:
        values[-1] = lower[-1]

    for i in range(half - 1 + odd):
        _gate(values, 2 * i, bits[pos + i], blinder_at(pos + i))
    return values


def evaluate_network(
    values: Sequence[Any],
    bits: Sequence[Any],
    blinders: Sequence[GateBlinder] | None = None,
) -> list[Any]:
    """Pass ``values`` through the network set by ``bits``.

    With ``blinders`` each gate adds its offsets to its two outputs modulo
    2**32; without them the gates only swap and values may be of any type.
    """
    vals = list(values)
    flags = [bool(bit) for bit in bits]
    expected = compute_gate_num(len(vals))
    if len(flags) != expected:
        raise ValueError(f"expected {expected} selection bits, got {len(flags)}")
    blinds: list[GateBlinder] | None = None
    if blinders is not None:
        blinds = list(blinders)
        if len(blinds) != expected:
            raise ValueError(f"expected {expected} blinders, got {len(blinds)}")
        vals = [int(v) & _MASK for v in vals]
    return _evaluate(vals, flags, blinds, 0)


def _fresh_label(first: int, second: int, rng: _WordSource) -> Label:
    out1 = rng.next_uint32() & _MASK
    out2 = rng.next_uint32() & _MASK
    return Label(first, second, out1, out2)


def _write(wires: list[int], gates: list[Label | None], offset: int, rng: _WordSource) -> list[int]:
    size = len(wires)
    if size == 2:
        label = _fresh_label(wires[0], wires[1], rng)
        gates[offset] = label
        wires[0], wires[1] = label.output1, label.output2
    if size <= 2:
        return wires

    odd = size & 1
    half = size // 2
    for i in range(half):
        label = _fresh_label(wires[2 * i], wires[2 * i + 1], rng)
        gates[offset + i] = label
        wires[2 * i], wires[2 * i + 1] = label.output1, label.output2
    pos = offset + half

    upper = _write(wires[0 : 2 * half : 2], gates, pos, rng)
    pos += compute_gate_num(half)
    lower_in = wires[1 : 2 * half : 2]
    if odd:
        lower_in.append(wires[-1])
    lower = _write(lower_in, gates, pos, rng)
    pos += compute_gate_num(len(lower))

    for i in range(half):
        wires[2 * i] = upper[i]
        wires[2 * i + 1] = lower[i]
    if odd:
        wires[-1] = lower[-1]

    for i in range(half - 1 + odd):
        label = _fresh_label(wires[2 * i], wires[2 * i + 1], rng)
        gates[pos + i] = label
        wires[2 * i], wires[2 * i + 1] = label.output1, label.output2
    return wires


def write_gate_labels(labels: Sequence[int], rng: _WordSource) -> tuple[list[Label], list[int]]:
    """Draw fresh random output labels for every gate of the network.

    ``labels`` are the labels on the network's input wires. Returns the gate
    labels in gate order and the labels left on the output wires.
    """
    wires = [int(label) & _MASK for label in labels]
    gates: list[Label | None] = [None] * compute_gate_num(len(wires))
    outputs = _write(wires, gates, 0, rng)
    return [gate for gate in gates if gate is not None], outputs
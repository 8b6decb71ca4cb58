"""Waksman permutation networks: gate counting, programming and evaluation."""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Sequence
from functools import lru_cache
from typing import Any


@lru_cache(maxsize=None)
def estimate_gates(num_inputs: int) -> int:
    """Return the number of switch gates in a Waksman network on ``num_inputs`` wires."""
    if num_inputs < 1:
        raise ValueError("a network needs at least one input")
    if num_inputs == 1:
        return 0
    half = num_inputs // 2
    last_row = half - 1 if num_inputs % 2 == 0 else half
    return half + last_row + estimate_gates(half) + estimate_gates(num_inputs - half)


def _cond_swap(a: Any, b: Any, select: bool) -> tuple[Any, Any]:
    return (b, a) if select else (a, b)


class _Block:
    """One recursive level: a row of input switches, two sub-networks, a row of output switches."""

    def __init__(self, size: int, counter: Iterator[int]) -> None:
        self.size = size
        self.first: list[int] = []
        self.last: list[int] = []
        self.upper: _Block | None = None
        self.lower: _Block | None = None
        if size == 1:
            return
        half = size // 2
        self.first = [next(counter) for _ in range(half)]
        self.upper = _Block(half, counter)
        self.lower = _Block(size - half, counter)
        last_row = half - 1 if size % 2 == 0 else half
        self.last = [next(counter) for _ in range(last_row)]

    def program(self, rows: list[int | None], switches: list[bool]) -> None:
        n = self.size
        if n == 1:
            return
        cols: list[int | None] = [0] * n
        for position, target in enumerate(rows):
            cols[target] = position
        upper_perm = [0] * (n // 2)
        lower_perm = [0] * (n - n // 2)
        todo = dict.fromkeys(range(n // 2))

        def route(start: int, start_block: int) -> None:
            stack = [("call", start, start_block)]
            while stack:
                kind, inp, block = stack.pop()
                partner = inp ^ 1
                if kind == "check":
                    if partner < n and rows[partner] is not None:
                        stack.append(("call", partner, block ^ 1))
                    continue
                out = rows[inp]
                if partner < n and rows[partner] is not None:
                    switches[self.first[inp // 2]] = (block == 0) != (inp % 2 == 0)
                    todo.pop(inp // 2, None)
                if block == 1:
                    lower_perm[inp // 2] = out // 2
                    if out // 2 < len(self.last):
                        switches[self.last[out // 2]] = out % 2 == 0
                else:
                    upper_perm[inp // 2] = out // 2
                    if out // 2 < len(self.last):
                        switches[self.last[out // 2]] = out % 2 == 1
                rows[inp] = None
                cols[out] = None
                stack.append(("check", inp, block))
                new_out = out ^ 1
                if new_out < n and cols[new_out] is not None:
                    new_in = cols[new_out]
                    cols[new_out] = None
                    stack.append(("call", new_in, block ^ 1))

        if n % 2 == 1:
            route(n - 1, 1)
            if cols[n - 1] is not None:
                route(cols[n - 1], 1)
        else:
            if cols[n - 1] is not None:
                route(cols[n - 1], 1)
            if cols[n - 2] is not None:
                route(cols[n - 2], 0)
        while todo:
            gate = next(iter(todo))
            route(2 * gate, 0)

        self.upper.program(list(upper_perm), switches)
        self.lower.program(list(lower_perm), switches)

    def evaluate(self, inputs: list[Any], bits: Sequence[bool]) -> list[Any]:
        n = self.size
        if n == 1:
            return [inputs[0]]
        upper_in: list[Any] = []
        lower_in: list[Any] = []
        for gate, a, b in zip(self.first, inputs[0::2], inputs[1::2]):
            top, bottom = _cond_swap(a, b, bits[gate])
            upper_in.append(top)
            lower_in.append(bottom)
        if n % 2 == 1:
            lower_in.append(inputs[-1])
        upper_out = self.upper.evaluate(upper_in, bits)
        lower_out = self.lower.evaluate(lower_in, bits)
        outputs: list[Any] = []
        for gate, a, b in zip(self.last, upper_out, lower_out):
            outputs.extend(_cond_swap(a, b, bits[gate]))
        if n % 2 == 0:
            outputs.append(upper_out[-1])
        outputs.append(lower_out[-1])
        return outputs


class WaksmanNetwork:
    """A Waksman network on ``size`` wires.

    A switch bit of ``True`` swaps the two wires of its gate. After programming
    with ``permutation``, input ``i`` is routed to output ``permutation[i]``.
    """

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("a network needs at least one input")
        self.size = size
        self.gate_count = estimate_gates(size)
        self._root = _Block(size, itertools.count())

    def program(self, permutation: Sequence[int]) -> list[bool]:
        """Return the switch bits that realise ``permutation``."""
        rows = list(permutation)
        if sorted(rows) != list(range(self.size)):
            raise ValueError(f"not a permutation of range({self.size}): {rows!r}")
        switches = [False] * self.gate_count
        self._root.program(rows, switches)
        return switches

    def evaluate(self, inputs: Sequence[Any], switch_bits: Sequence[bool]) -> list[Any]:
        """Pass ``inputs`` through the network with the given switch settings."""
        values = list(inputs)
        bits = list(switch_bits)
        if len(values) != self.size:
            raise ValueError(f"expected {self.size} inputs, got {len(values)}")
        if len(bits) != self.gate_count:
            raise ValueError(f"expected {self.gate_count} switch bits, got {len(bits)}")
        return self._root.evaluate(values, bits)
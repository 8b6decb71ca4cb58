# oblivperm

Building blocks for oblivious permutation protocols, written in plain Python.
The package covers Waksman permutation networks: it counts their gates,
programs them for a permutation, and evaluates them, with or without additive
blinders. It also evaluates, in the clear, the circuits that such protocols
run on shares. These are a permutation network over rows of 32-bit words, a
sort-compare-shuffle set intersection, and compaction, duplication and
purification of tagged rows.

## Modules

- `oblivperm.prng`: `PRNG` is a 32-bit Mersenne Twister generator. It can be
  seeded from an integer or from a sequence of integers, and from the current
  time when no seed is given. It draws with `next_uint64`, `next_uint32`,
  `next_uint16` and `next_bit`.
- `oblivperm.waksman`: `estimate_gates(n)` returns the number of switch gates
  in a Waksman network on `n` wires. `WaksmanNetwork(size)` has two methods.
  `program(permutation)` returns the switch bits that route input `i` to
  output `permutation[i]`. `evaluate(inputs, switch_bits)` passes the values
  through the network.
- `oblivperm.selection`: this module uses a recursive gate layout.
  `gen_selection_bits(permutation)` returns bits that make output `i` carry
  input `permutation[i]`. `permutation_to_bits` returns the same bits as 0/1
  words. `evaluate_network(values, bits, blinders=None)` applies the gates,
  and each `GateBlinder` adds its offsets modulo 2**32. `write_gate_labels`
  draws a random `Label` for every gate. `compute_gate_num(size)` gives the
  gate count.
- `oblivperm.network`: clear-text forms of the circuit gates. They are
  `cond_swap`, `permutation_network(switch_bits, weights)`,
  `bitonic_sort(server_set, client_set)`, `dup_select2`, `dup_select3` and
  `psi_circuit(server_set, client_set, switch_bits)`. An empty `switch_bits`
  leaves every switch straight.
- `oblivperm.compaction`: `compact` moves the values tagged real to the front
  and keeps their order. `duplicate` fills untagged positions with earlier
  values. `half_copy` copies first-half values over untagged second-half
  values. `purify` runs all of these in turn.
- `oblivperm.purification`: `purification_circuit` and
  `purification_circuit_multi` purify rows of 32-bit words. Both return the
  rows and the original real count. `reduce_last_column` brings the last word
  of each 64-bit row back below 2**32.

## Install

```
pip install .
```

## Example

```python
from oblivperm.prng import PRNG
from oblivperm.waksman import WaksmanNetwork, estimate_gates
from oblivperm.selection import gen_selection_bits, evaluate_network
from oblivperm.compaction import compact

print(estimate_gates(4))  # 5

net = WaksmanNetwork(4)
bits = net.program([2, 0, 3, 1])
print(net.evaluate(["a", "b", "c", "d"], bits))

print(evaluate_network(["a", "b", "c"], gen_selection_bits([2, 0, 1])))
# ['c', 'a', 'b']

values, tags, real = compact([5, 6, 7, 8], [False, True, False, True])
print(values[:real], real)  # [6, 8] 2

rng = PRNG(14131)
print(rng.next_uint32(), rng.next_bit())
```

## What this package does not do

Everything runs locally in one process and on clear values. The package
contains no network transport, no oblivious transfer and no secret-shared
execution between two parties. It also has no command-line program. The
circuit functions compute what the two-party circuits would output. They do
not hide any input from anyone.

## Tests

```
pip install ".[test]"
pytest
```
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from oblivperm.prng import PRNG
from oblivperm.selection import (
    GateBlinder,
    Label,
    compute_gate_num,
    evaluate_network,
    gen_selection_bits,
    permutation_to_bits,
    write_gate_labels,
)
from oblivperm.waksman import WaksmanNetwork, estimate_gates

MASK = 0xFFFFFFFF

permutations = st.integers(min_value=1, max_value=40).flatmap(
    lambda n: st.permutations(list(range(n)))
)


def _blinders_for(gates, bits):
    result = []
    for label, bit in zip(gates, bits):
        if bit:
            result.append(
                GateBlinder((label.input2 - label.output1) & MASK, (label.input1 - label.output2) & MASK)
            )
        else:
            result.append(
                GateBlinder((label.input1 - label.output1) & MASK, (label.input2 - label.output2) & MASK)
            )
    return result


def test_gate_num_table_values():
    assert compute_gate_num(0) == 0
    assert compute_gate_num(1) == 0
    assert compute_gate_num(2) == 1
    assert compute_gate_num(5) == 8
    assert compute_gate_num(26) == 99


def test_gate_num_matches_waksman_count():
    for n in range(1, 200):
        assert compute_gate_num(n) == estimate_gates(n)


def test_gate_num_negative_raises():
    with pytest.raises(ValueError):
        compute_gate_num(-1)


def test_two_element_bits_follow_first_index():
    assert gen_selection_bits([1, 0]) == [True]
    assert gen_selection_bits([0, 1]) == [False]


@settings(max_examples=200)
@given(permutations)
def test_bits_realise_permutation(perm):
    values = [f"v{i}" for i in range(len(perm))]
    bits = gen_selection_bits(perm)
    assert len(bits) == compute_gate_num(len(perm))
    assert evaluate_network(values, bits) == [values[p] for p in perm]


@settings(max_examples=100)
@given(permutations)
def test_bits_agree_with_waksman_network(perm):
    values = list(range(100, 100 + len(perm)))
    bits = gen_selection_bits(perm)
    assert WaksmanNetwork(len(perm)).evaluate(values, bits) == [values[p] for p in perm]


@settings(max_examples=100)
@given(permutations)
def test_permutation_to_bits_matches(perm):
    assert permutation_to_bits(perm) == [int(b) for b in gen_selection_bits(perm)]


def test_not_a_permutation_raises():
    with pytest.raises(ValueError):
        gen_selection_bits([0, 0, 1])
    with pytest.raises(ValueError):
        permutation_to_bits([1, 2])


def test_permutation_to_bits_empty_raises():
    with pytest.raises(ValueError):
        permutation_to_bits([])


def test_evaluate_wrong_bit_count_raises():
    with pytest.raises(ValueError):
        evaluate_network([1, 2, 3], [True])


def test_evaluate_wrong_blinder_count_raises():
    with pytest.raises(ValueError):
        evaluate_network([1, 2], [False], [])


def test_single_gate_blinders_added():
    assert evaluate_network([10, 20], [False], [GateBlinder(1, 2)]) == [11, 22]
    assert evaluate_network([10, 20], [True], [GateBlinder(1, 2)]) == [21, 12]


def test_blinders_wrap_modulo_32_bits():
    result = evaluate_network([MASK, 0], [False], [GateBlinder(1, MASK)])
    assert result == [0, MASK]


@settings(max_examples=100)
@given(permutations, st.integers(min_value=0, max_value=MASK))
def test_labels_and_blinders_give_additive_shares(perm, seed):
    n = len(perm)
    values = [(i * 7919 + 3) & MASK for i in range(n)]
    gates, owner_share = write_gate_labels(values, PRNG(seed))
    bits = gen_selection_bits(perm)
    assert len(gates) == len(bits)
    permutor_share = evaluate_network([0] * n, bits, _blinders_for(gates, bits))
    combined = [(a + b) & MASK for a, b in zip(owner_share, permutor_share)]
    assert combined == [values[p] for p in perm]


def test_write_gate_labels_is_deterministic_for_a_seed():
    first = write_gate_labels([1, 2, 3, 4, 5], PRNG(42))
    second = write_gate_labels([1, 2, 3, 4, 5], PRNG(42))
    assert first == second
    assert len(first[0]) == compute_gate_num(5)
    assert all(isinstance(label, Label) for label in first[0])


def test_write_gate_labels_first_gate_inputs():
    gates, outputs = write_gate_labels([5, 6, 7, 8], PRNG(1))
    assert (gates[0].input1, gates[0].input2) == (5, 6)
    assert (gates[1].input1, gates[1].input2) == (7, 8)
    assert len(outputs) == 4


def test_write_gate_labels_single_wire_untouched():
    gates, outputs = write_gate_labels([9], PRNG(3))
    assert gates == []
    assert outputs == [9]
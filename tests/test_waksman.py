import pytest
from hypothesis import given
from hypothesis import strategies as st

from oblivperm.waksman import WaksmanNetwork, estimate_gates

# Gate counts for sizes 0..26 as tabulated in the selection-bit generator.
GATE_TABLE = [0, 0, 1, 3, 5, 8, 11, 14, 17, 21, 25, 29, 33, 37,
              41, 45, 49, 54, 59, 64, 69, 74, 79, 84, 89, 94, 99]

permutations = st.integers(min_value=1, max_value=40).flatmap(
    lambda n: st.permutations(list(range(n)))
)


@pytest.mark.parametrize("size", range(1, len(GATE_TABLE)))
def test_estimate_gates_matches_table(size):
    assert estimate_gates(size) == GATE_TABLE[size]


def test_estimate_gates_rejects_zero():
    with pytest.raises(ValueError):
        estimate_gates(0)


def test_network_rejects_zero_size():
    with pytest.raises(ValueError):
        WaksmanNetwork(0)


@given(permutations)
def test_programmed_network_routes_input_to_target(perm):
    net = WaksmanNetwork(len(perm))
    bits = net.program(perm)
    assert len(bits) == estimate_gates(len(perm))
    out = net.evaluate(list(range(len(perm))), bits)
    assert [out[target] for target in perm] == list(range(len(perm)))


@given(st.integers(min_value=1, max_value=30))
def test_all_zero_bits_is_identity(size):
    net = WaksmanNetwork(size)
    values = [f"v{i}" for i in range(size)]
    assert net.evaluate(values, [False] * net.gate_count) == values


@given(st.integers(min_value=1, max_value=30), st.data())
def test_any_switch_setting_is_a_permutation(size, data):
    net = WaksmanNetwork(size)
    bits = data.draw(st.lists(st.booleans(), min_size=net.gate_count, max_size=net.gate_count))
    assert sorted(net.evaluate(list(range(size)), bits)) == list(range(size))


def test_two_wire_swap():
    net = WaksmanNetwork(2)
    bits = net.program([1, 0])
    assert bits == [True]
    assert net.evaluate(["a", "b"], bits) == ["b", "a"]


def test_program_rejects_non_permutation():
    with pytest.raises(ValueError):
        WaksmanNetwork(3).program([0, 0, 1])


def test_evaluate_rejects_wrong_lengths():
    net = WaksmanNetwork(4)
    with pytest.raises(ValueError):
        net.evaluate([1, 2, 3], [False] * net.gate_count)
    with pytest.raises(ValueError):
        net.evaluate([1, 2, 3, 4], [False])
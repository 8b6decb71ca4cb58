import pytest
from hypothesis import given, strategies as st

from oblivperm.purification import (
    purification_circuit,
    purification_circuit_multi,
    reduce_last_column,
)


@st.composite
def tagged_rows(draw):
    size = draw(st.integers(min_value=1, max_value=20))
    width = draw(st.integers(min_value=1, max_value=3))
    rows = draw(
        st.lists(
            st.lists(st.integers(0, 2**32 - 1), min_size=width, max_size=width),
            min_size=size,
            max_size=size,
        )
    )
    tags = draw(st.lists(st.booleans(), min_size=size, max_size=size))
    return rows, tags


@given(tagged_rows())
def test_shape_and_rows_come_from_input(data):
    rows, tags = data
    out, _ = purification_circuit(rows, tags)
    assert len(out) == len(rows)
    assert all(row in rows for row in out)


@given(tagged_rows())
def test_real_count_is_number_of_real_tags(data):
    rows, tags = data
    _, real = purification_circuit(rows, tags)
    assert real == sum(tags)


@given(tagged_rows())
def test_first_real_row_leads(data):
    rows, tags = data
    out, _ = purification_circuit(rows, tags)
    if any(tags):
        first = next(row for row, tag in zip(rows, tags) if tag)
        assert out[0] == first
    else:
        assert out[0] == rows[0]


@given(tagged_rows())
def test_all_real_is_identity(data):
    rows, _ = data
    out, real = purification_circuit(rows, [True] * len(rows))
    assert out == rows
    assert real == len(rows)


@given(tagged_rows())
def test_multi_matches_single(data):
    rows, tags = data
    assert purification_circuit_multi(rows, tags) == purification_circuit(rows, tags)


def test_single_real_row_fills_everything():
    rows = [[10, 11], [20, 21], [30, 31], [40, 41]]
    out, real = purification_circuit(rows, [True, False, False, False])
    assert out == [[10, 11]] * 4
    assert real == 1


def test_values_reduced_to_32_bits():
    out, _ = purification_circuit([[2**32 + 5]], [True])
    assert out == [[5]]


def test_mismatched_tags_rejected():
    with pytest.raises(ValueError):
        purification_circuit([[1], [2]], [True])


def test_empty_rejected():
    with pytest.raises(ValueError):
        purification_circuit_multi([], [])


def test_ragged_rows_rejected():
    with pytest.raises(ValueError):
        purification_circuit([[1, 2], [3]], [True, False])


def test_reduce_last_column_subtracts_bound():
    assert reduce_last_column([[1, 2**32 + 7]]) == [[1, 7]]


def test_reduce_last_column_keeps_bound_itself():
    assert reduce_last_column([[3, 2**32]]) == [[3, 2**32]]


def test_reduce_last_column_keeps_small_values():
    assert reduce_last_column([[2**40, 9], [4, 8]]) == [[2**40, 9], [4, 8]]


def test_reduce_last_column_empty_rejected():
    with pytest.raises(ValueError):
        reduce_last_column([])
    with pytest.raises(ValueError):
        reduce_last_column([[]])
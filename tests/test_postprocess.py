import pytest
from hypothesis import given
from hypothesis import strategies as st

from gemmsim.options import Network
from gemmsim.postprocess import (
    CycleCounters,
    expected_classes,
    first_mismatch,
    flatten_channels,
    global_average,
    predictions,
)

cycle_values = st.integers(min_value=0, max_value=10**9)


@given(st.lists(cycle_values, min_size=7, max_size=7))
def test_total_is_sum_of_categories(values):
    counters = CycleCounters(*values)
    assert counters.total() == sum(values)


@given(st.lists(cycle_values, min_size=7, max_size=7).filter(lambda v: sum(v) > 0))
def test_percentages_bounded(values):
    pct = CycleCounters(*values).percentages()
    assert all(0 <= p <= 100 for p in pct.values())
    assert sum(pct.values()) <= 100


def test_percentages_single_category():
    pct = CycleCounters(matmul=12345).percentages()
    assert pct["matmul"] == 100
    assert all(v == 0 for k, v in pct.items() if k != "matmul")


def test_percentages_order():
    keys = list(CycleCounters(other=1).percentages())
    assert keys == ["matmul", "im2col", "conv", "pool", "conv_dw", "res_add", "other"]


def test_percentages_without_cycles_raises():
    with pytest.raises(ZeroDivisionError):
        CycleCounters().percentages()


def test_flatten_channels_single_pixel():
    assert flatten_channels([[[[5, 6, 7]]]]) == [[5], [6], [7]]


def test_flatten_channels_spatial_order():
    fm = [
        [[[10], [11]], [[12], [13]]],
        [[[20], [21]], [[22], [23]]],
    ]
    assert flatten_channels(fm) == [[10, 20], [11, 21], [12, 22], [13, 23]]


def test_flatten_channels_empty():
    assert flatten_channels([]) == []


def test_flatten_channels_rejects_ragged():
    with pytest.raises(ValueError):
        flatten_channels([[[[1], [2]], [[3]]]])


def test_global_average_rounds_half_up():
    rows = [[0], [0], [1], [1]]
    assert global_average(rows, 1, 2, 1) == [[1]]


def test_global_average_separates_batches():
    rows = [[3, 4]] + [[7, 8]]
    assert global_average(rows, 2, 1, 2) == [[3, 7], [4, 8]]


def test_global_average_too_few_rows():
    with pytest.raises(ValueError):
        global_average([[1]], 2, 1, 1)


def test_predictions_first_maximum_wins():
    scores = [[1, 9], [5, 2], [5, 9]]
    assert predictions(scores) == [(1, 5), (0, 9)]


def test_predictions_empty_raises():
    with pytest.raises(ValueError):
        predictions([])


@given(st.lists(st.lists(st.integers(-128, 127), min_size=3, max_size=3), min_size=1, max_size=10))
def test_predictions_pick_maximum(scores):
    for batch, (index, score) in enumerate(predictions(scores)):
        column = [row[batch] for row in scores]
        assert score == column[index] == max(column)
        assert index == column.index(score)


def test_first_mismatch_all_correct():
    scores = [[9, 0], [0, 9]]
    assert first_mismatch(scores, [0, 1], [0, 1]) is None


def test_first_mismatch_tie_passes():
    scores = [[4], [4]]
    assert first_mismatch(scores, [0], [1]) is None


def test_first_mismatch_reports_position():
    scores = [[9, 9], [0, 1]]
    assert first_mismatch(scores, [0, 0], [0, 1]) == 1


def test_first_mismatch_needs_enough_expected():
    with pytest.raises(ValueError):
        first_mismatch([[1, 1]], [0, 0], [0])


def test_expected_classes():
    assert expected_classes(Network.ALEXNET) == (824, 725, 135, 646)
    assert expected_classes(Network.MOBILENET) == (75, 900, 125, 897)
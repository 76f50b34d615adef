import pytest

from ecsnetsim.selectivity import (
    FixedSelectivityDistribution,
    OperatorSelectivityDistribution,
)


def test_base_ratio_is_not_implemented():
    with pytest.raises(NotImplementedError):
        OperatorSelectivityDistribution().selectivity_ratio()


def test_base_window_is_not_implemented():
    with pytest.raises(NotImplementedError):
        OperatorSelectivityDistribution().selectivity_window_length()


@pytest.mark.parametrize("ratio", [0.1, 0.5, 1.0, 3.0])
def test_ratio_is_returned(ratio):
    assert FixedSelectivityDistribution(ratio).selectivity_ratio() == ratio


@pytest.mark.parametrize("n", [1, 2, 4, 10, 100])
def test_window_is_reciprocal_of_exact_ratio(n):
    dist = FixedSelectivityDistribution(1 / n)
    assert dist.selectivity_window_length() == n


def test_halfway_window_rounds_away_from_zero():
    assert FixedSelectivityDistribution(0.4).selectivity_window_length() == 3


def test_negative_halfway_window_rounds_away_from_zero():
    assert FixedSelectivityDistribution(-0.4).selectivity_window_length() == -3


def test_ratio_above_one_gives_zero_window():
    assert FixedSelectivityDistribution(4.0).selectivity_window_length() == 0


def test_zero_ratio_is_rejected():
    with pytest.raises(ValueError):
        FixedSelectivityDistribution(0)
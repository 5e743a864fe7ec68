import numpy as np
import pytest

from online_rf.stats import CandidateSplits, LeafStatistics
from online_rf.utils import RNG


def test_drawn_candidates_respect_ranges():
    x_range = [(0.0, 1.0), (10.0, 20.0), (-5.0, -4.0)]
    candidates = CandidateSplits.draw(x_range, 50, 3, RNG(0))
    assert len(candidates) == 50
    for dim, loc in zip(candidates.dims, candidates.locs):
        lo, hi = x_range[dim]
        assert lo <= loc <= hi
    assert np.all(candidates.left_counts == 1)
    assert np.all(candidates.right_counts == 1)


def test_route_uses_strict_less_than_for_left():
    candidates = CandidateSplits(np.array([0, 0]), np.array([5.0, 3.0]), 2)
    candidates.route(np.array([5.0]), 1)
    candidates.route(np.array([4.0]), 0)
    assert candidates.left_counts.tolist() == [[2, 1], [1, 1]]
    assert candidates.right_counts.tolist() == [[1, 2], [2, 2]]


def test_update_counts_and_prediction():
    stats = LeafStatistics(3, CandidateSplits.draw([(0.0, 1.0)], 4, 3, RNG(1)))
    assert stats.predicted_class() == 0
    x = np.array([0.5])
    stats.update(x, 2)
    stats.update(x, 1)
    stats.update(x, 2)
    assert stats.num_samples_seen == 3
    assert stats.class_counts.tolist() == [1, 2, 3]
    assert stats.predicted_class() == 2
    # every sample lands on exactly one side of every test
    totals = stats.candidates.left_counts.sum(axis=1) + stats.candidates.right_counts.sum(axis=1)
    assert np.all(totals == 3 + 2 * 3)


def test_prediction_ties_go_to_lowest_class():
    stats = LeafStatistics(3, prior=np.array([1, 4, 4]))
    assert stats.predicted_class() == 1


def test_density_is_smoothed():
    stats = LeafStatistics(2, prior=np.array([30, 1]))
    dens = stats.density_estimate()
    assert np.all((dens > 0) & (dens < 1))
    assert np.isclose(dens.sum(), 31 / 33)


def test_commit_split_releases_statistics():
    stats = LeafStatistics(2, CandidateSplits.draw([(0.0, 1.0)], 5, 2, RNG(2)), prior=np.array([7, 3]))
    stats.commit_split(0, 0.25)
    assert stats.is_split
    assert (stats.split_dim, stats.split_loc) == (0, 0.25)
    assert len(stats.candidates) == 0
    assert stats.class_counts.tolist() == [1, 1]
    assert str(stats) == "X1 <= 0.25"
    with pytest.raises(ValueError):
        stats.commit_split(0, 0.5)


def test_density_mass_approaches_one_as_leaf_fills():
    stats = LeafStatistics(3, CandidateSplits.draw([(0.0, 1.0)], 4, 3, RNG(3)))
    x = np.array([0.5])
    missing = [1.0 - stats.density_estimate().sum()]
    for n in range(1, 301):
        stats.update(x, n % 3)
        if n % 50 == 0:
            missing.append(1.0 - stats.density_estimate().sum())
    assert all(later < earlier for earlier, later in zip(missing, missing[1:]))
    assert missing[-1] < 0.01

import math

import numpy as np

from online_rf.split import best_candidate, gain, gains, loss


def test_loss_values():
    assert math.isclose(float(loss(np.array([1, 1]), 2, "entropy")), math.log(2.0))
    assert math.isclose(float(loss(np.array([1, 1]), 2, "gini")), 0.375)


def test_loss_is_vectorised_over_rows():
    counts = np.array([[1, 1], [3, 1], [1, 3]])
    out = loss(counts, 2)
    assert out.shape == (3,)
    assert math.isclose(out[1], out[2])


def test_gain_rewards_separating_split():
    parent = np.array([11, 11])
    good = gain(parent, np.array([11, 1]), np.array([1, 11]), 2)
    useless = gain(parent, np.array([6, 6]), np.array([6, 6]), 2)
    assert good > 0.1
    assert good > useless


def test_gain_is_never_negative():
    rng = np.random.default_rng(0)
    for metric in ("entropy", "gini"):
        for _ in range(200):
            parent = rng.integers(0, 50, size=3)
            left = rng.integers(0, 50, size=(4, 3))
            right = rng.integers(0, 50, size=(4, 3))
            assert np.all(gains(parent, left, right, 3, metric) >= 0.0)


def test_best_candidate_first_maximum():
    assert best_candidate(np.array([0.2, 0.5, 0.5]), 0.1) == 1
    assert best_candidate(np.array([0.05, 0.1]), 0.1) is None
    assert best_candidate(np.array([]), 0.0) is None

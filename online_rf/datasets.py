"""Synthetic classification streams for exercising online forests."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .utils import data_range


@dataclass
class ClassificationData:
    X: np.ndarray
    y: np.ndarray
    x_range: List[Tuple[float, float]]
    name: str

    @property
    def num_classes(self) -> int:
        return int(self.y.max()) + 1


def generate_threshold_data(
    n: int,
    threshold: float = 5.0,
    low: float = 0.0,
    high: float = 10.0,
    seed: Optional[int] = None,
) -> ClassificationData:
    """One-dimensional data labeled ``0`` below `threshold` and ``1`` from it on.

    Args:
        n: Number of points, evenly spaced over `[low, high]` then shuffled.
        threshold: Class boundary.
        low: Lower end of the feature range.
        high: Upper end of the feature range.
        seed: Optional RNG seed for the shuffle.

    Returns:
        A :class:`ClassificationData` whose `x_range` is `[(low, high)]`.
    """
    rng = np.random.default_rng(seed)
    x = rng.permutation(np.linspace(low, high, n))
    y = (x >= threshold).astype(np.int64)
    return ClassificationData(X=x.reshape(-1, 1), y=y, x_range=[(low, high)], name="threshold")


def generate_blobs(
    n: int,
    p: int,
    num_classes: int,
    spread: float = 0.5,
    seed: Optional[int] = None,
) -> ClassificationData:
    """Isotropic Gaussian clusters, one per class, with centres in the unit cube.

    Args:
        n: Number of points.
        p: Number of features.
        num_classes: Number of clusters.
        spread: Standard deviation of each cluster relative to the cube side.
        seed: Optional RNG seed for reproducibility.

    Returns:
        A :class:`ClassificationData` whose `x_range` is the observed data range.
    """
    rng = np.random.default_rng(seed)
    centres = rng.uniform(0.0, 1.0, size=(num_classes, p))
    y = rng.integers(num_classes, size=n)
    X = centres[y] + rng.normal(scale=spread / num_classes, size=(n, p))
    return ClassificationData(X=X, y=y.astype(np.int64), x_range=data_range(X), name="blobs")


def generate_drift_stream(n: int, p: int = 2, seed: Optional[int] = None) -> ClassificationData:
    """Stream whose labeling rule flips halfway through (abrupt concept drift).

    The first half is labeled by `x[0] + x[1] > 1` on the unit square, the
    second half by the opposite rule. Extra features beyond two are noise.
    """
    if p < 2:
        raise ValueError("The drift stream needs at least two features.")
    rng = np.random.default_rng(seed)
    X = rng.uniform(0.0, 1.0, size=(n, p))
    y = (X[:, 0] + X[:, 1] > 1.0).astype(np.int64)
    y[n // 2:] = 1 - y[n // 2:]
    return ClassificationData(X=X, y=y, x_range=[(0.0, 1.0)] * p, name="drift")

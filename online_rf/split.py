"""
Impurity measures and split-gain evaluation for streaming leaf statistics.
"""
from __future__ import annotations

from typing import Optional

import numpy as np

from .config import Metric


def loss(counts: np.ndarray, num_classes: int, metric: Metric = "entropy") -> np.ndarray:
    """Impurity of one or many class-count vectors.

    The denominator is `sum(counts) + num_classes`, matching the Laplace prior
    carried by every count vector.

    Args:
        counts: Class counts, shape `(num_classes,)` or `(m, num_classes)`.
        num_classes: Number of classes.
        metric: ``"entropy"`` or ``"gini"``.

    Returns:
        The impurity, a scalar array or shape `(m,)`.
    """
    counts = np.asarray(counts, dtype=np.float64)
    n = counts.sum(axis=-1, keepdims=True) + num_classes
    p = counts / n
    if metric == "gini":
        return np.sum(p * (1.0 - p), axis=-1)
    # 0 * log(0) is taken as 0 for empty classes
    return np.sum(-p * np.log(np.where(p > 0, p, 1.0)), axis=-1)


def gains(
    parent: np.ndarray,
    left: np.ndarray,
    right: np.ndarray,
    num_classes: int,
    metric: Metric = "entropy",
) -> np.ndarray:
    """Impurity reduction of every candidate split of a leaf.

    Args:
        parent: Class counts of the leaf, shape `(num_classes,)`.
        left: Left-bucket counts per candidate, shape `(m, num_classes)`.
        right: Right-bucket counts per candidate, shape `(m, num_classes)`.
        num_classes: Number of classes.
        metric: Impurity measure.

    Returns:
        Non-negative gains of shape `(m,)`; negative values from rounding are
        clamped to zero.
    """
    left = np.atleast_2d(left)
    right = np.atleast_2d(right)
    n_left = left.sum(axis=1) + num_classes
    n_right = right.sum(axis=1) + num_classes
    n = (n_left + n_right).astype(np.float64)
    g = loss(parent, num_classes, metric) - (n_left / n) * loss(left, num_classes, metric)
    g -= (n_right / n) * loss(right, num_classes, metric)
    return np.maximum(g, 0.0)


def gain(
    parent: np.ndarray,
    left: np.ndarray,
    right: np.ndarray,
    num_classes: int,
    metric: Metric = "entropy",
) -> float:
    """Scalar version of :func:`gains` for a single candidate."""
    return float(gains(parent, left, right, num_classes, metric)[0])


def best_candidate(candidate_gains: np.ndarray, min_gain: float) -> Optional[int]:
    """Index of the winning split, or ``None`` if no gain exceeds `min_gain`.

    Ties go to the earliest candidate.
    """
    if candidate_gains.size == 0:
        return None
    best = int(np.argmax(candidate_gains))
    if candidate_gains[best] > min_gain:
        return best
    return None

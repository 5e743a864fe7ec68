"""
Utility helpers shared across the online forest components.
"""
from __future__ import annotations

import math
from typing import List, Sequence, Tuple, Union

import numpy as np

SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]


class RNG:
    """Random-number convenience wrapper.

    Every tree and every forest owns one of these, so results are reproducible
    from a single seed and trees never share a random stream.

    Args:
        seed: Optional seed, `SeedSequence` or existing `Generator`.

    Attributes:
        rng: The NumPy `Generator` used for sampling.
    """

    def __init__(self, seed: SeedLike = None):
        if isinstance(seed, np.random.Generator):
            self.rng = seed
        else:
            self.rng = np.random.default_rng(seed)

    def random(self) -> float:
        """Draw from `Uniform[0, 1)`."""
        return float(self.rng.random())

    def integer(self, n: int) -> int:
        """Draw an integer uniformly from `{0, …, n-1}`."""
        return int(self.rng.integers(n))

    def permutation(self, n: int) -> np.ndarray:
        return self.rng.permutation(n)

    def poisson(self, lam: float) -> int:
        """Sample a Poisson variate by inverse transform.

        Uniform draws are multiplied together until the running product falls
        to `exp(-lam)` or below; the number of draws minus one is returned.

        Args:
            lam: Rate of the distribution. Large rates make the loop long, so
                callers keep it small (see `config.MAX_LAM`).

        Returns:
            A non-negative integer.
        """
        threshold = math.exp(-lam)
        k = 0
        p = 1.0
        while p > threshold:
            k += 1
            p *= self.rng.random()
        return k - 1

    def seed_int(self) -> int:
        """Draw a fresh integer seed for an independent downstream generator."""
        return int(self.rng.integers(2**63 - 1))

    def spawn(self, n: int) -> List["RNG"]:
        """Create `n` statistically independent child generators."""
        return [RNG(child) for child in self.rng.spawn(n)]


def data_range(X: Sequence[Sequence[float]]) -> List[Tuple[float, float]]:
    """Per-feature `(min, max)` pairs of a feature matrix.

    Args:
        X: Feature matrix of shape `(n, p)`.

    Returns:
        A list of `p` tuples usable as the feature-range prior of a forest.

    Raises:
        ValueError: If `X` is not a non-empty two-dimensional matrix.
    """
    X_arr = np.asarray(X, dtype=float)
    if X_arr.ndim != 2 or X_arr.shape[0] == 0:
        raise ValueError("X must be a non-empty two-dimensional matrix.")
    return [(float(lo), float(hi)) for lo, hi in zip(X_arr.min(axis=0), X_arr.max(axis=0))]


def check_same_length(xs: Sequence, ys: Sequence) -> None:
    """Raise if a feature sequence and its labels are not aligned.

    Raises:
        ValueError: If the sequences have different lengths.
    """
    if len(xs) != len(ys):
        raise ValueError(f"xs and ys need to have the same length ({len(xs)} != {len(ys)}).")

"""
Leaf-level streaming sufficient statistics and randomized candidate splits.
"""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from .utils import RNG


class CandidateSplits:
    """Fixed set of random axis-aligned tests with per-side class counts.

    Args:
        dims: Feature index of each test, shape `(m,)`.
        locs: Threshold of each test, shape `(m,)`.
        num_classes: Number of classes.

    Attributes:
        left_counts: Class counts of samples routed left, shape `(m, num_classes)`.
        right_counts: Class counts of samples routed right, shape `(m, num_classes)`.
    """

    __slots__ = ("dims", "locs", "left_counts", "right_counts")

    def __init__(self, dims: np.ndarray, locs: np.ndarray, num_classes: int):
        self.dims = np.asarray(dims, dtype=np.int64)
        self.locs = np.asarray(locs, dtype=np.float64)
        m = self.dims.shape[0]
        self.left_counts = np.ones((m, num_classes), dtype=np.int64)
        self.right_counts = np.ones((m, num_classes), dtype=np.int64)

    @classmethod
    def draw(
        cls,
        x_range: Sequence[Tuple[float, float]],
        num_tests: int,
        num_classes: int,
        rng: RNG,
    ) -> "CandidateSplits":
        """Draw tests uniformly: a random feature, then a threshold inside its range.

        Args:
            x_range: The `(min, max)` prior of every feature.
            num_tests: Number of tests to draw.
            num_classes: Number of classes.
            rng: Random source of the owning tree.

        Returns:
            A new set of candidates with Laplace-initialized counts.
        """
        bounds = np.asarray(x_range, dtype=np.float64).reshape(-1, 2)
        dims = rng.rng.integers(bounds.shape[0], size=num_tests)
        low = bounds[dims, 0]
        high = bounds[dims, 1]
        locs = rng.rng.random(num_tests) * (high - low) + low
        return cls(dims, locs, num_classes)

    @classmethod
    def empty(cls, num_classes: int) -> "CandidateSplits":
        return cls(np.empty(0, dtype=np.int64), np.empty(0, dtype=np.float64), num_classes)

    def route(self, x: np.ndarray, y: int) -> None:
        """Count `(x, y)` on the left of every test with `x[dim] < loc`, else on the right."""
        go_left = x[self.dims] < self.locs
        self.left_counts[go_left, y] += 1
        self.right_counts[~go_left, y] += 1

    def __len__(self) -> int:
        return int(self.dims.shape[0])


class LeafStatistics:
    """Streaming state of one tree node.

    A node starts as a leaf holding class counts and candidate splits. Once a
    split is committed it keeps only `split_dim`/`split_loc`.

    Args:
        num_classes: Number of classes.
        candidates: Candidate splits evaluated while the node is a leaf.
        prior: Initial class counts; defaults to all ones.
    """

    __slots__ = ("num_classes", "split_dim", "split_loc", "class_counts", "candidates", "_num_samples_seen")

    def __init__(
        self,
        num_classes: int,
        candidates: Optional[CandidateSplits] = None,
        prior: Optional[np.ndarray] = None,
    ):
        self.num_classes = num_classes
        self.split_dim: int = -1
        self.split_loc: float = 0.0
        if prior is None:
            self.class_counts = np.ones(num_classes, dtype=np.int64)
        else:
            self.class_counts = np.array(prior, dtype=np.int64)
        self.candidates = candidates if candidates is not None else CandidateSplits.empty(num_classes)
        self._num_samples_seen = 0

    @property
    def num_samples_seen(self) -> int:
        return self._num_samples_seen

    @property
    def is_split(self) -> bool:
        return self.split_dim != -1

    def update(self, x: np.ndarray, y: int) -> None:
        self.class_counts[y] += 1
        self._num_samples_seen += 1
        self.candidates.route(x, y)

    def predicted_class(self) -> int:
        """Most frequent class; the lowest index wins ties."""
        return int(np.argmax(self.class_counts))

    def density_estimate(self) -> np.ndarray:
        """Laplace-smoothed class probabilities.

        Each entry is `counts[i] / (sum(counts) + num_classes)`, so entries lie
        in `(0, 1)` and their sum approaches one as the leaf fills up.
        """
        return self.class_counts / float(self.class_counts.sum() + self.num_classes)

    def commit_split(self, dim: int, loc: float) -> None:
        """Freeze the node as internal and release its leaf statistics.

        Raises:
            ValueError: If the node has already been split.
        """
        if self.is_split:
            raise ValueError("A node can only be split once.")
        self.split_dim = int(dim)
        self.split_loc = float(loc)
        self.candidates = CandidateSplits.empty(self.num_classes)
        self.class_counts = np.ones(self.num_classes, dtype=np.int64)

    def __str__(self) -> str:
        if not self.is_split:
            return str(self.predicted_class())
        return f"X{self.split_dim + 1} <= {round(self.split_loc, 2)}"

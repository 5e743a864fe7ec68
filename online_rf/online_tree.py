"""
Online decision tree grown one labeled example at a time (Saffari et al., 2009).
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np

from .config import Param
from .split import best_candidate, gains
from .stats import CandidateSplits, LeafStatistics
from .tree import BinaryTree
from .utils import RNG

logger = logging.getLogger(__name__)


class OnlineTree:
    """One randomized tree of an online random forest.

    Every incoming example is replicated `k ~ Poisson(lam)` times (online
    bagging). Replicas update the statistics of the leaf the example falls in
    and may split it; examples with `k == 0` are used as out-of-bag samples.

    Args:
        param: Hyperparameters shared with the rest of the forest.
        x_range: `(min, max)` prior of every feature, used to draw thresholds.
        rng: Random source owned by this tree.
    """

    def __init__(self, param: Param, x_range: Sequence[Tuple[float, float]], rng: Optional[RNG] = None):
        self.param = param
        self.x_range = [(float(lo), float(hi)) for lo, hi in x_range]
        self.dim_x = len(self.x_range)
        self.num_tests = param.tests_for(self.dim_x)
        self.rng = rng if rng is not None else RNG()
        self.reset()

    def reset(self) -> None:
        """Drop all structure and statistics, keeping hyperparameters and the random stream."""
        self.tree: BinaryTree[LeafStatistics] = BinaryTree(self._new_stats())
        self.age = 0
        self._oob_correct = np.zeros(self.param.num_classes, dtype=np.int64)
        self._oob_total = np.zeros(self.param.num_classes, dtype=np.int64)

    def _new_stats(self, prior: Optional[np.ndarray] = None) -> LeafStatistics:
        candidates = CandidateSplits.draw(self.x_range, self.num_tests, self.param.num_classes, self.rng)
        return LeafStatistics(self.param.num_classes, candidates, prior)

    @property
    def oob_counts(self) -> Tuple[np.ndarray, np.ndarray]:
        """Per-class `(correct, total)` counts over out-of-bag examples."""
        return self._oob_correct.copy(), self._oob_total.copy()

    def find_leaf(self, x: np.ndarray) -> int:
        """Descend from the root, going right when `x[split_dim] > split_loc`.

        Args:
            x: Feature vector.

        Returns:
            The handle of the reached leaf.
        """
        tree = self.tree
        node = BinaryTree.ROOT
        while not tree.is_leaf(node):
            stats = tree.payload(node)
            if x[stats.split_dim] > stats.split_loc:
                node = tree.right(node)
            else:
                node = tree.left(node)
        return node

    def predict(self, x: Sequence[float]) -> int:
        x = np.asarray(x, dtype=np.float64)
        return self.tree.payload(self.find_leaf(x)).predicted_class()

    def density(self, x: Sequence[float]) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        return self.tree.payload(self.find_leaf(x)).density_estimate()

    def update(self, x: Sequence[float], y: int) -> None:
        """Process one labeled example.

        Args:
            x: Feature vector of length `dim_x`.
            y: Class label in `[0, num_classes)`.
        """
        x = np.asarray(x, dtype=np.float64)
        k = self.rng.poisson(self.param.lam)
        if k == 0:
            self._oob_total[y] += 1
            if self.predict(x) == y:
                self._oob_correct[y] += 1
            return
        for _ in range(k):
            self.age += 1
            leaf = self.find_leaf(x)
            stats = self.tree.payload(leaf)
            stats.update(x, y)
            if stats.num_samples_seen > self.param.min_samples:
                self._try_split(leaf, stats)

    def _try_split(self, leaf: int, stats: LeafStatistics) -> None:
        candidates = stats.candidates
        g = gains(
            stats.class_counts,
            candidates.left_counts,
            candidates.right_counts,
            self.param.num_classes,
            self.param.metric,
        )
        best = best_candidate(g, self.param.min_gain)
        if best is None:
            return
        dim = int(candidates.dims[best])
        loc = float(candidates.locs[best])
        left_prior = candidates.left_counts[best].copy()
        right_prior = candidates.right_counts[best].copy()
        stats.commit_split(dim, loc)
        self.tree.attach_children(leaf, self._new_stats(left_prior), self._new_stats(right_prior))
        logger.debug("Split node %d on X%d at %.4f (gain %.4f).", leaf, dim + 1, loc, g[best])

    def oob_error(self) -> float:
        """Out-of-bag error averaged over classes; unseen classes contribute no error."""
        seen = self._oob_total > 0
        errors = np.zeros(self.param.num_classes, dtype=np.float64)
        errors[seen] = 1.0 - self._oob_correct[seen] / self._oob_total[seen]
        return float(errors.sum() / self.param.num_classes)

    def size(self) -> int:
        return self.tree.size()

    def num_leaves(self) -> int:
        return self.tree.num_leaves()

    def max_depth(self) -> int:
        return self.tree.max_depth()

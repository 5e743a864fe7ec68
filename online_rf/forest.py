"""
Online random forest: ensemble coordination, drift handling and evaluation.
"""
from __future__ import annotations

import logging
from concurrent.futures import Executor
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
from tqdm.auto import tqdm

from ._parallel import make_executor, run_parallel
from .config import ExecutionMode, Param
from .online_tree import OnlineTree
from .utils import RNG, SeedLike, check_same_length

logger = logging.getLogger(__name__)

_R = TypeVar("_R")


class Forest:
    """Ensemble of independently randomized online trees.

    Args:
        param: Hyperparameters shared by all trees.
        x_range: `(min, max)` prior of every feature.
        num_trees: Number of trees.
        execution: Sequential or threaded dispatch of per-tree work.
        seed: Seed of the forest; every tree gets its own child stream.

    Raises:
        ValueError: If `num_trees` is not positive or `x_range` is empty.
    """

    def __init__(
        self,
        param: Param,
        x_range: Sequence[Tuple[float, float]],
        num_trees: int = 100,
        execution: Optional[ExecutionMode] = None,
        seed: SeedLike = None,
    ):
        if num_trees < 1:
            raise ValueError("num_trees must be positive.")
        if len(x_range) == 0:
            raise ValueError("x_range needs one (min, max) pair per feature.")
        self.param = param
        self.x_range = [(float(lo), float(hi)) for lo, hi in x_range]
        self.num_trees = num_trees
        self.execution = execution if execution is not None else ExecutionMode.sequential()
        streams = RNG(seed).spawn(num_trees + 2)
        self._rng = streams[0]
        # fold seeds and shuffles; kept apart from the drift controller stream
        self._cv_rng = streams[1]
        self.trees: List[OnlineTree] = [OnlineTree(param, self.x_range, s) for s in streams[2:]]
        self.num_resets = 0
        self._executor: Optional[Executor] = None

    def _map(self, func: Callable[[OnlineTree], _R]) -> List[_R]:
        if not self.execution.is_parallel:
            return [func(tree) for tree in self.trees]
        if self._executor is None:
            self._executor = make_executor(self.execution.workers, backend="thread")
        return list(self._executor.map(func, self.trees))

    def predict(self, x: Sequence[float]) -> int:
        """Majority vote of the trees; on a tie the class voted first wins."""
        x = np.asarray(x, dtype=np.float64)
        votes: Dict[int, int] = {}
        for pred in self._map(lambda tree: tree.predict(x)):
            votes[pred] = votes.get(pred, 0) + 1
        return max(votes, key=votes.get)

    def density(self, x: Sequence[float]) -> np.ndarray:
        """Mean of the trees' leaf density estimates."""
        x = np.asarray(x, dtype=np.float64)
        return np.mean(self._map(lambda tree: tree.density(x)), axis=0)

    def update(self, x: Sequence[float], y: int) -> None:
        """Feed one labeled example to every tree, then run the drift controller."""
        x = np.asarray(x, dtype=np.float64)
        y = int(y)
        self._map(lambda tree: tree.update(x, y))
        if self.param.gamma > 0:
            self._temporal_knowledge_weighting()

    def update_many(self, X: Sequence[Sequence[float]], Y: Sequence[int], progress: bool = False) -> None:
        """Stream `(X[i], Y[i])` through :meth:`update` in order."""
        check_same_length(X, Y)
        for x, y in tqdm(zip(X, Y), total=len(Y), desc="update", leave=False, disable=not progress):
            self.update(x, y)

    def _temporal_knowledge_weighting(self) -> None:
        # Runs after every tree has seen the example.
        old_trees = [tree for tree in self.trees if tree.age > 1.0 / self.param.gamma]
        if not old_trees:
            return
        tree = old_trees[self._rng.integer(len(old_trees))]
        oob_error = tree.oob_error()
        if self._rng.random() < oob_error:
            logger.debug("Resetting tree of age %d (OOB error %.3f).", tree.age, oob_error)
            tree.reset()
            self.num_resets += 1

    def confusion_matrix(self, X: Sequence[Sequence[float]], Y: Sequence[int]) -> np.ndarray:
        """Counts of `(true class, predicted class)` pairs.

        Raises:
            ValueError: If `X` and `Y` have different lengths.
        """
        check_same_length(X, Y)
        num_classes = self.param.num_classes
        conf = np.zeros((num_classes, num_classes), dtype=np.int64)
        for x, y in zip(X, Y):
            conf[int(y), self.predict(x)] += 1
        return conf

    def accuracy(self, X: Sequence[Sequence[float]], Y: Sequence[int]) -> float:
        """Fraction of examples whose predicted class equals the label.

        Raises:
            ValueError: If `X` and `Y` have different lengths or are empty.
        """
        check_same_length(X, Y)
        if len(Y) == 0:
            raise ValueError("Accuracy is undefined on an empty set.")
        hits = sum(1 for x, y in zip(X, Y) if self.predict(x) == int(y))
        return hits / float(len(Y))

    def leave_one_out_cv(
        self,
        X: Sequence[Sequence[float]],
        Y: Sequence[int],
        execution: Optional[ExecutionMode] = None,
        progress: bool = False,
    ) -> np.ndarray:
        """Leave-one-out confusion matrix.

        For every example a fresh forest with this forest's configuration is
        trained on all other examples in a shuffled order and asked to predict
        the held-out one. Folds are independent and run on a process pool when
        the execution mode is parallel.

        Args:
            X: Feature matrix `(n, p)`.
            Y: Labels `(n,)`.
            execution: Overrides the forest's execution mode for the folds.
            progress: Show a progress bar.

        Returns:
            A `(num_classes, num_classes)` matrix whose entries sum to `n`.

        Raises:
            ValueError: If `X` and `Y` have different lengths.
        """
        check_same_length(X, Y)
        execution = execution if execution is not None else self.execution
        X_arr = np.asarray(X, dtype=np.float64)
        Y_arr = np.asarray(Y, dtype=np.int64)
        n = Y_arr.shape[0]
        tasks = [(i, self._cv_rng.seed_int()) for i in range(n)]
        fold = partial(_leave_one_out_fold, self.param, self.x_range, self.num_trees, X_arr, Y_arr)

        logger.info("Leave-one-out CV over %d examples with %d trees per fold.", n, self.num_trees)
        if execution.is_parallel:
            preds = run_parallel(fold, tasks, desc="LOO-CV", workers=execution.workers, progress=progress)
        else:
            preds = [fold(task) for task in tqdm(tasks, desc="LOO-CV", leave=False, disable=not progress)]

        num_classes = self.param.num_classes
        conf = np.zeros((num_classes, num_classes), dtype=np.int64)
        for i, pred in enumerate(preds):
            conf[Y_arr[i], pred] += 1
        return conf

    def oob_errors(self) -> List[float]:
        return [tree.oob_error() for tree in self.trees]

    def mean_tree_size(self) -> float:
        return float(np.mean([tree.size() for tree in self.trees]))

    def mean_num_leaves(self) -> float:
        return float(np.mean([tree.num_leaves() for tree in self.trees]))

    def mean_max_depth(self) -> float:
        return float(np.mean([tree.max_depth() for tree in self.trees]))

    def close(self) -> None:
        """Shut down the worker pool, if one was started."""
        if self._executor is not None:
            self._executor.shutdown()
            self._executor = None

    def __enter__(self) -> "Forest":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __getstate__(self) -> Dict[str, Any]:
        state = self.__dict__.copy()
        state["_executor"] = None
        return state

    def __len__(self) -> int:
        return len(self.trees)


def _leave_one_out_fold(
    param: Param,
    x_range: List[Tuple[float, float]],
    num_trees: int,
    X: np.ndarray,
    Y: np.ndarray,
    task: Tuple[int, int],
) -> int:
    """Train a private forest on every example but `task[0]` and predict the held-out one."""
    held_out, seed = task
    forest = Forest(param, x_range, num_trees=num_trees, seed=seed)
    for j in forest._cv_rng.permutation(Y.shape[0]):
        if j != held_out:
            forest.update(X[j], Y[j])
    return forest.predict(X[held_out])

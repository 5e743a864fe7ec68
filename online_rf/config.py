"""
Hyperparameters shared by every tree of a forest and the execution mode of the ensemble.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal, Optional

Metric = Literal["entropy", "gini"]

MAX_LAM = 10.0


@dataclass(frozen=True)
class Param:
    """Online random forest hyperparameters.

    Args:
        num_classes: Number of class labels; labels are `0 .. num_classes - 1`.
        min_samples: A leaf must have seen more than this many samples before
            a split is considered.
        min_gain: A candidate split is accepted only if its gain exceeds this.
        gamma: Temporal knowledge weighting rate. ``0`` disables tree resets.
        num_tests: Candidate splits drawn per leaf. ``0`` derives the number
            from the dimensionality as `round(sqrt(num_features))`.
        lam: Rate of the Poisson draw used for online bagging.
        metric: Impurity measure, ``"entropy"`` or ``"gini"``.

    Raises:
        ValueError: If any field is out of range.
    """

    num_classes: int
    min_samples: int
    min_gain: float
    gamma: float = 0.0
    num_tests: int = 10
    lam: float = 1.0
    metric: Metric = "entropy"

    def __post_init__(self) -> None:
        if self.num_classes <= 0:
            raise ValueError("num_classes must be positive.")
        if self.min_samples < 0:
            raise ValueError("min_samples must be non-negative.")
        if self.gamma < 0:
            raise ValueError("gamma must be non-negative.")
        if self.num_tests < 0:
            raise ValueError("num_tests must be non-negative.")
        if not 0 < self.lam <= MAX_LAM:
            raise ValueError(
                f"lam must lie in (0, {MAX_LAM:g}]; lam=1 is suitable for most bootstrapping cases."
            )
        if self.metric not in ("entropy", "gini"):
            raise ValueError(f"Unsupported metric '{self.metric}'.")

    def tests_for(self, num_features: int) -> int:
        """Number of candidate splits per leaf for a given dimensionality."""
        if self.num_tests > 0:
            return self.num_tests
        return max(1, int(round(math.sqrt(num_features))))


@dataclass(frozen=True)
class ExecutionMode:
    """How a forest schedules per-tree work.

    Args:
        workers: Size of the worker pool. ``None`` or ``1`` runs sequentially.
    """

    workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1.")

    @classmethod
    def sequential(cls) -> "ExecutionMode":
        return cls(workers=None)

    @classmethod
    def parallel(cls, workers: int) -> "ExecutionMode":
        return cls(workers=workers)

    @property
    def is_parallel(self) -> bool:
        return self.workers is not None and self.workers > 1

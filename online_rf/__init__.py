"""
Public API surface for the online_rf package, an online random forest classifier.
"""
from .config import ExecutionMode, Param
from .forest import Forest
from .online_tree import OnlineTree
from .stats import CandidateSplits, LeafStatistics
from .tree import BinaryTree
from .utils import RNG, data_range

__all__ = [
    "BinaryTree",
    "CandidateSplits",
    "ExecutionMode",
    "Forest",
    "LeafStatistics",
    "OnlineTree",
    "Param",
    "RNG",
    "data_range",
]

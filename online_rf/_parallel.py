"""Utilities for running independent tasks on a worker pool."""
from __future__ import annotations

from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Callable, List, Literal, Optional, Sequence, TypeVar

from tqdm.auto import tqdm

_T = TypeVar("_T")
_R = TypeVar("_R")

Backend = Literal["process", "thread"]


def make_executor(workers: Optional[int], backend: Backend = "process") -> Executor:
    if backend == "thread":
        return ThreadPoolExecutor(max_workers=workers)
    return ProcessPoolExecutor(max_workers=workers)


def run_parallel(
    func: Callable[[_T], _R],
    tasks: Sequence[_T],
    desc: str,
    workers: Optional[int] = None,
    backend: Backend = "process",
    progress: bool = True,
) -> List[_R]:
    """Apply `func` to every task on a pool and return the results in task order.

    Args:
        func: Picklable callable when `backend == "process"`.
        tasks: Arguments, one per call.
        desc: Label of the progress bar.
        workers: Pool size; ``None`` lets the executor decide.
        backend: ``"process"`` for isolated state, ``"thread"`` for shared state.
        progress: Show a tqdm progress bar while collecting results.

    Returns:
        A list with one result per task.
    """
    if len(tasks) == 0:
        return []

    with make_executor(workers, backend) as executor:
        futures = [executor.submit(func, task) for task in tasks]
        results = []
        for f in tqdm(futures, desc=desc, leave=False, disable=not progress):
            results.append(f.result())
        return results

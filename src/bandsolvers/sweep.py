from __future__ import annotations

from typing import Callable, List, Sequence
import logging
import multiprocessing as mp

import numpy as np


def as_phase_array(phases: Sequence[float] | np.ndarray) -> np.ndarray:
    arr = np.asarray(phases, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"phases must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise ValueError("phases must not be empty")
    if not np.all(np.isfinite(arr)):
        raise ValueError("phases must be finite")
    return arr


def sector_rows(sector: int, block: int) -> slice:
    """Rows of the band table holding sector 0 (zone centre) or 1 (zone boundary)."""
    return slice(sector * block, (sector + 1) * block)


def run_tasks(worker: Callable, tasks: Sequence, processes: int | None = None) -> List:
    """Map ``worker`` over ``tasks``, in a fork pool when ``processes > 1``."""
    if processes is not None and processes > 1 and len(tasks) > 1:
        logging.info("Running %d sweep tasks on %d processes", len(tasks), processes)
        ctx = mp.get_context("fork")
        with ctx.Pool(processes=min(processes, len(tasks))) as pool:
            return pool.map(worker, tasks)
    return [worker(task) for task in tasks]

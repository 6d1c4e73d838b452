"""Rank-scoped random streams and a process-pool partition of the sweep.

Each rank owns one random stream seeded `base_seed + rank` and sweeps a
contiguous slice of the alpha axis. Nothing mutable is shared between ranks.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO
from multiprocessing import Pool
from typing import TextIO

import numpy as np
from numpy.typing import NDArray

from vmc_bosons.config import SamplerParams, SweepGrid, VMCConfig
from vmc_bosons.io import write_sweep_header
from vmc_bosons.sampler import RunResult
from vmc_bosons.sweep import SweepResult, grid_axes, run_sweep_axes, select_best
from vmc_bosons.utils import BASE_SEED, make_rng, rank_seed

FloatArray = NDArray[np.float64]


class RankContext:
    """Per-rank execution resources; valid only inside `rank_context`."""

    __slots__ = ("rank", "size", "seed", "_rng", "active")

    def __init__(self, rank: int, size: int, seed: int) -> None:
        self.rank = rank
        self.size = size
        self.seed = seed
        self._rng: np.random.Generator | None = make_rng(seed)
        self.active = True

    @property
    def rng(self) -> np.random.Generator:
        """The rank's random stream."""
        if not self.active or self._rng is None:
            raise RuntimeError(f"rank {self.rank} context has been released")
        return self._rng

    def release(self) -> None:
        self._rng = None
        self.active = False


@contextmanager
def rank_context(
    rank: int = 0,
    size: int = 1,
    base_seed: int = BASE_SEED,
) -> Iterator[RankContext]:
    """Acquire the resources of one rank and release them on every exit path."""
    if isinstance(size, bool) or size < 1:
        raise ValueError("size must be an integer >= 1")
    if not 0 <= rank < size:
        raise ValueError("rank must satisfy 0 <= rank < size")

    context = RankContext(rank, size, rank_seed(rank, base_seed))
    try:
        yield context
    finally:
        context.release()


def partition_axis(values: FloatArray, n_parts: int) -> list[FloatArray]:
    """Split an axis into `n_parts` contiguous, possibly empty, chunks."""
    if n_parts < 1:
        raise ValueError("n_parts must be >= 1")
    return list(np.array_split(values, n_parts))


def _rank_worker(
    args: tuple[int, int, int, VMCConfig, FloatArray, FloatArray, SamplerParams],
) -> tuple[str, list[RunResult]]:
    """Sweep one rank's alpha slice into an in-memory buffer."""
    rank, size, base_seed, config, alphas, betas, sampler = args
    buffer = StringIO()
    with rank_context(rank, size, base_seed) as context:
        records = run_sweep_axes(
            config, alphas, betas, sampler, buffer, rng=context.rng
        )
    return buffer.getvalue(), records


def run_partitioned_sweep(
    config: VMCConfig,
    grid: SweepGrid,
    sampler: SamplerParams,
    out: TextIO,
    *,
    n_ranks: int = 2,
    base_seed: int = BASE_SEED,
) -> SweepResult:
    """Run the grid as `n_ranks` independent processes and merge the output.

    Lines are written in rank order after all ranks finish, below a single
    header, so the file layout matches a serial sweep of the same grid.
    """
    if isinstance(n_ranks, bool) or n_ranks < 1:
        raise ValueError("n_ranks must be an integer >= 1")

    alphas, betas = grid_axes(grid)
    tasks = [
        (rank, n_ranks, base_seed, config, chunk, betas, sampler)
        for rank, chunk in enumerate(partition_axis(alphas, n_ranks))
        if chunk.size > 0
    ]

    with Pool(processes=len(tasks)) as pool:
        outputs = pool.map(_rank_worker, tasks)

    write_sweep_header(out)
    records: list[RunResult] = []
    for text, rank_records in outputs:
        out.write(text)
        records.extend(rank_records)
    out.flush()
    return SweepResult(best=select_best(records), records=tuple(records))

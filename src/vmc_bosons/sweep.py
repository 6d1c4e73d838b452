"""Variational sweep over the (alpha, beta) grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO

import numpy as np
from numpy.typing import NDArray

from vmc_bosons.config import SamplerParams, SweepGrid, VMCConfig
from vmc_bosons.io import format_grid_line, write_sweep_header
from vmc_bosons.sampler import RunResult, run_mc
from vmc_bosons.utils import make_rng

FloatArray = NDArray[np.float64]


@dataclass(frozen=True, slots=True)
class SweepResult:
    """Outcome of a full variational sweep.

    Attributes:
        best: Record with the smallest energy variance.
        records: Every grid-point record in evaluation order.
    """

    best: RunResult
    records: tuple[RunResult, ...]


def grid_axes(grid: SweepGrid) -> tuple[FloatArray, FloatArray]:
    """Return the linearly spaced alpha and beta axes of the grid."""
    alphas = np.linspace(grid.alpha_min, grid.alpha_max, grid.alpha_n)
    betas = np.linspace(grid.beta_min, grid.beta_max, grid.beta_n)
    return alphas, betas


def select_best(records: list[RunResult] | tuple[RunResult, ...]) -> RunResult:
    """Return the first record with minimum variance."""
    if len(records) == 0:
        raise ValueError("records must contain at least one result")
    best = records[0]
    for record in records[1:]:
        if record.variance < best.variance:
            best = record
    return best


def run_sweep_axes(
    config: VMCConfig,
    alphas: FloatArray,
    betas: FloatArray,
    sampler: SamplerParams,
    out: TextIO,
    *,
    rng: np.random.Generator,
    progress: bool = False,
) -> list[RunResult]:
    """Sample every (alpha, beta) pair of explicit axes, writing one line each.

    No header is written and the stream is not flushed.
    """
    records: list[RunResult] = []
    for alpha in alphas:
        for beta in betas:
            result = run_mc(
                config,
                sampler,
                alpha=float(alpha),
                beta=float(beta),
                rng=rng,
                progress=progress,
            )
            out.write(format_grid_line(result))
            records.append(result)
    return records


def run_sweep(
    config: VMCConfig,
    grid: SweepGrid,
    sampler: SamplerParams,
    out: TextIO,
    *,
    rng: np.random.Generator | None = None,
    progress: bool = False,
) -> SweepResult:
    """Sample every (alpha, beta) grid point and keep the minimum variance.

    Each grid point starts from a fresh random configuration and distance
    cache while drawing from the single stream `rng`. When `rng` is omitted
    one is built from `sampler.seed`.

    The stream receives a header, then one `alpha beta <E> <E^2>` line per
    point, and is flushed at the end.
    """
    if rng is None:
        rng = make_rng(sampler.seed)

    alphas, betas = grid_axes(grid)
    write_sweep_header(out)
    records = run_sweep_axes(
        config, alphas, betas, sampler, out, rng=rng, progress=progress
    )
    out.flush()
    return SweepResult(best=select_best(records), records=tuple(records))

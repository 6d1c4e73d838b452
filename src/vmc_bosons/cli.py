"""Command-line driver: benchmark VMC sweeps over a grid of configurations.

Usage:
    vmc-bosons n_cycles alpha_min alpha_max alpha_n output_path [options]

Every combination of dimensionality, particle count, analytic ON/OFF and
time step is swept over the alpha grid. Sweep lines go to `output_path`;
one summary line per configuration goes to standard output.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from time import perf_counter
from typing import TextIO

from vmc_bosons.config import (
    EnergyMode,
    Interaction,
    SamplerParams,
    SweepGrid,
    TrapShape,
    VMCConfig,
)
from vmc_bosons.io import (
    SUMMARY_HEADER,
    format_summary_line,
    open_output,
    save_run_summary_json,
)
from vmc_bosons.parallel import rank_context, run_partitioned_sweep
from vmc_bosons.sweep import SweepResult, run_sweep
from vmc_bosons.utils import BASE_SEED, elapsed_ms

USAGE = "Usage: vmc-bosons n_cycles alpha_min alpha_max alpha_n output_path [options]"

DEFAULT_DIMS = (1, 2, 3)
DEFAULT_PARTICLES = (1, 10, 100, 500)
DEFAULT_TIME_STEPS = (0.01, 0.001, 0.0001)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vmc-bosons",
        description="Variational Monte Carlo sweeps for trapped hard-sphere bosons.",
        usage=USAGE,
    )
    parser.add_argument("n_cycles", nargs="?", type=int, help="Monte Carlo cycles per grid point.")
    parser.add_argument("alpha_min", nargs="?", type=float, help="Smallest alpha.")
    parser.add_argument("alpha_max", nargs="?", type=float, help="Largest alpha.")
    parser.add_argument("alpha_n", nargs="?", type=int, help="Number of alpha points.")
    parser.add_argument("output", nargs="?", help="Sweep output file.")
    parser.add_argument(
        "--method",
        choices=("metropolis", "importance"),
        default="importance",
        help="Sampling backend (default: importance).",
    )
    parser.add_argument("--seed", type=int, default=BASE_SEED, help="Base random seed.")
    parser.add_argument(
        "--ranks",
        type=int,
        default=1,
        help="Number of independent sweep processes per configuration.",
    )
    parser.add_argument("--dims", type=int, nargs="+", default=list(DEFAULT_DIMS))
    parser.add_argument(
        "--particles", type=int, nargs="+", default=list(DEFAULT_PARTICLES)
    )
    parser.add_argument(
        "--time-steps", type=float, nargs="+", default=list(DEFAULT_TIME_STEPS)
    )
    parser.add_argument(
        "--analytic",
        choices=("both", "on", "off"),
        default="both",
        help="Local-energy strategies to run (default: both).",
    )
    parser.add_argument(
        "--interaction", action="store_true", help="Enable the hard-sphere interaction."
    )
    parser.add_argument(
        "--elliptical", action="store_true", help="Use the elliptical trap in 3-D."
    )
    parser.add_argument("--omega-z", type=float, default=1.0)
    parser.add_argument("--beta-min", type=float, default=1.0)
    parser.add_argument("--beta-max", type=float, default=1.0)
    parser.add_argument("--beta-n", type=int, default=1)
    parser.add_argument(
        "--summary-dir",
        default=None,
        help="Directory receiving one JSON summary per configuration.",
    )
    parser.add_argument("--progress", action="store_true", help="Show progress bars.")
    return parser


def _analytic_flags(choice: str) -> tuple[bool, ...]:
    if choice == "on":
        return (True,)
    if choice == "off":
        return (False,)
    return (True, False)


def _summary_name(config: VMCConfig, analytic: bool) -> str:
    flag = "on" if analytic else "off"
    return f"d{config.dims}_n{config.n_particles}_{flag}_dt{config.time_step:g}.json"


def _sweep_once(
    config: VMCConfig,
    grid: SweepGrid,
    sampler: SamplerParams,
    out: TextIO,
    *,
    ranks: int,
    base_seed: int,
    progress: bool,
) -> SweepResult:
    if ranks > 1:
        return run_partitioned_sweep(
            config, grid, sampler, out, n_ranks=ranks, base_seed=base_seed
        )
    with rank_context(0, 1, base_seed) as context:
        return run_sweep(config, grid, sampler, out, rng=context.rng, progress=progress)


def _configurations(
    base: VMCConfig,
    args: argparse.Namespace,
) -> list[tuple[VMCConfig, bool]]:
    """Expand the benchmark grid into validated (config, analytic) pairs."""
    runs: list[tuple[VMCConfig, bool]] = []
    for dims in args.dims:
        for n_particles in args.particles:
            for analytic in _analytic_flags(args.analytic):
                for dt in args.time_steps:
                    config = replace(
                        base,
                        dims=dims,
                        n_particles=n_particles,
                        energy_mode=EnergyMode.ANALYTIC if analytic else EnergyMode.NUMERIC,
                        time_step=dt,
                    )
                    runs.append((config, analytic))
    return runs


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    positionals = (args.n_cycles, args.alpha_min, args.alpha_max, args.alpha_n, args.output)
    if any(value is None for value in positionals):
        print(USAGE)
        return 0

    try:
        grid = SweepGrid(
            alpha_min=args.alpha_min,
            alpha_max=args.alpha_max,
            alpha_n=args.alpha_n,
            beta_min=args.beta_min,
            beta_max=args.beta_max,
            beta_n=args.beta_n,
        )
        sampler = SamplerParams(method=args.method, n_cycles=args.n_cycles, seed=args.seed)
        base = VMCConfig(
            trap=TrapShape.ELLIPTICAL if args.elliptical else TrapShape.SYMMETRIC,
            interaction=Interaction.ON if args.interaction else Interaction.OFF,
            omega_z=args.omega_z,
        )
        runs = _configurations(base, args)
        if args.ranks < 1:
            raise ValueError("ranks must be >= 1")
    except ValueError as exc:
        print(f"[vmc-bosons] Invalid arguments: {exc}")
        return 2

    try:
        out = open_output(args.output)
    except OSError:
        print(f"Could not open file '{args.output}'")
        return 1

    with out:
        print(SUMMARY_HEADER)
        for config, analytic in runs:
            start = perf_counter()
            result = _sweep_once(
                config,
                grid,
                sampler,
                out,
                ranks=args.ranks,
                base_seed=args.seed,
                progress=args.progress,
            )
            milliseconds = elapsed_ms(start)
            if args.summary_dir is not None:
                save_run_summary_json(
                    config=config,
                    grid=grid,
                    sampler=sampler,
                    best=result.best,
                    elapsed_ms=milliseconds,
                    path=Path(args.summary_dir) / _summary_name(config, analytic),
                )
            print(
                format_summary_line(config, result.best, milliseconds, analytic=analytic),
                flush=True,
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""I/O helpers for sweep output streams and run artifacts."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, TextIO

from vmc_bosons.config import SamplerParams, SweepGrid, VMCConfig
from vmc_bosons.sampler import RunResult
from vmc_bosons.utils import utc_timestamp

SWEEP_HEADER = "# alpha beta <E> <E^2>"

SUMMARY_HEADER = (
    "Dims, Number of particles, Use analytic expressions, time step, "
    "Energy, Energy^2, Variance, alpha, beta, acceptance rate, time(ms)"
)


def open_output(path: str | Path) -> TextIO:
    """Open a sweep output file for writing.

    Raises:
        OSError: If the path cannot be opened.
    """
    return Path(path).open("w", encoding="utf-8")


def write_sweep_header(out: TextIO) -> None:
    """Write the literal sweep header line."""
    out.write(SWEEP_HEADER + "\n")


def format_grid_line(result: RunResult) -> str:
    """Format one grid point as `alpha beta <E> <E^2>` with a newline."""
    return (
        f"{result.alpha:.10g} {result.beta:.10g} "
        f"{result.energy:.10g} {result.energy_squared:.10g}\n"
    )


def format_summary_line(
    config: VMCConfig,
    result: RunResult,
    milliseconds: int,
    *,
    analytic: bool,
) -> str:
    """Format the per-configuration progress line (no trailing newline).

    Field order, comma-and-space separated:
        dims, n_particles (width 3), ON|OFF (width 3), time step (%e),
        energy, energy^2, variance, alpha, beta, acceptance rate, elapsed ms
    Floating result fields use 10 significant digits.
    """
    flag = "ON" if analytic else "OFF"
    head = f"{config.dims:d}, {config.n_particles:3d}, {flag:>3s}, {config.time_step:5e}"
    body = ", ".join(f"{value:.10g}" for value in result.as_tuple())
    return f"{head}, {body}, {milliseconds:d}"


def save_json(data: dict[str, Any], path: str | Path) -> Path:
    """Serialize a mapping to a JSON file with stable formatting."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n")
    return target


def load_json(path: str | Path) -> dict[str, Any]:
    """Load a JSON object from disk."""
    return json.loads(Path(path).read_text())


def run_config_to_dict(config: VMCConfig) -> dict[str, Any]:
    """Serialize `VMCConfig` into a JSON-compatible dictionary."""
    payload = asdict(config)
    payload["trap"] = config.trap.value
    payload["interaction"] = config.interaction.value
    payload["energy_mode"] = config.energy_mode.value
    payload["fd_step_inv2"] = config.fd_step_inv2
    return payload


def save_run_summary_json(
    *,
    config: VMCConfig,
    grid: SweepGrid,
    sampler: SamplerParams,
    best: RunResult,
    elapsed_ms: int,
    path: str | Path,
) -> Path:
    """Save a compact machine-readable summary of one sweep."""
    payload: dict[str, Any] = {
        "config": run_config_to_dict(config),
        "grid": asdict(grid),
        "sampler": asdict(sampler),
        "best": asdict(best),
        "elapsed_ms": elapsed_ms,
        "created_utc": utc_timestamp(),
    }
    return save_json(payload, path)

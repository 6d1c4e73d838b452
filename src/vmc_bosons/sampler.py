"""VMC samplers: brute-force Metropolis and drift-biased importance sampling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from vmc_bosons.config import SamplerParams, VMCConfig
from vmc_bosons.distance import DistanceCache
from vmc_bosons.hamiltonian import local_energy
from vmc_bosons.wavefunction import evaluate, jastrow, quantum_force

FloatArray = NDArray[np.float64]

MAX_START_ATTEMPTS = 1_000


@dataclass(frozen=True, slots=True)
class RunResult:
    """Aggregated statistics of one sampling run at fixed (alpha, beta).

    Attributes:
        energy: Mean local energy <E>.
        energy_squared: Mean squared local energy <E^2>.
        variance: <E^2> - <E>^2.
        alpha: Gaussian width parameter used for the run.
        beta: Axial anisotropy parameter used for the run.
        acceptance_rate: Accepted moves over attempted moves.
    """

    energy: float
    energy_squared: float
    variance: float
    alpha: float
    beta: float
    acceptance_rate: float

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        """Fields in their documented output order."""
        return (
            self.energy,
            self.energy_squared,
            self.variance,
            self.alpha,
            self.beta,
            self.acceptance_rate,
        )


class _Accumulator:
    """Running sums for the local energy and move counters."""

    __slots__ = ("e_sum", "e2_sum", "accepted", "attempted")

    def __init__(self) -> None:
        self.e_sum = 0.0
        self.e2_sum = 0.0
        self.accepted = 0
        self.attempted = 0

    def add(self, energy: float, accepted: bool) -> None:
        self.e_sum += energy
        self.e2_sum += energy * energy
        self.attempted += 1
        if accepted:
            self.accepted += 1

    def result(self, alpha: float, beta: float) -> RunResult:
        n = float(self.attempted)
        energy = self.e_sum / n
        energy_squared = self.e2_sum / n
        return RunResult(
            energy=energy,
            energy_squared=energy_squared,
            variance=energy_squared - energy * energy,
            alpha=float(alpha),
            beta=float(beta),
            acceptance_rate=self.accepted / n,
        )


def _squared_ratio(psi_new: float, psi_old: float) -> float:
    """Return (psi_new / psi_old)^2, saturating instead of dividing by zero."""
    if psi_new == 0.0:
        return 0.0
    if psi_old == 0.0:
        return float("inf")
    q = psi_new / psi_old
    return q * q


def _initial_positions(
    config: VMCConfig,
    rng: np.random.Generator,
) -> tuple[FloatArray, DistanceCache]:
    """Draw a uniform random start inside the step box, free of overlaps."""
    cache = DistanceCache(config.n_particles)
    shape = (config.dims, config.n_particles)
    for _ in range(MAX_START_ATTEMPTS):
        positions = config.step_length * rng.uniform(-0.5, 0.5, size=shape)
        cache.initialize(positions)
        if jastrow(cache, config) > 0.0:
            return positions, cache
    raise RuntimeError(
        "could not place particles without hard-core overlap; "
        "increase step_length or reduce hard_sphere_radius"
    )


def _cycle_iterator(n_cycles: int, progress: bool, desc: str) -> Any:
    iterator: range | Any = range(n_cycles)
    if progress:
        from tqdm.auto import trange

        iterator = trange(n_cycles, desc=desc, leave=False)
    return iterator


def run_metropolis(
    config: VMCConfig,
    n_cycles: int,
    alpha: float,
    beta: float,
    rng: np.random.Generator,
    progress: bool = False,
) -> RunResult:
    """Run a brute-force Metropolis walk of single-particle moves.

    Every trial move refreshes the distance cache for the moved particle; a
    rejected move restores both the position and the cache. The local energy
    is sampled after each decision, whatever its outcome.
    """
    r_old, cache = _initial_positions(config, rng)
    r_new = r_old.copy()
    psi_old = evaluate(r_old, cache, alpha, beta, config)
    stats = _Accumulator()

    for _ in _cycle_iterator(n_cycles, progress, "VMC cycles"):
        for i in range(config.n_particles):
            r_new[:, i] = r_old[:, i] + config.step_length * rng.uniform(
                -0.5, 0.5, size=config.dims
            )
            cache.update(i, r_new)
            psi_new = evaluate(r_new, cache, alpha, beta, config)

            accepted = rng.random() <= _squared_ratio(psi_new, psi_old)
            if accepted:
                r_old[:, i] = r_new[:, i]
                psi_old = psi_new
            else:
                r_new[:, i] = r_old[:, i]
                cache.update(i, r_new)

            stats.add(local_energy(r_new, cache, alpha, beta, config), accepted)

    return stats.result(alpha, beta)


def run_importance(
    config: VMCConfig,
    n_cycles: int,
    alpha: float,
    beta: float,
    rng: np.random.Generator,
    progress: bool = False,
) -> RunResult:
    """Run a Langevin-drift walk with the Fokker-Planck Green's function.

    Proposals follow
        r' = r + D * F(r) * dt + sqrt(2 D dt) * xi,   xi ~ N(0, 1)
    and are accepted with probability
        min(1, G(r, r') |Psi(r')|^2 / (G(r', r) |Psi(r)|^2))
    where F = 2 grad Psi / Psi is the quantum force of the moved particle.
    """
    dt = config.time_step
    drift = config.diffusion * dt
    noise_scale = float(np.sqrt(2.0 * config.diffusion * dt))

    r_old, cache = _initial_positions(config, rng)
    r_new = r_old.copy()
    psi_old = evaluate(r_old, cache, alpha, beta, config)
    stats = _Accumulator()

    for _ in _cycle_iterator(n_cycles, progress, "VMC importance cycles"):
        for i in range(config.n_particles):
            force_old = quantum_force(r_old, cache, i, alpha, beta, config)
            r_new[:, i] = (
                r_old[:, i]
                + drift * force_old
                + noise_scale * rng.normal(size=config.dims)
            )
            cache.update(i, r_new)
            psi_new = evaluate(r_new, cache, alpha, beta, config)

            ratio = 0.0
            if psi_new != 0.0:
                force_new = quantum_force(r_new, cache, i, alpha, beta, config)
                forward = r_new[:, i] - r_old[:, i] - drift * force_old
                backward = r_old[:, i] - r_new[:, i] - drift * force_new
                log_greens = (forward @ forward - backward @ backward) / (4.0 * drift)
                ratio = float(np.exp(log_greens)) * _squared_ratio(psi_new, psi_old)

            accepted = rng.random() <= ratio
            if accepted:
                r_old[:, i] = r_new[:, i]
                psi_old = psi_new
            else:
                r_new[:, i] = r_old[:, i]
                cache.update(i, r_new)

            stats.add(local_energy(r_new, cache, alpha, beta, config), accepted)

    return stats.result(alpha, beta)


def run_mc(
    config: VMCConfig,
    sampler: SamplerParams,
    alpha: float,
    beta: float,
    rng: np.random.Generator,
    progress: bool = False,
) -> RunResult:
    """Run one sampling chain with the backend named by `sampler.method`."""
    if sampler.method == "metropolis":
        return run_metropolis(config, sampler.n_cycles, alpha, beta, rng, progress)
    return run_importance(config, sampler.n_cycles, alpha, beta, rng, progress)

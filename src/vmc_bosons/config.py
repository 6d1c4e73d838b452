"""Structured configuration objects for VMC runs of trapped bosons.

The dataclasses in this module define the canonical runtime inputs for the
energy-estimation engine. Validation is eager and strict so that invalid
parameter choices fail fast at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from math import isfinite
from typing import Literal


class TrapShape(str, Enum):
    """Shape of the external harmonic trap."""

    SYMMETRIC = "symmetric"
    ELLIPTICAL = "elliptical"


class Interaction(str, Enum):
    """Whether the hard-sphere interaction is switched on."""

    ON = "on"
    OFF = "off"


class EnergyMode(str, Enum):
    """Local-energy evaluation strategy."""

    ANALYTIC = "analytic"
    NUMERIC = "numeric"


@dataclass(frozen=True, slots=True)
class VMCConfig:
    """Physical system and numerical controls for one engine instance.

    The Hamiltonian convention is:
        H = sum_k [ -0.5 * laplacian_k + V_ext(r_k) ] + sum_{i<j} V_int(r_ij)
        V_ext(r) = 0.5 * omega_ho^2 * (x^2 + y^2) + 0.5 * omega_z^2 * z^2

    where the axial frequency is only used by a 3-D elliptical trap.

    Attributes:
        trap: Trap shape.
        interaction: Hard-sphere interaction switch.
        energy_mode: Local-energy strategy (closed form or finite difference).
        dims: Spatial dimensionality, one of 1, 2 or 3.
        n_particles: Number of bosons, strictly positive.
        omega_ho: Isotropic (transverse) trap frequency.
        omega_z: Axial trap frequency (elliptical trap only).
        hard_sphere_radius: Hard-core radius `a`, non-negative.
        fd_step: Finite-difference step `h` for the numeric kinetic energy.
        step_length: Metropolis step length.
        time_step: Langevin time step used by the importance sampler.
        diffusion: Diffusion constant `D` of the Fokker-Planck drift.
    """

    trap: TrapShape = TrapShape.SYMMETRIC
    interaction: Interaction = Interaction.OFF
    energy_mode: EnergyMode = EnergyMode.ANALYTIC
    dims: int = 3
    n_particles: int = 10
    omega_ho: float = 1.0
    omega_z: float = 1.0
    hard_sphere_radius: float = 0.0043
    fd_step: float = 1e-3
    step_length: float = 1.0
    time_step: float = 0.01
    diffusion: float = 0.5

    def __post_init__(self) -> None:
        """Validate physical and numerical constraints."""
        if not isinstance(self.trap, TrapShape):
            raise ValueError("trap must be a TrapShape member")
        if not isinstance(self.interaction, Interaction):
            raise ValueError("interaction must be an Interaction member")
        if not isinstance(self.energy_mode, EnergyMode):
            raise ValueError("energy_mode must be an EnergyMode member")
        if isinstance(self.dims, bool) or self.dims not in (1, 2, 3):
            raise ValueError("dims must be 1, 2 or 3")
        if isinstance(self.n_particles, bool) or self.n_particles < 1:
            raise ValueError("n_particles must be an integer >= 1")
        if not isfinite(self.omega_ho) or self.omega_ho <= 0.0:
            raise ValueError("omega_ho must be a finite strictly positive float")
        if not isfinite(self.omega_z) or self.omega_z <= 0.0:
            raise ValueError("omega_z must be a finite strictly positive float")
        if not isfinite(self.hard_sphere_radius) or self.hard_sphere_radius < 0.0:
            raise ValueError("hard_sphere_radius must be a finite non-negative float")
        if not isfinite(self.fd_step) or self.fd_step <= 0.0:
            raise ValueError("fd_step must be a finite strictly positive float")
        if not isfinite(self.step_length) or self.step_length <= 0.0:
            raise ValueError("step_length must be a finite strictly positive float")
        if not isfinite(self.time_step) or self.time_step <= 0.0:
            raise ValueError("time_step must be a finite strictly positive float")
        if not isfinite(self.diffusion) or self.diffusion <= 0.0:
            raise ValueError("diffusion must be a finite strictly positive float")

    @property
    def fd_step_inv2(self) -> float:
        """Return the inverse squared finite-difference step 1 / h^2."""
        return 1.0 / (self.fd_step * self.fd_step)

    @property
    def interacting(self) -> bool:
        """Whether the Jastrow factor and hard-core potential are active."""
        return self.interaction is Interaction.ON

    @property
    def skewed(self) -> bool:
        """Whether the axial coordinate carries the anisotropy factor beta."""
        return self.trap is TrapShape.ELLIPTICAL and self.dims == 3


@dataclass(frozen=True, slots=True)
class SamplerParams:
    """Sampler controls.

    Attributes:
        method: Sampling backend (`"metropolis"` or `"importance"`).
        n_cycles: Number of Monte Carlo cycles; one cycle moves every
            particle once.
        seed: Deterministic random seed.
    """

    method: Literal["metropolis", "importance"] = "metropolis"
    n_cycles: int = 1_000
    seed: int = 12345

    def __post_init__(self) -> None:
        """Validate sampler hyper-parameters."""
        if self.method not in {"metropolis", "importance"}:
            raise ValueError("method must be 'metropolis' or 'importance'")
        if isinstance(self.n_cycles, bool) or self.n_cycles < 1:
            raise ValueError("n_cycles must be >= 1")
        if isinstance(self.seed, bool) or self.seed < 0:
            raise ValueError("seed must be a non-negative integer")


@dataclass(frozen=True, slots=True)
class SweepGrid:
    """Linearly spaced variational grid over (alpha, beta).

    The beta axis collapses to the single value 1 unless a range is given,
    which is the natural choice whenever the anisotropy axis is unused.
    """

    alpha_min: float
    alpha_max: float
    alpha_n: int
    beta_min: float = 1.0
    beta_max: float = 1.0
    beta_n: int = 1

    def __post_init__(self) -> None:
        """Validate grid bounds and point counts."""
        for name in ("alpha_min", "alpha_max", "beta_min", "beta_max"):
            if not isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite")
        if isinstance(self.alpha_n, bool) or self.alpha_n < 1:
            raise ValueError("alpha_n must be an integer >= 1")
        if isinstance(self.beta_n, bool) or self.beta_n < 1:
            raise ValueError("beta_n must be an integer >= 1")
        if self.alpha_max < self.alpha_min:
            raise ValueError("alpha_max must be >= alpha_min")
        if self.beta_max < self.beta_min:
            raise ValueError("beta_max must be >= beta_min")

    @property
    def n_points(self) -> int:
        """Total number of (alpha, beta) grid points."""
        return self.alpha_n * self.beta_n

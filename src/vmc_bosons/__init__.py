"""Public API for Variational Monte Carlo studies of trapped hard-sphere bosons."""

from vmc_bosons.config import (
    EnergyMode,
    Interaction,
    SamplerParams,
    SweepGrid,
    TrapShape,
    VMCConfig,
)
from vmc_bosons.distance import DistanceCache
from vmc_bosons.hamiltonian import (
    OVERLAP_ENERGY,
    analytic_laplacian_sum,
    external_potential,
    interaction_potential,
    local_energy,
    numeric_kinetic_energy,
)
from vmc_bosons.parallel import RankContext, rank_context, run_partitioned_sweep
from vmc_bosons.sampler import RunResult, run_importance, run_mc, run_metropolis
from vmc_bosons.sweep import SweepResult, run_sweep
from vmc_bosons.utils import (
    BASE_SEED,
    make_rng,
    rank_seed,
    utc_timestamp,
)
from vmc_bosons.wavefunction import evaluate, jastrow, one_body, quantum_force

__all__ = [
    "BASE_SEED",
    "DistanceCache",
    "EnergyMode",
    "Interaction",
    "OVERLAP_ENERGY",
    "RankContext",
    "RunResult",
    "SamplerParams",
    "SweepGrid",
    "SweepResult",
    "TrapShape",
    "VMCConfig",
    "analytic_laplacian_sum",
    "evaluate",
    "external_potential",
    "interaction_potential",
    "jastrow",
    "local_energy",
    "make_rng",
    "numeric_kinetic_energy",
    "one_body",
    "quantum_force",
    "rank_context",
    "rank_seed",
    "run_importance",
    "run_mc",
    "run_metropolis",
    "run_partitioned_sweep",
    "run_sweep",
    "utc_timestamp",
]

__version__ = "0.1.0"

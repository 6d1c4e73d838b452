"""Gaussian x Jastrow trial wavefunction for hard-sphere bosons.

The trial state is
    Psi(R) = prod_k g(r_k) * prod_{i<j} f(r_ij)
    g(r)   = exp(-alpha * (x^2 + y^2 + beta * z^2))
    f(r)   = 1 - a / r   for r > a, and 0 otherwise
where the beta weight on the axial coordinate only applies in a 3-D
elliptical trap, and f is identically 1 when the interaction is off.
"""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from vmc_bosons.config import VMCConfig
from vmc_bosons.distance import DistanceCache

FloatArray = NDArray[np.float64]


def axial_weights(beta: float, config: VMCConfig) -> FloatArray:
    """Per-dimension weights applied to squared coordinates in g(r)."""
    weights = np.ones(config.dims, dtype=np.float64)
    if config.skewed:
        weights[2] = beta
    return weights


def skewed_coordinates(
    positions: FloatArray,
    beta: float,
    config: VMCConfig,
) -> FloatArray:
    """Return positions with the axial coordinate scaled by beta.

    Outside a 3-D elliptical trap this is a copy of `positions`.
    """
    return positions * axial_weights(beta, config)[:, np.newaxis]


def one_body(
    positions: FloatArray,
    alpha: float,
    beta: float,
    config: VMCConfig,
) -> float:
    """Evaluate the Gaussian factor exp(-alpha * sum_k r_k^2)."""
    weights = axial_weights(beta, config)
    exponent = float(np.sum(weights[:, np.newaxis] * positions**2))
    return float(np.exp(-alpha * exponent))


def jastrow(cache: DistanceCache, config: VMCConfig) -> float:
    """Evaluate prod_{i<j} (1 - a / r_ij), exactly zero on any overlap."""
    if not config.interacting or config.n_particles < 2:
        return 1.0
    a = config.hard_sphere_radius
    r = cache.pairs()
    if np.any(r <= a):
        return 0.0
    return float(np.prod(1.0 - a / r))


def evaluate(
    positions: FloatArray,
    cache: DistanceCache,
    alpha: float,
    beta: float,
    config: VMCConfig,
) -> float:
    """Evaluate the full trial wavefunction at the current configuration.

    The distance cache must already reflect `positions`.
    """
    return one_body(positions, alpha, beta, config) * jastrow(cache, config)


def jastrow_gradient_terms(
    positions: FloatArray,
    cache: DistanceCache,
    particle: int,
    config: VMCConfig,
) -> tuple[FloatArray, FloatArray, FloatArray]:
    """Return separations, distances and u'(r)/r for every j != particle.

    With u(r) = ln(1 - a/r) the pair gradient is
        grad_k u(r_kj) = r_kj * a / (r_kj^2 * (r_kj - a))
    so the third array holds the scalar weights a / (r^2 (r - a)).
    """
    others = np.arange(config.n_particles) != particle
    r_kj = positions[:, particle : particle + 1] - positions[:, others]
    r_norm = cache.row(particle)[others]
    a = config.hard_sphere_radius
    weights = a / (r_norm**2 * (r_norm - a))
    return r_kj, r_norm, weights


def quantum_force(
    positions: FloatArray,
    cache: DistanceCache,
    particle: int,
    alpha: float,
    beta: float,
    config: VMCConfig,
) -> FloatArray:
    """Return the drift F_k = 2 * grad_k Psi / Psi for one particle."""
    r_k = skewed_coordinates(positions[:, particle : particle + 1], beta, config)
    grad = -2.0 * alpha * r_k[:, 0]
    if config.interacting and config.n_particles > 1:
        r_kj, _, weights = jastrow_gradient_terms(positions, cache, particle, config)
        grad = grad + r_kj @ weights
    return 2.0 * grad

"""Trap and hard-core potentials and the local-energy estimator.

Units are hbar = m = 1. For a configuration R the local energy is
    E_L(R) = -0.5 * laplacian Psi(R) / Psi(R) + V_ext(R) + V_int(R)

Two interchangeable strategies evaluate the kinetic part:
    NUMERIC  central second differences of Psi with step h
    ANALYTIC closed-form log-derivatives of the Gaussian x Jastrow ansatz
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import numpy as np
from numpy.typing import NDArray

from vmc_bosons.config import EnergyMode, VMCConfig
from vmc_bosons.distance import DistanceCache
from vmc_bosons.wavefunction import (
    evaluate,
    jastrow_gradient_terms,
    skewed_coordinates,
)

FloatArray = NDArray[np.float64]

# Finite stand-in for an infinite hard-core repulsion.
OVERLAP_ENERGY = float(np.finfo(np.float64).max)


def external_potential(positions: FloatArray, config: VMCConfig) -> float:
    """Evaluate the harmonic trap energy summed over all particles.

    Symmetric trap:  0.5 * omega_ho^2 * sum r^2
    3-D elliptical:  0.5 * (omega_ho^2 * (x^2 + y^2) + omega_z^2 * z^2)
    """
    omega2 = np.full(config.dims, config.omega_ho**2, dtype=np.float64)
    if config.skewed:
        omega2[2] = config.omega_z**2
    return 0.5 * float(np.sum(omega2[:, np.newaxis] * positions**2))


def interaction_potential(cache: DistanceCache, config: VMCConfig) -> float:
    """Return 0, or `OVERLAP_ENERGY` if any pair sits inside the hard core."""
    if not config.interacting or config.n_particles < 2:
        return 0.0
    if cache.min_distance() <= config.hard_sphere_radius:
        return OVERLAP_ENERGY
    return 0.0


@contextmanager
def displaced(
    positions: FloatArray,
    cache: DistanceCache,
    particle: int,
    dim: int,
    value: float,
    config: VMCConfig,
) -> Iterator[None]:
    """Temporarily set one coordinate to `value`, restoring the saved original.

    The distance row of `particle` follows the coordinate in both directions
    when the interaction is on.
    """
    saved = positions[dim, particle]
    positions[dim, particle] = value
    if config.interacting:
        cache.update(particle, positions)
    try:
        yield
    finally:
        positions[dim, particle] = saved
        if config.interacting:
            cache.update(particle, positions)


def numeric_kinetic_energy(
    positions: FloatArray,
    cache: DistanceCache,
    alpha: float,
    beta: float,
    config: VMCConfig,
) -> float:
    """Kinetic energy from central second differences of Psi.

        T = -0.5 / h^2 * sum_{k,d} [Psi(R + h e) + Psi(R - h e) - 2 Psi(R)] / Psi(R)
    """
    h = config.fd_step
    psi = evaluate(positions, cache, alpha, beta, config)
    second_diff = 0.0
    for k in range(config.n_particles):
        for d in range(config.dims):
            origin = positions[d, k]
            with displaced(positions, cache, k, d, origin + h, config):
                psi_plus = evaluate(positions, cache, alpha, beta, config)
            with displaced(positions, cache, k, d, origin - h, config):
                psi_minus = evaluate(positions, cache, alpha, beta, config)
            second_diff += psi_plus + psi_minus - 2.0 * psi
    return -0.5 * config.fd_step_inv2 * second_diff / psi


def analytic_laplacian_sum(
    positions: FloatArray,
    cache: DistanceCache,
    alpha: float,
    beta: float,
    config: VMCConfig,
) -> float:
    """Return sum_k laplacian_k Psi / Psi in closed form.

    Per particle k, with skewed coordinate r~_k (axial component times beta
    in a 3-D elliptical trap), u(r) = ln(1 - a/r) and r_kj = r_k - r_j:

        one-body    2 alpha (2 alpha |r~_k|^2 - d_eff)
        two-body    sum_{j != k} [u''(r_kj) + (dims - 1) u'(r_kj) / r_kj]
        cross       -4 alpha r~_k . sum_{j != k} r_kj u'(r_kj) / r_kj
        three-body  sum_{i != k} sum_{j != k} (r_ki . r_kj) u'(r_ki) u'(r_kj) / (r_ki r_kj)

    where d_eff is 2 + beta for the skewed trap and `dims` otherwise. The
    interaction terms are skipped when the interaction is off. The double
    sum runs over the full index range with only i == k and j == k removed,
    so the diagonal i == j is included.
    """
    skewed = skewed_coordinates(positions, beta, config)
    d_eff = 2.0 + beta if config.skewed else float(config.dims)
    a = config.hard_sphere_radius
    interacting = config.interacting and config.n_particles > 1

    total = 0.0
    for k in range(config.n_particles):
        r_k = skewed[:, k]
        total += 2.0 * alpha * (2.0 * alpha * float(r_k @ r_k) - d_eff)

        if not interacting:
            continue

        # Columns of r_kj and entries of weights run over j != k.
        r_kj, r, weights = jastrow_gradient_terms(positions, cache, k, config)
        u_second = a * (a - 2.0 * r) / (r**2 * (r - a) ** 2)
        total += float(np.sum(u_second + (config.dims - 1) * weights))

        gradient = r_kj @ weights
        total -= 4.0 * alpha * float(r_k @ gradient)

        gram = r_kj.T @ r_kj
        total += float(weights @ gram @ weights)
    return total


def local_energy(
    positions: FloatArray,
    cache: DistanceCache,
    alpha: float,
    beta: float,
    config: VMCConfig,
) -> float:
    """Evaluate the local energy with the configured strategy.

    A hard-core overlap short-circuits to `OVERLAP_ENERGY` so no NaN from
    a vanishing Psi reaches the caller.
    """
    v_int = interaction_potential(cache, config)
    if v_int == OVERLAP_ENERGY:
        return OVERLAP_ENERGY
    v_ext = external_potential(positions, config)

    if config.energy_mode is EnergyMode.NUMERIC:
        kinetic = numeric_kinetic_energy(positions, cache, alpha, beta, config)
        return kinetic + v_ext + v_int

    laplacian = analytic_laplacian_sum(positions, cache, alpha, beta, config)
    return v_ext + v_int - 0.5 * laplacian

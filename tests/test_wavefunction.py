"""Tests for the Gaussian x Jastrow trial wavefunction."""

from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest

from vmc_bosons import (
    DistanceCache,
    Interaction,
    TrapShape,
    VMCConfig,
    evaluate,
    jastrow,
    one_body,
    quantum_force,
)


def _cache_for(positions: np.ndarray) -> DistanceCache:
    cache = DistanceCache(positions.shape[1])
    cache.initialize(positions)
    return cache


@pytest.mark.parametrize("offset", [0.0, -1e-9, -0.001])
def test_jastrow_vanishes_at_or_inside_the_hard_core(offset: float) -> None:
    """Any pair with r_ij <= a forces the two-body factor to exactly zero."""
    a = 0.05
    config = VMCConfig(interaction=Interaction.ON, dims=3, n_particles=3, hard_sphere_radius=a)
    positions = np.array(
        [[0.0, a + offset, 1.0], [0.0, 0.0, 1.0], [0.0, 0.0, 1.0]],
        dtype=np.float64,
    )
    cache = _cache_for(positions)

    assert jastrow(cache, config) == 0.0
    assert evaluate(positions, cache, 0.5, 1.0, config) == 0.0


def test_jastrow_matches_pair_product_outside_core(rng: np.random.Generator) -> None:
    """Outside the core the factor is prod (1 - a / r_ij)."""
    config = VMCConfig(interaction=Interaction.ON, dims=2, n_particles=4, hard_sphere_radius=0.1)
    positions = rng.uniform(-2.0, 2.0, size=(2, 4))
    cache = _cache_for(positions)

    expected = 1.0
    for i in range(4):
        for j in range(i + 1, 4):
            expected *= 1.0 - 0.1 / np.linalg.norm(positions[:, i] - positions[:, j])

    assert np.isclose(jastrow(cache, config), expected, rtol=1e-13, atol=0.0)


def test_jastrow_is_one_without_interaction() -> None:
    """With the interaction off overlapping particles are allowed."""
    config = VMCConfig(interaction=Interaction.OFF, dims=1, n_particles=2)
    positions = np.zeros((1, 2), dtype=np.float64)
    assert jastrow(_cache_for(positions), config) == 1.0


def test_one_body_is_gaussian_in_squared_coordinates() -> None:
    """g(R) = exp(-alpha * sum r^2) for a symmetric trap."""
    config = VMCConfig(dims=2, n_particles=2)
    positions = np.array([[0.3, -0.4], [0.1, 0.2]], dtype=np.float64)
    r2 = 0.09 + 0.16 + 0.01 + 0.04

    assert np.isclose(one_body(positions, 0.7, 3.0, config), np.exp(-0.7 * r2))


def test_one_body_weights_axial_coordinate_in_elliptical_trap() -> None:
    """In a 3-D elliptical trap the z^2 term carries beta."""
    config = VMCConfig(trap=TrapShape.ELLIPTICAL, dims=3, n_particles=1)
    positions = np.array([[0.2], [0.1], [0.5]], dtype=np.float64)
    expected = np.exp(-0.4 * (0.04 + 0.01 + 2.5 * 0.25))

    assert np.isclose(one_body(positions, 0.4, 2.5, config), expected)
    symmetric = replace(config, trap=TrapShape.SYMMETRIC)
    assert np.isclose(
        one_body(positions, 0.4, 2.5, symmetric),
        np.exp(-0.4 * 0.30),
    )


def test_quantum_force_matches_log_derivative_finite_difference() -> None:
    """F_k = 2 grad_k ln Psi, checked against central differences."""
    config = VMCConfig(
        trap=TrapShape.ELLIPTICAL,
        interaction=Interaction.ON,
        dims=3,
        n_particles=3,
        hard_sphere_radius=0.1,
    )
    positions = np.array(
        [[0.9, -0.5, 0.1], [0.0, 0.6, -0.7], [0.0, 0.2, 0.5]],
        dtype=np.float64,
    )
    alpha, beta, particle = 0.45, 1.7, 1
    cache = _cache_for(positions)
    force = quantum_force(positions, cache, particle, alpha, beta, config)

    eps = 1e-6
    expected = np.empty(3, dtype=np.float64)
    for d in range(3):
        plus = positions.copy()
        minus = positions.copy()
        plus[d, particle] += eps
        minus[d, particle] -= eps
        log_plus = np.log(evaluate(plus, _cache_for(plus), alpha, beta, config))
        log_minus = np.log(evaluate(minus, _cache_for(minus), alpha, beta, config))
        expected[d] = 2.0 * (log_plus - log_minus) / (2.0 * eps)

    assert np.allclose(force, expected, rtol=1e-6, atol=1e-7)

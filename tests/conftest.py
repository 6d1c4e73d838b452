"""Shared pytest fixtures and test configuration."""

from __future__ import annotations

import numpy as np
import pytest

from vmc_bosons import EnergyMode, Interaction, TrapShape, VMCConfig


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a deterministic RNG for repeatable numeric tests."""
    return np.random.Generator(np.random.PCG64(20240207))


@pytest.fixture
def free_config() -> VMCConfig:
    """Small non-interacting symmetric trap used across fast unit tests."""
    return VMCConfig(
        trap=TrapShape.SYMMETRIC,
        interaction=Interaction.OFF,
        energy_mode=EnergyMode.ANALYTIC,
        dims=3,
        n_particles=4,
    )


@pytest.fixture
def interacting_config() -> VMCConfig:
    """Small hard-sphere system with a realistic core radius."""
    return VMCConfig(
        trap=TrapShape.SYMMETRIC,
        interaction=Interaction.ON,
        energy_mode=EnergyMode.ANALYTIC,
        dims=3,
        n_particles=5,
        hard_sphere_radius=0.0043,
    )

"""Tests for the incremental pairwise-distance table."""

from __future__ import annotations

import numpy as np
import pytest

from vmc_bosons import DistanceCache


def _brute_force_distances(positions: np.ndarray) -> np.ndarray:
    """Reference O(n^2) Euclidean distances, full symmetric matrix."""
    n = positions.shape[1]
    out = np.zeros((n, n), dtype=np.float64)
    for i in range(n):
        for j in range(n):
            out[i, j] = np.linalg.norm(positions[:, i] - positions[:, j])
    return out


def test_lookups_are_symmetric_and_match_euclidean_distance(
    rng: np.random.Generator,
) -> None:
    """distance(i, j) == distance(j, i) == |r_i - r_j| for every pair."""
    positions = rng.uniform(-1.0, 1.0, size=(3, 6))
    cache = DistanceCache(6)
    cache.initialize(positions)
    reference = _brute_force_distances(positions)

    for i in range(6):
        for j in range(6):
            assert cache.distance(i, j) == cache.distance(j, i)
            assert np.isclose(cache.distance(i, j), reference[i, j], rtol=0.0, atol=1e-14)


def test_only_upper_triangle_is_populated(rng: np.random.Generator) -> None:
    """Entries on and below the diagonal stay zero."""
    positions = rng.uniform(-1.0, 1.0, size=(2, 5))
    cache = DistanceCache(5)
    cache.initialize(positions)

    assert np.all(np.tril(cache.table) == 0.0)
    assert cache.pairs().shape == (10,)


@pytest.mark.parametrize("dims", [1, 2, 3])
def test_update_after_move_matches_full_initialize(
    rng: np.random.Generator,
    dims: int,
) -> None:
    """Updating the moved particle must reproduce a from-scratch table."""
    n = 7
    positions = rng.uniform(-1.0, 1.0, size=(dims, n))
    cache = DistanceCache(n)
    cache.initialize(positions)

    for moved in range(n):
        positions[:, moved] += rng.uniform(-0.5, 0.5, size=dims)
        cache.update(moved, positions)

        fresh = DistanceCache(n)
        fresh.initialize(positions)
        np.testing.assert_allclose(cache.table, fresh.table, rtol=0.0, atol=1e-14)


def test_revert_restores_previous_table(rng: np.random.Generator) -> None:
    """Moving a particle and moving it back restores the cached distances."""
    positions = rng.uniform(-1.0, 1.0, size=(3, 4))
    cache = DistanceCache(4)
    cache.initialize(positions)
    before = cache.table.copy()

    saved = positions[:, 2].copy()
    positions[:, 2] += 0.3
    cache.update(2, positions)
    positions[:, 2] = saved
    cache.update(2, positions)

    np.testing.assert_allclose(cache.table, before, rtol=0.0, atol=1e-14)


def test_row_includes_both_halves_of_the_table(rng: np.random.Generator) -> None:
    """row(k) combines column entries (j < k) and row entries (j > k)."""
    positions = rng.uniform(-1.0, 1.0, size=(3, 5))
    cache = DistanceCache(5)
    cache.initialize(positions)

    row = cache.row(2)
    expected = [cache.distance(2, j) for j in range(5)]
    assert np.allclose(row, expected, rtol=0.0, atol=0.0)


def test_invalid_shapes_and_indices_raise() -> None:
    """Mismatched particle counts and bad indices are rejected."""
    cache = DistanceCache(3)
    with pytest.raises(ValueError, match="shape"):
        cache.initialize(np.zeros((3, 4)))
    with pytest.raises(ValueError, match="out of range"):
        cache.update(3, np.zeros((3, 3)))
    with pytest.raises(ValueError):
        DistanceCache(0)


def test_single_particle_has_no_pairs() -> None:
    """A one-particle table has no pairs and an infinite minimum distance."""
    cache = DistanceCache(1)
    cache.initialize(np.zeros((3, 1)))
    assert cache.pairs().size == 0
    assert cache.min_distance() == float("inf")

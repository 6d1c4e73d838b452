"""Incrementally maintained pairwise-distance table."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

FloatArray = NDArray[np.float64]


class DistanceCache:
    """Upper-triangular table of pairwise particle distances.

    Only entries `(i, j)` with `i < j` are populated; `distance` normalizes
    its arguments so lookups are symmetric. The table always reflects the
    positions most recently passed to `initialize` or `update`.
    """

    __slots__ = ("n_particles", "table")

    def __init__(self, n_particles: int) -> None:
        if n_particles < 1:
            raise ValueError("n_particles must be >= 1")
        self.n_particles = n_particles
        self.table: FloatArray = np.zeros((n_particles, n_particles), dtype=np.float64)

    def _check(self, positions: FloatArray) -> None:
        if positions.ndim != 2 or positions.shape[1] != self.n_particles:
            raise ValueError("positions must have shape (dims, n_particles)")

    def initialize(self, positions: FloatArray) -> None:
        """Fill every pair `i < j` from scratch in O(n^2)."""
        self._check(positions)
        diffs = positions[:, :, np.newaxis] - positions[:, np.newaxis, :]
        full = np.sqrt(np.sum(diffs**2, axis=0))
        self.table[:] = np.triu(full, k=1)

    def update(self, moved: int, positions: FloatArray) -> None:
        """Recompute the row and column of `moved` against all others in O(n).

        Row entries cover pairs `(moved, other)` with `other > moved`, column
        entries pairs `(other, moved)` with `other < moved`.
        """
        self._check(positions)
        if not 0 <= moved < self.n_particles:
            raise ValueError("moved particle index out of range")
        diffs = positions - positions[:, moved : moved + 1]
        norms = np.sqrt(np.sum(diffs**2, axis=0))
        self.table[moved, moved + 1 :] = norms[moved + 1 :]
        self.table[:moved, moved] = norms[:moved]

    def distance(self, i: int, j: int) -> float:
        """Return the cached distance between particles `i` and `j`."""
        if i == j:
            return 0.0
        return float(self.table[min(i, j), max(i, j)])

    def row(self, k: int) -> FloatArray:
        """Return distances from particle `k` to every particle (0 at `k`)."""
        return np.concatenate((self.table[:k, k], [0.0], self.table[k, k + 1 :]))

    def pairs(self) -> FloatArray:
        """Return the populated `i < j` distances as a flat array."""
        upper = np.triu_indices(self.n_particles, k=1)
        return self.table[upper]

    def min_distance(self) -> float:
        """Smallest pairwise distance, or `inf` for a single particle."""
        if self.n_particles < 2:
            return float("inf")
        return float(np.min(self.pairs()))

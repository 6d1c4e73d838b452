"""Shared utility helpers for seeding and timing."""

from __future__ import annotations

from datetime import datetime, timezone
from time import perf_counter

import numpy as np

BASE_SEED = 12345


def rank_seed(rank: int, base_seed: int = BASE_SEED) -> int:
    """Return the per-rank seed `base_seed + rank`."""
    if isinstance(rank, bool) or rank < 0:
        raise ValueError("rank must be a non-negative integer")
    if isinstance(base_seed, bool) or base_seed < 0:
        raise ValueError("base_seed must be a non-negative integer")
    return base_seed + rank


def make_rng(seed: int) -> np.random.Generator:
    """Build a NumPy RNG backed by PCG64."""
    bit_generator = np.random.PCG64(seed)
    return np.random.Generator(bit_generator)


def utc_timestamp() -> str:
    """Return a UTC ISO-8601 timestamp for metadata and logging."""
    return datetime.now(timezone.utc).isoformat()


def elapsed_ms(start: float) -> int:
    """Whole milliseconds elapsed since a `time.perf_counter()` reading."""
    return int((perf_counter() - start) * 1000.0)

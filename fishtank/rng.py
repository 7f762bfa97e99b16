"""
Deterministic RNG utilities for the fish tank simulation.

All randomness uses numpy.random.Generator(PCG64) so that a run can be
replayed exactly from its seed.
"""

import numpy as np
from typing import Optional


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create the random source threaded through ticks and commands.

    Args:
        seed: 64-bit seed, or None for OS entropy

    Returns:
        numpy Generator backed by PCG64
    """
    return np.random.Generator(np.random.PCG64(seed))


def pick_name(rng: np.random.Generator, names) -> str:
    """Pick a display name from a pool (names repeat freely)"""
    return names[int(rng.integers(0, len(names)))]

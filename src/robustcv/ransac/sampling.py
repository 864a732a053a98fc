"""
Random sampling of minimal subsets.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .types import IndexArray


def make_rng(seed: Optional[int] = None, rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """
    Return `rng` if given, else a fresh generator seeded with `seed`.
    """
    if rng is not None:
        return rng
    return np.random.default_rng(seed)


def uniform_sample(size: int, n: int, rng: np.random.Generator) -> IndexArray:
    """
    Draw `size` distinct indices uniformly from [0, n), without replacement.
    """
    if size < 0:
        raise ValueError(f"size must be >= 0, got {size}")
    if size > n:
        raise ValueError(f"Cannot draw {size} distinct indices from {n}")

    return rng.choice(n, size=size, replace=False).astype(np.intp)

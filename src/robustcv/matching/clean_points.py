"""
Utilities for cleaning correspondence sets before robust estimation.

Remove:
- NaNs/Infs
- duplicate matches (frequent with descriptor matching), which would let
  RANSAC count the same evidence several times
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt

from ..ransac.types import BoolArray, IndexArray, Points2D, as_points2d


def _as_pair(x1: npt.ArrayLike, x2: npt.ArrayLike) -> tuple[Points2D, Points2D]:
    x1 = as_points2d(x1, "x1")
    x2 = as_points2d(x2, "x2")
    if x1.shape != x2.shape:
        raise ValueError(f"Expected x1/x2 shape (N,2) matching; got {x1.shape} vs {x2.shape}")
    return x1, x2


def clean_points(
    x1: npt.ArrayLike,
    x2: npt.ArrayLike,
) -> tuple[Points2D, Points2D, BoolArray]:
    """
    Keep correspondences whose four coordinates are finite.

    Returns filtered x1, x2 and the boolean mask over the input.
    """
    x1, x2 = _as_pair(x1, x2)

    mask = np.isfinite(x1).all(axis=1) & np.isfinite(x2).all(axis=1)
    return x1[mask], x2[mask], mask


def remove_duplicates(
    x1: npt.ArrayLike,
    x2: npt.ArrayLike,
) -> tuple[Points2D, Points2D, IndexArray]:
    """
    Drop repeated (x1, y1, x2, y2) rows, keeping the first occurrence.

    Returns filtered x1, x2 and the kept indices (increasing).
    """
    x1, x2 = _as_pair(x1, x2)
    if x1.shape[0] == 0:
        return x1, x2, np.zeros((0,), dtype=np.intp)

    rows = np.hstack([x1, x2])
    _, first = np.unique(rows, axis=0, return_index=True)
    kept = np.sort(first).astype(np.intp)
    return x1[kept], x2[kept], kept

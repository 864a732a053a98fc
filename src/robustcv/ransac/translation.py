"""
Translation-only motion model.

Assume every correspondence moves by the same displacement:
    pts1 ≈ pts0 + t
    t = (tx, ty)

Only 2 degrees of freedom, so a single correspondence is a minimal sample.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .types import Points2D, Mat3x3


def make_translation(tx: float, ty: float) -> Mat3x3:
    """
    3x3 homogeneous matrix of a pure translation:

        [ 1   0   tx ]
        [ 0   1   ty ]
        [ 0   0    1 ]
    """
    T = np.eye(3, dtype=np.float64)
    T[0, 2] = tx
    T[1, 2] = ty
    return T


def fit_translation(pts0: Points2D, pts1: Points2D) -> Optional[Mat3x3]:
    """
    Least-squares translation: t = mean(pts1 - pts0).

    With one correspondence this is the exact minimal solution.
    """
    if pts0.shape != pts1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {pts0.shape} vs {pts1.shape}")
    if pts0.shape[0] < 1:
        return None

    displacement = np.mean(pts1 - pts0, axis=0)
    if not np.isfinite(displacement).all():
        return None
    return make_translation(float(displacement[0]), float(displacement[1]))

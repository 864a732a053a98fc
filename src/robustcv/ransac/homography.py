"""
Homography model (planar projective map).

    [x', y', 1]^T  ~  H @ [x, y, 1]^T

H has 8 degrees of freedom (9 entries up to scale). Each correspondence gives
2 linear equations (Direct Linear Transform):

    [-x, -y, -1,  0,  0,  0, x'x, x'y, x'] . h = 0
    [ 0,  0,  0, -x, -y, -1, y'x, y'y, y'] . h = 0

so 4 correspondences determine H. With more, h is the least-squares null
vector of A (last right singular vector).
"""

from __future__ import annotations

from itertools import combinations
from typing import Optional

import numpy as np

from .affine import is_degenerate_triplet
from .types import Points2D, Mat3x3, is_valid_mat3x3


def _dlt_system(pts0: Points2D, pts1: Points2D) -> np.ndarray:
    n = pts0.shape[0]
    x, y = pts0[:, 0], pts0[:, 1]
    u, v = pts1[:, 0], pts1[:, 1]
    zeros = np.zeros(n)
    ones = np.ones(n)

    A = np.zeros((2 * n, 9), dtype=np.float64)
    A[0::2] = np.stack([-x, -y, -ones, zeros, zeros, zeros, u * x, u * y, u], axis=1)
    A[1::2] = np.stack([zeros, zeros, zeros, -x, -y, -ones, v * x, v * y, v], axis=1)
    return A


def has_collinear_triplet(pts: Points2D, eps_area: float = 1e-9) -> bool:
    """
    True if any 3 of the points are (nearly) collinear.
    """
    return any(
        is_degenerate_triplet(pts[list(tri)], eps_area)
        for tri in combinations(range(pts.shape[0]), 3)
    )


def fit_homography(pts0: Points2D, pts1: Points2D) -> Optional[Mat3x3]:
    """
    DLT homography from N >= 4 correspondences.

    Returns H scaled to unit Frobenius norm, or None if degenerate.
    """
    if pts0.shape != pts1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {pts0.shape} vs {pts1.shape}")
    if pts0.shape[0] < 4:
        return None

    # Minimal case: 3 collinear points make H singular
    if pts0.shape[0] == 4 and (has_collinear_triplet(pts0) or has_collinear_triplet(pts1)):
        return None

    A = _dlt_system(pts0, pts1)
    try:
        # 8 independent constraints needed
        if np.linalg.matrix_rank(A) < 8:
            return None
        _, _, Vt = np.linalg.svd(A)
    except np.linalg.LinAlgError:
        return None

    H = Vt[-1].reshape(3, 3)
    H = H / np.linalg.norm(H)
    if not is_valid_mat3x3(H):
        return None
    return H

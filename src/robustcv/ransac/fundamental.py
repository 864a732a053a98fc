"""
Fundamental matrix solvers.

Two views of a rigid scene satisfy the epipolar constraint

    x2^T F x1 = 0,   x = [x, y, 1]^T

F is 3x3, rank 2, defined up to scale (7 degrees of freedom). Written as a
linear system in the 9 entries f of F (row-major), each correspondence gives
one row:

    [x2*x1, x2*y1, x2, y2*x1, y2*y1, y2, x1, y1, 1] . f = 0

- 8 or more correspondences: f is the least-squares null vector, then rank 2
  is enforced (linear 8-point algorithm)
- 7 correspondences: the null space is 2D, F = a F1 + (1-a) F2, and
  det(F) = 0 is a cubic in a with 1 or 3 real roots (7-point algorithm)
"""

from __future__ import annotations

import numpy as np

from .types import Points2D, Mat3x3, FloatArray, is_valid_mat3x3

# Imaginary part below which a cubic root counts as real (relative to its modulus)
_REAL_ROOT_TOL = 1e-8


def _epipolar_system(pts0: Points2D, pts1: Points2D) -> np.ndarray:
    x1, y1 = pts0[:, 0], pts0[:, 1]
    x2, y2 = pts1[:, 0], pts1[:, 1]
    ones = np.ones(pts0.shape[0])
    return np.stack([x2 * x1, x2 * y1, x2, y2 * x1, y2 * y1, y2, x1, y1, ones], axis=1)


def _unit_norm(F: Mat3x3) -> Mat3x3:
    return F / np.linalg.norm(F)


def fit_fundamental_seven_point(pts0: Points2D, pts1: Points2D) -> list[Mat3x3]:
    """
    Minimal 7-point solver. Returns 0 to 3 candidate matrices (unit norm).
    """
    if pts0.shape != (7, 2) or pts1.shape != (7, 2):
        raise ValueError(f"7-point solver expects (7,2) inputs, got {pts0.shape} and {pts1.shape}")

    A = _epipolar_system(pts0, pts1)
    try:
        if np.linalg.matrix_rank(A) < 7:
            return []
        _, _, Vt = np.linalg.svd(A)
    except np.linalg.LinAlgError:
        return []

    F1 = Vt[7].reshape(3, 3)
    F2 = Vt[8].reshape(3, 3)

    # det(a*F1 + (1-a)*F2) is a cubic in a: interpolate it from 4 values
    a_s = np.array([0.0, 1.0, -1.0, 2.0])
    dets = [np.linalg.det(a * F1 + (1.0 - a) * F2) for a in a_s]
    coeffs = np.polyfit(a_s, dets, 3)

    models: list[Mat3x3] = []
    for root in np.roots(coeffs):
        if abs(root.imag) > _REAL_ROOT_TOL * max(1.0, abs(root)):
            continue
        a = float(root.real)
        F = a * F1 + (1.0 - a) * F2
        norm = np.linalg.norm(F)
        if not np.isfinite(norm) or norm <= 0.0:
            continue
        F = F / norm
        if is_valid_mat3x3(F):
            models.append(F)
    return models


def fit_fundamental_eight_point(pts0: Points2D, pts1: Points2D) -> list[Mat3x3]:
    """
    Linear 8-point solver on N >= 8 correspondences, rank 2 enforced.
    Returns [F] or [] when degenerate.
    """
    if pts0.shape != pts1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {pts0.shape} vs {pts1.shape}")
    if pts0.shape[0] < 8:
        return []

    A = _epipolar_system(pts0, pts1)
    try:
        if np.linalg.matrix_rank(A) < 8:
            return []
        _, _, Vt = np.linalg.svd(A)
        F = Vt[-1].reshape(3, 3)

        # Closest rank-2 matrix in Frobenius norm
        U, S, Vt_f = np.linalg.svd(F)
    except np.linalg.LinAlgError:
        return []
    S[2] = 0.0
    F = _unit_norm(U @ np.diag(S) @ Vt_f)

    if not is_valid_mat3x3(F):
        return []
    return [F]


def squared_epipolar_errors(F: Mat3x3, pts0: Points2D, pts1: Points2D, *, symmetric: bool) -> FloatArray:
    """
    Squared distance of pts1[i] to the epipolar line F x1[i].

    symmetric=True takes the max with the distance of pts0[i] to F^T x2[i].
    Degenerate lines (a = b = 0) give inf.
    """
    ones = np.ones((pts0.shape[0], 1))
    x1h = np.hstack([pts0, ones])
    x2h = np.hstack([pts1, ones])

    lines2 = x1h @ F.T      # F x1, one line per row
    d = np.sum(lines2 * x2h, axis=1)

    with np.errstate(divide="ignore", invalid="ignore"):
        err = d * d / (lines2[:, 0] ** 2 + lines2[:, 1] ** 2)
        if symmetric:
            lines1 = x2h @ F    # F^T x2
            err = np.maximum(err, d * d / (lines1[:, 0] ** 2 + lines1[:, 1] ** 2))

    return np.where(np.isfinite(err), err, np.inf)

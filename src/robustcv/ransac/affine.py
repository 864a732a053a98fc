"""
Affine model utilities (3x3 homogeneous form).

We estimate an affine transform T such that:

    [x', y', 1]^T  ≈  T @ [x, y, 1]^T

where:

    T = [[a, b, tx],
         [c, d, ty],
         [0, 0,  1]]

Unknowns are 6 parameters: a, b, tx, c, d, ty.

Also hosts apply_T / transfer residuals shared by every point-to-point
model (translation, affine, homography).
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from .types import Points2D, PointsHomog, Mat3x3, FloatArray, as_homogeneous, is_valid_mat3x3


# ---------- Degeneracy Check Helpers ----------
def _triangle_area(p1: np.ndarray, p2: np.ndarray, p3: np.ndarray) -> float:
    """
    Return 2x the triangle area formed by (p1, p2, p3):

        area2 = |(p2 - p1) x (p3 - p1)|

    If area2 is near 0, the three points are collinear.
    """
    u = p2 - p1
    v = p3 - p1
    return float(abs(u[0] * v[1] - u[1] * v[0]))


def is_degenerate_triplet(pts: Points2D, eps_area: float = 1e-9) -> bool:
    """
    Check whether 3 points (shape (3,2)) are nearly collinear.

    eps_area is a threshold on 2x area, in normalized units (image ~ unit square).
    """
    if pts.shape != (3, 2):
        raise ValueError(f"Expected (3,2) triplet, got {pts.shape}")
    return _triangle_area(pts[0], pts[1], pts[2]) < eps_area


# ---------- Affine Fitting ----------
def _theta_to_mat3x3(theta: np.ndarray) -> Mat3x3:
    """
    Convert parameter vector theta = [a, b, tx, c, d, ty] into a 3x3 affine matrix.
    """
    a, b, tx, c, d, ty = map(float, theta.tolist())
    return np.array(
        [
            [a, b, tx],
            [c, d, ty],
            [0.0, 0.0, 1.0],
        ],
        dtype=np.float64,
    )


def _affine_system(pts0: Points2D, pts1: Points2D) -> tuple[np.ndarray, np.ndarray]:
    # For each correspondence (x, y) -> (x', y'):
    #   x' = a*x + b*y + tx
    #   y' = c*x + d*y + ty
    n = pts0.shape[0]
    A = np.zeros((2 * n, 6), dtype=np.float64)
    b_vec = np.zeros((2 * n,), dtype=np.float64)

    A[0::2, 0:2] = pts0
    A[0::2, 2] = 1.0
    A[1::2, 3:5] = pts0
    A[1::2, 5] = 1.0
    b_vec[0::2] = pts1[:, 0]
    b_vec[1::2] = pts1[:, 1]
    return A, b_vec


def fit_affine_minimal(pts0: Points2D, pts1: Points2D, eps_area: float = 1e-9) -> Optional[Mat3x3]:
    """
    Fit affine transform from exactly 3 point correspondences.

    Returns:
      3x3 affine matrix, or None if degenerate / solve fails.
    """
    if pts0.shape != (3, 2) or pts1.shape != (3, 2):
        raise ValueError(f"fit_affine_minimal expects (3,2) inputs, got {pts0.shape} and {pts1.shape}")

    # Collinear triplets do not determine the affine map
    if is_degenerate_triplet(pts0, eps_area) or is_degenerate_triplet(pts1, eps_area):
        return None

    A, b_vec = _affine_system(pts0, pts1)
    try:
        theta = np.linalg.solve(A, b_vec)
    except np.linalg.LinAlgError:
        return None

    T = _theta_to_mat3x3(theta)
    if not is_valid_mat3x3(T):
        return None
    return T


def fit_affine_least_squares(pts0: Points2D, pts1: Points2D) -> Optional[Mat3x3]:
    """
    Fit affine transform from N >= 3 correspondences using least squares.

    Uses np.linalg.lstsq(A, b): finds theta that minimizes ||A theta - b||^2.
    """
    if pts0.shape != pts1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {pts0.shape} vs {pts1.shape}")
    if pts0.ndim != 2 or pts0.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts0.shape}")
    if pts0.shape[0] < 3:
        return None

    A, b_vec = _affine_system(pts0, pts1)
    try:
        theta, _, rank, _ = np.linalg.lstsq(A, b_vec, rcond=None)
    except np.linalg.LinAlgError:
        return None

    # Collinear or repeated points leave some of the 6 unknowns free
    if rank < 6:
        return None

    T = _theta_to_mat3x3(theta)
    if not is_valid_mat3x3(T):
        return None
    return T


# ---------- Apply transform + residuals ----------
def apply_T(T: Mat3x3, pts: Points2D) -> Points2D:
    """
    Apply a 3x3 transform to (N,2) points, returning (N,2) points.

        [x', y', w]^T = T @ [x, y, 1]^T,  then divide by w

    For affine w is always 1; for homography w can be 0 (point at infinity),
    which yields inf/nan coordinates.
    """
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts.shape}")
    if T.shape != (3, 3):
        raise ValueError(f"Expected T shape (3,3), got {T.shape}")

    ph: PointsHomog = as_homogeneous(pts)
    ph_t = ph @ T.T
    with np.errstate(divide="ignore", invalid="ignore"):
        return (ph_t[:, :2] / ph_t[:, 2:3]).astype(np.float64)


def squared_transfer_errors(T: Mat3x3, pts0: Points2D, pts1: Points2D, *, symmetric: bool) -> FloatArray:
    """
    Squared transfer error per correspondence:

        e_i = || apply_T(T, pts0[i]) - pts1[i] ||^2

    symmetric=True takes the max with the backward error through T^-1.
    Non-finite errors (singular T, points at infinity) become inf.
    """
    if pts0.shape != pts1.shape:
        raise ValueError(f"pts0 and pts1 must have same shape, got {pts0.shape} vs {pts1.shape}")

    with np.errstate(invalid="ignore", over="ignore"):
        diff = apply_T(T, pts0) - pts1
        err = np.sum(diff * diff, axis=1)

        if symmetric:
            try:
                T_inv = np.linalg.inv(T)
            except np.linalg.LinAlgError:
                return np.full(pts0.shape[0], np.inf)
            diff_back = apply_T(T_inv, pts1) - pts0
            err = np.maximum(err, np.sum(diff_back * diff_back, axis=1))

    return np.where(np.isfinite(err), err, np.inf)

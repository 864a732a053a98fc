"""
Shared typed primitives for robust model estimation.

Defines:
- Typed NumPy aliases for geometry
    - Points are (N,2) float arrays
    - Models are 3x3 matrices (fundamental, homography, affine, translation)
- Run configuration (RansacParams)
- Structured RANSAC result container (model + inliers + stats)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeAlias, TypeVar

import numpy as np
import numpy.typing as npt

# ---------- Numpy typing aliases ----------
# float64 for geometry / matrices (more stable for linear algebra)
# intp for index sets

FloatArray: TypeAlias = npt.NDArray[np.float64]
BoolArray: TypeAlias = npt.NDArray[np.bool_]
IndexArray: TypeAlias = npt.NDArray[np.intp]

# Points in 2D image coordinates.
Points2D: TypeAlias = FloatArray      # shape: (N, 2)

# Homogeneous points [x, y, 1].
PointsHomog: TypeAlias = FloatArray   # shape: (N, 3)

# 3x3 matrix: every model family here is expressed as one.
Mat3x3: TypeAlias = FloatArray        # shape: (3, 3)

M = TypeVar("M")


# ---------- Run configuration ----------
@dataclass(frozen=True)
class RansacParams:
    """
    Parameters of one RANSAC run.

    precision:
      - Inlier threshold in pixels. <= 0 means "not given" to the
        convenience entry points, which then fall back to 1 pixel.
    max_iterations:
      - Upper bound on sampled hypotheses.
    beta:
      - Confidence used by adaptive stopping, in (0, 1]. Values above 1 are
        clamped at run time.
    verbose:
      - Log every improvement of the consensus set.
    seed:
      - Seed of the sampling generator. None draws fresh OS entropy.
    """
    precision: float = 1.0
    max_iterations: int = 10000
    beta: float = 0.95
    verbose: bool = False
    seed: Optional[int] = None


# ---------- RANSAC output container ----------
@dataclass(frozen=True)
class RansacResult(Generic[M]):
    model: Optional[M]      # best model in pixel coordinates, None if nothing found
    inliers: IndexArray     # sorted indices of inliers under the best model
    num_inliers: int        # len(inliers)
    iterations: int         # how many iterations were actually run
    precision: float        # the inlier threshold in pixels

    @property
    def success(self) -> bool:
        return self.model is not None and self.num_inliers > 0


# ---------- Helper Functions ----------
def as_points2d(pts: npt.ArrayLike, name: str = "pts") -> Points2D:
    """
    Convert input to a float64 (N,2) array, raising ValueError on bad shape.
    """
    arr = np.asarray(pts, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected {name} shape (N, 2) but got {arr.shape}")
    return arr


def as_homogeneous(pts: Points2D) -> PointsHomog:
    """
    Convert (N,2) points -> (N,3) homogeneous points: [x, y, 1].
    """
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected points shape (N, 2) but got {pts.shape}")

    ones = np.ones((pts.shape[0], 1), dtype=np.float64)
    return np.hstack([pts.astype(np.float64), ones])


def is_valid_mat3x3(T: Mat3x3) -> bool:
    """
    Verify a 3x3 matrix. Used for rejecting failed fits.
    """
    return isinstance(T, np.ndarray) and T.shape == (3, 3) and np.isfinite(T).all()

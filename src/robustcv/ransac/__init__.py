"""
RANSAC package

This module provides:
- A generic RANSAC engine with adaptive stopping
- The ModelEstimator contract with image-size preconditioning
- Typed geometry primitives
- Fundamental matrix, homography, affine and translation estimators
"""

from .types import (
    FloatArray, BoolArray, IndexArray, Points2D, PointsHomog, Mat3x3,
    RansacParams, RansacResult, as_points2d, as_homogeneous, is_valid_mat3x3,
)

from .conditioning import Normalization, preconditioner_from_size

from .estimator import ModelEstimator

from .sampling import uniform_sample

from .core import Ransac

from .affine import fit_affine_minimal, fit_affine_least_squares, apply_T, squared_transfer_errors
from .affine_estimator import AffineEstimator

from .translation import fit_translation, make_translation
from .translation_estimator import TranslationEstimator

from .homography import fit_homography
from .homography_estimator import HomographyEstimator

from .fundamental import (
    fit_fundamental_seven_point, fit_fundamental_eight_point, squared_epipolar_errors,
)
from .fundamental_estimator import FundamentalEstimator

from .estimate import run_ransac, ransac_fundamental, ransac_homography

__all__ = [
    "FloatArray", "BoolArray", "IndexArray", "Points2D", "PointsHomog", "Mat3x3",
    "RansacParams", "RansacResult", "as_points2d", "as_homogeneous", "is_valid_mat3x3",
    "Normalization", "preconditioner_from_size",
    "ModelEstimator",
    "uniform_sample",
    "Ransac",
    "fit_affine_minimal", "fit_affine_least_squares", "apply_T", "squared_transfer_errors",
    "AffineEstimator",
    "fit_translation", "make_translation",
    "TranslationEstimator",
    "fit_homography",
    "HomographyEstimator",
    "fit_fundamental_seven_point", "fit_fundamental_eight_point", "squared_epipolar_errors",
    "FundamentalEstimator",
    "run_ransac", "ransac_fundamental", "ransac_homography",
]

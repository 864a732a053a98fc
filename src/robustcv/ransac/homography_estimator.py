"""
Adapter: homography DLT as a ModelEstimator.
"""

from __future__ import annotations

from typing import Sequence

from .affine import squared_transfer_errors
from .estimator import ModelEstimator
from .homography import fit_homography
from .types import FloatArray, Mat3x3, Points2D


class HomographyEstimator(ModelEstimator[Mat3x3]):
    """
    Planar homography x2 ~ H x1, minimal sample of 4 correspondences.

    Symmetric error is the max of forward and backward squared transfer errors.
    """
    SAMPLE_SIZE = 4

    def fit(self, indices: Sequence[int]) -> list[Mat3x3]:
        if len(indices) < self.SAMPLE_SIZE:
            return []
        H = fit_homography(*self._sample_points(indices))
        return [] if H is None else [H]

    def residuals(self, model: Mat3x3, pts1: Points2D, pts2: Points2D) -> FloatArray:
        return squared_transfer_errors(model, pts1, pts2, symmetric=self.symmetric_error)

    def unnormalize(self, model: Mat3x3) -> None:
        self.normalization.unnormalize_transfer(model)

"""
Adapter: makes affine functions conform to the ModelEstimator contract.
"""

from __future__ import annotations

from typing import Sequence

from .affine import fit_affine_least_squares, fit_affine_minimal, squared_transfer_errors
from .estimator import ModelEstimator
from .types import FloatArray, Mat3x3, Points2D


class AffineEstimator(ModelEstimator[Mat3x3]):
    """
    6-dof affine map x2 ~ T x1, minimal sample of 3 correspondences.
    """
    SAMPLE_SIZE = 3

    def fit(self, indices: Sequence[int]) -> list[Mat3x3]:
        if len(indices) < self.SAMPLE_SIZE:
            return []
        pts0, pts1 = self._sample_points(indices)

        if len(indices) == self.SAMPLE_SIZE:
            T = fit_affine_minimal(pts0, pts1)
        else:
            T = fit_affine_least_squares(pts0, pts1)
        return [] if T is None else [T]

    def residuals(self, model: Mat3x3, pts1: Points2D, pts2: Points2D) -> FloatArray:
        return squared_transfer_errors(model, pts1, pts2, symmetric=self.symmetric_error)

    def unnormalize(self, model: Mat3x3) -> None:
        self.normalization.unnormalize_transfer(model)

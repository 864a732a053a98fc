"""
Adapter class for the translation-only model.
"""

from __future__ import annotations

from typing import Sequence

from .affine import squared_transfer_errors
from .estimator import ModelEstimator
from .translation import fit_translation
from .types import FloatArray, Mat3x3, Points2D


class TranslationEstimator(ModelEstimator[Mat3x3]):
    """
    Pure image translation, minimal sample of 1 correspondence.

    Useful for jitter between consecutive video frames; also the simplest
    model to exercise the RANSAC engine with.
    """
    SAMPLE_SIZE = 1

    def fit(self, indices: Sequence[int]) -> list[Mat3x3]:
        if len(indices) < self.SAMPLE_SIZE:
            return []
        T = fit_translation(*self._sample_points(indices))
        return [] if T is None else [T]

    def residuals(self, model: Mat3x3, pts1: Points2D, pts2: Points2D) -> FloatArray:
        return squared_transfer_errors(model, pts1, pts2, symmetric=self.symmetric_error)

    def unnormalize(self, model: Mat3x3) -> None:
        self.normalization.unnormalize_transfer(model)

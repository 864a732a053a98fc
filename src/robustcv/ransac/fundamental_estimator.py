"""
Adapter: fundamental matrix solvers as a ModelEstimator.
"""

from __future__ import annotations

from typing import Literal, Sequence

import numpy as np
import numpy.typing as npt

from .estimator import ModelEstimator
from .fundamental import (
    fit_fundamental_eight_point,
    fit_fundamental_seven_point,
    squared_epipolar_errors,
)
from .types import FloatArray, Mat3x3, Points2D

FundamentalMethod = Literal["seven_point", "eight_point"]


class FundamentalEstimator(ModelEstimator[Mat3x3]):
    """
    Fundamental matrix x2^T F x1 = 0.

    method:
        "seven_point" -> minimal sample of 7, up to 3 candidates per sample
        "eight_point" -> minimal sample of 8, one linear candidate

    Samples larger than the minimal size always go through the linear
    8-point least-squares solver.

    Error is the squared point-to-epipolar-line distance in image 2, or the
    max over both images when symmetric_error is set.
    """

    def __init__(
            self,
            x1: npt.ArrayLike,
            w1: int,
            h1: int,
            x2: npt.ArrayLike,
            w2: int,
            h2: int,
            *,
            symmetric_error: bool = True,
            method: FundamentalMethod = "seven_point",
    ) -> None:
        if method not in ("seven_point", "eight_point"):
            raise ValueError(f"Unknown fundamental method {method!r}")
        super().__init__(x1, w1, h1, x2, w2, h2, symmetric_error=symmetric_error)
        self.method = method

    def sample_size(self) -> int:
        return 7 if self.method == "seven_point" else 8

    def fit(self, indices: Sequence[int]) -> list[Mat3x3]:
        k = self.sample_size()
        if len(indices) < k:
            return []
        pts0, pts1 = self._sample_points(indices)

        if len(indices) == 7 and self.method == "seven_point":
            return fit_fundamental_seven_point(pts0, pts1)
        return fit_fundamental_eight_point(pts0, pts1)

    def residuals(self, model: Mat3x3, pts1: Points2D, pts2: Points2D) -> FloatArray:
        return squared_epipolar_errors(model, pts1, pts2, symmetric=self.symmetric_error)

    def unnormalize(self, model: Mat3x3) -> None:
        self.normalization.unnormalize_fundamental(model)
        model /= np.linalg.norm(model)

"""
Model estimator contract used by the generic RANSAC loop.

An estimator owns the correspondence set and knows everything about "what a
model is and how well it explains the data":

1) fit candidate models from a sample of correspondence indices
2) score correspondences with a squared residual
3) convert models back from the normalized frame to pixels

Fitting and scoring happen in the normalized frame (see conditioning.py).
The RANSAC loop stays model-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, Sequence, TypeVar

import numpy as np
import numpy.typing as npt

from .affine import apply_T
from .conditioning import Normalization
from .types import FloatArray, Points2D, as_points2d

M = TypeVar("M")


class ModelEstimator(ABC, Generic[M]):
    """
    Base class of all model families.

    Subclasses set SAMPLE_SIZE (or override sample_size) and implement
    fit, residuals and unnormalize. Normalization logic is shared through the
    `normalization` member, not through deeper inheritance.

    The estimator is read-only after construction: concurrent runs may share
    one as long as each uses its own random generator.
    """

    SAMPLE_SIZE: int = 0

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
    ) -> None:
        x1 = as_points2d(x1, "x1")
        x2 = as_points2d(x2, "x2")
        if x1.shape != x2.shape:
            raise ValueError(f"x1 and x2 must have same shape, got {x1.shape} vs {x2.shape}")

        self.symmetric_error = bool(symmetric_error)
        self.normalization = Normalization.from_image_sizes(w1, h1, w2, h2)

        self._x1 = x1.copy()
        self._x2 = x2.copy()
        self._x1n = apply_T(self.normalization.N1, self._x1)
        self._x2n = apply_T(self.normalization.N2, self._x2)
        for arr in (self._x1, self._x2, self._x1n, self._x2n):
            arr.setflags(write=False)

    # ---------- Data access ----------
    @property
    def x1(self) -> Points2D:
        return self._x1

    @property
    def x2(self) -> Points2D:
        return self._x2

    @property
    def x1n(self) -> Points2D:
        """Points of image 1 in the normalized frame."""
        return self._x1n

    @property
    def x2n(self) -> Points2D:
        """Points of image 2 in the normalized frame."""
        return self._x2n

    def num_data(self) -> int:
        return int(self._x1.shape[0])

    def sample_size(self) -> int:
        return int(self.SAMPLE_SIZE)

    def normalization_factor(self, side: int) -> float:
        """
        Multiply a pixel distance on image `side` (0 or 1) by this to get
        the same distance in the normalized frame.
        """
        return self.normalization.factor(side)

    # ---------- Model contract ----------
    @abstractmethod
    def fit(self, indices: Sequence[int]) -> list[M]:
        """
        Fit candidate models (normalized frame) from correspondence indices.

        May return zero, one or several models: some minimal problems have
        several algebraic solutions. Degenerate samples give [].
        """
        ...

    @abstractmethod
    def residuals(self, model: M, pts1: Points2D, pts2: Points2D) -> FloatArray:
        """
        Squared residual of each row of (pts1, pts2), both in the normalized frame.
        """
        ...

    @abstractmethod
    def unnormalize(self, model: M) -> None:
        """
        Convert a model fit by `fit` back to pixel coordinates, in place.
        Must be called once per model.
        """
        ...

    def errors(self, model: M) -> FloatArray:
        """
        Squared residual of every correspondence, shape (N,), normalized frame.
        """
        return self.residuals(model, self._x1n, self._x2n)

    def error(self, model: M, index: int) -> float:
        """
        Squared residual of correspondence `index` under `model`.
        """
        row = [index]
        return float(self.residuals(model, self._x1n[row], self._x2n[row])[0])

    def compute_model(self, indices: Sequence[int]) -> Optional[M]:
        """
        Fit a single model. Ambiguous samples (several solutions) give None.
        """
        models = self.fit(indices)
        if len(models) != 1:
            return None
        return models[0]

    # ---------- Helpers for subclasses ----------
    def _sample_points(self, indices: Sequence[int]) -> tuple[Points2D, Points2D]:
        idx = np.asarray(indices, dtype=np.intp)
        return self._x1n[idx], self._x2n[idx]

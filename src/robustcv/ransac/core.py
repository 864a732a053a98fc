"""
Generic RANSAC loop (model-agnostic).

RANSAC overview:
- Randomly sample a *minimal* subset of correspondences
- Fit candidate models from that subset (possibly several)
- Score all correspondences by their squared residual
- Mark inliers where error <= precision^2 (normalized frame)
- Keep the model with strictly more inliers than the best so far
- Shrink the iteration budget as the observed inlier ratio allows
- Convert the winning model back to pixel coordinates

Works with any ModelEstimator from estimator.py.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import math
import os
from typing import Generic, Optional, TypeVar

import numpy as np

from .estimator import ModelEstimator
from .sampling import make_rng, uniform_sample
from .types import IndexArray, RansacResult

logger: logging.Logger = logging.getLogger(__name__)

M = TypeVar("M")
_RANSAC_DEBUG = os.environ.get("ROBUSTCV_RANSAC_DEBUG", "0") == "1"


def _required_iterations(
        *,
        log1_beta: float,
        inlier_ratio: float,
        sample_size: int,
) -> Optional[int]:
    """
    Number of iterations after which the probability of never having drawn
    an all-inlier minimal sample falls below 1 - beta.

    inlier ratio w = (# inliers) / N, minimal sample s,
    - P(all-inliers) = w^s
    - P(not-all-inliers-for-k-times) = (1 - w^s)^k <= 1 - beta
    - k >= log(1 - beta) / log(1 - w^s)

    Returns None when no bound can be derived:
     - log(1 - w^s) == 0 because w^s is below float resolution
     - beta == 1, the bound is infinite even at full consensus
    """
    w_to_s = inlier_ratio ** sample_size

    if not math.isfinite(log1_beta):
        return None

    # Every sample is all-inlier
    if w_to_s >= 1.0:
        return 0

    denominator = math.log(1.0 - w_to_s)
    if not denominator < 0.0:
        return None

    k = log1_beta / denominator
    if not math.isfinite(k):
        return None
    return int(math.ceil(k))


@dataclass
class _Consensus(Generic[M]):
    """Best hypothesis so far, threaded through one run."""
    iter_cap: int
    model: Optional[M] = None
    inliers: IndexArray = field(default_factory=lambda: np.zeros((0,), dtype=np.intp))

    @property
    def size(self) -> int:
        return int(self.inliers.shape[0])


class Ransac(Generic[M]):
    """
    Classical RANSAC driven by a ModelEstimator.

    The estimator is borrowed, never modified. Each call to run is
    independent; no state survives between runs.
    """

    def __init__(self, estimator: ModelEstimator[M]) -> None:
        self.estimator = estimator

    def run(
            self,
            precision: float,
            max_iterations: int = 10000,
            beta: float = 0.95,
            verbose: bool = False,
            *,
            seed: Optional[int] = None,
            rng: Optional[np.random.Generator] = None,
    ) -> RansacResult[M]:
        """
        Run RANSAC.

        Inputs:
        - precision: inlier threshold in pixels
        - max_iterations: upper bound of the number of iterations
        - beta: confidence of adaptive stopping, in (0, 1]; larger values are clamped to 1
        - verbose: log every improvement
        - seed / rng: sampling source, `rng` wins when both are given

        Returns:
        - RansacResult. When no consensus is found, model is None and
          inliers is empty; this is not an error.
        """
        # ---------- Input validation ----------
        if not beta > 0.0:
            raise ValueError(f"beta must be positive, got {beta}")
        if beta > 1.0:
            logger.warning("RANSAC beta parameter adjusted to not exceed 1 (got %s)", beta)
            beta = 1.0
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")

        verbose = verbose or _RANSAC_DEBUG
        log1_beta = math.log(1.0 - beta) if beta < 1.0 else -math.inf

        # Residuals are squared and normalized, so is the threshold
        precision_sq = (float(precision) * self.estimator.normalization_factor(1)) ** 2

        n = self.estimator.num_data()
        sample_size = self.estimator.sample_size()
        rng = make_rng(seed, rng)

        best: _Consensus[M] = _Consensus(iter_cap=int(max_iterations))

        iteration = 0
        if n < sample_size:
            # No sample can ever be drawn: the whole budget goes by without a candidate
            logger.warning("RANSAC needs %d correspondences, only %d given", sample_size, n)
            iteration = best.iter_cap

        # ---------- Main RANSAC Loop ----------
        while iteration < best.iter_cap:
            sample = uniform_sample(sample_size, n, rng)

            for model in self.estimator.fit(sample):
                err = self.estimator.errors(model)
                inliers = np.flatnonzero(err <= precision_sq).astype(np.intp)

                # Strictly more inliers: ties keep the earlier model
                if inliers.shape[0] <= best.size:
                    continue

                best.model = model
                best.inliers = inliers

                needed = _required_iterations(
                    log1_beta=log1_beta,
                    inlier_ratio=best.size / float(n),
                    sample_size=sample_size,
                )
                if needed is not None:
                    best.iter_cap = min(best.iter_cap, needed)

                if verbose:
                    logger.info(
                        " inliers=%d (iter=%d,iterMax=%d,sample=%s)",
                        best.size, iteration, best.iter_cap,
                        ",".join(str(int(i)) for i in sample),
                    )

            iteration += 1

        if best.model is not None and best.size > 0:
            self.estimator.unnormalize(best.model)
        else:
            best.model = None

        logger.debug("RANSAC: %d/%d inliers after %d iterations", best.size, n, iteration)

        return RansacResult(
            model=best.model,
            inliers=best.inliers,
            num_inliers=best.size,
            iterations=iteration,
            precision=float(precision),
        )

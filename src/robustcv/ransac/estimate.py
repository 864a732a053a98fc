"""
One-call entry points: build an estimator, run RANSAC, return the result.

    res = ransac_fundamental(x1, x2, w1, h1, w2, h2, RansacParams(precision=1.0))
    if not res.success:
        ...  # failed to estimate a model
"""

from __future__ import annotations

from dataclasses import replace
import logging
from typing import Optional

import numpy.typing as npt

from .core import Ransac
from .estimator import ModelEstimator
from .fundamental_estimator import FundamentalEstimator, FundamentalMethod
from .homography_estimator import HomographyEstimator
from .types import Mat3x3, RansacParams, RansacResult

logger: logging.Logger = logging.getLogger(__name__)

# Threshold used when the caller gives none
DEFAULT_PRECISION_PX = 1.0


def _effective_params(params: Optional[RansacParams]) -> RansacParams:
    params = params if params is not None else RansacParams()
    if params.precision <= 0:
        logger.warning(
            "No input for RANSAC threshold. Using %s pixel", DEFAULT_PRECISION_PX
        )
        params = replace(params, precision=DEFAULT_PRECISION_PX)
    return params


def run_ransac(estimator: ModelEstimator[Mat3x3], params: Optional[RansacParams] = None) -> RansacResult[Mat3x3]:
    """
    Run RANSAC on an already built estimator with `params`.
    """
    params = _effective_params(params)
    result = Ransac(estimator).run(
        params.precision,
        params.max_iterations,
        params.beta,
        params.verbose,
        seed=params.seed,
    )
    if not result.success:
        logger.info("RANSAC failed to estimate a model (%d correspondences)", estimator.num_data())
    return result


def ransac_fundamental(
        x1: npt.ArrayLike,
        x2: npt.ArrayLike,
        w1: int,
        h1: int,
        w2: int,
        h2: int,
        params: Optional[RansacParams] = None,
        *,
        method: FundamentalMethod = "seven_point",
        symmetric_error: bool = True,
) -> RansacResult[Mat3x3]:
    """
    Fundamental matrix from (N,2) correspondences x1 <-> x2 with RANSAC.
    """
    estimator = FundamentalEstimator(
        x1, w1, h1, x2, w2, h2, symmetric_error=symmetric_error, method=method
    )
    return run_ransac(estimator, params)


def ransac_homography(
        x1: npt.ArrayLike,
        x2: npt.ArrayLike,
        w1: int,
        h1: int,
        w2: int,
        h2: int,
        params: Optional[RansacParams] = None,
        *,
        symmetric_error: bool = True,
) -> RansacResult[Mat3x3]:
    """
    Homography from (N,2) correspondences x1 <-> x2 with RANSAC.
    """
    estimator = HomographyEstimator(x1, w1, h1, x2, w2, h2, symmetric_error=symmetric_error)
    return run_ransac(estimator, params)

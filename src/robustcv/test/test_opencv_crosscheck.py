"""Compare the linear solvers with OpenCV on exact correspondences."""
import numpy as np
import pytest

from robustcv.ransac import FundamentalEstimator, HomographyEstimator
from robustcv.test.data_generation import same_up_to_scale, two_view_fundamental, two_view_transfer

cv2 = pytest.importorskip("cv2")


def test_eight_point_matches_opencv():
    data = two_view_fundamental(30, seed=2)
    estimator = FundamentalEstimator(data.x1, 640, 480, data.x2, 640, 480, method="eight_point")

    F = estimator.compute_model(range(30))
    estimator.unnormalize(F)

    F_cv, _ = cv2.findFundamentalMat(data.x1, data.x2, cv2.FM_8POINT)
    assert same_up_to_scale(F, F_cv, atol=1e-5)


def test_homography_matches_opencv(homography_true):
    data = two_view_transfer(homography_true, 25, seed=2)
    estimator = HomographyEstimator(data.x1, 640, 480, data.x2, 640, 480)

    H = estimator.compute_model(range(25))
    estimator.unnormalize(H)

    H_cv, _ = cv2.findHomography(data.x1, data.x2, 0)
    assert same_up_to_scale(H, H_cv, atol=1e-5)

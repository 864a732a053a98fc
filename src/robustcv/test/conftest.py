import numpy as np
import pytest

from robustcv.test.data_generation import TwoViewData, two_view_fundamental, two_view_transfer


@pytest.fixture
def affine_true() -> np.ndarray:
    return np.array(
        [[1.05, 0.02, 15.0],
         [-0.01, 0.98, -8.0],
         [0.0, 0.0, 1.0]]
    )


@pytest.fixture
def homography_true() -> np.ndarray:
    return np.array(
        [[0.9, 0.05, 20.0],
         [-0.03, 1.1, -10.0],
         [1e-4, -5e-5, 1.0]]
    )


@pytest.fixture
def fundamental_exact() -> TwoViewData:
    return two_view_fundamental(50)


@pytest.fixture
def fundamental_70_30() -> TwoViewData:
    return two_view_fundamental(70, 30)


@pytest.fixture
def affine_80_20(affine_true) -> TwoViewData:
    return two_view_transfer(affine_true, 80, 20)

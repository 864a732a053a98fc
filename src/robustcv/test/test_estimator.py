import numpy as np
import pytest

from robustcv.ransac import (
    AffineEstimator,
    FundamentalEstimator,
    HomographyEstimator,
    ModelEstimator,
    Normalization,
    TranslationEstimator,
    apply_T,
    fit_fundamental_eight_point,
    fit_fundamental_seven_point,
    preconditioner_from_size,
    uniform_sample,
)
from robustcv.test.data_generation import same_up_to_scale, two_view_fundamental, two_view_transfer


class FixedCandidates(ModelEstimator):
    """fit() returns as many copies of a model as requested by the sample length."""
    SAMPLE_SIZE = 1

    def fit(self, indices):
        return [np.eye(3) for _ in indices]

    def residuals(self, model, pts1, pts2):
        return np.zeros(len(pts1))

    def unnormalize(self, model):
        pass


def test_preconditioner_from_size():
    N = preconditioner_from_size(640, 480)
    s = 1.0 / np.sqrt(640 * 480)

    assert np.allclose(N, [[s, 0, -320 * s], [0, s, -240 * s], [0, 0, 1]])
    # Image center goes to the origin
    assert np.allclose(apply_T(N, np.array([[320.0, 240.0]])), 0.0)


def test_preconditioner_rejects_empty_image():
    with pytest.raises(ValueError):
        preconditioner_from_size(0, 480)


def test_both_sides_share_the_larger_dimensions():
    norm = Normalization.from_image_sizes(640, 300, 500, 480)
    expected = preconditioner_from_size(640, 480)

    assert np.array_equal(norm.N1, expected)
    assert np.array_equal(norm.N2, expected)
    assert norm.factor(0) == norm.factor(1) == pytest.approx(1.0 / np.sqrt(640 * 480))
    with pytest.raises(ValueError):
        norm.factor(2)


def test_estimator_validates_input():
    x = np.zeros((10, 2))
    with pytest.raises(ValueError):
        AffineEstimator(x, 640, 480, np.zeros((9, 2)), 640, 480)
    with pytest.raises(ValueError):
        AffineEstimator(np.zeros((10, 3)), 640, 480, np.zeros((10, 3)), 640, 480)
    with pytest.raises(ValueError):
        AffineEstimator(x, 640, 0, x, 640, 480)
    with pytest.raises(ValueError):
        FundamentalEstimator(x, 640, 480, x, 640, 480, method="five_point")


def test_estimator_is_read_only():
    x = np.random.default_rng(0).uniform(0, 100, size=(10, 2))
    estimator = HomographyEstimator(x, 100, 100, x, 100, 100)

    with pytest.raises(ValueError):
        estimator.x1[0, 0] = 1.0
    with pytest.raises(ValueError):
        estimator.normalization.N1[0, 0] = 1.0

    # The caller's array is not aliased
    x[0, 0] = -1.0
    assert estimator.x1[0, 0] != -1.0


def test_sizes():
    x = np.zeros((12, 2))
    assert TranslationEstimator(x, 10, 10, x, 10, 10).sample_size() == 1
    assert AffineEstimator(x, 10, 10, x, 10, 10).sample_size() == 3
    assert HomographyEstimator(x, 10, 10, x, 10, 10).sample_size() == 4
    assert FundamentalEstimator(x, 10, 10, x, 10, 10).sample_size() == 7
    assert FundamentalEstimator(x, 10, 10, x, 10, 10, method="eight_point").sample_size() == 8
    assert FundamentalEstimator(x, 10, 10, x, 10, 10).num_data() == 12


def test_compute_model_requires_a_single_candidate():
    x = np.zeros((5, 2))
    estimator = FixedCandidates(x, 10, 10, x, 10, 10)

    assert estimator.compute_model([]) is None
    assert np.array_equal(estimator.compute_model([0]), np.eye(3))
    assert estimator.compute_model([0, 1]) is None


def test_error_matches_errors(affine_true):
    data = two_view_transfer(affine_true, 10, 5)
    estimator = AffineEstimator(data.x1, 640, 480, data.x2, 640, 480)
    model = estimator.compute_model([0, 1, 2])

    errors = estimator.errors(model)
    assert errors.shape == (15,)
    for i in range(15):
        assert estimator.error(model, i) == pytest.approx(errors[i], rel=1e-9, abs=1e-15)
    assert np.allclose(errors[:10], 0.0)
    assert np.all(errors[10:] > 0.0)


class CountingEstimator(AffineEstimator):
    """Records how many rows each residuals() call scores."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.rows_scored = []

    def residuals(self, model, pts1, pts2):
        self.rows_scored.append(len(pts1))
        return super().residuals(model, pts1, pts2)


def test_error_scores_a_single_correspondence(affine_true):
    data = two_view_transfer(affine_true, 10, 5)
    estimator = CountingEstimator(data.x1, 640, 480, data.x2, 640, 480)
    model = estimator.compute_model([0, 1, 2])

    errors = estimator.errors(model)
    assert estimator.error(model, 12) == pytest.approx(errors[12], rel=1e-9, abs=1e-15)
    assert estimator.error(model, -1) == pytest.approx(errors[-1], rel=1e-9, abs=1e-15)
    assert estimator.rows_scored == [15, 1, 1]
    with pytest.raises(IndexError):
        estimator.error(model, 15)


def test_points_are_normalized_with_the_shared_transform():
    x = np.array([[0.0, 0.0], [640.0, 480.0], [100.0, 300.0]])
    estimator = TranslationEstimator(x, 640, 480, x, 320, 240)

    assert np.allclose(estimator.x1n, apply_T(estimator.normalization.N1, x))
    assert np.allclose(estimator.x2n, apply_T(estimator.normalization.N2, x))


def test_public_names_resolve():
    import robustcv.ransac as ransac

    for name in ransac.__all__:
        assert getattr(ransac, name) is not None


def test_affine_unnormalize(affine_true):
    data = two_view_transfer(affine_true, 10)
    estimator = AffineEstimator(data.x1, 640, 480, data.x2, 800, 600)

    model = estimator.compute_model([3, 5, 7])
    estimator.unnormalize(model)

    assert np.allclose(model, affine_true)


def test_affine_least_squares_on_larger_sample(affine_true):
    data = two_view_transfer(affine_true, 10)
    estimator = AffineEstimator(data.x1, 640, 480, data.x2, 640, 480)

    model = estimator.compute_model(range(10))
    estimator.unnormalize(model)

    assert np.allclose(model, affine_true)


def test_collinear_affine_sample_is_rejected():
    x1 = np.array([[0.0, 0.0], [10.0, 10.0], [20.0, 20.0], [5.0, 40.0]])
    estimator = AffineEstimator(x1, 100, 100, x1 + 1.0, 100, 100)

    assert estimator.fit([0, 1, 2]) == []
    assert len(estimator.fit([0, 1, 3])) == 1


def test_homography_unnormalize(homography_true):
    data = two_view_transfer(homography_true, 4, seed=1)
    estimator = HomographyEstimator(data.x1, 640, 480, data.x2, 640, 480)

    model = estimator.compute_model(range(4))
    estimator.unnormalize(model)

    assert same_up_to_scale(model, homography_true)


def test_seven_point_candidates():
    data = two_view_fundamental(7)
    estimator = FundamentalEstimator(data.x1, 640, 480, data.x2, 640, 480)

    models = estimator.fit(range(7))

    assert 1 <= len(models) <= 3
    for F in models:
        assert np.isclose(np.linalg.norm(F), 1.0)
        assert abs(np.linalg.det(F)) < 1e-10
        # Every candidate satisfies the 7 constraints
        assert np.all(estimator.errors(F)[:7] < 1e-20)

    unnormalized = [F.copy() for F in models]
    for F in unnormalized:
        estimator.unnormalize(F)
    assert any(same_up_to_scale(F, data.model) for F in unnormalized)


def test_eight_point_solver():
    data = two_view_fundamental(20)
    estimator = FundamentalEstimator(data.x1, 640, 480, data.x2, 640, 480, method="eight_point")

    model = estimator.compute_model(range(20))
    assert np.linalg.matrix_rank(model) == 2

    estimator.unnormalize(model)
    assert same_up_to_scale(model, data.model)


def test_solvers_reject_wrong_shapes():
    with pytest.raises(ValueError):
        fit_fundamental_seven_point(np.zeros((6, 2)), np.zeros((6, 2)))
    assert fit_fundamental_eight_point(np.zeros((7, 2)), np.zeros((7, 2))) == []


def test_symmetric_error_dominates_one_sided(fundamental_70_30):
    data = fundamental_70_30
    symmetric = FundamentalEstimator(data.x1, 640, 480, data.x2, 640, 480)
    one_sided = FundamentalEstimator(data.x1, 640, 480, data.x2, 640, 480, symmetric_error=False)

    F = symmetric.fit(range(7))[0]
    assert np.all(symmetric.errors(F) >= one_sided.errors(F))


def test_singular_transfer_model_errors_are_infinite():
    x = np.random.default_rng(0).uniform(0, 100, size=(6, 2))
    estimator = HomographyEstimator(x, 100, 100, x, 100, 100)

    errors = estimator.errors(np.zeros((3, 3)))
    assert np.all(np.isinf(errors))


def test_uniform_sample():
    rng = np.random.default_rng(0)
    for _ in range(50):
        sample = uniform_sample(7, 10, rng)
        assert len(set(sample.tolist())) == 7
        assert sample.min() >= 0 and sample.max() < 10

    assert uniform_sample(0, 0, rng).shape == (0,)
    with pytest.raises(ValueError):
        uniform_sample(8, 7, rng)

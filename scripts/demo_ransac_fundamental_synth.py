import logging
import sys

import numpy as np

from robustcv import log
from robustcv.matching import remove_duplicates
from robustcv.ransac import RansacParams, ransac_fundamental

logger = logging.getLogger("demo_ransac_fundamental_synth")

W, H = 640, 480


def _skew(t: np.ndarray) -> np.ndarray:
    return np.array(
        [[0.0, -t[2], t[1]],
         [t[2], 0.0, -t[0]],
         [-t[1], t[0], 0.0]],
        dtype=np.float64,
    )


def _project(K: np.ndarray, R: np.ndarray, t: np.ndarray, X: np.ndarray) -> np.ndarray:
    x = (K @ (X @ R.T + t).T).T
    return x[:, :2] / x[:, 2:3]


def main() -> int:
    log.setup()
    rng = np.random.default_rng(0)

    K = np.array([[500.0, 0.0, W / 2], [0.0, 500.0, H / 2], [0.0, 0.0, 1.0]])
    angle = 0.1
    R = np.array(
        [[np.cos(angle), 0.0, np.sin(angle)],
         [0.0, 1.0, 0.0],
         [-np.sin(angle), 0.0, np.cos(angle)]],
    )
    t = np.array([1.0, 0.1, 0.05])

    # True fundamental matrix: F = K^-T [t]x R K^-1
    K_inv = np.linalg.inv(K)
    F_true = K_inv.T @ _skew(t) @ R @ K_inv
    F_true /= np.linalg.norm(F_true)

    # Inliers: projections of random 3D points in front of both cameras
    n_in = 200
    X = np.column_stack([
        rng.uniform(-3.0, 3.0, n_in),
        rng.uniform(-2.0, 2.0, n_in),
        rng.uniform(6.0, 12.0, n_in),
    ])
    x1 = _project(K, np.eye(3), np.zeros(3), X)
    x2 = _project(K, R, t, X)
    x2 += rng.normal(0.0, 0.3, size=x2.shape)

    # Outliers (wrong matches)
    n_out = 80
    o1 = rng.uniform([0, 0], [W, H], size=(n_out, 2))
    o2 = rng.uniform([0, 0], [W, H], size=(n_out, 2))

    x1_all, x2_all, _ = remove_duplicates(np.vstack([x1, o1]), np.vstack([x2, o2]))

    res = ransac_fundamental(
        x1_all, x2_all, W, H, W, H,
        RansacParams(precision=1.0, max_iterations=10000, beta=0.95, verbose=True, seed=42),
    )

    print("F_true:\n", F_true)
    if not res.success:
        print("Failed to estimate a model", file=sys.stderr)
        return 1

    F = res.model
    if np.sum(F * F_true) < 0:
        F = -F
    print("F_est:\n", F)
    print("num_inliers:", res.num_inliers, "/", x1_all.shape[0])
    print("iterations:", res.iterations)
    return 0


if __name__ == "__main__":
    sys.exit(main())

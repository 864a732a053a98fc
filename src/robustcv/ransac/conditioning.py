"""
Preconditioning of image coordinates.

Pixel coordinates in the hundreds or thousands make the SVD-based solvers
badly conditioned. Points are mapped into a frame of zoom ~1 centered on the
image:

    s = 1 / sqrt(w * h)

        [ s  0  -w/2 * s ]
    N = [ 0  s  -h/2 * s ]
        [ 0  0      1    ]

The transform depends on image size only, not on the point distribution.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .types import Mat3x3


def preconditioner_from_size(w: int, h: int) -> Mat3x3:
    """
    Isotropic similarity mapping a (w,h) image into the normalized frame.
    """
    if w <= 0 or h <= 0:
        raise ValueError(f"Image dimensions must be positive, got w={w}, h={h}")

    s = 1.0 / np.sqrt(float(w) * float(h))
    N = np.eye(3, dtype=np.float64)
    N[0, 0] = N[1, 1] = s
    N[0, 2] = -0.5 * w * s
    N[1, 2] = -0.5 * h * s
    return N


@dataclass(frozen=True)
class Normalization:
    """
    Pair of preconditioning transforms, one per image side.

    Both are built from the larger width and the larger height, so that a
    threshold in the normalized frame means the same thing in both images.
    """
    N1: Mat3x3
    N2: Mat3x3

    @classmethod
    def from_image_sizes(cls, w1: int, h1: int, w2: int, h2: int) -> "Normalization":
        if min(w1, h1, w2, h2) <= 0:
            raise ValueError(f"Image dimensions must be positive, got {w1}x{h1} and {w2}x{h2}")
        w, h = max(w1, w2), max(h1, h2)
        N1 = preconditioner_from_size(w, h)
        N2 = preconditioner_from_size(w, h)
        N1.setflags(write=False)
        N2.setflags(write=False)
        return cls(N1=N1, N2=N2)

    def factor(self, side: int) -> float:
        """
        Scale applied to pixel distances on image `side` (0 or 1).
        """
        if side == 0:
            return float(self.N1[0, 0])
        if side == 1:
            return float(self.N2[0, 0])
        raise ValueError(f"side must be 0 or 1, got {side}")

    def unnormalize_transfer(self, model: Mat3x3) -> None:
        """
        In place: M <- N2^-1 M N1, for point-to-point maps x2 ~ M x1.
        """
        model[...] = np.linalg.inv(self.N2) @ model @ self.N1

    def unnormalize_fundamental(self, model: Mat3x3) -> None:
        """
        In place: F <- N2^T F N1, for epipolar constraints x2^T F x1 = 0.
        """
        model[...] = self.N2.T @ model @ self.N1

"""
ARS548 Bridge Covariance Packing
==================================

Generic track messages carry each 3x3 covariance as its 6-element upper
triangle, row-major:

    [ c_xx, c_xy, c_xz,
            c_yy, c_yz,
                  c_zz ]  ->  [c_xx, c_xy, c_xz, c_yy, c_yz, c_zz]

The sensor reports per-axis standard deviations plus a single x/y covariance
term, so the z off-diagonals are always zero. Shape size has no covariance at
all; it is flagged as unmeasured with ``INVALID_COVARIANCE`` on the diagonal.
"""

from typing import List, Sequence

import numpy as np

from .frames import Vector3

# Diagonal value marking a quantity the sensor does not measure
INVALID_COVARIANCE = 1e6

PACKED_COVARIANCE_SIZE = 6

# (row, col) of each packed slot
_UPPER_TRIANGLE = ((0, 0), (0, 1), (0, 2), (1, 1), (1, 2), (2, 2))


def pack_covariance(std: Vector3, covariance_xy: float) -> List[float]:
    """Pack per-axis standard deviations and the x/y term.

    Returns:
        List: [std.x**2, covariance_xy, 0, std.y**2, 0, std.z**2]
    """
    return [
        std.x * std.x,
        covariance_xy,
        0.0,
        std.y * std.y,
        0.0,
        std.z * std.z,
    ]


def size_covariance() -> List[float]:
    """Covariance reported for the box size on every track."""
    return [INVALID_COVARIANCE, 0.0, 0.0, INVALID_COVARIANCE, 0.0, INVALID_COVARIANCE]


def unpack_covariance(packed: Sequence[float]) -> np.ndarray:
    """Expand a packed upper triangle into the symmetric 3x3 matrix."""
    if len(packed) != PACKED_COVARIANCE_SIZE:
        raise ValueError(f"packed covariance needs {PACKED_COVARIANCE_SIZE} values, "
                         f"got {len(packed)}")
    P = np.zeros((3, 3))
    for value, (row, col) in zip(packed, _UPPER_TRIANGLE):
        P[row, col] = value
        P[col, row] = value
    return P

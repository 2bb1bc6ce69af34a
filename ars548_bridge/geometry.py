"""
ARS548 Bridge Geometry
========================

Conversions from sensor-native geometry to Cartesian points:

  - Objects report a position at one of 9 reference points of their bounding
    box (corners, edge middles, center). ``object_center`` moves it to the
    geometric center using the object's yaw and shape.
  - Detections report range / azimuth / elevation. ``detection_to_cartesian``
    is the plain spherical projection.

No validation is performed: NaN / Inf inputs propagate to the outputs.
"""

import logging
from typing import Tuple

import numpy as np

from .frames import Vector3

logger = logging.getLogger(__name__)


# ===== REFERENCE POINT TABLE =====

# position_reference -> (offset_x, offset_y) from the reference point to the
# center, in half-length / half-width units of the object's own axes.
REFERENCE_OFFSETS: Tuple[Tuple[float, float], ...] = (
    (-1.0, -1.0),  # 0 corner front left
    (-1.0,  0.0),  # 1 middle front
    (-1.0,  1.0),  # 2 corner front right
    ( 0.0,  1.0),  # 3 middle side right
    ( 1.0,  1.0),  # 4 corner rear right
    ( 1.0,  0.0),  # 5 middle rear
    ( 1.0, -1.0),  # 6 corner rear left
    ( 0.0, -1.0),  # 7 middle side left
    ( 0.0,  0.0),  # 8 center
)

MIN_POSITION_REFERENCE = 0
MAX_POSITION_REFERENCE = len(REFERENCE_OFFSETS) - 1


def clamp_position_reference(index: int) -> int:
    """Table index for a position reference; anything outside [0, 8] is the center (8)."""
    index = int(index)
    if MIN_POSITION_REFERENCE <= index <= MAX_POSITION_REFERENCE:
        return index
    logger.debug("position_reference %s out of range, using center %d", index,
                 MAX_POSITION_REFERENCE)
    return MAX_POSITION_REFERENCE


# ===== OBJECTS =====

def object_center(position: Vector3, orientation: float, length: float, width: float,
                  position_reference: int) -> Tuple[float, float, float]:
    """Geometric center of an object whose position refers to a box reference point.

    Args:
        position: Reported reference-point position [m]
        orientation: Yaw [rad]
        length: Shape length (edge mean) [m]
        width: Shape width (edge mean) [m]
        position_reference: Reference-point index; out of range means center

    Returns:
        Tuple: (x, y, z) of the box center; z is the reported z.
    """
    offset_x, offset_y = REFERENCE_OFFSETS[clamp_position_reference(position_reference)]
    half_length = 0.5 * length
    half_width = 0.5 * width

    cos_yaw = np.cos(orientation)
    sin_yaw = np.sin(orientation)

    x = position.x + cos_yaw * half_length * offset_x - sin_yaw * half_width * offset_y
    y = position.y + sin_yaw * half_length * offset_x + cos_yaw * half_width * offset_y
    return float(x), float(y), float(position.z)


def tracked_object_center(obj) -> Tuple[float, float, float]:
    """``object_center`` for a ``TrackedObject``."""
    return object_center(obj.position, obj.orientation,
                         obj.shape_length_edge_mean, obj.shape_width_edge_mean,
                         obj.position_reference)


# ===== DETECTIONS =====

def detection_to_cartesian(range_m: float, azimuth: float,
                           elevation: float) -> Tuple[float, float, float]:
    """Spherical (range, azimuth, elevation) to Cartesian (x, y, z)."""
    cos_el = np.cos(elevation)
    x = cos_el * np.cos(azimuth) * range_m
    y = cos_el * np.sin(azimuth) * range_m
    z = np.sin(elevation) * range_m
    return float(x), float(y), float(z)


# ===== ORIENTATION =====

def yaw_to_quaternion(yaw: float) -> Tuple[float, float, float, float]:
    """Quaternion (x, y, z, w) of a rotation by ``yaw`` about the vertical axis."""
    half = 0.5 * yaw
    return 0.0, 0.0, float(np.sin(half)), float(np.cos(half))

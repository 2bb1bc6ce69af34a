"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
ARS548 BRIDGE - DECODED FRAME TYPES
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Records produced by the external packet decoder and consumed read-only by the bridge.

Two independent frame kinds exist:
  - DetectionList: raw radar detections (polar, sensor-native)
  - ObjectList:    tracked objects (reference-point geometry, covariances, class scores)

Angles are radians, distances meters, velocities m/s. Class scores and
probabilities are the sensor's integer percentages (0-100).
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List


# =============================================================================
# ENUMERATIONS
# =============================================================================

class StatusMeasurement(IntEnum):
    """Measurement status reported per object."""
    MEASURED = 0
    NEW = 1
    PREDICTED = 2
    INVALID = 255


class StatusMovement(IntEnum):
    """Movement status reported per object."""
    MOVED = 0
    STATIONARY = 1
    INVALID = 255


class PositionReference(IntEnum):
    """Point of the bounding box the reported object position refers to."""
    CORNER_FRONT_LEFT = 0
    MIDDLE_FRONT = 1
    CORNER_FRONT_RIGHT = 2
    MIDDLE_SIDE_RIGHT = 3
    CORNER_REAR_RIGHT = 4
    MIDDLE_REAR = 5
    CORNER_REAR_LEFT = 6
    MIDDLE_SIDE_LEFT = 7
    CENTER = 8


def enum_label(enum_cls, value: int) -> str:
    """Name of ``value`` in ``enum_cls``, or the raw integer when unknown."""
    try:
        return enum_cls(value).name
    except ValueError:
        return str(value)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class Header:
    """Timestamp and coordinate-frame tag shared by every output of a frame."""
    stamp: float = 0.0  # seconds
    frame_id: str = ""


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Detection:
    """Single raw radar detection."""
    range: float
    azimuth_angle: float
    elevation_angle: float
    range_std: float = 0.0
    azimuth_angle_std: float = 0.0
    elevation_angle_std: float = 0.0
    range_rate: float = 0.0
    range_rate_std: float = 0.0
    rcs: float = 0.0  # dBsm
    measurement_id: int = 0
    object_id: int = 0  # object the sensor associated this detection with
    classification: int = 0
    multi_target_probability: int = 0
    positive_predictive_value: int = 0
    ambiguity_flag: int = 0
    invalid_azimuth: bool = False
    invalid_distance: bool = False
    invalid_elevation: bool = False
    invalid_range_rate: bool = False

    @property
    def is_valid(self) -> bool:
        """True when none of the four invalidity flags is set."""
        return not (self.invalid_azimuth or self.invalid_distance
                    or self.invalid_elevation or self.invalid_range_rate)


@dataclass(frozen=True)
class TrackedObject:
    """Object tracked by the sensor; ``object_id`` is stable across frames."""
    object_id: int
    age: int = 0  # ms
    status_measurement: int = StatusMeasurement.MEASURED
    status_movement: int = StatusMovement.MOVED
    position_reference: int = PositionReference.CENTER

    # Position (reference point, not necessarily the center)
    position: Vector3 = field(default_factory=Vector3)
    position_std: Vector3 = field(default_factory=Vector3)
    position_covariance_xy: float = 0.0

    # Orientation (yaw about the vertical axis)
    orientation: float = 0.0
    orientation_std: float = 0.0
    orientation_rate_mean: float = 0.0
    orientation_rate_std: float = 0.0

    existence_probability: float = 0.0

    # Classification confidences
    classification_unknown: int = 0
    classification_car: int = 0
    classification_truck: int = 0
    classification_motorcycle: int = 0
    classification_bicycle: int = 0
    classification_pedestrian: int = 0

    # Dynamics
    absolute_velocity: Vector3 = field(default_factory=Vector3)
    absolute_velocity_std: Vector3 = field(default_factory=Vector3)
    absolute_velocity_covariance_xy: float = 0.0
    relative_velocity: Vector3 = field(default_factory=Vector3)
    relative_velocity_std: Vector3 = field(default_factory=Vector3)
    relative_velocity_covariance_xy: float = 0.0
    absolute_acceleration: Vector3 = field(default_factory=Vector3)
    absolute_acceleration_std: Vector3 = field(default_factory=Vector3)
    absolute_acceleration_covariance_xy: float = 0.0

    # Shape (edge means; height is not reported)
    shape_length_edge_mean: float = 0.0
    shape_width_edge_mean: float = 0.0


@dataclass
class DetectionList:
    """Detection frame."""
    header: Header
    detections: List[Detection] = field(default_factory=list)


@dataclass
class ObjectList:
    """Object frame."""
    header: Header
    objects: List[TrackedObject] = field(default_factory=list)

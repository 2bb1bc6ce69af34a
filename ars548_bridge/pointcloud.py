"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
ARS548 BRIDGE - POINT CLOUD BUILDER
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Builds unorganized point clouds (height = 1) from decoded frames as numpy
structured arrays, one point per record, in input order, with no filtering.

DETECTION POINT:
┌──────────────────────────────────────────────────────────────────────────────┐
│ x, y, z                     float32   spherical projection of the detection  │
│ azimuth(_std)               float32   rad                                     │
│ elevation(_std)             float32   rad                                     │
│ range(_std)                 float32   m                                       │
│ rcs                         float32   dBsm                                    │
│ measurement_id              uint16                                            │
│ positive_predictive_value   uint8     %                                       │
│ classification              uint8                                             │
│ multi_target_probability    uint8     %                                       │
│ object_id                   uint16    associated object                       │
│ ambiguity_flag              uint8                                             │
└──────────────────────────────────────────────────────────────────────────────┘

OBJECT POINT:
┌──────────────────────────────────────────────────────────────────────────────┐
│ x, y, z                     float32   box center (reference point corrected) │
│ id                          uint32                                            │
│ age                         uint16    ms                                      │
│ status_measurement          uint8                                             │
│ status_movement             uint8                                             │
│ position_reference          uint8     table index used for the center (0-8)  │
│ classification_*            uint8     car/truck/motorcycle/bicycle/pedestrian │
│ dynamics_abs_vel_x/y        float32   m/s                                     │
│ dynamics_rel_vel_x/y        float32   m/s                                     │
│ shape_length/width_edge_mean float32  m                                       │
│ dynamics_orientation_rate_mean float32 rad/s                                  │
└──────────────────────────────────────────────────────────────────────────────┘

Serializing the arrays into a transport message is left to the publisher.
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

from dataclasses import dataclass

import numpy as np

from .frames import DetectionList, Header, ObjectList
from .geometry import clamp_position_reference, detection_to_cartesian, tracked_object_center


# =============================================================================
# POINT LAYOUTS
# =============================================================================

DETECTION_POINT_DTYPE = np.dtype([
    ('x', np.float32),
    ('y', np.float32),
    ('z', np.float32),
    ('azimuth', np.float32),
    ('azimuth_std', np.float32),
    ('elevation', np.float32),
    ('elevation_std', np.float32),
    ('range', np.float32),
    ('range_std', np.float32),
    ('rcs', np.float32),
    ('measurement_id', np.uint16),
    ('positive_predictive_value', np.uint8),
    ('classification', np.uint8),
    ('multi_target_probability', np.uint8),
    ('object_id', np.uint16),
    ('ambiguity_flag', np.uint8),
])

OBJECT_POINT_DTYPE = np.dtype([
    ('x', np.float32),
    ('y', np.float32),
    ('z', np.float32),
    ('id', np.uint32),
    ('age', np.uint16),
    ('status_measurement', np.uint8),
    ('status_movement', np.uint8),
    ('position_reference', np.uint8),
    ('classification_car', np.uint8),
    ('classification_truck', np.uint8),
    ('classification_motorcycle', np.uint8),
    ('classification_bicycle', np.uint8),
    ('classification_pedestrian', np.uint8),
    ('dynamics_abs_vel_x', np.float32),
    ('dynamics_abs_vel_y', np.float32),
    ('dynamics_rel_vel_x', np.float32),
    ('dynamics_rel_vel_y', np.float32),
    ('shape_length_edge_mean', np.float32),
    ('shape_width_edge_mean', np.float32),
    ('dynamics_orientation_rate_mean', np.float32),
])


@dataclass
class PointCloud:
    """Unorganized point cloud; ``points`` is a 1-D structured array."""
    header: Header
    points: np.ndarray

    @property
    def width(self) -> int:
        return len(self.points)

    @property
    def height(self) -> int:
        return 1

    def __len__(self):
        return len(self.points)


# =============================================================================
# BUILDERS
# =============================================================================

def build_detection_pointcloud(msg: DetectionList) -> PointCloud:
    """One point per detection, positioned by its range/azimuth/elevation."""
    points = np.zeros(len(msg.detections), dtype=DETECTION_POINT_DTYPE)

    for i, det in enumerate(msg.detections):
        point = points[i]
        point['x'], point['y'], point['z'] = detection_to_cartesian(
            det.range, det.azimuth_angle, det.elevation_angle)
        point['azimuth'] = det.azimuth_angle
        point['azimuth_std'] = det.azimuth_angle_std
        point['elevation'] = det.elevation_angle
        point['elevation_std'] = det.elevation_angle_std
        point['range'] = det.range
        point['range_std'] = det.range_std
        point['rcs'] = det.rcs
        point['measurement_id'] = det.measurement_id
        point['positive_predictive_value'] = det.positive_predictive_value
        point['classification'] = det.classification
        point['multi_target_probability'] = det.multi_target_probability
        point['object_id'] = det.object_id
        point['ambiguity_flag'] = det.ambiguity_flag

    return PointCloud(header=msg.header, points=points)


def build_object_pointcloud(msg: ObjectList) -> PointCloud:
    """One point per object, positioned at the bounding-box center."""
    points = np.zeros(len(msg.objects), dtype=OBJECT_POINT_DTYPE)

    for i, obj in enumerate(msg.objects):
        point = points[i]
        point['x'], point['y'], point['z'] = tracked_object_center(obj)
        point['id'] = obj.object_id
        point['age'] = obj.age
        point['status_measurement'] = obj.status_measurement
        point['status_movement'] = obj.status_movement
        point['position_reference'] = clamp_position_reference(obj.position_reference)
        point['classification_car'] = obj.classification_car
        point['classification_truck'] = obj.classification_truck
        point['classification_motorcycle'] = obj.classification_motorcycle
        point['classification_bicycle'] = obj.classification_bicycle
        point['classification_pedestrian'] = obj.classification_pedestrian
        point['dynamics_abs_vel_x'] = obj.absolute_velocity.x
        point['dynamics_abs_vel_y'] = obj.absolute_velocity.y
        point['dynamics_rel_vel_x'] = obj.relative_velocity.x
        point['dynamics_rel_vel_y'] = obj.relative_velocity.y
        point['shape_length_edge_mean'] = obj.shape_length_edge_mean
        point['shape_width_edge_mean'] = obj.shape_width_edge_mean
        point['dynamics_orientation_rate_mean'] = obj.orientation_rate_mean

    return PointCloud(header=msg.header, points=points)

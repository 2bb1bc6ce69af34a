"""Tests for ARS548 Bridge point cloud building."""
import numpy as np
import pytest
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ars548_bridge.frames import Detection, DetectionList, Header, ObjectList, TrackedObject, Vector3
from ars548_bridge.pointcloud import (
    DETECTION_POINT_DTYPE,
    OBJECT_POINT_DTYPE,
    build_detection_pointcloud,
    build_object_pointcloud,
)

HEADER = Header(stamp=12.5, frame_id='continental')


def _detection(i, **kwargs):
    params = dict(range=10.0 + i, azimuth_angle=0.01 * i, elevation_angle=0.0,
                  range_std=0.1, azimuth_angle_std=0.002, elevation_angle_std=0.003,
                  rcs=5.0 + i, measurement_id=100 + i, object_id=7,
                  classification=2, multi_target_probability=10,
                  positive_predictive_value=90, ambiguity_flag=1)
    params.update(kwargs)
    return Detection(**params)


class TestDetectionPointCloud:
    """Detection frame to point cloud."""

    def test_one_point_per_detection_in_order(self):
        """Invalid detections are kept; order is preserved."""
        detections = [_detection(i, invalid_distance=(i % 2 == 0)) for i in range(6)]
        cloud = build_detection_pointcloud(DetectionList(HEADER, detections))

        assert cloud.points.dtype == DETECTION_POINT_DTYPE
        assert len(cloud) == 6
        assert cloud.width == 6
        assert cloud.height == 1
        np.testing.assert_array_equal(cloud.points['measurement_id'], np.arange(100, 106))

    def test_header_forwarded(self):
        cloud = build_detection_pointcloud(DetectionList(HEADER, [_detection(0)]))
        assert cloud.header == HEADER

    def test_position_and_attributes(self):
        det = _detection(0, range=20.0, azimuth_angle=np.pi / 6, elevation_angle=0.1)
        point = build_detection_pointcloud(DetectionList(HEADER, [det])).points[0]

        assert point['x'] == pytest.approx(np.cos(0.1) * np.cos(np.pi / 6) * 20.0, rel=1e-6)
        assert point['y'] == pytest.approx(np.cos(0.1) * np.sin(np.pi / 6) * 20.0, rel=1e-6)
        assert point['z'] == pytest.approx(np.sin(0.1) * 20.0, rel=1e-6)
        assert point['range'] == pytest.approx(20.0)
        assert point['azimuth'] == pytest.approx(np.pi / 6)
        assert point['azimuth_std'] == pytest.approx(0.002)
        assert point['elevation_std'] == pytest.approx(0.003)
        assert point['range_std'] == pytest.approx(0.1)
        assert point['rcs'] == pytest.approx(5.0)
        assert point['object_id'] == 7
        assert point['classification'] == 2
        assert point['multi_target_probability'] == 10
        assert point['positive_predictive_value'] == 90
        assert point['ambiguity_flag'] == 1

    def test_empty_frame(self):
        cloud = build_detection_pointcloud(DetectionList(HEADER, []))
        assert len(cloud) == 0
        assert cloud.points.dtype == DETECTION_POINT_DTYPE


class TestObjectPointCloud:
    """Object frame to point cloud."""

    def test_one_point_per_object(self):
        objects = [TrackedObject(object_id=i) for i in (5, 3, 9)]
        cloud = build_object_pointcloud(ObjectList(HEADER, objects))

        assert cloud.points.dtype == OBJECT_POINT_DTYPE
        assert cloud.width == 3
        np.testing.assert_array_equal(cloud.points['id'], [5, 3, 9])

    def test_point_at_box_center(self):
        """Reported front-left corner moves to the geometric center."""
        obj = TrackedObject(object_id=1, position=Vector3(10.0, 5.0, 1.0),
                            position_reference=0, orientation=0.0,
                            shape_length_edge_mean=4.0, shape_width_edge_mean=2.0)
        point = build_object_pointcloud(ObjectList(HEADER, [obj])).points[0]
        assert (point['x'], point['y'], point['z']) == pytest.approx((8.0, 4.0, 1.0))
        assert point['position_reference'] == 0

    def test_attributes_copied(self):
        obj = TrackedObject(
            object_id=70000, age=1500, status_measurement=2, status_movement=1,
            position_reference=12,
            classification_car=10, classification_truck=20, classification_motorcycle=30,
            classification_bicycle=40, classification_pedestrian=50,
            absolute_velocity=Vector3(1.0, 2.0, 0.0), relative_velocity=Vector3(-1.0, -2.0, 0.0),
            shape_length_edge_mean=4.5, shape_width_edge_mean=1.8, orientation_rate_mean=0.25,
        )
        point = build_object_pointcloud(ObjectList(HEADER, [obj])).points[0]

        assert point['id'] == 70000
        assert point['age'] == 1500
        assert point['status_measurement'] == 2
        assert point['status_movement'] == 1
        assert point['position_reference'] == 8
        assert [point[f'classification_{c}'] for c in
                ('car', 'truck', 'motorcycle', 'bicycle', 'pedestrian')] == [10, 20, 30, 40, 50]
        assert point['dynamics_abs_vel_x'] == pytest.approx(1.0)
        assert point['dynamics_abs_vel_y'] == pytest.approx(2.0)
        assert point['dynamics_rel_vel_x'] == pytest.approx(-1.0)
        assert point['dynamics_rel_vel_y'] == pytest.approx(-2.0)
        assert point['shape_length_edge_mean'] == pytest.approx(4.5)
        assert point['shape_width_edge_mean'] == pytest.approx(1.8)
        assert point['dynamics_orientation_rate_mean'] == pytest.approx(0.25)

    @pytest.mark.parametrize("reference", [-1, 300, 2 ** 40])
    def test_reference_outside_byte_range(self, reference):
        """Any reference value builds a point at the reported position."""
        obj = TrackedObject(object_id=1, position=Vector3(10.0, 5.0, 1.0),
                            position_reference=reference, orientation=0.3,
                            shape_length_edge_mean=4.0, shape_width_edge_mean=2.0)
        point = build_object_pointcloud(ObjectList(HEADER, [obj])).points[0]
        assert point['position_reference'] == 8
        assert (point['x'], point['y'], point['z']) == pytest.approx((10.0, 5.0, 1.0))

"""Tests for ARS548 Bridge generic radar scan and track messages."""
import pytest
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ars548_bridge.classification import ClassificationCode
from ars548_bridge.covariance import INVALID_COVARIANCE
from ars548_bridge.frames import Detection, DetectionList, Header, ObjectList, TrackedObject, Vector3
from ars548_bridge.radar_msgs import (
    UUID_SIZE,
    build_radar_scan,
    build_radar_track,
    build_radar_tracks,
    object_id_to_uuid,
)

HEADER = Header(stamp=1.0, frame_id='continental')

INVALID_FLAGS = ('invalid_azimuth', 'invalid_distance', 'invalid_elevation', 'invalid_range_rate')


class TestRadarScan:
    """Valid detections to radar returns."""

    def test_invalid_detections_dropped(self):
        detections = [Detection(range=1.0, azimuth_angle=0.0, elevation_angle=0.0)]
        for i, flag in enumerate(INVALID_FLAGS):
            detections.append(Detection(range=10.0 + i, azimuth_angle=0.0, elevation_angle=0.0,
                                        **{flag: True}))
        detections.append(Detection(range=2.0, azimuth_angle=0.0, elevation_angle=0.0))

        scan = build_radar_scan(DetectionList(HEADER, detections))
        assert [r.range for r in scan.returns] == [1.0, 2.0]

    def test_fields_copied_verbatim(self):
        det = Detection(range=42.0, azimuth_angle=-0.2, elevation_angle=0.05,
                        range_rate=-3.5, rcs=12.25)
        (ret,) = build_radar_scan(DetectionList(HEADER, [det])).returns
        assert ret.range == 42.0
        assert ret.azimuth == -0.2
        assert ret.elevation == 0.05
        assert ret.doppler_velocity == -3.5
        assert ret.amplitude == 12.25

    def test_order_preserved(self):
        detections = [Detection(range=float(r), azimuth_angle=0.0, elevation_angle=0.0)
                      for r in (5, 3, 8, 1)]
        scan = build_radar_scan(DetectionList(HEADER, detections))
        assert [r.range for r in scan.returns] == [5.0, 3.0, 8.0, 1.0]
        assert scan.header == HEADER

    def test_all_invalid(self):
        detections = [Detection(range=1.0, azimuth_angle=0.0, elevation_angle=0.0,
                                invalid_elevation=True)] * 3
        assert build_radar_scan(DetectionList(HEADER, detections)).returns == []


class TestUuid:
    """Object id to 16-byte identifier."""

    def test_little_endian_prefix(self):
        uuid = object_id_to_uuid(0x12345678)
        assert len(uuid) == UUID_SIZE
        assert uuid[:4] == bytes([0x78, 0x56, 0x34, 0x12])
        assert uuid[4:] == bytes(12)

    def test_stable(self):
        assert object_id_to_uuid(17) == object_id_to_uuid(17)
        assert object_id_to_uuid(17) != object_id_to_uuid(18)


class TestRadarTracks:
    """Tracked objects to generic tracks."""

    def _object(self):
        return TrackedObject(
            object_id=258,
            position=Vector3(10.0, 5.0, 1.0),
            position_reference=8,
            position_std=Vector3(2.0, 3.0, 4.0),
            position_covariance_xy=0.5,
            absolute_velocity=Vector3(3.0, -1.0, 0.0),
            absolute_velocity_std=Vector3(0.5, 0.25, 0.0),
            absolute_velocity_covariance_xy=0.01,
            absolute_acceleration=Vector3(0.2, 0.1, 0.0),
            absolute_acceleration_std=Vector3(1.0, 1.0, 1.0),
            absolute_acceleration_covariance_xy=-0.1,
            shape_length_edge_mean=4.5,
            shape_width_edge_mean=1.9,
            classification_unknown=5,
            classification_car=5,
            classification_truck=7,
        )

    def test_track_fields(self):
        track = build_radar_track(self._object())

        assert track.object_id == 258
        assert track.uuid[:2] == bytes([0x02, 0x01])
        assert track.position == Vector3(10.0, 5.0, 1.0)
        assert track.velocity == Vector3(3.0, -1.0, 0.0)
        assert track.acceleration == Vector3(0.2, 0.1, 0.0)
        assert track.size == Vector3(4.5, 1.9, 1.0)
        assert track.classification == ClassificationCode.TRUCK

    def test_covariances(self):
        track = build_radar_track(self._object())

        assert track.position_covariance == [4.0, 0.5, 0.0, 9.0, 0.0, 16.0]
        assert track.velocity_covariance == pytest.approx([0.25, 0.01, 0.0, 0.0625, 0.0, 0.0])
        assert track.acceleration_covariance == [1.0, -0.1, 0.0, 1.0, 0.0, 1.0]
        assert track.size_covariance == [INVALID_COVARIANCE, 0.0, 0.0,
                                         INVALID_COVARIANCE, 0.0, INVALID_COVARIANCE]

    def test_position_is_center(self):
        obj = TrackedObject(object_id=1, position=Vector3(10.0, 5.0, 1.0), position_reference=1,
                            shape_length_edge_mean=4.0, shape_width_edge_mean=2.0)
        track = build_radar_track(obj)
        assert (track.position.x, track.position.y, track.position.z) == pytest.approx(
            (8.0, 5.0, 1.0))

    def test_list(self):
        objects = [TrackedObject(object_id=i) for i in (4, 2, 6)]
        tracks = build_radar_tracks(ObjectList(HEADER, objects))
        assert tracks.header == HEADER
        assert [t.object_id for t in tracks.tracks] == [4, 2, 6]
        assert all(t.classification == ClassificationCode.UNKNOWN for t in tracks.tracks)

"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
ARS548 BRIDGE - GENERIC RADAR MESSAGES
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Sensor-independent representations of a frame:

  RadarScan   - list of radar returns (range, azimuth, elevation, doppler, amplitude),
                one per *valid* detection
  RadarTracks - list of tracks with center position, dynamics, size,
                packed covariances and an arbitrated classification code

Track identity is a 16-byte UUID whose first four bytes hold the sensor's
object id, little-endian.
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

import struct
from dataclasses import dataclass, field
from typing import List

from .classification import ClassificationCode, arbitrate_classification
from .covariance import pack_covariance, size_covariance
from .frames import DetectionList, Header, ObjectList, Vector3
from .geometry import tracked_object_center

UUID_SIZE = 16

# Height is not reported by the sensor
TRACK_SIZE_Z = 1.0


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class RadarReturn:
    range: float
    azimuth: float
    elevation: float
    doppler_velocity: float
    amplitude: float


@dataclass
class RadarScan:
    header: Header
    returns: List[RadarReturn] = field(default_factory=list)


@dataclass
class RadarTrack:
    uuid: bytes
    position: Vector3
    velocity: Vector3
    acceleration: Vector3
    size: Vector3
    classification: ClassificationCode
    position_covariance: List[float]
    velocity_covariance: List[float]
    acceleration_covariance: List[float]
    size_covariance: List[float]

    @property
    def object_id(self) -> int:
        """Sensor object id recovered from the UUID."""
        return struct.unpack_from('<I', self.uuid)[0]


@dataclass
class RadarTracks:
    header: Header
    tracks: List[RadarTrack] = field(default_factory=list)


# =============================================================================
# BUILDERS
# =============================================================================

def object_id_to_uuid(object_id: int) -> bytes:
    """Stable 16-byte identifier: the 32-bit object id, little-endian, zero padded."""
    return struct.pack('<I', object_id & 0xFFFFFFFF) + bytes(UUID_SIZE - 4)


def build_radar_scan(msg: DetectionList) -> RadarScan:
    """Radar returns for the detections without any invalidity flag, in order."""
    returns = [
        RadarReturn(
            range=det.range,
            azimuth=det.azimuth_angle,
            elevation=det.elevation_angle,
            doppler_velocity=det.range_rate,
            amplitude=det.rcs,
        )
        for det in msg.detections
        if det.is_valid
    ]
    return RadarScan(header=msg.header, returns=returns)


def build_radar_track(obj) -> RadarTrack:
    """Generic track for a single ``TrackedObject``."""
    return RadarTrack(
        uuid=object_id_to_uuid(obj.object_id),
        position=Vector3(*tracked_object_center(obj)),
        velocity=obj.absolute_velocity,
        acceleration=obj.absolute_acceleration,
        size=Vector3(obj.shape_length_edge_mean, obj.shape_width_edge_mean, TRACK_SIZE_Z),
        classification=arbitrate_classification(obj),
        position_covariance=pack_covariance(obj.position_std, obj.position_covariance_xy),
        velocity_covariance=pack_covariance(obj.absolute_velocity_std,
                                            obj.absolute_velocity_covariance_xy),
        acceleration_covariance=pack_covariance(obj.absolute_acceleration_std,
                                                obj.absolute_acceleration_covariance_xy),
        size_covariance=size_covariance(),
    )


def build_radar_tracks(msg: ObjectList) -> RadarTracks:
    return RadarTracks(header=msg.header, tracks=[build_radar_track(obj) for obj in msg.objects])

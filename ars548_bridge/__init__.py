"""ARS548 Bridge: per-frame transcoder for Continental ARS548 radar frames.

Converts decoded detection and object frames into point clouds, generic radar
returns / tracks and visualization markers, building each representation only
when a consumer wants it.

Quick Start::

    from ars548_bridge import RadarFrameBridge, load_config
    bridge = RadarFrameBridge(load_config("config/ars548.yaml"))
    bridge.on_object_list(object_list)
"""

__version__ = "1.0.0"
__license__ = "AGPL-3.0-or-later"

from .bridge import BridgePublishers, RadarFrameBridge
from .classification import ClassificationCode, arbitrate_classification, arbitrate_scores
from .config import (
    ConfigurationError,
    InvalidSensorModelError,
    SensorConfiguration,
    SensorModel,
    Status,
    load_config,
    sensor_model_from_string,
)
from .covariance import INVALID_COVARIANCE, pack_covariance, size_covariance, unpack_covariance
from .dispatcher import DemandGatedDispatcher, Derivation, DispatchReport, LocalPublisher
from .frames import (
    Detection,
    DetectionList,
    Header,
    ObjectList,
    PositionReference,
    StatusMeasurement,
    StatusMovement,
    TrackedObject,
    Vector3,
)
from .geometry import (
    REFERENCE_OFFSETS,
    clamp_position_reference,
    detection_to_cartesian,
    object_center,
    yaw_to_quaternion,
)
from .markers import Marker, MarkerAction, MarkerArray, MarkerLifecycleManager, MarkerType
from .pointcloud import (
    DETECTION_POINT_DTYPE,
    OBJECT_POINT_DTYPE,
    PointCloud,
    build_detection_pointcloud,
    build_object_pointcloud,
)
from .radar_msgs import (
    RadarReturn,
    RadarScan,
    RadarTrack,
    RadarTracks,
    build_radar_scan,
    build_radar_tracks,
    object_id_to_uuid,
)

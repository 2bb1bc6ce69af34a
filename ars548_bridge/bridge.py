"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
ARS548 BRIDGE - FRAME BRIDGE
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Entry point for decoded frames. The external decoder calls:

  on_detection_list(DetectionList)
      detection_points      PointCloud   (demand-gated)
      scan_raw              RadarScan    (demand-gated)
      continental_detections DetectionList pass-through

  on_object_list(ObjectList)
      object_points         PointCloud   (demand-gated)
      objects_raw           RadarTracks  (demand-gated)
      marker_array          MarkerArray  (demand-gated, stateful)
      continental_objects   ObjectList   pass-through

Frames are processed one at a time, to completion, in arrival order.
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import SensorConfiguration, Status
from .dispatcher import DemandGatedDispatcher, Derivation, DispatchReport, LocalPublisher, Publisher
from .frames import DetectionList, ObjectList
from .markers import MarkerLifecycleManager
from .pointcloud import build_detection_pointcloud, build_object_pointcloud
from .radar_msgs import build_radar_scan, build_radar_tracks

logger = logging.getLogger(__name__)


@dataclass
class BridgePublishers:
    """Destinations of every representation, defaulting to in-process publishers."""
    detection_list: Publisher = field(
        default_factory=lambda: LocalPublisher('continental_detections'))
    object_list: Publisher = field(
        default_factory=lambda: LocalPublisher('continental_objects'))
    detection_pointcloud: Publisher = field(
        default_factory=lambda: LocalPublisher('detection_points'))
    object_pointcloud: Publisher = field(
        default_factory=lambda: LocalPublisher('object_points'))
    scan_raw: Publisher = field(
        default_factory=lambda: LocalPublisher('scan_raw'))
    objects_raw: Publisher = field(
        default_factory=lambda: LocalPublisher('objects_raw'))
    objects_markers: Publisher = field(
        default_factory=lambda: LocalPublisher('marker_array'))


class RadarFrameBridge:
    """
    Converts decoded ARS548 frames into downstream representations.

    Args:
        config: Validated sensor configuration
        publishers: Output destinations (in-process publishers by default)
        dispatcher: Demand-gated dispatcher (pass-through always forwarded by default)
    """

    def __init__(self, config: SensorConfiguration,
                 publishers: Optional[BridgePublishers] = None,
                 dispatcher: Optional[DemandGatedDispatcher] = None):
        self.config = config
        self.publishers = publishers if publishers is not None else BridgePublishers()
        self.dispatcher = dispatcher if dispatcher is not None else DemandGatedDispatcher()
        self.marker_manager = MarkerLifecycleManager(frame_id=config.object_frame)
        self.status = Status.OK

        logger.info("ARS548 bridge started: model=%s sensor=%s:%s frame=%s object_frame=%s",
                    config.sensor_model.value, config.sensor_ip, config.data_port,
                    config.frame_id, config.object_frame)

    def on_detection_list(self, msg: DetectionList) -> DispatchReport:
        """Handle one decoded detection frame."""
        derivations = (
            Derivation('detection_pointcloud', self.publishers.detection_pointcloud,
                       build_detection_pointcloud),
            Derivation('scan_raw', self.publishers.scan_raw, build_radar_scan),
        )
        report = self.dispatcher.dispatch(msg, derivations, self.publishers.detection_list)
        logger.debug("Detection frame t=%.3f: %d detections", msg.header.stamp,
                     len(msg.detections))
        return report

    def on_object_list(self, msg: ObjectList) -> DispatchReport:
        """Handle one decoded object frame."""
        derivations = (
            Derivation('object_pointcloud', self.publishers.object_pointcloud,
                       build_object_pointcloud),
            Derivation('objects_raw', self.publishers.objects_raw, build_radar_tracks),
            Derivation('objects_markers', self.publishers.objects_markers,
                       lambda frame: self.marker_manager.build(frame, commit=False),
                       on_published=self.marker_manager.commit),
        )
        report = self.dispatcher.dispatch(msg, derivations, self.publishers.object_list)
        logger.debug("Object frame t=%.3f: %d objects", msg.header.stamp, len(msg.objects))
        return report

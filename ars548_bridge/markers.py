"""
═══════════════════════════════════════════════════════════════════════════════════════════════════════
ARS548 BRIDGE - MARKER LIFECYCLE MANAGER
═══════════════════════════════════════════════════════════════════════════════════════════════════════

Renders every tracked object of an object frame into visualization markers for a
stateful viewer (RViz-style) and removes the markers of objects that vanished.

Per object, four markers share the object id as marker id, one per namespace:
  boxes     - LINE_STRIP outline of the bounding box (17-point cube path)
  ages      - TEXT label: id and age
  status    - TEXT label: measurement / movement status
  dynamics  - TEXT label: absolute / relative velocity, acceleration

Lifecycle:
  previous_ids holds the ids rendered for the last object frame. Every id of
  previous_ids missing from the current frame gets one DELETE per namespace.
  previous_ids is then replaced (never merged) by the current ids once the
  batch is committed: right after a successful build by default, or, with
  build(msg, commit=False), when commit() is called after a successful publish.
═══════════════════════════════════════════════════════════════════════════════════════════════════════
"""

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from typing import FrozenSet, List, Optional, Set, Tuple

import numpy as np

from .frames import (Header, ObjectList, StatusMeasurement, StatusMovement, Vector3,
                     enum_label)
from .geometry import tracked_object_center, yaw_to_quaternion

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

class MarkerType(IntEnum):
    LINE_STRIP = 4
    TEXT_VIEW_FACING = 9


class MarkerAction(IntEnum):
    ADD = 0
    DELETE = 2


BOX_NAMESPACE = 'boxes'
AGE_NAMESPACE = 'ages'
STATUS_NAMESPACE = 'status'
DYNAMICS_NAMESPACE = 'dynamics'
MARKER_NAMESPACES: Tuple[str, ...] = (
    BOX_NAMESPACE, AGE_NAMESPACE, STATUS_NAMESPACE, DYNAMICS_NAMESPACE,
)

BOX_HALF_HEIGHT = 1.0      # m, height is not reported by the sensor
BOX_LINE_WIDTH = 0.1       # m
TEXT_HEIGHT = 0.5          # m
TEXT_Z_OFFSET = 2.0        # m above the box center
TEXT_LINE_SPACING = 1.0    # m between stacked labels

# Unit cube traced as one line strip; visits all 12 edges
CUBE_CORNERS: Tuple[Tuple[float, float, float], ...] = (
    (-1.0, -1.0, -1.0),
    ( 1.0, -1.0, -1.0),
    ( 1.0,  1.0, -1.0),
    (-1.0,  1.0, -1.0),
    (-1.0, -1.0, -1.0),
    (-1.0, -1.0,  1.0),
    ( 1.0, -1.0,  1.0),
    ( 1.0,  1.0,  1.0),
    (-1.0,  1.0,  1.0),
    (-1.0, -1.0,  1.0),
    ( 1.0, -1.0,  1.0),
    ( 1.0, -1.0, -1.0),
    ( 1.0,  1.0, -1.0),
    ( 1.0,  1.0,  1.0),
    (-1.0,  1.0,  1.0),
    (-1.0,  1.0, -1.0),
    (-1.0,  1.0,  1.0),
)

# 8-bit RGB, indexed by object_id % len(COLOR_PALETTE)
COLOR_PALETTE: Tuple[Tuple[int, int, int], ...] = (
    (230, 25, 75), (60, 180, 75), (255, 225, 25), (0, 130, 200),
    (245, 130, 48), (145, 30, 180), (70, 240, 240), (240, 50, 230),
    (210, 245, 60), (250, 190, 212), (0, 128, 128), (220, 190, 255),
    (170, 110, 40), (255, 250, 200), (128, 0, 0), (170, 255, 195),
    (128, 128, 0), (255, 215, 180), (0, 0, 128), (128, 128, 128),
    (31, 119, 180), (255, 127, 14), (44, 160, 44), (214, 39, 40),
    (148, 103, 189), (140, 86, 75), (227, 119, 194), (188, 189, 34),
    (23, 190, 207), (174, 199, 232), (255, 152, 150), (197, 176, 213),
)
PALETTE_SIZE = len(COLOR_PALETTE)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class ColorRGBA:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0


@dataclass
class Marker:
    """Single visualization primitive."""
    header: Header
    ns: str
    id: int
    action: MarkerAction = MarkerAction.ADD
    type: MarkerType = MarkerType.LINE_STRIP
    position: Vector3 = field(default_factory=Vector3)
    orientation: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)  # x, y, z, w
    scale: Vector3 = field(default_factory=Vector3)
    color: ColorRGBA = field(default_factory=ColorRGBA)
    points: List[Vector3] = field(default_factory=list)
    text: str = ''
    lifetime: float = 0.0  # 0 = until deleted


@dataclass
class MarkerArray:
    markers: List[Marker] = field(default_factory=list)

    @property
    def additions(self) -> List[Marker]:
        return [m for m in self.markers if m.action == MarkerAction.ADD]

    @property
    def deletions(self) -> List[Marker]:
        return [m for m in self.markers if m.action == MarkerAction.DELETE]

    def __len__(self):
        return len(self.markers)


def palette_color(object_id: int) -> ColorRGBA:
    """Deterministic color of an object id."""
    r, g, b = COLOR_PALETTE[object_id % PALETTE_SIZE]
    return ColorRGBA(r / 255.0, g / 255.0, b / 255.0, 1.0)


# =============================================================================
# LIFECYCLE MANAGER
# =============================================================================

class MarkerLifecycleManager:
    """
    Builds marker batches for consecutive object frames.

    One instance per viewer stream; frames must be passed in arrival order.
    """

    def __init__(self, frame_id: Optional[str] = None):
        """
        Args:
            frame_id: Frame stamped on every marker. Defaults to the
                frame id of each incoming ObjectList.
        """
        self.frame_id = frame_id
        self._previous_ids: Set[int] = set()
        self._pending_ids: Optional[Set[int]] = None

    @property
    def previous_ids(self) -> FrozenSet[int]:
        """Ids rendered for the last committed frame."""
        return frozenset(self._previous_ids)

    def reset(self):
        """Forget rendered ids; no deletions will be emitted for them."""
        self._previous_ids = set()
        self._pending_ids = None

    def build(self, msg: ObjectList, commit: bool = True) -> MarkerArray:
        """Markers for ``msg`` preceded by deletions for vanished objects.

        Args:
            msg: Object frame to render
            commit: Adopt the frame's ids right away. With False the ids wait
                for ``commit()``; a newer build replaces them.
        """
        header = Header(stamp=msg.header.stamp,
                        frame_id=self.frame_id or msg.header.frame_id)

        additions: List[Marker] = []
        current_ids: Set[int] = set()
        for obj in msg.objects:
            additions.extend(self._object_markers(obj, header))
            current_ids.add(obj.object_id)

        vanished = sorted(self._previous_ids - current_ids)
        deletions = [
            Marker(header=header, ns=ns, id=object_id, action=MarkerAction.DELETE)
            for object_id in vanished
            for ns in MARKER_NAMESPACES
        ]

        # Only reached when every marker of the frame was built
        self._pending_ids = current_ids
        if commit:
            self.commit()

        if vanished:
            logger.debug("Deleting markers of vanished objects %s", vanished)
        return MarkerArray(markers=deletions + additions)

    def commit(self):
        """Adopt the ids of the last built batch as rendered."""
        if self._pending_ids is None:
            return
        self._previous_ids = self._pending_ids
        self._pending_ids = None

    # ─────────────────────────────────────────────────────────────────────────
    # Per-object markers
    # ─────────────────────────────────────────────────────────────────────────

    def _object_markers(self, obj, header: Header) -> List[Marker]:
        center = Vector3(*tracked_object_center(obj))
        orientation = yaw_to_quaternion(obj.orientation)
        color = palette_color(obj.object_id)

        box = Marker(
            header=header,
            ns=BOX_NAMESPACE,
            id=obj.object_id,
            type=MarkerType.LINE_STRIP,
            position=center,
            orientation=orientation,
            scale=Vector3(BOX_LINE_WIDTH, 0.0, 0.0),
            color=color,
            points=box_outline(obj.shape_length_edge_mean, obj.shape_width_edge_mean),
        )

        texts = (
            (AGE_NAMESPACE, self._age_text(obj)),
            (STATUS_NAMESPACE, self._status_text(obj)),
            (DYNAMICS_NAMESPACE, self._dynamics_text(obj)),
        )
        labels = [
            Marker(
                header=header,
                ns=ns,
                id=obj.object_id,
                type=MarkerType.TEXT_VIEW_FACING,
                position=Vector3(center.x, center.y,
                                 center.z + TEXT_Z_OFFSET + row * TEXT_LINE_SPACING),
                scale=Vector3(0.0, 0.0, TEXT_HEIGHT),
                color=color,
                text=text,
            )
            for row, (ns, text) in enumerate(texts)
        ]
        return [box] + labels

    @staticmethod
    def _age_text(obj) -> str:
        return f"ID={obj.object_id}\nAGE={obj.age}ms"

    @staticmethod
    def _status_text(obj) -> str:
        return (f"MEAS_STATUS={enum_label(StatusMeasurement, obj.status_measurement)}\n"
                f"MOVEMENT_STATUS={enum_label(StatusMovement, obj.status_movement)}")

    @staticmethod
    def _dynamics_text(obj) -> str:
        av, rv, acc = obj.absolute_velocity, obj.relative_velocity, obj.absolute_acceleration
        return (f"ABS_VEL=({av.x:.2f}, {av.y:.2f}) m/s\n"
                f"REL_VEL=({rv.x:.2f}, {rv.y:.2f}) m/s\n"
                f"ABS_ACC=({acc.x:.2f}, {acc.y:.2f}) m/s2")


def box_outline(length: float, width: float) -> List[Vector3]:
    """Cube path scaled to the box half extents, in the box's own frame."""
    half_extents = np.array([0.5 * length, 0.5 * width, BOX_HALF_HEIGHT])
    corners = np.asarray(CUBE_CORNERS) * half_extents
    return [Vector3(float(x), float(y), float(z)) for x, y, z in corners]

"""
ARS548 Bridge Classification
==============================

Resolves the sensor's per-class confidence scores into one generic track
classification code.

The scan is a fixed tie-break policy, not an argmax:
  - start from the "unknown" score with label UNKNOWN
  - visit car, truck, motorcycle, bicycle, pedestrian in that order
  - take a class only when its score is strictly greater than the running max

Ties therefore go to the earlier class, and "unknown" wins every tie.
"""

from enum import IntEnum
from types import SimpleNamespace
from typing import Tuple


class ClassificationCode(IntEnum):
    """Generic radar track classification codes (gap after TRUCK is intentional)."""
    UNKNOWN = 32000
    CAR = 32001
    TRUCK = 32002
    MOTORCYCLE = 32005
    BICYCLE = 32006
    PEDESTRIAN = 32007


# Order is part of the tie-break contract.
CLASSIFICATION_SCAN_ORDER: Tuple[Tuple[ClassificationCode, str], ...] = (
    (ClassificationCode.CAR, 'classification_car'),
    (ClassificationCode.TRUCK, 'classification_truck'),
    (ClassificationCode.MOTORCYCLE, 'classification_motorcycle'),
    (ClassificationCode.BICYCLE, 'classification_bicycle'),
    (ClassificationCode.PEDESTRIAN, 'classification_pedestrian'),
)


def arbitrate_classification(obj) -> ClassificationCode:
    """Dominant class of a ``TrackedObject``."""
    max_score = obj.classification_unknown
    label = ClassificationCode.UNKNOWN
    for code, attribute in CLASSIFICATION_SCAN_ORDER:
        score = getattr(obj, attribute)
        if score > max_score:
            max_score = score
            label = code
    return label


def arbitrate_scores(unknown: float, car: float, truck: float, motorcycle: float,
                     bicycle: float, pedestrian: float) -> ClassificationCode:
    """Same policy as ``arbitrate_classification`` on bare scores."""
    return arbitrate_classification(SimpleNamespace(
        classification_unknown=unknown,
        classification_car=car,
        classification_truck=truck,
        classification_motorcycle=motorcycle,
        classification_bicycle=bicycle,
        classification_pedestrian=pedestrian,
    ))

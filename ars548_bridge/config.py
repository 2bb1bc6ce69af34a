"""
ARS548 Bridge Configuration
=============================

Start-up configuration of the bridge. Loaded once from YAML, immutable after.

Only the sensor model is validated: an unrecognized model is fatal before any
frame is processed. Everything else (addresses, vehicle geometry, device
tuning integers) is passed through as-is; the frame names stamp the outputs.

Example (ROS 2 parameter file layout is accepted too)::

    sensor_model: ARS548
    host_ip: 10.13.1.166
    sensor_ip: 10.13.1.114
    data_port: 42102
    frame_id: continental
    base_frame: base_link
    object_frame: base_link
"""

import logging
from dataclasses import asdict, dataclass, fields
from enum import Enum, IntEnum
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)


# =============================================================================
# ERRORS / STATUS
# =============================================================================

class ConfigurationError(ValueError):
    """Invalid or incomplete start-up configuration."""


class InvalidSensorModelError(ConfigurationError):
    """The sensor-model selector names no supported sensor."""


class Status(IntEnum):
    OK = 0
    INVALID_SENSOR_MODEL = 1
    SENSOR_CONFIG_ERROR = 2


# =============================================================================
# SENSOR MODEL
# =============================================================================

class SensorModel(Enum):
    UNKNOWN = 'unknown'
    CONTINENTAL_ARS548 = 'ARS548'
    CONTINENTAL_SRR520 = 'SRR520'


_SENSOR_MODEL_NAMES = {
    'ars548': SensorModel.CONTINENTAL_ARS548,
    'continental_ars548': SensorModel.CONTINENTAL_ARS548,
    'srr520': SensorModel.CONTINENTAL_SRR520,
    'continental_srr520': SensorModel.CONTINENTAL_SRR520,
}


def sensor_model_from_string(name: str) -> SensorModel:
    """Sensor model for a selector string; ``UNKNOWN`` when unrecognized."""
    return _SENSOR_MODEL_NAMES.get(str(name).strip().lower(), SensorModel.UNKNOWN)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class SensorConfiguration:
    sensor_model: SensorModel
    host_ip: str
    sensor_ip: str
    data_port: int
    frame_id: str
    base_frame: str = 'base_link'
    object_frame: str = 'base_link'
    use_sensor_time: bool = False

    # Device tuning, forwarded untouched
    new_plug_orientation: int = 0
    new_vehicle_length: float = 0.0
    new_vehicle_width: float = 0.0
    new_vehicle_height: float = 0.0
    new_vehicle_wheelbase: float = 0.0
    new_radar_maximum_distance: int = 0
    new_radar_frequency_slot: int = 0
    new_radar_cycle_time: int = 0
    new_radar_time_slot: int = 0
    new_radar_country_code: int = 0
    new_radar_powersave_standstill: int = 0

    def __post_init__(self):
        if self.sensor_model is SensorModel.UNKNOWN:
            raise InvalidSensorModelError("Unrecognized sensor model")

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> 'SensorConfiguration':
        """Build from a flat parameter mapping.

        Unknown keys are logged and ignored; values are not range-checked.

        Raises:
            InvalidSensorModelError: ``sensor_model`` is missing or unrecognized
            ConfigurationError: a required key is missing
        """
        params = dict(params)
        selector = params.pop('sensor_model', None)
        model = sensor_model_from_string(selector) if selector is not None else SensorModel.UNKNOWN
        if model is SensorModel.UNKNOWN:
            raise InvalidSensorModelError(f"Unrecognized sensor model: {selector!r}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(params) - known)
        if unknown:
            logger.warning("Ignoring unknown configuration keys: %s", unknown)
            for name in unknown:
                del params[name]

        missing = [name for name in ('host_ip', 'sensor_ip', 'data_port', 'frame_id')
                   if name not in params]
        if missing:
            raise ConfigurationError(f"Missing configuration keys: {missing}")

        return cls(sensor_model=model, **params)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['sensor_model'] = self.sensor_model.value
        return d


def _unwrap_ros_parameters(raw: Dict[str, Any]) -> Dict[str, Any]:
    # {node_name: {ros__parameters: {...}}}
    if len(raw) == 1:
        (inner,) = raw.values()
        if isinstance(inner, dict) and 'ros__parameters' in inner:
            return inner['ros__parameters']
    return raw


def load_config(path: str) -> SensorConfiguration:
    """Load a ``SensorConfiguration`` from a YAML file."""
    with open(path, 'r') as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ConfigurationError(f"{path}: expected a mapping, got {type(raw).__name__}")

    config = SensorConfiguration.from_dict(_unwrap_ros_parameters(raw))
    logger.info("Loaded sensor configuration from %s: %s", path, config)
    return config

"""Tests for ARS548 Bridge configuration loading."""
import logging
import pytest
import yaml
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ars548_bridge.config import (
    ConfigurationError,
    InvalidSensorModelError,
    SensorConfiguration,
    SensorModel,
    load_config,
    sensor_model_from_string,
)

EXAMPLE_CONFIG = os.path.join(os.path.dirname(__file__), '..', 'config', 'ars548.yaml')

BASE_PARAMS = {
    'sensor_model': 'ARS548',
    'host_ip': '10.13.1.166',
    'sensor_ip': '10.13.1.114',
    'data_port': 42102,
    'frame_id': 'continental',
}


class TestSensorModel:
    """Sensor-model selector."""

    @pytest.mark.parametrize("name", ['ARS548', 'ars548', 'continental_ars548', ' ARS548 '])
    def test_ars548_spellings(self, name):
        assert sensor_model_from_string(name) == SensorModel.CONTINENTAL_ARS548

    def test_srr520(self):
        assert sensor_model_from_string('SRR520') == SensorModel.CONTINENTAL_SRR520

    @pytest.mark.parametrize("name", ['', 'VLP16', 'ars-548', 'unknown'])
    def test_unrecognized(self, name):
        assert sensor_model_from_string(name) == SensorModel.UNKNOWN


class TestSensorConfiguration:
    """Validation at start-up."""

    def test_from_dict(self):
        config = SensorConfiguration.from_dict(BASE_PARAMS)
        assert config.sensor_model == SensorModel.CONTINENTAL_ARS548
        assert config.data_port == 42102
        assert config.object_frame == 'base_link'

    def test_unrecognized_model_is_fatal(self):
        with pytest.raises(InvalidSensorModelError):
            SensorConfiguration.from_dict(dict(BASE_PARAMS, sensor_model='HDL64'))

    def test_missing_model_is_fatal(self):
        params = dict(BASE_PARAMS)
        del params['sensor_model']
        with pytest.raises(InvalidSensorModelError):
            SensorConfiguration.from_dict(params)

    def test_unknown_model_rejected_on_direct_construction(self):
        with pytest.raises(InvalidSensorModelError):
            SensorConfiguration(sensor_model=SensorModel.UNKNOWN, host_ip='', sensor_ip='',
                                data_port=0, frame_id='')

    def test_missing_key(self):
        params = dict(BASE_PARAMS)
        del params['frame_id']
        with pytest.raises(ConfigurationError, match='frame_id'):
            SensorConfiguration.from_dict(params)

    def test_unknown_key_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger='ars548_bridge.config'):
            config = SensorConfiguration.from_dict(dict(BASE_PARAMS, colour='red'))
        assert config == SensorConfiguration.from_dict(BASE_PARAMS)
        assert 'colour' in caplog.text

    def test_no_range_validation(self):
        """Device tuning values pass through untouched."""
        config = SensorConfiguration.from_dict(dict(BASE_PARAMS, new_radar_cycle_time=-5,
                                                    new_vehicle_length=1e9))
        assert config.new_radar_cycle_time == -5
        assert config.new_vehicle_length == 1e9

    def test_invalid_model_error_is_configuration_error(self):
        assert issubclass(InvalidSensorModelError, ConfigurationError)
        assert issubclass(ConfigurationError, ValueError)

    def test_to_dict_round_trip(self):
        config = SensorConfiguration.from_dict(BASE_PARAMS)
        assert SensorConfiguration.from_dict(config.to_dict()) == config


class TestLoadConfig:
    """YAML files."""

    def test_example_file(self):
        config = load_config(EXAMPLE_CONFIG)
        assert config.sensor_model == SensorModel.CONTINENTAL_ARS548
        assert config.frame_id == 'continental'
        assert config.new_radar_cycle_time == 60
        assert config.new_vehicle_wheelbase == pytest.approx(2.79)

    def test_flat_file(self, tmp_path):
        path = tmp_path / 'flat.yaml'
        path.write_text(yaml.safe_dump(BASE_PARAMS))
        assert load_config(str(path)).sensor_ip == '10.13.1.114'

    def test_bad_model_in_file(self, tmp_path):
        path = tmp_path / 'bad.yaml'
        path.write_text(yaml.safe_dump(dict(BASE_PARAMS, sensor_model='nope')))
        with pytest.raises(InvalidSensorModelError):
            load_config(str(path))

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / 'list.yaml'
        path.write_text('- 1\n- 2\n')
        with pytest.raises(ConfigurationError):
            load_config(str(path))

"""
Service configuration tests (YAML loading and validation).
"""

from pathlib import Path

import pytest

from atlas_service import MQTTConfig, ServiceConfig
from atlas_zone import UserRole

YAML = """
service_id: "ze_test"
user_role: "ADVERTISER"

editor_config:
  min_zone_area: 500
  duration_tiers: [1, 6]
  radius_range: [10, 200]

mqtt_config:
  broker: "mqtt.local"
  port: 8883
  qos: 0
"""


def test_from_yaml(tmp_path):
    path = tmp_path / "service.yaml"
    path.write_text(YAML)

    config = ServiceConfig.from_yaml(path)

    assert config.service_id == "ze_test"
    assert config.user_role == UserRole.ADVERTISER
    assert config.editor_config.min_zone_area == 500
    assert config.editor_config.duration_tiers == (1, 6)
    assert config.editor_config.clamps["radius"] == (10, 200)
    assert config.mqtt_config.broker == "mqtt.local"
    assert config.mqtt_config.port == 8883
    assert config.topics == {
        'zone_events': "atlas/data/zones/ze_test",
        'snapshots': "atlas/data/snapshots/ze_test",
        'commands': "atlas/control/ze_test/commands",
        'status': "atlas/control/ze_test/status",
    }


def test_shipped_example_config_loads():
    config = ServiceConfig.from_yaml(
        Path(__file__).parent / "config" / "atlas_service" / "service_config.yaml"
    )
    assert config.service_id
    assert config.user_role in set(UserRole)


def test_defaults():
    config = ServiceConfig.from_dict({'service_id': "ze1"})
    assert config.user_role == UserRole.ZONE_OWNER
    assert config.editor_config.min_zone_area == 1000
    assert config.mqtt_config.qos == 1


@pytest.mark.parametrize("data", [
    {},
    {'service_id': ""},
    {'service_id': "ze1", 'user_role': "SUPERUSER"},
    {'service_id': "ze1", 'mqtt_config': {'port': 0}},
    {'service_id': "ze1", 'mqtt_config': {'qos': 3}},
    {'service_id': "ze1", 'editor_config': {'min_zone_area': -1}},
])
def test_invalid_config(data):
    with pytest.raises(ValueError):
        ServiceConfig.from_dict(data)


def test_unknown_mqtt_key_rejected():
    with pytest.raises(TypeError):
        MQTTConfig(**{'brokr': "x"})


def test_role_must_be_enum():
    with pytest.raises(ValueError):
        ServiceConfig(service_id="ze1", user_role="ZONE_OWNER")

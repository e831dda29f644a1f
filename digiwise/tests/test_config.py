"""
Tests for configuration loading.
"""

import json

import pytest
from pydantic import ValidationError as PydanticValidationError

from digiwise.common import config as config_module
from digiwise.common.config import AppConfig, ConfigLoader, reload_config
from digiwise.common.exceptions import ConfigurationError
from digiwise.scoring.models import RiskLevel


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("DIGIWISE_CONFIG_PATH", "DIGIWISE_LOGGING__LEVEL", "DIGIWISE_SCORING__WEIGHT_TOLERANCE"):
        monkeypatch.delenv(name, raising=False)
    yield
    config_module.config = None


def test_defaults():
    config = AppConfig()
    assert config.logging.level == "INFO"
    assert config.assessment.default_max_value == 4
    assert config.scoring.weights is None
    assert [band.level for band in config.scoring.risk_bands] == list(RiskLevel)
    assert config.is_development


def test_load_yaml_file(tmp_path):
    path = tmp_path / "digiwise.yaml"
    path.write_text(
        "logging:\n"
        "  level: debug\n"
        "scoring:\n"
        "  weights:\n"
        "    sleep: 0.4\n"
        "    social-media: 0.6\n"
        "environment:\n"
        "  env: Testing\n"
    )
    config = ConfigLoader(str(path)).load()
    assert config.logging.level == "DEBUG"
    assert config.scoring.weights == {"sleep": 0.4, "social-media": 0.6}
    assert config.is_testing


def test_load_json_file(tmp_path):
    path = tmp_path / "digiwise.json"
    path.write_text(json.dumps({"assessment": {"allow_answer_changes": False}}))
    config = ConfigLoader(str(path)).load()
    assert config.assessment.allow_answer_changes is False


def test_loader_caches(tmp_path):
    loader = ConfigLoader(str(tmp_path / "missing.yaml"))
    assert loader.load() is loader.load()


def test_missing_file_uses_defaults(tmp_path):
    config = ConfigLoader(str(tmp_path / "missing.yaml")).load()
    assert config.app_name == "DigiWise"


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "digiwise.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigurationError):
        ConfigLoader(str(path)).load()


def test_environment_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "digiwise.yaml"
    path.write_text("logging:\n  level: WARNING\nscoring:\n  weight_tolerance: 0.5\n")
    monkeypatch.setenv("DIGIWISE_LOGGING__LEVEL", "error")
    monkeypatch.setenv("DIGIWISE_SCORING__WEIGHT_TOLERANCE", "0.01")

    config = ConfigLoader(str(path)).load()
    assert config.logging.level == "ERROR"
    assert config.scoring.weight_tolerance == 0.01


def test_invalid_values_rejected():
    with pytest.raises(PydanticValidationError):
        AppConfig(logging={"level": "LOUD"})
    with pytest.raises(PydanticValidationError):
        AppConfig(environment={"env": "moon"})
    with pytest.raises(PydanticValidationError):
        AppConfig(scoring={"weight_tolerance": 0})


def test_reload_config(tmp_path):
    path = tmp_path / "digiwise.json"
    path.write_text(json.dumps({"app_name": "DigiWise Pilot"}))
    config = reload_config(str(path))
    assert config.app_name == "DigiWise Pilot"
    assert config_module.get_config() is config

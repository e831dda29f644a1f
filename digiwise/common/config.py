"""
Centralized Configuration for DigiWise

This module provides the configuration system for the assessment backend.
Values come from, in increasing priority: defaults, a YAML or JSON config
file named by ``DIGIWISE_CONFIG_PATH``, a ``.env`` file and environment
variables (``DIGIWISE_`` prefix, ``__`` between nested keys, e.g.
``DIGIWISE_SCORING__WEIGHT_TOLERANCE``).
"""

import os
import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from digiwise.common.exceptions import ConfigurationError
from digiwise.common.logger import get_logger
from digiwise.scoring.models import ScoringConfig

logger = get_logger(__name__)

CONFIG_PATH_ENV = "DIGIWISE_CONFIG_PATH"


class LoggingConfig(BaseModel):
    """Logging configuration"""
    level: str = "INFO"
    json_output: bool = False
    file_path: Optional[str] = None

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class AssessmentConfig(BaseModel):
    """Assessment configuration"""
    default_max_value: int = Field(default=4, ge=1)
    allow_answer_changes: bool = True


class EnvironmentConfig(BaseModel):
    """Environment configuration"""
    env: str = "development"
    testing: bool = False

    @field_validator('env')
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment"""
        valid_envs = ['development', 'testing', 'staging', 'production']
        if v.lower() not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of {valid_envs}")
        return v.lower()


class AppConfig(BaseSettings):
    """Main application configuration"""
    model_config = SettingsConfigDict(
        env_prefix="DIGIWISE_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "DigiWise"
    version: str = "1.0.0"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    assessment: AssessmentConfig = Field(default_factory=AssessmentConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment wins over values read from the config file.
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @property
    def is_development(self) -> bool:
        """Check if environment is development"""
        return self.environment.env == "development"

    @property
    def is_testing(self) -> bool:
        """Check if environment is testing"""
        return self.environment.env == "testing" or self.environment.testing

    @property
    def is_production(self) -> bool:
        """Check if environment is production"""
        return self.environment.env == "production"


class ConfigLoader:
    """
    Configuration loader for the application.

    Loads configuration from:
    1. Default values
    2. Config file
    3. Environment variables (highest priority)
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the config loader.

        Args:
            config_path: Path to config file (YAML or JSON)
        """
        self.config_path = config_path or os.environ.get(CONFIG_PATH_ENV)
        self._config: Optional[AppConfig] = None

    def load(self) -> AppConfig:
        """
        Load configuration from all sources.

        Returns:
            Loaded configuration
        """
        if self._config is not None:
            return self._config

        file_config: Dict[str, Any] = {}
        if self.config_path:
            file_config = self._load_from_file(self.config_path)

        self._config = AppConfig(**file_config)
        return self._config

    def _load_from_file(self, path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        A missing file is logged and ignored; a file that does not hold a
        mapping raises ConfigurationError.

        Args:
            path: Path to config file

        Returns:
            Loaded configuration dictionary
        """
        path = Path(path)
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return {}

        suffix = path.suffix.lower()
        with open(path, 'r', encoding='utf-8') as f:
            if suffix in ['.yaml', '.yml']:
                data = yaml.safe_load(f)
            elif suffix == '.json':
                data = json.load(f)
            else:
                logger.warning(f"Unsupported config file format: {path.suffix}")
                return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping", config_key=str(path))

        logger.info(f"Loaded configuration from {path}")
        return data


config_loader = ConfigLoader()
config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the loaded configuration, loading it on first use.

    Returns:
        Loaded configuration
    """
    global config
    if config is None:
        config = config_loader.load()
    return config


def reload_config(config_path: Optional[str] = None) -> AppConfig:
    """
    Reload the configuration.

    Args:
        config_path: Path to config file

    Returns:
        Reloaded configuration
    """
    global config_loader, config
    config_loader = ConfigLoader(config_path)
    config = config_loader.load()
    return config

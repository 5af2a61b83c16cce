"""
bootstrap/config.py - Application settings

Settings for the tomgate command line and embedding applications, from
JSON files, environment variables, and defaults. The TOM configuration
itself is domain data and is read by bootstrap/loader.py.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import os
import json
import logging

from tomgate.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    log_file: Optional[str] = None
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("TOMGATE_LOG_LEVEL", "INFO"),
            format=os.getenv("TOMGATE_LOG_FORMAT", DEFAULT_LOG_FORMAT),
            log_file=os.getenv("TOMGATE_LOG_FILE"),
            json_logs=os.getenv("TOMGATE_JSON_LOGS", "false").lower() == "true",
        )


@dataclass
class EngineConfig:
    """Where the TOM configuration comes from and how it is pinned."""

    tom_config_path: Optional[str] = None  # None: built-in default
    preset: Optional[str] = None           # Overrides the stored activePreset

    @classmethod
    def from_env(cls) -> "EngineConfig":
        return cls(
            tom_config_path=os.getenv("TOMGATE_TOM_CONFIG"),
            preset=os.getenv("TOMGATE_PRESET") or None,
        )


@dataclass
class TomGateConfig:
    """Root settings for tomgate."""

    environment: str = "development"
    debug: bool = False

    engine: EngineConfig = field(default_factory=EngineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "TomGateConfig":
        """Create settings from environment variables."""
        return cls(
            environment=os.getenv("TOMGATE_ENVIRONMENT", "development"),
            debug=os.getenv("TOMGATE_DEBUG", "false").lower() == "true",
            engine=EngineConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )

    @classmethod
    def from_file(cls, filepath: str) -> "TomGateConfig":
        """Load settings from a JSON file, falling back to the environment."""
        path = Path(filepath)
        if not path.exists():
            logger.warning(f"Settings file not found: {filepath}, using defaults")
            return cls.from_env()

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ConfigurationError(f"Cannot read settings file: {e}", source=str(path)) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file must contain a JSON object, got {type(data).__name__}",
                source=str(path),
            )

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "TomGateConfig":
        config = cls.from_env()

        if "environment" in data:
            config.environment = data["environment"]
        if "debug" in data:
            config.debug = data["debug"]

        for section in ("engine", "logging"):
            target = getattr(config, section)
            for key, value in (data.get(section) or {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)
                else:
                    logger.warning(f"Ignoring unknown setting {section}.{key}")

        return config

    def to_dict(self) -> Dict[str, Any]:
        return {
            "environment": self.environment,
            "debug": self.debug,
            "engine": {
                "tom_config_path": self.engine.tom_config_path,
                "preset": self.engine.preset,
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "log_file": self.logging.log_file,
                "json_logs": self.logging.json_logs,
            },
        }


# Global settings instance
_config: Optional[TomGateConfig] = None


def load_config(filepath: str = None) -> TomGateConfig:
    """
    Load settings from file or environment.

    Args:
        filepath: Optional path to a JSON settings file

    Returns:
        TomGateConfig instance
    """
    global _config

    if filepath:
        _config = TomGateConfig.from_file(filepath)
    else:
        default_paths = [
            "./tomgate.json",
            "./config/tomgate.json",
            os.path.expanduser("~/.tomgate/config.json"),
        ]

        for path in default_paths:
            if Path(path).exists():
                logger.info(f"Loading settings from: {path}")
                _config = TomGateConfig.from_file(path)
                return _config

        _config = TomGateConfig.from_env()

    logger.info(f"Settings loaded: environment={_config.environment}")
    return _config


def get_config() -> TomGateConfig:
    """Get current settings, loading if needed."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached settings."""
    global _config
    _config = None

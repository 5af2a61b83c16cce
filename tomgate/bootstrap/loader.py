"""
bootstrap/loader.py - TOM configuration files

Reads and writes the TomConfig aggregate as JSON or YAML. This is the
validation boundary: file and schema problems surface here as
ConfigurationError subclasses, never inside the derivation core.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Optional, Union
import json
import logging

import yaml
from pydantic import ValidationError

from tomgate.bootstrap.config import EngineConfig
from tomgate.core.config_resolver import ensure_tom_config, resolve_effective_config
from tomgate.core.defaults import DEFAULT_TOM_CONFIG
from tomgate.core.models import TomConfig
from tomgate.errors import TomConfigNotFoundError, TomConfigValidationError

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


def _read_document(path: Path) -> Any:
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise TomConfigValidationError(f"Config file is not valid UTF-8: {e}", source=str(path)) from e
    except OSError as e:
        raise TomConfigValidationError(f"Cannot read config file: {e}", source=str(path)) from e

    if suffix in JSON_SUFFIXES:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise TomConfigValidationError(f"Invalid JSON: {e}", source=str(path)) from e

    if suffix in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise TomConfigValidationError(f"Invalid YAML: {e}", source=str(path)) from e

    raise TomConfigValidationError(
        f"Unsupported config format '{suffix}' (expected .json, .yaml or .yml)",
        source=str(path),
    )


def load_tom_config(filepath: Union[str, Path]) -> TomConfig:
    """
    Load a stored TOM configuration.

    Missing top-level sections are completed from the default.

    Raises:
        TomConfigNotFoundError: The file does not exist
        TomConfigValidationError: The file cannot be parsed or does not
            match the TomConfig shape
    """
    path = Path(filepath)
    if not path.exists():
        raise TomConfigNotFoundError(str(path))

    data = _read_document(path)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise TomConfigValidationError(
            f"TOM config must be a mapping, got {type(data).__name__}",
            source=str(path),
        )

    try:
        config = ensure_tom_config(data)
    except ValidationError as e:
        raise TomConfigValidationError(
            f"TOM config failed validation with {e.error_count()} error(s)",
            source=str(path),
            errors=e.errors(include_url=False),
        ) from e

    logger.info(
        f"Loaded TOM config from {path}: preset={config.active_preset}, "
        f"{len(config.phases)} base phases, enabled={config.enabled}"
    )
    return config


def dump_tom_config(config: TomConfig, filepath: Union[str, Path]) -> Path:
    """Write a configuration in its stored shape; format follows the suffix."""
    path = Path(filepath)
    data = config.to_dict()
    suffix = path.suffix.lower()

    if suffix in YAML_SUFFIXES:
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    elif suffix in JSON_SUFFIXES:
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    else:
        raise TomConfigValidationError(
            f"Unsupported config format '{suffix}' (expected .json, .yaml or .yml)",
            source=str(path),
        )

    logger.debug(f"Wrote TOM config to {path}")
    return path


def load_effective_config(
    settings: Optional[EngineConfig] = None,
) -> TomConfig:
    """
    Effective configuration for the given engine settings.

    Uses the built-in default when no config path is set.
    """
    settings = settings or EngineConfig()
    if settings.tom_config_path:
        stored = load_tom_config(settings.tom_config_path)
    else:
        stored = DEFAULT_TOM_CONFIG
    return resolve_effective_config(stored, preset_id=settings.preset)

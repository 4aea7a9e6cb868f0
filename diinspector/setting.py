"""Settings for diinspector.

Loaded from config/diinspector.yaml (path overridable with DIINSPECTOR_CONFIG),
then patched with environment variables. A .env file is honoured.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from .core.constants import (
    DEFAULT_COLLECTION_NAME,
    DEFAULT_CONFIGURE_SIGNATURE,
    DEFAULT_FIX_TEMPLATE,
    DEFAULT_INTERFACE_LIFETIME,
    DEFAULT_SELF_LIFETIME,
    PREDEFINED_TYPES,
)

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "diinspector.yaml"


class RegistrationSettings(BaseModel):
    """Registration heuristics: detection, suggestions, and quick fix."""

    detect_missing: bool = True
    ignored_types: List[str] = Field(default_factory=lambda: list(PREDEFINED_TYPES))
    collection_name: str = DEFAULT_COLLECTION_NAME
    interface_lifetime: str = DEFAULT_INTERFACE_LIFETIME
    self_lifetime: str = DEFAULT_SELF_LIFETIME
    configure_signature: str = DEFAULT_CONFIGURE_SIGNATURE
    fix_template: str = DEFAULT_FIX_TEMPLATE


class AnalyzerSettings(BaseModel):
    log_level: str = "INFO"
    registration: RegistrationSettings = Field(default_factory=RegistrationSettings)


def _config_path() -> Path:
    env_path = os.getenv("DIINSPECTOR_CONFIG")
    return Path(env_path) if env_path else DEFAULT_CONFIG_PATH


def load_settings(config_path: Optional[Path] = None) -> AnalyzerSettings:
    """Load settings from YAML and apply environment overrides.

    A missing or invalid file is logged and defaults are used instead.

    Args:
        config_path: YAML file to read. Defaults to DIINSPECTOR_CONFIG or
            config/diinspector.yaml at the project root.

    Returns:
        AnalyzerSettings instance
    """
    path = Path(config_path) if config_path else _config_path()
    data: dict = {}

    if path.exists():
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.warning(f"Ignoring {path}: top level must be a mapping")
                data = {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading {path}: {e}")
            data = {}
    else:
        logger.debug(f"Config file not found at {path}, using defaults")

    log_level = os.getenv("DIINSPECTOR_LOG_LEVEL")
    if log_level:
        data["log_level"] = log_level

    detect_missing = os.getenv("DIINSPECTOR_DETECT_MISSING")
    if detect_missing:
        if not isinstance(data.get("registration"), dict):
            if data.get("registration") is not None:
                logger.warning(f"Ignoring registration section in {path}: must be a mapping")
            data["registration"] = {}
        data["registration"]["detect_missing"] = detect_missing.lower() in ("1", "true", "yes", "on")

    try:
        return AnalyzerSettings(**data)
    except ValidationError as e:
        logger.error(f"Invalid settings in {path}: {e}")
        return AnalyzerSettings()


@lru_cache(maxsize=1)
def get_settings() -> AnalyzerSettings:
    """Return the process-wide settings, loading them on first use."""
    return load_settings()


def reload_settings() -> AnalyzerSettings:
    """Drop cached settings and load them again."""
    get_settings.cache_clear()
    return get_settings()

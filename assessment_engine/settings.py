# settings.py

import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "ASSESSMENT_SETTINGS"


@dataclass(frozen=True)
class EngineSettings:
    """Policy constants read by the evaluation engine."""

    # Progress
    seconds_per_question: int = 45
    default_trigger_threshold: float = 4
    # Rule evaluation
    weighted_domain_threshold: float = 1.1
    weighted_completeness_floor: int = 80
    assumed_questions_per_domain: int = 8
    # Gaps and notification
    low_completeness_threshold: int = 50
    critical_gap_threshold: int = 3
    critical_escalation_threshold: int = 6


DEFAULT_SETTINGS = EngineSettings()


def _coerce(name: str, value: Any, default: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"Setting '{name}' must be a number, got {value!r}")
    if isinstance(default, int) and float(value).is_integer():
        return int(value)
    return value


def load_settings(path: Optional[str] = None) -> EngineSettings:
    """
    Load engine settings from a YAML file, falling back to defaults.

    The file may hold any subset of the `EngineSettings` fields. When `path` is
    omitted the `ASSESSMENT_SETTINGS` environment variable is consulted; when
    neither names an existing file the defaults are returned.

    :param path: optional path to a YAML settings file
    :return: an EngineSettings instance
    :raises ConfigError: when the file is not a mapping or a value is not numeric
    """
    path = path or os.getenv(SETTINGS_ENV_VAR)
    if not path or not os.path.exists(path):
        return DEFAULT_SETTINGS

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse settings file {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    cfg: Dict[str, Any] = {}
    known = {f.name: f.default for f in fields(EngineSettings)}
    for key, value in raw.items():
        if key not in known:
            logger.warning("Ignoring unknown setting '%s' in %s", key, path)
            continue
        cfg[key] = _coerce(key, value, known[key])

    for key, default in known.items():
        cfg.setdefault(key, default)

    logger.info("Loaded engine settings from %s", path)
    return EngineSettings(**cfg)

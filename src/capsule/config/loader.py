from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError

from capsule.config.models import CapsuleConfig


class ConfigError(ValueError):
    # Raised for unreadable or invalid capsule config (fail fast).
    pass


def load_yaml_config(path: Path) -> dict[str, object]:
    # Returns the raw mapping for validation; an empty file is an empty mapping.
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Config is not valid YAML: {path}") from exc
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return raw


def parse_capsule_config(raw: object) -> CapsuleConfig:
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    try:
        return CapsuleConfig.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def load_capsule_config(path: Path) -> CapsuleConfig:
    return parse_capsule_config(load_yaml_config(path))

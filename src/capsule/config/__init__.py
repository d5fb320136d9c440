from .loader import ConfigError, load_capsule_config, load_yaml_config, parse_capsule_config
from .models import CapsuleConfig, LoggingConfig

__all__ = [
    "CapsuleConfig",
    "ConfigError",
    "LoggingConfig",
    "load_capsule_config",
    "load_yaml_config",
    "parse_capsule_config",
]

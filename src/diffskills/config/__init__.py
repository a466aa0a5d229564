"""Configuration loading, schema, and defaults."""

from diffskills.config.loader import ConfigError, load_config
from diffskills.config.schema import DiffSkillsConfig

__all__ = [
    "ConfigError",
    "DiffSkillsConfig",
    "load_config",
]

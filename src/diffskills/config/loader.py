"""Load and merge configuration from .diffskills.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from diffskills.config.schema import (
    FAIL_ON_LEVELS,
    OUTPUT_FORMATS,
    DiffSkillsConfig,
    EngineConfig,
    OutputConfig,
    SkillsConfig,
)

CONFIG_FILENAME = ".diffskills.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(base_dir: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = base_dir / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _check_values(cfg: DiffSkillsConfig) -> None:
    if cfg.output.format not in OUTPUT_FORMATS:
        raise ConfigError(
            f"output.format must be one of {' | '.join(OUTPUT_FORMATS)}, "
            f"got '{cfg.output.format}'"
        )
    if cfg.output.fail_on not in FAIL_ON_LEVELS:
        raise ConfigError(
            f"output.fail_on must be one of {' | '.join(FAIL_ON_LEVELS)}, "
            f"got '{cfg.output.fail_on}'"
        )
    if not isinstance(cfg.engine.max_workers, int) or cfg.engine.max_workers < 1:
        raise ConfigError("engine.max_workers must be a positive integer")
    if not isinstance(cfg.skills.enabled, list):
        raise ConfigError("skills.enabled must be a list of skill names")


def _merge_env_overrides(cfg: DiffSkillsConfig) -> None:
    """Apply DIFFSKILLS_* environment variable overrides. Invalid values are ignored."""
    if val := os.environ.get("DIFFSKILLS_SKILLS_DIR"):
        cfg.skills.directory = val
    if val := os.environ.get("DIFFSKILLS_SKILLS"):
        cfg.skills.enabled = [s.strip() for s in val.split(",") if s.strip()]
    if val := os.environ.get("DIFFSKILLS_FORMAT"):
        if val in OUTPUT_FORMATS:
            cfg.output.format = val  # type: ignore[assignment]
    if val := os.environ.get("DIFFSKILLS_FAIL_ON"):
        if val in FAIL_ON_LEVELS:
            cfg.output.fail_on = val  # type: ignore[assignment]
    if val := os.environ.get("DIFFSKILLS_MAX_WORKERS"):
        try:
            workers = int(val)
        except ValueError:
            workers = 0
        if workers >= 1:
            cfg.engine.max_workers = workers


def load_config(
    base_dir: Path,
    config_override: Optional[str] = None,
) -> DiffSkillsConfig:
    """Load, validate, and return a DiffSkillsConfig."""
    config_path = find_config_file(base_dir, config_override)

    if config_path is None:
        cfg = DiffSkillsConfig()
    else:
        raw = _parse_toml(config_path)
        try:
            cfg = DiffSkillsConfig(
                version=str(raw.get("version", "1.0")),
                skills=_build_section(raw, SkillsConfig, "skills"),
                engine=_build_section(raw, EngineConfig, "engine"),
                output=_build_section(raw, OutputConfig, "output"),
            )
        except TypeError as exc:
            raise ConfigError(f"Invalid config in {config_path}: {exc}") from exc
        _check_values(cfg)

    _merge_env_overrides(cfg)
    return cfg

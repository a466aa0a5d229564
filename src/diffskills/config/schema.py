"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal

OutputFormat = Literal["terminal", "json", "prompt"]
FailOn = Literal["critical", "warning", "info", "none"]

OUTPUT_FORMATS: tuple[str, ...] = ("terminal", "json", "prompt")
FAIL_ON_LEVELS: tuple[str, ...] = ("critical", "warning", "info", "none")

DEFAULT_SKILLS_DIR = "~/.diffskills/skills"


@dataclass
class SkillsConfig:
    directory: str = DEFAULT_SKILLS_DIR
    enabled: List[str] = field(default_factory=list)  # ids run by `check` without --skill
    install_defaults: bool = True  # write missing bundled skills before `check` runs


@dataclass
class EngineConfig:
    max_workers: int = 1  # 1 = run skills sequentially


@dataclass
class OutputConfig:
    format: OutputFormat = "terminal"
    fail_on: FailOn = "critical"  # exit 1 on findings at or above this level


@dataclass
class DiffSkillsConfig:
    version: str = "1.0"
    skills: SkillsConfig = field(default_factory=SkillsConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

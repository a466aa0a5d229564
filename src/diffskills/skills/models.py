"""Skill definition models — built from YAML mappings, immutable afterwards."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

from diffskills.skills.errors import SkillLoadError


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


SEVERITY_ORDER: dict[str, int] = {
    "info": 0,
    "warning": 1,
    "critical": 2,
}


def severity_at_or_above(severity: str, threshold: str) -> bool:
    """Return True if *severity* is at or above *threshold*."""
    return SEVERITY_ORDER.get(severity, 0) >= SEVERITY_ORDER.get(threshold, 0)


# --- mapping helpers ---


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in data or data[key] is None:
        raise SkillLoadError(f"{where}: missing required key '{key}'")
    return data[key]


def _require_str(data: Mapping[str, Any], key: str, where: str) -> str:
    value = _require(data, key, where)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # YAML reads `version: 1.0` as a float
        return str(value)
    if not isinstance(value, str):
        raise SkillLoadError(f"{where}: '{key}' must be a string")
    return value


def _optional_str(data: Mapping[str, Any], key: str, where: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise SkillLoadError(f"{where}: '{key}' must be a string")
    return value


def _optional_str_list(
    data: Mapping[str, Any], key: str, where: str
) -> Optional[Tuple[str, ...]]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise SkillLoadError(f"{where}: '{key}' must be a list of strings")
    return tuple(value)


def _mapping_list(data: Mapping[str, Any], key: str, where: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, Mapping) for v in value):
        raise SkillLoadError(f"{where}: '{key}' must be a list of mappings")
    return value


# --- models ---


@dataclass(frozen=True)
class SkillTrigger:
    """File-level condition deciding whether a skill applies to a diff."""

    file_extensions: Optional[Tuple[str, ...]] = None
    path_contains: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "trigger") -> SkillTrigger:
        return cls(
            file_extensions=_optional_str_list(data, "file_extension", where),
            path_contains=_optional_str_list(data, "path_contains", where),
        )


@dataclass(frozen=True)
class SkillRule:
    """One check within a skill.

    ``pattern`` is kept as the raw string; ``compiled_pattern`` compiles it
    case-insensitively on first access. ``check`` is natural-language text for
    a model-based reviewer and is never executed locally.
    """

    id: str
    severity: Severity
    message: str
    pattern: Optional[str] = None
    check: Optional[str] = None

    @cached_property
    def compiled_pattern(self) -> Optional[re.Pattern[str]]:
        if self.pattern is None:
            return None
        return re.compile(self.pattern, re.IGNORECASE)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], where: str = "rule") -> SkillRule:
        rule_id = _require_str(data, "id", where)
        where = f"{where} '{rule_id}'"
        raw_severity = _require_str(data, "severity", where)
        try:
            severity = Severity(raw_severity.lower())
        except ValueError:
            raise SkillLoadError(
                f"{where}: severity must be one of critical | warning | info, "
                f"got '{raw_severity}'"
            ) from None
        return cls(
            id=rule_id,
            severity=severity,
            message=_require_str(data, "message", where),
            pattern=_optional_str(data, "pattern", where),
            check=_optional_str(data, "check", where),
        )


@dataclass(frozen=True)
class SkillPrompts:
    """Supplementary free text handed to the model-based reviewer."""

    additional_context: Optional[str] = None


@dataclass(frozen=True)
class SkillFile:
    """A named rule-set as defined in one YAML file. ``name`` is its id."""

    name: str
    version: str
    description: str
    triggers: Tuple[SkillTrigger, ...]
    rules: Tuple[SkillRule, ...]
    prompts: Optional[SkillPrompts] = None

    @property
    def id(self) -> str:
        return self.name

    @classmethod
    def from_dict(cls, data: Any) -> SkillFile:
        """Build a SkillFile from a decoded YAML document.

        Raises SkillLoadError on a non-mapping document, a missing required key
        or a value of the wrong type.
        """
        if not isinstance(data, Mapping):
            raise SkillLoadError("skill document must be a mapping")
        name = _require_str(data, "name", "skill")
        where = f"skill '{name}'"

        if "triggers" not in data:
            raise SkillLoadError(f"{where}: missing required key 'triggers'")
        if "rules" not in data:
            raise SkillLoadError(f"{where}: missing required key 'rules'")

        triggers = tuple(
            SkillTrigger.from_dict(t, f"{where} trigger #{i + 1}")
            for i, t in enumerate(_mapping_list(data, "triggers", where))
        )
        rules = tuple(
            SkillRule.from_dict(r, f"{where} rule #{i + 1}")
            for i, r in enumerate(_mapping_list(data, "rules", where))
        )

        prompts: Optional[SkillPrompts] = None
        raw_prompts = data.get("prompts")
        if raw_prompts is not None:
            if not isinstance(raw_prompts, Mapping):
                raise SkillLoadError(f"{where}: 'prompts' must be a mapping")
            prompts = SkillPrompts(
                additional_context=_optional_str(
                    raw_prompts, "additional_context", f"{where} prompts"
                )
            )

        return cls(
            name=name,
            version=_require_str(data, "version", where),
            description=_require_str(data, "description", where),
            triggers=triggers,
            rules=rules,
            prompts=prompts,
        )


@dataclass(frozen=True)
class LoadedSkill:
    """A validated SkillFile together with the file it came from."""

    source: Path
    content: SkillFile

    @property
    def id(self) -> str:
        return self.content.name

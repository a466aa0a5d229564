"""Skills — definitions, validation, loading, bundled defaults."""

from diffskills.skills.defaults import DEFAULT_SKILLS, install_default_skills
from diffskills.skills.errors import (
    DuplicateRuleIDError,
    InvalidRegexError,
    MissingTriggersError,
    SkillError,
    SkillLoadError,
    SkillValidationError,
)
from diffskills.skills.loader import SkillLoader, load_skills
from diffskills.skills.models import (
    LoadedSkill,
    Severity,
    SkillFile,
    SkillPrompts,
    SkillRule,
    SkillTrigger,
    severity_at_or_above,
)
from diffskills.skills.validator import SkillValidator, validate_skill

__all__ = [
    "DEFAULT_SKILLS",
    "DuplicateRuleIDError",
    "InvalidRegexError",
    "LoadedSkill",
    "MissingTriggersError",
    "Severity",
    "SkillError",
    "SkillFile",
    "SkillLoadError",
    "SkillLoader",
    "SkillPrompts",
    "SkillRule",
    "SkillTrigger",
    "SkillValidationError",
    "SkillValidator",
    "install_default_skills",
    "load_skills",
    "severity_at_or_above",
    "validate_skill",
]

"""Skill loading and validation errors."""

from __future__ import annotations


class SkillError(Exception):
    """Base class for problems with a single skill definition."""


class SkillLoadError(SkillError):
    """Raised when a skill file cannot be read or decoded into a SkillFile."""


class SkillValidationError(SkillError):
    """Raised when a decoded skill fails structural validation."""


class MissingTriggersError(SkillValidationError):
    def __init__(self) -> None:
        super().__init__("Skill must have at least one trigger defined")


class DuplicateRuleIDError(SkillValidationError):
    def __init__(self, rule_id: str) -> None:
        self.rule_id = rule_id
        super().__init__(f"Duplicate rule ID found: {rule_id}")


class InvalidRegexError(SkillValidationError):
    def __init__(self, pattern: str, error: Exception) -> None:
        self.pattern = pattern
        self.error = error
        super().__init__(f"Invalid regex pattern '{pattern}': {error}")

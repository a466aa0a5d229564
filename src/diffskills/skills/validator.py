"""Structural validation of a SkillFile before it is trusted."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from diffskills.skills.errors import (
    DuplicateRuleIDError,
    InvalidRegexError,
    MissingTriggersError,
)
from diffskills.skills.models import SkillFile


def _first_duplicate(values: Iterable[str]) -> Optional[str]:
    seen: set[str] = set()
    for value in values:
        if value in seen:
            return value
        seen.add(value)
    return None


class SkillValidator:
    """Checks, in order: triggers present, rule ids unique, patterns compile.

    Raises the matching SkillValidationError subclass on the first failure.
    """

    def validate(self, skill: SkillFile) -> None:
        if not skill.triggers:
            raise MissingTriggersError()

        duplicate = _first_duplicate(rule.id for rule in skill.rules)
        if duplicate is not None:
            raise DuplicateRuleIDError(duplicate)

        for rule in skill.rules:
            if rule.pattern is None:
                continue
            try:
                re.compile(rule.pattern, re.IGNORECASE)
            except re.error as exc:
                raise InvalidRegexError(rule.pattern, exc) from exc


def validate_skill(skill: SkillFile) -> None:
    """Validate *skill*; raises SkillValidationError on the first problem."""
    SkillValidator().validate(skill)

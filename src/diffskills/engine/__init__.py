"""Rule engine — trigger matching and pattern execution."""

from diffskills.engine.executor import (
    SkillEngine,
    check_regex_rule,
    execute_skill,
    execute_skills,
    run_skills,
    should_run,
)

__all__ = [
    "SkillEngine",
    "check_regex_rule",
    "execute_skill",
    "execute_skills",
    "run_skills",
    "should_run",
]

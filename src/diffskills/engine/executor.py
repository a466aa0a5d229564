"""Rule engine — runs loaded skills against a parsed diff.

Only addition lines are scanned. Findings carry the new-file line number,
computed with the same running counter as ``DiffHunk.numbered_lines``.
Iteration follows the stored order of files, hunks and lines, so identical
inputs always give identical findings in identical order.

The engine keeps no state between calls; skills may run on a thread pool
and results are returned in the order the skill ids were requested.
"""

from __future__ import annotations

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, Union

from diffskills.diff.models import LineType, ParsedDiff
from diffskills.findings.models import SkillFinding, SkillResult
from diffskills.skills.loader import SkillLoader
from diffskills.skills.models import LoadedSkill, SkillFile, SkillRule, SkillTrigger

logger = logging.getLogger(__name__)

SkillLike = Union[SkillFile, LoadedSkill]


# --- trigger matching ---


def extension_matches(configured: str, extension: str) -> bool:
    """Match a trigger extension (``.py``, ``py``, ``*.py``) against a file's.

    *extension* is the file's lowercase extension without the dot. Files
    without an extension never match.
    """
    if not extension:
        return False
    wanted = configured.strip().lower()
    if wanted.startswith("*"):
        wanted = wanted[1:]
    return wanted.lstrip(".") == extension or wanted.endswith("." + extension)


def trigger_matches(trigger: SkillTrigger, diff: ParsedDiff) -> bool:
    """True if any condition of *trigger* matches any file of *diff*."""
    if trigger.file_extensions:
        for f in diff.files:
            ext = f.extension
            if any(extension_matches(e, ext) for e in trigger.file_extensions):
                return True
    if trigger.path_contains:
        for f in diff.files:
            if any(part in f.path for part in trigger.path_contains):
                return True
    return False


def should_run(skill: SkillFile, diff: ParsedDiff) -> bool:
    """A skill runs if ANY of its triggers matches."""
    return any(trigger_matches(t, diff) for t in skill.triggers)


# --- rule execution ---


def check_regex_rule(rule: SkillRule, diff: ParsedDiff) -> List[SkillFinding]:
    """Scan every addition line of *diff* with the rule's pattern.

    A pattern that does not compile yields no findings. Loaded skills have
    already been validated; this covers SkillFile values built directly.
    """
    try:
        pattern = rule.compiled_pattern
    except re.error as exc:
        logger.warning("Skipping rule '%s': invalid pattern %r: %s", rule.id, rule.pattern, exc)
        return []
    if pattern is None:
        return []

    findings: List[SkillFinding] = []
    for diff_file in diff.files:
        for hunk in diff_file.hunks:
            for line_no, line in hunk.numbered_lines():
                if line.line_type != LineType.ADDITION:
                    continue
                if pattern.search(line.content) is None:
                    continue
                findings.append(
                    SkillFinding(
                        rule_id=rule.id,
                        message=rule.message,
                        severity=rule.severity,
                        file=diff_file.path,
                        line=line_no,
                    )
                )
    return findings


def execute_skill(skill: SkillLike, diff: ParsedDiff) -> SkillResult:
    """Run one skill against *diff*.

    A skill whose triggers do not match passes with no findings and zero
    execution time. Rules with only a ``check`` are left for the model-based
    reviewer and produce nothing here.
    """
    content = skill.content if isinstance(skill, LoadedSkill) else skill

    if not should_run(content, diff):
        logger.debug("Skill '%s' not triggered by this diff", content.name)
        return SkillResult(
            skill_name=content.name,
            passed=True,
            findings=[],
            execution_time=0.0,
            skipped=True,
        )

    start = time.perf_counter()
    findings: List[SkillFinding] = []
    for rule in content.rules:
        if rule.pattern is not None:
            findings.extend(check_regex_rule(rule, diff))
    elapsed = time.perf_counter() - start

    logger.debug(
        "Skill '%s' ran %d rules in %.2fms: %d findings",
        content.name, len(content.rules), elapsed * 1000, len(findings),
    )
    return SkillResult(
        skill_name=content.name,
        passed=not findings,
        findings=findings,
        execution_time=elapsed,
    )


def run_skills(
    skills: Sequence[SkillLike],
    diff: ParsedDiff,
    *,
    max_workers: int = 1,
) -> List[SkillResult]:
    """Run each skill independently; results keep the order of *skills*."""
    if max_workers > 1 and len(skills) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(lambda s: execute_skill(s, diff), skills))
    return [execute_skill(s, diff) for s in skills]


class SkillEngine:
    """Loads skills from a directory and executes the requested ones.

    Usage::

        engine = SkillEngine(skills_dir)
        results = engine.execute_skills(parse_diff(text), ["security-audit"])
    """

    def __init__(
        self,
        skills_dir: Union[str, Path],
        loader: Optional[SkillLoader] = None,
        max_workers: int = 1,
    ) -> None:
        self.skills_dir = Path(skills_dir).expanduser()
        self._loader = loader or SkillLoader()
        self.max_workers = max(1, max_workers)

    def select(self, skill_ids: Sequence[str]) -> List[LoadedSkill]:
        """Load all skills and keep those named in *skill_ids*, in that order.

        Unknown ids are ignored; a repeated id selects its skill once.
        """
        available = {s.id: s for s in self._loader.load_skills(self.skills_dir)}
        selected: List[LoadedSkill] = []
        for skill_id in dict.fromkeys(skill_ids):
            skill = available.get(skill_id)
            if skill is None:
                logger.debug("Ignoring unknown skill id '%s'", skill_id)
                continue
            selected.append(skill)
        return selected

    def execute_skills(
        self, diff: ParsedDiff, skill_ids: Sequence[str]
    ) -> List[SkillResult]:
        """Run the skills named in *skill_ids* against *diff*."""
        if not skill_ids:
            return []
        return run_skills(self.select(skill_ids), diff, max_workers=self.max_workers)


def execute_skills(
    diff: ParsedDiff,
    skill_ids: Sequence[str],
    skills_dir: Union[str, Path],
    *,
    max_workers: int = 1,
) -> List[SkillResult]:
    """Convenience wrapper around :meth:`SkillEngine.execute_skills`."""
    return SkillEngine(skills_dir, max_workers=max_workers).execute_skills(diff, skill_ids)

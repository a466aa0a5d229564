"""Markdown block that hands skill findings to a model-based reviewer."""

from __future__ import annotations

from typing import List, Optional, Sequence

from diffskills.findings.models import SkillResult, all_findings
from diffskills.skills.models import SkillFile

_HEADER = (
    "## Automated Checks (from custom rules)\n"
    "\n"
    "The following issues were found by automated rules:\n"
    "\n"
)


def render_findings(results: Sequence[SkillResult]) -> str:
    """Return the findings as a bullet list, or ``""`` when there are none.

    Each bullet reads ``- [Severity] message (path, line N)``.
    """
    findings = all_findings(list(results))
    if not findings:
        return ""
    lines: List[str] = []
    for f in findings:
        bullet = f"- [{f.severity.value.capitalize()}] {f.message}"
        if f.location:
            bullet += f" ({f.location})"
        lines.append(bullet)
    return _HEADER + "\n".join(lines) + "\n"


def render_context(skills: Sequence[SkillFile]) -> str:
    """Collect each skill's ``prompts.additional_context`` and ``check`` rules."""
    sections: List[str] = []
    for skill in skills:
        parts: List[str] = []
        context: Optional[str] = skill.prompts.additional_context if skill.prompts else None
        if context:
            parts.append(context.strip())
        checks = [r for r in skill.rules if r.check]
        for rule in checks:
            parts.append(f"- {rule.id}: {rule.check}")
        if parts:
            sections.append(f"### {skill.name}\n\n" + "\n".join(parts))
    if not sections:
        return ""
    return "## Review Guidelines\n\n" + "\n\n".join(sections) + "\n"

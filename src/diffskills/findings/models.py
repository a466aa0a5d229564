"""Finding and result models produced by the rule engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from diffskills.skills.models import Severity, severity_at_or_above


@dataclass(frozen=True)
class SkillFinding:
    """One rule match at a file/line of the new side of the diff."""

    rule_id: str
    message: str
    severity: Severity
    file: Optional[str] = None
    line: Optional[int] = None  # 1-based, new-file numbering

    @property
    def location(self) -> str:
        """``path, line N`` style location, or ``""`` when unknown."""
        parts = []
        if self.file:
            parts.append(self.file)
        if self.line is not None:
            parts.append(f"line {self.line}")
        return ", ".join(parts)


@dataclass
class SkillResult:
    """Outcome of running one skill against one diff."""

    skill_name: str
    passed: bool
    findings: List[SkillFinding] = field(default_factory=list)
    execution_time: float = 0.0  # seconds
    skipped: bool = False  # no trigger matched the diff

    @property
    def total_findings(self) -> int:
        return len(self.findings)

    def findings_at_or_above(self, threshold: str) -> List[SkillFinding]:
        return [f for f in self.findings if severity_at_or_above(f.severity, threshold)]


def all_findings(results: List[SkillResult]) -> List[SkillFinding]:
    """Flatten findings across *results*, keeping result order."""
    return [f for r in results for f in r.findings]

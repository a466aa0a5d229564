"""Finding and result models."""

from diffskills.findings.models import SkillFinding, SkillResult, all_findings

__all__ = ["SkillFinding", "SkillResult", "all_findings"]

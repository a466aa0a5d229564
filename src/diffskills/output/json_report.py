"""JSON reporter for skill results."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from diffskills.diff.models import ParsedDiff
from diffskills.findings.models import SkillResult


def to_dict(results: Sequence[SkillResult], diff: ParsedDiff | None = None) -> Dict[str, Any]:
    """Convert skill results to a JSON-serialisable dict."""
    results_list: List[Dict[str, Any]] = []
    for r in results:
        results_list.append({
            "skill": r.skill_name,
            "passed": r.passed,
            "skipped": r.skipped,
            "execution_time_ms": round(r.execution_time * 1000, 2),
            "findings": [
                {
                    "rule": f.rule_id,
                    "severity": f.severity.value,
                    "message": f.message,
                    **({"file": f.file} if f.file is not None else {}),
                    **({"line": f.line} if f.line is not None else {}),
                }
                for f in r.findings
            ],
        })

    report: Dict[str, Any] = {
        "version": "1.0",
        "passed": all(r.passed for r in results),
        "total_findings": sum(r.total_findings for r in results),
        "results": results_list,
    }
    if diff is not None:
        report["diff"] = {
            "files": diff.file_count,
            "additions": diff.total_additions,
            "deletions": diff.total_deletions,
        }
    return report


def render(results: Sequence[SkillResult], diff: ParsedDiff | None = None) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(results, diff), indent=2)

"""Rich terminal reporter — severity pills and a findings table per run."""

from __future__ import annotations

from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table
from rich.text import Text

from diffskills.diff.models import ParsedDiff
from diffskills.findings.models import SkillResult

_SEVERITY_STYLE = {
    "critical": "bold white on red",
    "warning": "bold black on yellow",
    "info": "bold black on bright_cyan",
}

_SEVERITY_ICON = {
    "critical": "🔴",
    "warning": "🟡",
    "info": "🔵",
}


def _severity_pill(severity: str) -> Text:
    style = _SEVERITY_STYLE.get(severity, "")
    icon = _SEVERITY_ICON.get(severity, "")
    return Text(f" {icon} {severity.upper()} ", style=style)


def render(
    results: Sequence[SkillResult],
    diff: Optional[ParsedDiff] = None,
    *,
    console: Optional[Console] = None,
    show_summary: bool = True,
) -> None:
    """Print skill results to the terminal using Rich."""
    console = console or Console(stderr=True)
    findings = [(r.skill_name, f) for r in results for f in r.findings]

    console.print()
    if not results:
        console.print("[dim]No skills selected.[/dim]")
    elif not findings:
        console.print("[bold green]✅ All skills passed.[/bold green]")
    else:
        table = Table(
            title="Skill Findings",
            show_lines=True,
            title_style="bold",
            border_style="dim",
        )
        table.add_column("Severity", justify="center", width=12)
        table.add_column("Skill", style="cyan")
        table.add_column("Rule", style="cyan", min_width=16, no_wrap=True)
        table.add_column("File", style="magenta")
        table.add_column("Line", justify="right", style="green")
        table.add_column("Message")

        for skill_name, finding in findings:
            table.add_row(
                _severity_pill(finding.severity.value),
                skill_name,
                finding.rule_id,
                finding.file or "-",
                str(finding.line) if finding.line is not None else "-",
                finding.message,
            )
        console.print(table)

    if show_summary:
        _print_summary(console, results, diff)


def _print_summary(
    console: Console, results: Sequence[SkillResult], diff: Optional[ParsedDiff]
) -> None:
    console.print()
    if diff is not None:
        console.print(
            f"[dim]Files:[/dim]      {diff.file_count} "
            f"(+{diff.total_additions} / -{diff.total_deletions})"
        )
    for r in results:
        if r.skipped:
            status = "[dim]not applicable[/dim]"
        elif r.passed:
            status = "[green]passed[/green]"
        else:
            status = f"[red]{r.total_findings} finding(s)[/red]"
        console.print(
            f"[dim]Skill:[/dim]      {r.skill_name}  {status}  "
            f"[dim]{r.execution_time * 1000:.0f}ms[/dim]"
        )

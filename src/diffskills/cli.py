"""diffskills CLI — Typer application with check, validate, list, init and install-defaults."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from diffskills import __version__

app = typer.Typer(
    name="diffskills",
    help="Run declarative review skills against a unified diff.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=debug)],
        force=True,
    )


def _load_config(config: Optional[str]):
    """Load config from the working directory, exit 2 on failure."""
    from diffskills.config.loader import ConfigError, load_config

    try:
        return load_config(Path.cwd(), config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _skills_dir(directory: Optional[str], config: Optional[str]) -> Path:
    if directory:
        return Path(directory).expanduser()
    return Path(_load_config(config).skills.directory).expanduser()


def _read_diff(diff_path: Optional[str]) -> str:
    if diff_path is None or diff_path == "-":
        return sys.stdin.read()
    try:
        return Path(diff_path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] cannot read {diff_path}: {exc}")
        raise typer.Exit(code=2) from exc


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    diff_path: Optional[str] = typer.Argument(None, help="Diff file to check (omit or '-' for stdin)"),
    skill: Optional[List[str]] = typer.Option(None, "--skill", "-s", help="Skill name to run (repeatable)"),
    skills_dir: Optional[str] = typer.Option(None, "--skills-dir", "-d", help="Directory of skill YAML files"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffskills.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | prompt"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="Severity threshold: critical | warning | info | none"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write report to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output with timing"),
) -> None:
    """Run skills against a unified diff."""
    from diffskills.config.schema import FAIL_ON_LEVELS, OUTPUT_FORMATS
    from diffskills.diff.parser import parse_diff
    from diffskills.engine.executor import SkillEngine
    from diffskills.output import json_report, prompt, terminal
    from diffskills.skills.defaults import install_default_skills

    _configure_logging(verbose, debug)
    cfg = _load_config(config)

    # --- CLI overrides ---
    if format:
        if format not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if fail_on:
        if fail_on not in FAIL_ON_LEVELS:
            console.print(f"[bold red]Invalid fail-on level:[/bold red] {fail_on}")
            raise typer.Exit(code=2)
        cfg.output.fail_on = fail_on  # type: ignore[assignment]

    directory = Path(skills_dir or cfg.skills.directory).expanduser()
    if cfg.skills.install_defaults:
        # existing files are kept; only missing defaults are written
        try:
            installed = install_default_skills(directory)
        except OSError as exc:
            console.print(f"[bold red]Error:[/bold red] cannot install default skills: {exc}")
            raise typer.Exit(code=2) from exc
        for path in installed:
            logging.getLogger(__name__).info("Installed default skill %s", path)

    skill_ids = list(skill) if skill else list(cfg.skills.enabled)
    if not skill_ids:
        console.print("[yellow]⚠[/yellow]  No skills selected (use --skill or skills.enabled).")

    diff = parse_diff(_read_diff(diff_path))
    if verbose or debug:
        console.print(f"[dim]Skills dir: {directory}[/dim]")
        console.print(f"[dim]Files in diff: {diff.file_count}[/dim]")

    engine = SkillEngine(directory, max_workers=cfg.engine.max_workers)
    results = engine.execute_skills(diff, skill_ids)

    # --- Output ---
    report_text: Optional[str] = None
    if cfg.output.format == "terminal":
        terminal.render(results, diff, console=console)
    elif cfg.output.format == "json":
        report_text = json_report.render(results, diff)
        print(report_text)
    elif cfg.output.format == "prompt":
        skills = [s.content for s in engine.select(skill_ids)]
        report_text = "\n".join(
            part for part in (prompt.render_findings(results), prompt.render_context(skills)) if part
        )
        print(report_text)

    if output:
        if report_text is None:
            report_text = json_report.render(results, diff)
        Path(output).write_text(report_text, encoding="utf-8")
        if verbose:
            console.print(f"[dim]Report written to {output}[/dim]")

    # --- Exit code ---
    if cfg.output.fail_on != "none" and any(
        r.findings_at_or_above(cfg.output.fail_on) for r in results
    ):
        raise typer.Exit(code=1)
    raise typer.Exit(code=0)


# ── validate ──────────────────────────────────────────────────────────────────


@app.command()
def validate(
    directory: Optional[str] = typer.Argument(None, help="Skills directory (default: from config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffskills.toml"),
) -> None:
    """Load every skill file and report which ones are invalid."""
    from diffskills.skills.errors import SkillError
    from diffskills.skills.loader import SkillLoader, iter_skill_files

    skills_dir = _skills_dir(directory, config)
    if not skills_dir.is_dir():
        console.print(f"[bold red]Error:[/bold red] {skills_dir} is not a directory")
        raise typer.Exit(code=2)

    loader = SkillLoader()
    failures = 0
    seen: dict[str, Path] = {}
    for path in iter_skill_files(skills_dir):
        try:
            skill = loader.load_skill(path)
        except SkillError as exc:
            failures += 1
            console.print(f"[red]✗[/red] {path}: {exc}")
            continue
        if skill.id in seen:
            failures += 1
            console.print(f"[red]✗[/red] {path}: skill name '{skill.id}' already used by {seen[skill.id]}")
            continue
        seen[skill.id] = path
        console.print(f"[green]✓[/green] {path} ({skill.id}, {len(skill.content.rules)} rules)")

    if failures:
        raise typer.Exit(code=1)


# ── list ──────────────────────────────────────────────────────────────────────


@app.command("list")
def list_skills(
    directory: Optional[str] = typer.Argument(None, help="Skills directory (default: from config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffskills.toml"),
) -> None:
    """Show the skills that load cleanly from the skills directory."""
    from diffskills.skills.loader import SkillLoader

    skills = SkillLoader().load_skills(_skills_dir(directory, config))
    if not skills:
        console.print("[dim]No skills found.[/dim]")
        return

    table = Table(title="Skills", title_style="bold", border_style="dim")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Version")
    table.add_column("Rules", justify="right")
    table.add_column("Description")
    table.add_column("Source", style="magenta")
    for s in skills:
        table.add_row(
            s.content.name,
            s.content.version,
            str(len(s.content.rules)),
            s.content.description,
            str(s.source),
        )
    Console().print(table)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .diffskills.toml in the current directory."""
    from diffskills.config.defaults import DEFAULT_TOML
    from diffskills.config.loader import CONFIG_FILENAME

    config_path = Path.cwd() / CONFIG_FILENAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── install-defaults ──────────────────────────────────────────────────────────


@app.command("install-defaults")
def install_defaults(
    directory: Optional[str] = typer.Argument(None, help="Skills directory (default: from config)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffskills.toml"),
) -> None:
    """Install the bundled skills, keeping any files that already exist."""
    from diffskills.skills.defaults import install_default_skills

    skills_dir = _skills_dir(directory, config)
    try:
        written = install_default_skills(skills_dir)
    except OSError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if not written:
        console.print(f"[dim]Default skills already present in {skills_dir}[/dim]")
    for path in written:
        console.print(f"[green]✓[/green] Installed {path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"diffskills {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """diffskills — declarative review rules over unified diffs."""

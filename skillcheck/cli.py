"""skillcheck CLI"""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from skillcheck import __version__
from skillcheck.cli_manifest import app as manifest_app
from skillcheck.cli_readme import app as readme_app
from skillcheck.cli_common import console, err_console, handle_errors, load_context
from skillcheck.errors import SkillcheckError
from skillcheck.lint import RULES, CorpusValidator, Severity
from skillcheck.manifest import check_version_bump, load_manifest
from skillcheck.scaffold import create_skill
from skillcheck.skills import SkillManager

app = typer.Typer(name="skillcheck", help="Validate and maintain a corpus of agent skills")
app.add_typer(manifest_app, name="manifest")
app.add_typer(readme_app, name="readme")

ROOT_ARGUMENT = typer.Argument(Path("."), help="Corpus root directory")
CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Config file (default: <root>/.skillcheck.json)")


def _version_callback(value: bool):
    if value:
        console.print(f"skillcheck {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit",
    ),
):
    """Validate and maintain a corpus of agent skills"""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.command("check")
def check(
    root: Path = ROOT_ARGUMENT,
    skill: Optional[str] = typer.Option(None, "--skill", "-s", help="Only check this skill directory"),
    output_format: str = typer.Option("text", "--format", "-f", help="Output format: text or json"),
    strict: bool = typer.Option(False, "--strict", help="Treat warnings as errors"),
    check_version: Optional[bool] = typer.Option(
        None, "--check-version/--no-check-version", help="Compare skills.json version with git history",
    ),
    config_path: Optional[Path] = CONFIG_OPTION,
):
    """Validate skill directories, the manifest and the README index"""
    if output_format not in ("text", "json"):
        raise typer.BadParameter("use 'text' or 'json'", param_hint="--format")

    with handle_errors():
        root, config = load_context(root, config_path)
        if strict:
            config.rules.warnings_as_errors = True
        report = CorpusValidator(root, config).validate(skill=skill, check_version=check_version)

    if output_format == "json":
        typer.echo(json.dumps(report.to_dict(), indent=2))
    else:
        for violation in report.violations:
            color = "red" if violation.severity == Severity.ERROR else "yellow"
            console.print(
                f"[{color}]{violation.severity.value}[/{color}] {escape(violation.location)} "
                f"[bold]{violation.rule}[/bold]: {escape(violation.message)}",
                soft_wrap=True,
            )

        summary = (
            f"{len(report.checked_skills)} skills checked, "
            f"{len(report.errors)} errors, {len(report.warnings)} warnings"
        )
        if report.passed:
            console.print(f"[green]✓ Passed[/green] - {summary}", soft_wrap=True)
        else:
            console.print(f"[red]✗ Failed[/red] - {summary}", soft_wrap=True)

    if not report.passed:
        raise typer.Exit(1)


@app.command("list")
def list_skills(
    root: Path = ROOT_ARGUMENT,
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only skills with this tag"),
    config_path: Optional[Path] = CONFIG_OPTION,
):
    """List discovered skills"""
    with handle_errors():
        root, config = load_context(root, config_path)
        manager = SkillManager(root, config.layout.skills_dir, config.layout.skill_file)

    skills = manager.list(tag=tag)
    if not skills:
        console.print("[yellow]No skills found.[/yellow]")
        return

    table = Table(title="Skills")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Tags", style="magenta")
    table.add_column("Refs", justify="right")
    table.add_column("Description")

    for s in skills:
        table.add_row(s.name, ", ".join(s.tags), str(s.references), s.description)

    console.print(table)

    for failure in manager.failures:
        console.print(
            f"[red]Could not load {escape(failure.directory.name)}:[/red] {escape(failure.error)}",
            soft_wrap=True,
        )


@app.command("show")
def show_skill(
    name: str = typer.Argument(..., help="Skill name"),
    root: Path = ROOT_ARGUMENT,
    reference: Optional[str] = typer.Option(None, "--reference", "-r", help="Show a reference file instead"),
    raw: bool = typer.Option(False, "--raw", help="Print Markdown source instead of rendering it"),
    config_path: Optional[Path] = CONFIG_OPTION,
):
    """Show a skill's instructions or one of its reference files"""
    with handle_errors():
        root, config = load_context(root, config_path)
        manager = SkillManager(root, config.layout.skills_dir, config.layout.skill_file)

        skill = manager.get(name)
        if skill is None:
            available = ", ".join(manager.names()) or "none"
            raise SkillcheckError(f"Skill '{name}' not found. Available: {available}")

        if reference:
            content = manager.read_reference(name, reference)
            if content is None:
                raise SkillcheckError(f"Reference '{reference}' not found in skill '{name}'")
        else:
            content = skill.content

    if raw:
        typer.echo(content)
        return

    if not reference:
        console.print(f"[bold cyan]{skill.name}[/bold cyan]")
        console.print(f"[dim]{escape(skill.description)}[/dim]")
        if skill.tags:
            console.print(f"Tags: {', '.join(skill.tags)}")
        console.print()
    console.print(Markdown(content))

    if not reference and skill.references:
        console.print()
        console.print("[bold]References:[/bold]")
        for ref in skill.references:
            console.print(f"  - {ref}")


@app.command("search")
def search_skills(
    query: str = typer.Argument(..., help="Keywords or tag"),
    root: Path = ROOT_ARGUMENT,
    limit: int = typer.Option(5, "--limit", "-n", help="Maximum results"),
    config_path: Optional[Path] = CONFIG_OPTION,
):
    """Search skills by name, tag and description keywords"""
    with handle_errors():
        root, config = load_context(root, config_path)
        manager = SkillManager(root, config.layout.skills_dir, config.layout.skill_file)

    matches = manager.search(query, max_skills=limit)
    if not matches:
        console.print(f"[yellow]No skills match '{escape(query)}'.[/yellow]")
        return

    table = Table(title=f"Skills matching '{escape(query)}'")
    table.add_column("Score", justify="right")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Match", style="magenta")
    table.add_column("Description")

    for m in matches:
        table.add_row(f"{m.score:.2f}", m.skill.name, m.match_type, m.skill.description)

    console.print(table)


@app.command("new")
def new_skill(
    name: str = typer.Argument(..., help="Skill name (lowercase letters, digits, hyphens)"),
    description: str = typer.Option(..., "--description", "-d", help="Third-person description incl. when to use"),
    tags: List[str] = typer.Option([], "--tag", "-t", help="Tag (repeatable)"),
    root: Path = typer.Option(Path("."), "--root", help="Corpus root directory"),
    config_path: Optional[Path] = CONFIG_OPTION,
):
    """Create a skill directory and register it in the manifest and README"""
    with handle_errors():
        root, config = load_context(root, config_path)
        result = create_skill(root, name, description, tags, config)

    console.print(f"[green]Created skill: {result.name}[/green]")
    console.print(f"  {result.path.relative_to(root) / config.layout.skill_file}")
    console.print(f"[dim]Registered in {config.layout.manifest} and {config.layout.readme}[/dim]")


@app.command("version-check")
def version_check(
    root: Path = ROOT_ARGUMENT,
    config_path: Optional[Path] = CONFIG_OPTION,
):
    """Check that the manifest version grew since its previous commit"""
    with handle_errors():
        root, config = load_context(root, config_path)
        manifest_path = root / config.layout.manifest
        manifest = load_manifest(manifest_path)
        result = check_version_bump(manifest_path, manifest.version)

    if result.ok:
        console.print(f"[green]✓ {escape(result.message)}[/green]", soft_wrap=True)
    else:
        console.print(f"[red]✗ {escape(result.message)}[/red]", soft_wrap=True)
        raise typer.Exit(1)


@app.command("rules")
def list_rules():
    """List validation rules"""
    table = Table(title="Rules")
    table.add_column("Rule", style="cyan", no_wrap=True)
    table.add_column("Scope")
    table.add_column("Severity")
    table.add_column("Check")

    for rule in RULES.values():
        color = "red" if rule.severity == Severity.ERROR else "yellow"
        table.add_row(rule.id, rule.scope.value, f"[{color}]{rule.severity.value}[/{color}]", rule.summary)

    console.print(table)


if __name__ == "__main__":
    app()

"""Manifest management CLI"""

from enum import Enum
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape

from skillcheck.cli_common import console, handle_errors, load_context
from skillcheck.errors import SkillcheckError
from skillcheck.manifest import (
    Manifest,
    bump_version,
    dump_manifest,
    load_manifest,
    save_manifest,
    sync_manifest,
)
from skillcheck.skills import SkillManager

app = typer.Typer(name="manifest", help="Maintain the skills.json manifest")


class Part(str, Enum):
    major = "major"
    minor = "minor"
    patch = "patch"


@app.command("sync")
def sync(
    root: Path = typer.Argument(Path("."), help="Corpus root directory"),
    prune: bool = typer.Option(False, "--prune", help="Remove entries whose directory is gone"),
    bump: Optional[Part] = typer.Option(None, "--bump", "-b", help="Bump version when entries change"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the result instead of writing it"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
):
    """Rebuild manifest entries from the skill directories"""
    with handle_errors():
        root, config = load_context(root, config_path)
        layout = config.layout
        manifest_path = root / layout.manifest
        manifest = load_manifest(manifest_path) if manifest_path.exists() else Manifest()

        manager = SkillManager(root, layout.skills_dir, layout.skill_file)
        for failure in manager.failures:
            console.print(
                f"[yellow]Skipping {escape(failure.directory.name)}:[/yellow] {escape(failure.error)}",
                soft_wrap=True,
            )

        result = sync_manifest(manifest, manager.skills(), layout.skills_dir, prune=prune)
        new_manifest = result.manifest
        if result.changed and bump is not None:
            new_manifest = bump_version(new_manifest, bump.value)

        for name in result.added:
            console.print(f"[green]+ {name}[/green]")
        for name in result.updated:
            console.print(f"[blue]~ {name}[/blue]")
        for name in result.removed:
            console.print(f"[red]- {name}[/red]")
        for name in result.missing:
            console.print(f"[yellow]! {name} has no skill directory (use --prune to remove)[/yellow]")
        for name in result.invalid:
            console.print(
                f"[yellow]! {escape(name)} is not a valid skill name and was not registered[/yellow]",
                soft_wrap=True,
            )

        if dry_run:
            typer.echo(dump_manifest(new_manifest), nl=False)
            return

        if not result.changed and manifest_path.exists():
            console.print("[dim]Manifest already up to date.[/dim]")
            return

        save_manifest(new_manifest, manifest_path)
        console.print(f"[green]Wrote {layout.manifest} (version {new_manifest.version})[/green]")


@app.command("bump")
def bump(
    part: Part = typer.Argument(..., help="Version part: major, minor or patch"),
    root: Path = typer.Argument(Path("."), help="Corpus root directory"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
):
    """Bump the manifest version"""
    with handle_errors():
        root, config = load_context(root, config_path)
        manifest_path = root / config.layout.manifest
        manifest = load_manifest(manifest_path)
        bumped = bump_version(manifest, part.value)
        save_manifest(bumped, manifest_path)

    console.print(f"[green]{manifest.version} → {bumped.version}[/green]")


@app.command("show")
def show(
    root: Path = typer.Argument(Path("."), help="Corpus root directory"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
):
    """Print the manifest version and entries"""
    with handle_errors():
        root, config = load_context(root, config_path)
        manifest = load_manifest(root / config.layout.manifest)
        if not manifest.skills:
            raise SkillcheckError(f"{config.layout.manifest} lists no skills")

    console.print(f"[bold]Version {manifest.version}[/bold]")
    for record in manifest.skills:
        tags = f" [magenta]({', '.join(record.tags)})[/magenta]" if record.tags else ""
        console.print(f"- [cyan]{record.name}[/cyan]{tags}: {escape(record.description)}", soft_wrap=True)

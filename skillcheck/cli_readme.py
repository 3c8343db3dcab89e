"""README index CLI"""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from skillcheck.cli_common import console, handle_errors, load_context
from skillcheck.manifest import load_manifest
from skillcheck.readme import parse_index, sync_readme

app = typer.Typer(name="readme", help="Maintain the README skill index")


@app.command("sync")
def sync(
    root: Path = typer.Argument(Path("."), help="Corpus root directory"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the README instead of writing it"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
):
    """Rewrite the README skill index from the manifest"""
    with handle_errors():
        root, config = load_context(root, config_path)
        layout = config.layout
        manifest = load_manifest(root / layout.manifest)

        readme_path = root / layout.readme
        text = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""
        updated = sync_readme(text, manifest.skills, layout.readme_section, layout.skills_dir)

    if dry_run:
        typer.echo(updated, nl=False)
        return

    if updated == text:
        console.print("[dim]README index already up to date.[/dim]")
        return

    readme_path.write_text(updated, encoding="utf-8")
    console.print(f"[green]Updated {layout.readme} ({len(manifest.skills)} skills)[/green]")


@app.command("list")
def list_entries(
    root: Path = typer.Argument(Path("."), help="Corpus root directory"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file"),
):
    """Show the skills listed in the README index"""
    with handle_errors():
        root, config = load_context(root, config_path)
        layout = config.layout
        readme_path = root / layout.readme
        text = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""

    index = parse_index(text, layout.readme_section, layout.skills_dir)
    if not index.found:
        console.print(f"[yellow]No '## {layout.readme_section}' section in {layout.readme}.[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"{layout.readme} index")
    table.add_column("Line", justify="right")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Target", style="blue")

    for entry in index.entries:
        table.add_row(str(entry.line), entry.name, entry.target)

    console.print(table)

"""Helpers shared by the CLI command modules"""

from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from skillcheck.config import Config, load_config
from skillcheck.errors import SkillcheckError

console = Console()
err_console = Console(stderr=True)


@contextmanager
def handle_errors():
    """Report skillcheck errors without a traceback and exit 1"""
    try:
        yield
    except SkillcheckError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", soft_wrap=True)
        raise typer.Exit(1)


def load_context(root: Path, config_path: Optional[Path] = None) -> tuple[Path, Config]:
    """Resolve the corpus root and load its configuration"""
    root = root.resolve()
    if not root.is_dir():
        raise SkillcheckError(f"Not a directory: {root}")
    return root, load_config(root, config_path)

"""Corpus builders shared by the tests"""

import json
import shutil
import subprocess
from pathlib import Path

import pytest


def description_for(name: str) -> str:
    return f"Teaches {name} conventions. Use when writing code that relies on {name}."


def write_skill(
    root: Path,
    name: str,
    description: str | None = None,
    body: str = "# Title\n\nGuidance.\n",
    tags: list[str] | None = None,
    front_matter: str | None = None,
    references: dict[str, str] | None = None,
    directory: str | None = None,
) -> Path:
    """Create skills/<directory or name>/SKILL.md (and references) under root"""
    skill_dir = root / "skills" / (directory or name)
    skill_dir.mkdir(parents=True, exist_ok=True)

    if front_matter is None:
        lines = [f"name: {name}", f"description: {description or description_for(name)}"]
        if tags:
            lines.append(f"tags: [{', '.join(tags)}]")
        front_matter = "\n".join(lines)

    (skill_dir / "SKILL.md").write_text(f"---\n{front_matter}\n---\n\n{body}", encoding="utf-8")

    for rel, content in (references or {}).items():
        path = skill_dir / "references" / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    return skill_dir


def write_manifest(root: Path, names: list[str], version: str = "1.0.0", **extra) -> Path:
    data = dict(extra)
    data["version"] = version
    data["skills"] = [
        {
            "name": name,
            "path": f"skills/{name}",
            "description": description_for(name),
            "tags": [],
        }
        for name in names
    ]
    path = root / "skills.json"
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


def write_readme(root: Path, names: list[str]) -> Path:
    bullets = "\n".join(f"- [`{n}`](./skills/{n}/) - {description_for(n)}" for n in names)
    text = (
        "# Agent Skills\n\n"
        "Guides for coding agents.\n\n"
        "## Skills\n\n"
        f"{bullets}\n\n"
        "## Contributing\n\n"
        "See AGENTS.md.\n"
    )
    path = root / "README.md"
    path.write_text(text, encoding="utf-8")
    return path


def long_text(lines: int, toc: bool = False) -> str:
    head = "# Reference\n\n"
    if toc:
        head += "## Table of Contents\n\n- [Details](#details)\n\n"
    head += "## Details\n\n"
    return head + "".join(f"Line {i}\n" for i in range(lines))


@pytest.fixture
def corpus(tmp_path: Path) -> Path:
    """A consistent corpus with arrow-resource and arrow-typed-errors"""
    names = ["arrow-resource", "arrow-typed-errors"]
    for name in names:
        write_skill(tmp_path, name)
    write_manifest(tmp_path, names)
    write_readme(tmp_path, names)
    return tmp_path


requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


def git(repo: Path, *args: str) -> str:
    proc = subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            "-c", "init.defaultBranch=main",
            *args,
        ],
        cwd=repo,
        check=True,
        capture_output=True,
        text=True,
    )
    return proc.stdout

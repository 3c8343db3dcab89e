"""
Skill scaffolding - create a skill directory and register it.
"""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from skillcheck.config.schema import Config
from skillcheck.errors import ManifestError, ScaffoldError
from skillcheck.manifest.schema import SKILL_NAME_PATTERN, Manifest, SkillRecord
from skillcheck.manifest.store import expected_path, load_manifest, save_manifest
from skillcheck.readme.index import sync_readme
from skillcheck.skills.loader import normalize_tags

logger = logging.getLogger(__name__)

SKILL_TEMPLATE = """---
{front_matter}---

# {title}

## When to Use

{description}

## Guidelines

-
"""


@dataclass
class ScaffoldResult:
    name: str
    path: Path
    manifest_path: Path
    readme_path: Path


def _title(name: str) -> str:
    return " ".join(part.capitalize() for part in name.split("-") if part)


def render_skill_md(name: str, description: str, tags: Optional[list[str]] = None) -> str:
    data = {"name": name, "description": description}
    if tags:
        data["tags"] = list(tags)
    front_matter = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, width=1000)
    return SKILL_TEMPLATE.format(front_matter=front_matter, title=_title(name), description=description)


def create_skill(
    root: Path,
    name: str,
    description: str,
    tags: Optional[list[str]] = None,
    config: Optional[Config] = None,
) -> ScaffoldResult:
    """
    Create skills/<name>/SKILL.md and register the skill.

    The record is appended to the manifest (created at version 0.1.0 if
    absent) and the README index is rewritten from the manifest.

    Raises:
        ScaffoldError: Invalid name, empty description, existing directory
            or a manifest that cannot take the new record
    """
    config = config or Config()
    layout = config.layout
    root = Path(root)

    if not re.fullmatch(SKILL_NAME_PATTERN, name):
        raise ScaffoldError(f"Invalid skill name '{name}': use lowercase letters, digits and hyphens")
    description = " ".join(description.split())
    if not description:
        raise ScaffoldError("A description is required")
    tags = normalize_tags(tags)

    skill_dir = root / layout.skills_dir / name
    if skill_dir.exists():
        raise ScaffoldError(f"Skill directory already exists: {skill_dir}")

    manifest_path = root / layout.manifest
    if manifest_path.exists():
        try:
            manifest = load_manifest(manifest_path)
        except ManifestError as e:
            raise ScaffoldError(f"Cannot register skill: {e}") from e
    else:
        manifest = Manifest()

    if manifest.get(name) is not None:
        raise ScaffoldError(f"Skill '{name}' is already listed in {layout.manifest}")
    duplicates = manifest.duplicate_names()
    if duplicates:
        raise ScaffoldError(
            f"Cannot register skill: {layout.manifest} lists duplicate skill names: {', '.join(duplicates)}"
        )

    record = SkillRecord(
        name=name,
        path=expected_path(name, layout.skills_dir),
        description=description,
        tags=tags,
    )
    manifest = manifest.model_copy(update={"skills": [*manifest.skills, record]})

    skill_dir.mkdir(parents=True)
    try:
        (skill_dir / layout.skill_file).write_text(render_skill_md(name, description, tags), encoding="utf-8")
        save_manifest(manifest, manifest_path)
    except (OSError, ManifestError):
        # Leave no half-registered skill behind
        shutil.rmtree(skill_dir, ignore_errors=True)
        raise
    logger.info(f"Created {skill_dir / layout.skill_file}")

    readme_path = root / layout.readme
    text = readme_path.read_text(encoding="utf-8") if readme_path.exists() else ""
    readme_path.write_text(
        sync_readme(text, manifest.skills, layout.readme_section, layout.skills_dir),
        encoding="utf-8",
    )

    return ScaffoldResult(name=name, path=skill_dir, manifest_path=manifest_path, readme_path=readme_path)

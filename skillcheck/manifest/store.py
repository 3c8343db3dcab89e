"""Reading, writing and synchronizing skills.json"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from skillcheck.errors import ManifestError
from skillcheck.skills.loader import Skill

from .schema import SKILL_NAME_PATTERN, Manifest, SkillRecord
from .semver import BumpPart

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of rebuilding manifest records from skill directories"""
    manifest: Manifest
    added: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)  # records kept without a directory
    invalid: list[str] = field(default_factory=list)  # skill names that are not valid slugs

    @property
    def changed(self) -> bool:
        return bool(self.added or self.updated or self.removed)


def format_validation_error(error: ValidationError) -> list[str]:
    """One `field.path: message` line per pydantic error"""
    lines = []
    for item in error.errors():
        loc = '.'.join(str(x) for x in item['loc']) or "<root>"
        lines.append(f"{loc}: {item['msg']}")
    return lines


def parse_manifest(text: str, source: str = "skills.json") -> Manifest:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ManifestError(f"{source}: invalid JSON ({e.msg} at line {e.lineno})") from e

    if not isinstance(data, dict):
        raise ManifestError(f"{source}: expected a JSON object with 'version' and 'skills'")

    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        details = "; ".join(format_validation_error(e))
        raise ManifestError(f"{source}: {details}") from e


def load_manifest(path: Path) -> Manifest:
    """Load and validate skills.json"""
    path = Path(path)
    if not path.is_file():
        raise ManifestError(f"Manifest not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e
    return parse_manifest(text, source=str(path))


def _record_to_dict(record: SkillRecord) -> dict:
    data = {"name": record.name}
    if record.path is not None:
        data["path"] = record.path
    data["description"] = record.description
    data["tags"] = list(record.tags)
    data.update(record.model_extra or {})
    return data


def manifest_to_dict(manifest: Manifest) -> dict:
    """Serializable form: extra top-level keys first, then version and skills"""
    data = dict(manifest.model_extra or {})
    data["version"] = manifest.version
    data["skills"] = [_record_to_dict(r) for r in manifest.skills]
    return data


def dump_manifest(manifest: Manifest) -> str:
    return json.dumps(manifest_to_dict(manifest), indent=2, ensure_ascii=False) + "\n"


def save_manifest(manifest: Manifest, path: Path) -> None:
    """Write skills.json; refuses to write duplicate skill names"""
    duplicates = manifest.duplicate_names()
    if duplicates:
        raise ManifestError(f"Refusing to save manifest with duplicate skill names: {', '.join(duplicates)}")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_manifest(manifest), encoding="utf-8")
    logger.info(f"Wrote {len(manifest.skills)} skills to {path}")


def expected_path(skill_dir_name: str, skills_dir: str = "skills") -> str:
    return f"{skills_dir.strip('/')}/{skill_dir_name}"


def _merge_tags(*groups: Iterable[str]) -> list[str]:
    tags: list[str] = []
    for group in groups:
        for tag in group:
            if tag not in tags:
                tags.append(tag)
    return tags


def record_for_skill(skill: Skill, skills_dir: str = "skills", existing: SkillRecord | None = None) -> SkillRecord:
    """Build the manifest record describing a discovered skill"""
    extra = dict(existing.model_extra or {}) if existing else {}
    tags = _merge_tags(existing.tags if existing else [], skill.tags)
    return SkillRecord(
        name=skill.name,
        path=expected_path(skill.directory_name, skills_dir),
        description=skill.description,
        tags=tags,
        **extra,
    )


def sync_manifest(
    manifest: Manifest,
    skills: Iterable[Skill],
    skills_dir: str = "skills",
    prune: bool = False,
) -> SyncResult:
    """
    Rebuild manifest records from discovered skills.

    Existing records keep their position and extra keys; their path and
    description are refreshed from SKILL.md and tags are merged. New skills
    are appended in name order. Records without a skill directory are kept
    unless prune is set. Skills whose name is not a valid slug are left out
    and listed in invalid.
    """
    result = SyncResult(manifest=manifest)
    discovered: dict[str, Skill] = {}
    for skill in skills:
        if not re.fullmatch(SKILL_NAME_PATTERN, skill.name):
            logger.warning(f"Not registering {skill.directory_name}: invalid skill name '{skill.name}'")
            result.invalid.append(skill.name)
            continue
        discovered.setdefault(skill.name, skill)

    records: list[SkillRecord] = []
    seen: set[str] = set()

    for record in manifest.skills:
        if record.name in seen:
            continue
        seen.add(record.name)

        skill = discovered.get(record.name)
        if skill is None:
            if prune:
                result.removed.append(record.name)
            else:
                result.missing.append(record.name)
                records.append(record)
            continue

        refreshed = record_for_skill(skill, skills_dir, existing=record)
        if _record_to_dict(refreshed) != _record_to_dict(record):
            result.updated.append(record.name)
        records.append(refreshed)

    for name in sorted(set(discovered) - seen):
        records.append(record_for_skill(discovered[name], skills_dir))
        result.added.append(name)

    # Duplicate records collapse onto the first occurrence
    for name in manifest.duplicate_names():
        if name not in result.updated and name not in result.removed:
            result.updated.append(name)

    result.manifest = manifest.model_copy(update={"skills": records})
    logger.debug(
        f"Manifest sync: {len(result.added)} added, {len(result.updated)} updated, "
        f"{len(result.removed)} removed"
    )
    return result


def bump_version(manifest: Manifest, part: BumpPart) -> Manifest:
    """Return a copy of the manifest with its version bumped"""
    new_version = str(manifest.semver.bump(part))
    logger.info(f"Manifest version {manifest.version} -> {new_version}")
    return manifest.model_copy(update={"version": new_version})

"""SKILL.md loader - parses YAML front-matter and collects skill files"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from skillcheck.errors import SkillLoadError

logger = logging.getLogger(__name__)

SKILL_FILE = "SKILL.md"
REFERENCES_DIR = "references"

FRONT_MATTER_DELIMITER = "---"

# Skip anything larger than this when reading SKILL.md
MAX_SKILL_FILE_SIZE = 10 * 1024 * 1024


@dataclass
class FrontMatter:
    """Raw split of a Markdown file into front-matter and body"""
    data: Any
    raw: str
    body: str
    body_line: int  # 1-based line number where the body starts


@dataclass
class Skill:
    """A skill directory parsed from its SKILL.md"""
    name: str
    description: str
    content: str
    path: Path
    tags: list[str] = field(default_factory=list)
    metadata: dict[str, Any] = field(default_factory=dict)
    references: list[str] = field(default_factory=list)
    resources: list[str] = field(default_factory=list)

    @property
    def root_dir(self) -> Path:
        return self.path.parent

    @property
    def directory_name(self) -> str:
        return self.root_dir.name


def normalize_tags(value: Any) -> list[str]:
    """Turn a front-matter or manifest tags value into a de-duplicated list"""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = [str(v) for v in value]
    else:
        items = [str(value)]

    tags: list[str] = []
    for item in items:
        tag = item.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


class SkillLoader:
    """Parses SKILL.md files"""

    @staticmethod
    def split_front_matter(text: str) -> FrontMatter | None:
        """
        Split text into its front-matter block and body.

        Returns None when the text does not open with a `---` line or the
        block is never closed. YAML is not parsed here.
        """
        text = text.lstrip("\ufeff")
        lines = text.splitlines(keepends=True)
        if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
            return None

        for index in range(1, len(lines)):
            if lines[index].strip() == FRONT_MATTER_DELIMITER:
                raw = "".join(lines[1:index])
                body = "".join(lines[index + 1:])
                return FrontMatter(data=None, raw=raw, body=body, body_line=index + 2)

        return None

    @classmethod
    def parse_front_matter(cls, text: str) -> FrontMatter:
        """
        Split and YAML-parse the front-matter of a Markdown document.

        Raises SkillLoadError if the block is missing, the YAML is invalid
        or the block is not a mapping.
        """
        front_matter = cls.split_front_matter(text)
        if front_matter is None:
            raise SkillLoadError("missing YAML front-matter (expected a leading '---' block)")

        try:
            data = yaml.safe_load(front_matter.raw) if front_matter.raw.strip() else {}
        except yaml.YAMLError as e:
            raise SkillLoadError(f"invalid YAML front-matter: {e}") from e

        if not isinstance(data, dict):
            raise SkillLoadError("front-matter must be a mapping of keys to values")

        front_matter.data = data
        return front_matter

    @classmethod
    def load(cls, path: Path) -> Skill:
        """Load a skill from its SKILL.md path (or the skill directory)"""
        path = Path(path)
        if path.is_dir():
            path = path / SKILL_FILE

        if not path.is_file():
            raise SkillLoadError(f"{SKILL_FILE} not found: {path}")

        size = path.stat().st_size
        if size > MAX_SKILL_FILE_SIZE:
            raise SkillLoadError(f"{path} is too large ({size} bytes)")

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise SkillLoadError(f"cannot read {path}: {e}") from e

        try:
            front_matter = cls.parse_front_matter(text)
        except SkillLoadError as e:
            raise SkillLoadError(f"{path}: {e}") from e
        data = dict(front_matter.data)

        name = data.pop("name", None)
        description = data.pop("description", None)
        if not name:
            raise SkillLoadError(f"{path}: front-matter has no 'name'")
        if not description:
            raise SkillLoadError(f"{path}: front-matter has no 'description'")

        tags = normalize_tags(data.pop("tags", None))
        references, resources = cls.collect_files(path.parent)

        return Skill(
            name=str(name).strip(),
            description=" ".join(str(description).split()),
            content=front_matter.body.strip(),
            path=path,
            tags=tags,
            metadata=data,
            references=references,
            resources=resources,
        )

    @staticmethod
    def collect_files(root_dir: Path) -> tuple[list[str], list[str]]:
        """Return (references, resources) as paths relative to the skill directory"""
        references: list[str] = []
        resources: list[str] = []

        for file in sorted(root_dir.rglob("*")):
            if not file.is_file():
                continue
            rel = file.relative_to(root_dir)
            if rel.as_posix() == SKILL_FILE:
                continue
            if rel.parts[0] == REFERENCES_DIR:
                references.append(rel.as_posix())
            else:
                resources.append(rel.as_posix())

        logger.debug(f"{root_dir.name}: {len(references)} references, {len(resources)} resources")
        return references, resources

"""skills.json schemas using Pydantic"""

from collections import Counter
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillcheck.skills.loader import normalize_tags

from .semver import SemVer

SKILL_NAME_PATTERN = r"^[a-z0-9-]+$"


class SkillRecord(BaseModel):
    """One skill entry in the manifest"""
    model_config = ConfigDict(extra="allow")

    name: str = Field(pattern=SKILL_NAME_PATTERN)
    path: str | None = None
    description: str = ""
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str]:
        return normalize_tags(value)


class Manifest(BaseModel):
    """The skills.json registry"""
    model_config = ConfigDict(extra="allow")

    version: str = "0.1.0"
    skills: list[SkillRecord] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        SemVer.parse(value)
        return value

    @property
    def semver(self) -> SemVer:
        return SemVer.parse(self.version)

    def names(self) -> list[str]:
        return [record.name for record in self.skills]

    def duplicate_names(self) -> list[str]:
        counts = Counter(self.names())
        return sorted(name for name, count in counts.items() if count > 1)

    def get(self, name: str) -> SkillRecord | None:
        for record in self.skills:
            if record.name == name:
                return record
        return None

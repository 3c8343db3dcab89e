"""Configuration schemas using Pydantic"""

from pydantic import BaseModel, Field


class LayoutConfig(BaseModel):
    """Where the corpus keeps its files, relative to the corpus root"""
    skills_dir: str = "skills"
    skill_file: str = "SKILL.md"
    references_dir: str = "references"
    manifest: str = "skills.json"
    readme: str = "README.md"
    readme_section: str = "Skills"


class RulesConfig(BaseModel):
    """Validation rule settings"""
    # Reference files longer than this need a table of contents
    toc_line_threshold: int = 100
    toc_headings: list[str] = Field(default_factory=lambda: [
        "Table of Contents", "Contents", "TOC",
    ])
    max_description_length: int = 1024

    disabled_rules: list[str] = Field(default_factory=list)
    severity_overrides: dict[str, str] = Field(default_factory=dict)  # rule id -> error|warning
    warnings_as_errors: bool = False

    # Needs git; compares skills.json against its previous commit
    check_version_bump: bool = False


class Config(BaseModel):
    """Main configuration"""
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    rules: RulesConfig = Field(default_factory=RulesConfig)

"""Skill discovery and loading for a skills corpus"""

from .loader import SkillLoader, Skill, FrontMatter, SKILL_FILE, REFERENCES_DIR
from .manager import SkillManager, SkillSummary, SkillMatch, LoadFailure

__all__ = [
    "SkillManager",
    "Skill",
    "SkillSummary",
    "SkillMatch",
    "SkillLoader",
    "LoadFailure",
    "FrontMatter",
    "SKILL_FILE",
    "REFERENCES_DIR",
]

"""Skill and corpus validation"""

from .rules import RULES, Rule, Scope, Severity, get_rule
from .report import ValidationReport, Violation
from .validator import CorpusValidator, SkillValidator, has_leading_toc

__all__ = [
    "RULES",
    "Rule",
    "Scope",
    "Severity",
    "get_rule",
    "ValidationReport",
    "Violation",
    "CorpusValidator",
    "SkillValidator",
    "has_leading_toc",
]

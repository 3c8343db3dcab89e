"""Validation results"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Optional

from skillcheck.config.schema import RulesConfig

from .rules import Severity, get_rule


@dataclass
class Violation:
    """A single broken rule"""
    rule: str
    path: str
    message: str
    severity: Severity = Severity.ERROR
    line: Optional[int] = None

    @classmethod
    def of(cls, rule: str, path: str, message: str, line: Optional[int] = None) -> "Violation":
        """Violation with the rule's default severity"""
        return cls(rule=rule, path=path, message=message, severity=get_rule(rule).severity, line=line)

    @property
    def location(self) -> str:
        return f"{self.path}:{self.line}" if self.line else self.path

    def to_dict(self) -> dict:
        data = asdict(self)
        data["severity"] = self.severity.value
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class ValidationReport:
    """Pass/fail outcome with the list of violated rules"""
    violations: list[Violation] = field(default_factory=list)
    checked_skills: list[str] = field(default_factory=list)

    @property
    def errors(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[Violation]:
        return [v for v in self.violations if v.severity == Severity.WARNING]

    @property
    def passed(self) -> bool:
        return not self.errors

    def rules_violated(self) -> set[str]:
        return {v.rule for v in self.violations}

    def extend(self, other: "ValidationReport") -> None:
        self.violations.extend(other.violations)
        self.checked_skills.extend(other.checked_skills)

    def apply(self, rules: RulesConfig) -> "ValidationReport":
        """Drop disabled rules and apply severity overrides in place"""
        disabled = set(rules.disabled_rules)
        kept = []
        for violation in self.violations:
            if violation.rule in disabled:
                continue
            override = rules.severity_overrides.get(violation.rule)
            if override:
                violation.severity = Severity(override)
            if rules.warnings_as_errors and violation.severity == Severity.WARNING:
                violation.severity = Severity.ERROR
            kept.append(violation)
        self.violations = sorted(kept, key=lambda v: (v.path, v.line or 0, v.rule))
        return self

    def to_dict(self) -> dict:
        return {
            "passed": self.passed,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "skills": list(self.checked_skills),
            "violations": [v.to_dict() for v in self.violations],
        }

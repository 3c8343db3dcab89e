"""Rule catalogue for skill and corpus validation"""

from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


class Scope(str, Enum):
    SKILL = "skill"
    CORPUS = "corpus"


@dataclass(frozen=True)
class Rule:
    id: str
    severity: Severity
    scope: Scope
    summary: str


_RULES = [
    # Skill directory
    Rule("skill-md-missing", Severity.ERROR, Scope.SKILL, "SKILL.md exists in the skill directory"),
    Rule("frontmatter-missing", Severity.ERROR, Scope.SKILL, "SKILL.md starts with a YAML front-matter block"),
    Rule("frontmatter-invalid", Severity.ERROR, Scope.SKILL, "front-matter is valid YAML and a mapping"),
    Rule("name-missing", Severity.ERROR, Scope.SKILL, "front-matter has a non-empty 'name'"),
    Rule("name-format", Severity.ERROR, Scope.SKILL, "'name' matches ^[a-z0-9-]+$"),
    Rule("name-directory-mismatch", Severity.WARNING, Scope.SKILL, "'name' equals the directory name"),
    Rule("description-missing", Severity.ERROR, Scope.SKILL, "front-matter has a non-empty 'description'"),
    Rule("description-person", Severity.WARNING, Scope.SKILL, "description is written in the third person"),
    Rule("description-trigger", Severity.WARNING, Scope.SKILL, "description says when to use the skill"),
    Rule("description-length", Severity.WARNING, Scope.SKILL, "description stays within the length limit"),
    Rule("references-nested", Severity.ERROR, Scope.SKILL, "references/ holds files only, no subdirectories"),
    Rule("reference-not-markdown", Severity.WARNING, Scope.SKILL, "reference files are Markdown (.md)"),
    Rule("reference-toc-missing", Severity.ERROR, Scope.SKILL, "long reference files open with a table of contents"),
    Rule("reference-link-broken", Severity.ERROR, Scope.SKILL, "links from SKILL.md into references/ resolve"),
    # Corpus
    Rule("manifest-missing", Severity.ERROR, Scope.CORPUS, "skills.json exists"),
    Rule("manifest-invalid", Severity.ERROR, Scope.CORPUS, "skills.json is valid JSON matching the manifest schema"),
    Rule("manifest-duplicate-name", Severity.ERROR, Scope.CORPUS, "manifest skill names are unique"),
    Rule("manifest-unregistered", Severity.ERROR, Scope.CORPUS, "every skill directory is listed in the manifest"),
    Rule("manifest-orphan", Severity.ERROR, Scope.CORPUS, "every manifest entry has a skill directory"),
    Rule("manifest-path-mismatch", Severity.ERROR, Scope.CORPUS, "manifest paths point at skills/<name>"),
    Rule("manifest-description-drift", Severity.WARNING, Scope.CORPUS, "manifest descriptions match SKILL.md"),
    Rule("readme-missing", Severity.ERROR, Scope.CORPUS, "README.md exists"),
    Rule("readme-index-missing", Severity.ERROR, Scope.CORPUS, "README.md has the skills index section"),
    Rule("readme-unlisted", Severity.ERROR, Scope.CORPUS, "every manifest skill is listed in the README index"),
    Rule("readme-unknown", Severity.ERROR, Scope.CORPUS, "every README index entry is a manifest skill"),
    Rule("readme-duplicate", Severity.WARNING, Scope.CORPUS, "each skill is listed once in the README index"),
    Rule("readme-unlinked", Severity.WARNING, Scope.CORPUS, "top-level README index bullets link to a skill"),
    Rule("version-not-bumped", Severity.ERROR, Scope.CORPUS, "manifest version increased since its previous commit"),
]

RULES: dict[str, Rule] = {rule.id: rule for rule in _RULES}


def get_rule(rule_id: str) -> Rule:
    try:
        return RULES[rule_id]
    except KeyError:
        raise KeyError(f"Unknown rule: {rule_id}") from None

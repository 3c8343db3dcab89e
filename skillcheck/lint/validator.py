"""Static validation of skill directories and of a whole corpus.

The validators only read files. Every problem found in corpus content is
reported as a Violation; nothing here raises for a malformed skill.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from skillcheck.config.schema import Config
from skillcheck.errors import HistoryError, ManifestError, SkillLoadError
from skillcheck.manifest.history import check_version_bump
from skillcheck.manifest.schema import SKILL_NAME_PATTERN, Manifest
from skillcheck.manifest.store import expected_path, load_manifest
from skillcheck.readme.index import LINK_RE, iter_headings, parse_index
from skillcheck.skills.loader import SkillLoader
from skillcheck.skills.manager import SkillManager

from .report import ValidationReport, Violation
from .rules import Severity

logger = logging.getLogger(__name__)

NAME_RE = re.compile(SKILL_NAME_PATTERN)

# First- and second-person words, lower case or capitalized. "I" only counts
# as a standalone word, so "I/O" and "US" are not pronouns.
PERSON_WORDS = ["me", "my", "mine", "we", "us", "our", "ours", "you", "your", "yours"]
PERSON_RE = re.compile(
    r"(?<![\w/])I(?![\w/])|\b(?:"
    + "|".join(f"[{w[0]}{w[0].upper()}]{w[1:]}" for w in PERSON_WORDS)
    + r")\b"
)
TRIGGER_RE = re.compile(r"\b(?:when|whenever|use|used|using|while|during)\b", re.IGNORECASE)
CODE_SPAN_RE = re.compile(r"`[^`]*`")
SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")


def _rel(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return path.resolve().relative_to(root.resolve()).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def _normalize_heading(text: str) -> str:
    text = re.sub(r"[*_`]", "", text)
    return text.strip().rstrip(":").strip().lower()


def has_leading_toc(text: str, toc_headings: list[str]) -> bool:
    """
    True if the first section heading is a table of contents.

    A leading level-1 title is skipped unless it is itself the table of
    contents. Headings in fenced code blocks and in a front-matter block are
    ignored.
    """
    front_matter = SkillLoader.split_front_matter(text)
    if front_matter is not None:
        text = front_matter.body

    wanted = {_normalize_heading(h) for h in toc_headings}
    headings = list(iter_headings(text.splitlines()))
    if headings and headings[0].level == 1 and _normalize_heading(headings[0].text) not in wanted:
        headings = headings[1:]
    if not headings:
        return False

    return _normalize_heading(headings[0].text) in wanted


def count_lines(text: str) -> int:
    return len(text.splitlines())


class SkillValidator:
    """Checks one skill directory: SKILL.md front-matter and references/"""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    @property
    def layout(self):
        return self.config.layout

    @property
    def rules(self):
        return self.config.rules

    def validate(self, skill_dir: Path, root: Optional[Path] = None) -> ValidationReport:
        """
        Validate a candidate skill directory.

        Args:
            skill_dir: Directory expected to hold SKILL.md
            root: Corpus root, used to report relative paths

        Returns:
            ValidationReport with every violated rule
        """
        skill_dir = Path(skill_dir)
        report = ValidationReport(checked_skills=[skill_dir.name])
        skill_md = skill_dir / self.layout.skill_file
        skill_md_rel = _rel(skill_md, root)

        if not skill_md.is_file():
            report.violations.append(Violation.of(
                "skill-md-missing", _rel(skill_dir, root), f"{self.layout.skill_file} not found",
            ))
        else:
            self._check_skill_md(skill_md, skill_md_rel, skill_dir, report)

        self._check_references(skill_dir, root, report)
        logger.debug(f"{skill_dir.name}: {len(report.violations)} violations")
        return report

    def _check_skill_md(self, skill_md: Path, rel: str, skill_dir: Path, report: ValidationReport) -> None:
        try:
            text = skill_md.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            report.violations.append(Violation.of("frontmatter-invalid", rel, f"cannot read file: {e}"))
            return

        front_matter = SkillLoader.split_front_matter(text)
        if front_matter is None:
            report.violations.append(Violation.of(
                "frontmatter-missing", rel, "no YAML front-matter (file must open with a '---' block)", line=1,
            ))
            return

        try:
            front_matter = SkillLoader.parse_front_matter(text)
        except SkillLoadError as e:
            report.violations.append(Violation.of("frontmatter-invalid", rel, str(e), line=1))
            return

        data = front_matter.data
        self._check_name(data.get("name"), skill_dir.name, rel, report)
        self._check_description(data.get("description"), rel, report)
        self._check_links(front_matter.body, front_matter.body_line, skill_dir, rel, report)

    def _check_name(self, name, directory_name: str, rel: str, report: ValidationReport) -> None:
        if name is None or not str(name).strip():
            report.violations.append(Violation.of("name-missing", rel, "front-matter has no 'name'"))
            return

        name = str(name).strip()
        if not NAME_RE.match(name):
            report.violations.append(Violation.of(
                "name-format", rel,
                f"name '{name}' must contain only lowercase letters, digits and hyphens",
            ))
        if name != directory_name:
            report.violations.append(Violation.of(
                "name-directory-mismatch", rel,
                f"name '{name}' does not match directory '{directory_name}'",
            ))

    def _check_description(self, description, rel: str, report: ValidationReport) -> None:
        if description is None or not str(description).strip():
            report.violations.append(Violation.of("description-missing", rel, "front-matter has no 'description'"))
            return

        description = " ".join(str(description).split())
        prose = CODE_SPAN_RE.sub("", description)

        match = PERSON_RE.search(prose)
        if match:
            report.violations.append(Violation.of(
                "description-person", rel,
                f"description should be third-person (found '{match.group(0)}')",
            ))
        if not TRIGGER_RE.search(prose):
            report.violations.append(Violation.of(
                "description-trigger", rel, "description should say when to use the skill",
            ))
        if len(description) > self.rules.max_description_length:
            report.violations.append(Violation.of(
                "description-length", rel,
                f"description is {len(description)} characters (max {self.rules.max_description_length})",
            ))

    def _check_links(self, body: str, body_line: int, skill_dir: Path, rel: str, report: ValidationReport) -> None:
        references_prefix = f"{self.layout.references_dir}/"
        in_fence = False
        for offset, line in enumerate(body.splitlines()):
            if line.lstrip().startswith(("```", "~~~")):
                in_fence = not in_fence
                continue
            if in_fence:
                continue
            for _, target in LINK_RE.findall(line):
                if SCHEME_RE.match(target) or target.startswith(('#', '/')):
                    continue
                path = target.split('#', 1)[0]
                while path.startswith('./'):
                    path = path[2:]
                if not path.startswith(references_prefix):
                    continue
                if not (skill_dir / path).is_file():
                    report.violations.append(Violation.of(
                        "reference-link-broken", rel, f"link target '{target}' does not exist",
                        line=body_line + offset,
                    ))

    def _check_references(self, skill_dir: Path, root: Optional[Path], report: ValidationReport) -> None:
        references = skill_dir / self.layout.references_dir
        if not references.is_dir():
            return

        for entry in sorted(references.iterdir()):
            entry_rel = _rel(entry, root)
            if entry.is_dir():
                report.violations.append(Violation.of(
                    "references-nested", entry_rel,
                    f"nested directory in {self.layout.references_dir}/; reference files must sit one level deep",
                ))
                continue
            if not entry.is_file():
                continue
            if entry.suffix.lower() != ".md":
                report.violations.append(Violation.of(
                    "reference-not-markdown", entry_rel, "reference files should be Markdown (.md)",
                ))
                continue
            self._check_toc(entry, entry_rel, report)

    def _check_toc(self, reference: Path, rel: str, report: ValidationReport) -> None:
        try:
            text = reference.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            report.violations.append(Violation.of("reference-toc-missing", rel, f"cannot read file: {e}"))
            return

        lines = count_lines(text)
        if lines <= self.rules.toc_line_threshold:
            return
        if not has_leading_toc(text, self.rules.toc_headings):
            report.violations.append(Violation.of(
                "reference-toc-missing", rel,
                f"{lines} lines but no '{self.rules.toc_headings[0]}' heading before the first section",
            ))


class CorpusValidator:
    """Validates every skill of a corpus plus its manifest and README index"""

    def __init__(self, root: Path, config: Optional[Config] = None):
        self.root = Path(root).resolve()
        self.config = config or Config()
        self.skill_validator = SkillValidator(self.config)

    @property
    def layout(self):
        return self.config.layout

    def validate(self, skill: Optional[str] = None, check_version: Optional[bool] = None) -> ValidationReport:
        """
        Run all checks.

        Args:
            skill: Restrict the run to one skill directory (corpus checks skipped)
            check_version: Override rules.check_version_bump

        Returns:
            ValidationReport after disabled rules and severity overrides apply
        """
        manager = SkillManager(self.root, self.layout.skills_dir, self.layout.skill_file)
        report = ValidationReport()

        if skill is not None:
            skill_dir = self._find_skill_dir(manager, skill)
            report.extend(self.skill_validator.validate(skill_dir, self.root))
            return report.apply(self.config.rules)

        for skill_dir in manager.candidate_dirs():
            report.extend(self.skill_validator.validate(skill_dir, self.root))

        manifest = self._check_manifest(manager, report)
        self._check_readme(manager, manifest, report)

        if check_version is None:
            check_version = self.config.rules.check_version_bump
        if check_version and manifest is not None:
            self._check_version(manifest, report)

        logger.info(
            f"Checked {len(report.checked_skills)} skills: "
            f"{len(report.errors)} errors, {len(report.warnings)} warnings"
        )
        return report.apply(self.config.rules)

    def _find_skill_dir(self, manager: SkillManager, name: str) -> Path:
        candidate = manager.skills_path / name
        if candidate.is_dir():
            return candidate
        loaded = manager.get(name)
        if loaded is not None:
            return loaded.root_dir
        return candidate

    def _dir_names(self, manager: SkillManager) -> dict[str, Path]:
        """Skill name -> directory, falling back to the directory name for broken skills"""
        names: dict[str, Path] = {}
        loaded_dirs = {}
        for skill in manager.skills():
            loaded_dirs[skill.root_dir.resolve()] = skill.name
        for skill_dir in manager.candidate_dirs():
            name = loaded_dirs.get(skill_dir.resolve(), skill_dir.name)
            names.setdefault(name, skill_dir)
        return names

    def _check_manifest(self, manager: SkillManager, report: ValidationReport) -> Optional[Manifest]:
        manifest_path = self.root / self.layout.manifest
        rel = self.layout.manifest

        if not manifest_path.is_file():
            report.violations.append(Violation.of("manifest-missing", rel, "manifest not found"))
            return None

        try:
            manifest = load_manifest(manifest_path)
        except ManifestError as e:
            message = str(e).replace(str(manifest_path), rel)
            report.violations.append(Violation.of("manifest-invalid", rel, message))
            return None

        for name in manifest.duplicate_names():
            report.violations.append(Violation.of(
                "manifest-duplicate-name", rel, f"skill '{name}' is listed more than once",
            ))

        dirs = self._dir_names(manager)
        registered = set(manifest.names())

        for name, skill_dir in sorted(dirs.items()):
            if name not in registered:
                report.violations.append(Violation.of(
                    "manifest-unregistered", rel,
                    f"skill '{name}' ({_rel(skill_dir, self.root)}) is not listed in the manifest",
                ))

        seen: set[str] = set()
        for record in manifest.skills:
            if record.name in seen:
                continue
            seen.add(record.name)

            skill_dir = dirs.get(record.name)
            if skill_dir is None:
                report.violations.append(Violation.of(
                    "manifest-orphan", rel, f"skill '{record.name}' has no directory under {self.layout.skills_dir}/",
                ))
                continue

            wanted = expected_path(skill_dir.name, self.layout.skills_dir)
            if record.path is not None and record.path.strip('/').removeprefix('./') != wanted:
                report.violations.append(Violation.of(
                    "manifest-path-mismatch", rel,
                    f"skill '{record.name}' path is '{record.path}', expected '{wanted}'",
                ))

            skill = manager.get(record.name)
            if skill is not None and " ".join(record.description.split()) != skill.description:
                report.violations.append(Violation.of(
                    "manifest-description-drift", rel,
                    f"description of '{record.name}' differs from its {self.layout.skill_file}",
                ))

        return manifest

    def _check_readme(self, manager: SkillManager, manifest: Optional[Manifest], report: ValidationReport) -> None:
        readme_path = self.root / self.layout.readme
        rel = self.layout.readme

        if not readme_path.is_file():
            report.violations.append(Violation.of("readme-missing", rel, "README not found"))
            return

        try:
            text = readme_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            report.violations.append(Violation.of("readme-missing", rel, f"cannot read README: {e}"))
            return

        section = self.layout.readme_section
        index = parse_index(text, section, self.layout.skills_dir)
        if not index.found:
            report.violations.append(Violation.of(
                "readme-index-missing", rel, f"no '## {section}' section",
            ))
            return

        expected = set(manifest.names()) if manifest is not None else set(self._dir_names(manager))
        listed: set[str] = set()
        for entry in index.entries:
            if entry.name in listed:
                report.violations.append(Violation.of(
                    "readme-duplicate", rel, f"skill '{entry.name}' is listed more than once", line=entry.line,
                ))
            listed.add(entry.name)
            if entry.name not in expected:
                report.violations.append(Violation.of(
                    "readme-unknown", rel, f"'{entry.name}' is not a registered skill", line=entry.line,
                ))

        for line in index.unlinked:
            report.violations.append(Violation.of(
                "readme-unlinked", rel, f"bullet in '## {section}' does not link to a skill directory", line=line,
            ))

        for name in sorted(expected - listed):
            report.violations.append(Violation.of(
                "readme-unlisted", rel, f"skill '{name}' is missing from the '## {section}' index",
                line=index.heading_line + 1,
            ))

    def _check_version(self, manifest: Manifest, report: ValidationReport) -> None:
        rel = self.layout.manifest
        try:
            check = check_version_bump(self.root / self.layout.manifest, manifest.version)
        except HistoryError as e:
            report.violations.append(Violation(
                rule="version-not-bumped", path=rel, severity=Severity.WARNING,
                message=f"could not read manifest history: {e}",
            ))
            return

        if not check.ok:
            report.violations.append(Violation.of("version-not-bumped", rel, check.message))

"""Skill manager - discovers, indexes, and looks up the skills of a corpus"""

from __future__ import annotations

import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path

from .loader import SKILL_FILE, REFERENCES_DIR, Skill, SkillLoader

logger = logging.getLogger(__name__)


# Stopwords to filter from keyword matching
STOPWORDS = {
    'the', 'and', 'for', 'with', 'this', 'that', 'when', 'use', 'using',
    'how', 'what', 'why', 'can', 'could', 'would', 'should', 'please',
    'help', 'need', 'want', 'like', 'make', 'create', 'file', 'code',
    'skill', 'skills', 'best', 'practices', 'guide', 'from', 'into',
}


@dataclass
class SkillSummary:
    """Lightweight skill info for listing"""
    name: str
    description: str
    tags: list[str]
    path: Path
    references: int = 0


@dataclass
class SkillMatch:
    """Result from skill search"""
    skill: Skill
    score: float
    match_type: str  # 'name', 'tag', 'keyword'


@dataclass
class LoadFailure:
    """A skill directory whose SKILL.md could not be loaded"""
    directory: Path
    error: str


class SkillManager:
    """
    Discovers the skills of a corpus laid out as {root}/{skills_dir}/<name>/SKILL.md.

    Only direct children of the skills directory are skill candidates; the
    corpus convention does not nest skills.

    Features:
    - Inverted keyword and tag indexes for O(1) lookup
    - Path-traversal safe access to skill references and resources
    """

    def __init__(self, root: Path, skills_dir: str = "skills", skill_file: str = SKILL_FILE):
        self.root = Path(root).resolve()
        self.skills_dir = skills_dir
        self.skill_file = skill_file

        self._discovered: dict[str, Skill] = {}
        self._failures: list[LoadFailure] = []

        self._keyword_index: dict[str, set[str]] = defaultdict(set)
        self._tag_index: dict[str, set[str]] = defaultdict(set)

        self.discover()

    @property
    def skills_path(self) -> Path:
        return self.root / self.skills_dir

    @property
    def failures(self) -> list[LoadFailure]:
        return list(self._failures)

    def candidate_dirs(self) -> list[Path]:
        """Every directory directly under the skills directory, sorted by name"""
        if not self.skills_path.is_dir():
            return []
        return sorted(
            d for d in self.skills_path.iterdir()
            if d.is_dir() and not d.name.startswith('.')
        )

    def discover(self) -> dict[str, Skill]:
        """Scan the skills directory and load every SKILL.md"""
        self._discovered.clear()
        self._failures.clear()
        self._keyword_index.clear()
        self._tag_index.clear()

        if not self.skills_path.is_dir():
            logger.info(f"No skills directory at {self.skills_path}")
            return self._discovered

        for skill_dir in self.candidate_dirs():
            skill_file = skill_dir / self.skill_file
            if not skill_file.is_file():
                logger.debug(f"Skipping {skill_dir.name}: no {self.skill_file}")
                continue
            try:
                skill = SkillLoader.load(skill_file)
            except Exception as e:
                logger.warning(f"Failed to load skill from {skill_file}: {e}")
                self._failures.append(LoadFailure(directory=skill_dir, error=str(e)))
                continue

            if skill.name in self._discovered:
                logger.warning(
                    f"Skill name '{skill.name}' used by both "
                    f"{self._discovered[skill.name].root_dir.name} and {skill_dir.name}"
                )

            self._add_skill(skill)
            logger.debug(f"Discovered skill: {skill.name} at {skill_file}")

        logger.info(f"Discovered {len(self._discovered)} skills")
        return self._discovered

    def _add_skill(self, skill: Skill) -> None:
        """Add a skill and update inverted indexes"""
        self._discovered[skill.name] = skill

        text = f"{skill.name} {skill.description}".lower()
        for keyword in set(re.findall(r'\b[a-z0-9]{3,}\b', text)) - STOPWORDS:
            self._keyword_index[keyword].add(skill.name)

        for tag in skill.tags:
            self._tag_index[tag.lower()].add(skill.name)

    def skills(self) -> list[Skill]:
        """All loaded skills sorted by name"""
        return [self._discovered[n] for n in sorted(self._discovered)]

    def names(self) -> list[str]:
        return sorted(self._discovered)

    def list(self, tag: str | None = None) -> list[SkillSummary]:
        """List discovered skills sorted by name, optionally filtered by tag"""
        names = self.lookup_by_tag(tag) if tag else set(self._discovered)
        return [
            SkillSummary(
                name=skill.name,
                description=skill.description,
                tags=list(skill.tags),
                path=skill.root_dir,
                references=len(skill.references),
            )
            for skill in (self._discovered[n] for n in sorted(names))
        ]

    def get(self, name: str) -> Skill | None:
        """Get a skill by name"""
        return self._discovered.get(name)

    def lookup_by_keyword(self, keyword: str) -> set[str]:
        """O(1) lookup: keyword → skill names"""
        return set(self._keyword_index.get(keyword.lower(), set()))

    def lookup_by_tag(self, tag: str) -> set[str]:
        """O(1) lookup: tag → skill names"""
        return set(self._tag_index.get(tag.lower(), set()))

    def search(self, query: str, max_skills: int = 5, min_score: float = 0.2) -> list[SkillMatch]:
        """
        Rank skills against a free-text query.

        Each query keyword scores 1.0 per matching tag and per matching
        name/description keyword; an exact skill name scores 2.0. Scores are
        normalized by the number of query keywords.

        Args:
            query: Search text
            max_skills: Maximum number of results
            min_score: Minimum normalized score

        Returns:
            List of SkillMatch sorted by score (highest first), then name
        """
        scores: dict[str, float] = {}
        match_types: dict[str, str] = {}

        query = query.strip().lower()
        if query in self._discovered:
            scores[query] = 2.0
            match_types[query] = 'name'

        keywords = self._extract_keywords(query)
        for keyword in keywords:
            for skill_name in self.lookup_by_tag(keyword):
                scores[skill_name] = scores.get(skill_name, 0) + 1.0
                match_types.setdefault(skill_name, 'tag')
            for skill_name in self.lookup_by_keyword(keyword):
                scores[skill_name] = scores.get(skill_name, 0) + 1.0
                match_types.setdefault(skill_name, 'keyword')

        if keywords:
            for name in scores:
                scores[name] = scores[name] / len(keywords)

        results = [
            SkillMatch(skill=self._discovered[name], score=score, match_type=match_types[name])
            for name, score in scores.items()
            if score >= min_score
        ]
        results.sort(key=lambda r: (-r.score, r.skill.name))
        return results[:max_skills]

    def _extract_keywords(self, text: str) -> list[str]:
        """Extract meaningful keywords from text"""
        words = []
        for word in re.findall(r'\b[a-z0-9][a-z0-9-]{2,}\b', text.lower()):
            words.append(word)
            # Hyphenated words also match on their parts
            if '-' in word:
                words.extend(p for p in word.split('-') if len(p) >= 3)
        return [w for w in dict.fromkeys(words) if w not in STOPWORDS]

    def get_resource_path(self, skill_name: str, resource: str) -> Path | None:
        """
        Get the full path to a skill reference or resource.
        Returns None if skill not found or resource path is invalid.
        """
        skill = self._discovered.get(skill_name)
        if not skill:
            return None

        root_dir = skill.root_dir.resolve()
        resource_path = (root_dir / resource).resolve()

        try:
            resource_path.relative_to(root_dir)
        except ValueError:
            logger.warning(f"Attempted path traversal in skill {skill_name}: {resource}")
            return None

        if not resource_path.is_file():
            return None

        return resource_path

    def read_reference(self, skill_name: str, reference: str) -> str | None:
        """Read a reference file; bare file names are looked up under references/"""
        if '/' not in reference:
            reference = f"{REFERENCES_DIR}/{reference}"
        path = self.get_resource_path(skill_name, reference)
        if path is None:
            return None
        return path.read_text(encoding="utf-8")

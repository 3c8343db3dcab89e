"""README skill index - parse and render the `## Skills` bullet list"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from skillcheck.manifest.schema import SkillRecord
from skillcheck.manifest.store import expected_path

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r'^(#{1,6})\s+(.*?)\s*#*\s*$')
FENCE_RE = re.compile(r'^\s*(```|~~~)')
BULLET_RE = re.compile(r'^\s*[-*+]\s+(.*)$')
LINK_RE = re.compile(r'\[([^\]]*)\]\(\s*<?([^)\s>]+)>?(?:\s+"[^"]*")?\s*\)')

INDEX_LEVEL = 2


@dataclass
class Heading:
    level: int
    text: str
    line: int  # 0-based index into the line list


@dataclass
class IndexEntry:
    """A bullet in the README index linking to a skill directory"""
    name: str
    title: str
    target: str
    line: int  # 1-based


@dataclass
class ReadmeIndex:
    found: bool
    heading_line: Optional[int] = None  # 0-based
    end_line: Optional[int] = None  # 0-based, exclusive
    entries: list[IndexEntry] = field(default_factory=list)
    unlinked: list[int] = field(default_factory=list)  # 1-based lines of bullets with no skill link

    def names(self) -> list[str]:
        return [e.name for e in self.entries]


def iter_headings(lines: list[str]) -> Iterable[Heading]:
    """ATX headings outside fenced code blocks"""
    in_fence = False
    for index, line in enumerate(lines):
        if FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = HEADING_RE.match(line)
        if match:
            yield Heading(level=len(match.group(1)), text=match.group(2).strip(), line=index)


def skill_name_from_target(target: str, skills_dir: str = "skills") -> Optional[str]:
    """`./skills/<name>/` (also without ./ or trailing slash, or ending in SKILL.md) -> name"""
    target = target.split('#', 1)[0].strip()
    while target.startswith('./'):
        target = target[2:]
    parts = [p for p in target.split('/') if p]
    prefix = [p for p in skills_dir.split('/') if p]
    if len(parts) < len(prefix) + 1 or parts[:len(prefix)] != prefix:
        return None
    rest = parts[len(prefix):]
    if len(rest) == 1 or (len(rest) == 2 and rest[1] == 'SKILL.md'):
        return rest[0]
    return None


def parse_index(text: str, section: str = "Skills", skills_dir: str = "skills") -> ReadmeIndex:
    """Locate the index section and collect its skill bullets"""
    lines = text.splitlines()
    headings = list(iter_headings(lines))

    start = None
    for heading in headings:
        if heading.level == INDEX_LEVEL and heading.text.lower() == section.lower():
            start = heading
            break

    if start is None:
        return ReadmeIndex(found=False)

    end = len(lines)
    for heading in headings:
        if heading.line > start.line and heading.level <= INDEX_LEVEL:
            end = heading.line
            break

    index = ReadmeIndex(found=True, heading_line=start.line, end_line=end)
    in_fence = False
    for line_no in range(start.line + 1, end):
        line = lines[line_no]
        if FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        bullet = BULLET_RE.match(line)
        if not bullet:
            continue
        for title, target in LINK_RE.findall(bullet.group(1)):
            name = skill_name_from_target(target, skills_dir)
            if name:
                index.entries.append(IndexEntry(
                    name=name,
                    title=title.strip().strip('`'),
                    target=target,
                    line=line_no + 1,
                ))
                break
        else:
            if not line.startswith((' ', '\t')):
                index.unlinked.append(line_no + 1)

    logger.debug(f"README index '{section}': {len(index.entries)} entries")
    return index


def render_entry(record: SkillRecord, skills_dir: str = "skills") -> str:
    path = (record.path or expected_path(record.name, skills_dir)).strip('/')
    line = f"- [`{record.name}`](./{path}/)"
    if record.description:
        line += f" - {record.description}"
    return line


def render_index(records: Iterable[SkillRecord], skills_dir: str = "skills") -> list[str]:
    return [render_entry(r, skills_dir) for r in records]


def sync_readme(
    text: str,
    records: Iterable[SkillRecord],
    section: str = "Skills",
    skills_dir: str = "skills",
) -> str:
    """
    Rewrite the skill bullets of the index section from manifest records.

    Only the block from the first to the last skill bullet (with its
    continuation lines) is replaced; prose around it is kept. A missing
    section is appended at the end of the document.
    """
    rendered = render_index(records, skills_dir)
    trailing_newline = text.endswith('\n') or not text
    lines = text.splitlines()
    index = parse_index(text, section, skills_dir)

    if not index.found:
        new_lines = list(lines)
        while new_lines and not new_lines[-1].strip():
            new_lines.pop()
        if new_lines:
            new_lines.append("")
        new_lines.extend([f"{'#' * INDEX_LEVEL} {section}", "", *rendered])
        return "\n".join(new_lines) + "\n"

    if index.entries:
        first = index.entries[0].line - 1
        last = index.entries[-1].line - 1
        # Continuation lines of the last bullet
        while last + 1 < index.end_line and lines[last + 1].strip() and lines[last + 1].startswith((' ', '\t')):
            last += 1
        new_lines = lines[:first] + rendered + lines[last + 1:]
    else:
        insert_at = index.heading_line + 1
        block = ["", *rendered]
        if insert_at >= len(lines) or lines[insert_at].strip():
            block.append("")
        new_lines = lines[:insert_at] + block + lines[insert_at:]

    result = "\n".join(new_lines)
    return result + "\n" if trailing_newline else result

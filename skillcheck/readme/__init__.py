"""README.md skill index"""

from .index import (
    IndexEntry,
    ReadmeIndex,
    iter_headings,
    parse_index,
    render_entry,
    render_index,
    skill_name_from_target,
    sync_readme,
)

__all__ = [
    "IndexEntry",
    "ReadmeIndex",
    "iter_headings",
    "parse_index",
    "render_entry",
    "render_index",
    "skill_name_from_target",
    "sync_readme",
]

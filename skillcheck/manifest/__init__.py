"""skills.json manifest: schema, storage, versions and history"""

from .schema import Manifest, SkillRecord, SKILL_NAME_PATTERN
from .semver import SemVer
from .store import (
    SyncResult,
    load_manifest,
    parse_manifest,
    save_manifest,
    dump_manifest,
    sync_manifest,
    bump_version,
    expected_path,
    record_for_skill,
)
from .history import VersionCheck, check_version_bump, previous_version

__all__ = [
    "Manifest",
    "SkillRecord",
    "SKILL_NAME_PATTERN",
    "SemVer",
    "SyncResult",
    "load_manifest",
    "parse_manifest",
    "save_manifest",
    "dump_manifest",
    "sync_manifest",
    "bump_version",
    "expected_path",
    "record_for_skill",
    "VersionCheck",
    "check_version_bump",
    "previous_version",
]

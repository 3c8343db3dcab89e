"""Manifest version history from git"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from skillcheck.errors import HistoryError, ManifestError

from .semver import SemVer
from .store import parse_manifest

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 30


@dataclass
class VersionCheck:
    current: str
    previous: Optional[str]
    previous_commit: Optional[str] = None

    @property
    def ok(self) -> bool:
        if self.previous is None:
            return True
        return SemVer.parse(self.current) > SemVer.parse(self.previous)

    @property
    def message(self) -> str:
        if self.previous is None:
            return f"No earlier revision of the manifest; version {self.current} accepted"
        if self.ok:
            return f"Version {self.current} > {self.previous}"
        return (
            f"Manifest version {self.current} is not greater than {self.previous} "
            f"(commit {self.previous_commit[:10] if self.previous_commit else '?'})"
        )


def _git(args: list[str], cwd: Path, check: bool = True) -> subprocess.CompletedProcess:
    """Run a git command and return the completed process"""
    try:
        return subprocess.run(
            ['git', *args],
            cwd=cwd,
            check=check,
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except FileNotFoundError as e:
        raise HistoryError("git is not installed or not on PATH") from e
    except subprocess.TimeoutExpired as e:
        raise HistoryError(f"git {' '.join(args)} timed out after {GIT_TIMEOUT}s") from e
    except subprocess.CalledProcessError as e:
        raise HistoryError(f"git {' '.join(args)} failed: {(e.stderr or '').strip()}") from e


def repo_root(path: Path) -> Path:
    proc = _git(['rev-parse', '--show-toplevel'], cwd=Path(path))
    return Path(proc.stdout.strip()).resolve()


def commits_touching(repo: Path, rel_path: str, limit: int = 2) -> list[str]:
    """Most recent commits (newest first) that touched a file"""
    head = _git(['rev-parse', '--verify', '--quiet', 'HEAD'], cwd=repo, check=False)
    if head.returncode != 0:
        # Repository without commits
        return []
    proc = _git(['log', f'-n{limit}', '--format=%H', '--', rel_path], cwd=repo)
    return [line for line in proc.stdout.splitlines() if line.strip()]


def file_at(repo: Path, rev: str, rel_path: str) -> Optional[str]:
    """File content at a revision, or None if it does not exist there"""
    proc = _git(['show', f'{rev}:{rel_path}'], cwd=repo, check=False)
    if proc.returncode != 0:
        return None
    return proc.stdout


def previous_version(manifest_path: Path) -> tuple[Optional[str], Optional[str]]:
    """
    Version recorded at the previous commit touching the manifest.

    If the working copy differs from the last committed content, that last
    commit is the previous revision; otherwise it is the commit before it.

    Returns:
        Tuple of (version, commit); both None when there is no earlier revision
    """
    manifest_path = Path(manifest_path).resolve()
    repo = repo_root(manifest_path.parent)
    rel = manifest_path.relative_to(repo).as_posix()

    commits = commits_touching(repo, rel, limit=2)
    if not commits:
        logger.debug(f"{rel} has no commits yet")
        return None, None

    current_text = manifest_path.read_text(encoding="utf-8")
    committed_text = file_at(repo, commits[0], rel)

    if committed_text is not None and committed_text != current_text:
        previous_commit = commits[0]
        previous_text = committed_text
    elif len(commits) > 1:
        previous_commit = commits[1]
        previous_text = file_at(repo, previous_commit, rel)
    else:
        return None, None

    if previous_text is None:
        return None, None

    try:
        previous = parse_manifest(previous_text, source=f"{rel}@{previous_commit[:10]}")
    except ManifestError as e:
        logger.warning(f"Ignoring unreadable earlier manifest: {e}")
        return None, None

    return previous.version, previous_commit


def check_version_bump(manifest_path: Path, current: str) -> VersionCheck:
    """Compare the current manifest version with its previous revision"""
    previous, commit = previous_version(manifest_path)
    check = VersionCheck(current=current, previous=previous, previous_commit=commit)
    logger.debug(check.message)
    return check

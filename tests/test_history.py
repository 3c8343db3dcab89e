"""Tests for manifest version history (needs git)"""

import pytest

from skillcheck.errors import HistoryError
from skillcheck.manifest import check_version_bump, previous_version

from conftest import git, requires_git, write_manifest

pytestmark = requires_git


@pytest.fixture
def repo(tmp_path):
    git(tmp_path, "init", "-q")
    return tmp_path


def commit_manifest(repo, version, names=("a",), message="update"):
    path = write_manifest(repo, list(names), version=version)
    git(repo, "add", "skills.json")
    git(repo, "commit", "-q", "-m", message)
    return path


class TestPreviousVersion:
    def test_no_history(self, repo):
        path = write_manifest(repo, ["a"])
        assert previous_version(path) == (None, None)

    def test_single_commit_clean(self, repo):
        path = commit_manifest(repo, "1.0.0")
        assert previous_version(path) == (None, None)

    def test_uncommitted_change_compares_with_last_commit(self, repo):
        commit_manifest(repo, "1.0.0")
        path = write_manifest(repo, ["a", "b"], version="1.1.0")

        version, commit = previous_version(path)

        assert version == "1.0.0"
        assert commit is not None

    def test_clean_tree_compares_with_commit_before(self, repo):
        commit_manifest(repo, "1.0.0")
        path = commit_manifest(repo, "1.1.0", names=("a", "b"))
        assert previous_version(path)[0] == "1.0.0"

    def test_not_a_repository(self, tmp_path):
        path = write_manifest(tmp_path, ["a"])
        with pytest.raises(HistoryError):
            previous_version(path)


class TestCheckVersionBump:
    def test_bumped(self, repo):
        commit_manifest(repo, "1.0.0")
        path = commit_manifest(repo, "1.0.1", names=("a", "b"))
        check = check_version_bump(path, "1.0.1")
        assert check.ok
        assert check.previous == "1.0.0"

    def test_not_bumped(self, repo):
        commit_manifest(repo, "1.0.0")
        path = write_manifest(repo, ["a", "b"], version="1.0.0")
        check = check_version_bump(path, "1.0.0")
        assert not check.ok
        assert "not greater than 1.0.0" in check.message

    def test_downgrade(self, repo):
        commit_manifest(repo, "1.1.0")
        path = commit_manifest(repo, "1.0.9", names=("a", "b"))
        assert not check_version_bump(path, "1.0.9").ok

    def test_first_version_accepted(self, repo):
        path = commit_manifest(repo, "0.1.0")
        check = check_version_bump(path, "0.1.0")
        assert check.ok
        assert check.previous is None

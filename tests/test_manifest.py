"""Tests for skills.json loading, saving and syncing"""

import json

import pytest

from skillcheck.errors import ManifestError
from skillcheck.manifest import (
    Manifest,
    SkillRecord,
    bump_version,
    dump_manifest,
    load_manifest,
    save_manifest,
    sync_manifest,
)
from skillcheck.skills import SkillManager

from conftest import description_for, write_manifest, write_skill


class TestSchema:
    """Test manifest models"""

    def test_record_name_must_be_slug(self):
        with pytest.raises(ValueError):
            SkillRecord(name="Arrow_Resource")

    def test_tags_deduplicated(self):
        record = SkillRecord(name="a", tags=["x", "y", "x"])
        assert record.tags == ["x", "y"]

    def test_version_must_be_semver(self):
        with pytest.raises(ValueError):
            Manifest(version="one")

    def test_duplicate_names(self):
        manifest = Manifest(skills=[SkillRecord(name="a"), SkillRecord(name="b"), SkillRecord(name="a")])
        assert manifest.duplicate_names() == ["a"]


class TestLoadSave:
    """Test reading and writing skills.json"""

    def test_load(self, corpus):
        manifest = load_manifest(corpus / "skills.json")
        assert manifest.version == "1.0.0"
        assert manifest.names() == ["arrow-resource", "arrow-typed-errors"]
        assert manifest.get("arrow-resource").path == "skills/arrow-resource"

    def test_missing(self, tmp_path):
        with pytest.raises(ManifestError, match="not found"):
            load_manifest(tmp_path / "skills.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "skills.json"
        path.write_text("{not json")
        with pytest.raises(ManifestError, match="invalid JSON"):
            load_manifest(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "skills.json"
        path.write_text("[]")
        with pytest.raises(ManifestError, match="JSON object"):
            load_manifest(path)

    def test_schema_error_names_field(self, tmp_path):
        path = tmp_path / "skills.json"
        path.write_text(json.dumps({"version": "1.0.0", "skills": [{"name": "Bad Name"}]}))
        with pytest.raises(ManifestError, match="skills.0.name"):
            load_manifest(path)

    def test_extra_keys_preserved(self, tmp_path):
        path = write_manifest(tmp_path, ["a"], name="my-skills")
        manifest = load_manifest(path)
        save_manifest(manifest, path)

        data = json.loads(path.read_text())
        assert list(data) == ["name", "version", "skills"]
        assert data["name"] == "my-skills"

    def test_dump_format(self):
        manifest = Manifest(version="1.0.0", skills=[SkillRecord(name="a", path="skills/a", description="d")])
        text = dump_manifest(manifest)
        assert text.endswith("}\n")
        assert json.loads(text)["skills"] == [
            {"name": "a", "path": "skills/a", "description": "d", "tags": []}
        ]

    def test_save_refuses_duplicates(self, tmp_path):
        manifest = Manifest(skills=[SkillRecord(name="a"), SkillRecord(name="a")])
        with pytest.raises(ManifestError, match="duplicate"):
            save_manifest(manifest, tmp_path / "skills.json")


class TestSync:
    """Test rebuilding records from skill directories"""

    def test_in_sync(self, corpus):
        manifest = load_manifest(corpus / "skills.json")
        result = sync_manifest(manifest, SkillManager(corpus).skills())
        assert not result.changed
        assert result.manifest.names() == manifest.names()

    def test_adds_new_skills_sorted(self, corpus):
        write_skill(corpus, "zeta")
        write_skill(corpus, "alpha")
        manifest = load_manifest(corpus / "skills.json")

        result = sync_manifest(manifest, SkillManager(corpus).skills())

        assert result.added == ["alpha", "zeta"]
        assert result.manifest.names() == ["arrow-resource", "arrow-typed-errors", "alpha", "zeta"]
        assert result.manifest.get("alpha").path == "skills/alpha"
        assert result.manifest.get("alpha").description == description_for("alpha")

    def test_updates_description_and_merges_tags(self, tmp_path):
        write_skill(tmp_path, "a", description="New text. Use when testing.", tags=["fresh"])
        manifest = Manifest(skills=[SkillRecord(name="a", path="old/a", description="Old", tags=["kept"])])

        result = sync_manifest(manifest, SkillManager(tmp_path).skills())

        record = result.manifest.get("a")
        assert result.updated == ["a"]
        assert record.description == "New text. Use when testing."
        assert record.path == "skills/a"
        assert record.tags == ["kept", "fresh"]

    def test_orphans_kept_unless_pruned(self, corpus):
        manifest = load_manifest(corpus / "skills.json")
        manifest = manifest.model_copy(update={"skills": [*manifest.skills, SkillRecord(name="gone")]})
        skills = SkillManager(corpus).skills()

        kept = sync_manifest(manifest, skills)
        assert kept.missing == ["gone"]
        assert "gone" in kept.manifest.names()
        assert not kept.changed

        pruned = sync_manifest(manifest, skills, prune=True)
        assert pruned.removed == ["gone"]
        assert "gone" not in pruned.manifest.names()

    def test_duplicates_collapse(self, corpus):
        manifest = load_manifest(corpus / "skills.json")
        manifest = manifest.model_copy(update={"skills": [*manifest.skills, manifest.skills[0]]})

        result = sync_manifest(manifest, SkillManager(corpus).skills())

        assert result.manifest.duplicate_names() == []
        assert result.updated == ["arrow-resource"]


    def test_invalid_names_left_out(self, corpus):
        write_skill(corpus, "Bad_Name", directory="bad-name")
        manifest = load_manifest(corpus / "skills.json")

        result = sync_manifest(manifest, SkillManager(corpus).skills())

        assert result.invalid == ["Bad_Name"]
        assert result.added == []
        assert not result.changed
        assert result.manifest.names() == ["arrow-resource", "arrow-typed-errors"]


class TestBump:
    def test_bump_version(self, corpus):
        manifest = load_manifest(corpus / "skills.json")
        assert bump_version(manifest, "minor").version == "1.1.0"
        assert manifest.version == "1.0.0"

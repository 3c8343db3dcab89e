"""Tests for creating new skills"""

import json

import pytest

from skillcheck.errors import ScaffoldError
from skillcheck.lint import CorpusValidator
from skillcheck.scaffold import create_skill, render_skill_md
from skillcheck.skills import SkillLoader

from conftest import write_manifest

DESCRIPTION = "Explains state hoisting in Compose. Use when designing stateful UI."


class TestRenderSkillMd:
    def test_front_matter_round_trips(self):
        text = render_skill_md("state-hoisting", "Explains: colons too. Use when needed.", ["compose"])
        data = SkillLoader.parse_front_matter(text).data
        assert data == {
            "name": "state-hoisting",
            "description": "Explains: colons too. Use when needed.",
            "tags": ["compose"],
        }
        assert "# State Hoisting" in text


class TestCreateSkill:
    def test_creates_and_registers(self, corpus):
        result = create_skill(corpus, "state-hoisting", DESCRIPTION, ["compose"])

        assert (result.path / "SKILL.md").is_file()
        manifest = json.loads((corpus / "skills.json").read_text())
        assert [s["name"] for s in manifest["skills"]][-1] == "state-hoisting"
        assert manifest["skills"][-1]["path"] == "skills/state-hoisting"
        assert "./skills/state-hoisting/" in (corpus / "README.md").read_text()

        assert CorpusValidator(corpus).validate().violations == []

    def test_creates_manifest_and_readme_in_empty_corpus(self, tmp_path):
        create_skill(tmp_path, "state-hoisting", DESCRIPTION)

        manifest = json.loads((tmp_path / "skills.json").read_text())
        assert manifest["version"] == "0.1.0"
        assert (tmp_path / "README.md").read_text().startswith("## Skills\n")
        assert CorpusValidator(tmp_path).validate().passed

    def test_invalid_name(self, tmp_path):
        with pytest.raises(ScaffoldError, match="Invalid skill name"):
            create_skill(tmp_path, "State_Hoisting", DESCRIPTION)

    def test_empty_description(self, tmp_path):
        with pytest.raises(ScaffoldError, match="description"):
            create_skill(tmp_path, "state-hoisting", "   ")

    def test_existing_directory(self, corpus):
        with pytest.raises(ScaffoldError, match="already exists"):
            create_skill(corpus, "arrow-resource", DESCRIPTION)

    def test_manifest_with_duplicates_leaves_nothing_behind(self, corpus):
        write_manifest(corpus, ["arrow-resource", "arrow-typed-errors", "arrow-resource"])
        before = (corpus / "skills.json").read_text()

        with pytest.raises(ScaffoldError, match="duplicate"):
            create_skill(corpus, "state-hoisting", DESCRIPTION)

        assert not (corpus / "skills" / "state-hoisting").exists()
        assert (corpus / "skills.json").read_text() == before

"""Tests for the skillcheck command line"""

import json

from typer.testing import CliRunner

from skillcheck import __version__
from skillcheck.cli import app

from conftest import write_skill

runner = CliRunner()


class TestCheck:
    def test_passes(self, corpus):
        result = runner.invoke(app, ["check", str(corpus)])
        assert result.exit_code == 0, result.output
        assert "✓ Passed" in result.output
        assert "2 skills checked" in result.output

    def test_fails_with_rule_id(self, corpus):
        write_skill(corpus, "arrow-optics")
        result = runner.invoke(app, ["check", str(corpus)])
        assert result.exit_code == 1
        assert "manifest-unregistered" in result.output
        assert "✗ Failed" in result.output

    def test_json_format(self, corpus):
        result = runner.invoke(app, ["check", str(corpus), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["passed"] is True
        assert data["skills"] == ["arrow-resource", "arrow-typed-errors"]
        assert data["violations"] == []

    def test_bad_format(self, corpus):
        result = runner.invoke(app, ["check", str(corpus), "--format", "xml"])
        assert result.exit_code != 0

    def test_strict_fails_on_warnings(self, corpus):
        write_skill(corpus, "arrow-resource", description="Teaches arrow-resource conventions.")

        assert runner.invoke(app, ["check", str(corpus)]).exit_code == 0
        result = runner.invoke(app, ["check", str(corpus), "--strict"])
        assert result.exit_code == 1
        assert "description-trigger" in result.output

    def test_single_skill(self, corpus):
        result = runner.invoke(app, ["check", str(corpus), "--skill", "arrow-resource"])
        assert result.exit_code == 0
        assert "1 skills checked" in result.output

    def test_invalid_config(self, corpus):
        (corpus / ".skillcheck.json").write_text(json.dumps({"rules": {"disabled_rules": ["nope"]}}))
        result = runner.invoke(app, ["check", str(corpus)])
        assert result.exit_code == 1
        assert "unknown rule 'nope'" in result.output


class TestBrowse:
    def test_list(self, corpus):
        result = runner.invoke(app, ["list", str(corpus)])
        assert result.exit_code == 0
        assert "arrow-resource" in result.output
        assert "arrow-typed-errors" in result.output

    def test_show_raw(self, corpus):
        result = runner.invoke(app, ["show", "arrow-resource", str(corpus), "--raw"])
        assert result.exit_code == 0
        assert "Guidance." in result.output

    def test_show_unknown(self, corpus):
        result = runner.invoke(app, ["show", "arrow-optics", str(corpus)])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_search(self, corpus):
        result = runner.invoke(app, ["search", "resource", str(corpus)])
        assert result.exit_code == 0
        assert "arrow-resource" in result.output

    def test_rules(self):
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        assert "manifest-unregistered" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestMaintain:
    def test_new(self, corpus):
        result = runner.invoke(app, [
            "new", "arrow-optics",
            "--description", "Explains optics in Arrow. Use when updating nested data.",
            "--tag", "arrow",
            "--root", str(corpus),
        ])
        assert result.exit_code == 0, result.output
        assert (corpus / "skills" / "arrow-optics" / "SKILL.md").is_file()
        assert runner.invoke(app, ["check", str(corpus)]).exit_code == 0

    def test_manifest_sync(self, corpus):
        write_skill(corpus, "arrow-optics")
        result = runner.invoke(app, ["manifest", "sync", str(corpus), "--bump", "minor"])
        assert result.exit_code == 0, result.output
        assert "+ arrow-optics" in result.output

        manifest = json.loads((corpus / "skills.json").read_text())
        assert manifest["version"] == "1.1.0"
        assert manifest["skills"][-1]["name"] == "arrow-optics"

    def test_manifest_sync_skips_invalid_names(self, corpus):
        write_skill(corpus, "Bad_Name", directory="bad-name")
        result = runner.invoke(app, ["manifest", "sync", str(corpus)])
        assert result.exit_code == 0, result.output
        assert "Bad_Name is not a valid skill name" in result.output

        manifest = json.loads((corpus / "skills.json").read_text())
        assert [s["name"] for s in manifest["skills"]] == ["arrow-resource", "arrow-typed-errors"]

    def test_manifest_bump(self, corpus):
        result = runner.invoke(app, ["manifest", "bump", "major", str(corpus)])
        assert result.exit_code == 0
        assert json.loads((corpus / "skills.json").read_text())["version"] == "2.0.0"

    def test_readme_sync(self, corpus):
        write_skill(corpus, "arrow-optics")
        assert runner.invoke(app, ["manifest", "sync", str(corpus)]).exit_code == 0

        result = runner.invoke(app, ["readme", "sync", str(corpus)])
        assert result.exit_code == 0, result.output
        assert "./skills/arrow-optics/" in (corpus / "README.md").read_text()
        assert runner.invoke(app, ["check", str(corpus)]).exit_code == 0

    def test_readme_sync_up_to_date(self, corpus):
        result = runner.invoke(app, ["readme", "sync", str(corpus)])
        assert result.exit_code == 0
        assert "already up to date" in result.output

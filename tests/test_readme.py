"""Tests for the README skill index"""

from skillcheck.manifest import SkillRecord
from skillcheck.readme import parse_index, render_index, skill_name_from_target, sync_readme

README = """# Agent Skills

Intro text.

## Skills

Pick one:

- [`arrow-resource`](./skills/arrow-resource/) - Resource safety.
- [Typed errors](skills/arrow-typed-errors) - Typed errors.
- [Website](https://example.com) - not a skill

```markdown
- [`fake`](./skills/fake/)
```

### Details

- [`nested-heading`](./skills/nested-heading/)

## Contributing

- [`outside`](./skills/outside/)
"""


class TestTargets:
    def test_variants(self):
        assert skill_name_from_target("./skills/a/") == "a"
        assert skill_name_from_target("skills/a") == "a"
        assert skill_name_from_target("./skills/a/SKILL.md") == "a"
        assert skill_name_from_target("./skills/a/#usage") == "a"

    def test_non_skill_targets(self):
        assert skill_name_from_target("https://example.com") is None
        assert skill_name_from_target("./docs/a/") is None
        assert skill_name_from_target("./skills/a/references/x.md") is None
        assert skill_name_from_target("./skills/") is None


class TestParseIndex:
    def test_entries(self):
        index = parse_index(README)
        assert index.found
        assert index.names() == ["arrow-resource", "arrow-typed-errors", "nested-heading"]
        assert index.entries[0].title == "arrow-resource"
        assert index.entries[0].line == 9
        assert index.entries[1].title == "Typed errors"

    def test_code_blocks_and_other_sections_ignored(self):
        names = parse_index(README).names()
        assert "fake" not in names
        assert "outside" not in names

    def test_unlinked_bullets(self):
        assert parse_index(README).unlinked == [11]

    def test_nested_bullets_not_unlinked(self):
        text = "## Skills\n\n- [a](./skills/a/)\n  - details\n"
        index = parse_index(text)
        assert index.names() == ["a"]
        assert index.unlinked == []

    def test_missing_section(self):
        assert not parse_index("# Title\n\n## Usage\n").found

    def test_section_name_case_insensitive(self):
        assert parse_index("## skills\n\n- [a](./skills/a/)\n").names() == ["a"]

    def test_custom_section(self):
        text = "## Catalog\n\n- [a](./skills/a/)\n"
        assert parse_index(text, section="Catalog").names() == ["a"]


class TestRender:
    def test_render(self):
        records = [SkillRecord(name="a", path="skills/a", description="Does A."), SkillRecord(name="b")]
        assert render_index(records) == [
            "- [`a`](./skills/a/) - Does A.",
            "- [`b`](./skills/b/)",
        ]


class TestSyncReadme:
    def test_replaces_only_bullets(self):
        records = [SkillRecord(name="arrow-resource", description="New.")]
        text = "# T\n\n## Skills\n\nPick one:\n\n- [`old`](./skills/old/) - Old.\n  more about old\n\n## Contributing\n\nHelp.\n"

        result = sync_readme(text, records)

        assert result == (
            "# T\n\n## Skills\n\nPick one:\n\n- [`arrow-resource`](./skills/arrow-resource/) - New.\n"
            "\n## Contributing\n\nHelp.\n"
        )

    def test_empty_section_gets_bullets(self):
        records = [SkillRecord(name="a")]
        result = sync_readme("# T\n\n## Skills\n\n## Next\n", records)
        assert result == "# T\n\n## Skills\n\n- [`a`](./skills/a/)\n\n## Next\n"

    def test_missing_section_appended(self):
        records = [SkillRecord(name="a")]
        assert sync_readme("# T\n", records) == "# T\n\n## Skills\n\n- [`a`](./skills/a/)\n"

    def test_empty_document(self):
        assert sync_readme("", [SkillRecord(name="a")]) == "## Skills\n\n- [`a`](./skills/a/)\n"

    def test_idempotent(self):
        records = [SkillRecord(name="a", description="A."), SkillRecord(name="b", description="B.")]
        once = sync_readme("# T\n\n## Skills\n\n- [`x`](./skills/x/)\n", records)
        assert sync_readme(once, records) == once

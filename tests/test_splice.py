"""Tests for splicing schema comments into file content."""

import pytest

from schema_annotate.splice.sync import annotate_file
from schema_annotate.splice.text import (
    has_changed,
    leading_block_end,
    splice,
    trailing_block_start,
)

BLOCK = "# Table: foo\n# Columns:\n#  id  | integer | PRIMARY KEY"
NEW_BLOCK = "# Table: foo\n# Columns:\n#  id  | bigint  | PRIMARY KEY"
SOURCE = "class Foo(Base):\n    __tablename__ = \"foo\""


class TestAppend:
    def test_appends_to_file_without_block(self):
        assert splice(SOURCE + "\n", BLOCK) == f"{SOURCE}\n\n{BLOCK}"

    def test_replaces_trailing_block(self):
        content = f"{SOURCE}\n\n{BLOCK}\n"
        assert splice(content, NEW_BLOCK) == f"{SOURCE}\n\n{NEW_BLOCK}"

    def test_form_feed_and_line_separator_preserved(self):
        source = 's = "page\x0cbreak"\nt = "a\u2028b"'
        content = f"{source}\n\n{BLOCK}\n"
        result = splice(content, BLOCK)
        assert result == f"{source}\n\n{BLOCK}"
        assert not has_changed(content, result)
        assert splice(content, NEW_BLOCK) == f"{source}\n\n{NEW_BLOCK}"

    def test_identical_block_is_unchanged(self):
        content = f"{SOURCE}\n\n{BLOCK}\n"
        assert not has_changed(content, splice(content, BLOCK))

    def test_non_contiguous_block_is_kept(self):
        content = "# Table: foo\n# Columns:\n#  id\n\nSELECT 1;\n"
        result = splice(content, BLOCK)
        assert result == f"# Table: foo\n# Columns:\n#  id\n\nSELECT 1;\n\n{BLOCK}"

    def test_blank_line_after_block_breaks_adjacency(self):
        content = f"{SOURCE}\n\n{BLOCK}\n\n# unrelated note\n"
        result = splice(content, NEW_BLOCK)
        assert result.startswith(f"{SOURCE}\n\n{BLOCK}\n\n# unrelated note")
        assert result.endswith(NEW_BLOCK)

    def test_trailing_blank_lines_ignored(self):
        content = f"{SOURCE}\n\n{BLOCK}\n\n\n   \n"
        assert splice(content, NEW_BLOCK) == f"{SOURCE}\n\n{NEW_BLOCK}"

    def test_only_last_block_replaced(self):
        content = f"{BLOCK}\n\nx = 1\n\n{BLOCK}\n"
        assert splice(content, NEW_BLOCK) == f"{BLOCK}\n\nx = 1\n\n{NEW_BLOCK}"

    def test_file_holding_only_a_block(self):
        assert splice(f"{BLOCK}\n", NEW_BLOCK) == NEW_BLOCK

    def test_empty_file(self):
        assert splice("", BLOCK) == BLOCK

    def test_bordered_block_replaced(self):
        bordered = "# Table: foo\n# ----------\n# Columns:\n#  id\n# ----------"
        content = f"{SOURCE}\n\n{bordered}\n"
        assert splice(content, NEW_BLOCK) == f"{SOURCE}\n\n{NEW_BLOCK}"


class TestPrepend:
    def test_prepends_to_file_without_block(self):
        assert splice(SOURCE, BLOCK, "prepend") == f"{BLOCK}\n\n{SOURCE}"

    def test_replaces_leading_block(self):
        content = f"{BLOCK}\n\n{SOURCE}\n"
        assert splice(content, NEW_BLOCK, "prepend") == f"{NEW_BLOCK}\n\n{SOURCE}"

    def test_identical_block_is_unchanged(self):
        content = f"{BLOCK}\n\n{SOURCE}\n"
        assert not has_changed(content, splice(content, BLOCK, "prepend"))

    def test_block_not_at_start_is_kept(self):
        content = f"# coding: utf-8\n{BLOCK}\n\n{SOURCE}"
        result = splice(content, NEW_BLOCK, "prepend")
        assert result == f"{NEW_BLOCK}\n\n{content}"

    def test_file_holding_only_a_block(self):
        assert splice(BLOCK, NEW_BLOCK, "prepend") == NEW_BLOCK

    def test_block_before_form_feed_replaced(self):
        content = f"{BLOCK}\n\n\x0c\n{SOURCE}\n"
        assert splice(content, NEW_BLOCK, "prepend") == f"{NEW_BLOCK}\n\n\x0c\n{SOURCE}"

    def test_unknown_position(self):
        with pytest.raises(ValueError, match="Unknown position"):
            splice(SOURCE, BLOCK, "middle")


class TestScanners:
    def test_leading_block_end(self):
        lines = ["# Table: foo", "# Columns:", "#  id", "", "x = 1"]
        assert leading_block_end(lines) == 3

    def test_leading_block_requires_table_line_first(self):
        assert leading_block_end(["# Columns:", "# Table: foo"]) == 0
        assert leading_block_end([]) == 0

    def test_trailing_block_start(self):
        lines = ["x = 1", "", "# Table: foo", "# Columns:", "#  id"]
        assert trailing_block_start(lines) == 2

    def test_trailing_block_interrupted(self):
        assert trailing_block_start(["# Table: foo", "x = 1"]) is None
        assert trailing_block_start(["x = 1", "# just a comment"]) is None


class TestAnnotateFile:
    def test_writes_block_with_trailing_newline(self, tmp_path):
        target = tmp_path / "foo.py"
        target.write_text(SOURCE + "\n")
        assert annotate_file(target, BLOCK) is True
        assert target.read_text() == f"{SOURCE}\n\n{BLOCK}\n"

    def test_second_run_is_a_no_op(self, tmp_path):
        target = tmp_path / "foo.py"
        target.write_text(SOURCE + "\n")
        annotate_file(target, BLOCK)
        first = target.read_text()
        assert annotate_file(target, BLOCK) is False
        assert target.read_text() == first

    def test_changed_block_replaces_only_the_block(self, tmp_path):
        target = tmp_path / "foo.py"
        target.write_text(f"{SOURCE}\n\n{BLOCK}\n")
        assert annotate_file(target, NEW_BLOCK) is True
        assert target.read_text() == f"{SOURCE}\n\n{NEW_BLOCK}\n"

    def test_prepend_position(self, tmp_path):
        target = tmp_path / "foo.py"
        target.write_text(SOURCE + "\n")
        assert annotate_file(target, BLOCK, position="prepend") is True
        assert target.read_text() == f"{BLOCK}\n\n{SOURCE}\n"
        assert annotate_file(target, BLOCK, position="prepend") is False

    def test_dry_run_does_not_write(self, tmp_path):
        target = tmp_path / "foo.py"
        target.write_text(SOURCE)
        assert annotate_file(target, BLOCK, dry_run=True) is True
        assert target.read_text() == SOURCE

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            annotate_file(tmp_path / "missing.py", BLOCK)

    def test_form_feed_in_source_is_not_rewritten(self, tmp_path):
        target = tmp_path / "foo.py"
        content = f's = "page\x0cbreak"\n\n{BLOCK}\n'
        target.write_text(content)
        assert annotate_file(target, BLOCK) is False
        assert target.read_text() == content

"""Tests for qmdtools.frontmatter."""

from __future__ import annotations

from pathlib import Path

import pytest

from qmdtools.frontmatter import (
    FrontMatterError,
    document_front_matter,
    export_frontmatter,
    find_default_document,
    leading_block,
    split_lines,
)


def test_leading_block_without_separator_is_empty() -> None:
    assert leading_block(["# Title", "text"]) == []


def test_leading_block_tolerates_trailing_whitespace_on_separators() -> None:
    assert leading_block(["---  ", "title: x", "--- ", "body"]) == ["title: x"]


def test_document_front_matter_requires_separator_on_first_line() -> None:
    assert document_front_matter("\n---\ntitle: x\n---\n") == []
    assert document_front_matter("---\r\ntitle: x\r\n---\r\nbody\r\n") == ["title: x"]


def test_find_default_document_picks_first_sorted(tmp_path: Path) -> None:
    (tmp_path / "b.qmd").write_text("", encoding="utf-8")
    (tmp_path / "a.qmd").write_text("", encoding="utf-8")

    assert find_default_document(tmp_path) == tmp_path / "a.qmd"


def test_export_frontmatter_writes_standalone_yaml(tmp_path: Path) -> None:
    (tmp_path / "guide.qmd").write_text(
        "---\ntitle: Guide\nauthor:\n  - name: Ana\n---\n\n# Body\n",
        encoding="utf-8",
    )

    exported = export_frontmatter(tmp_path)

    assert exported.source == tmp_path.resolve() / "guide.qmd"
    assert exported.output == tmp_path.resolve() / "metadata_qmd.yaml"
    assert exported.output.read_text(encoding="utf-8") == (
        "---\ntitle: Guide\nauthor:\n  - name: Ana\n---\n"
    )


def test_export_frontmatter_custom_output_and_explicit_document(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "chapter.qmd").write_text("---\ntitle: One\n---\n", encoding="utf-8")

    exported = export_frontmatter(tmp_path, "docs/chapter.qmd", output_name="meta.yaml")

    assert exported.lines == ("title: One",)
    assert (tmp_path / "meta.yaml").read_text(encoding="utf-8") == "---\ntitle: One\n---\n"


def test_export_frontmatter_without_document_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        export_frontmatter(tmp_path)

    with pytest.raises(FileNotFoundError):
        export_frontmatter(tmp_path, "absent.qmd")


def test_export_frontmatter_without_front_matter_raises(tmp_path: Path) -> None:
    (tmp_path / "plain.qmd").write_text("# No metadata\n", encoding="utf-8")

    with pytest.raises(FrontMatterError):
        export_frontmatter(tmp_path)

    assert not (tmp_path / "metadata_qmd.yaml").exists()


def test_export_frontmatter_validate_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / "bad.qmd").write_text("---\ntitle: [unclosed\n---\n", encoding="utf-8")

    export_frontmatter(tmp_path)
    with pytest.raises(FrontMatterError):
        export_frontmatter(tmp_path, validate=True)


def test_split_lines_only_breaks_on_newline() -> None:
    assert split_lines("a\x0cb\r\nc d\n") == ["a\x0cb", "c d"]
    assert split_lines("") == []
    assert split_lines("a\n\n") == ["a", ""]


def test_document_front_matter_unclosed_block_has_no_trailing_blank() -> None:
    assert document_front_matter("---\ntitle: x\n") == ["title: x"]

"""Front-matter extraction for Quarto documents."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Sequence

import yaml

from .logging import get_logger
from .models import FrontMatterExport

_SEPARATOR = re.compile(r"^---\s*$")

logger = get_logger("frontmatter")


class FrontMatterError(RuntimeError):
    """Raised when a document has no usable front matter."""


def split_lines(text: str) -> List[str]:
    """Split on newlines only, dropping a carriage return before each one."""
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def is_separator(line: str) -> bool:
    return bool(_SEPARATOR.match(line))


def leading_block(lines: Sequence[str]) -> List[str]:
    """Return the lines between the first two separators.

    The opening separator may appear anywhere in the document. When no
    closing separator follows, the block runs to the end of the document.
    A document without any separator has an empty block.
    """
    block: List[str] = []
    opened = False
    for line in lines:
        if is_separator(line):
            if opened:
                break
            opened = True
            continue
        if opened:
            block.append(line)
    return block


def document_front_matter(text: str) -> List[str]:
    """Return the front matter of a document that opens with a separator.

    Unlike :func:`leading_block`, the separator must be the very first line.
    """
    lines = split_lines(text)
    if not lines or not is_separator(lines[0]):
        return []
    block: List[str] = []
    for line in lines[1:]:
        if is_separator(line):
            break
        block.append(line)
    return block


def find_default_document(root: Path, pattern: str = "*.qmd") -> Path | None:
    """Return the first matching document directly under ``root``."""
    candidates = sorted(path for path in root.glob(pattern) if path.is_file())
    return candidates[0] if candidates else None


def export_frontmatter(
    root: Path,
    document: str | Path | None = None,
    *,
    output_name: str = "metadata_qmd.yaml",
    validate: bool = False,
) -> FrontMatterExport:
    """Write the front matter of ``document`` as a standalone YAML file."""
    root = Path(root).expanduser().resolve()
    if document is None:
        source = find_default_document(root)
    else:
        source = Path(document)
        if not source.is_absolute():
            source = root / source

    if source is None or not source.is_file():
        raise FileNotFoundError(f"No .qmd file specified and none found in {root}")

    text = source.read_text(encoding="utf-8", errors="replace")
    block = document_front_matter(text)
    if not block:
        raise FrontMatterError(f"No YAML front matter found in {_display(source, root)}")

    if validate:
        try:
            yaml.safe_load("\n".join(block))
        except yaml.YAMLError as exc:
            raise FrontMatterError(
                f"Invalid YAML front matter in {_display(source, root)}: {exc}"
            ) from exc

    output = root / output_name
    payload = "\n".join(["---", *block, "---"]) + "\n"
    output.write_text(payload, encoding="utf-8")
    logger.debug("Exported %d front-matter lines from %s", len(block), source)
    return FrontMatterExport(source=source, output=output, lines=tuple(block))


def _display(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


__all__ = [
    "FrontMatterError",
    "document_front_matter",
    "export_frontmatter",
    "find_default_document",
    "is_separator",
    "leading_block",
    "split_lines",
]

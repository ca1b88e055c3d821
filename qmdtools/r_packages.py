"""Heuristic detection of the R packages a set of Quarto documents needs.

Nothing here runs R or parses R/YAML. Every check is a line-oriented
pattern match, so results are best-effort by construction.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Set, Tuple

from .config import RPackagesConfig
from .frontmatter import leading_block, split_lines
from .git.discovery import DocumentDiscovery
from .logging import get_logger
from .models import (
    STATE_ALL_DISABLED,
    STATE_EMPTY,
    STATE_NO_USAGE,
    STATE_PACKAGES,
    DetectionResult,
)

logger = get_logger("r_packages")

LOAD_CALLS: Tuple[str, ...] = ("library", "require", "requireNamespace")

_R_FENCE = re.compile(r"```\{r", re.IGNORECASE)
_R_ENGINE = re.compile(r"engine:\s*r", re.IGNORECASE)
_KNITR_CALL = "knitr::"

_EVAL_FALSE = re.compile(r"^\s*eval:\s*(false|no|0)\s*$", re.IGNORECASE)
_EXECUTE_HEADER = re.compile(r"^execute:\s*$")
_BLOCK_END = re.compile(r"^[^\s-]")
_OPTS_CHUNK_EVAL_FALSE = re.compile(
    r"knitr::opts_chunk\$set\([^)]*eval\s*=\s*(false|no|0|f)\b",
    re.IGNORECASE,
)

_LOAD_CALL_PATTERNS = tuple(
    re.compile(rf"{re.escape(name)}\s*\(\s*[^)]+") for name in LOAD_CALLS
)
_NAMESPACE_REF = re.compile(r"([A-Za-z0-9_.]+)::[A-Za-z0-9_.]+")
_TOKEN_END = re.compile(r"[^A-Za-z0-9_.]")


# ----------------------------------------------------------------------
# Per-document predicates


def uses_r(text: str) -> bool:
    """Return True when the document shows any R engine marker."""
    for line in split_lines(text):
        if _R_FENCE.search(line) or _R_ENGINE.search(line) or _KNITR_CALL in line:
            return True
    return False


def execute_block(lines: Sequence[str]) -> List[str]:
    """Return the lines belonging to a column-zero ``execute:`` block.

    The block starts at the header line and ends before the next line that
    begins with a character other than whitespace or a dash.
    """
    inside = False
    block: List[str] = []
    for line in lines:
        if inside and _BLOCK_END.match(line):
            inside = False
        if _EXECUTE_HEADER.match(line):
            inside = True
        if inside:
            block.append(line)
    return block


def evaluation_disabled(text: str) -> bool:
    """Return True when the document turns off code evaluation globally."""
    lines = split_lines(text)
    front_matter = leading_block(lines)

    if any(_EVAL_FALSE.match(line) for line in front_matter):
        return True
    if any(_EVAL_FALSE.match(line) for line in execute_block(front_matter)):
        return True
    return any(_OPTS_CHUNK_EVAL_FALSE.search(line) for line in lines)


def package_references(text: str) -> Set[str]:
    """Collect package names from load calls and ``pkg::name`` references."""
    names: Set[str] = set()
    for line in split_lines(text):
        for pattern in _LOAD_CALL_PATTERNS:
            for match in pattern.finditer(line):
                token = _first_argument(match.group(0))
                if token:
                    names.add(token)
        for match in _NAMESPACE_REF.finditer(line):
            names.add(match.group(1))
    return names


def _first_argument(call_text: str) -> str:
    argument = call_text.rsplit("(", 1)[-1].lstrip()
    if argument[:1] in {"'", '"'}:
        argument = argument[1:]
    return _TOKEN_END.split(argument, 1)[0]


def filter_packages(names: Iterable[str], excluded: Iterable[str]) -> Set[str]:
    """Drop excluded names and single-character noise."""
    excluded_set = set(excluded)
    return {name for name in names if len(name) >= 2 and name not in excluded_set}


# ----------------------------------------------------------------------
# Document-set predicates


def any_uses_r(texts: Iterable[str]) -> bool:
    for text in texts:
        if uses_r(text):
            return True
    return False


def all_evaluation_disabled(texts: Iterable[str]) -> bool:
    for text in texts:
        if not evaluation_disabled(text):
            return False
    return True


class PackageRequirementDetector:
    """Writes or removes the R package manifest for a documentation root."""

    def __init__(
        self,
        config: RPackagesConfig | None = None,
        discovery: DocumentDiscovery | None = None,
    ) -> None:
        self._config = config or RPackagesConfig()
        self._discovery = discovery or DocumentDiscovery()

    def run(self, root: str | Path, documents: Sequence[str] | None = None) -> DetectionResult:
        """Detect required packages and update the manifest under ``root``."""
        root_path = Path(root).expanduser().resolve()
        output = root_path / self._config.output

        paths = self._collect(root_path, documents)
        if not paths:
            logger.debug("No documents to scan; removing %s", output.name)
            return self._clear(output, STATE_EMPTY)

        texts = list(self._read(paths))
        if not any_uses_r(texts):
            logger.debug("No R engine markers in %d document(s)", len(paths))
            return self._clear(output, STATE_NO_USAGE)

        if all_evaluation_disabled(texts):
            logger.debug("Evaluation disabled in every document; writing weave-only set")
            packages = sorted(set(self._config.weave_only))
            return self._write(output, packages, STATE_ALL_DISABLED)

        references: Set[str] = set()
        for text in texts:
            references.update(package_references(text))
        packages = filter_packages(references, self._config.exclude)
        packages.update(self._config.always_required)
        logger.debug("Detected %d package reference(s)", len(references))
        return self._write(output, sorted(packages), STATE_PACKAGES)

    # ------------------------------------------------------------------
    # Internals

    def _collect(self, root: Path, documents: Sequence[str] | None) -> List[Path]:
        if documents:
            candidates: Sequence[str] = documents
        else:
            candidates = self._discovery.tracked(root, self._config.document_glob)
        resolved: List[Path] = []
        for candidate in candidates:
            path = Path(candidate).expanduser()
            resolved.append(path if path.is_absolute() else root / path)
        return resolved

    @staticmethod
    def _read(paths: Sequence[Path]) -> Iterator[str]:
        for path in paths:
            if not path.is_file():
                logger.debug("Skipping missing document %s", path)
                continue
            try:
                yield path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                logger.debug("Skipping unreadable document %s: %s", path, exc)

    @staticmethod
    def _clear(output: Path, state: str) -> DetectionResult:
        output.unlink(missing_ok=True)
        return DetectionResult(state=state, packages=(), output=output)

    @staticmethod
    def _write(output: Path, packages: Sequence[str], state: str) -> DetectionResult:
        output.write_text("".join(f"{name}\n" for name in packages), encoding="utf-8")
        return DetectionResult(state=state, packages=tuple(packages), output=output)


__all__ = [
    "LOAD_CALLS",
    "PackageRequirementDetector",
    "all_evaluation_disabled",
    "any_uses_r",
    "evaluation_disabled",
    "execute_block",
    "filter_packages",
    "package_references",
    "uses_r",
]

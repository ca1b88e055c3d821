"""Git status scoped to individual workspace directories.

A workspace can hold several nested repositories. A plain ``git status`` at
the top would miss or mix their changes, so each matching directory is
reported against the repository that actually contains it.
"""

from __future__ import annotations

import shutil
import subprocess
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterable, List, Sequence

from ..logging import get_logger
from ..models import DirectoryStatus

logger = get_logger("git.status")


class GitNotFoundError(RuntimeError):
    """Raised when the git executable is not on PATH."""


class StatusReporter:
    """Collects porcelain status lines for each matching top-level directory."""

    def __init__(
        self,
        runner: Callable[..., str] | None = None,
        which: Callable[[str], str | None] | None = None,
    ) -> None:
        self._runner = runner or self._default_runner
        self._which = which or shutil.which

    def collect(self, root: Path, pattern: str = "IPBES_*") -> List[DirectoryStatus]:
        if self._which("git") is None:
            raise GitNotFoundError("git not found in PATH")

        root = Path(root)
        results: List[DirectoryStatus] = []
        for directory in _matching_directories(root, pattern):
            results.append(self._status_for(directory))
        return results

    # ------------------------------------------------------------------
    # Internals

    def _status_for(self, directory: Path) -> DirectoryStatus:
        name = directory.name
        try:
            toplevel = self._runner(
                ["git", "-C", str(directory), "rev-parse", "--show-toplevel"],
                cwd=directory,
            ).strip()
        except subprocess.CalledProcessError:
            logger.debug("%s is not inside a git repository", directory)
            return DirectoryStatus(name=name, repo=None)
        if not toplevel:
            return DirectoryStatus(name=name, repo=None)

        repo_root = Path(toplevel).resolve()
        dir_abs = directory.resolve()
        try:
            rel_path = dir_abs.relative_to(repo_root).as_posix()
        except ValueError:
            rel_path = dir_abs.as_posix()

        try:
            output = self._runner(
                [
                    "git",
                    "-C",
                    str(repo_root),
                    "status",
                    "--porcelain=1",
                    "--untracked-files=all",
                    "--",
                    rel_path,
                ],
                cwd=repo_root,
            )
        except subprocess.CalledProcessError as exc:
            logger.debug("git status failed for %s: %s", directory, exc)
            output = ""

        changes = [line for line in output.splitlines() if line.strip()]
        return DirectoryStatus(name=name, repo=repo_root.name, changes=changes)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> str:
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


def _matching_directories(root: Path, pattern: str) -> List[Path]:
    return sorted(
        entry
        for entry in root.iterdir()
        if entry.is_dir() and not entry.is_symlink() and fnmatchcase(entry.name, pattern)
    )


def render_status(statuses: Sequence[DirectoryStatus], pattern: str) -> str:
    """Render status results in the ``--- name (repo: ...)`` report layout."""
    lines: List[str] = [f"Scanning status for {pattern} directories..."]
    if not statuses:
        lines.append(f"No {pattern} directories found at this level.")
        return "\n".join(lines) + "\n"

    for status in statuses:
        if status.skipped:
            lines.append(f"--- {status.name}: SKIP (not in a git repo)")
            continue
        lines.append(f"--- {status.name} (repo: {status.repo})")
        if status.changes:
            lines.extend(f"  {change}" for change in status.changes)
        else:
            lines.append("No changes")
        lines.append("")
    return "\n".join(lines) + "\n"

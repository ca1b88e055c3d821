"""Discovery of tracked documents through git."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, List

from ..logging import get_logger

logger = get_logger("git.discovery")


class DocumentDiscovery:
    """Lists tracked files matching a pathspec glob."""

    def __init__(self, runner: Callable[..., str] | None = None) -> None:
        self._runner = runner or self._default_runner

    def tracked(self, root: Path, pattern: str = "*.qmd") -> List[str]:
        """Return tracked paths relative to ``root``; empty when git is unavailable."""
        try:
            output = self._runner(["git", "ls-files", pattern], cwd=root)
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.debug("git ls-files failed in %s: %s", root, exc)
            return []
        return [line.strip() for line in output.splitlines() if line.strip()]

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

"""Data models shared across qmdtools components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

STATE_EMPTY = "empty"
STATE_NO_USAGE = "no-usage"
STATE_ALL_DISABLED = "all-disabled"
STATE_PACKAGES = "packages"


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of one R package detection run."""

    state: str
    packages: Tuple[str, ...]
    output: Path

    @property
    def written(self) -> bool:
        return self.state in (STATE_ALL_DISABLED, STATE_PACKAGES)


@dataclass(frozen=True)
class FrontMatterExport:
    """A front-matter block copied out of a document."""

    source: Path
    output: Path
    lines: Tuple[str, ...]


@dataclass
class DirectoryStatus:
    """Git changes scoped to one workspace directory."""

    name: str
    repo: Optional[str]
    changes: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.repo is None

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class FileKind(Enum):
    SOLUTION = "solution"
    PROJECT = "project"
    DELETE = "delete"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ScanResult:
    root: Path
    solutions: list[Path] = field(default_factory=list)
    projects: list[Path] = field(default_factory=list)
    deletions: list[Path] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.solutions) + len(self.projects) + len(self.deletions)

    @property
    def is_empty(self) -> bool:
        return self.total == 0


@dataclass
class RunSummary:
    solutions: int = 0
    projects: int = 0
    deleted: int = 0
    removed_lines: int = 0  # solution lines dropped
    removed_nodes: int = 0  # project elements + attributes dropped

from __future__ import annotations

from pathlib import Path


class UnbindError(Exception):
    """Base class for errors raised by unbindvs."""


class ArgumentError(UnbindError):
    """The directory argument is missing or unusable."""


class NotFoundError(ArgumentError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Path does not exist or is not a directory: {path}")
        self.path = path


class MalformedDocumentError(UnbindError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Malformed project file {path}: {reason}")
        self.path = path
        self.reason = reason

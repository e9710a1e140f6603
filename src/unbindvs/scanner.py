from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from unbindvs.classify import classify
from unbindvs.errors import NotFoundError
from unbindvs.models import FileKind, ScanResult

logger = logging.getLogger(__name__)


def scan(root: Path) -> ScanResult:
    """Walk ``root`` and bucket every file by what has to happen to it."""
    root = root.resolve()
    result = ScanResult(root=root)
    buckets = {
        FileKind.SOLUTION: result.solutions,
        FileKind.PROJECT: result.projects,
        FileKind.DELETE: result.deletions,
    }
    for path in collect_files(root):
        kind = classify(path.name)
        if kind is FileKind.IGNORED:
            continue
        logger.debug("%s: %s", kind.value, path)
        buckets[kind].append(path)
    return result


def collect_files(root: Path) -> list[Path]:
    if not root.exists() or not root.is_dir():
        raise NotFoundError(root)
    results: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
        for name in filenames:
            results.append(Path(dirpath) / name)
    results.sort(key=lambda p: p.as_posix())
    return results


def _raise(error: OSError) -> None:
    raise error


def clear_read_only(path: Path) -> None:
    mode = path.stat().st_mode
    if not mode & stat.S_IWRITE:
        logger.debug("Clearing read-only flag on %s", path)
        path.chmod(mode | stat.S_IWRITE)


def delete_file(path: Path) -> None:
    clear_read_only(path)
    path.unlink()
    logger.debug("Deleted %s", path)

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterable
from pathlib import Path

from unbindvs import __version__
from unbindvs.errors import MalformedDocumentError, NotFoundError
from unbindvs.models import RunSummary, ScanResult
from unbindvs.project import modify_project
from unbindvs.scanner import delete_file, scan
from unbindvs.solution import modify_solution

logger = logging.getLogger(__name__)


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="unbindvs",
        description=(
            "Remove source-control bindings from Visual Studio solutions and "
            "projects under a directory. Files are edited in place without backup."
        ),
    )
    parser.add_argument("directory", nargs="?", help="Root directory to unbind")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing or deleting anything",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.directory or not args.directory.strip():
        print("Error: No directory specified!")
        return 1

    root = Path(args.directory.strip()).resolve()
    try:
        result = scan(root)
    except NotFoundError:
        print("Error: Directory does not exist!")
        return 1
    except OSError as exc:
        raise SystemExit(f"Error: {exc}") from exc

    if result.is_empty:
        print("No files to modify or delete.")
        return 0
    logger.debug(
        "Found %d solution(s), %d project(s), %d binding file(s) under %s",
        len(result.solutions),
        len(result.projects),
        len(result.deletions),
        result.root,
    )

    try:
        summary = unbind(result, dry_run=args.dry_run)
    except (MalformedDocumentError, OSError, UnicodeError) as exc:
        raise SystemExit(f"Error: {exc}") from exc

    logger.info(
        "Done: %d solution(s) (%d line(s) removed), %d project(s) "
        "(%d Scc node(s) removed), %d file(s) deleted",
        summary.solutions,
        summary.removed_lines,
        summary.projects,
        summary.removed_nodes,
        summary.deleted,
    )
    return 0


def unbind(result: ScanResult, dry_run: bool = False) -> RunSummary:
    """Edit solutions, then projects, then delete binding files."""
    summary = RunSummary()
    for path in result.solutions:
        summary.removed_lines += modify_solution(path, dry_run=dry_run)
        summary.solutions += 1
    for path in result.projects:
        summary.removed_nodes += modify_project(path, dry_run=dry_run)
        summary.projects += 1
    for path in result.deletions:
        if dry_run:
            print(f"Would delete: {path}")
            continue
        delete_file(path)
        summary.deleted += 1
    return summary


if __name__ == "__main__":
    raise SystemExit(main())

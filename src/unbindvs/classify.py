"""Filename predicates deciding what happens to each scanned file."""

from __future__ import annotations

from unbindvs.models import FileKind

SOLUTION_SUFFIX = ".sln"
PROJECT_SUFFIX = "proj"
SETUP_PROJECT_SUFFIX = ".vdproj"
DELETE_SUFFIXES = (".vssscc", ".vspscc")


def is_solution_file(name: str) -> bool:
    return name.lower().endswith(SOLUTION_SUFFIX)


def is_project_file(name: str) -> bool:
    lowered = name.lower()
    # Setup projects are not MSBuild XML.
    if lowered.endswith(SETUP_PROJECT_SUFFIX):
        return False
    return "." in lowered and lowered.endswith(PROJECT_SUFFIX)


def is_delete_candidate(name: str) -> bool:
    return name.lower().endswith(DELETE_SUFFIXES)


def classify(name: str) -> FileKind:
    if is_solution_file(name):
        return FileKind.SOLUTION
    if is_project_file(name):
        return FileKind.PROJECT
    if is_delete_candidate(name):
        return FileKind.DELETE
    return FileKind.IGNORED

"""Remove source-control sections from ``.sln`` files.

Solutions are treated as plain lines. A bound section runs from a
``GlobalSection(...)`` header naming a source-control provider up to and
including its ``EndGlobalSection``. Stray ``Scc*`` lines outside such a
section are dropped as well. Every other line is written back untouched.
"""

from __future__ import annotations

import codecs
import io
import logging
import re
from collections.abc import Iterable
from pathlib import Path
from urllib.parse import quote

from unbindvs.scanner import clear_read_only

logger = logging.getLogger(__name__)

KNOWN_SECTION_PREFIXES = (
    "GlobalSection(SourceCodeControl)",
    "GlobalSection(TeamFoundationVersionControl)",
)
END_SECTION_PREFIX = "EndGlobalSection"
SCC_PREFIX = "Scc"

_version_control_re = re.compile(r"GlobalSection\(.*Version.*Control", re.IGNORECASE)

# UTF-32 marks first: BOM_UTF32_LE begins with BOM_UTF16_LE.
_BOMS = (
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def starts_with_known_section(text: str) -> bool:
    return text.startswith(KNOWN_SECTION_PREFIXES)


def matches_version_control_section(text: str) -> bool:
    return _version_control_re.search(text) is not None


SECTION_START_CHECKS = (starts_with_known_section, matches_version_control_section)


def line_starts_scc_section(text: str) -> bool:
    return any(check(text) for check in SECTION_START_CHECKS)


def _encoded(text: str) -> str:
    # Percent-encode everything but the RFC 3986 unreserved set.
    return quote(text, safe="", errors="surrogateescape")


def strip_solution_lines(lines: Iterable[str]) -> list[str]:
    """Return ``lines`` without bound sections and stray ``Scc`` lines.

    Lines may carry their line endings; they are preserved on kept lines.
    A section left open at the end of input swallows the remaining lines.
    """
    output: list[str] = []
    in_section = False
    for line in lines:
        trimmed = line.strip()
        encoded = _encoded(trimmed)
        if line_starts_scc_section(trimmed):
            in_section = True
        elif in_section:
            if encoded.startswith(END_SECTION_PREFIX):
                in_section = False
        elif not encoded.startswith(SCC_PREFIX):
            output.append(line)
    return output


def _detect_encoding(raw: bytes) -> tuple[bytes, str]:
    """Return the byte-order mark of ``raw`` and the codec for the rest."""
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return bom, encoding
    return b"", "utf-8"


def modify_solution(path: Path, dry_run: bool = False) -> int:
    """Strip ``path`` in place and return the number of removed lines."""
    print(f"Modifying solution: {path}")
    raw = path.read_bytes()
    bom, encoding = _detect_encoding(raw)
    # Undecodable bytes only round-trip through UTF-8.
    errors = "surrogateescape" if encoding == "utf-8" else "strict"
    text = raw[len(bom):].decode(encoding, errors=errors)
    lines = io.StringIO(text, newline="").readlines()
    kept = strip_solution_lines(lines)
    removed = len(lines) - len(kept)
    logger.debug("%s: removing %d of %d lines (%s)", path, removed, len(lines), encoding)
    if dry_run:
        return removed
    clear_read_only(path)
    path.write_bytes(bom + "".join(kept).encode(encoding, errors=errors))
    return removed

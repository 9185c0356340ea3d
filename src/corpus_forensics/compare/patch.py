"""Structural parse of ``git diff`` unified-patch text.

Parsing never raises. Malformed input degrades to placeholder paths or
hunks with unknown positions; every input line ends up in some record.
"""

from __future__ import annotations

import re
from typing import Optional

from .models import LineKind, PatchFile, PatchHunk, PatchLine

FILE_MARKER = "diff --git "
HUNK_MARKER = "@@"
UNKNOWN_PATH = "unknown"

_FILE_RE = re.compile(r"^diff --git a/(.+?) b/(.+)$")
_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


def classify_line(line: str) -> LineKind:
    """Classify a non-marker line by its leading character."""
    if line.startswith("+") and not line.startswith("+++"):
        return LineKind.ADD
    if line.startswith("-") and not line.startswith("---"):
        return LineKind.DEL
    if line.startswith(" "):
        return LineKind.CONTEXT
    return LineKind.META


def parse_file_marker(line: str) -> tuple[str, str]:
    """Old/new paths from a ``diff --git`` line, placeholders if malformed."""
    match = _FILE_RE.match(line)
    if match is None:
        return UNKNOWN_PATH, UNKNOWN_PATH
    return match.group(1), match.group(2)


def parse_hunk_header(header: str) -> PatchHunk:
    """Build an empty hunk from its ``@@ -a,b +c,d @@`` header."""
    match = _HUNK_RE.match(header)
    if match is None:
        return PatchHunk(header=header)
    return PatchHunk(
        header=header,
        old_start=int(match.group(1)),
        old_length=_opt_int(match.group(2)),
        new_start=int(match.group(3)),
        new_length=_opt_int(match.group(4)),
    )


def parse_patch(text: str) -> list[PatchFile]:
    """Parse patch text into files, hunks and classified lines.

    Lines before the first file marker are kept in a placeholder file so
    nothing is lost.
    """
    if not text:
        return []

    files: list[PatchFile] = []
    current_file: Optional[PatchFile] = None
    current_hunk: Optional[PatchHunk] = None

    for line in text.split("\n"):
        if line.startswith(FILE_MARKER):
            path_a, path_b = parse_file_marker(line)
            current_file = PatchFile(
                path_a=path_a,
                path_b=path_b,
                header_lines=[PatchLine(LineKind.META, line)],
            )
            files.append(current_file)
            current_hunk = None
            continue

        if current_file is None:
            current_file = PatchFile(path_a=UNKNOWN_PATH, path_b=UNKNOWN_PATH)
            files.append(current_file)

        if line.startswith(HUNK_MARKER):
            current_hunk = parse_hunk_header(line)
            current_file.hunks.append(current_hunk)
            continue

        patch_line = PatchLine(classify_line(line), line)
        if current_hunk is not None:
            current_hunk.lines.append(patch_line)
        else:
            current_file.header_lines.append(patch_line)

    return files


def _opt_int(value: Optional[str]) -> Optional[int]:
    return int(value) if value is not None else None

"""Unified diff parser — text in, ParsedDiff out.

The parser is total: it never raises for any input string. Lines that are
not part of a recognised construct are either kept as context (inside a
hunk) or dropped (outside one).

Hunk line counts from the ``@@`` header are tracked so that a content line
starting with ``+++`` or ``---`` is not mistaken for a file header, and a
blank context line whose leading space was stripped is still counted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from diffskills.diff.languages import detect_language
from diffskills.diff.models import (
    DiffFile,
    DiffHunk,
    DiffLine,
    FileStatus,
    LineType,
    ParsedDiff,
)

# --- Regex patterns for diff parsing ---

_HUNK_HEADER_RE = re.compile(
    r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@ ?(.*)$"
)

_DIFF_HEADER = "diff --git"
_NEW_FILE = "new file mode"
_DELETED_FILE = "deleted file mode"
_RENAME_FROM = "rename from "
_COPY_FROM = "copy from "
_STRUCTURAL_PREFIXES = ("index ", "---", "+++")


def _extract_path(header: str) -> Optional[str]:
    """Return the ``b/`` side path of a ``diff --git`` header."""
    if header.endswith('"'):
        # quoted form: diff --git "a/with space" "b/with space"
        idx = header.rfind(' "b/')
        if idx != -1:
            return header[idx + 4:-1] or None
    idx = header.rfind(" b/")
    if idx != -1:
        return header[idx + 3:] or None
    idx = header.rfind("b/")
    if idx != -1:
        return header[idx + 2:] or None
    return None


@dataclass
class _HunkBuilder:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    section: Optional[str]
    lines: List[DiffLine] = field(default_factory=list)
    old_remaining: int = 0
    new_remaining: int = 0

    def __post_init__(self) -> None:
        self.old_remaining = self.old_count
        self.new_remaining = self.new_count

    @property
    def expects_more(self) -> bool:
        return self.old_remaining > 0 or self.new_remaining > 0

    def add(self, line: DiffLine) -> None:
        self.lines.append(line)
        if line.line_type != LineType.ADDITION:
            self.old_remaining -= 1
        if line.line_type != LineType.DELETION:
            self.new_remaining -= 1

    def build(self) -> DiffHunk:
        return DiffHunk(
            old_start=self.old_start,
            old_count=self.old_count,
            new_start=self.new_start,
            new_count=self.new_count,
            lines=tuple(self.lines),
            section=self.section or None,
        )


@dataclass
class _FileBuilder:
    path: str
    status: FileStatus = FileStatus.MODIFIED
    old_path: Optional[str] = None
    hunks: List[DiffHunk] = field(default_factory=list)

    def build(self) -> DiffFile:
        return DiffFile(
            path=self.path,
            status=self.status,
            hunks=tuple(self.hunks),
            language=detect_language(self.path),
            old_path=self.old_path,
        )


def _parse_hunk_header(line: str) -> Optional[_HunkBuilder]:
    """Parse ``@@ -a[,b] +c[,d] @@`` — omitted counts default to 1."""
    m = _HUNK_HEADER_RE.match(line)
    if m is None:
        return None
    old_count = int(m.group(2)) if m.group(2) is not None else 1
    new_count = int(m.group(4)) if m.group(4) is not None else 1
    return _HunkBuilder(
        old_start=int(m.group(1)),
        old_count=old_count,
        new_start=int(m.group(3)),
        new_count=new_count,
        section=m.group(5),
    )


def _classify(line: str, *, in_range: bool) -> Optional[DiffLine]:
    """Turn one hunk body line into a DiffLine, or None to discard it."""
    if line.startswith("+"):
        return DiffLine(LineType.ADDITION, line[1:])
    if line.startswith("-"):
        return DiffLine(LineType.DELETION, line[1:])
    if line.startswith(" "):
        return DiffLine(LineType.CONTEXT, line[1:])
    if line.startswith("\\"):
        # "\ No newline at end of file"
        return None
    if not line:
        # a blank context line whose leading space was stripped by an editor
        # or transport; it still occupies a line in both files
        return DiffLine(LineType.CONTEXT, "") if in_range else None
    # Malformed hunk: keep the text as context
    return DiffLine(LineType.CONTEXT, line)


class DiffParser:
    """Parse unified diff text into a :class:`ParsedDiff`.

    Usage::

        diff = DiffParser(diff_text).parse()
        for f in diff.files:
            ...
    """

    def __init__(self, diff_text: str) -> None:
        text = diff_text.lstrip("\ufeff")
        self._lines = [line.rstrip("\r") for line in text.split("\n")]
        if self._lines and not self._lines[-1]:
            # text ending in a newline leaves one empty trailing element
            self._lines.pop()

    def parse(self) -> ParsedDiff:
        files: Dict[str, _FileBuilder] = {}
        current_file: Optional[_FileBuilder] = None
        current_hunk: Optional[_HunkBuilder] = None

        def flush_hunk() -> None:
            nonlocal current_hunk
            if current_hunk is not None and current_file is not None:
                current_file.hunks.append(current_hunk.build())
            current_hunk = None

        for line in self._lines:
            # --- diff --git header → new file context ---
            if line.startswith(_DIFF_HEADER):
                flush_hunk()
                path = _extract_path(line)
                if path is None:
                    current_file = None
                    continue
                # A path seen twice keeps one entry; hunks are appended.
                current_file = files.setdefault(path, _FileBuilder(path=path))
                continue

            # --- Hunk header ---
            if line.startswith("@@"):
                flush_hunk()
                if current_file is not None:
                    current_hunk = _parse_hunk_header(line)
                continue

            # --- Body lines the hunk header still accounts for ---
            if current_hunk is not None and current_hunk.expects_more:
                diff_line = _classify(line, in_range=True)
                if diff_line is not None:
                    current_hunk.add(diff_line)
                continue

            if current_file is None:
                continue

            # --- Extended headers ---
            if line.startswith(_NEW_FILE):
                current_file.status = FileStatus.ADDED
                continue
            if line.startswith(_DELETED_FILE):
                current_file.status = FileStatus.DELETED
                continue
            if line.startswith(_RENAME_FROM):
                current_file.status = FileStatus.RENAMED
                current_file.old_path = line[len(_RENAME_FROM):]
                continue
            if line.startswith(_COPY_FROM):
                current_file.status = FileStatus.COPIED
                current_file.old_path = line[len(_COPY_FROM):]
                continue
            if line.startswith(_STRUCTURAL_PREFIXES):
                continue

            # --- Lines past the declared hunk size ---
            if current_hunk is not None:
                diff_line = _classify(line, in_range=False)
                if diff_line is not None:
                    current_hunk.add(diff_line)

        flush_hunk()
        return ParsedDiff(files=tuple(b.build() for b in files.values()))


def parse_diff(diff_text: str) -> ParsedDiff:
    """Parse *diff_text* into a ParsedDiff. Never raises."""
    return DiffParser(diff_text).parse()

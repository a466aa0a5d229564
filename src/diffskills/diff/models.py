"""Data models for a parsed unified diff."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple


class LineType(str, Enum):
    ADDITION = "addition"
    DELETION = "deletion"
    CONTEXT = "context"


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"


@dataclass(frozen=True, slots=True)
class DiffLine:
    """A single line inside a hunk, with its +/-/space marker stripped."""

    line_type: LineType
    content: str


@dataclass(frozen=True)
class DiffHunk:
    """One ``@@`` block of a file diff."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[DiffLine, ...] = ()
    section: Optional[str] = None  # text after the closing @@

    @property
    def additions(self) -> int:
        return sum(1 for line in self.lines if line.line_type == LineType.ADDITION)

    @property
    def deletions(self) -> int:
        return sum(1 for line in self.lines if line.line_type == LineType.DELETION)

    def numbered_lines(self) -> Iterator[Tuple[int, DiffLine]]:
        """Yield ``(new_line_no, line)`` for every line present in the new file.

        The counter starts at ``new_start`` and advances after each context or
        addition line. Deletions are not yielded and do not advance it.
        """
        line_no = self.new_start
        for line in self.lines:
            if line.line_type == LineType.DELETION:
                continue
            yield line_no, line
            line_no += 1


@dataclass(frozen=True)
class DiffFile:
    """One file touched by the diff."""

    path: str
    status: FileStatus = FileStatus.MODIFIED
    hunks: Tuple[DiffHunk, ...] = ()
    language: Optional[str] = None
    old_path: Optional[str] = None  # set on renames and copies

    @property
    def additions(self) -> int:
        return sum(h.additions for h in self.hunks)

    @property
    def deletions(self) -> int:
        return sum(h.deletions for h in self.hunks)

    @property
    def filename(self) -> str:
        return posixpath.basename(self.path)

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)

    @property
    def extension(self) -> str:
        """Lowercase extension without the dot, or ``""``."""
        _, ext = posixpath.splitext(self.filename)
        return ext[1:].lower()


@dataclass(frozen=True)
class ParsedDiff:
    """All files of a unified diff, in source order."""

    files: Tuple[DiffFile, ...] = field(default_factory=tuple)

    @property
    def total_additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    @property
    def total_changes(self) -> int:
        return self.total_additions + self.total_deletions

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [f.path for f in self.files]

    def get(self, path: str) -> Optional[DiffFile]:
        for f in self.files:
            if f.path == path:
                return f
        return None

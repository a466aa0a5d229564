"""Diff layer — models, parser, language detection."""

from diffskills.diff.languages import detect_language
from diffskills.diff.models import (
    DiffFile,
    DiffHunk,
    DiffLine,
    FileStatus,
    LineType,
    ParsedDiff,
)
from diffskills.diff.parser import DiffParser, parse_diff

__all__ = [
    "DiffFile",
    "DiffHunk",
    "DiffLine",
    "DiffParser",
    "FileStatus",
    "LineType",
    "ParsedDiff",
    "detect_language",
    "parse_diff",
]

"""File extension → language name lookup."""

from __future__ import annotations

import posixpath
from typing import Optional

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    "swift": "Swift",
    "ts": "TypeScript",
    "tsx": "TypeScript",
    "js": "JavaScript",
    "jsx": "JavaScript",
    "py": "Python",
    "rb": "Ruby",
    "go": "Go",
    "rs": "Rust",
    "java": "Java",
    "kt": "Kotlin",
    "kts": "Kotlin",
    "scala": "Scala",
    "c": "C",
    "h": "C",
    "cpp": "C++",
    "cc": "C++",
    "hpp": "C++",
    "cs": "C#",
    "m": "Objective-C",
    "mm": "Objective-C++",
    "php": "PHP",
    "html": "HTML",
    "css": "CSS",
    "scss": "SCSS",
    "sass": "SASS",
    "less": "LESS",
    "json": "JSON",
    "yaml": "YAML",
    "yml": "YAML",
    "xml": "XML",
    "md": "Markdown",
    "sql": "SQL",
    "sh": "Shell",
    "bash": "Bash",
    "zsh": "Zsh",
    "dockerfile": "Dockerfile",
    "tf": "Terraform",
    "vue": "Vue",
    "svelte": "Svelte",
}

# Files identified by their whole basename rather than an extension
LANGUAGE_BY_FILENAME: dict[str, str] = {
    "dockerfile": "Dockerfile",
    "makefile": "Makefile",
}


def detect_language(path: str) -> Optional[str]:
    """Return the language for *path*, or None when the extension is unknown."""
    basename = posixpath.basename(path).lower()
    _, ext = posixpath.splitext(basename)
    if ext:
        return LANGUAGE_BY_EXTENSION.get(ext[1:])
    return LANGUAGE_BY_FILENAME.get(basename)

"""Shared test fixtures — sample diffs and temporary skill directories."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest


@pytest.fixture
def sample_diff_simple() -> str:
    """One modified file with context lines and a single addition."""
    return textwrap.dedent("""\
        diff --git a/test.swift b/test.swift
        index 1234567..abcdefg 100644
        --- a/test.swift
        +++ b/test.swift
        @@ -1,3 +1,4 @@
         import Foundation

        +// New comment
         let x = 1
    """)


@pytest.fixture
def sample_diff_multi_file() -> str:
    """A modified file followed by a new file."""
    return textwrap.dedent("""\
        diff --git a/file1.swift b/file1.swift
        --- a/file1.swift
        +++ b/file1.swift
        @@ -1 +1 @@
        -old line
        +new line
        diff --git a/file2.swift b/file2.swift
        new file mode 100644
        --- /dev/null
        +++ b/file2.swift
        @@ -0,0 +1 @@
        +new file content
    """)


@pytest.fixture
def sample_diff_todo() -> str:
    """A hunk replacing one line with three, the middle one a TODO."""
    return textwrap.dedent("""\
        diff --git a/test.swift b/test.swift
        index 123..456 100644
        --- a/test.swift
        +++ b/test.swift
        @@ -1,1 +1,3 @@
        -func old() {}
        +func new() {
        +    // TODO: implement this
        +}
    """)


@pytest.fixture
def sample_diff_deleted() -> str:
    return textwrap.dedent("""\
        diff --git a/old.py b/old.py
        deleted file mode 100644
        index abc..000 100644
        --- a/old.py
        +++ /dev/null
        @@ -1,3 +0,0 @@
        -password = "hunter2hunter2"
        -line two
        -line three
    """)


@pytest.fixture
def sample_diff_rename() -> str:
    return textwrap.dedent("""\
        diff --git a/old_name.py b/new_name.py
        similarity index 97%
        rename from old_name.py
        rename to new_name.py
        index abc1234..def5678 100644
        --- a/old_name.py
        +++ b/new_name.py
        @@ -1,0 +2,1 @@
        +# New line added after rename
    """)


@pytest.fixture
def sample_diff_credentials() -> str:
    """A Python file adding a hardcoded credential and an eval call."""
    return textwrap.dedent("""\
        diff --git a/app/settings.py b/app/settings.py
        index 1234567..abcdef0 100644
        --- a/app/settings.py
        +++ b/app/settings.py
        @@ -10,4 +10,6 @@
         import os
        -DEBUG = True
        +DEBUG = False
        +API_KEY = "abcdef1234567890"

        +result = eval(user_input)
         LOG_LEVEL = "INFO"
    """)


SKILL_TEMPLATE = """\
name: {name}
version: 1.0.0
description: A test skill
triggers:
  - file_extension: [{extensions}]
rules:
  - id: no-todo
    severity: warning
    pattern: "TODO:"
    message: "No TODOs allowed"
"""


@pytest.fixture
def skills_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "skills"
    directory.mkdir()
    return directory


@pytest.fixture
def write_skill(skills_dir: Path) -> Callable[..., Path]:
    """Write a YAML skill file into ``skills_dir``; returns its path."""

    def _write(
        filename: str = "test.yaml",
        content: str | None = None,
        *,
        name: str = "test-skill",
        extensions: str = '".swift"',
    ) -> Path:
        path = skills_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        if content is None:
            content = SKILL_TEMPLATE.format(name=name, extensions=extensions)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write

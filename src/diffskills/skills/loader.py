"""Skill loader — reads YAML skill files from a directory tree.

A bad file never aborts a directory scan: it is logged and skipped, and the
remaining files are still loaded.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import yaml

from diffskills.skills.errors import SkillError, SkillLoadError
from diffskills.skills.models import LoadedSkill, SkillFile
from diffskills.skills.validator import SkillValidator

logger = logging.getLogger(__name__)

SKILL_SUFFIXES = (".yaml", ".yml")


def iter_skill_files(directory: Path) -> Iterator[Path]:
    """Yield skill files under *directory* in sorted order, skipping hidden entries."""
    for root, dirs, files in os.walk(directory):
        dirs[:] = sorted(d for d in dirs if not d.startswith("."))
        for name in sorted(files):
            if name.startswith("."):
                continue
            if os.path.splitext(name)[1].lower() in SKILL_SUFFIXES:
                yield Path(root) / name


class SkillLoader:
    """Loads and validates skill definitions. Holds no state between calls."""

    def __init__(self, validator: Optional[SkillValidator] = None) -> None:
        self._validator = validator or SkillValidator()

    def load_skill(self, path: Union[str, Path]) -> LoadedSkill:
        """Load one skill file. Raises SkillLoadError or SkillValidationError."""
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as exc:
            raise SkillLoadError(f"Failed to read {path}: {exc}") from exc
        except (yaml.YAMLError, UnicodeDecodeError) as exc:
            raise SkillLoadError(f"Failed to parse {path}: {exc}") from exc

        skill = SkillFile.from_dict(data)
        self._validator.validate(skill)
        return LoadedSkill(source=path, content=skill)

    def load_skills(self, directory: Union[str, Path]) -> List[LoadedSkill]:
        """Load every valid skill under *directory*, creating it if absent.

        Skills come back in sorted path order. A skill whose name was already
        loaded from another file is skipped.
        """
        directory = Path(directory).expanduser()
        if not directory.exists():
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                logger.warning("Could not create skills directory %s: %s", directory, exc)
            return []

        loaded: Dict[str, LoadedSkill] = {}
        for path in iter_skill_files(directory):
            try:
                skill = self.load_skill(path)
            except SkillError as exc:
                logger.warning("Failed to load skill at %s: %s", path, exc)
                continue

            existing = loaded.get(skill.id)
            if existing is not None:
                logger.warning(
                    "Skipping skill '%s' at %s: name already loaded from %s",
                    skill.id, path, existing.source,
                )
                continue

            logger.debug(
                "Loaded skill '%s' (%d rules) from %s",
                skill.id, len(skill.content.rules), path,
            )
            loaded[skill.id] = skill

        return list(loaded.values())


def load_skills(directory: Union[str, Path]) -> List[LoadedSkill]:
    """Convenience wrapper around :meth:`SkillLoader.load_skills`."""
    return SkillLoader().load_skills(directory)

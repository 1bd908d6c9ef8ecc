from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from larp_ledger.models.reference import Archetype, Culture, Heritage, ReferenceData, Skill

logger = logging.getLogger(__name__)

CONTENT_DIR = Path(__file__).parent


def load_toml(filepath: Path) -> dict[str, Any]:
    with open(filepath, "rb") as f:
        return tomllib.load(f)


def _entries(content_dir: Path, filename: str, key: str) -> list[dict[str, Any]]:
    path = content_dir / filename
    if not path.exists():
        logger.warning("Content file %s not found", path)
        return []
    return list(load_toml(path).get(key, []))


def load_all_skills(content_dir: Path | None = None) -> list[Skill]:
    skills = []
    for entry in _entries(content_dir or CONTENT_DIR, "skills.toml", "skills"):
        data = dict(entry)
        if "prerequisite" in data:
            data["prerequisite_id"] = data.pop("prerequisite")
        skills.append(Skill(**data))
    return skills


def load_all_heritages(content_dir: Path | None = None) -> list[Heritage]:
    return [Heritage(**e) for e in _entries(content_dir or CONTENT_DIR, "heritages.toml", "heritages")]


def load_all_cultures(content_dir: Path | None = None) -> list[Culture]:
    return [Culture(**e) for e in _entries(content_dir or CONTENT_DIR, "cultures.toml", "cultures")]


def load_all_archetypes(content_dir: Path | None = None) -> list[Archetype]:
    return [Archetype(**e) for e in _entries(content_dir or CONTENT_DIR, "archetypes.toml", "archetypes")]


def load_reference_data(content_dir: Path | str | None = None) -> ReferenceData:
    """Load every reference table from the TOML content into one snapshot."""
    directory = Path(content_dir) if content_dir else CONTENT_DIR
    reference = ReferenceData.from_lists(
        skills=load_all_skills(directory),
        heritages=load_all_heritages(directory),
        cultures=load_all_cultures(directory),
        archetypes=load_all_archetypes(directory),
    )
    logger.debug(
        "Loaded %d skills, %d heritages, %d cultures, %d archetypes from %s",
        len(reference.skills), len(reference.heritages),
        len(reference.cultures), len(reference.archetypes), directory,
    )
    return reference

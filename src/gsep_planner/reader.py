"""Helpers for loading plan files back into `Project` trees."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence as ABCSequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

from loguru import logger

from .classes_references import ImportFormatError
from .models import Project
from .models.base import child_mappings

if TYPE_CHECKING:
    from .store import PlanStore

JSONMapping = Mapping[str, Any]


def projects_from_payload(data: Any) -> list[Project]:
    """
    Build projects from a parsed plan file.

    Both the export envelope (an object with a `projects` list) and a bare list
    of projects are accepted. Any structural problem, including an unknown
    option value, raises `ImportFormatError`.
    """
    raw_projects: Any
    if isinstance(data, Mapping):
        raw_projects = cast(JSONMapping, data).get("projects")
    else:
        raw_projects = data
    if not isinstance(raw_projects, ABCSequence) or isinstance(raw_projects, (str, bytes)):
        raise ImportFormatError("Invalid file format: no projects array found.")

    entries: list[JSONMapping] = child_mappings(raw_projects, context="projects")
    if entries and ("id" not in entries[0] or "projectName" not in entries[0]):
        raise ImportFormatError("Invalid file format: the first project is missing 'id' or 'projectName'.")

    try:
        return [Project.from_dict(entry) for entry in entries]
    except ImportFormatError:
        raise
    except ValueError as exc:
        raise ImportFormatError(f"Invalid file format: {exc}") from exc


def load_projects_from_json(path: Path) -> list[Project]:
    """Read a plan file from disk and return its projects."""

    try:
        raw_data: Any = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ImportFormatError(f"{path} is not valid JSON: {exc}") from exc
    return projects_from_payload(raw_data)


def open_plan(store: "PlanStore", path: Path) -> list[Project]:
    """
    Replace the projects in `store` with those saved in `path`.

    The file is fully parsed and indexed before the store changes, so a bad
    file leaves the current plan untouched.
    """
    projects: list[Project] = load_projects_from_json(path)
    store.replace_projects(projects)
    logger.info("Opened {count} projects from {path}", count=len(projects), path=path)
    return projects

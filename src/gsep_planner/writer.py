"Serialization helpers for plan files and report exports."

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from loguru import logger

from .models import Project
from .report import generate_report_csv

PLAN_FORMAT_VERSION: int = 1
DEFAULT_PLAN_FILENAME: str = "gsep_plan.json"


def plan_payload(projects: Sequence[Project], *, exported_at: datetime | None = None) -> dict[str, Any]:
    """Return the export envelope holding every project tree."""

    timestamp: datetime = exported_at or datetime.now(timezone.utc)
    return {
        "version": PLAN_FORMAT_VERSION,
        "exportedAt": timestamp.isoformat().replace("+00:00", "Z"),
        "projects": [project.to_dict() for project in projects],
    }


class PlanFileWriter:
    """Writes the whole project list to a JSON plan file."""

    def __init__(self, projects: Sequence[Project], *, indent: int = 2) -> None:
        self.projects: list[Project] = list(projects)
        self.indent: int = indent

    def write(self, output_path: Path | None = None, *, overwrite: bool = True) -> Path:
        """Serialize the plan to `output_path`, defaulting to `gsep_plan.json`."""
        output_path = output_path if output_path is not None else Path(DEFAULT_PLAN_FILENAME)
        if output_path.suffix.lower() != ".json":
            output_path = output_path.with_suffix(".json")

        if output_path.exists() and not overwrite:
            raise FileExistsError(f"{output_path} already exists. Set overwrite=True to replace it.")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as handle:
            json.dump(plan_payload(self.projects), handle, indent=self.indent, ensure_ascii=False)
        logger.info("Wrote {count} projects to {path}", count=len(self.projects), path=output_path)
        return output_path


def report_filename(project: Project) -> str:
    """File name a project's CSV report is saved under, with whitespace replaced by underscores."""

    safe_name: str = re.sub(r"\s+", "_", project.project_name)
    return f"{safe_name}_report.csv"


def write_report_csv(project: Project, output_path: Path | None = None, *, overwrite: bool = True) -> Path:
    """Write the flattened report of `project` as CSV and return the path written."""

    output_path = output_path if output_path is not None else Path(report_filename(project))
    if output_path.exists() and not overwrite:
        raise FileExistsError(f"{output_path} already exists. Set overwrite=True to replace it.")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(generate_report_csv(project), encoding="utf-8")
    logger.info("Wrote report for {project} to {path}", project=project.display_name, path=output_path)
    return output_path

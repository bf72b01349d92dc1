"""Simple CLI entry point for gsep-planner."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from .classes_references import PlanError, ReportViewMode
from .models import Project
from .reader import load_projects_from_json
from .report import render_summary_html, render_table_html
from .schemas import generate_csv_template, generate_relational_schemas, render_schemas_html
from .store import PlanStore
from .totals import recalc_project_totals
from .writer import DEFAULT_PLAN_FILENAME, PlanFileWriter, report_filename, write_report_csv

CSV_FORMAT = "csv"


def main(argv: Sequence[str] | None = None) -> int:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Utilities for GSEP replacement plan files."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    new_parser: argparse.ArgumentParser = subparsers.add_parser(
        name="new",
        help="Write a plan file holding one new, empty project.",
    )
    new_parser.add_argument("--name", required=True, help="Name of the new project.")
    new_parser.add_argument(
        "--output", type=Path, default=Path(DEFAULT_PLAN_FILENAME), help="Destination plan file."
    )
    new_parser.add_argument("--overwrite", action="store_true", help="Replace output if it already exists.")

    report_parser: argparse.ArgumentParser = subparsers.add_parser(
        name="report",
        help="Export the report of one project in a plan file.",
    )
    report_parser.add_argument("--plan", type=Path, required=True, help="Path to the JSON plan file.")
    report_parser.add_argument(
        "--project-id",
        type=int,
        help="Id of the project to report on. Defaults to the first project in the plan.",
    )
    report_parser.add_argument(
        "--format",
        choices=[CSV_FORMAT, *(mode.value for mode in ReportViewMode)],
        default=CSV_FORMAT,
        help="csv for the flattened export, summary or table for HTML.",
    )
    report_parser.add_argument(
        "--output",
        type=Path,
        help="Destination file. CSV reports default to <Project_Name>_report.csv; HTML is printed when omitted.",
    )

    validate_parser: argparse.ArgumentParser = subparsers.add_parser(
        name="validate",
        help="Check that a plan file loads and list the required fields that are still empty.",
    )
    validate_parser.add_argument("--plan", type=Path, required=True, help="Path to the JSON plan file.")

    schema_parser: argparse.ArgumentParser = subparsers.add_parser(
        name="schema",
        help="Describe the plan as relational tables.",
    )
    schema_parser.add_argument("--output", type=Path, help="Write the HTML description here instead of printing JSON.")
    schema_parser.add_argument("--template", help="Print the CSV header line of the table with this title.")

    args: argparse.Namespace = parser.parse_args(list(argv) if argv is not None else None)
    if args.command == "new":
        _run_new(name=args.name, output=args.output, overwrite=args.overwrite)
        return 0
    if args.command == "report":
        _run_report(plan_path=args.plan, project_id=args.project_id, report_format=args.format, output=args.output)
        return 0
    if args.command == "validate":
        return _run_validate(plan_path=args.plan)
    if args.command == "schema":
        _run_schema(output=args.output, template=args.template)
        return 0
    parser.error(message=f"Unhandled command {args.command}")
    return 1


def _run_new(name: str, output: Path, overwrite: bool) -> None:
    store: PlanStore = PlanStore()
    store.create_project(name)
    writer: PlanFileWriter = PlanFileWriter(store.projects)
    try:
        path: Path = writer.write(output, overwrite=overwrite)
    except FileExistsError as exc:
        raise SystemExit(str(exc)) from exc
    print(f"Wrote plan file to {path}")


def _run_report(plan_path: Path, project_id: int | None, report_format: str, output: Path | None) -> None:
    store: PlanStore = _load_store(plan_path)
    try:
        project: Project = store.get_project(project_id) if project_id is not None else store.require_active_project()
    except PlanError as exc:
        raise SystemExit(f"Invalid plan: {exc}") from exc
    recalc_project_totals(project)

    if report_format == CSV_FORMAT:
        path: Path = write_report_csv(project, output if output is not None else plan_path.parent / report_filename(project))
        print(f"Wrote report to {path}")
        return

    html: str
    if ReportViewMode(report_format) is ReportViewMode.TABLE:
        html = render_table_html(project)
    else:
        html = render_summary_html(project)
    if output is None:
        print(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    print(f"Wrote report to {output}")


def _run_validate(plan_path: Path) -> int:
    store: PlanStore = _load_store(plan_path)
    errors: list[str] = []
    for project in store.projects:
        errors.extend(project.validate(prefix=f"{project.display_name}: "))
    if errors:
        print("Missing required fields:\n" + "\n".join(errors))
        return 1
    print(f"{plan_path} is valid.")
    return 0


def _run_schema(output: Path | None, template: str | None) -> None:
    if template is not None:
        header: str | None = generate_csv_template(template)
        if header is None:
            raise SystemExit(f"Unknown table '{template}'.")
        print(header)
        return
    if output is None:
        print(json.dumps([schema.to_dict() for schema in generate_relational_schemas()], indent=2))
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_schemas_html(), encoding="utf-8")
    print(f"Wrote schema description to {output}")


def _load_store(plan_path: Path) -> PlanStore:
    try:
        return PlanStore(load_projects_from_json(plan_path))
    except (OSError, ValueError) as exc:
        raise SystemExit(f"Invalid plan: {exc}") from exc

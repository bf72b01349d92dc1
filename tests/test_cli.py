"""CLI-level tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from gsep_planner import cli
from gsep_planner.reader import load_projects_from_json
from gsep_planner.writer import PlanFileWriter

from .sample_data import PLAN_JSON, build_sample_store


def test_new_writes_single_project(tmp_path: Path) -> None:
    output: Path = tmp_path / "plan.json"

    exit_code: int = cli.main(["new", "--name", "Depot Road", "--output", str(output)])

    assert exit_code == 0
    projects = load_projects_from_json(output)
    assert [project.project_name for project in projects] == ["Depot Road"]
    assert len(projects[0].streets) == 1

    with pytest.raises(SystemExit):
        cli.main(["new", "--name", "Again", "--output", str(output)])


def test_report_csv_defaults_next_to_plan(tmp_path: Path) -> None:
    plan: Path = tmp_path / "plan.json"
    plan.write_text(PLAN_JSON, encoding="utf-8")

    exit_code: int = cli.main(["report", "--plan", str(plan)])

    assert exit_code == 0
    report: Path = tmp_path / "Imported_Project_report.csv"
    assert report.exists()
    assert len(report.read_text(encoding="utf-8").split("\n")) == 3


def test_report_summary_prints_html(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    plan: Path = PlanFileWriter(build_sample_store().projects).write(tmp_path / "plan.json")

    exit_code: int = cli.main(["report", "--plan", str(plan), "--project-id", "1", "--format", "summary"])

    assert exit_code == 0
    captured: str = capsys.readouterr().out
    assert "Branch Service #1" in captured
    assert ">150<" in captured


def test_report_unknown_project_exits(tmp_path: Path) -> None:
    plan: Path = tmp_path / "plan.json"
    plan.write_text(PLAN_JSON, encoding="utf-8")
    with pytest.raises(SystemExit, match="Invalid plan"):
        cli.main(["report", "--plan", str(plan), "--project-id", "999"])


def test_validate_lists_missing_fields(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    output: Path = tmp_path / "plan.json"
    cli.main(["new", "--name", "Depot Road", "--output", str(output)])
    capsys.readouterr()

    assert cli.main(["validate", "--plan", str(output)]) == 1
    assert "Street name is required." in capsys.readouterr().out

    complete: Path = tmp_path / "complete.json"
    complete.write_text(PLAN_JSON, encoding="utf-8")
    assert cli.main(["validate", "--plan", str(complete)]) == 0


def test_validate_rejects_broken_file(tmp_path: Path) -> None:
    broken: Path = tmp_path / "broken.json"
    broken.write_text("[]]", encoding="utf-8")
    with pytest.raises(SystemExit, match="Invalid plan"):
        cli.main(["validate", "--plan", str(broken)])


def test_schema_template(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["schema", "--template", "Table 5: Meters"]) == 0
    assert capsys.readouterr().out.startswith('"id","service_id"')
    with pytest.raises(SystemExit):
        cli.main(["schema", "--template", "Table 0"])

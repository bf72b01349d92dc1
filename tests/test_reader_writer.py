"""Plan file export/import and CSV report files."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from gsep_planner import (
    ImportFormatError,
    PlanFileWriter,
    PlanStore,
    ServiceWorkType,
    open_plan,
    plan_payload,
    projects_from_payload,
    write_report_csv,
)
from gsep_planner.writer import DEFAULT_PLAN_FILENAME, report_filename

from .sample_data import PLAN_JSON, PLAN_MAPPING, PROJECT_NAME, build_sample_store


def test_payload_envelope() -> None:
    store = build_sample_store()
    payload = plan_payload(store.projects, exported_at=datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc))

    assert payload["version"] == 1
    assert payload["exportedAt"] == "2025-03-01T12:30:00Z"
    assert payload["projects"][0]["projectName"] == PROJECT_NAME
    assert payload["projects"][0]["isEJCommunity"] is True


def test_export_then_import_preserves_tree() -> None:
    store = build_sample_store()
    payload = json.loads(json.dumps(plan_payload(store.projects)))

    projects = projects_from_payload(payload)

    assert [project.to_dict() for project in projects] == payload["projects"]


def test_bare_project_list_is_accepted() -> None:
    projects = projects_from_payload(PLAN_MAPPING["projects"])
    assert [project.id for project in projects] == [10]


def test_import_rederives_mirrors() -> None:
    projects = projects_from_payload(PLAN_MAPPING)
    project = projects[0]
    segment = project.streets[0].main_segments[0]

    assert project.number_of_streets == 1
    assert segment.number_of_services == 2
    assert segment.services[0].work_type is ServiceWorkType.PARTIAL_REPLACEMENT
    assert segment.diameter_reduction.label == '8" to 6"'


def test_write_and_open_plan(tmp_path: Path) -> None:
    source = build_sample_store()
    path: Path = PlanFileWriter(source.projects).write(tmp_path / "plan")
    assert path.name == "plan.json"

    store = PlanStore()
    loaded = open_plan(store, path)

    assert [project.id for project in loaded] == [1]
    assert store.active_project is store.projects[0]
    assert store.ui.is_creating_new_project is False
    assert store.ids.last_id == 9
    assert store.create_project("After Load").id == 10


def test_open_plan_advances_past_loaded_ids(tmp_path: Path) -> None:
    path: Path = tmp_path / DEFAULT_PLAN_FILENAME
    path.write_text(PLAN_JSON, encoding="utf-8")
    store = PlanStore()

    open_plan(store, path)

    assert store.ids.last_id == 15
    branch = store.branch_services(13)
    assert [service.id for service in branch] == [15]
    assert store.add_street().id == 16


def test_writer_respects_overwrite_flag(tmp_path: Path) -> None:
    path: Path = tmp_path / "plan.json"
    writer = PlanFileWriter(build_sample_store().projects)
    writer.write(path)
    with pytest.raises(FileExistsError):
        writer.write(path, overwrite=False)


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        json.dumps({"projects": "nope"}),
        json.dumps({"something": []}),
        json.dumps([{"projectName": "No id"}]),
        json.dumps([{"id": 1, "projectName": "Bad street", "streets": [5]}]),
        json.dumps([{"id": 1, "projectName": "Street without id", "streets": [{"name": "Elm"}]}]),
        json.dumps([{"id": 1, "projectName": "Repeated", "streets": [{"id": 1, "name": "Elm"}]}]),
        json.dumps(
            [
                {
                    "id": 1,
                    "projectName": "Unknown option",
                    "streets": [{"id": 2, "mainSegments": [{"id": 3, "primaryPurpose": "Whim"}]}],
                }
            ]
        ),
        *(
            json.dumps(
                [
                    {
                        "id": 1,
                        "projectName": "Bad parent",
                        "streets": [
                            {"id": 2, "mainSegments": [{"id": 3, "services": [{"id": 4, "parentServiceId": parent}]}]}
                        ],
                    }
                ]
            )
            for parent in ({}, [], True, 1.7, "4")
        ),
    ],
)
def test_invalid_files_leave_store_untouched(tmp_path: Path, content: str) -> None:
    store = build_sample_store()
    before = [project.to_dict() for project in store.projects]
    active = store.active_project_id
    path: Path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ImportFormatError):
        open_plan(store, path)

    assert [project.to_dict() for project in store.projects] == before
    assert store.active_project_id == active
    assert store.ids.last_id == 9


def test_report_file_name_and_contents(tmp_path: Path) -> None:
    project = build_sample_store().require_active_project()
    assert report_filename(project) == "Main_Street_Replacement_report.csv"
    project.project_name = "North\t Loop  Phase 2"
    assert report_filename(project) == "North_Loop_Phase_2_report.csv"
    project.project_name = PROJECT_NAME

    path: Path = write_report_csv(project, tmp_path / report_filename(project))

    text: str = path.read_text(encoding="utf-8")
    assert text.splitlines()[0].startswith("Project Name,Project Number")
    assert len(text.splitlines()) == 5


def test_non_utf8_file_is_rejected(tmp_path: Path) -> None:
    store = build_sample_store()
    path: Path = tmp_path / "latin.json"
    path.write_bytes(b'\xff\xfe{"projects": []}')

    with pytest.raises(ImportFormatError, match="not valid JSON"):
        open_plan(store, path)

    assert store.ids.last_id == 9


def _single_service_plan(service: dict[str, object], **project: object) -> dict[str, object]:
    return {
        "version": 1,
        "projects": [
            {
                "id": 1,
                "projectName": "Flags",
                **project,
                "streets": [{"id": 2, "mainSegments": [{"id": 3, "services": [{"id": 4}, service]}]}],
            }
        ],
    }


@pytest.mark.parametrize(("raw", "expected"), [("false", False), ("true", True), (False, False), (None, False)])
def test_branch_flag_strings_are_parsed(raw: object, expected: bool) -> None:
    projects = projects_from_payload(_single_service_plan({"id": 5, "isBranchService": raw, "parentServiceId": 4}))

    service = projects[0].streets[0].main_segments[0].services[1]
    assert service.is_branch_service is expected
    assert service.parent_service_id == 4


def test_unknown_branch_flag_is_rejected() -> None:
    with pytest.raises(ImportFormatError):
        projects_from_payload(_single_service_plan({"id": 5, "isBranchService": "sometimes"}))


def test_empty_dates_survive_a_round_trip() -> None:
    payload = _single_service_plan({"id": 5}, revisionDate="", projectStartDate=None)

    project = projects_from_payload(payload)[0]

    assert project.revision_date == ""
    assert project.project_start_date is None
    exported = project.to_dict()
    assert exported["revisionDate"] == ""
    assert exported["projectStartDate"] is None

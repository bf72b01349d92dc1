"""Editing behaviour of the plan store."""

from __future__ import annotations

import pytest

from gsep_planner import (
    ActiveProjectMissingError,
    EntityNotFoundError,
    IndexNotFoundError,
    LeakDetectionMethod,
    PlanStore,
    ReportViewMode,
    SegmentField,
    ServiceField,
    StreetField,
)
from gsep_planner.options import LEAK_DETECTION_REASONS

from .sample_data import PROJECT_NAME, build_sample_store


def _assert_mirrors(store: PlanStore) -> None:
    for project in store.projects:
        assert project.number_of_streets == len(project.streets)
        for street in project.streets:
            assert street.number_of_main_segments == len(street.main_segments)
            for segment in street.main_segments:
                assert segment.number_of_services == len(segment.services)
                for service in segment.services:
                    assert service.number_of_meters == len(service.meters)


def test_sample_store_ids_and_mirrors() -> None:
    store = build_sample_store()
    project = store.require_active_project()

    assert project.id == 1
    assert project.project_name == PROJECT_NAME
    assert [street.id for street in project.streets] == [2]
    segment = project.streets[0].main_segments[0]
    assert [service.id for service in segment.services] == [5, 8]
    assert segment.services[1].parent_service_id == 5
    assert segment.services[0].is_branch_service is True
    assert segment.services[0].street_name == "Main St"
    assert store.ids.last_id == 9
    _assert_mirrors(store)


def test_create_project_starts_with_one_street() -> None:
    store = PlanStore()
    assert store.ui.is_creating_new_project is True

    project = store.create_project("North Loop")

    assert store.active_project is project
    assert len(project.streets) == 1
    assert project.number_of_streets == 1
    assert store.ui.is_creating_new_project is False


def test_operations_require_active_project() -> None:
    store = PlanStore()
    with pytest.raises(ActiveProjectMissingError):
        store.add_street()


def test_segment_count_grows_and_shrinks() -> None:
    store = build_sample_store()
    street = store.require_active_project().streets[0]
    doomed_service = street.main_segments[0].services[0]

    added = store.update_street(street.id, StreetField.NUMBER_OF_MAIN_SEGMENTS, "4")
    assert added == 4
    assert len(street.main_segments) == 4

    dropped = store.set_segment_count(street.id, 0)
    assert len(dropped) == 4
    assert street.main_segments == []
    assert street.number_of_main_segments == 0
    with pytest.raises(EntityNotFoundError):
        store.get_service(doomed_service.id)
    _assert_mirrors(store)


def test_negative_or_blank_segment_count_clears_street() -> None:
    store = build_sample_store()
    street = store.require_active_project().streets[0]
    store.set_segment_count(street.id, -3)
    assert street.main_segments == []
    store.set_segment_count(street.id, "")
    assert street.main_segments == []


def test_branch_is_inserted_after_parent() -> None:
    store = PlanStore()
    project = store.create_project("Branches")
    segment = store.add_segment(project.streets[0].id)
    first = store.add_service(segment.id)
    second = store.add_service(segment.id)

    branch = store.add_branch_service(first.id)

    assert [service.id for service in segment.services] == [first.id, branch.id, second.id]
    assert branch.parent_service_id == first.id
    assert store.branch_services(first.id) == [branch]


def test_switching_branch_flag_on_adds_single_branch() -> None:
    store = PlanStore()
    project = store.create_project("Branches")
    segment = store.add_segment(project.streets[0].id)
    service = store.add_service(segment.id)

    store.update_service(service.id, ServiceField.IS_BRANCH_SERVICE, "true")
    store.update_service(service.id, ServiceField.IS_BRANCH_SERVICE, True)

    assert len(segment.services) == 2
    assert segment.number_of_services == 2


def test_remove_service_cascades_one_level() -> None:
    store = PlanStore()
    project = store.create_project("Cascade")
    segment = store.add_segment(project.streets[0].id)
    parent = store.add_service(segment.id)
    child = store.add_branch_service(parent.id)
    grandchild = store.add_branch_service(child.id)
    meter = store.add_meter(child.id)

    removed = store.remove_service(parent.id)

    assert {service.id for service in removed} == {parent.id, child.id}
    assert segment.services == [grandchild]
    assert segment.number_of_services == 1
    assert grandchild.parent_service_id == child.id
    with pytest.raises(EntityNotFoundError):
        store.get_meter(meter.id)


def test_delete_active_project_selects_previous() -> None:
    store = PlanStore()
    first = store.create_project("First")
    second = store.create_project("Second")
    third = store.create_project("Third")

    store.delete_project(third.id)
    assert store.active_project is second

    store.select_project(first.id)
    store.delete_project(first.id)
    assert store.active_project is second

    store.delete_project(second.id)
    assert store.active_project is None
    assert store.ui.is_creating_new_project is True


def test_delete_inactive_project_keeps_selection() -> None:
    store = PlanStore()
    first = store.create_project("First")
    second = store.create_project("Second")

    store.delete_project(first.id)

    assert store.active_project is second
    assert store.projects == [second]


def test_ids_of_other_projects_are_not_found() -> None:
    store = PlanStore()
    first = store.create_project("First")
    other_street = first.streets[0]
    store.create_project("Second")

    with pytest.raises(EntityNotFoundError) as excinfo:
        store.get_street(other_street.id)
    assert excinfo.value.kind == "Street"

    store.select_project(first.id)
    assert store.get_street(other_street.id) is other_street


def test_field_updates_coerce_values() -> None:
    store = build_sample_store()
    segment = store.require_active_project().streets[0].main_segments[0]

    assert store.update_segment(segment.id, "length", "250.5") == 250.5
    assert store.update_segment(segment.id, SegmentField.DIMP_RISK_SCORE, "not a number") is None
    with pytest.raises(ValueError):
        store.update_segment(segment.id, SegmentField.PRIMARY_PURPOSE, "Because")
    with pytest.raises(ValueError, match="not an editable segment field"):
        store.update_segment(segment.id, "services", [])


def test_resolve_path_reports_missing_positions() -> None:
    store = build_sample_store()

    assert store.resolve_path(0) == 2
    assert store.resolve_path(0, 0, 1) == 8
    assert store.resolve_path(0, 0, 0, 1) == 7
    assert store.position_of(8) == 1
    with pytest.raises(IndexNotFoundError, match="Segment at index 5 not found"):
        store.resolve_path(0, 5)


def test_move_street_to_other_project() -> None:
    store = PlanStore()
    target = store.create_project("Target")
    source = store.create_project("Source")
    street = store.add_street()
    segment = store.add_segment(street.id)
    store.open_move_street(street.id)

    store.move_street(street.id, target.id)

    assert street not in source.streets
    assert target.streets[-1] is street
    assert source.number_of_streets == 1
    assert target.number_of_streets == 2
    assert store.ui.is_move_street_modal_open is False
    with pytest.raises(EntityNotFoundError):
        store.get_segment(segment.id)
    store.select_project(target.id)
    assert store.get_segment(segment.id) is segment


def test_toggle_leak_detection_reason() -> None:
    store = build_sample_store()
    street = store.require_active_project().streets[0]
    reason = LEAK_DETECTION_REASONS[LeakDetectionMethod.SEI][0]

    assert store.toggle_leak_detection_reason(street.id, LeakDetectionMethod.SEI, reason) is True
    assert street.advanced_leak_detection_evaluation.sei_not_used_reasons == [reason]
    assert store.toggle_leak_detection_reason(street.id, "SEI", reason) is False
    assert street.advanced_leak_detection_evaluation.sei_not_used_reasons == []
    with pytest.raises(ValueError):
        store.toggle_leak_detection_reason(street.id, LeakDetectionMethod.SEI, "Made up")


def test_report_dialog_closes_when_project_deleted() -> None:
    store = build_sample_store()
    project = store.require_active_project()
    store.open_report(project.id)
    store.set_report_view_mode("table")
    assert store.ui.report_view_mode is ReportViewMode.TABLE
    assert store.report_project is project

    store.delete_project(project.id)

    assert store.ui.is_report_modal_open is False
    assert store.report_project is None


def test_confirm_delete_removes_chosen_project() -> None:
    store = PlanStore()
    first = store.create_project("First")
    second = store.create_project("Second")
    store.open_delete_confirm(first.id)
    assert store.ui.is_delete_confirm_modal_open is True

    store.confirm_delete_project()

    assert store.projects == [second]
    assert store.active_project is second
    assert store.ui.is_delete_confirm_modal_open is False
    assert store.ui.project_to_delete_id is None

    store.open_delete_confirm(first.id)
    store.confirm_delete_project()
    assert store.projects == [second]
    assert store.ui.is_delete_confirm_modal_open is False

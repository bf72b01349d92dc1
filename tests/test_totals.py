"""Cached project totals."""

from __future__ import annotations

from gsep_planner import DiameterReduction, Meter, PlanStore, SegmentField, recalc_project_totals, street_totals
from gsep_planner.totals import meter_annual_usage

from .sample_data import build_sample_store


def test_sample_totals() -> None:
    store = build_sample_store()
    project = recalc_project_totals(store.require_active_project())

    assert project.total_replaced_length == 200.5
    assert project.total_annual_usage == 150
    assert project.total_abandoned_length is None


def test_missing_values_count_as_zero() -> None:
    store = PlanStore()
    project = store.create_project("Empty")
    street_id: int = project.streets[0].id
    segments = store.set_segment_count(street_id, 3)
    for segment, length in zip(segments, (100, None, 50)):
        store.update_segment(segment.id, "length_to_be_replaced", length)
    service = store.add_service(segments[0].id)
    for usage in (10, 20, None):
        meter = store.add_meter(service.id)
        store.update_meter(meter.id, "udd_usage", usage)

    recalc_project_totals(project)

    assert project.total_replaced_length == 150
    assert project.total_annual_usage == 30


def test_meter_usage_ignores_non_numeric_values() -> None:
    assert meter_annual_usage(Meter(id=1, udd_usage="abc")) == 0  # type: ignore[arg-type]
    assert meter_annual_usage(Meter(id=2, udd_usage=12.5), annual_hdd=5800) == 12.5


def test_street_totals_split_by_status_and_reduction() -> None:
    store = PlanStore()
    project = store.create_project("Footage")
    street_id: int = project.streets[0].id
    segments = store.set_segment_count(street_id, 4)
    values = [
        ("essential", 100, "8_to_6"),
        ("essential", "50.5", "8_to_6"),
        ("nonEssential", 40, "4_to_2"),
        ("", 25, "6_to_4"),
    ]
    for segment, (status, length, reduction) in zip(segments, values):
        store.update_segment(segment.id, SegmentField.ESSENTIAL_STATUS, status)
        store.update_segment(segment.id, SegmentField.LENGTH_TO_BE_REPLACED, length)
        store.update_segment(segment.id, SegmentField.DIAMETER_REDUCTION, reduction)

    totals = street_totals(project.streets[0])

    assert totals.essential_length == 150.5
    assert totals.non_essential_length == 40
    assert totals.reduction_lengths == {
        DiameterReduction.EIGHT_TO_SIX: 150.5,
        DiameterReduction.FOUR_TO_TWO: 40,
        DiameterReduction.SIX_TO_FOUR: 25,
    }
    assert list(totals.reduction_lengths) == [
        DiameterReduction.EIGHT_TO_SIX,
        DiameterReduction.FOUR_TO_TWO,
        DiameterReduction.SIX_TO_FOUR,
    ]


def test_street_totals_skip_reductions_without_length() -> None:
    store = build_sample_store()
    street = store.require_active_project().streets[0]
    first = street.main_segments[0]
    store.update_segment(first.id, SegmentField.LENGTH_TO_BE_REPLACED, None)

    totals = street_totals(street)

    assert totals.essential_length == 0
    assert totals.non_essential_length == 0
    assert totals.has_reductions is False

"""Flattened report exports and HTML renderings."""

from __future__ import annotations

from gsep_planner import (
    REPORT_HEADERS,
    PlanStore,
    Project,
    ProjectField,
    SegmentField,
    ServiceField,
    csv_escape,
    flatten_project,
    generate_report_csv,
    recalc_project_totals,
    render_summary_html,
    render_table_html,
    report_dataframe,
)

from .sample_data import PROJECT_NAME, build_sample_store

STREET_COLUMN: int = REPORT_HEADERS.index("Street Name")
ADDRESS_COLUMN: int = REPORT_HEADERS.index("Service Address")
METER_COLUMN: int = REPORT_HEADERS.index("Meter Number")


EXPECTED_HEADERS: list[str] = [
    "Project Name",
    "Project Number",
    "Revision Number",
    "Revision Date",
    "Project Start Date",
    "Project End Date",
    "Project Type",
    "Town/City",
    "EJ Community",
    "Eliminates District Regulator Station",
    "Contributes to District Regulator Elimination",
    "Comments regarding District Regulator Station",
    "Project Description",
    "Street Name",
    "Main ID",
    "Main From Location",
    "Main To Location",
    "Existing Diameter",
    "Existing Material",
    "Existing Length",
    "DIMP Risk",
    "MAOP",
    "Essential Status",
    "Length To Be Replaced",
    "New Diameter",
    "New Material",
    "Replacement Method",
    "New MAOP",
    "Primary Purpose",
    "Primary Purpose Other",
    "Primary Purpose Explanation",
    "Secondary Purpose",
    "Secondary Purpose Other",
    "Secondary Purpose Explanation",
    "Diameter Reduction for Cost",
    "CISBOT - Not Used Reasons",
    "Internal Relining - Not Used Reasons",
    "Targeted Keyhole Repair - Not Used Reasons",
    "Targeted SEI Repair - Not Used Reasons",
    "Service Address",
    "Service ID",
    "Parent Service ID",
    "Existing Service Diameter",
    "Existing Service Material",
    "Existing Service Length",
    "Replacement Service Diameter",
    "Replacement Service Material",
    "Replacement Service Length",
    "Replacement Service Method",
    "Work Type",
    "Structure Type",
    "Structure Type Other",
    "Meter Number",
    "Customer Account Number",
    "Unit Identifier",
    "Annual Usage (therms/yr)",
    "Base Usage (therms/mo)",
]


def test_headers_are_fixed() -> None:
    assert len(EXPECTED_HEADERS) == 57
    assert list(REPORT_HEADERS) == EXPECTED_HEADERS


def test_sample_rows_follow_tree_order() -> None:
    project: Project = build_sample_store().require_active_project()
    rows = flatten_project(project)

    assert len(rows) == 4
    assert all(len(row) == len(REPORT_HEADERS) for row in rows)
    assert [row[ADDRESS_COLUMN] for row in rows] == ["12 Main St", "12 Main St", "12A Main St", ""]
    assert rows[0][REPORT_HEADERS.index("EJ Community")] == "Yes"
    assert rows[0][REPORT_HEADERS.index("Diameter Reduction for Cost")] == '6" to 4"'
    assert rows[0][REPORT_HEADERS.index("Work Type")] == "Full Replacement"
    assert rows[2][REPORT_HEADERS.index("Parent Service ID")] == 5
    assert rows[3][REPORT_HEADERS.index("Length To Be Replaced")] == 80.5
    assert rows[3][METER_COLUMN] is None


def test_project_without_streets_yields_placeholder_row() -> None:
    store = PlanStore()
    project = store.create_project("Bare")
    store.remove_street(project.streets[0].id)

    rows = flatten_project(project)

    assert len(rows) == 1
    assert rows[0][0] == "Bare"
    assert rows[0][STREET_COLUMN] == "N/A"
    assert rows[0][REPORT_HEADERS.index("EJ Community")] == ""


def test_empty_levels_still_get_a_row() -> None:
    store = PlanStore()
    project = store.create_project("Levels")
    store.update_street(project.streets[0].id, "name", "Oak Ave")
    second_street = store.add_street()
    segment = store.add_segment(second_street.id)
    store.add_service(segment.id)

    rows = flatten_project(project)

    assert len(rows) == 2
    assert rows[0][STREET_COLUMN] == "Oak Ave"
    assert rows[0][REPORT_HEADERS.index("Main ID")] is None
    assert rows[1][ADDRESS_COLUMN] == ""
    assert rows[1][REPORT_HEADERS.index("Service ID")] == ""
    assert rows[1][METER_COLUMN] is None


def test_csv_escape() -> None:
    assert csv_escape(None) == ""
    assert csv_escape("plain") == "plain"
    assert csv_escape("a,b") == '"a,b"'
    assert csv_escape('8" to 6"') == '"8"" to 6"""'
    assert csv_escape("two\nlines") == '"two\nlines"'
    assert csv_escape(120.0) == "120"
    assert csv_escape(80.5) == "80.5"


def test_generate_report_csv() -> None:
    project: Project = build_sample_store().require_active_project()
    text: str = generate_report_csv(project)
    lines: list[str] = text.split("\n")

    assert not text.endswith("\n")
    assert len(lines) == 5
    assert lines[0] == ",".join(EXPECTED_HEADERS)
    assert lines[1].startswith(f"{PROJECT_NAME},,,,,,")
    assert '"6"" to 4"""' in lines[1]
    assert ",12 Main St," in lines[1]


def test_report_dataframe_matches_rows() -> None:
    project: Project = build_sample_store().require_active_project()
    frame = report_dataframe(project)

    assert frame.shape == (4, 57)
    assert list(frame.columns) == list(REPORT_HEADERS)
    assert frame["Service Address"].tolist()[:3] == ["12 Main St", "12 Main St", "12A Main St"]


def test_table_html_has_one_row_per_record() -> None:
    store = build_sample_store()
    project = store.require_active_project()
    store.update_street(project.streets[0].id, "name", "<Main & 1st>")

    html: str = render_table_html(project)

    assert html.count("<tr>") == 5
    assert "&lt;Main &amp; 1st&gt;" in html
    assert "<Main & 1st>" not in html


def test_summary_groups_branches_under_parent() -> None:
    project: Project = recalc_project_totals(build_sample_store().require_active_project())
    html: str = render_summary_html(project)

    assert f"Project: {PROJECT_NAME}" in html
    assert "Service #1: 12 Main St" in html
    assert "Branch Service #1" in html
    assert html.index("Service #1: 12 Main St") < html.index("Branch Service #1")
    assert "Service #2" not in html
    assert "Meter #2" in html
    assert ">150<" in html
    assert ">200.5<" in html
    assert ">5800<" in html
    assert "Diameter Reduction" in html
    assert "Replacement Diameter" in html


def test_summary_shows_na_for_missing_values() -> None:
    store = PlanStore()
    project = store.create_project("Sparse")

    html: str = render_summary_html(project)

    assert "Street #1: Unnamed Street" in html
    assert "<div class=\"report-label\">EJ Community</div><div class=\"report-value\">N/A</div>" in html
    assert "Advanced Leak Detection Evaluation" not in html


def test_summary_replacement_fields_depend_on_work_type() -> None:
    store = PlanStore()
    project = store.create_project("Work Types")
    segment = store.add_segment(project.streets[0].id)
    service = store.add_service(segment.id)
    store.update_service(service.id, ServiceField.WORK_TYPE, "Abandonment Only")

    html: str = render_summary_html(project)

    assert "Replacement Method" in html
    assert "Replacement Diameter" not in html


def test_summary_lists_orphan_branch_as_top_level() -> None:
    store = PlanStore()
    project = store.create_project("Orphans")
    segment = store.add_segment(project.streets[0].id)
    parent = store.add_service(segment.id)
    child = store.add_branch_service(parent.id)
    grandchild = store.add_branch_service(child.id)
    store.update_service(grandchild.id, ServiceField.STREET_NUMBER, "99")
    store.remove_service(parent.id)

    html: str = render_summary_html(project)

    assert "Service #1: 99" in html
    assert "Branch Service #" not in html


def test_summary_lists_branch_of_branch_as_top_level() -> None:
    store = PlanStore()
    project = store.create_project("Nested")
    segment = store.add_segment(project.streets[0].id)
    parent = store.add_service(segment.id)
    child = store.add_branch_service(parent.id)
    grandchild = store.add_branch_service(child.id)
    store.update_service(parent.id, ServiceField.STREET_NUMBER, "75")
    store.update_service(grandchild.id, ServiceField.STREET_NUMBER, "77")

    html: str = render_summary_html(project)

    assert "Service #1: 75" in html
    assert "Branch Service #1" in html
    assert "Service #2: 77" in html
    assert html.index("Branch Service #1") < html.index("Service #2: 77")


def test_summary_groups_thousands_only_for_cost_and_totals() -> None:
    store = build_sample_store()
    store.update_project(ProjectField.PROJECT_NUMBER, 12345)
    store.update_project(ProjectField.PROJECT_COST, "1234567.5")
    project = store.require_active_project()
    segment = project.streets[0].main_segments[0]
    store.update_segment(segment.id, SegmentField.LENGTH, 4500)
    store.update_segment(segment.id, SegmentField.LENGTH_TO_BE_REPLACED, 2000)
    recalc_project_totals(project)

    html: str = render_summary_html(project)

    assert '<div class="report-value">12345</div>' in html
    assert "12,345" not in html
    assert '<div class="report-value">4500</div>' in html
    assert '<div class="report-value">1,234,567.5</div>' in html
    assert '<div class="report-value">2,080.5</div>' in html


def test_summary_shows_street_footage_totals() -> None:
    store = build_sample_store()
    project = store.require_active_project()
    first, second = project.streets[0].main_segments
    store.update_segment(first.id, SegmentField.ESSENTIAL_STATUS, "essential")
    store.update_segment(second.id, SegmentField.ESSENTIAL_STATUS, "nonEssential")

    html: str = render_summary_html(project)

    assert '<div class="report-label">Essential Footage (ft)</div><div class="report-value">120</div>' in html
    assert '<div class="report-label">Non-Essential Footage (ft)</div><div class="report-value">80.5</div>' in html
    assert "Reduction in main diameter to reduce standard costs" in html
    assert '<div class="report-label">6&quot; to 4&quot; Footage (ft)</div><div class="report-value">120</div>' in html

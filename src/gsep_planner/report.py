"""Flattened project reports: CSV export, HTML table and HTML summary."""

from __future__ import annotations

from enum import Enum
from html import escape
from typing import TYPE_CHECKING, Any, Sequence

from loguru import logger

from .models import MainSegment, Meter, Project, Service, Street
from .totals import StreetTotals, street_totals
from .type_helpers import (
    DiameterReduction,
    LeakDetectionMethod,
    PurposeOption,
    StructureType,
    format_tri_state,
)

if TYPE_CHECKING:
    import pandas as pd

ReportRow = list[Any]

REPORT_HEADERS: tuple[str, ...] = (
    "Project Name", "Project Number", "Revision Number", "Revision Date", "Project Start Date",
    "Project End Date", "Project Type", "Town/City", "EJ Community", "Eliminates District Regulator Station",
    "Contributes to District Regulator Elimination", "Comments regarding District Regulator Station",
    "Project Description", "Street Name", "Main ID", "Main From Location", "Main To Location",
    "Existing Diameter", "Existing Material", "Existing Length", "DIMP Risk", "MAOP", "Essential Status",
    "Length To Be Replaced", "New Diameter", "New Material", "Replacement Method", "New MAOP",
    "Primary Purpose", "Primary Purpose Other", "Primary Purpose Explanation", "Secondary Purpose",
    "Secondary Purpose Other", "Secondary Purpose Explanation", "Diameter Reduction for Cost",
    "CISBOT - Not Used Reasons", "Internal Relining - Not Used Reasons",
    "Targeted Keyhole Repair - Not Used Reasons", "Targeted SEI Repair - Not Used Reasons",
    "Service Address", "Service ID", "Parent Service ID", "Existing Service Diameter",
    "Existing Service Material", "Existing Service Length", "Replacement Service Diameter",
    "Replacement Service Material", "Replacement Service Length", "Replacement Service Method",
    "Work Type", "Structure Type", "Structure Type Other", "Meter Number", "Customer Account Number",
    "Unit Identifier", "Annual Usage (therms/yr)", "Base Usage (therms/mo)",
)

# Street name used on the single row of a project that has no streets.
PLACEHOLDER_STREET_NAME = "N/A"


def _build_row(
    project: Project,
    street: Street | None,
    segment: MainSegment | None = None,
    service: Service | None = None,
    meter: Meter | None = None,
) -> ReportRow:
    reasons: list[str] = []
    for method in LeakDetectionMethod:
        listed: list[str] = street.advanced_leak_detection_evaluation.reasons(method) if street else []
        reasons.append("; ".join(listed))
    segment_fields: list[Any] = [None] * 21
    if segment is not None:
        segment_fields = [
            segment.main_id, segment.from_location, segment.to_location, segment.diameter, segment.material,
            segment.length, segment.dimp_risk_score, segment.maop, segment.essential_status.value,
            segment.length_to_be_replaced, segment.replacement_pipe_diameter, segment.replacement_pipe_material,
            segment.replacement_pipe_method, segment.replacement_pipe_maop, segment.primary_purpose.value,
            segment.primary_purpose_other_reason, segment.primary_purpose_explanation,
            segment.secondary_purpose.value, segment.secondary_purpose_other_reason,
            segment.secondary_purpose_explanation, segment.diameter_reduction.label,
        ]
    service_fields: list[Any] = ["", *[None] * 12]
    if service is not None:
        service_fields = [
            service.address, service.service_id, service.parent_service_id, service.diameter, service.material,
            service.length, service.replacement_diameter, service.replacement_material, service.replacement_length,
            service.replacement_method, service.work_type.value, service.structure_type.value,
            service.structure_type_other,
        ]
    meter_fields: list[Any] = [None] * 5
    if meter is not None:
        meter_fields = [
            meter.meter_number, meter.customer_account_number, meter.unit_identifier, meter.udd_usage,
            meter.base_usage,
        ]
    return [
        project.project_name,
        project.project_number,
        project.revision_number,
        project.revision_date,
        project.project_start_date,
        project.project_end_date,
        project.project_type,
        project.town_city,
        format_tri_state(project.is_ej_community),
        format_tri_state(project.eliminates_regulator_station),
        format_tri_state(project.contributes_to_regulator_station_elimination),
        project.regulator_station_comments,
        project.project_description,
        street.name if street is not None else PLACEHOLDER_STREET_NAME,
        *segment_fields,
        *reasons,
        *service_fields,
        *meter_fields,
    ]


def flatten_project(project: Project) -> list[ReportRow]:
    """
    Return one row per meter, ordered like `REPORT_HEADERS`.

    A level with no children still produces one row with the child columns
    left empty, so every street, segment and service appears at least once and
    a project without streets yields a single placeholder row.
    """
    rows: list[ReportRow] = []
    if not project.streets:
        rows.append(_build_row(project, None))
        return rows
    for street in project.streets:
        if not street.main_segments:
            rows.append(_build_row(project, street))
            continue
        for segment in street.main_segments:
            if not segment.services:
                rows.append(_build_row(project, street, segment))
                continue
            for service in segment.services:
                if not service.meters:
                    rows.append(_build_row(project, street, segment, service))
                    continue
                for meter in service.meters:
                    rows.append(_build_row(project, street, segment, service, meter))
    return rows


def format_cell(value: Any) -> str:
    """Render a report value as text: blanks for missing values, whole floats without '.0'."""

    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def csv_escape(value: Any) -> str:
    """Quote a cell when it contains a comma, quote or line break, doubling inner quotes."""

    text: str = format_cell(value)
    if any(char in text for char in ',"\r\n'):
        text = '"' + text.replace('"', '""') + '"'
    return text


def generate_report_csv(project: Project) -> str:
    """Return the header line and one line per flattened row, joined with newlines."""

    rows: list[ReportRow] = flatten_project(project)
    lines: list[str] = [",".join(csv_escape(header) for header in REPORT_HEADERS)]
    lines.extend(",".join(csv_escape(cell) for cell in row) for row in rows)
    logger.debug(
        "Generated CSV report for {project} with {count} rows", project=project.display_name, count=len(rows)
    )
    return "\n".join(lines)


def report_dataframe(project: Project) -> "pd.DataFrame":
    """Return the flattened report as a pandas DataFrame with `REPORT_HEADERS` as columns."""
    import pandas as pd

    return pd.DataFrame(flatten_project(project), columns=list(REPORT_HEADERS))


def render_table_html(project: Project) -> str:
    """Render the flattened report as a literal HTML table."""

    head: str = "".join(f"<th>{escape(header)}</th>" for header in REPORT_HEADERS)
    body: str = "".join(
        "<tr>" + "".join(f"<td>{escape(format_cell(cell))}</td>" for cell in row) + "</tr>"
        for row in flatten_project(project)
    )
    return (
        '<div class="report-table-wrapper">'
        '<table class="report-table">'
        f"<thead><tr>{head}</tr></thead>"
        f"<tbody>{body}</tbody>"
        "</table></div>"
    )


def _display(value: Any) -> str:
    """Summary text for a scalar: N/A when missing, otherwise the report cell text."""

    if value is None:
        return "N/A"
    if isinstance(value, bool):
        return format_tri_state(value)
    return format_cell(value)


def _grouped(value: float | None) -> str | None:
    """Thousands-separated amount, kept for costs and footage totals; None stays missing."""

    if value is None:
        return None
    if isinstance(value, float) and not value.is_integer():
        return f"{round(value, 3):,}"
    return f"{int(value):,}"


def _inches(value: float | None) -> str:
    return "N/A" if value is None else f'{format_cell(value)}"'


def _field(label: str, value: Any, full: bool = False) -> str:
    css: str = "report-field report-value-full" if full else "report-field"
    return (
        f'<div class="{css}"><div class="report-label">{escape(label)}</div>'
        f'<div class="report-value">{escape(_display(value))}</div></div>'
    )


def group_services(services: Sequence[Service]) -> list[tuple[Service, list[Service]]]:
    """
    Pair each top-level service with its branches, keeping list order.

    A service counts as a branch only when its parent is a top-level service of
    the same list. Any other service, including an orphan or a branch of a
    branch, is listed as top level so nothing drops out of the summary.
    """
    known: set[int] = {service.id for service in services}
    roots: set[int] = {
        service.id
        for service in services
        if service.parent_service_id not in known or service.parent_service_id == service.id
    }
    branches: dict[int, list[Service]] = {}
    top_level: list[Service] = []
    for service in services:
        parent_id: int | None = service.parent_service_id
        if parent_id is not None and service.id not in roots and parent_id in roots:
            branches.setdefault(parent_id, []).append(service)
        else:
            top_level.append(service)
    return [(service, branches.get(service.id, [])) for service in top_level]


def _render_service(service: Service, index: int, is_branch: bool = False) -> str:
    if is_branch:
        title: str = f"Branch Service #{index + 1}"
        style: str = "padding-left: 1rem; margin-top: 1rem; border-left: 2px solid #ccc;"
    else:
        title = f"Service #{index + 1}: {service.street_number} {service.street_name}"
        style = "padding-left: 1rem; margin-top: 1rem;"
    structure: str = service.structure_type.value
    if service.structure_type is StructureType.OTHER:
        structure = f"{structure} ({service.structure_type_other})"
    parts: list[str] = [f'<div style="{style}">', f"<h6>{escape(title)}</h6>", '<div class="report-grid">']
    parts.append(_field("Service ID", service.service_id))
    parts.append(_field("Work Type", service.work_type))
    parts.append(_field("Structure Type", structure))
    parts.append(_field("Existing Diameter", _inches(service.diameter)))
    parts.append(_field("Existing Material", service.material))
    parts.append(_field("Existing Length (ft)", service.length))
    if service.work_type.uses_replacement_pipe:
        parts.append(_field("Replacement Diameter", _inches(service.replacement_diameter)))
        parts.append(_field("Replacement Material", service.replacement_material))
        parts.append(_field("Replacement Length (ft)", service.replacement_length))
    if service.work_type.uses_replacement_method:
        parts.append(_field("Replacement Method", service.replacement_method))
    parts.append(_field("Has Branch Services", format_tri_state(service.is_branch_service)))
    parts.append("</div>")
    for number, meter in enumerate(service.meters, start=1):
        parts.append('<div class="report-grid" style="padding-left: 1rem; margin-top: .5rem; border-top: 1px solid #eee;">')
        parts.append(f'<strong style="grid-column: 1 / -1; margin-top: .5rem;">Meter #{number}</strong>')
        parts.append(_field("Meter Number", meter.meter_number))
        parts.append(_field("Customer Account Number", meter.customer_account_number))
        parts.append(_field("Unit Identifier", meter.unit_identifier))
        parts.append(_field("Annual Usage (therms/yr)", meter.udd_usage))
        parts.append(_field("Base Usage (therms/mo)", meter.base_usage))
        parts.append("</div>")
    parts.append("</div>")
    return "".join(parts)


def _purpose(purpose: PurposeOption, other_reason: str) -> str:
    if purpose is PurposeOption.OTHER:
        return f"{purpose.value} ({other_reason})"
    return purpose.value


def _render_segment(segment: MainSegment, index: int) -> str:
    parts: list[str] = ['<div style="padding-left: 1rem; border-left: 3px solid #eee; margin-top: 1rem;">']
    parts.append(f"<h4>Main Segment #{index + 1}</h4>")
    parts.append('<h5>Existing Main Details</h5><div class="report-grid">')
    parts.append(_field("Main ID", segment.main_id))
    parts.append(_field("From", segment.from_location))
    parts.append(_field("To", segment.to_location))
    parts.append(_field("Diameter", _inches(segment.diameter)))
    parts.append(_field("Material", segment.material))
    parts.append(_field("Length (ft)", segment.length))
    parts.append(_field("MAOP", segment.maop))
    parts.append(_field("DIMP Risk Score", segment.dimp_risk_score))
    parts.append(_field("Essential Status", segment.essential_status))
    parts.append("</div>")

    parts.append('<h5>Replacement Main Details</h5><div class="report-grid">')
    parts.append(_field("Length to be Replaced (ft)", segment.length_to_be_replaced))
    parts.append(_field("New Diameter", _inches(segment.replacement_pipe_diameter)))
    parts.append(_field("New Material", segment.replacement_pipe_material))
    parts.append(_field("New MAOP", segment.replacement_pipe_maop))
    parts.append(_field("Replacement Method", segment.replacement_pipe_method))
    if segment.diameter_reduction is not DiameterReduction.NONE:
        parts.append(_field("Diameter Reduction", segment.diameter_reduction.label))
    parts.append("</div>")

    parts.append("<h5>Purpose</h5>")
    parts.append(_field("Primary Purpose", _purpose(segment.primary_purpose, segment.primary_purpose_other_reason), True))
    parts.append(_field("Primary Purpose Explanation", segment.primary_purpose_explanation, True))
    parts.append(
        _field("Secondary Purpose", _purpose(segment.secondary_purpose, segment.secondary_purpose_other_reason), True)
    )
    parts.append(_field("Secondary Purpose Explanation", segment.secondary_purpose_explanation, True))

    if segment.services:
        parts.append("<h5>Services</h5>")
        for number, (service, branches) in enumerate(group_services(segment.services)):
            parts.append(_render_service(service, number))
            for branch_number, branch in enumerate(branches):
                parts.append(_render_service(branch, branch_number, is_branch=True))
    parts.append("</div>")
    return "".join(parts)


def _render_street(street: Street, index: int) -> str:
    parts: list[str] = [
        '<div class="report-section">',
        f"<h3>Street #{index + 1}: {escape(street.name or 'Unnamed Street')}</h3>",
    ]
    totals: StreetTotals = street_totals(street)
    parts.append('<div class="report-grid">')
    parts.append(_field("Essential Footage (ft)", _grouped(totals.essential_length)))
    parts.append(_field("Non-Essential Footage (ft)", _grouped(totals.non_essential_length)))
    parts.append("</div>")
    if totals.has_reductions:
        parts.append("<h5>Reduction in main diameter to reduce standard costs</h5>")
        parts.append('<div class="report-grid">')
        for reduction, length in totals.reduction_lengths.items():
            parts.append(_field(f"{reduction.label} Footage (ft)", _grouped(length)))
        parts.append("</div>")
    evaluation = street.advanced_leak_detection_evaluation
    if evaluation.has_reasons():
        parts.append("<h5>Advanced Leak Detection Evaluation (Reasons for Non-Use)</h5>")
        for method in LeakDetectionMethod:
            reasons: list[str] = evaluation.reasons(method)
            if reasons:
                items: str = "".join(f"<li>{escape(reason)}</li>" for reason in reasons)
                parts.append(f"<h6>{escape(method.label)}</h6><ul>{items}</ul>")
    for number, segment in enumerate(street.main_segments):
        parts.append(_render_segment(segment, number))
    parts.append("</div>")
    return "".join(parts)


def render_summary_html(project: Project) -> str:
    """
    Render the grouped, human-labelled summary of a project.

    Missing scalars show as N/A and yes/no answers as Yes/No/N/A. Services are
    listed parent first, each followed by its branches. Totals are shown as
    cached on the project, so recalculate them beforehand.
    """
    parts: list[str] = ['<div class="report-section">', f"<h3>Project: {escape(project.display_name)}</h3>"]
    parts.append('<div class="report-grid">')
    parts.append(_field("Project Number", project.project_number))
    parts.append(_field("Project Type", project.project_type))
    parts.append(_field("Revision Number", project.revision_number))
    parts.append(_field("Revision Date", project.revision_date))
    parts.append(_field("Start Date", project.project_start_date))
    parts.append(_field("End Date", project.project_end_date))
    parts.append(_field("Estimated Cost ($)", _grouped(project.project_cost)))
    parts.append(_field("Town/City", project.town_city))
    parts.append(_field("EJ Community", format_tri_state(project.is_ej_community, unknown="N/A")))
    parts.append(
        _field(
            "Eliminates District Regulator Station",
            format_tri_state(project.eliminates_regulator_station, unknown="N/A"),
        )
    )
    parts.append(
        _field(
            "Contributes to District Regulator Elimination",
            format_tri_state(project.contributes_to_regulator_station_elimination, unknown="N/A"),
        )
    )
    parts.append("</div>")
    parts.append(_field("Description", project.project_description, True))
    parts.append(_field("EJ Information", project.ej_information, True))
    parts.append(_field("EJ Summary", project.ej_summary, True))
    parts.append(_field("Comments regarding District Regulator Station", project.regulator_station_comments, True))
    parts.append("</div>")

    parts.append('<div class="report-section"><h3>Project Totals &amp; Assumptions</h3><div class="report-grid">')
    parts.append(_field("Total Abandoned Main Length (ft)", _grouped(project.total_abandoned_length)))
    parts.append(_field("Total Replaced Main Length (ft)", _grouped(project.total_replaced_length)))
    parts.append(_field("Total Annual Usage (therms)", _grouped(project.total_annual_usage)))
    parts.append(_field("Annual HDD", project.annual_hdd))
    parts.append(_field("Annual HDD Basis", project.annual_hdd_basis))
    parts.append("</div></div>")

    for number, street in enumerate(project.streets):
        parts.append(_render_street(street, number))
    return "".join(parts)

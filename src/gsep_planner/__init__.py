"""Public API for gsep-planner."""

from .classes_references import (
    ActiveProjectMissingError,
    EntityNotFoundError,
    ImportFormatError,
    IndexNotFoundError,
    PlanError,
    ReportViewMode,
    ValidationError,
)
from .fields import MeterField, ProjectField, SegmentField, ServiceField, StreetField
from .ids import IdGenerator
from .models import LeakDetectionEvaluation, MainSegment, Meter, Project, Service, Street
from .reader import load_projects_from_json, open_plan, projects_from_payload
from .report import (
    REPORT_HEADERS,
    csv_escape,
    flatten_project,
    generate_report_csv,
    render_summary_html,
    render_table_html,
    report_dataframe,
)
from .schemas import generate_csv_template, generate_relational_schemas, render_schemas_html
from .store import PlanStore, UiState
from .totals import StreetTotals, meter_annual_usage, recalc_project_totals, street_totals
from .type_helpers import (
    DiameterReduction,
    EssentialStatus,
    LeakDetectionMethod,
    PurposeOption,
    ServiceWorkType,
    StructureType,
)
from .writer import PlanFileWriter, plan_payload, write_report_csv

__all__: list[str] = [
    "ActiveProjectMissingError",
    "EntityNotFoundError",
    "ImportFormatError",
    "IndexNotFoundError",
    "PlanError",
    "ReportViewMode",
    "ValidationError",
    "MeterField",
    "ProjectField",
    "SegmentField",
    "ServiceField",
    "StreetField",
    "IdGenerator",
    "LeakDetectionEvaluation",
    "MainSegment",
    "Meter",
    "Project",
    "Service",
    "Street",
    "PlanStore",
    "UiState",
    "DiameterReduction",
    "EssentialStatus",
    "LeakDetectionMethod",
    "PurposeOption",
    "ServiceWorkType",
    "StructureType",
    "REPORT_HEADERS",
    "csv_escape",
    "flatten_project",
    "generate_report_csv",
    "render_summary_html",
    "render_table_html",
    "report_dataframe",
    "generate_csv_template",
    "generate_relational_schemas",
    "render_schemas_html",
    "meter_annual_usage",
    "recalc_project_totals",
    "StreetTotals",
    "street_totals",
    "load_projects_from_json",
    "open_plan",
    "projects_from_payload",
    "PlanFileWriter",
    "plan_payload",
    "write_report_csv",
]

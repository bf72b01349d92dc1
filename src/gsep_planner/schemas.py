"""Relational table descriptions of the plan tree and their CSV templates."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from html import escape
from typing import Any, Sequence

from .models.project import DEFAULT_PROJECT_TYPE
from .options import (
    DIAMETER_REDUCTIONS,
    MAOP_OPTIONS,
    PIPE_DIAMETERS,
    PIPE_MATERIALS,
    PRIMARY_PURPOSE_OPTIONS,
    REPLACEMENT_PIPE_DIAMETERS,
    REPLACEMENT_PIPE_MATERIALS,
    REPLACEMENT_PIPE_METHODS,
    SERVICE_PIPE_DIAMETERS,
    SERVICE_WORK_TYPES,
    STRUCTURE_TYPES,
    TOWNS,
)
from .type_helpers import EssentialStatus, StructureType

ARRAY_TYPE = "array of objects"
_APP_GENERATED = "A unique ID for this record, generated automatically by the app (Primary Key)."


@dataclass(slots=True)
class SchemaField:
    """One column of a relational table."""

    name: str
    type: str
    description: str
    is_key: bool = False
    options: Sequence[Any] | None = None
    example: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "description": self.description}
        if self.is_key:
            data["isKey"] = True
        if self.options is not None:
            data["options"] = list(self.options)
        if self.example is not None:
            data["example"] = self.example
        return data


@dataclass(slots=True)
class TableSchema:
    """A table of the relational view, with its fields in column order."""

    title: str
    description: str
    fields: list[SchemaField] = field(default_factory=list)

    def field_names(self) -> list[str]:
        return [schema_field.name for schema_field in self.fields]

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "fields": {schema_field.name: schema_field.to_dict() for schema_field in self.fields},
        }


def _key(name: str, description: str = _APP_GENERATED) -> SchemaField:
    return SchemaField(name, "number", description, is_key=True)


def generate_relational_schemas() -> list[TableSchema]:
    """Describe the plan as five linked tables: projects, streets, segments, services and meters."""

    project = TableSchema(
        "Table 1: Projects",
        "Top-level table. One row per project.",
        [
            _key("id"),
            SchemaField("projectNumber", "number", "Official project number."),
            SchemaField("projectName", "string", "Project name/identifier."),
            SchemaField("projectType", "string", "Type of the project.", example=DEFAULT_PROJECT_TYPE),
            SchemaField("revisionNumber", "string", "Project revision number."),
            SchemaField("revisionDate", "string", "Date of the revision (YYYY-MM-DD)."),
            SchemaField("projectDescription", "string", "General scope description."),
            SchemaField("projectStartDate", "string", "Estimated start date.", example="2025-04-01"),
            SchemaField("projectEndDate", "string", "Estimated end date.", example="2025-10-31"),
            SchemaField("projectCost", "number", "Fully-loaded estimated cost ($)."),
            SchemaField("townCity", "string", "Town/City.", options=TOWNS),
            SchemaField("isEJCommunity", "boolean", "True if in an EJ community."),
            SchemaField("ejInformation", "string", "Raw EJ text pasted from source."),
            SchemaField(
                "eliminatesRegulatorStation",
                "boolean",
                "True if project eliminates a District Regulator Station (DRS).",
            ),
            SchemaField(
                "contributesToRegulatorStationElimination",
                "boolean",
                "True if project contributes to a future District Regulator Station (DRS) elimination.",
            ),
            SchemaField("regulatorStationComments", "string", "Comments regarding the District Regulator Station."),
            SchemaField("numberOfStreets", "number", "Count of streets in this project."),
            SchemaField("streets", ARRAY_TYPE, "Linked rows are in 'Streets'."),
        ],
    )
    street = TableSchema(
        "Table 2: Streets",
        "One row per street within a project.",
        [
            _key("id"),
            _key("project_id", "Foreign Key -> Projects.id"),
            SchemaField("name", "string", "Street name."),
            SchemaField("numberOfMainSegments", "number", "Number of main segments."),
            SchemaField(
                "advancedLeakDetectionEvaluation",
                "object",
                "Contains arrays of reasons why advanced leak detection/repair methods were not used for this street.",
            ),
            SchemaField("mainSegments", ARRAY_TYPE, "Linked rows are in 'Main Segments'."),
        ],
    )
    segment = TableSchema(
        "Table 3: Main Segments",
        "One row per main pipe segment.",
        [
            _key("id"),
            _key("street_id", "Foreign Key -> Streets.id"),
            SchemaField("diameter", "number", "Existing main diameter (in).", options=PIPE_DIAMETERS),
            SchemaField("material", "string", "Existing main material.", options=PIPE_MATERIALS),
            SchemaField("length", "number", "Existing main length (ft)."),
            SchemaField("mainId", "string", "Existing main ID."),
            SchemaField("dimpRiskScore", "number", "DIMP risk score."),
            SchemaField("maop", "string", "MAOP of existing main.", options=MAOP_OPTIONS),
            SchemaField(
                "essentialStatus",
                "string",
                "Essential or non-essential.",
                options=[status.value for status in EssentialStatus if status is not EssentialStatus.NOT_SET],
            ),
            SchemaField("lengthToBeReplaced", "number", "Length to be replaced (ft)."),
            SchemaField(
                "replacementPipeDiameter", "number", "New pipe diameter (in).", options=REPLACEMENT_PIPE_DIAMETERS
            ),
            SchemaField("replacementPipeMaterial", "string", "New pipe material.", options=REPLACEMENT_PIPE_MATERIALS),
            SchemaField("replacementPipeMethod", "string", "Replacement method.", options=REPLACEMENT_PIPE_METHODS),
            SchemaField("replacementPipeMaop", "string", "New pipe MAOP.", options=MAOP_OPTIONS),
            SchemaField("numberOfServices", "number", "Number of services on this segment."),
            SchemaField("primaryPurpose", "string", "Primary reason.", options=PRIMARY_PURPOSE_OPTIONS),
            SchemaField("primaryPurposeExplanation", "string", "Explanation of primary purpose."),
            SchemaField("secondaryPurpose", "string", "Secondary reason.", options=PRIMARY_PURPOSE_OPTIONS),
            SchemaField("secondaryPurposeExplanation", "string", "Explanation of secondary purpose."),
            SchemaField(
                "diameterReduction",
                "string",
                "Reduction in main diameter to reduce standard costs.",
                options=[*DIAMETER_REDUCTIONS, ""],
            ),
            SchemaField("services", ARRAY_TYPE, "Linked rows are in 'Services'."),
        ],
    )
    service = TableSchema(
        "Table 4: Services",
        "One row per service line.",
        [
            _key("id"),
            _key("main_segment_id", "Foreign Key -> MainSegments.id"),
            SchemaField(
                "parentServiceId",
                "number",
                "Foreign Key -> Services.id. If populated, this service is a branch of the parent service.",
            ),
            SchemaField("streetName", "string", "Street name for service location."),
            SchemaField("streetNumber", "string", "Street number for service location."),
            SchemaField("serviceId", "string", "Service line ID."),
            SchemaField("diameter", "number", "Existing service diameter (in).", options=SERVICE_PIPE_DIAMETERS),
            SchemaField("material", "string", "Existing service material.", options=PIPE_MATERIALS),
            SchemaField("length", "number", "Existing service length (ft)."),
            SchemaField(
                "replacementDiameter", "number", "Replacement service diameter (in).", options=SERVICE_PIPE_DIAMETERS
            ),
            SchemaField(
                "replacementMaterial", "string", "Replacement service material.", options=REPLACEMENT_PIPE_MATERIALS
            ),
            SchemaField("replacementLength", "number", "Replacement service length (ft)."),
            SchemaField(
                "replacementMethod", "string", "Method of replacement or abandonment.", options=REPLACEMENT_PIPE_METHODS
            ),
            SchemaField(
                "isBranchService",
                "boolean",
                "True if this service has one or more branch services coming off of it.",
            ),
            SchemaField("workType", "string", "Work type.", options=SERVICE_WORK_TYPES),
            SchemaField(
                "structureType", "string", "Structure type.", options=[*STRUCTURE_TYPES, StructureType.OTHER.value]
            ),
            SchemaField("structureTypeOther", "string", "If Other, specify."),
            SchemaField("numberOfMeters", "number", "Number of meters on this service."),
            SchemaField("meters", ARRAY_TYPE, "Linked rows are in 'Meters'."),
        ],
    )
    meter = TableSchema(
        "Table 5: Meters",
        "One row per meter.",
        [
            _key("id"),
            _key("service_id", "Foreign Key -> Services.id"),
            SchemaField("meterNumber", "string", "Meter number."),
            SchemaField("customerAccountNumber", "string", "Customer account number."),
            SchemaField("unitIdentifier", "string", "Unit (e.g., Apt 2)."),
            SchemaField("uddUsage", "number", "Annual usage (therms/yr)."),
            SchemaField("baseUsage", "number", "Base usage (therms/mo)."),
        ],
    )
    return [project, street, segment, service, meter]


def generate_csv_template(title: str) -> str | None:
    """
    Return the quoted CSV header line for the table named `title`.

    Nested list fields are left out. Returns None when no table has that title.
    """
    for schema in generate_relational_schemas():
        if schema.title == title:
            return ",".join(
                f'"{schema_field.name}"' for schema_field in schema.fields if schema_field.type != ARRAY_TYPE
            )
    return None


def _options_cell(schema_field: SchemaField) -> str:
    if schema_field.options is not None:
        value: Any = list(schema_field.options)
    elif schema_field.example is not None:
        value = schema_field.example
    else:
        return ""
    return f'<div class="json-value"><code>{escape(json.dumps(value, ensure_ascii=False))}</code></div>'


def render_schemas_html() -> str:
    """Render every table description as an HTML heading, paragraph and field table."""

    sections: list[str] = []
    for schema in generate_relational_schemas():
        rows: str = "".join(
            "<tr>"
            f"<td><strong>{escape(schema_field.name)}</strong>{' <em>(Key)</em>' if schema_field.is_key else ''}</td>"
            f"<td>{escape(schema_field.type)}</td>"
            f"<td>{escape(schema_field.description)}</td>"
            f"<td>{_options_cell(schema_field)}</td>"
            "</tr>"
            for schema_field in schema.fields
        )
        sections.append(
            f"<h3>{escape(schema.title)}</h3>"
            f"<p>{escape(schema.description)}</p>"
            '<table class="relational-schema-table">'
            "<thead><tr><th>Field</th><th>Type</th><th>Description</th><th>Options/Example</th></tr></thead>"
            f"<tbody>{rows}</tbody>"
            "</table>"
        )
    return "\n".join(sections)

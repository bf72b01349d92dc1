"""Editable field selectors for each plan entity.

Each member names the dataclass attribute it edits and the coercer that turns
raw form input into the stored type. Ids, child lists, count mirrors and the
branch back-reference are absent; they only change through
the store operations that keep the tree consistent.
"""

from __future__ import annotations

from enum import Enum
from functools import partial
from typing import Any, Callable

from .type_helpers import (
    DiameterReduction,
    EssentialStatus,
    PurposeOption,
    ServiceWorkType,
    StructureType,
    coerce_enum,
    to_number_or_none,
    to_optional_text,
    to_text,
    to_tri_state,
)

Coercer = Callable[[Any], Any]


def to_flag(value: Any) -> bool:
    return bool(to_tri_state(value))


def to_count(value: Any) -> int:
    """Interpret a requested child count; blanks and negatives become zero."""

    number: float | None = to_number_or_none(value)
    return max(0, int(number)) if number is not None else 0


class _EntityField(Enum):
    """Base for field selectors whose value is an (attribute, coercer) pair."""

    def __init__(self, attribute: str, coercer: Coercer) -> None:
        self.attribute: str = attribute
        self.coercer: Coercer = coercer

    def coerce(self, value: Any) -> Any:
        return self.coercer(value)


class ProjectField(_EntityField):
    PROJECT_NAME = ("project_name", to_text)
    PROJECT_NUMBER = ("project_number", to_number_or_none)
    REVISION_NUMBER = ("revision_number", to_text)
    REVISION_DATE = ("revision_date", to_optional_text)
    PROJECT_DESCRIPTION = ("project_description", to_text)
    PROJECT_START_DATE = ("project_start_date", to_optional_text)
    PROJECT_END_DATE = ("project_end_date", to_optional_text)
    PROJECT_COST = ("project_cost", to_number_or_none)
    OVERVIEW_MAP_FILE_NAME = ("overview_map_file_name", to_optional_text)
    OVERVIEW_MAP_FILE_CONTENT = ("overview_map_file_content", to_optional_text)
    OVERVIEW_MAP_WIDTH = ("overview_map_width", to_number_or_none)
    OVERVIEW_MAP_HEIGHT = ("overview_map_height", to_number_or_none)
    PROJECT_TYPE = ("project_type", to_text)
    TOWN_CITY = ("town_city", to_text)
    IS_EJ_COMMUNITY = ("is_ej_community", to_tri_state)
    EJ_INFORMATION = ("ej_information", to_text)
    EJ_SUMMARY = ("ej_summary", to_text)
    ELIMINATES_REGULATOR_STATION = ("eliminates_regulator_station", to_tri_state)
    CONTRIBUTES_TO_REGULATOR_STATION_ELIMINATION = ("contributes_to_regulator_station_elimination", to_tri_state)
    REGULATOR_STATION_COMMENTS = ("regulator_station_comments", to_text)
    ANNUAL_HDD = ("annual_hdd", to_number_or_none)
    ANNUAL_HDD_BASIS = ("annual_hdd_basis", to_text)


class StreetField(_EntityField):
    NAME = ("name", to_text)
    # Resizes the segment list; handled by the store.
    NUMBER_OF_MAIN_SEGMENTS = ("number_of_main_segments", to_count)


class SegmentField(_EntityField):
    FROM_LOCATION = ("from_location", to_text)
    TO_LOCATION = ("to_location", to_text)
    DIAMETER = ("diameter", to_number_or_none)
    MATERIAL = ("material", to_text)
    LENGTH = ("length", to_number_or_none)
    MAIN_ID = ("main_id", to_text)
    DIMP_RISK_SCORE = ("dimp_risk_score", to_number_or_none)
    MAOP = ("maop", to_text)
    ESSENTIAL_STATUS = (
        "essential_status",
        partial(coerce_enum, EssentialStatus, default=EssentialStatus.NOT_SET),
    )
    LENGTH_TO_BE_REPLACED = ("length_to_be_replaced", to_number_or_none)
    REPLACEMENT_PIPE_DIAMETER = ("replacement_pipe_diameter", to_number_or_none)
    REPLACEMENT_PIPE_MATERIAL = ("replacement_pipe_material", to_text)
    REPLACEMENT_PIPE_METHOD = ("replacement_pipe_method", to_text)
    REPLACEMENT_PIPE_MAOP = ("replacement_pipe_maop", to_text)
    PRIMARY_PURPOSE = ("primary_purpose", partial(coerce_enum, PurposeOption, default=PurposeOption.NOT_SET))
    PRIMARY_PURPOSE_OTHER_REASON = ("primary_purpose_other_reason", to_text)
    PRIMARY_PURPOSE_EXPLANATION = ("primary_purpose_explanation", to_text)
    SECONDARY_PURPOSE = ("secondary_purpose", partial(coerce_enum, PurposeOption, default=PurposeOption.NOT_SET))
    SECONDARY_PURPOSE_OTHER_REASON = ("secondary_purpose_other_reason", to_text)
    SECONDARY_PURPOSE_EXPLANATION = ("secondary_purpose_explanation", to_text)
    DIAMETER_REDUCTION = (
        "diameter_reduction",
        partial(coerce_enum, DiameterReduction, default=DiameterReduction.NONE),
    )


class ServiceField(_EntityField):
    STREET_NAME = ("street_name", to_text)
    STREET_NUMBER = ("street_number", to_text)
    SERVICE_ID = ("service_id", to_text)
    DIAMETER = ("diameter", to_number_or_none)
    MATERIAL = ("material", to_text)
    LENGTH = ("length", to_number_or_none)
    # Switching this on also creates a branch service; handled by the store.
    IS_BRANCH_SERVICE = ("is_branch_service", to_flag)
    WORK_TYPE = ("work_type", partial(coerce_enum, ServiceWorkType, default=ServiceWorkType.NOT_SET))
    STRUCTURE_TYPE = ("structure_type", partial(coerce_enum, StructureType, default=StructureType.NOT_SET))
    STRUCTURE_TYPE_OTHER = ("structure_type_other", to_text)
    REPLACEMENT_DIAMETER = ("replacement_diameter", to_number_or_none)
    REPLACEMENT_MATERIAL = ("replacement_material", to_text)
    REPLACEMENT_LENGTH = ("replacement_length", to_number_or_none)
    REPLACEMENT_METHOD = ("replacement_method", to_text)


class MeterField(_EntityField):
    METER_NUMBER = ("meter_number", to_text)
    CUSTOMER_ACCOUNT_NUMBER = ("customer_account_number", to_text)
    UNIT_IDENTIFIER = ("unit_identifier", to_text)
    UDD_USAGE = ("udd_usage", to_number_or_none)
    BASE_USAGE = ("base_usage", to_number_or_none)


def resolve_field(field_cls: type[_EntityField], field: Any) -> _EntityField:
    """Return the selector for `field`, accepting a member, its name or its attribute name."""

    if isinstance(field, field_cls):
        return field
    if isinstance(field, str):
        normalized: str = field.strip()
        for member in field_cls:
            if normalized in (member.name, member.attribute):
                return member
    raise ValueError(f"'{field}' is not an editable {field_cls.__name__.removesuffix('Field').lower()} field")


def apply_field(entity: object, field: _EntityField, value: Any) -> Any:
    """Coerce `value` for `field`, store it on `entity` and return the stored value."""

    coerced: Any = field.coerce(value)
    setattr(entity, field.attribute, coerced)
    return coerced

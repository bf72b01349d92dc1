"""Project container that holds the streets of a replacement plan."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator
from _collections_abc import Mapping

from loguru import logger

from .base import Validatable, child_mappings, entity_id, street_list
from .street import Street
from .main_segment import MainSegment
from ..type_helpers import to_number_or_none, to_optional_text, to_text, to_tri_state

DEFAULT_PROJECT_TYPE = "GSEP (Gas System Enhancement Plan)"
DEFAULT_ANNUAL_HDD = 5800
DEFAULT_ANNUAL_HDD_BASIS = "(Based on 2020–2025 Average for Worcester Massachusetts)"


@dataclass(slots=True)
class Project(Validatable):
    """A gas main replacement project and every street it touches.

    `total_replaced_length` and `total_annual_usage` are cached aggregates; call
    `recalc_project_totals` before trusting them. `total_abandoned_length` is
    carried for file compatibility and is never computed.
    """

    UNTITLED: ClassVar[str] = "Untitled Project"
    id: int
    project_name: str = ""
    project_number: float | None = None
    revision_number: str = ""
    revision_date: str | None = None
    project_description: str = ""
    project_start_date: str | None = None
    project_end_date: str | None = None
    project_cost: float | None = None
    overview_map_file_name: str | None = None
    overview_map_file_content: str | None = None
    overview_map_width: float | None = None
    overview_map_height: float | None = None
    project_type: str = DEFAULT_PROJECT_TYPE
    town_city: str = ""
    is_ej_community: bool | None = None
    ej_information: str = ""
    ej_summary: str = ""
    eliminates_regulator_station: bool | None = None
    contributes_to_regulator_station_elimination: bool | None = None
    regulator_station_comments: str = ""
    number_of_streets: int = 0
    streets: list[Street] = field(default_factory=street_list)
    annual_hdd: float = DEFAULT_ANNUAL_HDD
    annual_hdd_basis: str = DEFAULT_ANNUAL_HDD_BASIS
    total_abandoned_length: float | None = None
    total_replaced_length: float | None = None
    total_annual_usage: float | None = None

    def describe(self) -> str:
        return f"Project(id={self.id}, name={self.project_name or '<untitled>'}, streets={len(self.streets)})"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    @property
    def display_name(self) -> str:
        return self.project_name or self.UNTITLED

    def validate(self, prefix: str = "") -> list[str]:
        errors: list[str] = []
        if not self.project_name.strip():
            errors.append(f"{prefix}Project name is required.")
        for index, street in enumerate(self.streets, start=1):
            street_prefix: str = f"{prefix}Street #{index} ({street.name or 'unnamed'}): "
            errors.extend(street.validate(street_prefix))
        return errors

    def add_street(self, street: Street) -> Street:
        self.streets.append(street)
        self.number_of_streets = len(self.streets)
        logger.debug(
            "Added street {street} to project {project}", street=street.id, project=self.project_name or "<untitled>"
        )
        return street

    def remove_street(self, street: Street) -> None:
        self.streets.remove(street)
        self.number_of_streets = len(self.streets)
        logger.debug(
            "Removed street {street} from project {project}",
            street=street.id,
            project=self.project_name or "<untitled>",
        )

    def iter_segments(self) -> Iterator[MainSegment]:
        for street in self.streets:
            yield from street.main_segments

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "projectNumber": self.project_number,
            "projectName": self.project_name,
            "revisionNumber": self.revision_number,
            "revisionDate": self.revision_date,
            "projectDescription": self.project_description,
            "projectStartDate": self.project_start_date,
            "projectEndDate": self.project_end_date,
            "projectCost": self.project_cost,
            "overviewMapFileName": self.overview_map_file_name,
            "overviewMapFileContent": self.overview_map_file_content,
            "overviewMapWidth": self.overview_map_width,
            "overviewMapHeight": self.overview_map_height,
            "projectType": self.project_type,
            "townCity": self.town_city,
            "isEJCommunity": self.is_ej_community,
            "ejInformation": self.ej_information,
            "ejSummary": self.ej_summary,
            "eliminatesRegulatorStation": self.eliminates_regulator_station,
            "contributesToRegulatorStationElimination": self.contributes_to_regulator_station_elimination,
            "regulatorStationComments": self.regulator_station_comments,
            "numberOfStreets": self.number_of_streets,
            "streets": [street.to_dict() for street in self.streets],
            "annualHDD": self.annual_hdd,
            "annualHDDBasis": self.annual_hdd_basis,
            "totalAbandonedLength": self.total_abandoned_length,
            "totalReplacedLength": self.total_replaced_length,
            "totalAnnualUsage": self.total_annual_usage,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Project":
        identifier: int = entity_id(data, context="Project")
        streets: list[Street] = [
            Street.from_dict(raw) for raw in child_mappings(data.get("streets"), context=f"Project {identifier} streets")
        ]
        annual_hdd: float | None = to_number_or_none(data.get("annualHDD"))
        return cls(
            id=identifier,
            project_name=to_text(data.get("projectName")),
            project_number=to_number_or_none(data.get("projectNumber")),
            revision_number=to_text(data.get("revisionNumber")),
            revision_date=to_optional_text(data.get("revisionDate")),
            project_description=to_text(data.get("projectDescription")),
            project_start_date=to_optional_text(data.get("projectStartDate")),
            project_end_date=to_optional_text(data.get("projectEndDate")),
            project_cost=to_number_or_none(data.get("projectCost")),
            overview_map_file_name=to_optional_text(data.get("overviewMapFileName")),
            overview_map_file_content=to_optional_text(data.get("overviewMapFileContent")),
            overview_map_width=to_number_or_none(data.get("overviewMapWidth")),
            overview_map_height=to_number_or_none(data.get("overviewMapHeight")),
            project_type=to_text(data.get("projectType", DEFAULT_PROJECT_TYPE)),
            town_city=to_text(data.get("townCity")),
            is_ej_community=to_tri_state(data.get("isEJCommunity")),
            ej_information=to_text(data.get("ejInformation")),
            ej_summary=to_text(data.get("ejSummary")),
            eliminates_regulator_station=to_tri_state(data.get("eliminatesRegulatorStation")),
            contributes_to_regulator_station_elimination=to_tri_state(
                data.get("contributesToRegulatorStationElimination")
            ),
            regulator_station_comments=to_text(data.get("regulatorStationComments")),
            number_of_streets=len(streets),
            streets=streets,
            annual_hdd=annual_hdd if annual_hdd is not None else DEFAULT_ANNUAL_HDD,
            annual_hdd_basis=to_text(data.get("annualHDDBasis", DEFAULT_ANNUAL_HDD_BASIS)),
            total_abandoned_length=to_number_or_none(data.get("totalAbandonedLength")),
            total_replaced_length=to_number_or_none(data.get("totalReplacedLength")),
            total_annual_usage=to_number_or_none(data.get("totalAnnualUsage")),
        )

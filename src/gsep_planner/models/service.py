"""Service line definition, optionally a branch of a sibling service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from _collections_abc import Mapping

from loguru import logger

from .base import Validatable, child_mappings, entity_id, meter_list, optional_entity_id
from .meter import Meter
from ..type_helpers import (
    ServiceWorkType,
    StructureType,
    coerce_enum,
    to_number_or_none,
    to_text,
    to_tri_state,
)


@dataclass(slots=True)
class Service(Validatable):
    """
    A service line running from a main segment to a structure.

    `parent_service_id` is a weak reference to another service in the same
    segment. When it is set this service is a branch of that parent; it does
    not own the parent and the parent does not own it.
    """

    id: int
    street_name: str = ""
    street_number: str = ""
    service_id: str = ""
    diameter: float | None = None
    material: str = ""
    length: float | None = None
    is_branch_service: bool = False
    parent_service_id: int | None = None
    work_type: ServiceWorkType = ServiceWorkType.NOT_SET
    structure_type: StructureType = StructureType.NOT_SET
    structure_type_other: str = ""
    number_of_meters: int = 0
    meters: list[Meter] = field(default_factory=meter_list)
    replacement_diameter: float | None = None
    replacement_material: str = ""
    replacement_length: float | None = None
    replacement_method: str = ""

    @property
    def address(self) -> str:
        return f"{self.street_number} {self.street_name}".strip()

    @property
    def is_branch(self) -> bool:
        return self.parent_service_id is not None

    def describe(self) -> str:
        parent: str = f", parent={self.parent_service_id}" if self.is_branch else ""
        return f"Service(id={self.id}, address={self.address or '<unset>'}, meters={len(self.meters)}{parent})"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def validate(self, prefix: str = "") -> list[str]:
        errors: list[str] = []
        if self.structure_type is StructureType.OTHER and not self.structure_type_other.strip():
            errors.append(f"{prefix}Describe the structure type when 'Other user defined' is selected.")
        return errors

    def add_meter(self, meter: Meter) -> Meter:
        """Append a meter and refresh the meter count mirror."""

        self.meters.append(meter)
        self.number_of_meters = len(self.meters)
        logger.debug("Added meter {meter} to service {service}", meter=meter.id, service=self.id)
        return meter

    def remove_meter(self, meter: Meter) -> None:
        self.meters.remove(meter)
        self.number_of_meters = len(self.meters)
        logger.debug("Removed meter {meter} from service {service}", meter=meter.id, service=self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "streetName": self.street_name,
            "streetNumber": self.street_number,
            "serviceId": self.service_id,
            "diameter": self.diameter,
            "material": self.material,
            "length": self.length,
            "isBranchService": self.is_branch_service,
            "parentServiceId": self.parent_service_id,
            "workType": self.work_type.value,
            "structureType": self.structure_type.value,
            "structureTypeOther": self.structure_type_other,
            "numberOfMeters": self.number_of_meters,
            "meters": [meter.to_dict() for meter in self.meters],
            "replacementDiameter": self.replacement_diameter,
            "replacementMaterial": self.replacement_material,
            "replacementLength": self.replacement_length,
            "replacementMethod": self.replacement_method,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Service":
        identifier: int = entity_id(data, context="Service")
        meters: list[Meter] = [
            Meter.from_dict(raw) for raw in child_mappings(data.get("meters"), context=f"Service {identifier} meters")
        ]
        return cls(
            id=identifier,
            street_name=to_text(data.get("streetName")),
            street_number=to_text(data.get("streetNumber")),
            service_id=to_text(data.get("serviceId")),
            diameter=to_number_or_none(data.get("diameter")),
            material=to_text(data.get("material")),
            length=to_number_or_none(data.get("length")),
            is_branch_service=bool(to_tri_state(data.get("isBranchService"))),
            parent_service_id=optional_entity_id(
                data.get("parentServiceId"), context=f"Service {identifier} parentServiceId"
            ),
            work_type=coerce_enum(ServiceWorkType, data.get("workType"), default=ServiceWorkType.NOT_SET),
            structure_type=coerce_enum(StructureType, data.get("structureType"), default=StructureType.NOT_SET),
            structure_type_other=to_text(data.get("structureTypeOther")),
            number_of_meters=len(meters),
            meters=meters,
            replacement_diameter=to_number_or_none(data.get("replacementDiameter")),
            replacement_material=to_text(data.get("replacementMaterial")),
            replacement_length=to_number_or_none(data.get("replacementLength")),
            replacement_method=to_text(data.get("replacementMethod")),
        )

"""Main pipe segment: the existing run, its replacement, and its services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable
from _collections_abc import Mapping

from loguru import logger

from .base import Validatable, child_mappings, entity_id, service_list
from .service import Service
from ..type_helpers import (
    DiameterReduction,
    EssentialStatus,
    PurposeOption,
    coerce_enum,
    to_number_or_none,
    to_text,
)


@dataclass(slots=True)
class MainSegment(Validatable):
    """An existing main run between two locations and its planned replacement."""

    id: int
    from_location: str = ""
    to_location: str = ""
    diameter: float | None = None
    material: str = ""
    length: float | None = None
    main_id: str = ""
    dimp_risk_score: float | None = None
    maop: str = ""
    essential_status: EssentialStatus = EssentialStatus.NOT_SET
    length_to_be_replaced: float | None = None
    replacement_pipe_diameter: float | None = None
    replacement_pipe_material: str = ""
    replacement_pipe_method: str = ""
    replacement_pipe_maop: str = ""
    number_of_services: int = 0
    services: list[Service] = field(default_factory=service_list)
    primary_purpose: PurposeOption = PurposeOption.NOT_SET
    primary_purpose_other_reason: str = ""
    primary_purpose_explanation: str = ""
    secondary_purpose: PurposeOption = PurposeOption.NOT_SET
    secondary_purpose_other_reason: str = ""
    secondary_purpose_explanation: str = ""
    diameter_reduction: DiameterReduction = DiameterReduction.NONE

    def describe(self) -> str:
        return (
            f"MainSegment(id={self.id}, main_id={self.main_id or '<unset>'}, "
            f"from={self.from_location or '?'}, to={self.to_location or '?'}, services={len(self.services)})"
        )

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def validate(self, prefix: str = "") -> list[str]:
        errors: list[str] = []
        if self.primary_purpose is PurposeOption.OTHER and not self.primary_purpose_other_reason.strip():
            errors.append(f"{prefix}Specify the primary purpose when 'Other' is selected.")
        if self.secondary_purpose is PurposeOption.OTHER and not self.secondary_purpose_other_reason.strip():
            errors.append(f"{prefix}Specify the secondary purpose when 'Other' is selected.")
        for index, service in enumerate(self.services, start=1):
            errors.extend(service.validate(f"{prefix}Service #{index}: "))
        return errors

    def service_position(self, service_id: int) -> int:
        """Return the list position of a service, or -1 when it is not on this segment."""

        for position, service in enumerate(self.services):
            if service.id == service_id:
                return position
        return -1

    def add_service(self, service: Service, *, after: Service | None = None) -> Service:
        """Append a service, or insert it directly after `after` so branches stay next to their parent."""

        position: int = self.service_position(after.id) if after is not None else -1
        if position > -1:
            self.services.insert(position + 1, service)
        else:
            self.services.append(service)
        self.number_of_services = len(self.services)
        logger.debug("Added service {service} to segment {segment}", service=service.id, segment=self.id)
        return service

    def remove_services(self, service_ids: Iterable[int]) -> list[Service]:
        """Drop every service whose id is listed and return the removed services."""

        doomed: set[int] = set(service_ids)
        removed: list[Service] = [service for service in self.services if service.id in doomed]
        self.services = [service for service in self.services if service.id not in doomed]
        self.number_of_services = len(self.services)
        logger.debug(
            "Removed services {ids} from segment {segment}", ids=[s.id for s in removed], segment=self.id
        )
        return removed

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fromLocation": self.from_location,
            "toLocation": self.to_location,
            "diameter": self.diameter,
            "material": self.material,
            "length": self.length,
            "mainId": self.main_id,
            "dimpRiskScore": self.dimp_risk_score,
            "maop": self.maop,
            "essentialStatus": self.essential_status.value,
            "lengthToBeReplaced": self.length_to_be_replaced,
            "replacementPipeDiameter": self.replacement_pipe_diameter,
            "replacementPipeMaterial": self.replacement_pipe_material,
            "replacementPipeMethod": self.replacement_pipe_method,
            "replacementPipeMaop": self.replacement_pipe_maop,
            "numberOfServices": self.number_of_services,
            "services": [service.to_dict() for service in self.services],
            "primaryPurpose": self.primary_purpose.value,
            "primaryPurposeOtherReason": self.primary_purpose_other_reason,
            "primaryPurposeExplanation": self.primary_purpose_explanation,
            "secondaryPurpose": self.secondary_purpose.value,
            "secondaryPurposeOtherReason": self.secondary_purpose_other_reason,
            "secondaryPurposeExplanation": self.secondary_purpose_explanation,
            "diameterReduction": self.diameter_reduction.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MainSegment":
        identifier: int = entity_id(data, context="Main segment")
        services: list[Service] = [
            Service.from_dict(raw)
            for raw in child_mappings(data.get("services"), context=f"Main segment {identifier} services")
        ]
        return cls(
            id=identifier,
            from_location=to_text(data.get("fromLocation")),
            to_location=to_text(data.get("toLocation")),
            diameter=to_number_or_none(data.get("diameter")),
            material=to_text(data.get("material")),
            length=to_number_or_none(data.get("length")),
            main_id=to_text(data.get("mainId")),
            dimp_risk_score=to_number_or_none(data.get("dimpRiskScore")),
            maop=to_text(data.get("maop")),
            essential_status=coerce_enum(EssentialStatus, data.get("essentialStatus"), default=EssentialStatus.NOT_SET),
            length_to_be_replaced=to_number_or_none(data.get("lengthToBeReplaced")),
            replacement_pipe_diameter=to_number_or_none(data.get("replacementPipeDiameter")),
            replacement_pipe_material=to_text(data.get("replacementPipeMaterial")),
            replacement_pipe_method=to_text(data.get("replacementPipeMethod")),
            replacement_pipe_maop=to_text(data.get("replacementPipeMaop")),
            number_of_services=len(services),
            services=services,
            primary_purpose=coerce_enum(PurposeOption, data.get("primaryPurpose"), default=PurposeOption.NOT_SET),
            primary_purpose_other_reason=to_text(data.get("primaryPurposeOtherReason")),
            primary_purpose_explanation=to_text(data.get("primaryPurposeExplanation")),
            secondary_purpose=coerce_enum(PurposeOption, data.get("secondaryPurpose"), default=PurposeOption.NOT_SET),
            secondary_purpose_other_reason=to_text(data.get("secondaryPurposeOtherReason")),
            secondary_purpose_explanation=to_text(data.get("secondaryPurposeExplanation")),
            diameter_reduction=coerce_enum(
                DiameterReduction, data.get("diameterReduction"), default=DiameterReduction.NONE
            ),
        )

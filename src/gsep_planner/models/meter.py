"""Gas meter record attached to a service line."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from _collections_abc import Mapping

from .base import Validatable, entity_id
from ..type_helpers import to_number_or_none, to_text


@dataclass(slots=True)
class Meter(Validatable):
    """Leaf of the plan tree: one customer meter and its consumption."""

    id: int
    meter_number: str = ""
    customer_account_number: str = ""
    unit_identifier: str = ""
    udd_usage: float | None = None
    base_usage: float | None = None

    def describe(self) -> str:
        return f"Meter(id={self.id}, number={self.meter_number or '<unset>'}, annual={self.udd_usage})"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def validate(self, prefix: str = "") -> list[str]:
        return []

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "meterNumber": self.meter_number,
            "customerAccountNumber": self.customer_account_number,
            "unitIdentifier": self.unit_identifier,
            "uddUsage": self.udd_usage,
            "baseUsage": self.base_usage,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Meter":
        return cls(
            id=entity_id(data, context="Meter"),
            meter_number=to_text(data.get("meterNumber")),
            customer_account_number=to_text(data.get("customerAccountNumber")),
            unit_identifier=to_text(data.get("unitIdentifier")),
            udd_usage=to_number_or_none(data.get("uddUsage")),
            base_usage=to_number_or_none(data.get("baseUsage")),
        )

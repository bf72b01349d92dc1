"""Street definition holding the main segments replaced along it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence
from _collections_abc import Mapping

from loguru import logger

from .base import (
    Validatable,
    child_mappings,
    entity_id,
    normalize_mapping,
    normalize_sequence,
    segment_list,
    string_list,
)
from .main_segment import MainSegment
from ..type_helpers import LeakDetectionMethod, to_text


@dataclass(slots=True)
class LeakDetectionEvaluation:
    """Reasons, per advanced repair method, why the method was not used on a street."""

    cisbot_not_used_reasons: list[str] = field(default_factory=string_list)
    relining_not_used_reasons: list[str] = field(default_factory=string_list)
    keyhole_not_used_reasons: list[str] = field(default_factory=string_list)
    sei_not_used_reasons: list[str] = field(default_factory=string_list)

    _ATTRIBUTES = {
        LeakDetectionMethod.CISBOT: "cisbot_not_used_reasons",
        LeakDetectionMethod.RELINING: "relining_not_used_reasons",
        LeakDetectionMethod.KEYHOLE: "keyhole_not_used_reasons",
        LeakDetectionMethod.SEI: "sei_not_used_reasons",
    }

    def reasons(self, method: LeakDetectionMethod) -> list[str]:
        return getattr(self, self._ATTRIBUTES[method])

    def set_reasons(self, method: LeakDetectionMethod, reasons: Sequence[str]) -> None:
        setattr(self, self._ATTRIBUTES[method], [str(reason) for reason in reasons])

    def has_reasons(self) -> bool:
        return any(self.reasons(method) for method in LeakDetectionMethod)

    def to_dict(self) -> dict[str, list[str]]:
        return {method.value: list(self.reasons(method)) for method in LeakDetectionMethod}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LeakDetectionEvaluation":
        evaluation = cls()
        for method in LeakDetectionMethod:
            evaluation.set_reasons(method, normalize_sequence(data.get(method.value)))
        return evaluation


@dataclass(slots=True)
class Street(Validatable):
    """A street within a project and the main segments planned along it."""

    id: int
    name: str = ""
    number_of_main_segments: int = 0
    main_segments: list[MainSegment] = field(default_factory=segment_list)
    advanced_leak_detection_evaluation: LeakDetectionEvaluation = field(default_factory=LeakDetectionEvaluation)

    def describe(self) -> str:
        return f"Street(id={self.id}, name={self.name or '<unnamed>'}, segments={len(self.main_segments)})"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return self.describe()

    def validate(self, prefix: str = "") -> list[str]:
        errors: list[str] = []
        if not self.name.strip():
            errors.append(f"{prefix}Street name is required.")
        for index, segment in enumerate(self.main_segments, start=1):
            errors.extend(segment.validate(f"{prefix}Main Segment #{index}: "))
        return errors

    def add_segment(self, segment: MainSegment) -> MainSegment:
        self.main_segments.append(segment)
        self.number_of_main_segments = len(self.main_segments)
        logger.debug("Added segment {segment} to street {street}", segment=segment.id, street=self.id)
        return segment

    def remove_segment(self, segment: MainSegment) -> None:
        self.main_segments.remove(segment)
        self.number_of_main_segments = len(self.main_segments)
        logger.debug("Removed segment {segment} from street {street}", segment=segment.id, street=self.id)

    def truncate_segments(self, count: int) -> list[MainSegment]:
        """Keep the first `count` segments and return the ones that were dropped."""

        dropped: list[MainSegment] = self.main_segments[count:]
        del self.main_segments[count:]
        self.number_of_main_segments = len(self.main_segments)
        return dropped

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "numberOfMainSegments": self.number_of_main_segments,
            "mainSegments": [segment.to_dict() for segment in self.main_segments],
            "advancedLeakDetectionEvaluation": self.advanced_leak_detection_evaluation.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Street":
        identifier: int = entity_id(data, context="Street")
        segments: list[MainSegment] = [
            MainSegment.from_dict(raw)
            for raw in child_mappings(data.get("mainSegments"), context=f"Street {identifier} mainSegments")
        ]
        return cls(
            id=identifier,
            name=to_text(data.get("name")),
            number_of_main_segments=len(segments),
            main_segments=segments,
            advanced_leak_detection_evaluation=LeakDetectionEvaluation.from_dict(
                normalize_mapping(data.get("advancedLeakDetectionEvaluation"))
            ),
        )

"""Enums and coercion helpers shared between the plan domain models."""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, TypeVar

TEnum = TypeVar("TEnum", bound=Enum)


def coerce_enum(enum_cls: type[TEnum], value: Any, *, default: TEnum) -> TEnum:
    """Return enum member from the provided value, accepting names/values."""

    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        try:
            return enum_cls[value]
        except KeyError:
            pass
    return enum_cls(value)


def to_number_or_none(value: Any) -> float | None:
    """
    Convert form input into a finite number, or None when it is blank or not numeric.

    Booleans are rejected so that tri-state flags never leak into numeric fields.
    """

    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number: float = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if not math.isfinite(number):
        return None
    return int(number) if isinstance(value, int) else number


def to_text(value: Any) -> str:
    """Return a string for free-text fields, mapping None to an empty string."""

    return "" if value is None else str(value)


def to_optional_text(value: Any) -> str | None:
    """Return a string or None for optional text fields such as dates. An empty string is kept as is."""

    return None if value is None else str(value)


def to_tri_state(value: Any) -> bool | None:
    """Interpret yes/no/unknown answers, accepting booleans and their string forms."""

    if value is None or isinstance(value, bool):
        return value
    normalized: str = str(value).strip().lower()
    if normalized in ("true", "yes", "1"):
        return True
    if normalized in ("false", "no", "0"):
        return False
    if normalized in ("", "null", "none", "n/a"):
        return None
    raise ValueError(f"Unsupported yes/no value '{value}'")


def format_tri_state(value: bool | None, *, unknown: str = "") -> str:
    """Render a tri-state flag as Yes/No, or `unknown` when it was never answered."""

    if value is None:
        return unknown
    return "Yes" if value else "No"


class _DescribedStrEnum(str, Enum):
    """Base class for option enums whose stored value differs from the display label."""

    _display_label: str

    def __new__(cls, value: str, label: str) -> "_DescribedStrEnum":
        obj: _DescribedStrEnum = str.__new__(cls, value)
        obj._value_ = value
        obj._display_label = label
        return obj

    @property
    def label(self) -> str:
        return self._display_label


class EssentialStatus(str, Enum):
    """Essential/non-essential classification of an existing main."""

    NOT_SET = ""
    ESSENTIAL = "essential"
    NON_ESSENTIAL = "nonEssential"


class PurposeOption(str, Enum):
    """Reasons for replacing a main segment (used for primary and secondary purpose)."""

    NOT_SET = ""
    RISK_SCORE = "Risk Score"
    MUNICIPAL_IMPROVEMENT = "Municipal Improvement Project"
    NO_SUPPLY_UPSTREAM = "No supply due to upstream replacement"
    OPPORTUNISTIC = "Opportunistic"
    OTHER = "Other (please specify)"


class ServiceWorkType(str, Enum):
    """Work performed on a service line."""

    NOT_SET = ""
    FULL_REPLACEMENT = "Full Replacement"
    PARTIAL_REPLACEMENT = "Partial Replacement"
    ABANDONMENT_ONLY = "Abandonment Only"
    TIE_OVER = "Tie Over to New Main Segment"

    @property
    def uses_replacement_pipe(self) -> bool:
        return self in (ServiceWorkType.FULL_REPLACEMENT, ServiceWorkType.PARTIAL_REPLACEMENT)

    @property
    def uses_replacement_method(self) -> bool:
        return self in (ServiceWorkType.FULL_REPLACEMENT, ServiceWorkType.ABANDONMENT_ONLY)


class StructureType(str, Enum):
    """Building served by a service line."""

    NOT_SET = ""
    RESIDENTIAL = "Residential"
    RESIDENTIAL_DUPLEX = "Residential Duplex"
    RESIDENTIAL_TRIPLEX = "Residential Triplex"
    RESIDENTIAL_QUADPLEX = "Residential Quadplex"
    SMALL_MULTI_RESIDENTIAL = "Small Multi Residential Apartment Building"
    LARGE_MULTI_RESIDENTIAL = "Large Multi Residential Apartment Building"
    SMALL_COMMERCIAL = "Small Commercial Building"
    LARGE_COMMERCIAL = "Large Commercial Building"
    SMALL_RESTAURANT = "Small Restaurant"
    LARGE_RESTAURANT = "Large Restaurant"
    SMALL_INDUSTRIAL = "Small Industrial Building"
    LARGE_INDUSTRIAL = "Large Industrial Building"
    OTHER = "Other user defined"


class DiameterReduction(_DescribedStrEnum):
    """Main diameter reductions taken to reduce standard costs."""

    NONE = "", ""
    EIGHT_TO_SIX = "8_to_6", '8" to 6"'
    EIGHT_TO_FOUR = "8_to_4", '8" to 4"'
    EIGHT_TO_TWO = "8_to_2", '8" to 2"'
    SIX_TO_FOUR = "6_to_4", '6" to 4"'
    SIX_TO_TWO = "6_to_2", '6" to 2"'
    FOUR_TO_TWO = "4_to_2", '4" to 2"'


class LeakDetectionMethod(_DescribedStrEnum):
    """Advanced leak repair methods a street is evaluated against.

    The value is the JSON key holding the list of reasons the method was not used.
    """

    CISBOT = "cisbotNotUsedReasons", "CISBOT"
    RELINING = "reliningNotUsedReasons", "Internal Relining / Sleeving"
    KEYHOLE = "keyholeNotUsedReasons", "Targeted Keyhole Leak Repair"
    SEI = "seiNotUsedReasons", "Targeted SEI Leak Repair"

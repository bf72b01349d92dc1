"""Shared base helpers for the plan model dataclasses."""

from __future__ import annotations
from abc import abstractmethod
from typing import Any, Mapping, Sequence, TYPE_CHECKING, cast
from _collections_abc import Mapping as ABCMapping, Sequence as ABCSequence
from loguru import logger
from ..classes_references import ImportFormatError, ValidationError

if TYPE_CHECKING:
    from .meter import Meter
    from .service import Service
    from .main_segment import MainSegment
    from .street import Street


class Validatable:
    """
    A mixin class that provides a required-field check for domain models.

    Classes that inherit from `Validatable` must implement the `validate` method.
    This mixin supplies the `assert_valid` helper, which invokes `validate` and
    raises a `ValidationError` if any hints are found. The hints mirror the
    "required" markers of the entry form; they never block editing or export.
    """

    def assert_valid(self, prefix: str = "") -> None:
        """
        Raise a `ValidationError` if the model is missing required fields.

        Args:
            prefix: An optional string to prepend to each validation error message.
        """
        errors: list[str] = self.validate(prefix=prefix)
        if errors:
            logger.debug("Validation failed for {model}: {errors}", model=self.__class__.__name__, errors=errors)
            raise ValidationError(errors)
        logger.debug("Validation succeeded for {model}.", model=self.__class__.__name__)

    @abstractmethod
    def validate(self, prefix: str) -> list[str]:
        """
        Return a list of missing-field hints, or an empty list if the model is complete.

        Args:
            prefix: A string to prepend to each message for context.
        """
        pass


def string_list() -> list[str]:
    """
    Return a new `list[str]`.

    This helper function is used as a `default_factory` in dataclasses to avoid
    the use of mutable default arguments.
    """

    return []


def meter_list() -> list["Meter"]:
    """Return a new list of `Meter` objects for dataclass defaults."""

    return []


def service_list() -> list["Service"]:
    """Return a new list of `Service` objects for dataclass defaults."""

    return []


def segment_list() -> list["MainSegment"]:
    """Return a new list of `MainSegment` objects for dataclass defaults."""

    return []


def street_list() -> list["Street"]:
    """Return a new list of `Street` objects for dataclass defaults."""

    return []


def normalize_sequence(value: Any) -> list[Any]:
    """Return a list or fall back to an empty list for non-sequence values."""

    if isinstance(value, ABCSequence) and not isinstance(value, (str, bytes)):
        return list(cast(Sequence[Any], value))
    return []


def normalize_mapping(value: Any) -> Mapping[str, Any]:
    """Return a mapping or an empty dict if the value is not mapping-like."""

    if isinstance(value, ABCMapping):
        return cast(Mapping[str, Any], value)
    return {}


def child_mappings(value: Any, *, context: str) -> list[Mapping[str, Any]]:
    """
    Return the child objects of a serialized entity.

    A missing or null list yields no children; anything else that is not a list
    of objects is rejected so a malformed file never loads half a tree.
    """
    if value is None:
        return []
    if not isinstance(value, ABCSequence) or isinstance(value, (str, bytes)):
        raise ImportFormatError(f"{context} must be a list.")
    children: list[Mapping[str, Any]] = []
    for raw in cast(Sequence[Any], value):
        if not isinstance(raw, ABCMapping):
            raise ImportFormatError(f"Entries of {context} must be objects.")
        children.append(cast(Mapping[str, Any], raw))
    return children


def entity_id(data: Mapping[str, Any], *, context: str) -> int:
    """Fetch the mandatory integer id of a serialized entity."""
    raw: Any = data.get("id")
    if isinstance(raw, bool) or not isinstance(raw, (int, float)) or int(raw) != raw:
        raise ImportFormatError(f"{context} is missing an integer 'id'.")
    return int(raw)


def optional_entity_id(value: Any, *, context: str) -> int | None:
    """Fetch an optional integer id reference such as `parentServiceId`."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or int(value) != value:
        raise ImportFormatError(f"{context} must be an integer id or null.")
    return int(value)

"""Core exception classes and references for gsep-planner."""
from _collections_abc import Sequence
from enum import Enum


class ReportViewMode(str, Enum):
    """On-screen renderings of a project report."""

    SUMMARY = "summary"
    TABLE = "table"


class PlanError(Exception):
    """Base class for errors raised by the plan store and its serializers."""


class ActiveProjectMissingError(PlanError):
    """Raised when an editor operation runs while no project is selected."""

    def __init__(self) -> None:
        super().__init__("No active project")


class EntityNotFoundError(PlanError, LookupError):
    """Raised when an entity id does not resolve inside the active project."""

    def __init__(self, kind: str, identifier: object, message: str | None = None) -> None:
        self.kind: str = kind
        self.identifier: object = identifier
        super().__init__(message or f"{kind} {identifier} not found")


class IndexNotFoundError(EntityNotFoundError):
    """Raised when a positional path does not resolve against the active project."""

    def __init__(self, kind: str, index: int) -> None:
        super().__init__(kind, index, f"{kind} at index {index} not found")


class ImportFormatError(PlanError, ValueError):
    """Raised when a plan file cannot be turned into a project list."""


class ValidationError(ValueError):
    """Exception raised when a model fails validation."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: list[str] = list(errors)
        message: str = "; ".join(self.errors) if self.errors else "Unknown validation error."
        super().__init__(message)

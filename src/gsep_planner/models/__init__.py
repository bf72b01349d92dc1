"""
Domain models that describe gas main replacement plans.

These data classes represent the ownership tree of a plan: projects own
streets, streets own main segments, segments own services and services own
meters. They provide a structured, in-memory representation that can be
serialized to or from the plan JSON file.
"""

from __future__ import annotations

from .base import Validatable
from .meter import Meter
from .service import Service
from .main_segment import MainSegment
from .street import LeakDetectionEvaluation, Street
from .project import Project

__all__: list[str] = [
    "Validatable",
    "Meter",
    "Service",
    "MainSegment",
    "LeakDetectionEvaluation",
    "Street",
    "Project",
]

"""Factories that build default-valued plan entities with fresh ids."""

from __future__ import annotations

from .ids import IdGenerator
from .models import MainSegment, Meter, Project, Service, Street


def create_meter(ids: IdGenerator) -> Meter:
    return Meter(id=ids.next_id())


def create_service(ids: IdGenerator, street_name: str = "") -> Service:
    """Return an empty service located on `street_name`."""

    return Service(id=ids.next_id(), street_name=street_name)


def create_main_segment(ids: IdGenerator) -> MainSegment:
    return MainSegment(id=ids.next_id())


def create_street(ids: IdGenerator) -> Street:
    return Street(id=ids.next_id())


def create_project(ids: IdGenerator, name: str) -> Project:
    """
    Return a new project named `name` that already holds one empty street.

    The project id is issued before the street id so ids grow from the root down.
    """
    project = Project(id=ids.next_id(), project_name=name)
    project.add_street(create_street(ids))
    return project

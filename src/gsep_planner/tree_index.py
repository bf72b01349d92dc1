"""Id lookup and branch relation for the plan tree."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from loguru import logger

from .models import MainSegment, Meter, Project, Service, Street

Entity = Union[Project, Street, MainSegment, Service, Meter]


class EntityKind(str, Enum):
    """Levels of the plan tree, named the way error messages refer to them."""

    PROJECT = "Project"
    STREET = "Street"
    SEGMENT = "Segment"
    SERVICE = "Service"
    METER = "Meter"


@dataclass(slots=True)
class IndexEntry:
    """Where an entity lives: its kind, the entity itself, its owner and its project."""

    kind: EntityKind
    entity: Entity
    owner_id: int | None
    project_id: int


class TreeIndex:
    """
    Maps every entity id to its `IndexEntry` and tracks branch services.

    The branch relation maps a parent service id to the ids of the services in
    the same segment whose `parent_service_id` points at it. A branch whose
    parent cannot be found in its own segment is an orphan: it stays in the
    tree but is not linked to anything.

    The index is kept current by the store; it never walks the tree on lookup.
    """

    def __init__(self) -> None:
        self._entries: dict[int, IndexEntry] = {}
        self._branches: dict[int, list[int]] = {}

    @classmethod
    def build(cls, projects: Iterable[Project]) -> "TreeIndex":
        """Index a whole project list, raising ValueError when an id repeats."""

        index = cls()
        for project in projects:
            index.add_project(project)
        return index

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entity_id: int) -> IndexEntry | None:
        return self._entries.get(entity_id)

    def branches_of(self, service_id: int) -> list[int]:
        return list(self._branches.get(service_id, ()))

    def add_project(self, project: Project) -> None:
        self._add(EntityKind.PROJECT, project, None, project.id)
        for street in project.streets:
            self.add_street(street, project.id)

    def add_street(self, street: Street, project_id: int) -> None:
        self._add(EntityKind.STREET, street, project_id, project_id)
        for segment in street.main_segments:
            self.add_segment(segment, street.id, project_id)

    def add_segment(self, segment: MainSegment, street_id: int, project_id: int) -> None:
        self._add(EntityKind.SEGMENT, segment, street_id, project_id)
        for service in segment.services:
            self.add_service(service, segment.id, project_id, link=False)
        for service in segment.services:
            self._link_to_parent(service, segment)

    def add_service(self, service: Service, segment_id: int, project_id: int, *, link: bool = True) -> None:
        self._add(EntityKind.SERVICE, service, segment_id, project_id)
        for meter in service.meters:
            self.add_meter(meter, service.id, project_id)
        if link:
            segment_entry: IndexEntry = self._entries[segment_id]
            self._link_to_parent(service, segment_entry.entity)  # type: ignore[arg-type]

    def add_meter(self, meter: Meter, service_id: int, project_id: int) -> None:
        self._add(EntityKind.METER, meter, service_id, project_id)

    def remove(self, entity: Entity) -> None:
        """Forget `entity` and everything it owns."""

        for child in _children(entity):
            self.remove(child)
        entry: IndexEntry | None = self._entries.pop(entity.id, None)
        if entry is None:
            return
        if entry.kind is EntityKind.SERVICE:
            self._branches.pop(entity.id, None)
            parent_id: int | None = entity.parent_service_id  # type: ignore[union-attr]
            if parent_id is not None and parent_id in self._branches:
                siblings: list[int] = self._branches[parent_id]
                if entity.id in siblings:
                    siblings.remove(entity.id)
                if not siblings:
                    del self._branches[parent_id]

    def reassign_project(self, street: Street, project_id: int) -> None:
        """Record that `street` and its subtree now belong to another project."""

        street_entry: IndexEntry = self._entries[street.id]
        street_entry.owner_id = project_id
        street_entry.project_id = project_id
        for segment in street.main_segments:
            self._entries[segment.id].project_id = project_id
            for service in segment.services:
                self._entries[service.id].project_id = project_id
                for meter in service.meters:
                    self._entries[meter.id].project_id = project_id

    def _add(self, kind: EntityKind, entity: Entity, owner_id: int | None, project_id: int) -> None:
        existing: IndexEntry | None = self._entries.get(entity.id)
        if existing is not None and existing.entity is not entity:
            raise ValueError(f"Duplicate id {entity.id} ({existing.kind.value} and {kind.value}).")
        self._entries[entity.id] = IndexEntry(kind=kind, entity=entity, owner_id=owner_id, project_id=project_id)

    def _link_to_parent(self, service: Service, segment: MainSegment) -> None:
        parent_id: int | None = service.parent_service_id
        if parent_id is None:
            return
        parent_entry: IndexEntry | None = self._entries.get(parent_id)
        if (
            parent_entry is None
            or parent_entry.kind is not EntityKind.SERVICE
            or parent_entry.owner_id != segment.id
            or parent_id == service.id
        ):
            logger.debug(
                "Service {service} references missing parent {parent}; treating it as top level",
                service=service.id,
                parent=parent_id,
            )
            return
        children: list[int] = self._branches.setdefault(parent_id, [])
        if service.id not in children:
            children.append(service.id)


def _children(entity: Entity) -> list[Entity]:
    if isinstance(entity, Project):
        return list(entity.streets)
    if isinstance(entity, Street):
        return list(entity.main_segments)
    if isinstance(entity, MainSegment):
        return list(entity.services)
    if isinstance(entity, Service):
        return list(entity.meters)
    return []

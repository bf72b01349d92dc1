"""Editable state of a plan: the project list, the active selection and dialog flags."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Sequence, cast

from loguru import logger

from .classes_references import (
    ActiveProjectMissingError,
    EntityNotFoundError,
    ImportFormatError,
    IndexNotFoundError,
    ReportViewMode,
)
from .factories import create_main_segment, create_meter, create_project, create_service, create_street
from .fields import (
    MeterField,
    ProjectField,
    SegmentField,
    ServiceField,
    StreetField,
    apply_field,
    resolve_field,
    to_count,
)
from .ids import IdGenerator, max_id_in
from .models import MainSegment, Meter, Project, Service, Street
from .options import LEAK_DETECTION_REASONS
from .tree_index import EntityKind, IndexEntry, TreeIndex
from .type_helpers import LeakDetectionMethod, coerce_enum


@dataclass(slots=True)
class UiState:
    """Open/closed flags for the dialogs that sit on top of the project editor."""

    is_creating_new_project: bool = True
    is_new_project_modal_open: bool = False
    is_delete_confirm_modal_open: bool = False
    project_to_delete_id: int | None = None
    is_move_street_modal_open: bool = False
    street_to_move_id: int | None = None
    is_report_modal_open: bool = False
    report_project_id: int | None = None
    report_view_mode: ReportViewMode = ReportViewMode.SUMMARY
    is_schema_modal_open: bool = False
    is_about_modal_open: bool = False


class PlanStore:
    """
    Owns the projects of a plan and applies every edit to them.

    Editor operations address entities by id and only see the active project:
    an id that belongs to another project is reported as not found, exactly like
    an id that does not exist. Every operation runs to completion before
    returning and leaves the count mirrors (`number_of_streets`,
    `number_of_main_segments`, `number_of_services`, `number_of_meters`) equal to
    the length of the list they describe.
    """

    def __init__(self, projects: Sequence[Project] | None = None, *, ids: IdGenerator | None = None) -> None:
        self.projects: list[Project] = []
        self.active_project_id: int | None = None
        self.ids: IdGenerator = ids if ids is not None else IdGenerator()
        self.ui: UiState = UiState()
        self._index: TreeIndex = TreeIndex()
        if projects:
            self.replace_projects(projects)

    def describe(self) -> str:
        return f"PlanStore(projects={len(self.projects)}, active={self.active_project_id})"

    def __repr__(self) -> str:
        return self.describe()

    # ---------- Projects ----------

    @property
    def active_project(self) -> Project | None:
        if self.active_project_id is None:
            return None
        entry: IndexEntry | None = self._index.get(self.active_project_id)
        if entry is None or entry.kind is not EntityKind.PROJECT:
            return None
        return cast(Project, entry.entity)

    def require_active_project(self) -> Project:
        project: Project | None = self.active_project
        if project is None:
            raise ActiveProjectMissingError()
        return project

    def get_project(self, project_id: int) -> Project:
        entry: IndexEntry | None = self._index.get(project_id)
        if entry is None or entry.kind is not EntityKind.PROJECT:
            raise EntityNotFoundError(EntityKind.PROJECT.value, project_id)
        return cast(Project, entry.entity)

    def select_project(self, project_id: int | None) -> None:
        if project_id is not None:
            self.get_project(project_id)
        self.active_project_id = project_id
        logger.debug("Active project set to {project}", project=project_id)

    def create_project(self, name: str) -> Project:
        """Append a new project (with one empty street) and make it active."""

        project: Project = create_project(self.ids, name)
        self.projects.append(project)
        self._index.add_project(project)
        self.active_project_id = project.id
        self.ui.is_creating_new_project = False
        self.ui.is_new_project_modal_open = False
        logger.debug("Created project {project}", project=project.describe())
        return project

    def delete_project(self, project_id: int) -> None:
        """
        Remove a project.

        When the removed project was active, the project just before it becomes
        active (the first one when it was at the top), or nothing when the list is empty.
        """
        project: Project = self.get_project(project_id)
        position: int = _identity_position(self.projects, project)
        del self.projects[position]
        self._index.remove(project)
        if self.active_project_id == project_id:
            if self.projects:
                self.active_project_id = self.projects[max(0, position - 1)].id
            else:
                self.active_project_id = None
        if self.ui.report_project_id == project_id:
            self.close_report()
        self.ui.is_creating_new_project = not self.projects
        logger.debug(
            "Deleted project {project}; active project is now {active}",
            project=project_id,
            active=self.active_project_id,
        )

    def update_project(self, field: ProjectField | str, value: Any) -> Any:
        project: Project = self.require_active_project()
        selector = resolve_field(ProjectField, field)
        stored: Any = apply_field(project, selector, value)
        logger.debug("Project {project}.{field} = {value!r}", project=project.id, field=selector.attribute, value=stored)
        return stored

    # ---------- Streets ----------

    def add_street(self) -> Street:
        project: Project = self.require_active_project()
        street: Street = project.add_street(create_street(self.ids))
        self._index.add_street(street, project.id)
        return street

    def remove_street(self, street_id: int) -> None:
        project: Project = self.require_active_project()
        street: Street = self.get_street(street_id)
        project.remove_street(street)
        self._index.remove(street)
        if self.ui.street_to_move_id == street_id:
            self.close_move_street()

    def update_street(self, street_id: int, field: StreetField | str, value: Any) -> Any:
        street: Street = self.get_street(street_id)
        selector = resolve_field(StreetField, field)
        if selector is StreetField.NUMBER_OF_MAIN_SEGMENTS:
            self.set_segment_count(street_id, value)
            return street.number_of_main_segments
        stored: Any = apply_field(street, selector, value)
        logger.debug("Street {street}.{field} = {value!r}", street=street.id, field=selector.attribute, value=stored)
        return stored

    def set_segment_count(self, street_id: int, count: Any) -> list[MainSegment]:
        """
        Grow or shrink the segment list of a street to `count` entries.

        Growing appends empty segments. Shrinking drops the trailing segments
        together with their services and meters; nothing of them survives.
        Returns the segments that were added or dropped.
        """
        street: Street = self.get_street(street_id)
        target: int = to_count(count)
        current: int = len(street.main_segments)
        changed: list[MainSegment] = []
        if target > current:
            project_id: int = cast(IndexEntry, self._index.get(street_id)).project_id
            for _ in range(target - current):
                segment: MainSegment = street.add_segment(create_main_segment(self.ids))
                self._index.add_segment(segment, street.id, project_id)
                changed.append(segment)
        elif target < current:
            changed = street.truncate_segments(target)
            for segment in changed:
                self._index.remove(segment)
        street.number_of_main_segments = len(street.main_segments)
        logger.debug(
            "Street {street} resized from {current} to {target} segments", street=street.id, current=current, target=target
        )
        return changed

    def set_leak_detection_reasons(
        self, street_id: int, method: LeakDetectionMethod | str, reasons: Iterable[str]
    ) -> list[str]:
        street: Street = self.get_street(street_id)
        selected: LeakDetectionMethod = coerce_enum(LeakDetectionMethod, method, default=LeakDetectionMethod.CISBOT)
        street.advanced_leak_detection_evaluation.set_reasons(selected, list(reasons))
        logger.debug("Street {street} {method} reasons updated", street=street.id, method=selected.name)
        return street.advanced_leak_detection_evaluation.reasons(selected)

    def toggle_leak_detection_reason(self, street_id: int, method: LeakDetectionMethod | str, reason: str) -> bool:
        """Tick or untick one listed reason; returns True when the reason is now selected."""

        street: Street = self.get_street(street_id)
        selected: LeakDetectionMethod = coerce_enum(LeakDetectionMethod, method, default=LeakDetectionMethod.CISBOT)
        if reason not in LEAK_DETECTION_REASONS[selected]:
            raise ValueError(f"'{reason}' is not a listed reason for {selected.label}")
        current: list[str] = street.advanced_leak_detection_evaluation.reasons(selected)
        if reason in current:
            current.remove(reason)
            return False
        current.append(reason)
        return True

    def move_street(self, street_id: int, target_project_id: int) -> Street:
        """Move a street of the active project, with everything it owns, to the end of another project."""

        source: Project = self.require_active_project()
        street: Street = self.get_street(street_id)
        target: Project = self.get_project(target_project_id)
        if target is not source:
            source.remove_street(street)
            target.add_street(street)
            self._index.reassign_project(street, target.id)
        self.close_move_street()
        logger.debug("Moved street {street} to project {project}", street=street.id, project=target.id)
        return street

    # ---------- Segments ----------

    def add_segment(self, street_id: int) -> MainSegment:
        return self.set_segment_count(street_id, len(self.get_street(street_id).main_segments) + 1)[0]

    def remove_segment(self, segment_id: int) -> None:
        segment: MainSegment = self.get_segment(segment_id)
        street: Street = self._owner(segment_id, Street)
        street.remove_segment(segment)
        self._index.remove(segment)

    def update_segment(self, segment_id: int, field: SegmentField | str, value: Any) -> Any:
        segment: MainSegment = self.get_segment(segment_id)
        selector = resolve_field(SegmentField, field)
        stored: Any = apply_field(segment, selector, value)
        logger.debug(
            "Segment {segment}.{field} = {value!r}", segment=segment.id, field=selector.attribute, value=stored
        )
        return stored

    # ---------- Services ----------

    def add_service(self, segment_id: int) -> Service:
        """Append a service to a segment, located on the street that owns the segment."""

        segment: MainSegment = self.get_segment(segment_id)
        street: Street = self._owner(segment_id, Street)
        service: Service = segment.add_service(create_service(self.ids, street.name))
        self._index.add_service(service, segment.id, self._project_id_of(segment_id))
        return service

    def add_branch_service(self, service_id: int) -> Service:
        """Create a branch of a service and place it directly after its parent."""

        parent: Service = self.get_service(service_id)
        segment: MainSegment = self._owner(service_id, MainSegment)
        branch: Service = create_service(self.ids, parent.street_name)
        branch.parent_service_id = parent.id
        segment.add_service(branch, after=parent)
        self._index.add_service(branch, segment.id, self._project_id_of(service_id))
        return branch

    def remove_service(self, service_id: int) -> list[Service]:
        """
        Remove a service and its direct branches from their segment.

        Branches of those branches are left in place; they become orphans.
        Returns every service that was removed.
        """
        service: Service = self.get_service(service_id)
        segment: MainSegment = self._owner(service_id, MainSegment)
        doomed: list[int] = [service.id, *self._index.branches_of(service.id)]
        removed: list[Service] = segment.remove_services(doomed)
        for item in removed:
            self._index.remove(item)
        return removed

    def update_service(self, service_id: int, field: ServiceField | str, value: Any) -> Any:
        service: Service = self.get_service(service_id)
        selector = resolve_field(ServiceField, field)
        had_branches: bool = service.is_branch_service
        stored: Any = apply_field(service, selector, value)
        if selector is ServiceField.IS_BRANCH_SERVICE and stored and not had_branches:
            self.add_branch_service(service_id)
        logger.debug(
            "Service {service}.{field} = {value!r}", service=service.id, field=selector.attribute, value=stored
        )
        return stored

    def branch_services(self, service_id: int) -> list[Service]:
        self.get_service(service_id)
        return [cast(Service, cast(IndexEntry, self._index.get(i)).entity) for i in self._index.branches_of(service_id)]

    # ---------- Meters ----------

    def add_meter(self, service_id: int) -> Meter:
        service: Service = self.get_service(service_id)
        meter: Meter = service.add_meter(create_meter(self.ids))
        self._index.add_meter(meter, service.id, self._project_id_of(service_id))
        return meter

    def remove_meter(self, meter_id: int) -> None:
        meter: Meter = self.get_meter(meter_id)
        service: Service = self._owner(meter_id, Service)
        service.remove_meter(meter)
        self._index.remove(meter)

    def update_meter(self, meter_id: int, field: MeterField | str, value: Any) -> Any:
        meter: Meter = self.get_meter(meter_id)
        selector = resolve_field(MeterField, field)
        stored: Any = apply_field(meter, selector, value)
        logger.debug("Meter {meter}.{field} = {value!r}", meter=meter.id, field=selector.attribute, value=stored)
        return stored

    # ---------- Lookups ----------

    def get_street(self, street_id: int) -> Street:
        return cast(Street, self._lookup(street_id, EntityKind.STREET))

    def get_segment(self, segment_id: int) -> MainSegment:
        return cast(MainSegment, self._lookup(segment_id, EntityKind.SEGMENT))

    def get_service(self, service_id: int) -> Service:
        return cast(Service, self._lookup(service_id, EntityKind.SERVICE))

    def get_meter(self, meter_id: int) -> Meter:
        return cast(Meter, self._lookup(meter_id, EntityKind.METER))

    def position_of(self, entity_id: int) -> int:
        """Return the current list position of an entity of the active project."""

        entry: IndexEntry | None = self._index.get(entity_id)
        if entry is None:
            raise EntityNotFoundError("Entity", entity_id)
        if entry.kind is EntityKind.PROJECT:
            return _identity_position(self.projects, entry.entity)
        entity = self._lookup(entity_id, entry.kind)
        owner = cast(IndexEntry, self._index.get(cast(int, entry.owner_id))).entity
        return _identity_position(_child_list(owner), entity)

    def resolve_path(
        self,
        street_index: int,
        segment_index: int | None = None,
        service_index: int | None = None,
        meter_index: int | None = None,
    ) -> int:
        """
        Translate a positional path in the active project into the id of the deepest entity named.

        Raises `IndexNotFoundError` for the first position that is out of range.
        """
        project: Project = self.require_active_project()
        street: Street = _at(project.streets, street_index, EntityKind.STREET)
        if segment_index is None:
            return street.id
        segment: MainSegment = _at(street.main_segments, segment_index, EntityKind.SEGMENT)
        if service_index is None:
            return segment.id
        service: Service = _at(segment.services, service_index, EntityKind.SERVICE)
        if meter_index is None:
            return service.id
        return _at(service.meters, meter_index, EntityKind.METER).id

    def _lookup(self, entity_id: int, kind: EntityKind) -> Any:
        project: Project = self.require_active_project()
        entry: IndexEntry | None = self._index.get(entity_id)
        if entry is None or entry.kind is not kind or entry.project_id != project.id:
            raise EntityNotFoundError(kind.value, entity_id)
        return entry.entity

    def _owner(self, entity_id: int, owner_type: type) -> Any:
        entry: IndexEntry = cast(IndexEntry, self._index.get(entity_id))
        owner: Any = cast(IndexEntry, self._index.get(cast(int, entry.owner_id))).entity
        if not isinstance(owner, owner_type):
            raise EntityNotFoundError(owner_type.__name__, entry.owner_id)
        return owner

    def _project_id_of(self, entity_id: int) -> int:
        return cast(IndexEntry, self._index.get(entity_id)).project_id

    # ---------- Bulk load ----------

    def replace_projects(self, projects: Sequence[Project]) -> None:
        """
        Swap in a freshly loaded project list.

        The new list is indexed before anything is touched, so a list with
        repeated ids raises `ImportFormatError` and leaves the store as it was.
        On success the id generator moves past every loaded id and the first
        project becomes active.
        """
        loaded: list[Project] = list(projects)
        try:
            index: TreeIndex = TreeIndex.build(loaded)
        except ValueError as exc:
            raise ImportFormatError(f"Invalid file format: {exc}") from exc
        self.ids.advance_to(max_id_in(loaded))
        self.projects[:] = loaded
        self._index = index
        self.active_project_id = loaded[0].id if loaded else None
        self.ui.is_creating_new_project = not loaded
        if self.ui.report_project_id is not None and self.ui.report_project_id not in index:
            self.close_report()
        self.close_delete_confirm()
        self.close_move_street()
        logger.debug("Loaded {count} projects ({entities} entities)", count=len(loaded), entities=len(index))

    # ---------- Dialogs ----------

    def open_new_project_dialog(self) -> None:
        self.ui.is_new_project_modal_open = True

    def close_new_project_dialog(self) -> None:
        self.ui.is_new_project_modal_open = False

    def open_delete_confirm(self, project_id: int) -> None:
        self.ui.is_delete_confirm_modal_open = True
        self.ui.project_to_delete_id = project_id

    def close_delete_confirm(self) -> None:
        self.ui.is_delete_confirm_modal_open = False
        self.ui.project_to_delete_id = None

    def confirm_delete_project(self) -> None:
        """Delete the project named by the confirmation dialog, if it still exists, and close the dialog."""

        project_id: int | None = self.ui.project_to_delete_id
        if project_id is not None and project_id in self._index:
            self.delete_project(project_id)
        self.close_delete_confirm()

    def open_move_street(self, street_id: int) -> None:
        self.get_street(street_id)
        self.ui.is_move_street_modal_open = True
        self.ui.street_to_move_id = street_id

    def close_move_street(self) -> None:
        self.ui.is_move_street_modal_open = False
        self.ui.street_to_move_id = None

    def open_report(self, project_id: int) -> None:
        self.get_project(project_id)
        self.ui.is_report_modal_open = True
        self.ui.report_project_id = project_id
        self.ui.report_view_mode = ReportViewMode.SUMMARY

    def close_report(self) -> None:
        self.ui.is_report_modal_open = False
        self.ui.report_project_id = None

    def set_report_view_mode(self, mode: ReportViewMode | str) -> None:
        self.ui.report_view_mode = coerce_enum(ReportViewMode, mode, default=ReportViewMode.SUMMARY)

    @property
    def report_project(self) -> Project | None:
        if self.ui.report_project_id is None:
            return None
        entry: IndexEntry | None = self._index.get(self.ui.report_project_id)
        return cast(Project, entry.entity) if entry is not None and entry.kind is EntityKind.PROJECT else None

    def open_schema(self) -> None:
        self.ui.is_schema_modal_open = True

    def close_schema(self) -> None:
        self.ui.is_schema_modal_open = False

    def open_about(self) -> None:
        self.ui.is_about_modal_open = True

    def close_about(self) -> None:
        self.ui.is_about_modal_open = False


def _at(items: Sequence[Any], position: int, kind: EntityKind) -> Any:
    if position < 0 or position >= len(items):
        raise IndexNotFoundError(kind.value, position)
    return items[position]


def _identity_position(items: Sequence[Any], target: Any) -> int:
    return next(position for position, item in enumerate(items) if item is target)


def _child_list(owner: Any) -> list[Any]:
    if isinstance(owner, Project):
        return owner.streets
    if isinstance(owner, Street):
        return owner.main_segments
    if isinstance(owner, MainSegment):
        return owner.services
    return cast(Service, owner).meters

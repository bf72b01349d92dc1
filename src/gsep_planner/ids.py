"""Process-wide unique identifiers for plan entities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator

from loguru import logger

if TYPE_CHECKING:
    from .models import Project


class IdGenerator:
    """
    Issues strictly increasing integer ids.

    Ids are shared by every entity kind, so a project, a street and a meter never
    carry the same id. After a bulk load call `advance_to` with the largest id in
    the loaded data so new entities cannot collide with it.
    """

    def __init__(self, start: int = 0) -> None:
        self._last_id: int = start

    @property
    def last_id(self) -> int:
        return self._last_id

    def next_id(self) -> int:
        self._last_id += 1
        return self._last_id

    def advance_to(self, max_observed_id: int) -> None:
        if max_observed_id > self._last_id:
            logger.debug(
                "Advancing id generator from {current} to {target}",
                current=self._last_id,
                target=max_observed_id,
            )
            self._last_id = max_observed_id


def iter_ids(projects: Iterable["Project"]) -> Iterator[int]:
    """Yield every entity id in the tree, parents before children."""

    for project in projects:
        yield project.id
        for street in project.streets:
            yield street.id
            for segment in street.main_segments:
                yield segment.id
                for service in segment.services:
                    yield service.id
                    for meter in service.meters:
                        yield meter.id


def max_id_in(projects: Iterable["Project"]) -> int:
    """Return the largest id anywhere in the project trees, or 0 when there are none."""

    return max(iter_ids(projects), default=0)

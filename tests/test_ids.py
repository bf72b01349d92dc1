"""Identifier generator behaviour."""

from __future__ import annotations

from gsep_planner import IdGenerator
from gsep_planner.ids import max_id_in

from .sample_data import build_sample_store


def test_ids_increase_strictly() -> None:
    ids = IdGenerator()
    issued: list[int] = [ids.next_id() for _ in range(3)]
    assert issued == [1, 2, 3]
    assert ids.last_id == 3


def test_advance_never_moves_backwards() -> None:
    ids = IdGenerator(start=10)
    ids.advance_to(4)
    assert ids.next_id() == 11
    ids.advance_to(40)
    assert ids.next_id() == 41


def test_max_id_covers_every_level() -> None:
    store = build_sample_store()
    assert max_id_in(store.projects) == 9
    assert max_id_in([]) == 0

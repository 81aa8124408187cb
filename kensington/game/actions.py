from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class GameAction:
    kind: str
    data: dict[str, Any] = field(default_factory=dict)


def make_action(kind: str, **data: Any) -> GameAction:
    return GameAction(kind=kind, data=dict(data))


ACTION_PLACE_TOKEN = "place_token"
ACTION_SELECT_TOKEN = "select_token"
ACTION_MOVE_TOKEN = "move_token"
ACTION_SELECT_CAPTURE = "select_capture"
ACTION_RELOCATE_CAPTURE = "relocate_capture"


def place_token(vertex_id: int) -> GameAction:
    return make_action(ACTION_PLACE_TOKEN, vertex_id=int(vertex_id))


def select_token(vertex_id: int) -> GameAction:
    return make_action(ACTION_SELECT_TOKEN, vertex_id=int(vertex_id))


def move_token(from_vertex_id: int, to_vertex_id: int) -> GameAction:
    return make_action(
        ACTION_MOVE_TOKEN,
        from_vertex_id=int(from_vertex_id),
        to_vertex_id=int(to_vertex_id),
    )


def select_capture(vertex_id: int) -> GameAction:
    return make_action(ACTION_SELECT_CAPTURE, vertex_id=int(vertex_id))


def relocate_capture(from_vertex_id: int, to_vertex_id: int) -> GameAction:
    return make_action(
        ACTION_RELOCATE_CAPTURE,
        from_vertex_id=int(from_vertex_id),
        to_vertex_id=int(to_vertex_id),
    )

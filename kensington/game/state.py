from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from kensington.domain.board import BoardTopology, Color

from .mills import MAX_CAPTURES_PER_MOVE, Mill, MillId

TOKENS_PER_PLAYER = 15
EVENT_LOG_LIMIT = 120


class GamePhase(str, Enum):
    PLACEMENT = "placement"
    MOVEMENT = "movement"
    MILL_REMOVAL = "mill_removal"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class RulesConfig:
    tokens_per_player: int = TOKENS_PER_PLAYER
    max_captures_per_move: int = MAX_CAPTURES_PER_MOVE
    starting_color: Color = Color.RED

    def __post_init__(self) -> None:
        if self.tokens_per_player < 1:
            raise ValueError("tokens_per_player must be at least 1.")
        if self.max_captures_per_move < 0:
            raise ValueError("max_captures_per_move cannot be negative.")


@dataclass
class GameState:
    board: BoardTopology
    config: RulesConfig
    phase: GamePhase
    current_player: Color
    occupancy: Dict[int, Color] = field(default_factory=dict)
    tokens_placed: Dict[Color, int] = field(default_factory=dict)
    selected_vertex_id: int | None = None
    selected_opponent_vertex_id: int | None = None
    remaining_captures: int = 0
    formed_mill_ids: set[MillId] = field(default_factory=set)
    last_new_mills: tuple[Mill, ...] = ()
    winner: Color | None = None
    winning_region_number: int | None = None
    turn_number: int = 1
    message: str = ""
    last_rejection: str | None = None
    event_log: list[str] = field(default_factory=list)

    def clone(self) -> "GameState":
        return GameState(
            board=self.board,
            config=self.config,
            phase=self.phase,
            current_player=self.current_player,
            occupancy=dict(self.occupancy),
            tokens_placed=dict(self.tokens_placed),
            selected_vertex_id=self.selected_vertex_id,
            selected_opponent_vertex_id=self.selected_opponent_vertex_id,
            remaining_captures=self.remaining_captures,
            formed_mill_ids=set(self.formed_mill_ids),
            last_new_mills=tuple(self.last_new_mills),
            winner=self.winner,
            winning_region_number=self.winning_region_number,
            turn_number=self.turn_number,
            message=self.message,
            last_rejection=self.last_rejection,
            event_log=list(self.event_log),
        )

    def token_at(self, vertex_id: int) -> Color | None:
        return self.occupancy.get(vertex_id)

    def is_empty(self, vertex_id: int) -> bool:
        return vertex_id in self.board.vertices and vertex_id not in self.occupancy

    def vertices_of(self, color: Color) -> list[int]:
        return sorted(vertex_id for vertex_id, owner in self.occupancy.items() if owner is color)

    def empty_vertices(self) -> list[int]:
        return [vertex_id for vertex_id in sorted(self.board.vertices) if vertex_id not in self.occupancy]

    def tokens_left(self, color: Color) -> int:
        return max(0, self.config.tokens_per_player - self.tokens_placed.get(color, 0))

    def placement_complete(self) -> bool:
        return all(self.tokens_left(color) == 0 for color in Color)


def placement_prompt(color: Color, tokens_left: int) -> str:
    return f"{color.label} player's turn. {tokens_left} tokens left to place."


def movement_prompt(color: Color) -> str:
    return f"{color.label} player's turn. Click a token to move."


def initialize_game_state(board: BoardTopology, *, config: RulesConfig | None = None) -> GameState:
    config = config or RulesConfig()
    starting = config.starting_color
    return GameState(
        board=board,
        config=config,
        phase=GamePhase.PLACEMENT,
        current_player=starting,
        tokens_placed={color: 0 for color in Color},
        message=f"{starting.label} player's turn. {config.tokens_per_player} tokens to place.",
    )

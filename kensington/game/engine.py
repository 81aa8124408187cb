from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from kensington.domain.board import BoardTopology, Color, build_board
from kensington.domain.geometry import BoardLayout, Point

from .actions import GameAction
from .errors import RuleViolation
from .mills import Mill, remap_mill_ids
from .rules import action_for_click, apply_action, list_legal_actions
from .state import GamePhase, GameState, RulesConfig, initialize_game_state

logger = logging.getLogger(__name__)

DEFAULT_TICK_LIMIT = 2_000


@dataclass(frozen=True)
class BoardSnapshot:
    """Read-only view handed to a renderer after every input."""

    vertex_points: dict[int, Point]
    occupancy: dict[int, Color | None]
    edges: tuple[tuple[int, int], ...]
    new_mills: tuple[Mill, ...]
    highlighted_vertex_ids: frozenset[int]
    phase: GamePhase
    current_player: Color
    selected_vertex_id: int | None
    remaining_captures: int
    message: str
    winner: Color | None
    winning_region_number: int | None
    tokens_placed: dict[Color, int]


class EnginePolicy(Protocol):
    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        ...


class FirstLegalPolicy:
    """Deterministic fallback policy used when no policy is provided."""

    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        if not legal_actions:
            raise ValueError("No legal actions available.")
        return legal_actions[0]


class GameEngine:
    """
    Owns the single ``GameState`` of a match.

    Clicks are resolved to actions and applied through the pure rule
    functions; rejected input only updates the advisory message. The same
    object can also drive automated play with per-colour policies.
    """

    def __init__(
        self,
        board: BoardTopology | None = None,
        *,
        config: RulesConfig | None = None,
        policies: Mapping[Color, EnginePolicy] | None = None,
        tick_limit: int = DEFAULT_TICK_LIMIT,
    ) -> None:
        self.board = board if board is not None else build_board()
        self.config = config or RulesConfig()
        self.policies = dict(policies or {})
        self.tick_limit = max(1, int(tick_limit))
        self.ticks = 0
        self._default_policy: EnginePolicy = FirstLegalPolicy()
        self.state = initialize_game_state(self.board, config=self.config)

    @property
    def legal_actions(self) -> list[GameAction]:
        return list_legal_actions(self.state)

    @property
    def winner(self) -> Color | None:
        return self.state.winner

    def is_finished(self) -> bool:
        return self.state.phase is GamePhase.GAME_OVER or self.ticks >= self.tick_limit

    def reset(self) -> GameState:
        self.state = initialize_game_state(self.board, config=self.config)
        self.ticks = 0
        logger.debug("Game reset.")
        return self.state

    def relayout(self, layout: BoardLayout) -> BoardTopology:
        """Rebuild the topology for new absolute coordinates, keeping the match."""

        new_board = build_board(layout)
        if set(new_board.vertices) != set(self.board.vertices):
            raise ValueError(
                f"Layout produced {len(new_board.vertices)} vertices, "
                f"expected {len(self.board.vertices)}."
            )
        relaid = self.state.clone()
        relaid.formed_mill_ids = remap_mill_ids(self.board, new_board, self.state.formed_mill_ids)
        relaid.board = new_board
        self.board = new_board
        self.state = relaid
        return new_board

    def handle_click(self, vertex_id: int) -> GameState:
        if self.state.phase is GamePhase.GAME_OVER:
            return self.state
        try:
            action = action_for_click(self.state, vertex_id)
            self.state = apply_action(self.state, action)
        except RuleViolation as exc:
            rejected = self.state.clone()
            rejected.message = exc.message
            rejected.last_rejection = exc.code
            self.state = rejected
            logger.debug("Rejected click on V%s: %s", vertex_id, exc.code)
        return self.state

    def click_at(self, point: Point) -> GameState:
        vertex_id = self.board.nearest_vertex(point)
        if vertex_id is None:
            return self.state
        return self.handle_click(vertex_id)

    def execute(self, action: GameAction, *, validate_action: bool = True) -> GameState:
        if validate_action and action not in self.legal_actions:
            raise ValueError(f"{action} is not legal in phase {self.state.phase.value}.")
        self.state = apply_action(self.state, action)
        return self.state

    def play_tick(self) -> GameAction | None:
        if self.is_finished():
            return None
        legal_actions = self.legal_actions
        if not legal_actions:
            return None

        color = self.state.current_player
        policy = self.policies.get(color, self._default_policy)
        action = policy.decide(self.state, legal_actions)
        if action not in legal_actions:
            raise ValueError(f"Policy for {color.value} returned illegal action: {action}.")
        self.execute(action, validate_action=False)
        self.ticks += 1
        return action

    def play(self, *, max_ticks: int | None = None) -> Color | None:
        tick_cap = max_ticks if max_ticks is not None else self.tick_limit
        played = 0
        while not self.is_finished() and played < tick_cap:
            if self.play_tick() is None:
                break
            played += 1
        return self.winner

    def snapshot(self) -> BoardSnapshot:
        state = self.state
        highlighted = frozenset(
            vertex_id for mill in state.last_new_mills for vertex_id in mill.vertex_ids
        )
        return BoardSnapshot(
            vertex_points={vertex_id: vertex.point for vertex_id, vertex in self.board.vertices.items()},
            occupancy={vertex_id: state.occupancy.get(vertex_id) for vertex_id in self.board.vertices},
            edges=tuple(self.board.edges()),
            new_mills=tuple(state.last_new_mills),
            highlighted_vertex_ids=highlighted,
            phase=state.phase,
            current_player=state.current_player,
            selected_vertex_id=(
                state.selected_opponent_vertex_id
                if state.phase is GamePhase.MILL_REMOVAL
                else state.selected_vertex_id
            ),
            remaining_captures=state.remaining_captures,
            message=state.message,
            winner=state.winner,
            winning_region_number=state.winning_region_number,
            tokens_placed=dict(state.tokens_placed),
        )

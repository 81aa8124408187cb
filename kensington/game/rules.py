from __future__ import annotations

import logging
from typing import Iterable

from kensington.domain.board import Color

from .actions import (
    ACTION_MOVE_TOKEN,
    ACTION_PLACE_TOKEN,
    ACTION_RELOCATE_CAPTURE,
    ACTION_SELECT_CAPTURE,
    ACTION_SELECT_TOKEN,
    GameAction,
    move_token,
    place_token,
    relocate_capture,
    select_capture,
    select_token,
)
from .errors import InvalidTarget, NoSelection, WrongTurn
from .mills import detect_mills
from .state import (
    EVENT_LOG_LIMIT,
    GamePhase,
    GameState,
    movement_prompt,
    placement_prompt,
)
from .victory import winning_region

logger = logging.getLogger(__name__)


def _record_event(state: GameState, text: str) -> None:
    state.event_log.append(text)
    if len(state.event_log) > EVENT_LOG_LIMIT:
        state.event_log = state.event_log[-EVENT_LOG_LIMIT:]


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


def _require_vertex(state: GameState, vertex_id: int) -> None:
    if vertex_id not in state.board.vertices:
        raise InvalidTarget(f"Unknown vertex: {vertex_id}.", vertex_id=vertex_id)


def _require_phase(state: GameState, phase: GamePhase, what: str) -> None:
    if state.phase is not phase:
        raise InvalidTarget(f"{what} is only valid during the {phase.value.replace('_', ' ')} phase.")


def _switch_player(state: GameState) -> None:
    state.current_player = state.current_player.opponent
    state.turn_number += 1
    state.selected_vertex_id = None
    if state.phase is GamePhase.PLACEMENT:
        state.message = placement_prompt(state.current_player, state.tokens_left(state.current_player))
    else:
        state.message = movement_prompt(state.current_player)


def _check_for_winner(state: GameState, colors: Iterable[Color]) -> bool:
    result = winning_region(state.board, state.occupancy, colors)
    if result is None:
        return False
    color, region = result
    state.phase = GamePhase.GAME_OVER
    state.winner = color
    state.winning_region_number = region.number
    state.selected_vertex_id = None
    state.selected_opponent_vertex_id = None
    state.remaining_captures = 0
    state.message = f"{color.value.upper()} WINS! Hexagon {region.number} is surrounded."
    _record_event(state, f"{color.label} surrounded hexagon {region.number} and wins.")
    logger.info("%s wins by surrounding hexagon %d.", color.label, region.number)
    return True


def _apply_placement(state: GameState, vertex_id: int) -> None:
    _require_phase(state, GamePhase.PLACEMENT, "Placing a token")
    _require_vertex(state, vertex_id)
    color = state.current_player
    if not state.is_empty(vertex_id):
        raise InvalidTarget("That vertex is already occupied.", vertex_id=vertex_id)
    if state.tokens_left(color) <= 0:
        raise InvalidTarget(f"{color.label} has no tokens left to place.", vertex_id=vertex_id)

    state.occupancy[vertex_id] = color
    state.tokens_placed[color] = state.tokens_placed.get(color, 0) + 1
    state.last_new_mills = ()
    _record_event(state, f"{color.label} placed a token at V{vertex_id}.")

    if _check_for_winner(state, (color,)):
        return

    if state.placement_complete():
        state.phase = GamePhase.MOVEMENT
        state.current_player = state.config.starting_color
        state.turn_number += 1
        state.selected_vertex_id = None
        state.message = (
            "Movement phase started! Click a token to select it, "
            "then click an adjacent empty vertex to move."
        )
        _record_event(state, "Placement complete.")
        return

    _switch_player(state)


def _apply_selection(state: GameState, vertex_id: int) -> None:
    _require_phase(state, GamePhase.MOVEMENT, "Selecting a token")
    _require_vertex(state, vertex_id)
    color = state.current_player
    owner = state.token_at(vertex_id)
    if owner is None:
        raise InvalidTarget("Select one of your own tokens.", vertex_id=vertex_id)
    if owner is not color:
        raise WrongTurn(
            f"It is {color.label}'s turn. Select one of your own tokens.",
            vertex_id=vertex_id,
        )
    state.selected_vertex_id = vertex_id
    state.message = f"Selected {color.value} token. Click an adjacent empty vertex to move."


def _apply_move(state: GameState, from_vertex_id: int, to_vertex_id: int) -> None:
    _require_phase(state, GamePhase.MOVEMENT, "Moving a token")
    _require_vertex(state, from_vertex_id)
    _require_vertex(state, to_vertex_id)
    color = state.current_player
    owner = state.token_at(from_vertex_id)
    if owner is None:
        raise NoSelection("Select one of your tokens before moving.", vertex_id=from_vertex_id)
    if owner is not color:
        raise WrongTurn(
            f"It is {color.label}'s turn. Select one of your own tokens.",
            vertex_id=from_vertex_id,
        )
    if not state.is_empty(to_vertex_id):
        raise InvalidTarget("Cannot move there - the vertex is occupied.", vertex_id=to_vertex_id)
    if not state.board.is_adjacent(from_vertex_id, to_vertex_id):
        raise InvalidTarget("Cannot move there - vertices must be adjacent.", vertex_id=to_vertex_id)

    del state.occupancy[from_vertex_id]
    state.occupancy[to_vertex_id] = color
    state.selected_vertex_id = None
    _record_event(state, f"{color.label} moved V{from_vertex_id} -> V{to_vertex_id}.")

    detection = detect_mills(
        state.board,
        state.occupancy,
        to_vertex_id,
        state.formed_mill_ids,
        max_captures=state.config.max_captures_per_move,
    )
    state.formed_mill_ids.update(detection.formed_ids)
    state.last_new_mills = detection.new_mills
    if detection.new_mills:
        _record_event(state, f"{color.label} formed {_plural(len(detection.new_mills), 'mill')}.")
        logger.info(
            "%s formed %s at V%d (captures allowed: %d).",
            color.label,
            [mill.shape.value for mill in detection.new_mills],
            to_vertex_id,
            detection.captures_allowed,
        )

    if _check_for_winner(state, (color,)):
        return

    if detection.captures_allowed > 0:
        state.phase = GamePhase.MILL_REMOVAL
        state.remaining_captures = detection.captures_allowed
        state.selected_opponent_vertex_id = None
        state.message = (
            f"{color.label} formed {_plural(len(detection.new_mills), 'mill')}! "
            f"Relocate {_plural(detection.captures_allowed, 'opponent token')}."
        )
        return

    _switch_player(state)


def _apply_capture_selection(state: GameState, vertex_id: int) -> None:
    _require_phase(state, GamePhase.MILL_REMOVAL, "Selecting a token to relocate")
    _require_vertex(state, vertex_id)
    opponent = state.current_player.opponent
    if state.token_at(vertex_id) is not opponent:
        raise InvalidTarget(f"Select a {opponent.value} token to relocate.", vertex_id=vertex_id)
    state.selected_opponent_vertex_id = vertex_id
    state.message = f"Selected {opponent.value} token. Click an empty vertex to relocate it."


def _apply_relocation(state: GameState, from_vertex_id: int, to_vertex_id: int) -> None:
    _require_phase(state, GamePhase.MILL_REMOVAL, "Relocating a token")
    _require_vertex(state, from_vertex_id)
    _require_vertex(state, to_vertex_id)
    color = state.current_player
    opponent = color.opponent
    owner = state.token_at(from_vertex_id)
    if owner is None:
        raise NoSelection(
            f"Select a {opponent.value} token before choosing where to relocate it.",
            vertex_id=from_vertex_id,
        )
    if owner is not opponent:
        raise InvalidTarget(f"Select a {opponent.value} token to relocate.", vertex_id=from_vertex_id)
    if not state.is_empty(to_vertex_id):
        raise InvalidTarget("Relocate the token to an empty vertex.", vertex_id=to_vertex_id)

    del state.occupancy[from_vertex_id]
    state.occupancy[to_vertex_id] = opponent
    state.remaining_captures -= 1
    state.selected_opponent_vertex_id = None
    _record_event(
        state,
        f"{color.label} relocated {opponent.value} token V{from_vertex_id} -> V{to_vertex_id}.",
    )

    if _check_for_winner(state, (color, opponent)):
        return

    if state.remaining_captures <= 0:
        state.remaining_captures = 0
        state.phase = GamePhase.MOVEMENT
        _switch_player(state)
        return

    state.message = f"Relocate {_plural(state.remaining_captures, 'more opponent token')}."


def apply_action(state: GameState, action: GameAction) -> GameState:
    if state.phase is GamePhase.GAME_OVER:
        return state.clone()

    next_state = state.clone()
    next_state.last_rejection = None
    kind = action.kind
    data = action.data

    if kind == ACTION_PLACE_TOKEN:
        _apply_placement(next_state, int(data["vertex_id"]))
    elif kind == ACTION_SELECT_TOKEN:
        _apply_selection(next_state, int(data["vertex_id"]))
    elif kind == ACTION_MOVE_TOKEN:
        _apply_move(next_state, int(data["from_vertex_id"]), int(data["to_vertex_id"]))
    elif kind == ACTION_SELECT_CAPTURE:
        _apply_capture_selection(next_state, int(data["vertex_id"]))
    elif kind == ACTION_RELOCATE_CAPTURE:
        _apply_relocation(next_state, int(data["from_vertex_id"]), int(data["to_vertex_id"]))
    else:
        raise ValueError(f"Unsupported action kind: {kind}.")

    logger.debug("Applied %s %s -> phase %s.", kind, data, next_state.phase.value)
    return next_state


def action_for_click(state: GameState, vertex_id: int) -> GameAction:
    """Translate a click on ``vertex_id`` into the action it stands for in the current phase."""

    _require_vertex(state, vertex_id)
    color = state.current_player
    owner = state.token_at(vertex_id)

    if state.phase is GamePhase.PLACEMENT:
        return place_token(vertex_id)

    if state.phase is GamePhase.MOVEMENT:
        if owner is color:
            return select_token(vertex_id)
        if owner is not None:
            raise WrongTurn(
                f"It is {color.label}'s turn. Select one of your own tokens.",
                vertex_id=vertex_id,
            )
        if state.selected_vertex_id is None:
            raise NoSelection("Select one of your tokens first.", vertex_id=vertex_id)
        return move_token(state.selected_vertex_id, vertex_id)

    if state.phase is GamePhase.MILL_REMOVAL:
        if owner is color.opponent:
            return select_capture(vertex_id)
        if owner is not None:
            raise InvalidTarget(f"Select a {color.opponent.value} token to relocate.", vertex_id=vertex_id)
        if state.selected_opponent_vertex_id is None:
            raise NoSelection(
                f"Select a {color.opponent.value} token before choosing where to relocate it.",
                vertex_id=vertex_id,
            )
        return relocate_capture(state.selected_opponent_vertex_id, vertex_id)

    raise InvalidTarget("The game is over.", vertex_id=vertex_id)


def list_legal_actions(state: GameState) -> list[GameAction]:
    if state.phase is GamePhase.GAME_OVER:
        return []

    color = state.current_player

    if state.phase is GamePhase.PLACEMENT:
        if state.tokens_left(color) <= 0:
            return []
        return [place_token(vertex_id) for vertex_id in state.empty_vertices()]

    if state.phase is GamePhase.MOVEMENT:
        actions: list[GameAction] = []
        for vertex_id in state.vertices_of(color):
            for neighbor_id in state.board.neighbors(vertex_id):
                if state.is_empty(neighbor_id):
                    actions.append(move_token(vertex_id, neighbor_id))
        return actions

    if state.phase is GamePhase.MILL_REMOVAL:
        empty = state.empty_vertices()
        return [
            relocate_capture(vertex_id, target_id)
            for vertex_id in state.vertices_of(color.opponent)
            for target_id in empty
        ]

    return []

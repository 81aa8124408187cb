from __future__ import annotations

from typing import Iterable

from kensington.domain.board import BoardTopology, Color
from kensington.game.state import GamePhase, GameState, initialize_game_state


def find_triangles(board: BoardTopology) -> list[tuple[int, int, int]]:
    triangles: set[tuple[int, int, int]] = set()
    for first in sorted(board.vertices):
        for second in board.neighbors(first):
            for third in board.neighbors(second):
                if third != first and board.is_adjacent(first, third):
                    triangles.add(tuple(sorted((first, second, third))))  # type: ignore[arg-type]
    return sorted(triangles)


def find_squares(board: BoardTopology) -> list[tuple[int, int, int, int]]:
    squares: set[tuple[int, int, int, int]] = set()
    for first in sorted(board.vertices):
        for second in board.neighbors(first):
            for third in board.neighbors(second):
                if third == first:
                    continue
                for fourth in board.neighbors(third):
                    if fourth in (first, second):
                        continue
                    if board.is_adjacent(fourth, first) and not board.is_adjacent(first, third):
                        squares.add(tuple(sorted((first, second, third, fourth))))  # type: ignore[arg-type]
    return sorted(squares)


def triangle_with_approach(board: BoardTopology) -> tuple[tuple[int, int, int], int, int]:
    """A triangle, the vertex that completes it, and a neighbour to move in from.

    The neighbour touches no other corner of the triangle, so stepping back
    onto it never closes a different mill.
    """

    for triangle in find_triangles(board):
        for target in triangle:
            rest = [vertex_id for vertex_id in triangle if vertex_id != target]
            for mover in board.neighbors(target):
                if mover in triangle:
                    continue
                if not any(board.is_adjacent(mover, vertex_id) for vertex_id in rest):
                    return triangle, target, mover
    raise AssertionError("Board has no approachable triangle.")


def triangle_and_square_with_approach(
    board: BoardTopology,
) -> tuple[tuple[int, int, int], tuple[int, int, int, int], int, int]:
    triangles = find_triangles(board)
    squares = find_squares(board)
    for target in sorted(board.vertices):
        for triangle in (item for item in triangles if target in item):
            for square in (item for item in squares if target in item):
                shape_vertices = set(triangle) | set(square)
                for mover in board.neighbors(target):
                    if mover not in shape_vertices:
                        return triangle, square, target, mover
    raise AssertionError("Board has no vertex closing a triangle and a square at once.")


def isolated_vertices(board: BoardTopology, avoid: Iterable[int], count: int) -> list[int]:
    """Vertices that neither belong to nor touch ``avoid``."""

    blocked = set(avoid)
    for vertex_id in list(blocked):
        blocked.update(board.neighbors(vertex_id))
    picked: list[int] = []
    for vertex_id in sorted(board.vertices):
        if vertex_id in blocked:
            continue
        picked.append(vertex_id)
        blocked.add(vertex_id)
        blocked.update(board.neighbors(vertex_id))
        if len(picked) == count:
            return picked
    raise AssertionError(f"Could not find {count} isolated vertices.")


def movement_state(
    board: BoardTopology,
    *,
    red: Iterable[int],
    blue: Iterable[int],
    current: Color = Color.RED,
) -> GameState:
    state = initialize_game_state(board)
    state.phase = GamePhase.MOVEMENT
    state.current_player = current
    state.occupancy = {vertex_id: Color.RED for vertex_id in red}
    state.occupancy.update({vertex_id: Color.BLUE for vertex_id in blue})
    state.tokens_placed = {color: state.config.tokens_per_player for color in Color}
    return state

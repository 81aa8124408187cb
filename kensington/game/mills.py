from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import combinations, permutations
from typing import ClassVar, Iterable, Mapping, Tuple, Union

from kensington.domain.board import BoardTopology, Color

MILL_ID_ROUNDING = 1
MAX_CAPTURES_PER_MOVE = 2


class MillShape(str, Enum):
    TRIANGLE = "triangle"
    SQUARE = "square"


MillId = Tuple[str, Tuple[Tuple[float, float], ...]]


@dataclass(frozen=True)
class TriangleMill:
    vertex_ids: Tuple[int, int, int]

    shape: ClassVar[MillShape] = MillShape.TRIANGLE
    capture_weight: ClassVar[int] = 1


@dataclass(frozen=True)
class SquareMill:
    vertex_ids: Tuple[int, int, int, int]

    shape: ClassVar[MillShape] = MillShape.SQUARE
    capture_weight: ClassVar[int] = 2


Mill = Union[TriangleMill, SquareMill]


@dataclass(frozen=True)
class MillDetection:
    new_mills: Tuple[Mill, ...]
    formed_mills: Tuple[Mill, ...]
    captures_allowed: int
    formed_ids: Tuple[MillId, ...] = ()


def mill_id(board: BoardTopology, mill: Mill) -> MillId:
    points = sorted(
        (
            round(board.point_of(vertex_id)[0], MILL_ID_ROUNDING),
            round(board.point_of(vertex_id)[1], MILL_ID_ROUNDING),
        )
        for vertex_id in mill.vertex_ids
    )
    return (mill.shape.value, tuple(points))


def is_triangle_mill(board: BoardTopology, vertex_ids: Tuple[int, int, int]) -> bool:
    return all(board.is_adjacent(first, second) for first, second in combinations(vertex_ids, 2))


def is_square_mill(board: BoardTopology, vertex_ids: Tuple[int, int, int, int]) -> bool:
    anchor, *rest = vertex_ids
    for ordering in permutations(rest):
        cycle = (anchor, *ordering)
        if all(
            board.is_adjacent(cycle[index], cycle[(index + 1) % 4])
            for index in range(4)
        ):
            return True
    return False


def capture_allowance(new_mills: Iterable[Mill], *, cap: int = MAX_CAPTURES_PER_MOVE) -> int:
    return min(cap, sum(mill.capture_weight for mill in new_mills))


def detect_mills(
    board: BoardTopology,
    occupancy: Mapping[int, Color],
    moved_vertex_id: int,
    previously_formed: Iterable[MillId] = (),
    *,
    max_captures: int = MAX_CAPTURES_PER_MOVE,
) -> MillDetection:
    """
    Find every mill of the mover's colour that contains ``moved_vertex_id``.

    A mill counts as new only when its canonical id is absent from
    ``previously_formed``; ``formed_ids`` lists the ids of all mills found so
    the caller can record repeats as well.
    """

    color = occupancy.get(moved_vertex_id)
    if color is None:
        return MillDetection(new_mills=(), formed_mills=(), captures_allowed=0)

    others = sorted(
        vertex_id
        for vertex_id, owner in occupancy.items()
        if owner is color and vertex_id != moved_vertex_id
    )

    formed: list[Mill] = []
    for pair in combinations(others, 2):
        candidate = (moved_vertex_id, *pair)
        if is_triangle_mill(board, candidate):
            formed.append(TriangleMill(tuple(sorted(candidate))))
    for trio in combinations(others, 3):
        candidate = (moved_vertex_id, *trio)
        if is_square_mill(board, candidate):
            formed.append(SquareMill(tuple(sorted(candidate))))

    known = set(previously_formed)
    formed_ids = tuple(mill_id(board, mill) for mill in formed)
    new_mills = tuple(mill for mill, identifier in zip(formed, formed_ids) if identifier not in known)
    return MillDetection(
        new_mills=new_mills,
        formed_mills=tuple(formed),
        captures_allowed=capture_allowance(new_mills, cap=max_captures),
        formed_ids=formed_ids,
    )


def remap_mill_ids(
    old_board: BoardTopology,
    new_board: BoardTopology,
    mill_ids: Iterable[MillId],
) -> set[MillId]:
    """Translate recorded mill ids after the board is rebuilt at a new scale."""

    vertex_by_point = {
        (
            round(vertex.point[0], MILL_ID_ROUNDING),
            round(vertex.point[1], MILL_ID_ROUNDING),
        ): vertex.id
        for vertex in old_board.vertices.values()
    }
    remapped: set[MillId] = set()
    for shape, points in mill_ids:
        vertex_ids = tuple(vertex_by_point[point] for point in points if point in vertex_by_point)
        if len(vertex_ids) != len(points):
            continue
        if shape == MillShape.TRIANGLE.value:
            remapped.add(mill_id(new_board, TriangleMill(vertex_ids)))  # type: ignore[arg-type]
        else:
            remapped.add(mill_id(new_board, SquareMill(vertex_ids)))  # type: ignore[arg-type]
    return remapped

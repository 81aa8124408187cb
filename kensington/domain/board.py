from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .geometry import (
    BoardLayout,
    KensingtonGeometry,
    Point,
    RegionColor,
    Segment,
    build_kensington_geometry,
)

logger = logging.getLogger(__name__)

EdgeKey = Tuple[int, int]

# Absolute pixels; BoardLayout enforces MIN_UNIT_SIZE so distinct corners never merge.
VERTEX_TOLERANCE = 5.0
CLICK_TOLERANCE = 10.0
LENGTH_TOLERANCE = 0.08
ANGLE_STEP_DEG = 30.0
ANGLE_TOLERANCE_DEG = 3.0
REGION_BAND = (1.5, 2.3)
MIN_REGION_MEMBERS = 6


class Color(str, Enum):
    RED = "red"
    BLUE = "blue"

    @property
    def opponent(self) -> "Color":
        return Color.BLUE if self is Color.RED else Color.RED

    @property
    def label(self) -> str:
        return self.value.capitalize()


REGION_ELIGIBILITY: Dict[RegionColor, Tuple[Color, ...]] = {
    RegionColor.RED: (Color.RED,),
    RegionColor.BLUE: (Color.BLUE,),
    RegionColor.WHITE: (Color.RED, Color.BLUE),
}


@dataclass(frozen=True)
class Vertex:
    id: int
    point: Point


@dataclass(frozen=True)
class EdgeSignature:
    """Length band and orientation grid of one kind of drawn segment."""

    kind: str
    min_length: float
    max_length: float
    angle_step_deg: float = ANGLE_STEP_DEG
    angle_tolerance_deg: float = ANGLE_TOLERANCE_DEG

    def matches(self, first: Point, second: Point) -> bool:
        distance = math.dist(first, second)
        if distance < self.min_length or distance > self.max_length:
            return False
        angle = math.degrees(math.atan2(second[1] - first[1], second[0] - first[0])) % 180.0
        remainder = angle % self.angle_step_deg
        return min(remainder, self.angle_step_deg - remainder) <= self.angle_tolerance_deg


@dataclass(frozen=True)
class HexagonRegion:
    number: int
    region_color: RegionColor
    center: Point
    inner_radius: float
    outer_radius: float
    member_vertex_ids: Tuple[int, ...]

    @property
    def eligible_colors(self) -> Tuple[Color, ...]:
        return REGION_ELIGIBILITY[self.region_color]

    def is_eligible(self, color: Color) -> bool:
        return color in self.eligible_colors

    def is_surrounded_by(self, occupancy: Mapping[int, Color], color: Color) -> bool:
        if len(self.member_vertex_ids) < MIN_REGION_MEMBERS:
            return False
        return all(occupancy.get(vertex_id) is color for vertex_id in self.member_vertex_ids)


@dataclass
class BoardTopology:
    vertices: Dict[int, Vertex]
    signatures: Tuple[EdgeSignature, ...]
    regions: Tuple[HexagonRegion, ...]
    layout: BoardLayout = field(default_factory=BoardLayout)
    _neighbors: Dict[int, Tuple[int, ...]] = field(init=False, repr=False)
    _region_lookup: Dict[int, HexagonRegion] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        neighbors: Dict[int, set[int]] = {vertex_id: set() for vertex_id in self.vertices}
        ordered = sorted(self.vertices.values(), key=lambda vertex: vertex.id)
        for index, first in enumerate(ordered):
            for second in ordered[index + 1 :]:
                if is_adjacent(first.point, second.point, self.signatures):
                    neighbors[first.id].add(second.id)
                    neighbors[second.id].add(first.id)
        self._neighbors = {vertex_id: tuple(sorted(ids)) for vertex_id, ids in neighbors.items()}
        self._region_lookup = {region.number: region for region in self.regions}

    def neighbors(self, vertex_id: int) -> Tuple[int, ...]:
        return self._neighbors.get(vertex_id, ())

    def is_adjacent(self, first_id: int, second_id: int) -> bool:
        return second_id in self._neighbors.get(first_id, ())

    def edges(self) -> List[EdgeKey]:
        return sorted(
            (first, second)
            for first, adjacent in self._neighbors.items()
            for second in adjacent
            if first < second
        )

    def region(self, number: int) -> HexagonRegion:
        return self._region_lookup[number]

    def point_of(self, vertex_id: int) -> Point:
        return self.vertices[vertex_id].point

    def vertex_at(self, point: Point, tolerance: float = VERTEX_TOLERANCE) -> Optional[int]:
        for vertex in self.vertices.values():
            if _within_box(vertex.point, point, tolerance):
                return vertex.id
        return None

    def nearest_vertex(self, point: Point, tolerance: float = CLICK_TOLERANCE) -> Optional[int]:
        closest_id: Optional[int] = None
        best_distance = tolerance
        for vertex in self.vertices.values():
            distance = math.dist(vertex.point, point)
            if distance < best_distance:
                best_distance = distance
                closest_id = vertex.id
        return closest_id


def build_vertices(corner_points: Iterable[Point], tolerance: float = VERTEX_TOLERANCE) -> List[Vertex]:
    """
    Fold raw polygon corners into distinct vertices.

    The first sample of a cluster becomes the canonical point; later samples
    within ``tolerance`` on both axes are merged into it.
    """

    vertices: List[Vertex] = []
    for corner in corner_points:
        point = (float(corner[0]), float(corner[1]))
        if any(_within_box(vertex.point, point, tolerance) for vertex in vertices):
            continue
        vertices.append(Vertex(id=len(vertices), point=point))
    return vertices


def is_adjacent(first: Point, second: Point, signatures: Sequence[EdgeSignature]) -> bool:
    return any(signature.matches(first, second) for signature in signatures)


def derive_edge_signatures(
    segments: Iterable[Segment],
    *,
    length_tolerance: float = LENGTH_TOLERANCE,
    angle_tolerance_deg: float = ANGLE_TOLERANCE_DEG,
) -> Tuple[EdgeSignature, ...]:
    lengths_by_kind: Dict[str, List[float]] = {}
    for segment in segments:
        lengths_by_kind.setdefault(segment.kind.value, []).append(segment.length)

    signatures: List[EdgeSignature] = []
    for kind in sorted(lengths_by_kind):
        lengths = lengths_by_kind[kind]
        signatures.append(
            EdgeSignature(
                kind=kind,
                min_length=min(lengths) * (1.0 - length_tolerance),
                max_length=max(lengths) * (1.0 + length_tolerance),
                angle_tolerance_deg=angle_tolerance_deg,
            )
        )
    return tuple(signatures)


def build_regions(
    geometry: KensingtonGeometry,
    vertices: Sequence[Vertex],
    *,
    band: Tuple[float, float] = REGION_BAND,
) -> Tuple[HexagonRegion, ...]:
    hex_radius = geometry.layout.hex_radius
    inner_radius = band[0] * hex_radius
    outer_radius = band[1] * hex_radius
    regions: List[HexagonRegion] = []
    for hexagon in geometry.hexagons:
        members = tuple(
            vertex.id
            for vertex in vertices
            if inner_radius <= math.dist(vertex.point, hexagon.center) <= outer_radius
        )
        regions.append(
            HexagonRegion(
                number=hexagon.number,
                region_color=hexagon.region_color,
                center=hexagon.center,
                inner_radius=inner_radius,
                outer_radius=outer_radius,
                member_vertex_ids=members,
            )
        )
    return tuple(regions)


def build_board(layout: BoardLayout | None = None) -> BoardTopology:
    geometry = build_kensington_geometry(layout)
    vertices = build_vertices(geometry.corner_points())
    board = BoardTopology(
        vertices={vertex.id: vertex for vertex in vertices},
        signatures=derive_edge_signatures(geometry.segments),
        regions=build_regions(geometry, vertices),
        layout=geometry.layout,
    )
    logger.debug(
        "Built board topology: %d vertices, %d edges, %d regions (unit_size=%s).",
        len(board.vertices),
        len(board.edges()),
        len(board.regions),
        geometry.layout.unit_size,
    )
    return board


def _within_box(first: Point, second: Point, tolerance: float) -> bool:
    return abs(first[0] - second[0]) < tolerance and abs(first[1] - second[1]) < tolerance

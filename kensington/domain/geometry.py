from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

Point = Tuple[float, float]

DEFAULT_ORIGIN: Point = (400.0, 300.0)
DEFAULT_UNIT_SIZE = 120.0
OUTER_CORNER_THRESHOLD = 1.2
# Below this, corners 30 degrees apart fall inside the 5px vertex merge box.
MIN_UNIT_SIZE = 20.0


class RegionColor(str, Enum):
    RED = "red"
    BLUE = "blue"
    WHITE = "white"


class SegmentKind(str, Enum):
    HEXAGON_SIDE = "hexagon_side"
    SQUARE_SIDE = "square_side"
    CONNECTOR = "connector"


# Hexagon number -> (offset in units of hexagon spacing, fill colour).
HEXAGON_SLOTS: Dict[int, Tuple[Point, RegionColor]] = {
    1: ((-0.5, -math.sqrt(3) / 2), RegionColor.RED),
    2: ((0.5, -math.sqrt(3) / 2), RegionColor.RED),
    3: ((-1.0, 0.0), RegionColor.WHITE),
    4: ((0.0, 0.0), RegionColor.WHITE),
    5: ((1.0, 0.0), RegionColor.WHITE),
    6: ((-0.5, math.sqrt(3) / 2), RegionColor.BLUE),
    7: ((0.5, math.sqrt(3) / 2), RegionColor.BLUE),
}


@dataclass(frozen=True)
class BoardLayout:
    origin: Point = DEFAULT_ORIGIN
    unit_size: float = DEFAULT_UNIT_SIZE

    def __post_init__(self) -> None:
        if self.unit_size < MIN_UNIT_SIZE:
            raise ValueError(f"unit_size must be at least {MIN_UNIT_SIZE}, received {self.unit_size}.")

    @property
    def hex_radius(self) -> float:
        return self.unit_size * 0.5

    @property
    def square_side(self) -> float:
        return self.hex_radius

    @property
    def hexagon_spacing(self) -> float:
        # Apothem plus a full square on both sides: neighbours share one square.
        apothem = self.hex_radius * math.sqrt(3) / 2
        return 2 * (apothem + self.square_side / 2)


@dataclass(frozen=True)
class Segment:
    start: Point
    end: Point
    kind: SegmentKind

    @property
    def length(self) -> float:
        return math.dist(self.start, self.end)


@dataclass(frozen=True)
class HexagonOutline:
    number: int
    center: Point
    region_color: RegionColor
    corner_points: Tuple[Point, ...]
    squares: Tuple[Tuple[Point, ...], ...]

    def square_corners(self) -> List[Point]:
        return [corner for square in self.squares for corner in square]


@dataclass(frozen=True)
class KensingtonGeometry:
    layout: BoardLayout
    hexagons: Tuple[HexagonOutline, ...]
    segments: Tuple[Segment, ...]

    def corner_points(self) -> List[Point]:
        """Every polygon corner of the construction, duplicates included."""
        points: List[Point] = []
        for hexagon in self.hexagons:
            points.extend(hexagon.corner_points)
            points.extend(hexagon.square_corners())
        return points


def build_kensington_geometry(layout: BoardLayout | None = None) -> KensingtonGeometry:
    layout = layout or BoardLayout()
    hexagons: List[HexagonOutline] = []
    segments: List[Segment] = []

    spacing = layout.hexagon_spacing
    for number, (offset, region_color) in sorted(HEXAGON_SLOTS.items()):
        center = (
            layout.origin[0] + offset[0] * spacing,
            layout.origin[1] + offset[1] * spacing,
        )
        hexagon = _kensington_hexagon(number, center, region_color, layout)
        hexagons.append(hexagon)
        segments.extend(_hexagon_segments(hexagon, layout))

    return KensingtonGeometry(layout=layout, hexagons=tuple(hexagons), segments=tuple(segments))


def _polygon_corners(center: Point, radius: float, sides: int, rotation: float) -> Tuple[Point, ...]:
    return tuple(
        (
            center[0] + radius * math.cos(rotation + index * 2 * math.pi / sides),
            center[1] + radius * math.sin(rotation + index * 2 * math.pi / sides),
        )
        for index in range(sides)
    )


def _kensington_hexagon(
    number: int,
    center: Point,
    region_color: RegionColor,
    layout: BoardLayout,
) -> HexagonOutline:
    hex_radius = layout.hex_radius
    corners = _polygon_corners(center, hex_radius, 6, math.pi / 6)

    apothem = hex_radius * math.sqrt(3) / 2
    square_offset = apothem + layout.square_side / 2
    square_radius = layout.square_side / math.sqrt(2)

    squares: List[Tuple[Point, ...]] = []
    for index in range(6):
        angle = index * math.pi / 3
        square_center = (
            center[0] + math.cos(angle) * square_offset,
            center[1] + math.sin(angle) * square_offset,
        )
        rotation = math.pi / 4 + index * math.pi / 3
        squares.append(_polygon_corners(square_center, square_radius, 4, rotation))

    return HexagonOutline(
        number=number,
        center=center,
        region_color=region_color,
        corner_points=corners,
        squares=tuple(squares),
    )


def _closed_ring(points: Tuple[Point, ...]) -> List[Tuple[Point, Point]]:
    return list(zip(points, points[1:] + points[:1]))


def _hexagon_segments(hexagon: HexagonOutline, layout: BoardLayout) -> List[Segment]:
    segments = [
        Segment(start, end, SegmentKind.HEXAGON_SIDE)
        for start, end in _closed_ring(hexagon.corner_points)
    ]
    for square in hexagon.squares:
        segments.extend(
            Segment(start, end, SegmentKind.SQUARE_SIDE)
            for start, end in _closed_ring(square)
        )

    min_distance_from_center = layout.hex_radius * OUTER_CORNER_THRESHOLD
    for index, square in enumerate(hexagon.squares):
        next_square = hexagon.squares[(index + 1) % 6]
        best: Tuple[float, Point, Point] | None = None
        for first in square:
            if math.dist(first, hexagon.center) <= min_distance_from_center:
                continue
            for second in next_square:
                if math.dist(second, hexagon.center) <= min_distance_from_center:
                    continue
                distance = math.dist(first, second)
                if best is None or distance < best[0]:
                    best = (distance, first, second)
        if best is not None:
            segments.append(Segment(best[1], best[2], SegmentKind.CONNECTOR))
    return segments

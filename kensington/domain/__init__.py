"""Board construction and topology."""

from .board import (
    BoardTopology,
    Color,
    EdgeSignature,
    HexagonRegion,
    Vertex,
    build_board,
    build_vertices,
    is_adjacent,
)
from .geometry import BoardLayout, KensingtonGeometry, RegionColor, build_kensington_geometry

__all__ = [
    "BoardLayout",
    "BoardTopology",
    "Color",
    "EdgeSignature",
    "HexagonRegion",
    "KensingtonGeometry",
    "RegionColor",
    "Vertex",
    "build_board",
    "build_kensington_geometry",
    "build_vertices",
    "is_adjacent",
]

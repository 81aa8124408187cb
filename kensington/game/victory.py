from __future__ import annotations

from typing import Iterable, Mapping, Optional

from kensington.domain.board import BoardTopology, Color, HexagonRegion


def surrounded_regions(
    board: BoardTopology,
    occupancy: Mapping[int, Color],
    color: Color,
) -> list[HexagonRegion]:
    return [
        region
        for region in board.regions
        if region.is_eligible(color) and region.is_surrounded_by(occupancy, color)
    ]


def winning_region(
    board: BoardTopology,
    occupancy: Mapping[int, Color],
    colors: Iterable[Color],
) -> Optional[tuple[Color, HexagonRegion]]:
    """First colour (in the given order) that fully occupies an eligible region."""

    for color in colors:
        regions = surrounded_regions(board, occupancy, color)
        if regions:
            return color, regions[0]
    return None

from __future__ import annotations

import logging
import time
from collections import Counter

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from kensington.domain.board import Color, build_board
from kensington.domain.geometry import DEFAULT_UNIT_SIZE, MIN_UNIT_SIZE, BoardLayout
from kensington.game.engine import DEFAULT_TICK_LIMIT, GameEngine
from kensington.game.policies import MillSeekingPolicy, RandomPolicy

POLICY_CHOICES = ("random", "mill-seeking")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )


def _make_policy(name: str, seed: int):
    if name == "mill-seeking":
        return MillSeekingPolicy(seed=seed)
    return RandomPolicy(seed=seed)


@click.group()
def main() -> None:
    """Kensington board tools."""


@main.command()
@click.option(
    "--unit-size",
    default=DEFAULT_UNIT_SIZE,
    show_default=True,
    type=click.FloatRange(MIN_UNIT_SIZE, None),
    help="Board unit size in pixels (hexagon radius is half of it).",
)
def board(unit_size: float) -> None:
    """Build the board topology and summarise it."""

    console = Console()
    topology = build_board(BoardLayout(unit_size=unit_size))
    console.print(
        f"[green]Board built[/green] vertices={len(topology.vertices)} "
        f"edges={len(topology.edges())} regions={len(topology.regions)}"
    )

    table = Table(title="Hexagon Regions")
    table.add_column("Hexagon", justify="right")
    table.add_column("Colour")
    table.add_column("Winnable by")
    table.add_column("Members", justify="right")
    for region in topology.regions:
        table.add_row(
            str(region.number),
            region.region_color.value,
            ", ".join(color.value for color in region.eligible_colors),
            str(len(region.member_vertex_ids)),
        )
    console.print(table)


@main.command()
@click.option("--games", default=10, show_default=True, type=click.IntRange(1, None), help="Games to play.")
@click.option("--seed-start", default=1000, show_default=True, type=int, help="Seed of the first game.")
@click.option(
    "--max-ticks",
    default=DEFAULT_TICK_LIMIT,
    show_default=True,
    type=click.IntRange(1, None),
    help="Actions per game before it is abandoned as unfinished.",
)
@click.option(
    "--policy",
    "policy_name",
    default="random",
    show_default=True,
    type=click.Choice(POLICY_CHOICES, case_sensitive=False),
    help="Policy used by both players.",
)
@click.option("--verbose/--quiet", default=False, help="Log every applied action.")
def simulate(games: int, seed_start: int, max_ticks: int, policy_name: str, verbose: bool) -> None:
    """Play self-play games and print a summary."""

    _configure_logging(verbose)
    console = Console()
    topology = build_board()
    outcomes: Counter[str] = Counter()
    tick_sum = 0
    mill_sum = 0
    started = time.perf_counter()

    for offset in range(games):
        seed = seed_start + offset
        engine = GameEngine(
            topology,
            policies={
                Color.RED: _make_policy(policy_name.lower(), seed),
                Color.BLUE: _make_policy(policy_name.lower(), seed + 1),
            },
            tick_limit=max_ticks,
        )
        winner = engine.play()
        outcomes[winner.value if winner is not None else "unfinished"] += 1
        tick_sum += engine.ticks
        mill_sum += len(engine.state.formed_mill_ids)

    table = Table(title=f"Self-play Summary - {policy_name}")
    table.add_column("Games", justify="right")
    table.add_column("Red Wins", justify="right")
    table.add_column("Blue Wins", justify="right")
    table.add_column("Unfinished", justify="right")
    table.add_column("Avg Ticks", justify="right")
    table.add_column("Avg Mills", justify="right")
    table.add_row(
        str(games),
        str(outcomes[Color.RED.value]),
        str(outcomes[Color.BLUE.value]),
        str(outcomes["unfinished"]),
        f"{tick_sum / games:.1f}",
        f"{mill_sum / games:.2f}",
    )
    console.print(table)
    console.print(f"[green]Done.[/green] Runtime: {time.perf_counter() - started:.2f}s")


if __name__ == "__main__":
    main()

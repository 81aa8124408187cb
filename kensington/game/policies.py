from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence

from .actions import GameAction
from .rules import apply_action
from .state import GameState


class RandomPolicy:
    def __init__(self, *, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        if not legal_actions:
            raise ValueError("No legal actions available.")
        return self._rng.choice(list(legal_actions))


@dataclass
class MillSeekingPolicy:
    """
    One-ply greedy policy:
    win if possible, otherwise take the action that earns the most captures,
    never hand the opponent a win, and break ties at random.
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def decide(self, state: GameState, legal_actions: Sequence[GameAction]) -> GameAction:
        if not legal_actions:
            raise ValueError("No legal actions available.")

        color = state.current_player
        best_actions: list[GameAction] = []
        best_tuple = (-1, -1, -1)
        for action in legal_actions:
            next_state = apply_action(state, action)
            wins = 1 if next_state.winner is color else 0
            safe = 0 if next_state.winner is color.opponent else 1
            captures = next_state.remaining_captures if next_state.current_player is color else 0
            candidate = (wins, safe, captures)
            if candidate > best_tuple:
                best_tuple = candidate
                best_actions = [action]
            elif candidate == best_tuple:
                best_actions.append(action)

        return self._rng.choice(best_actions)

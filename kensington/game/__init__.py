"""Rules, state and game loop."""

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
from .engine import BoardSnapshot, FirstLegalPolicy, GameEngine
from .errors import InvalidTarget, NoSelection, RuleViolation, WrongTurn
from .mills import MillDetection, MillShape, SquareMill, TriangleMill, detect_mills, mill_id
from .policies import MillSeekingPolicy, RandomPolicy
from .rules import action_for_click, apply_action, list_legal_actions
from .state import GamePhase, GameState, RulesConfig, initialize_game_state
from .victory import surrounded_regions, winning_region

__all__ = [
    "ACTION_MOVE_TOKEN",
    "ACTION_PLACE_TOKEN",
    "ACTION_RELOCATE_CAPTURE",
    "ACTION_SELECT_CAPTURE",
    "ACTION_SELECT_TOKEN",
    "BoardSnapshot",
    "FirstLegalPolicy",
    "GameAction",
    "GameEngine",
    "GamePhase",
    "GameState",
    "InvalidTarget",
    "MillDetection",
    "MillSeekingPolicy",
    "MillShape",
    "NoSelection",
    "RandomPolicy",
    "RuleViolation",
    "RulesConfig",
    "SquareMill",
    "TriangleMill",
    "WrongTurn",
    "action_for_click",
    "apply_action",
    "detect_mills",
    "initialize_game_state",
    "list_legal_actions",
    "mill_id",
    "move_token",
    "place_token",
    "relocate_capture",
    "select_capture",
    "select_token",
    "surrounded_regions",
    "winning_region",
]

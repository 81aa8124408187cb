from __future__ import annotations


class RuleViolation(ValueError):
    """An input the rules reject; the game state stays as it was."""

    code: str = "rule_violation"

    def __init__(self, message: str, *, vertex_id: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.vertex_id = vertex_id


class InvalidTarget(RuleViolation):
    """Destination is occupied, not adjacent, or not a legal pick."""

    code = "invalid_target"


class WrongTurn(RuleViolation):
    """A token of the other player was selected outside mill removal."""

    code = "wrong_turn"


class NoSelection(RuleViolation):
    """A move or relocation was attempted with nothing selected."""

    code = "no_selection"

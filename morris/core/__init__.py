"""Core game logic: board geometry, turn state and the rules engine."""

from .state import (
    PLAYERS,
    Action,
    AwaitingRemoval,
    GameOver,
    Line,
    Movement,
    Owner,
    Phase,
    Placement,
    Setup,
    TurnState,
)
from .errors import (
    ConfigError,
    Failure,
    IllegalActionError,
    MorrisError,
    OutOfRangeError,
    describe,
)
from .board import CELLS_PER_RING, Board
from .rules import (
    MIN_PIECES_IN_PLAY,
    ActionResult,
    RulesEngine,
    all_pieces_in_mills,
    has_legal_move,
    in_mill,
    mill_lines_through,
    movable_targets,
    removable_positions,
)

__all__ = [
    "PLAYERS",
    "Action",
    "ActionResult",
    "AwaitingRemoval",
    "Board",
    "CELLS_PER_RING",
    "ConfigError",
    "Failure",
    "GameOver",
    "IllegalActionError",
    "Line",
    "MIN_PIECES_IN_PLAY",
    "MorrisError",
    "Movement",
    "OutOfRangeError",
    "Owner",
    "Phase",
    "Placement",
    "RulesEngine",
    "Setup",
    "TurnState",
    "all_pieces_in_mills",
    "describe",
    "has_legal_move",
    "in_mill",
    "mill_lines_through",
    "movable_targets",
    "removable_positions",
]

"""Failure taxonomy for rejected actions and the exceptions built on it.

The rules engine reports user mistakes as :class:`Failure` values rather
than raising, so a front end can show ``failure.message`` and let the
player try again. The exception classes are for programmer errors (bad
indices handed to :class:`~morris.core.board.Board`, broken config files)
and for callers that want illegal actions to raise.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class Failure(Enum):
    OCCUPIED_CELL = "occupied_cell"
    OUT_OF_RANGE = "out_of_range"
    WRONG_PHASE = "wrong_phase"
    WRONG_PLAYER = "wrong_player"
    NOT_OWNER = "not_owner"
    NOT_ADJACENT = "not_adjacent"
    PROTECTED_BY_MILL = "protected_by_mill"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: Dict[Failure, str] = {
    Failure.OCCUPIED_CELL: "A piece cannot be placed on another piece.",
    Failure.OUT_OF_RANGE: "That position is not on the board.",
    Failure.WRONG_PHASE: "That action is not allowed at this stage of the game.",
    Failure.WRONG_PLAYER: "It is not this player's turn.",
    Failure.NOT_OWNER: "This piece belongs to the wrong player.",
    Failure.NOT_ADJACENT: "Pieces can only slide to an adjacent position.",
    Failure.PROTECTED_BY_MILL: (
        "That piece is part of a mill; remove a piece outside a mill first."
    ),
}


def describe(failure: Optional[Failure]) -> str:
    if failure is None:
        return ""
    return failure.message


class MorrisError(Exception):
    """Base exception for the package.

    Attributes:
        code: Machine-readable error code
        message: Human-readable description
        context: Extra values for debugging
    """

    code: str = "MORRIS_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"


class OutOfRangeError(MorrisError, IndexError):
    code = "OUT_OF_RANGE"

    def __init__(self, index: int, size: int) -> None:
        super().__init__(
            f"Board index {index} outside [0, {size}).",
            context={"index": index, "size": size},
        )
        self.index = index
        self.size = size


class IllegalActionError(MorrisError, ValueError):
    """Raised by :meth:`ActionResult.raise_for_failure`."""

    code = "ILLEGAL_ACTION"

    def __init__(self, failure: Failure, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(failure.message, code=failure.name, context=context)
        self.failure = failure


class ConfigError(MorrisError, ValueError):
    code = "CONFIG_ERROR"

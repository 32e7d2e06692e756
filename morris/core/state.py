from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import ClassVar, Optional, Tuple, Union


class Owner(IntEnum):
    EMPTY = 0
    PLAYER_A = 1
    PLAYER_B = 2

    @property
    def opponent(self) -> "Owner":
        if self == Owner.PLAYER_A:
            return Owner.PLAYER_B
        if self == Owner.PLAYER_B:
            return Owner.PLAYER_A
        raise ValueError("EMPTY has no opponent.")


PLAYERS: Tuple[Owner, Owner] = (Owner.PLAYER_A, Owner.PLAYER_B)


class Phase(Enum):
    SETUP = "setup"
    PLACEMENT = "placement"
    MOVEMENT = "movement"
    AWAITING_REMOVAL = "awaiting_removal"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Setup:
    """Board being arranged by hand; no player has the turn yet."""

    phase: ClassVar[Phase] = Phase.SETUP


@dataclass(frozen=True)
class Placement:
    phase: ClassVar[Phase] = Phase.PLACEMENT


@dataclass(frozen=True)
class Movement:
    phase: ClassVar[Phase] = Phase.MOVEMENT


@dataclass(frozen=True)
class AwaitingRemoval:
    """``player`` closed a mill and must remove one opponent piece.

    ``resume`` is the phase (placement or movement) the game returns to
    once the removal is done.
    """

    player: Owner
    resume: Phase
    phase: ClassVar[Phase] = Phase.AWAITING_REMOVAL


@dataclass(frozen=True)
class GameOver:
    winner: Owner
    phase: ClassVar[Phase] = Phase.GAME_OVER


TurnState = Union[Setup, Placement, Movement, AwaitingRemoval, GameOver]

Line = Tuple[int, int, int]


@dataclass(frozen=True)
class Action:
    """A single player intent. ``source`` is only set for moves."""

    kind: str  # "place", "move" or "remove"
    target: int
    source: Optional[int] = None

    @staticmethod
    def place(index: int) -> "Action":
        return Action("place", index)

    @staticmethod
    def move(source: int, target: int) -> "Action":
        return Action("move", target, source)

    @staticmethod
    def remove(index: int) -> "Action":
        return Action("remove", index)

    def as_tuple(self) -> Tuple[str, Optional[int], int]:
        return (self.kind, self.source, self.target)

"""Computer opponent."""

from .opponent import NO_MOVE, NO_POSITION, AIOpponent

__all__ = ["AIOpponent", "NO_MOVE", "NO_POSITION"]

"""Agent-vs-agent matches for measuring the computer opponent."""

from .match import (
    Agent,
    EvaluationResult,
    GameRecord,
    HeuristicAgent,
    RandomAgent,
    evaluate_agents,
    play_game,
)

__all__ = [
    "Agent",
    "EvaluationResult",
    "GameRecord",
    "HeuristicAgent",
    "RandomAgent",
    "evaluate_agents",
    "play_game",
]

"""Men's Morris rules engine and computer opponent."""

from . import ai, config, core, env, evaluation, features
from .ai import AIOpponent
from .config import VARIANTS, GameConfig, RunConfig, load_config, variant
from .core import (
    Action,
    ActionResult,
    Board,
    Failure,
    IllegalActionError,
    MorrisError,
    OutOfRangeError,
    Owner,
    Phase,
    RulesEngine,
)
from .env import MorrisEnv
from .evaluation import (
    EvaluationResult,
    HeuristicAgent,
    RandomAgent,
    evaluate_agents,
    play_game,
)

__all__ = [
    "ai",
    "config",
    "core",
    "env",
    "evaluation",
    "features",
    "AIOpponent",
    "Action",
    "ActionResult",
    "Board",
    "EvaluationResult",
    "Failure",
    "GameConfig",
    "HeuristicAgent",
    "IllegalActionError",
    "MorrisEnv",
    "MorrisError",
    "OutOfRangeError",
    "Owner",
    "Phase",
    "RandomAgent",
    "RulesEngine",
    "RunConfig",
    "VARIANTS",
    "evaluate_agents",
    "load_config",
    "play_game",
    "variant",
]

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

import numpy as np

from morris.ai import NO_MOVE, NO_POSITION, AIOpponent
from morris.config import GameConfig
from morris.core import Action, Owner, Phase, RulesEngine

logger = logging.getLogger(__name__)


class Agent:
    """Something that picks the next action for the side to play."""

    def act(self, engine: RulesEngine) -> Action:
        raise NotImplementedError


class RandomAgent(Agent):
    def __init__(self, rng: Optional[np.random.Generator] = None) -> None:
        self.rng = rng or np.random.default_rng()

    def act(self, engine: RulesEngine) -> Action:
        legal = engine.legal_actions()
        if not legal:
            raise RuntimeError("No legal action available.")
        return legal[int(self.rng.integers(len(legal)))]


class HeuristicAgent(Agent):
    """Routes the engine's phase to the matching :class:`AIOpponent` call.

    The AI only ever sees a read-only snapshot of the board.
    """

    def __init__(self, opponent: AIOpponent) -> None:
        self.opponent = opponent

    def act(self, engine: RulesEngine) -> Action:
        board = engine.board.snapshot()
        phase = engine.phase
        if phase == Phase.PLACEMENT:
            index = self.opponent.choose_placement(board)
            if index != NO_POSITION:
                return Action.place(index)
        elif phase == Phase.AWAITING_REMOVAL:
            index = self.opponent.choose_removal(board, self.opponent.player_color)
            if index != NO_POSITION:
                return Action.remove(index)
        elif phase == Phase.MOVEMENT:
            move = self.opponent.choose_move(board)
            if move != NO_MOVE:
                return Action.move(*move)
        raise RuntimeError(f"AI found no action in phase {phase.value}.")


@dataclass
class GameRecord:
    actions: List[Action] = field(default_factory=list)
    winner: Optional[Owner] = None
    truncated: bool = False

    @property
    def length(self) -> int:
        return len(self.actions)


@dataclass
class EvaluationResult:
    games_played: int
    a_wins: int
    b_wins: int
    draws: int
    average_length: float

    def winrate_a(self) -> float:
        return self.a_wins / max(1, self.games_played)

    def winrate_b(self) -> float:
        return self.b_wins / max(1, self.games_played)


def play_game(
    agent_a: Agent,
    agent_b: Agent,
    *,
    config: Optional[GameConfig] = None,
    max_ply: int = 200,
    first_player: Optional[Owner] = Owner.PLAYER_A,
    rng: Optional[np.random.Generator] = None,
) -> GameRecord:
    engine = RulesEngine.new_game(config, first_player, rng=rng)
    agents = {Owner.PLAYER_A: agent_a, Owner.PLAYER_B: agent_b}
    record = GameRecord()

    while not engine.is_over:
        if record.length >= max_ply:
            record.truncated = True
            break
        state = engine.state
        player = state.player if engine.phase == Phase.AWAITING_REMOVAL else engine.current_player
        action = agents[player].act(engine)
        result = engine.apply(action, player)
        # Agents only choose among legal actions; a rejection is a bug.
        result.raise_for_failure()
        record.actions.append(action)

    record.winner = engine.winner
    logger.debug("Game finished after %d actions, winner=%s", record.length, record.winner)
    return record


def evaluate_agents(
    agent_a: Agent,
    agent_b: Agent,
    *,
    episodes: int,
    config: Optional[GameConfig] = None,
    max_ply: int = 200,
    game_factory: Optional[Callable[..., GameRecord]] = None,
) -> EvaluationResult:
    game_factory = game_factory or play_game

    a_wins = 0
    b_wins = 0
    draws = 0
    total_ply = 0

    for _ in range(episodes):
        record = game_factory(agent_a, agent_b, config=config, max_ply=max_ply)
        total_ply += record.length
        if record.winner == Owner.PLAYER_A:
            a_wins += 1
        elif record.winner == Owner.PLAYER_B:
            b_wins += 1
        else:
            draws += 1

    average_length = total_ply / max(1, episodes)
    return EvaluationResult(
        games_played=episodes,
        a_wins=a_wins,
        b_wins=b_wins,
        draws=draws,
        average_length=average_length,
    )

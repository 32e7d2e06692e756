from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import numpy as np

from morris.config import GameConfig

from .board import Board
from .errors import Failure, IllegalActionError
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

logger = logging.getLogger(__name__)

MIN_PIECES_IN_PLAY = 3


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one ``attempt_*`` call.

    A rejected action carries ``failure`` and left the board untouched.
    ``mills`` lists every line the action closed; at most one removal
    follows no matter how many there are.
    """

    action: Action
    player: Owner
    failure: Optional[Failure] = None
    mills: Tuple[Line, ...] = ()
    game_over: bool = False
    winner: Optional[Owner] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def mill_formed(self) -> bool:
        return bool(self.mills)

    @property
    def message(self) -> str:
        return self.failure.message if self.failure is not None else ""

    def raise_for_failure(self) -> "ActionResult":
        if self.failure is not None:
            raise IllegalActionError(
                self.failure,
                context={"action": self.action.as_tuple(), "player": self.player.name},
            )
        return self


# ----------------------------------------------------------------------
# Mill helpers shared with the AI
# ----------------------------------------------------------------------
def mill_lines_through(board: Board, index: int, owner: Owner) -> List[Line]:
    """Lines through ``index`` whose three cells all belong to ``owner``."""
    if owner == Owner.EMPTY:
        return []
    return [
        line
        for line in board.lines_through(index)
        if all(board.cell_state(cell) == owner for cell in line)
    ]


def in_mill(board: Board, index: int) -> bool:
    return bool(mill_lines_through(board, index, board.cell_state(index)))


def all_pieces_in_mills(board: Board, owner: Owner) -> bool:
    return all(in_mill(board, index) for index in board.positions_of(owner))


def removable_positions(board: Board, owner: Owner) -> List[int]:
    """Pieces of ``owner`` that may be captured, ascending.

    Pieces inside a mill are only exposed once every piece is in one.
    """
    positions = board.positions_of(owner)
    unprotected = [index for index in positions if not in_mill(board, index)]
    return unprotected if unprotected else positions


def movable_targets(board: Board, index: int) -> List[int]:
    return [n for n in board.neighbors(index) if board.is_empty(n)]


def has_legal_move(board: Board, player: Owner) -> bool:
    return any(movable_targets(board, index) for index in board.positions_of(player))


# ----------------------------------------------------------------------
# Engine
# ----------------------------------------------------------------------
class RulesEngine:
    """Turn and phase state machine; the only writer of the board.

    A new engine starts in setup mode where pieces can be arranged freely
    with :meth:`setup_cell`; :meth:`start` hands the turn to a player.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        board: Optional[Board] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self.config = config or GameConfig()
        if board is None:
            board = Board(self.config.layer_count)
        elif board.layer_count != self.config.layer_count:
            raise ValueError("Board ring count does not match the config.")
        self.board = board
        self._rng = rng or np.random.default_rng()
        self._state: TurnState = Setup()
        self._current: Optional[Owner] = None
        self._to_place: Dict[Owner, int] = {
            player: max(0, self.config.pieces_per_player - board.count_pieces(player))
            for player in PLAYERS
        }
        self._history: List[ActionResult] = []

    @classmethod
    def new_game(
        cls,
        config: Optional[GameConfig] = None,
        first_player: Optional[Owner] = Owner.PLAYER_A,
        *,
        rng: Optional[np.random.Generator] = None,
    ) -> "RulesEngine":
        engine = cls(config, rng=rng)
        engine.start(first_player)
        return engine

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------
    @property
    def state(self) -> TurnState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def current_player(self) -> Optional[Owner]:
        return self._current

    @property
    def winner(self) -> Optional[Owner]:
        return self._state.winner if isinstance(self._state, GameOver) else None

    @property
    def is_over(self) -> bool:
        return isinstance(self._state, GameOver)

    @property
    def history(self) -> Tuple[ActionResult, ...]:
        return tuple(self._history)

    def pieces_to_place(self, player: Owner) -> int:
        return self._to_place[player]

    def pieces_in_play(self, player: Owner) -> int:
        return self.board.count_pieces(player) + self._to_place[player]

    def has_legal_move(self, player: Owner) -> bool:
        return has_legal_move(self.board, player)

    # ------------------------------------------------------------------
    # Setup mode
    # ------------------------------------------------------------------
    def setup_cell(self, index: int, owner: Owner) -> ActionResult:
        """Put ``owner`` (or nothing) on ``index`` before the game starts.

        Pieces come out of and go back into the players' reserves.
        """
        action = Action.place(index)
        if not isinstance(self._state, Setup):
            return self._reject(action, owner, Failure.WRONG_PHASE)
        if not self.board.in_range(index):
            return self._reject(action, owner, Failure.OUT_OF_RANGE)
        previous = self.board.cell_state(index)
        if owner != Owner.EMPTY and owner != previous and self._to_place[owner] == 0:
            return self._reject(action, owner, Failure.WRONG_PLAYER)
        if previous != Owner.EMPTY:
            self._to_place[previous] += 1
        if owner != Owner.EMPTY:
            self._to_place[owner] -= 1
        self.board.set_cell(index, owner)
        return ActionResult(action, owner)

    def start(self, first_player: Optional[Owner] = None) -> Owner:
        if not isinstance(self._state, Setup):
            raise IllegalActionError(Failure.WRONG_PHASE, context={"phase": self.phase.value})
        if first_player is None:
            first_player = PLAYERS[int(self._rng.integers(len(PLAYERS)))]
        if first_player not in PLAYERS:
            raise ValueError(f"{first_player!r} cannot take a turn.")
        self._current = first_player
        if any(self._to_place.values()):
            self._state = Placement()
            if self._to_place[first_player] == 0:
                self._current = first_player.opponent
        else:
            self._state = Movement()
            if not self.has_legal_move(first_player):
                self._finish(first_player.opponent)
        logger.info("Game started: %s to play, phase=%s", self._current.name, self.phase.value)
        return self._current

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------
    def attempt_place(self, index: int, player: Owner) -> ActionResult:
        action = Action.place(index)
        if not isinstance(self._state, Placement):
            return self._reject(action, player, Failure.WRONG_PHASE)
        if player != self._current or self._to_place[player] == 0:
            return self._reject(action, player, Failure.WRONG_PLAYER)
        if not self.board.in_range(index):
            return self._reject(action, player, Failure.OUT_OF_RANGE)
        if not self.board.is_empty(index):
            return self._reject(action, player, Failure.OCCUPIED_CELL)

        self.board.set_cell(index, player)
        self._to_place[player] -= 1
        return self._after_landing(action, player, Phase.PLACEMENT)

    def attempt_move(self, source: int, target: int, player: Owner) -> ActionResult:
        action = Action.move(source, target)
        if not isinstance(self._state, Movement):
            return self._reject(action, player, Failure.WRONG_PHASE)
        if player != self._current:
            return self._reject(action, player, Failure.WRONG_PLAYER)
        if not (self.board.in_range(source) and self.board.in_range(target)):
            return self._reject(action, player, Failure.OUT_OF_RANGE)
        if self.board.cell_state(source) != player:
            return self._reject(action, player, Failure.NOT_OWNER)
        if target not in self.board.neighbors(source):
            return self._reject(action, player, Failure.NOT_ADJACENT)
        if not self.board.is_empty(target):
            return self._reject(action, player, Failure.OCCUPIED_CELL)

        self.board.set_cell(source, Owner.EMPTY)
        self.board.set_cell(target, player)
        return self._after_landing(action, player, Phase.MOVEMENT)

    def attempt_remove(self, index: int, requester: Owner) -> ActionResult:
        action = Action.remove(index)
        state = self._state
        if not isinstance(state, AwaitingRemoval) or state.player != requester:
            return self._reject(action, requester, Failure.WRONG_PHASE)
        if not self.board.in_range(index):
            return self._reject(action, requester, Failure.OUT_OF_RANGE)
        opponent = requester.opponent
        if self.board.cell_state(index) != opponent:
            return self._reject(action, requester, Failure.NOT_OWNER)
        if in_mill(self.board, index) and not all_pieces_in_mills(self.board, opponent):
            return self._reject(action, requester, Failure.PROTECTED_BY_MILL)

        self.board.set_cell(index, Owner.EMPTY)
        logger.debug("%s removed opponent piece at %d", requester.name, index)
        if self.pieces_in_play(opponent) < MIN_PIECES_IN_PLAY:
            self._finish(requester)
        else:
            self._advance_turn(state.resume)
        return self._record(ActionResult(action, requester, game_over=self.is_over, winner=self.winner))

    def apply(self, action: Action, player: Optional[Owner] = None) -> ActionResult:
        if player is None:
            state = self._state
            player = state.player if isinstance(state, AwaitingRemoval) else self._current
        if player is None:
            return self._reject(action, Owner.EMPTY, Failure.WRONG_PHASE)
        if action.kind == "place":
            return self.attempt_place(action.target, player)
        if action.kind == "remove":
            return self.attempt_remove(action.target, player)
        if action.kind == "move" and action.source is not None:
            return self.attempt_move(action.source, action.target, player)
        raise ValueError(f"Unknown action kind {action.kind!r}.")

    def legal_actions(self, player: Optional[Owner] = None) -> List[Action]:
        state = self._state
        if isinstance(state, AwaitingRemoval):
            if player is not None and player != state.player:
                return []
            return [
                Action.remove(index)
                for index in removable_positions(self.board, state.player.opponent)
            ]
        if player is None:
            player = self._current
        if player is None or player != self._current:
            return []
        if isinstance(state, Placement):
            if self._to_place[player] == 0:
                return []
            return [Action.place(index) for index in self.board.empty_positions()]
        if isinstance(state, Movement):
            return [
                Action.move(index, target)
                for index in self.board.positions_of(player)
                for target in movable_targets(self.board, index)
            ]
        return []

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _after_landing(self, action: Action, player: Owner, origin: Phase) -> ActionResult:
        mills = tuple(mill_lines_through(self.board, action.target, player))
        if mills and self.board.count_pieces(player.opponent) == 0:
            # Nothing to capture; the mill still counts but the turn passes.
            logger.debug("%s closed a mill with no opponent piece on the board", player.name)
            self._advance_turn(origin)
        elif mills:
            logger.debug("%s closed %d mill(s): %s", player.name, len(mills), mills)
            self._state = AwaitingRemoval(player=player, resume=origin)
        else:
            self._advance_turn(origin)
        return self._record(
            ActionResult(action, player, mills=mills, game_over=self.is_over, winner=self.winner)
        )

    def _advance_turn(self, origin: Phase) -> None:
        mover = self._current
        assert mover is not None
        following = mover.opponent
        if origin == Phase.PLACEMENT and any(self._to_place.values()):
            self._state = Placement()
            self._current = following if self._to_place[following] > 0 else mover
            return
        if origin == Phase.PLACEMENT:
            logger.info("All pieces placed; movement phase begins")
        self._state = Movement()
        self._current = following
        if not self.has_legal_move(following):
            logger.info("%s has no legal move", following.name)
            self._finish(mover)

    def _finish(self, winner: Owner) -> None:
        self._state = GameOver(winner=winner)
        logger.info("Game over: %s wins", winner.name)

    def _record(self, result: ActionResult) -> ActionResult:
        self._history.append(result)
        return result

    def _reject(self, action: Action, player: Owner, failure: Failure) -> ActionResult:
        logger.debug("Rejected %s by %s: %s", action.as_tuple(), player.name, failure.value)
        return ActionResult(action, player, failure=failure)

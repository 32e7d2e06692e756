from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from morris.core import Board, Owner, all_pieces_in_mills, in_mill

logger = logging.getLogger(__name__)

NO_POSITION = -1
NO_MOVE: Tuple[int, int] = (-1, -1)


class AIOpponent:
    """Positional heuristic player.

    Every decision is a fixed scan over the board with no lookahead. The
    only state kept between calls is the two colours and the random
    generator used to break ties when choosing a move, so seeding the
    generator makes play reproducible.
    """

    def __init__(
        self,
        ai_color: Owner = Owner.PLAYER_B,
        player_color: Optional[Owner] = None,
        *,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if ai_color == Owner.EMPTY:
            raise ValueError("AI colour must be a player.")
        self.ai_color = ai_color
        self.player_color = player_color if player_color is not None else ai_color.opponent
        self.rng = rng or np.random.default_rng()

    def choose_placement(self, board: Board) -> int:
        """First empty joint, then first empty mid-edge."""
        for start in (0, 1):
            for index in range(start, board.size, 2):
                if board.is_empty(index):
                    return index
        return NO_POSITION

    def choose_removal(self, board: Board, opponent_color: Optional[Owner] = None) -> int:
        """Lowest opponent piece outside a mill, or the lowest piece at all
        when every one of them sits in a mill."""
        opponent = opponent_color if opponent_color is not None else self.player_color
        positions = board.positions_of(opponent)
        if all_pieces_in_mills(board, opponent):
            return positions[0] if positions else NO_POSITION
        for index in positions:
            if not in_mill(board, index):
                return index
        return NO_POSITION

    def choose_move(self, board: Board) -> Tuple[int, int]:
        for index in range(board.size):
            if board.cell_state(index) != self.ai_color:
                continue
            prev, nxt = board.ring_neighbors(index)
            if index % 2 == 0:
                candidates: List[int] = [
                    cell for cell in (prev, nxt) + board.spoke_neighbors(index) if board.is_empty(cell)
                ]
                if not candidates:
                    continue
                target = candidates[int(self.rng.integers(len(candidates)))]
                return index, target

            prev_empty = board.is_empty(prev)
            next_empty = board.is_empty(nxt)
            if not prev_empty and not next_empty:
                continue
            if prev_empty != next_empty:
                return index, prev if prev_empty else nxt
            return index, prev if int(self.rng.integers(2)) == 1 else nxt

        logger.debug("%s has no piece with an empty neighbour", self.ai_color.name)
        return NO_MOVE

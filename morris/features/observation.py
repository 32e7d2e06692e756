from __future__ import annotations

from typing import Tuple

import numpy as np

from morris.core import PLAYERS, Owner, Phase, RulesEngine

BOARD_CHANNELS = 3  # empty / player A / player B
PHASE_ORDER = tuple(Phase)
AUX_VECTOR_SIZE = len(PHASE_ORDER) + 2 + 2  # phase one-hot + current player one-hot + reserves


def build_board_tensor(engine: RulesEngine) -> np.ndarray:
    """Return a one-hot board tensor with shape (3, cells)."""
    cells = engine.board.cells
    tensor = np.zeros((BOARD_CHANNELS, cells.shape[0]), dtype=np.float32)
    for owner in Owner:
        tensor[int(owner)] = (cells == int(owner)).astype(np.float32)
    return tensor


def build_aux_vector(engine: RulesEngine) -> np.ndarray:
    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[PHASE_ORDER.index(engine.phase)] = 1.0
    offset = len(PHASE_ORDER)
    if engine.current_player is not None:
        aux[offset + PLAYERS.index(engine.current_player)] = 1.0
    offset += len(PLAYERS)
    per_player = engine.config.pieces_per_player
    for i, player in enumerate(PLAYERS):
        aux[offset + i] = engine.pieces_to_place(player) / per_player
    return aux


def state_to_numpy(engine: RulesEngine) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(engine), build_aux_vector(engine)

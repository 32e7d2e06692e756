import numpy as np

from morris.core import Owner, Phase, RulesEngine
from morris.features import AUX_VECTOR_SIZE, build_aux_vector, build_board_tensor, state_to_numpy


def test_board_tensor_is_one_hot():
    engine = RulesEngine.new_game()
    engine.attempt_place(0, Owner.PLAYER_A)
    engine.attempt_place(9, Owner.PLAYER_B)
    board = build_board_tensor(engine)

    assert board.shape == (3, 16)
    assert np.all(board.sum(axis=0) == 1.0)
    assert board[1, 0] == 1.0
    assert board[2, 9] == 1.0
    assert board[0].sum() == 14


def test_aux_vector_encodes_phase_player_and_reserves():
    engine = RulesEngine.new_game()
    engine.attempt_place(0, Owner.PLAYER_A)
    aux = build_aux_vector(engine)

    assert aux.shape == (AUX_VECTOR_SIZE,)
    assert aux[list(Phase).index(Phase.PLACEMENT)] == 1.0
    assert aux[:5].sum() == 1.0
    # Player B to move.
    assert aux[5] == 0.0 and aux[6] == 1.0
    assert np.isclose(aux[7], 5 / 6)
    assert np.isclose(aux[8], 1.0)


def test_state_to_numpy_pairs_both_encodings():
    board, aux = state_to_numpy(RulesEngine())
    assert board.shape == (3, 16)
    assert aux[list(Phase).index(Phase.SETUP)] == 1.0
    assert aux[5:7].sum() == 0.0

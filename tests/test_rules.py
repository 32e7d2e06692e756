import numpy as np
import pytest

from morris.config import GameConfig
from morris.core import (
    Action,
    AwaitingRemoval,
    Failure,
    GameOver,
    IllegalActionError,
    Owner,
    Phase,
    RulesEngine,
    all_pieces_in_mills,
    in_mill,
)

A = Owner.PLAYER_A
B = Owner.PLAYER_B


def arranged(config: GameConfig, pieces: dict, first: Owner = A) -> RulesEngine:
    engine = RulesEngine(config)
    for owner, cells in pieces.items():
        for index in cells:
            assert engine.setup_cell(index, owner).ok
    engine.start(first)
    return engine


def play(engine: RulesEngine, *places: int) -> None:
    for index in places:
        result = engine.attempt_place(index, engine.current_player)
        assert result.ok, result.failure


def test_new_game_starts_in_placement() -> None:
    engine = RulesEngine.new_game()
    assert engine.phase == Phase.PLACEMENT
    assert engine.current_player == A
    assert engine.pieces_to_place(A) == 6
    assert engine.board.size == 16


def test_setup_mode_has_no_current_player() -> None:
    engine = RulesEngine()
    assert engine.phase == Phase.SETUP
    assert engine.current_player is None
    assert engine.attempt_place(0, A).failure == Failure.WRONG_PHASE


def test_start_picks_first_player_from_rng() -> None:
    first = RulesEngine(rng=np.random.default_rng(3)).start()
    again = RulesEngine(rng=np.random.default_rng(3)).start()
    assert first == again
    assert first in (A, B)


def test_start_twice_raises() -> None:
    engine = RulesEngine.new_game()
    with pytest.raises(IllegalActionError):
        engine.start(A)


def test_place_rejects_wrong_player_and_occupied_cell() -> None:
    engine = RulesEngine.new_game()
    assert engine.attempt_place(0, B).failure == Failure.WRONG_PLAYER
    assert engine.attempt_place(0, A).ok
    assert engine.attempt_place(0, B).failure == Failure.OCCUPIED_CELL
    assert engine.attempt_place(16, B).failure == Failure.OUT_OF_RANGE
    assert engine.current_player == B


def test_failed_action_leaves_state_untouched() -> None:
    engine = RulesEngine.new_game()
    before = engine.board.cells.copy()
    engine.attempt_move(0, 1, A)
    engine.attempt_remove(3, A)
    assert np.array_equal(engine.board.cells, before)
    assert engine.pieces_to_place(A) == 6
    assert engine.history == ()


def test_placement_phase_has_exactly_twice_pieces_per_player_placements() -> None:
    engine = RulesEngine.new_game()
    # A takes the joints, B the mid-edges: no line is ever completed.
    for count, index in enumerate(range(12), start=1):
        result = engine.attempt_place(index, engine.current_player)
        assert result.ok
        assert not result.mill_formed
        if count < 12:
            assert engine.phase == Phase.PLACEMENT
    assert engine.phase == Phase.MOVEMENT
    assert engine.current_player == A
    assert engine.pieces_to_place(A) == engine.pieces_to_place(B) == 0
    assert engine.attempt_place(12, A).failure == Failure.WRONG_PHASE


def test_exhausted_reserve_skips_that_player() -> None:
    engine = RulesEngine(GameConfig(pieces_per_player=3))
    engine.setup_cell(0, A)
    engine.setup_cell(2, A)
    engine.setup_cell(4, A)
    engine.start(A)

    assert engine.current_player == B
    assert engine.attempt_place(9, A).failure == Failure.WRONG_PLAYER
    play(engine, 9, 11)
    assert engine.phase == Phase.PLACEMENT
    assert engine.current_player == B
    play(engine, 13)
    assert engine.phase == Phase.MOVEMENT


def test_three_in_a_row_enters_awaiting_removal() -> None:
    engine = RulesEngine.new_game()
    play(engine, 0, 8, 1, 9)
    result = engine.attempt_place(2, A)

    assert result.ok
    assert result.mills == ((0, 1, 2),)
    assert engine.state == AwaitingRemoval(player=A, resume=Phase.PLACEMENT)
    assert engine.current_player == A

    removal = engine.attempt_remove(8, A)
    assert removal.ok
    assert engine.board.cell_state(8) == Owner.EMPTY
    assert engine.phase == Phase.PLACEMENT
    assert engine.current_player == B
    assert engine.pieces_in_play(B) == 5


def test_mill_closed_on_mid_edge() -> None:
    engine = RulesEngine.new_game()
    play(engine, 8, 3, 10, 5)
    result = engine.attempt_place(9, A)
    assert result.mill_formed
    assert engine.phase == Phase.AWAITING_REMOVAL


def test_awaiting_removal_blocks_other_actions() -> None:
    engine = RulesEngine.new_game()
    play(engine, 0, 8, 1, 9, 2)

    assert engine.attempt_place(12, A).failure == Failure.WRONG_PHASE
    assert engine.attempt_place(12, B).failure == Failure.WRONG_PHASE
    assert engine.attempt_remove(0, B).failure == Failure.WRONG_PHASE
    assert engine.attempt_remove(0, A).failure == Failure.NOT_OWNER
    assert engine.attempt_remove(12, A).failure == Failure.NOT_OWNER


def test_remove_outside_capture_is_wrong_phase() -> None:
    engine = RulesEngine.new_game()
    play(engine, 0, 8)
    assert engine.attempt_remove(8, A).failure == Failure.WRONG_PHASE


def test_move_validation() -> None:
    engine = arranged(GameConfig(pieces_per_player=3), {A: [0, 4, 13], B: [1, 9, 14]})
    assert engine.phase == Phase.MOVEMENT

    assert engine.attempt_move(0, 7, B).failure == Failure.WRONG_PLAYER
    assert engine.attempt_move(1, 2, A).failure == Failure.NOT_OWNER
    assert engine.attempt_move(0, 2, A).failure == Failure.NOT_ADJACENT
    assert engine.attempt_move(0, 1, A).failure == Failure.OCCUPIED_CELL
    assert engine.attempt_move(0, 99, A).failure == Failure.OUT_OF_RANGE
    assert engine.attempt_place(5, A).failure == Failure.WRONG_PHASE

    result = engine.attempt_move(0, 8, A)
    assert result.ok
    assert engine.board.cell_state(0) == Owner.EMPTY
    assert engine.board.cell_state(8) == A
    assert engine.current_player == B


def test_mill_in_movement_and_protection() -> None:
    engine = arranged(GameConfig(pieces_per_player=4), {A: [8, 9, 11, 14], B: [0, 1, 2, 12]})
    result = engine.attempt_move(11, 10, A)
    assert result.mills == ((8, 9, 10),)
    assert engine.state == AwaitingRemoval(player=A, resume=Phase.MOVEMENT)

    assert in_mill(engine.board, 0)
    protected = engine.attempt_remove(0, A)
    assert protected.failure == Failure.PROTECTED_BY_MILL
    assert engine.board.cell_state(0) == B

    assert engine.attempt_remove(12, A).ok
    assert engine.phase == Phase.MOVEMENT
    assert engine.current_player == B
    assert not engine.is_over


def test_any_piece_removable_when_all_in_mills() -> None:
    engine = arranged(GameConfig(pieces_per_player=3), {A: [8, 9, 11], B: [0, 1, 2]})
    engine.attempt_move(11, 10, A)
    assert all_pieces_in_mills(engine.board, B)

    result = engine.attempt_remove(1, A)
    assert result.ok
    assert result.game_over
    assert result.winner == A


def test_player_reduced_below_three_loses() -> None:
    engine = arranged(GameConfig(pieces_per_player=3), {A: [8, 9, 11], B: [0, 4, 6]})
    engine.attempt_move(11, 10, A)
    result = engine.attempt_remove(4, A)

    assert result.game_over
    assert engine.state == GameOver(winner=A)
    assert engine.winner == A
    assert engine.attempt_move(10, 11, B).failure == Failure.WRONG_PHASE
    assert engine.attempt_place(3, B).failure == Failure.WRONG_PHASE
    assert engine.legal_actions() == []


def test_removal_during_placement_counts_reserve() -> None:
    engine = RulesEngine.new_game()
    play(engine, 0, 8, 1, 9, 2)
    engine.attempt_remove(8, A)
    assert not engine.is_over
    assert engine.board.count_pieces(B) == 1


def test_stalemate_at_start() -> None:
    engine = arranged(
        GameConfig(pieces_per_player=4),
        {A: [0, 2, 11, 15], B: [1, 8, 9, 10]},
        first=B,
    )
    assert not engine.has_legal_move(B)
    assert engine.winner == A


def test_move_that_blocks_opponent_wins() -> None:
    engine = arranged(GameConfig(pieces_per_player=4), {A: [0, 2, 11, 14], B: [1, 8, 9, 10]})
    assert engine.has_legal_move(B)
    result = engine.attempt_move(14, 15, A)
    assert result.ok
    assert result.game_over
    assert result.winner == A


def test_double_mill_grants_single_removal() -> None:
    engine = arranged(GameConfig(pieces_per_player=5), {A: [0, 1, 3, 4, 10], B: [8, 9, 13, 14, 15]})
    result = engine.attempt_move(10, 2, A)
    assert sorted(result.mills) == [(0, 1, 2), (2, 3, 4)]
    assert engine.attempt_remove(13, A).ok
    assert engine.attempt_remove(14, A).failure == Failure.WRONG_PHASE
    assert engine.current_player == B


def test_legal_actions_match_engine_acceptance() -> None:
    engine = RulesEngine.new_game()
    assert len(engine.legal_actions()) == 16
    assert engine.legal_actions(B) == []

    play(engine, 0, 8, 1, 9, 2)
    removals = engine.legal_actions()
    assert removals == [Action.remove(8), Action.remove(9)]

    moving = arranged(GameConfig(pieces_per_player=3), {A: [0, 4, 13], B: [1, 9, 14]})
    moves = moving.legal_actions()
    assert Action.move(0, 7) in moves
    assert Action.move(0, 8) in moves
    assert Action.move(13, 12) in moves
    for action in moves:
        assert moving.board.cell_state(action.source) == A


def test_apply_dispatches_and_raises_for_failure() -> None:
    engine = RulesEngine.new_game()
    assert engine.apply(Action.place(5)).ok
    assert engine.current_player == B

    rejected = engine.apply(Action.place(5))
    assert rejected.failure == Failure.OCCUPIED_CELL
    with pytest.raises(IllegalActionError) as excinfo:
        rejected.raise_for_failure()
    assert excinfo.value.failure == Failure.OCCUPIED_CELL
    assert isinstance(excinfo.value, ValueError)


def test_random_legal_play_never_overfills_board() -> None:
    rng = np.random.default_rng(11)
    for _ in range(5):
        engine = RulesEngine.new_game(rng=rng)
        for _ in range(150):
            if engine.is_over:
                break
            legal = engine.legal_actions()
            assert legal
            result = engine.apply(legal[int(rng.integers(len(legal)))])
            assert result.ok
            total = engine.board.count_pieces(A) + engine.board.count_pieces(B)
            assert total <= engine.board.size
            assert set(np.unique(engine.board.cells)).issubset({0, 1, 2})

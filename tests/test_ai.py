import math
import random

import pytest

from royalur.ai import HybridAI, MCTSAI, choose_smart_piece, ucb1
from royalur.game import GameState, Player


def _finish_or_lose_state() -> GameState:
    """Player one can win at once by finishing piece 0; player two is one step from winning."""
    state = GameState()
    state.set_score(Player.ONE, 6)
    state.set_score(Player.TWO, 6)
    state.set_piece_pos(Player.ONE, 0, 14)
    state.set_piece_pos(Player.TWO, 0, 14)
    return state


def test_ucb1_unvisited_is_infinite():
    assert ucb1(0, 0.0, 10, 1.4) == math.inf


def test_ucb1_single_visit_has_no_exploration_bonus():
    assert ucb1(1, 1.0, 1, 2.0) == pytest.approx(1.0)


def test_ucb1_bonus_grows_with_total_visits():
    assert ucb1(2, 1.0, 100, 1.0) > ucb1(2, 1.0, 10, 1.0)


def test_ucb1_zero_constant_is_win_rate():
    assert ucb1(4, 3.0, 50, 0.0) == pytest.approx(0.75)


def test_smart_piece_prefers_finishing():
    state = GameState()
    state.set_piece_pos(Player.ONE, 0, 14)
    assert choose_smart_piece(state, Player.ONE, [1, 0], 1) == 0


def test_smart_piece_prefers_rosette():
    state = GameState()
    state.set_piece_pos(Player.ONE, 0, 5)   # path 4 -> path 7 is a rosette
    state.set_piece_pos(Player.ONE, 1, 9)   # path 8 -> path 11
    assert choose_smart_piece(state, Player.ONE, [1, 0], 3) == 0


def test_smart_piece_prefers_capture():
    state = GameState()
    state.set_piece_pos(Player.TWO, 0, 6)   # square 7
    state.set_piece_pos(Player.ONE, 0, 5)   # path 4 -> path 5, square 7
    state.set_piece_pos(Player.ONE, 1, 10)  # path 9 -> path 10
    assert choose_smart_piece(state, Player.ONE, [1, 0], 1) == 0


def test_smart_piece_without_capture_prefers_advancement():
    state = GameState()
    state.set_piece_pos(Player.ONE, 0, 5)
    state.set_piece_pos(Player.ONE, 1, 10)
    assert choose_smart_piece(state, Player.ONE, [0, 1], 1) == 1


def test_smart_piece_ties_go_to_first():
    state = GameState()
    assert choose_smart_piece(state, Player.ONE, [3, 2], 2) == 3


def test_mcts_no_move_on_zero_roll():
    ai = MCTSAI(50, rng=random.Random(1))
    assert ai.choose_move(GameState(), Player.ONE, 0) is None


def test_mcts_single_move_returned():
    state = GameState()
    for idx in range(1, 7):
        state.set_piece_pos(Player.ONE, idx, 15)
    state.set_score(Player.ONE, 6)
    assert state.generate_moves(2) == [0]
    assert MCTSAI(50, rng=random.Random(1)).choose_move(state, Player.ONE, 2) == 0


def test_mcts_finds_winning_move():
    state = _finish_or_lose_state()
    ai = MCTSAI(400, rng=random.Random(7))
    assert ai.choose_move(state, Player.ONE, 1) == 0


def test_mcts_parallel_finds_winning_move():
    state = _finish_or_lose_state()
    ai = MCTSAI(400, num_threads=2, rng=random.Random(11))
    assert ai.choose_move(state, Player.ONE, 1) == 0


def test_mcts_does_not_mutate_state():
    state = _finish_or_lose_state()
    before = state.copy()
    MCTSAI(100, rng=random.Random(3)).choose_move(state, Player.ONE, 1)
    assert state == before


def test_mcts_choice_is_legal():
    state = GameState()
    state.set_piece_pos(Player.ONE, 0, 3)
    state.set_piece_pos(Player.TWO, 0, 6)
    moves = state.generate_moves(2)
    choice = MCTSAI(60, rng=random.Random(5)).choose_move(state, Player.ONE, 2)
    assert choice in moves


def test_mcts_seeded_runs_agree():
    state = GameState()
    state.set_piece_pos(Player.ONE, 0, 3)
    first = MCTSAI(80, rng=random.Random(42)).choose_move(state, Player.ONE, 2)
    second = MCTSAI(80, rng=random.Random(42)).choose_move(state, Player.ONE, 2)
    assert first == second


def test_mcts_thread_count_clamped():
    ai = MCTSAI(100, num_threads=0)
    assert ai.num_threads == 1
    assert ai.describe() == "MCTS: 1 threads, 100 simulations (100 per thread)"


def test_mcts_describe_per_thread():
    ai = MCTSAI(1000, num_threads=4)
    assert "(250 per thread)" in ai.describe()


def test_hybrid_describe_mentions_threshold():
    ai = HybridAI(200, 2)
    assert ai.describe().startswith("HybridAI: MCTS: 2 threads, 200 simulations")
    assert ai.describe().endswith("MCTS threshold: 2 moves")


def test_hybrid_no_moves():
    assert HybridAI(50, rng=random.Random(0)).choose_move(GameState(), Player.ONE, 0) is None


def test_hybrid_finds_winning_move():
    state = _finish_or_lose_state()
    ai = HybridAI(400, rng=random.Random(9))
    assert ai.choose_move(state, Player.ONE, 1) == 0


def test_hybrid_uses_heuristic_below_threshold():
    state = GameState()
    state.set_piece_pos(Player.ONE, 0, 14)
    ai = HybridAI(0, use_mcts_threshold=10, rng=random.Random(0))
    assert ai.choose_move(state, Player.ONE, 1) == 0
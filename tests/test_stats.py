import io
import random

import pytest

from royalur.ai import HybridAI
from royalur.game import GameState, Player
from royalur.stats import (
    GameStatistics,
    StatsAIType,
    count_on_board_pieces,
    render_running_stats,
    run_silent_game,
    run_statistics_menu,
)


def _scripted(*answers):
    it = iter(answers)
    return lambda: next(it, "")


def test_add_game_tracks_wins_and_extremes():
    stats = GameStatistics()
    stats.add_game(Player.ONE, 40, 2, 1)
    stats.add_game(Player.TWO, 60, 0, 3)
    stats.add_game(Player.ONE, 50, 1, 1)
    assert stats.player1_wins == 2
    assert stats.player2_wins == 1
    assert stats.total_games == 3
    assert stats.total_turns == 150
    assert stats.shortest_game == 40
    assert stats.longest_game == 60
    assert stats.total_captures_p1 == 3
    assert stats.total_captures_p2 == 5


def test_report_contains_percentages():
    stats = GameStatistics()
    stats.add_game(Player.ONE, 10, 0, 0)
    stats.add_game(Player.TWO, 30, 0, 0)
    text = stats.report("Smart AI", "Random AI")
    assert "Total games played: 2" in text
    assert "Player 1 (Smart AI): 1 (50.0%)" in text
    assert "Player 2 (Random AI): 1 (50.0%)" in text
    assert "Shortest game: 10 turns" in text
    assert "Longest game: 30 turns" in text


def test_report_without_games_raises():
    with pytest.raises(ValueError):
        GameStatistics().report("a", "b")


def test_running_stats_waiting_message():
    text = render_running_stats(GameStatistics(), 0, 10, "A", "B")
    assert "Waiting for first game to complete..." in text
    assert "(0/10)" in text


def test_running_stats_progress_bar():
    stats = GameStatistics()
    stats.add_game(Player.ONE, 20, 1, 0)
    text = render_running_stats(stats, 1, 2, "Random AI", "Smart AI")
    assert text.count("█") == 20
    assert "(1/2)" in text
    assert "Random AI wins: 1 (100.0%)" in text
    assert "Smart AI wins: 0 (0.0%)" in text


def test_count_on_board_pieces():
    state = GameState()
    assert count_on_board_pieces(state, Player.ONE) == 0
    state.set_piece_pos(Player.ONE, 0, 1)
    state.set_piece_pos(Player.ONE, 1, 14)
    state.set_piece_pos(Player.ONE, 2, 15)
    state.set_piece_pos(Player.TWO, 3, 5)
    assert count_on_board_pieces(state, Player.ONE) == 2
    assert count_on_board_pieces(state, Player.TWO) == 1


@pytest.mark.parametrize(
    "kinds",
    [
        (StatsAIType.RANDOM, StatsAIType.RANDOM),
        (StatsAIType.SMART, StatsAIType.RANDOM),
        (StatsAIType.SMART, StatsAIType.SMART),
    ],
)
def test_silent_game_finishes(kinds):
    winner, turns, c1, c2 = run_silent_game(*kinds, rng=random.Random(7))
    assert winner in (Player.ONE, Player.TWO)
    assert turns >= 1
    assert c1 >= 0 and c2 >= 0


def test_silent_game_is_deterministic_with_seed():
    first = run_silent_game(StatsAIType.RANDOM, StatsAIType.SMART, random.Random(3))
    second = run_silent_game(StatsAIType.RANDOM, StatsAIType.SMART, random.Random(3))
    assert first == second


def test_silent_game_with_mcts():
    mcts = HybridAI(4, 1, rng=random.Random(1))
    winner, turns, _, _ = run_silent_game(
        StatsAIType.MCTS, StatsAIType.RANDOM, random.Random(5), mcts
    )
    assert winner in (Player.ONE, Player.TWO)
    assert turns >= 1


def test_menu_runs_requested_games():
    out = io.StringIO()
    stats = run_statistics_menu(_scripted("1\n", "3\n"), out)
    assert stats.total_games == 3
    assert stats.player1_wins + stats.player2_wins == 3
    text = out.getvalue()
    assert "Running 3 games: Random AI vs Random AI..." in text
    assert "Simulation complete!" in text


def test_menu_defaults_and_clamps():
    out = io.StringIO()
    stats = run_statistics_menu(_scripted("42\n", "0\n"), out)
    assert stats.total_games == 1
    assert "Running 1 games: Smart AI vs Smart AI..." in out.getvalue()


def test_menu_rejects_negative_choice():
    out = io.StringIO()
    stats = run_statistics_menu(_scripted("-1\n", "2\n"), out)
    assert stats.total_games == 2
    assert "Smart AI vs Smart AI" in out.getvalue()
import io
import re

import pytest

from royalur.display import (
    clear_screen,
    coord_to_global,
    global_to_coord,
    render_board,
    render_piece_positions,
    render_score,
    render_winner,
)
from royalur.game import FINISHED, GameState, Player, path_to_global

_ANSI = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def plain(text):
    return _ANSI.sub("", text)


def test_coordinates_round_trip_for_every_square():
    for square in range(20):
        row, col = global_to_coord(square)
        assert coord_to_global(row, col) == square


@pytest.mark.parametrize("coord", [(0, 4), (0, 5), (2, 4), (2, 5), (3, 0), (1, 8)])
def test_gaps_have_no_square(coord):
    assert coord_to_global(*coord) is None


@pytest.mark.parametrize("square", [-1, 20, 99])
def test_global_to_coord_rejects_unknown_square(square):
    with pytest.raises(ValueError):
        global_to_coord(square)


def test_empty_board_shows_rosettes_safe_and_plain_squares():
    text = plain(render_board(GameState()))
    assert text.count("★") == 3
    assert text.count("▣") == 2
    assert text.count("·") == 15
    assert "●" not in text
    assert "Royal Game of Ur" in text


def test_board_places_piece_in_its_row():
    state = GameState()
    state.set_piece_pos(Player.ONE, 0, 1)
    row, _ = global_to_coord(path_to_global(Player.ONE, 0))
    lines = plain(render_board(state)).splitlines()
    piece_lines = [line for line in lines if "●" in line]
    assert len(piece_lines) == 1
    assert piece_lines[0].startswith(f"║  {row} │")


def test_piece_on_rosette_hides_rosette_symbol():
    state = GameState()
    state.set_piece_pos(Player.ONE, 0, 14)  # last path square, a rosette
    text = plain(render_board(state))
    assert text.count("★") == 2
    assert text.count("●") == 1


def test_board_rows_have_equal_plain_width():
    state = GameState()
    state.set_piece_pos(Player.TWO, 3, 6)
    lines = plain(render_board(state)).splitlines()
    rows = [line for line in lines if line.startswith("║  ") and "│" in line]
    assert len(rows) == 3
    assert len({len(row) for row in rows}) == 1


def test_piece_positions_summary_and_order():
    state = GameState()
    state.set_piece_pos(Player.ONE, 2, 5)
    state.set_piece_pos(Player.ONE, 0, 2)
    state.set_piece_pos(Player.ONE, 6, FINISHED)
    text = plain(render_piece_positions(state, Player.ONE))
    assert "Player 1's pieces:" in text
    assert "Off board: 4 | On board: 2 | Finished: 1" in text
    assert "#0 at path 1 | #2 at path 4" in text


def test_piece_positions_without_active_pieces():
    text = plain(render_piece_positions(GameState(), Player.TWO))
    assert "Player 2's pieces:" in text
    assert "Active pieces" not in text
    assert "Off board: 7 | On board: 0 | Finished: 0" in text


def test_score_shows_both_players():
    state = GameState()
    state.set_score(Player.ONE, 3)
    state.set_score(Player.TWO, 1)
    raw = render_score(state)
    text = plain(raw)
    assert "Player 1 = 3" in text
    assert "Player 2 = 1" in text
    assert "\x1b[92m3" in raw
    assert "\x1b[97m1" in raw


def test_winner_banner_includes_board_and_name():
    state = GameState()
    state.set_score(Player.TWO, 7)
    text = plain(render_winner(Player.TWO, state))
    assert "Player 2 WINS!" in text
    assert "VICTORY!" in text
    assert text.index("Royal Game of Ur") < text.index("VICTORY!")


def test_clear_screen_writes_escape_sequence():
    out = io.StringIO()
    clear_screen(out)
    assert out.getvalue() == "\x1b[2J\x1b[H"
"""Terminal rendering of the board, pieces, scores and the winner banner."""

from __future__ import annotations

import sys
from typing import TextIO

from royalur.game import (
    FINISHED,
    OFF_BOARD,
    PATH_LENGTH,
    GameState,
    Player,
    is_rosette,
    is_safe,
    path_to_global,
)

_RESET = "\x1b[0m"

_FG = {
    "yellow": "93",
    "green": "92",
    "dark_grey": "90",
    "blue": "94",
    "red": "91",
    "white": "97",
}
_BG = {
    "dark_magenta": "45",
    "dark_green": "42",
}

_PLAYER_STYLE = {
    Player.ONE: ("blue", "🔵"),
    Player.TWO: ("red", "🔴"),
}

_SQUARE_COORDS: dict[int, tuple[int, int]] = {
    0: (0, 0), 1: (0, 1), 2: (0, 2), 3: (0, 3), 4: (0, 6), 5: (0, 7),
    6: (1, 0), 7: (1, 1), 8: (1, 2), 9: (1, 3),
    10: (1, 4), 11: (1, 5), 12: (1, 6), 13: (1, 7),
    14: (2, 0), 15: (2, 1), 16: (2, 2), 17: (2, 3), 18: (2, 6), 19: (2, 7),
}
_COORD_SQUARES = {coord: square for square, coord in _SQUARE_COORDS.items()}

_ROWS = 3
_COLS = 8
_WIDTH = 39
_TOP = "╔" + "═" * _WIDTH + "╗"
_MID = "╠" + "═" * _WIDTH + "╣"
_BOTTOM = "╚" + "═" * _WIDTH + "╝"
_BLANK = "║" + " " * _WIDTH + "║"


def _paint(text: str, fg: str | None = None, bg: str | None = None) -> str:
    codes = []
    if fg is not None:
        codes.append(_FG[fg])
    if bg is not None:
        codes.append(_BG[bg])
    if not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}{_RESET}"


def coord_to_global(row: int, col: int) -> int | None:
    """Board square at grid cell ``(row, col)``, or ``None`` for a gap."""
    return _COORD_SQUARES.get((row, col))


def global_to_coord(square: int) -> tuple[int, int]:
    """Grid cell ``(row, col)`` of a board square."""
    try:
        return _SQUARE_COORDS[square]
    except KeyError:
        raise ValueError(f"square {square} is not on the board") from None


def clear_screen(out: TextIO | None = None) -> None:
    """Clear the terminal and move the cursor to the top-left corner."""
    stream = out if out is not None else sys.stdout
    stream.write("\x1b[2J\x1b[H")
    stream.flush()


def _board_cells(state: GameState) -> dict[tuple[int, int], tuple[str, str | None, str | None]]:
    cells: dict[tuple[int, int], tuple[str, str | None, str | None]] = {}
    for square, coord in _SQUARE_COORDS.items():
        if is_rosette(square):
            cells[coord] = ("★", "yellow", "dark_magenta")
        elif is_safe(square):
            cells[coord] = ("▣", "green", "dark_green")
        else:
            cells[coord] = ("·", "dark_grey", None)

    for player in Player:
        colour, _ = _PLAYER_STYLE[player]
        for pos in state.positions[player]:
            if 1 <= pos <= PATH_LENGTH:
                coord = global_to_coord(path_to_global(player, pos - 1))
                _, _, bg = cells[coord]
                cells[coord] = ("●", colour, bg)
    return cells


def render_board(state: GameState) -> str:
    """The 3×8 board with squares and pieces, coloured for a terminal."""
    cells = _board_cells(state)
    lines = [
        "",
        _TOP,
        "║        🏛️  Royal Game of Ur  🏛️         ║",
        _MID,
        "║     " + "".join(f"{col} " for col in range(_COLS)) + "     ║",
        _MID,
    ]
    for row in range(_ROWS):
        parts = [f"║  {row} │ "]
        for col in range(_COLS):
            cell = cells.get((row, col))
            if cell is None:
                parts.append("  ")
            else:
                char, fg, bg = cell
                parts.append(_paint(char, fg, bg) + " ")
        parts.append("│  ║")
        lines.append("".join(parts))
    lines.append(_BOTTOM)
    lines.append("")
    return "\n".join(lines) + "\n"


def render_piece_positions(state: GameState, player: Player) -> str:
    """Summary of where ``player``'s pieces are."""
    colour, symbol = _PLAYER_STYLE[player]
    positions = state.positions[player]
    off_board = sum(1 for pos in positions if pos == OFF_BOARD)
    finished = sum(1 for pos in positions if pos == FINISHED)
    on_board = sorted(
        ((idx, pos - 1) for idx, pos in enumerate(positions) if 1 <= pos <= PATH_LENGTH),
        key=lambda item: item[1],
    )

    lines = [
        _paint(f"{symbol} {player.label}'s pieces:", colour),
        _paint(
            f"  📊 Off board: {off_board} | On board: {len(on_board)} | Finished: {finished}",
            "dark_grey",
        ),
    ]
    if on_board:
        active = " | ".join(
            _paint(f"#{idx} at path {path_idx}", colour) for idx, path_idx in on_board
        )
        lines.append("  🎯 Active pieces: " + active)
    lines.append("")
    return "\n".join(lines) + "\n"


def render_score(state: GameState) -> str:
    """Boxed score line, the leader's count highlighted."""
    p1 = state.score(Player.ONE)
    p2 = state.score(Player.TWO)
    padding = _WIDTH - 11 - len(Player.ONE.label) - len(Player.TWO.label) - 8
    middle = (
        "║ 🏆 SCORE: "
        + _paint("🔵", "blue")
        + f" {Player.ONE.label} = "
        + _paint(str(p1), "green" if p1 > p2 else "white")
        + " | "
        + _paint("🔴", "red")
        + f" {Player.TWO.label} = "
        + _paint(str(p2), "green" if p2 > p1 else "white")
        + " " * max(padding, 0)
        + "║"
    )
    return "\n".join([_TOP, middle, _BOTTOM, ""]) + "\n"


def render_winner(winner: GameState | Player, state: GameState) -> str:
    """The final board followed by the victory banner."""
    colour, symbol = _PLAYER_STYLE[winner]
    banner = [
        "",
        _TOP,
        _BLANK,
        "║          🎉 VICTORY! 🎉             ║",
        _BLANK,
        "║   " + _paint(f"{symbol} {winner.label} WINS!", colour) + "                ║",
        _BLANK,
        "║     All 7 pieces successfully        ║",
        "║     completed the journey! 🏁        ║",
        _BLANK,
        _BOTTOM,
    ]
    return render_board(state) + "\n".join(banner) + "\n"
"""Interactive terminal game: humans and bots playing the Royal Game of Ur."""

from __future__ import annotations

import argparse
import os
import random
import re
import sys
import time
from collections.abc import Callable
from enum import Enum
from typing import TextIO

from royalur.ai import HybridAI
from royalur.display import (
    clear_screen,
    global_to_coord,
    render_board,
    render_piece_positions,
    render_score,
    render_winner,
)
from royalur.game import (
    OFF_BOARD,
    PATH_LENGTH,
    GameState,
    IllegalMoveError,
    Player,
    is_rosette,
    is_safe,
    path_to_global,
    roll_dice,
)
from royalur.stats import run_statistics_menu
from royalur.strategies import choose_random_move, choose_smart_move

_RESET = "\x1b[0m"
_COLOURS = {
    "dark_grey": "\x1b[90m",
    "white": "\x1b[97m",
    "yellow": "\x1b[93m",
    "cyan": "\x1b[96m",
    "green": "\x1b[92m",
    "blue": "\x1b[94m",
    "red": "\x1b[91m",
}
_PLAYER_STYLE = {
    Player.ONE: ("blue", "🔵"),
    Player.TWO: ("red", "🔴"),
}
_DICE_COLOURS = {0: "dark_grey", 1: "white", 2: "yellow", 3: "cyan", 4: "green"}
_DICE_VISUALS = {0: " (no moves)", 1: " 🎯", 2: " 🎯🎯", 3: " 🎯🎯🎯", 4: " 🎯🎯🎯🎯"}

_INTRO = """=== Royal Game of Ur (Optimized Edition) ===

Rules Summary:
- Two players (Player 1 = top row, Player 2 = bottom row).
- Each has 7 pieces off‐board initially.
- Roll 4 binary dice => move 0..4 steps; '0' = pass turn.
- Each piece travels a 14‐square path; exact roll to exit.
- Capture by landing on opponent on a non‐rosette shared square.
- Safe squares (5 total) protect from capture; rosettes (3 of them) give extra rolls.

Choose game mode:
  0: Watch two smart AI bots play against each other
  1: Play against smart AI (you are Player 1)
  2: Two human players
  3: Watch random AI vs smart AI
  4: Statistics - Run multiple games and show results
  5: Play against MCTS AI (you are Player 1)
  6: Watch MCTS AI vs Smart AI
  7: Watch two MCTS AI bots play against each other
"""

_UNSIGNED = re.compile(r"\+?[0-9]+")


class PlayerKind(Enum):
    HUMAN = "Human"
    RANDOM = "Random AI"
    SMART = "Smart AI"
    MCTS = "MCTS AI"

    @property
    def thinking_label(self) -> str:
        return {
            PlayerKind.RANDOM: "🎲 Random AI",
            PlayerKind.SMART: "🧠 Smart AI",
            PlayerKind.MCTS: "🤖 MCTS AI",
        }.get(self, self.value)

    @property
    def move_label(self) -> str:
        return {
            PlayerKind.RANDOM: "random AI",
            PlayerKind.SMART: "smart AI",
            PlayerKind.MCTS: "MCTS AI",
        }.get(self, self.value)


_MODES: dict[int, tuple[PlayerKind, PlayerKind]] = {
    0: (PlayerKind.SMART, PlayerKind.SMART),
    1: (PlayerKind.HUMAN, PlayerKind.SMART),
    2: (PlayerKind.HUMAN, PlayerKind.HUMAN),
    3: (PlayerKind.RANDOM, PlayerKind.SMART),
    5: (PlayerKind.HUMAN, PlayerKind.MCTS),
    6: (PlayerKind.MCTS, PlayerKind.SMART),
    7: (PlayerKind.MCTS, PlayerKind.MCTS),
}
_DEFAULT_MODE = 1
_STATS_MODE = 4
_THREAD_QUESTION_MODES = frozenset({0, 5, 6, 7})


def _paint(text: str, colour: str) -> str:
    return f"{_COLOURS[colour]}{text}{_RESET}"


def _parse_count(text: str, default: int) -> int:
    stripped = text.strip()
    return int(stripped) if _UNSIGNED.fullmatch(stripped) else default


def _destination(
    state: GameState, player: Player, piece_idx: int, roll: int
) -> tuple[int, tuple[int, int], bool, bool] | None:
    """Target path index, grid cell, rosette and safe flags; ``None`` when the piece exits."""
    pos = state.piece_pos(player, piece_idx)
    if pos == OFF_BOARD:
        path_idx = 0
    elif 1 <= pos <= PATH_LENGTH:
        path_idx = pos - 1 + roll
        if path_idx >= PATH_LENGTH:
            return None
    else:
        raise ValueError(f"piece {piece_idx} has already finished")
    square = path_to_global(player, path_idx)
    return path_idx, global_to_coord(square), is_rosette(square), is_safe(square)


def describe_move(state: GameState, player: Player, piece_idx: int, roll: int) -> str:
    """One line telling where moving ``piece_idx`` by ``roll`` would take it."""
    entering = state.piece_pos(player, piece_idx) == OFF_BOARD
    target = _destination(state, player, piece_idx, roll)
    if target is None:
        return f"Move piece {piece_idx} → EXIT"
    path_idx, (row, col), rosette, safe = target
    if rosette:
        extra = ", lands on rosette (extra turn)"
    elif safe:
        extra = ", lands on safe square"
    else:
        extra = ""
    verb = "Enter" if entering else "Move"
    return f"{verb} piece {piece_idx} → path {path_idx} (grid ({row}, {col})){extra}"


def _announce_bot_move(
    state: GameState, player: Player, kind: PlayerKind, piece_idx: int, roll: int
) -> str:
    entering = state.piece_pos(player, piece_idx) == OFF_BOARD
    target = _destination(state, player, piece_idx, roll)
    who = f"{player.label} ({kind.move_label})"
    if target is None:
        return f"{who} moves piece {piece_idx} → EXIT"
    path_idx, (row, col), rosette, safe = target
    if rosette:
        extra = " (rosette - extra turn!)"
    elif safe:
        extra = " (safe square)"
    else:
        extra = ""
    verb = "enters" if entering else "moves"
    return f"{who} {verb} piece {piece_idx} → path {path_idx}, grid ({row}, {col}){extra}"


def _winner(state: GameState) -> Player | None:
    for player in Player:
        if state.is_winner(player):
            return player
    return None


def _play(
    kinds: dict[Player, PlayerKind],
    ai: HybridAI,
    rng: random.Random,
    read_line: Callable[[], str],
    out: TextIO,
    pause: Callable[[float], None],
) -> Player:
    def prompt(text: str) -> str:
        out.write(text)
        out.flush()
        return read_line()

    game = GameState()
    while True:
        winner = _winner(game)
        if winner is not None:
            clear_screen(out)
            out.write(render_winner(winner, game))
            out.flush()
            return winner

        player = game.current_player()
        clear_screen(out)
        out.write(render_board(game))
        out.write(render_piece_positions(game, player))
        out.write(render_score(game))

        colour, symbol = _PLAYER_STYLE[player]
        out.write("┌─────────────────────────────────────┐\n")
        out.write("│ " + _paint(f"⭐ {player.label}'s Turn {symbol} ⭐", colour))
        out.write("                │\n")
        out.write("└─────────────────────────────────────┘\n\n")

        kind = kinds[player]
        if kind is PlayerKind.HUMAN:
            prompt("⚡ Press ENTER to roll dice... ")
        else:
            out.write(f"🤔 {kind.thinking_label} is thinking")
            for _ in range(3):
                pause(0.3)
                out.write(".")
                out.flush()
            out.write("\n")

        roll = roll_dice(rng)
        out.write("🎲 Rolled: ")
        out.write(_paint(str(roll), _DICE_COLOURS.get(roll, "white")))
        out.write(_DICE_VISUALS.get(roll, "") + "\n")

        if roll == 0:
            out.write(_paint("❌ No moves available. Turn passes.", "dark_grey") + "\n\n")
            pause(1.5)
            game.switch_turn()
            continue

        moves = game.generate_moves(roll)
        if not moves:
            out.write(
                _paint(f"❌ No legal moves with roll = {roll}. Turn passes.", "dark_grey")
                + "\n\n"
            )
            pause(1.5)
            game.switch_turn()
            continue

        if kind is PlayerKind.HUMAN:
            out.write("Legal moves:\n")
            for idx, piece in enumerate(moves):
                out.write(f"  [{idx}] {describe_move(game, player, piece, roll)}\n")
            answer = prompt(f"Choose move index [0..{len(moves) - 1}]: ")
            chosen = moves[min(_parse_count(answer, 0), len(moves) - 1)]
        else:
            if kind is PlayerKind.RANDOM:
                chosen = choose_random_move(moves, rng)
            elif kind is PlayerKind.SMART:
                chosen = choose_smart_move(game, player, moves, roll)
            else:
                picked = ai.choose_move(game, player, roll)
                chosen = picked if picked is not None else choose_random_move(moves, rng)
            out.write(_announce_bot_move(game, player, kind, chosen, roll) + "\n")
            pause(1.0)

        try:
            move = game.make_move(chosen, roll)
        except IllegalMoveError:
            out.write("Invalid move attempt!\n")
            continue

        if move.extra_turn:
            out.write(f"{player.label} gets an extra roll (landed on rosette).\n\n")
            continue

        out.write("Turn passes.\n\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="royalur", description="Play the Royal Game of Ur in the terminal."
    )
    parser.add_argument("--seed", type=int, default=None, help="seed for dice and bots")
    parser.add_argument("--fast", action="store_true", help="skip the pauses between turns")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the interactive game menu."""
    args = _build_parser().parse_args(argv)
    out = sys.stdout

    def read_line() -> str:
        return sys.stdin.readline()

    def prompt(text: str) -> str:
        out.write(text)
        out.flush()
        return read_line()

    pause: Callable[[float], None] = (lambda _seconds: None) if args.fast else time.sleep
    rng = random.Random(args.seed)

    out.write(_INTRO)
    choice = _parse_count(prompt("Enter choice [0-7]: "), _DEFAULT_MODE)
    out.write("\n")

    if choice == _STATS_MODE:
        run_statistics_menu(read_line, out)
        return 0

    num_cpus = os.cpu_count() or 4
    out.write(f"System has {num_cpus} logical cores available\n")

    if choice in _THREAD_QUESTION_MODES:
        answer = prompt("Use multithreaded MCTS? [Y/n]: ")
        use_threads = not answer.strip().lower().startswith("n")
    else:
        use_threads = True

    if use_threads:
        answer = prompt(
            f"Number of threads to use [1-{num_cpus * 2}] (default {num_cpus}): "
        )
        num_threads = max(1, min(_parse_count(answer, num_cpus), num_cpus * 2))
    else:
        num_threads = 1

    first, second = _MODES.get(choice, _MODES[_DEFAULT_MODE])
    kinds = {Player.ONE: first, Player.TWO: second}

    simulations = num_threads * 1000 if use_threads else 2000
    ai = HybridAI(simulations, num_threads, rng=random.Random(rng.getrandbits(64)))

    if PlayerKind.MCTS in kinds.values():
        out.write(f"MCTS AI Configuration: {ai.describe()}\n\n")

    _play(kinds, ai, rng, read_line, out, pause)
    return 0


if __name__ == "__main__":
    sys.exit(main())
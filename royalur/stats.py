"""Batch simulation of bot-versus-bot games and their statistics."""

from __future__ import annotations

import os
import random
import re
import sys
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from royalur.ai import HybridAI
from royalur.game import PATH_LENGTH, GameState, IllegalMoveError, Player, roll_dice
from royalur.strategies import choose_random_move, choose_smart_move

_MAX_TURNS = 1000
_MAX_GAMES = 10000
_BAR_WIDTH = 40
_BOX_WIDTH = 79

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR = "\x1b[2J"
_HOME = "\x1b[H"
_GREEN = "\x1b[92m"
_BLUE = "\x1b[94m"
_RED = "\x1b[91m"
_RESET = "\x1b[0m"


class StatsAIType(Enum):
    RANDOM = "Random AI"
    SMART = "Smart AI"
    MCTS = "MCTS AI"

    @property
    def label(self) -> str:
        return self.value


_MATCHUPS: dict[int, tuple[StatsAIType, StatsAIType]] = {
    1: (StatsAIType.RANDOM, StatsAIType.RANDOM),
    2: (StatsAIType.RANDOM, StatsAIType.SMART),
    3: (StatsAIType.RANDOM, StatsAIType.MCTS),
    4: (StatsAIType.SMART, StatsAIType.RANDOM),
    5: (StatsAIType.SMART, StatsAIType.SMART),
    6: (StatsAIType.SMART, StatsAIType.MCTS),
    7: (StatsAIType.MCTS, StatsAIType.RANDOM),
    8: (StatsAIType.MCTS, StatsAIType.SMART),
    9: (StatsAIType.MCTS, StatsAIType.MCTS),
}
_DEFAULT_MATCHUP = 5


@dataclass
class GameStatistics:
    """Running totals over a series of finished games."""

    player1_wins: int = 0
    player2_wins: int = 0
    total_games: int = 0
    total_turns: int = 0
    shortest_game: int | None = None
    longest_game: int = 0
    total_captures_p1: int = 0
    total_captures_p2: int = 0

    def add_game(self, winner: Player, turns: int, captures_p1: int, captures_p2: int) -> None:
        if winner == Player.ONE:
            self.player1_wins += 1
        else:
            self.player2_wins += 1
        self.total_games += 1
        self.total_turns += turns
        self.shortest_game = turns if self.shortest_game is None else min(self.shortest_game, turns)
        self.longest_game = max(self.longest_game, turns)
        self.total_captures_p1 += captures_p1
        self.total_captures_p2 += captures_p2

    def report(self, p1_desc: str, p2_desc: str) -> str:
        """Final summary of all recorded games."""
        if self.total_games == 0:
            raise ValueError("no games recorded")
        n = self.total_games
        lines = [
            "",
            "=== GAME STATISTICS ===",
            f"Total games played: {n}",
            "",
            "WINS:",
            f"  {Player.ONE.label} ({p1_desc}): {self.player1_wins} "
            f"({self.player1_wins / n * 100.0:.1f}%)",
            f"  {Player.TWO.label} ({p2_desc}): {self.player2_wins} "
            f"({self.player2_wins / n * 100.0:.1f}%)",
            "",
            "GAME LENGTH:",
            f"  Average turns per game: {self.total_turns / n:.1f}",
            f"  Shortest game: {self.shortest_game} turns",
            f"  Longest game: {self.longest_game} turns",
            "",
            "CAPTURES:",
            f"  {Player.ONE.label} total captures: {self.total_captures_p1} "
            f"(avg: {self.total_captures_p1 / n:.1f} per game)",
            f"  {Player.TWO.label} total captures: {self.total_captures_p2} "
            f"(avg: {self.total_captures_p2 / n:.1f} per game)",
        ]
        return "\n".join(lines) + "\n"


def _padded_line(colour: str, symbol: str, text: str) -> str:
    padding = max(77 - len(text), 0)
    return f"║ {colour}{symbol}{_RESET}{text}{' ' * padding}║"


def render_running_stats(
    stats: GameStatistics,
    current_game: int,
    total_games: int,
    p1_desc: str,
    p2_desc: str,
) -> str:
    """Live progress panel, prefixed with the codes that overwrite the last one."""
    border = "═" * _BOX_WIDTH
    parts = ["\r" + " " * 80 + "\n" for _ in range(15)]
    parts.append(_HOME)

    progress = current_game / total_games * 100.0
    filled = int(progress / 100.0 * _BAR_WIDTH)
    bar = "".join(
        f"{_GREEN}█{_RESET}" if i < filled else " " for i in range(_BAR_WIDTH)
    )

    lines = [
        f"╔{border}╗",
        "║                           🎮 LIVE GAME STATISTICS 🎮                          ║",
        f"╠{border}╣",
        f"║ Progress: [{bar}] {progress:.1f}% ({current_game}/{total_games}) ║",
        f"╠{border}╣",
    ]

    if stats.total_games > 0:
        n = stats.total_games
        p1_pct = stats.player1_wins / n * 100.0
        p2_pct = stats.player2_wins / n * 100.0
        lines.append(_padded_line(_BLUE, "🔵", f" {p1_desc} wins: {stats.player1_wins} ({p1_pct:.1f}%)"))
        lines.append(_padded_line(_RED, "🔴", f" {p2_desc} wins: {stats.player2_wins} ({p2_pct:.1f}%)"))
        lines.append(f"╠{border}╣")
        shortest = stats.shortest_game if stats.shortest_game is not None else 0
        lines.append(
            f"║ 📊 Avg game length: {stats.total_turns / n:.1f} turns | "
            f"Shortest: {shortest} | Longest: {stats.longest_game}{' ' * 25}║"
        )
        lines.append(
            f"║ ⚔️  Avg captures per game: {stats.total_captures_p1 / n:.1f} vs "
            f"{stats.total_captures_p2 / n:.1f}{' ' * 42}║"
        )
    else:
        lines.append(f"║ Waiting for first game to complete...{' ' * 45}║")
        lines.extend(f"║{' ' * _BOX_WIDTH}║" for _ in range(3))

    lines.append(f"╚{border}╝")
    parts.append("\n".join(lines) + "\n")
    return "".join(parts)


def count_on_board_pieces(state: GameState, player: Player) -> int:
    """Number of ``player``'s pieces currently on the course."""
    return sum(1 for pos in state.positions[player] if 1 <= pos <= PATH_LENGTH)


def _cpu_count() -> int:
    return os.cpu_count() or 4


def run_silent_game(
    p1_type: StatsAIType,
    p2_type: StatsAIType,
    rng: random.Random | None = None,
    mcts: HybridAI | None = None,
) -> tuple[Player, int, int, int]:
    """Play one game without output; return winner, turns and each side's captures."""
    source = rng if rng is not None else random.Random()
    if mcts is None and StatsAIType.MCTS in (p1_type, p2_type):
        cpus = _cpu_count()
        mcts = HybridAI(cpus * 400, cpus)

    game = GameState()
    kinds = {Player.ONE: p1_type, Player.TWO: p2_type}
    turns = 0
    captures = {Player.ONE: 0, Player.TWO: 0}

    while True:
        turns += 1
        before = {player: count_on_board_pieces(game, player) for player in Player}

        roll = roll_dice(source)
        if roll == 0:
            game.switch_turn()
            continue
        moves = game.generate_moves(roll)
        if not moves:
            game.switch_turn()
            continue

        current = game.current_player()
        kind = kinds[current]
        if kind is StatsAIType.RANDOM:
            chosen = choose_random_move(moves, source)
        elif kind is StatsAIType.SMART:
            chosen = choose_smart_move(game, current, moves, roll)
        else:
            picked = mcts.choose_move(game, current, roll)
            chosen = picked if picked is not None else choose_random_move(moves, source)

        try:
            game.make_move(chosen, roll)
        except IllegalMoveError:
            pass
        else:
            opponent = current.opposite()
            after = count_on_board_pieces(game, opponent)
            if after < before[opponent]:
                captures[current] += before[opponent] - after
            if game.is_winner(current):
                return current, turns, captures[Player.ONE], captures[Player.TWO]

        if turns > _MAX_TURNS:
            p1 = game.score(Player.ONE)
            p2 = game.score(Player.TWO)
            winner = Player.TWO if p2 > p1 else Player.ONE
            return winner, turns, captures[Player.ONE], captures[Player.TWO]


_UNSIGNED = re.compile(r"\+?[0-9]+")


def _parse_count(text: str, default: int) -> int:
    stripped = text.strip()
    return int(stripped) if _UNSIGNED.fullmatch(stripped) else default


def run_statistics_menu(
    read_line: Callable[[], str] | None = None,
    out: TextIO | None = None,
) -> GameStatistics:
    """Ask for a matchup and a game count, run the games and print the results."""
    reader = read_line if read_line is not None else sys.stdin.readline
    stream = out if out is not None else sys.stdout

    def prompt(text: str) -> str:
        stream.write(text)
        stream.flush()
        return reader()

    stream.write("\n=== STATISTICS MENU ===\nChoose AI matchup:\n")
    for number, (first, second) in _MATCHUPS.items():
        stream.write(f"  {number}: {first.label} vs {second.label}\n")
    matchup = _parse_count(prompt("Enter choice [1-9]: "), _DEFAULT_MATCHUP)
    p1_type, p2_type = _MATCHUPS.get(matchup, _MATCHUPS[_DEFAULT_MATCHUP])
    p1_desc, p2_desc = p1_type.label, p2_type.label

    stream.write("\n")
    num_games = _parse_count(prompt("Enter number of games to simulate [1-10000]: "), 100)
    num_games = max(1, min(num_games, _MAX_GAMES))

    stream.write(f"\nRunning {num_games} games: {p1_desc} vs {p2_desc}...\n")

    mcts = None
    if StatsAIType.MCTS in (p1_type, p2_type):
        cpus = _cpu_count()
        stream.write(f"MCTS Configuration: {HybridAI(cpus * 500, cpus).describe()}\n")
        mcts = HybridAI(cpus * 400, cpus)
    stream.write("\n")

    stats = GameStatistics()
    rng = random.Random()
    stream.write(_HIDE_CURSOR + _CLEAR + _HOME)

    for game_num in range(1, num_games + 1):
        winner, turns, c1, c2 = run_silent_game(p1_type, p2_type, rng, mcts)
        stats.add_game(winner, turns, c1, c2)
        if game_num % 10 == 0 or game_num <= 5 or game_num == num_games:
            stream.write(_HOME)
            stream.write(render_running_stats(stats, game_num, num_games, p1_desc, p2_desc))
            stream.flush()

    stream.write(_SHOW_CURSOR)
    stream.write("\n✅ Simulation complete!\n")
    stream.write(stats.report(p1_desc, p2_desc))
    stream.flush()
    return stats
"""Monte Carlo tree search players."""

from __future__ import annotations

import math
import random
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from royalur.game import (
    PATH_LENGTH,
    WINNING_SCORE,
    GameState,
    IllegalMoveError,
    Player,
    is_rosette,
    is_safe,
    path_to_global,
    roll_dice,
)

_SMART_PLAYOUT_PROBABILITY = 0.7


@dataclass
class _MoveStats:
    visits: int = 0
    wins: float = 0.0

    def merge(self, other: _MoveStats) -> None:
        self.visits += other.visits
        self.wins += other.wins

    @property
    def win_rate(self) -> float:
        return self.wins / self.visits if self.visits else 0.0


def ucb1(visits: int, wins: float, total_visits: int, exploration_constant: float) -> float:
    """UCB1 value of a move; unvisited moves rank above everything."""
    if visits == 0:
        return math.inf
    exploitation = wins / visits
    exploration = exploration_constant * math.sqrt(math.log(total_visits) / visits)
    return exploitation + exploration


def choose_smart_piece(state: GameState, player: Player, moves: Sequence[int], roll: int) -> int:
    """Cheap playout heuristic: finish, capture, rosettes, then advancement."""
    best_piece = moves[0]
    best_score = -math.inf
    for piece_idx in moves:
        pos = state.piece_pos(player, piece_idx)
        score = 0.0
        if pos == 0:
            score = 10.0
        elif 1 <= pos <= PATH_LENGTH:
            new_path_idx = pos - 1 + roll
            if new_path_idx >= PATH_LENGTH:
                score = 50.0
            else:
                score = float(new_path_idx)
                target = path_to_global(player, new_path_idx)
                if is_rosette(target):
                    score += 5.0
                occupant = state.occupant(target)
                if occupant is not None and occupant != player and not is_safe(target):
                    score += 8.0
        if score > best_score:
            best_score = score
            best_piece = piece_idx
    return best_piece


def _last_max(moves: Sequence[int], key) -> int:
    # Ties resolve to the last of equally good moves.
    return max(reversed(moves), key=key)


def _simulate_game(
    start: GameState, initial_player: Player, max_depth: int, rng: random.Random
) -> float:
    game = start.copy()
    for _ in range(max_depth):
        current = game.current_player()
        for player in Player:
            if game.is_winner(player):
                return 1.0 if player == initial_player else 0.0

        sim_roll = roll_dice(rng)
        if sim_roll == 0:
            continue
        sim_moves = game.generate_moves(sim_roll)
        if not sim_moves:
            continue

        if rng.random() < _SMART_PLAYOUT_PROBABILITY:
            chosen = choose_smart_piece(game, current, sim_moves, sim_roll)
        else:
            chosen = rng.choice(sim_moves)

        try:
            game.make_move(chosen, sim_roll)
        except IllegalMoveError:
            break
        if game.is_winner(current):
            return 1.0 if current == initial_player else 0.0

    # Unfinished playouts are judged on the position they started from.
    ours = start.score(initial_player)
    theirs = start.score(initial_player.opposite())
    value = (ours + (WINNING_SCORE - theirs)) / (2 * WINNING_SCORE)
    return min(max(value, 0.0), 1.0)


def _simulate_move(
    state: GameState,
    player: Player,
    piece_idx: int,
    roll: int,
    max_depth: int,
    rng: random.Random,
) -> float:
    game = state.copy()
    try:
        game.make_move(piece_idx, roll)
    except IllegalMoveError:
        return 0.0
    if game.is_winner(player):
        return 1.0
    return _simulate_game(game, player, max_depth, rng)


@dataclass
class MCTSAI:
    """Flat Monte Carlo search over the legal moves, selected by UCB1."""

    simulations: int
    exploration_constant: float = math.sqrt(2)
    num_threads: int = 1
    max_simulation_depth: int = 200
    rng: random.Random = field(default_factory=random.Random, repr=False)

    def __post_init__(self) -> None:
        self.num_threads = max(1, self.num_threads)

    def choose_move(self, state: GameState, player: Player, roll: int) -> int | None:
        """Return the piece to move, or ``None`` when there is no legal move."""
        moves = state.generate_moves(roll)
        if not moves:
            return None
        if len(moves) == 1:
            return moves[0]

        if self.num_threads > 1 and self.simulations >= self.num_threads * 10:
            stats = self._search_parallel(state, player, roll, moves)
        else:
            stats = self._search(state, player, roll, moves, self.simulations, self.rng)
        return _last_max(moves, key=lambda m: stats[m].win_rate)

    def _search(
        self,
        state: GameState,
        player: Player,
        roll: int,
        moves: Sequence[int],
        simulations: int,
        rng: random.Random,
    ) -> dict[int, _MoveStats]:
        stats = {piece: _MoveStats() for piece in moves}
        for _ in range(simulations):
            total = sum(s.visits for s in stats.values())
            selected = _last_max(
                moves,
                key=lambda m: ucb1(
                    stats[m].visits, stats[m].wins, total, self.exploration_constant
                ),
            )
            value = _simulate_move(
                state, player, selected, roll, self.max_simulation_depth, rng
            )
            stats[selected].visits += 1
            stats[selected].wins += value
        return stats

    def _search_parallel(
        self, state: GameState, player: Player, roll: int, moves: Sequence[int]
    ) -> dict[int, _MoveStats]:
        per_thread, extra = divmod(self.simulations, self.num_threads)
        jobs = [
            (per_thread + (1 if i < extra else 0), random.Random(self.rng.getrandbits(64)))
            for i in range(self.num_threads)
        ]
        combined = {piece: _MoveStats() for piece in moves}
        with ThreadPoolExecutor(max_workers=self.num_threads) as pool:
            futures = [
                pool.submit(self._search, state.copy(), player, roll, moves, count, rng)
                for count, rng in jobs
            ]
            for future in futures:
                for piece, local in future.result().items():
                    combined[piece].merge(local)
        return combined

    def describe(self) -> str:
        return (
            f"MCTS: {self.num_threads} threads, {self.simulations} simulations "
            f"({self.simulations // self.num_threads} per thread)"
        )


class HybridAI:
    """Uses MCTS when there is a real choice, the heuristic otherwise."""

    def __init__(
        self,
        mcts_simulations: int,
        num_threads: int = 1,
        *,
        use_mcts_threshold: int = 2,
        rng: random.Random | None = None,
    ) -> None:
        self.mcts = MCTSAI(
            mcts_simulations,
            math.sqrt(2),
            num_threads,
            rng=rng if rng is not None else random.Random(),
        )
        self.use_mcts_threshold = use_mcts_threshold

    def choose_move(self, state: GameState, player: Player, roll: int) -> int | None:
        moves = state.generate_moves(roll)
        if not moves:
            return None
        if len(moves) == 1:
            return moves[0]
        if len(moves) >= self.use_mcts_threshold:
            return self.mcts.choose_move(state, player, roll)
        return choose_smart_piece(state, player, moves, roll)

    def describe(self) -> str:
        return f"HybridAI: {self.mcts.describe()}, MCTS threshold: {self.use_mcts_threshold} moves"
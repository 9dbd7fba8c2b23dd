"""Simple move-choosing strategies."""

from __future__ import annotations

import random
from collections.abc import Sequence

from royalur.game import (
    PATH_LENGTH,
    WINNING_SCORE,
    GameState,
    Player,
    is_rosette,
    is_safe,
    path_to_global,
)


def choose_random_move(moves: Sequence[int], rng: random.Random | None = None) -> int:
    """Pick one of ``moves`` uniformly at random."""
    source = rng if rng is not None else random
    return source.choice(moves)


def choose_smart_move(state: GameState, player: Player, moves: Sequence[int], roll: int) -> int:
    """Pick the move with the best heuristic score; ties go to the earliest."""
    return max(moves, key=lambda piece: evaluate_move(state, player, piece, roll))


def evaluate_move(state: GameState, player: Player, piece_idx: int, roll: int) -> float:
    """Heuristic value of moving ``piece_idx`` by ``roll`` steps."""
    pos = state.piece_pos(player, piece_idx)
    score = 0.0

    if pos == 0:
        score += 50.0
        if is_rosette(path_to_global(player, 0)):
            score += 200.0
    elif 1 <= pos <= PATH_LENGTH:
        new_path_idx = pos - 1 + roll
        if new_path_idx >= PATH_LENGTH:
            score += 1000.0
            if state.score(player) == WINNING_SCORE - 1:
                score += 10000.0
        else:
            score += new_path_idx * 10.0
            target = path_to_global(player, new_path_idx)
            if is_rosette(target):
                score += 200.0
            occupant = state.occupant(target)
            if occupant is not None and occupant != player and not is_safe(target):
                for opp_pos in state.positions[occupant]:
                    if 1 <= opp_pos <= PATH_LENGTH and path_to_global(occupant, opp_pos - 1) == target:
                        score += 150.0 + (opp_pos - 1) * 5.0
                        break

    return score
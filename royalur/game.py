"""Board state and rules for the Royal Game of Ur.

A piece position is encoded as a small integer: ``0`` means the piece has not
entered the board, ``1`` to ``14`` mean it stands on path index ``pos - 1``,
and ``15`` means it has finished the course.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum

PIECES = 7
PATH_LENGTH = 14
OFF_BOARD = 0
FINISHED = 15
WINNING_SCORE = 7

PATHS: tuple[tuple[int, ...], tuple[int, ...]] = (
    (3, 2, 1, 0, 6, 7, 8, 9, 10, 11, 12, 13, 5, 4),
    (17, 16, 15, 14, 6, 7, 8, 9, 10, 11, 12, 13, 19, 18),
)

ROSETTES = frozenset({4, 9, 18})
SAFE_SQUARES = frozenset({0, 4, 9, 14, 18})


class IllegalMoveError(ValueError):
    """Raised when a move cannot be made in the current position."""


class Player(IntEnum):
    ONE = 0
    TWO = 1

    def opposite(self) -> Player:
        return Player.TWO if self is Player.ONE else Player.ONE

    @property
    def label(self) -> str:
        return f"Player {self.value + 1}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class MoveInfo:
    """Everything needed to undo a move."""

    piece_idx: int
    from_pos: int
    to_pos: int
    captured_piece: int | None
    extra_turn: bool


def _on_board(pos: int) -> bool:
    return 1 <= pos <= PATH_LENGTH


def path_to_global(player: Player, path_idx: int) -> int:
    """Return the board square at ``path_idx`` on the player's course."""
    if not 0 <= path_idx < PATH_LENGTH:
        raise IndexError(f"path index {path_idx} out of range")
    return PATHS[player][path_idx]


def global_to_path(player: Player, square: int) -> int:
    """Return the index of ``square`` on the player's course."""
    try:
        return PATHS[player].index(square)
    except ValueError:
        raise ValueError(f"square {square} is not on {Player(player).label}'s path") from None


def is_rosette(square: int) -> bool:
    return square in ROSETTES


def is_safe(square: int) -> bool:
    return square in SAFE_SQUARES


def roll_dice(rng: random.Random | None = None) -> int:
    """Throw four binary dice and return how many came up marked."""
    source = rng if rng is not None else random
    return sum(source.random() < 0.5 for _ in range(4))


def _check_piece(piece_idx: int) -> None:
    if not 0 <= piece_idx < PIECES:
        raise IndexError(f"piece index {piece_idx} out of range")


@dataclass
class GameState:
    """Positions, scores and whose turn it is."""

    positions: list[list[int]] = field(
        default_factory=lambda: [[OFF_BOARD] * PIECES for _ in Player]
    )
    scores: list[int] = field(default_factory=lambda: [0, 0])
    turn: Player = Player.ONE

    def current_player(self) -> Player:
        return self.turn

    def switch_turn(self) -> None:
        self.turn = self.turn.opposite()

    def score(self, player: Player) -> int:
        return self.scores[player]

    def set_score(self, player: Player, score: int) -> None:
        if not 0 <= score <= WINNING_SCORE:
            raise ValueError(f"score {score} out of range")
        self.scores[player] = score

    def piece_pos(self, player: Player, piece_idx: int) -> int:
        _check_piece(piece_idx)
        return self.positions[player][piece_idx]

    def set_piece_pos(self, player: Player, piece_idx: int, pos: int) -> None:
        _check_piece(piece_idx)
        if not OFF_BOARD <= pos <= FINISHED:
            raise ValueError(f"position {pos} out of range")
        self.positions[player][piece_idx] = pos

    def occupant(self, square: int) -> Player | None:
        """Return the player with a piece on ``square``, if any."""
        for player in Player:
            for pos in self.positions[player]:
                if _on_board(pos) and PATHS[player][pos - 1] == square:
                    return player
        return None

    def _can_move_to(self, player: Player, square: int) -> bool:
        occupant = self.occupant(square)
        return occupant is None or (occupant != player and not is_safe(square))

    def _piece_on(self, player: Player, square: int) -> int | None:
        for idx, pos in enumerate(self.positions[player]):
            if _on_board(pos) and PATHS[player][pos - 1] == square:
                return idx
        return None

    def make_move(self, piece_idx: int, roll: int) -> MoveInfo:
        """Move a piece of the current player and return the undo record."""
        player = self.turn
        from_pos = self.piece_pos(player, piece_idx)

        if from_pos == OFF_BOARD:
            to_pos = 1
        elif _on_board(from_pos):
            new_path_idx = from_pos - 1 + roll
            to_pos = FINISHED if new_path_idx >= PATH_LENGTH else new_path_idx + 1
        else:
            raise IllegalMoveError(f"piece {piece_idx} has already finished")

        captured = None
        extra_turn = False
        if _on_board(to_pos):
            target = path_to_global(player, to_pos - 1)
            occupant = self.occupant(target)
            if occupant == player:
                raise IllegalMoveError(f"square {target} is occupied by own piece")
            if occupant is not None:
                if is_safe(target):
                    raise IllegalMoveError(f"square {target} is safe")
                captured = self._piece_on(occupant, target)
            extra_turn = is_rosette(target)

        move = MoveInfo(piece_idx, from_pos, to_pos, captured, extra_turn)

        if captured is not None:
            self.positions[player.opposite()][captured] = OFF_BOARD
        self.positions[player][piece_idx] = to_pos
        if to_pos == FINISHED:
            self.set_score(player, self.score(player) + 1)
        if not extra_turn:
            self.switch_turn()
        return move

    def unmake_move(self, player: Player, move: MoveInfo) -> None:
        """Undo ``move``, which ``player`` made last."""
        if move.to_pos == FINISHED:
            self.set_score(player, self.score(player) - 1)
        self.set_piece_pos(player, move.piece_idx, move.from_pos)
        if move.captured_piece is not None:
            opponent = player.opposite()
            square = path_to_global(player, move.to_pos - 1)
            self.set_piece_pos(
                opponent, move.captured_piece, global_to_path(opponent, square) + 1
            )
        if not move.extra_turn:
            self.switch_turn()

    def is_winner(self, player: Player) -> bool:
        return self.score(player) >= WINNING_SCORE

    def generate_moves(self, roll: int) -> list[int]:
        """Indices of the current player's pieces that can move ``roll`` steps."""
        if roll == 0:
            return []
        player = self.turn
        moves = []
        for idx, pos in enumerate(self.positions[player]):
            if pos == OFF_BOARD:
                if self._can_move_to(player, path_to_global(player, 0)):
                    moves.append(idx)
            elif _on_board(pos):
                new_path_idx = pos - 1 + roll
                if new_path_idx == PATH_LENGTH:
                    moves.append(idx)
                elif new_path_idx < PATH_LENGTH and self._can_move_to(
                    player, path_to_global(player, new_path_idx)
                ):
                    moves.append(idx)
        return moves

    def copy(self) -> GameState:
        return GameState(
            positions=[list(row) for row in self.positions],
            scores=list(self.scores),
            turn=self.turn,
        )

    def __str__(self) -> str:
        lines = [
            "GameState:",
            f"  Current player: {self.turn.label}",
            f"  Player 1 score: {self.score(Player.ONE)}",
            f"  Player 2 score: {self.score(Player.TWO)}",
        ]
        for player in Player:
            lines.append(f"  {player.label} pieces:")
            for idx, pos in enumerate(self.positions[player]):
                if pos == OFF_BOARD:
                    desc = "OffBoard"
                elif _on_board(pos):
                    desc = f"OnBoard({pos - 1})"
                else:
                    desc = "Finished"
                lines.append(f"    Piece {idx}: {desc}")
        return "\n".join(lines) + "\n"
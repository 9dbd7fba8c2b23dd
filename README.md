# royalur

The Royal Game of Ur, played in the terminal. You can play against a
computer opponent, let two people share the keyboard, or watch bots play
one another. A statistics mode runs many silent games between two kinds
of bot and reports the results.

## Installing

```
pip install .
```

## Playing

```
royalur
```

Options:

- `--seed N` seeds the dice and the bots, so a game can be replayed.
- `--fast` skips the pauses between turns.

The game first asks you to pick a mode:

- 0: two heuristic ("smart") bots play each other
- 1: you against the smart bot
- 2: two human players
- 3: random bot against smart bot
- 4: statistics over many silent games
- 5: you against the MCTS bot
- 6: MCTS bot against smart bot
- 7: two MCTS bots

An answer that is not a number picks mode 1. For modes 0, 5, 6 and 7 you
are asked whether the MCTS bot should search in several threads; then
(unless you answered no) how many threads to use, from 1 to twice the
number of logical CPUs. With threads the bot runs 1000 simulations per
thread, without them 2000 in all.

On a human turn, press ENTER to roll, then pick one of the listed legal
moves by its index. An answer that is not a number picks the first move.

In statistics mode you choose one of nine matchups between random, smart
and MCTS bots and a number of games from 1 to 10000 (default 100). A live
panel shows the running totals, and a summary of wins, game lengths and
captures is printed at the end. A game that runs past 1000 turns is
stopped and given to the player with the higher score (Player 1 on a tie).

## Rules in brief

- Each player has seven pieces. They all start off the board.
- A turn starts with a roll of four two-sided dice, which gives 0 to 4.
  A roll of 0 ends the turn, as does a roll with no legal move.
- Each piece runs a 14-square path. The first four and last two squares
  belong to one player only. The eight squares in the middle are shared.
- Landing on an opponent on a shared square that is not safe captures it
  and sends it back off the board.
- Rosettes give an extra roll. The shared rosette is also safe from capture.
- A piece leaves the board only on an exact roll. The first player to bring
  all seven pieces home wins.

## Using it as a library

```python
import random

from royalur.ai import HybridAI
from royalur.game import GameState, roll_dice
from royalur.strategies import choose_smart_move

rng = random.Random(1)
state = GameState()
roll = roll_dice(rng)
moves = state.generate_moves(roll)
if moves:
    player = state.current_player()
    piece = choose_smart_move(state, player, moves, roll)
    info = state.make_move(piece, roll)
    state.unmake_move(player, info)
```

- `royalur.game`: `GameState` holds positions, scores and the turn.
  `generate_moves(roll)` lists the current player's movable pieces,
  `make_move(piece_idx, roll)` plays one and returns a `MoveInfo`
  (raising `IllegalMoveError` for a move the rules forbid), and
  `unmake_move(player, move)` takes it back. `Player`, `roll_dice`,
  `path_to_global`, `global_to_path`, `is_rosette` and `is_safe` are
  also here.
- `royalur.strategies`: `choose_random_move`, `choose_smart_move` and the
  heuristic behind it, `evaluate_move`.
- `royalur.ai`: `MCTSAI` and `HybridAI`, whose `choose_move(state, player,
  roll)` returns a piece index or `None` when no move is legal, and
  `describe()` for their settings. `ucb1` and `choose_smart_piece` are the
  selection rule and the playout heuristic.
- `royalur.display`: `render_board`, `render_piece_positions`,
  `render_score` and `render_winner` return ANSI-coloured text;
  `coord_to_global` and `global_to_coord` convert between board squares
  and grid cells.
- `royalur.stats`: `run_silent_game(p1_type, p2_type, rng, mcts)` plays one
  game between two `StatsAIType` bots and returns the winner, the number
  of turns and each side's captures; `GameStatistics` adds up many games
  and `report()` formats the totals.

## What it does not do

There is no saving or loading of games, no undo in the interactive game,
and no play over a network: both sides must share one terminal.

## Running the tests

```
pip install ".[test]"
pytest
```
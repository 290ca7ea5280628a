"""Depth-limited minimax with alpha-beta pruning over a single shared board.

One call of `search` at depth 0 is a *round*. State that outlives a node
(the root candidate list, the time budget, the chosen move) lives in a
`SearchContext` passed down the recursion, so rounds of one turn can hand
results to each other without module-level globals.
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from quadtac.game.board import Board, format_point
from quadtac.game.types import Player, Point

from .evaluation import CUTOFF_SCORE, WIN_THRESHOLD, draw_score, terminal_score
from .movegen import moves_by_proximity

logger = logging.getLogger(__name__)

# Returned by every node once the time budget is spent
SENTINEL = -math.inf

Selector = Callable[[Sequence[Point]], Point]


@dataclass
class SearchBudget:
    """Wall-clock limit shared by all nodes of a turn."""

    time_limit: float  # seconds
    clock: Callable[[], float] = time.monotonic
    start: float = field(init=False)
    time_is_up: bool = False

    def __post_init__(self) -> None:
        self.start = self.clock()

    def elapsed(self) -> float:
        return self.clock() - self.start

    def expired(self) -> bool:
        """Poll the clock; the flag latches the first time the limit is passed."""
        if self.time_is_up:
            return True
        if self.clock() - self.start > self.time_limit:
            self.time_is_up = True
        return self.time_is_up


@dataclass
class SearchContext:
    board: Board
    me: Player
    budget: SearchBudget
    candidates: list[Point]
    selector: Selector = random.choice
    next_move: Optional[Point] = None
    best_score: float = SENTINEL
    winning_move: bool = False
    nodes: int = 0

    def start_round(self) -> None:
        self.next_move = None
        self.best_score = SENTINEL
        self.winning_move = False


def search(
    ctx: SearchContext,
    mark: Player,
    depth: int,
    max_depth: int,
    alpha: float,
    beta: float,
    last: Optional[Point],
    pruning: bool = True,
) -> float:
    """Minimax value of the position for `ctx.me`, with `mark` to move.

    At depth 0 the moves come from `ctx.candidates`, which is rewritten to
    hold only the moves this round could not prove inferior, and the chosen
    move and its score are stored on the context. Deeper nodes enumerate
    empty cells around `last`, the move that led to them.
    """
    if ctx.budget.expired():
        return SENTINEL
    ctx.nodes += 1

    board = ctx.board
    score = terminal_score(board, ctx.me, depth, max_depth)
    if score is not None:
        return score

    if depth == 0:
        assert mark is ctx.me, "the root is always searched for the side to move"
        moves = list(ctx.candidates)
        ctx.candidates.clear()
    else:
        assert last is not None
        moves = moves_by_proximity(board, last)

    if not moves:
        return draw_score(depth, max_depth)

    if depth == max_depth:
        if depth == 0:
            # No lookahead at all: nothing was proven, keep every candidate
            ctx.candidates.extend(moves)
            ctx.next_move = ctx.selector(moves)
            ctx.best_score = CUTOFF_SCORE
        return CUTOFF_SCORE

    maximizing = mark is ctx.me
    best = SENTINEL if maximizing else math.inf
    best_choices: list[Point] = []

    for move in moves:
        # Lowering alpha by one ulp makes a root child equal to the best score
        # exact, so under pruning only proven equals join the tie-break set
        child_alpha = math.nextafter(alpha, -math.inf) if depth == 0 else alpha
        with board.trial(move, mark):
            score = search(ctx, mark.other, depth + 1, max_depth, child_alpha, beta, move, pruning)

        if depth == 0:
            _record_root_choice(ctx, move, score, best_choices, pruning)

        if maximizing:
            best = max(best, score)
            alpha = max(alpha, score)
            if pruning and alpha >= beta:
                break
        else:
            best = min(best, score)
            beta = min(beta, score)
            if pruning and beta <= alpha:
                break

    if depth == 0 and best_choices:
        ctx.next_move = ctx.selector(best_choices)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "depth %d best choices %s -> %s",
                max_depth,
                " ".join(format_point(p) for p in best_choices),
                format_point(ctx.next_move),
            )

    return best


def _record_root_choice(
    ctx: SearchContext,
    move: Point,
    score: float,
    best_choices: list[Point],
    pruning: bool,
) -> None:
    """Update the root's best moves and the candidates kept for the next round."""
    logger.debug("depth 0 move %s scored %s", format_point(move), score)
    if score > ctx.best_score:
        ctx.best_score = score
        ctx.winning_move = score > WIN_THRESHOLD
        best_choices[:] = [move]
        ctx.candidates[:] = [move]
        return

    # With pruning on, a low score may only mean the branch was cut short
    if pruning or score == ctx.best_score:
        ctx.candidates.append(move)
    if score == ctx.best_score:
        best_choices.append(move)

"""Iterative deepening driver: time-boxed minimax rounds at increasing depth.

Each round searches one ply deeper than the last and starts from the root
candidates the previous round left standing, so moves proven inferior are not
searched again. The result of the last fully completed round is kept as a
backup; if time runs out mid-round, the partial result is only used when it
is at least as good as that backup.

Deepening stops early when
  1. a guaranteed win was found (nothing deeper can be faster),
  2. even the best move is a proven loss (nothing deeper will save it),
  3. the depth-2 round, searched without pruning, left exactly one candidate
     (the only reply that does not lose at once),
  4. the next depth would exceed the number of empty cells, or
  5. the time budget ran out.
"""

from __future__ import annotations

import enum
import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from quadtac.agent.base import Agent
from quadtac.game.board import Board, QuadTacGameState, format_point
from quadtac.game.rules import has_won
from quadtac.game.types import Player, Point

from .movegen import available_moves
from .search import SENTINEL, SearchBudget, SearchContext, Selector, search

logger = logging.getLogger(__name__)

DEFAULT_TIME_LIMIT_MS = 5_000

# Depth searched without alpha-beta so every root move gets an exact score
EXHAUSTIVE_DEPTH = 2


class StopReason(enum.Enum):
    WIN_FOUND = "win_found"
    LOSS_PROVEN = "loss_proven"
    SINGLE_REPLY = "single_reply"
    BOARD_EXHAUSTED = "board_exhausted"
    TIME_UP = "time_up"


@dataclass
class RoundResult:
    depth: int
    move: Optional[Point]
    score: float
    aborted: bool
    pruning: bool
    candidates: int  # root candidates left for the next round


@dataclass
class SearchReport:
    move: Point
    score: float
    depth: int  # deepest fully completed round, 0 if none completed
    stop_reason: StopReason
    elapsed: float
    rounds: list[RoundResult] = field(default_factory=list)
    nodes: int = 0


def choose_move(
    board: Board,
    me: Player,
    last_move: Optional[Point] = None,
    time_limit_ms: float = DEFAULT_TIME_LIMIT_MS,
    selector: Selector = random.choice,
    clock: Callable[[], float] = time.monotonic,
) -> SearchReport:
    """Pick `me`'s next move on `board` within `time_limit_ms`.

    `last_move` is the opponent's latest move; root moves are ordered outward
    from it. `selector` breaks ties between equally good moves.
    """
    assert board.empty_count > 0, "no empty cell to move to"
    assert not has_won(board, me) and not has_won(board, me.other), "the game is already decided"
    assert last_move is None or board.is_on_grid(last_move), f"{last_move} is off the grid"

    budget = SearchBudget(time_limit_ms / 1000.0, clock)
    ctx = SearchContext(
        board=board,
        me=me,
        budget=budget,
        candidates=available_moves(board, last_move),
        selector=selector,
    )
    fallback = ctx.candidates[0]

    backup_move: Optional[Point] = None
    backup_score = SENTINEL
    rounds: list[RoundResult] = []
    depth = 1

    while True:
        pruning = depth != EXHAUSTIVE_DEPTH
        ctx.start_round()
        search(ctx, me, 0, depth, -math.inf, math.inf, last_move, pruning)

        aborted = budget.time_is_up
        rounds.append(
            RoundResult(
                depth=depth,
                move=ctx.next_move,
                score=ctx.best_score,
                aborted=aborted,
                pruning=pruning,
                candidates=len(ctx.candidates),
            )
        )

        if aborted:
            logger.info(
                "time is up after %.3fs, aborted at depth %d (partial %s, backup %s)",
                budget.elapsed(), depth, ctx.best_score, backup_score,
            )
            if ctx.next_move is None or ctx.best_score < backup_score:
                move = backup_move if backup_move is not None else fallback
                score = backup_score
                logger.info("depth %d found nothing better, using backup %s", depth, format_point(move))
            else:
                move, score = ctx.next_move, ctx.best_score
            stop_reason = StopReason.TIME_UP
            completed = depth - 1
            break

        backup_move, backup_score = ctx.next_move, ctx.best_score
        logger.info(
            "depth %d complete after %.3fs: %s scores %s, %d candidates left",
            depth, budget.elapsed(), format_point(backup_move), backup_score, len(ctx.candidates),
        )

        stop = _early_stop(ctx, depth, backup_score)
        if stop is not None:
            move, score, stop_reason, completed = backup_move, backup_score, stop, depth
            break
        depth += 1

    assert move is not None
    logger.info("playing %s (%s, depth %d, %d nodes)", format_point(move), stop_reason.value, completed, ctx.nodes)
    return SearchReport(
        move=move,
        score=score,
        depth=completed,
        stop_reason=stop_reason,
        elapsed=budget.elapsed(),
        rounds=rounds,
        nodes=ctx.nodes,
    )


def _early_stop(ctx: SearchContext, depth: int, score: float) -> Optional[StopReason]:
    if score < 0:
        return StopReason.LOSS_PROVEN
    if ctx.winning_move:
        return StopReason.WIN_FOUND
    if depth == EXHAUSTIVE_DEPTH and len(ctx.candidates) == 1:
        return StopReason.SINGLE_REPLY
    if depth + 1 > ctx.board.empty_count:
        return StopReason.BOARD_EXHAUSTED
    return None


class MinimaxAgent(Agent):
    """Iterative deepening minimax + alpha-beta under a wall-clock budget."""

    def __init__(
        self,
        time_limit_ms: float = DEFAULT_TIME_LIMIT_MS,
        selector: Optional[Selector] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.time_limit_ms = time_limit_ms
        self.selector = selector or random.choice
        self.clock = clock
        self.last_report: Optional[SearchReport] = None

    @property
    def name(self) -> str:
        return f"MinimaxAgent({self.time_limit_ms / 1000:g}s)"

    def select_move(self, game_state: QuadTacGameState) -> Point:
        assert not game_state.is_over, "Game is already over"
        last = game_state.last_move
        report = choose_move(
            game_state.board,
            game_state.current_player,
            last_move=last.point if last is not None else None,
            time_limit_ms=self.time_limit_ms,
            selector=self.selector,
            clock=self.clock,
        )
        self.last_report = report
        return report.move

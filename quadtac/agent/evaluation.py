"""Leaf scoring for the minimax search.

Scores are graded rather than -1/0/+1 so the search prefers the fastest
forced win and the longest survival in a lost position:

    loss      -1 / depth                  always < 0, closer to 0 when later
    draw      depth / max_depth           in [0, 1], later is better
    cutoff    1                           unresolved at the depth limit
    win       2 + max_depth / depth       always > 2, sooner is better

A win score depends on the round's max_depth, so wins from rounds of
different depth are not comparable with each other.
"""

from __future__ import annotations

from typing import Optional

from quadtac.game.board import Board
from quadtac.game.rules import has_won
from quadtac.game.types import Player

CUTOFF_SCORE = 1.0

# Any score above this is a proven win, whatever the round depth
WIN_THRESHOLD = 2.0


def loss_score(depth: int) -> float:
    assert depth > 0, "the opponent cannot have won before the search moved"
    return -1.0 / depth


def win_score(depth: int, max_depth: int) -> float:
    return 2.0 + max_depth / depth if depth > 0 else 2.0


def draw_score(depth: int, max_depth: int) -> float:
    return depth / max_depth if max_depth > 0 else 0.0


def terminal_score(board: Board, me: Player, depth: int, max_depth: int) -> Optional[float]:
    """Score a decided position from `me`'s side, or None if nobody has won.

    The opponent's win is checked first.
    """
    if has_won(board, me.other):
        return loss_score(depth)
    if has_won(board, me):
        return win_score(depth, max_depth)
    return None

"""Move enumeration: full scan, or shells of increasing distance from a cell."""

from __future__ import annotations

from typing import Optional

from quadtac.game.board import Board
from quadtac.game.types import Point


def available_moves(board: Board, ref: Optional[Point] = None) -> list[Point]:
    """Empty cells, ordered around `ref` when one is given."""
    if ref is None:
        return board.empty_points()
    return moves_by_proximity(board, ref)


def chebyshev(a: Point, b: Point) -> int:
    return max(abs(a.row - b.row), abs(a.col - b.col))


def moves_by_proximity(board: Board, ref: Point) -> list[Point]:
    """Return every empty cell, nearest to `ref` first.

    Cells are collected ring by ring: for spacing s = 1, 2, ... the square of
    cells at Chebyshev distance s from `ref` is walked top edge (left to
    right), right edge (top to bottom), bottom edge (left to right), then left
    edge (top to bottom), each corner emitted once. Edges that fall off the
    board are skipped and their neighbours extend to the board edge instead.

        . . . . . .        . . . . . .
        . . . . . .        . . . . . .
        . . . . . .        . . 1 2 3 4
        . . . 1 2 3        . . 5 . . .
        . . . 8 X 4        . . 6 . X .
        . . . 6 7 5        . . 7 . . .
          spacing 1          spacing 2 (top and left edges only)

    The order only helps alpha-beta cut earlier; it never changes which cells
    are returned. An empty `ref` itself comes first.
    """
    size = board.size
    moves: list[Point] = []
    if board.is_on_grid(ref) and board.is_empty(ref):
        moves.append(ref)

    spacing = 1
    while True:
        top = ref.row - spacing
        bot = ref.row + spacing
        left = ref.col - spacing
        right = ref.col + spacing

        if top < 0 and bot >= size and left < 0 and right >= size:
            break

        col_lo = max(left, 0)
        # Rows below the top edge; the top-right/top-left corners were taken by it
        row_lo = 0 if top < 0 else top + 1

        if top >= 0:
            for c in range(col_lo, min(right, size - 1) + 1):
                _collect(board, Point(top, c), moves)

        if right < size:
            for r in range(row_lo, min(bot, size - 1) + 1):
                _collect(board, Point(r, right), moves)

        if bot < size:
            col_hi = size - 1 if right >= size else right - 1
            for c in range(col_lo, col_hi + 1):
                _collect(board, Point(bot, c), moves)

        if left >= 0:
            row_hi = size - 1 if bot >= size else bot - 1
            for r in range(row_lo, row_hi + 1):
                _collect(board, Point(r, left), moves)

        spacing += 1

    return moves


def _collect(board: Board, point: Point, moves: list[Point]) -> None:
    if board.is_empty(point):
        moves.append(point)

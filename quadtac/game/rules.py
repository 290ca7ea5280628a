"""Outcome queries: K-in-a-row detection, full board, game status."""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from .types import GameStatus, Player, Point

if TYPE_CHECKING:
    from .board import Board


@lru_cache(maxsize=None)
def board_lines(size: int, min_length: int) -> tuple[tuple[Point, ...], ...]:
    """Every row, column and diagonal of a size x size board, as point tuples.

    Diagonals shorter than `min_length` cannot hold a run and are left out.
    """
    lines: list[tuple[Point, ...]] = []
    for r in range(size):
        lines.append(tuple(Point(r, c) for c in range(size)))
    for c in range(size):
        lines.append(tuple(Point(r, c) for r in range(size)))

    # NW -> SE diagonals start on the top row or the left column
    starts = [Point(0, c) for c in range(size)] + [Point(r, 0) for r in range(1, size)]
    for start in starts:
        length = size - max(start.row, start.col)
        if length >= min_length:
            lines.append(tuple(Point(start.row + i, start.col + i) for i in range(length)))

    # NE -> SW diagonals start on the top row or the right column
    starts = [Point(0, c) for c in range(size)] + [Point(r, size - 1) for r in range(1, size)]
    for start in starts:
        length = min(size - start.row, start.col + 1)
        if length >= min_length:
            lines.append(tuple(Point(start.row + i, start.col - i) for i in range(length)))

    return tuple(lines)


def has_run(board: Board, mark: Player, k: int) -> bool:
    """True if `mark` holds `k` consecutive cells on some line of the board."""
    for line in board_lines(board.size, k):
        count = 0
        for point in line:
            if board.get(point) is mark:
                count += 1
                if count >= k:
                    return True
            else:
                count = 0
    return False


def has_won(board: Board, mark: Player) -> bool:
    return has_run(board, mark, board.win_length)


def is_full(board: Board) -> bool:
    return board.empty_count == 0


def game_status(board: Board) -> GameStatus:
    """Status of a board position; a win is checked before a full-board draw."""
    for player in (Player.CROSS, Player.NOUGHT):
        if has_won(board, player):
            return GameStatus.won_by(player)
    if is_full(board):
        return GameStatus.DRAW
    return GameStatus.PLAYING

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence

from .rules import game_status
from .types import GameStatus, Player, Point

BOARD_SIZE = 6
WIN_LENGTH = 4

# Column labels: A-Z, sliced to the board width
COL_LABELS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_SYMBOLS = {"X": Player.CROSS, "O": Player.NOUGHT}


def parse_coordinate(text: str, size: int = BOARD_SIZE) -> Optional[Point]:
    """Parse a coordinate string like 'C4' into a Point.

    Column is a letter (A = leftmost), row is a number counted from the top
    (1 = top row). Returns None if the string is invalid for a board of `size`.
    """
    text = text.strip().upper()
    if len(text) < 2 or len(text) > 3:
        return None
    col_char = text[0]
    row_str = text[1:]
    if col_char not in COL_LABELS[:size]:
        return None
    try:
        row = int(row_str)
    except ValueError:
        return None
    if not (1 <= row <= size):
        return None
    return Point(row - 1, COL_LABELS.index(col_char))


def format_point(point: Point) -> str:
    """Format a Point as a coordinate string like 'C4'."""
    return f"{COL_LABELS[point.col]}{point.row + 1}"


@dataclass
class Move:
    point: Point
    player: Player
    elapsed: Optional[float] = None

    def __str__(self) -> str:
        return f"{self.player}: {format_point(self.point)}"


class Board:
    """Square board of `size` x `size` cells; `win_length` in a row wins."""

    def __init__(self, size: int = BOARD_SIZE, win_length: int = WIN_LENGTH) -> None:
        assert 2 <= win_length <= size, f"win length {win_length} does not fit a {size}x{size} board"
        self.size = size
        self.win_length = win_length
        self._grid: dict[Point, Player] = {}

    @classmethod
    def from_rows(cls, rows: Sequence[str], win_length: int = WIN_LENGTH) -> Board:
        """Build a board from strings such as ``"X.O..."``; '.' or ' ' is empty."""
        board = cls(size=len(rows), win_length=win_length)
        for r, line in enumerate(rows):
            assert len(line) == board.size, f"row {r} has {len(line)} cells, expected {board.size}"
            for c, ch in enumerate(line):
                player = _SYMBOLS.get(ch.upper())
                if player is not None:
                    board.place(Point(r, c), player)
        return board

    def place(self, point: Point, player: Player) -> None:
        assert self.is_on_grid(point), f"{point} is off the grid"
        assert self.is_empty(point), f"{format_point(point)} is occupied"
        self._grid[point] = player

    def remove(self, point: Point) -> None:
        del self._grid[point]

    @contextmanager
    def trial(self, point: Point, player: Player) -> Iterator[None]:
        """Place a mark for the duration of the block, then clear the cell.

        The cell is restored however the block exits (normal completion,
        ``break`` out of an enclosing loop, ``return`` or an exception).
        """
        self.place(point, player)
        try:
            yield
        finally:
            self.remove(point)

    def get(self, point: Point) -> Optional[Player]:
        return self._grid.get(point)

    def is_empty(self, point: Point) -> bool:
        return point not in self._grid

    def is_on_grid(self, point: Point) -> bool:
        return 0 <= point.row < self.size and 0 <= point.col < self.size

    def empty_points(self) -> list[Point]:
        """All empty cells in row-major order."""
        return [
            Point(r, c)
            for r in range(self.size)
            for c in range(self.size)
            if Point(r, c) not in self._grid
        ]

    @property
    def occupied_count(self) -> int:
        return len(self._grid)

    @property
    def empty_count(self) -> int:
        return self.size * self.size - len(self._grid)

    def snapshot(self) -> dict[Point, Player]:
        return dict(self._grid)

    def copy(self) -> Board:
        board = Board(self.size, self.win_length)
        board._grid = dict(self._grid)
        return board

    def __str__(self) -> str:
        lines = []
        for r in range(self.size):
            cells = []
            for c in range(self.size):
                player = self._grid.get(Point(r, c))
                cells.append(player.symbol if player is not None else " ")
            lines.append("|" + "|".join(cells) + "|")
        return "\n".join(lines)


class QuadTacGameState:
    """Full game state: board, side to move, move history and outcome."""

    def __init__(self, size: int = BOARD_SIZE, win_length: int = WIN_LENGTH) -> None:
        self.board = Board(size, win_length)
        self.current_player = Player.CROSS
        self.moves: list[Move] = []
        self._status = GameStatus.PLAYING

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def is_over(self) -> bool:
        return self._status is not GameStatus.PLAYING

    @property
    def winner(self) -> Optional[Player]:
        if self._status is GameStatus.CROSS_WON:
            return Player.CROSS
        if self._status is GameStatus.NOUGHT_WON:
            return Player.NOUGHT
        return None

    @property
    def is_draw(self) -> bool:
        return self._status is GameStatus.DRAW

    @property
    def last_move(self) -> Optional[Move]:
        return self.moves[-1] if self.moves else None

    def copy(self) -> QuadTacGameState:
        """Independent copy, safe to search on while this one is displayed."""
        game = QuadTacGameState(self.board.size, self.board.win_length)
        game.board = self.board.copy()
        game.current_player = self.current_player
        game.moves = list(self.moves)
        game._status = self._status
        return game

    def legal_moves(self) -> list[Point]:
        if self.is_over:
            return []
        return self.board.empty_points()

    def apply_move(self, point: Point, elapsed: Optional[float] = None) -> None:
        """Place a mark for the current player and advance the turn."""
        assert not self.is_over, "Game is already over"
        assert self.board.is_on_grid(point), f"Point {point} is off the grid"
        assert self.board.is_empty(point), f"Point {format_point(point)} is occupied"

        player = self.current_player
        self.board.place(point, player)
        self.moves.append(Move(point=point, player=player, elapsed=elapsed))
        self._status = game_status(self.board)
        self.current_player = player.other

    def undo_move(self) -> Optional[Move]:
        """Undo the last move. Returns the undone Move, or None if no moves."""
        if not self.moves:
            return None
        move = self.moves.pop()
        self.board.remove(move.point)
        self.current_player = move.player
        self._status = GameStatus.PLAYING
        return move

    def resign(self, player: Player) -> None:
        assert not self.is_over, "Game is already over"
        self._status = GameStatus.won_by(player.other)

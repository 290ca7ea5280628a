from __future__ import annotations

import enum
from typing import NamedTuple


class Player(enum.Enum):
    CROSS = 1   # "X", moves first
    NOUGHT = 2  # "O"

    @property
    def other(self) -> Player:
        return Player.NOUGHT if self is Player.CROSS else Player.CROSS

    @property
    def symbol(self) -> str:
        return "X" if self is Player.CROSS else "O"

    def __str__(self) -> str:
        return self.name.capitalize()


class GameStatus(enum.Enum):
    PLAYING = "playing"
    DRAW = "draw"
    CROSS_WON = "cross_won"
    NOUGHT_WON = "nought_won"

    @classmethod
    def won_by(cls, player: Player) -> GameStatus:
        return cls.CROSS_WON if player is Player.CROSS else cls.NOUGHT_WON


class Point(NamedTuple):
    row: int  # 0-indexed, 0 = top
    col: int  # 0-indexed, 0 = left

from __future__ import annotations

import random
from typing import Optional

from quadtac.game.board import QuadTacGameState
from quadtac.game.types import Point

from .base import Agent


class RandomAgent(Agent):
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def select_move(self, game_state: QuadTacGameState) -> Point:
        moves = game_state.legal_moves()
        assert moves, "No legal moves available"
        return self.rng.choice(moves)

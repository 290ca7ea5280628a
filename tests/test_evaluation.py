import pytest

from quadtac.agent.evaluation import (
    CUTOFF_SCORE,
    WIN_THRESHOLD,
    draw_score,
    loss_score,
    terminal_score,
    win_score,
)
from quadtac.game.board import Board
from quadtac.game.types import Player


class TestScores:
    def test_faster_win_scores_higher(self):
        assert win_score(1, 5) > win_score(3, 5)

    def test_win_scores_exceed_threshold(self):
        for max_depth in range(1, 9):
            for depth in range(1, max_depth + 1):
                assert win_score(depth, max_depth) > WIN_THRESHOLD

    def test_win_at_root(self):
        assert win_score(0, 4) == 2.0

    def test_later_loss_scores_higher(self):
        assert loss_score(1) < loss_score(3) < 0

    def test_loss_at_root_is_impossible(self):
        with pytest.raises(AssertionError):
            loss_score(0)

    def test_draw_scores_in_unit_interval(self):
        for max_depth in range(1, 9):
            for depth in range(0, max_depth + 1):
                assert 0.0 <= draw_score(depth, max_depth) <= 1.0
        assert draw_score(0, 0) == 0.0

    def test_later_draw_scores_higher(self):
        assert draw_score(2, 4) > draw_score(1, 4)

    def test_cutoff_sits_between_draw_and_win(self):
        assert CUTOFF_SCORE == 1.0
        assert draw_score(4, 4) <= CUTOFF_SCORE < win_score(4, 4)
        assert loss_score(1) < CUTOFF_SCORE


class TestTerminalScore:
    def test_undecided_position(self):
        b = Board.from_rows(["XXX...", "OOO...", "......", "......", "......", "......"])
        assert terminal_score(b, Player.NOUGHT, 2, 4) is None

    def test_own_win(self):
        b = Board.from_rows(["OOOO..", "XXX...", "......", "......", "......", "......"])
        assert terminal_score(b, Player.NOUGHT, 1, 3) == 5.0

    def test_opponent_win(self):
        b = Board.from_rows(["OOOO..", "XXX...", "......", "......", "......", "......"])
        assert terminal_score(b, Player.CROSS, 2, 3) == -0.5

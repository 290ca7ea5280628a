import pytest

from quadtac.game.board import (
    BOARD_SIZE,
    WIN_LENGTH,
    Board,
    QuadTacGameState,
    format_point,
    parse_coordinate,
)
from quadtac.game.types import GameStatus, Player, Point


class TestParseCoordinate:
    def test_valid(self):
        assert parse_coordinate("A1") == Point(0, 0)
        assert parse_coordinate("C4") == Point(3, 2)
        assert parse_coordinate("F6") == Point(5, 5)
        assert parse_coordinate("c4") == Point(3, 2)  # case insensitive

    def test_invalid(self):
        assert parse_coordinate("") is None
        assert parse_coordinate("G1") is None
        assert parse_coordinate("A0") is None
        assert parse_coordinate("A7") is None
        assert parse_coordinate("XX") is None

    def test_respects_board_size(self):
        assert parse_coordinate("H8", size=8) == Point(7, 7)
        assert parse_coordinate("D4", size=3) is None


class TestFormatPoint:
    def test_basic(self):
        assert format_point(Point(0, 0)) == "A1"
        assert format_point(Point(3, 2)) == "C4"
        assert format_point(Point(5, 5)) == "F6"

    def test_inverse_of_parse(self):
        for text in ("A1", "B5", "F2"):
            assert format_point(parse_coordinate(text)) == text


class TestBoard:
    def test_defaults(self):
        b = Board()
        assert b.size == BOARD_SIZE == 6
        assert b.win_length == WIN_LENGTH == 4
        assert b.empty_count == 36

    def test_win_length_must_fit(self):
        with pytest.raises(AssertionError):
            Board(size=3, win_length=4)

    def test_place_and_get(self):
        b = Board()
        p = Point(3, 4)
        b.place(p, Player.CROSS)
        assert b.get(p) is Player.CROSS
        assert not b.is_empty(p)
        assert b.occupied_count == 1

    def test_remove(self):
        b = Board()
        p = Point(3, 4)
        b.place(p, Player.CROSS)
        b.remove(p)
        assert b.is_empty(p)

    def test_place_on_occupied_cell_fails(self):
        b = Board()
        b.place(Point(1, 1), Player.CROSS)
        with pytest.raises(AssertionError):
            b.place(Point(1, 1), Player.NOUGHT)

    def test_place_off_grid_fails(self):
        with pytest.raises(AssertionError):
            Board().place(Point(6, 0), Player.CROSS)

    def test_is_on_grid(self):
        b = Board()
        assert b.is_on_grid(Point(0, 0))
        assert b.is_on_grid(Point(5, 5))
        assert not b.is_on_grid(Point(-1, 0))
        assert not b.is_on_grid(Point(0, 6))

    def test_trial_restores_cell(self):
        b = Board()
        p = Point(2, 2)
        with b.trial(p, Player.NOUGHT):
            assert b.get(p) is Player.NOUGHT
        assert b.is_empty(p)

    def test_trial_restores_cell_on_break(self):
        b = Board()
        for p in (Point(0, 0), Point(0, 1), Point(0, 2)):
            with b.trial(p, Player.CROSS):
                if p == Point(0, 1):
                    break
        assert b.empty_count == 36

    def test_trial_restores_cell_on_exception(self):
        b = Board()
        with pytest.raises(RuntimeError):
            with b.trial(Point(4, 4), Player.CROSS):
                raise RuntimeError("boom")
        assert b.is_empty(Point(4, 4))

    def test_from_rows(self):
        b = Board.from_rows([
            "X.....",
            ".O....",
            "......",
            "......",
            "......",
            ".....x",
        ])
        assert b.get(Point(0, 0)) is Player.CROSS
        assert b.get(Point(1, 1)) is Player.NOUGHT
        assert b.get(Point(5, 5)) is Player.CROSS
        assert b.occupied_count == 3

    def test_empty_points_row_major(self):
        b = Board.from_rows(["XO.", ".X.", "O.."], win_length=3)
        assert b.empty_points() == [
            Point(0, 2), Point(1, 0), Point(1, 2), Point(2, 1), Point(2, 2),
        ]

    def test_copy_is_independent(self):
        b = Board()
        b.place(Point(0, 0), Player.CROSS)
        c = b.copy()
        c.place(Point(1, 1), Player.NOUGHT)
        assert b.is_empty(Point(1, 1))
        assert c.get(Point(0, 0)) is Player.CROSS

    def test_str(self):
        b = Board.from_rows(["X.O", "...", ".O."], win_length=3)
        assert str(b) == "|X| |O|\n| | | |\n| |O| |"


class TestQuadTacGameState:
    def test_initial_state(self):
        g = QuadTacGameState()
        assert g.current_player is Player.CROSS
        assert g.status is GameStatus.PLAYING
        assert not g.is_over
        assert g.winner is None
        assert g.last_move is None
        assert len(g.legal_moves()) == BOARD_SIZE * BOARD_SIZE

    def test_alternating_turns(self):
        g = QuadTacGameState()
        g.apply_move(Point(2, 2))
        assert g.current_player is Player.NOUGHT
        g.apply_move(Point(2, 3))
        assert g.current_player is Player.CROSS
        assert g.last_move.point == Point(2, 3)
        assert g.last_move.player is Player.NOUGHT

    def test_horizontal_win(self):
        g = QuadTacGameState()
        for i in range(3):
            g.apply_move(Point(0, i))  # X
            g.apply_move(Point(1, i))  # O
        g.apply_move(Point(0, 3))  # X wins
        assert g.is_over
        assert g.winner is Player.CROSS
        assert g.status is GameStatus.CROSS_WON

    def test_vertical_win_for_nought(self):
        g = QuadTacGameState()
        g.apply_move(Point(5, 5))  # X
        for i in range(3):
            g.apply_move(Point(i, 0))  # O
            g.apply_move(Point(i, 2))  # X
        g.apply_move(Point(3, 0))  # O wins
        assert g.winner is Player.NOUGHT
        assert g.status is GameStatus.NOUGHT_WON

    def test_off_main_diagonal_win(self):
        g = QuadTacGameState()
        # X on the diagonal starting at (0, 2): (0,2),(1,3),(2,4),(3,5)
        xs = [Point(i, 2 + i) for i in range(4)]
        os = [Point(5, i) for i in range(3)]
        for i in range(3):
            g.apply_move(xs[i])
            g.apply_move(os[i])
        g.apply_move(xs[3])
        assert g.winner is Player.CROSS

    def test_no_premature_win(self):
        """3 in a row should NOT trigger a win."""
        g = QuadTacGameState()
        for i in range(3):
            g.apply_move(Point(0, i))
            g.apply_move(Point(1, i))
        assert not g.is_over

    def test_draw_on_full_board(self):
        g = QuadTacGameState(size=3, win_length=3)
        # X O X / X O O / O X X  -- no three in a row
        for p in (
            Point(0, 0), Point(0, 1), Point(0, 2), Point(1, 1), Point(1, 0),
            Point(1, 2), Point(2, 1), Point(2, 0), Point(2, 2),
        ):
            g.apply_move(p)
        assert g.is_over
        assert g.is_draw
        assert g.winner is None
        assert g.legal_moves() == []

    def test_undo_move(self):
        g = QuadTacGameState()
        g.apply_move(Point(2, 2))
        g.apply_move(Point(2, 3))
        move = g.undo_move()
        assert move is not None
        assert move.point == Point(2, 3)
        assert g.current_player is Player.NOUGHT
        assert g.board.is_empty(Point(2, 3))

    def test_undo_reverses_win(self):
        g = QuadTacGameState()
        for i in range(3):
            g.apply_move(Point(0, i))
            g.apply_move(Point(1, i))
        g.apply_move(Point(0, 3))
        assert g.is_over
        g.undo_move()
        assert not g.is_over
        assert g.winner is None

    def test_undo_empty_returns_none(self):
        assert QuadTacGameState().undo_move() is None

    def test_cannot_play_on_occupied(self):
        g = QuadTacGameState()
        g.apply_move(Point(2, 2))
        with pytest.raises(AssertionError):
            g.apply_move(Point(2, 2))

    def test_cannot_play_after_game_over(self):
        g = QuadTacGameState()
        for i in range(3):
            g.apply_move(Point(0, i))
            g.apply_move(Point(1, i))
        g.apply_move(Point(0, 3))
        with pytest.raises(AssertionError):
            g.apply_move(Point(4, 4))

    def test_resign(self):
        g = QuadTacGameState()
        g.apply_move(Point(2, 2))
        g.resign(Player.NOUGHT)
        assert g.winner is Player.CROSS

    def test_copy_is_independent(self):
        g = QuadTacGameState()
        g.apply_move(Point(2, 2))
        c = g.copy()
        c.apply_move(Point(3, 3))
        assert len(g.moves) == 1
        assert g.board.is_empty(Point(3, 3))
        assert g.current_player is Player.NOUGHT

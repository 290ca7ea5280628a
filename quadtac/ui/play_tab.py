"""Play tab: Human vs AI with interactive SVG board.

The AI searches on a single background worker thread against a copy of the
game, so the page stays live while it thinks. Until its move is applied the
session rejects human moves and the board is drawn without click targets.
"""

from __future__ import annotations

import logging
import random as _random
import threading
import time as _time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Iterator, Optional

import gradio as gr

from quadtac.agent.base import Agent
from quadtac.agent.minimax_agent import DEFAULT_TIME_LIMIT_MS, MinimaxAgent
from quadtac.agent.random_agent import RandomAgent
from quadtac.game.board import QuadTacGameState, format_point, parse_coordinate
from quadtac.game.types import Player, Point
from quadtac.ui.board_component import render_board_svg

logger = logging.getLogger(__name__)

AGENT_CHOICES = ["MinimaxAgent", "RandomAgent"]
COLOR_CHOICES = ["X (moves first)", "O", "Random"]

# One search at a time; searches are CPU bound and never run in parallel
_executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="quadtac-ai")


def make_agent(choice: str, time_limit_s: float) -> Agent:
    if choice == "RandomAgent":
        return RandomAgent()
    return MinimaxAgent(time_limit_ms=time_limit_s * 1000)


def _think(agent: Agent, game: QuadTacGameState) -> tuple[Point, float]:
    t0 = _time.time()
    move = agent.select_move(game)
    return move, _time.time() - t0


@dataclass
class GameSession:
    """Per-tab game state held in gr.State."""

    game: QuadTacGameState = field(default_factory=QuadTacGameState)
    agent: Agent = field(default_factory=MinimaxAgent)
    human_player: Player = field(default=Player.CROSS)
    thinking: bool = False
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)
    _turn_start: float = field(default_factory=_time.time)

    def reset(self, human_player: Optional[Player] = None) -> None:
        self.game = QuadTacGameState()
        self.thinking = False
        self._turn_start = _time.time()
        if human_player is not None:
            self.human_player = human_player

    def mark_turn_start(self) -> None:
        """Record the moment the current player's clock starts."""
        self._turn_start = _time.time()

    def elapsed_since_turn_start(self) -> float:
        return _time.time() - self._turn_start

    @property
    def is_ai_turn(self) -> bool:
        return not self.game.is_over and self.game.current_player != self.human_player

    def start_ai_turn(self) -> Future:
        """Submit the AI's search to the worker thread."""
        with self._lock:
            assert not self.thinking, "AI is already thinking"
            assert self.is_ai_turn, "It is not the AI's turn"
            self.thinking = True
            snapshot = self.game.copy()
        return _executor.submit(_think, self.agent, snapshot)

    def finish_ai_turn(self, future: Future) -> None:
        """Wait for the search and apply its move in one step."""
        try:
            move, elapsed = future.result()
        except Exception:
            with self._lock:
                self.thinking = False
            raise
        with self._lock:
            self.game.apply_move(move, elapsed=elapsed)
            self.thinking = False
        logger.info("AI played %s in %.2fs", format_point(move), elapsed)
        self.mark_turn_start()

    def play_ai_turn(self) -> None:
        self.finish_ai_turn(self.start_ai_turn())

    @property
    def game_over_banner(self) -> str:
        """Short text for the SVG overlay banner. Empty if game is not over."""
        g = self.game
        if not g.is_over:
            return ""
        if g.winner is not None:
            if g.winner == self.human_player:
                return "You win!"
            return "AI wins!"
        return "Draw!"

    @property
    def status_text(self) -> str:
        g = self.game
        if g.is_over:
            if g.winner is not None:
                who = "You win!" if g.winner == self.human_player else "AI wins!"
                return f"Game over - {who} ({g.winner.symbol} wins)"
            return "Game over - Draw!"
        if self.thinking or g.current_player != self.human_player:
            return f"AI is thinking... ({g.current_player.symbol})"
        return f"Your turn ({g.current_player.symbol})"

    @property
    def analysis_text(self) -> str:
        report = getattr(self.agent, "last_report", None)
        if report is None:
            return ""
        return (
            f"{format_point(report.move)}: score {report.score:.3f}, "
            f"depth {report.depth}, {report.stop_reason.value}, "
            f"{report.nodes} nodes in {report.elapsed:.2f}s"
        )

    @property
    def move_history_table(self) -> list[list[str]]:
        rows: list[list[str]] = []
        for i, move in enumerate(self.game.moves):
            t = f"{move.elapsed:.2f}" if move.elapsed is not None else "-"
            rows.append([str(i + 1), move.player.symbol, format_point(move.point), t])
        return rows


def _make_board_html(session: GameSession) -> str:
    clickable = (
        not session.thinking
        and not session.game.is_over
        and session.game.current_player == session.human_player
    )
    return render_board_svg(
        session.game,
        clickable=clickable,
        game_over_message=session.game_over_banner,
    )


def _outputs(session: GameSession, status: Optional[str] = None):
    return (
        _make_board_html(session),
        status if status is not None else session.status_text,
        session.move_history_table,
        session.analysis_text,
        session,
    )


def _apply_human_move(coord_text: str, session: GameSession) -> Iterator[tuple]:
    """Process a human move, then let the AI respond."""
    if session.thinking:
        yield _outputs(session, "Wait - the AI is thinking.") + ("",)
        return

    if session.game.is_over:
        yield _outputs(session) + ("",)
        return

    if session.game.current_player != session.human_player:
        yield _outputs(session, "Wait - it's the AI's turn.") + ("",)
        return

    point = parse_coordinate(coord_text, session.game.board.size)
    if point is None:
        yield _outputs(session, f"Invalid coordinate: '{coord_text}'. Use format like C4.") + ("",)
        return

    if not session.game.board.is_empty(point):
        yield _outputs(session, f"{format_point(point)} is already occupied.") + ("",)
        return

    session.game.apply_move(point, elapsed=session.elapsed_since_turn_start())

    if session.is_ai_turn:
        future = session.start_ai_turn()
        yield _outputs(session) + ("",)
        session.finish_ai_turn(future)

    yield _outputs(session) + ("",)


def _new_game(color_choice: str, agent_choice: str, time_limit_s: float, session: GameSession) -> Iterator[tuple]:
    """Start a new game. color_choice is one of COLOR_CHOICES."""
    if session.thinking:
        yield _outputs(session, "Wait - the AI is thinking.") + ("",)
        return

    if color_choice == "Random":
        human = _random.choice([Player.CROSS, Player.NOUGHT])
    elif color_choice == "O":
        human = Player.NOUGHT
    else:
        human = Player.CROSS

    session.agent = make_agent(agent_choice, time_limit_s)
    session.reset(human_player=human)
    assigned = f"You are {human.symbol}."

    # AI (X) opens when the human plays O
    if session.is_ai_turn:
        future = session.start_ai_turn()
        yield _outputs(session) + (assigned,)
        session.finish_ai_turn(future)

    yield _outputs(session) + (assigned,)


def _undo_move(session: GameSession) -> Iterator[tuple]:
    """Undo the last move pair (AI + human).

    Undoing the AI's opening move hands the turn back to the AI, which then
    plays again.
    """
    if session.thinking:
        yield _outputs(session, "Wait - the AI is thinking.")
        return
    if not session.game.moves:
        yield _outputs(session, "Nothing to undo.")
        return

    last = session.game.moves[-1]
    if last.player != session.human_player:
        session.game.undo_move()  # undo AI
    if session.game.moves:
        session.game.undo_move()  # undo human
    session.mark_turn_start()

    if session.is_ai_turn:
        future = session.start_ai_turn()
        yield _outputs(session)
        session.finish_ai_turn(future)

    yield _outputs(session)


def _resign(session: GameSession):
    if session.thinking or session.game.is_over:
        return _outputs(session)
    session.game.resign(session.human_player)
    return _outputs(session)


def build_play_tab() -> None:
    """Construct the Play tab UI inside a gr.Blocks context."""

    # A factory, so every browser session gets its own GameSession
    session_state = gr.State(GameSession)

    with gr.Row():
        # Left: board
        with gr.Column(scale=3):
            board_html = gr.HTML(
                value=render_board_svg(QuadTacGameState()),
                label="Board",
            )
        # Right: controls
        with gr.Column(scale=1):
            status_text = gr.Textbox(
                value="Your turn (X)",
                label="Status",
                interactive=False,
                lines=2,
            )
            color_info = gr.Textbox(
                value="You are X.",
                label="Side",
                interactive=False,
                lines=1,
            )
            analysis = gr.Textbox(label="AI analysis", interactive=False, lines=2)

            gr.Markdown("### New Game")
            color_choice = gr.Radio(
                choices=COLOR_CHOICES,
                value=COLOR_CHOICES[0],
                label="Play as",
            )
            agent_choice = gr.Dropdown(
                choices=AGENT_CHOICES,
                value=AGENT_CHOICES[0],
                label="Opponent",
            )
            time_limit = gr.Slider(
                minimum=0.5,
                maximum=70,
                value=DEFAULT_TIME_LIMIT_MS / 1000,
                step=0.5,
                label="AI thinking time (s)",
            )
            new_game_btn = gr.Button("New Game", variant="primary")

            with gr.Row():
                undo_btn = gr.Button("Undo")
                resign_btn = gr.Button("Resign", variant="stop")

            gr.Markdown("### Enter Move")
            coord_input = gr.Textbox(
                label="Coordinate (e.g. C4)",
                placeholder="C4",
                elem_id="coord-input",
                lines=1,
            )
            coord_submit = gr.Button(
                "Submit Move",
                elem_id="coord-submit",
            )

            gr.Markdown("### Move History")
            move_table = gr.Dataframe(
                headers=["#", "Player", "Move", "Time (s)"],
                datatype=["number", "str", "str", "str"],
                interactive=False,
                column_count=4,
            )

    # Outputs shared by most callbacks
    board_outputs = [board_html, status_text, move_table, analysis, session_state]

    # Wire up callbacks
    coord_submit.click(
        fn=_apply_human_move,
        inputs=[coord_input, session_state],
        outputs=board_outputs + [coord_input],
    )

    new_game_btn.click(
        fn=_new_game,
        inputs=[color_choice, agent_choice, time_limit, session_state],
        outputs=board_outputs + [color_info],
    )

    undo_btn.click(
        fn=_undo_move,
        inputs=[session_state],
        outputs=board_outputs,
    )

    resign_btn.click(
        fn=_resign,
        inputs=[session_state],
        outputs=board_outputs,
    )

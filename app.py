"""Gradio web app entry point for QuadTac."""

import logging

import gradio as gr

from quadtac.game.board import BOARD_SIZE, WIN_LENGTH
from quadtac.ui.board_component import BOARD_CLICK_JS
from quadtac.ui.play_tab import build_play_tab

with gr.Blocks(title="QuadTac") as demo:
    gr.Markdown("# QuadTac")
    gr.Markdown(
        f"Tic-tac-toe on a {BOARD_SIZE}x{BOARD_SIZE} board, {WIN_LENGTH} in a row to win. "
        "The AI runs a time-limited iterative deepening minimax search."
    )

    with gr.Tab("Play"):
        build_play_tab()

    # Bind board click handler JS on page load
    demo.load(fn=None, js=BOARD_CLICK_JS)

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    demo.queue().launch(theme=gr.themes.Soft())

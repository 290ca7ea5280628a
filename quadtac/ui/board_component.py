"""SVG board renderer + JavaScript click handler for Gradio."""

from __future__ import annotations

from quadtac.game.board import COL_LABELS, QuadTacGameState, format_point
from quadtac.game.types import Player, Point

# Layout constants
CELL_SIZE = 80
MARGIN = 30
GRID_WIDTH = 4
CELL_PADDING = CELL_SIZE // 6
SYMBOL_STROKE_WIDTH = 7

# Colors
BG_COLOR = "#FFFFFF"
LINE_COLOR = "#C8C8C8"
LABEL_COLOR = "#555555"
CROSS_COLOR = "#E53935"
NOUGHT_COLOR = "#1E40AF"
LAST_MOVE_COLOR = "rgba(250, 204, 21, 0.35)"

# Banner colors keyed by outcome for the human
BANNER_COLORS = {
    "You win!": "#4ADE80",
    "AI wins!": "#F87171",
}
BANNER_DEFAULT_COLOR = "#FFFFFF"


def board_px(size: int) -> int:
    return MARGIN * 2 + CELL_SIZE * size


def _cell_origin(row: int, col: int) -> tuple[int, int]:
    """Top-left pixel of a cell; row 0 is drawn at the top."""
    return MARGIN + col * CELL_SIZE, MARGIN + row * CELL_SIZE


def _symbol(player: Player, row: int, col: int) -> list[str]:
    x0, y0 = _cell_origin(row, col)
    x1, y1 = x0 + CELL_PADDING, y0 + CELL_PADDING
    x2, y2 = x0 + CELL_SIZE - CELL_PADDING, y0 + CELL_SIZE - CELL_PADDING
    style = f'stroke-width="{SYMBOL_STROKE_WIDTH}" stroke-linecap="round" fill="none"'
    if player is Player.CROSS:
        return [
            f'<line x1="{x1}" y1="{y1}" x2="{x2}" y2="{y2}" stroke="{CROSS_COLOR}" {style}/>',
            f'<line x1="{x2}" y1="{y1}" x2="{x1}" y2="{y2}" stroke="{CROSS_COLOR}" {style}/>',
        ]
    cx, cy = x0 + CELL_SIZE // 2, y0 + CELL_SIZE // 2
    r = CELL_SIZE // 2 - CELL_PADDING
    return [f'<circle cx="{cx}" cy="{cy}" r="{r}" stroke="{NOUGHT_COLOR}" {style}/>']


def render_board_svg(
    game_state: QuadTacGameState,
    clickable: bool = True,
    highlight_last: bool = True,
    game_over_message: str = "",
) -> str:
    """Render the board as an SVG string."""
    size = game_state.board.size
    px = board_px(size)
    parts: list[str] = []

    parts.append(
        f'<svg xmlns="http://www.w3.org/2000/svg" '
        f'width="{px}" height="{px}" '
        f'viewBox="0 0 {px} {px}" '
        f'id="quadtac-board">'
    )
    parts.append(f'<rect width="{px}" height="{px}" fill="{BG_COLOR}" rx="4"/>')

    # Last move highlight goes under the symbols
    if highlight_last and game_state.moves:
        last_point = game_state.moves[-1].point
        x0, y0 = _cell_origin(*last_point)
        parts.append(
            f'<rect x="{x0}" y="{y0}" width="{CELL_SIZE}" height="{CELL_SIZE}" '
            f'fill="{LAST_MOVE_COLOR}"/>'
        )

    # Inner grid lines
    for i in range(1, size):
        offset = MARGIN + i * CELL_SIZE
        parts.append(
            f'<line x1="{offset}" y1="{MARGIN}" x2="{offset}" y2="{px - MARGIN}" '
            f'stroke="{LINE_COLOR}" stroke-width="{GRID_WIDTH}" stroke-linecap="round"/>'
        )
        parts.append(
            f'<line x1="{MARGIN}" y1="{offset}" x2="{px - MARGIN}" y2="{offset}" '
            f'stroke="{LINE_COLOR}" stroke-width="{GRID_WIDTH}" stroke-linecap="round"/>'
        )

    # Column labels on top, row labels on the left
    for c in range(size):
        x = MARGIN + c * CELL_SIZE + CELL_SIZE // 2
        parts.append(
            f'<text x="{x}" y="{MARGIN - 10}" text-anchor="middle" '
            f'font-size="14" font-family="monospace" fill="{LABEL_COLOR}">'
            f'{COL_LABELS[c]}</text>'
        )
    for r in range(size):
        y = MARGIN + r * CELL_SIZE + CELL_SIZE // 2
        parts.append(
            f'<text x="{MARGIN // 2}" y="{y + 5}" text-anchor="middle" '
            f'font-size="14" font-family="monospace" fill="{LABEL_COLOR}">'
            f'{r + 1}</text>'
        )

    # Marks
    for r in range(size):
        for c in range(size):
            player = game_state.board.get(Point(r, c))
            if player is not None:
                parts.extend(_symbol(player, r, c))

    # Clickable cells (invisible rects)
    if clickable and not game_state.is_over:
        for pt in game_state.board.empty_points():
            x0, y0 = _cell_origin(*pt)
            coord_str = format_point(pt)
            parts.append(
                f'<rect x="{x0}" y="{y0}" width="{CELL_SIZE}" height="{CELL_SIZE}" '
                f'fill="transparent" class="board-click" '
                f'data-coord="{coord_str}" style="cursor:pointer">'
                f'<title>{coord_str}</title></rect>'
            )

    if game_over_message:
        color = BANNER_COLORS.get(game_over_message, BANNER_DEFAULT_COLOR)
        mid = px // 2
        parts.append(
            f'<rect x="{MARGIN}" y="{mid - 35}" width="{px - 2 * MARGIN}" height="70" '
            f'fill="rgba(0, 0, 0, 0.7)" rx="8"/>'
        )
        parts.append(
            f'<text x="{mid}" y="{mid + 12}" text-anchor="middle" '
            f'font-size="34" font-weight="bold" font-family="sans-serif" '
            f'fill="{color}">{game_over_message}</text>'
        )

    parts.append("</svg>")
    return "\n".join(parts)


# JavaScript that handles clicks on the SVG and writes the coordinate to
# a hidden Gradio Textbox, then triggers its submit button. Bound once on
# page load via Blocks.load(js=...).
BOARD_CLICK_JS = """
() => {
    if (window._quadtacClickBound) return;
    window._quadtacClickBound = true;

    document.addEventListener('click', function(e) {
        const cell = e.target.closest('.board-click');
        if (!cell) return;
        const coord = cell.getAttribute('data-coord');
        if (!coord) return;

        const container = document.querySelector('#coord-input textarea, #coord-input input');
        if (container) {
            // Native setter so Gradio notices the change
            const nativeSetter = Object.getOwnPropertyDescriptor(
                window.HTMLInputElement.prototype, 'value'
            )?.set || Object.getOwnPropertyDescriptor(
                window.HTMLTextAreaElement.prototype, 'value'
            )?.set;
            if (nativeSetter) {
                nativeSetter.call(container, coord);
            } else {
                container.value = coord;
            }
            container.dispatchEvent(new Event('input', { bubbles: true }));
            const btn = document.querySelector('#coord-submit');
            if (btn) btn.click();
        }
    });
}
"""

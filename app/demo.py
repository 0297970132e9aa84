"""
Arcade AI Assistants - Interactive Demo

Run with: streamlit run app/demo.py
"""

import random
from typing import Dict, FrozenSet, Optional, Tuple

import streamlit as st

from arcade_ai import (
    ConfigProvider,
    GameAssistant,
    MinesweeperAssistant,
    MinesweeperBoard,
    Position,
    SnakeAssistant,
    SnakeSnapshot,
    TetrisAssistant,
    TetrisSnapshot,
    random_snake_snapshot,
    random_tetris_snapshot,
)
from arcade_ai.minesweeper import CellAnalysis
from arcade_ai.tetris import PIECE_SHAPES

NUMBER_COLORS: Dict[str, str] = {
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}


def _cell_size(width: int) -> Tuple[int, str]:
    # Scale cell size based on board width
    if width >= 30:
        return 14, "10px"
    if width >= 25:
        return 16, "11px"
    if width >= 16:
        return 20, "13px"
    return 26, "15px"


def _td(display: str, bg: str, color: str, size: int, font: str, highlight: bool) -> str:
    border = "2px solid #ff0000" if highlight else "1px solid #999"
    return f'''<td style="
        width: {size}px; height: {size}px;
        text-align: center;
        background: {bg};
        border: {border};
        color: {color};
        font-weight: bold;
        font-size: {font};
    ">{display}</td>'''


def _table(rows: str) -> str:
    return (
        '<div style="font-family: monospace; line-height: 1.2;">'
        '<table style="border-collapse: collapse; margin: auto;">'
        f"{rows}</table></div>"
    )


def render_minesweeper_html(
    board: MinesweeperBoard,
    cells: Dict[Position, CellAnalysis],
    highlight: Optional[Position] = None,
    show_mines: bool = False,
) -> str:
    """Render the board; cells proven safe are tinted green, proven mines orange."""
    size, font = _cell_size(board.width)
    html = ""
    for y in range(board.height):
        html += "<tr>"
        for x in range(board.width):
            pos = Position(x, y)
            finding = cells.get(pos)
            if board.flagged[y][x]:
                cell, bg, color = "F", "#ffa500", "#ffffff"
            elif board.revealed[y][x]:
                if pos in board.mines:
                    cell, bg, color = "M", "#ff0000", "#ffffff"
                else:
                    cell = str(board.adjacent_mines(pos))
                    bg = "#f0f0f0" if cell == "0" else "#ffffff"
                    color = NUMBER_COLORS.get(cell, "#000000")
            elif show_mines and pos in board.mines:
                cell, bg, color = "M", "#ffcccc", "#ff0000"
            elif finding is not None and finding.is_safe:
                cell, bg, color = ".", "#b6e3b6", "#666666"
            elif finding is not None and finding.is_mine:
                cell, bg, color = ".", "#ffd59a", "#666666"
            else:
                cell, bg, color = ".", "#c0c0c0", "#666666"

            display = cell if cell != "0" else " "
            html += _td(display, bg, color, size, font, pos == highlight)
        html += "</tr>"
    return _table(html)


def render_snake_html(
    snapshot: SnakeSnapshot,
    path: Optional[Tuple[Position, ...]] = None,
    highlight: Optional[Position] = None,
) -> str:
    size, font = _cell_size(snapshot.width)
    body = set(snapshot.body)
    path_cells = set(path or ())
    html = ""
    for y in range(snapshot.height):
        html += "<tr>"
        for x in range(snapshot.width):
            pos = Position(x, y)
            if pos == snapshot.head:
                cell, bg = "@", "#2e7d32"
            elif pos in body:
                cell, bg = "o", "#66bb6a"
            elif pos == snapshot.food:
                cell, bg = "*", "#ef5350"
            elif pos in path_cells:
                cell, bg = "·", "#bbdefb"
            else:
                cell, bg = " ", "#f5f5f5"
            html += _td(cell, bg, "#ffffff", size, font, pos == highlight)
        html += "</tr>"
    return _table(html)


def render_tetris_html(
    snapshot: TetrisSnapshot, ghost: FrozenSet[Position] = frozenset()
) -> str:
    size, font = _cell_size(snapshot.width)
    html = ""
    for y in range(snapshot.height):
        html += "<tr>"
        for x in range(snapshot.width):
            if snapshot.board[y][x]:
                bg = "#546e7a"
            elif Position(x, y) in ghost:
                bg = "#ffe082"
            else:
                bg = "#fafafa"
            html += _td(" ", bg, "#000000", size, font, False)
        html += "</tr>"
    return _table(html)


def ghost_cells(snapshot: TetrisSnapshot, assistant: TetrisAssistant) -> FrozenSet[Position]:
    """Cells covered by the best placement of the last analysis."""
    if not assistant.last_placements:
        return frozenset()
    best = assistant.last_placements[0]
    shape = PIECE_SHAPES[snapshot.piece][best.rotation]
    return frozenset(
        Position(best.position.x + dx, best.position.y + dy)
        for dy, row in enumerate(shape)
        for dx, filled in enumerate(row)
        if filled
    )


def show_assistant_output(assistant: GameAssistant, difficulty: float) -> None:
    analysis = assistant.last_analysis
    if analysis is None:
        st.info("Analyze the board to see the assistant's suggestion.")
        return

    suggestion = assistant.get_suggestion()
    hint = assistant.get_hint(difficulty)

    st.metric("Confidence", f"{analysis.confidence * 100:.0f}%")
    st.metric("Risk", analysis.risk_assessment)
    st.markdown(f"**Hint:** {hint.message}")
    st.markdown("---")
    st.text(assistant.explain_decision(suggestion))


def main():
    st.set_page_config(
        page_title="Arcade AI Assistants",
        page_icon="🕹️",
        layout="wide",
    )

    st.title("Arcade AI Assistants")
    st.markdown("""
    Decision support for Minesweeper, Snake and Tetris: constraint satisfaction,
    A* pathfinding and heuristic placement search behind one interface.
    """)

    # Sidebar configuration
    st.sidebar.header("Assistant Configuration")
    game_type = st.sidebar.selectbox("Game", ["minesweeper", "snake", "tetris"])
    difficulty = st.sidebar.slider(
        "Hint Difficulty",
        0.0,
        1.0,
        0.5,
        help="Below 0.3: detailed hints. 0.3 to 0.7: short hints. Above: risk only.",
    )
    debug_mode = st.sidebar.checkbox("Debug Mode", value=False)
    educational_mode = st.sidebar.checkbox("Educational Mode", value=False)
    show_alternatives = st.sidebar.checkbox("Show Alternatives", value=True)
    seed = st.sidebar.number_input("Seed", min_value=0, value=7, step=1)

    # Initialize session state
    if "config" not in st.session_state:
        st.session_state.config = ConfigProvider()
        config = st.session_state.config
        st.session_state.assistants = {
            "minesweeper": MinesweeperAssistant(config),
            "snake": SnakeAssistant(config),
            "tetris": TetrisAssistant(config),
        }
        st.session_state.ms_board = None
        st.session_state.prev_settings = None

    config: ConfigProvider = st.session_state.config
    config.update_config(
        difficulty_level=difficulty,
        debug_mode=debug_mode,
        educational_mode=educational_mode,
        show_alternatives=show_alternatives,
    )
    assistant = st.session_state.assistants[game_type]
    rng = random.Random(int(seed))

    col1, col2 = st.columns([2, 1])

    if game_type == "minesweeper":
        preset = st.sidebar.selectbox(
            "Difficulty Preset",
            ["Beginner (9x9, 10)", "Intermediate (16x16, 40)", "Expert (30x16, 99)"],
        )
        width, height, mines = {
            "Beginner (9x9, 10)": (9, 9, 10),
            "Intermediate (16x16, 40)": (16, 16, 40),
            "Expert (30x16, 99)": (30, 16, 99),
        }[preset]

        # Auto-generate new board when settings change
        current_settings = (width, height, mines, int(seed))
        if st.session_state.ms_board is None or st.session_state.prev_settings != current_settings:
            board = MinesweeperBoard(width, height, mines, rng=rng)
            board.reveal(Position(width // 2, height // 2))
            st.session_state.ms_board = board
            st.session_state.prev_settings = current_settings
            assistant.analyze_game_state(board.snapshot())

        board = st.session_state.ms_board
        with col1:
            st.subheader("Game Board")
            btn_col1, btn_col2 = st.columns(2)
            with btn_col1:
                if st.button("Apply Suggestion", type="primary", disabled=board.game_over):
                    action = assistant.get_suggestion().action
                    if action.target is not None:
                        if action.kind == "flag":
                            board.toggle_flag(action.target)
                        else:
                            board.reveal(action.target)
                    assistant.analyze_game_state(board.snapshot())
                    st.rerun()
            with btn_col2:
                show_mines = st.checkbox("Show Mines", value=False)

            target = assistant.get_suggestion().action.target
            st.markdown(
                render_minesweeper_html(
                    board, assistant.cell_analyses, target, show_mines
                ),
                unsafe_allow_html=True,
            )
            if board.game_over:
                st.success("Board finished.")

    elif game_type == "snake":
        length = st.sidebar.slider("Snake Length", 1, 40, 8)
        snapshot = random_snake_snapshot(20, 20, length, rng)
        assistant.analyze_game_state(snapshot)
        with col1:
            st.subheader("Game Board")
            if st.button("Place Strategic Food"):
                food = assistant.generate_strategic_food_position(snapshot)
                st.info(f"Strategic food position: {food}")
            path = assistant.last_path
            st.markdown(
                render_snake_html(
                    snapshot,
                    tuple(path) if path else None,
                    assistant.get_suggestion().action.target,
                ),
                unsafe_allow_html=True,
            )

    else:
        snapshot = random_tetris_snapshot(rng)
        assistant.analyze_game_state(snapshot)
        with col1:
            st.subheader(f"Game Board (piece {snapshot.piece})")
            st.markdown(
                render_tetris_html(snapshot, ghost_cells(snapshot, assistant)),
                unsafe_allow_html=True,
            )
            level = st.slider("Player Level", 1, 20, 1)
            st.text(f"Adaptive fall speed: {assistant.calculate_adaptive_speed(snapshot, level)} ms")

    with col2:
        st.subheader("Assistant")
        show_assistant_output(assistant, difficulty)


if __name__ == "__main__":
    main()

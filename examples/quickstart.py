"""
Quickstart example for the Arcade AI assistants.

This script demonstrates basic usage of the three assistants.
"""

import random

from arcade_ai import (
    ConfigProvider,
    MinesweeperAssistant,
    MinesweeperBoard,
    Position,
    SnakeAssistant,
    SnakeSnapshot,
    TetrisAssistant,
    TetrisSnapshot,
    format_minesweeper_knowledge,
    run_minesweeper_many_games,
)


def main():
    print("=" * 60)
    print("Arcade AI Assistants - Quickstart Example")
    print("=" * 60)

    config = ConfigProvider(educational_mode=False)

    # Example 1: Minesweeper suggestion on a fresh board
    print("\n1. Minesweeper: first analysis of a Beginner board (9x9, 10 mines)...")
    print("-" * 60)

    board = MinesweeperBoard(9, 9, 10, rng=random.Random(42))
    board.reveal(Position(4, 4))

    minesweeper = MinesweeperAssistant(config)
    analysis = minesweeper.analyze_game_state(board.snapshot())
    print(analysis.reasoning)
    print(minesweeper.explain_decision(minesweeper.get_suggestion()))
    print()
    print(format_minesweeper_knowledge(board.snapshot(), minesweeper.cell_analyses))

    # Example 2: Snake path to food
    print("\n2. Snake: path to food on a 20x20 grid...")
    print("-" * 60)

    snake = SnakeAssistant(config)
    snapshot = SnakeSnapshot(
        body=(Position(5, 5), Position(4, 5), Position(3, 5)),
        food=Position(10, 10),
        direction="right",
        width=20,
        height=20,
    )
    analysis = snake.analyze_game_state(snapshot)
    print(analysis.reasoning)
    print(f"Hint (easy): {snake.get_hint(0.1).message}")
    print(f"Hint (hard): {snake.get_hint(0.9).message}")

    # Example 3: Tetris placement
    print("\n3. Tetris: best placement for an I piece on an empty board...")
    print("-" * 60)

    tetris = TetrisAssistant(config)
    empty = TetrisSnapshot(board=[[0] * 10 for _ in range(20)], piece="I")
    analysis = tetris.analyze_game_state(empty)
    print(analysis.reasoning)
    for action in analysis.suggested_actions:
        print(f"  {action.description}")
    print(f"Ghost position: {tetris.get_optimal_ghost_position(empty)}")

    # Example 4: Minesweeper self-play statistics
    print("\n4. Self-play: 20 Beginner games following the top suggestion...")
    print("-" * 60)

    results = run_minesweeper_many_games(9, 9, 10, runs=20, seed=0)
    print(f"Win rate: {results['win_rate']*100:.1f}%")
    print(f"Average moves per game: {results['avg_reveal_moves_count']:.1f}")
    print(f"Average guesses per game: {results['avg_guesses_count']:.1f}")

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()

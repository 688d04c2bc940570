"""
Console front end for the TicTacToe engine.

This script ties together:
- The game session (board, turns, results)
- The AI opponent (easy, medium, hard)
- A plain text board and keyboard input

Run this script to play TicTacToe in a terminal!
"""

import argparse
import logging
import random
import sys
from typing import Callable, List, Optional, Sequence

from tictactoe import (
    DelayedScheduler,
    Difficulty,
    GameConfig,
    GameListener,
    GameSession,
    InvalidMoveError,
    Mark,
    PlayerSlot,
    SessionState,
)


def format_board(cells: Sequence[Mark]) -> str:
    """
    Render the board as text. Empty cells show their number (1-9).
    """
    rows = []
    for row in range(3):
        symbols = []
        for col in range(3):
            index = row * 3 + col
            mark = cells[index]
            symbols.append(mark.value if mark is not Mark.EMPTY else str(index + 1))
        rows.append(" " + " | ".join(symbols))
    return "\n---+---+---\n".join(rows)


def parse_cell(text: str) -> int:
    """
    Turn the typed cell number (1-9) into a board index (0-8).

    Raises:
        ValueError: If the text is not a number from 1 to 9.
    """
    number = int(text.strip())
    if not 1 <= number <= 9:
        raise ValueError(f"Cell {number} does not exist, pick 1-9")
    return number - 1


class ConsoleGame(GameListener):
    """
    Plays a session in the terminal.

    Reads cell numbers for human turns; AI turns are played by the session
    itself and reported through the listener callbacks.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print
    ):
        self.input = input_func
        self.output = output
        self.session: Optional[GameSession] = None

    # ==================== LISTENER ====================

    def on_cell_updated(self, index: int, mark: Mark):
        self.output(f"{mark.value} takes cell {index + 1}")

    def on_turn_changed(self, mark: Mark):
        if self.session is not None and self.session.player_for(mark).is_ai:
            self.output("AI is thinking...")

    def on_game_ended(self, state: SessionState, winner_label: str):
        self.output("\n" + "=" * 30)
        self.output("   GAME OVER!")
        self.output("=" * 30)

    def on_restart(self, state: SessionState):
        self.output(f"\nNew game! {state.turn.value} plays first.")

    # ==================== GAME LOOP ====================

    def play(self, session: GameSession) -> int:
        """
        Run games until the user declines a rematch.

        Returns:
            Number of games finished.
        """
        self.session = session
        games_finished = 0

        player_two = session.player(PlayerSlot.TWO)
        self.output(f"{session.player(PlayerSlot.ONE).name} (X) vs {player_two.name} (O)")
        self.output(f"Player 2 status: {session.status_text(PlayerSlot.TWO)}")

        while True:
            self.output("")
            self.output(format_board(session.board))

            if session.is_game_over:
                games_finished += 1
                label = session.winner_label()
                if label == session.config.DRAW_LABEL:
                    self.output(f"\nResult: {label}")
                else:
                    self.output(f"\nWinner: {label}")

                if not self._ask_yes_no("Play again? [y/N] "):
                    return games_finished
                session.restart()
                continue

            name = session.current_player_display_name()
            mark = session.current_state().turn
            answer = self.input(f"{name} ({mark.value}), choose a cell 1-9: ")

            try:
                index = parse_cell(answer)
            except ValueError:
                self.output(f"'{answer.strip()}' is not a cell number. Try 1-9.")
                continue

            try:
                session.apply_move(index)
            except InvalidMoveError as e:
                self.output(f"Move rejected: {e}")

    def _ask_yes_no(self, prompt: str) -> bool:
        return self.input(prompt).strip().lower() in ("y", "yes")


def build_config(args: argparse.Namespace) -> GameConfig:
    """Apply command line overrides on top of the default settings."""
    config = GameConfig()
    config.WHO_PLAYS_FIRST = args.first
    config.IS_PLAYER_TWO_AI = not args.two_player
    config.AI_DIFFICULTY = args.difficulty.upper()
    if args.delay is not None:
        config.AI_MOVE_DELAY = args.delay
    if args.name1:
        config.PLAYER_ONE_NAME = args.name1
    if args.name2:
        config.PLAYER_TWO_NAME = args.name2
    return config


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TicTacToe against a friend or the computer")
    parser.add_argument(
        "--difficulty",
        choices=[d.name.lower() for d in Difficulty],
        default=GameConfig.AI_DIFFICULTY.lower(),
        help="AI strength: easy (random), medium (win/block), hard (minimax)"
    )
    parser.add_argument(
        "--first",
        choices=["X", "O"],
        default=GameConfig.WHO_PLAYS_FIRST,
        help="Mark that moves first in every game"
    )
    parser.add_argument(
        "--two-player",
        action="store_true",
        help="Player 2 is a human instead of the AI"
    )
    parser.add_argument("--name1", help="Name of player 1 (X)")
    parser.add_argument("--name2", help="Name of player 2 (O)")
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help=f"Seconds before the AI move is shown (default: {GameConfig.AI_MOVE_DELAY})"
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the AI's random choices")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser


def main(
    argv: Optional[List[str]] = None,
    input_func: Callable[[str], str] = input,
    output: Callable[[str], None] = print,
    sleep: Optional[Callable[[float], None]] = None
) -> int:
    """Main entry point."""
    args = create_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    config = build_config(args)
    console = ConsoleGame(input_func=input_func, output=output)
    scheduler = DelayedScheduler(sleep) if sleep is not None else DelayedScheduler()

    session = GameSession(
        config=config,
        scheduler=scheduler,
        rng=random.Random(args.seed),
        listeners=[console],
    )

    try:
        console.play(session)
    except (KeyboardInterrupt, EOFError):
        output("\n\nGame interrupted by user.")
    finally:
        output("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

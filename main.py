"""
Main entry point for TicTacToe.

This script ties together:
- Game (board, rules, minimax AI, session)
- Render (board drawing)
- UI (Tkinter window) or a console front end

Run this script to play TicTacToe against a friend or the computer!
"""

import sys
import logging
import argparse
from typing import Optional, List

from game.board import Player
from game.config import GameConfig, OpponentMode, SessionSettings
from game.scheduler import ManualScheduler
from game.session import GameSession
from game.ai_player import AIPlayer

logger = logging.getLogger(__name__)


class ConsoleGame:
    """
    Text front end.

    Commands:
    1-9  play that cell (numbered left to right, top to bottom)
    n    new round (the other side starts)
    r    reset everything, including the score
    h    hint for the side to move
    q    quit
    """

    def __init__(self, settings: SessionSettings, snapshot_path: Optional[str] = None):
        """
        Initialize the console game.

        Args:
            settings: Mode, human side and computer delay.
            snapshot_path: If set, the board image is written here after
                           every finished round.
        """
        self.scheduler = ManualScheduler()
        self.session = GameSession(settings, self.scheduler)
        self.hint_ai = AIPlayer()
        self.snapshot_path = snapshot_path
        self.is_running = False

        self.session.add_listener(self._on_session_change)

    def start(self):
        """Start the game."""
        print("\n" + "=" * 60)
        print("   TicTacToe")
        if self.session.settings.vs_computer:
            print(f"   You play: {self.session.settings.human_side.value}")
            print(f"   Computer plays: {self.session.settings.computer_side.value}")
        else:
            print("   Two players")
        print("=" * 60)
        print("Keys 1-9 play a cell, 'n' new round, 'r' reset, 'h' hint, 'q' quit\n")

        self.is_running = True
        self._game_loop()

    def _game_loop(self):
        """Main game loop."""
        while self.is_running:
            if self.scheduler.pending:
                print("\n>>> Computer is thinking...")
                self.scheduler.run_pending(real_time=True)

            self._print_state()

            try:
                command = input("> ").strip().lower()
            except EOFError:
                break

            self._handle_command(command)

    def _handle_command(self, command: str):
        if command in ("q", "quit", "exit"):
            self.is_running = False
        elif command == "n":
            self.session.request_new_round()
        elif command == "r":
            self.session.request_full_reset()
        elif command == "h":
            if self.session.game_over:
                print("The round is over. Press 'n' for a new round.")
            else:
                print(self.hint_ai.get_move_suggestion(self.session.board, self.session.turn))
        elif command.isdigit() and len(command) == 1 and command != "0":
            if not self.session.request_move(int(command) - 1):
                print("That move is not allowed right now.")
        elif command:
            print(f"Unknown command: {command!r}")

    def _print_state(self):
        snap = self.session.snapshot()
        print(snap.board.format())
        print(f"\n{snap.status_text}")
        score = snap.score
        print(f"Score  X: {score.x_wins}  O: {score.o_wins}  Draws: {score.draws}")

    def _on_session_change(self, snapshot):
        if snapshot.round_over and self.snapshot_path:
            from render.board_renderer import BoardRenderer

            if BoardRenderer().save(snapshot, self.snapshot_path):
                print(f"Saved: {self.snapshot_path}")
            else:
                print(f"Could not save {self.snapshot_path}")


def run_self_play(rounds: int, snapshot_path: Optional[str] = None) -> int:
    """
    Let the AI play both sides.

    Starts alternate between X and O. Perfect play on both sides must
    always draw.

    Args:
        rounds: Number of rounds to play.
        snapshot_path: If set, the last board is saved here.

    Returns:
        Number of rounds that did not end in a draw.
    """
    ai = AIPlayer()
    session = GameSession(SessionSettings(mode=OpponentMode.HUMAN), ManualScheduler(), ai)

    for i in range(rounds):
        if i > 0:
            session.request_new_round()

        while not session.game_over:
            result = ai.get_best_move(session.board, session.turn)
            if result.move is None:
                logger.warning("Self-play stalled on %s", session.board.to_string())
                break
            session.apply_move(result.move, session.turn)

        print(f"Round {i + 1}: {session.outcome.label()}  ({session.board.to_string()})")

    score = session.score
    print(f"\nX wins: {score.x_wins}  O wins: {score.o_wins}  Draws: {score.draws}")

    if snapshot_path:
        from render.board_renderer import BoardRenderer
        BoardRenderer().save(session.snapshot(), snapshot_path)
        print(f"Saved: {snapshot_path}")

    return score.x_wins + score.o_wins


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TicTacToe")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in OpponentMode],
        default=GameConfig.DEFAULT_MODE.value,
        help="hvc = against the computer, hvh = two players"
    )
    parser.add_argument(
        "--side",
        choices=[p.value for p in Player],
        default=GameConfig.DEFAULT_HUMAN_SIDE.value,
        help="Side the human plays against the computer"
    )
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=GameConfig.COMPUTER_DELAY_MS,
        help="Pause before the computer's move is applied"
    )
    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Play in the terminal instead of a window"
    )
    parser.add_argument(
        "--self-play",
        type=int,
        metavar="N",
        help="Run N computer vs computer rounds and exit"
    )
    parser.add_argument(
        "--snapshot",
        metavar="PATH",
        help="Save the board image (e.g. board.png) when a round ends"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    if args.self_play is not None:
        failures = run_self_play(args.self_play, args.snapshot)
        if failures:
            print(f"\n{failures} round(s) did not end in a draw!")
            return 1
        return 0

    if args.delay_ms < 0:
        build_parser().error("--delay-ms must be >= 0")

    settings = SessionSettings(
        mode=OpponentMode(args.mode),
        human_side=Player(args.side),
        computer_delay_ms=args.delay_ms
    )

    # Launch UI by default
    if not args.no_ui:
        from ui import TicTacToeUI
        ui = TicTacToeUI(settings=settings)
        ui.run()
        return 0

    # Console mode (--no-ui)
    game = ConsoleGame(settings, snapshot_path=args.snapshot)
    try:
        game.start()
    except KeyboardInterrupt:
        print("\n\nGame interrupted by user.")
    finally:
        game.session.close()
        print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

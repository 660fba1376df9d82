"""
Line-oriented console front end for playing a game on one terminal.

Reads commands from stdin and writes board diagrams and results to stdout.
Every command maps onto the same click-driven GameSession a graphical UI
would use, so selecting and moving works exactly as it does on screen:
click a piece to select it, click a highlighted square to move there, click
the piece again to deselect.

Commands:
    show              print the board, side to move, and selection
    click <square>    click a square, e.g. "click e2" then "click e4"
    moves <square>    list legal destinations of the piece on a square
    fen [<fen>]       print the position as FEN, or load one
    new               start over from the initial position
    quit              exit

Output rule: stdout carries only replies to commands. Diagnostics go to
stderr through logging.
"""

import logging
import sys

from chess_rules.board import BoardError
from chess_rules.game import ClickOutcome, GameSession
from chess_rules.moves import legal_destinations
from chess_rules.notation import (
    board_from_fen,
    board_to_fen,
    parse_square,
    render,
    square_name,
)

_log = logging.getLogger(__name__)


def _send(line: str) -> None:
    """Write a reply line to stdout and flush immediately."""
    print(line, flush=True)


class ConsoleHandler:
    """
    Dispatches console commands to a GameSession.

    Attributes:
        session: The game being played. Replaced by "new" and "fen <fen>".
    """

    def __init__(self, session: GameSession | None = None) -> None:
        self.session: GameSession = session if session is not None else GameSession()

    # -----------------------------------------------------------------------
    # Command handlers
    # -----------------------------------------------------------------------

    def handle_show(self) -> None:
        _send(render(self.session.board))
        _send(f"to move: {self.session.active_color.value}")
        if self.session.selected is not None:
            targets = " ".join(sorted(square_name(t) for t in self.session.legal_targets))
            _send(f"selected: {square_name(self.session.selected)} -> {targets or '(none)'}")

    def handle_new(self) -> None:
        self.session = GameSession()
        self.handle_show()

    def handle_click(self, tokens: list[str]) -> None:
        """
        Click one square and report what happened.

        Replies with one of "selected", "deselected", "moved" (followed by the
        new board) or "ignored: <reason>".
        """
        if len(tokens) != 1:
            _send("usage: click <square>")
            return
        location = parse_square(tokens[0])
        result = self.session.click(location)
        name = square_name(result.location)

        if result.outcome is ClickOutcome.IGNORED:
            _send(f"ignored: {result.reason}")
        elif result.outcome is ClickOutcome.MOVED:
            suffix = ""
            if result.captured is not None:
                suffix = f" capturing {result.captured.owner.value} {result.captured.kind.value}"
            _send(f"moved to {name}{suffix}")
            self.handle_show()
        else:
            _send(f"{result.outcome.value} {name}")

    def handle_moves(self, tokens: list[str]) -> None:
        if len(tokens) != 1:
            _send("usage: moves <square>")
            return
        location = parse_square(tokens[0])
        piece = self.session.board.piece_at(location)
        if piece is None:
            _send(f"no piece on {square_name(location)}")
            return
        targets = legal_destinations(self.session.board, piece, location)
        _send(" ".join(sorted(square_name(t) for t in targets)) or "(none)")

    def handle_fen(self, tokens: list[str]) -> None:
        """
        Print the current position as FEN, or load a new one.

        A loaded FEN starts a fresh session: the selection is cleared and the
        FEN's side to move becomes the active colour.
        """
        if not tokens:
            _send(board_to_fen(self.session.board, self.session.active_color))
            return
        board, turn = board_from_fen(" ".join(tokens))
        self.session = GameSession(board, turn)
        self.handle_show()


def run_console_loop(stream=None) -> None:
    """
    Main console loop.

    Reads lines until "quit" or end of input. A malformed command (bad square
    name, bad FEN) is reported and the loop continues.
    """
    handler = ConsoleHandler()
    stream = stream if stream is not None else sys.stdin

    for raw_line in stream:
        line = raw_line.strip()
        if not line:
            continue

        tokens = line.split()
        command = tokens[0].lower()
        args = tokens[1:]

        try:
            if command == "show":
                handler.handle_show()
            elif command == "new":
                handler.handle_new()
            elif command == "click":
                handler.handle_click(args)
            elif command == "moves":
                handler.handle_moves(args)
            elif command == "fen":
                handler.handle_fen(args)
            elif command == "quit":
                break
            else:
                _send(f"unknown command: {command}")
        except BoardError as exc:
            _log.warning("console: %s", exc)
            _send(f"error: {exc}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    run_console_loop()

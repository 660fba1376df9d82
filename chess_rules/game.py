"""
Turn and selection state for an interactive game.

The move engine is stateless; something has to remember whose turn it is and
which piece the user picked. GameSession is that something. It is a two-state
machine driven by square clicks:

    WAITING_FOR_SELECTION --click own piece--------------> PIECE_SELECTED
    PIECE_SELECTED        --click legal destination------> WAITING_FOR_SELECTION
                                                            (move applied, turn passes)
    PIECE_SELECTED        --click selected square--------> WAITING_FOR_SELECTION
                                                            (deselect, board unchanged)
    PIECE_SELECTED        --click another own piece------> PIECE_SELECTED (reselect)

Anything else is ignored. Rejected input never changes state, and rejection
is reported through the returned ClickResult rather than raised, so a UI can
simply redraw from the session after every click.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from chess_rules.board import Board, Color, Location, Piece, initial_board, is_in_bounds
from chess_rules.moves import MoveError, apply_move, legal_destinations

_log = logging.getLogger(__name__)


class TurnState(Enum):
    WAITING_FOR_SELECTION = "waiting_for_selection"
    PIECE_SELECTED = "piece_selected"


class ClickOutcome(Enum):
    SELECTED = "selected"
    DESELECTED = "deselected"
    MOVED = "moved"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ClickResult:
    """
    What a click did.

    Attributes:
        outcome:  Which transition fired (IGNORED when none did).
        location: The clicked square.
        captured: The piece taken by a move, if any.
        reason:   Why an IGNORED click was rejected.
    """

    outcome: ClickOutcome
    location: Location
    captured: Piece | None = None
    reason: str = ""


class GameSession:
    """
    One game: the current board, the side to move, and the selection.

    Attributes:
        board:        Current position. Replaced (never mutated) on each move.
        active_color: Side to move.
        selected:     Location of the selected piece, or None.
    """

    def __init__(self, board: Board | None = None, active_color: Color = Color.WHITE) -> None:
        self._start = (board if board is not None else initial_board(), active_color)
        self.board: Board = self._start[0]
        self.active_color: Color = active_color
        self.selected: Location | None = None

    @property
    def state(self) -> TurnState:
        if self.selected is None:
            return TurnState.WAITING_FOR_SELECTION
        return TurnState.PIECE_SELECTED

    @property
    def legal_targets(self) -> frozenset[Location]:
        """Destinations of the selected piece, empty when nothing is selected."""
        if self.selected is None:
            return frozenset()
        piece = self.board.piece_at(self.selected)
        return legal_destinations(self.board, piece, self.selected)

    def reset(self) -> None:
        """Back to the board and side this session started with."""
        self.board, self.active_color = self._start
        self.selected = None

    def select(self, location: Location) -> ClickResult:
        """Select the active side's piece on location."""
        location = Location(*location)
        piece = self.board.piece_at(location)
        if piece is None:
            return ClickResult(ClickOutcome.IGNORED, location, reason="empty square")
        if piece.owner is not self.active_color:
            return ClickResult(
                ClickOutcome.IGNORED,
                location,
                reason=f"it is {self.active_color.value}'s turn",
            )
        self.selected = location
        return ClickResult(ClickOutcome.SELECTED, location)

    def deselect(self) -> ClickResult | None:
        """Drop the current selection. Returns None if nothing was selected."""
        if self.selected is None:
            return None
        location, self.selected = self.selected, None
        return ClickResult(ClickOutcome.DESELECTED, location)

    def move_to(self, target: Location) -> ClickResult:
        """
        Move the selected piece to target, pass the turn, and clear the
        selection. An illegal target leaves everything as it was.
        """
        target = Location(*target)
        if self.selected is None:
            return ClickResult(ClickOutcome.IGNORED, target, reason="no piece selected")
        try:
            captured = self.board.piece_at(target)
            self.board = apply_move(self.board, self.selected, target)
        except MoveError as exc:
            _log.debug("move rejected: %s", exc)
            return ClickResult(ClickOutcome.IGNORED, target, reason=str(exc))

        self.selected = None
        self.active_color = self.active_color.opposite
        return ClickResult(ClickOutcome.MOVED, target, captured=captured)

    def click(self, location: Location) -> ClickResult:
        """Feed one square click through the state machine."""
        location = Location(*location)
        if not is_in_bounds(location):
            return ClickResult(ClickOutcome.IGNORED, location, reason="off the board")

        if self.selected is None:
            return self.select(location)
        if location == self.selected:
            return self.deselect()
        if location in self.legal_targets:
            return self.move_to(location)

        occupant = self.board.piece_at(location)
        if occupant is not None and occupant.owner is self.active_color:
            return self.select(location)
        return ClickResult(ClickOutcome.IGNORED, location, reason="not a legal destination")

"""
Move engine: legal destination squares per piece kind, and move application.

The engine is stateless. It never tracks whose turn it is; callers pass a
Board, ask for destinations, and get a new Board back from apply_move. Turn
order lives in chess_rules.game.

Rules implemented are the pseudo-legal basics only: no check detection,
castling, en passant, or promotion. A pawn reaching the last rank simply
stays a pawn with no forward moves.

Destination generation comes in two shapes:

- Steppers (king, knight): a fixed offset table. Each target is kept unless
  it is off the board or holds an ally.
- Sliders (rook, bishop, queen): ray-walks. Each ray stops before an ally or
  the edge, and stops on (including) the first enemy.

Pawns get their own generator because they move and capture differently.
"""

import logging

from chess_rules.board import (
    Board,
    ChessRulesError,
    Color,
    Kind,
    Location,
    Piece,
    is_in_bounds,
)
from chess_rules.constants import (
    BLACK_PAWN_DIRECTION,
    BLACK_PAWN_RANK,
    DIAGONAL_DIRECTIONS,
    KING_OFFSETS,
    KNIGHT_OFFSETS,
    PAWN_CAPTURE_FILE_DELTAS,
    STRAIGHT_DIRECTIONS,
    WHITE_PAWN_DIRECTION,
    WHITE_PAWN_RANK,
)

_log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class MoveError(ChessRulesError):
    """
    A move request was rejected. The board passed in is left untouched.

    Attributes:
        source: The requested origin square.
        target: The requested destination square.
    """

    def __init__(self, message: str, source: Location, target: Location) -> None:
        super().__init__(message)
        self.source = source
        self.target = target


class OutOfBounds(MoveError):
    """The source or target lies outside the board."""


class NoPieceAtSource(MoveError):
    """No alive piece stands on the source square."""


class IllegalDestination(MoveError):
    """The target is not among the moving piece's legal destinations."""


# ---------------------------------------------------------------------------
# Occupant relations
# ---------------------------------------------------------------------------


def _empty_at(board: Board, location: Location) -> bool:
    return board.piece_at(location) is None


def _enemy_at(board: Board, location: Location, owner: Color) -> bool:
    occupant = board.piece_at(location)
    return occupant is not None and occupant.owner is not owner


def _ally_at(board: Board, location: Location, owner: Color) -> bool:
    occupant = board.piece_at(location)
    return occupant is not None and occupant.owner is owner


# ---------------------------------------------------------------------------
# Per-kind generators
# ---------------------------------------------------------------------------


def _step_targets(
    board: Board,
    owner: Color,
    location: Location,
    offsets: tuple[tuple[int, int], ...],
) -> set[Location]:
    """Fixed-offset targets, minus ally-occupied squares."""
    targets = set()
    for rank_delta, file_delta in offsets:
        target = location.offset(rank_delta, file_delta)
        if not _ally_at(board, target, owner):
            targets.add(target)
    return targets


def _ray_targets(
    board: Board,
    owner: Color,
    location: Location,
    directions: tuple[tuple[int, int], ...],
) -> set[Location]:
    """
    Ray-walk each direction from location.

    A ray stops without including the square when it leaves the board or hits
    an ally; it includes the square and stops when it hits an enemy; empty
    squares are included and the walk continues.
    """
    targets = set()
    for rank_delta, file_delta in directions:
        square = location.offset(rank_delta, file_delta)
        while is_in_bounds(square):
            if _ally_at(board, square, owner):
                break
            targets.add(square)
            if _enemy_at(board, square, owner):
                break
            square = square.offset(rank_delta, file_delta)
    return targets


def _pawn_targets(board: Board, owner: Color, location: Location) -> set[Location]:
    """
    Pawn pushes and captures.

    The double push requires both the square ahead and the landing square to
    be empty, so a pawn can never jump onto or over a blocker.
    """
    if owner is Color.WHITE:
        direction, start_rank = WHITE_PAWN_DIRECTION, WHITE_PAWN_RANK
    else:
        direction, start_rank = BLACK_PAWN_DIRECTION, BLACK_PAWN_RANK

    targets = set()
    one_ahead = location.offset(direction, 0)
    if _empty_at(board, one_ahead):
        targets.add(one_ahead)
        two_ahead = location.offset(2 * direction, 0)
        if location.rank == start_rank and _empty_at(board, two_ahead):
            targets.add(two_ahead)

    for file_delta in PAWN_CAPTURE_FILE_DELTAS:
        diagonal = location.offset(direction, file_delta)
        if _enemy_at(board, diagonal, owner):
            targets.add(diagonal)
    return targets


def legal_destinations(board: Board, piece: Piece, location: Location) -> frozenset[Location]:
    """
    Every square the piece standing on location may move to.

    Args:
        board:    The current position. Not modified.
        piece:    The piece to move. Its owner decides which occupants count
                  as allies and, for pawns, the direction of travel.
        location: Where the piece stands.

    Returns:
        The destinations as a frozenset of in-bounds locations. Order carries
        no meaning. Dead pieces have no destinations.

    Example:
        >>> from chess_rules.board import Location, Piece, Kind, Color, debug_board
        >>> knight = Piece(Kind.KNIGHT, Color.WHITE)
        >>> board = debug_board([(knight, (0, 0))])
        >>> sorted(legal_destinations(board, knight, Location(0, 0)))
        [Location(rank=1, file=2), Location(rank=2, file=1)]
    """
    if not piece.alive:
        return frozenset()

    location = Location(*location)
    owner = piece.owner
    kind = piece.kind

    if kind is Kind.KING:
        targets = _step_targets(board, owner, location, KING_OFFSETS)
    elif kind is Kind.KNIGHT:
        targets = _step_targets(board, owner, location, KNIGHT_OFFSETS)
    elif kind is Kind.ROOK:
        targets = _ray_targets(board, owner, location, STRAIGHT_DIRECTIONS)
    elif kind is Kind.BISHOP:
        targets = _ray_targets(board, owner, location, DIAGONAL_DIRECTIONS)
    elif kind is Kind.QUEEN:
        targets = _ray_targets(board, owner, location, STRAIGHT_DIRECTIONS + DIAGONAL_DIRECTIONS)
    else:
        targets = _pawn_targets(board, owner, location)

    # Ray-walks already stop at the edge; the fixed-offset kinds rely on this.
    return frozenset(target for target in targets if is_in_bounds(target))


def destinations_for(board: Board, color: Color) -> dict[Location, frozenset[Location]]:
    """
    Legal destinations of every alive piece of one side, keyed by location.

    Pieces with no destinations are included with an empty set so callers can
    tell "blocked" apart from "absent".
    """
    return {
        location: legal_destinations(board, piece, location)
        for piece, location in board.pieces(color)
    }


# ---------------------------------------------------------------------------
# Move application
# ---------------------------------------------------------------------------


def apply_move(
    board: Board,
    source: Location,
    target: Location,
    *,
    check_legal: bool = True,
) -> Board:
    """
    Move the piece on source to target and return the resulting board.

    Any alive piece on target is captured: it is marked dead and left at its
    square. The mover keeps its place in the entry order. Every other entry
    is carried over unchanged. The input board is never modified.

    Args:
        board:       The current position.
        source:      Square of the piece to move.
        target:      Destination square.
        check_legal: When True (the default), reject targets outside
                     legal_destinations. Pass False to trust the caller, e.g.
                     a UI that only ever offers precomputed destinations.

    Returns:
        A new Board.

    Raises:
        OutOfBounds:        source or target is off the board.
        NoPieceAtSource:    no alive piece on source.
        IllegalDestination: check_legal is set and target is not a legal
                            destination for the piece on source.
    """
    source = Location(*source)
    target = Location(*target)

    for square in (source, target):
        if not is_in_bounds(square):
            raise OutOfBounds(f"square {square} is off the board", source, target)

    mover = board.piece_at(source)
    if mover is None:
        raise NoPieceAtSource(f"no piece at {source}", source, target)

    if check_legal and target not in legal_destinations(board, mover, source):
        _log.debug("rejected %s %s -> %s", mover.kind.value, source, target)
        raise IllegalDestination(
            f"{mover.owner.value} {mover.kind.value} cannot move from {source} to {target}",
            source,
            target,
        )

    victim = board.piece_at(target) if target != source else None

    entries = []
    for piece, location in board.entries:
        if piece.alive and location == source:
            entries.append((piece, target))
        elif victim is not None and piece.alive and location == target:
            entries.append((piece.killed(), location))
        else:
            entries.append((piece, location))
    return Board(entries)

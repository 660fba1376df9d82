"""
Conversions between the kernel's board model and standard chess notation.

python-chess does the parsing and formatting here: algebraic square names
("e4"), FEN piece placement, and the ASCII board diagram. The kernel's own
rules never go through python-chess; this module only translates.

Square mapping: Location(rank, file) <-> chess.square(file, rank). Rank 0 is
White's back rank in both models, so no flipping is needed.

FEN import keeps piece placement and side to move only. Castling rights,
en passant and clocks have no counterpart in the kernel and are dropped.
Export writes them as "- - 0 1".
"""

import chess

from chess_rules.board import Board, BoardError, Color, Kind, Location, Piece, is_in_bounds

# Mapping from kernel kinds to python-chess piece type constants.
_KIND_TO_PIECE_TYPE: dict[Kind, int] = {
    Kind.PAWN:   chess.PAWN,
    Kind.KNIGHT: chess.KNIGHT,
    Kind.BISHOP: chess.BISHOP,
    Kind.ROOK:   chess.ROOK,
    Kind.QUEEN:  chess.QUEEN,
    Kind.KING:   chess.KING,
}
_PIECE_TYPE_TO_KIND: dict[int, Kind] = {v: k for k, v in _KIND_TO_PIECE_TYPE.items()}


def to_square(location: Location) -> chess.Square:
    """python-chess square index for an in-bounds location."""
    if not is_in_bounds(location):
        raise BoardError(f"location {tuple(location)} is off the board")
    return chess.square(location.file, location.rank)


def from_square(square: chess.Square) -> Location:
    return Location(chess.square_rank(square), chess.square_file(square))


def square_name(location: Location) -> str:
    """Algebraic name of a location, e.g. Location(1, 4) -> "e2"."""
    return chess.square_name(to_square(location))


def parse_square(name: str) -> Location:
    """
    Location for an algebraic square name.

    Raises:
        BoardError: name is not a square such as "a1".."h8".
    """
    try:
        return from_square(chess.parse_square(name.strip().lower()))
    except ValueError as exc:
        raise BoardError(f"invalid square name {name!r}") from exc


def to_chess_piece(piece: Piece) -> chess.Piece:
    return chess.Piece(_KIND_TO_PIECE_TYPE[piece.kind], piece.owner is Color.WHITE)


def from_chess_piece(piece: chess.Piece) -> Piece:
    owner = Color.WHITE if piece.color == chess.WHITE else Color.BLACK
    return Piece(_PIECE_TYPE_TO_KIND[piece.piece_type], owner)


def to_chess_board(board: Board, turn: Color = Color.WHITE) -> chess.Board:
    """
    python-chess board holding the alive pieces of board.

    The result has no castling rights and no en passant square, so its
    pseudo-legal moves only use rules the kernel also implements (apart from
    promotion, which python-chess spells as several moves to one square).
    """
    chess_board = chess.Board.empty()
    for piece, location in board.pieces():
        chess_board.set_piece_at(to_square(location), to_chess_piece(piece))
    chess_board.turn = turn is Color.WHITE
    return chess_board


def from_chess_board(chess_board: chess.Board) -> Board:
    """Kernel board from a python-chess board, squares in a1..h8 order."""
    return Board(
        (from_chess_piece(piece), from_square(square))
        for square, piece in sorted(chess_board.piece_map().items())
    )


def board_to_fen(board: Board, turn: Color = Color.WHITE) -> str:
    """FEN for the alive pieces of board with the given side to move."""
    placement = to_chess_board(board, turn).board_fen()
    side = "w" if turn is Color.WHITE else "b"
    return f"{placement} {side} - - 0 1"


def board_from_fen(fen: str) -> tuple[Board, Color]:
    """
    Parse a FEN string into a board and the side to move.

    A bare placement field ("8/8/8/8/8/8/8/8") is accepted and means White to
    move.

    Raises:
        BoardError: The FEN is malformed.
    """
    fields = fen.split()
    if not fields:
        raise BoardError("empty FEN")
    try:
        chess_board = chess.Board.empty()
        chess_board.set_board_fen(fields[0])
    except ValueError as exc:
        raise BoardError(f"invalid FEN {fen!r}: {exc}") from exc

    side = fields[1] if len(fields) > 1 else "w"
    if side not in ("w", "b"):
        raise BoardError(f"invalid side to move {side!r} in FEN {fen!r}")
    return from_chess_board(chess_board), Color.WHITE if side == "w" else Color.BLACK


def render(board: Board) -> str:
    """
    ASCII diagram of the alive pieces, rank 8 at the top, with file letters
    and rank numbers around the edge.
    """
    rows = str(to_chess_board(board)).splitlines()
    lines = [f"{8 - index} {row}" for index, row in enumerate(rows)]
    lines.append("  " + " ".join(chess.FILE_NAMES))
    return "\n".join(lines)

"""
Board model: squares, pieces, and the immutable board snapshot.

A board is an ordered collection of (piece, location) pairs rather than an
8x8 array. Captured pieces are never removed; they are tagged dead and stay
at the square where they were taken, so a renderer can still animate them or
replay a game from a list of prior boards. Occupancy queries only ever see
alive pieces.

Boards are never mutated. The move engine builds a new Board for every move,
which makes a Board safe to share between callers and to keep around as
history.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator, NamedTuple

from chess_rules.constants import (
    BACK_RANK_ORDER,
    BLACK_BACK_RANK,
    BLACK_PAWN_RANK,
    BOARD_SIZE,
    MAX_INDEX,
    MIN_INDEX,
    WHITE_BACK_RANK,
    WHITE_PAWN_RANK,
)


class ChessRulesError(ValueError):
    """Base class for every error raised by the rules kernel."""


class BoardError(ChessRulesError):
    """A board could not be built from the supplied pieces or records."""


class Color(Enum):
    """Piece owner. Also used for square shading."""

    WHITE = "white"
    BLACK = "black"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class Kind(Enum):
    KING = "king"
    QUEEN = "queen"
    BISHOP = "bishop"
    KNIGHT = "knight"
    ROOK = "rook"
    PAWN = "pawn"


class Location(NamedTuple):
    """
    A (rank, file) square coordinate.

    Locations outside the board may be constructed and queried; they are
    simply never occupied.
    """

    rank: int
    file: int

    def offset(self, rank_delta: int, file_delta: int) -> "Location":
        return Location(self.rank + rank_delta, self.file + file_delta)


@dataclass(frozen=True)
class Piece:
    """
    A piece record. Identity is positional: a piece only means something
    paired with a Location inside a Board.

    Attributes:
        kind:  What the piece is.
        owner: Which side it belongs to.
        alive: False once captured. Dead pieces keep their last location but
               no longer occupy it.
    """

    kind: Kind
    owner: Color
    alive: bool = True

    def killed(self) -> "Piece":
        """Return a copy of this piece marked as captured."""
        return replace(self, alive=False)


def is_in_bounds(location: Location) -> bool:
    """True iff both coordinates lie on the board."""
    rank, file = location
    return MIN_INDEX <= rank <= MAX_INDEX and MIN_INDEX <= file <= MAX_INDEX


def all_squares() -> list[Location]:
    """Every board location in row-major order (rank 0..7, then file 0..7)."""
    return [Location(rank, file) for rank in range(BOARD_SIZE) for file in range(BOARD_SIZE)]


def square_color(location: Location) -> Color:
    """
    Checkerboard shade of a square, from (rank - file) mod 2.

    Even parity is dark (Black), so (0, 0), the a1 square, is dark as on a
    real board. Rendering only; the move rules never look at square colour.
    """
    return Color.BLACK if (location.rank - location.file) % 2 == 0 else Color.WHITE


class Board:
    """
    Immutable snapshot of every piece on the board, alive or dead.

    Entries keep the order they were created in. Construction checks that no
    two alive pieces share a square; it does not require kings or a full set
    of pieces, so isolated test positions are valid boards.
    """

    __slots__ = ("_entries", "_occupancy")

    def __init__(self, entries: Iterable[tuple[Piece, Location]] = ()) -> None:
        normalized: list[tuple[Piece, Location]] = []
        occupancy: dict[Location, Piece] = {}
        for piece, location in entries:
            location = Location(*location)
            if piece.alive:
                if location in occupancy:
                    raise BoardError(
                        f"two alive pieces on {location}: "
                        f"{occupancy[location]} and {piece}"
                    )
                occupancy[location] = piece
            normalized.append((piece, location))
        self._entries: tuple[tuple[Piece, Location], ...] = tuple(normalized)
        self._occupancy: dict[Location, Piece] = occupancy

    @property
    def entries(self) -> tuple[tuple[Piece, Location], ...]:
        """All (piece, location) pairs, dead pieces included."""
        return self._entries

    def piece_at(self, location: Location) -> Piece | None:
        """The alive piece at location, or None. Any location may be queried."""
        return self._occupancy.get(Location(*location))

    def pieces(
        self, color: Color | None = None, alive: bool | None = True
    ) -> Iterator[tuple[Piece, Location]]:
        """
        Iterate over (piece, location) pairs in board order.

        Args:
            color: Restrict to this owner; None yields both sides.
            alive: True for pieces on the board, False for captured pieces,
                   None for every entry.
        """
        for piece, location in self._entries:
            if color is not None and piece.owner is not color:
                continue
            if alive is not None and piece.alive is not alive:
                continue
            yield piece, location

    def to_records(self) -> list[dict]:
        """
        Serialise to the wire form: one {kind, owner, alive, rank, file}
        record per entry, in board order.
        """
        return [
            {
                "kind": piece.kind.value,
                "owner": piece.owner.value,
                "alive": piece.alive,
                "rank": location.rank,
                "file": location.file,
            }
            for piece, location in self._entries
        ]

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "Board":
        """
        Build a board from wire records (see to_records).

        Raises:
            BoardError: Unknown kind/owner, a missing field, or two alive
                        pieces on the same square.
        """
        entries = []
        for record in records:
            try:
                piece = Piece(
                    kind=Kind(record["kind"]),
                    owner=Color(record["owner"]),
                    alive=bool(record.get("alive", True)),
                )
                location = Location(int(record["rank"]), int(record["file"]))
            except (KeyError, ValueError, TypeError) as exc:
                raise BoardError(f"invalid piece record {record!r}: {exc}") from exc
            entries.append((piece, location))
        return cls(entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        alive = sum(1 for _ in self.pieces())
        return f"Board({alive} alive, {len(self._entries) - alive} captured)"


def debug_board(pairs: Iterable[tuple[Piece, Location]]) -> Board:
    """
    Build an ad-hoc board from a literal list of (piece, location) pairs.

    Locations may be given as plain (rank, file) tuples. Intended for
    isolated piece tests, e.g. a lone knight in a corner.
    """
    return Board((piece, Location(*location)) for piece, location in pairs)


def initial_board() -> Board:
    """The standard 32-piece starting position, White pieces first."""
    entries: list[tuple[Piece, Location]] = []
    for color, back_rank, pawn_rank in (
        (Color.WHITE, WHITE_BACK_RANK, WHITE_PAWN_RANK),
        (Color.BLACK, BLACK_BACK_RANK, BLACK_PAWN_RANK),
    ):
        for file, kind_value in enumerate(BACK_RANK_ORDER):
            entries.append((Piece(Kind(kind_value), color), Location(back_rank, file)))
        for file in range(BOARD_SIZE):
            entries.append((Piece(Kind.PAWN, color), Location(pawn_rank, file)))
    return Board(entries)

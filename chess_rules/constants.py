"""
Board constants: dimensions, pawn ranks, movement tables, and the initial setup.

Every numeric constant used by the rules kernel is defined here so that the
board and move modules never need to introduce magic numbers. Coordinates are
(rank, file) pairs with rank 0 on White's side of the board and file 0 on the
a-file, matching the orientation python-chess uses for its square indices.
"""

# ---------------------------------------------------------------------------
# Board dimensions
# ---------------------------------------------------------------------------

BOARD_SIZE: int = 8
MIN_INDEX: int = 0
MAX_INDEX: int = BOARD_SIZE - 1

# ---------------------------------------------------------------------------
# Pawn ranks
# ---------------------------------------------------------------------------
# Pawns may advance two squares only from these ranks. White pawns move
# toward increasing rank, Black pawns toward decreasing rank.

WHITE_PAWN_RANK: int = 1
BLACK_PAWN_RANK: int = 6
WHITE_PAWN_DIRECTION: int = 1
BLACK_PAWN_DIRECTION: int = -1

# Back ranks used by the initial setup.
WHITE_BACK_RANK: int = 0
BLACK_BACK_RANK: int = 7

# ---------------------------------------------------------------------------
# Movement tables: (rank delta, file delta)
# ---------------------------------------------------------------------------

# Rook rays: N, S, E, W.
STRAIGHT_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
)

# Bishop rays: NE, NW, SE, SW.
DIAGONAL_DIRECTIONS: tuple[tuple[int, int], ...] = (
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
)

# King steps: every neighbour, origin excluded.
KING_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dr, df) for dr in (-1, 0, 1) for df in (-1, 0, 1) if (dr, df) != (0, 0)
)

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 2),
    (2, 1),
    (2, -1),
    (1, -2),
    (-1, -2),
    (-2, -1),
    (-2, 1),
    (-1, 2),
)

# Pawn captures are one step forward plus one of these file deltas.
PAWN_CAPTURE_FILE_DELTAS: tuple[int, ...] = (-1, 1)

# ---------------------------------------------------------------------------
# Initial setup
# ---------------------------------------------------------------------------
# Piece kinds on the back rank from the a-file to the h-file. Stored as kind
# values (see chess_rules.board.Kind) to keep this module import-free.

BACK_RANK_ORDER: tuple[str, ...] = (
    "rook",
    "knight",
    "bishop",
    "queen",
    "king",
    "bishop",
    "knight",
    "rook",
)

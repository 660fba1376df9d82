import random
import unittest

from chess_rules.board import Color, Kind, Location, Piece, all_squares, debug_board, initial_board
from chess_rules.constants import DIAGONAL_DIRECTIONS, KING_OFFSETS, KNIGHT_OFFSETS, STRAIGHT_DIRECTIONS
from chess_rules.moves import (
    IllegalDestination,
    NoPieceAtSource,
    OutOfBounds,
    apply_move,
    destinations_for,
    legal_destinations,
)

W, B = Color.WHITE, Color.BLACK


def _random_board(rng: random.Random, count: int):
    """Random position with up to count alive pieces, pawns off the back ranks."""
    squares = rng.sample(all_squares(), count)
    pairs = []
    for location in squares:
        kinds = list(Kind)
        if location.rank in (0, 7):
            kinds.remove(Kind.PAWN)
        pairs.append((Piece(rng.choice(kinds), rng.choice(list(Color))), location))
    return debug_board(pairs)


class TestExamples(unittest.TestCase):
    def test_queen_on_empty_board(self):
        queen = Piece(Kind.QUEEN, W)
        board = debug_board([(queen, (3, 3))])
        targets = legal_destinations(board, queen, Location(3, 3))

        # 7 on the rank, 7 on the file, diagonals NE 4, SW 3, NW 3, SE 3.
        self.assertEqual(len(targets), 27)
        expected = {
            square for square in all_squares()
            if square != (3, 3)
            and (
                square.rank == 3
                or square.file == 3
                or square.rank - square.file == 0
                or square.rank + square.file == 6
            )
        }
        self.assertEqual(targets, expected)

    def test_knight_in_corner(self):
        knight = Piece(Kind.KNIGHT, W)
        board = debug_board([(knight, (0, 0))])
        self.assertEqual(
            legal_destinations(board, knight, Location(0, 0)),
            {Location(1, 2), Location(2, 1)},
        )

    def test_white_pawn_double_step(self):
        pawn = Piece(Kind.PAWN, W)
        board = debug_board([(pawn, (1, 3))])
        self.assertEqual(
            legal_destinations(board, pawn, Location(1, 3)),
            {Location(2, 3), Location(3, 3)},
        )


class TestSteppers(unittest.TestCase):
    def test_king_in_centre_has_eight_moves(self):
        king = Piece(Kind.KING, B)
        board = debug_board([(king, (4, 4))])
        self.assertEqual(len(legal_destinations(board, king, Location(4, 4))), 8)

    def test_king_skips_allies_and_takes_enemies(self):
        king = Piece(Kind.KING, W)
        board = debug_board([
            (king, (0, 4)),
            (Piece(Kind.PAWN, W), (1, 4)),
            (Piece(Kind.ROOK, B), (1, 3)),
        ])
        targets = legal_destinations(board, king, Location(0, 4))
        self.assertNotIn(Location(1, 4), targets)
        self.assertIn(Location(1, 3), targets)
        self.assertEqual(targets, {Location(0, 3), Location(0, 5), Location(1, 3), Location(1, 5)})

    def test_knight_jumps_over_pieces(self):
        board = initial_board()
        knight = board.piece_at(Location(0, 1))
        self.assertEqual(
            legal_destinations(board, knight, Location(0, 1)),
            {Location(2, 0), Location(2, 2)},
        )

    def test_locality_on_random_boards(self):
        rng = random.Random(7)
        for _ in range(200):
            board = _random_board(rng, rng.randint(2, 20))
            for piece, location in board.pieces():
                if piece.kind not in (Kind.KING, Kind.KNIGHT):
                    continue
                offsets = KING_OFFSETS if piece.kind is Kind.KING else KNIGHT_OFFSETS
                allowed = {location.offset(*delta) for delta in offsets}
                for target in legal_destinations(board, piece, location):
                    self.assertIn(target, allowed)
                for target in allowed:
                    occupant = board.piece_at(target)
                    blocked = occupant is not None and occupant.owner is piece.owner
                    on_board = 0 <= target.rank <= 7 and 0 <= target.file <= 7
                    self.assertEqual(
                        target in legal_destinations(board, piece, location),
                        on_board and not blocked,
                    )


class TestSliders(unittest.TestCase):
    def test_rook_stops_before_ally_and_on_enemy(self):
        rook = Piece(Kind.ROOK, W)
        board = debug_board([
            (rook, (0, 0)),
            (Piece(Kind.PAWN, W), (0, 3)),
            (Piece(Kind.PAWN, B), (4, 0)),
        ])
        self.assertEqual(
            legal_destinations(board, rook, Location(0, 0)),
            {Location(0, 1), Location(0, 2), Location(1, 0), Location(2, 0), Location(3, 0), Location(4, 0)},
        )

    def test_bishop_moves_diagonally_only(self):
        bishop = Piece(Kind.BISHOP, B)
        board = debug_board([(bishop, (7, 2))])
        targets = legal_destinations(board, bishop, Location(7, 2))
        self.assertEqual(
            targets,
            {Location(6, 1), Location(5, 0), Location(6, 3), Location(5, 4),
             Location(4, 5), Location(3, 6), Location(2, 7)},
        )

    def test_queen_is_rook_plus_bishop(self):
        rng = random.Random(11)
        for _ in range(100):
            board = _random_board(rng, rng.randint(1, 24))
            for piece, location in board.pieces():
                if piece.kind is not Kind.QUEEN:
                    continue
                rook = Piece(Kind.ROOK, piece.owner)
                bishop = Piece(Kind.BISHOP, piece.owner)
                self.assertEqual(
                    legal_destinations(board, piece, location),
                    legal_destinations(board, rook, location) | legal_destinations(board, bishop, location),
                )

    def test_starting_sliders_are_blocked(self):
        board = initial_board()
        for location in (Location(0, 0), Location(0, 2), Location(0, 3), Location(7, 5)):
            piece = board.piece_at(location)
            self.assertEqual(legal_destinations(board, piece, location), frozenset())

    def test_ray_stops_at_first_occupied_square(self):
        rng = random.Random(3)
        directions = {
            Kind.ROOK: STRAIGHT_DIRECTIONS,
            Kind.BISHOP: DIAGONAL_DIRECTIONS,
            Kind.QUEEN: STRAIGHT_DIRECTIONS + DIAGONAL_DIRECTIONS,
        }
        for _ in range(200):
            board = _random_board(rng, rng.randint(2, 24))
            for piece, location in board.pieces():
                if piece.kind not in directions:
                    continue
                targets = legal_destinations(board, piece, location)
                for delta in directions[piece.kind]:
                    square = location.offset(*delta)
                    blocked = False
                    while 0 <= square.rank <= 7 and 0 <= square.file <= 7:
                        occupant = board.piece_at(square)
                        if blocked:
                            self.assertNotIn(square, targets)
                        elif occupant is None:
                            self.assertIn(square, targets)
                        else:
                            self.assertEqual(square in targets, occupant.owner is not piece.owner)
                            blocked = True
                        square = square.offset(*delta)


class TestPawns(unittest.TestCase):
    def test_black_pawn_moves_down(self):
        pawn = Piece(Kind.PAWN, B)
        board = debug_board([(pawn, (6, 4))])
        self.assertEqual(
            legal_destinations(board, pawn, Location(6, 4)),
            {Location(5, 4), Location(4, 4)},
        )

    def test_no_double_step_off_starting_rank(self):
        pawn = Piece(Kind.PAWN, W)
        board = debug_board([(pawn, (2, 4))])
        self.assertEqual(legal_destinations(board, pawn, Location(2, 4)), {Location(3, 4)})

    def test_blocked_pawn_cannot_advance(self):
        pawn = Piece(Kind.PAWN, W)
        board = debug_board([(pawn, (1, 4)), (Piece(Kind.KNIGHT, B), (2, 4))])
        self.assertEqual(legal_destinations(board, pawn, Location(1, 4)), frozenset())

    def test_double_step_needs_empty_landing_square(self):
        # The landing square is checked as well as the square passed over,
        # so a piece two squares ahead blocks the double step.
        pawn = Piece(Kind.PAWN, W)
        board = debug_board([(pawn, (1, 4)), (Piece(Kind.KNIGHT, B), (3, 4))])
        self.assertEqual(legal_destinations(board, pawn, Location(1, 4)), {Location(2, 4)})

    def test_captures_only_on_enemies(self):
        pawn = Piece(Kind.PAWN, W)
        board = debug_board([
            (pawn, (3, 3)),
            (Piece(Kind.ROOK, B), (4, 2)),
            (Piece(Kind.ROOK, W), (4, 4)),
            (Piece(Kind.ROOK, B), (2, 2)),
        ])
        self.assertEqual(
            legal_destinations(board, pawn, Location(3, 3)),
            {Location(4, 3), Location(4, 2)},
        )

    def test_dead_piece_is_not_capturable(self):
        pawn = Piece(Kind.PAWN, W)
        board = debug_board([(pawn, (3, 3)), (Piece(Kind.ROOK, B, alive=False), (4, 4))])
        self.assertEqual(legal_destinations(board, pawn, Location(3, 3)), {Location(4, 3)})

    def test_pawn_on_last_rank_is_stuck(self):
        pawn = Piece(Kind.PAWN, W)
        board = debug_board([(pawn, (7, 0))])
        self.assertEqual(legal_destinations(board, pawn, Location(7, 0)), frozenset())

    def test_pawn_properties_on_random_boards(self):
        rng = random.Random(5)
        for _ in range(300):
            board = _random_board(rng, rng.randint(2, 24))
            for piece, location in board.pieces():
                if piece.kind is not Kind.PAWN:
                    continue
                step = 1 if piece.owner is W else -1
                start_rank = 1 if piece.owner is W else 6
                for target in legal_destinations(board, piece, location):
                    # Directionality.
                    self.assertEqual(target.rank - location.rank > 0, step > 0)
                    # Double steps only from the starting rank.
                    if abs(target.rank - location.rank) == 2:
                        self.assertEqual(location.rank, start_rank)
                for file_delta in (-1, 1):
                    diagonal = location.offset(step, file_delta)
                    occupant = board.piece_at(diagonal)
                    enemy = occupant is not None and occupant.owner is not piece.owner
                    self.assertEqual(diagonal in legal_destinations(board, piece, location), enemy)


class TestDestinationsFor(unittest.TestCase):
    def test_initial_position_has_twenty_moves(self):
        result = destinations_for(initial_board(), W)
        self.assertEqual(len(result), 16)
        self.assertEqual(sum(len(t) for t in result.values()), 20)

    def test_dead_pieces_have_no_destinations(self):
        rook = Piece(Kind.ROOK, W, alive=False)
        board = debug_board([(rook, (0, 0))])
        self.assertEqual(legal_destinations(board, rook, Location(0, 0)), frozenset())
        self.assertEqual(destinations_for(board, W), {})


class TestApplyMove(unittest.TestCase):
    def test_quiet_move_relocates_piece(self):
        board = initial_board()
        after = apply_move(board, Location(1, 4), Location(3, 4))

        self.assertIsNone(after.piece_at(Location(1, 4)))
        self.assertEqual(after.piece_at(Location(3, 4)), Piece(Kind.PAWN, W))
        self.assertEqual(len(after), len(board))

    def test_input_board_is_untouched(self):
        board = initial_board()
        records = board.to_records()
        apply_move(board, Location(0, 6), Location(2, 5))
        self.assertEqual(board.to_records(), records)

    def test_capture_keeps_dead_piece_in_place(self):
        rook = Piece(Kind.ROOK, W)
        knight = Piece(Kind.KNIGHT, B)
        board = debug_board([(rook, (0, 0)), (knight, (5, 0))])
        after = apply_move(board, Location(0, 0), Location(5, 0))

        self.assertEqual(after.piece_at(Location(5, 0)), rook)
        self.assertEqual(
            after.entries,
            ((rook, Location(5, 0)), (Piece(Kind.KNIGHT, B, alive=False), Location(5, 0))),
        )
        self.assertEqual(list(after.pieces(B)), [])

    def test_other_entries_unchanged(self):
        board = initial_board()
        after = apply_move(board, Location(1, 0), Location(2, 0))
        changed = [
            index for index, (old, new) in enumerate(zip(board.entries, after.entries))
            if old != new
        ]
        self.assertEqual(len(changed), 1)

    def test_sequential_moves_track_latest_destination(self):
        queen = Piece(Kind.QUEEN, W)
        board = debug_board([(queen, (0, 3)), (Piece(Kind.PAWN, B), (6, 3))])
        board = apply_move(board, Location(0, 3), Location(3, 3))
        board = apply_move(board, Location(3, 3), Location(6, 3))

        self.assertEqual(board.piece_at(Location(6, 3)), queen)
        self.assertIsNone(board.piece_at(Location(3, 3)))
        self.assertIsNone(board.piece_at(Location(0, 3)))
        self.assertEqual([loc for p, loc in board.pieces(W)], [Location(6, 3)])

    def test_captured_square_can_be_reused(self):
        # A dead piece stays on its square; another piece can later land there.
        board = debug_board([
            (Piece(Kind.ROOK, W), (0, 0)),
            (Piece(Kind.KNIGHT, B), (4, 0)),
        ])
        board = apply_move(board, Location(0, 0), Location(4, 0))
        board = apply_move(board, Location(4, 0), Location(4, 7))
        board = apply_move(board, Location(4, 7), Location(4, 0))
        self.assertIs(board.piece_at(Location(4, 0)).kind, Kind.ROOK)
        self.assertEqual(len(list(board.pieces(alive=False))), 1)

    def test_no_piece_at_source(self):
        with self.assertRaises(NoPieceAtSource) as ctx:
            apply_move(initial_board(), Location(4, 4), Location(5, 4))
        self.assertEqual(ctx.exception.source, Location(4, 4))
        self.assertEqual(ctx.exception.target, Location(5, 4))

    def test_illegal_destination(self):
        with self.assertRaises(IllegalDestination):
            apply_move(initial_board(), Location(1, 4), Location(4, 4))

    def test_out_of_bounds(self):
        with self.assertRaises(OutOfBounds):
            apply_move(initial_board(), Location(1, 4), Location(8, 4))

    def test_unchecked_move_trusts_caller(self):
        board = initial_board()
        after = apply_move(board, Location(1, 4), Location(4, 4), check_legal=False)
        self.assertEqual(after.piece_at(Location(4, 4)), Piece(Kind.PAWN, W))

    def test_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            apply_move(initial_board(), Location(3, 3), Location(4, 4))


if __name__ == "__main__":
    unittest.main()

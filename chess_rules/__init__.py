"""
Chess rules kernel package.

This package implements the basic movement rules of chess over an immutable,
entry-list board: which squares a piece may move to, and what the board looks
like after a move. It deliberately stops short of check, castling, en
passant, and promotion.

Modules:
    constants — Board dimensions, pawn ranks, movement tables, initial setup
    board     — Location, Color, Kind, Piece, Board, and board factories
    moves     — legal_destinations, apply_move, and move errors
    notation  — Square names, FEN, and diagrams via python-chess
    game      — GameSession turn/selection state machine
"""

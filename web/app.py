"""
FastAPI web application exposing the chess rules kernel as JSON.

Endpoints:
    GET  /api/board/initial  — starting position as piece records
    POST /api/destinations   — legal destinations of the piece on a square
    POST /api/move           — apply a move, returning the new board
    POST /api/fen/import     — board records and side to move from a FEN
    POST /api/fen/export     — FEN for a board and side to move

Architecture notes:
- Stateless per request: the client sends the full board every time and
  keeps turn order itself. No server-side game state, so no locking.
- Boards travel as lists of {kind, owner, alive, rank, file} records, the
  same shape Board.to_records() produces. Captured pieces stay in the list
  with alive=false.
- Kernel errors (illegal move, inconsistent board, bad FEN) become HTTP 400.
  Malformed request bodies are rejected by pydantic with 422.
"""

import logging

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from chess_rules.board import Board, BoardError, Color, Kind, Location, initial_board
from chess_rules.constants import MAX_INDEX, MIN_INDEX
from chess_rules.moves import MoveError, apply_move, legal_destinations
from chess_rules.notation import board_from_fen, board_to_fen

# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------

logging.basicConfig(level=logging.INFO)
_log = logging.getLogger(__name__)

app = FastAPI(title="Chess Rules", version="1.0.0")


# ---------------------------------------------------------------------------
# Request / response models
# ---------------------------------------------------------------------------


class Square(BaseModel):
    """A board square. Both coordinates must lie in 0..7."""

    rank: int = Field(ge=MIN_INDEX, le=MAX_INDEX)
    file: int = Field(ge=MIN_INDEX, le=MAX_INDEX)

    def to_location(self) -> Location:
        return Location(self.rank, self.file)

    @classmethod
    def from_location(cls, location: Location) -> "Square":
        return cls(rank=location.rank, file=location.file)


class PieceRecord(BaseModel):
    """One board entry. Dead pieces keep the square they were captured on."""

    kind: Kind
    owner: Color
    alive: bool = True
    rank: int = Field(ge=MIN_INDEX, le=MAX_INDEX)
    file: int = Field(ge=MIN_INDEX, le=MAX_INDEX)


class BoardResponse(BaseModel):
    board: list[PieceRecord]


class DestinationsRequest(BaseModel):
    board: list[PieceRecord]
    location: Square


class DestinationsResponse(BaseModel):
    location: Square
    destinations: list[Square]


class MoveRequest(BaseModel):
    """
    Client request to move a piece.

    Fields:
        board:  Current position.
        source: Square of the piece to move.
        target: Destination; must be one of the piece's legal destinations.
    """

    board: list[PieceRecord]
    source: Square
    target: Square


class MoveResponse(BaseModel):
    """
    Result of an applied move.

    Fields:
        board:    Position after the move.
        captured: The piece taken on the target square, if any.
    """

    board: list[PieceRecord]
    captured: PieceRecord | None = None


class FenImportRequest(BaseModel):
    fen: str


class FenImportResponse(BaseModel):
    board: list[PieceRecord]
    active_color: Color


class FenExportRequest(BaseModel):
    board: list[PieceRecord]
    active_color: Color = Color.WHITE


class FenExportResponse(BaseModel):
    fen: str


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_board(records: list[PieceRecord]) -> Board:
    """Kernel board from request records; inconsistent boards are a 400."""
    try:
        return Board.from_records(record.model_dump(mode="json") for record in records)
    except BoardError as exc:
        raise HTTPException(status_code=400, detail=f"Invalid board: {exc}") from exc


def _dump_board(board: Board) -> list[PieceRecord]:
    return [PieceRecord(**record) for record in board.to_records()]


# ---------------------------------------------------------------------------
# API routes
# ---------------------------------------------------------------------------


@app.get("/api/board/initial", response_model=BoardResponse)
def api_initial_board() -> BoardResponse:
    """Return the standard 32-piece starting position."""
    return BoardResponse(board=_dump_board(initial_board()))


@app.post("/api/destinations", response_model=DestinationsResponse)
def api_destinations(request: DestinationsRequest) -> DestinationsResponse:
    """
    List the squares the piece on request.location may move to.

    An empty square has no destinations; this is not an error.
    """
    board = _load_board(request.board)
    location = request.location.to_location()
    piece = board.piece_at(location)
    targets = legal_destinations(board, piece, location) if piece is not None else frozenset()
    return DestinationsResponse(
        location=request.location,
        destinations=[Square.from_location(t) for t in sorted(targets)],
    )


@app.post("/api/move", response_model=MoveResponse)
def api_move(request: MoveRequest) -> MoveResponse:
    """
    Apply a move and return the resulting board.

    Raises:
        HTTPException 400: Inconsistent board, no piece on source, or a
                           target outside the piece's legal destinations.
    """
    board = _load_board(request.board)
    source = request.source.to_location()
    target = request.target.to_location()
    victim = board.piece_at(target)

    try:
        new_board = apply_move(board, source, target)
    except MoveError as exc:
        _log.info("Rejected move %s -> %s: %s", source, target, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    mover = new_board.piece_at(target)
    _log.info(
        "Move %s %s %s -> %s%s",
        mover.owner.value,
        mover.kind.value,
        tuple(source),
        tuple(target),
        f" captures {victim.kind.value}" if victim is not None else "",
    )

    captured = None
    if victim is not None:
        captured = PieceRecord(
            kind=victim.kind,
            owner=victim.owner,
            alive=False,
            rank=target.rank,
            file=target.file,
        )
    return MoveResponse(board=_dump_board(new_board), captured=captured)


@app.post("/api/fen/import", response_model=FenImportResponse)
def api_fen_import(request: FenImportRequest) -> FenImportResponse:
    """Parse a FEN into board records and the side to move."""
    try:
        board, turn = board_from_fen(request.fen)
    except BoardError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return FenImportResponse(board=_dump_board(board), active_color=turn)


@app.post("/api/fen/export", response_model=FenExportResponse)
def api_fen_export(request: FenExportRequest) -> FenExportResponse:
    """FEN for the alive pieces of a board."""
    board = _load_board(request.board)
    return FenExportResponse(fen=board_to_fen(board, request.active_color))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)

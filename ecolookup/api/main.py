"""
FastAPI Query API for the ECO opening catalog

Endpoints:
  GET /opening/fen/{fen}  - Lookup by FEN (exact, then board layout)
  POST /opening/moves  - Nearest opening for a PGN move sequence
  GET /opening/eco/{eco_code}  - All variations of an ECO code
  GET /opening/category/{letter}  - All openings in an ECO category
  GET /opening/roots  - Canonical ECO root variations
  GET /transitions/{fen}  - Openings before and after a position
"""

import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel

from ecolookup.catalog import OpeningBook
from ecolookup.eco_ingest import board_from_pgn
from ecolookup.queries import (
    InvalidEcoCategoryError,
    get_eco_roots,
    get_openings_by_eco,
    get_openings_by_eco_category,
)
from ecolookup.transitions import InvalidFenError

app = FastAPI(title="ECO Opening Lookup API", version="1.0.0")


class MovesLookupRequest(BaseModel):
    moves: str  # e.g. "1.e4 e5 2.Nf3 Nc6 3.Bc4"
    max_plies: int | None = None


def get_book(request: Request) -> OpeningBook:
    """The app's OpeningBook, loaded from ECO_DATA_DIR on first use."""
    book = getattr(request.app.state, "book", None)
    if book is None:
        book = OpeningBook.from_dir(os.environ.get("ECO_DATA_DIR", "data/eco.json"))
        request.app.state.book = book
    return book


def opening_to_response(fen: str | None, opening) -> dict | None:
    """Convert an opening to API response dict."""
    if opening is None:
        return None
    return {
        "fen": fen,
        "eco_code": opening.eco,
        "name": opening.name,
        "moves": opening.moves,
        "src": opening.src,
        "aliases": opening.aliases or {},
        "scid": opening.scid,
        "is_eco_root": opening.is_eco_root,
        "root_src": opening.root_src,
    }


def _fen_param(fen: str) -> str:
    return fen.replace("_", " ")


def _list_response(book: OpeningBook, openings: list) -> list[dict]:
    # Query results are records; recover their FEN keys by identity.
    fens = {id(o): fen for fen, o in book.openings.items()}
    return [opening_to_response(fens.get(id(o)), o) for o in openings]


@app.get("/opening/fen/{fen:path}")
def get_opening_by_fen(fen: str, book: OpeningBook = Depends(get_book)):
    """Lookup opening by FEN."""
    matched = book.resolve(_fen_param(fen))
    if matched is None:
        raise HTTPException(status_code=404, detail="Opening not found")
    return opening_to_response(matched, book.openings[matched])


@app.post("/opening/moves")
def lookup_moves(body: MovesLookupRequest, book: OpeningBook = Depends(get_book)):
    """Replay moves, then walk back to the nearest named opening."""
    if not body.moves.strip():
        raise HTTPException(status_code=400, detail="Invalid PGN")
    if body.max_plies is not None and body.max_plies < 0:
        raise HTTPException(status_code=400, detail="max_plies must be >= 0")
    try:
        board = board_from_pgn(body.moves)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not board.move_stack:
        raise HTTPException(status_code=400, detail="Invalid PGN")

    result = book.lookup(board, max_plies=body.max_plies)
    if result.opening is None:
        raise HTTPException(status_code=404, detail="No opening found for these moves")
    out = opening_to_response(result.fen, result.opening)
    out["plies_back"] = result.plies_back
    return out


@app.get("/opening/eco/{eco_code}")
def get_openings_for_eco(eco_code: str, limit: int = Query(500, le=5000), book: OpeningBook = Depends(get_book)):
    """All variations sharing an ECO code."""
    eco_code = eco_code.upper()
    matches = get_openings_by_eco(book.openings, eco_code)
    if not matches:
        raise HTTPException(status_code=404, detail=f"ECO {eco_code} not found")
    return _list_response(book, matches[:limit])


@app.get("/opening/category/{letter}")
def get_openings_for_category(letter: str, limit: int = Query(500, le=5000), book: OpeningBook = Depends(get_book)):
    """All openings in an ECO category A-E."""
    try:
        matches = get_openings_by_eco_category(book.openings, letter)
    except InvalidEcoCategoryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _list_response(book, matches[:limit])


@app.get("/opening/roots")
def get_roots(book: OpeningBook = Depends(get_book)):
    """Canonical ECO root variations."""
    return [opening_to_response(fen, o) for fen, o in get_eco_roots(book.openings).items()]


@app.get("/transitions/{fen:path}")
def get_transitions(fen: str, book: OpeningBook = Depends(get_book)):
    """Opening at a position plus openings one move before and after."""
    fen = _fen_param(fen)
    try:
        result = book.from_to(fen)
    except InvalidFenError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "opening": opening_to_response(fen, result["opening"]),
        "from": [
            opening_to_response(from_fen, o)
            for from_fen, o in zip(book.transitions.predecessors(fen), result["from"])
        ],
        "to": [
            opening_to_response(to_fen, o)
            for to_fen, o in zip(book.transitions.successors(fen), result["to"])
        ],
    }


@app.get("/health")
def health():
    return {"status": "ok"}

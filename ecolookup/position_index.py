"""
Position index: board-layout-only lookup keys.

A FEN carries side to move, castling rights, en passant square and move
clocks after the board layout. Positions reached by transposition, or
entered by hand without that metadata, differ only in those fields, so the
index groups catalog FENs by layout alone.
"""

from typing import Mapping

from ecolookup.models import Opening

PositionIndex = dict[str, list[str]]


def position_key(fen: str) -> str:
    """Board layout field of a FEN ("" for an empty string)."""
    fields = fen.split()
    return fields[0] if fields else ""


def build_position_index(openings: Mapping[str, Opening]) -> PositionIndex:
    """
    Map each board layout to the catalog FENs that share it.

    List order follows catalog iteration order, so the first FEN for a
    layout is the one the resolver falls back to.
    """
    index: PositionIndex = {}
    for fen in openings:
        index.setdefault(position_key(fen), []).append(fen)
    return index

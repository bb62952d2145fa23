"""Resolve a single FEN to an opening record."""

from typing import Mapping

from ecolookup.models import Opening
from ecolookup.position_index import PositionIndex, position_key


def resolve_fen(
    openings: Mapping[str, Opening],
    fen: str,
    position_index: PositionIndex | None = None,
) -> str | None:
    """
    Catalog key that answers fen: fen itself when cataloged, else the first
    FEN indexed under its board layout. None when the position is unknown.
    """
    if fen in openings:
        return fen

    if position_index is not None:
        fens = position_index.get(position_key(fen))
        if fens:
            return fens[0]

    return None


def find_opening(
    openings: Mapping[str, Opening],
    fen: str,
    position_index: PositionIndex | None = None,
) -> Opening | None:
    """
    Exact FEN match first, then board-layout fallback through position_index.

    The fallback returns the record of the first FEN indexed under the
    layout. Returns None when the position is not in the catalog.
    """
    key = resolve_fen(openings, fen, position_index)
    return openings.get(key) if key is not None else None

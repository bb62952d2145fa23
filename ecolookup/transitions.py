"""
Transition graph over the opening catalog (fromTo.json).

Each edge is one book move between two cataloged positions. The graph
answers "which openings lead here" and "where can this opening go next".
"""

import re
from typing import Iterable, Mapping

from ecolookup.models import Opening, Transition

# Eight ranks of piece letters and empty-square digits, no two digits in a row.
FEN_LAYOUT_RE = re.compile(r"(?!.*\d{2,}.*)^([1-8PNBRQK]+/){7}[1-8PNBRQK]+$", re.IGNORECASE)


class InvalidFenError(ValueError):
    """FEN argument missing or without a valid board layout."""


def validate_fen_layout(fen: str | None) -> str:
    """Return fen unchanged, or raise InvalidFenError."""
    if not fen:
        raise InvalidFenError("Please supply a FEN argument")
    if not FEN_LAYOUT_RE.match(fen.split()[0]):
        raise InvalidFenError(f"Invalid FEN string argument: {fen!r}")
    return fen


class TransitionGraph:
    """Edge list plus from/to adjacency, read-only once built."""

    def __init__(self, edges: Iterable[Transition]):
        self._edges = tuple(edges)
        by_from: dict[str, list[str]] = {}
        by_to: dict[str, list[str]] = {}
        for edge in self._edges:
            by_from.setdefault(edge.from_fen, []).append(edge.to_fen)
            by_to.setdefault(edge.to_fen, []).append(edge.from_fen)
        self._by_from = {fen: tuple(fens) for fen, fens in by_from.items()}
        self._by_to = {fen: tuple(fens) for fen, fens in by_to.items()}

    @property
    def edges(self) -> tuple[Transition, ...]:
        return self._edges

    def __len__(self) -> int:
        return len(self._edges)

    def successors(self, fen: str) -> tuple[str, ...]:
        """FENs reachable from fen in one book move, in edge order."""
        return self._by_from.get(fen, ())

    def predecessors(self, fen: str) -> tuple[str, ...]:
        """FENs that reach fen in one book move, in edge order."""
        return self._by_to.get(fen, ())

    def neighbors_from(self, fen: str, openings: Mapping[str, Opening]) -> list[Opening | None]:
        """
        Openings one move after fen.

        An edge endpoint missing from the catalog yields None in its slot,
        so the result lines up with successors(fen).
        """
        return [openings.get(to_fen) for to_fen in self.successors(fen)]

    def neighbors_to(self, fen: str, openings: Mapping[str, Opening]) -> list[Opening | None]:
        """Openings one move before fen; None for endpoints not in the catalog."""
        return [openings.get(from_fen) for from_fen in self.predecessors(fen)]


def build_transition_graph(edges: Iterable[Transition]) -> TransitionGraph:
    return TransitionGraph(edges)


def from_to(fen: str, openings: Mapping[str, Opening], graph: TransitionGraph) -> dict:
    """The opening at fen with the openings leading to it and following it."""
    validate_fen_layout(fen)
    return {
        "opening": openings.get(fen),
        "from": graph.neighbors_to(fen, openings),
        "to": graph.neighbors_from(fen, openings),
    }

"""
Catalog assembly: merge eco.json shards and bundle the derived indexes.

eco.json ships one file per ECO category (ecoA.json .. ecoE.json) plus
eco_interpolated.json for positions filled in between named openings, and
fromTo.json with the book moves between them.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Literal, Mapping

import chess

from ecolookup.backward_search import lookup_board
from ecolookup.models import ECO_CATEGORIES, LookupResult, Opening, Transition
from ecolookup.position_index import PositionIndex, build_position_index
from ecolookup.resolver import find_opening, resolve_fen
from ecolookup.transitions import TransitionGraph, build_transition_graph, from_to

Precedence = Literal["first", "last"]

INTERPOLATED_FILE = "eco_interpolated.json"
FROM_TO_FILE = "fromTo.json"


class CatalogOverlapError(ValueError):
    """Two shards define the same FEN in a strict merge."""


def shard_file_name(category: str) -> str:
    return f"eco{category}.json"


def find_overlaps(a: Mapping[str, Opening], b: Mapping[str, Opening]) -> list[str]:
    """FENs present in both catalogs, in the order of a."""
    return [fen for fen in a if fen in b]


def merge_shards(
    shards: Iterable[Mapping[str, Opening]],
    precedence: Precedence = "last",
    strict: bool = False,
) -> Mapping[str, Opening]:
    """
    Merge shards into one read-only catalog.

    precedence="last" lets a later shard replace an earlier shard's record
    for the same FEN; "first" keeps the earliest. A replaced FEN keeps the
    position it was first inserted at. With strict=True any shared FEN
    raises CatalogOverlapError instead.
    """
    if precedence not in ("first", "last"):
        raise ValueError(f"precedence must be 'first' or 'last', got {precedence!r}")

    merged: dict[str, Opening] = {}
    for shard in shards:
        if strict:
            overlaps = find_overlaps(shard, merged)
            if overlaps:
                raise CatalogOverlapError(
                    f"{len(overlaps)} FEN(s) defined by more than one shard, first: {overlaps[0]}"
                )
        for fen, opening in shard.items():
            if precedence == "first" and fen in merged:
                continue
            merged[fen] = opening
    return MappingProxyType(merged)


def read_json_file(path: str | Path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def parse_shard(data: dict) -> dict[str, Opening]:
    return {fen: Opening.from_dict(record) for fen, record in data.items()}


def parse_transitions(rows: list) -> list[Transition]:
    return [Transition.from_list(row) for row in rows]


def load_shard(path: str | Path) -> dict[str, Opening]:
    """Read one eco.json-style file (FEN -> record)."""
    return parse_shard(read_json_file(path))


def load_transitions(path: str | Path) -> list[Transition]:
    """Read fromTo.json ([from, to, from_src, to_src] rows)."""
    return parse_transitions(read_json_file(path))


def load_catalog_dir(
    directory: str | Path,
    categories: Iterable[str] = ECO_CATEGORIES,
    include_interpolated: bool = False,
    strict: bool = False,
) -> Mapping[str, Opening]:
    """
    Merge ecoA.json .. ecoE.json from directory, later categories winning.

    The interpolated shard goes last. strict applies only between the
    category shards and the interpolated shard, which are expected not to
    overlap.
    """
    directory = Path(directory)
    openings = merge_shards(load_shard(directory / shard_file_name(c)) for c in categories)
    if include_interpolated:
        interpolated = load_shard(directory / INTERPOLATED_FILE)
        openings = merge_shards([openings, interpolated], strict=strict)
    return openings


def catalog_to_json(openings: Mapping[str, Opening]) -> dict:
    return {fen: opening.to_dict() for fen, opening in openings.items()}


@dataclass(frozen=True)
class OpeningBook:
    """
    A catalog with its position index and transition graph.

    Built once and never mutated; to refresh, build a new book and swap the
    reference.
    """

    openings: Mapping[str, Opening]
    position_index: PositionIndex = field(repr=False)
    transitions: TransitionGraph = field(repr=False)

    @classmethod
    def build(cls, openings: Mapping[str, Opening], edges: Iterable[Transition] = ()) -> "OpeningBook":
        if not isinstance(openings, MappingProxyType):
            openings = MappingProxyType(dict(openings))
        return cls(openings, build_position_index(openings), build_transition_graph(edges))

    @classmethod
    def from_dir(cls, directory: str | Path, include_interpolated: bool = True) -> "OpeningBook":
        """Load shards and, when present, fromTo.json from a local eco.json checkout."""
        directory = Path(directory)
        openings = load_catalog_dir(directory, include_interpolated=include_interpolated)
        from_to_path = directory / FROM_TO_FILE
        edges = load_transitions(from_to_path) if from_to_path.exists() else []
        return cls.build(openings, edges)

    def __len__(self) -> int:
        return len(self.openings)

    def resolve(self, fen: str) -> str | None:
        """Catalog FEN that answers a lookup of fen, exact or by board layout."""
        return resolve_fen(self.openings, fen, self.position_index)

    def find(self, fen: str) -> Opening | None:
        return find_opening(self.openings, fen, self.position_index)

    def lookup(self, board: chess.Board, max_plies: int | None = None) -> LookupResult:
        return lookup_board(board, self.openings, max_plies, self.position_index)

    def neighbors_from(self, fen: str) -> list[Opening | None]:
        return self.transitions.neighbors_from(fen, self.openings)

    def neighbors_to(self, fen: str) -> list[Opening | None]:
        return self.transitions.neighbors_to(fen, self.openings)

    def from_to(self, fen: str) -> dict:
        return from_to(fen, self.openings, self.transitions)

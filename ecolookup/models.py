"""Data models for the ECO opening lookup."""

from dataclasses import dataclass, field
from typing import Literal, get_args

OpeningSource = Literal[
    "eco_tsv",
    "eco_js",
    "scid",
    "eco_wikip",
    "wiki_b",
    "ct",
    "chessGraph",
    "chronos",
    "icsbot",
    "pgn",
    "interpolated",
]

OPENING_SOURCES: tuple[str, ...] = get_args(OpeningSource)

ECO_CATEGORIES = ("A", "B", "C", "D", "E")


@dataclass(frozen=True)
class Opening:
    """Opening variation record, keyed by FEN in the catalog. Immutable; use dataclasses.replace."""

    src: OpeningSource = "eco_tsv"
    eco: str = ""
    moves: str = ""
    name: str = ""
    aliases: dict[str, str] | None = None
    scid: str | None = None
    is_eco_root: bool = False
    root_src: OpeningSource | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Opening":
        """Build from an eco.json record (camelCase keys)."""
        return cls(
            src=data.get("src", "eco_tsv"),
            eco=data.get("eco", ""),
            moves=data.get("moves", ""),
            name=data.get("name", ""),
            aliases=data.get("aliases"),
            scid=data.get("scid"),
            is_eco_root=bool(data.get("isEcoRoot", False)),
            root_src=data.get("rootSrc"),
        )

    def to_dict(self) -> dict:
        out = {"src": self.src, "eco": self.eco, "moves": self.moves, "name": self.name}
        if self.aliases:
            out["aliases"] = dict(self.aliases)
        if self.scid:
            out["scid"] = self.scid
        if self.is_eco_root:
            out["isEcoRoot"] = True
        if self.root_src:
            out["rootSrc"] = self.root_src
        return out


@dataclass(frozen=True)
class Transition:
    """One book move between two cataloged positions (a fromTo.json row)."""

    from_fen: str
    to_fen: str
    from_src: OpeningSource = "eco_tsv"
    to_src: OpeningSource = "eco_tsv"

    @classmethod
    def from_list(cls, row: list | tuple) -> "Transition":
        """Parse the [from_fen, to_fen, from_src, to_src] wire array."""
        if len(row) < 2:
            raise ValueError(f"Transition row needs at least 2 fields, got {row!r}")
        from_src = row[2] if len(row) > 2 else "eco_tsv"
        to_src = row[3] if len(row) > 3 else "eco_tsv"
        return cls(row[0], row[1], from_src, to_src)

    def to_list(self) -> list[str]:
        return [self.from_fen, self.to_fen, self.from_src, self.to_src]


@dataclass
class LookupResult:
    """Outcome of a backward search.

    plies_back counts the undos that preceded the match; it is 0 both for a
    match at the original position and for no match at all.
    """

    opening: Opening | None = None
    plies_back: int = 0
    fen: str | None = field(default=None, compare=False)

"""Filters over an opening catalog. Results keep catalog order."""

from typing import Iterable, Mapping

from ecolookup.models import ECO_CATEGORIES, Opening


class InvalidEcoCategoryError(ValueError):
    """Category letter outside A-E."""


def get_openings_by_eco(openings: Mapping[str, Opening], eco_code: str) -> list[Opening]:
    """All openings with this ECO code (many variations share one code)."""
    return [o for o in openings.values() if o.eco == eco_code]


def get_openings_by_eco_category(openings: Mapping[str, Opening], category: str) -> list[Opening]:
    """All openings whose ECO code starts with category (A-E, any case)."""
    upper = category.upper()
    if upper not in ECO_CATEGORIES:
        raise InvalidEcoCategoryError(
            f"Invalid ECO category: {category!r}. Must be one of {', '.join(ECO_CATEGORIES)}."
        )
    return [o for o in openings.values() if o.eco.startswith(upper)]


def get_eco_roots(openings: Mapping[str, Opening]) -> dict[str, Opening]:
    """Canonical ECO root variations, keyed by FEN."""
    return {fen: o for fen, o in openings.items() if o.is_eco_root}


def _alias_sources(opening: Opening) -> set[str]:
    return set(opening.aliases or {})


def select_sources(openings: Mapping[str, Opening], sources: Iterable[str]) -> dict[str, Opening]:
    """Openings from any of sources, as primary source or alias source."""
    wanted = set(sources)
    return {
        fen: o
        for fen, o in openings.items()
        if o.src in wanted or _alias_sources(o) & wanted
    }


def anti_select_sources(openings: Mapping[str, Opening], source: str) -> dict[str, Opening]:
    """Openings that source contributed nothing to."""
    return {
        fen: o
        for fen, o in openings.items()
        if o.src != source and source not in _alias_sources(o)
    }

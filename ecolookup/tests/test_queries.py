"""Tests for queries.py"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from conftest import E4_E5_FEN, E4_FEN, KNIGHT_FEN, PETROV_FEN, SICILIAN_FEN
from ecolookup.queries import (
    InvalidEcoCategoryError,
    anti_select_sources,
    get_eco_roots,
    get_openings_by_eco,
    get_openings_by_eco_category,
    select_sources,
)


def test_by_eco_code(openings):
    result = get_openings_by_eco(openings, "C42")
    assert result == [openings[PETROV_FEN]]


def test_by_eco_code_no_match(openings):
    assert get_openings_by_eco(openings, "E99") == []


def test_by_category_keeps_catalog_order(openings):
    names = [o.name for o in get_openings_by_eco_category(openings, "C")]
    assert names == ["King's Pawn Game", "King's Knight Opening", "Petrov's Defense", "Italian Game"]


def test_by_category_lowercase(openings):
    assert get_openings_by_eco_category(openings, "b") == [openings[E4_FEN], openings[SICILIAN_FEN]]


def test_valid_category_without_matches(openings):
    assert get_openings_by_eco_category(openings, "E") == []
    assert get_openings_by_eco_category({}, "A") == []


@pytest.mark.parametrize("letter", ["F", "", "aa", "1", "Z"])
def test_invalid_category_raises(openings, letter):
    with pytest.raises(InvalidEcoCategoryError) as exc:
        get_openings_by_eco_category(openings, letter)
    assert repr(letter) in str(exc.value)
    assert "A, B, C, D, E" in str(exc.value)


def test_invalid_category_is_value_error():
    with pytest.raises(ValueError):
        get_openings_by_eco_category({}, "F")


def test_eco_roots_keep_fen_keys(openings):
    roots = get_eco_roots(openings)
    assert list(roots) == [E4_FEN, E4_E5_FEN, PETROV_FEN]


def test_select_sources_matches_src_and_alias(openings):
    assert list(select_sources(openings, ["scid"])) == [KNIGHT_FEN]
    assert list(select_sources(openings, ["interpolated", "scid"])) == [KNIGHT_FEN, SICILIAN_FEN]
    assert select_sources(openings, ["pgn"]) == {}


def test_anti_select_sources(openings):
    result = anti_select_sources(openings, "eco_tsv")
    assert list(result) == [KNIGHT_FEN, SICILIAN_FEN]
    assert KNIGHT_FEN not in anti_select_sources(openings, "scid")

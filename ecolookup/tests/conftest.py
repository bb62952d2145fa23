"""Pytest configuration and shared catalog fixtures."""

import sys
from pathlib import Path

import chess
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from ecolookup.models import Opening


def fen_after(moves: str) -> str:
    """FEN after playing space-separated SAN moves from the start position."""
    board = chess.Board()
    for san in moves.split():
        board.push_san(san)
    return board.fen()


START_FEN = chess.STARTING_FEN
E4_FEN = fen_after("e4")
E4_E5_FEN = fen_after("e4 e5")
KNIGHT_FEN = fen_after("e4 e5 Nf3")
PETROV_FEN = fen_after("e4 e5 Nf3 Nf6")
ITALIAN_FEN = fen_after("e4 e5 Nf3 Nc6 Bc4")
SICILIAN_FEN = fen_after("e4 c5")


def make_opening(**kwargs) -> Opening:
    defaults = dict(
        src="eco_tsv",
        eco="C42",
        moves="1. e4 e5 2. Nf3 Nf6",
        name="Petrov's Defense",
    )
    defaults.update(kwargs)
    return Opening(**defaults)


@pytest.fixture
def openings() -> dict[str, Opening]:
    return {
        E4_FEN: make_opening(eco="B00", moves="1. e4", name="King's Pawn Game", is_eco_root=True),
        E4_E5_FEN: make_opening(eco="C20", moves="1. e4 e5", name="King's Pawn Game", is_eco_root=True),
        KNIGHT_FEN: make_opening(
            eco="C40",
            moves="1. e4 e5 2. Nf3",
            name="King's Knight Opening",
            aliases={"scid": "Open Game: King's Knight"},
            src="scid",
        ),
        PETROV_FEN: make_opening(is_eco_root=True),
        ITALIAN_FEN: make_opening(eco="C50", moves="1. e4 e5 2. Nf3 Nc6 3. Bc4", name="Italian Game"),
        SICILIAN_FEN: make_opening(
            eco="B20", moves="1. e4 c5", name="Sicilian Defense", src="interpolated", root_src="eco_tsv"
        ),
    }

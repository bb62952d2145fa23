"""
ECO TSV Ingestion

Builds an eco.json-style shard from lichess-org/chess-openings TSV files.
Each row becomes an opening keyed by the FEN after its moves. Positions a
row passes through after an earlier row's opening become interpolated
records, so every fromTo transition is a single move.

Usage:
  python -m ecolookup.eco_ingest --source data/eco --output eco_tsv.json --from-to fromTo.json
  python -m ecolookup.eco_ingest --source data/eco/c.tsv
"""

import argparse
import csv
import json
import re
import sys
from dataclasses import replace
from pathlib import Path
from typing import Iterator

import chess

from ecolookup.catalog import catalog_to_json
from ecolookup.models import Opening, Transition


def parse_pgn_moves(pgn: str) -> list[str]:
    """
    Parse PGN move string (e.g. "1. e4 e5 2. Nf3 Nc6") into list of SAN moves.
    """
    moves = []
    for token in pgn.split():
        token = token.strip()
        if not token:
            continue
        if token.startswith("{") or token.startswith("("):
            continue
        if re.match(r"^\d+\.+$", token):
            continue
        if re.match(r"^\d+\.", token):
            token = re.sub(r"^\d+\.+", "", token)
        if token and token not in ("1-0", "0-1", "1/2-1/2", "*"):
            moves.append(token)
    return moves


def parse_eco_row(eco: str, name: str, pgn: str) -> tuple[str, str, list[str]]:
    """Parse one ECO TSV row. Returns (eco_code, opening_name, moves)."""
    moves = parse_pgn_moves(pgn)
    return eco.strip(), name.strip(), moves


def play_moves(moves: list[str], board: chess.Board | None = None) -> chess.Board:
    """Push SAN moves onto board (a new one by default). Raises ValueError on a bad move."""
    board = board if board is not None else chess.Board()
    for san in moves:
        try:
            board.push_san(san)
        except ValueError as e:
            raise ValueError(f"Invalid move: {san}") from e
    return board


def board_from_pgn(pgn: str) -> chess.Board:
    return play_moves(parse_pgn_moves(pgn))


def iter_tsv_rows(source: str | Path) -> Iterator[tuple[str, str, str]]:
    """Yield (eco, name, pgn) from a TSV file or every *.tsv in a directory."""
    source = Path(source)
    if source.is_dir():
        tsv_files = sorted(source.glob("*.tsv"))
    else:
        tsv_files = [source]

    if not tsv_files:
        raise FileNotFoundError(f"No TSV files found in {source}")

    for tsv_path in tsv_files:
        with open(tsv_path, encoding="utf-8") as f:
            reader = csv.DictReader(f, delimiter="\t")
            for row in reader:
                eco = row.get("eco", "")
                name = row.get("name", "")
                pgn = row.get("pgn", "")
                if eco and name and pgn:
                    yield eco, name, pgn


def format_moves(sans: list[str]) -> str:
    """Numbered move text, e.g. ["e4", "e5", "Nf3"] -> "1. e4 e5 2. Nf3"."""
    parts = []
    for i, san in enumerate(sans):
        if i % 2 == 0:
            parts.append(f"{i // 2 + 1}.")
        parts.append(san)
    return " ".join(parts)


def mark_eco_roots(openings: dict[str, Opening], ply_counts: dict[str, int]) -> dict[str, Opening]:
    """Copy of openings with the shortest line of each ECO code (first one on ties) flagged as root."""
    roots: dict[str, str] = {}
    for fen, opening in openings.items():
        best = roots.get(opening.eco)
        if best is None or ply_counts[fen] < ply_counts[best]:
            roots[opening.eco] = fen
    root_fens = set(roots.values())
    return {
        fen: replace(opening, is_eco_root=True) if fen in root_fens else opening
        for fen, opening in openings.items()
    }


def interpolate_lines(
    openings: dict[str, Opening], lines: dict[str, tuple[list[str], list[str]]]
) -> tuple[dict[str, Opening], list[Transition]]:
    """
    Fill the gaps between named openings so every transition is one move.

    Positions after a line's nearest earlier named opening get interpolated
    records carrying that opening's eco and name, with root_src set to its
    source. A line with no earlier named position yields no transitions.
    """
    interpolated: dict[str, Opening] = {}
    edges: dict[tuple[str, str], Transition] = {}

    def src_of(fen: str) -> str:
        return openings[fen].src if fen in openings else interpolated[fen].src

    for path, sans in lines.values():
        start = next((i for i in range(len(path) - 2, -1, -1) if path[i] in openings), None)
        if start is None:
            continue
        root = openings[path[start]]
        for i in range(start + 1, len(path) - 1):
            if path[i] not in interpolated:
                interpolated[path[i]] = Opening(
                    src="interpolated",
                    eco=root.eco,
                    moves=format_moves(sans[: i + 1]),
                    name=root.name,
                    root_src=root.src,
                )
        for from_fen, to_fen in zip(path[start:], path[start + 1 :]):
            if (from_fen, to_fen) not in edges:
                edges[(from_fen, to_fen)] = Transition(from_fen, to_fen, src_of(from_fen), src_of(to_fen))
    return interpolated, list(edges.values())


def ingest_eco(source: str | Path) -> tuple[dict[str, Opening], dict[str, Opening], list[Transition]]:
    """
    Ingest ECO taxonomy.

    Returns (openings keyed by FEN, interpolated positions between them,
    single-move transitions). A later row reaching the same FEN replaces the
    earlier one.
    """
    openings: dict[str, Opening] = {}
    lines: dict[str, tuple[list[str], list[str]]] = {}

    for eco, name, pgn in iter_tsv_rows(source):
        try:
            eco_code, opening_name, moves = parse_eco_row(eco, name, pgn)
        except Exception as e:
            print(f"Warning: skip row {eco} {name}: {e}", file=sys.stderr)
            continue

        if not moves:
            continue

        board = chess.Board()
        path = []
        try:
            for san in moves:
                play_moves([san], board)
                path.append(board.fen())
        except ValueError as e:
            print(f"Warning: {e} in {eco} {name}", file=sys.stderr)
            continue

        fen = board.fen()
        openings[fen] = Opening(src="eco_tsv", eco=eco_code, moves=pgn.strip(), name=opening_name)
        lines[fen] = (path, moves)

    openings = mark_eco_roots(openings, {fen: len(path) for fen, (path, _) in lines.items()})
    interpolated, transitions = interpolate_lines(openings, lines)
    return openings, interpolated, transitions


def main():
    parser = argparse.ArgumentParser(description="ECO TSV Ingestion")
    parser.add_argument(
        "--source",
        default="data/eco",
        help="Path to ECO TSV files or directory (a.tsv, b.tsv, ...)",
    )
    parser.add_argument("--output", default="eco_tsv.json", help="Shard JSON output path")
    parser.add_argument("--interpolated", default=None, help="Optional interpolated shard output path")
    parser.add_argument("--from-to", default=None, help="Optional fromTo JSON output path")
    args = parser.parse_args()

    source = Path(args.source)
    if not source.exists():
        print(f"Error: source {source} does not exist.", file=sys.stderr)
        print("Download ECO data from https://github.com/lichess-org/chess-openings", file=sys.stderr)
        print("  mkdir -p data/eco && curl -o data/eco/a.tsv https://raw.githubusercontent.com/lichess-org/chess-openings/master/a.tsv", file=sys.stderr)
        sys.exit(1)

    openings, interpolated, transitions = ingest_eco(source)
    Path(args.output).write_text(json.dumps(catalog_to_json(openings), indent=2), encoding="utf-8")
    if args.interpolated:
        Path(args.interpolated).write_text(json.dumps(catalog_to_json(interpolated), indent=2), encoding="utf-8")
    if args.from_to:
        rows = [t.to_list() for t in transitions]
        Path(args.from_to).write_text(json.dumps(rows, indent=2), encoding="utf-8")
    print(f"Ingested {len(openings)} openings, {len(interpolated)} interpolated, {len(transitions)} transitions.")


if __name__ == "__main__":
    main()

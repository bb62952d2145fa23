"""
Opening Lookup CLI

Finds the opening for a FEN, or the nearest named opening for a move
sequence by walking back through its moves.

Usage:
  python -m ecolookup.lookup --data ./eco.json --moves "1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6 5. O-O Be7"
  python -m ecolookup.lookup --data ./eco.json --fen "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
  python -m ecolookup.lookup --remote --moves "1. f4 e5 2. fxe5 d6" --max-plies 10
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from ecolookup.catalog import OpeningBook
from ecolookup.eco_ingest import board_from_pgn
from ecolookup.eco_json import EcoJsonCache


def get_data_dir() -> str:
    return os.environ.get("ECO_DATA_DIR", "data/eco.json")


def load_book(data_dir: str | Path | None, remote: bool) -> OpeningBook:
    """Local eco.json checkout, or a fresh download when remote is set."""
    if remote:
        return asyncio.run(EcoJsonCache().book())
    return OpeningBook.from_dir(data_dir or get_data_dir())


def format_result(opening, plies_back: int | None = None) -> str:
    if opening is None:
        return "Not found"
    out = {"eco": opening.eco, "name": opening.name, "moves": opening.moves, "src": opening.src}
    if plies_back is not None:
        out["plies_back"] = plies_back
    return json.dumps(out, indent=2)


def main():
    parser = argparse.ArgumentParser(description="Opening lookup by FEN or moves")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--data", default=None, help="Directory with ecoA..E.json (default: $ECO_DATA_DIR)")
    source.add_argument("--remote", action="store_true", help="Download eco.json from GitHub")
    query = parser.add_mutually_exclusive_group(required=True)
    query.add_argument("--fen", help="Position to look up")
    query.add_argument("--moves", help='PGN move text, e.g. "1. e4 e5 2. Nf3"')
    parser.add_argument("--max-plies", type=int, default=None, help="Maximum plies to walk back")
    args = parser.parse_args()

    data_dir = Path(args.data or get_data_dir())
    if not args.remote and not data_dir.is_dir():
        print(f"Error: data directory {data_dir} does not exist.", file=sys.stderr)
        print("Clone https://github.com/JeffML/eco.json or pass --remote", file=sys.stderr)
        sys.exit(1)

    book = load_book(data_dir, args.remote)

    if args.fen:
        print(format_result(book.find(args.fen)))
        return

    try:
        board = board_from_pgn(args.moves)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    result = book.lookup(board, max_plies=args.max_plies)
    print(format_result(result.opening, result.plies_back))


if __name__ == "__main__":
    main()

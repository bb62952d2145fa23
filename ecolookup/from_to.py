"""
From/To CLI

For each FEN, prints the opening at that position with the openings that
lead into it (from) and the openings it leads to (to).

Usage:
  python -m ecolookup.from_to --data ./eco.json "rnbqkbnr/pppp1ppp/8/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2"
"""

import argparse
import json
import sys
from pathlib import Path

from ecolookup.catalog import OpeningBook
from ecolookup.lookup import get_data_dir
from ecolookup.transitions import InvalidFenError


def describe(fen: str, book: OpeningBook) -> dict:
    result = book.from_to(fen)

    def as_dict(opening):
        return opening.to_dict() if opening is not None else None

    return {
        "opening": as_dict(result["opening"]),
        "from": [as_dict(o) for o in result["from"]],
        "to": [as_dict(o) for o in result["to"]],
    }


def main():
    parser = argparse.ArgumentParser(description="Openings before and after a position")
    parser.add_argument("fens", nargs="+", help="FEN strings")
    parser.add_argument("--data", default=None, help="Directory with eco.json files (default: $ECO_DATA_DIR)")
    args = parser.parse_args()

    data_dir = Path(args.data or get_data_dir())
    if not data_dir.is_dir():
        print(f"Error: data directory {data_dir} does not exist.", file=sys.stderr)
        sys.exit(1)

    book = OpeningBook.from_dir(data_dir)
    for fen in args.fens:
        try:
            print(json.dumps(describe(fen, book), indent=2))
        except InvalidFenError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print("\n------\n")


if __name__ == "__main__":
    main()

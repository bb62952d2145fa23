"""
Conjoin CLI

Rebuilds the monolithic eco.json: merges ecoA.json .. ecoE.json (and
optionally eco_interpolated.json) from a local eco.json checkout into a
single file.

Usage:
  python -m ecolookup.conjoin --data ./eco.json --output eco.json
  python -m ecolookup.conjoin --data ./eco.json --interpolated --strict
"""

import argparse
import json
import sys
from pathlib import Path

from ecolookup.catalog import CatalogOverlapError, catalog_to_json, load_catalog_dir
from ecolookup.lookup import get_data_dir


def main():
    parser = argparse.ArgumentParser(description="Merge eco.json category shards")
    parser.add_argument("--data", default=None, help="Directory with ecoA..E.json (default: $ECO_DATA_DIR)")
    parser.add_argument("--output", default="eco.json")
    parser.add_argument("--interpolated", action="store_true", help="Include eco_interpolated.json")
    parser.add_argument(
        "--strict", action="store_true", help="Fail if interpolated positions overlap the main shards"
    )
    args = parser.parse_args()

    data_dir = Path(args.data or get_data_dir())
    try:
        openings = load_catalog_dir(data_dir, include_interpolated=args.interpolated, strict=args.strict)
    except (FileNotFoundError, CatalogOverlapError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    Path(args.output).write_text(json.dumps(catalog_to_json(openings), indent=2), encoding="utf-8")
    print(f"Wrote {len(openings)} openings to {args.output}")


if __name__ == "__main__":
    main()

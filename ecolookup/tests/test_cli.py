"""Tests for the lookup, from_to and conjoin command line scripts."""

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from conftest import E4_E5_FEN, KNIGHT_FEN, PETROV_FEN, fen_after
from ecolookup import conjoin, eco_ingest, lookup
from ecolookup.catalog import OpeningBook, catalog_to_json
from ecolookup.from_to import describe
from ecolookup.models import Transition


@pytest.fixture
def data_dir(tmp_path, openings):
    shards = {cat: {} for cat in "ABCDE"}
    for fen, opening in openings.items():
        shards[opening.eco[0]][fen] = opening
    for cat, shard in shards.items():
        (tmp_path / f"eco{cat}.json").write_text(json.dumps(catalog_to_json(shard)), encoding="utf-8")
    (tmp_path / "eco_interpolated.json").write_text("{}", encoding="utf-8")
    edges = [Transition(E4_E5_FEN, KNIGHT_FEN).to_list(), Transition(KNIGHT_FEN, PETROV_FEN).to_list()]
    (tmp_path / "fromTo.json").write_text(json.dumps(edges), encoding="utf-8")
    return tmp_path


def run_main(module, monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", [module.__name__, *argv])
    module.main()


def test_lookup_moves(data_dir, monkeypatch, capsys):
    run_main(lookup, monkeypatch, "--data", str(data_dir), "--moves", "1. e4 e5 2. Nf3 Nf6 3. Nxe5")
    out = json.loads(capsys.readouterr().out)
    assert out["eco"] == "C42"
    assert out["plies_back"] == 1


def test_lookup_fen_not_found(data_dir, monkeypatch, capsys):
    run_main(lookup, monkeypatch, "--data", str(data_dir), "--fen", "8/8/8/8/8/8/8/8 w - - 0 1")
    assert capsys.readouterr().out.strip() == "Not found"


def test_lookup_invalid_moves_exit(data_dir, monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run_main(lookup, monkeypatch, "--data", str(data_dir), "--moves", "1. e5")
    assert exc.value.code == 1
    assert "Invalid move" in capsys.readouterr().err


def test_lookup_missing_data_dir(tmp_path, monkeypatch):
    with pytest.raises(SystemExit):
        run_main(lookup, monkeypatch, "--data", str(tmp_path / "missing"), "--fen", PETROV_FEN)


def test_describe_from_to(data_dir):
    book = OpeningBook.from_dir(data_dir)
    result = describe(KNIGHT_FEN, book)
    assert result["opening"]["eco"] == "C40"
    assert [o["eco"] for o in result["from"]] == ["C20"]
    assert [o["eco"] for o in result["to"]] == ["C42"]


def test_conjoin_writes_merged_file(data_dir, tmp_path, monkeypatch, openings):
    output = tmp_path / "eco.json"
    run_main(conjoin, monkeypatch, "--data", str(data_dir), "--output", str(output), "--interpolated", "--strict")
    merged = json.loads(output.read_text(encoding="utf-8"))
    assert set(merged) == set(openings)


def test_eco_ingest_writes_interpolated_shard(tmp_path, monkeypatch):
    tsv = tmp_path / "c.tsv"
    tsv.write_text(
        "eco\tname\tpgn\n"
        "C42\tPetrov's Defense\t1. e4 e5 2. Nf3 Nf6\n"
        "C42\tPetrov's Defense: Classical Attack\t1. e4 e5 2. Nf3 Nf6 3. Nxe5 d6\n",
        encoding="utf-8",
    )
    shard, interpolated, from_to = tmp_path / "eco_tsv.json", tmp_path / "interp.json", tmp_path / "fromTo.json"
    run_main(
        eco_ingest, monkeypatch,
        "--source", str(tsv), "--output", str(shard), "--interpolated", str(interpolated), "--from-to", str(from_to),
    )

    interp = json.loads(interpolated.read_text(encoding="utf-8"))
    assert list(interp) == [fen_after("e4 e5 Nf3 Nf6 Nxe5")]
    assert interp[fen_after("e4 e5 Nf3 Nf6 Nxe5")]["rootSrc"] == "eco_tsv"
    assert len(json.loads(from_to.read_text(encoding="utf-8"))) == 2


def test_scripts_import_as_package_modules():
    assert lookup.__name__ == "ecolookup.lookup"
    assert eco_ingest.__name__ == "ecolookup.eco_ingest"
    for flat in ("models", "catalog", "lookup", "queries", "eco_ingest"):
        assert flat not in sys.modules

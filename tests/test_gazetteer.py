from __future__ import annotations

import json
from pathlib import Path

import pytest

from orefmesh.exceptions import GazetteerLoadError
from orefmesh.gazetteer import Gazetteer, resolve_zones
from orefmesh.models.gazetteer import GazetteerEntry, Zone


def _gazetteer() -> Gazetteer:
    return Gazetteer(
        [
            GazetteerEntry(name="תל אביב - מרכז העיר", name_en="Tel Aviv - City Center", zone_en="Dan"),
            GazetteerEntry(name="רמת גן - מערב", name_en="Ramat Gan - West", zone_en="Dan"),
            GazetteerEntry(name="אילת", name_en="Eilat", zone_en="Eilat"),
            GazetteerEntry(name="מקום", name_en="Somewhere", zone_en="Unlisted Region"),
        ]
    )


def test_resolve_collects_distinct_zones() -> None:
    zones = resolve_zones(["תל אביב - מרכז העיר", "רמת גן - מערב", "אילת"], _gazetteer())
    assert zones == frozenset({Zone.CENTRAL_COAST, Zone.DESERT_REGION})


def test_unknown_localities_are_skipped() -> None:
    zones = _gazetteer().resolve(["אילת", "Nowhere", "מקום"])
    assert zones == frozenset({Zone.DESERT_REGION})


def test_all_unresolved_is_empty() -> None:
    assert _gazetteer().resolve(["Nowhere", "Elsewhere"]) == frozenset()


def test_lookup_is_exact_match() -> None:
    gazetteer = _gazetteer()
    assert gazetteer.lookup("אילת") is not None
    assert gazetteer.lookup(" אילת") is None
    assert "אילת" in gazetteer
    assert len(gazetteer) == 4


def test_first_entry_wins_on_duplicate_names() -> None:
    gazetteer = Gazetteer(
        [
            GazetteerEntry(name="A", zone_en="Dan"),
            GazetteerEntry(name="A", zone_en="Eilat"),
        ]
    )
    assert gazetteer.zone_for("A") == Zone.CENTRAL_COAST


def test_bundled_gazetteer_loads() -> None:
    gazetteer = Gazetteer.load()
    assert len(gazetteer) > 0
    assert gazetteer.zone_for("אילת") == Zone.DESERT_REGION
    assert gazetteer.zone_for("תל אביב - מרכז העיר") == Zone.CENTRAL_COAST


def test_bundled_gazetteer_regions_all_map_to_zones() -> None:
    gazetteer = Gazetteer.load()
    for name in _bundled_names():
        assert gazetteer.zone_for(name) is not None, name


def _bundled_names() -> list[str]:
    from importlib import resources

    raw = json.loads(resources.files("orefmesh").joinpath("data/cities.json").read_text(encoding="utf-8"))
    return [item["name"] for item in raw]


def test_load_from_path(tmp_path: Path) -> None:
    path = tmp_path / "cities.json"
    path.write_text(
        json.dumps([{"name": "Tel Aviv", "name_en": "Tel Aviv", "zone_en": "Dan"}]),
        encoding="utf-8",
    )
    assert Gazetteer.load(path).zone_for("Tel Aviv") == Zone.CENTRAL_COAST


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(GazetteerLoadError):
        Gazetteer.load(tmp_path / "missing.json")


def test_invalid_json_raises(tmp_path: Path) -> None:
    path = tmp_path / "cities.json"
    path.write_text("[{", encoding="utf-8")
    with pytest.raises(GazetteerLoadError):
        Gazetteer.load(path)


def test_invalid_entries_raise() -> None:
    with pytest.raises(GazetteerLoadError):
        Gazetteer.from_json(json.dumps([{"name_en": "No native name"}]))
    with pytest.raises(GazetteerLoadError):
        Gazetteer.from_json(json.dumps({"name": "not a list"}))

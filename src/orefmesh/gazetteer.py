"""Locality gazetteer and zone resolution.

The gazetteer maps a locality name, spelled exactly as the feed spells
it, to its region and broadcast zone. It is loaded once at startup and
read-only afterwards.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from importlib import resources
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from orefmesh.exceptions import GazetteerLoadError
from orefmesh.models.gazetteer import GazetteerEntry, Zone

_logger = logging.getLogger(__name__)

_ENTRIES_ADAPTER = TypeAdapter(list[GazetteerEntry])

BUNDLED_RESOURCE = "data/cities.json"


class Gazetteer:
    """Read-only locality lookup."""

    def __init__(self, entries: Iterable[GazetteerEntry]) -> None:
        by_name: dict[str, GazetteerEntry] = {}
        for entry in entries:
            # First occurrence wins when the source repeats a name.
            by_name.setdefault(entry.name, entry)
        self._by_name: Mapping[str, GazetteerEntry] = by_name

    def __len__(self) -> int:
        return len(self._by_name)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def lookup(self, name: str) -> GazetteerEntry | None:
        return self._by_name.get(name)

    def zone_for(self, name: str) -> Zone | None:
        entry = self._by_name.get(name)
        return entry.zone if entry is not None else None

    def resolve(self, localities: Iterable[str]) -> frozenset[Zone]:
        return resolve_zones(localities, self)

    @classmethod
    def from_json(cls, text: str | bytes, *, source: str = "<string>") -> Gazetteer:
        try:
            raw = json.loads(text)
            entries = _ENTRIES_ADAPTER.validate_python(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise GazetteerLoadError(f"Gazetteer {source} is not valid JSON: {exc}") from exc
        except ValidationError as exc:
            raise GazetteerLoadError(f"Gazetteer {source} has invalid entries: {exc}") from exc
        return cls(entries)

    @classmethod
    def load(cls, path: str | Path | None = None) -> Gazetteer:
        """Load *path*, or the bundled gazetteer when *path* is ``None``.

        Raises :class:`GazetteerLoadError` on any read or validation failure.
        """
        if path is None:
            source = f"orefmesh/{BUNDLED_RESOURCE}"
            try:
                data = resources.files("orefmesh").joinpath(BUNDLED_RESOURCE).read_bytes()
            except OSError as exc:
                raise GazetteerLoadError(f"Failed to load {source}: {exc}") from exc
        else:
            source = str(path)
            try:
                data = Path(path).read_bytes()
            except OSError as exc:
                raise GazetteerLoadError(f"Failed to load {source}: {exc}") from exc

        gazetteer = cls.from_json(data, source=source)
        _logger.debug("Loaded %d localities from %s", len(gazetteer), source)
        return gazetteer


def resolve_zones(localities: Iterable[str], gazetteer: Gazetteer) -> frozenset[Zone]:
    """Zones affected by *localities*; unknown localities contribute nothing."""
    zones: set[Zone] = set()
    for name in localities:
        zone = gazetteer.zone_for(name)
        if zone is None:
            _logger.debug("No zone for locality %r", name)
            continue
        zones.add(zone)
    return frozenset(zones)

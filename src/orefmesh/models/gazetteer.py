"""Gazetteer entry model and the region to zone table."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict


class Zone(IntEnum):
    """Broadcast zone; the value is the outbound channel index."""

    NORTHERN = 1
    NORTH_COAST = 2
    INTER_NORTH = 3
    CENTRAL_COAST = 4
    CENTRAL_INTERIOR = 5
    SOUTHERN_COAST = 6
    DESERT_REGION = 7


_ZONE_REGIONS: dict[Zone, tuple[str, ...]] = {
    Zone.NORTHERN: ("Upper Galilee", "Confrontation Line", "North Golan", "South Golan", "Center Galilee"),
    Zone.NORTH_COAST: ("HaMifratz", "HaCarmel", "Menashe"),
    Zone.INTER_NORTH: ("Lower Galilee", "Beit She'an Valley", "HaAmakim", "Wadi Ara"),
    Zone.CENTRAL_COAST: ("Sharon", "Yarkon", "Dan"),
    Zone.CENTRAL_INTERIOR: ("Shomron", "Jerusalem", "Yehuda", "Shfelat Yehuda", "Bika'a"),
    Zone.SOUTHERN_COAST: ("Gaza Envelope", "West Lachish", "Lachish", "HaShfela"),
    Zone.DESERT_REGION: ("West Negev", "Center Negev", "South Negev", "Dead Sea", "Arava", "Eilat"),
}

REGION_ZONES: dict[str, Zone] = {region: zone for zone, regions in _ZONE_REGIONS.items() for region in regions}


def zone_for_region(region: str) -> Zone | None:
    return REGION_ZONES.get(region)


class GazetteerEntry(BaseModel):
    """Locality record from the bundled cities file.

    Parameters
    ----------
    name : str
        Locality name as spelled in the feed (Hebrew).
    name_en : str
        English locality name.
    zone_en : str
        English region label, mapped to a :class:`Zone`.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    name_en: str = ""
    zone_en: str = ""

    @property
    def zone(self) -> Zone | None:
        return zone_for_region(self.zone_en)

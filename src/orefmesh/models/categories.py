"""Alert category tables.

The live and historical feeds number their categories differently, so
each has its own lookup table. Any code missing from a table, or not
a plain non-negative integer, maps to :attr:`AlertType.UNKNOWN`.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any


class AlertType(StrEnum):
    NONE = "none"
    UNKNOWN = "unknown"
    MISSILES = "missiles"
    GENERAL = "general"
    EARTHQUAKE = "earthQuake"
    RADIOLOGICAL_EVENT = "radiologicalEvent"
    TSUNAMI = "tsunami"
    HOSTILE_AIRCRAFT_INTRUSION = "hostileAircraftIntrusion"
    HAZARDOUS_MATERIALS = "hazardousMaterials"
    TERRORIST_INFILTRATION = "terroristInfiltration"
    MISSILES_DRILL = "missilesDrill"
    GENERAL_DRILL = "generalDrill"
    EARTHQUAKE_DRILL = "earthQuakeDrill"
    RADIOLOGICAL_EVENT_DRILL = "radiologicalEventDrill"
    TSUNAMI_DRILL = "tsunamiDrill"
    HOSTILE_AIRCRAFT_INTRUSION_DRILL = "hostileAircraftIntrusionDrill"
    HAZARDOUS_MATERIALS_DRILL = "hazardousMaterialsDrill"
    TERRORIST_INFILTRATION_DRILL = "terroristInfiltrationDrill"


LIVE_CATEGORIES: Mapping[int, AlertType] = {
    1: AlertType.MISSILES,
    2: AlertType.GENERAL,
    3: AlertType.EARTHQUAKE,
    4: AlertType.RADIOLOGICAL_EVENT,
    5: AlertType.TSUNAMI,
    6: AlertType.HOSTILE_AIRCRAFT_INTRUSION,
    7: AlertType.HAZARDOUS_MATERIALS,
    13: AlertType.TERRORIST_INFILTRATION,
    101: AlertType.MISSILES_DRILL,
    102: AlertType.GENERAL_DRILL,
    103: AlertType.EARTHQUAKE_DRILL,
    104: AlertType.RADIOLOGICAL_EVENT_DRILL,
    105: AlertType.TSUNAMI_DRILL,
    106: AlertType.HOSTILE_AIRCRAFT_INTRUSION_DRILL,
    107: AlertType.HAZARDOUS_MATERIALS_DRILL,
    113: AlertType.TERRORIST_INFILTRATION_DRILL,
}

HISTORICAL_CATEGORIES: Mapping[int, AlertType] = {
    1: AlertType.MISSILES,
    2: AlertType.HOSTILE_AIRCRAFT_INTRUSION,
    3: AlertType.GENERAL,
    4: AlertType.GENERAL,
    7: AlertType.EARTHQUAKE,
    9: AlertType.RADIOLOGICAL_EVENT,
    10: AlertType.TERRORIST_INFILTRATION,
    11: AlertType.TSUNAMI,
    12: AlertType.HAZARDOUS_MATERIALS,
}


def _parse_code(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.startswith("+"):
        text = text[1:]
    if not text.isascii() or not text.isdigit():
        return None
    return int(text)


def category_label(value: Any, table: Mapping[int, AlertType]) -> AlertType:
    """Map a raw category code through *table*; never raises."""
    code = _parse_code(value)
    if code is None:
        return AlertType.UNKNOWN
    return table.get(code, AlertType.UNKNOWN)


def live_category(value: Any) -> AlertType:
    return category_label(value, LIVE_CATEGORIES)


def historical_category(value: Any) -> AlertType:
    return category_label(value, HISTORICAL_CATEGORIES)

"""Data models for alert feed payloads and the gazetteer."""

from orefmesh.models._base import FeedModel, FeedText
from orefmesh.models.alert import CanonicalAlert, FeedAlert, HistoricalAlert, HistoricalEntry, LiveAlert
from orefmesh.models.categories import (
    HISTORICAL_CATEGORIES,
    LIVE_CATEGORIES,
    AlertType,
    category_label,
    historical_category,
    live_category,
)
from orefmesh.models.gazetteer import REGION_ZONES, GazetteerEntry, Zone, zone_for_region

__all__ = [
    "HISTORICAL_CATEGORIES",
    "LIVE_CATEGORIES",
    "REGION_ZONES",
    "AlertType",
    "CanonicalAlert",
    "FeedAlert",
    "FeedModel",
    "FeedText",
    "GazetteerEntry",
    "HistoricalAlert",
    "HistoricalEntry",
    "LiveAlert",
    "Zone",
    "category_label",
    "historical_category",
    "live_category",
    "zone_for_region",
]

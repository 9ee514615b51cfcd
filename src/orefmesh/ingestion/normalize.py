"""Feed payload normalization.

Centralizes schema detection, test-locality filtering and category
classification for both feed formats.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

from pydantic import ValidationError

from orefmesh._constants import TEST_MARKER
from orefmesh.exceptions import FeedSchemaError
from orefmesh.models.alert import CanonicalAlert, FeedAlert, HistoricalAlert, LiveAlert
from orefmesh.models.categories import AlertType, historical_category, live_category

_logger = logging.getLogger(__name__)

DEFAULT_STALE_AFTER = 120.0
DEFAULT_TIME_ZONE = "Asia/Jerusalem"


def parse_payload(payload: Any) -> FeedAlert:
    """Resolve a raw JSON document into one of the two feed variants.

    Raises :class:`FeedSchemaError` when the payload is neither an
    object (live) nor an array of objects (historical).
    """
    try:
        if isinstance(payload, list):
            return HistoricalAlert.model_validate(payload)
        if isinstance(payload, dict):
            return LiveAlert.model_validate(payload)
    except ValidationError as exc:
        raise FeedSchemaError(f"Unrecognized feed payload: {exc}") from exc
    raise FeedSchemaError(f"Unrecognized feed payload type: {type(payload).__name__}")


def is_test_locality(name: str) -> bool:
    return TEST_MARKER in name


def _collect_localities(names: Iterable[str]) -> list[str]:
    """Trim, drop test localities and de-duplicate keeping first-seen order."""
    seen: dict[str, None] = {}
    for raw in names:
        name = raw.strip()
        if not name or is_test_locality(name):
            continue
        seen.setdefault(name, None)
    return list(seen)


def parse_alert_date(value: str, tz: tzinfo) -> datetime | None:
    """Parse an ``alertDate``; naive values are interpreted in *tz*."""
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _normalize_live(alert: LiveAlert) -> CanonicalAlert:
    if alert.category is None:
        return CanonicalAlert()
    return CanonicalAlert(
        alert_type=live_category(alert.category),
        localities=tuple(_collect_localities(alert.cities or [])),
        instructions=alert.instructions,
    )


def _normalize_historical(
    alert: HistoricalAlert,
    *,
    now: datetime,
    stale_after: float,
    tz: tzinfo,
) -> CanonicalAlert:
    alert_type: str = AlertType.NONE
    names: list[str] = []
    # Feed order is taken as chronological: the last kept entry decides the type.
    for entry in alert.entries:
        if entry.alert_date is None or entry.locality is None or entry.category is None:
            continue
        when = parse_alert_date(entry.alert_date, tz)
        if when is None:
            _logger.debug("Skipping entry with unparseable alertDate=%r", entry.alert_date)
            continue
        if (now - when).total_seconds() > stale_after:
            continue
        if is_test_locality(entry.locality):
            _logger.debug("Skipping test locality %r", entry.locality)
            continue
        names.append(entry.locality)
        alert_type = historical_category(entry.category)

    if alert_type == AlertType.NONE:
        return CanonicalAlert()
    return CanonicalAlert(alert_type=alert_type, localities=tuple(_collect_localities(names)))


def normalize(
    payload: Any,
    *,
    now: datetime | None = None,
    stale_after: float = DEFAULT_STALE_AFTER,
    time_zone: str = DEFAULT_TIME_ZONE,
) -> CanonicalAlert:
    """Reduce a raw feed payload (either format) to a :class:`CanonicalAlert`.

    Parameters
    ----------
    payload
        Decoded JSON document, or an already parsed feed variant.
    now
        Reference time for staleness of historical entries; defaults to
        the current UTC time.
    stale_after
        Historical entries older than this many seconds are dropped.
    time_zone
        Zone for historical timestamps that carry no offset.
    """
    alert = payload if isinstance(payload, (LiveAlert, HistoricalAlert)) else parse_payload(payload)
    if isinstance(alert, LiveAlert):
        return _normalize_live(alert)
    return _normalize_historical(
        alert,
        now=now or datetime.now(UTC),
        stale_after=stale_after,
        tz=ZoneInfo(time_zone),
    )

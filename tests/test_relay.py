"""End-to-end cycle tests through AlertRelay with fake feed and radio."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

from orefmesh.config import RelayConfig
from orefmesh.dispatch import Dispatcher, DispatchState
from orefmesh.exceptions import FeedParseError, GazetteerLoadError, RadioProbeError
from orefmesh.feed import FeedMode
from orefmesh.gazetteer import Gazetteer
from orefmesh.models.gazetteer import GazetteerEntry
from orefmesh.relay import AlertRelay


class _FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class _FakeFeed:
    def __init__(self, *results: Any) -> None:
        self._results = list(results)
        self.calls = 0

    async def fetch(self, mode: FeedMode | None = None) -> Any:
        self.calls += 1
        result = self._results[min(self.calls, len(self._results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result


class _FakeRadio:
    def __init__(self, *, probe_error: Exception | None = None) -> None:
        self.sent: list[tuple[int, str]] = []
        self._probe_error = probe_error

    async def send(self, channel: int, text: str) -> None:
        self.sent.append((channel, text))

    async def probe(self) -> None:
        if self._probe_error is not None:
            raise self._probe_error


_REGIONS = ["Upper Galilee", "HaCarmel", "Wadi Ara", "Dan", "Jerusalem", "Lachish", "Eilat"]


def _gazetteer() -> Gazetteer:
    entries = [GazetteerEntry(name="Tel Aviv", name_en="Tel Aviv", zone_en="Dan")]
    entries += [GazetteerEntry(name=name, zone_en=region) for name, region in zip("ABCDEFG", _REGIONS)]
    return Gazetteer(entries)


def _relay(*results: Any) -> tuple[AlertRelay, _FakeFeed, _FakeRadio, _FakeClock]:
    clock = _FakeClock()
    feed = _FakeFeed(*results)
    radio = _FakeRadio()
    config = RelayConfig()
    dispatcher = Dispatcher.from_config(config, radio, DispatchState(clock=clock, sleep=clock.sleep))
    relay = AlertRelay(config, feed, _gazetteer(), dispatcher, clock=clock, sleep=clock.sleep)
    return relay, feed, radio, clock


# ------------------------------------------------------------------
# Scenarios
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_live_alert_sent_to_its_zone() -> None:
    relay, _, radio, _ = _relay({"data": ["Tel Aviv"], "cat": "1", "desc": "Rocket fire"})

    assert await relay.run_cycle() == [4]
    assert radio.sent == [(4, '🚨missiles - "Rocket fire"')]


@pytest.mark.asyncio
async def test_test_locality_only_sends_nothing() -> None:
    relay, _, radio, _ = _relay({"data": ["Test City - בדיקה"], "cat": "1"})

    assert await relay.run_cycle() == []
    assert radio.sent == []


@pytest.mark.asyncio
async def test_all_zones_broadcast_once() -> None:
    relay, _, radio, _ = _relay({"data": list("ABCDEFG"), "cat": "1"})

    assert await relay.run_cycle() == [0]
    assert radio.sent == [(0, "🚨missiles")]


@pytest.mark.asyncio
async def test_stale_historical_entry_sends_nothing() -> None:
    when = (datetime.now(UTC) - timedelta(seconds=200)).isoformat()
    relay, _, radio, _ = _relay([{"alertDate": when, "data": "Tel Aviv", "category": 1}])

    assert await relay.run_cycle() == []
    assert radio.sent == []


@pytest.mark.asyncio
async def test_recent_historical_entry_is_sent() -> None:
    when = (datetime.now(UTC) - timedelta(seconds=5)).isoformat()
    relay, _, radio, _ = _relay([{"alertDate": when, "data": "Tel Aviv", "category": 2}])

    assert await relay.run_cycle() == [4]
    assert radio.sent == [(4, "🚨hostileAircraftIntrusion")]


@pytest.mark.asyncio
async def test_drill_sends_nothing() -> None:
    relay, _, radio, _ = _relay({"data": ["Tel Aviv"], "cat": "101"})

    assert await relay.run_cycle() == []
    assert radio.sent == []


@pytest.mark.asyncio
async def test_unknown_category_is_still_dispatched() -> None:
    relay, _, radio, _ = _relay({"data": ["Tel Aviv"], "cat": "42"})

    assert await relay.run_cycle() == [4]
    assert radio.sent == [(4, "🚨unknown")]


@pytest.mark.asyncio
async def test_unresolved_localities_send_nothing() -> None:
    relay, _, radio, _ = _relay({"data": ["Nowhere"], "cat": "1"})

    assert await relay.run_cycle() == []
    assert radio.sent == []


@pytest.mark.asyncio
async def test_parse_error_is_treated_as_no_alert() -> None:
    relay, _, radio, _ = _relay(FeedParseError("bad json", body="<html>"))

    assert await relay.run_cycle() == []
    assert radio.sent == []


# ------------------------------------------------------------------
# Loop
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_loop_survives_failing_cycles() -> None:
    relay, feed, radio, clock = _relay(
        RuntimeError("boom"),
        "not a payload",
        {"data": ["Tel Aviv"], "cat": "1"},
    )

    await relay.run_forever(max_cycles=3)

    assert feed.calls == 3
    assert radio.sent == [(4, "🚨missiles")]
    assert clock.sleeps == [5.0, 5.0]


@pytest.mark.asyncio
async def test_loop_cadence_accounts_for_cycle_duration() -> None:
    relay, _, _, clock = _relay({"data": ["Tel Aviv"], "cat": "1"})

    await relay.run_forever(max_cycles=3)

    # tick, send-slot wait, no tick wait left, then a full send-slot wait
    assert clock.sleeps == [5.0, 5.0, 0.0, 10.0]


# ------------------------------------------------------------------
# Startup
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_start_loads_bundled_gazetteer_and_probes() -> None:
    gazetteer = await AlertRelay.start(RelayConfig(), _FakeRadio())

    assert len(gazetteer) > 0


@pytest.mark.asyncio
async def test_start_fails_on_missing_gazetteer(tmp_path: Path) -> None:
    config = RelayConfig(gazetteer_path=str(tmp_path / "missing.json"))

    with pytest.raises(GazetteerLoadError):
        await AlertRelay.start(config, _FakeRadio())


@pytest.mark.asyncio
async def test_start_fails_on_probe_error() -> None:
    radio = _FakeRadio(probe_error=RadioProbeError("no node"))

    with pytest.raises(RadioProbeError):
        await AlertRelay.start(RelayConfig(), radio)

"""Poll loop driving fetch, normalize, resolve and dispatch."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

from orefmesh._constants import empty_alert_payload
from orefmesh.config import RelayConfig
from orefmesh.dispatch import Dispatcher
from orefmesh.exceptions import FeedParseError
from orefmesh.feed import Feed
from orefmesh.gazetteer import Gazetteer
from orefmesh.ingestion.normalize import normalize
from orefmesh.radio import RadioTransport

_logger = logging.getLogger(__name__)


class AlertRelay:
    """Runs one pipeline cycle per tick, isolating failures per cycle.

    Usage::

        async with AlertFeedClient(config) as feed:
            relay = AlertRelay(config, feed, gazetteer, dispatcher)
            await relay.run_forever()
    """

    def __init__(
        self,
        config: RelayConfig,
        feed: Feed,
        gazetteer: Gazetteer,
        dispatcher: Dispatcher,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._feed = feed
        self._gazetteer = gazetteer
        self._dispatcher = dispatcher
        self._clock = clock
        self._sleep = sleep

    @staticmethod
    async def start(config: RelayConfig, radio: RadioTransport) -> Gazetteer:
        """Load the gazetteer and probe the radio node.

        Both failures raise a :class:`~orefmesh.exceptions.FatalStartupError`
        subclass and are not retried.
        """
        gazetteer = Gazetteer.load(config.gazetteer_path)
        await radio.probe()
        _logger.info("Node connection successful. %d localities loaded.", len(gazetteer))
        return gazetteer

    async def _fetch(self) -> Any:
        try:
            return await self._feed.fetch()
        except FeedParseError as exc:
            _logger.warning("%s (body: %r)", exc, exc.body)
            return empty_alert_payload()

    async def run_cycle(self) -> list[int]:
        """Fetch, normalize, resolve and dispatch once.

        Returns the channels that received a message. Errors propagate;
        :meth:`run_forever` is responsible for containing them.
        """
        payload = await self._fetch()
        alert = normalize(
            payload,
            stale_after=self._config.stale_after,
            time_zone=self._config.time_zone,
        )
        if alert.is_none:
            return []
        zones = self._gazetteer.resolve(alert.localities)
        _logger.debug("Alert %s localities=%s zones=%s", alert.alert_type, alert.localities, sorted(zones))
        return await self._dispatcher.dispatch(alert, zones)

    async def run_forever(self, *, max_cycles: int | None = None) -> None:
        """Tick at a fixed cadence measured from the start of each cycle."""
        cycles = 0
        while max_cycles is None or cycles < max_cycles:
            started = self._clock()
            try:
                await self.run_cycle()
            except Exception:
                _logger.exception("Error processing alert")
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            remaining = self._config.poll_interval - (self._clock() - started)
            await self._sleep(max(remaining, 0.0))

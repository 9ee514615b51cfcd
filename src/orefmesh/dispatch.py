"""Zone dispatch engine.

Decides which channels receive an alert, paces radio sends so two sends
are never closer than the configured floor, and retries failed sends.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass

from orefmesh._constants import ALERT_PREFIX, BROADCAST_CHANNEL, NO_ALERT
from orefmesh.config import RelayConfig
from orefmesh.exceptions import DispatchError, RadioTransportError
from orefmesh.models.alert import CanonicalAlert
from orefmesh.radio import RadioTransport

_logger = logging.getLogger(__name__)

_SUPPRESSED_MARKERS: tuple[str, ...] = ("drill", "test")


@dataclass(slots=True)
class DispatchState:
    """Pacing state shared by every send for the process lifetime.

    ``clock`` must be monotonic; ``sleep`` is awaited for pacing and retry
    delays. Both are injectable so tests can run without real waiting.
    """

    clock: Callable[[], float] = time.monotonic
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    last_send_time: float | None = None


def should_suppress(alert_type: str) -> bool:
    """``True`` for no alert and for drill or test categories."""
    if alert_type == NO_ALERT:
        return True
    lowered = alert_type.lower()
    return any(marker in lowered for marker in _SUPPRESSED_MARKERS)


def format_message(alert: CanonicalAlert) -> str:
    if alert.instructions is not None:
        return f"{ALERT_PREFIX}{alert.alert_type} - {json.dumps(alert.instructions, ensure_ascii=False)}"
    return f"{ALERT_PREFIX}{alert.alert_type}"


class Dispatcher:
    """Sends alert messages to zone channels through a :class:`RadioTransport`."""

    def __init__(
        self,
        radio: RadioTransport,
        state: DispatchState | None = None,
        *,
        min_send_interval: float = 10.0,
        retries: int = 3,
        retry_delay: float = 5.0,
        broadcast_threshold: int = 6,
        broadcast_channel: int = BROADCAST_CHANNEL,
    ) -> None:
        self._radio = radio
        self.state = state or DispatchState()
        self._min_send_interval = min_send_interval
        self._retries = retries
        self._retry_delay = retry_delay
        self._broadcast_threshold = broadcast_threshold
        self._broadcast_channel = broadcast_channel

    @classmethod
    def from_config(
        cls,
        config: RelayConfig,
        radio: RadioTransport,
        state: DispatchState | None = None,
    ) -> Dispatcher:
        return cls(
            radio,
            state,
            min_send_interval=config.min_send_interval,
            retries=config.send_retries,
            retry_delay=config.retry_delay,
            broadcast_threshold=config.broadcast_threshold,
            broadcast_channel=config.broadcast_channel,
        )

    def select_channels(self, zones: Iterable[int]) -> list[int]:
        """Broadcast channel when nearly every zone is hit, otherwise one per zone."""
        unique = sorted({int(zone) for zone in zones})
        if len(unique) > self._broadcast_threshold:
            return [self._broadcast_channel]
        return unique

    async def _wait_for_send_slot(self) -> None:
        last = self.state.last_send_time
        if last is None:
            return
        elapsed = self.state.clock() - last
        if elapsed < self._min_send_interval:
            await self.state.sleep(self._min_send_interval - elapsed)

    async def send_with_retry(self, channel: int, text: str) -> None:
        """Send one message, retrying on transport failure.

        Raises :class:`RadioTransportError` once every attempt has failed.
        """
        await self._wait_for_send_slot()
        attempts = self._retries + 1
        for attempt in range(1, attempts + 1):
            started = self.state.clock()
            try:
                await self._radio.send(channel, text)
            except RadioTransportError as exc:
                if attempt < attempts:
                    _logger.warning(
                        "Error sending message on channel %d: %s. Retrying in %.1fs...",
                        channel,
                        exc,
                        self._retry_delay,
                    )
                    await self.state.sleep(self._retry_delay)
                    continue
                _logger.error("Error sending message on channel %d after %d attempts: %s", channel, attempts, exc)
                raise
            self.state.last_send_time = started
            _logger.info("Sent alert on channel %d: %s", channel, text)
            return

    async def dispatch(self, alert: CanonicalAlert, zones: Iterable[int]) -> list[int]:
        """Relay *alert* to the channels for *zones*.

        Every selected channel is attempted even if an earlier one fails;
        failures are collected into a single :class:`DispatchError`.

        Returns
        -------
        list[int]
            Channels that received the message.
        """
        if should_suppress(alert.alert_type):
            if not alert.is_none:
                _logger.info("Received a drill or test alert: %s", alert.alert_type)
            return []

        channels = self.select_channels(zones)
        if not channels:
            _logger.debug("Alert %s resolved to no zones", alert.alert_type)
            return []

        text = format_message(alert)
        sent: list[int] = []
        failed: list[int] = []
        for channel in channels:
            try:
                await self.send_with_retry(channel, text)
            except RadioTransportError:
                failed.append(channel)
                continue
            sent.append(channel)

        if failed:
            raise DispatchError(
                f"Failed to send {alert.alert_type} on channels {failed}",
                channels=tuple(failed),
            )
        return sent

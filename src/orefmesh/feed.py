"""HTTP client for the upstream alert feed.

Upstream flakiness never reaches the poll loop: network failures,
non-200 responses, empty bodies and objects without a ``data`` field
all come back as the neutral empty-alert payload. Only a non-empty body
that is not JSON surfaces, as :class:`FeedParseError`.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from enum import StrEnum
from typing import Any, Protocol

import aiohttp

from orefmesh._constants import empty_alert_payload
from orefmesh.config import RelayConfig
from orefmesh.exceptions import FeedParseError, FeedTransportError

_logger = logging.getLogger(__name__)


class FeedMode(StrEnum):
    LIVE = "live"
    HISTORICAL = "historical"


class Feed(Protocol):
    """Structural feed interface used by the relay loop."""

    async def fetch(self, mode: FeedMode | None = None) -> Any:
        ...


class AlertFeedClient:
    """Fetches raw alert payloads from the live or historical endpoint.

    Usage::

        async with AlertFeedClient(config) as feed:
            payload = await feed.fetch()
    """

    def __init__(
        self,
        config: RelayConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http = session
        self._clock = clock

    async def __aenter__(self) -> AlertFeedClient:
        if self._http is None:
            self._http = aiohttp.ClientSession()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
            self._http = None

    @property
    def default_mode(self) -> FeedMode:
        return FeedMode.HISTORICAL if self._config.use_history else FeedMode.LIVE

    def build_url(self, mode: FeedMode) -> str:
        """Endpoint for *mode* with a cache-busting epoch-seconds query."""
        endpoint = self._config.history_url if mode == FeedMode.HISTORICAL else self._config.live_url
        return f"{endpoint}?{int(self._clock())}"

    def build_headers(self) -> dict[str, str]:
        return {
            "Pragma": "no-cache",
            "Referer": self._config.referer,
            "X-Requested-With": "XMLHttpRequest",
            "User-Agent": self._config.user_agent,
        }

    async def _get_text(self, url: str) -> str:
        if self._http is None:
            raise FeedTransportError("Feed client not initialized. Use 'async with AlertFeedClient(...)'", url=url)

        _logger.debug("GET %s", url)
        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
        try:
            async with self._http.get(url, headers=self.build_headers(), timeout=timeout) as resp:
                raw = await resp.read()
                if resp.status != 200:
                    raise FeedTransportError(
                        f"HTTP {resp.status} {resp.reason or ''}".rstrip(),
                        status_code=resp.status,
                        url=url,
                    )
        except FeedTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise FeedTransportError(f"Request to {url} failed: {exc!r}", url=url) from exc

        return raw.decode("utf-8-sig", errors="replace")

    async def fetch(self, mode: FeedMode | None = None) -> Any:
        """Return the decoded feed document, or the empty-alert payload.

        Raises
        ------
        FeedParseError
            The body is non-empty but not valid JSON.
        """
        url = self.build_url(mode or self.default_mode)
        try:
            text = await self._get_text(url)
        except FeedTransportError as exc:
            _logger.warning("Failed to retrieve alerts: %s", exc)
            return empty_alert_payload()

        if not text.strip():
            return empty_alert_payload()

        try:
            document = json.loads(text)
        except json.JSONDecodeError as exc:
            raise FeedParseError(
                f"Failed to parse the response body as JSON: {exc}",
                body=text[:200],
            ) from exc

        if isinstance(document, dict) and "data" not in document:
            return empty_alert_payload()
        return document

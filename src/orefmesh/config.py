"""Relay configuration for orefmesh."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from typing import Any

from orefmesh._constants import (
    BROADCAST_CHANNEL,
    HISTORY_URL,
    LIVE_URL,
    RADIO_EXECUTABLE,
    REFERER,
    USER_AGENT,
)
from orefmesh.exceptions import ConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, convert: Callable[[str], Any]) -> Any:
    try:
        return convert(value)
    except ValueError as exc:
        raise ConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class RelayConfig:
    """Relay configuration.

    Parameters
    ----------
    live_url : str
        Endpoint reporting the currently active alert as a JSON object.
    history_url : str
        Endpoint reporting recent alerts as a JSON array.
    use_history : bool
        Poll the historical endpoint instead of the live one.
    referer : str
        ``Referer`` header required by the upstream service.
    user_agent : str
        Browser ``User-Agent`` header required by the upstream service.
    request_timeout : float
        Total HTTP request timeout in seconds.
    poll_interval : float
        Seconds between the starts of two consecutive poll cycles.
    min_send_interval : float
        Minimum gap in seconds between two radio sends, process-wide.
    send_retries : int
        Retries after the first failed attempt of a single send.
    retry_delay : float
        Seconds to wait between two attempts of the same send.
    stale_after : float
        Historical entries older than this many seconds are ignored.
    broadcast_threshold : int
        When more zones than this are affected, send once on the
        broadcast channel instead of once per zone.
    broadcast_channel : int
        Channel index reaching every zone.
    time_zone : str
        IANA zone used for historical timestamps without an offset.
    radio_executable : str
        Meshtastic command line program.
    radio_host : str or None
        ``host:port`` of a network-attached node; ``None`` uses the
        locally attached device.
    send_timeout : float
        Seconds a single radio CLI invocation may run before it is killed.
    probe_timeout : float
        Seconds the startup connectivity probe may run before it is killed.
    gazetteer_path : str or None
        Path to a gazetteer JSON file replacing the bundled one.
    """

    live_url: str = LIVE_URL
    history_url: str = HISTORY_URL
    use_history: bool = False
    referer: str = REFERER
    user_agent: str = USER_AGENT
    request_timeout: float = 10.0
    poll_interval: float = 5.0
    min_send_interval: float = 10.0
    send_retries: int = 3
    retry_delay: float = 5.0
    stale_after: float = 120.0
    broadcast_threshold: int = 6
    broadcast_channel: int = BROADCAST_CHANNEL
    time_zone: str = "Asia/Jerusalem"
    radio_executable: str = RADIO_EXECUTABLE
    radio_host: str | None = None
    send_timeout: float = 30.0
    probe_timeout: float = 30.0
    gazetteer_path: str | None = None

    @property
    def feed_url(self) -> str:
        """Endpoint selected by :attr:`use_history`."""
        return self.history_url if self.use_history else self.live_url

    @classmethod
    def from_env(cls, **overrides: Any) -> RelayConfig:
        """Create configuration from environment variables.

        Reads optional ``OREFMESH_*`` variables. Explicit keyword
        arguments override environment values.
        Raises :class:`ConfigError` when a numeric variable does not parse.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "OREFMESH_LIVE_URL": "live_url",
            "OREFMESH_HISTORY_URL": "history_url",
            "OREFMESH_TIME_ZONE": "time_zone",
            "OREFMESH_RADIO_EXECUTABLE": "radio_executable",
            "OREFMESH_RADIO_HOST": "radio_host",
            "OREFMESH_GAZETTEER_PATH": "gazetteer_path",
        }
        _ENV_FLOAT_MAP = {
            "OREFMESH_REQUEST_TIMEOUT": "request_timeout",
            "OREFMESH_POLL_INTERVAL": "poll_interval",
            "OREFMESH_MIN_SEND_INTERVAL": "min_send_interval",
            "OREFMESH_RETRY_DELAY": "retry_delay",
            "OREFMESH_STALE_AFTER": "stale_after",
            "OREFMESH_SEND_TIMEOUT": "send_timeout",
            "OREFMESH_PROBE_TIMEOUT": "probe_timeout",
        }
        _ENV_INT_MAP = {
            "OREFMESH_SEND_RETRIES": "send_retries",
            "OREFMESH_BROADCAST_THRESHOLD": "broadcast_threshold",
        }

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = val
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, float)
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, int)

        if "use_history" not in overrides:
            config_kwargs["use_history"] = _env_bool(env.get("OREFMESH_USE_HISTORY"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

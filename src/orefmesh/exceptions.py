"""Custom exception hierarchy for orefmesh."""

from __future__ import annotations


class OrefMeshError(Exception):
    """Base exception for all orefmesh errors."""


class FeedTransportError(OrefMeshError):
    """HTTP-level failure reaching the alert feed (network, non-200)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class FeedParseError(OrefMeshError):
    """The feed returned a non-empty body that is not valid JSON."""

    def __init__(self, message: str, *, body: str = "") -> None:
        self.body = body
        super().__init__(message)


class FeedSchemaError(OrefMeshError):
    """Payload matches neither the live nor the historical feed shape."""


class RadioTransportError(OrefMeshError):
    """A single send attempt through the radio CLI failed."""

    def __init__(
        self,
        message: str,
        *,
        channel: int | None = None,
        returncode: int | None = None,
    ) -> None:
        self.channel = channel
        self.returncode = returncode
        super().__init__(message)


class DispatchError(OrefMeshError):
    """One or more channels exhausted their send retry budget.

    Raised once per cycle after every scheduled channel has been tried,
    so a failing zone never prevents delivery to the others.
    """

    def __init__(self, message: str, *, channels: tuple[int, ...] = ()) -> None:
        self.channels = channels
        super().__init__(message)


class FatalStartupError(OrefMeshError):
    """Startup cannot continue; the process must exit."""


class ConfigError(FatalStartupError):
    """Invalid configuration value."""


class GazetteerLoadError(FatalStartupError):
    """The locality gazetteer could not be loaded or validated."""


class RadioProbeError(FatalStartupError):
    """The radio node connectivity probe failed."""

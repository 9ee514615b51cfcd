"""orefmesh - Relay civil-defence alerts to zone channels on a Meshtastic mesh."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("orefmesh")
except PackageNotFoundError:
    __version__ = "0+local"
from orefmesh.config import RelayConfig
from orefmesh.dispatch import Dispatcher, DispatchState, format_message, should_suppress
from orefmesh.exceptions import (
    ConfigError,
    DispatchError,
    FatalStartupError,
    FeedParseError,
    FeedSchemaError,
    FeedTransportError,
    GazetteerLoadError,
    OrefMeshError,
    RadioProbeError,
    RadioTransportError,
)
from orefmesh.feed import AlertFeedClient, FeedMode
from orefmesh.gazetteer import Gazetteer, resolve_zones
from orefmesh.ingestion import normalize, parse_payload
from orefmesh.models import AlertType, CanonicalAlert, GazetteerEntry, HistoricalAlert, LiveAlert, Zone
from orefmesh.radio import MeshtasticCli, RadioTransport
from orefmesh.relay import AlertRelay

__all__ = [
    "__version__",
    "AlertFeedClient",
    "AlertRelay",
    "AlertType",
    "CanonicalAlert",
    "ConfigError",
    "DispatchError",
    "DispatchState",
    "Dispatcher",
    "FatalStartupError",
    "FeedMode",
    "FeedParseError",
    "FeedSchemaError",
    "FeedTransportError",
    "Gazetteer",
    "GazetteerEntry",
    "GazetteerLoadError",
    "HistoricalAlert",
    "LiveAlert",
    "MeshtasticCli",
    "OrefMeshError",
    "RadioProbeError",
    "RadioTransport",
    "RadioTransportError",
    "Zone",
    "format_message",
    "normalize",
    "parse_payload",
    "resolve_zones",
    "should_suppress",
]

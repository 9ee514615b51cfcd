"""Command line entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence

from orefmesh.config import RelayConfig
from orefmesh.dispatch import Dispatcher
from orefmesh.exceptions import FatalStartupError
from orefmesh.feed import AlertFeedClient
from orefmesh.radio import MeshtasticCli
from orefmesh.relay import AlertRelay

_logger = logging.getLogger("orefmesh")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="orefmesh",
        description="Relay civil-defence alerts to zone channels on a Meshtastic mesh.",
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Network address with port of the node to connect to (target.address:port).",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Poll the historical alerts endpoint instead of the live one.",
    )
    parser.add_argument(
        "--gazetteer",
        default=None,
        metavar="PATH",
        help="Gazetteer JSON file to use instead of the bundled one.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RelayConfig:
    overrides: dict[str, object] = {}
    if args.host:
        overrides["radio_host"] = args.host
    if args.history:
        overrides["use_history"] = True
    if args.gazetteer:
        overrides["gazetteer_path"] = args.gazetteer
    return RelayConfig.from_env(**overrides)


async def _run(config: RelayConfig) -> None:
    radio = MeshtasticCli(
        config.radio_executable,
        host=config.radio_host,
        send_timeout=config.send_timeout,
        probe_timeout=config.probe_timeout,
    )
    gazetteer = await AlertRelay.start(config, radio)
    dispatcher = Dispatcher.from_config(config, radio)
    async with AlertFeedClient(config) as feed:
        relay = AlertRelay(config, feed, gazetteer, dispatcher)
        await relay.run_forever()


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = build_config(args)
        asyncio.run(_run(config))
    except FatalStartupError as exc:
        _logger.error("Startup failed: %s", exc)
        return 1
    except KeyboardInterrupt:
        _logger.info("Stopping.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

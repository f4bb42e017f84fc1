"""CLI entry point for relaymap.

Runs one discovery pass over the bootstrap relays, prints the discovered
relays, then prints the relays closest to a target identifier.

Examples:
    ```bash
    python -m relaymap
    python -m relaymap npub1... -n 4 --show-distance
    python -m relaymap --bootstrap wss://nos.lol wss://relay.damus.io --timeout 5
    python -m relaymap --config config/relaymap.yaml --log-level DEBUG
    ```
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

from relaymap.core.exceptions import ConfigurationError
from relaymap.core.logger import Logger, StructuredFormatter
from relaymap.core.metrics import write_metrics
from relaymap.models.discovery import DiscoveryResult
from relaymap.services.configs import RelayMapConfig
from relaymap.services.discoverer import Discoverer
from relaymap.services.selector import closest, rank
from relaymap.utils.transport import Transport


DEFAULT_CONFIG = Path("config") / "relaymap.yaml"
DEFAULT_TARGET = "npub1m2f3j22hf90mt8mw788pne6fg7c8j2mw4gd3xjsptspjdeqf05dqhr54wn"
LISTING_EDGE = 10

logger = Logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="relaymap",
        description="Discover Nostr relays and pick the ones closest to an identifier",
    )
    parser.add_argument(
        "target",
        nargs="?",
        default=DEFAULT_TARGET,
        help="Identifier to find relays for (default: a sample npub)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Config path (default: {DEFAULT_CONFIG} when present)",
    )
    parser.add_argument("--bootstrap", nargs="+", metavar="URL", help="Bootstrap relay URLs")
    parser.add_argument("--timeout", type=float, help="Seconds allowed per bootstrap relay")
    parser.add_argument("--limit", type=int, help="Relay list events requested per relay")
    parser.add_argument("-n", type=int, dest="n", help="Number of closest relays to print")
    parser.add_argument(
        "--show-distance",
        action="store_true",
        help="Print the XOR distance (hex) next to each closest relay",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )
    return parser.parse_args(argv)


def setup_logging(level: str) -> None:
    """Install a ``StructuredFormatter`` on the root handler."""
    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def load_config(args: argparse.Namespace) -> RelayMapConfig:
    """Load the config file and apply command-line overrides.

    An explicit ``--config`` must exist; the default path is optional.

    Raises:
        ConfigurationError: If the file or the resulting configuration is invalid.
    """
    if args.config is not None:
        config = RelayMapConfig.from_yaml(args.config)
    elif DEFAULT_CONFIG.exists():
        config = RelayMapConfig.from_yaml(DEFAULT_CONFIG)
    else:
        config = RelayMapConfig()

    data: dict[str, Any] = config.model_dump()
    if args.bootstrap:
        data["bootstrap"] = args.bootstrap
    if args.timeout is not None:
        data["discoverer"]["timeout"] = args.timeout
    if args.limit is not None:
        data["discoverer"]["limit_per_connection"] = args.limit
    if args.n is not None:
        data["selector"]["n"] = args.n
    return RelayMapConfig.from_dict(data)


def format_listing(result: DiscoveryResult) -> list[str]:
    """List discovered URLs, eliding the middle of long listings."""
    urls = [record.url for record in result]
    if len(urls) > 2 * LISTING_EDGE:
        return [*urls[:LISTING_EDGE], "...", *urls[-LISTING_EDGE:]]
    return urls


async def run(
    config: RelayMapConfig,
    target: str,
    *,
    show_distance: bool = False,
    transport: Transport | None = None,
) -> int:
    """Discover relays, then print the closest ones to *target*.

    Returns:
        Exit code (always 0: unreachable bootstrap relays are not errors).
    """
    discoverer = Discoverer(config.discoverer, transport=transport)
    result = await discoverer.discover(config.bootstrap)

    print(f"Discovered {len(result)} unique relays.")
    for line in format_listing(result):
        print(line)

    n = config.selector.n
    print(f"\nFinding the {n} closest relays for {target}:")
    if show_distance:
        for url, distance in rank(target, result)[:n]:
            print(f"{url} {distance:064x}")
    else:
        for url in closest(target, result, n=n):
            print(url)

    if write_metrics(config.metrics):
        logger.info("metrics_written", path=str(config.metrics.textfile))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, load configuration, and run one pass."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        config = load_config(args)
    except ConfigurationError as e:
        logger.error("config_invalid", error=str(e))
        return 1

    try:
        return asyncio.run(run(config, args.target, show_distance=args.show_distance))
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(main())


if __name__ == "__main__":
    cli()

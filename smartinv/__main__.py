"""
smartinv - Entry Point

Run with: python -m smartinv
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from smartinv.config import AppConfig, reload_config
from smartinv.server import SmartInventoryServer


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="smartinv",
        description="smartinv - Smart inventory detail page controller",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to a TOML config file (default: packaged defaults)",
    )

    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host address to bind to (overrides config)",
    )

    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=None,
        help="HTTP port (overrides config)",
    )

    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Root URL of the inventories API (overrides config)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s 0.1.0",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Load the config file and apply command line overrides."""
    config = reload_config(args.config)

    if args.host is not None:
        config.server.host = args.host
    if args.port is not None:
        config.server.port = args.port
    if args.api_url is not None:
        config.api.base_url = args.api_url

    return config


async def run_server(config: AppConfig) -> None:
    """Start and run the server."""
    server = SmartInventoryServer(config)
    await server.run()


def main() -> int:
    """Main entry point for the application."""
    args = parse_args()
    setup_logging(verbose=args.verbose)

    logger = logging.getLogger(__name__)

    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        logger.error("Could not load config: %s", e)
        return 2

    logger.info("Starting smartinv...")

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
    except Exception as e:
        logger.exception("Fatal error: %s", e)
        return 1

    logger.info("Server stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Main entry point for the SRV portal."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .shared.config import Settings
from .shared.python_logger_config import setup_python_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="srv-portal",
        description="Redirect HTTP requests to backends published as DNS SRV records",
    )
    parser.add_argument("--host", help="Bind address (default: SERVER_HOST)")
    parser.add_argument("--port", type=int, help="Bind port (default: HTTP_PORT)")
    parser.add_argument("--env-file", default=".env", help="Environment file to load (default: .env)")
    parser.add_argument("--log-level", help="Log level (default: LOG_LEVEL)")
    return parser.parse_args(argv)


async def run_server(settings: Settings, host: str, port: int) -> None:
    """Serve the application with Hypercorn until interrupted."""
    from hypercorn.asyncio import serve
    from hypercorn.config import Config as HypercornConfig

    from .app import create_app

    app = create_app(settings)

    config = HypercornConfig()
    config.bind = [f"{host}:{port}"]
    config.loglevel = settings.effective_log_level
    config.accesslog = "-" if settings.debug_mode else None

    logger.info(f"Serving SRV portal on {host}:{port} (portal domain {settings.portal_domain})")
    await serve(app, config)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for CLI execution."""
    args = parse_args(argv)

    try:
        settings = Settings(_env_file=args.env_file)
    except ValidationError as e:
        setup_python_logging()
        logger.error(f"Invalid configuration: {e}")
        print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    setup_python_logging(args.log_level or settings.effective_log_level)

    try:
        asyncio.run(run_server(
            settings,
            host=args.host or settings.server_host,
            port=args.port or settings.http_port,
        ))
    except KeyboardInterrupt:
        logger.info("Shutting down SRV portal (interrupted)")
        sys.exit(0)


if __name__ == "__main__":
    main()

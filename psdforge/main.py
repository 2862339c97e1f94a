"""psdforge server entry point."""

import argparse
import logging

import uvicorn

from psdforge.app import create_api_app
from psdforge.config import settings


def main():
    """Run the server."""
    parser = argparse.ArgumentParser(description="psdforge template generator")
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help=f"HTTP port (default: {settings.PORT}, env: PSDFORGE_PORT)"
    )
    parser.add_argument(
        "--host", "-H",
        default=None,
        help=f"Host to bind to (default: {settings.HOST}, env: PSDFORGE_HOST)"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Log level (default: {settings.LOG_LEVEL}, env: PSDFORGE_LOG_LEVEL)"
    )

    args = parser.parse_args()

    # Use CLI args > env vars > defaults (via settings)
    port = args.port or settings.PORT
    host = args.host or settings.HOST
    log_level = (args.log_level or settings.LOG_LEVEL).upper()

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"[psdforge] Starting HTTP server on {host}:{port}")
    uvicorn.run(create_api_app(), host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    main()

# start_app.py
"""Launch the API gateway or the external backend process."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn
from dotenv import load_dotenv

import config


def main(argv: list[str] | None = None) -> None:
    """Load settings, then start either the API or the backend watcher."""

    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--backend",
        action="store_true",
        help="Run the backend watch script instead of the API server",
    )
    parser.add_argument("--port", type=int, default=None, help="API port")
    args = parser.parse_args(argv)

    load_dotenv()  # load environment variables from a .env file
    config.get_settings.cache_clear()
    settings = config.get_settings()

    if args.backend:
        from api.app.launcher import launch_backend
        from api.app.obs.logging import configure_logging

        configure_logging(getattr(logging, settings.log_level.upper(), logging.INFO))
        raise SystemExit(launch_backend())

    try:
        uvicorn.run(
            "api.app.main:app",
            host="0.0.0.0",  # nosec B104: bind for local development
            port=args.port or settings.port,
            log_level=settings.log_level.lower(),
        )
    except ModuleNotFoundError as exc:
        missing = exc.name or str(exc)
        print(
            f"Missing dependency: {missing}. Install it with 'pip install {missing}'",
            file=sys.stderr,
        )
        raise SystemExit(1)


if __name__ == "__main__":
    main()

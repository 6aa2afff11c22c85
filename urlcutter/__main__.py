"""
Command line entry point.

Example:
    python -m urlcutter --dbpath foo.db --listen 0.0.0.0:8080

Flags override the DATABASE_PATH, HOST and PORT settings.
"""

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from urlcutter.core.setting import Settings, settings as default_settings


def parse_listen(listen: str) -> tuple[str, int]:
    """Split "host:port" (or ":port") into its parts; empty host means all interfaces."""
    host, sep, port = listen.rpartition(":")
    if not sep or not port.isdigit():
        raise argparse.ArgumentTypeError(f"invalid listen address: {listen!r}")
    return host or "0.0.0.0", int(port)


def build_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    parser = argparse.ArgumentParser(prog="urlcutter", description="URL cutter service")
    parser.add_argument(
        "-dbpath", "--dbpath",
        default=default_settings.DATABASE_PATH,
        help="File path for the SQLite store. Created automatically if it does not exist.",
    )
    parser.add_argument(
        "-listen", "--listen",
        type=parse_listen,
        default=None,
        help="TCP socket to listen on. For example, 0.0.0.0:8080",
    )
    args = parser.parse_args(argv)

    overrides = {"DATABASE_PATH": args.dbpath}
    if args.listen is not None:
        overrides["HOST"], overrides["PORT"] = args.listen
    return default_settings.model_copy(update=overrides)


def main(argv: Optional[Sequence[str]] = None) -> None:
    settings = build_settings(argv)
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from urlcutter.main import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()

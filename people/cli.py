"""Command line entry for the People service."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

import uvicorn

from people.api.main import create_app
from people.core.config import Settings, get_settings
from people.core.database import DatabaseManager
from people.core.exceptions import StorageConnectionError
from people.core.logging import configure_logging
from people.core.observability import setup_tracing
from people.demo import run_demo
from people.repositories.person import PersonRepository

logger = logging.getLogger("people.cli")


async def run_demo_command(settings: Settings, database: Optional[DatabaseManager] = None) -> int:
    """Connect, walk through every CRUD operation once, and disconnect.

    Returns the process exit status: 1 when storage is unreachable (no
    operation is issued in that case), 0 otherwise.
    """

    database = database or DatabaseManager(settings)
    try:
        async with database:
            repository = PersonRepository(database.person_collection)
            await run_demo(repository, person_id=settings.DEMO_PERSON_ID)
    except StorageConnectionError as exc:
        logger.error("Error connecting to MongoDB: %s", exc)
        return 1
    return 0


def run_server(settings: Settings, host: Optional[str] = None, port: Optional[int] = None) -> None:
    uvicorn.run(create_app(settings), host=host or settings.HOST, port=port or settings.PORT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="people", description="Person CRUD demo against MongoDB")
    subcommands = parser.add_subparsers(dest="command")

    subcommands.add_parser("demo", help="Run every CRUD operation once (default)")

    serve = subcommands.add_parser("serve", help="Serve health and metrics endpoints")
    serve.add_argument("--host", default=None, help="Bind host (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default: PORT setting)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if args.command == "serve":
        run_server(settings, host=args.host, port=args.port)
        return

    configure_logging(settings)
    setup_tracing(settings)
    try:
        status = asyncio.run(run_demo_command(settings))
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user.")
        status = 1
    sys.exit(status)


if __name__ == "__main__":
    main()

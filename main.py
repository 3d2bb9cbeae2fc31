"""Development entrypoint for the matchup generator."""

from __future__ import annotations

import argparse
import json
import logging
from dataclasses import asdict

import uvicorn

from matchup.config import get_settings
from matchup.repository import StaticDataRepository
from matchup.services import MatchupService


def _print_stats() -> None:
    settings = get_settings()
    service = MatchupService(StaticDataRepository(settings.data_dir), rules=settings.rules())
    stats = service.aggregate_all()
    print(json.dumps({name: asdict(value) for name, value in stats.items()}, indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Rome II matchup generator")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the HTTP API server")
    serve.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )
    subparsers.add_parser("stats", help="Print aggregated faction stats as JSON")

    args = parser.parse_args()
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "stats":
        _print_stats()
        return

    host = getattr(args, "host", "127.0.0.1")
    port = getattr(args, "port", 8000)
    if getattr(args, "reload", False):
        uvicorn.run("matchup.api.app:app", host=host, port=port, reload=True, factory=False)
    else:
        from matchup.api.app import app

        uvicorn.run(app, host=host, port=port, reload=False, factory=False)


if __name__ == "__main__":
    main()

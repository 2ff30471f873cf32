"""Command-line interface for serving the API and inspecting player documents."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

import uvicorn

from tennis_api.api import build_repository, create_app
from tennis_api.config import Settings
from tennis_api.persistence import DataSourceError
from tennis_api.stats import calculate_statistics


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Tennis players API")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default from TENNIS_API_HOST)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (default from PORT)")
    serve.add_argument("--data", type=Path, default=None, help="Path to the players JSON document")
    serve.add_argument(
        "--persist",
        action="store_true",
        default=None,
        help="Write newly created players back to the document",
    )

    stats = subparsers.add_parser("stats", help="Print statistics for a players document")
    stats.add_argument("--data", type=Path, default=None, help="Path to the players JSON document")

    players = subparsers.add_parser("players", help="Print players sorted by rank")
    players.add_argument("--data", type=Path, default=None, help="Path to the players JSON document")

    return parser.parse_args(argv)


def _serve(settings: Settings) -> None:
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = Settings.from_env().with_overrides(
        data_path=args.data,
        host=getattr(args, "host", None),
        port=getattr(args, "port", None),
        persist=getattr(args, "persist", None),
    )
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s - %(levelname)s - %(message)s")

    try:
        if args.command == "serve":
            _serve(settings)
            return 0

        repository = build_repository(settings)
    except DataSourceError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.command == "stats":
        statistics = calculate_statistics(repository.snapshot())
        print(json.dumps(statistics.model_dump(mode="json", by_alias=True), indent=2))
    elif args.command == "players":
        payload = [player.model_dump(mode="json") for player in repository.list_sorted_by_rank()]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

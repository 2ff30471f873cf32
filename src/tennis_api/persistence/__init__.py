"""Load and save the flat JSON players document."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from tennis_api.models import Player


logger = logging.getLogger(__name__)


class DataSourceError(RuntimeError):
    """Raised when the players document cannot be read or parsed."""


def parse_players_document(raw: str | bytes) -> List[Player]:
    """Turn a ``{"players": [...]}`` document into player records."""

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DataSourceError(f"Invalid players document: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get("players"), list):
        raise DataSourceError("Players document must be an object with a 'players' list")
    try:
        return [Player.model_validate(item) for item in data["players"]]
    except ValidationError as exc:
        raise DataSourceError(f"Invalid player record: {exc}") from exc


def dump_players_document(players: Iterable[Player]) -> str:
    payload = {"players": [player.model_dump(mode="json") for player in players]}
    return json.dumps(payload, indent=2, ensure_ascii=False)


class JsonPlayerStore:
    """File-backed source of player records."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> List[Player]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise DataSourceError(f"Cannot read players document {self.path}: {exc}") from exc
        players = parse_players_document(raw)
        logger.info("Read %d players from %s", len(players), self.path)
        return players

    def save(self, players: Iterable[Player]) -> None:
        """Replace the document with ``players``.

        Writes go to a temporary file in the same directory and are moved into
        place, so readers see either the old or the new document.
        """

        text = dump_players_document(players)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".players-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.write("\n")
            os.replace(tmp_name, self.path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote players document %s", self.path)


__all__ = [
    "DataSourceError",
    "JsonPlayerStore",
    "dump_players_document",
    "parse_players_document",
]

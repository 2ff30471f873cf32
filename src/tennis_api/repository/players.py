"""In-memory player repository."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Iterable, List, Optional, Sequence

from tennis_api.models import Country, CreatePlayerInput, Player, PlayerData

from .errors import DuplicatePlayer
from .validation import CreatePayload, PlayerValidator, SchemaValidator


logger = logging.getLogger(__name__)

DEFAULT_COUNTRY_PICTURE_URL = "https://tenisu.latelier.co/resources/{code}.png"

PersistHook = Callable[[Sequence[Player]], None]


def derive_shortname(firstname: str, lastname: str) -> str:
    """Build the ``F.LAS`` style short name used when none is supplied."""

    return f"{firstname[:1]}.{lastname[:3].upper()}"


def country_picture_url(code: str, template: str = DEFAULT_COUNTRY_PICTURE_URL) -> str:
    return template.format(code=code)


class PlayerRepository:
    """Owns the player collection and the id counter.

    ``create`` runs under a lock so the duplicate check, id assignment and
    append happen as one step. Readers work on copies of the list.
    """

    def __init__(
        self,
        records: Iterable[Player] = (),
        *,
        validator: PlayerValidator | None = None,
        persist: PersistHook | None = None,
        country_picture_template: str = DEFAULT_COUNTRY_PICTURE_URL,
    ):
        self._validator: PlayerValidator = validator or SchemaValidator()
        self._persist = persist
        self._country_picture_template = country_picture_template
        self._lock = threading.Lock()
        self._players: List[Player] = []
        self._next_id = 1
        self.initialize(records)

    @property
    def next_id(self) -> int:
        return self._next_id

    def initialize(self, records: Iterable[Player]) -> None:
        players = list(records)
        seen: set[int] = set()
        for player in players:
            if player.id in seen:
                raise ValueError(f"Duplicate player id {player.id} in loaded records")
            seen.add(player.id)
        with self._lock:
            self._players = players
            self._next_id = max(seen) + 1 if seen else 1
        logger.info("Loaded %d players (next id %d)", len(players), self._next_id)

    def list_sorted_by_rank(self) -> List[Player]:
        return sorted(self._players, key=lambda player: player.data.rank)

    def get_by_id(self, player_id: int) -> Optional[Player]:
        for player in self._players:
            if player.id == player_id:
                return player
        return None

    def snapshot(self) -> List[Player]:
        return list(self._players)

    def __len__(self) -> int:
        return len(self._players)

    def _find_by_name(self, firstname: str, lastname: str) -> Optional[Player]:
        first = firstname.lower()
        last = lastname.lower()
        for player in self._players:
            if player.firstname.lower() == first and player.lastname.lower() == last:
                return player
        return None

    def _build_player(self, player_id: int, payload: CreatePlayerInput) -> Player:
        code = payload.country.code
        return Player(
            id=player_id,
            firstname=payload.firstname,
            lastname=payload.lastname,
            shortname=payload.shortname or derive_shortname(payload.firstname, payload.lastname),
            sex=payload.sex,
            country=Country(
                code=code,
                picture=payload.country.picture
                or country_picture_url(code, self._country_picture_template),
            ),
            picture=payload.picture or "",
            data=PlayerData(
                rank=payload.data.rank,
                points=payload.data.points,
                weight=payload.data.weight,
                height=payload.data.height,
                age=payload.data.age,
                last=tuple(payload.data.last or ()),
            ),
        )

    def create(self, payload: CreatePayload) -> Player:
        """Validate, de-duplicate and append a new player.

        Raises ``ValidationFailed`` for field violations and ``DuplicatePlayer``
        when a player with the same first and last name (any casing) exists.
        Nothing is modified when either error is raised.
        """

        validated = self._validator.validate(payload)
        with self._lock:
            existing = self._find_by_name(validated.firstname, validated.lastname)
            if existing is not None:
                raise DuplicatePlayer(validated.firstname, validated.lastname, existing.id)

            player = self._build_player(self._next_id, validated)
            # Rebinding to a new list keeps readers' iteration consistent.
            self._players = [*self._players, player]
            self._next_id += 1
            snapshot = list(self._players)

            if self._persist is not None:
                try:
                    self._persist(snapshot)
                except Exception:
                    logger.exception("Failed to persist players after creating id %d", player.id)

        logger.info("Created player %d (%s %s)", player.id, player.firstname, player.lastname)
        return player

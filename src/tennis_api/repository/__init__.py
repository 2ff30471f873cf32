"""Player repository and its error types."""

from .errors import DuplicatePlayer, PlayerRepositoryError, ValidationFailed
from .players import (
    DEFAULT_COUNTRY_PICTURE_URL,
    PlayerRepository,
    country_picture_url,
    derive_shortname,
)
from .validation import PlayerValidator, SchemaValidator, describe_errors

__all__ = [
    "DEFAULT_COUNTRY_PICTURE_URL",
    "DuplicatePlayer",
    "PlayerRepository",
    "PlayerRepositoryError",
    "PlayerValidator",
    "SchemaValidator",
    "ValidationFailed",
    "country_picture_url",
    "derive_shortname",
    "describe_errors",
]

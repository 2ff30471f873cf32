"""Player and statistics models."""

from .player import (
    Country,
    CountryWinRatio,
    CreateCountryInput,
    CreatePlayerData,
    CreatePlayerInput,
    Player,
    PlayerData,
    Statistics,
)

__all__ = [
    "Country",
    "CountryWinRatio",
    "CreateCountryInput",
    "CreatePlayerData",
    "CreatePlayerInput",
    "Player",
    "PlayerData",
    "Statistics",
]

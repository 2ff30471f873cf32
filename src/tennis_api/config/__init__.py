"""Configuration helpers for the tennis API."""

from .settings import DEFAULT_DATA_PATH, Settings

__all__ = [
    "DEFAULT_DATA_PATH",
    "Settings",
]

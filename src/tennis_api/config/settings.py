"""Runtime settings resolved from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from tennis_api.repository import DEFAULT_COUNTRY_PICTURE_URL


logger = logging.getLogger(__name__)

_DATA_PATH_ENV = "TENNIS_API_DATA_PATH"
_PERSIST_ENV = "TENNIS_API_PERSIST"
_HOST_ENV = "TENNIS_API_HOST"
_PORT_ENV = "PORT"
_LOG_LEVEL_ENV = "TENNIS_API_LOG_LEVEL"
_COUNTRY_PICTURE_ENV = "TENNIS_API_COUNTRY_PICTURE_URL"

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "headtohead.json"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3000
DEFAULT_LOG_LEVEL = "info"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    logger.warning("Invalid boolean for %s: %s; using default %s", name, raw, default)
    return default


def _env_int(env: Mapping[str, str], name: str, default: int, *, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = env.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if (min_value is not None and value < min_value) or (max_value is not None and value > max_value):
        logger.warning("Out of range value for %s: %s; using default %d", name, raw, default)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    data_path: Path = DEFAULT_DATA_PATH
    persist: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    country_picture_template: str = DEFAULT_COUNTRY_PICTURE_URL

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        data_path = env.get(_DATA_PATH_ENV)
        template = env.get(_COUNTRY_PICTURE_ENV) or DEFAULT_COUNTRY_PICTURE_URL
        if "{code}" not in template:
            logger.warning("%s has no {code} placeholder; using default", _COUNTRY_PICTURE_ENV)
            template = DEFAULT_COUNTRY_PICTURE_URL
        return cls(
            data_path=Path(data_path) if data_path else DEFAULT_DATA_PATH,
            persist=_env_bool(env, _PERSIST_ENV, False),
            host=env.get(_HOST_ENV) or DEFAULT_HOST,
            port=_env_int(env, _PORT_ENV, DEFAULT_PORT, min_value=1, max_value=65535),
            log_level=(env.get(_LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).lower(),
            country_picture_template=template,
        )

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with non-``None`` overrides applied."""

        return replace(self, **{key: value for key, value in changes.items() if value is not None})

"""Field-level validation of create payloads.

The repository depends on the ``PlayerValidator`` protocol only, so callers can
swap the strategy (for example when an upstream layer already validated the
payload) without touching repository logic.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Protocol, Union

from pydantic import ValidationError

from tennis_api.models import CreatePlayerInput

from .errors import ValidationFailed


CreatePayload = Union[CreatePlayerInput, Mapping[str, Any]]

_INTEGER_ERROR_TYPES = {"int_type", "int_from_float", "int_parsing"}

_RULE_MESSAGES: dict[str, str] = {
    "firstname": "firstname is required",
    "lastname": "lastname is required",
    "shortname": "shortname must be a string",
    "sex": "sex must be either M or F",
    "country": "country is required",
    "country.code": "country.code is required",
    "country.picture": "country.picture must be a valid URL",
    "picture": "picture must be a valid URL",
    "data": "data is required",
    "data.rank": "data.rank must be a positive number",
    "data.points": "data.points must be a non-negative number",
    "data.weight": "data.weight must be a positive number (in grams)",
    "data.height": "data.height must be a positive number (in cm)",
    "data.age": "data.age must be a positive number",
    "data.last": "data.last entries must be 0 or 1",
}


class PlayerValidator(Protocol):
    def validate(self, payload: CreatePayload) -> CreatePlayerInput:
        """Return a validated input or raise ``ValidationFailed``."""
        ...


def _field_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc if not isinstance(part, int))


def describe_errors(exc: ValidationError) -> List[str]:
    """Translate pydantic errors into ordered, human readable rule violations."""

    messages: List[str] = []
    for error in exc.errors():
        path = _field_path(tuple(error.get("loc", ())))
        if error.get("type") in _INTEGER_ERROR_TYPES and path.startswith("data.") and path != "data.last":
            message = f"{path} must be an integer"
        else:
            message = _RULE_MESSAGES.get(path) or f"{path or 'body'}: {error.get('msg', 'invalid value')}"
        if message not in messages:
            messages.append(message)
    return messages


class SchemaValidator:
    """Validate raw mappings against ``CreatePlayerInput``.

    Instances of ``CreatePlayerInput`` were already validated when they were
    built and are returned unchanged.
    """

    def validate(self, payload: CreatePayload) -> CreatePlayerInput:
        if isinstance(payload, CreatePlayerInput):
            return payload
        if not isinstance(payload, Mapping):
            raise ValidationFailed(["body must be a JSON object"])
        try:
            return CreatePlayerInput.model_validate(dict(payload))
        except ValidationError as exc:
            raise ValidationFailed(describe_errors(exc)) from exc

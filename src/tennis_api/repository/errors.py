from __future__ import annotations

from typing import Sequence


class PlayerRepositoryError(Exception):
    """Base class for errors raised by ``PlayerRepository.create``."""


class ValidationFailed(PlayerRepositoryError):
    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        message = "Validation failed: " + "; ".join(self.errors)
        super().__init__(message)
        self.message = message


class DuplicatePlayer(PlayerRepositoryError):
    def __init__(self, firstname: str, lastname: str, existing_id: int):
        message = f"Player {firstname} {lastname} already exists with ID {existing_id}"
        super().__init__(message)
        self.firstname = firstname
        self.lastname = lastname
        self.existing_id = existing_id
        self.message = message

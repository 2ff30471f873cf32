"""Canonical player models shared across storage, repository and API layers."""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Tuple
from urllib.parse import urlparse

from pydantic import BaseModel, BeforeValidator, Field, StringConstraints, field_validator
from pydantic.config import ConfigDict
from pydantic_core import PydanticCustomError


def _reject_non_numbers(value: Any) -> Any:
    # Whole-number floats such as 185.0 are accepted; booleans and strings are not.
    if isinstance(value, (bool, str)):
        raise PydanticCustomError("int_type", "Input should be a valid integer")
    return value


WholeNumber = Annotated[int, BeforeValidator(_reject_non_numbers)]
MatchResult = Annotated[WholeNumber, Field(ge=0, le=1)]
Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
CountryCode = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, to_upper=True)]


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


class Country(BaseModel):
    code: str = Field(..., min_length=1)
    picture: str = ""

    model_config = ConfigDict(frozen=True)


class PlayerData(BaseModel):
    rank: int = Field(..., gt=0)
    points: int = Field(..., ge=0)
    weight: int = Field(..., gt=0, description="Weight in grams")
    height: int = Field(..., gt=0, description="Height in centimeters")
    age: int = Field(..., gt=0)
    last: Tuple[MatchResult, ...] = Field(default=(), description="Recent results, 1=win 0=loss")

    model_config = ConfigDict(frozen=True)


class Player(BaseModel):
    """Stored player record; never mutated once created."""

    id: int = Field(..., gt=0)
    firstname: str = Field(..., min_length=1)
    lastname: str = Field(..., min_length=1)
    shortname: str
    sex: Literal["M", "F"]
    country: Country
    picture: str = ""
    data: PlayerData

    model_config = ConfigDict(frozen=True)


class CreateCountryInput(BaseModel):
    code: CountryCode
    picture: Optional[str] = None

    @field_validator("picture")
    @classmethod
    def _picture_is_url(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _is_http_url(value):
            raise ValueError("country.picture must be a valid URL")
        return value


class CreatePlayerData(BaseModel):
    rank: WholeNumber = Field(..., gt=0)
    points: WholeNumber = Field(..., ge=0)
    weight: WholeNumber = Field(..., gt=0)
    height: WholeNumber = Field(..., gt=0)
    age: WholeNumber = Field(..., gt=0)
    last: Optional[List[MatchResult]] = None


class CreatePlayerInput(BaseModel):
    """Payload for registering a player; ``id`` is always assigned by the repository."""

    firstname: Name
    lastname: Name
    shortname: Optional[str] = None
    sex: Literal["M", "F"]
    country: CreateCountryInput
    picture: Optional[str] = None
    data: CreatePlayerData

    model_config = ConfigDict(extra="ignore")

    @field_validator("picture")
    @classmethod
    def _picture_is_url_or_empty(cls, value: Optional[str]) -> Optional[str]:
        if value and not _is_http_url(value):
            raise ValueError("picture must be a valid URL")
        return value


class CountryWinRatio(BaseModel):
    country: str
    win_ratio: float = Field(..., alias="winRatio", ge=0.0, le=1.0)

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class Statistics(BaseModel):
    country_with_highest_win_ratio: CountryWinRatio = Field(..., alias="countryWithHighestWinRatio")
    average_bmi: float = Field(..., alias="averageBMI")
    median_height: float = Field(..., alias="medianHeight")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

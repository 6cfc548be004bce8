from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
import re

MAX_NAME_LENGTH = 100

_INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")

# SQLite INTEGER is a signed 64-bit value
MAX_DB_INT = 2**63 - 1
MIN_DB_INT = -(2**63)


def parse_int(value, message: str) -> int:
    """Parse a JSON integer or an integer-valued string; reject everything else.

    ``None`` and blank strings count as a missing field. Values that do not
    fit a database INTEGER are rejected with ``message``.
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        raise ValueError("All fields are required")
    if isinstance(value, bool):
        raise ValueError(message)
    if isinstance(value, int):
        number = value
    elif isinstance(value, str) and _INTEGER_PATTERN.match(value.strip()):
        number = int(value.strip())
    else:
        raise ValueError(message)
    if not MIN_DB_INT <= number <= MAX_DB_INT:
        raise ValueError(message)
    return number


class PlayerCreate(BaseModel):
    name: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def clean_name(cls, value):
        if value is None:
            raise ValueError("Name is required")
        if not isinstance(value, str):
            raise ValueError("Name must be a string")
        name = value.strip()
        if not name:
            raise ValueError("Name is required")
        if len(name) > MAX_NAME_LENGTH:
            raise ValueError(f"Name must be at most {MAX_NAME_LENGTH} characters")
        return name


class PlayerResponse(BaseModel):
    id: int
    name: str
    rating: float

    class Config:
        from_attributes = True


class GameCreate(BaseModel):
    team1_player1: Optional[int] = Field(default=None, validate_default=True)
    team1_player2: Optional[int] = Field(default=None, validate_default=True)
    team2_player1: Optional[int] = Field(default=None, validate_default=True)
    team2_player2: Optional[int] = Field(default=None, validate_default=True)
    score_team1: Optional[int] = Field(default=None, validate_default=True)
    score_team2: Optional[int] = Field(default=None, validate_default=True)

    @field_validator("team1_player1", "team1_player2", "team2_player1", "team2_player2", mode="before")
    @classmethod
    def parse_player_id(cls, value):
        return parse_int(value, "Player IDs must be valid integers")

    @field_validator("score_team1", "score_team2", mode="before")
    @classmethod
    def parse_score(cls, value):
        score = parse_int(value, "Scores must be non-negative integers")
        if score < 0:
            raise ValueError("Scores must be non-negative integers")
        return score

    @model_validator(mode="after")
    def check_unique_players(self):
        if len(set(self.player_ids)) != 4:
            raise ValueError("All players must be unique")
        return self

    @property
    def team1_ids(self) -> List[int]:
        return [self.team1_player1, self.team1_player2]

    @property
    def team2_ids(self) -> List[int]:
        return [self.team2_player1, self.team2_player2]

    @property
    def player_ids(self) -> List[int]:
        return self.team1_ids + self.team2_ids


class GameCreated(BaseModel):
    id: int


class GameResponse(BaseModel):
    id: int
    score_team1: int
    score_team2: int
    timestamp: Optional[datetime] = None
    team1_player1_name: str
    team1_player2_name: str
    team2_player1_name: str
    team2_player2_name: str

    class Config:
        from_attributes = True

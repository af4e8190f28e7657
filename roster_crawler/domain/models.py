"""
Domain models for crawled roster data using Pydantic.

Every optional field carries an explicit ``None`` default and is always
serialised, so the JSON artifacts keep a stable shape across runs.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RosterModel(BaseModel):
    """Base: snake_case attributes, camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Footedness(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


class Team(RosterModel):
    name: str
    canonical_url: str
    slug: str
    id: str


class PlayerReference(RosterModel):
    id: str
    name: str
    profile_url: str


class PlayerProfile(RosterModel):
    """Metadata recovered from a profile page; all fields independently optional."""

    image_url: Optional[str] = None
    date_of_birth: Optional[str] = None
    age: Optional[int] = None
    place_of_birth: Optional[str] = None
    citizenship: list[str] = Field(default_factory=list)
    height: Optional[str] = None
    position: Optional[str] = None
    dominant_foot: Optional[Footedness] = None
    current_club: Optional[str] = None
    joined_date: Optional[str] = None
    contract_expiry: Optional[str] = None
    market_value: Optional[str] = None
    shirt_number: Optional[str] = None
    agent: Optional[str] = None
    international_team: Optional[str] = None
    international_caps: Optional[int] = None
    international_goals: Optional[int] = None

    @field_validator("dominant_foot", mode="before")
    @classmethod
    def parse_foot(cls, v):
        if isinstance(v, str):
            v = v.strip().lower()
            return v if v in {f.value for f in Footedness} else None
        return v


class TeamPlacement(RosterModel):
    """Team context and stored portrait of a crawled player."""

    team: str
    team_slug: str
    local_image_path: Optional[str] = None


# Fields follow the MRO in reverse: reference, placement, then profile metadata
class Player(PlayerProfile, TeamPlacement, PlayerReference):
    @classmethod
    def from_reference(
        cls,
        ref: PlayerReference,
        team: Team,
        profile: Optional[PlayerProfile] = None,
    ) -> "Player":
        data = profile.model_dump() if profile else {}
        return cls(
            **data,
            id=ref.id,
            name=ref.name,
            profile_url=ref.profile_url,
            team=team.name,
            team_slug=team.slug,
        )

"""
Input schemas for ingestion.

Seed scripts and sync jobs build these before anything touches the
database. Equipment specs are checked against the model for the item's
type (see equipment/specs.py).
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, HttpUrl, PositiveInt, model_validator

from paddlerank.db.models import EquipmentType, TournamentTier
from paddlerank.equipment.specs import parse_specs


class PlayerInput(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100)
    ranking: Optional[PositiveInt] = None
    country: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[HttpUrl] = None


class EquipmentInput(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=200)
    brand: str = Field(min_length=1, max_length=100)
    type: EquipmentType
    image_url: Optional[HttpUrl] = None
    description: Optional[str] = Field(default=None, max_length=2000)
    specs: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def specs_match_type(self) -> "EquipmentInput":
        """Specs must parse with the model for this equipment type."""
        parse_specs(self.type, self.specs)
        return self


class TournamentInput(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=200)
    tier: TournamentTier
    start_date: datetime
    end_date: datetime
    location: Optional[str] = Field(default=None, max_length=200)


class MatchResultInput(BaseModel):
    """Points are not accepted here; ingestion derives them from the scoring policy."""

    player_id: PositiveInt
    tournament_id: PositiveInt
    placement: PositiveInt
    match_date: datetime
    event_type: Optional[str] = Field(default=None, max_length=100)


class EquipmentUsageInput(BaseModel):
    player_id: PositiveInt
    equipment_id: PositiveInt
    start_date: datetime
    end_date: Optional[datetime] = None
    verified: bool = False
    source: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="after")
    def ends_after_start(self) -> "EquipmentUsageInput":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self

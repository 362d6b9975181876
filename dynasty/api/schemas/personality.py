"""Pydantic schemas for personality generation and evolution."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from dynasty.core.enums import Position
from dynasty.core.personality.evolution import LifeEventType, MarketExperienceType


# === Request Schemas ===

class PlayerRecordSchema(BaseModel):
    """Base attributes of the player a personality is generated for."""
    id: str = Field(..., min_length=1)
    position: Position
    age: int = Field(..., ge=18, le=50)
    overall: int = Field(..., ge=0, le=100)
    years_exp: int = Field(0, ge=0)
    name: str = ""
    current_team_id: Optional[str] = None


class GeneratePersonalityRequest(BaseModel):
    """Request to generate a new personality."""
    player: PlayerRecordSchema
    current_year: int = Field(..., description="League year the personality is created in")
    seed: Optional[int] = Field(None, description="Seed for a reproducible personality")
    blending_enabled: Optional[bool] = Field(
        None,
        description="Override for the configured archetype blending flag"
    )


class LifeEventRequest(BaseModel):
    """Apply a life event to a serialized personality."""
    personality: Dict[str, Any]
    event_type: LifeEventType
    year: int
    week: Optional[int] = Field(None, ge=0, le=52)
    description: Optional[str] = None


class MarketExperienceRequest(BaseModel):
    """Apply a market experience to a serialized personality."""
    personality: Dict[str, Any]
    experience_type: MarketExperienceType
    year: int
    week: Optional[int] = Field(None, ge=0, le=52)
    description: Optional[str] = None


class TickRequest(BaseModel):
    """Run one evolution cycle on a serialized personality."""
    personality: Dict[str, Any]
    current_year: int
    current_week: int = Field(0, ge=0, le=52)


# === Response Schemas ===

class PersonalityResponse(BaseModel):
    """A generated personality."""
    personality: Dict[str, Any]
    archetype: str
    blended: bool = False


class PersonalityChangeSchema(BaseModel):
    trait: str
    change: float
    reason: str
    permanent: bool = False


class EvolutionResponse(BaseModel):
    """Personality after an evolution step."""
    personality: Dict[str, Any]
    applied_changes: List[PersonalityChangeSchema] = Field(default_factory=list)
    summary: str

"""Pydantic schemas for contract evaluation."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from dynasty.core.contracts.offer import IncentiveType, SeasonStage
from dynasty.core.models.team import Climate, MarketSize
from dynasty.core.personality.traits import MarketTrend


class PerformanceIncentiveSchema(BaseModel):
    type: IncentiveType
    threshold: float = 0.0
    bonus: float = Field(0.0, ge=0)


class ContractOfferSchema(BaseModel):
    """A contract offer. Money in dollars."""
    years: int = Field(..., ge=1, le=10)
    total_value: float = Field(..., ge=0)
    apy: float = Field(..., ge=0)
    guaranteed_amount: float = Field(0.0, ge=0)
    signing_bonus: float = Field(0.0, ge=0)
    performance_incentives: List[PerformanceIncentiveSchema] = Field(default_factory=list)
    team_quality: float = Field(0.5, ge=0, le=1)
    location_match: float = Field(0.5, ge=0, le=1)


class TeamLocationSchema(BaseModel):
    team_id: str
    city: str = ""
    state: str = ""
    market_size: MarketSize = MarketSize.MEDIUM
    climate: Climate = Climate.TEMPERATE
    timezone: str = ""
    is_contender: bool = False
    is_stable: bool = True
    tax_rate: Optional[float] = Field(None, ge=0, le=1)


class MarketConditionsSchema(BaseModel):
    position_demand: float = Field(0.5, ge=0, le=1)
    market_trend: MarketTrend = MarketTrend.STABLE
    recent_comparables: List[ContractOfferSchema] = Field(default_factory=list)
    league_cap_space: float = 0.0
    team_count: int = Field(32, ge=1)


class EvaluateOfferRequest(BaseModel):
    """Evaluate one offer against a serialized personality."""
    personality: Dict[str, Any]
    offer: ContractOfferSchema
    team: TeamLocationSchema
    market_conditions: Optional[MarketConditionsSchema] = None
    competing_offers: List[ContractOfferSchema] = Field(default_factory=list)
    current_week: int = Field(0, ge=0)
    season_stage: SeasonStage = SeasonStage.EARLY_FA
    current_year: Optional[int] = None
    current_team_id: Optional[str] = None
    compute_location_match: bool = Field(
        False,
        description="Replace offer.location_match with the personality's team-fit score"
    )


class DecisionResponse(BaseModel):
    """How the player responded to the offer."""
    player_id: str
    decision: str
    score: float
    reasoning: str
    feedback: str
    gm_note: str
    counter_offer: Optional[ContractOfferSchema] = None
    holdout_duration_days: Optional[int] = None
    personality_factors: List[str] = Field(default_factory=list)
    score_breakdown: Dict[str, float] = Field(default_factory=dict)

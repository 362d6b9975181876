"""Pydantic schemas for API request/response models."""

from dynasty.api.schemas.personality import (
    EvolutionResponse,
    GeneratePersonalityRequest,
    LifeEventRequest,
    MarketExperienceRequest,
    PersonalityChangeSchema,
    PersonalityResponse,
    PlayerRecordSchema,
    TickRequest,
)
from dynasty.api.schemas.contracts import (
    ContractOfferSchema,
    DecisionResponse,
    EvaluateOfferRequest,
    MarketConditionsSchema,
    PerformanceIncentiveSchema,
    TeamLocationSchema,
)

__all__ = [
    # Personality schemas
    "PlayerRecordSchema",
    "GeneratePersonalityRequest",
    "PersonalityResponse",
    "LifeEventRequest",
    "MarketExperienceRequest",
    "TickRequest",
    "PersonalityChangeSchema",
    "EvolutionResponse",
    # Contract schemas
    "PerformanceIncentiveSchema",
    "ContractOfferSchema",
    "TeamLocationSchema",
    "MarketConditionsSchema",
    "EvaluateOfferRequest",
    "DecisionResponse",
]

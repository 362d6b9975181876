"""
API Router for player personalities.

Provides endpoints for:
- Generating a personality for a player
- Applying life events and market experiences
- Running the periodic evolution tick
"""

from fastapi import APIRouter, HTTPException

from dynasty.api.schemas.personality import (
    EvolutionResponse,
    GeneratePersonalityRequest,
    LifeEventRequest,
    MarketExperienceRequest,
    PersonalityResponse,
    TickRequest,
)
from dynasty.api.services import engine_service
from dynasty.api.services.engine_service import MalformedPersonalityError
from dynasty.core.models import InvalidPlayerError
from dynasty.core.personality import get_evolution_summary

router = APIRouter(prefix="/personality", tags=["personality"])


def _evolution_response(personality, applied) -> dict:
    return {
        "personality": personality.to_dict(),
        "applied_changes": [c.to_dict() for c in applied],
        "summary": get_evolution_summary(personality),
    }


# === Generation ===

@router.post("/generate", response_model=PersonalityResponse)
async def generate_personality(request: GeneratePersonalityRequest):
    """
    Generate a personality for a player.

    Pass a seed for a reproducible result.
    """
    try:
        personality = engine_service.generate(request)
    except InvalidPlayerError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "personality": personality.to_dict(),
        "archetype": personality.archetype,
        "blended": personality.blending.is_blended,
    }


# === Evolution ===

@router.post("/life-events", response_model=EvolutionResponse)
async def add_life_event(request: LifeEventRequest):
    """Record a life event and apply its immediate impact."""
    try:
        personality, applied = engine_service.apply_life_event(request)
    except MalformedPersonalityError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _evolution_response(personality, applied)


@router.post("/market-experiences", response_model=EvolutionResponse)
async def add_market_experience(request: MarketExperienceRequest):
    """Record a market experience and apply its immediate impact."""
    try:
        personality, applied = engine_service.apply_market_experience(request)
    except MalformedPersonalityError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _evolution_response(personality, applied)


@router.post("/tick", response_model=EvolutionResponse)
async def run_tick(request: TickRequest):
    """
    Run one evolution cycle.

    Expires cooldowns, re-applies lingering events and fires age milestones.
    """
    try:
        personality, applied = engine_service.run_tick(request)
    except MalformedPersonalityError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _evolution_response(personality, applied)

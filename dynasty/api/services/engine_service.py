"""
Engine service.

Converts API schemas into core values, runs the engine, and converts the
results back. Stateless: personalities travel in and out of every call.
"""

import logging
import random
from typing import Any, Dict, List, Tuple

from dynasty.api.schemas.contracts import (
    ContractOfferSchema,
    EvaluateOfferRequest,
    MarketConditionsSchema,
    TeamLocationSchema,
)
from dynasty.api.schemas.personality import (
    GeneratePersonalityRequest,
    LifeEventRequest,
    MarketExperienceRequest,
    TickRequest,
)
from dynasty.core.contracts import (
    ContractEvaluationContext,
    ContractOffer,
    MarketConditions,
    PlayerDecision,
    evaluate_contract_offer,
)
from dynasty.core.models import PlayerRecord, TeamLocation
from dynasty.core.personality import (
    Personality,
    PersonalityChange,
    add_life_event,
    add_market_experience,
    calculate_location_match,
    generate_personality,
    tick,
)

logger = logging.getLogger(__name__)


class MalformedPersonalityError(ValueError):
    """Raised when a serialized personality cannot be read back."""
    pass


def load_personality(data: Dict[str, Any]) -> Personality:
    """Rebuild a Personality from its dict form."""
    try:
        return Personality.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise MalformedPersonalityError(f"Malformed personality: {e}") from e


# =============================================================================
# Generation
# =============================================================================

def generate(request: GeneratePersonalityRequest) -> Personality:
    player = PlayerRecord.from_dict(request.player.model_dump(mode="json"))
    rng = random.Random(request.seed) if request.seed is not None else random.Random()
    return generate_personality(
        player,
        request.current_year,
        rng=rng,
        blending_enabled=request.blending_enabled,
    )


# =============================================================================
# Evaluation
# =============================================================================

def _offer(schema: ContractOfferSchema) -> ContractOffer:
    return ContractOffer.from_dict(schema.model_dump(mode="json"))


def _team(schema: TeamLocationSchema) -> TeamLocation:
    return TeamLocation.from_dict(schema.model_dump(mode="json"))


def _market(schema: MarketConditionsSchema) -> MarketConditions:
    return MarketConditions(
        position_demand=schema.position_demand,
        market_trend=schema.market_trend,
        recent_comparables=[_offer(o) for o in schema.recent_comparables],
        league_cap_space=schema.league_cap_space,
        team_count=schema.team_count,
    )


def evaluate(request: EvaluateOfferRequest) -> PlayerDecision:
    personality = load_personality(request.personality)
    team = _team(request.team)
    offer = _offer(request.offer)

    if request.compute_location_match:
        offer.location_match = calculate_location_match(
            personality.location_preferences,
            team,
            request.current_team_id,
        )

    context = ContractEvaluationContext(
        offer=offer,
        team=team,
        market_conditions=_market(request.market_conditions) if request.market_conditions else None,
        competing_offers=[_offer(o) for o in request.competing_offers],
        current_week=request.current_week,
        season_stage=request.season_stage,
        current_year=request.current_year,
        current_team_id=request.current_team_id,
    )
    return evaluate_contract_offer(personality, context)


# =============================================================================
# Evolution
# =============================================================================

def apply_life_event(request: LifeEventRequest) -> Tuple[Personality, List[PersonalityChange]]:
    personality = load_personality(request.personality)
    event = add_life_event(personality, request.event_type, request.year, request.week, request.description)
    logger.info(f"Life event {event.type.value} recorded for {personality.player_id}")
    return personality, event.applied


def apply_market_experience(request: MarketExperienceRequest) -> Tuple[Personality, List[PersonalityChange]]:
    personality = load_personality(request.personality)
    experience = add_market_experience(
        personality, request.experience_type, request.year, request.week, request.description
    )
    logger.info(f"Market experience {experience.type.value} recorded for {personality.player_id}")
    return personality, experience.applied


def run_tick(request: TickRequest) -> Tuple[Personality, List[PersonalityChange]]:
    personality = load_personality(request.personality)
    applied = tick(personality, request.current_year, request.current_week)
    return personality, applied

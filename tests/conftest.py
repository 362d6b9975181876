"""Shared pytest fixtures for Dynasty tests."""

import random

import pytest

from dynasty.config import reset_config
from dynasty.core.contracts import ContractEvaluationContext, ContractOffer
from dynasty.core.enums import Position
from dynasty.core.models import Climate, MarketSize, PlayerRecord, TeamLocation
from dynasty.core.personality import (
    Behaviors,
    Blending,
    ExtensionTerms,
    FeedbackTemplates,
    HiddenSliders,
    MarketContext,
    Percentiles,
    Personality,
    PersonalityTraits,
    TradePreferences,
    Weights,
    builtin_reference_data,
    set_reference_data,
)
from dynasty.core.personality.archetypes import DEFAULT_FEEDBACK
from dynasty.core.personality.evolution import EvolutionLedger
from dynasty.core.personality.traits import (
    DeadlineBehavior,
    LocationTrait,
    MarketTrend,
    NegotiationStyle,
    RiskTolerance,
    TeamLoyalty,
    TradeDeadlineBehavior,
)


# =============================================================================
# Global State
# =============================================================================


@pytest.fixture(autouse=True)
def reset_engine_state():
    """Drop cached config and reference tables around every test."""
    reset_config()
    set_reference_data(None)
    yield
    reset_config()
    set_reference_data(None)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(42)


@pytest.fixture
def builtin_reference():
    """The built-in fallback archetype table."""
    return builtin_reference_data()


# =============================================================================
# Player Fixtures
# =============================================================================


@pytest.fixture
def qb_record() -> PlayerRecord:
    """Prime-age franchise quarterback."""
    return PlayerRecord(id="qb-1", name="Joe Burrow", position=Position.QB, age=27, overall=90, years_exp=5)


@pytest.fixture
def veteran_rb_record() -> PlayerRecord:
    """Aging running back near the end of his career."""
    return PlayerRecord(id="rb-1", name="Mark Ingram", position=Position.RB, age=36, overall=72, years_exp=14)


@pytest.fixture
def wr_record() -> PlayerRecord:
    return PlayerRecord(id="wr-1", name="Ja'Marr Chase", position=Position.WR, age=24, overall=88, years_exp=3)


# =============================================================================
# Team Fixtures
# =============================================================================


@pytest.fixture
def texas_team() -> TeamLocation:
    """Large, warm, zero-tax market."""
    return TeamLocation(
        team_id="DAL",
        city="Dallas",
        state="TX",
        market_size=MarketSize.LARGE,
        climate=Climate.WARM,
        is_contender=True,
    )


@pytest.fixture
def new_york_team() -> TeamLocation:
    """Large, cold, high-tax market."""
    return TeamLocation(
        team_id="NYG",
        city="New York",
        state="NY",
        market_size=MarketSize.LARGE,
        climate=Climate.COLD,
    )


@pytest.fixture
def small_market_team() -> TeamLocation:
    return TeamLocation(
        team_id="GB",
        city="Green Bay",
        state="WI",
        market_size=MarketSize.SMALL,
        climate=Climate.COLD,
        is_contender=True,
    )


# =============================================================================
# Personality Builders
# =============================================================================


def make_market_context(
    p50: float = 10_000_000,
    supply_pressure: float = 0.5,
    trend: MarketTrend = MarketTrend.STABLE,
    position: Position = Position.QB,
) -> MarketContext:
    """Market bands scaled off a median APY."""
    return MarketContext(
        position=position,
        apy_percentiles=Percentiles(p25=p50 * 0.7, p50=p50, p75=p50 * 1.3, p90=p50 * 1.6),
        guarantee_percentiles=Percentiles(p25=0.6, p50=0.7, p75=0.8, p90=0.9),
        supply_pressure=supply_pressure,
        market_trend=trend,
        last_updated=2025,
    )


def make_personality(
    player_id: str = "p-1",
    position: Position = Position.QB,
    age: int = 27,
    created_year: int = 2025,
    style: NegotiationStyle = NegotiationStyle.PATIENT,
    team_loyalty: TeamLoyalty = TeamLoyalty.MEDIUM,
    weights: dict = None,
    behaviors: dict = None,
    sliders: dict = None,
    market_context: MarketContext = None,
) -> Personality:
    """
    Personality with fully controlled values.

    Weights default to equal, hidden sliders to zero (no effect on
    scoring) and behaviors to a middle-of-the-road negotiator.
    """
    weight_values = {
        "money_priority": 0.2,
        "winning_priority": 0.2,
        "location_priority": 0.2,
        "guarantee_priority": 0.2,
        "length_priority": 0.2,
    }
    weight_values.update(weights or {})

    behavior_values = {
        "holdout_threshold": 0.4,
        "counter_offer_multiplier": 1.1,
        "deadline_softening": 0.02,
        "comparison_weight": 0.5,
        "deadline_susceptibility": 0.5,
    }
    behavior_values.update(behaviors or {})

    slider_values = {
        "ego": 0.0,
        "injury_anxiety": 0.0,
        "agent_quality": 0.0,
        "scheme_fit": 0.0,
        "role_promise": 0.0,
        "tax_sensitivity": 0.0,
        "endorsement_value": 0.0,
    }
    slider_values.update(sliders or {})

    return Personality(
        player_id=player_id,
        position=position,
        age_at_creation=age,
        created_year=created_year,
        archetype="patient_negotiator",
        rarity=0.25,
        traits=PersonalityTraits(
            negotiation_style=style,
            risk_tolerance=RiskTolerance.MEDIUM,
            team_loyalty=team_loyalty,
            location_preference=LocationTrait.NEUTRAL,
            deadline_behavior=DeadlineBehavior.WAIT_FOR_BEST,
        ),
        weights=Weights(**weight_values),
        behaviors=Behaviors(**behavior_values),
        hidden_sliders=HiddenSliders(**slider_values),
        feedback_templates=FeedbackTemplates(**{k: list(v) for k, v in DEFAULT_FEEDBACK.items()}),
        blending=Blending(primary_archetype="patient_negotiator"),
        trade_preferences=TradePreferences(
            requires_extension_probability=0.3,
            reporting_delay_if_unhappy=2,
            trade_deadline_behavior=TradeDeadlineBehavior.WAIT_FOR_BEST,
            extension_terms=ExtensionTerms(min_years=2, min_guaranteed_pct=0.7, apy_multiplier=1.1),
        ),
        market_context=market_context,
        location_preferences=[],
        evolution=EvolutionLedger(last_evolution_year=created_year),
    )


def make_offer(
    apy: float = 10_000_000,
    years: int = 3,
    guarantee_pct: float = 0.5,
    team_quality: float = 0.7,
    location_match: float = 0.7,
) -> ContractOffer:
    total = apy * years
    return ContractOffer(
        years=years,
        total_value=total,
        apy=apy,
        guaranteed_amount=total * guarantee_pct,
        team_quality=team_quality,
        location_match=location_match,
    )


@pytest.fixture
def personality_factory():
    """Build personalities with controlled values (see make_personality)."""
    return make_personality


@pytest.fixture
def offer_factory():
    return make_offer


@pytest.fixture
def context_factory(texas_team):
    """Build evaluation contexts, defaulting to the Texas team."""
    def build(offer=None, team=None, **kwargs) -> ContractEvaluationContext:
        return ContractEvaluationContext(
            offer=offer or make_offer(),
            team=team or texas_team,
            **kwargs,
        )
    return build


@pytest.fixture
def market_context_factory():
    """Build market bands (see make_market_context)."""
    return make_market_context

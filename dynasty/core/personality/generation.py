"""
Personality Generation.

Builds a complete Personality for a player from an archetype table.
Archetype selection is biased by age, rating and position; every value
is then sampled around the archetype with bounded variance so players
of the same archetype still differ.

Randomness always flows through an injected random.Random, so a seeded
generator reproduces the exact same personality.
"""

import logging
import random
from typing import Dict, List, Optional, Tuple

from dynasty.config import get_config
from dynasty.core.enums import Position
from dynasty.core.models.player import PlayerRecord
from dynasty.core.personality.archetypes import (
    BEHAVIOR_VARIANCE,
    DEFAULT_HIDDEN_SLIDERS,
    FEEDBACK_CATEGORIES,
    WEIGHT_VARIANCE,
    Archetype,
    ReferenceData,
    get_reference_data,
)
from dynasty.core.personality.evolution import EvolutionLedger
from dynasty.core.personality.locations import generate_location_preferences
from dynasty.core.personality.profile import (
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
)
from dynasty.core.personality.traits import (
    BEHAVIOR_RANGES,
    LocationTrait,
    MarketTrend,
    NegotiationStyle,
    RiskTolerance,
    TeamLoyalty,
    TradeDeadlineBehavior,
)

logger = logging.getLogger(__name__)


# Chance each label is resampled away from the archetype's base label
TRAIT_RANDOMIZE_CHANCE = 0.3

# Minimum selection weight any archetype keeps after modifiers
ARCHETYPE_WEIGHT_FLOOR = 0.1

BLEND_RATIO_RANGE = (0.2, 0.4)

# Label -> chance it is taken from the secondary archetype when blending
BLEND_INHERIT_CHANCES = [
    ("negotiation_style", 0.5),
    ("risk_tolerance", 0.4),
    ("team_loyalty", 0.3),
]

# Parameters mixed numerically when blending
BLENDED_PARAMS = [
    "money_priority",
    "winning_priority",
    "location_priority",
    "guarantee_priority",
    "length_priority",
    "holdout_threshold",
    "counter_offer_multiplier",
]

# Position category -> (value multiplier, supply pressure)
POSITION_MARKET: Dict[str, Tuple[float, float]] = {
    "QB": (2.5, 0.8),
    "RB": (1.2, 0.3),
    "WR": (1.5, 0.4),
    "TE": (1.3, 0.6),
}
DEFAULT_POSITION_MARKET = (1.0, 0.5)

# Base market APY per overall point
APY_PER_OVERALL = 100_000

APY_PERCENTILE_SCALE = {"p25": 0.7, "p50": 1.0, "p75": 1.3, "p90": 1.6}
GUARANTEE_PERCENTILE_SCALE = {"p25": 0.8, "p50": 1.0, "p75": 1.1, "p90": 1.2}


# =============================================================================
# Archetype Selection
# =============================================================================

def _archetype_weight(key: str, archetype: Archetype, player: PlayerRecord) -> float:
    weight = archetype.rarity

    if player.age >= 30:
        if key == "conservative_veteran":
            weight *= 2.0
        if key == "aggressive_negotiator":
            weight *= 0.5

    if player.overall >= 85:
        if key == "aggressive_negotiator":
            weight *= 1.5
        if key == "desperate_signer":
            weight *= 0.3
    elif player.overall <= 70:
        if key == "desperate_signer":
            weight *= 2.0
        if key == "aggressive_negotiator":
            weight *= 0.5

    if player.position == Position.QB:
        if key == "contender_chaser":
            weight *= 1.3
        if key == "loyal_teammate":
            weight *= 0.8
    elif player.position == Position.WR:
        if key == "aggressive_negotiator":
            weight *= 1.2
        if key == "big_market_star":
            weight *= 1.1

    return max(ARCHETYPE_WEIGHT_FLOOR, weight)


def _archetype_weights(player: PlayerRecord, reference: ReferenceData) -> Dict[str, float]:
    return {
        key: _archetype_weight(key, archetype, player)
        for key, archetype in reference.archetypes.items()
    }


def _select_archetype(player: PlayerRecord, reference: ReferenceData, rng: random.Random) -> Archetype:
    weights = _archetype_weights(player, reference)
    keys = list(weights.keys())
    key = rng.choices(keys, [weights[k] for k in keys])[0]
    return reference.get_archetype(key)


def get_archetype_distribution(
    player: PlayerRecord,
    reference: Optional[ReferenceData] = None,
) -> Dict[str, float]:
    """
    Probability of each archetype for a player.

    Useful for debugging or displaying to users.

    Returns:
        Dict mapping archetype key to probability (sums to 1.0)
    """
    player.validate()
    weights = _archetype_weights(player, reference or get_reference_data())
    total = sum(weights.values())
    return {key: w / total for key, w in weights.items()}


# =============================================================================
# Blending
# =============================================================================

def _archetype_params(archetype: Archetype) -> Dict[str, float]:
    params = dict(archetype.weights)
    params.update(archetype.behaviors)
    return params


def _generate_blending(
    primary: Archetype,
    reference: ReferenceData,
    rng: random.Random,
    enabled: bool,
    blend_chance: float,
) -> Tuple[Blending, Optional[Archetype]]:
    """Decide whether a secondary archetype is mixed in, and how much."""
    pure = Blending(primary_archetype=primary.key)

    candidates = [a for key, a in reference.archetypes.items() if key != primary.key]
    if not enabled or not candidates or rng.random() >= blend_chance:
        return pure, None

    secondary = rng.choices(candidates, [a.rarity for a in candidates])[0]
    ratio = rng.uniform(*BLEND_RATIO_RANGE)

    inherited = [name for name, chance in BLEND_INHERIT_CHANCES if rng.random() < chance]

    primary_params = _archetype_params(primary)
    secondary_params = _archetype_params(secondary)
    resolved = {
        name: primary_params[name] * (1 - ratio) + secondary_params[name] * ratio
        for name in BLENDED_PARAMS
    }

    blending = Blending(
        primary_archetype=primary.key,
        secondary_archetype=secondary.key,
        blend_ratio=ratio,
        inherited_traits=inherited,
        resolved_params=resolved,
    )
    return blending, secondary


# =============================================================================
# Traits
# =============================================================================

def _randomize_label(base, rng: random.Random):
    """Keep the base label, or with some chance swap it for a different one."""
    if rng.random() >= TRAIT_RANDOMIZE_CHANCE:
        return base
    alternatives = [member for member in type(base) if member is not base]
    return rng.choice(alternatives)


def _apply_position_traits(traits: PersonalityTraits, position: Position, rng: random.Random) -> None:
    category = position.category
    if category == "QB":
        # QBs tend to be loyal
        if rng.random() < 0.7:
            traits.team_loyalty = rng.choice([TeamLoyalty.MEDIUM, TeamLoyalty.HIGH, TeamLoyalty.VERY_HIGH])
    elif category == "WR":
        if rng.random() < 0.6:
            traits.location_preference = LocationTrait.BIG_MARKETS
        if rng.random() < 0.5:
            traits.negotiation_style = rng.choice(
                [NegotiationStyle.AGGRESSIVE, NegotiationStyle.PATIENT, NegotiationStyle.FLEXIBLE]
            )
    elif category == "RB":
        # Short careers make RBs risk-averse
        if rng.random() < 0.6:
            traits.risk_tolerance = rng.choice([RiskTolerance.VERY_LOW, RiskTolerance.LOW, RiskTolerance.MEDIUM])
    elif category == "TE":
        if rng.random() < 0.6:
            traits.negotiation_style = rng.choice(
                [NegotiationStyle.COOPERATIVE, NegotiationStyle.PATIENT, NegotiationStyle.FLEXIBLE]
            )


def _generate_traits(
    player: PlayerRecord,
    primary: Archetype,
    secondary: Optional[Archetype],
    blending: Blending,
    rng: random.Random,
) -> PersonalityTraits:
    def base(name: str):
        if secondary is not None and name in blending.inherited_traits:
            return getattr(secondary, name)
        return getattr(primary, name)

    traits = PersonalityTraits(
        negotiation_style=_randomize_label(base("negotiation_style"), rng),
        risk_tolerance=_randomize_label(base("risk_tolerance"), rng),
        team_loyalty=_randomize_label(base("team_loyalty"), rng),
        location_preference=_randomize_label(base("location_preference"), rng),
        deadline_behavior=_randomize_label(base("deadline_behavior"), rng),
    )
    _apply_position_traits(traits, player.position, rng)
    return traits


# =============================================================================
# Numeric Fields
# =============================================================================

def _sample(base: float, variance: float, low: float, high: float, rng: random.Random) -> float:
    """Uniform draw around base, with the draw window clipped to [low, high]."""
    lower = max(low, base - variance)
    upper = min(high, base + variance)
    if lower > upper:
        return max(low, min(high, base))
    return rng.uniform(lower, upper)


def _generate_weights(
    player: PlayerRecord,
    params: Dict[str, float],
    rng: random.Random,
) -> Weights:
    weights = Weights(
        money_priority=_sample(params["money_priority"], WEIGHT_VARIANCE, 0.0, 1.0, rng),
        winning_priority=_sample(params["winning_priority"], WEIGHT_VARIANCE, 0.0, 1.0, rng),
        location_priority=_sample(params["location_priority"], WEIGHT_VARIANCE, 0.0, 1.0, rng),
        guarantee_priority=_sample(params["guarantee_priority"], WEIGHT_VARIANCE, 0.0, 1.0, rng),
        length_priority=_sample(params["length_priority"], WEIGHT_VARIANCE, 0.0, 1.0, rng),
    )

    # Veterans want security
    if player.age >= 30:
        weights.guarantee_priority += 0.1
        weights.length_priority += 0.1
        weights.money_priority -= 0.05
    if player.age >= 35:
        weights.guarantee_priority += 0.15
        weights.length_priority += 0.15
        weights.money_priority -= 0.1

    if player.overall >= 85:
        weights.money_priority += 0.1
        weights.winning_priority += 0.05
    elif player.overall <= 70:
        weights.guarantee_priority += 0.1
        weights.money_priority -= 0.05

    weights.normalize()
    return weights


def _generate_behaviors(params: Dict[str, float], rng: random.Random) -> Behaviors:
    values = {}
    for name, variance in BEHAVIOR_VARIANCE.items():
        low, high = BEHAVIOR_RANGES[name]
        values[name] = _sample(params[name], variance, low, high, rng)
    return Behaviors(**values)


def _generate_hidden_sliders(archetype: Archetype, rng: random.Random) -> HiddenSliders:
    values = {}
    for name in DEFAULT_HIDDEN_SLIDERS:
        base, variance = archetype.hidden_slider_anchor(name)
        values[name] = _sample(base, variance, 0.0, 1.0, rng)
    return HiddenSliders(**values)


def _generate_feedback_templates(archetype: Archetype) -> FeedbackTemplates:
    return FeedbackTemplates(**{category: archetype.templates_for(category) for category in FEEDBACK_CATEGORIES})


# =============================================================================
# Trade Preferences & Market Context
# =============================================================================

def _generate_trade_preferences(
    player: PlayerRecord,
    traits: PersonalityTraits,
    rng: random.Random,
) -> TradePreferences:
    probability = 0.3
    if traits.risk_tolerance == RiskTolerance.VERY_LOW:
        probability += 0.3
    elif traits.risk_tolerance == RiskTolerance.LOW:
        probability += 0.2
    if player.age > 30:
        probability += 0.2
    if player.age > 35:
        probability += 0.2

    if traits.negotiation_style == NegotiationStyle.AGGRESSIVE:
        behavior = TradeDeadlineBehavior.REQUIRE_EXTENSION
    elif traits.negotiation_style == NegotiationStyle.PATIENT:
        behavior = TradeDeadlineBehavior.WAIT_FOR_BEST
    else:
        behavior = TradeDeadlineBehavior.ACCEPT_QUICKLY

    return TradePreferences(
        requires_extension_probability=min(0.9, probability),
        reporting_delay_if_unhappy=rng.randint(1, 3),
        trade_deadline_behavior=behavior,
        extension_terms=ExtensionTerms(
            min_years=rng.randint(2, 3),
            min_guaranteed_pct=0.6 + rng.random() * 0.3,
            apy_multiplier=1.0 + rng.random() * 0.2,
        ),
    )


def generate_market_context(player: PlayerRecord, current_year: int, rng: random.Random) -> MarketContext:
    """Position market bands for a player's rating."""
    multiplier, supply_pressure = POSITION_MARKET.get(player.position.category, DEFAULT_POSITION_MARKET)
    market_apy = player.overall * APY_PER_OVERALL * multiplier
    market_guarantee = 0.6 + (player.overall / 100) * 0.3

    apy = Percentiles(**{k: float(round(market_apy * s)) for k, s in APY_PERCENTILE_SCALE.items()})
    guarantee = Percentiles(**{k: min(1.0, market_guarantee * s) for k, s in GUARANTEE_PERCENTILE_SCALE.items()})

    return MarketContext(
        position=player.position,
        apy_percentiles=apy,
        guarantee_percentiles=guarantee,
        supply_pressure=supply_pressure,
        market_trend=MarketTrend.RISING if rng.random() > 0.5 else MarketTrend.STABLE,
        last_updated=current_year,
    )


# =============================================================================
# Entry Point
# =============================================================================

def generate_personality(
    player: PlayerRecord,
    current_year: int,
    rng: Optional[random.Random] = None,
    reference: Optional[ReferenceData] = None,
    blending_enabled: Optional[bool] = None,
) -> Personality:
    """
    Generate a complete personality for a player.

    Args:
        player: Base player record (position, age and overall required)
        current_year: League year the personality is created in
        rng: Random source; a fresh unseeded generator if None
        reference: Archetype/location tables; the shared tables if None
        blending_enabled: Override for the configured blending flag

    Returns:
        A new Personality with an empty evolution ledger

    Raises:
        InvalidPlayerError: if the player record is structurally invalid
    """
    player.validate()

    rng = rng or random.Random()
    reference = reference or get_reference_data()
    config = get_config()
    if blending_enabled is None:
        blending_enabled = config.blending_enabled

    primary = _select_archetype(player, reference, rng)
    blending, secondary = _generate_blending(primary, reference, rng, blending_enabled, config.blend_chance)

    params = _archetype_params(primary)
    params.update(blending.resolved_params)

    traits = _generate_traits(player, primary, secondary, blending, rng)
    weights = _generate_weights(player, params, rng)
    behaviors = _generate_behaviors(params, rng)
    hidden_sliders = _generate_hidden_sliders(primary, rng)

    personality = Personality(
        player_id=player.id,
        position=player.position,
        age_at_creation=player.age,
        created_year=current_year,
        archetype=primary.key,
        rarity=primary.rarity,
        traits=traits,
        weights=weights,
        behaviors=behaviors,
        hidden_sliders=hidden_sliders,
        feedback_templates=_generate_feedback_templates(primary),
        blending=blending,
        trade_preferences=_generate_trade_preferences(player, traits, rng),
        market_context=generate_market_context(player, current_year, rng),
        location_preferences=generate_location_preferences(player, rng, reference),
        evolution=EvolutionLedger(last_evolution_year=current_year),
    )

    logger.debug(
        f"Generated {primary.key} personality for player {player.id}"
        + (f" (blended with {blending.secondary_archetype} at {blending.blend_ratio:.2f})" if blending.is_blended else "")
    )
    return personality


def generate_personalities(
    players: List[PlayerRecord],
    current_year: int,
    rng: Optional[random.Random] = None,
    reference: Optional[ReferenceData] = None,
) -> Dict[str, Personality]:
    """Generate personalities for a batch of players, keyed by player id."""
    rng = rng or random.Random()
    reference = reference or get_reference_data()
    return {p.id: generate_personality(p, current_year, rng, reference) for p in players}

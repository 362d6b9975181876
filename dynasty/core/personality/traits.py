"""
Personality Traits.

Two kinds of traits live on a personality:

1. Labels - closed categories (negotiation style, risk tolerance, ...).
   They bias generation and feedback selection but carry no math.
2. Numeric fields - weights, behaviors and hidden sliders. These drive
   contract scoring and are the targets of personality evolution.

TraitName enumerates every field evolution is allowed to touch and
TRAIT_TARGETS routes each one to its section and legal range.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple, Type


# =============================================================================
# Labels
# =============================================================================

class NegotiationStyle(Enum):
    """How a player approaches the bargaining table."""

    AGGRESSIVE = "aggressive"
    """Pushes hard, counters high, threatens holdouts."""

    PATIENT = "patient"
    """Waits for the right deal, rarely rushes."""

    DESPERATE = "desperate"
    """Needs a contract; takes reasonable offers without countering."""

    COOPERATIVE = "cooperative"
    """Willing to meet in the middle."""

    FLEXIBLE = "flexible"
    """Trades money for opportunity when it makes sense."""

    CONSERVATIVE = "conservative"
    """Security first - guarantees over upside."""


class RiskTolerance(Enum):
    """Appetite for uncertain outcomes (ordinal, low to high)."""

    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class TeamLoyalty(Enum):
    """Attachment to the current organization (ordinal, low to high)."""

    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


class LocationTrait(Enum):
    """The kind of place a player gravitates toward."""

    BIG_MARKETS = "big_markets"
    WARM_WEATHER = "warm_weather"
    RURAL_AREAS = "rural_areas"
    NEUTRAL = "neutral"
    CURRENT_TEAM = "current_team"
    WINNING_TEAMS = "winning_teams"
    STABLE_MARKETS = "stable_markets"


class DeadlineBehavior(Enum):
    """How a player acts as a signing deadline approaches."""

    PRESSURE_TEAM = "pressure_team"
    WAIT_FOR_BEST = "wait_for_best"
    ACCEPT_QUICKLY = "accept_quickly"
    COMPROMISE = "compromise"
    PRIORITIZE_OPPORTUNITY = "prioritize_opportunity"
    SEEK_SECURITY = "seek_security"


class TradeDeadlineBehavior(Enum):
    """Reaction to being moved at the trade deadline."""

    ACCEPT_QUICKLY = "accept_quickly"
    WAIT_FOR_BEST = "wait_for_best"
    REQUIRE_EXTENSION = "require_extension"
    HOLDOUT = "holdout"


class MarketTrend(Enum):
    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


# Ordinal labels in ascending order
ORDINAL_LABELS: Dict[str, List[Enum]] = {
    "risk_tolerance": list(RiskTolerance),
    "team_loyalty": list(TeamLoyalty),
}

# Label trait name -> enum class, used when resampling and parsing
LABEL_ENUMS: Dict[str, Type[Enum]] = {
    "negotiation_style": NegotiationStyle,
    "risk_tolerance": RiskTolerance,
    "team_loyalty": TeamLoyalty,
    "location_preference": LocationTrait,
    "deadline_behavior": DeadlineBehavior,
}


# =============================================================================
# Numeric fields (evolution targets)
# =============================================================================

class TraitSection(Enum):
    """Which sub-structure of a personality a trait lives in."""

    WEIGHT = "weights"
    BEHAVIOR = "behaviors"
    HIDDEN_SLIDER = "hidden_sliders"
    LABEL = "traits"


class TraitName(Enum):
    """Every personality field that can be changed after generation."""

    # Weights
    MONEY_PRIORITY = "money_priority"
    WINNING_PRIORITY = "winning_priority"
    LOCATION_PRIORITY = "location_priority"
    GUARANTEE_PRIORITY = "guarantee_priority"
    LENGTH_PRIORITY = "length_priority"

    # Behaviors
    HOLDOUT_THRESHOLD = "holdout_threshold"
    COUNTER_OFFER_MULTIPLIER = "counter_offer_multiplier"
    DEADLINE_SOFTENING = "deadline_softening"
    COMPARISON_WEIGHT = "comparison_weight"
    DEADLINE_SUSCEPTIBILITY = "deadline_susceptibility"

    # Hidden sliders
    EGO = "ego"
    INJURY_ANXIETY = "injury_anxiety"
    AGENT_QUALITY = "agent_quality"
    SCHEME_FIT = "scheme_fit"
    ROLE_PROMISE = "role_promise"
    TAX_SENSITIVITY = "tax_sensitivity"
    ENDORSEMENT_VALUE = "endorsement_value"

    # Ordinal labels
    RISK_TOLERANCE = "risk_tolerance"
    TEAM_LOYALTY = "team_loyalty"


@dataclass(frozen=True)
class TraitTarget:
    """Where a trait lives and the range it must stay inside."""

    section: TraitSection
    attribute: str
    minimum: float = 0.0
    maximum: float = 1.0

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(self.maximum, value))


TRAIT_TARGETS: Dict[TraitName, TraitTarget] = {
    TraitName.MONEY_PRIORITY: TraitTarget(TraitSection.WEIGHT, "money_priority"),
    TraitName.WINNING_PRIORITY: TraitTarget(TraitSection.WEIGHT, "winning_priority"),
    TraitName.LOCATION_PRIORITY: TraitTarget(TraitSection.WEIGHT, "location_priority"),
    TraitName.GUARANTEE_PRIORITY: TraitTarget(TraitSection.WEIGHT, "guarantee_priority"),
    TraitName.LENGTH_PRIORITY: TraitTarget(TraitSection.WEIGHT, "length_priority"),
    TraitName.HOLDOUT_THRESHOLD: TraitTarget(TraitSection.BEHAVIOR, "holdout_threshold"),
    TraitName.COUNTER_OFFER_MULTIPLIER: TraitTarget(
        TraitSection.BEHAVIOR, "counter_offer_multiplier", 1.0, 2.0
    ),
    TraitName.DEADLINE_SOFTENING: TraitTarget(TraitSection.BEHAVIOR, "deadline_softening", 0.0, 0.1),
    TraitName.COMPARISON_WEIGHT: TraitTarget(TraitSection.BEHAVIOR, "comparison_weight"),
    TraitName.DEADLINE_SUSCEPTIBILITY: TraitTarget(TraitSection.BEHAVIOR, "deadline_susceptibility"),
    TraitName.EGO: TraitTarget(TraitSection.HIDDEN_SLIDER, "ego"),
    TraitName.INJURY_ANXIETY: TraitTarget(TraitSection.HIDDEN_SLIDER, "injury_anxiety"),
    TraitName.AGENT_QUALITY: TraitTarget(TraitSection.HIDDEN_SLIDER, "agent_quality"),
    TraitName.SCHEME_FIT: TraitTarget(TraitSection.HIDDEN_SLIDER, "scheme_fit"),
    TraitName.ROLE_PROMISE: TraitTarget(TraitSection.HIDDEN_SLIDER, "role_promise"),
    TraitName.TAX_SENSITIVITY: TraitTarget(TraitSection.HIDDEN_SLIDER, "tax_sensitivity"),
    TraitName.ENDORSEMENT_VALUE: TraitTarget(TraitSection.HIDDEN_SLIDER, "endorsement_value"),
    TraitName.RISK_TOLERANCE: TraitTarget(TraitSection.LABEL, "risk_tolerance"),
    TraitName.TEAM_LOYALTY: TraitTarget(TraitSection.LABEL, "team_loyalty"),
}

_missing = set(TraitName) - set(TRAIT_TARGETS)
if _missing:
    raise RuntimeError(f"TraitName members without a target: {sorted(t.value for t in _missing)}")


def traits_in_section(section: TraitSection) -> List[TraitName]:
    """All traits that live in one section, in declaration order."""
    return [t for t, target in TRAIT_TARGETS.items() if target.section is section]


# Declared range of every bounded behavior field
BEHAVIOR_RANGES: Dict[str, Tuple[float, float]] = {
    target.attribute: (target.minimum, target.maximum)
    for target in TRAIT_TARGETS.values()
    if target.section is TraitSection.BEHAVIOR
}

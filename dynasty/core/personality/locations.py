"""
Location Preferences.

Every player carries one or two location preferences. Generation lives
here alongside the team-fit score the preferences feed: the engine only
consumes the resulting 0-1 match through ContractOffer.location_match.
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from dynasty.core.enums import Position
from dynasty.core.models.player import PlayerRecord
from dynasty.core.models.team import ASSUMED_HIGH_TAX_RATE, Climate, MarketSize, TeamLocation
from dynasty.core.personality.archetypes import ReferenceData


class PreferenceType(Enum):
    BIG_MARKETS = "big_markets"
    WARM_WEATHER = "warm_weather"
    COLD_WEATHER = "cold_weather"
    RURAL_AREAS = "rural_areas"
    NEUTRAL = "neutral"
    CURRENT_TEAM = "current_team"
    WINNING_TEAMS = "winning_teams"
    STABLE_MARKETS = "stable_markets"
    TAX_CONSCIOUS = "tax_conscious"


PRIMARY_WEIGHT = 0.8
SECONDARY_WEIGHT = 0.4
SECONDARY_CHANCE = 0.4

# Neutral score when a player has no usable preference
NEUTRAL_MATCH = 0.5

# Primary draw: (type, base weight)
PRIMARY_TYPE_WEIGHTS = [
    (PreferenceType.BIG_MARKETS, 0.30),
    (PreferenceType.WARM_WEATHER, 0.25),
    (PreferenceType.RURAL_AREAS, 0.15),
    (PreferenceType.NEUTRAL, 0.20),
    (PreferenceType.WINNING_TEAMS, 0.05),
    (PreferenceType.STABLE_MARKETS, 0.05),
]

SECONDARY_TYPE_WEIGHTS = [
    (PreferenceType.BIG_MARKETS, 0.2),
    (PreferenceType.WARM_WEATHER, 0.2),
    (PreferenceType.RURAL_AREAS, 0.2),
    (PreferenceType.NEUTRAL, 0.2),
    (PreferenceType.WINNING_TEAMS, 0.1),
    (PreferenceType.STABLE_MARKETS, 0.1),
]

# Climate / market-size rules implied by each preference type
_TYPE_CLIMATES: Dict[PreferenceType, List[Climate]] = {
    PreferenceType.WARM_WEATHER: [Climate.WARM],
    PreferenceType.COLD_WEATHER: [Climate.COLD],
}
_TYPE_MARKET_SIZES: Dict[PreferenceType, List[MarketSize]] = {
    PreferenceType.BIG_MARKETS: [MarketSize.LARGE],
    PreferenceType.RURAL_AREAS: [MarketSize.SMALL],
}


@dataclass
class LocationPreference:
    """
    One weighted location preference.

    cities/states/climates/market_sizes are explicit match rules. Any
    rule the team satisfies makes this preference a full match; empty
    rules are ignored. A "*" city entry means "anywhere".
    """

    type: PreferenceType
    weight: float
    cities: List[str] = field(default_factory=list)
    states: List[str] = field(default_factory=list)
    climates: List[Climate] = field(default_factory=list)
    market_sizes: List[MarketSize] = field(default_factory=list)
    current_team_match: bool = False
    tax_sensitivity: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "type": self.type.value,
            "weight": self.weight,
            "cities": list(self.cities),
            "states": list(self.states),
            "climates": [c.value for c in self.climates],
            "market_sizes": [m.value for m in self.market_sizes],
            "current_team_match": self.current_team_match,
            "tax_sensitivity": self.tax_sensitivity,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LocationPreference":
        """Create from dictionary."""
        return cls(
            type=PreferenceType(data["type"]),
            weight=data.get("weight", 0.0),
            cities=list(data.get("cities", [])),
            states=list(data.get("states", [])),
            climates=[Climate(c) for c in data.get("climates", [])],
            market_sizes=[MarketSize(m) for m in data.get("market_sizes", [])],
            current_team_match=data.get("current_team_match", False),
            tax_sensitivity=data.get("tax_sensitivity", 0.0),
        )


# =============================================================================
# Generation
# =============================================================================

def _weighted_choice(rng: random.Random, options: List[PreferenceType], weights: List[float]) -> PreferenceType:
    return rng.choices(options, weights)[0]


def _select_primary_type(player: PlayerRecord, rng: random.Random) -> PreferenceType:
    weights = dict(PRIMARY_TYPE_WEIGHTS)

    if player.position == Position.WR:
        weights[PreferenceType.BIG_MARKETS] *= 1.5
    if player.age >= 30:
        weights[PreferenceType.WINNING_TEAMS] *= 2.0
        weights[PreferenceType.STABLE_MARKETS] *= 1.5

    options = list(weights.keys())
    return _weighted_choice(rng, options, [weights[o] for o in options])


def _select_secondary_type(primary: PreferenceType, rng: random.Random) -> PreferenceType:
    weights = dict(SECONDARY_TYPE_WEIGHTS)
    if primary in weights:
        weights[primary] *= 0.3

    options = list(weights.keys())
    return _weighted_choice(rng, options, [weights[o] for o in options])


def _build_preference(
    pref_type: PreferenceType,
    weight: float,
    reference: ReferenceData,
) -> LocationPreference:
    return LocationPreference(
        type=pref_type,
        weight=weight,
        cities=reference.cities_for(pref_type.value),
        climates=list(_TYPE_CLIMATES.get(pref_type, [])),
        market_sizes=list(_TYPE_MARKET_SIZES.get(pref_type, [])),
    )


def generate_location_preferences(
    player: PlayerRecord,
    rng: random.Random,
    reference: ReferenceData,
) -> List[LocationPreference]:
    """
    Generate a primary (always) and optional secondary preference.

    Args:
        player: Validated player record
        rng: Random source
        reference: Table supplying the cities for each preference type

    Returns:
        One or two LocationPreference values, primary first
    """
    primary = _select_primary_type(player, rng)
    preferences = [_build_preference(primary, PRIMARY_WEIGHT, reference)]

    if rng.random() < SECONDARY_CHANCE:
        secondary = _select_secondary_type(primary, rng)
        preferences.append(_build_preference(secondary, SECONDARY_WEIGHT, reference))

    return preferences


# =============================================================================
# Team Fit
# =============================================================================

def _tax_burden(team: TeamLocation) -> float:
    """0.0 for a tax-free state, 1.0 at or above the assumed high-tax rate."""
    return min(1.0, team.effective_tax_rate / ASSUMED_HIGH_TAX_RATE)


def _type_match(
    pref: LocationPreference,
    team: TeamLocation,
    current_team_id: Optional[str],
) -> float:
    if pref.type == PreferenceType.BIG_MARKETS:
        return {MarketSize.LARGE: 1.0, MarketSize.MEDIUM: 0.75, MarketSize.SMALL: 0.0}[team.market_size]
    if pref.type == PreferenceType.RURAL_AREAS:
        return {MarketSize.SMALL: 1.0, MarketSize.MEDIUM: 0.5, MarketSize.LARGE: 0.0}[team.market_size]
    if pref.type == PreferenceType.WARM_WEATHER:
        return {Climate.WARM: 1.0, Climate.TEMPERATE: 0.5, Climate.COLD: 0.0}[team.climate]
    if pref.type == PreferenceType.COLD_WEATHER:
        return {Climate.COLD: 1.0, Climate.TEMPERATE: 0.5, Climate.WARM: 0.0}[team.climate]
    if pref.type == PreferenceType.CURRENT_TEAM:
        return 1.0 if current_team_id is not None and team.team_id == current_team_id else 0.0
    if pref.type == PreferenceType.WINNING_TEAMS:
        return 1.0 if team.is_contender else 0.3
    if pref.type == PreferenceType.STABLE_MARKETS:
        return 1.0 if team.is_stable else 0.4
    if pref.type == PreferenceType.TAX_CONSCIOUS:
        return 1.0 - _tax_burden(team) * pref.tax_sensitivity
    if pref.type == PreferenceType.NEUTRAL:
        return NEUTRAL_MATCH
    raise ValueError(f"Unhandled preference type: {pref.type}")


def _explicit_match(pref: LocationPreference, team: TeamLocation) -> bool:
    cities = [c for c in pref.cities if c != "*"]
    if cities and team.city in cities:
        return True
    if pref.states and team.state.upper() in {s.upper() for s in pref.states}:
        return True
    if pref.climates and team.climate in pref.climates:
        return True
    if pref.market_sizes and team.market_size in pref.market_sizes:
        return True
    return False


def preference_match(
    pref: LocationPreference,
    team: TeamLocation,
    current_team_id: Optional[str] = None,
) -> float:
    """How well one preference is satisfied by a team (0-1)."""
    match = _type_match(pref, team, current_team_id)
    if _explicit_match(pref, team):
        match = 1.0

    # Tax-sensitive non-tax preferences lose some appeal in high-tax states
    if pref.type != PreferenceType.TAX_CONSCIOUS and pref.tax_sensitivity > 0:
        match *= 1.0 - 0.5 * _tax_burden(team) * pref.tax_sensitivity

    return max(0.0, min(1.0, match))


def calculate_location_match(
    preferences: List[LocationPreference],
    team: TeamLocation,
    current_team_id: Optional[str] = None,
) -> float:
    """
    Weighted mean of per-preference matches.

    Args:
        preferences: Player's location preferences
        team: Team being considered
        current_team_id: Player's current team, for current_team preferences

    Returns:
        Match score 0-1; 0.5 when there are no weighted preferences
    """
    total_weight = sum(p.weight for p in preferences if p.weight > 0)
    if total_weight <= 0:
        return NEUTRAL_MATCH

    total = sum(
        preference_match(p, team, current_team_id) * p.weight
        for p in preferences
        if p.weight > 0
    )
    return total / total_weight

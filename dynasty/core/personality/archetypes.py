"""
Personality Archetypes.

An archetype is a named template of base labels, weights, behaviors and
hidden-slider anchors. Individual personalities are sampled around it.

The full table ships as versioned JSON (dynasty/data/archetypes.json) and is
validated with pydantic on load. If the table cannot be read or fails
validation, generation falls back to the small built-in table below.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from dynasty.core.personality.traits import (
    DeadlineBehavior,
    LocationTrait,
    NegotiationStyle,
    RiskTolerance,
    TeamLoyalty,
)

logger = logging.getLogger(__name__)


DEFAULT_TABLE_PATH = Path(__file__).parent.parent.parent / "data" / "archetypes.json"

FEEDBACK_CATEGORIES = ("reject_low_offer", "counter_offer", "holdout_warning", "accept", "gm_note")

# Used when an archetype leaves a feedback category empty
DEFAULT_FEEDBACK: Dict[str, List[str]] = {
    "reject_low_offer": ["I'm not interested in this offer."],
    "counter_offer": ["I need better terms to consider this."],
    "holdout_warning": ["I'm willing to hold out for better terms."],
    "accept": ["This offer meets my expectations."],
    "gm_note": ["Player evaluated the offer based on their preferences."],
}

# Hidden slider anchors shared by every archetype: (base, variance)
DEFAULT_HIDDEN_SLIDERS: Dict[str, Tuple[float, float]] = {
    "ego": (0.5, 0.3),
    "injury_anxiety": (0.3, 0.4),
    "agent_quality": (0.6, 0.3),
    "scheme_fit": (0.7, 0.3),
    "role_promise": (0.6, 0.3),
    "tax_sensitivity": (0.4, 0.3),
    "endorsement_value": (0.5, 0.3),
}

# Random spread applied around archetype behavior bases
BEHAVIOR_VARIANCE: Dict[str, float] = {
    "holdout_threshold": 0.15,
    "counter_offer_multiplier": 0.1,
    "deadline_softening": 0.01,
    "comparison_weight": 0.2,
    "deadline_susceptibility": 0.2,
}

WEIGHT_VARIANCE = 0.2


@dataclass
class Archetype:
    """
    Base values a personality is sampled around.

    Attributes:
        key: Stable identifier (e.g. "aggressive_negotiator")
        name: Display name
        rarity: Relative frequency weight before player-specific modifiers
        weights: money/winning/location/guarantee/length priority anchors
        behaviors: holdout threshold, counter multiplier, etc.
        hidden_sliders: Overrides for DEFAULT_HIDDEN_SLIDERS base values
        feedback_templates: Message templates per decision category
    """

    key: str
    name: str
    rarity: float
    negotiation_style: NegotiationStyle
    risk_tolerance: RiskTolerance
    team_loyalty: TeamLoyalty
    location_preference: LocationTrait
    deadline_behavior: DeadlineBehavior
    weights: Dict[str, float] = field(default_factory=dict)
    behaviors: Dict[str, float] = field(default_factory=dict)
    hidden_sliders: Dict[str, float] = field(default_factory=dict)
    feedback_templates: Dict[str, List[str]] = field(default_factory=dict)

    def hidden_slider_anchor(self, slider: str) -> Tuple[float, float]:
        """Base and variance for a hidden slider, honoring overrides."""
        base, variance = DEFAULT_HIDDEN_SLIDERS[slider]
        return self.hidden_sliders.get(slider, base), variance

    def templates_for(self, category: str) -> List[str]:
        templates = self.feedback_templates.get(category)
        return list(templates) if templates else list(DEFAULT_FEEDBACK[category])


@dataclass
class ReferenceData:
    """Archetype and location tables the generator reads from."""

    version: int
    archetypes: Dict[str, Archetype]
    location_cities: Dict[str, List[str]]
    source: str = "builtin"

    def get_archetype(self, key: str) -> Archetype:
        return self.archetypes[key]

    def cities_for(self, preference_type: str) -> List[str]:
        return list(self.location_cities.get(preference_type, ["Unknown"]))


# =============================================================================
# Built-in Fallback Table
# =============================================================================

def _builtin_archetypes() -> Dict[str, Archetype]:
    return {
        "aggressive_negotiator": Archetype(
            key="aggressive_negotiator",
            name="Aggressive Negotiator",
            rarity=0.15,
            negotiation_style=NegotiationStyle.AGGRESSIVE,
            risk_tolerance=RiskTolerance.HIGH,
            team_loyalty=TeamLoyalty.LOW,
            location_preference=LocationTrait.BIG_MARKETS,
            deadline_behavior=DeadlineBehavior.PRESSURE_TEAM,
            weights={
                "money_priority": 0.9,
                "winning_priority": 0.4,
                "location_priority": 0.7,
                "guarantee_priority": 0.6,
                "length_priority": 0.3,
            },
            behaviors={
                "holdout_threshold": 0.8,
                "counter_offer_multiplier": 1.3,
                "deadline_softening": 0.0,
                "comparison_weight": 0.9,
                "deadline_susceptibility": 0.1,
            },
            hidden_sliders={"ego": 0.7},
            feedback_templates={
                "reject_low_offer": ["I'm worth more than this."],
                "counter_offer": ["I need more guaranteed money."],
                "holdout_warning": ["I'm not playing for less than market value."],
                "accept": ["This offer meets my expectations."],
                "gm_note": ["Player weighed money ({money_priority}) and location heavily."],
            },
        ),
        "patient_negotiator": Archetype(
            key="patient_negotiator",
            name="Patient Negotiator",
            rarity=0.25,
            negotiation_style=NegotiationStyle.PATIENT,
            risk_tolerance=RiskTolerance.MEDIUM,
            team_loyalty=TeamLoyalty.MEDIUM,
            location_preference=LocationTrait.NEUTRAL,
            deadline_behavior=DeadlineBehavior.WAIT_FOR_BEST,
            weights={
                "money_priority": 0.7,
                "winning_priority": 0.6,
                "location_priority": 0.4,
                "guarantee_priority": 0.8,
                "length_priority": 0.7,
            },
            behaviors={
                "holdout_threshold": 0.6,
                "counter_offer_multiplier": 1.1,
                "deadline_softening": 0.02,
                "comparison_weight": 0.7,
                "deadline_susceptibility": 0.3,
            },
            feedback_templates={
                "reject_low_offer": ["I'm willing to wait for the right opportunity."],
                "counter_offer": ["I need more guarantees for a deal of this length."],
                "holdout_warning": ["I'm not rushing into anything that doesn't feel right."],
            },
        ),
        "desperate_signer": Archetype(
            key="desperate_signer",
            name="Desperate Signer",
            rarity=0.2,
            negotiation_style=NegotiationStyle.DESPERATE,
            risk_tolerance=RiskTolerance.LOW,
            team_loyalty=TeamLoyalty.HIGH,
            location_preference=LocationTrait.NEUTRAL,
            deadline_behavior=DeadlineBehavior.ACCEPT_QUICKLY,
            weights={
                "money_priority": 0.5,
                "winning_priority": 0.7,
                "location_priority": 0.2,
                "guarantee_priority": 0.9,
                "length_priority": 0.8,
            },
            behaviors={
                "holdout_threshold": 0.3,
                "counter_offer_multiplier": 1.05,
                "deadline_softening": 0.05,
                "comparison_weight": 0.4,
                "deadline_susceptibility": 0.6,
            },
            hidden_sliders={"ego": 0.3},
            feedback_templates={
                "reject_low_offer": ["I really want to play, but I need some guarantees."],
                "counter_offer": ["Could you add a little more guaranteed money?"],
                "holdout_warning": ["I'm not trying to hold out, I just need security."],
            },
        ),
        "conservative_veteran": Archetype(
            key="conservative_veteran",
            name="Conservative Veteran",
            rarity=0.15,
            negotiation_style=NegotiationStyle.CONSERVATIVE,
            risk_tolerance=RiskTolerance.VERY_LOW,
            team_loyalty=TeamLoyalty.MEDIUM,
            location_preference=LocationTrait.STABLE_MARKETS,
            deadline_behavior=DeadlineBehavior.SEEK_SECURITY,
            weights={
                "money_priority": 0.7,
                "winning_priority": 0.5,
                "location_priority": 0.6,
                "guarantee_priority": 0.9,
                "length_priority": 0.8,
            },
            behaviors={
                "holdout_threshold": 0.7,
                "counter_offer_multiplier": 1.2,
                "deadline_softening": 0.01,
                "comparison_weight": 0.8,
                "deadline_susceptibility": 0.2,
            },
            hidden_sliders={"injury_anxiety": 0.5},
            feedback_templates={
                "reject_low_offer": ["I need more guaranteed money for my family's security."],
                "counter_offer": ["I want more guarantees, even if it means less total money."],
                "holdout_warning": ["I'm not playing without proper guarantees."],
            },
        ),
    }


BUILTIN_LOCATION_CITIES: Dict[str, List[str]] = {
    "big_markets": ["New York", "Los Angeles", "Chicago", "Dallas", "Houston", "Miami"],
    "warm_weather": ["Miami", "Los Angeles", "Tampa", "Phoenix", "San Diego", "Orlando"],
    "cold_weather": ["Green Bay", "Buffalo", "Chicago", "Cleveland", "Denver"],
    "rural_areas": ["Green Bay", "Buffalo", "Jacksonville", "Cleveland", "Cincinnati"],
    "neutral": ["*"],
    "winning_teams": ["*"],
    "stable_markets": ["*"],
    "tax_conscious": ["Dallas", "Houston", "Miami", "Tampa", "Jacksonville", "Seattle", "Las Vegas", "Nashville"],
}


def builtin_reference_data() -> ReferenceData:
    """The small table used when external reference data is unavailable."""
    return ReferenceData(
        version=0,
        archetypes=_builtin_archetypes(),
        location_cities={k: list(v) for k, v in BUILTIN_LOCATION_CITIES.items()},
        source="builtin",
    )


# =============================================================================
# External Table Schema (pydantic)
# =============================================================================

class ArchetypeTraitsSchema(BaseModel):
    """Label block of an archetype entry."""
    negotiation_style: NegotiationStyle
    risk_tolerance: RiskTolerance
    team_loyalty: TeamLoyalty
    location_preference: LocationTrait
    deadline_behavior: DeadlineBehavior

    @field_validator("location_preference", mode="before")
    @classmethod
    def _normalize_any(cls, value):
        # Older tables used "any" for players with no location lean
        return "neutral" if value == "any" else value


class ArchetypeWeightsSchema(BaseModel):
    money_priority: float = Field(..., ge=0.0, le=1.0)
    winning_priority: float = Field(..., ge=0.0, le=1.0)
    location_priority: float = Field(..., ge=0.0, le=1.0)
    guarantee_priority: float = Field(..., ge=0.0, le=1.0)
    length_priority: float = Field(..., ge=0.0, le=1.0)


class ArchetypeBehaviorsSchema(BaseModel):
    holdout_threshold: float = Field(..., ge=0.0, le=1.0)
    counter_offer_multiplier: float = Field(..., ge=1.0, le=2.0)
    deadline_softening: float = Field(..., ge=0.0, le=0.1)
    comparison_weight: float = Field(..., ge=0.0, le=1.0)
    deadline_susceptibility: float = Field(..., ge=0.0, le=1.0)


class ArchetypeSchema(BaseModel):
    """One entry of personality_types in the JSON table."""
    name: Optional[str] = None
    rarity: float = Field(..., gt=0.0, le=1.0)
    traits: ArchetypeTraitsSchema
    weights: ArchetypeWeightsSchema
    behaviors: ArchetypeBehaviorsSchema
    hidden_sliders: Dict[str, float] = Field(default_factory=dict)
    feedback_templates: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)

    @field_validator("hidden_sliders")
    @classmethod
    def _known_sliders(cls, value: Dict[str, float]) -> Dict[str, float]:
        for slider, base in value.items():
            if slider not in DEFAULT_HIDDEN_SLIDERS:
                raise ValueError(f"Unknown hidden slider: {slider}")
            if not 0.0 <= base <= 1.0:
                raise ValueError(f"Hidden slider {slider} out of range: {base}")
        return value

    def to_archetype(self, key: str) -> Archetype:
        templates = {}
        for category, value in self.feedback_templates.items():
            if category not in FEEDBACK_CATEGORIES:
                continue  # e.g. location_comment, unused by the engine
            templates[category] = [value] if isinstance(value, str) else list(value)

        return Archetype(
            key=key,
            name=self.name or key.replace("_", " ").title(),
            rarity=self.rarity,
            negotiation_style=self.traits.negotiation_style,
            risk_tolerance=self.traits.risk_tolerance,
            team_loyalty=self.traits.team_loyalty,
            location_preference=self.traits.location_preference,
            deadline_behavior=self.traits.deadline_behavior,
            weights=self.weights.model_dump(),
            behaviors=self.behaviors.model_dump(),
            hidden_sliders=dict(self.hidden_sliders),
            feedback_templates=templates,
        )


class LocationEntrySchema(BaseModel):
    cities: List[str] = Field(default_factory=list)


class ReferenceTableSchema(BaseModel):
    """Top-level layout of the archetype/location JSON table."""
    version: int = 1
    personality_types: Dict[str, ArchetypeSchema] = Field(..., min_length=1)
    location_preferences: Dict[str, LocationEntrySchema] = Field(default_factory=dict)

    def to_reference_data(self, source: str) -> ReferenceData:
        cities = {k: list(v) for k, v in BUILTIN_LOCATION_CITIES.items()}
        for pref_type, entry in self.location_preferences.items():
            cities[pref_type] = list(entry.cities) or ["*"]
        return ReferenceData(
            version=self.version,
            archetypes={key: entry.to_archetype(key) for key, entry in self.personality_types.items()},
            location_cities=cities,
            source=source,
        )


# =============================================================================
# Loading
# =============================================================================

def load_reference_data(path: Optional[Union[str, Path]] = None) -> ReferenceData:
    """
    Load and validate the archetype/location table.

    Never raises for missing or bad data: any read, parse or validation
    failure is logged and the built-in table is returned instead.

    Args:
        path: JSON file to load. Defaults to the packaged table.

    Returns:
        ReferenceData from the file, or the built-in fallback
    """
    source = Path(path) if path else DEFAULT_TABLE_PATH
    try:
        with open(source, encoding="utf-8") as f:
            raw = json.load(f)
        table = ReferenceTableSchema.model_validate(raw)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Could not load archetype table from {source}, using built-in defaults: {e}")
        return builtin_reference_data()

    logger.debug(f"Loaded {len(table.personality_types)} archetypes (v{table.version}) from {source}")
    return table.to_reference_data(source=str(source))


# Singleton reference data, loaded once on first use
_reference: Optional[ReferenceData] = None


def get_reference_data() -> ReferenceData:
    """Get the shared reference tables, loading them on first access."""
    global _reference
    if _reference is None:
        from dynasty.config import get_config

        _reference = load_reference_data(get_config().archetype_table_path)
    return _reference


def set_reference_data(reference: Optional[ReferenceData]) -> None:
    """Replace (or with None, drop) the shared reference tables."""
    global _reference
    _reference = reference

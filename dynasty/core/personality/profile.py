"""
Personality Profile.

The Personality is the persistent record attached to one player. It is
created once by generation, read by contract evaluation, and mutated in
place by evolution for the rest of the player's career.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional, Set

from dynasty.core.enums import Position
from dynasty.core.personality.evolution import EvolutionLedger
from dynasty.core.personality.locations import LocationPreference
from dynasty.core.personality.traits import (
    TRAIT_TARGETS,
    DeadlineBehavior,
    LocationTrait,
    MarketTrend,
    NegotiationStyle,
    RiskTolerance,
    TeamLoyalty,
    TradeDeadlineBehavior,
    TraitName,
    TraitSection,
)


# Allowed drift of the weight sum before it counts as broken
WEIGHT_SUM_TOLERANCE = 1e-6


@dataclass
class PersonalityTraits:
    """Label traits. They bias generation and feedback, not scoring."""

    negotiation_style: NegotiationStyle
    risk_tolerance: RiskTolerance
    team_loyalty: TeamLoyalty
    location_preference: LocationTrait
    deadline_behavior: DeadlineBehavior

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name).value for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "PersonalityTraits":
        return cls(
            negotiation_style=NegotiationStyle(data["negotiation_style"]),
            risk_tolerance=RiskTolerance(data["risk_tolerance"]),
            team_loyalty=TeamLoyalty(data["team_loyalty"]),
            location_preference=LocationTrait(data["location_preference"]),
            deadline_behavior=DeadlineBehavior(data["deadline_behavior"]),
        )


@dataclass
class _FloatRecord:
    """Shared dict conversion for the all-float sub-records."""

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict):
        return cls(**{f.name: float(data[f.name]) for f in fields(cls)})


@dataclass
class Weights(_FloatRecord):
    """
    Relative priorities when judging an offer.

    Always sums to 1.0 once normalize() has run.
    """

    money_priority: float
    winning_priority: float
    location_priority: float
    guarantee_priority: float
    length_priority: float

    def total(self) -> float:
        return sum(getattr(self, f.name) for f in fields(self))

    def is_normalized(self) -> bool:
        return abs(self.total() - 1.0) <= WEIGHT_SUM_TOLERANCE

    def normalize(self, frozen: Optional[Set[str]] = None) -> None:
        """
        Clamp each weight to [0, 1] and rescale so they sum to 1.0.

        Weights named in frozen keep their value; the others are rescaled
        to fill what is left. If every weight is frozen, or the frozen
        weights alone exceed 1.0, all weights are rescaled together.
        """
        names = [f.name for f in fields(self)]
        for name in names:
            setattr(self, name, max(0.0, min(1.0, getattr(self, name))))

        frozen = set(frozen or ()) & set(names)
        idle = [name for name in names if name not in frozen]
        held = sum(getattr(self, name) for name in frozen)
        if frozen and idle and held <= 1.0:
            remaining = 1.0 - held
            idle_total = sum(getattr(self, name) for name in idle)
            for name in idle:
                if idle_total > 0:
                    setattr(self, name, getattr(self, name) * remaining / idle_total)
                else:
                    setattr(self, name, remaining / len(idle))
            return

        total = self.total()
        if total <= 0:
            for name in names:
                setattr(self, name, 1.0 / len(names))
            return
        for name in names:
            setattr(self, name, getattr(self, name) / total)


@dataclass
class Behaviors(_FloatRecord):
    """Negotiation mechanics. Ranges are declared in traits.TRAIT_TARGETS."""

    holdout_threshold: float
    counter_offer_multiplier: float
    deadline_softening: float
    comparison_weight: float
    deadline_susceptibility: float


@dataclass
class HiddenSliders(_FloatRecord):
    """Private 0-1 dimensions used only to modulate scoring."""

    ego: float
    injury_anxiety: float
    agent_quality: float
    scheme_fit: float
    role_promise: float
    tax_sensitivity: float
    endorsement_value: float


@dataclass
class FeedbackTemplates:
    """Message templates per decision category (each list non-empty)."""

    reject_low_offer: List[str]
    counter_offer: List[str]
    holdout_warning: List[str]
    accept: List[str]
    gm_note: List[str]

    def for_category(self, category: str) -> List[str]:
        return getattr(self, category)

    def to_dict(self) -> dict:
        return {f.name: list(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict) -> "FeedbackTemplates":
        return cls(**{f.name: list(data[f.name]) for f in fields(cls)})


@dataclass
class Blending:
    """
    Provenance of a personality mixed from two archetypes.

    blend_ratio 0.0 means a pure primary archetype.
    """

    primary_archetype: str
    secondary_archetype: Optional[str] = None
    blend_ratio: float = 0.0
    inherited_traits: List[str] = field(default_factory=list)
    resolved_params: Dict[str, float] = field(default_factory=dict)

    @property
    def is_blended(self) -> bool:
        return self.secondary_archetype is not None and self.blend_ratio > 0

    def to_dict(self) -> dict:
        return {
            "primary_archetype": self.primary_archetype,
            "secondary_archetype": self.secondary_archetype,
            "blend_ratio": self.blend_ratio,
            "inherited_traits": list(self.inherited_traits),
            "resolved_params": dict(self.resolved_params),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Blending":
        return cls(
            primary_archetype=data["primary_archetype"],
            secondary_archetype=data.get("secondary_archetype"),
            blend_ratio=data.get("blend_ratio", 0.0),
            inherited_traits=list(data.get("inherited_traits", [])),
            resolved_params=dict(data.get("resolved_params", {})),
        )


@dataclass
class ExtensionTerms:
    """Minimum terms a traded player demands before reporting."""

    min_years: int
    min_guaranteed_pct: float
    apy_multiplier: float

    def to_dict(self) -> dict:
        return {
            "min_years": self.min_years,
            "min_guaranteed_pct": self.min_guaranteed_pct,
            "apy_multiplier": self.apy_multiplier,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExtensionTerms":
        return cls(
            min_years=int(data["min_years"]),
            min_guaranteed_pct=float(data["min_guaranteed_pct"]),
            apy_multiplier=float(data["apy_multiplier"]),
        )


@dataclass
class TradePreferences:
    requires_extension_probability: float
    reporting_delay_if_unhappy: int
    trade_deadline_behavior: TradeDeadlineBehavior
    extension_terms: ExtensionTerms

    def to_dict(self) -> dict:
        return {
            "requires_extension_probability": self.requires_extension_probability,
            "reporting_delay_if_unhappy": self.reporting_delay_if_unhappy,
            "trade_deadline_behavior": self.trade_deadline_behavior.value,
            "extension_terms": self.extension_terms.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TradePreferences":
        return cls(
            requires_extension_probability=float(data["requires_extension_probability"]),
            reporting_delay_if_unhappy=int(data["reporting_delay_if_unhappy"]),
            trade_deadline_behavior=TradeDeadlineBehavior(data["trade_deadline_behavior"]),
            extension_terms=ExtensionTerms.from_dict(data["extension_terms"]),
        )


@dataclass
class Percentiles(_FloatRecord):
    p25: float
    p50: float
    p75: float
    p90: float


@dataclass
class MarketContext:
    """Position market snapshot taken when the personality was generated."""

    position: Position
    apy_percentiles: Percentiles
    guarantee_percentiles: Percentiles
    supply_pressure: float
    market_trend: MarketTrend
    last_updated: int

    def to_dict(self) -> dict:
        return {
            "position": self.position.value,
            "apy_percentiles": self.apy_percentiles.to_dict(),
            "guarantee_percentiles": self.guarantee_percentiles.to_dict(),
            "supply_pressure": self.supply_pressure,
            "market_trend": self.market_trend.value,
            "last_updated": self.last_updated,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MarketContext":
        return cls(
            position=Position(data["position"]),
            apy_percentiles=Percentiles.from_dict(data["apy_percentiles"]),
            guarantee_percentiles=Percentiles.from_dict(data["guarantee_percentiles"]),
            supply_pressure=float(data["supply_pressure"]),
            market_trend=MarketTrend(data["market_trend"]),
            last_updated=int(data["last_updated"]),
        )


@dataclass
class Personality:
    """
    A specific player's personality.

    Owned by exactly one player. Callers must serialize concurrent
    mutation of the same personality; nothing here is locked.
    """

    player_id: str
    position: Position
    age_at_creation: int
    created_year: int
    archetype: str
    rarity: float
    traits: PersonalityTraits
    weights: Weights
    behaviors: Behaviors
    hidden_sliders: HiddenSliders
    feedback_templates: FeedbackTemplates
    blending: Blending
    trade_preferences: TradePreferences
    market_context: Optional[MarketContext]
    location_preferences: List[LocationPreference] = field(default_factory=list)
    evolution: EvolutionLedger = field(default_factory=EvolutionLedger)

    def current_age(self, current_year: int) -> int:
        """Age in a given year, derived from the age at creation."""
        return self.age_at_creation + max(0, current_year - self.created_year)

    # =========================================================================
    # Trait Access (used by evolution)
    # =========================================================================

    def _section(self, section: TraitSection):
        if section is TraitSection.WEIGHT:
            return self.weights
        if section is TraitSection.BEHAVIOR:
            return self.behaviors
        if section is TraitSection.HIDDEN_SLIDER:
            return self.hidden_sliders
        if section is TraitSection.LABEL:
            return self.traits
        raise ValueError(f"Unhandled trait section: {section}")

    def get_trait_value(self, trait: TraitName):
        """
        Current value of a mutable trait.

        Returns a float for numeric traits and the enum member for
        ordinal label traits.
        """
        target = TRAIT_TARGETS[trait]
        return getattr(self._section(target.section), target.attribute)

    def set_trait_value(self, trait: TraitName, value) -> None:
        """Write a trait, clamping numeric values to their declared range."""
        target = TRAIT_TARGETS[trait]
        if target.section is not TraitSection.LABEL:
            value = target.clamp(value)
        setattr(self._section(target.section), target.attribute, value)

    def numeric_snapshot(self) -> Dict[str, float]:
        """Every numeric trait by name, for templating and diagnostics."""
        snapshot = {}
        snapshot.update(self.weights.to_dict())
        snapshot.update(self.behaviors.to_dict())
        snapshot.update(self.hidden_sliders.to_dict())
        return snapshot

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "player_id": self.player_id,
            "position": self.position.value,
            "age_at_creation": self.age_at_creation,
            "created_year": self.created_year,
            "archetype": self.archetype,
            "rarity": self.rarity,
            "traits": self.traits.to_dict(),
            "weights": self.weights.to_dict(),
            "behaviors": self.behaviors.to_dict(),
            "hidden_sliders": self.hidden_sliders.to_dict(),
            "feedback_templates": self.feedback_templates.to_dict(),
            "blending": self.blending.to_dict(),
            "trade_preferences": self.trade_preferences.to_dict(),
            "market_context": self.market_context.to_dict() if self.market_context else None,
            "location_preferences": [p.to_dict() for p in self.location_preferences],
            "evolution": self.evolution.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Personality":
        """Create from dictionary."""
        market_context = data.get("market_context")
        return cls(
            player_id=data["player_id"],
            position=Position(data["position"]),
            age_at_creation=int(data["age_at_creation"]),
            created_year=int(data["created_year"]),
            archetype=data["archetype"],
            rarity=float(data["rarity"]),
            traits=PersonalityTraits.from_dict(data["traits"]),
            weights=Weights.from_dict(data["weights"]),
            behaviors=Behaviors.from_dict(data["behaviors"]),
            hidden_sliders=HiddenSliders.from_dict(data["hidden_sliders"]),
            feedback_templates=FeedbackTemplates.from_dict(data["feedback_templates"]),
            blending=Blending.from_dict(data["blending"]),
            trade_preferences=TradePreferences.from_dict(data["trade_preferences"]),
            market_context=MarketContext.from_dict(market_context) if market_context else None,
            location_preferences=[
                LocationPreference.from_dict(p) for p in data.get("location_preferences", [])
            ],
            evolution=EvolutionLedger.from_dict(data.get("evolution", {})),
        )

    def __str__(self) -> str:
        return f"{self.archetype.replace('_', ' ').title()}"

    def __repr__(self) -> str:
        return f"Personality(player_id={self.player_id!r}, archetype={self.archetype})"

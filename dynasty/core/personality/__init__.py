"""
Player Personality System.

Every player gets a persistent personality: an archetype, label traits,
priority weights, negotiation behaviors and hidden sliders. The contract
engine reads it; the evolution engine reshapes it over a career.
"""

from dynasty.core.personality.traits import (
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
from dynasty.core.personality.archetypes import (
    Archetype,
    ReferenceData,
    builtin_reference_data,
    get_reference_data,
    load_reference_data,
    set_reference_data,
)
from dynasty.core.personality.locations import (
    LocationPreference,
    PreferenceType,
    calculate_location_match,
    generate_location_preferences,
)
from dynasty.core.personality.evolution import (
    AgeMilestone,
    EvolutionCooldown,
    EvolutionLedger,
    LifeEvent,
    LifeEventType,
    MarketExperience,
    MarketExperienceType,
    PersonalityChange,
    add_life_event,
    add_market_experience,
    apply_change,
    apply_changes,
    get_change_history,
    get_evolution_summary,
    has_trait_evolved,
    reset_evolution,
    should_evolve,
    tick,
)
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
from dynasty.core.personality.generation import (
    generate_personalities,
    generate_personality,
    get_archetype_distribution,
)

__all__ = [
    # Labels
    "NegotiationStyle",
    "RiskTolerance",
    "TeamLoyalty",
    "LocationTrait",
    "DeadlineBehavior",
    "TradeDeadlineBehavior",
    "MarketTrend",
    "TraitName",
    "TraitSection",
    # Reference data
    "Archetype",
    "ReferenceData",
    "builtin_reference_data",
    "get_reference_data",
    "load_reference_data",
    "set_reference_data",
    # Locations
    "LocationPreference",
    "PreferenceType",
    "calculate_location_match",
    "generate_location_preferences",
    # Profile
    "Personality",
    "PersonalityTraits",
    "Weights",
    "Behaviors",
    "HiddenSliders",
    "FeedbackTemplates",
    "Blending",
    "ExtensionTerms",
    "TradePreferences",
    "Percentiles",
    "MarketContext",
    # Generation
    "generate_personality",
    "generate_personalities",
    "get_archetype_distribution",
    # Evolution
    "LifeEventType",
    "MarketExperienceType",
    "PersonalityChange",
    "EvolutionCooldown",
    "AgeMilestone",
    "LifeEvent",
    "MarketExperience",
    "EvolutionLedger",
    "add_life_event",
    "add_market_experience",
    "apply_change",
    "apply_changes",
    "tick",
    "get_evolution_summary",
    "get_change_history",
    "has_trait_evolved",
    "should_evolve",
    "reset_evolution",
]

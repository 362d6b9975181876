"""
Contract Decision Engine.

Scores an offer against a personality and turns the score into a
decision. Scoring runs in three stages, each returning a 0-1 score:

1. Base score: personality weights applied to the offer's normalized terms
2. Hidden sliders: ego, injury anxiety, agent, fit, tax, endorsements
3. Market dynamics: supply pressure, trend, percentile anchors, competing offers

A fourth stage maps the final score onto accept / holdout / reject /
counter / shortlist using the cutoffs in DecisionConfig.

Evaluation never mutates the personality. With no rng supplied, feedback
templates are chosen from a generator seeded by the inputs, so repeated
evaluations are identical.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from dynasty.core.contracts.feedback import generate_feedback, generate_gm_note, stable_rng
from dynasty.core.contracts.offer import ContractEvaluationContext, ContractOffer
from dynasty.core.models.team import ASSUMED_HIGH_TAX_RATE, MarketSize
from dynasty.core.personality.profile import ExtensionTerms, Personality
from dynasty.core.personality.traits import MarketTrend, NegotiationStyle, TradeDeadlineBehavior

logger = logging.getLogger(__name__)


class Decision(Enum):
    ACCEPT = "accept"
    COUNTER = "counter"
    REJECT = "reject"
    HOLDOUT = "holdout"
    SHORTLIST = "shortlist"


@dataclass
class DecisionConfig:
    """
    All tunable parameters for contract decisions.

    Exposed as central config for easy tuning without code changes.

    Every scoring stage clamps to [0, 1]. Multipliers therefore order
    scores strictly only below the ceiling: an offer strong enough to
    saturate scores 1.0 under both a rising and a falling market.
    """

    # === DECISION CUTOFFS ===
    accept_cutoff: float = 0.9             # At or above: accept
    reject_cutoff: float = 0.4             # Below (and above holdout): reject
    counter_floor: float = 0.55            # Counter band is [counter_floor, accept_cutoff)

    # === COMPETING OFFERS ===
    competing_offer_margin: float = 0.20   # Rival APY must beat ours by this much to matter

    # === MARKET DYNAMICS ===
    supply_pressure_strength: float = 0.3  # score *= 1 + (pressure - 0.5) * strength
    trend_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "rising": 1.08,
        "stable": 1.00,
        "falling": 0.92,
    })
    apy_anchor_boost: float = 0.10         # Above p75 APY, scaled by comparison_weight
    guarantee_anchor_boost: float = 0.05   # Above p75 guarantee %, scaled by comparison_weight

    # === HIDDEN SLIDERS ===
    ego_disrespect_strength: float = 0.5   # Penalty per unit shortfall below p50 APY
    injury_anxiety_strength: float = 0.2   # Weight of guarantee term deviation
    agent_smoothing: float = 0.15          # Pull toward 0.5 at agent_quality = 1
    fit_threshold: float = 0.7             # team_quality and location_match must both reach this
    fit_boost: float = 0.10                # Max boost from scheme fit / role promise
    tax_strength: float = 0.10             # Spread between zero-tax and high-tax states
    endorsement_boost: float = 0.10        # Max boost for non-linemen in large markets

    # === COUNTER OFFERS ===
    ego_counter_bump: float = 0.05
    agent_counter_bump: float = 0.05
    injury_guarantee_bump: float = 0.10
    min_counter_raise: float = 0.02        # Counters always ask for at least this much more

    # === HOLDOUTS ===
    base_holdout_days: int = 30
    holdout_style_multipliers: Dict[str, float] = field(default_factory=lambda: {
        "aggressive": 1.5,
        "patient": 1.3,
        "conservative": 1.2,
        "flexible": 1.0,
        "cooperative": 0.8,
        "desperate": 0.5,
    })

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if not 0.0 <= self.reject_cutoff <= self.counter_floor <= self.accept_cutoff <= 1.0:
            errors.append("Cutoffs must satisfy 0 <= reject <= counter_floor <= accept <= 1")
        if self.competing_offer_margin < 0:
            errors.append("competing_offer_margin cannot be negative")
        if self.min_counter_raise <= 0:
            errors.append("min_counter_raise must be positive")
        return errors


DEFAULT_DECISION_CONFIG = DecisionConfig()


@dataclass
class PlayerDecision:
    """Outcome of evaluating one offer."""

    player_id: str
    offer: ContractOffer
    decision: Decision
    score: float
    reasoning: str
    feedback: str
    gm_note: str
    counter_offer: Optional[ContractOffer] = None
    holdout_duration_days: Optional[int] = None
    personality_factors: List[str] = field(default_factory=list)
    score_breakdown: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "player_id": self.player_id,
            "offer": self.offer.to_dict(),
            "decision": self.decision.value,
            "score": self.score,
            "reasoning": self.reasoning,
            "feedback": self.feedback,
            "gm_note": self.gm_note,
            "counter_offer": self.counter_offer.to_dict() if self.counter_offer else None,
            "holdout_duration_days": self.holdout_duration_days,
            "personality_factors": list(self.personality_factors),
            "score_breakdown": dict(self.score_breakdown),
        }


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


# =============================================================================
# Stage 1: Base Score
# =============================================================================

def desired_years(age: int) -> int:
    """Contract length a player of this age is looking for."""
    if age < 25:
        return 4
    if age < 30:
        return 3
    if age < 35:
        return 2
    return 1


def expected_apy(personality: Personality, context: ContractEvaluationContext) -> Optional[float]:
    """
    APY the player considers fair.

    Anchored on the personality's market p50, falling back to recent
    comparables. Adjusted for current positional demand and trend.
    """
    conditions = context.market_conditions
    expected = None
    if personality.market_context is not None:
        expected = personality.market_context.apy_percentiles.p50
    elif conditions is not None:
        expected = conditions.comparable_apy()

    if not expected or expected <= 0:
        return None

    if conditions is not None:
        if conditions.position_demand > 0.7:
            expected *= 1.2
        elif conditions.position_demand < 0.3:
            expected *= 0.8
        if conditions.market_trend == MarketTrend.RISING:
            expected *= 1.1
        elif conditions.market_trend == MarketTrend.FALLING:
            expected *= 0.9

    return expected


def offer_terms(personality: Personality, context: ContractEvaluationContext) -> Dict[str, float]:
    """Each offer dimension normalized to 0-1, keyed by the weight it pairs with."""
    offer = context.offer
    year = context.current_year if context.current_year is not None else personality.created_year

    expected = expected_apy(personality, context)
    money = _clamp(offer.apy / expected) if expected else 0.5

    return {
        "money_priority": money,
        "guarantee_priority": _clamp(offer.guarantee_pct),
        "length_priority": _clamp(offer.years / desired_years(personality.current_age(year))),
        "winning_priority": _clamp(offer.team_quality),
        "location_priority": _clamp(offer.location_match),
    }


def calculate_base_score(personality: Personality, context: ContractEvaluationContext) -> float:
    """Weighted mean of the offer terms."""
    weights = personality.weights.to_dict()
    total = sum(weights.values())
    if total <= 0:
        return 0.5

    terms = offer_terms(personality, context)
    score = sum(weights[name] * terms[name] for name in terms) / total
    return _clamp(score)


# =============================================================================
# Stage 2: Hidden Sliders
# =============================================================================

def tax_modifier(personality: Personality, context: ContractEvaluationContext, config: DecisionConfig) -> float:
    """
    Multiplier from state income tax.

    Neutral at half the assumed high-tax rate, a bonus below it, a
    penalty above it. No effect at zero sensitivity.
    """
    burden = min(1.0, context.team.effective_tax_rate / ASSUMED_HIGH_TAX_RATE)
    return 1.0 + personality.hidden_sliders.tax_sensitivity * config.tax_strength * (0.5 - burden)


def endorsement_modifier(personality: Personality, context: ContractEvaluationContext, config: DecisionConfig) -> float:
    """Large markets help non-linemen sell their brand; nobody else gains."""
    if personality.position.is_lineman or context.team.market_size != MarketSize.LARGE:
        return 1.0
    return 1.0 + personality.hidden_sliders.endorsement_value * config.endorsement_boost


def apply_hidden_sliders(
    personality: Personality,
    context: ContractEvaluationContext,
    score: float,
    config: DecisionConfig = DEFAULT_DECISION_CONFIG,
) -> float:
    sliders = personality.hidden_sliders
    offer = context.offer

    # Ego: offers under the position median read as disrespect
    if personality.market_context is not None:
        median = personality.market_context.apy_percentiles.p50
        if median > 0 and offer.apy < median:
            shortfall = 1.0 - offer.apy / median
            score *= 1.0 - sliders.ego * config.ego_disrespect_strength * shortfall

    # Injury anxiety: guarantees count for more (and their absence hurts more)
    score += sliders.injury_anxiety * config.injury_anxiety_strength * (_clamp(offer.guarantee_pct) - 0.5)

    # Agent quality: a good agent keeps the player from overreacting
    score += (0.5 - score) * sliders.agent_quality * config.agent_smoothing

    # Scheme fit / role promise: only matter when the team is a real fit
    if offer.team_quality >= config.fit_threshold and offer.location_match >= config.fit_threshold:
        fit = (sliders.scheme_fit + sliders.role_promise) / 2
        score *= 1.0 + fit * config.fit_boost

    score *= tax_modifier(personality, context, config)
    score *= endorsement_modifier(personality, context, config)

    return _clamp(score)


# =============================================================================
# Stage 3: Market Dynamics
# =============================================================================

def apply_market_dynamics(
    personality: Personality,
    context: ContractEvaluationContext,
    score: float,
    config: DecisionConfig = DEFAULT_DECISION_CONFIG,
) -> float:
    offer = context.offer
    market = personality.market_context

    if market is not None:
        # Scarce positions can afford to be choosier, and vice versa
        score *= 1.0 + (market.supply_pressure - 0.5) * config.supply_pressure_strength
        score *= config.trend_multipliers.get(market.market_trend.value, 1.0)

        comparison = personality.behaviors.comparison_weight
        if offer.apy > market.apy_percentiles.p75:
            score *= 1.0 + config.apy_anchor_boost * comparison
        if offer.guarantee_pct > market.guarantee_percentiles.p75:
            score *= 1.0 + config.guarantee_anchor_boost * comparison

    if context.competing_offers:
        best = max(o.apy for o in context.competing_offers)
        if best > offer.apy * (1.0 + config.competing_offer_margin):
            score *= offer.apy / best

    return _clamp(score)


def score_offer(
    personality: Personality,
    context: ContractEvaluationContext,
    config: Optional[DecisionConfig] = None,
) -> Dict[str, float]:
    """
    Run all scoring stages.

    Returns:
        Dict with "base", "hidden_sliders" and "final" scores
    """
    config = config or DEFAULT_DECISION_CONFIG
    base = calculate_base_score(personality, context)
    after_sliders = apply_hidden_sliders(personality, context, base, config)
    final = apply_market_dynamics(personality, context, after_sliders, config)
    return {"base": base, "hidden_sliders": after_sliders, "final": final}


# =============================================================================
# Stage 4: Decision
# =============================================================================

def effective_holdout_threshold(personality: Personality, context: Optional[ContractEvaluationContext]) -> float:
    """Holdout threshold after late-market deadline softening."""
    behaviors = personality.behaviors
    threshold = behaviors.holdout_threshold
    if context is not None and context.season_stage.is_late:
        threshold -= behaviors.deadline_softening * behaviors.deadline_susceptibility * context.current_week
    return max(0.0, threshold)


def holdout_duration_days(personality: Personality, config: DecisionConfig = DEFAULT_DECISION_CONFIG) -> int:
    style = personality.traits.negotiation_style.value
    return int(round(config.base_holdout_days * config.holdout_style_multipliers.get(style, 1.0)))


def determine_decision(
    personality: Personality,
    score: float,
    context: Optional[ContractEvaluationContext] = None,
    config: Optional[DecisionConfig] = None,
) -> Tuple[Decision, str, List[str], Optional[int]]:
    """
    Map a final score onto a decision.

    Args:
        personality: Evaluating personality
        score: Final offer score (0-1)
        context: Evaluation context, used for deadline softening
        config: Cutoffs; defaults if None

    Returns:
        (decision, reasoning, personality factors, holdout days or None)
    """
    config = config or DEFAULT_DECISION_CONFIG
    threshold = effective_holdout_threshold(personality, context)

    if score >= config.accept_cutoff:
        return (
            Decision.ACCEPT,
            f"Offer score ({score:.2f}) meets or exceeds expectations",
            ["high_offer_score", "meets_expectations"],
            None,
        )

    if score < threshold:
        return (
            Decision.HOLDOUT,
            f"Offer score ({score:.2f}) below holdout threshold ({threshold:.2f})",
            ["holdout_threshold", "low_offer_score"],
            holdout_duration_days(personality, config),
        )

    if score < config.reject_cutoff:
        return (
            Decision.REJECT,
            f"Offer score ({score:.2f}) too low to consider",
            ["low_offer_score", "personality_preferences"],
            None,
        )

    if score >= config.counter_floor and personality.traits.negotiation_style != NegotiationStyle.DESPERATE:
        return (
            Decision.COUNTER,
            f"Offer score ({score:.2f}) acceptable but can be improved",
            ["moderate_offer_score", "negotiation_style"],
            None,
        )

    return (
        Decision.SHORTLIST,
        f"Offer score ({score:.2f}) in consideration range",
        ["moderate_offer_score", "considering_options"],
        None,
    )


# =============================================================================
# Counter Offers
# =============================================================================

def _raise(value: float, factor: float) -> float:
    """Scale a money amount, always landing strictly above the original."""
    return max(float(round(value * factor)), value + 1)


def build_counter_offer(
    personality: Personality,
    offer: ContractOffer,
    config: Optional[DecisionConfig] = None,
) -> ContractOffer:
    """
    Counter with APY, total value and guarantees scaled up.

    The counter strictly exceeds the original on all three money fields.
    """
    config = config or DEFAULT_DECISION_CONFIG
    sliders = personality.hidden_sliders

    factor = personality.behaviors.counter_offer_multiplier * (
        1.0 + sliders.ego * config.ego_counter_bump + sliders.agent_quality * config.agent_counter_bump
    )
    factor = max(factor, 1.0 + config.min_counter_raise)

    counter_apy = _raise(offer.apy, factor)
    counter_total = max(_raise(offer.total_value, factor), counter_apy * offer.years)
    guarantee_factor = factor * (1.0 + sliders.injury_anxiety * config.injury_guarantee_bump)
    counter_guaranteed = min(_raise(offer.guaranteed_amount, guarantee_factor), counter_total)

    return ContractOffer(
        years=offer.years,
        total_value=counter_total,
        apy=counter_apy,
        guaranteed_amount=counter_guaranteed,
        signing_bonus=offer.signing_bonus,
        performance_incentives=list(offer.performance_incentives),
        team_quality=offer.team_quality,
        location_match=offer.location_match,
    )


# =============================================================================
# Entry Point
# =============================================================================

def evaluate_contract_offer(
    personality: Personality,
    context: ContractEvaluationContext,
    config: Optional[DecisionConfig] = None,
    rng: Optional[random.Random] = None,
) -> PlayerDecision:
    """
    Evaluate an offer and decide how the player responds.

    Args:
        personality: Evaluating player's personality (not modified)
        context: Offer, team, market and timing
        config: Decision tunables; defaults if None
        rng: Template choice source; seeded from the inputs if None

    Returns:
        PlayerDecision

    Raises:
        InvalidContextError: if the context cannot be scored
    """
    context.validate()
    config = config or DEFAULT_DECISION_CONFIG

    scores = score_offer(personality, context, config)
    final = scores["final"]
    decision, reasoning, factors, holdout_days = determine_decision(personality, final, context, config)

    feedback_rng = rng or stable_rng(personality, context, decision.value)
    feedback = generate_feedback(personality, decision.value, context, final, feedback_rng)
    gm_note = generate_gm_note(personality, context, final, feedback_rng)

    counter = build_counter_offer(personality, context.offer, config) if decision == Decision.COUNTER else None

    logger.debug(
        f"{personality.player_id} ({personality.archetype}) -> {decision.value} "
        f"[base={scores['base']:.3f}, sliders={scores['hidden_sliders']:.3f}, final={final:.3f}]"
    )

    return PlayerDecision(
        player_id=personality.player_id,
        offer=context.offer,
        decision=decision,
        score=final,
        reasoning=reasoning,
        feedback=feedback,
        gm_note=gm_note,
        counter_offer=counter,
        holdout_duration_days=holdout_days,
        personality_factors=factors,
        score_breakdown=scores,
    )


# =============================================================================
# Trade Helpers
# =============================================================================

def would_require_extension_on_trade(personality: Personality, rng: Optional[random.Random] = None) -> bool:
    """Roll whether a traded player demands an extension before reporting."""
    rng = rng or random.Random()
    return rng.random() < personality.trade_preferences.requires_extension_probability


def get_extension_terms(personality: Personality) -> ExtensionTerms:
    return personality.trade_preferences.extension_terms


def get_trade_deadline_behavior(personality: Personality) -> TradeDeadlineBehavior:
    return personality.trade_preferences.trade_deadline_behavior


def get_reporting_delay_if_unhappy(personality: Personality) -> int:
    """Days a traded player delays reporting to a team they dislike."""
    return personality.trade_preferences.reporting_delay_if_unhappy

"""
Decision feedback.

Picks a message template for a decision and fills its placeholders with
live personality values. Template choice is random but never hidden:
callers pass an rng, or get one seeded from the evaluation inputs so the
same evaluation always says the same thing.
"""

import hashlib
import random
from typing import Dict, List, Optional

from dynasty.core.contracts.offer import ContractEvaluationContext
from dynasty.core.models.team import MarketSize
from dynasty.core.personality.profile import Personality
from dynasty.core.personality.traits import LocationTrait, NegotiationStyle, TeamLoyalty

FALLBACK_MESSAGE = "I'm considering my options."


class _KeepMissing(dict):
    """format_map mapping that leaves unknown placeholders untouched."""

    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _stable_u32(*parts: str) -> int:
    h = hashlib.sha256(":".join(parts).encode("utf-8")).hexdigest()
    return int(h[:8], 16)


def stable_rng(personality: Personality, context: ContractEvaluationContext, decision: str) -> random.Random:
    """Random source derived from the evaluation inputs."""
    offer = context.offer
    seed = _stable_u32(
        personality.player_id,
        personality.archetype,
        decision,
        context.team.team_id,
        f"{offer.years}",
        f"{offer.apy:.2f}",
        f"{offer.total_value:.2f}",
        f"{offer.guaranteed_amount:.2f}",
    )
    return random.Random(seed)


def gap_to_market(context: ContractEvaluationContext) -> str:
    """Offer APY relative to the mean competing offer, in words."""
    if not context.competing_offers:
        return "unknown"
    average = sum(o.apy for o in context.competing_offers) / len(context.competing_offers)
    if average <= 0:
        return "unknown"

    gap = (context.offer.apy - average) / average * 100
    if gap > 10:
        return "significantly above market"
    if gap > 5:
        return "above market"
    if gap > -5:
        return "at market"
    if gap > -10:
        return "below market"
    return "significantly below market"


def team_competitiveness(context: ContractEvaluationContext) -> str:
    if context.team.is_contender:
        return "high"
    if context.team.is_stable:
        return "medium"
    return "low"


def template_values(
    personality: Personality,
    context: ContractEvaluationContext,
    score: Optional[float] = None,
) -> Dict[str, str]:
    """Placeholder name -> rendered value. Numbers use two decimals."""
    numbers = personality.numeric_snapshot()
    numbers["location_match"] = context.offer.location_match
    numbers["team_quality"] = context.offer.team_quality
    numbers["ego_level"] = personality.hidden_sliders.ego
    if score is not None:
        numbers["score"] = score

    values = {name: f"{value:.2f}" for name, value in numbers.items()}
    values["gap_to_market"] = gap_to_market(context)
    values["team_competitiveness"] = team_competitiveness(context)
    return values


def render(template: str, values: Dict[str, str]) -> str:
    """Substitute {name} placeholders; unknown names are left as-is."""
    try:
        return template.format_map(_KeepMissing(values))
    except (ValueError, IndexError, AttributeError):
        # Stray braces or positional fields: leave the template alone
        return template


def select_template(templates: List[str], rng: random.Random) -> str:
    if not templates:
        return FALLBACK_MESSAGE
    return rng.choice(templates)


def _acceptance_line(personality: Personality, context: ContractEvaluationContext) -> Optional[str]:
    traits = personality.traits
    if (
        traits.team_loyalty == TeamLoyalty.VERY_HIGH
        and context.current_team_id is not None
        and context.current_team_id == context.team.team_id
    ):
        return "I'm excited to continue building something special with this team!"
    if traits.location_preference == LocationTrait.BIG_MARKETS and context.team.market_size == MarketSize.LARGE:
        return "This is exactly the kind of market where I can build my brand!"
    if context.team.is_contender:
        return "I want to win championships, and this team gives me that opportunity!"
    return None


def _shortlist_line(personality: Personality) -> str:
    style = personality.traits.negotiation_style
    if style == NegotiationStyle.PATIENT:
        return "I'm considering this offer along with others. I want to make the right decision."
    if style == NegotiationStyle.CONSERVATIVE:
        return "I need to think about the guarantees and security this offer provides."
    return FALLBACK_MESSAGE


# Decision value -> template category
DECISION_CATEGORIES = {
    "accept": "accept",
    "counter": "counter_offer",
    "reject": "reject_low_offer",
    "holdout": "holdout_warning",
}


def generate_feedback(
    personality: Personality,
    decision: str,
    context: ContractEvaluationContext,
    score: float,
    rng: random.Random,
) -> str:
    """
    Player-facing message for a decision.

    Args:
        personality: Evaluating player's personality
        decision: Decision value ("accept", "counter", ...)
        context: Evaluation context
        score: Final offer score
        rng: Template choice source

    Returns:
        Rendered feedback message
    """
    if decision == "accept":
        line = _acceptance_line(personality, context)
        if line is not None:
            return line
    if decision == "shortlist":
        return _shortlist_line(personality)

    category = DECISION_CATEGORIES.get(decision)
    if category is None:
        return FALLBACK_MESSAGE

    template = select_template(personality.feedback_templates.for_category(category), rng)
    return render(template, template_values(personality, context, score))


def generate_gm_note(
    personality: Personality,
    context: ContractEvaluationContext,
    score: float,
    rng: random.Random,
) -> str:
    """Front-office note explaining what drove the player."""
    template = select_template(personality.feedback_templates.gm_note, rng)
    return render(template, template_values(personality, context, score))

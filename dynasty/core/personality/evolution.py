"""
Personality Evolution.

Personalities drift over a career. Three things move them:

1. Life events (injuries, titles, team changes, ...)
2. Market experiences (holdouts, overpayment, betrayal, ...)
3. Age milestones at 30 and 35, each firing once per player

Every event carries an impact list that is applied immediately and then
re-applied on each tick while its duration_weeks counter is positive.

Each trait has its own cooldown: once a change lands on a trait, further
changes to that trait are dropped (not queued) until the window elapses.
Time is measured in absolute weeks (year * 52 + week).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from dynasty.core.personality.traits import (
    ORDINAL_LABELS,
    TRAIT_TARGETS,
    TraitName,
    TraitSection,
)

if TYPE_CHECKING:
    from dynasty.core.personality.profile import Personality

logger = logging.getLogger(__name__)


WEEKS_PER_YEAR = 52

BASE_COOLDOWN_WEEKS = 4

# Change needed per step of an ordinal label (risk tolerance, loyalty)
LABEL_STEP_SIZE = 0.2

MILESTONE_AGES = (30, 35)

# Evolution cadence: at most this many cycles, at least this many years apart
MAX_EVOLUTIONS = 3
MIN_YEARS_BETWEEN_EVOLUTIONS = 2


def absolute_week(year: int, week: Optional[int] = None) -> int:
    """Convert a (year, week) pair into a single week counter."""
    return year * WEEKS_PER_YEAR + (week or 0)


# =============================================================================
# Event Types
# =============================================================================

class LifeEventType(Enum):
    MAJOR_INJURY = "major_injury"
    CHAMPIONSHIP_WIN = "championship_win"
    TEAM_CHANGE = "team_change"
    PERSONAL_ISSUE = "personal_issue"
    CAREER_HIGHLIGHT = "career_highlight"


class MarketExperienceType(Enum):
    SUCCESSFUL_HOLDOUT = "successful_holdout"
    FAILED_HOLDOUT = "failed_holdout"
    MARKET_OVERPAYMENT = "market_overpayment"
    TEAM_BETRAYAL = "team_betrayal"
    CHAMPIONSHIP_WIN = "championship_win"
    PLAYOFF_EXIT = "playoff_exit"
    INJURY_RECOVERY = "injury_recovery"


# (trait, change, reason) per event type
ImpactTable = Dict[Enum, List[Tuple[TraitName, float, str]]]

LIFE_EVENT_IMPACTS: ImpactTable = {
    LifeEventType.MAJOR_INJURY: [
        (TraitName.GUARANTEE_PRIORITY, 0.3, "Major injury: Seeking guaranteed money"),
        (TraitName.RISK_TOLERANCE, -0.2, "Major injury: Becoming more risk-averse"),
    ],
    LifeEventType.CHAMPIONSHIP_WIN: [
        (TraitName.WINNING_PRIORITY, 0.2, "Championship win: Proving winning matters"),
        (TraitName.EGO, 0.1, "Championship win: Increased confidence"),
    ],
    LifeEventType.TEAM_CHANGE: [
        (TraitName.TEAM_LOYALTY, -0.1, "Team change: Reduced loyalty to organizations"),
    ],
    LifeEventType.PERSONAL_ISSUE: [
        (TraitName.GUARANTEE_PRIORITY, 0.2, "Personal issue: Seeking financial security"),
    ],
    LifeEventType.CAREER_HIGHLIGHT: [
        (TraitName.EGO, 0.15, "Career highlight: Increased self-confidence"),
    ],
}

LIFE_EVENT_DURATIONS: Dict[LifeEventType, int] = {
    LifeEventType.MAJOR_INJURY: 26,
    LifeEventType.CHAMPIONSHIP_WIN: 52,
    LifeEventType.TEAM_CHANGE: 13,
    LifeEventType.PERSONAL_ISSUE: 26,
    LifeEventType.CAREER_HIGHLIGHT: 13,
}

LIFE_EVENT_DESCRIPTIONS: Dict[LifeEventType, str] = {
    LifeEventType.MAJOR_INJURY: "Suffered a major injury that affected career trajectory",
    LifeEventType.CHAMPIONSHIP_WIN: "Won a championship, proving winning matters",
    LifeEventType.TEAM_CHANGE: "Changed teams, affecting organizational loyalty",
    LifeEventType.PERSONAL_ISSUE: "Faced personal challenges affecting career decisions",
    LifeEventType.CAREER_HIGHLIGHT: "Achieved a major career milestone",
}

MARKET_EXPERIENCE_IMPACTS: ImpactTable = {
    MarketExperienceType.SUCCESSFUL_HOLDOUT: [
        (TraitName.HOLDOUT_THRESHOLD, 0.1, "Successful holdout: More willing to hold out"),
        (TraitName.EGO, 0.1, "Successful holdout: Increased confidence"),
    ],
    MarketExperienceType.FAILED_HOLDOUT: [
        (TraitName.HOLDOUT_THRESHOLD, -0.15, "Failed holdout: Less willing to hold out"),
    ],
    MarketExperienceType.MARKET_OVERPAYMENT: [
        (TraitName.MONEY_PRIORITY, 0.1, "Market overpayment: Money matters more"),
    ],
    MarketExperienceType.TEAM_BETRAYAL: [
        (TraitName.TEAM_LOYALTY, -0.2, "Team betrayal: Reduced organizational loyalty"),
    ],
    MarketExperienceType.CHAMPIONSHIP_WIN: [
        (TraitName.WINNING_PRIORITY, 0.15, "Championship win: Proving winning matters"),
    ],
    MarketExperienceType.PLAYOFF_EXIT: [
        (TraitName.WINNING_PRIORITY, 0.1, "Playoff exit: Wanting to win more"),
    ],
    MarketExperienceType.INJURY_RECOVERY: [
        (TraitName.INJURY_ANXIETY, -0.1, "Injury recovery: Reduced injury anxiety"),
    ],
}

MARKET_EXPERIENCE_DURATIONS: Dict[MarketExperienceType, int] = {
    MarketExperienceType.SUCCESSFUL_HOLDOUT: 26,
    MarketExperienceType.FAILED_HOLDOUT: 39,
    MarketExperienceType.MARKET_OVERPAYMENT: 13,
    MarketExperienceType.TEAM_BETRAYAL: 52,
    MarketExperienceType.CHAMPIONSHIP_WIN: 52,
    MarketExperienceType.PLAYOFF_EXIT: 26,
    MarketExperienceType.INJURY_RECOVERY: 13,
}

MARKET_EXPERIENCE_DESCRIPTIONS: Dict[MarketExperienceType, str] = {
    MarketExperienceType.SUCCESSFUL_HOLDOUT: "Successfully held out and got desired contract terms",
    MarketExperienceType.FAILED_HOLDOUT: "Failed holdout resulted in unfavorable contract",
    MarketExperienceType.MARKET_OVERPAYMENT: "Received above-market compensation",
    MarketExperienceType.TEAM_BETRAYAL: "Team acted against player interests",
    MarketExperienceType.CHAMPIONSHIP_WIN: "Won championship with current team",
    MarketExperienceType.PLAYOFF_EXIT: "Early playoff exit despite strong season",
    MarketExperienceType.INJURY_RECOVERY: "Successfully recovered from injury",
}

MILESTONE_IMPACTS: Dict[int, List[Tuple[TraitName, float, str]]] = {
    30: [
        (TraitName.GUARANTEE_PRIORITY, 0.1, "Age 30: Seeking more security"),
        (TraitName.RISK_TOLERANCE, -0.1, "Age 30: Becoming more conservative"),
    ],
    35: [
        (TraitName.GUARANTEE_PRIORITY, 0.2, "Age 35: Prioritizing security over money"),
        (TraitName.WINNING_PRIORITY, 0.1, "Age 35: Wanting to win before retirement"),
        (TraitName.LENGTH_PRIORITY, -0.1, "Age 35: Preferring shorter deals"),
    ],
}

for _enum, _tables in (
    (LifeEventType, (LIFE_EVENT_IMPACTS, LIFE_EVENT_DURATIONS, LIFE_EVENT_DESCRIPTIONS)),
    (MarketExperienceType, (MARKET_EXPERIENCE_IMPACTS, MARKET_EXPERIENCE_DURATIONS, MARKET_EXPERIENCE_DESCRIPTIONS)),
):
    for _table in _tables:
        if set(_enum) - set(_table):
            raise RuntimeError(f"{_enum.__name__} members missing from a lookup table")


# =============================================================================
# Ledger Records
# =============================================================================

@dataclass
class PersonalityChange:
    trait: TraitName
    change: float
    reason: str
    permanent: bool = False

    def to_dict(self) -> dict:
        return {
            "trait": self.trait.value,
            "change": self.change,
            "reason": self.reason,
            "permanent": self.permanent,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PersonalityChange":
        return cls(
            trait=TraitName(data["trait"]),
            change=float(data["change"]),
            reason=data.get("reason", ""),
            permanent=data.get("permanent", False),
        )


def _changes_from(impact: List[Tuple[TraitName, float, str]]) -> List[PersonalityChange]:
    return [PersonalityChange(trait, change, reason) for trait, change, reason in impact]


@dataclass
class EvolutionCooldown:
    """
    Per-trait lock. Idle -> Cooling on an applied change, Cooling -> Idle
    once duration_weeks have elapsed since start_time.
    """

    trait: TraitName
    start_time: int
    duration_weeks: float
    reason: str
    is_active: bool = True

    def has_elapsed(self, now: int) -> bool:
        return now - self.start_time >= self.duration_weeks

    def blocks(self, now: Optional[int]) -> bool:
        """Whether the cooldown still rejects changes at a given time."""
        if not self.is_active:
            return False
        return now is None or not self.has_elapsed(now)

    def to_dict(self) -> dict:
        return {
            "trait": self.trait.value,
            "start_time": self.start_time,
            "duration_weeks": self.duration_weeks,
            "reason": self.reason,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EvolutionCooldown":
        return cls(
            trait=TraitName(data["trait"]),
            start_time=int(data["start_time"]),
            duration_weeks=float(data["duration_weeks"]),
            reason=data.get("reason", ""),
            is_active=data.get("is_active", True),
        )


@dataclass
class AgeMilestone:
    age: int
    year: int
    changes: List[PersonalityChange]
    description: str

    def to_dict(self) -> dict:
        return {
            "age": self.age,
            "year": self.year,
            "changes": [c.to_dict() for c in self.changes],
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AgeMilestone":
        return cls(
            age=int(data["age"]),
            year=int(data["year"]),
            changes=[PersonalityChange.from_dict(c) for c in data.get("changes", [])],
            description=data.get("description", ""),
        )


@dataclass
class LifeEvent:
    type: LifeEventType
    year: int
    description: str
    impact: List[PersonalityChange]
    duration_weeks: int
    week: Optional[int] = None
    # Subset of impact that landed when the event was first recorded
    applied: List[PersonalityChange] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "year": self.year,
            "week": self.week,
            "description": self.description,
            "impact": [c.to_dict() for c in self.impact],
            "duration_weeks": self.duration_weeks,
            "applied": [c.to_dict() for c in self.applied],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LifeEvent":
        return cls(
            type=LifeEventType(data["type"]),
            year=int(data["year"]),
            week=data.get("week"),
            description=data.get("description", ""),
            impact=[PersonalityChange.from_dict(c) for c in data.get("impact", [])],
            duration_weeks=int(data.get("duration_weeks", 0)),
            applied=[PersonalityChange.from_dict(c) for c in data.get("applied", [])],
        )


@dataclass
class MarketExperience:
    type: MarketExperienceType
    year: int
    description: str
    impact: List[PersonalityChange]
    duration_weeks: int
    week: Optional[int] = None
    # Subset of impact that landed when the event was first recorded
    applied: List[PersonalityChange] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "year": self.year,
            "week": self.week,
            "description": self.description,
            "impact": [c.to_dict() for c in self.impact],
            "duration_weeks": self.duration_weeks,
            "applied": [c.to_dict() for c in self.applied],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MarketExperience":
        return cls(
            type=MarketExperienceType(data["type"]),
            year=int(data["year"]),
            week=data.get("week"),
            description=data.get("description", ""),
            impact=[PersonalityChange.from_dict(c) for c in data.get("impact", [])],
            duration_weeks=int(data.get("duration_weeks", 0)),
            applied=[PersonalityChange.from_dict(c) for c in data.get("applied", [])],
        )


@dataclass
class EvolutionLedger:
    """
    Everything evolution knows about one personality.

    cooldowns is keyed by trait, so at most one cooldown per trait can
    exist at a time.
    """

    evolution_count: int = 0
    last_evolution_year: int = 0
    evolution_history: List[PersonalityChange] = field(default_factory=list)
    cooldowns: Dict[TraitName, EvolutionCooldown] = field(default_factory=dict)
    age_evolution_milestones: List[AgeMilestone] = field(default_factory=list)
    market_experiences: List[MarketExperience] = field(default_factory=list)
    life_events: List[LifeEvent] = field(default_factory=list)

    def is_cooling(self, trait: TraitName, now: Optional[int] = None) -> bool:
        cooldown = self.cooldowns.get(trait)
        return cooldown is not None and cooldown.blocks(now)

    def active_cooldowns(self) -> List[EvolutionCooldown]:
        return [c for c in self.cooldowns.values() if c.is_active]

    def milestone_ages(self) -> set:
        return {m.age for m in self.age_evolution_milestones}

    def to_dict(self) -> dict:
        return {
            "evolution_count": self.evolution_count,
            "last_evolution_year": self.last_evolution_year,
            "evolution_history": [c.to_dict() for c in self.evolution_history],
            "cooldowns": [c.to_dict() for c in self.cooldowns.values()],
            "age_evolution_milestones": [m.to_dict() for m in self.age_evolution_milestones],
            "market_experiences": [e.to_dict() for e in self.market_experiences],
            "life_events": [e.to_dict() for e in self.life_events],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "EvolutionLedger":
        cooldowns = {}
        for raw in data.get("cooldowns", []):
            cooldown = EvolutionCooldown.from_dict(raw)
            cooldowns[cooldown.trait] = cooldown
        return cls(
            evolution_count=int(data.get("evolution_count", 0)),
            last_evolution_year=int(data.get("last_evolution_year", 0)),
            evolution_history=[PersonalityChange.from_dict(c) for c in data.get("evolution_history", [])],
            cooldowns=cooldowns,
            age_evolution_milestones=[
                AgeMilestone.from_dict(m) for m in data.get("age_evolution_milestones", [])
            ],
            market_experiences=[MarketExperience.from_dict(e) for e in data.get("market_experiences", [])],
            life_events=[LifeEvent.from_dict(e) for e in data.get("life_events", [])],
        )


# =============================================================================
# Change Application
# =============================================================================

def cooldown_duration(change: float) -> float:
    """Cooldown length in weeks for a change of the given size."""
    magnitude = abs(change)
    if magnitude > 0.3:
        return BASE_COOLDOWN_WEEKS * 3
    if magnitude > 0.2:
        return BASE_COOLDOWN_WEEKS * 2
    if magnitude > 0.1:
        return BASE_COOLDOWN_WEEKS * 1.5
    return BASE_COOLDOWN_WEEKS


def _step_label(personality: "Personality", trait: TraitName, change: float) -> None:
    ladder = ORDINAL_LABELS[TRAIT_TARGETS[trait].attribute]
    current = personality.get_trait_value(trait)
    steps = max(1, int(abs(change) / LABEL_STEP_SIZE + 1e-9))
    direction = 1 if change > 0 else -1
    index = ladder.index(current) + direction * steps
    personality.set_trait_value(trait, ladder[max(0, min(len(ladder) - 1, index))])


def _write_change(personality: "Personality", change: PersonalityChange) -> None:
    target = TRAIT_TARGETS[change.trait]

    if target.section is TraitSection.LABEL:
        if change.change != 0:
            _step_label(personality, change.trait, change.change)
    elif target.section in (TraitSection.WEIGHT, TraitSection.BEHAVIOR, TraitSection.HIDDEN_SLIDER):
        current = personality.get_trait_value(change.trait)
        personality.set_trait_value(change.trait, current + change.change)
    else:
        raise ValueError(f"Unhandled trait section: {target.section}")


def apply_changes(
    personality: "Personality",
    changes: List[PersonalityChange],
    now: Optional[int] = None,
) -> List[PersonalityChange]:
    """
    Apply a batch of changes, honoring and then registering cooldowns.

    Cooldowns are checked against the state at the start of the batch, so
    several changes to one idle trait within a single batch all land. Every
    trait touched then starts cooling for a duration set by its largest
    change. Zero-size changes are skipped and start no cooldown.

    Weight changes renormalize the weights, holding cooling weights fixed
    so only idle weights absorb the difference.

    Args:
        personality: Personality to mutate
        changes: Requested changes
        now: Current absolute week; None treats any active cooldown as blocking

    Returns:
        The changes that were actually applied
    """
    ledger = personality.evolution
    applied: List[PersonalityChange] = []
    largest: Dict[TraitName, PersonalityChange] = {}
    touched_weights = False
    cooling = {trait for trait in ledger.cooldowns if ledger.is_cooling(trait, now)}

    for change in changes:
        if change.change == 0:
            continue
        if change.trait in cooling:
            logger.debug(
                f"{personality.player_id}: suppressed {change.trait.value} "
                f"{change.change:+.2f} ({change.reason}), trait on cooldown"
            )
            continue

        _write_change(personality, change)
        applied.append(change)
        if TRAIT_TARGETS[change.trait].section is TraitSection.WEIGHT:
            touched_weights = True

        best = largest.get(change.trait)
        if best is None or abs(change.change) > abs(best.change):
            largest[change.trait] = change

        logger.debug(
            f"{personality.player_id}: applied {change.trait.value} "
            f"{change.change:+.2f} ({change.reason})"
        )

    if touched_weights:
        frozen = {
            TRAIT_TARGETS[trait].attribute
            for trait in cooling
            if TRAIT_TARGETS[trait].section is TraitSection.WEIGHT
        }
        personality.weights.normalize(frozen=frozen)

    start = now if now is not None else absolute_week(ledger.last_evolution_year)
    for trait, change in largest.items():
        ledger.cooldowns[trait] = EvolutionCooldown(
            trait=trait,
            start_time=start,
            duration_weeks=cooldown_duration(change.change),
            reason=f"Recent change: {change.reason}",
        )

    return applied


def apply_change(
    personality: "Personality",
    change: PersonalityChange,
    now: Optional[int] = None,
) -> bool:
    """Apply one change. Returns False if the trait was cooling."""
    return bool(apply_changes(personality, [change], now))


# =============================================================================
# Entry Points
# =============================================================================

def add_life_event(
    personality: "Personality",
    event_type: LifeEventType,
    year: int,
    week: Optional[int] = None,
    description: Optional[str] = None,
) -> LifeEvent:
    """
    Record a life event and apply its impact immediately.

    Args:
        personality: Personality to mutate
        event_type: Kind of event
        year: Year it happened
        week: Week within the year, if known
        description: Override for the default description

    Returns:
        The recorded LifeEvent
    """
    event = LifeEvent(
        type=event_type,
        year=year,
        week=week,
        description=description or LIFE_EVENT_DESCRIPTIONS[event_type],
        impact=_changes_from(LIFE_EVENT_IMPACTS[event_type]),
        duration_weeks=LIFE_EVENT_DURATIONS[event_type],
    )
    personality.evolution.life_events.append(event)
    event.applied = apply_changes(personality, event.impact, absolute_week(year, week))
    return event


def add_market_experience(
    personality: "Personality",
    experience_type: MarketExperienceType,
    year: int,
    week: Optional[int] = None,
    description: Optional[str] = None,
) -> MarketExperience:
    """Record a market experience and apply its impact immediately."""
    experience = MarketExperience(
        type=experience_type,
        year=year,
        week=week,
        description=description or MARKET_EXPERIENCE_DESCRIPTIONS[experience_type],
        impact=_changes_from(MARKET_EXPERIENCE_IMPACTS[experience_type]),
        duration_weeks=MARKET_EXPERIENCE_DURATIONS[experience_type],
    )
    personality.evolution.market_experiences.append(experience)
    experience.applied = apply_changes(personality, experience.impact, absolute_week(year, week))
    return experience


def _expire_cooldowns(ledger: EvolutionLedger, now: int) -> None:
    for trait, cooldown in list(ledger.cooldowns.items()):
        if cooldown.has_elapsed(now):
            cooldown.is_active = False
            del ledger.cooldowns[trait]


def _check_milestones(personality: "Personality", current_year: int) -> List[PersonalityChange]:
    age = personality.current_age(current_year)
    reached = personality.evolution.milestone_ages()

    milestone_age = None
    if 30 <= age < 35 and 30 not in reached:
        milestone_age = 30
    elif age >= 35 and 35 not in reached:
        milestone_age = 35

    if milestone_age is None:
        return []

    milestone = AgeMilestone(
        age=milestone_age,
        year=current_year,
        changes=_changes_from(MILESTONE_IMPACTS[milestone_age]),
        description=f"Player reached age {milestone_age} milestone",
    )
    personality.evolution.age_evolution_milestones.append(milestone)
    logger.info(f"{personality.player_id}: age {milestone_age} milestone in {current_year}")
    return list(milestone.changes)


def tick(personality: "Personality", current_year: int, current_week: int = 0) -> List[PersonalityChange]:
    """
    Run one evolution cycle.

    Expires elapsed cooldowns, re-applies every still-running event
    impact, fires any due age milestone, and records what landed.

    Args:
        personality: Personality to mutate
        current_year: Current league year
        current_week: Week within the year

    Returns:
        Changes applied during this tick
    """
    ledger = personality.evolution
    now = absolute_week(current_year, current_week)

    _expire_cooldowns(ledger, now)

    changes: List[PersonalityChange] = []
    for event in [*ledger.life_events, *ledger.market_experiences]:
        if event.duration_weeks > 0:
            changes.extend(event.impact)
            event.duration_weeks -= 1

    changes.extend(_check_milestones(personality, current_year))

    applied = apply_changes(personality, changes, now)
    if applied:
        ledger.evolution_count += 1
        ledger.last_evolution_year = current_year
        ledger.evolution_history.extend(applied)

    return applied


# =============================================================================
# Helpers
# =============================================================================

def get_evolution_summary(personality: "Personality") -> str:
    """One-line summary for debugging and admin views."""
    ledger = personality.evolution
    recent_events = sum(1 for e in ledger.life_events if e.duration_weeks > 0)
    recent_experiences = sum(1 for e in ledger.market_experiences if e.duration_weeks > 0)
    return (
        f"Evolution Count: {ledger.evolution_count}, "
        f"Last Year: {ledger.last_evolution_year}, "
        f"Active Cooldowns: {len(ledger.active_cooldowns())}, "
        f"Recent Events: {recent_events}, "
        f"Recent Experiences: {recent_experiences}"
    )


def get_change_history(personality: "Personality") -> List[dict]:
    return [c.to_dict() for c in personality.evolution.evolution_history]


def has_trait_evolved(personality: "Personality", trait: TraitName, threshold: float = 0.2) -> bool:
    """Whether the recorded net change to a trait reaches the threshold."""
    total = sum(c.change for c in personality.evolution.evolution_history if c.trait == trait)
    return abs(total) >= threshold


def should_evolve(personality: "Personality", current_year: int) -> bool:
    ledger = personality.evolution
    years_since = current_year - ledger.last_evolution_year
    return years_since >= MIN_YEARS_BETWEEN_EVOLUTIONS and ledger.evolution_count < MAX_EVOLUTIONS


def reset_evolution(personality: "Personality") -> None:
    """
    Clear the ledger, keeping last_evolution_year.

    Current trait values are kept; they become the new baseline.
    """
    ledger = personality.evolution
    ledger.evolution_count = 0
    ledger.evolution_history = []
    ledger.life_events = []
    ledger.market_experiences = []
    ledger.age_evolution_milestones = []
    ledger.cooldowns = {}

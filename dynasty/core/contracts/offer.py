"""
Contract offers and the context they are evaluated in.

All of these are plain values built by the caller for one evaluation;
nothing here is persisted by the engine.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from dynasty.core.models.team import TeamLocation
from dynasty.core.personality.traits import MarketTrend


class InvalidContextError(ValueError):
    """Raised when an evaluation context cannot be scored."""
    pass


class SeasonStage(Enum):
    EARLY_FA = "early_fa"
    MID_FA = "mid_fa"
    LATE_FA = "late_fa"
    OPEN_FA = "open_fa"
    REGULAR_SEASON = "regular_season"

    @property
    def is_late(self) -> bool:
        """Stages in which deadline pressure softens holdout demands."""
        return self in (SeasonStage.LATE_FA, SeasonStage.OPEN_FA, SeasonStage.REGULAR_SEASON)


class IncentiveType(Enum):
    YARDS = "yards"
    TOUCHDOWNS = "touchdowns"
    PRO_BOWL = "pro_bowl"
    ALL_PRO = "all_pro"
    PLAYOFFS = "playoffs"
    CHAMPIONSHIP = "championship"


@dataclass
class PerformanceIncentive:
    type: IncentiveType
    threshold: float
    bonus: float

    def to_dict(self) -> dict:
        return {"type": self.type.value, "threshold": self.threshold, "bonus": self.bonus}

    @classmethod
    def from_dict(cls, data: dict) -> "PerformanceIncentive":
        return cls(
            type=IncentiveType(data["type"]),
            threshold=float(data.get("threshold", 0)),
            bonus=float(data.get("bonus", 0)),
        )


@dataclass
class ContractOffer:
    """
    One contract offer.

    Money is in dollars. team_quality and location_match are 0-1 scores
    computed by the caller (location_match usually via
    calculate_location_match).
    """

    years: int
    total_value: float
    apy: float
    guaranteed_amount: float
    signing_bonus: float = 0.0
    performance_incentives: List[PerformanceIncentive] = field(default_factory=list)
    team_quality: float = 0.5
    location_match: float = 0.5

    @property
    def guarantee_pct(self) -> float:
        if self.total_value <= 0:
            return 0.0
        return self.guaranteed_amount / self.total_value

    def validate(self) -> None:
        """
        Raises:
            InvalidContextError: if the offer cannot be scored
        """
        if self.years <= 0:
            raise InvalidContextError(f"Offer must cover at least one year, got {self.years}")
        for name in ("total_value", "apy", "guaranteed_amount", "signing_bonus"):
            if getattr(self, name) < 0:
                raise InvalidContextError(f"Offer {name} cannot be negative")
        if self.guaranteed_amount > self.total_value:
            raise InvalidContextError("Guaranteed amount cannot exceed total value")
        for name in ("team_quality", "location_match"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise InvalidContextError(f"Offer {name} must be between 0 and 1")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "years": self.years,
            "total_value": self.total_value,
            "apy": self.apy,
            "guaranteed_amount": self.guaranteed_amount,
            "signing_bonus": self.signing_bonus,
            "performance_incentives": [i.to_dict() for i in self.performance_incentives],
            "team_quality": self.team_quality,
            "location_match": self.location_match,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ContractOffer":
        """Create from dictionary."""
        return cls(
            years=int(data["years"]),
            total_value=float(data["total_value"]),
            apy=float(data["apy"]),
            guaranteed_amount=float(data.get("guaranteed_amount", 0)),
            signing_bonus=float(data.get("signing_bonus", 0)),
            performance_incentives=[
                PerformanceIncentive.from_dict(i) for i in data.get("performance_incentives", [])
            ],
            team_quality=float(data.get("team_quality", 0.5)),
            location_match=float(data.get("location_match", 0.5)),
        )


@dataclass
class MarketConditions:
    """League-wide market snapshot supplied by the caller."""

    position_demand: float = 0.5
    market_trend: MarketTrend = MarketTrend.STABLE
    recent_comparables: List[ContractOffer] = field(default_factory=list)
    league_cap_space: float = 0.0
    team_count: int = 32

    def comparable_apy(self) -> Optional[float]:
        """Mean APY of recent comparable deals, if any."""
        if not self.recent_comparables:
            return None
        return sum(o.apy for o in self.recent_comparables) / len(self.recent_comparables)


@dataclass
class ContractEvaluationContext:
    """
    Everything a single evaluation needs besides the personality.

    current_year defaults to the personality's creation year when None.
    current_team_id is the player's present team, used for loyalty
    flavour in feedback.
    """

    offer: ContractOffer
    team: TeamLocation
    market_conditions: Optional[MarketConditions] = None
    competing_offers: List[ContractOffer] = field(default_factory=list)
    current_week: int = 0
    season_stage: SeasonStage = SeasonStage.EARLY_FA
    current_year: Optional[int] = None
    current_team_id: Optional[str] = None

    def validate(self) -> None:
        self.offer.validate()
        if self.current_week < 0:
            raise InvalidContextError(f"current_week cannot be negative, got {self.current_week}")
        for competing in self.competing_offers:
            if competing.apy < 0:
                raise InvalidContextError("Competing offer APY cannot be negative")

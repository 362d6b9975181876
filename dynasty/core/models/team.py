"""Team location descriptor used for fit, tax and endorsement scoring."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MarketSize(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class Climate(Enum):
    COLD = "cold"
    TEMPERATE = "temperate"
    WARM = "warm"


# Fallback lists when a team has no explicit tax rate
TAX_FREE_STATES = {"TX", "FL", "WA", "NV", "SD", "WY", "TN", "NH", "AK"}
HIGH_TAX_STATES = {"CA", "NY", "NJ", "CT", "IL", "PA", "OH", "MI", "MN", "OR", "MD", "MA"}

# Rate assumed for a high-tax state when none is given
ASSUMED_HIGH_TAX_RATE = 0.09


@dataclass
class TeamLocation:
    """
    Where a team plays and what kind of organization it is.

    tax_rate is the state income tax as a decimal (0.0685 = 6.85%).
    When None, the state code decides between zero, high and neutral.
    """

    team_id: str
    city: str
    state: str
    market_size: MarketSize = MarketSize.MEDIUM
    climate: Climate = Climate.TEMPERATE
    timezone: str = ""
    is_contender: bool = False
    is_stable: bool = True
    tax_rate: Optional[float] = None

    @property
    def is_tax_free(self) -> bool:
        if self.tax_rate is not None:
            return self.tax_rate <= 0.0
        return self.state.upper() in TAX_FREE_STATES

    @property
    def effective_tax_rate(self) -> float:
        """Tax rate with the state-list fallback applied."""
        if self.tax_rate is not None:
            return max(0.0, self.tax_rate)
        if self.state.upper() in TAX_FREE_STATES:
            return 0.0
        if self.state.upper() in HIGH_TAX_STATES:
            return ASSUMED_HIGH_TAX_RATE
        return ASSUMED_HIGH_TAX_RATE / 2

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "team_id": self.team_id,
            "city": self.city,
            "state": self.state,
            "market_size": self.market_size.value,
            "climate": self.climate.value,
            "timezone": self.timezone,
            "is_contender": self.is_contender,
            "is_stable": self.is_stable,
            "tax_rate": self.tax_rate,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TeamLocation":
        """Create from dictionary."""
        return cls(
            team_id=data["team_id"],
            city=data.get("city", ""),
            state=data.get("state", ""),
            market_size=MarketSize(data.get("market_size", "medium")),
            climate=Climate(data.get("climate", "temperate")),
            timezone=data.get("timezone", ""),
            is_contender=data.get("is_contender", False),
            is_stable=data.get("is_stable", True),
            tax_rate=data.get("tax_rate"),
        )

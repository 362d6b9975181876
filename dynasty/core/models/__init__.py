"""Plain data records consumed by the personality engine."""

from dynasty.core.models.player import InvalidPlayerError, PlayerRecord
from dynasty.core.models.team import Climate, MarketSize, TeamLocation

__all__ = [
    "InvalidPlayerError",
    "PlayerRecord",
    "Climate",
    "MarketSize",
    "TeamLocation",
]

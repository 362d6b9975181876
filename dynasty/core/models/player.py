"""Player base-attribute record."""

from dataclasses import dataclass
from typing import Optional

from dynasty.core.enums import Position


class InvalidPlayerError(ValueError):
    """Raised when a player record is missing fields required for generation."""
    pass


@dataclass
class PlayerRecord:
    """
    The read-only slice of a player that personality generation needs.

    League, roster and stat data live elsewhere; the engine only cares
    about who the player is right now.
    """

    id: str
    position: Optional[Position]
    age: Optional[int]
    overall: Optional[int]
    years_exp: int = 0
    name: str = ""
    current_team_id: Optional[str] = None

    def validate(self) -> None:
        """
        Fail fast on structurally invalid records.

        Raises:
            InvalidPlayerError: if position, age or overall is missing or out of range
        """
        if not isinstance(self.position, Position):
            raise InvalidPlayerError(f"Player {self.id!r} has no valid position: {self.position!r}")
        if self.age is None or not 18 <= self.age <= 50:
            raise InvalidPlayerError(f"Player {self.id!r} has invalid age: {self.age!r}")
        if self.overall is None or not 0 <= self.overall <= 100:
            raise InvalidPlayerError(f"Player {self.id!r} has invalid overall: {self.overall!r}")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position.value if self.position else None,
            "age": self.age,
            "overall": self.overall,
            "years_exp": self.years_exp,
            "current_team_id": self.current_team_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlayerRecord":
        """Create from dictionary."""
        position = data.get("position")
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            position=Position(position) if position else None,
            age=data.get("age"),
            overall=data.get("overall"),
            years_exp=data.get("years_exp", 0),
            current_team_id=data.get("current_team_id"),
        )

"""Domain enumerations."""

from dynasty.core.enums.positions import POSITION_CATEGORY_MAP, Position

__all__ = [
    "POSITION_CATEGORY_MAP",
    "Position",
]

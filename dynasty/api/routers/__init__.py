"""API routers for different resource types."""

from dynasty.api.routers.contracts import router as contracts_router
from dynasty.api.routers.personality import router as personality_router

__all__ = [
    "contracts_router",
    "personality_router",
]

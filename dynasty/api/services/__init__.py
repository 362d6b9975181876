"""API services bridging request schemas and the personality engine."""

from dynasty.api.services import engine_service
from dynasty.api.services.engine_service import MalformedPersonalityError

__all__ = ["engine_service", "MalformedPersonalityError"]

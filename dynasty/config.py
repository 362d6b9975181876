"""
Engine configuration.

Controls archetype blending and where reference data is loaded from.
All settings can be overridden via environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class EngineConfig:
    """Runtime settings for personality generation."""

    # Feature flag - archetype blending is disabled by default
    blending_enabled: bool = field(
        default_factory=lambda: os.getenv("DYNASTY_BLENDING_ENABLED", "false").lower() == "true"
    )
    blend_chance: float = field(
        default_factory=lambda: float(os.getenv("DYNASTY_BLEND_CHANCE", "0.3"))
    )

    # Alternative archetype/location table (JSON); None uses the packaged table
    archetype_table_path: Optional[str] = field(
        default_factory=lambda: os.getenv("DYNASTY_ARCHETYPE_TABLE") or None
    )

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        return cls()

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if not 0.0 <= self.blend_chance <= 1.0:
            errors.append("DYNASTY_BLEND_CHANCE must be between 0 and 1")
        return errors


# Singleton config instance
_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """Get the global engine configuration."""
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def is_blending_enabled() -> bool:
    """Check if archetype blending is enabled."""
    return get_config().blending_enabled


def set_blending_enabled(enabled: bool) -> None:
    """
    Programmatically enable/disable archetype blending.

    Useful for testing or runtime toggling.
    """
    config = get_config()
    config.blending_enabled = enabled


def reset_config() -> None:
    """Drop the cached config so the next access re-reads the environment."""
    global _config
    _config = None

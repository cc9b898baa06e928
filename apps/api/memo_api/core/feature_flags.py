"""Feature flags system."""

import os

from pydantic import BaseModel


class FeatureFlags(BaseModel):
    """Feature flags configuration."""

    # Security
    enable_auth: bool = True

    # Processing features
    enable_title_generation: bool = True
    enable_storage_cleanup: bool = False

    # Observability
    enable_tracing: bool = True

    @classmethod
    def from_env(cls) -> "FeatureFlags":
        """Create feature flags from environment variables."""
        return cls(
            enable_auth=_get_bool_env("ENABLE_AUTH", True),
            enable_title_generation=_get_bool_env("ENABLE_TITLE_GENERATION", True),
            enable_storage_cleanup=_get_bool_env("ENABLE_STORAGE_CLEANUP", False),
            enable_tracing=_get_bool_env("ENABLE_TRACING", True),
        )


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ("true", "1", "yes", "on")


# Global feature flags instance
feature_flags = FeatureFlags.from_env()


def is_enabled(flag_name: str) -> bool:
    """Check if a feature flag is enabled."""
    return getattr(feature_flags, flag_name, False)

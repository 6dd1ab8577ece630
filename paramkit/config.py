"""Configuration management for paramkit.

Config resolution order (highest priority first):
1. Programmatic (ParamkitConfig passed to configure())
2. Environment variables (PARAMKIT_INCLUDE_CAUSE, PARAMKIT_LOG_FAILURES)
3. Hardcoded defaults

No config file is read.
"""

import logging
import os
from dataclasses import dataclass, asdict
from typing import Any


logger = logging.getLogger(__name__)


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(raw: str) -> bool:
    """Parse an environment-style boolean.

    Raises:
        ValueError: If the string is not a recognized boolean.
    """
    token = raw.strip().lower()
    if token in _TRUE_VALUES:
        return True
    if token in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean: {raw!r}")


@dataclass
class ParamkitConfig:
    """Engine configuration.

    - include_cause: append the innermost failure message to standardized
      error messages
    - log_failures: log every translated failure at DEBUG level
    """

    include_cause: bool = True
    log_failures: bool = True

    @classmethod
    def load(cls) -> "ParamkitConfig":
        """Load config from env vars on top of defaults."""
        config = cls()

        if val := os.environ.get("PARAMKIT_INCLUDE_CAUSE"):
            try:
                config.include_cause = parse_bool(val)
            except ValueError:
                logger.warning("Invalid PARAMKIT_INCLUDE_CAUSE=%r, ignoring", val)
        if val := os.environ.get("PARAMKIT_LOG_FAILURES"):
            try:
                config.log_failures = parse_bool(val)
            except ValueError:
                logger.warning("Invalid PARAMKIT_LOG_FAILURES=%r, ignoring", val)

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for display."""
        return asdict(self)


# =============================================================================
# Global config singleton
# =============================================================================

_config: ParamkitConfig | None = None


def get_config() -> ParamkitConfig:
    """Get the global ParamkitConfig instance.

    First call loads from env vars. Subsequent calls return cached instance.
    Use configure() to replace the global config programmatically.
    """
    global _config
    if _config is None:
        _config = ParamkitConfig.load()
    return _config


def configure(config: ParamkitConfig) -> None:
    """Set the global ParamkitConfig programmatically.

    Use this when paramkit is used as a package:
        from paramkit.config import configure, ParamkitConfig
        configure(ParamkitConfig(include_cause=False))
    """
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global config (forces reload on next get_config())."""
    global _config
    _config = None

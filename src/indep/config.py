"""Container configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum

from indep.errors import ConfigurationError


class RebindPolicy(str, Enum):
    """What a consumer does when a bound slot receives a different handle."""
    OVERWRITE = "overwrite"  # Last write wins, silently
    WARN = "warn"            # Last write wins, with a warning


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class IndepConfig:
    """Configuration shared by a schema and the pools wired against it.

    Attributes:
        rebind_policy: Behaviour when an occupied slot is overwritten
        metrics_enabled: Whether pools record Prometheus metrics
        log_level: Log level used by the command line
    """

    rebind_policy: RebindPolicy = RebindPolicy.OVERWRITE
    metrics_enabled: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        try:
            policy = RebindPolicy(self.rebind_policy)
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown rebind policy: {self.rebind_policy!r}"
            ) from e
        # Frozen: normalise through object.__setattr__
        object.__setattr__(self, "rebind_policy", policy)

        level = str(self.log_level).upper()
        if level not in _LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.log_level!r}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def default(cls) -> "IndepConfig":
        """Create config with default settings."""
        return cls()

    @classmethod
    def from_env(cls) -> "IndepConfig":
        """Load configuration from environment variables.

        Environment variables:
            INDEP_REBIND_POLICY: overwrite or warn (default: overwrite)
            INDEP_METRICS_ENABLED: Whether to record metrics (default: true)
            INDEP_LOG_LEVEL: CLI log level (default: WARNING)

        Returns:
            IndepConfig instance populated from environment

        Raises:
            ConfigurationError: If a variable holds an unknown value
        """
        return cls(
            rebind_policy=os.getenv("INDEP_REBIND_POLICY", "overwrite").lower(),
            metrics_enabled=os.getenv("INDEP_METRICS_ENABLED", "true").lower() == "true",
            log_level=os.getenv("INDEP_LOG_LEVEL", "WARNING"),
        )

    @classmethod
    def strict(cls) -> "IndepConfig":
        """Create a config that warns on every conflicting rebind."""
        return cls(rebind_policy=RebindPolicy.WARN)


__all__ = [
    "IndepConfig",
    "RebindPolicy",
]

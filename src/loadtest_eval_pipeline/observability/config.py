"""
Observability Configuration

Loads logging and tracing settings from environment variables.
"""

import os
from dataclasses import dataclass


@dataclass
class ObservabilityConfig:
    """Configuration for logging and tracing.

    Environment Variables:
        LOADTEST_TRACING_ENABLED: Emit OpenTelemetry spans (default: false)
        LOADTEST_SERVICE_NAME: Tracer name (default: loadtest-eval-pipeline)
        LOADTEST_LOG_LEVEL: Root log level for the CLI (default: INFO)
    """

    tracing_enabled: bool = False
    service_name: str = "loadtest-eval-pipeline"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ObservabilityConfig":
        """Load config from environment variables."""
        return cls(
            tracing_enabled=os.environ.get("LOADTEST_TRACING_ENABLED", "false").lower() in ("true", "1", "yes"),
            service_name=os.environ.get("LOADTEST_SERVICE_NAME", "loadtest-eval-pipeline"),
            log_level=os.environ.get("LOADTEST_LOG_LEVEL", "INFO").upper(),
        )


# Global config singleton
_config: ObservabilityConfig | None = None


def get_config() -> ObservabilityConfig:
    """Get the global observability config (lazy-loaded from env)."""
    global _config
    if _config is None:
        _config = ObservabilityConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset config (useful for testing)."""
    global _config
    _config = None

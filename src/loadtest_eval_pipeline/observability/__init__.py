"""
Observability Module - logging setup and OpenTelemetry spans.

USAGE:
------
# At application startup:
from loadtest_eval_pipeline.observability import configure_logging

configure_logging()  # honours LOADTEST_LOG_LEVEL

# In code that needs tracing:
from loadtest_eval_pipeline.observability import get_tracer

tracer = get_tracer()
with tracer.start_span("loadtest.parse", attributes={"key": "value"}) as span:
    # ... do work ...
    span.set_attribute("result", "success")
"""

from __future__ import annotations

import logging

from loadtest_eval_pipeline.observability.config import (
    ObservabilityConfig,
    get_config,
    reset_config,
)
from loadtest_eval_pipeline.observability.tracer import (
    TracerProtocol,
    SpanProtocol,
    NoOpTracer,
    NoOpSpan,
    get_tracer,
    reset_tracer,
)
from loadtest_eval_pipeline.observability.attributes import (
    PARSE_FORMAT,
    PARSE_INPUT_BYTES,
    AGGREGATE_SAMPLE_COUNT,
    EVAL_PASSED,
    EVAL_GAP,
    parse_attributes,
    aggregate_attributes,
    evaluation_attributes,
)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(config: ObservabilityConfig | None = None) -> None:
    """
    Configure root logging for command-line use.

    Library code only ever logs through module loggers; the host
    application decides handlers and levels.
    """
    config = config or get_config()
    level = getattr(logging, config.log_level, None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


__all__ = [
    # Logging
    "configure_logging",
    "LOG_FORMAT",
    # Config
    "ObservabilityConfig",
    "get_config",
    "reset_config",
    # Tracer
    "TracerProtocol",
    "SpanProtocol",
    "NoOpTracer",
    "NoOpSpan",
    "get_tracer",
    "reset_tracer",
    # Attributes
    "PARSE_FORMAT",
    "PARSE_INPUT_BYTES",
    "AGGREGATE_SAMPLE_COUNT",
    "EVAL_PASSED",
    "EVAL_GAP",
    "parse_attributes",
    "aggregate_attributes",
    "evaluation_attributes",
]

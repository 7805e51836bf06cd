"""
Parsing module - decode JMeter results logs into Sample records.

- formats.py: LogFormat, sniff_format, fixed XML/CSV field schemas
- fields.py: field coercion rules
- records.py: build_sample, shared by both decoders
- delimited.py / tagged.py: the CSV and XML decoders
- parser.py: parse_samples entry point
"""

from loadtest_eval_pipeline.parsing.formats import (
    LogFormat,
    sniff_format,
)
from loadtest_eval_pipeline.parsing.sample import (
    Sample,
    ParseCounts,
    ParseStats,
    ParseResult,
)
from loadtest_eval_pipeline.parsing.parser import (
    parse_samples,
    read_log_file,
)

__all__ = [
    "LogFormat",
    "sniff_format",
    "Sample",
    "ParseCounts",
    "ParseStats",
    "ParseResult",
    "parse_samples",
    "read_log_file",
]

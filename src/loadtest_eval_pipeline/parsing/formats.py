"""
Format detection and the fixed field schemas of both log formats.

JMeter writes results either as XML (one element per sample, values in
attributes) or as CSV with a header row. The format is chosen once from
the first line; everything after that is a fixed-schema lookup.
"""

from enum import Enum


class LogFormat(Enum):
    """Wire format of a results log."""

    TAGGED = "xml"
    DELIMITED = "csv"


XML_PROLOG = "<?xml"

# Element names carrying samples, in order of preference
SAMPLE_ELEMENTS = ("httpSample", "sample")

# Sample field -> XML attribute
XML_ATTRIBUTES: dict[str, str] = {
    "label": "lb",
    "timestamp": "ts",
    "duration": "t",
    "latency": "lt",
    "connect": "ct",
    "status_code": "rc",
    "success": "s",
    "error_message": "rm",
    "thread_name": "tn",
    "bytes_received": "by",
    "bytes_sent": "sby",
}

# Sample field -> CSV header name
CSV_COLUMNS: dict[str, str] = {
    "label": "label",
    "timestamp": "timeStamp",
    "duration": "elapsed",
    "latency": "Latency",
    "connect": "Connect",
    "status_code": "responseCode",
    "success": "success",
    "error_message": "responseMessage",
    "thread_name": "threadName",
    "bytes_received": "bytes",
    "bytes_sent": "sentBytes",
}


def sniff_format(first_line: str | None) -> LogFormat:
    """Pick the decoder from the first line of the log.

    An XML prolog selects the tagged-element format; anything else,
    including an empty first line, is treated as CSV.
    """
    if first_line and first_line.lstrip("\ufeff").strip().startswith(XML_PROLOG):
        return LogFormat.TAGGED
    return LogFormat.DELIMITED

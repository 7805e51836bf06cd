"""
XML (tagged-element) decoder.

JMeter XML results hold one element per sample: `httpSample` for HTTP
samplers and `sample` for everything else (and for transaction
controller parents, which may nest httpSample children). When a document
contains any httpSample elements only those are used; otherwise the
generic sample elements are.

The document is consumed incrementally with iterparse. Each sample
element is cleared once decoded and the root is emptied after it, so
only the element being read is held in memory. Generic sample
elements stop being decoded as soon as the first httpSample starts.
"""

from __future__ import annotations

import io
import logging
import xml.etree.ElementTree as ET

from loadtest_eval_pipeline.core.errors import FatalInputError, RecoverableRecordError
from loadtest_eval_pipeline.parsing.formats import SAMPLE_ELEMENTS, XML_ATTRIBUTES
from loadtest_eval_pipeline.parsing.records import build_sample, note_skipped
from loadtest_eval_pipeline.parsing.sample import ParseStats, Sample

logger = logging.getLogger(__name__)


def decode_tagged(
    content: bytes,
    stats: ParseStats,
    strict_timestamps: bool = False,
) -> list[Sample]:
    """
    Decode an XML results document into samples.

    Raises:
        FatalInputError: when the document is not well-formed XML
    """
    preferred, fallback = SAMPLE_ELEMENTS
    buckets: dict[str, list[Sample]] = {tag: [] for tag in SAMPLE_ELEMENTS}
    bucket_stats: dict[str, ParseStats] = {tag: ParseStats() for tag in SAMPLE_ELEMENTS}
    root = None

    try:
        for event, element in ET.iterparse(io.BytesIO(content), events=("start", "end")):
            if root is None:
                root = element
            tag = element.tag

            if event == "start":
                if tag == preferred and fallback in buckets:
                    # Parents decoded so far are superseded by their httpSample children
                    del buckets[fallback]
                    del bucket_stats[fallback]
                continue

            if tag not in SAMPLE_ELEMENTS:
                continue

            if tag in buckets:
                tag_stats = bucket_stats[tag]
                tag_stats.records_read += 1
                attributes = element.attrib
                try:
                    buckets[tag].append(
                        build_sample(
                            lambda field: attributes.get(XML_ATTRIBUTES[field]),
                            tag_stats,
                            strict_timestamps,
                        )
                    )
                except RecoverableRecordError as e:
                    note_skipped(tag_stats, f"<{tag}> #{tag_stats.records_read}", e)
            element.clear()
            root.clear()
    except ET.ParseError as e:
        raise FatalInputError(f"Malformed XML results: {e}") from e

    chosen = fallback if fallback in buckets and bucket_stats[fallback].records_read else preferred
    chosen_stats = bucket_stats[chosen]
    stats.records_read += chosen_stats.records_read
    stats.records_skipped += chosen_stats.records_skipped
    stats.degraded_fields += chosen_stats.degraded_fields
    stats.timestamp_fallbacks += chosen_stats.timestamp_fallbacks

    samples = buckets[chosen]
    logger.info(f"Found {chosen_stats.records_read} <{chosen}> elements in XML results")
    return samples

"""
Unit Tests for the Record Parser

Covers format sniffing, both decoders, and the error taxonomy:
1. Malformed records are skipped and counted, never fatal
2. Unparsable optional fields degrade to None
3. Missing input / missing header / broken XML are fatal
"""

import pytest

from loadtest_eval_pipeline.core.errors import FatalInputError
from loadtest_eval_pipeline.parsing import (
    LogFormat,
    parse_samples,
    read_log_file,
    sniff_format,
)


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------

CSV_HEADER = (
    "timeStamp,elapsed,label,responseCode,responseMessage,threadName,dataType,"
    "success,failureMessage,bytes,sentBytes,grpThreads,allThreads,URL,Latency,IdleTime,Connect"
)


def csv_line(ts="1700000000000", elapsed="120", label="Login", rc="200", msg="OK",
             success="true", received="512", sent="128", latency="100", connect="12"):
    return (
        f"{ts},{elapsed},{label},{rc},{msg},Thread Group 1-1,text,"
        f"{success},,{received},{sent},1,1,http://example.test/x,{latency},0,{connect}"
    )


@pytest.fixture
def csv_content() -> bytes:
    lines = [
        CSV_HEADER,
        csv_line(),
        csv_line(ts="1700000001000", elapsed="340", label="Checkout", rc="500",
                 msg="Internal Server Error", success="false", received="256", sent="64",
                 latency="300", connect="15"),
    ]
    return ("\n".join(lines) + "\n").encode()


@pytest.fixture
def xml_content() -> bytes:
    return b"""<?xml version="1.0" encoding="UTF-8"?>
<testResults version="1.2">
<httpSample t="120" it="0" lt="100" ct="12" ts="1700000000000" s="true" lb="Login" rc="200" rm="OK" tn="Thread Group 1-1" dt="text" by="512" sby="128" ng="1" na="1"/>
<httpSample t="340" lt="300" ct="15" ts="1700000001000" s="false" lb="Checkout" rc="500" rm="Internal Server Error" tn="Thread Group 1-1" by="256" sby="64"/>
</testResults>
"""


# ---------------------------------------------------------------------------
# SNIFF TESTS
# ---------------------------------------------------------------------------


class TestSniffFormat:
    """Test format detection from the first line."""

    def test_xml_prolog(self):
        assert sniff_format('<?xml version="1.0"?>') is LogFormat.TAGGED

    def test_xml_prolog_with_whitespace_and_bom(self):
        assert sniff_format('  <?xml version="1.0"?>') is LogFormat.TAGGED
        assert sniff_format('\ufeff<?xml version="1.0"?>') is LogFormat.TAGGED

    def test_csv_header(self):
        assert sniff_format(CSV_HEADER) is LogFormat.DELIMITED

    def test_empty_defaults_to_csv(self):
        assert sniff_format("") is LogFormat.DELIMITED
        assert sniff_format(None) is LogFormat.DELIMITED


# ---------------------------------------------------------------------------
# CSV TESTS
# ---------------------------------------------------------------------------


class TestDelimitedParsing:
    """Test the CSV decoder."""

    def test_decodes_all_fields(self, csv_content):
        """Should map every known column onto the Sample."""
        result = parse_samples(csv_content)

        assert result.log_format is LogFormat.DELIMITED
        assert len(result.samples) == 2
        login = result.samples[0]
        assert login.label == "Login"
        assert login.timestamp_ms == 1700000000000
        assert login.duration_ms == 120
        assert login.latency_ms == 100
        assert login.connect_ms == 12
        assert login.status_code == 200
        assert login.success is True
        assert login.error_message == "OK"
        assert login.thread_name == "Thread Group 1-1"
        assert login.bytes_received == 512
        assert login.bytes_sent == 128
        assert result.samples[1].success is False

    def test_preserves_order(self, csv_content):
        result = parse_samples(csv_content)
        assert [s.label for s in result.samples] == ["Login", "Checkout"]

    def test_accepts_text_input(self, csv_content):
        result = parse_samples(csv_content.decode())
        assert len(result.samples) == 2

    def test_crlf_line_endings(self, csv_content):
        result = parse_samples(csv_content.replace(b"\n", b"\r\n"))
        assert len(result.samples) == 2
        assert result.samples[0].connect_ms == 12

    def test_column_order_is_taken_from_header(self):
        content = b"label,elapsed,timeStamp,success\nSearch,75,1700000000000,true\n"
        sample = parse_samples(content).samples[0]
        assert sample.label == "Search"
        assert sample.duration_ms == 75
        assert sample.latency_ms is None
        assert sample.bytes_received is None

    def test_label_is_trimmed(self):
        content = b"timeStamp,elapsed,label,success\n1700000000000,10,  Login  ,true\n"
        assert parse_samples(content).samples[0].label == "Login"

    def test_short_line_is_skipped_not_fatal(self, csv_content):
        """A line with fewer columns than the header loses its label and is discarded."""
        content = csv_content + b"1700000002000,90\n"
        result = parse_samples(content)

        assert len(result.samples) == 2
        assert result.stats.records_read == 3
        assert result.stats.records_skipped == 1

    def test_invalid_elapsed_is_skipped(self, csv_content):
        content = csv_content + csv_line(elapsed="abc").encode() + b"\n"
        result = parse_samples(content)

        assert len(result.samples) == 2
        assert result.stats.records_skipped == 1

    def test_unparsable_optional_field_degrades(self):
        content = (CSV_HEADER + "\n" + csv_line(latency="n/a", rc="Non HTTP response code") + "\n").encode()
        result = parse_samples(content)

        sample = result.samples[0]
        assert sample.latency_ms is None
        assert sample.status_code is None
        assert sample.duration_ms == 120
        assert result.stats.degraded_fields == 2
        assert result.stats.records_skipped == 0

    def test_unparsable_timestamp_falls_back_to_now(self):
        content = (CSV_HEADER + "\n" + csv_line(ts="yesterday") + "\n").encode()
        result = parse_samples(content)

        assert len(result.samples) == 1
        assert result.samples[0].timestamp_ms > 1700000000000
        assert result.stats.timestamp_fallbacks == 1

    def test_strict_timestamps_skip_record(self):
        content = (CSV_HEADER + "\n" + csv_line(ts="yesterday") + "\n").encode()
        result = parse_samples(content, strict_timestamps=True)

        assert result.samples == []
        assert result.stats.records_skipped == 1
        assert result.stats.timestamp_fallbacks == 0

    def test_blank_lines_ignored(self, csv_content):
        result = parse_samples(csv_content + b"\n\n")
        assert result.stats.records_read == 2
        assert result.stats.records_skipped == 0

    def test_header_only_yields_no_samples(self):
        result = parse_samples((CSV_HEADER + "\n").encode())
        assert result.samples == []
        assert result.stats.records_read == 0

    def test_empty_input_is_fatal(self):
        with pytest.raises(FatalInputError):
            parse_samples(b"")

    def test_missing_input_is_fatal(self):
        with pytest.raises(FatalInputError):
            parse_samples(None)


# ---------------------------------------------------------------------------
# XML TESTS
# ---------------------------------------------------------------------------


class TestTaggedParsing:
    """Test the XML decoder."""

    def test_decodes_all_attributes(self, xml_content):
        result = parse_samples(xml_content)

        assert result.log_format is LogFormat.TAGGED
        assert len(result.samples) == 2
        login = result.samples[0]
        assert login.label == "Login"
        assert login.timestamp_ms == 1700000000000
        assert login.duration_ms == 120
        assert login.latency_ms == 100
        assert login.connect_ms == 12
        assert login.status_code == 200
        assert login.success is True
        assert login.error_message == "OK"
        assert login.thread_name == "Thread Group 1-1"
        assert login.bytes_received == 512
        assert login.bytes_sent == 128

    def test_same_samples_as_csv(self, xml_content, csv_content):
        """Both formats decode the same run into identical records."""
        assert parse_samples(xml_content).samples == parse_samples(csv_content).samples

    def test_http_samples_preferred_over_parents(self):
        content = b"""<?xml version="1.0"?>
<testResults>
<sample t="500" ts="1700000000000" s="true" lb="Transaction">
  <httpSample t="200" ts="1700000000000" s="true" lb="Step 1"/>
  <httpSample t="300" ts="1700000000200" s="true" lb="Step 2"/>
</sample>
</testResults>
"""
        result = parse_samples(content)
        assert [s.label for s in result.samples] == ["Step 1", "Step 2"]
        assert result.stats.records_read == 2

    def test_generic_samples_before_first_http_sample_are_dropped(self):
        """Earlier generic elements, even malformed ones, do not count once httpSample appears."""
        content = b"""<?xml version="1.0"?>
<testResults>
<sample t="50" ts="1700000000000" s="true" lb="JDBC Request"/>
<sample t="oops" ts="1700000000100" s="true" lb="JDBC Request"/>
<httpSample t="200" ts="1700000000200" s="true" lb="Login"/>
<sample t="70" ts="1700000000300" s="true" lb="JDBC Request"/>
<httpSample t="300" ts="1700000000400" s="true" lb="Checkout"/>
</testResults>
"""
        result = parse_samples(content)

        assert [s.label for s in result.samples] == ["Login", "Checkout"]
        assert result.stats.records_read == 2
        assert result.stats.records_skipped == 0

    def test_generic_samples_used_without_http_samples(self):
        content = b"""<?xml version="1.0"?>
<testResults>
<sample t="50" ts="1700000000000" s="true" lb="JDBC Request"/>
<sample t="70" ts="1700000000500" s="false" lb="JDBC Request"/>
</testResults>
"""
        result = parse_samples(content)
        assert len(result.samples) == 2
        assert result.samples[1].success is False

    def test_malformed_element_is_skipped(self, xml_content):
        content = xml_content.replace(
            b"</testResults>",
            b'<httpSample t="abc" ts="1700000002000" s="true" lb="Broken"/>\n'
            b'<httpSample t="10" ts="1700000002000" s="true"/>\n'
            b"</testResults>",
        )
        result = parse_samples(content)

        assert len(result.samples) == 2
        assert result.stats.records_read == 4
        assert result.stats.records_skipped == 2

    def test_not_well_formed_is_fatal(self):
        content = b'<?xml version="1.0"?>\n<testResults><httpSample t="1" lb="x"'
        with pytest.raises(FatalInputError):
            parse_samples(content)


# ---------------------------------------------------------------------------
# FILE READING TESTS
# ---------------------------------------------------------------------------


class TestReadLogFile:
    """Test reading results from disk."""

    def test_reads_bytes(self, tmp_path, csv_content):
        path = tmp_path / "results.jtl"
        path.write_bytes(csv_content)
        assert read_log_file(path) == csv_content

    def test_missing_file_is_fatal(self, tmp_path):
        with pytest.raises(FatalInputError):
            read_log_file(tmp_path / "missing.jtl")

"""
Unit Tests for Baseline Evaluation

Tests the allow-list, the four threshold checks, configuration gaps and
the re-evaluation merge.

STAFF ENGINEER PATTERNS:
------------------------
1. Boundary values tested explicitly (== threshold passes)
2. Missing configuration yields an empty report, never an exception
3. Lenient coercion of hand-edited capability records
"""

import pytest

from loadtest_eval_pipeline.core.errors import ConfigurationGap
from loadtest_eval_pipeline.evals import (
    BaselineThresholds,
    CapabilityConfig,
    CriterionResult,
    EvaluationReport,
    check_label,
    evaluate,
    filter_to_allow_list,
    merge_reports,
    merge_results,
)
from loadtest_eval_pipeline.stats import LabelMetrics


def make_metrics(label: str, p95=200.0, avg=150.0, p90=180.0, throughput=10.0) -> LabelMetrics:
    return LabelMetrics(
        label=label,
        total_count=10,
        success_count=10,
        p95_ms=p95,
        avg_ms=avg,
        p90_ms=p90,
        throughput=throughput,
    )


def make_result(label: str, passed: bool = True, p95: float = 100.0) -> CriterionResult:
    return CriterionResult(
        label=label,
        p95_pass=passed,
        avg_pass=True,
        p90_pass=True,
        throughput_pass=True,
        p95=p95,
        avg=80.0,
        p90=90.0,
        throughput=5.0,
    )


# ---------------------------------------------------------------------------
# FIXTURES
# ---------------------------------------------------------------------------


@pytest.fixture
def label_metrics() -> dict[str, LabelMetrics]:
    return {
        "Total": make_metrics("Total", p95=300.0),
        "Login": make_metrics("Login", p95=300.0),
        "Checkout": make_metrics("Checkout", p95=120.0),
        "Search": make_metrics("Search"),
    }


# ---------------------------------------------------------------------------
# THRESHOLD MODEL TESTS
# ---------------------------------------------------------------------------


class TestBaselineThresholds:
    """Test threshold parsing from capability records."""

    def test_camel_case_keys(self):
        t = BaselineThresholds.model_validate(
            {"p95MaxMs": 800, "avgMaxMs": 400, "p90MaxMs": 600, "throughputMin": 5}
        )
        assert t.p95_max_ms == 800.0
        assert t.avg_max_ms == 400.0
        assert t.p90_max_ms == 600.0
        assert t.throughput_min == 5.0

    def test_snake_case_keys(self):
        t = BaselineThresholds(p95_max_ms=250)
        assert t.p95_max_ms == 250.0
        assert t.avg_max_ms == 0.0

    def test_lenient_coercion(self):
        """Non-numeric values disable the threshold instead of failing."""
        t = BaselineThresholds.model_validate(
            {"p95MaxMs": " 250 ", "avgMaxMs": None, "p90MaxMs": "abc", "throughputMin": True}
        )
        assert t.p95_max_ms == 250.0
        assert t.avg_max_ms == 0.0
        assert t.p90_max_ms == 0.0
        assert t.throughput_min == 0.0

    def test_non_finite_disabled(self):
        t = BaselineThresholds.model_validate({"p95MaxMs": float("nan"), "avgMaxMs": "inf"})
        assert t.p95_max_ms == 0.0
        assert t.avg_max_ms == 0.0

    def test_is_configured(self):
        assert BaselineThresholds(throughput_min=1).is_configured
        assert not BaselineThresholds().is_configured
        assert not BaselineThresholds(p95_max_ms=-5).is_configured

    def test_to_dict_uses_stored_keys(self):
        assert BaselineThresholds(p95_max_ms=250).to_dict() == {
            "p95MaxMs": 250.0,
            "avgMaxMs": 0.0,
            "p90MaxMs": 0.0,
            "throughputMin": 0.0,
        }

    def test_from_acceptance_criteria(self):
        t = BaselineThresholds.from_acceptance_criteria({"baseline": {"p95MaxMs": 500}, "other": 1})
        assert t is not None
        assert t.p95_max_ms == 500.0

    @pytest.mark.parametrize("criteria", [None, {}, {"baseline": "fast"}, {"other": {}}])
    def test_from_acceptance_criteria_without_baseline(self, criteria):
        assert BaselineThresholds.from_acceptance_criteria(criteria) is None


class TestCapabilityConfig:
    """Test the capability record."""

    def test_test_cases_as_records_and_names(self):
        capability = CapabilityConfig.model_validate(
            {
                "name": "Checkout flow",
                "testCases": [{"testCaseName": "Login"}, "Checkout", {"name": "Search"}, {"testCaseName": None}],
                "acceptanceCriteria": {"baseline": {"p95MaxMs": 800}},
            }
        )
        assert capability.expected_labels == ["Login", "Checkout", "Search"]
        assert capability.thresholds.p95_max_ms == 800.0

    def test_missing_sections(self):
        capability = CapabilityConfig.model_validate({"name": "Empty"})
        assert capability.expected_labels == []
        assert capability.thresholds is None

    def test_from_file(self, tmp_path):
        path = tmp_path / "capability.json"
        path.write_text('{"name": "x", "testCases": ["Login"], "acceptanceCriteria": {"baseline": {"avgMaxMs": 90}}}')

        capability = CapabilityConfig.from_file(path)
        assert capability.expected_labels == ["Login"]
        assert capability.thresholds.avg_max_ms == 90.0


# ---------------------------------------------------------------------------
# ALLOW-LIST TESTS
# ---------------------------------------------------------------------------


class TestAllowList:
    """Test label filtering against expected test cases."""

    def test_case_insensitive_and_trimmed(self, label_metrics):
        matched = filter_to_allow_list(label_metrics, ["  login ", "CHECKOUT"])
        assert list(matched) == ["Login", "Checkout"]

    def test_total_excluded_unless_listed(self, label_metrics):
        assert "Total" not in filter_to_allow_list(label_metrics, ["Login"])
        assert "Total" in filter_to_allow_list(label_metrics, ["total"])

    def test_no_partial_matches(self, label_metrics):
        assert filter_to_allow_list(label_metrics, ["Log"]) == {}

    def test_empty_allow_list_matches_nothing(self, label_metrics):
        assert filter_to_allow_list(label_metrics, []) == {}
        assert filter_to_allow_list(label_metrics, ["", None]) == {}


# ---------------------------------------------------------------------------
# CHECK TESTS
# ---------------------------------------------------------------------------


class TestCheckLabel:
    """Test the four threshold checks."""

    def test_p95_over_limit_fails(self):
        """p95 300 against 250 fails; throughput 0 disables that check."""
        thresholds = BaselineThresholds(p95_max_ms=250, throughput_min=0)
        result = check_label("A", make_metrics("A", p95=300.0, throughput=0.0), thresholds)

        assert result.p95_pass is False
        assert result.throughput_pass is True
        assert result.passed is False
        assert result.failed_checks == ["p95"]
        assert result.p95 == 300.0

    def test_boundaries_pass(self):
        thresholds = BaselineThresholds(p95_max_ms=200, avg_max_ms=150, p90_max_ms=180, throughput_min=10)
        result = check_label("A", make_metrics("A"), thresholds)
        assert result.passed

    def test_low_throughput_fails(self):
        thresholds = BaselineThresholds(throughput_min=20)
        result = check_label("A", make_metrics("A", throughput=19.9), thresholds)
        assert result.failed_checks == ["throughput"]

    def test_disabled_checks_always_pass(self):
        thresholds = BaselineThresholds(avg_max_ms=1000)
        result = check_label("A", make_metrics("A", p95=99999.0, p90=99999.0, throughput=0.0), thresholds)
        assert result.passed

    def test_to_dict_shape(self):
        thresholds = BaselineThresholds(p95_max_ms=250)
        data = check_label("A", make_metrics("A", p95=300.0), thresholds).to_dict()

        assert data["pass"] is False
        assert data["checks"] == {"p95Pass": False, "avgPass": True, "p90Pass": True, "throughputPass": True}
        assert data["metrics"]["p95"] == 300.0


# ---------------------------------------------------------------------------
# EVALUATE TESTS
# ---------------------------------------------------------------------------


class TestEvaluate:
    """Test full evaluation including configuration gaps."""

    def test_only_expected_labels_evaluated(self, label_metrics):
        report = evaluate(label_metrics, ["Login", "Checkout"], BaselineThresholds(p95_max_ms=250))

        assert list(report.results) == ["Login", "Checkout"]
        assert report.failed_labels == ["Login"]
        assert report.all_passed is False
        assert report.pass_rate == 0.5
        assert report.gap is None

    def test_unmatched_expected_labels_reported(self, label_metrics):
        report = evaluate(label_metrics, ["Login", "Payment"], BaselineThresholds(p95_max_ms=500))

        assert list(report.results) == ["Login"]
        assert report.unmatched_labels == ("Payment",)

    def test_no_thresholds(self, label_metrics):
        report = evaluate(label_metrics, ["Login"], None)

        assert report.is_empty
        assert report.gap is ConfigurationGap.NO_THRESHOLDS
        assert report.all_passed

    def test_all_thresholds_disabled(self, label_metrics):
        report = evaluate(label_metrics, ["Login"], BaselineThresholds())
        assert report.is_empty
        assert report.gap is ConfigurationGap.NO_THRESHOLDS

    def test_no_allow_list(self, label_metrics):
        report = evaluate(label_metrics, [], BaselineThresholds(p95_max_ms=250))
        assert report.is_empty
        assert report.gap is ConfigurationGap.NO_ALLOW_LIST

    def test_no_matching_labels(self, label_metrics):
        report = evaluate(label_metrics, ["Payment"], BaselineThresholds(p95_max_ms=250))

        assert report.is_empty
        assert report.gap is ConfigurationGap.NO_MATCHING_LABELS
        assert report.unmatched_labels == ("Payment",)
        assert report.pass_rate == 0.0

    def test_report_round_trips_through_dict(self, label_metrics):
        report = evaluate(label_metrics, ["Login", "Payment"], BaselineThresholds(p95_max_ms=250))
        assert EvaluationReport.from_dict(report.to_dict()) == report

    def test_label_metrics_kept_for_matched_labels_only(self, label_metrics):
        report = evaluate(label_metrics, ["login", "Payment"], BaselineThresholds(p95_max_ms=250))

        assert list(report.label_metrics) == ["Login"]
        assert report.label_metrics["Login"] == label_metrics["Login"]

    def test_report_maps_are_read_only(self, label_metrics):
        report = evaluate(label_metrics, ["Login"], BaselineThresholds(p95_max_ms=250))

        with pytest.raises(TypeError):
            report.results["Search"] = make_result("Search")
        with pytest.raises(TypeError):
            report.label_metrics["Search"] = label_metrics["Search"]

    def test_report_does_not_alias_caller_dict(self):
        results = {"A": make_result("A")}
        report = EvaluationReport(thresholds=BaselineThresholds(p95_max_ms=1), results=results)
        results["B"] = make_result("B")

        assert list(report.results) == ["A"]


class TestStoredShapes:
    """Test rejection of stored reports with the wrong shape."""

    @pytest.mark.parametrize("data", [[], "x", None, 3])
    def test_report_root_must_be_an_object(self, data):
        with pytest.raises(ValueError):
            EvaluationReport.from_dict(data)

    def test_criterion_must_be_an_object(self):
        with pytest.raises(ValueError):
            CriterionResult.from_dict("A", None)

    def test_label_statistics_must_be_objects(self):
        with pytest.raises(ValueError):
            EvaluationReport.from_dict({"labelStatistics": {"A": [1, 2]}})


# ---------------------------------------------------------------------------
# MERGE TESTS
# ---------------------------------------------------------------------------


class TestMerge:
    """Test folding a re-evaluation into stored results."""

    def test_right_biased_union(self):
        prior = {"A": make_result("A", p95=1.0), "B": make_result("B")}
        new = {"A": make_result("A", p95=2.0), "C": make_result("C")}

        merged = merge_results(prior, new)

        assert set(merged) == {"A", "B", "C"}
        assert merged["A"].p95 == 2.0
        assert merged["B"] is prior["B"]

    def test_merge_into_nothing(self):
        new = EvaluationReport(thresholds=BaselineThresholds(p95_max_ms=1), results={"A": make_result("A")})
        assert merge_reports(None, new) is new

    def test_reports_use_new_thresholds(self):
        prior = EvaluationReport(
            thresholds=BaselineThresholds(p95_max_ms=100),
            results={"A": make_result("A", passed=False)},
        )
        new = EvaluationReport(
            thresholds=BaselineThresholds(p95_max_ms=200),
            results={"B": make_result("B")},
            unmatched_labels=("C",),
        )

        merged = merge_reports(prior, new)

        assert merged.thresholds.p95_max_ms == 200.0
        assert list(merged.results) == ["A", "B"]
        assert merged.failed_labels == ["A"]
        assert merged.unmatched_labels == ("C",)

    def test_label_metrics_merged_right_biased(self):
        prior = EvaluationReport(
            thresholds=BaselineThresholds(p95_max_ms=100),
            results={"A": make_result("A"), "B": make_result("B")},
            label_metrics={"A": make_metrics("A", p95=1.0), "B": make_metrics("B")},
        )
        new = EvaluationReport(
            thresholds=BaselineThresholds(p95_max_ms=100),
            results={"A": make_result("A")},
            label_metrics={"A": make_metrics("A", p95=2.0)},
        )

        merged = merge_reports(prior, new)

        assert list(merged.label_metrics) == ["A", "B"]
        assert merged.label_metrics["A"].p95_ms == 2.0
        assert merged.label_metrics["B"] is prior.label_metrics["B"]

    def test_empty_reevaluation_keeps_prior(self):
        prior = EvaluationReport(
            thresholds=BaselineThresholds(p95_max_ms=100),
            results={"A": make_result("A")},
        )
        new = EvaluationReport(thresholds=None, gap=ConfigurationGap.NO_THRESHOLDS)

        merged = merge_reports(prior, new)

        assert list(merged.results) == ["A"]
        assert merged.gap is None
        assert merged.thresholds.p95_max_ms == 100.0

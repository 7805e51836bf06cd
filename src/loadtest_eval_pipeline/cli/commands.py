"""
CLI commands - entry points for summarizing and gating a results log.

Each command follows a consistent pattern:
1. Parse arguments
2. Load environment and logging
3. Run the pipeline
4. Print results
5. Return exit code

Exit codes: 0 = ok/passed, 1 = baseline gate failed, 2 = unusable input
or configuration.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from loadtest_eval_pipeline.core.errors import FatalInputError
from loadtest_eval_pipeline.evals.baseline import CapabilityConfig
from loadtest_eval_pipeline.evals.store import FileEvaluationStore
from loadtest_eval_pipeline.harness.assembler import RunSummary
from loadtest_eval_pipeline.harness.pipeline import (
    reevaluate_run,
    summarize_capability_run,
    summarize_run,
)
from loadtest_eval_pipeline.observability import configure_logging
from loadtest_eval_pipeline.parsing.parser import read_log_file

EXIT_OK = 0
EXIT_GATE_FAILED = 1
EXIT_BAD_INPUT = 2


def _load_env() -> None:
    """Load environment variables from .env file and set up logging."""
    load_dotenv()
    configure_logging()


def _load_capability(path: str | None) -> CapabilityConfig | None:
    if path is None:
        return None
    return CapabilityConfig.from_file(path)


def _summarize(args: argparse.Namespace) -> RunSummary:
    content = read_log_file(args.results)
    capability = _load_capability(args.capability)
    if capability is None:
        return summarize_run(content, strict_timestamps=args.strict_timestamps)
    return summarize_capability_run(content, capability, strict_timestamps=args.strict_timestamps)


def _print_label_table(summary: RunSummary) -> None:
    header = (
        f"  {'Label':<32} {'Samples':>8} {'Avg':>8} {'Min':>7} {'Max':>7} {'Med':>7} "
        f"{'P90':>7} {'P95':>7} {'P99':>7} {'Err%':>7} {'Req/s':>8}"
    )
    print(header)
    print("  " + "-" * (len(header) - 2))
    for label, m in summary.labels.items():
        print(
            f"  {label[:32]:<32} {m.total_count:>8} {m.avg_ms:>8.1f} {m.min_ms:>7} {m.max_ms:>7} "
            f"{m.median_ms:>7.0f} {m.p90_ms:>7.0f} {m.p95_ms:>7.0f} {m.p99_ms:>7.0f} "
            f"{m.error_rate_percent:>7.2f} {m.throughput:>8.2f}"
        )


def _print_evaluation(summary: RunSummary, quiet: bool = False) -> None:
    report = summary.evaluation
    if report.is_empty:
        reason = report.gap.value if report.gap else "nothing to evaluate"
        print(f"  No labels evaluated ({reason})")
    elif not quiet:
        for label, result in report.results.items():
            status = "PASS" if result.passed else "FAIL"
            print(
                f"  [{status}] {label}: p95={result.p95:.0f}ms avg={result.avg:.1f}ms "
                f"p90={result.p90:.0f}ms throughput={result.throughput:.2f}/s"
            )
            if not result.passed:
                print(f"        Failed checks: {', '.join(result.failed_checks)}")
    if report.unmatched_labels:
        print(f"  Expected but not in results: {', '.join(report.unmatched_labels)}")


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("results", help="JMeter results file (XML or CSV JTL)")
    parser.add_argument(
        "--strict-timestamps",
        action="store_true",
        help="Skip records with unparsable timestamps instead of using the current time",
    )


def run_summarize_cli(argv: list[str] | None = None) -> int:
    """CLI entry point for summarizing a results log."""
    _load_env()

    parser = argparse.ArgumentParser(description="Summarize a load-test results log")
    _add_common_arguments(parser)
    parser.add_argument("--capability", help="Capability JSON (test cases + baseline)")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--output", help="Also write the JSON summary to this file")
    args = parser.parse_args(argv)

    try:
        summary = _summarize(args)
    except FatalInputError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except (OSError, ValidationError) as e:
        print(f"ERROR: invalid capability file: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    data = summary.to_dict()
    if args.output:
        Path(args.output).write_text(json.dumps(data, indent=2))

    if args.json:
        print(json.dumps(data, indent=2))
        return EXIT_OK

    stats = summary.parse_stats
    print("=" * 60)
    print("LOAD TEST SUMMARY")
    print("=" * 60)
    print(f"  Format: {summary.log_format.value}")
    print(
        f"  Records: {stats.records_accepted} accepted / {stats.records_read} read "
        f"({stats.records_skipped} skipped)"
    )
    print(f"  Duration: {summary.overall.duration_seconds}s")
    print()
    _print_label_table(summary)

    if args.capability:
        print("\n" + "-" * 60)
        print("BASELINE EVALUATION")
        print("-" * 60)
        _print_evaluation(summary)

    return EXIT_OK


def run_gate_cli(argv: list[str] | None = None) -> int:
    """CLI entry point for the baseline gate."""
    _load_env()

    parser = argparse.ArgumentParser(description="Evaluate a results log against its capability baseline")
    _add_common_arguments(parser)
    parser.add_argument("--capability", required=True, help="Capability JSON (test cases + baseline)")
    parser.add_argument("--store", help="JSON file holding this run's stored evaluation; results are merged into it")
    parser.add_argument("--quiet", action="store_true", help="Minimal output")
    args = parser.parse_args(argv)

    try:
        summary = _summarize(args)
    except FatalInputError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except (OSError, ValidationError) as e:
        print(f"ERROR: invalid capability file: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if args.store:
        summary = reevaluate_run(summary, FileEvaluationStore(args.store))

    print("=" * 60)
    print("BASELINE GATE")
    print("=" * 60)
    _print_evaluation(summary, quiet=args.quiet)

    report = summary.evaluation
    if not report.is_empty:
        print(f"\nPass rate: {report.pass_rate:.1%}")

    if summary.passed:
        print("\n>>> BASELINE GATE: PASSED <<<")
        return EXIT_OK
    else:
        print("\n>>> BASELINE GATE: FAILED <<<")
        print(f"Failed labels: {', '.join(report.failed_labels)}")
        return EXIT_GATE_FAILED


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        loadtest-eval summarize results.jtl [--capability cap.json] [--json]
        loadtest-eval gate results.jtl --capability cap.json [--store eval.json]
    """
    parser = argparse.ArgumentParser(
        description="Load-test results evaluation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  summarize   Print overall and per-label statistics
  gate        Check per-label statistics against the capability baseline

Examples:
  loadtest-eval summarize results.jtl --json
  loadtest-eval gate results.jtl --capability checkout.json --store run-42.json
        """,
    )

    parser.add_argument(
        "command",
        choices=["summarize", "gate"],
        help="Command to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "summarize": run_summarize_cli,
        "gate": run_gate_cli,
    }

    try:
        return commands[args.command](remaining)
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())

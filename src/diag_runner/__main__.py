"""CLI entry-point for diag_runner.

Usage:
    python -m diag_runner -a checks.py -s solution.toml
    python -m diag_runner -a checks.py -s path/to/repo --log diagnostics.log
    python -m diag_runner -a checks.py -s solution.yaml --no-output --json report.json
    python -m diag_runner -a checks.py -s solution.toml --fail-fast -v
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from diag_runner import __version__
from diag_runner.analyzers.loader import load_analyzers
from diag_runner.api import REPORT_SCHEMA, build_run_report, check_plugin_path
from diag_runner.contracts.load import validate_instance
from diag_runner.core.config import ReportingConfig, RunConfig
from diag_runner.core.orchestrator import run
from diag_runner.core.solution import load_solution
from diag_runner.errors import ConfigurationError, PluginLoadError
from diag_runner.utils.exit_codes import ExitCode
from diag_runner.utils.json_norm import stable_json_dumps

logger = logging.getLogger("diag_runner")


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if n < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return n


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="diag-runner",
        description="Run analyzer plugins over every project of a solution.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "-a", "--analyzer", required=True,
        help="Path to the analyzer plugin module (.py)",
    )
    p.add_argument(
        "-s", "--solution", required=True,
        help="Path to the solution manifest (.toml/.yaml) or directory to analyze",
    )
    p.add_argument(
        "-l", "--log", default=None,
        help="Log file to append diagnostic information to",
    )
    p.add_argument(
        "-o", "--output", action=argparse.BooleanOptionalAction, default=True,
        help="Print diagnostics to the screen (default: on)",
    )
    p.add_argument(
        "-v", "--verbose", action="store_true", default=False,
        help="Print diagnostic information about the run itself",
    )
    p.add_argument(
        "--json", dest="json_out", default=None, metavar="PATH",
        help="Write the aggregated run report as JSON",
    )
    p.add_argument(
        "--max-workers", type=_positive_int, default=None,
        help="Cap on concurrently analyzed projects (default: one per project)",
    )
    p.add_argument(
        "--fail-fast", action="store_true", default=False,
        help="Abort the run when any project fails instead of isolating it",
    )
    return p


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    # ── validate input and load the plugin ──────────────────────────
    try:
        plugin_path = check_plugin_path(args.analyzer)
        log_path = Path(args.log).resolve() if args.log else None
        run_config = RunConfig.from_env(
            max_workers=args.max_workers,
            isolate_failures=not args.fail_fast,
        )
        analyzers = load_analyzers(plugin_path)
    except (ConfigurationError, PluginLoadError) as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    except Exception as e:
        print(f"error: Failed to load analyzer '{args.analyzer}':\n{e!r}", file=sys.stderr)
        return ExitCode.ERROR

    if log_path is not None:
        print(f"Log file enabled ('{log_path}')", file=sys.stderr)

    # ── load the solution ───────────────────────────────────────────
    start = time.perf_counter()
    print(f"Opening solution '{args.solution}'...", file=sys.stderr)
    try:
        solution = load_solution(args.solution)
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR
    print(
        f"Loaded solution in {_elapsed_ms(start)}ms with '{len(solution.projects)}' "
        f"projects and '{solution.document_count}' documents",
        file=sys.stderr,
    )

    # ── analyze ─────────────────────────────────────────────────────
    print("Running the analysis...", file=sys.stderr)
    start = time.perf_counter()
    config = ReportingConfig(print_to_console=args.output, log_file_path=log_path)
    try:
        results = run(solution.projects, analyzers, config, run_config=run_config)
    except Exception as e:
        logger.debug("Run aborted", exc_info=True)
        print(f"error: analysis aborted: {e}", file=sys.stderr)
        return ExitCode.ERROR

    total = sum(len(r.diagnostics) for r in results)
    print(f"Found {total} diagnostics in {_elapsed_ms(start)}ms", file=sys.stderr)

    if args.json_out:
        report = build_run_report(solution.name, analyzers, results)
        validate_instance(report, REPORT_SCHEMA)
        out = Path(args.json_out)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(stable_json_dumps(report), encoding="utf-8")

    failed = [r for r in results if not r.ok]
    if failed:
        print(
            f"error: {len(failed)} project(s) could not be analyzed: "
            + ", ".join(r.project_name for r in failed),
            file=sys.stderr,
        )
        return ExitCode.ERROR
    return ExitCode.SUCCESS


if __name__ == "__main__":
    raise SystemExit(main())

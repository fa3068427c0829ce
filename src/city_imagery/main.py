"""Main module for the city imagery pipeline CLI."""

import sys
import json
import argparse
from typing import List

from .core import (
    ConfigurationError,
    LocationRequest,
    PipelineConfig,
    ReportExportError,
    get_logger,
    get_run_statistics,
    locations_needing_curation,
    quiet_library_loggers,
    set_debug_logging,
)
from .core.factories import S3ClientFactory
from .core.observability import MetricsCollector
from .core.reporting import S3ReportExporter, load_outcomes, write_report_file
from .core.services import validate_pipeline_config
from .pipeline import generate_sample_locations, load_locations, run_pipeline

VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="city-imagery",
        description="City Imagery - batch image acquisition with curated and generic fallbacks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Acquire images for the first 20 sample cities
  city-imagery run --sample 20 --report-file results.json

  # Acquire images for a custom list, without fallback imagery
  city-imagery run --locations cities.json --no-fallback --batch-size 5

  # Summarize a saved report
  city-imagery stats results.json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Acquire images for a list of locations")
    source = run_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--locations", help="JSON file with a list of locations")
    source.add_argument("--sample", type=int, help="Use the first N built-in sample cities")
    run_parser.add_argument("--batch-size", type=int, default=10, help="Locations per batch")
    run_parser.add_argument(
        "--batch-delay-ms", type=int, default=2000, help="Pause between batches (ms)"
    )
    run_parser.add_argument(
        "--request-delay-ms", type=int, default=100, help="Pause between provider requests (ms)"
    )
    run_parser.add_argument(
        "--max-retries", type=int, default=3, help="Attempts per query on transient errors"
    )
    run_parser.add_argument(
        "--images-per-location", type=int, default=4, help="Target images per location"
    )
    run_parser.add_argument(
        "--no-fallback", action="store_true", help="Do not use fallback imagery on empty results"
    )
    run_parser.add_argument("--report-file", help="Write the JSON report to this path")
    run_parser.add_argument("--report-bucket", help="Upload the JSON report to this S3 bucket")
    run_parser.add_argument("--report-prefix", default="", help="S3 prefix for the report")
    run_parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    stats_parser = subparsers.add_parser("stats", help="Summarize a saved run report")
    stats_parser.add_argument("report", help="Path to a JSON report")

    sample_parser = subparsers.add_parser("sample", help="Print the built-in sample cities")
    sample_parser.add_argument("--count", type=int, default=50, help="Number of cities")

    subparsers.add_parser("version", help="Show version information")

    return parser


def _config_from_args(args: argparse.Namespace) -> PipelineConfig:
    return PipelineConfig(
        batch_size=args.batch_size,
        inter_batch_delay_ms=args.batch_delay_ms,
        inter_request_delay_ms=args.request_delay_ms,
        max_retries=args.max_retries,
        use_fallback_on_empty=not args.no_fallback,
        images_per_location=args.images_per_location,
    )


def run_command(args: argparse.Namespace) -> int:
    """Execute the ``run`` subcommand and return the exit code."""
    logger = get_logger("pipeline")
    if args.debug:
        set_debug_logging(logger)
    else:
        quiet_library_loggers()

    try:
        config = _config_from_args(args)
        validate_pipeline_config(config)
        locations: List[LocationRequest] = (
            load_locations(args.locations)
            if args.locations
            else generate_sample_locations(args.sample)
        )

        metrics_collector = MetricsCollector()
        outcomes = run_pipeline(
            locations,
            config,
            metrics_collector=metrics_collector,
            log_level="DEBUG" if args.debug else None,
        )

        summary = metrics_collector.get_summary("search_photos")
        if summary:
            logger.info(
                f"Provider requests: {summary['total_operations']} "
                f"({summary['failed_operations']} failed, "
                f"avg {summary['avg_duration'] * 1000:.0f}ms)"
            )

        if args.report_file:
            path = write_report_file(outcomes, args.report_file)
            logger.info(f"Report written to {path}")
        if args.report_bucket:
            exporter = S3ReportExporter(
                S3ClientFactory.create_s3_client(), args.report_bucket, args.report_prefix
            )
            logger.info(f"Report uploaded to {exporter.export(outcomes)}")

    except KeyboardInterrupt:
        logger.warning("Processing interrupted by user.")
        return 130
    except (ConfigurationError, ReportExportError) as e:
        logger.error(f"Run failed: {e}")
        return 1
    return 0


def stats_command(args: argparse.Namespace) -> int:
    """Execute the ``stats`` subcommand and return the exit code."""
    try:
        outcomes = load_outcomes(args.report)
    except ReportExportError as e:
        get_logger("pipeline").error(str(e))
        return 1

    stats = get_run_statistics(outcomes)
    print(f"Total: {stats.total}")
    print(f"Successful: {stats.successful}")
    print(f"Failed: {stats.failed}")
    print(f"Success rate: {stats.success_rate:.1f}%")
    print(f"Total images: {stats.total_images}")
    print(f"Average processing time: {stats.avg_processing_time_ms}ms")
    for outcome in locations_needing_curation(outcomes):
        reason = outcome.error_message or "no images"
        print(f"Needs curation: {outcome.location_name} ({reason})")
    return 0


def main() -> None:
    """
    Entry point for the command-line interface of the City Imagery pipeline.

    Dispatches to the ``run``, ``stats``, ``sample`` and ``version``
    subcommands and exits with their status code.
    """
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args()

    if args.command == "run":
        sys.exit(run_command(args))

    elif args.command == "stats":
        sys.exit(stats_command(args))

    elif args.command == "sample":
        locations = generate_sample_locations(args.count)
        print(json.dumps([location.model_dump() for location in locations], indent=2))
        sys.exit(0)

    elif args.command == "version":
        print("City Imagery CLI")
        print(f"Version {VERSION}")
        print("Batch city image acquisition with curated and generic fallbacks")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

"""Command line entry point for the migration tool."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .clients.notion_client import NotionClient
from .errors import MigrationError
from .models.migration import MigrationConfig, MigrationRun
from .orchestrator import MigrationEngine

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="notion-migrate",
        description="Copy every page of one Notion database into another",
        epilog=(
            "Passing 'true' as the last argument confirms the migration; "
            "anything else (or nothing) only runs a simulation."
        ),
    )

    parser.add_argument("source_id", help="ID of the source database")
    parser.add_argument("target_id", help="ID of the target database")
    parser.add_argument(
        "confirm",
        nargs="?",
        default="false",
        help="'true' to create pages, anything else for a dry run (default: false)",
    )
    parser.add_argument("--batch-size", type=int, default=None, help="Pages per batch (default: 10)")
    parser.add_argument("--delay", type=float, default=None, help="Seconds to wait after each page (default: 0.1)")
    parser.add_argument("--report", help="Write the run summary as JSON to this path")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Set up logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    dry_run = args.confirm != "true"

    try:
        config = MigrationConfig.from_env(
            batch_size=args.batch_size,
            pacing_delay=args.delay,
        ).require_valid()
        logger.debug(f"Configuration: {config.to_dict()}")

        engine = MigrationEngine(
            client=NotionClient(config),
            pacing_delay=config.pacing_delay,
        )
        result = engine.run(
            args.source_id,
            args.target_id,
            dry_run=dry_run,
            batch_size=config.batch_size,
        )

    except MigrationError as e:
        logger.error(f"Migration failed: {e}")
        print(f"\nMigration failed: {e}", file=sys.stderr)
        return 1

    print_summary(result)

    if args.report:
        write_report(result, args.report)

    return 0


def print_summary(result: MigrationRun) -> None:
    """Print the final run summary."""
    print("\n" + "=" * 60)
    print("MIGRATION COMPLETE" + (" (DRY RUN)" if result.dry_run else ""))
    print("=" * 60)
    print(f"Status: {result.status.value}")
    print(f"Pages Attempted: {result.attempted}")
    print(f"Succeeded: {result.succeeded}")
    print(f"Failed: {result.failed}")
    if result.failed_ids:
        print(f"Failed pages: {', '.join(result.failed_ids)}")
    if result.duration_seconds:
        print(f"Duration: {result.duration_seconds:.2f} seconds")


def write_report(result: MigrationRun, path: str) -> None:
    """Save the run summary to a JSON file."""
    with open(path, 'w') as f:
        json.dump(result.to_dict(), f, indent=2, default=str)
    logger.info(f"Saved migration report to {path}")


if __name__ == "__main__":
    sys.exit(main())

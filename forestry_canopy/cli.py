"""Command line interface for the forestry canopy analysis."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from . import config
from .ingest import ParseError, run_download
from .report import OUTPUT_FORMATS, run_report
from .transform import DataQualityError

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="NYC forestry service requests and tree canopy analysis")
    parser.add_argument("command", choices=["download", "report"], help="Pipeline stage to execute")
    parser.add_argument("--raw-dir", dest="raw_dir", default=str(config.RAW_DATA_DIR), help="Directory for downloaded exports")
    parser.add_argument(
        "--requests",
        dest="requests_path",
        default=str(config.DEFAULT_SERVICE_REQUESTS_PATH),
        help="Forestry service request CSV export",
    )
    parser.add_argument(
        "--canopy",
        dest="canopy_path",
        default=str(config.DEFAULT_CANOPY_COVER_PATH),
        help="Canopy cover by community board CSV export",
    )
    parser.add_argument(
        "--output-dir",
        dest="output_dir",
        default=str(config.DERIVED_DATA_DIR),
        help="Directory for the summary tables",
    )
    parser.add_argument("--format", dest="output_format", choices=OUTPUT_FORMATS, default="csv", help="Summary table file format")
    parser.add_argument("--show", dest="show", action="store_true", help="Print the summary tables")
    parser.add_argument("--verbose", dest="verbose", action="store_true", help="Enable verbose logging")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    _configure_logging(args.verbose)

    if args.command == "download":
        run_download(raw_dir=args.raw_dir)
        return 0

    if args.command == "report":
        try:
            result = run_report(
                args.requests_path,
                args.canopy_path,
                output_dir=args.output_dir,
                output_format=args.output_format,
            )
        except (ParseError, DataQualityError) as exc:
            logger.error("Report aborted: %s", exc)
            return 1

        if args.show:
            for name, table in result.tables.items():
                print(f"\n== {name} ==")
                print(table.to_string(index=False))
        return 0

    raise ValueError(f"Unsupported command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())

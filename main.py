"""Circus Daily dashboard entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from circus_analytics.application.report_service import run_reporting_pipeline
from circus_analytics.config import DEFAULT_VARIANT, VARIANTS, get_variant


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Circus Daily video analytics: aggregate spreadsheet exports into a dashboard summary",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py data/raw/circus.xlsx
  python main.py data/raw/circus.xlsx --reference data/raw/publisher.xlsx --variant publisher_ranked
  python main.py data/raw/circus.xlsx --reference data/raw/publisher.xlsx --variant publisher_language -o out/
        """,
    )
    parser.add_argument("target", type=Path, help="Workbook holding the target catalogue rows")
    parser.add_argument("--reference", type=Path, help="Workbook holding the reference publisher rows")
    parser.add_argument(
        "--variant",
        default=DEFAULT_VARIANT,
        choices=sorted(VARIANTS),
        help=f"Pipeline variant (default: {DEFAULT_VARIANT})",
    )
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("output"), help="Directory for summary files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = get_variant(args.variant)
    summary = run_reporting_pipeline(
        target_path=args.target,
        reference_path=args.reference,
        config=config,
        output_dir=args.output_dir,
    )
    sys.exit(0 if summary is not None else 2)


if __name__ == "__main__":
    main()

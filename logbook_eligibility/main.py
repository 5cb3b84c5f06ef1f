#!/usr/bin/env python3
"""
Main entry point for the learner logbook scanner.

This module provides a CLI for scanning logbook page images, validating
already extracted page payloads, and evaluating licence eligibility for a
student record.
"""

import argparse
import logging
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from .aggregation.cumulative import calculate_cumulative_totals
from .config import Config
from .eligibility.engine import EligibilityEngine, apply_scanned_totals
from .exceptions import ExtractionError
from .models.schema import CumulativeTotals, PageScanResult, StudentEligibilityRecord
from .scanner import LogbookScanner
from .utils.io_handler import IOHandler
from .utils.logger import setup_logger

logger = logging.getLogger("logbook_eligibility")


def flatten_rows(pages: Sequence[PageScanResult]) -> List[Dict[str, Any]]:
    """Flatten validated rows of all pages into CSV-friendly records."""
    records = []
    for page in pages:
        for row in page.entries:
            records.append({
                'page_number': page.page_number,
                'page_type': page.page_type.value,
                'row_number': row.row_number,
                'date': row.date_text,
                'start_time': row.start_time,
                'finish_time': row.finish_time,
                'total_time': row.total_time,
                'duration_minutes': row.duration_minutes,
                'is_valid': row.is_valid,
                'errors': '; '.join(e.message for e in row.errors),
                'warnings': '; '.join(w.message for w in row.warnings),
            })
    return records


def _default_output(suffix: str) -> Path:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return Config.get_output_dir() / f"logbook_{timestamp}.{suffix}"


def _save_pages(
    io_handler: IOHandler,
    pages: List[PageScanResult],
    totals: CumulativeTotals,
    record: Optional[StudentEligibilityRecord],
    output_format: str,
    output_path: Optional[Path],
):
    output_path = output_path or _default_output(output_format)
    if output_format == 'csv':
        io_handler.write_csv(flatten_rows(pages), output_path)
    else:
        result = {'pages': pages, 'cumulative': totals}
        if record is not None:
            result['student'] = record
        io_handler.write_json(result, output_path, indent=Config.JSON_INDENT)
    logger.info(f"Results saved to {output_path}")


def _parse_today(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}")


def _evaluate_record(io_handler: IOHandler, path: Path, totals, today) -> StudentEligibilityRecord:
    record = StudentEligibilityRecord.model_validate(io_handler.read_json(path))
    if totals is not None:
        record = apply_scanned_totals(record, totals)
    return EligibilityEngine().apply(record, today)


def run_pages(args, io_handler: IOHandler) -> int:
    """Handle the 'scan' and 'validate' commands."""
    scanner = LogbookScanner(
        rules=Config.validation_rules(),
        on_progress=lambda p: logger.debug(f"{p.stage}: {p.message}"),
    )
    paths = io_handler.expand_inputs(args.inputs)
    if not paths:
        logger.error("No valid input files found")
        return 1

    pages = []
    for path in paths:
        logger.info(f"Processing file: {path}")
        if args.command == 'scan':
            pages.append(scanner.scan_page(path, args.today))
        else:
            pages.append(scanner.process_payload(io_handler.read_json(path), args.today))

    totals = calculate_cumulative_totals(pages)
    record = None
    if args.record:
        record = _evaluate_record(io_handler, Path(args.record), totals, args.today)

    _save_pages(io_handler, pages, totals, record, args.format,
                Path(args.output) if args.output else None)

    invalid = sum(1 for page in pages if page.has_errors)
    if invalid:
        logger.warning(f"{invalid} page(s) had validation errors")
        return 1
    logger.info("All pages processed without errors")
    return 0


def run_eligibility(args, io_handler: IOHandler) -> int:
    """Handle the 'eligibility' command."""
    record = _evaluate_record(io_handler, Path(args.record), None, args.today)
    output_path = Path(args.output) if args.output else _default_output('json')
    io_handler.write_json(record, output_path, indent=Config.JSON_INDENT)
    logger.info(f"Eligibility status: {record.eligibility_status.value}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Scan learner logbook pages and evaluate licence eligibility",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Scan page photos (needs VISION_API_KEY)
  logbook-scanner scan photos/page_*.jpg -o output/scan.json

  # Validate payloads that were already extracted
  logbook-scanner validate extracted/*.json -f csv

  # Evaluate a student record, folding in scanned hours
  logbook-scanner scan photos/*.jpg --record student.json

  # Evaluate a student record on its own
  logbook-scanner eligibility student.json --today 2026-03-01
        """
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=Config.LOG_LEVEL,
        help='Logging level (default: INFO)'
    )
    parser.add_argument('--today', type=_parse_today, help='Reference date, YYYY-MM-DD (default: today)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    for name, help_text, input_help in (
        ('scan', 'Scan logbook page images', 'Page image file(s) or glob pattern'),
        ('validate', 'Validate extracted page payloads', 'Extraction payload JSON file(s) or glob pattern'),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument('inputs', nargs='+', help=input_help)
        sub.add_argument('-o', '--output', help='Output file path (default: auto-generated in output/)')
        sub.add_argument('-f', '--format', choices=['json', 'csv'], default='json',
                         help='Output format (default: json)')
        sub.add_argument('--record', help='Student record JSON to update with scanned hours')

    sub = subparsers.add_parser('eligibility', help='Evaluate a student record')
    sub.add_argument('record', help='Student record JSON file')
    sub.add_argument('-o', '--output', help='Output file path (default: auto-generated in output/)')

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logger(level=args.log_level)
    logger.info(f"{Config.APP_NAME} v{Config.VERSION}")

    io_handler = IOHandler()
    try:
        if args.command == 'eligibility':
            return run_eligibility(args, io_handler)
        return run_pages(args, io_handler)
    except ExtractionError as e:
        logger.error(f"Extraction failed: {e}")
        return 1
    except (FileNotFoundError, ValueError, ValidationError) as e:
        logger.error(f"Invalid input: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

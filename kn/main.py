"""
Batch orchestrator for parsing every note file in a directory.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from kn.cli import setup_logging
from kn.common.io_utils import OUTPUT_FORMATS
from kn.common.parse_engine import ParseEngine
from kn.common.schema_validator import DEFAULT_SCHEMA_PATH


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Parse all raw note files in a directory")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("source_dir", help="Directory containing raw note files")
    parser.add_argument("--pattern", default="*.txt", help="Glob pattern selecting note files")
    parser.add_argument("--format", choices=OUTPUT_FORMATS, default="yaml", help="Output format")
    parser.add_argument("--output-dir", default=None, help="Output directory (default: next to each note file)")
    parser.add_argument("--author", default="", help="Author recorded in every output document")
    parser.add_argument("--lineage", action="store_true", help="Also write lineage files")
    parser.add_argument("--schema-path", default=str(DEFAULT_SCHEMA_PATH), help="Path to note file output schema")

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    source_dir = Path(args.source_dir)
    schema_path = Path(args.schema_path)

    # Validate paths
    if not source_dir.is_dir():
        logging.error(f"Source directory does not exist: {source_dir}")
        return 1

    if not schema_path.exists():
        logging.error(f"Schema file does not exist: {schema_path}")
        return 1

    engine = ParseEngine(
        output_dir=Path(args.output_dir) if args.output_dir else None,
        output_format=args.format,
        schema_path=schema_path,
        author=args.author,
        write_lineage=args.lineage
    )

    results = engine.parse_directory(source_dir, args.pattern)

    # Print summary
    logging.info("=== Parse Summary ===")
    total_notes = 0

    for result in results:
        if result["status"] == "completed":
            notes = result["stats"]["notes"]
            total_notes += notes
            logging.info(f"{result['source_file']}: {result['status']} - {notes} notes")
        else:
            logging.warning(f"{result['source_file']}: {result['status']} - {result['reason']}")

    logging.info(f"Total: {total_notes} notes from {len(results)} files")

    # Check for failures
    failed = [r for r in results if r["status"] == "failed"]
    if failed:
        logging.error(f"Failed files: {[r['source_file'] for r in failed]}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

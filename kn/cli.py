"""
CLI to parse, keep and read notes.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from kn.common.io_utils import OUTPUT_FORMATS
from kn.common.parse_engine import ParseEngine
from kn.common.schema_validator import DEFAULT_SCHEMA_PATH
from kn.common.sequence_validator import ValidationError


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def parse_command(args: argparse.Namespace) -> int:
    """Execute parse command."""
    source_file = Path(args.file)
    schema_path = Path(args.schema_path)

    if not source_file.is_file():
        logging.error(f"Note file does not exist: {source_file}")
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

    try:
        stats = engine.parse_file(source_file)
    except ValidationError as e:
        logging.error(f"{source_file}:{e.line_number}: {e}")
        return 1
    except Exception as e:
        logging.error(f"Error parsing {source_file}: {e}")
        return 1

    logging.info(f"Parsed {stats['notes']} notes into {stats['output_file']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(prog="kn", description="A simple utility to parse, keep and read notes")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse note raw file into yaml")
    parse_parser.add_argument("file", help="Raw note file to parse")
    parse_parser.add_argument("--format", choices=OUTPUT_FORMATS, default="yaml", help="Output format")
    parse_parser.add_argument("--output-dir", default=None, help="Output directory (default: next to the note file)")
    parse_parser.add_argument("--author", default="", help="Author recorded in the output document")
    parse_parser.add_argument("--lineage", action="store_true", help="Also write a lineage file next to the output")
    parse_parser.add_argument("--schema-path", default=str(DEFAULT_SCHEMA_PATH), help="Path to note file output schema")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    if args.command == "parse":
        return parse_command(args)
    else:
        logging.error(f"Unknown command: {args.command}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

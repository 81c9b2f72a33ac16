"""
Core parse engine: note file lines in, structured document out.
"""
import logging
from pathlib import Path
from typing import Dict, Any, Iterable, List, Optional

from .document_builder import build_document
from .io_utils import document_to_dict, get_output_path, read_note_lines, write_json_file, write_yaml_file
from .line_classifier import classify_lines
from .models import Document
from .provenance import calculate_file_checksum, create_lineage_info, write_lineage_file
from .schema_validator import DEFAULT_SCHEMA_PATH, OutputSchemaError, validate_note_file
from .sequence_validator import validate_lines

logger = logging.getLogger(__name__)


class ParseEngine:
    """Engine for parsing raw note files into structured documents."""

    def __init__(self, output_dir: Optional[Path] = None, output_format: str = "yaml",
                 schema_path: Path = DEFAULT_SCHEMA_PATH, author: str = "", write_lineage: bool = False):
        """
        Initialize parse engine.

        Args:
            output_dir: Directory for output files; None writes next to each source file
            output_format: "yaml" or "json"
            schema_path: Path to the note_file schema used to check output
            author: Author recorded on every parsed document
            write_lineage: Also write a <stem>_lineage.json file per output
        """
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.output_format = output_format
        self.schema_path = Path(schema_path)
        self.author = author
        self.write_lineage = write_lineage

        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)

    def parse_lines(self, lines: Iterable[str]) -> Document:
        """
        Classify, validate and build a document from raw lines.

        Raises:
            ValidationError: On the first structural violation; no document is built
        """
        classified = classify_lines(lines)
        validated = validate_lines(classified)
        return build_document(validated, author=self.author)

    def parse_file(self, source_file: Path) -> Dict[str, Any]:
        """
        Parse a single note file and write its serialized document.

        Args:
            source_file: Path to the raw note file

        Returns:
            Dictionary with parse statistics

        Raises:
            ValidationError: If the note file is structurally invalid
            OutputSchemaError: If the serialized document fails the output schema
        """
        source_file = Path(source_file)
        logger.info(f"Starting parse of {source_file}")

        lines = read_note_lines(source_file)
        document = self.parse_lines(lines)
        data = document_to_dict(document)

        is_valid, error_msg = validate_note_file(data, self.schema_path)
        if not is_valid:
            raise OutputSchemaError(f"Output schema validation failed for {source_file}: {error_msg}")

        output_path = get_output_path(source_file, self.output_format, self.output_dir)
        if self.output_format == "json":
            write_json_file(data, output_path)
        else:
            write_yaml_file(data, output_path)

        stats = {
            "source_file": str(source_file),
            "output_file": str(output_path),
            "total_lines": len(lines),
            "notes": len(document.notes),
            "title": document.title,
            "lineage_file": None
        }

        if self.write_lineage:
            lineage_data = create_lineage_info(
                source_file, calculate_file_checksum(source_file), output_path, len(document.notes)
            )
            stats["lineage_file"] = str(write_lineage_file(output_path.parent, source_file, lineage_data))

        logger.info(f"Completed parse of {source_file}: {stats['notes']} notes from {stats['total_lines']} lines")
        return stats

    def parse_directory(self, source_dir: Path, pattern: str = "*.txt") -> List[Dict[str, Any]]:
        """
        Parse all note files in a directory.

        Each file is parsed independently; a failure is recorded in that
        file's result and the remaining files are still parsed.

        Args:
            source_dir: Directory containing note files
            pattern: File pattern to match

        Returns:
            List of result dictionaries with status, reason and stats per file
        """
        source_path = Path(source_dir)
        if not source_path.exists():
            logger.error(f"Source directory does not exist: {source_dir}")
            return []

        note_files = sorted(source_path.glob(pattern))

        if not note_files:
            logger.warning(f"No note files found in {source_dir} matching pattern '{pattern}'")
            return []

        logger.info(f"Found {len(note_files)} note files to parse")

        results = []
        for file_path in note_files:
            try:
                stats = self.parse_file(file_path)
                results.append({
                    "source_file": str(file_path),
                    "status": "completed",
                    "reason": "Success",
                    "stats": stats
                })
            except Exception as e:
                logger.error(f"Error parsing {file_path}: {e}")
                results.append({
                    "source_file": str(file_path),
                    "status": "failed",
                    "reason": str(e),
                    "stats": None
                })

        return results

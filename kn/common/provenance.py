"""
Provenance tracking for parsed note files.
"""
import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Any

from kn import __version__

logger = logging.getLogger(__name__)


def calculate_checksum(data: bytes) -> str:
    """Calculate SHA-256 checksum of data."""
    return hashlib.sha256(data).hexdigest()


def calculate_file_checksum(file_path: Path) -> str:
    """Calculate SHA-256 checksum of a file's contents."""
    with open(file_path, 'rb') as f:
        return calculate_checksum(f.read())


def create_lineage_info(source_file: Path, checksum: str, output_file: Path, note_count: int) -> Dict[str, Any]:
    """Create lineage information for a parsed note file."""
    return {
        "source_file": str(source_file),
        "checksum": checksum,
        "output_file": str(output_file),
        "notes": note_count,
        "parsed_at": datetime.now(timezone.utc).isoformat(),
        "parser_version": __version__
    }


def write_lineage_file(output_dir: Path, source_file: Path, lineage_data: Dict[str, Any]) -> Path:
    """Write lineage information to JSON file."""
    lineage_file = output_dir / f"{source_file.stem}_lineage.json"
    try:
        with open(lineage_file, 'w', encoding='utf-8') as f:
            json.dump(lineage_data, f, indent=2)
        logger.info(f"Wrote lineage file: {lineage_file}")
        return lineage_file
    except Exception as e:
        logger.error(f"Failed to write lineage file {lineage_file}: {e}")
        raise

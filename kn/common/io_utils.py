"""
IO utilities for reading note files and writing parsed documents.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .models import Document

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("yaml", "json")


def read_note_lines(file_path: Path) -> List[str]:
    """Read a note file and return its lines without line terminators."""
    try:
        # utf-8-sig drops a leading BOM that would otherwise hide a title
        with open(file_path, 'r', encoding='utf-8-sig') as f:
            return [line.rstrip('\n') for line in f]
    except FileNotFoundError:
        logger.error(f"File not found: {file_path}")
        raise
    except Exception as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise


def document_to_dict(document: Document) -> Dict[str, Any]:
    """Convert a Document into plain data for serialization."""
    return {
        "author": document.author,
        "title": document.title,
        "notes": [
            {
                "text": note.text,
                "subtitle": note.subtitle,
                "page": note.page,
                "tags": sorted(note.tags),
            }
            for note in document.notes
        ],
    }


def write_yaml_file(data: Dict[str, Any], output_path: Path) -> None:
    """Write a dictionary to a YAML file."""
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
        logger.info(f"Wrote {output_path}")
    except Exception as e:
        logger.error(f"Error writing to {output_path}: {e}")
        raise


def write_json_file(data: Dict[str, Any], output_path: Path) -> None:
    """Write a dictionary to a JSON file."""
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write('\n')
        logger.info(f"Wrote {output_path}")
    except Exception as e:
        logger.error(f"Error writing to {output_path}: {e}")
        raise


def get_output_path(source_file: Path, output_format: str = "yaml", output_dir: Optional[Path] = None) -> Path:
    """
    Derive the output path for a note file.

    The source extension is replaced by the format's extension. Without an
    output directory the result sits next to the source file.

    Raises:
        ValueError: If the format is unknown or the output would replace the source file
    """
    if output_format not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported output format: {output_format}")

    source_file = Path(source_file)
    target_dir = Path(output_dir) if output_dir is not None else source_file.parent
    output_path = target_dir / f"{source_file.stem}.{output_format}"

    if output_path.resolve() == source_file.resolve():
        raise ValueError(f"Output file would overwrite the note file: {source_file}")

    return output_path

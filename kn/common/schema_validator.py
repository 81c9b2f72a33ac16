"""
Schema validation for serialized note documents.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Any, Tuple, Optional
import jsonschema
from jsonschema import ValidationError as JsonSchemaValidationError

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "note_file.schema.json"


class OutputSchemaError(Exception):
    """Raised when a serialized document does not satisfy the output schema."""


def load_schema(schema_path: Path) -> Dict[str, Any]:
    """Load JSON schema from file."""
    try:
        with open(schema_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (json.JSONDecodeError, FileNotFoundError) as e:
        logger.error(f"Failed to load schema from {schema_path}: {e}")
        raise


def validate_against_schema(data: Dict[str, Any], schema: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate data against JSON schema.

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        jsonschema.validate(instance=data, schema=schema)
        return True, None
    except JsonSchemaValidationError as e:
        return False, e.message


def validate_note_file(note_file: Dict[str, Any], schema_path: Path = DEFAULT_SCHEMA_PATH) -> Tuple[bool, Optional[str]]:
    """Validate a serialized document against the note_file schema."""
    schema = load_schema(schema_path)
    return validate_against_schema(note_file, schema)

"""
Fold a validated line sequence into a Document.
"""
import logging
from typing import List

from .models import DEFAULT_TAGS, Document, LineRole, NoteEntry
from .sequence_validator import ValidatedLines

logger = logging.getLogger(__name__)


def build_document(validated: ValidatedLines, author: str = "") -> Document:
    """
    Build a Document from lines that passed validation.

    Subtitle and page are sticky: each note receives the values most recently
    set before it. A repeated title overwrites the earlier one.

    Args:
        validated: Output of validate_lines
        author: Author recorded on the document

    Returns:
        The assembled Document
    """
    if not isinstance(validated, ValidatedLines):
        raise TypeError(
            f"build_document expects ValidatedLines from validate_lines, got {type(validated).__name__}"
        )

    title = ""
    subtitle = ""
    page = ""
    notes: List[NoteEntry] = []

    for line in validated.lines:
        if line.role == LineRole.TITLE:
            title = line.text
        elif line.role == LineRole.SUBTITLE:
            subtitle = line.text
        elif line.role == LineRole.PAGE_MARKER:
            page = line.text
        elif line.role == LineRole.NOTE_TEXT:
            notes.append(NoteEntry(text=line.text, subtitle=subtitle, page=page, tags=DEFAULT_TAGS))

    logger.debug(f"Built document '{title}' with {len(notes)} notes")
    return Document(title=title, notes=tuple(notes), author=author)

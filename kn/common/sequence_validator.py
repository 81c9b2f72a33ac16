"""
Structural validation of a classified line sequence.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .models import ClassifiedLine, LineRole

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Base class for structural violations in a note file."""

    def __init__(self, message: str, line_number: int):
        super().__init__(message)
        self.line_number = line_number


class MisplacedTitleError(ValidationError):
    """A title line appears after another non-empty line."""

    def __init__(self, line_number: int):
        super().__init__("title starting with # has to be in the first line", line_number)


class OrphanedNoteError(ValidationError):
    """A note line is not preceded by a page marker."""

    def __init__(self, text: str, line_number: int):
        super().__init__(f"note has to follow page number, note: {text}", line_number)
        self.text = text


@dataclass(frozen=True)
class ValidatedLines:
    """Classified lines that passed validate_lines; the only input build_document accepts."""

    lines: Tuple[ClassifiedLine, ...]


def validate_lines(lines: Iterable[ClassifiedLine]) -> ValidatedLines:
    """
    Check ordering constraints between line roles.

    Empty lines are transparent: they neither trigger a rule nor become the
    previous role. Stops at the first violation.

    Args:
        lines: Classified lines in file order

    Returns:
        The same lines wrapped as ValidatedLines

    Raises:
        MisplacedTitleError: If a title is not the first non-empty line
        OrphanedNoteError: If a note does not follow a page marker
    """
    lines = tuple(lines)
    # None marks the start of the file
    previous_role: Optional[LineRole] = None

    for line_number, line in enumerate(lines, 1):
        if line.role == LineRole.EMPTY:
            continue

        if line.role == LineRole.TITLE and previous_role is not None:
            raise MisplacedTitleError(line_number)

        if line.role == LineRole.NOTE_TEXT and previous_role != LineRole.PAGE_MARKER:
            raise OrphanedNoteError(line.text, line_number)

        previous_role = line.role

    logger.debug(f"Validated {len(lines)} lines")
    return ValidatedLines(lines=lines)

"""
Line classification for raw note files.
"""
import logging
import re
from typing import Iterable, List, Tuple

from .models import ClassifiedLine, LineRole

logger = logging.getLogger(__name__)


# Tried in order, first match wins. The catch-all has to stay last.
LINE_ROLE_PATTERNS: Tuple[Tuple[LineRole, re.Pattern], ...] = (
    (LineRole.TITLE, re.compile(r"#\s.*", re.DOTALL)),
    (LineRole.SUBTITLE, re.compile(r"##\s.*", re.DOTALL)),
    (LineRole.PAGE_MARKER, re.compile(r"[0-9]+")),
    (LineRole.EMPTY, re.compile(r"\s*")),
    (LineRole.NOTE_TEXT, re.compile(r".*", re.DOTALL)),
)

HEADING_ROLES = (LineRole.TITLE, LineRole.SUBTITLE)
HEADING_MARKER_RE = re.compile(r"^[#\s]+")


class ClassificationError(Exception):
    """Raised when no role pattern matches a line."""


def clean_text(text: str, role: LineRole) -> str:
    """Return the content of `text` that is stored for `role`."""
    if role in HEADING_ROLES:
        return HEADING_MARKER_RE.sub("", text).rstrip()
    if role == LineRole.EMPTY:
        return ""
    return text


def classify_line(text: str) -> ClassifiedLine:
    """
    Assign a role to a single raw line.

    Args:
        text: Raw line without its line terminator

    Returns:
        ClassifiedLine holding the role and the cleaned text

    Raises:
        ClassificationError: If no pattern in LINE_ROLE_PATTERNS matches
    """
    for role, pattern in LINE_ROLE_PATTERNS:
        if pattern.fullmatch(text):
            return ClassifiedLine(text=clean_text(text, role), role=role)

    raise ClassificationError(f"unknown line type: {text!r}")


def classify_lines(lines: Iterable[str]) -> List[ClassifiedLine]:
    """Classify every line in order."""
    classified = [classify_line(line) for line in lines]
    logger.debug(f"Classified {len(classified)} lines")
    return classified

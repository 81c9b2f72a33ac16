"""
Data models shared by the line classifier, sequence validator and document builder.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple


DEFAULT_TAGS: FrozenSet[str] = frozenset({"dummy"})


class LineRole(Enum):
    """Semantic role of a single raw line."""

    TITLE = "title"
    SUBTITLE = "subtitle"
    PAGE_MARKER = "page_marker"
    EMPTY = "empty"
    NOTE_TEXT = "note_text"


@dataclass(frozen=True)
class ClassifiedLine:
    """A raw line after classification; `text` is the role-specific cleaned content."""

    text: str
    role: LineRole


@dataclass(frozen=True)
class NoteEntry:
    """
    One note with the subtitle and page context it was written under.

    `subtitle` and `page` are copied from the builder context when the note
    line is seen, so later context changes never reach an existing entry.
    """

    text: str
    subtitle: str = ""
    page: str = ""
    tags: FrozenSet[str] = DEFAULT_TAGS


@dataclass(frozen=True)
class Document:
    """Parsed note file."""

    title: str = ""
    notes: Tuple[NoteEntry, ...] = field(default_factory=tuple)
    author: str = ""

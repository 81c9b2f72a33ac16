"""
Tests for the parse engine and its IO, schema and provenance helpers.
"""
import json
from pathlib import Path

import pytest
import yaml

from kn.common.io_utils import document_to_dict, get_output_path, read_note_lines, write_yaml_file
from kn.common.models import Document, NoteEntry
from kn.common.parse_engine import ParseEngine
from kn.common.provenance import calculate_checksum, calculate_file_checksum, create_lineage_info
from kn.common.schema_validator import DEFAULT_SCHEMA_PATH, OutputSchemaError, validate_note_file
from kn.common.sequence_validator import MisplacedTitleError, OrphanedNoteError


@pytest.fixture
def note_file(tmp_path):
    """Create a small valid note file."""
    path = tmp_path / "book.txt"
    path.write_text("# My Title\n\n## Intro\n5\nhello\n6\nworld\n", encoding="utf-8")
    return path


class TestIOUtils:
    """Test IO utilities."""

    def test_read_note_lines_strips_terminators(self, tmp_path):
        """Test lines come back without newline characters."""
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"# T\r\n5\r\nnote\r\n")

        assert read_note_lines(path) == ["# T", "5", "note"]

    def test_read_note_lines_drops_bom(self, tmp_path):
        """Test a UTF-8 byte order mark does not end up in the first line."""
        path = tmp_path / "bom.txt"
        path.write_bytes("\ufeff# Title\n".encode("utf-8"))

        assert read_note_lines(path) == ["# Title"]

    def test_read_missing_file(self, tmp_path):
        """Test reading a missing file raises."""
        with pytest.raises(FileNotFoundError):
            read_note_lines(tmp_path / "missing.txt")

    def test_document_to_dict(self):
        """Test the serialized field layout."""
        document = Document(title="T", notes=(NoteEntry(text="n", subtitle="s", page="1"),))

        assert document_to_dict(document) == {
            "author": "",
            "title": "T",
            "notes": [{"text": "n", "subtitle": "s", "page": "1", "tags": ["dummy"]}],
        }

    def test_get_output_path(self):
        """Test the extension is replaced and the directory honoured."""
        source = Path("/notes/book.txt")

        assert get_output_path(source) == Path("/notes/book.yaml")
        assert get_output_path(source, "json") == Path("/notes/book.json")
        assert get_output_path(source, "yaml", Path("/out")) == Path("/out/book.yaml")

    def test_get_output_path_rejects_source_file(self, tmp_path):
        """Test an output path equal to the note file is rejected."""
        source = tmp_path / "notes.yaml"
        source.write_text("5\nhello\n", encoding="utf-8")

        with pytest.raises(ValueError, match="overwrite"):
            get_output_path(source)

        assert get_output_path(source, "json") == tmp_path / "notes.json"
        assert get_output_path(source, "yaml", tmp_path / "out") == tmp_path / "out" / "notes.yaml"

    def test_get_output_path_rejects_format(self):
        """Test unknown output formats are rejected."""
        with pytest.raises(ValueError):
            get_output_path(Path("book.txt"), "xml")

    def test_write_yaml_keeps_key_order(self, tmp_path):
        """Test YAML output keeps author, title, notes order."""
        output = tmp_path / "nested" / "out.yaml"
        write_yaml_file({"author": "", "title": "Ü", "notes": []}, output)

        text = output.read_text(encoding="utf-8")
        assert text.index("author") < text.index("title") < text.index("notes")
        assert "Ü" in text


class TestSchemaValidation:
    """Test output schema validation."""

    def test_valid_note_file(self):
        """Test a serialized document passes the bundled schema."""
        data = {
            "author": "",
            "title": "T",
            "notes": [{"text": "n", "subtitle": "", "page": "5", "tags": ["dummy"]}]
        }

        is_valid, error = validate_note_file(data, DEFAULT_SCHEMA_PATH)
        assert is_valid
        assert error is None

    def test_invalid_note_file_missing_field(self):
        """Test a note without page fails."""
        data = {
            "author": "",
            "title": "T",
            "notes": [{"text": "n", "subtitle": "", "tags": []}]
        }

        is_valid, error = validate_note_file(data)
        assert not is_valid
        assert "page" in error

    def test_invalid_note_file_extra_field(self):
        """Test unknown top-level fields fail."""
        data = {"author": "", "title": "T", "notes": [], "extra": 1}

        is_valid, error = validate_note_file(data)
        assert not is_valid
        assert error is not None


class TestProvenance:
    """Test provenance functionality."""

    def test_calculate_checksum(self):
        """Test checksum calculation."""
        checksum = calculate_checksum(b"test data")
        assert len(checksum) == 64  # SHA-256 hex length
        assert checksum.isalnum()

    def test_file_checksum_matches_bytes(self, note_file):
        """Test file checksum equals checksum of its bytes."""
        assert calculate_file_checksum(note_file) == calculate_checksum(note_file.read_bytes())

    def test_create_lineage_info(self, note_file):
        """Test lineage fields."""
        lineage = create_lineage_info(note_file, "abc", note_file.with_suffix(".yaml"), 2)

        assert lineage["source_file"] == str(note_file)
        assert lineage["checksum"] == "abc"
        assert lineage["notes"] == 2
        assert "parsed_at" in lineage
        assert "parser_version" in lineage


class TestParseEngine:
    """Test parse engine functionality."""

    def test_parse_lines(self):
        """Test the in-memory pipeline."""
        engine = ParseEngine()
        document = engine.parse_lines(["# My Title", "5", "hello"])

        assert document.title == "My Title"
        assert [(n.text, n.page) for n in document.notes] == [("hello", "5")]

    def test_parse_lines_propagates_validation_error(self):
        """Test validation errors reach the caller unchanged."""
        engine = ParseEngine()

        with pytest.raises(OrphanedNoteError):
            engine.parse_lines(["hello", "5"])

        with pytest.raises(MisplacedTitleError):
            engine.parse_lines(["5", "# Title"])

    def test_parse_file_yaml(self, note_file):
        """Test parsing a file writes YAML next to it."""
        engine = ParseEngine(author="Ada")
        stats = engine.parse_file(note_file)

        output = note_file.with_suffix(".yaml")
        assert stats["output_file"] == str(output)
        assert stats["notes"] == 2
        assert stats["total_lines"] == 7
        assert stats["lineage_file"] is None

        data = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert data == {
            "author": "Ada",
            "title": "My Title",
            "notes": [
                {"text": "hello", "subtitle": "Intro", "page": "5", "tags": ["dummy"]},
                {"text": "world", "subtitle": "Intro", "page": "6", "tags": ["dummy"]},
            ],
        }

    def test_parse_file_json_with_lineage(self, note_file, tmp_path):
        """Test JSON output into an output directory with a lineage file."""
        out_dir = tmp_path / "out"
        engine = ParseEngine(output_dir=out_dir, output_format="json", write_lineage=True)
        stats = engine.parse_file(note_file)

        data = json.loads((out_dir / "book.json").read_text(encoding="utf-8"))
        assert data["title"] == "My Title"
        assert len(data["notes"]) == 2

        lineage = json.loads((out_dir / "book_lineage.json").read_text(encoding="utf-8"))
        assert stats["lineage_file"] == str(out_dir / "book_lineage.json")
        assert lineage["checksum"] == calculate_file_checksum(note_file)
        assert lineage["notes"] == 2

    def test_parse_file_invalid_writes_nothing(self, tmp_path):
        """Test a structurally invalid file produces no output."""
        path = tmp_path / "bad.txt"
        path.write_text("hello\n5\n", encoding="utf-8")

        with pytest.raises(OrphanedNoteError):
            ParseEngine().parse_file(path)

        assert not (tmp_path / "bad.yaml").exists()

    def test_parse_file_output_schema_failure(self, note_file, tmp_path):
        """Test output failing the schema is not written."""
        schema_path = tmp_path / "strict.schema.json"
        schema_path.write_text(json.dumps({"type": "object", "required": ["missing"]}), encoding="utf-8")

        with pytest.raises(OutputSchemaError):
            ParseEngine(schema_path=schema_path).parse_file(note_file)

        assert not note_file.with_suffix(".yaml").exists()

    def test_parse_directory(self, tmp_path):
        """Test each file is parsed independently and failures are recorded."""
        (tmp_path / "a.txt").write_text("# A\n1\nfirst\n", encoding="utf-8")
        (tmp_path / "b.txt").write_text("orphan\n", encoding="utf-8")
        (tmp_path / "c.txt").write_text("## Only C\n2\nsecond\n", encoding="utf-8")

        results = ParseEngine().parse_directory(tmp_path)

        assert [r["status"] for r in results] == ["completed", "failed", "completed"]
        assert "orphan" in results[1]["reason"]
        assert results[1]["stats"] is None

        c_data = yaml.safe_load((tmp_path / "c.yaml").read_text(encoding="utf-8"))
        assert c_data["title"] == ""
        assert c_data["notes"][0]["subtitle"] == "Only C"

    def test_parse_directory_missing(self, tmp_path):
        """Test a missing directory yields no results."""
        assert ParseEngine().parse_directory(tmp_path / "missing") == []

    def test_parse_directory_no_matches(self, tmp_path):
        """Test a directory without note files yields no results."""
        (tmp_path / "notes.md").write_text("# T\n", encoding="utf-8")
        assert ParseEngine().parse_directory(tmp_path) == []


class TestIntegration:
    """Integration tests using fixture note files."""

    def test_reading_notes_fixture(self, fixture_dir, tmp_path):
        """Test the sample reading notes parse into the expected document."""
        engine = ParseEngine(output_dir=tmp_path)
        stats = engine.parse_file(fixture_dir / "reading_notes.txt")

        assert stats["title"] == "Thinking in Systems"
        data = yaml.safe_load((tmp_path / "reading_notes.yaml").read_text(encoding="utf-8"))

        assert [(n["subtitle"], n["page"]) for n in data["notes"]] == [
            ("Part One", "12"),
            ("Part One", "13"),
            ("Part Two", "48"),
        ]

    def test_orphaned_note_fixture(self, fixture_dir, tmp_path):
        """Test the broken fixture reports the orphaned note."""
        engine = ParseEngine(output_dir=tmp_path)

        with pytest.raises(OrphanedNoteError) as exc_info:
            engine.parse_file(fixture_dir / "orphaned_note.txt")

        assert exc_info.value.text == "This note has no page."
        assert exc_info.value.line_number == 2
        assert list(tmp_path.iterdir()) == []


if __name__ == "__main__":
    pytest.main([__file__])

"""Tests for search index loading."""

import json
import logging
from pathlib import Path

import pytest

from documenter_search.exceptions import FieldMissingError, ParseError
from documenter_search.loader import load, load_file, strip_assignment

INDEX_JS = """var documenterSearchIndex = {"docs":
[{"location":"reference/#Reference","page":"Reference","title":"Reference","text":"","category":"section"},\
{"location":"reference/","page":"Reference","title":"Reference","text":"\\u200b","category":"page"},\
{"location":"reference/#SolverParameters.AbstractDomain","page":"Reference",\
"title":"SolverParameters.AbstractDomain","text":"AbstractDomain{T}\\n\\nAn abstract domain type.","category":"type"}]
}
"""


@pytest.fixture
def index_file(tmp_path: Path) -> Path:
    """Write a generated search index file.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        Path to the index file.
    """
    path = tmp_path / "search_index.js"
    path.write_text(INDEX_JS, encoding="utf-8")
    return path


def test_load_generated_js(index_file: Path) -> None:
    """Test loading the generator's JS assignment wrapper."""
    records = load(index_file.read_text(encoding="utf-8"))

    assert len(records) == 3
    assert records[0].location == "reference/#Reference"
    assert records[1].text == "\u200b"
    assert records[2].category == "type"
    assert records[2].text.startswith("AbstractDomain{T}\n")


def test_load_plain_json() -> None:
    """Test loading a bare JSON document."""
    document = {"docs": [{"location": "a/", "page": "A", "title": "", "text": "x", "category": "page"}]}

    records = load(json.dumps(document))

    assert len(records) == 1
    assert records[0].title == ""


def test_load_mapping() -> None:
    """Test loading an already decoded document."""
    document = {
        "docs": [
            {"location": "a/", "page": "A", "title": "One", "text": "", "category": "section"},
            {"location": "b/", "page": "B", "title": "Two", "text": "", "category": "method"},
        ]
    }

    records = load(document)

    assert [record.location for record in records] == ["a/", "b/"]


def test_load_path(index_file: Path) -> None:
    """Test that path-like sources are read from disk."""
    assert len(load(index_file)) == 3
    assert load(index_file) == load_file(index_file)


def test_load_bytes_with_bom() -> None:
    """Test loading UTF-8 bytes with a byte order mark."""
    raw = '\ufeff{"docs": []}'.encode()

    assert load(raw) == ()


@pytest.mark.parametrize("count", [0, 1, 25])
def test_load_length_matches_docs(count: int) -> None:
    """Test that every docs entry produces exactly one record."""
    entry = {"location": "p/", "page": "P", "title": "T", "text": "t", "category": "page"}
    document = {"docs": [entry] * count}

    assert len(load(document)) == count


def test_load_returns_immutable_records() -> None:
    """Test that loaded records cannot be modified."""
    records = load({"docs": [{"location": "a/", "page": "A", "title": "", "text": "", "category": "page"}]})

    assert isinstance(records, tuple)
    with pytest.raises(AttributeError):
        records[0].title = "changed"  # type: ignore[misc]


def test_missing_fields_become_empty_strings() -> None:
    """Test that absent and null fields are substituted with empty strings."""
    records = load({"docs": [{"location": "a/", "title": None}]})

    record = records[0]
    assert record.location == "a/"
    assert record.page == ""
    assert record.title == ""
    assert record.text == ""
    assert record.category == ""


def test_strict_mode_raises_field_missing() -> None:
    """Test that strict loading rejects absent fields."""
    document = {
        "docs": [
            {"location": "a/", "page": "A", "title": "", "text": "", "category": "page"},
            {"location": "b/", "page": "B", "text": "", "category": "page"},
        ]
    }

    with pytest.raises(FieldMissingError) as exc_info:
        load(document, strict=True)

    assert exc_info.value.field == "title"
    assert exc_info.value.position == 1
    assert isinstance(exc_info.value, ParseError)


def test_extra_fields_are_ignored() -> None:
    """Test that unknown fields do not affect loading."""
    document = {
        "version": 2,
        "docs": [{"location": "a/", "page": "A", "title": "", "text": "", "category": "page", "score": 3}],
    }

    records = load(document)

    assert records[0].location == "a/"


@pytest.mark.parametrize(
    ("source", "message"),
    [
        ("{not json", "not well-formed JSON"),
        ("[]", "must be an object"),
        ('{"pages": []}', "no 'docs' array"),
        ('{"docs": {}}', "no 'docs' array"),
        ('{"docs": ["reference/"]}', "Record 0 must be an object"),
        ('{"docs": [{"location": 3}]}', "field 'location' must be a string"),
        (b"\xff\xfe", "not valid UTF-8"),
    ],
)
def test_malformed_input_raises_parse_error(source: str | bytes, message: str) -> None:
    """Test that malformed documents raise ParseError."""
    with pytest.raises(ParseError, match=message):
        load(source)


def test_parse_error_is_value_error() -> None:
    """Test that callers can handle parse failures as ValueError."""
    with pytest.raises(ValueError):
        load("var documenterSearchIndex = ;")


def test_load_file_missing(tmp_path: Path) -> None:
    """Test that a missing file is reported as such."""
    with pytest.raises(FileNotFoundError):
        load_file(tmp_path / "missing.js")


def test_load_file_directory_raises_parse_error(tmp_path: Path) -> None:
    """Test that an unreadable path raises ParseError."""
    with pytest.raises(ParseError, match="Cannot read search index"):
        load_file(tmp_path)


def test_strip_assignment() -> None:
    """Test removal of the JS assignment wrapper."""
    assert strip_assignment('var documenterSearchIndex = {"docs": []}\n') == '{"docs": []}\n'
    assert strip_assignment('const index = {"docs": []};\n') == '{"docs": []}'
    assert strip_assignment('{"docs": []}') == '{"docs": []}'


def test_unknown_category_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    """Test that unrecognised category tags are reported once."""
    entry = {"location": "a/", "page": "A", "title": "", "text": "", "category": "macro"}

    with caplog.at_level(logging.WARNING, logger="documenter_search.loader"):
        records = load({"docs": [entry, entry]})

    assert records[0].kind is None
    assert caplog.text.count("Unrecognised record category: 'macro'") == 1


def test_deeply_nested_input_raises_parse_error() -> None:
    """Test that input nested beyond the decoder's limits raises ParseError."""
    source = '{"docs": [' + "[" * 100_000 + "]" * 100_000 + "]}"

    with pytest.raises(ParseError, match="nested too deeply"):
        load(source)

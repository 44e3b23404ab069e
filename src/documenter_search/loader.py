"""Loader for documentation search index files."""

import json
import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from documenter_search.exceptions import FieldMissingError, ParseError
from documenter_search.models import SearchRecord

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("location", "page", "title", "text", "category")

# The generator writes `var documenterSearchIndex = {...}` rather than bare JSON
_ASSIGNMENT_PREFIX = re.compile(r"^\s*(?:var|let|const)\s+[\w$]+\s*=\s*")
_TRAILING_SEMICOLON = re.compile(r";\s*$")

Source = Mapping[str, Any] | str | bytes | os.PathLike[str]


def load(source: Source, strict: bool = False) -> tuple[SearchRecord, ...]:
    """Parse a search index into an immutable sequence of records.

    Args:
        source: Decoded mapping, JSON or JS index contents, or a path to an index file.
        strict: Raise FieldMissingError for absent fields instead of substituting "".

    Returns:
        Records in original extraction order.

    Raises:
        ParseError: If the input is not a well-formed search index.
    """
    if isinstance(source, os.PathLike):
        return load_file(source, strict=strict)
    if isinstance(source, Mapping):
        document: Any = source
    else:
        document = _decode(source)

    if not isinstance(document, Mapping):
        msg = f"Search index must be an object, got {type(document).__name__}"
        raise ParseError(msg)

    entries = document.get("docs")
    if not isinstance(entries, list):
        msg = "Search index has no 'docs' array"
        raise ParseError(msg)

    records = tuple(_parse_record(entry, position, strict) for position, entry in enumerate(entries))
    for category in dict.fromkeys(record.category for record in records if record.kind is None):
        logger.warning("Unrecognised record category: %r", category)
    return records


def load_file(path: str | os.PathLike[str], strict: bool = False) -> tuple[SearchRecord, ...]:
    """Load a search index from a file.

    Args:
        path: Path to a `search_index.js` or JSON index file.
        strict: Raise FieldMissingError for absent fields instead of substituting "".

    Returns:
        Records in original extraction order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ParseError: If the file cannot be read or is not a well-formed search index.
    """
    file_path = Path(path)
    try:
        raw = file_path.read_bytes()
    except FileNotFoundError:
        raise
    except OSError as exc:
        msg = f"Cannot read search index {file_path}: {exc}"
        raise ParseError(msg) from exc

    records = load(raw, strict=strict)
    logger.debug("Loaded %d records from %s", len(records), file_path)
    return records


def strip_assignment(content: str) -> str:
    """Remove the JS variable assignment wrapping the JSON document.

    Args:
        content: Raw index file contents.

    Returns:
        The bare JSON document.
    """
    content = _ASSIGNMENT_PREFIX.sub("", content, count=1)
    return _TRAILING_SEMICOLON.sub("", content)


def _decode(content: str | bytes) -> Any:
    """Decode JSON (optionally JS-wrapped) index contents.

    Args:
        content: Index contents as text or UTF-8 bytes.

    Returns:
        The decoded JSON value.

    Raises:
        ParseError: If the contents are not valid UTF-8 or JSON.
    """
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            msg = f"Search index is not valid UTF-8: {exc}"
            raise ParseError(msg) from exc

    try:
        return json.loads(strip_assignment(content))
    except json.JSONDecodeError as exc:
        msg = f"Search index is not well-formed JSON: {exc}"
        raise ParseError(msg) from exc
    except RecursionError as exc:
        msg = "Search index is nested too deeply to decode"
        raise ParseError(msg) from exc


def _parse_record(entry: Any, position: int, strict: bool) -> SearchRecord:
    """Build a SearchRecord from one `docs` entry.

    Args:
        entry: Decoded entry.
        position: Index of the entry within `docs`.
        strict: Whether absent fields are an error.

    Returns:
        SearchRecord instance.
    """
    if not isinstance(entry, Mapping):
        msg = f"Record {position} must be an object, got {type(entry).__name__}"
        raise ParseError(msg)

    values: dict[str, str] = {}
    for field in RECORD_FIELDS:
        value = entry.get(field)
        if value is None:
            if strict:
                raise FieldMissingError(field, position)
            logger.debug("Record %d has no '%s', using empty string", position, field)
            value = ""
        elif not isinstance(value, str):
            msg = f"Record {position} field '{field}' must be a string, got {type(value).__name__}"
            raise ParseError(msg)
        values[field] = value

    return SearchRecord(**values)

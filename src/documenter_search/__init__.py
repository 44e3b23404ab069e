"""Load and query documentation search indexes."""

from documenter_search.exceptions import FieldMissingError, ParseError, SearchIndexError
from documenter_search.index import SearchIndex, search
from documenter_search.loader import load, load_file
from documenter_search.models import Category, SearchRecord, SearchResult
from documenter_search.store import SearchIndexStore

__all__ = [
    "Category",
    "FieldMissingError",
    "ParseError",
    "SearchIndex",
    "SearchIndexError",
    "SearchIndexStore",
    "SearchRecord",
    "SearchResult",
    "load",
    "load_file",
    "search",
]

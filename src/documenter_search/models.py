"""Data models for documentation search index records."""

from dataclasses import dataclass
from enum import Enum


class Category(str, Enum):
    """Kind of documentation fragment a record was extracted from."""

    SECTION = "section"
    PAGE = "page"
    TYPE = "type"
    METHOD = "method"


@dataclass(frozen=True)
class SearchRecord:
    """Represents one indexed documentation fragment."""

    location: str
    page: str
    title: str
    text: str
    category: str

    @property
    def kind(self) -> Category | None:
        """Return the record category, or None for an unrecognised tag."""
        try:
            return Category(self.category)
        except ValueError:
            return None


@dataclass
class SearchResult:
    """Represents a search result."""

    location: str
    page: str
    title: str
    category: str
    snippet: str
    matched_field: str
    position: int

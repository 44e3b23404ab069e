"""In-memory query operations over documentation search index records."""

import logging
from collections.abc import Iterable, Iterator

from documenter_search.loader import Source, load
from documenter_search.markup import make_snippet
from documenter_search.models import Category, SearchRecord, SearchResult

logger = logging.getLogger(__name__)


def _normalise_query(query: str) -> str:
    """Normalise a user query for case-insensitive substring matching.

    Args:
        query: Raw user query string.

    Returns:
        Case-folded query without surrounding whitespace ("" for a blank query).
    """
    return query.strip().casefold()


def _rank(needle: str, records: Iterable[SearchRecord]) -> list[tuple[int, str, SearchRecord]]:
    """Rank records matching a normalised query.

    Title matches come before text-only matches; each group keeps the
    original record order.

    Args:
        needle: Normalised query.
        records: Records to scan.

    Returns:
        (position, matched field, record) tuples in rank order.
    """
    if not needle:
        return []

    title_matches: list[tuple[int, str, SearchRecord]] = []
    text_matches: list[tuple[int, str, SearchRecord]] = []
    for position, record in enumerate(records):
        if needle in record.title.casefold():
            title_matches.append((position, "title", record))
        elif needle in record.text.casefold():
            text_matches.append((position, "text", record))
    return title_matches + text_matches


def search(query: str, records: Iterable[SearchRecord]) -> list[str]:
    """Return locations of records matching query.

    Args:
        query: Search query, matched case-insensitively as a substring.
        records: Records to search.

    Returns:
        Matching locations, title matches first, each location reported once.
    """
    locations: list[str] = []
    seen: set[str] = set()
    for _, _, record in _rank(_normalise_query(query), records):
        if record.location not in seen:
            seen.add(record.location)
            locations.append(record.location)
    return locations


class SearchIndex:
    """Loaded documentation search index."""

    def __init__(self, records: Iterable[SearchRecord]) -> None:
        """Initialise index with the given records.

        Args:
            records: Records in original extraction order.
        """
        self.records: tuple[SearchRecord, ...] = tuple(records)

    @classmethod
    def from_source(cls, source: Source, strict: bool = False) -> "SearchIndex":
        """Build an index from anything `load` accepts."""
        return cls(load(source, strict=strict))

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[SearchRecord]:
        return iter(self.records)

    def search(self, query: str) -> list[str]:
        """Return locations of records matching query."""
        return search(query, self.records)

    def query(
        self,
        query: str,
        category: Category | str | None = None,
        limit: int | None = None,
    ) -> list[SearchResult]:
        """Search records and describe each match.

        Args:
            query: Search query string.
            category: Optional category filter.
            limit: Maximum number of results.

        Returns:
            List of SearchResult instances, title matches first.

        Raises:
            ValueError: If the category is unknown or the limit is not positive.
        """
        if limit is not None and limit < 1:
            msg = f"Limit must be positive, got {limit}"
            raise ValueError(msg)
        wanted = Category(category) if category is not None else None

        needle = _normalise_query(query)
        results: list[SearchResult] = []
        for position, matched_field, record in _rank(needle, self.records):
            if wanted is not None and record.category != wanted.value:
                continue
            snippet_source = record.text if needle in record.text.casefold() else record.title
            results.append(
                SearchResult(
                    location=record.location,
                    page=record.page,
                    title=record.title,
                    category=record.category,
                    snippet=make_snippet(snippet_source, query) or make_snippet(record.title, query),
                    matched_field=matched_field,
                    position=position,
                )
            )
            if limit is not None and len(results) >= limit:
                break
        logger.debug("Query %r matched %d records", query, len(results))
        return results

    def get(self, location: str) -> list[SearchRecord]:
        """Return all records sharing a location.

        Args:
            location: Relative URL fragment.

        Returns:
            Records with that location, in original order.
        """
        return [record for record in self.records if record.location == location]

    def pages(self) -> list[str]:
        """Return distinct page titles in first-seen order."""
        return list(dict.fromkeys(record.page for record in self.records))


"""Process-lifetime cache of a generated documentation search index."""

import logging
from pathlib import Path

from documenter_search.index import SearchIndex
from documenter_search.loader import load_file

logger = logging.getLogger(__name__)


class SearchIndexStore:
    """Loads a search index file once and reloads it when the site is rebuilt."""

    INDEX_FILENAME = "search_index.js"

    def __init__(self, path: Path, strict: bool = False) -> None:
        """Initialise store for the given index file.

        Args:
            path: Path to the search index file.
            strict: Reject records with absent fields instead of substituting "".
        """
        self.path = Path(path)
        self.strict = strict
        self._index: SearchIndex | None = None
        self._signature: tuple[int, int] | None = None

    @classmethod
    def from_site(cls, site_dir: Path, strict: bool = False) -> "SearchIndexStore":
        """Create a store for the index at the root of a built site.

        Args:
            site_dir: Path to the generated site directory.
            strict: Reject records with absent fields instead of substituting "".

        Returns:
            SearchIndexStore instance.

        Raises:
            ValueError: If the site directory or its index file does not exist.
        """
        site_dir = Path(site_dir)
        if not site_dir.is_dir():
            msg = f"Site directory does not exist: {site_dir}"
            raise ValueError(msg)

        index_path = site_dir / cls.INDEX_FILENAME
        if not index_path.is_file():
            msg = f"Search index does not exist: {index_path}"
            raise ValueError(msg)

        return cls(index_path, strict=strict)

    @classmethod
    def discover(cls, site_dir: Path) -> list[Path]:
        """Find every search index under a site tree, including preview builds.

        Args:
            site_dir: Path to the generated site directory.

        Returns:
            Sorted paths of index files.
        """
        paths = sorted(Path(site_dir).rglob(cls.INDEX_FILENAME))
        logger.debug("Found %d search index files under %s", len(paths), site_dir)
        return paths

    @property
    def index(self) -> SearchIndex:
        """Return the cached index, loading it on first use or after regeneration."""
        stat = self.path.stat()
        signature = (stat.st_mtime_ns, stat.st_size)
        if self._index is None or signature != self._signature:
            if self._index is not None:
                logger.info("Search index %s changed, reloading", self.path)
            self._index = SearchIndex(load_file(self.path, strict=self.strict))
            self._signature = signature
            logger.info("Loaded %d records from %s", len(self._index), self.path)
        return self._index

    def search(self, query: str) -> list[str]:
        """Return locations of records matching query."""
        return self.index.search(query)

    def invalidate(self) -> None:
        """Drop the cached index so the next access reloads it."""
        self._index = None
        self._signature = None

"""Plain-text rendering of record text for search result snippets."""

import re

import docutils.frontend  # type: ignore[import-untyped]
import docutils.nodes  # type: ignore[import-untyped]
import docutils.parsers.rst  # type: ignore[import-untyped]
import docutils.utils  # type: ignore[import-untyped]

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"
ELLIPSIS = "..."

# Documenter uses a zero-width space as the text of blocks it cannot index
_ZERO_WIDTH = re.compile("[\u200b\u200c\u200d\u2060\ufeff]")


class PlainTextVisitor(docutils.nodes.GenericNodeVisitor):  # type: ignore[misc]
    """Visitor to collect the readable text of a record."""

    def __init__(self, document: docutils.nodes.document) -> None:
        """Initialise plain text visitor.

        Args:
            document: Docutils document tree.
        """
        super().__init__(document)
        self._text_parts: list[str] = []

    def visit_comment(self, node: docutils.nodes.comment) -> None:
        """Skip comments.

        Raises:
            docutils.nodes.SkipNode: Always raised to skip comments.
        """
        raise docutils.nodes.SkipNode

    def visit_system_message(self, node: docutils.nodes.system_message) -> None:
        """Skip parser diagnostics.

        Raises:
            docutils.nodes.SkipNode: Always raised to skip system messages.
        """
        raise docutils.nodes.SkipNode

    def visit_Text(self, node: docutils.nodes.Text) -> None:  # noqa: N802
        """Collect text content."""
        self._text_parts.append(node.astext())

    def default_visit(self, node: docutils.nodes.Node) -> None:
        """Default visit handler (no-op)."""

    def default_departure(self, node: docutils.nodes.Node) -> None:
        """Separate block-level elements."""
        if isinstance(node, docutils.nodes.TextElement) and not isinstance(node, docutils.nodes.Inline):
            self._text_parts.append(" ")

    def get_text(self) -> str:
        """Get collected text with whitespace collapsed."""
        return re.sub(r"\s+", " ", "".join(self._text_parts)).strip()


def plain_text(text: str) -> str:
    """Render record text to plain text.

    Args:
        text: Record text, possibly containing markup.

    Returns:
        Readable text with markup removed and whitespace collapsed.
    """
    text = _ZERO_WIDTH.sub("", text)
    if not text.strip():
        return ""

    parser = docutils.parsers.rst.Parser()
    settings = docutils.frontend.get_default_settings(docutils.parsers.rst.Parser)
    settings.report_level = 5  # Suppress warnings
    settings.halt_level = 5
    # Record text must never pull in local files
    settings.file_insertion_enabled = False
    settings.raw_enabled = False
    document = docutils.utils.new_document("<record>", settings)
    parser.parse(text, document)

    visitor = PlainTextVisitor(document)
    document.walkabout(visitor)
    return visitor.get_text()


def make_snippet(text: str, query: str, width: int = 64) -> str:
    """Build a highlighted excerpt of text around the first match of query.

    Args:
        text: Record text, possibly containing markup.
        query: Search query.
        width: Maximum number of characters of context kept.

    Returns:
        Snippet with the match wrapped in mark tags, or the leading text when
        the rendered text does not contain the query.
    """
    rendered = plain_text(text)
    needle = query.strip()
    match = re.search(re.escape(needle), rendered, re.IGNORECASE) if needle else None

    if match is None:
        if len(rendered) <= width:
            return rendered
        return rendered[:width].rstrip() + ELLIPSIS

    start, end = match.span()
    context = max(width - (end - start), 0)
    left = max(start - context // 2, 0)
    right = min(end + context - (start - left), len(rendered))
    left = min(max(min(left, right - width), 0), start)

    return "".join(
        [
            ELLIPSIS if left > 0 else "",
            rendered[left:start],
            MARK_OPEN,
            rendered[start:end],
            MARK_CLOSE,
            rendered[end:right],
            ELLIPSIS if right < len(rendered) else "",
        ]
    )

"""Exceptions raised while loading documentation search indexes."""


class SearchIndexError(ValueError):
    """Base exception for search index errors."""


class ParseError(SearchIndexError):
    """The input is not a well-formed search index document."""


class FieldMissingError(ParseError):
    """A record is missing one of its required fields."""

    def __init__(self, field: str, position: int) -> None:
        """Initialise with the missing field and the record position.

        Args:
            field: Name of the absent field.
            position: Index of the record within ``docs``.
        """
        super().__init__(f"Record {position} is missing required field '{field}'")
        self.field = field
        self.position = position

"""Domain-specific exceptions for highlight compilation.

Classification misses (unmatched log lines, unknown player names) are not
exceptions; they are logged as warnings by the classifier.
"""


class HighlightsError(Exception):
    """Base exception for highlight compilation failures."""

    pass


class ValidationError(HighlightsError):
    """Raised when a value object is constructed with invalid arguments.

    Not a ``ValueError``: raised inside a pydantic validator it propagates
    as is rather than as a ``pydantic.ValidationError``.
    """

    pass


class ParseError(HighlightsError):
    """Raised when textual or declarative input cannot be parsed."""

    def __init__(self, message: str, fragment: object | None = None):
        self.fragment = fragment
        if fragment is not None:
            message = f"{message}: {fragment!r}"
        super().__init__(message)


class ResourceUnavailable(HighlightsError):
    """Raised when a game log, page, clip or external tool cannot be produced."""

    pass

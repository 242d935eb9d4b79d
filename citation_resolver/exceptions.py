"""Custom exception hierarchy for the citation resolver."""


class CitationError(Exception):
    """Base exception for citation resolver errors."""


class MalformedInputError(CitationError):
    """Raised when caller input fails validation and should be reported back."""


class InvalidDoiError(MalformedInputError):
    """Raised when a DOI lookup receives a string that is not a DOI."""


class InvalidTitleError(MalformedInputError):
    """Raised when a title search query is empty or out of bounds."""


class EmptyReferenceListError(MalformedInputError):
    """Raised when a batch contains no non-blank reference lines."""


class UnsupportedStyleError(MalformedInputError):
    """Raised for citation style or export format names that are not supported."""

    def __init__(self, style: str) -> None:
        super().__init__(f"Unsupported citation style: {style!r}")
        self.style = style

"""Domain-specific exceptions for books services."""


class BooksServiceError(Exception):
    """Base exception for books services."""
    pass


class BookNotFoundError(BooksServiceError):
    """Raised when book does not exist."""
    pass


class InvalidBookError(BooksServiceError):
    """Raised when book data fails domain validation."""
    pass


class InvalidQueryError(BooksServiceError):
    """Raised when filter, sort, select or search parameters are unusable."""
    pass


class MalformedIdentifierError(BooksServiceError):
    """Raised when an id from the URL is not a valid identifier."""
    pass

"""Services for books business logic."""

from .exceptions import (
    BooksServiceError,
    BookNotFoundError,
    InvalidBookError,
    InvalidQueryError,
    MalformedIdentifierError,
)
from .identifiers import parse_object_id
from .book_management import (
    create_book,
    get_book_by_id,
)
from .book_listing import (
    BookPage,
    BookDetail,
    list_books,
    search_books,
    get_book_detail,
)
from .rating_aggregation import (
    calculate_average_rating,
    update_book_rating,
    refresh_book_rating,
    get_top_rated_books,
)

__all__ = [
    # Exceptions
    'BooksServiceError',
    'BookNotFoundError',
    'InvalidBookError',
    'InvalidQueryError',
    'MalformedIdentifierError',
    # Identifiers
    'parse_object_id',
    # Book Management
    'create_book',
    'get_book_by_id',
    # Listing and Search
    'BookPage',
    'BookDetail',
    'list_books',
    'search_books',
    'get_book_detail',
    # Rating Aggregation
    'calculate_average_rating',
    'update_book_rating',
    'refresh_book_rating',
    'get_top_rated_books',
]

"""Book listing, search and detail queries."""

from dataclasses import dataclass, field
from typing import Mapping, Optional
from uuid import UUID

from django.conf import settings
from django.db.models import Q

from ..models import Book
from .book_management import get_book_by_id
from .exceptions import InvalidQueryError
from .pagination import PaginationWindow, plan_window
from .query_filters import (
    build_filter_q,
    parse_field_list,
    parse_filter_params,
    parse_sort,
)

BOOK_FIELDS = (
    'id',
    'title',
    'author',
    'description',
    'genre',
    'publication_year',
    'average_rating',
    'created_at',
    'user',
)

FILTERABLE_FIELDS = frozenset(BOOK_FIELDS) - {'id'}
SORTABLE_FIELDS = frozenset(BOOK_FIELDS) - {'id', 'description'}
SELECTABLE_FIELDS = frozenset(BOOK_FIELDS)


@dataclass
class BookPage:
    """One page of books plus what is needed to describe the page."""

    books: list
    total: int
    window: PaginationWindow
    fields: list = field(default_factory=list)

    @property
    def pagination(self) -> dict:
        return self.window.describe(self.total)


@dataclass
class BookDetail:
    """A book with one page of its reviews."""

    book: Book
    reviews: list
    review_count: int
    window: PaginationWindow

    @property
    def pagination(self) -> dict:
        return self.window.describe(self.review_count)


def list_books(*, params: Mapping) -> BookPage:
    """
    List books matching attribute filters, sorted and paginated.

    Args:
        params: Request query parameters. Filters use the syntax of
            ``query_filters``; ``select``, ``sort``, ``page`` and ``limit``
            control projection, ordering and the page window.

    Returns:
        BookPage; ``total`` counts every match, not just this page

    Raises:
        InvalidQueryError: If any parameter cannot be translated
    """
    clauses = parse_filter_params(params, model=Book, allowed_fields=FILTERABLE_FIELDS)
    fields = parse_field_list(params.get('select'), allowed_fields=SELECTABLE_FIELDS)
    ordering = parse_sort(params.get('sort'), allowed_fields=SORTABLE_FIELDS)
    window = _plan(params.get('page'), params.get('limit'))

    queryset = Book.objects.filter(build_filter_q(clauses))
    total = queryset.count()

    if fields:
        queryset = queryset.only(*fields)

    books = list(window.apply(queryset.order_by(*ordering)))
    return BookPage(books=books, total=total, window=window, fields=fields)


def search_books(
    *,
    query: Optional[str],
    page=None,
    limit=None
) -> BookPage:
    """
    Case-insensitive substring search over title OR author.

    The term is matched literally, newest books first.

    Raises:
        InvalidQueryError: If query is missing or blank
    """
    term = (query or '').strip()
    if not term:
        raise InvalidQueryError("Please provide a search query")

    window = _plan(page, limit)

    queryset = Book.objects.filter(
        Q(title__icontains=term) |
        Q(author__icontains=term)
    )
    total = queryset.count()

    books = list(window.apply(queryset.order_by('-created_at')))
    return BookPage(books=books, total=total, window=window)


def get_book_detail(*, book_id: UUID, page=None, limit=None) -> BookDetail:
    """
    Get a book with a page of its reviews, newest first.

    ``review_count`` is the total number of reviews for the book and the
    pagination descriptors are computed against it.

    Raises:
        MalformedIdentifierError: If book_id is not a valid UUID
        BookNotFoundError: If book doesn't exist
    """
    book = get_book_by_id(book_id=book_id)
    window = _plan(page, limit)

    reviews = book.reviews.select_related('user').order_by('-created_at')
    review_count = reviews.count()

    return BookDetail(
        book=book,
        reviews=list(window.apply(reviews)),
        review_count=review_count,
        window=window,
    )


def _plan(page, limit) -> PaginationWindow:
    return plan_window(
        page=page,
        limit=limit,
        max_limit=getattr(settings, 'BOOKS_MAX_PAGE_LIMIT', None),
    )

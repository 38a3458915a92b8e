"""Rating aggregation service with concurrency protection.

A book's average rating is always recomputed from the reviews currently
stored, never adjusted incrementally, so any number of overlapping
recomputes converge on the value of the latest committed review set.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from django.db import transaction, DatabaseError
from django.db.models import Count, QuerySet, Sum

from ..models import Book
from .exceptions import BookNotFoundError

logger = logging.getLogger(__name__)

RATING_PRECISION = Decimal('0.1')


def calculate_average_rating(total: Optional[int], count: int) -> Decimal:
    """
    Mean of the ratings rounded to one decimal, half away from zero.

    Returns Decimal('0.0') when there are no ratings.
    """
    if not count:
        return Decimal('0.0')
    mean = Decimal(total) / Decimal(count)
    return mean.quantize(RATING_PRECISION, rounding=ROUND_HALF_UP)


@transaction.atomic
def update_book_rating(*, book_id: UUID) -> Book:
    """
    Recalculate and store a book's average rating.

    Uses select_for_update() so concurrent recomputes for the same book
    run one after another, each against the current review set.

    Args:
        book_id: Book UUID

    Returns:
        Updated Book instance

    Raises:
        BookNotFoundError: If book doesn't exist
    """
    try:
        book = (
            Book.objects
            .select_for_update()
            .get(id=book_id)
        )
    except Book.DoesNotExist:
        raise BookNotFoundError(f"Book {book_id} not found")

    aggregates = book.reviews.aggregate(
        total=Sum('rating'),
        count=Count('id')
    )

    book.average_rating = calculate_average_rating(aggregates['total'], aggregates['count'])
    book.save(update_fields=['average_rating'])

    return book


def refresh_book_rating(*, book_id: UUID) -> Optional[Book]:
    """
    Recompute a book's rating after one of its reviews changed.

    Failures are logged and swallowed: the review write that triggered
    the refresh stands, and the next review change corrects the value.

    Returns:
        Updated Book instance, or None if the refresh failed
    """
    try:
        book = update_book_rating(book_id=book_id)
    except (BookNotFoundError, DatabaseError):
        logger.exception("Failed to refresh average rating for book %s", book_id)
        return None

    logger.debug("Book %s average rating is now %s", book_id, book.average_rating)
    return book


def get_top_rated_books(*, limit: int = 10, min_reviews: int = 1) -> QuerySet[Book]:
    """
    Get top-rated books with a minimum number of reviews.

    Args:
        limit: Number of books to return
        min_reviews: Minimum number of reviews required

    Returns:
        QuerySet of books annotated with ``review_total``
    """
    return (
        Book.objects
        .annotate(review_total=Count('reviews'))
        .filter(review_total__gte=min_reviews)
        .order_by('-average_rating', '-review_total', '-created_at')[:limit]
    )

"""Review management service - CRUD operations for reviews.

Every successful create, update and delete is followed by an explicit
refresh of the book's average rating. The refresh runs after the review
write and never fails the review operation.
"""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.accounts.models import User
from apps.books.models import Book
from apps.books.services import parse_object_id, refresh_book_rating
from apps.reviews.models import Review
from .exceptions import (
    ReviewNotFoundError,
    DuplicateReviewError,
    InvalidReviewError,
    BookNotFoundError,
    UnauthorizedReviewActionError,
)

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
TITLE_MAX_LENGTH = Review._meta.get_field('title').max_length

DUPLICATE_REVIEW_MESSAGE = "You have already submitted a review for this book"


def create_review(
    *,
    user: User,
    book_id: UUID,
    title: str,
    text: str,
    rating: int
) -> Review:
    """
    Create a new review for a book.

    This operation:
    1. Validates title, text and rating
    2. Checks the book exists
    3. Checks for duplicate review (user, book)
    4. Creates the review; the (book, user) unique constraint closes the
       race between the check and the insert
    5. Refreshes the book's average rating

    Args:
        user: User writing the review
        book_id: UUID of book being reviewed
        title: Review title (max 100 characters)
        text: Review body
        rating: Rating (1-5)

    Returns:
        Created Review instance

    Raises:
        MalformedIdentifierError: If book_id is not a valid UUID
        InvalidReviewError: If a field fails validation
        BookNotFoundError: If book doesn't exist
        DuplicateReviewError: If user already reviewed this book
    """
    title = _clean_title(title)
    text = _clean_text(text)
    _validate_rating(rating)

    book_uuid = parse_object_id(book_id, label='book')
    try:
        book = Book.objects.get(id=book_uuid)
    except Book.DoesNotExist:
        raise BookNotFoundError("Book not found")

    if Review.objects.filter(book=book, user=user).exists():
        raise DuplicateReviewError(DUPLICATE_REVIEW_MESSAGE)

    try:
        # Savepoint keeps an outer transaction usable after IntegrityError
        with transaction.atomic():
            review = Review.objects.create(
                book=book,
                user=user,
                title=title,
                text=text,
                rating=rating,
            )
    except IntegrityError:
        raise DuplicateReviewError(DUPLICATE_REVIEW_MESSAGE)

    logger.info("Review %s created for book %s by user %s", review.id, book.id, user.pk)
    refresh_book_rating(book_id=book.id)
    return review


def get_review_by_id(*, review_id: UUID) -> Review:
    """
    Retrieve a review by ID.

    Raises:
        MalformedIdentifierError: If review_id is not a valid UUID
        ReviewNotFoundError: If review doesn't exist
    """
    review_uuid = parse_object_id(review_id, label='review')
    try:
        return Review.objects.select_related('user', 'book').get(id=review_uuid)
    except Review.DoesNotExist:
        raise ReviewNotFoundError("Review not found")


def update_review(
    *,
    review_id: UUID,
    user: User,
    title: Optional[str] = None,
    text: Optional[str] = None,
    rating: Optional[int] = None
) -> Review:
    """
    Update an existing review.

    Only the review author can update their review. The book and the
    author cannot be changed. Omitted fields keep their value.

    Args:
        review_id: UUID of review to update
        user: User making the update (must be author)
        title: New title
        text: New text
        rating: New rating (1-5)

    Returns:
        Updated Review instance

    Raises:
        MalformedIdentifierError: If review_id is not a valid UUID
        ReviewNotFoundError: If review doesn't exist
        UnauthorizedReviewActionError: If user is not the author
        InvalidReviewError: If a supplied field fails validation
    """
    review_uuid = parse_object_id(review_id, label='review')

    with transaction.atomic():
        # Get review with row lock
        try:
            review = (
                Review.objects
                .select_for_update()
                .get(id=review_uuid)
            )
        except Review.DoesNotExist:
            raise ReviewNotFoundError("Review not found")

        if review.user_id != user.pk:
            raise UnauthorizedReviewActionError("Not authorized to update this review")

        # Validate everything before touching the instance
        if title is not None:
            title = _clean_title(title)
        if text is not None:
            text = _clean_text(text)
        if rating is not None:
            _validate_rating(rating)

        if title is not None:
            review.title = title
        if text is not None:
            review.text = text
        if rating is not None:
            review.rating = rating

        review.save()

    logger.info("Review %s updated by user %s", review.id, user.pk)
    refresh_book_rating(book_id=review.book_id)
    return review


def delete_review(*, review_id: UUID, user: User) -> None:
    """
    Delete a review.

    Only the review author can delete their review. The rating of the
    book the review belonged to is refreshed afterwards.

    Args:
        review_id: UUID of review to delete
        user: User making the deletion (must be author)

    Raises:
        MalformedIdentifierError: If review_id is not a valid UUID
        ReviewNotFoundError: If review doesn't exist
        UnauthorizedReviewActionError: If user is not the author
    """
    review_uuid = parse_object_id(review_id, label='review')

    with transaction.atomic():
        # Get review with row lock
        try:
            review = (
                Review.objects
                .select_for_update()
                .get(id=review_uuid)
            )
        except Review.DoesNotExist:
            raise ReviewNotFoundError("Review not found")

        if review.user_id != user.pk:
            raise UnauthorizedReviewActionError("Not authorized to delete this review")

        book_id = review.book_id
        review.delete()

    logger.info("Review %s deleted by user %s", review_uuid, user.pk)
    refresh_book_rating(book_id=book_id)


def _clean_title(title) -> str:
    title = (title or '').strip()
    if not title:
        raise InvalidReviewError("Please provide a review title")
    if len(title) > TITLE_MAX_LENGTH:
        raise InvalidReviewError(f"Title cannot be more than {TITLE_MAX_LENGTH} characters")
    return title


def _clean_text(text) -> str:
    text = (text or '').strip()
    if not text:
        raise InvalidReviewError("Please provide review text")
    return text


def _validate_rating(rating) -> None:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidReviewError("Please provide a rating between 1 and 5")
    if not (MIN_RATING <= rating <= MAX_RATING):
        raise InvalidReviewError("Rating must be between 1 and 5")

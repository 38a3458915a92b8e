"""Book management service - creation and lookup."""

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction

from apps.accounts.models import User
from ..models import Book, Genre
from .exceptions import BookNotFoundError, InvalidBookError
from .identifiers import parse_object_id

logger = logging.getLogger(__name__)


@transaction.atomic
def create_book(
    *,
    user: User,
    title: str,
    author: str,
    description: str,
    genre: str,
    publication_year: Optional[int] = None
) -> Book:
    """
    Create a new book owned by ``user``.

    Args:
        user: Owner of the book
        title: Book title (max 200 characters)
        author: Author name
        description: Book description
        genre: One of Genre values
        publication_year: Optional year of publication

    Returns:
        Created Book instance

    Raises:
        InvalidBookError: If a required field is blank or genre is unknown
    """
    title = (title or '').strip()
    author = (author or '').strip()
    description = (description or '').strip()

    if not title:
        raise InvalidBookError("Please provide a book title")
    if len(title) > Book._meta.get_field('title').max_length:
        raise InvalidBookError("Title cannot be more than 200 characters")
    if not author:
        raise InvalidBookError("Please provide an author name")
    if not description:
        raise InvalidBookError("Please provide a book description")
    if genre not in Genre.values:
        raise InvalidBookError(f"'{genre}' is not a valid genre")

    book = Book.objects.create(
        user=user,
        title=title,
        author=author,
        description=description,
        genre=genre,
        publication_year=publication_year,
    )

    logger.info("Book %s created by user %s", book.id, user.pk)
    return book


def get_book_by_id(*, book_id: UUID) -> Book:
    """
    Retrieve a book by ID.

    Raises:
        MalformedIdentifierError: If book_id is not a valid UUID
        BookNotFoundError: If book doesn't exist
    """
    book_uuid = parse_object_id(book_id, label='book')
    try:
        return Book.objects.select_related('user').get(id=book_uuid)
    except Book.DoesNotExist:
        raise BookNotFoundError("Book not found")

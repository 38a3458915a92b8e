"""
Reviews services - Business logic layer.

This package contains all business operations for the reviews app:
- Review create, read, update and delete
- Rating refresh of the reviewed book after every change
"""

# Review Management
from .review_management import (
    create_review,
    get_review_by_id,
    update_review,
    delete_review,
)

# Domain Exceptions
from .exceptions import (
    ReviewsServiceError,
    ReviewNotFoundError,
    DuplicateReviewError,
    InvalidReviewError,
    BookNotFoundError,
    UnauthorizedReviewActionError,
)
from apps.books.services import MalformedIdentifierError

__all__ = [
    # Review Management Services
    'create_review',
    'get_review_by_id',
    'update_review',
    'delete_review',
    # Exceptions
    'ReviewsServiceError',
    'ReviewNotFoundError',
    'DuplicateReviewError',
    'InvalidReviewError',
    'BookNotFoundError',
    'UnauthorizedReviewActionError',
    'MalformedIdentifierError',
]

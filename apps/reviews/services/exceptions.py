"""Domain exceptions for reviews app."""


class ReviewsServiceError(Exception):
    """Base exception for all reviews service errors."""
    pass


class ReviewNotFoundError(ReviewsServiceError):
    """Review does not exist."""
    pass


class DuplicateReviewError(ReviewsServiceError):
    """User already reviewed this book."""
    pass


class InvalidReviewError(ReviewsServiceError):
    """Rating must be between 1 and 5; title and text are required."""
    pass


class BookNotFoundError(ReviewsServiceError):
    """Book being reviewed does not exist."""
    pass


class UnauthorizedReviewActionError(ReviewsServiceError):
    """User cannot modify this review."""
    pass

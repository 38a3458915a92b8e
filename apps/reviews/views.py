from rest_framework import status, viewsets, serializers as drf_serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAuthenticatedOrReadOnly
from drf_spectacular.utils import extend_schema

from config.responses import success_response, error_response
from .serializers import ReviewSerializer, ReviewWriteSerializer
from .services import (
    create_review,
    get_review_by_id,
    update_review,
    delete_review,
    ReviewNotFoundError,
    DuplicateReviewError,
    InvalidReviewError,
    BookNotFoundError,
    UnauthorizedReviewActionError,
    MalformedIdentifierError,
)


class ErrorResponseSerializer(drf_serializers.Serializer):
    success = drf_serializers.BooleanField()
    message = drf_serializers.CharField()


class ReviewResponseSerializer(drf_serializers.Serializer):
    success = drf_serializers.BooleanField()
    data = ReviewSerializer()


ERROR_RESPONSES = {
    400: ErrorResponseSerializer,
    401: ErrorResponseSerializer,
    404: ErrorResponseSerializer,
}

# Service error -> HTTP status
ERROR_STATUS = (
    (MalformedIdentifierError, status.HTTP_400_BAD_REQUEST),
    (InvalidReviewError, status.HTTP_400_BAD_REQUEST),
    (DuplicateReviewError, status.HTTP_400_BAD_REQUEST),
    (UnauthorizedReviewActionError, status.HTTP_401_UNAUTHORIZED),
    (ReviewNotFoundError, status.HTTP_404_NOT_FOUND),
    (BookNotFoundError, status.HTTP_404_NOT_FOUND),
)

HANDLED_ERRORS = tuple(error_class for error_class, _ in ERROR_STATUS)


def _service_error_response(exc):
    for error_class, status_code in ERROR_STATUS:
        if isinstance(exc, error_class):
            return error_response(exc, status_code)
    raise exc


@extend_schema(
    request=ReviewWriteSerializer,
    responses={201: ReviewResponseSerializer, **ERROR_RESPONSES},
    description="Add a review to a book. Each user may review a book once.",
    tags=['reviews'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_book_review(request, book_id):
    """Create a review for a book as the authenticated user."""
    serializer = ReviewWriteSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        review = create_review(
            user=request.user,
            book_id=book_id,
            **serializer.validated_data,
        )
    except HANDLED_ERRORS as e:
        return _service_error_response(e)

    return success_response(
        ReviewSerializer(review).data,
        status_code=status.HTTP_201_CREATED,
    )


class ReviewViewSet(viewsets.GenericViewSet):
    """
    ViewSet for a single review.

    retrieve: Get a review
    update: Update a review (author only)
    partial_update: Update a review (author only)
    destroy: Delete a review (author only)
    """

    serializer_class = ReviewSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]

    @extend_schema(
        responses={200: ReviewResponseSerializer, 400: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=['reviews'],
    )
    def retrieve(self, request, pk=None):
        """Get a single review."""
        try:
            review = get_review_by_id(review_id=pk)
        except HANDLED_ERRORS as e:
            return _service_error_response(e)

        return success_response(ReviewSerializer(review).data)

    @extend_schema(
        request=ReviewWriteSerializer,
        responses={200: ReviewResponseSerializer, **ERROR_RESPONSES},
        description="Update a review. Omitted fields keep their value.",
        tags=['reviews'],
    )
    def update(self, request, pk=None):
        """Update a review; PUT and PATCH both apply a partial update."""
        serializer = ReviewWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            review = update_review(
                review_id=pk,
                user=request.user,
                title=serializer.validated_data.get('title'),
                text=serializer.validated_data.get('text'),
                rating=serializer.validated_data.get('rating'),
            )
        except HANDLED_ERRORS as e:
            return _service_error_response(e)

        return success_response(ReviewSerializer(review).data)

    @extend_schema(
        request=ReviewWriteSerializer,
        responses={200: ReviewResponseSerializer, **ERROR_RESPONSES},
        tags=['reviews'],
    )
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(
        responses={200: ReviewResponseSerializer, **ERROR_RESPONSES},
        description="Delete a review. The book's average rating is recomputed.",
        tags=['reviews'],
    )
    def destroy(self, request, pk=None):
        """Delete a review."""
        try:
            delete_review(review_id=pk, user=request.user)
        except HANDLED_ERRORS as e:
            return _service_error_response(e)

        return success_response({})

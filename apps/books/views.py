from rest_framework import viewsets, status, serializers as drf_serializers
from django.conf import settings
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.pagination import BasePagination
from rest_framework.permissions import AllowAny, IsAuthenticatedOrReadOnly
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from config.responses import success_response, error_response
from .models import Book
from .serializers import (
    BookSerializer,
    BookCreateSerializer,
    BookReviewSerializer,
    TopRatedBookSerializer,
)
from .services.pagination import MAX_WINDOW_END, plan_window
from .services import (
    create_book,
    list_books,
    search_books as search_books_service,
    get_book_detail,
    get_top_rated_books,
    BookNotFoundError,
    InvalidBookError,
    InvalidQueryError,
    MalformedIdentifierError,
)


PAGE_PARAMETERS = [
    OpenApiParameter('page', OpenApiTypes.INT, description='Page number (default 1)'),
    OpenApiParameter('limit', OpenApiTypes.INT, description='Page size (default 10)'),
]


class PaginationDescriptorSerializer(drf_serializers.Serializer):
    page = drf_serializers.IntegerField()
    limit = drf_serializers.IntegerField()


class PaginationSerializer(drf_serializers.Serializer):
    next = PaginationDescriptorSerializer(required=False)
    prev = PaginationDescriptorSerializer(required=False)


class BookListResponseSerializer(drf_serializers.Serializer):
    success = drf_serializers.BooleanField()
    count = drf_serializers.IntegerField(help_text="Number of books in this page")
    pagination = PaginationSerializer()
    data = BookSerializer(many=True)


class BookDetailResponseSerializer(drf_serializers.Serializer):
    success = drf_serializers.BooleanField()
    data = BookSerializer()
    reviews = BookReviewSerializer(many=True)
    review_count = drf_serializers.IntegerField()
    pagination = PaginationSerializer()


class ErrorResponseSerializer(drf_serializers.Serializer):
    success = drf_serializers.BooleanField()
    message = drf_serializers.CharField()


class BookPagination(BasePagination):
    """
    Page/limit pagination rendered in the response envelope.

    Listing services slice their own results, so views hand the finished
    window and total over with ``adopt``. Plain querysets go through
    ``paginate_queryset``.
    """
    page_query_param = 'page'
    limit_query_param = 'limit'

    def __init__(self):
        self.window = None
        self.total = 0

    def get_window(self, request):
        return plan_window(
            page=request.query_params.get(self.page_query_param),
            limit=request.query_params.get(self.limit_query_param),
            max_limit=getattr(settings, 'BOOKS_MAX_PAGE_LIMIT', None),
        )

    def paginate_queryset(self, queryset, request, view=None):
        self.window = self.get_window(request)
        self.total = queryset.count()
        return list(self.window.apply(queryset))

    def adopt(self, window, total):
        self.window = window
        self.total = total

    def get_pagination(self):
        return self.window.describe(self.total)

    def get_paginated_response(self, data):
        return success_response(
            data,
            count=len(data),
            pagination=self.get_pagination(),
        )


def _page_response(paginator, page):
    """Render a BookPage in the listing envelope."""
    paginator.adopt(page.window, page.total)
    data = BookSerializer(page.books, many=True, fields=page.fields).data
    return paginator.get_paginated_response(data)


class BookViewSet(viewsets.GenericViewSet):
    """
    ViewSet for the book catalog.

    list: Filter, sort and paginate books
    create: Add a book (authenticated)
    retrieve: Get a book with a page of its reviews
    top_rated: Books ordered by average rating
    """

    queryset = Book.objects.all()
    serializer_class = BookSerializer
    permission_classes = [IsAuthenticatedOrReadOnly]
    pagination_class = BookPagination

    @extend_schema(
        parameters=[
            OpenApiParameter('select', OpenApiTypes.STR, description='Comma-separated fields to return'),
            OpenApiParameter('sort', OpenApiTypes.STR, description='Comma-separated sort fields, "-" for descending (default -created_at)'),
            *PAGE_PARAMETERS,
            OpenApiParameter('genre', OpenApiTypes.STR, description='Exact genre; also genre[in]=A,B'),
            OpenApiParameter('publication_year', OpenApiTypes.INT, description='Exact year; also publication_year[gt|gte|lt|lte]=N'),
        ],
        responses={200: BookListResponseSerializer, 400: ErrorResponseSerializer},
        description="List books. Any book field may be filtered with equality or the gt, gte, lt, lte and in operators.",
        tags=['books'],
    )
    def list(self, request):
        """List books with filters, sort, field selection and pagination."""
        try:
            page = list_books(params=request.query_params)
        except InvalidQueryError as e:
            return error_response(e, status.HTTP_400_BAD_REQUEST)

        return _page_response(self.paginator, page)

    @extend_schema(
        request=BookCreateSerializer,
        responses={201: BookSerializer, 400: ErrorResponseSerializer},
        description="Create a book owned by the authenticated user.",
        tags=['books'],
    )
    def create(self, request):
        """Create a new book."""
        serializer = BookCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            book = create_book(user=request.user, **serializer.validated_data)
        except InvalidBookError as e:
            return error_response(e, status.HTTP_400_BAD_REQUEST)

        return success_response(
            BookSerializer(book).data,
            status_code=status.HTTP_201_CREATED,
        )

    @extend_schema(
        parameters=PAGE_PARAMETERS,
        responses={
            200: BookDetailResponseSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        description="Get a book with a page of its reviews, newest first.",
        tags=['books'],
    )
    def retrieve(self, request, pk=None):
        """Get a single book and its reviews."""
        try:
            detail = get_book_detail(
                book_id=pk,
                page=request.query_params.get('page'),
                limit=request.query_params.get('limit'),
            )
        except MalformedIdentifierError as e:
            return error_response(e, status.HTTP_400_BAD_REQUEST)
        except BookNotFoundError as e:
            return error_response(e, status.HTTP_404_NOT_FOUND)

        self.paginator.adopt(detail.window, detail.review_count)
        return success_response(
            BookSerializer(detail.book).data,
            reviews=BookReviewSerializer(detail.reviews, many=True).data,
            review_count=detail.review_count,
            pagination=self.paginator.get_pagination(),
        )

    @extend_schema(
        parameters=[
            OpenApiParameter('limit', OpenApiTypes.INT, description='Number of books (default 10)'),
            OpenApiParameter('min_reviews', OpenApiTypes.INT, description='Minimum number of reviews (default 1)'),
        ],
        responses={200: TopRatedBookSerializer(many=True)},
        description="Books ordered by average rating.",
        tags=['books'],
    )
    @action(detail=False, methods=['get'])
    def top_rated(self, request):
        """Get the highest rated books."""
        books = get_top_rated_books(
            limit=self.paginator.get_window(request).limit,
            min_reviews=_non_negative_int(request.query_params.get('min_reviews'), default=1),
        )
        data = TopRatedBookSerializer(books, many=True).data
        return success_response(data, count=len(data))


@extend_schema(
    parameters=[
        OpenApiParameter('query', OpenApiTypes.STR, required=True, description='Text matched against title or author'),
        *PAGE_PARAMETERS,
    ],
    responses={200: BookListResponseSerializer, 400: ErrorResponseSerializer},
    description="Case-insensitive search over book titles and authors.",
    tags=['search'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def search_books(request):
    """Search books by title or author."""
    try:
        page = search_books_service(
            query=request.query_params.get('query'),
            page=request.query_params.get('page'),
            limit=request.query_params.get('limit'),
        )
    except InvalidQueryError as e:
        return error_response(e, status.HTTP_400_BAD_REQUEST)

    return _page_response(BookPagination(), page)


def _non_negative_int(raw, *, default: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return min(max(value, 0), MAX_WINDOW_END)

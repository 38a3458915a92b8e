"""
Service layer tests for books app.

Tests all service functions for:
- Book Management (create, get)
- Listing, search and detail queries
- Rating aggregation
"""

from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4

import pytest
from django.db import DatabaseError
from django.http import QueryDict
from django.test import override_settings

from apps.books.models import Book
from apps.books.services import (
    create_book,
    get_book_by_id,
    list_books,
    search_books,
    get_book_detail,
    calculate_average_rating,
    update_book_rating,
    refresh_book_rating,
    get_top_rated_books,
    parse_object_id,
)
from apps.books.services.exceptions import (
    BookNotFoundError,
    InvalidBookError,
    InvalidQueryError,
    MalformedIdentifierError,
)


# ============================================================================
# BOOK MANAGEMENT TESTS
# ============================================================================

@pytest.mark.django_db
class TestBookManagement:

    def test_create_book(self, book_user):
        book = create_book(
            user=book_user,
            title='  Piranesi ',
            author='Susanna Clarke',
            description='A house of endless halls.',
            genre='Fantasy',
            publication_year=2020,
        )

        assert book.title == 'Piranesi'
        assert book.user == book_user
        assert book.average_rating == Decimal('0.0')

    @pytest.mark.parametrize('overrides,message', [
        ({'title': ''}, 'title'),
        ({'title': 'x' * 201}, '200'),
        ({'author': ' '}, 'author'),
        ({'description': ''}, 'description'),
        ({'genre': 'Cookbook'}, 'genre'),
    ])
    def test_create_book_invalid(self, book_user, overrides, message):
        values = {
            'title': 'Piranesi',
            'author': 'Susanna Clarke',
            'description': 'A house of endless halls.',
            'genre': 'Fantasy',
        }
        values.update(overrides)

        with pytest.raises(InvalidBookError, match=message):
            create_book(user=book_user, **values)

        assert not Book.objects.exists()

    def test_get_book_by_id(self, make_book):
        book = make_book()

        assert get_book_by_id(book_id=str(book.id)) == book

    def test_get_book_not_found(self):
        with pytest.raises(BookNotFoundError):
            get_book_by_id(book_id=uuid4())

    def test_get_book_malformed_id(self):
        with pytest.raises(MalformedIdentifierError, match="Invalid book id"):
            get_book_by_id(book_id='12345')


class TestParseObjectId:

    def test_uuid_passthrough(self):
        value = uuid4()
        assert parse_object_id(value) is value

    def test_string_parsed(self):
        value = uuid4()
        assert parse_object_id(str(value)) == value

    @pytest.mark.parametrize('raw', ['', 'abc', None, 42])
    def test_malformed(self, raw):
        with pytest.raises(MalformedIdentifierError):
            parse_object_id(raw, label='review')


# ============================================================================
# LISTING TESTS
# ============================================================================

@pytest.mark.django_db
class TestListBooks:

    def test_default_listing_newest_first(self, catalog):
        page = list_books(params=QueryDict(''))

        assert page.total == 3
        assert [book.title for book in page.books] == ['Gone Girl', 'The Name of the Wind', 'Dune']
        assert page.pagination == {}

    def test_filter_comparison(self, catalog):
        page = list_books(params=QueryDict('publication_year[gt]=2000'))

        assert {book.title for book in page.books} == {'The Name of the Wind', 'Gone Girl'}
        assert page.total == 2

    def test_filter_membership(self, catalog):
        page = list_books(params=QueryDict('genre[in]=Fantasy,Thriller'))

        assert page.total == 2

    def test_filters_are_combined(self, catalog):
        page = list_books(params=QueryDict('publication_year[gte]=2000&genre=Thriller'))

        assert [book.title for book in page.books] == ['Gone Girl']

    def test_sort(self, catalog):
        page = list_books(params=QueryDict('sort=publication_year'))

        assert [book.publication_year for book in page.books] == [1965, 2007, 2012]

    def test_select_projects_fields(self, catalog):
        page = list_books(params=QueryDict('select=title'))

        assert page.fields == ['id', 'title']
        assert all(book.get_deferred_fields() for book in page.books)

    def test_pagination_window(self, catalog):
        page = list_books(params=QueryDict('limit=2&page=2&sort=publication_year'))

        assert [book.title for book in page.books] == ['Gone Girl']
        assert page.total == 3
        assert page.pagination == {'prev': {'page': 1, 'limit': 2}}

    def test_total_counts_all_matches(self, catalog):
        page = list_books(params=QueryDict('limit=1'))

        assert len(page.books) == 1
        assert page.total == 3
        assert page.pagination == {'next': {'page': 2, 'limit': 1}}

    @override_settings(BOOKS_MAX_PAGE_LIMIT=2)
    def test_max_page_limit(self, catalog):
        page = list_books(params=QueryDict('limit=50'))

        assert page.window.limit == 2
        assert len(page.books) == 2

    def test_invalid_filter_raises(self, catalog):
        with pytest.raises(InvalidQueryError):
            list_books(params=QueryDict('title[regex]=.*'))


@pytest.mark.django_db
class TestSearchBooks:

    def test_matches_title_or_author(self, make_book):
        make_book(title='Great Expectations', author='Charles Dickens')
        make_book(title='Middlemarch', author='George Eliot')
        make_book(title='The Great Gatsby', author='F. Scott Fitzgerald')

        page = search_books(query='great')

        assert {book.title for book in page.books} == {'Great Expectations', 'The Great Gatsby'}

    def test_matches_author_case_insensitive(self, catalog):
        page = search_books(query='HERBERT')

        assert [book.title for book in page.books] == ['Dune']

    def test_term_is_literal(self, make_book):
        make_book(title='C++ Primer')
        make_book(title='Cc')

        page = search_books(query='c++')

        assert [book.title for book in page.books] == ['C++ Primer']

    def test_paginates(self, make_book):
        for index in range(3):
            make_book(title=f'Great Book {index}')

        page = search_books(query='great', page='2', limit='2')

        assert len(page.books) == 1
        assert page.pagination == {'prev': {'page': 1, 'limit': 2}}

    @pytest.mark.parametrize('query', [None, '', '   '])
    def test_blank_query_rejected(self, query, django_assert_num_queries):
        with django_assert_num_queries(0):
            with pytest.raises(InvalidQueryError, match="search query"):
                search_books(query=query)


@pytest.mark.django_db
class TestGetBookDetail:

    def test_detail_with_reviews(self, make_book, make_review):
        book = make_book()
        for rating in (3, 4, 5):
            make_review(book, rating=rating)

        detail = get_book_detail(book_id=book.id, limit='2')

        assert detail.book == book
        assert detail.review_count == 3
        assert len(detail.reviews) == 2
        assert detail.pagination == {'next': {'page': 2, 'limit': 2}}

    def test_reviews_newest_first(self, make_book, make_review):
        book = make_book()
        first = make_review(book)
        second = make_review(book)

        detail = get_book_detail(book_id=book.id)

        assert [review.id for review in detail.reviews] == [second.id, first.id]

    def test_detail_without_reviews(self, make_book):
        detail = get_book_detail(book_id=make_book().id)

        assert detail.reviews == []
        assert detail.review_count == 0
        assert detail.pagination == {}

    def test_detail_not_found(self):
        with pytest.raises(BookNotFoundError):
            get_book_detail(book_id=uuid4())


# ============================================================================
# RATING AGGREGATION TESTS
# ============================================================================

class TestCalculateAverageRating:

    @pytest.mark.parametrize('total,count,expected', [
        (None, 0, Decimal('0.0')),
        (0, 0, Decimal('0.0')),
        (9, 2, Decimal('4.5')),
        (11, 3, Decimal('3.7')),
        (10, 3, Decimal('3.3')),
        (33, 20, Decimal('1.7')),
        (49, 20, Decimal('2.5')),
        (5, 1, Decimal('5.0')),
    ])
    def test_rounding(self, total, count, expected):
        assert calculate_average_rating(total, count) == expected


@pytest.mark.django_db
class TestUpdateBookRating:

    def test_recomputes_from_reviews(self, make_book, make_review):
        book = make_book()
        make_review(book, rating=3)
        make_review(book, rating=4)
        make_review(book, rating=4)

        updated = update_book_rating(book_id=book.id)

        assert updated.average_rating == Decimal('3.7')
        book.refresh_from_db()
        assert book.average_rating == Decimal('3.7')

    def test_no_reviews_is_zero(self, make_book):
        book = make_book()
        Book.objects.filter(id=book.id).update(average_rating=Decimal('4.2'))

        assert update_book_rating(book_id=book.id).average_rating == Decimal('0.0')

    def test_recompute_is_idempotent(self, make_book, make_review):
        book = make_book()
        make_review(book, rating=5)
        make_review(book, rating=2)

        first = update_book_rating(book_id=book.id).average_rating
        second = update_book_rating(book_id=book.id).average_rating

        assert first == second == Decimal('3.5')

    def test_book_not_found(self):
        with pytest.raises(BookNotFoundError):
            update_book_rating(book_id=uuid4())


@pytest.mark.django_db
class TestRefreshBookRating:

    def test_returns_updated_book(self, make_book, make_review):
        book = make_book()
        make_review(book, rating=2)

        assert refresh_book_rating(book_id=book.id).average_rating == Decimal('2.0')

    def test_missing_book_logged_not_raised(self, caplog):
        missing = uuid4()

        assert refresh_book_rating(book_id=missing) is None
        assert str(missing) in caplog.text

    def test_database_error_logged_not_raised(self, make_book, caplog):
        book = make_book()

        with patch(
            'apps.books.services.rating_aggregation.update_book_rating',
            side_effect=DatabaseError("deadlock"),
        ):
            assert refresh_book_rating(book_id=book.id) is None

        assert "Failed to refresh average rating" in caplog.text


@pytest.mark.django_db
class TestTopRatedBooks:

    def test_ordered_by_average(self, make_book, make_review):
        low = make_book(title='Low')
        high = make_book(title='High')
        unrated = make_book(title='Unrated')
        make_review(low, rating=2)
        make_review(high, rating=5)
        for book in (low, high, unrated):
            update_book_rating(book_id=book.id)

        books = list(get_top_rated_books())

        assert [book.title for book in books] == ['High', 'Low']
        assert books[0].review_total == 1

    def test_min_reviews_and_limit(self, make_book, make_review):
        popular = make_book(title='Popular')
        niche = make_book(title='Niche')
        make_review(popular, rating=4)
        make_review(popular, rating=4)
        make_review(niche, rating=5)

        assert [book.title for book in get_top_rated_books(min_reviews=2)] == ['Popular']
        assert len(get_top_rated_books(limit=1)) == 1

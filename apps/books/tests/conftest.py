from datetime import timedelta
from itertools import count

import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.books.models import Book
from apps.reviews.models import Review


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def book_user(db):
    """Create and return the user who adds books."""
    return User.objects.create_user(
        email='librarian@example.com',
        password='TestPass123!',
        name='Librarian',
    )


@pytest.fixture
def book_auth_client(api_client, book_user):
    """Return API client authenticated as book user."""
    refresh = RefreshToken.for_user(book_user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def clock():
    """Strictly increasing timestamps, one minute apart."""
    start = timezone.now() - timedelta(days=1)
    ticks = count()
    return lambda: start + timedelta(minutes=next(ticks))


def _stamp(instance, created_at):
    # auto_now_add ignores values passed to create()
    type(instance).objects.filter(pk=instance.pk).update(created_at=created_at)
    instance.refresh_from_db()
    return instance


@pytest.fixture
def make_book(db, book_user, clock):
    """Factory creating books; each is newer than the previous one."""
    def _make_book(**overrides):
        values = {
            'title': 'Untitled',
            'author': 'Anonymous',
            'description': 'A book.',
            'genre': 'Other',
            'publication_year': 2000,
            'user': book_user,
        }
        values.update(overrides)
        return _stamp(Book.objects.create(**values), clock())
    return _make_book


@pytest.fixture
def catalog(make_book):
    """Three books with distinct genres, years and authors, oldest first."""
    return [
        make_book(title='Dune', author='Frank Herbert', genre='Science Fiction', publication_year=1965),
        make_book(title='The Name of the Wind', author='Patrick Rothfuss', genre='Fantasy', publication_year=2007),
        make_book(title='Gone Girl', author='Gillian Flynn', genre='Thriller', publication_year=2012),
    ]


@pytest.fixture
def make_review(db, clock):
    """Factory creating reviews by fresh users; each is newer than the previous one."""
    serial = count(1)

    def _make_review(book, rating=4, **overrides):
        n = next(serial)
        user = overrides.pop('user', None) or User.objects.create_user(
            email=f'reader{n}@example.com',
            password='TestPass123!',
            name=f'Reader {n}',
        )
        values = {
            'title': f'Review {n}',
            'text': 'Worth reading.',
            'rating': rating,
        }
        values.update(overrides)
        return _stamp(Review.objects.create(book=book, user=user, **values), clock())
    return _make_review

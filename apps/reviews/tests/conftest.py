import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.books.models import Book
from apps.reviews.models import Review


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def review_user(db):
    """Create and return a test user for reviews."""
    return User.objects.create_user(
        email='reviewer@example.com',
        password='TestPass123!',
        name='Book Reviewer',
    )


@pytest.fixture
def review_other_user(db):
    """Create and return another test user for reviews."""
    return User.objects.create_user(
        email='review_other@example.com',
        password='TestPass123!',
        name='Review Other User',
    )


@pytest.fixture
def review_auth_client(review_user):
    """Return API client authenticated as review user."""
    return _client_for(review_user)


@pytest.fixture
def review_other_client(review_other_user):
    """Return API client authenticated as other user."""
    return _client_for(review_other_user)


@pytest.fixture
def review_book(db, review_user):
    """Create and return a book to review."""
    return Book.objects.create(
        title='The Left Hand of Darkness',
        author='Ursula K. Le Guin',
        description='An envoy visits the planet Gethen.',
        genre='Science Fiction',
        publication_year=1969,
        user=review_user,
    )


@pytest.fixture
def review_another_book(db, review_user):
    """Create and return another book."""
    return Book.objects.create(
        title='Rebecca',
        author='Daphne du Maurier',
        description='A new wife haunted by the first.',
        genre='Mystery',
        publication_year=1938,
        user=review_user,
    )


@pytest.fixture
def review(db, review_user, review_book):
    """Create and return a test review."""
    return Review.objects.create(
        book=review_book,
        user=review_user,
        title='A classic',
        text='Great ideas, patient storytelling.',
        rating=4,
    )


@pytest.fixture
def other_review(db, review_other_user, review_book):
    """Create a review by another user."""
    return Review.objects.create(
        book=review_book,
        user=review_other_user,
        title='Slow',
        text='Took a while to get going.',
        rating=3,
    )

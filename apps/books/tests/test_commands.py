from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from apps.accounts.models import User
from apps.books.models import Book
from apps.reviews.models import Review


@pytest.mark.django_db
class TestCreateSampleData:

    def test_creates_books_reviews_and_ratings(self):
        out = StringIO()
        call_command('create_sample_data', stdout=out)

        assert 'Sample data created successfully!' in out.getvalue()
        assert Book.objects.count() == 8
        assert Review.objects.count() == 10
        assert User.objects.get(email='admin@example.com').is_superuser

        # 5, 4, 4
        assert Book.objects.get(title='Dune').average_rating == Decimal('4.3')
        assert Book.objects.get(title='Atomic Habits').average_rating == Decimal('0.0')

    def test_rerun_is_idempotent(self):
        call_command('create_sample_data', stdout=StringIO())
        call_command('create_sample_data', stdout=StringIO())

        assert Book.objects.count() == 8
        assert Review.objects.count() == 10

    def test_clear_replaces_data(self):
        call_command('create_sample_data', stdout=StringIO())
        Review.objects.filter(book__title='Dune').delete()

        call_command('create_sample_data', '--clear', stdout=StringIO())

        assert Review.objects.filter(book__title='Dune').count() == 3

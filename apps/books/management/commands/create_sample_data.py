"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- 4 users (admin, alice, bob, charlie)
- 8 books across several genres
- Reviews, with each book's average rating recomputed
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.accounts.models import User
from apps.books.models import Book, Genre
from apps.books.services import create_book
from apps.reviews.models import Review
from apps.reviews.services import create_review


SAMPLE_BOOKS = [
    ('Dune', 'Frank Herbert', Genre.SCIENCE_FICTION, 1965,
     'A desert planet, a spice and the boy who would rule it.'),
    ('The Left Hand of Darkness', 'Ursula K. Le Guin', Genre.SCIENCE_FICTION, 1969,
     'An envoy on a world whose people have no fixed sex.'),
    ('The Name of the Wind', 'Patrick Rothfuss', Genre.FANTASY, 2007,
     'A legendary wizard tells the story of his youth.'),
    ('Gone Girl', 'Gillian Flynn', Genre.THRILLER, 2012,
     'A wife vanishes on her fifth wedding anniversary.'),
    ('Rebecca', 'Daphne du Maurier', Genre.MYSTERY, 1938,
     'A new bride lives in the shadow of the first Mrs de Winter.'),
    ('Sapiens', 'Yuval Noah Harari', Genre.HISTORY, 2011,
     'A brief history of humankind.'),
    ('Pride and Prejudice', 'Jane Austen', Genre.ROMANCE, 1813,
     'Elizabeth Bennet and the proud Mr Darcy.'),
    ('Atomic Habits', 'James Clear', Genre.SELF_HELP, 2018,
     'Small changes and the systems behind them.'),
]

# (reviewer, book title, rating, review title)
SAMPLE_REVIEWS = [
    ('alice', 'Dune', 5, 'A world like no other'),
    ('bob', 'Dune', 4, 'Dense but rewarding'),
    ('charlie', 'Dune', 4, 'Slow start'),
    ('alice', 'The Name of the Wind', 5, 'Beautiful prose'),
    ('bob', 'The Name of the Wind', 3, 'Waiting for book three'),
    ('charlie', 'Gone Girl', 4, 'Unreliable in the best way'),
    ('alice', 'Rebecca', 4, 'Atmospheric'),
    ('bob', 'Sapiens', 3, 'Big ideas, loose facts'),
    ('charlie', 'Sapiens', 4, 'Great conversation starter'),
    ('alice', 'Pride and Prejudice', 5, 'Still sharp'),
]


class Command(BaseCommand):
    help = 'Create sample books and reviews for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        books = self.create_books(users['admin'])
        self.create_reviews(users, books)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        self.stdout.write('  alice@example.com / password123')
        self.stdout.write('  bob@example.com / password123')
        self.stdout.write('  charlie@example.com / password123')

    def clear_data(self):
        """Clear all data from the database."""
        Review.objects.all().delete()
        Book.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create test users."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'name': 'Admin User',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        users = {'admin': admin}
        for key, name in (('alice', 'Alice Reader'), ('bob', 'Bob Bookworm'), ('charlie', 'Charlie Critic')):
            user, _ = User.objects.get_or_create(
                email=f'{key}@example.com',
                defaults={'name': name}
            )
            user.set_password('password123')
            user.save()
            users[key] = user

        return users

    def create_books(self, owner):
        """Create sample books, skipping titles that already exist."""
        self.stdout.write('  Creating books...')

        books = {}
        for title, author, genre, year, description in SAMPLE_BOOKS:
            book = Book.objects.filter(title=title, author=author).first()
            if book is None:
                book = create_book(
                    user=owner,
                    title=title,
                    author=author,
                    description=description,
                    genre=genre,
                    publication_year=year,
                )
            books[title] = book

        return books

    def create_reviews(self, users, books):
        """Create reviews through the service layer so ratings are aggregated."""
        self.stdout.write('  Creating reviews...')

        for reviewer, book_title, rating, title in SAMPLE_REVIEWS:
            user = users[reviewer]
            book = books[book_title]
            if Review.objects.filter(user=user, book=book).exists():
                continue
            create_review(
                user=user,
                book_id=book.id,
                title=title,
                text=f'{title}. {users[reviewer].name} gives it {rating} out of 5.',
                rating=rating,
            )

# ==========================================
# apps/books/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid


class Genre(models.TextChoices):
    FICTION = 'Fiction', 'Fiction'
    NON_FICTION = 'Non-fiction', 'Non-fiction'
    FANTASY = 'Fantasy', 'Fantasy'
    SCIENCE_FICTION = 'Science Fiction', 'Science Fiction'
    MYSTERY = 'Mystery', 'Mystery'
    THRILLER = 'Thriller', 'Thriller'
    ROMANCE = 'Romance', 'Romance'
    BIOGRAPHY = 'Biography', 'Biography'
    HISTORY = 'History', 'History'
    SELF_HELP = 'Self-help', 'Self-help'
    OTHER = 'Other', 'Other'


class Book(models.Model):
    """Catalog entry. Reviews point at it through ``reviews``."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    author = models.CharField(max_length=200)
    description = models.TextField()
    genre = models.CharField(max_length=50, choices=Genre.choices)
    publication_year = models.IntegerField(null=True, blank=True)
    # Derived from reviews; written only by rating_aggregation
    average_rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=Decimal('0.0'),
        editable=False,
        validators=[MinValueValidator(Decimal('0.0')), MaxValueValidator(Decimal('5.0'))],
    )
    created_at = models.DateTimeField(auto_now_add=True)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='books')

    class Meta:
        db_table = 'books'
        indexes = [
            models.Index(fields=['title'], name='books_title_idx'),
            models.Index(fields=['author'], name='books_author_idx'),
            models.Index(fields=['genre'], name='books_genre_idx'),
            models.Index(fields=['publication_year'], name='books_pub_year_idx'),
            models.Index(fields=['average_rating'], name='books_avg_rating_idx'),
            models.Index(fields=['created_at'], name='books_created_at_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} ({self.author})"

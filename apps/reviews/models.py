# ==========================================
# apps/reviews/models.py
# ==========================================

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
import uuid


class Review(models.Model):
    """A user's review of a book; one per user per book."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    book = models.ForeignKey('books.Book', on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='reviews')
    title = models.CharField(max_length=100)
    text = models.TextField()
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'reviews'
        unique_together = [['book', 'user']]
        indexes = [
            models.Index(fields=['book', 'created_at'], name='reviews_book_created_idx'),
            models.Index(fields=['user', 'created_at'], name='reviews_user_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.get_display_name()} - {self.book.title} ({self.rating}★)"

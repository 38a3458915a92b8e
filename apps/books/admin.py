from django.contrib import admin
from django.db.models import Count
from .models import Book


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    """Admin interface for Books."""

    list_display = ['title', 'author', 'genre', 'publication_year', 'average_rating', 'review_total', 'created_at']
    list_filter = ['genre', 'created_at']
    search_fields = ['title', 'author', 'user__email']
    readonly_fields = ['average_rating', 'created_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    def review_total(self, obj):
        """Show how many reviews the book has."""
        return obj.review_total
    review_total.short_description = 'Reviews'
    review_total.admin_order_field = 'review_total'

    def get_queryset(self, request):
        """Optimize query with annotation."""
        qs = super().get_queryset(request)
        return qs.annotate(review_total=Count('reviews'))

from django.contrib import admin
from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    """Admin interface for Reviews."""

    list_display = [
        'title',
        'book',
        'user',
        'rating',
        'created_at'
    ]
    list_filter = [
        'rating',
        'created_at',
    ]
    search_fields = [
        'title',
        'book__title',
        'book__author',
        'user__email',
    ]
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    list_select_related = ['book', 'user']

    fieldsets = (
        ('Basic Information', {
            'fields': ('book', 'user', 'rating')
        }),
        ('Review', {
            'fields': ('title', 'text')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

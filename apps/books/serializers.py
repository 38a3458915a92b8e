from rest_framework import serializers
from .models import Book, Genre
from apps.reviews.models import Review


class BookSerializer(serializers.ModelSerializer):
    """
    Main book serializer.

    Accepts an optional ``fields`` argument restricting the output to a
    subset of fields (used by the ``select`` query parameter).
    """

    def __init__(self, *args, fields=None, **kwargs):
        super().__init__(*args, **kwargs)
        if fields:
            for name in set(self.fields) - set(fields):
                self.fields.pop(name)

    class Meta:
        model = Book
        fields = [
            'id',
            'title',
            'author',
            'description',
            'genre',
            'publication_year',
            'average_rating',
            'created_at',
            'user',
        ]
        read_only_fields = ['id', 'average_rating', 'created_at', 'user']


class BookCreateSerializer(serializers.ModelSerializer):
    """Serializer for book creation."""

    genre = serializers.ChoiceField(
        choices=Genre.choices,
        error_messages={'invalid_choice': '"{input}" is not a valid genre.'},
    )

    class Meta:
        model = Book
        fields = [
            'title',
            'author',
            'description',
            'genre',
            'publication_year',
        ]
        extra_kwargs = {
            'title': {'error_messages': {
                'required': 'Please provide a book title',
                'max_length': 'Title cannot be more than 200 characters',
            }},
            'author': {'error_messages': {'required': 'Please provide an author name'}},
            'description': {'error_messages': {'required': 'Please provide a book description'}},
        }


class BookReviewSerializer(serializers.ModelSerializer):
    """Review as listed on a book's detail page."""

    user_name = serializers.CharField(source='user.get_display_name', read_only=True)

    class Meta:
        model = Review
        fields = ['id', 'title', 'text', 'rating', 'user', 'user_name', 'created_at']
        read_only_fields = fields


class TopRatedBookSerializer(BookSerializer):
    """Book with the number of reviews behind its rating."""

    review_total = serializers.IntegerField(read_only=True)

    class Meta(BookSerializer.Meta):
        fields = BookSerializer.Meta.fields + ['review_total']

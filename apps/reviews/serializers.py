from rest_framework import serializers
from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    """Main review serializer."""

    user_name = serializers.CharField(source='user.get_display_name', read_only=True)

    class Meta:
        model = Review
        fields = [
            'id',
            'title',
            'text',
            'rating',
            'book',
            'user',
            'user_name',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ReviewWriteSerializer(serializers.ModelSerializer):
    """
    Serializer for review creation and updates.

    Book and author come from the URL and the request user, never from
    the payload. Updates use ``partial=True`` so omitted fields keep
    their current value.
    """

    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            'required': 'Please provide a rating between 1 and 5',
            'invalid': 'Please provide a rating between 1 and 5',
            'min_value': 'Rating must be between 1 and 5',
            'max_value': 'Rating must be between 1 and 5',
        },
    )

    class Meta:
        model = Review
        fields = ['title', 'text', 'rating']
        extra_kwargs = {
            'title': {'error_messages': {
                'required': 'Please provide a review title',
                'blank': 'Please provide a review title',
                'max_length': 'Title cannot be more than 100 characters',
            }},
            'text': {'error_messages': {
                'required': 'Please provide review text',
                'blank': 'Please provide review text',
            }},
        }

import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from config.exceptions import flatten_error_detail


class TestFlattenErrorDetail:

    def test_detail_only(self):
        assert flatten_error_detail({'detail': 'Not found.'}) == 'Not found.'

    def test_field_errors(self):
        message = flatten_error_detail({
            'title': ['Please provide a book title'],
            'genre': ['"x" is not a valid genre.'],
        })

        assert message == 'title: Please provide a book title; genre: "x" is not a valid genre.'

    def test_non_field_errors(self):
        assert flatten_error_detail({'non_field_errors': ['Bad pair']}) == 'Bad pair'

    def test_scalar(self):
        assert flatten_error_detail('boom') == 'boom'


@pytest.mark.django_db
class TestEnvelope:

    def test_health_check(self):
        response = APIClient().get(reverse('health-check'))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {'success': True, 'status': 'ok'}

    def test_unknown_route(self):
        response = APIClient().get('/api/does-not-exist/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {'success': False, 'message': 'Not found'}

    def test_method_not_allowed(self):
        response = APIClient().delete(reverse('books:book-search'))

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.data['success'] is False
        assert 'DELETE' in response.data['message']

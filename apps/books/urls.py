from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'books'

router = DefaultRouter()
router.register(r'books', views.BookViewSet, basename='book')

urlpatterns = [
    # Book ViewSet routes
    # GET    /api/books/              - List books (filters, sort, select, page, limit)
    # POST   /api/books/              - Create book
    # GET    /api/books/{id}/         - Book with paginated reviews
    # GET    /api/books/top_rated/    - Books ordered by average rating

    # Search
    # GET    /api/search/?query=      - Title/author search
    path('search/', views.search_books, name='book-search'),

    # Include router URLs
    path('', include(router.urls)),
]

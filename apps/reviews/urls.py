from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'reviews'

router = SimpleRouter()
router.register(r'reviews', views.ReviewViewSet, basename='review')

urlpatterns = [
    # Review ViewSet routes
    # GET    /api/reviews/{id}/     - Get review
    # PUT    /api/reviews/{id}/     - Update review (author only)
    # PATCH  /api/reviews/{id}/     - Update review (author only)
    # DELETE /api/reviews/{id}/     - Delete review (author only)

    # Reviews of a book
    # POST   /api/books/{id}/reviews/  - Add review
    path('books/<str:book_id>/reviews/', views.create_book_review, name='book-review-create'),

    # Include router URLs
    path('', include(router.urls)),
]

# products/urls.py

"""
PRODUCTS URLS

- /api/products/            CRUD (read public, write owner)
- upload_urlpatterns        mounted under /api/ and at the site root
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from products.views import ProductViewSet, UploadOnlyView, UploadProductView

router = SimpleRouter()
router.register(r"", ProductViewSet, basename="product")

urlpatterns = [
    path("", include(router.urls)),
]

upload_urlpatterns = [
    path("upload-product", UploadProductView.as_view()),
    path("upload-only", UploadOnlyView.as_view()),
]

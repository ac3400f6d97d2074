# products/views/__init__.py

from .product import ProductViewSet
from .upload import UploadOnlyView, UploadProductView

__all__ = [
    "ProductViewSet",
    "UploadOnlyView",
    "UploadProductView",
]

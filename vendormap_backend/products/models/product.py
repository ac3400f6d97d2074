# products/models/product.py

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models

from vendors.models import Vendor


class Product(models.Model):
    """
    Something a vendor sells from the cart.

    - price is optional (vendors may list items without a fixed price)
    - image_url points at an uploaded file (MEDIA_URL) or any external URL
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    vendor = models.ForeignKey(
        Vendor,
        on_delete=models.CASCADE,
        related_name="products",
    )

    name = models.CharField(max_length=255, db_index=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    image_url = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def clean(self):
        if self.price is not None and self.price < Decimal("0"):
            raise ValidationError({"price": "Price must be non-negative"})

    def __str__(self):
        return f"{self.name} ({self.vendor_id})"

# products/services/uploads.py

"""
PRODUCT IMAGE UPLOADS

Storage layout (default_storage, i.e. MEDIA_ROOT locally):
    vendors/<vendor_id>/products/<epoch_ms>-<original_name_with_underscores>

- store_product_image: size check + save -> (path, url)
- create_product_from_upload: optional image + Product row; the stored image
  is deleted again when the row cannot be created
"""

from __future__ import annotations

import logging
import os
import re
import time
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import transaction

from products.models import Product
from products.services.exceptions import (
    FileRequired,
    FileTooLarge,
    InvalidPrice,
    MissingProductName,
    NotAVendor,
    StorageFailure,
)

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")

_PRICE_FIELD = Product._meta.get_field("price")
_CENTS = Decimal(1).scaleb(-_PRICE_FIELD.decimal_places)
_PRICE_CEILING = Decimal(10) ** (_PRICE_FIELD.max_digits - _PRICE_FIELD.decimal_places)


def vendor_for_user(user):
    vendor = getattr(user, "vendor_profile", None)
    if vendor is None:
        raise NotAVendor()
    return vendor


def build_upload_path(vendor_id, original_name: str, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    filename = _WHITESPACE.sub("_", os.path.basename(original_name or "upload"))
    return f"vendors/{vendor_id}/products/{now_ms}-{filename}"


def parse_price(raw) -> Decimal | None:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        price = Decimal(str(raw).strip())
        if not price.is_finite() or price < 0:
            raise InvalidPrice()
        price = price.quantize(_CENTS)
    except InvalidOperation as exc:
        raise InvalidPrice() from exc
    # Checked after rounding: 9999999999.999 rounds up to the ceiling.
    if price >= _PRICE_CEILING:
        raise InvalidPrice()
    return price


def store_product_image(*, vendor, upload) -> tuple[str, str]:
    if upload is None:
        raise FileRequired()

    if upload.size > settings.MAX_UPLOAD_BYTES:
        raise FileTooLarge()

    path = build_upload_path(vendor.id, upload.name)
    try:
        saved = default_storage.save(path, upload)
    except OSError as exc:
        logger.exception("Image storage failed", extra={"vendor_id": str(vendor.id)})
        raise StorageFailure() from exc

    logger.info("Product image stored", extra={"vendor_id": str(vendor.id), "path": saved})
    return saved, default_storage.url(saved)


def discard_product_image(*, vendor, path: str) -> None:
    try:
        default_storage.delete(path)
    except OSError:
        logger.exception(
            "Orphaned product image could not be removed",
            extra={"vendor_id": str(vendor.id), "path": path},
        )
        return
    logger.info("Product image discarded", extra={"vendor_id": str(vendor.id), "path": path})


def create_product_from_upload(*, vendor, name, price=None, description="", upload=None):
    name = (name or "").strip()
    if not name:
        raise MissingProductName()

    parsed_price = parse_price(price)

    path, image_url = None, ""
    if upload is not None:
        path, image_url = store_product_image(vendor=vendor, upload=upload)

    try:
        with transaction.atomic():
            product = Product.objects.create(
                vendor=vendor,
                name=name,
                description=(description or "").strip(),
                price=parsed_price,
                image_url=image_url,
            )
    except Exception:
        # No row points at the stored image.
        if path:
            discard_product_image(vendor=vendor, path=path)
        raise

    logger.info(
        "Product created from upload",
        extra={"vendor_id": str(vendor.id), "product_id": str(product.id)},
    )
    return product, image_url or None

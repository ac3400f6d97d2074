# products/tests/test_uploads.py

from __future__ import annotations

import re
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from permissions.roles import ROLE_VENDOR
from products.models import Product
from products.services.exceptions import InvalidPrice
from products.services.uploads import (
    build_upload_path,
    create_product_from_upload,
    parse_price,
)
from vendors.models import Vendor

User = get_user_model()


def bearer(user) -> str:
    return f"Bearer {RefreshToken.for_user(user).access_token}"


def image(name="photo one.png", size=100):
    return SimpleUploadedFile(name, b"\x89PNG" + b"0" * (size - 4), content_type="image/png")


class UploadPathTests(SimpleTestCase):
    def test_spaces_become_underscores(self):
        path = build_upload_path("abc", "my  nice photo.png", now_ms=1700000000000)

        self.assertEqual(path, "vendors/abc/products/1700000000000-my_nice_photo.png")

    def test_directory_parts_are_dropped(self):
        path = build_upload_path("abc", "../../etc/passwd", now_ms=1)

        self.assertEqual(path, "vendors/abc/products/1-passwd")

    def test_parse_price(self):
        self.assertIsNone(parse_price(None))
        self.assertIsNone(parse_price(""))
        self.assertEqual(parse_price("15000"), Decimal("15000.00"))
        with self.assertRaises(InvalidPrice):
            parse_price("abc")
        with self.assertRaises(InvalidPrice):
            parse_price("-5")

    def test_parse_price_rejects_values_the_column_cannot_hold(self):
        self.assertEqual(parse_price("9999999999.99"), Decimal("9999999999.99"))
        for raw in ("1e100", "1e20", "10000000000", "9999999999.999", "NaN", "Infinity"):
            with self.subTest(raw=raw), self.assertRaises(InvalidPrice):
                parse_price(raw)


class UploadProductTests(TestCase):
    """
    POST /api/upload-product and /api/upload-only (multipart)

    Size limit comes from settings.MAX_UPLOAD_BYTES (1 KiB in tests).
    """

    def setUp(self):
        self.client = APIClient()
        self.owner = User.objects.create_user(
            email="owner@example.com", password="Pass1234!", role=ROLE_VENDOR
        )
        self.customer = User.objects.create_user(email="c@example.com", password="Pass1234!")
        self.vendor = Vendor.objects.create(user=self.owner, name="Bakso")

    def _upload(self, url, data, user=None):
        headers = {"HTTP_AUTHORIZATION": bearer(user)} if user else {}
        return self.client.post(url, data, format="multipart", **headers)

    def test_product_with_image(self):
        res = self._upload(
            "/api/upload-product",
            {"name": "Bakso urat", "price": "15000", "file": image()},
            self.owner,
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIs(res.data["success"], True)
        self.assertEqual(res.data["product"]["name"], "Bakso urat")
        self.assertEqual(res.data["product"]["price"], "15000.00")
        self.assertRegex(
            res.data["imageUrl"],
            re.escape(f"vendors/{self.vendor.id}/products/") + r"\d+-photo_one",
        )
        product = Product.objects.get()
        self.assertEqual(product.vendor, self.vendor)
        self.assertEqual(product.image_url, res.data["imageUrl"])

    def test_product_without_image(self):
        res = self._upload("/upload-product", {"name": "Es teh"}, self.owner)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIsNone(res.data["imageUrl"])
        self.assertIsNone(res.data["product"]["price"])

    def test_missing_name(self):
        res = self._upload("/api/upload-product", {"price": "1"}, self.owner)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data, {"error": "Missing product name"})

    def test_file_too_large(self):
        res = self._upload(
            "/api/upload-product", {"name": "Big", "file": image(size=4096)}, self.owner
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data, {"error": "File too large"})
        self.assertFalse(Product.objects.exists())

    def test_missing_token(self):
        res = self._upload("/api/upload-product", {"name": "X"})

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data, {"error": "Missing authorization token"})

    def test_customer_is_refused(self):
        res = self._upload("/api/upload-product", {"name": "X"}, self.customer)

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_upload_only(self):
        res = self._upload("/upload-only", {"file": image("menu.png")}, self.owner)

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["path"].startswith(f"vendors/{self.vendor.id}/products/"))
        self.assertTrue(res.data["path"].endswith("-menu.png"))
        self.assertIn(res.data["path"], res.data["imageUrl"])
        self.assertFalse(Product.objects.exists())

    def test_upload_only_requires_file(self):
        res = self._upload("/api/upload-only", {}, self.owner)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data, {"error": "file required"})

    def test_oversized_price_is_rejected(self):
        res = self._upload("/api/upload-product", {"name": "Gold", "price": "1e100"}, self.owner)

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data, {"error": "Invalid price"})
        self.assertFalse(Product.objects.exists())


class UploadCleanupTests(TestCase):
    def setUp(self):
        owner = User.objects.create_user(
            email="owner@example.com", password="Pass1234!", role=ROLE_VENDOR
        )
        self.vendor = Vendor.objects.create(user=owner, name="Bakso")

    def _stored_files(self):
        directory = f"vendors/{self.vendor.id}/products"
        if not default_storage.exists(directory):
            return []
        return default_storage.listdir(directory)[1]

    def test_image_is_removed_when_product_row_fails(self):
        with mock.patch.object(
            Product.objects, "create", side_effect=DatabaseError("insert failed")
        ):
            with self.assertRaises(DatabaseError), self.assertLogs(
                "products.services.uploads", level="INFO"
            ) as logs:
                create_product_from_upload(vendor=self.vendor, name="Bakso", upload=image())

        self.assertEqual(self._stored_files(), [])
        self.assertFalse(Product.objects.exists())
        self.assertTrue(any("discarded" in line for line in logs.output))

    def test_image_is_kept_with_its_product(self):
        product, url = create_product_from_upload(vendor=self.vendor, name="Bakso", upload=image())

        self.assertEqual(len(self._stored_files()), 1)
        self.assertEqual(product.image_url, url)

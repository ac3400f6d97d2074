# users/tests/test_auth.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APIClient

from permissions.roles import ROLE_CUSTOMER, ROLE_VENDOR
from vendors.models import Vendor

User = get_user_model()


class RegisterTests(TestCase):
    """
    POST /api/auth/register/

    GUARANTEES:
    - customer is the default role
    - vendor role also creates the vendor (presence) record
    - emails are unique case-insensitively
    """

    def setUp(self):
        self.client = APIClient()

    def test_register_customer(self):
        res = self.client.post(
            "/api/auth/register/",
            {"email": "ani@example.com", "password": "Str0ng-pass!"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["user"]["role"], ROLE_CUSTOMER)
        self.assertIsNone(res.data["user"]["vendor_id"])
        self.assertFalse(Vendor.objects.exists())

    def test_register_vendor_creates_offline_vendor(self):
        res = self.client.post(
            "/api/auth/register/",
            {
                "email": "budi@example.com",
                "password": "Str0ng-pass!",
                "full_name": "Bakso Budi",
                "role": ROLE_VENDOR,
            },
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        vendor = Vendor.objects.get(user__email="budi@example.com")
        self.assertEqual(vendor.name, "Bakso Budi")
        self.assertFalse(vendor.online)
        self.assertEqual(res.data["user"]["vendor_id"], str(vendor.id))

    def test_vendor_name_fallback(self):
        self.client.post(
            "/api/auth/register/",
            {"email": "v@example.com", "password": "Str0ng-pass!", "role": ROLE_VENDOR},
            format="json",
        )

        self.assertEqual(Vendor.objects.get().name, "Vendor")

    def test_admin_role_is_not_self_service(self):
        res = self.client.post(
            "/api/auth/register/",
            {"email": "x@example.com", "password": "Str0ng-pass!", "role": "admin"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_email(self):
        User.objects.create_user(email="Dup@example.com", password="Str0ng-pass!")

        res = self.client.post(
            "/api/auth/register/",
            {"email": "dup@example.com", "password": "Str0ng-pass!"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", res.data)


class LoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="budi@example.com", password="Str0ng-pass!", role=ROLE_VENDOR
        )

    def test_login_returns_jwt_pair(self):
        res = self.client.post(
            "/api/auth/login/",
            {"email": "budi@example.com", "password": "Str0ng-pass!"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("access", res.data)
        self.assertIn("refresh", res.data)
        self.assertEqual(res.data["user"]["email"], "budi@example.com")

    def test_login_email_is_case_insensitive(self):
        res = self.client.post(
            "/api/auth/login/",
            {"email": "BUDI@example.com", "password": "Str0ng-pass!"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)

    def test_wrong_password(self):
        res = self.client.post(
            "/api/auth/login/",
            {"email": "budi@example.com", "password": "nope"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(res.data["detail"], "Invalid email or password")

    def test_access_token_works_on_me(self):
        login = self.client.post(
            "/api/auth/login/",
            {"email": "budi@example.com", "password": "Str0ng-pass!"},
            format="json",
        )

        res = self.client.get(
            "/api/auth/me/", HTTP_AUTHORIZATION=f"Bearer {login.data['access']}"
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["user"]["id"], str(self.user.id))

    def test_refresh(self):
        login = self.client.post(
            "/api/auth/login/",
            {"email": "budi@example.com", "password": "Str0ng-pass!"},
            format="json",
        )

        res = self.client.post(
            "/api/auth/jwt/refresh/", {"refresh": login.data["refresh"]}, format="json"
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertIn("access", res.data)


class MeTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(email="ani@example.com", password="Str0ng-pass!")

    def test_requires_auth(self):
        res = self.client.get("/api/auth/me/")

        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_patch_profile(self):
        self.client.force_authenticate(self.user)

        res = self.client.patch(
            "/api/auth/me/",
            {"full_name": "Ani", "avatar_url": "https://example.com/ani.png", "role": "admin"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(self.user.full_name, "Ani")
        self.assertEqual(self.user.role, ROLE_CUSTOMER)

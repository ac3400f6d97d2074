# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import SAFE_METHODS, BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
# A user is either a traveling vendor (broadcasts presence, sells)
# or a customer (browses the map, chats, orders).
ROLE_ADMIN = "admin"
ROLE_VENDOR = "vendor"
ROLE_CUSTOMER = "customer"

ROLE_CHOICES = [
    (ROLE_ADMIN, "Admin"),
    (ROLE_VENDOR, "Vendor"),
    (ROLE_CUSTOMER, "Customer"),
]

SELF_SERVICE_ROLES = {ROLE_VENDOR, ROLE_CUSTOMER}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def owner_id_of(obj) -> Optional[str]:
    """
    Resolve the owning principal id of a vendor-scoped object.

    Supported shapes:
    - Vendor (user_id)
    - anything with .vendor (Product, Order) -> vendor.user_id
    """
    if hasattr(obj, "vendor"):
        obj = obj.vendor
    owner = getattr(obj, "user_id", None)
    return str(owner) if owner else None


def is_owner(user, obj) -> bool:
    if not user or not user.is_authenticated:
        return False
    owner = owner_id_of(obj)
    return bool(owner) and owner == str(user.pk)


# =========================================================
# Base Role Permission (Internal Use)
# =========================================================
class BaseRolePermission(BasePermission):
    """
    Base permission for role-based access control.

    Subclasses must define:
    - allowed_roles (set)
    """

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user

        if not user or not user.is_authenticated:
            return False

        user_role = get_user_role(user)
        if not user_role:
            return False

        return user_role in self.allowed_roles


class IsVendor(BaseRolePermission):
    allowed_roles = {ROLE_VENDOR}


# =========================================================
# Ownership
# =========================================================
class IsVendorOwnerOrReadOnly(BasePermission):
    """
    Object-level rule for vendor-scoped resources.

    POLICY:
    - Anyone may read (the map and vendor pages are public)
    - Only the owning principal of the vendor may write
    """

    message = "Not allowed: you are not owner of this vendor"

    def has_object_permission(self, request, view, obj):
        if request.method in SAFE_METHODS:
            return True
        return is_owner(request.user, obj)

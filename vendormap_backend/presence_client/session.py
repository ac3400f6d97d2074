"""Explicit session passed to every client component (no ambient auth state)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ClientSession:
    """
    Who is calling and where.

    principal_id is the authenticated user's id; a vendor view is "owned"
    when its user_id equals it. access_token is sent as a bearer credential.
    """

    base_url: str
    access_token: str = ""
    principal_id: Optional[str] = None
    timeout: float = 10.0

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token and self.principal_id)

    def url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def auth_headers(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def owns(self, vendor_user_id: Optional[str]) -> bool:
        if not self.is_authenticated or not vendor_user_id:
            return False
        return str(vendor_user_id) == str(self.principal_id)

"""The signed-in admin, passed explicitly to whatever needs the acting user."""

from dataclasses import dataclass
from typing import Optional

from collegecms.client.api import AdminApiClient


@dataclass(frozen=True)
class AdminSession:
    admin_id: int
    name: str
    token: str
    author_id: Optional[int] = None
    email: Optional[str] = None
    role: Optional[str] = None


def sign_in(api: AdminApiClient, email: str) -> AdminSession:
    """Log in through the mock SSO endpoint and keep the token on ``api``."""
    body = api.login(email)
    user = body.get("user") or {}
    return AdminSession(
        admin_id=user.get("admin_id"),
        name=user.get("name") or "",
        token=body.get("access_token") or "",
        author_id=user.get("author_id"),
        email=user.get("email"),
        role=user.get("role"),
    )

"""Token issuing and mock single sign-on for admin users."""

from datetime import datetime, timedelta, timezone
from jose import jwt
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from collegecms.models.user import AdminUser
from collegecms.config import settings

ALGORITHM = "HS256"


def create_access_token(admin_id: int) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": str(admin_id), "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def mock_sso_login(db: Session, email: str) -> AdminUser:
    normalized = (email or "").strip().lower()
    user = db.query(AdminUser).filter(AdminUser.email == normalized, AdminUser.is_active == True).first()  # noqa: E712
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"No active admin user found for '{email}'",
        )
    return user

"""Admin login endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from collegecms.database import get_db
from collegecms.schemas.user import LoginRequest, AdminUserOut
from collegecms.services.auth_service import create_access_token, mock_sso_login
from collegecms.middleware.auth_middleware import get_current_user
from collegecms.models.user import AdminUser
from collegecms.utils.helpers import ok

router = APIRouter(prefix="/api/v1/admin/auth", tags=["auth"])


@router.post("/login")
def login(request: LoginRequest, db: Session = Depends(get_db)):
    user = mock_sso_login(db, request.email)
    token = create_access_token(user.admin_id)
    return {
        "success": True,
        "access_token": token,
        "user": AdminUserOut.model_validate(user).model_dump(mode="json"),
    }


@router.post("/logout")
def logout(current_user: AdminUser = Depends(get_current_user)):
    _ = current_user
    return ok(message="Logged out")


@router.get("/me")
def me(current_user: AdminUser = Depends(get_current_user)):
    return ok(AdminUserOut.model_validate(current_user).model_dump(mode="json"))

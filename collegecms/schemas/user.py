"""Admin user request/response contracts."""

from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class LoginRequest(BaseModel):
    email: str


class AdminUserOut(BaseModel):
    admin_id: int
    email: str
    name: str
    role: str
    author_id: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

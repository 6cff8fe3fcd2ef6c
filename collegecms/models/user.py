"""Admin panel user model."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func
from collegecms.database import Base


class AdminUser(Base):
    __tablename__ = "admin_users"

    admin_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(120), unique=True, nullable=False)
    name = Column(String(80), nullable=False)
    role = Column(String(20), nullable=False)  # admin/editor/viewer
    # Author profile used when this admin saves course and location pages.
    author_id = Column(Integer, ForeignKey("content_authors.author_id"), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

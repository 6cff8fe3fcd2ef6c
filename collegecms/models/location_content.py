"""Content for "<course type> colleges in <city/state>" listing pages."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.sql import func

from collegecms.database import Base


class CourseLocationContent(Base):
    __tablename__ = "course_location_content"

    content_id = Column(Integer, primary_key=True, autoincrement=True)
    course_type = Column(String(50), nullable=False)
    location_type = Column(String(10), nullable=False)  # city/state
    location_name = Column(String(100), nullable=False)
    location_slug = Column(String(150), nullable=False)  # "<slug>-colleges"
    page_title = Column(String(255))
    full_content = Column(Text, nullable=False, default="")
    author_id = Column(Integer, ForeignKey("content_authors.author_id"), nullable=True)
    meta_title = Column(String(200))
    meta_description = Column(String(300))
    banners = Column(JSON)  # list[{id, image, alt, href}]
    status = Column(String(20), nullable=False, default="draft")
    updated_by = Column(Integer, ForeignKey("admin_users.admin_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("course_type", "location_slug", name="uq_location_content_key"),
    )

"""Per-section rich text content of a college page."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from collegecms.database import Base


class CollegeContent(Base):
    __tablename__ = "college_content"

    content_id = Column(Integer, primary_key=True, autoincrement=True)
    college_id = Column(Integer, ForeignKey("colleges.college_id"), nullable=False)
    section_type = Column(String(30), nullable=False)
    title = Column(String(255))
    content = Column(Text, nullable=False, default="")
    author_id = Column(Integer, ForeignKey("content_authors.author_id"), nullable=True)
    meta_title = Column(String(200))
    meta_description = Column(String(300))
    status = Column(String(20), nullable=False, default="draft")  # draft/published
    updated_by = Column(Integer, ForeignKey("admin_users.admin_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("college_id", "section_type", name="uq_college_content_section"),
    )

"""Article content for course listing pages (e.g. "BTech Colleges in India")."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func

from collegecms.database import Base


class CoursePageContent(Base):
    __tablename__ = "course_page_content"

    content_id = Column(Integer, primary_key=True, autoincrement=True)
    course_type = Column(String(50), unique=True, nullable=False)
    page_title = Column(String(255))
    intro_text = Column(Text)
    full_content = Column(Text, nullable=False, default="")
    key_points = Column(JSON)  # list[str]
    table_of_contents = Column(JSON)  # list[{id, title}]
    highlights_data = Column(JSON)
    author_id = Column(Integer, ForeignKey("content_authors.author_id"), nullable=True)
    meta_title = Column(String(200))
    meta_description = Column(String(300))
    status = Column(String(20), nullable=False, default="draft")
    updated_by = Column(Integer, ForeignKey("admin_users.admin_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

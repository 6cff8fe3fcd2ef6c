"""Content author model shown in the author picker and on public pages."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.sql import func

from collegecms.database import Base


class ContentAuthor(Base):
    __tablename__ = "content_authors"

    author_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    designation = Column(String(100))
    bio = Column(Text)
    image_url = Column(String(500))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

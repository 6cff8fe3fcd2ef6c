"""Degree/course type taxonomy (B.Tech, MBA, ...)."""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from collegecms.database import Base


class CourseType(Base):
    __tablename__ = "course_types"

    course_type_id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(50), unique=True, nullable=True)
    name = Column(String(50), nullable=False)
    full_name = Column(String(150))
    status = Column(String(20), nullable=False, default="active")  # active/inactive
    display_order = Column(Integer, default=0)
    created_at = Column(DateTime, server_default=func.now())

"""College and college-offered course type models."""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from collegecms.database import Base


class College(Base):
    __tablename__ = "colleges"

    college_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    slug = Column(String(200), unique=True)
    city = Column(String(100))
    state = Column(String(100))
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime, server_default=func.now())

    course_offerings = relationship("CollegeCourseType", back_populates="college", cascade="all, delete-orphan")


class CollegeCourseType(Base):
    __tablename__ = "college_course_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    college_id = Column(Integer, ForeignKey("colleges.college_id"), nullable=False)
    course_type_id = Column(Integer, ForeignKey("course_types.course_type_id"), nullable=False)

    college = relationship("College", back_populates="course_offerings")

    __table_args__ = (
        UniqueConstraint("college_id", "course_type_id", name="uq_college_course_type"),
    )

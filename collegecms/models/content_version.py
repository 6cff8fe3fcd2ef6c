"""Change history snapshots of the content records."""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.sql import func

from collegecms.database import Base


class ContentVersion(Base):
    __tablename__ = "content_version"

    version_id = Column(Integer, primary_key=True, autoincrement=True)
    entity_type = Column(String(30), nullable=False)  # college_content/course_page_content/location_content
    entity_id = Column(Integer, nullable=False)
    version_no = Column(Integer, nullable=False)
    change_type = Column(String(20), nullable=False)  # create/update
    status = Column(String(20), nullable=False)
    snapshot = Column(Text, nullable=False)  # JSON string
    changed_by = Column(Integer, ForeignKey("admin_users.admin_id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    __table_args__ = (
        Index("idx_content_version_entity", "entity_type", "entity_id", "version_no"),
    )

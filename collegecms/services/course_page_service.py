"""Course listing page content, keyed by course type."""

import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from collegecms.models.course_page_content import CoursePageContent
from collegecms.models.user import AdminUser
from collegecms.schemas.content import CoursePageContentUpdate
from collegecms.services import directory_service, version_service

logger = logging.getLogger(__name__)


def get_content(db: Session, course_type: str) -> CoursePageContent | None:
    return (
        db.query(CoursePageContent)
        .filter(CoursePageContent.course_type == course_type)
        .first()
    )


def course_type_directory(db: Session) -> List[dict]:
    existing = {row[0] for row in db.query(CoursePageContent.course_type).all()}
    rows = directory_service.list_course_types(db, status="active")
    result = []
    for row in rows:
        key = directory_service.course_type_key(row)
        result.append(
            {
                "course_type": key,
                "slug": row.slug,
                "name": row.name,
                "display_name": row.full_name or row.name,
                "has_content": key in existing,
                "status": row.status,
            }
        )
    return result


def upsert_content(
    db: Session,
    *,
    course_type: str,
    data: CoursePageContentUpdate,
    current_user: AdminUser,
) -> CoursePageContent:
    directory_service.validate_author(db, data.author_id)
    row = get_content(db, course_type)
    change_type = "update"
    if not row:
        row = CoursePageContent(course_type=course_type)
        db.add(row)
        change_type = "create"

    row.page_title = data.page_title
    row.intro_text = data.intro_text
    row.full_content = data.full_content or ""
    row.key_points = [point for point in data.key_points if point.strip()]
    row.table_of_contents = [item.model_dump() for item in data.table_of_contents if item.title.strip()]
    highlights = data.highlights_data.model_dump()
    highlights["top_specializations"] = [s for s in highlights["top_specializations"] if s.strip()]
    highlights["top_exams"] = [e for e in highlights["top_exams"] if e.strip()]
    row.highlights_data = highlights
    row.author_id = data.author_id
    row.meta_title = data.meta_title
    row.meta_description = data.meta_description
    row.status = data.status
    row.updated_by = current_user.admin_id
    db.commit()
    db.refresh(row)

    logger.info("[content] course page saved course_type=%s status=%s", course_type, row.status)
    version_service.create_content_version(
        db,
        entity_type="course_page_content",
        entity_id=row.content_id,
        changed_by=current_user.admin_id,
        change_type=change_type,
        status=row.status,
        snapshot=data.model_dump(),
    )
    return row


def to_response(row: CoursePageContent, author_names: Dict[int, str] | None = None) -> Dict[str, Any]:
    names = author_names or {}
    return {
        "content_id": row.content_id,
        "course_type": row.course_type,
        "page_title": row.page_title,
        "intro_text": row.intro_text,
        "full_content": row.full_content or "",
        "key_points": row.key_points or [],
        "table_of_contents": row.table_of_contents or [],
        "highlights_data": row.highlights_data,
        "author_id": row.author_id,
        "author_name": names.get(row.author_id) if row.author_id else None,
        "meta_title": row.meta_title,
        "meta_description": row.meta_description,
        "status": row.status,
        "updated_by": row.updated_by,
        "updated_at": row.updated_at,
    }

"""City/state listing page content, keyed by (course type, location slug)."""

import logging
from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from collegecms.models.college import College, CollegeCourseType
from collegecms.models.location_content import CourseLocationContent
from collegecms.models.user import AdminUser
from collegecms.schemas.content import LocationContentCreate, LocationContentUpdate
from collegecms.services import directory_service, version_service
from collegecms.utils.slugs import LOCATION_SLUG_SUFFIX, slugify

logger = logging.getLogger(__name__)


def get_content(db: Session, course_type: str, location_slug: str) -> CourseLocationContent | None:
    return (
        db.query(CourseLocationContent)
        .filter(
            CourseLocationContent.course_type == course_type,
            CourseLocationContent.location_slug == location_slug,
        )
        .first()
    )


def get_content_or_404(db: Session, course_type: str, location_slug: str) -> CourseLocationContent:
    row = get_content(db, course_type, location_slug)
    if not row:
        raise HTTPException(status_code=404, detail="Location content not found")
    return row


def _validate_location_slug(location_slug: str) -> None:
    if not location_slug.endswith(LOCATION_SLUG_SUFFIX) or location_slug == LOCATION_SLUG_SUFFIX:
        raise HTTPException(
            status_code=400,
            detail=f"location_slug must be '<location>{LOCATION_SLUG_SUFFIX}'",
        )


def available_locations(db: Session, course_type: str) -> Dict[str, List[dict]]:
    course_type_row = directory_service.get_course_type_or_404(db, course_type)
    key = directory_service.course_type_key(course_type_row)

    colleges = (
        db.query(College)
        .join(CollegeCourseType, CollegeCourseType.college_id == College.college_id)
        .filter(
            CollegeCourseType.course_type_id == course_type_row.course_type_id,
            College.status == "active",
        )
        .all()
    )
    with_content = {
        row[0]
        for row in db.query(CourseLocationContent.location_slug)
        .filter(CourseLocationContent.course_type == key)
        .all()
    }

    def _group(attr: str) -> List[dict]:
        buckets: Dict[str, dict] = {}
        for college in colleges:
            name = (getattr(college, attr) or "").strip()
            slug = slugify(name)
            if not slug:
                continue
            bucket = buckets.setdefault(slug, {"slug": slug, "name": name, "college_count": 0})
            bucket["college_count"] += 1
        rows = []
        for bucket in buckets.values():
            bucket["has_content"] = f"{bucket['slug']}{LOCATION_SLUG_SUFFIX}" in with_content
            rows.append(bucket)
        rows.sort(key=lambda row: (-row["college_count"], row["name"].lower()))
        return rows

    return {"cities": _group("city"), "states": _group("state")}


def create_content(db: Session, *, data: LocationContentCreate, current_user: AdminUser) -> CourseLocationContent:
    course_type = directory_service.course_type_key(
        directory_service.get_course_type_or_404(db, data.course_type)
    )
    _validate_location_slug(data.location_slug)
    directory_service.validate_author(db, data.author_id)
    if get_content(db, course_type, data.location_slug):
        raise HTTPException(status_code=409, detail="Content already exists for this location")

    row = CourseLocationContent(
        course_type=course_type,
        location_type=data.location_type,
        location_name=data.location_name,
        location_slug=data.location_slug,
        page_title=data.page_title,
        full_content=data.full_content or "",
        author_id=data.author_id,
        meta_title=data.meta_title,
        meta_description=data.meta_description,
        banners=[banner.model_dump() for banner in data.banners],
        status=data.status,
        updated_by=current_user.admin_id,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "[content] location content created course_type=%s location=%s status=%s",
        row.course_type, row.location_slug, row.status,
    )
    _record_version(db, row, "create", data.model_dump(), current_user)
    return row


def update_content(
    db: Session,
    *,
    course_type: str,
    location_slug: str,
    data: LocationContentUpdate,
    current_user: AdminUser,
) -> CourseLocationContent:
    row = get_content_or_404(db, course_type, location_slug)
    directory_service.validate_author(db, data.author_id)

    if data.location_type is not None:
        row.location_type = data.location_type
    if data.location_name:
        row.location_name = data.location_name
    row.page_title = data.page_title
    row.full_content = data.full_content or ""
    row.author_id = data.author_id
    row.meta_title = data.meta_title
    row.meta_description = data.meta_description
    row.banners = [banner.model_dump() for banner in data.banners]
    row.status = data.status
    row.updated_by = current_user.admin_id
    db.commit()
    db.refresh(row)
    logger.info(
        "[content] location content updated course_type=%s location=%s status=%s",
        row.course_type, row.location_slug, row.status,
    )
    _record_version(db, row, "update", data.model_dump(), current_user)
    return row


def _record_version(db: Session, row: CourseLocationContent, change_type: str, snapshot: dict, current_user: AdminUser):
    version_service.create_content_version(
        db,
        entity_type="location_content",
        entity_id=row.content_id,
        changed_by=current_user.admin_id,
        change_type=change_type,
        status=row.status,
        snapshot=snapshot,
    )


def to_response(row: CourseLocationContent, author_names: Dict[int, str] | None = None) -> Dict[str, Any]:
    names = author_names or {}
    return {
        "content_id": row.content_id,
        "course_type": row.course_type,
        "location_type": row.location_type,
        "location_name": row.location_name,
        "location_slug": row.location_slug,
        "page_title": row.page_title,
        "full_content": row.full_content or "",
        "author_id": row.author_id,
        "author_name": names.get(row.author_id) if row.author_id else None,
        "meta_title": row.meta_title,
        "meta_description": row.meta_description,
        "banners": row.banners or [],
        "status": row.status,
        "updated_by": row.updated_by,
        "updated_at": row.updated_at,
    }

"""Section content of college pages, keyed by (college, section)."""

import logging
from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from collegecms.models.college import College
from collegecms.models.college_content import CollegeContent
from collegecms.models.user import AdminUser
from collegecms.schemas.content import CollegeContentUpdate
from collegecms.services import directory_service, version_service

logger = logging.getLogger(__name__)

SECTION_TYPES = {
    "overview": "Overview",
    "courses": "Courses & Fees",
    "admission": "Admission",
    "cutoff": "Cutoff",
    "placement": "Placements",
    "ranking": "Rankings",
    "scholarship": "Scholarships",
    "hostel": "Hostel & Campus",
    "faculty": "Faculty",
    "gallery": "Gallery",
    "department": "Departments",
}


def section_options() -> List[dict]:
    return [{"value": key, "label": label} for key, label in SECTION_TYPES.items()]


def validate_section(section: str) -> str:
    if section not in SECTION_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported section type '{section}'")
    return section


def get_college_or_404(db: Session, college_id: int) -> College:
    row = db.query(College).filter(College.college_id == college_id).first()
    if not row:
        raise HTTPException(status_code=404, detail="College not found")
    return row


def get_section_content(db: Session, college_id: int, section: str) -> CollegeContent | None:
    return (
        db.query(CollegeContent)
        .filter(CollegeContent.college_id == college_id, CollegeContent.section_type == section)
        .first()
    )


def list_college_content(db: Session, college_id: int) -> List[CollegeContent]:
    return (
        db.query(CollegeContent)
        .filter(CollegeContent.college_id == college_id)
        .order_by(CollegeContent.section_type.asc())
        .all()
    )


def upsert_section_content(
    db: Session,
    *,
    college_id: int,
    section: str,
    data: CollegeContentUpdate,
    current_user: AdminUser,
) -> CollegeContent:
    directory_service.validate_author(db, data.author_id)
    row = get_section_content(db, college_id, section)
    change_type = "update"
    if not row:
        row = CollegeContent(college_id=college_id, section_type=section)
        db.add(row)
        change_type = "create"

    row.title = data.title
    row.content = data.content or ""
    row.author_id = data.author_id
    row.meta_title = data.meta_title
    row.meta_description = data.meta_description
    row.status = data.status
    row.updated_by = current_user.admin_id
    db.commit()
    db.refresh(row)

    logger.info(
        "[content] college section saved college=%s section=%s status=%s by=%s",
        college_id, section, row.status, current_user.admin_id,
    )
    version_service.create_content_version(
        db,
        entity_type="college_content",
        entity_id=row.content_id,
        changed_by=current_user.admin_id,
        change_type=change_type,
        status=row.status,
        snapshot=data.model_dump(),
    )
    return row


def to_response(row: CollegeContent, author_names: Dict[int, str] | None = None) -> Dict[str, Any]:
    names = author_names or {}
    return {
        "content_id": row.content_id,
        "college_id": row.college_id,
        "section_type": row.section_type,
        "title": row.title,
        "content": row.content or "",
        "author_id": row.author_id,
        "author_name": names.get(row.author_id) if row.author_id else None,
        "meta_title": row.meta_title,
        "meta_description": row.meta_description,
        "status": row.status,
        "updated_by": row.updated_by,
        "updated_at": row.updated_at,
    }

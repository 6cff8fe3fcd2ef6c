"""Lookup lists used by the editor pickers: authors and course types."""

from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from collegecms.models.author import ContentAuthor
from collegecms.models.course_type import CourseType
from collegecms.utils.slugs import course_type_slug

COURSE_TYPE_STATUSES = {"active", "inactive"}


def list_author_options(db: Session) -> List[dict]:
    rows = (
        db.query(ContentAuthor)
        .filter(ContentAuthor.is_active == True)  # noqa: E712
        .order_by(ContentAuthor.name.asc())
        .all()
    )
    return [{"id": row.author_id, "name": row.name} for row in rows]


def author_names(db: Session, author_ids) -> dict[int, str]:
    ids = {int(a) for a in author_ids if a}
    if not ids:
        return {}
    rows = db.query(ContentAuthor).filter(ContentAuthor.author_id.in_(ids)).all()
    return {row.author_id: row.name for row in rows}


def validate_author(db: Session, author_id: int | None) -> None:
    if author_id is None:
        return
    exists = db.query(ContentAuthor.author_id).filter(ContentAuthor.author_id == author_id).first()
    if not exists:
        raise HTTPException(status_code=400, detail="Selected author does not exist")


def list_course_types(db: Session, status: str | None = None) -> List[CourseType]:
    query = db.query(CourseType)
    if status:
        if status not in COURSE_TYPE_STATUSES:
            raise HTTPException(status_code=400, detail=f"Unknown course type status '{status}'")
        query = query.filter(CourseType.status == status)
    return query.order_by(CourseType.display_order.asc(), CourseType.name.asc()).all()


def course_type_key(row: CourseType) -> str:
    return course_type_slug(row.slug, row.name)


def find_course_type(db: Session, key: str) -> CourseType | None:
    wanted = (key or "").strip().lower()
    for row in db.query(CourseType).all():
        if course_type_key(row).lower() == wanted:
            return row
    return None


def get_course_type_or_404(db: Session, key: str) -> CourseType:
    row = find_course_type(db, key)
    if not row:
        raise HTTPException(status_code=404, detail=f"Course type '{key}' not found")
    return row

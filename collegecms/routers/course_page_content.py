"""Course listing page content endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from collegecms.database import get_db
from collegecms.middleware.auth_middleware import get_current_user, require_roles
from collegecms.models.user import AdminUser
from collegecms.schemas.content import (
    CoursePageContentOut,
    CoursePageContentUpdate,
    CourseTypeDirectoryOut,
)
from collegecms.services import course_page_service, directory_service
from collegecms.utils.helpers import ok
from collegecms.utils.permissions import CONTENT_EDITOR_ROLES

router = APIRouter(prefix="/api/v1/admin/course-page-content", tags=["course-page-content"])


def _serialize(db: Session, row) -> dict:
    names = directory_service.author_names(db, [row.author_id])
    return CoursePageContentOut(**course_page_service.to_response(row, names)).model_dump(mode="json")


@router.get("/course-types")
def list_course_types(
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    rows = course_page_service.course_type_directory(db)
    return ok([CourseTypeDirectoryOut(**row).model_dump() for row in rows])


@router.get("/{course_type}")
def get_by_type(
    course_type: str,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    row = course_page_service.get_content(db, course_type)
    if not row:
        raise HTTPException(status_code=404, detail="Course page content not found")
    return ok(_serialize(db, row))


@router.put("/{course_type}")
def update_by_type(
    course_type: str,
    data: CoursePageContentUpdate,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(require_roles(*CONTENT_EDITOR_ROLES)),
):
    key = directory_service.course_type_key(directory_service.get_course_type_or_404(db, course_type))
    row = course_page_service.upsert_content(db, course_type=key, data=data, current_user=current_user)
    return ok(_serialize(db, row), message="Content saved")

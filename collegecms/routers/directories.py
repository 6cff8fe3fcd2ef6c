"""Author and course type lookup endpoints used by the editor pickers."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from collegecms.database import get_db
from collegecms.middleware.auth_middleware import get_current_user
from collegecms.models.user import AdminUser
from collegecms.schemas.author import AuthorOption, CourseTypeOut
from collegecms.services import directory_service
from collegecms.utils.helpers import ok

router = APIRouter(prefix="/api/v1/admin", tags=["directories"])


@router.get("/authors/list")
def list_authors(
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    return ok([AuthorOption(**row).model_dump() for row in directory_service.list_author_options(db)])


@router.get("/course-types")
def list_course_types(
    status: str | None = Query(None),
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    rows = directory_service.list_course_types(db, status=status)
    return ok([CourseTypeOut.model_validate(row).model_dump() for row in rows])

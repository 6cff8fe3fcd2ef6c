"""College section content endpoints (update-or-create by section key)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from collegecms.database import get_db
from collegecms.middleware.auth_middleware import get_current_user, require_roles
from collegecms.models.user import AdminUser
from collegecms.schemas.content import CollegeContentOut, CollegeContentUpdate, SectionTypeOut
from collegecms.services import college_content_service, directory_service
from collegecms.utils.helpers import ok
from collegecms.utils.permissions import CONTENT_EDITOR_ROLES

router = APIRouter(prefix="/api/v1/admin", tags=["college-content"])


def _serialize(db: Session, row) -> dict:
    names = directory_service.author_names(db, [row.author_id])
    out = CollegeContentOut(**college_content_service.to_response(row, names))
    return out.model_dump(mode="json")


@router.get("/content/sections")
def list_sections(current_user: AdminUser = Depends(get_current_user)):
    _ = current_user
    return ok([SectionTypeOut(**row).model_dump() for row in college_content_service.section_options()])


@router.get("/colleges/{college_id}/content")
def get_all_content(
    college_id: int,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    college = college_content_service.get_college_or_404(db, college_id)
    rows = college_content_service.list_college_content(db, college_id)
    names = directory_service.author_names(db, [row.author_id for row in rows])
    sections = [
        CollegeContentOut(**college_content_service.to_response(row, names)).model_dump(mode="json")
        for row in rows
    ]
    return ok({"college": {"college_id": college.college_id, "name": college.name}, "sections": sections})


@router.get("/colleges/{college_id}/content/{section}")
def get_section(
    college_id: int,
    section: str,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    college_content_service.get_college_or_404(db, college_id)
    college_content_service.validate_section(section)
    row = college_content_service.get_section_content(db, college_id, section)
    return ok({"content": _serialize(db, row) if row else None})


@router.put("/colleges/{college_id}/content/{section}")
def update_section(
    college_id: int,
    section: str,
    data: CollegeContentUpdate,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(require_roles(*CONTENT_EDITOR_ROLES)),
):
    college_content_service.get_college_or_404(db, college_id)
    college_content_service.validate_section(section)
    row = college_content_service.upsert_section_content(
        db, college_id=college_id, section=section, data=data, current_user=current_user,
    )
    return ok({"content": _serialize(db, row)}, message="Content saved")

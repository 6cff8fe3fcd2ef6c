"""Course x location content endpoints and the available-locations directory."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from collegecms.database import get_db
from collegecms.middleware.auth_middleware import get_current_user, require_roles
from collegecms.models.user import AdminUser
from collegecms.schemas.content import (
    AvailableLocationsOut,
    LocationContentCreate,
    LocationContentOut,
    LocationContentUpdate,
)
from collegecms.services import directory_service, location_content_service
from collegecms.utils.helpers import ok
from collegecms.utils.permissions import CONTENT_EDITOR_ROLES

router = APIRouter(prefix="/api/v1/admin/location-content", tags=["location-content"])


def _serialize(db: Session, row) -> dict:
    names = directory_service.author_names(db, [row.author_id])
    return LocationContentOut(**location_content_service.to_response(row, names)).model_dump(mode="json")


@router.get("/available-locations/{course_type}")
def get_available_locations(
    course_type: str,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    data = location_content_service.available_locations(db, course_type)
    return ok(AvailableLocationsOut(**data).model_dump())


@router.get("/{course_type}/{location_slug}")
def get_one(
    course_type: str,
    location_slug: str,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    row = location_content_service.get_content_or_404(db, course_type, location_slug)
    return ok(_serialize(db, row))


@router.post("")
def create(
    data: LocationContentCreate,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(require_roles(*CONTENT_EDITOR_ROLES)),
):
    row = location_content_service.create_content(db, data=data, current_user=current_user)
    return ok(_serialize(db, row), message="Content created")


@router.put("/{course_type}/{location_slug}")
def update(
    course_type: str,
    location_slug: str,
    data: LocationContentUpdate,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(require_roles(*CONTENT_EDITOR_ROLES)),
):
    row = location_content_service.update_content(
        db,
        course_type=course_type,
        location_slug=location_slug,
        data=data,
        current_user=current_user,
    )
    return ok(_serialize(db, row), message="Content updated")

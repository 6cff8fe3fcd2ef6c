"""Content version history endpoint."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from collegecms.database import get_db
from collegecms.middleware.auth_middleware import get_current_user
from collegecms.models.user import AdminUser
from collegecms.schemas.version import ContentVersionOut
from collegecms.services import version_service
from collegecms.utils.helpers import ok

router = APIRouter(prefix="/api/v1/admin/content-versions", tags=["content-versions"])


@router.get("/{entity_type}/{entity_id}")
def list_versions(
    entity_type: str,
    entity_id: int,
    db: Session = Depends(get_db),
    current_user: AdminUser = Depends(get_current_user),
):
    _ = current_user
    rows = version_service.list_versions(db, entity_type=entity_type, entity_id=entity_id)
    return ok([
        ContentVersionOut(**version_service.to_response(row)).model_dump(mode="json")
        for row in rows
    ])

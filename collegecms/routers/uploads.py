"""Banner image upload endpoints."""

import os
import re

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from collegecms.config import settings
from collegecms.middleware.auth_middleware import require_roles
from collegecms.models.user import AdminUser
from collegecms.schemas.upload import UploadedFileOut
from collegecms.utils.helpers import ok, save_upload
from collegecms.utils.permissions import CONTENT_EDITOR_ROLES

router = APIRouter(prefix="/api/v1/admin/upload", tags=["uploads"])

BANNER_SUBFOLDER = "banners"
STORED_FILENAME_RE = re.compile(r"^[0-9a-f]{32}\.[a-z0-9]+$")


@router.post("/banner")
async def upload_banner(
    image: UploadFile = File(...),
    current_user: AdminUser = Depends(require_roles(*CONTENT_EDITOR_ROLES)),
):
    _ = current_user
    stored = await save_upload(image, subfolder=BANNER_SUBFOLDER)
    return ok(UploadedFileOut(**stored).model_dump())


@router.delete("/banner/{filename}")
def delete_banner(
    filename: str,
    current_user: AdminUser = Depends(require_roles(*CONTENT_EDITOR_ROLES)),
):
    _ = current_user
    if not STORED_FILENAME_RE.match(filename):
        raise HTTPException(status_code=400, detail="Invalid banner filename")
    path = os.path.join(settings.UPLOAD_DIR, BANNER_SUBFOLDER, filename)
    if not os.path.exists(path):
        raise HTTPException(status_code=404, detail="Banner image not found")
    os.remove(path)
    return ok(message="Banner image deleted")

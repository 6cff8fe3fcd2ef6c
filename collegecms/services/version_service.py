"""Shared helpers to record and read content version history."""

import json
from typing import Any, Dict, List

from fastapi import HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from collegecms.models.content_version import ContentVersion

ENTITY_TYPES = {"college_content", "course_page_content", "location_content"}


def create_content_version(
    db: Session,
    *,
    entity_type: str,
    entity_id: int,
    changed_by: int | None,
    change_type: str,
    status: str,
    snapshot: Dict[str, Any],
) -> ContentVersion:
    current_max = (
        db.query(func.max(ContentVersion.version_no))
        .filter(
            ContentVersion.entity_type == entity_type,
            ContentVersion.entity_id == entity_id,
        )
        .scalar()
    )
    version_no = (current_max or 0) + 1

    row = ContentVersion(
        entity_type=entity_type,
        entity_id=entity_id,
        version_no=version_no,
        change_type=change_type,
        status=status,
        snapshot=json.dumps(snapshot, ensure_ascii=False, default=str),
        changed_by=changed_by,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def list_versions(db: Session, *, entity_type: str, entity_id: int) -> List[ContentVersion]:
    if entity_type not in ENTITY_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown content type '{entity_type}'")
    return (
        db.query(ContentVersion)
        .filter(
            ContentVersion.entity_type == entity_type,
            ContentVersion.entity_id == entity_id,
        )
        .order_by(ContentVersion.version_no.desc())
        .all()
    )


def parse_snapshot(row: ContentVersion) -> Dict[str, Any]:
    try:
        return json.loads(row.snapshot or "{}")
    except json.JSONDecodeError:
        return {}


def to_response(row: ContentVersion) -> Dict[str, Any]:
    return {
        "version_id": row.version_id,
        "entity_type": row.entity_type,
        "entity_id": row.entity_id,
        "version_no": row.version_no,
        "change_type": row.change_type,
        "status": row.status,
        "snapshot": parse_snapshot(row),
        "changed_by": row.changed_by,
        "created_at": row.created_at,
    }

"""Content version history contracts."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class ContentVersionOut(BaseModel):
    version_id: int
    entity_type: str
    entity_id: int
    version_no: int
    change_type: str
    status: str
    snapshot: Dict[str, Any]
    changed_by: Optional[int] = None
    created_at: Optional[datetime] = None

"""Author and course type directory contracts."""

from typing import Optional

from pydantic import BaseModel


class AuthorOption(BaseModel):
    id: int
    name: str


class CourseTypeOut(BaseModel):
    course_type_id: int
    slug: Optional[str] = None
    name: str
    full_name: Optional[str] = None
    status: str

    model_config = {"from_attributes": True}

"""Request/response contracts for the keyed content records."""

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from collegecms.config import settings

ContentStatus = Literal["draft", "published"]
LocationType = Literal["city", "state"]


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class BannerItem(BaseModel):
    id: Union[int, str]
    image: str
    alt: str = ""
    href: str = ""


class ContentFieldsBase(BaseModel):
    author_id: Optional[int] = None
    meta_title: Optional[str] = Field(None, max_length=200)
    meta_description: Optional[str] = Field(None, max_length=300)
    status: ContentStatus = "draft"

    @field_validator("author_id", mode="before")
    @classmethod
    def _author_blank(cls, value):
        return _blank_to_none(value)


class CollegeContentUpdate(ContentFieldsBase):
    title: Optional[str] = Field(None, max_length=255)
    content: str = ""


class CollegeContentOut(BaseModel):
    content_id: int
    college_id: int
    section_type: str
    title: Optional[str] = None
    content: str = ""
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    status: str
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None


class SectionTypeOut(BaseModel):
    value: str
    label: str


class TocItem(BaseModel):
    id: str = ""
    title: str = ""


class HighlightsData(BaseModel):
    total_colleges: Optional[int] = None
    govt_colleges: Optional[int] = None
    private_colleges: Optional[int] = None
    top_college: Optional[str] = None
    top_specializations: List[str] = []
    fee_range: Optional[str] = None
    median_package: Optional[str] = None
    top_exams: List[str] = []

    @field_validator("total_colleges", "govt_colleges", "private_colleges", mode="before")
    @classmethod
    def _count_blank(cls, value):
        return _blank_to_none(value)


class CoursePageContentUpdate(ContentFieldsBase):
    page_title: Optional[str] = Field(None, max_length=255)
    intro_text: Optional[str] = None
    full_content: str = ""
    key_points: List[str] = []
    table_of_contents: List[TocItem] = []
    highlights_data: HighlightsData = HighlightsData()


class CoursePageContentOut(BaseModel):
    content_id: int
    course_type: str
    page_title: Optional[str] = None
    intro_text: Optional[str] = None
    full_content: str = ""
    key_points: List[str] = []
    table_of_contents: List[TocItem] = []
    highlights_data: Optional[HighlightsData] = None
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    status: str
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None


class CourseTypeDirectoryOut(BaseModel):
    course_type: str
    slug: Optional[str] = None
    name: str
    display_name: str
    has_content: bool
    status: Optional[str] = None


class LocationContentFields(ContentFieldsBase):
    page_title: Optional[str] = Field(None, max_length=255)
    full_content: str = ""
    banners: List[BannerItem] = Field(default_factory=list)

    @field_validator("banners")
    @classmethod
    def _banner_cap(cls, value):
        if len(value) > settings.MAX_BANNERS:
            raise ValueError(f"at most {settings.MAX_BANNERS} banners are allowed")
        return value


class LocationContentCreate(LocationContentFields):
    course_type: str = Field(..., min_length=1, max_length=50)
    location_type: LocationType
    location_name: str = Field(..., min_length=1, max_length=100)
    location_slug: str = Field(..., min_length=1, max_length=150)


class LocationContentUpdate(LocationContentFields):
    location_type: Optional[LocationType] = None
    location_name: Optional[str] = Field(None, max_length=100)


class LocationContentOut(BaseModel):
    content_id: int
    course_type: str
    location_type: str
    location_name: str
    location_slug: str
    page_title: Optional[str] = None
    full_content: str = ""
    author_id: Optional[int] = None
    author_name: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    banners: List[BannerItem] = []
    status: str
    updated_by: Optional[int] = None
    updated_at: Optional[datetime] = None


class LocationSummary(BaseModel):
    slug: str
    name: str
    college_count: int
    has_content: bool


class AvailableLocationsOut(BaseModel):
    cities: List[LocationSummary] = []
    states: List[LocationSummary] = []

"""Composite keys addressing a content record."""

from dataclasses import dataclass

from collegecms.utils.slugs import course_type_slug, location_content_slug


@dataclass(frozen=True)
class SectionKey:
    college_id: int
    section_type: str


@dataclass(frozen=True)
class CoursePageKey:
    course_type: str


@dataclass(frozen=True)
class LocationKey:
    course_type: str
    location_type: str
    location_slug: str
    location_name: str = ""


def course_page_key(course_type: dict) -> CoursePageKey:
    return CoursePageKey(course_type_slug(course_type.get("slug"), course_type.get("name")))


def location_key(course_type: dict, location: dict, location_type: str) -> LocationKey:
    """Key of the listing page for ``location`` (a city or state summary) under ``course_type``."""
    return LocationKey(
        course_type=course_type_slug(course_type.get("slug"), course_type.get("name")),
        location_type=location_type,
        location_slug=location_content_slug(location["slug"]),
        location_name=location.get("name") or "",
    )

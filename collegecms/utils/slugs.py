"""Slug derivation shared by the API and the content editors."""

import re

LOCATION_SLUG_SUFFIX = "-colleges"

_NON_ALNUM_RUN_RE = re.compile(r"[^a-z0-9]+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def slugify(value: str | None) -> str:
    """'Navi Mumbai' -> 'navi-mumbai'."""
    text = (value or "").strip().lower()
    return _NON_ALNUM_RUN_RE.sub("-", text).strip("-")


def location_content_slug(location_slug: str) -> str:
    """Content key segment for a city/state page: 'mumbai' -> 'mumbai-colleges'."""
    return f"{location_slug}{LOCATION_SLUG_SUFFIX}"


def course_type_slug(slug: str | None, name: str | None) -> str:
    """Use the course type's own slug; otherwise 'B.Tech' -> 'btech'."""
    if slug:
        return slug
    return _NON_ALNUM_RE.sub("", (name or "").lower())

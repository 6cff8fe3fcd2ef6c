"""Multi-step key selection for the course-type and location page editors.

The key is built one choice at a time: course type first, then (for location
pages) a city or state from the available-locations directory. A resolver
exists only once the key is complete. Directory fetches never block: a failed
fetch leaves an empty list and a warning in the log.
"""

import logging
from typing import Dict, List, Optional

from collegecms.client.api import AdminApiClient, ApiError
from collegecms.client.keys import LocationKey, course_page_key, location_key
from collegecms.client.notify import LoggingNotifier, Notifier
from collegecms.client.resolver import (
    ContentForm,
    CoursePageContentResolver,
    LoadResult,
    LocationContentResolver,
)
from collegecms.client.session import AdminSession

logger = logging.getLogger(__name__)

LOCATION_TYPES = {"city": "cities", "state": "states"}


def _empty_locations() -> Dict[str, List[dict]]:
    return {"cities": [], "states": []}


class _Workflow:
    def __init__(
        self,
        api: AdminApiClient,
        *,
        session: Optional[AdminSession] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.api = api
        self.session = session
        self.notifier = notifier or LoggingNotifier()
        self.course_types: List[dict] = []
        self.course_type: Optional[dict] = None
        self.resolver = None

    @property
    def ready(self) -> bool:
        return self.resolver is not None

    @property
    def form(self) -> Optional[ContentForm]:
        return self.resolver.form if self.resolver else None

    @property
    def can_save(self) -> bool:
        return self.ready and self.resolver.can_save

    def _after_save(self) -> None:
        pass

    def save(self, status: str) -> bool:
        if not self.ready:
            return False
        saved = self.resolver.save(status)
        if saved:
            self._after_save()
        return saved


class CoursePageWorkflow(_Workflow):
    def load_course_types(self) -> List[dict]:
        try:
            self.course_types = self.api.course_page_directory()
        except ApiError as exc:
            logger.warning("[content] course type directory unavailable: %s", exc)
            self.course_types = []
        return self.course_types

    def select_course_type(self, course_type: dict) -> LoadResult:
        self.course_type = course_type
        self.resolver = CoursePageContentResolver(
            self.api,
            course_page_key(course_type).course_type,
            display_name=course_type.get("display_name") or course_type.get("full_name") or course_type.get("name") or "",
            session=self.session,
            notifier=self.notifier,
        )
        return self.resolver.load()

    def _after_save(self) -> None:
        self.load_course_types()


class LocationContentWorkflow(_Workflow):
    def __init__(self, api: AdminApiClient, **kwargs):
        super().__init__(api, **kwargs)
        self.locations: Dict[str, List[dict]] = _empty_locations()
        self.location: Optional[dict] = None
        self.location_type: Optional[str] = None

    def load_course_types(self) -> List[dict]:
        try:
            self.course_types = self.api.list_course_types(status="active")
        except ApiError as exc:
            logger.warning("[content] course types unavailable: %s", exc)
            self.course_types = []
        return self.course_types

    def select_course_type(self, course_type: dict) -> Dict[str, List[dict]]:
        """Pick the course type. Any location choice and loaded form are discarded."""
        self.course_type = course_type
        self.location = None
        self.location_type = None
        self.resolver = None
        return self.refresh_locations()

    def refresh_locations(self) -> Dict[str, List[dict]]:
        if self.course_type is None:
            self.locations = _empty_locations()
            return self.locations
        key = course_page_key(self.course_type).course_type
        try:
            self.locations = self.api.available_locations(key)
        except ApiError as exc:
            logger.warning("[content] available locations unavailable course_type=%s: %s", key, exc)
            self.locations = _empty_locations()
        return self.locations

    def options(self, location_type: str) -> List[dict]:
        return self.locations.get(LOCATION_TYPES[location_type], [])

    @property
    def key(self) -> Optional[LocationKey]:
        if self.course_type is None or self.location is None:
            return None
        return location_key(self.course_type, self.location, self.location_type)

    def select_location(self, location: dict, location_type: str = "city") -> LoadResult:
        if self.course_type is None:
            raise ValueError("Select a course type before a location")
        if location_type not in LOCATION_TYPES:
            raise ValueError(f"location_type must be one of {tuple(LOCATION_TYPES)}")
        self.location = location
        self.location_type = location_type
        self.resolver = LocationContentResolver(
            self.api,
            self.key,
            course_type_name=self.course_type.get("name") or "",
            session=self.session,
            notifier=self.notifier,
        )
        return self.resolver.load()

    def _after_save(self) -> None:
        self.refresh_locations()

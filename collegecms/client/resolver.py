"""Load a content record by key, edit it as a form, save it with an explicit status.

``load()`` answers whether the record exists with a tagged result,
``Found(record)`` or ``NotFound``. A missing record is the normal state of a
page nobody has written yet, so it seeds the form with defaults and never
raises or notifies. ``save(status)`` sends the whole form; where the backend
has separate create and update calls the branch is taken on that tag.
"""

import logging
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from collegecms.client.api import AdminApiClient, ApiError
from collegecms.client.banners import BannerEditor
from collegecms.client.keys import CoursePageKey, LocationKey, SectionKey
from collegecms.client.notify import LoggingNotifier, Notifier
from collegecms.client.session import AdminSession
from collegecms.config import settings
from collegecms.editor import RichTextEditor
from collegecms.services.college_content_service import SECTION_TYPES

logger = logging.getLogger(__name__)

STATUSES = ("draft", "published")
META_TITLE_MAX = 200
META_DESCRIPTION_MAX = 300
# Search engines truncate beyond these; shown as hints only.
META_TITLE_RECOMMENDED = 60
META_DESCRIPTION_RECOMMENDED = 160


@dataclass
class ContentForm:
    title: str = ""
    body: str = ""
    author_id: Union[int, str] = ""
    meta_title: str = ""
    meta_description: str = ""
    banners: List[dict] = field(default_factory=list)
    status: str = "draft"


FORM_FIELDS = tuple(f.name for f in fields(ContentForm))


@dataclass(frozen=True)
class Found:
    record: Dict[str, Any]


@dataclass(frozen=True)
class NotFound:
    reason: str = ""


LoadResult = Union[Found, NotFound]


def _text(value) -> str:
    return "" if value is None else str(value)


def _parse_timestamp(value) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def format_timestamp(value: datetime) -> str:
    """'17 Oct 2026, 03:45 PM'."""
    return f"{value.day} {value.strftime('%b %Y, %I:%M %p')}"


class ContentResolver:
    """Shared load/edit/save flow. Subclasses bind it to one kind of record."""

    title_field = "title"
    body_field = "content"
    requires_title = False
    auto_assign_author = False
    sends_banners = False
    failure_message = "Failed to save content"

    def __init__(
        self,
        api: AdminApiClient,
        key,
        *,
        session: Optional[AdminSession] = None,
        notifier: Optional[Notifier] = None,
    ):
        self.api = api
        self.key = key
        self.session = session
        self.notifier = notifier or LoggingNotifier()
        self.form = ContentForm()
        self.extras: Dict[str, Any] = self._default_extras()
        self.result: LoadResult = NotFound("not loaded")
        self.loaded = False
        self.saving = False
        self.authors: List[dict] = []
        self.last_saved_at: Optional[datetime] = None
        self.last_saved_by: Optional[str] = None
        # Status of the stored record; the form's status is only what the next save sends.
        self.saved_status: Optional[str] = None

    # ---- hooks ----

    def default_title(self) -> str:
        raise NotImplementedError

    def _fetch(self) -> Optional[dict]:
        raise NotImplementedError

    def _persist(self, payload: dict) -> Optional[dict]:
        raise NotImplementedError

    def _default_extras(self) -> Dict[str, Any]:
        return {}

    def _extras_from(self, record: dict) -> Dict[str, Any]:
        return {}

    # ---- loading ----

    def load(self) -> LoadResult:
        try:
            record = self._fetch()
        except ApiError as exc:
            if exc.not_found:
                logger.info("[content] no record for %s", self.key)
            else:
                logger.warning("[content] load failed key=%s status=%s: %s", self.key, exc.status_code, exc)
            record = None
        if record:
            self.result = Found(record)
            self.form = self._form_from(record)
            self.extras = self._extras_from(record)
            self._stamp(record)
        else:
            self.result = NotFound("no record for key")
            self.form = ContentForm(title=self.default_title())
            self.extras = self._default_extras()
            self.last_saved_at = None
            self.last_saved_by = None
            self.saved_status = None
        self.loaded = True
        return self.result

    def _form_from(self, record: dict) -> ContentForm:
        author_id = record.get("author_id")
        return ContentForm(
            title=_text(record.get(self.title_field)),
            body=_text(record.get(self.body_field)),
            author_id=author_id if author_id is not None else "",
            meta_title=_text(record.get("meta_title")),
            meta_description=_text(record.get("meta_description")),
            banners=[dict(banner) for banner in record.get("banners") or []],
            status=record.get("status") or "draft",
        )

    def load_authors(self) -> List[dict]:
        """Author picker options. A failed fetch leaves the picker empty."""
        try:
            self.authors = self.api.list_authors()
        except ApiError as exc:
            logger.warning("[content] author list unavailable: %s", exc)
            self.authors = []
        return self.authors

    @property
    def exists(self) -> bool:
        return isinstance(self.result, Found)

    # ---- editing ----

    def update_field(self, name: str, value: Any) -> None:
        if name in FORM_FIELDS:
            setattr(self.form, name, value)
        elif name in self.extras:
            self.extras[name] = value
        else:
            raise ValueError(f"Unknown form field '{name}'")

    def open_editor(self, placeholder: Optional[str] = None) -> RichTextEditor:
        """A rich text editor seeded with the body; every change flows back into the form."""
        kwargs = {"placeholder": placeholder} if placeholder else {}
        return RichTextEditor(
            content=self.form.body,
            on_change=lambda html: self.update_field("body", html),
            **kwargs,
        )

    def seo_hints(self) -> Dict[str, str]:
        return {
            "meta_title": f"{len(self.form.meta_title)}/{META_TITLE_RECOMMENDED} characters",
            "meta_description": f"{len(self.form.meta_description)}/{META_DESCRIPTION_RECOMMENDED} characters",
        }

    # ---- saving ----

    def validate(self) -> Optional[str]:
        if self.requires_title and not self.form.title.strip():
            return "Title is required"
        if len(self.form.meta_title) > META_TITLE_MAX:
            return f"Meta title must be {META_TITLE_MAX} characters or fewer"
        if len(self.form.meta_description) > META_DESCRIPTION_MAX:
            return f"Meta description must be {META_DESCRIPTION_MAX} characters or fewer"
        return None

    @property
    def can_save(self) -> bool:
        return self.loaded and not self.saving and (not self.requires_title or bool(self.form.title.strip()))

    def _author_for_save(self) -> Optional[int]:
        author_id = self.form.author_id
        if author_id in ("", None) and self.auto_assign_author and self.session:
            return self.session.author_id
        return None if author_id in ("", None) else int(author_id)

    def _payload(self, status: str) -> dict:
        payload = {
            self.title_field: self.form.title,
            self.body_field: self.form.body,
            "author_id": self._author_for_save(),
            "meta_title": self.form.meta_title or None,
            "meta_description": self.form.meta_description or None,
            "status": status,
        }
        if self.sends_banners:
            payload["banners"] = [dict(banner) for banner in self.form.banners]
        payload.update(self.extras)
        return payload

    def save(self, status: str) -> bool:
        if status not in STATUSES:
            raise ValueError(f"status must be one of {STATUSES}")
        if not self.loaded or self.saving:
            return False
        problem = self.validate()
        if problem:
            self.notifier.error(problem)
            return False

        payload = self._payload(status)
        self.saving = True
        try:
            saved = self._persist(payload)
        except ApiError as exc:
            logger.warning("[content] save failed key=%s status=%s: %s", self.key, exc.status_code, exc)
            self.notifier.error(exc.message or self.failure_message)
            return False
        finally:
            self.saving = False

        record = saved or dict(payload)
        self.result = Found(record)
        self.form.status = status
        if self.form.author_id in ("", None) and payload.get("author_id") is not None:
            self.form.author_id = payload["author_id"]
        self._stamp(record)
        self.notifier.success("Content published!" if status == "published" else "Draft saved!")
        return True

    # ---- display ----

    def _stamp(self, record: dict) -> None:
        self.last_saved_at = _parse_timestamp(record.get("updated_at")) or datetime.now()
        self.last_saved_by = record.get("author_name")
        self.saved_status = record.get("status") or "draft"

    @property
    def status_label(self) -> str:
        return "Published" if self.saved_status == "published" else "Draft"

    @property
    def updated_label(self) -> str:
        if self.last_saved_at is None:
            return ""
        label = f"Updated: {format_timestamp(self.last_saved_at)}"
        return f"{label} by {self.last_saved_by}" if self.last_saved_by else label


class SectionContentResolver(ContentResolver):
    """One section (overview, placements, ...) of a college page."""

    def __init__(
        self,
        api: AdminApiClient,
        college_id: int,
        section_type: str,
        *,
        college_name: str,
        section_label: Optional[str] = None,
        session: Optional[AdminSession] = None,
        notifier: Optional[Notifier] = None,
    ):
        super().__init__(api, SectionKey(college_id, section_type), session=session, notifier=notifier)
        self.college_name = college_name
        self.section_label = section_label or SECTION_TYPES.get(section_type, section_type.title())

    def default_title(self) -> str:
        return f"{self.college_name} {self.section_label}".strip()

    def _fetch(self) -> Optional[dict]:
        return self.api.get_section_content(self.key.college_id, self.key.section_type)

    def _persist(self, payload: dict) -> Optional[dict]:
        return self.api.save_section_content(self.key.college_id, self.key.section_type, payload)


class CoursePageContentResolver(ContentResolver):
    """The listing page of one course type, e.g. all BTech colleges."""

    title_field = "page_title"
    body_field = "full_content"
    requires_title = True
    auto_assign_author = True

    def __init__(
        self,
        api: AdminApiClient,
        course_type: str,
        *,
        display_name: str,
        session: Optional[AdminSession] = None,
        notifier: Optional[Notifier] = None,
    ):
        super().__init__(api, CoursePageKey(course_type), session=session, notifier=notifier)
        self.display_name = display_name

    def default_title(self) -> str:
        return f"{self.display_name} Colleges in India {settings.CONTENT_TITLE_YEAR}"

    def _default_extras(self) -> Dict[str, Any]:
        return {"intro_text": "", "key_points": [], "table_of_contents": [], "highlights_data": {}}

    def _extras_from(self, record: dict) -> Dict[str, Any]:
        return {
            "intro_text": _text(record.get("intro_text")),
            "key_points": list(record.get("key_points") or []),
            "table_of_contents": [dict(item) for item in record.get("table_of_contents") or []],
            "highlights_data": dict(record.get("highlights_data") or {}),
        }

    def _fetch(self) -> Optional[dict]:
        return self.api.get_course_page_content(self.key.course_type)

    def _persist(self, payload: dict) -> Optional[dict]:
        return self.api.save_course_page_content(self.key.course_type, payload)


class LocationContentResolver(ContentResolver):
    """The listing page of one course type in one city or state."""

    title_field = "page_title"
    body_field = "full_content"
    requires_title = True
    auto_assign_author = True
    sends_banners = True

    def __init__(
        self,
        api: AdminApiClient,
        key: LocationKey,
        *,
        course_type_name: str,
        session: Optional[AdminSession] = None,
        notifier: Optional[Notifier] = None,
    ):
        super().__init__(api, key, session=session, notifier=notifier)
        self.course_type_name = course_type_name

    def default_title(self) -> str:
        return f"{self.course_type_name} Colleges in {self.key.location_name} {settings.CONTENT_TITLE_YEAR}"

    def _fetch(self) -> Optional[dict]:
        return self.api.get_location_content(self.key.course_type, self.key.location_slug)

    def _persist(self, payload: dict) -> Optional[dict]:
        payload = dict(payload, location_type=self.key.location_type, location_name=self.key.location_name)
        if self.exists:
            return self.api.update_location_content(self.key.course_type, self.key.location_slug, payload)
        payload.update(course_type=self.key.course_type, location_slug=self.key.location_slug)
        return self.api.create_location_content(payload)

    def banner_editor(self, **kwargs) -> BannerEditor:
        """Banner list editor bound to the form of the current load."""
        return BannerEditor(self.form, self.api, notifier=self.notifier, **kwargs)

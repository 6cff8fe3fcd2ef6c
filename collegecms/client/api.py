"""HTTP adapter for the admin content API.

Every call returns the ``data`` member of the ``{"success": ..., "data": ...}``
envelope or raises ``ApiError``. List endpoints are normalized to plain lists
whether the server sends a list or ``{"items": [...]}``.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from collegecms.config import settings

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed admin API call. ``message`` is the server's text when it sent one."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or "Request failed")
        self.message = message
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def normalize_items(data: Any) -> List[Any]:
    if data is None:
        return []
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("items"), list):
        return data["items"]
    return []


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    for key in ("message", "detail"):
        if isinstance(body.get(key), str) and body[key]:
            return body[key]
    return None


class AdminApiClient:
    def __init__(
        self,
        http: Optional[httpx.Client] = None,
        *,
        token: Optional[str] = None,
        prefix: str = settings.API_PREFIX,
    ):
        self.http = http or httpx.Client(
            base_url=settings.API_BASE_URL, timeout=settings.API_TIMEOUT_SECONDS
        )
        self.token = token
        self.prefix = prefix.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.prefix}{path}"
        try:
            response = self.http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("[api] %s %s failed: %s", method, url, exc)
            raise ApiError(None) from exc
        if response.status_code >= 400:
            raise ApiError(_error_message(response), response.status_code)
        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(None, response.status_code) from exc
        if isinstance(body, dict) and body.get("success") is False:
            raise ApiError(body.get("message"), response.status_code)
        return body

    def _data(self, method: str, path: str, **kwargs) -> Any:
        return self._request(method, path, **kwargs).get("data")

    # ---- session ----

    def login(self, email: str) -> Dict[str, Any]:
        body = self._request("POST", "/auth/login", json={"email": email})
        self.token = body.get("access_token")
        return body

    # ---- directories ----

    def list_authors(self) -> List[dict]:
        return normalize_items(self._data("GET", "/authors/list"))

    def list_course_types(self, status: Optional[str] = "active") -> List[dict]:
        params = {"status": status} if status else None
        return normalize_items(self._data("GET", "/course-types", params=params))

    def list_sections(self) -> List[dict]:
        return normalize_items(self._data("GET", "/content/sections"))

    # ---- college section content ----

    def get_section_content(self, college_id: int, section: str) -> Optional[dict]:
        data = self._data("GET", f"/colleges/{college_id}/content/{section}") or {}
        return data.get("content")

    def college_overview(self, college_id: int) -> Dict[str, Any]:
        """The college name plus every saved section."""
        data = self._data("GET", f"/colleges/{college_id}/content") or {}
        return {"college": data.get("college") or {}, "sections": normalize_items(data.get("sections"))}

    def save_section_content(self, college_id: int, section: str, payload: dict) -> Optional[dict]:
        data = self._data("PUT", f"/colleges/{college_id}/content/{section}", json=payload) or {}
        return data.get("content")

    # ---- course page content ----

    def course_page_directory(self) -> List[dict]:
        return normalize_items(self._data("GET", "/course-page-content/course-types"))

    def get_course_page_content(self, course_type: str) -> Optional[dict]:
        return self._data("GET", f"/course-page-content/{course_type}")

    def save_course_page_content(self, course_type: str, payload: dict) -> Optional[dict]:
        return self._data("PUT", f"/course-page-content/{course_type}", json=payload)

    # ---- location content ----

    def available_locations(self, course_type: str) -> Dict[str, List[dict]]:
        data = self._data("GET", f"/location-content/available-locations/{course_type}") or {}
        return {
            "cities": normalize_items(data.get("cities")),
            "states": normalize_items(data.get("states")),
        }

    def get_location_content(self, course_type: str, location_slug: str) -> Optional[dict]:
        return self._data("GET", f"/location-content/{course_type}/{location_slug}")

    def create_location_content(self, payload: dict) -> Optional[dict]:
        return self._data("POST", "/location-content", json=payload)

    def update_location_content(self, course_type: str, location_slug: str, payload: dict) -> Optional[dict]:
        return self._data("PUT", f"/location-content/{course_type}/{location_slug}", json=payload)

    # ---- uploads and history ----

    def upload_banner(self, filename: str, content: bytes, content_type: str = "application/octet-stream") -> dict:
        data = self._data("POST", "/upload/banner", files={"image": (filename, content, content_type)})
        if not data or not data.get("url"):
            raise ApiError("Upload response did not include a URL")
        return data

    def list_versions(self, entity_type: str, entity_id: int) -> List[dict]:
        return normalize_items(self._data("GET", f"/content-versions/{entity_type}/{entity_id}"))

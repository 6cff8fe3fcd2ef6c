"""Banner list of a location page: upload, caption, link, remove."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from collegecms.client.api import AdminApiClient, ApiError
from collegecms.client.notify import LoggingNotifier, Notifier
from collegecms.config import settings

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("alt", "href")


@dataclass(frozen=True)
class BannerFile:
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class BannerEditor:
    """Edits ``form.banners`` in place of the form it was given.

    The list is replaced on every change rather than mutated, and it never
    grows past ``max_banners``: ``can_add`` turns false at the cap and ``add``
    refuses to upload.
    """

    def __init__(
        self,
        form,
        api: AdminApiClient,
        *,
        notifier: Optional[Notifier] = None,
        max_banners: int = settings.MAX_BANNERS,
        clock: Callable[[], float] = time.time,
    ):
        self.form = form
        self.api = api
        self.notifier = notifier or LoggingNotifier()
        self.max_banners = max_banners
        self.clock = clock
        self.uploading = False

    @property
    def banners(self) -> list:
        return self.form.banners

    @property
    def can_add(self) -> bool:
        return not self.uploading and len(self.form.banners) < self.max_banners

    def _next_id(self) -> int:
        taken = {banner.get("id") for banner in self.form.banners}
        candidate = int(self.clock() * 1000)
        while candidate in taken:
            candidate += 1
        return candidate

    def add(self, file: BannerFile) -> Optional[dict]:
        if not self.can_add:
            return None
        self.uploading = True
        try:
            uploaded = self.api.upload_banner(file.filename, file.content, file.content_type)
        except ApiError as exc:
            logger.warning("[banner] upload failed file=%s: %s", file.filename, exc)
            self.notifier.error(exc.message or "Failed to upload banner image")
            return None
        finally:
            self.uploading = False

        banner = {"id": self._next_id(), "image": uploaded["url"], "alt": "", "href": ""}
        self.form.banners = self.form.banners + [banner]
        logger.info("[banner] added id=%s image=%s", banner["id"], banner["image"])
        return banner

    def update(self, banner_id, field_name: str, value: str) -> bool:
        if field_name not in EDITABLE_FIELDS:
            raise ValueError(f"Banner field must be one of {EDITABLE_FIELDS}")
        if not any(banner.get("id") == banner_id for banner in self.form.banners):
            return False
        self.form.banners = [
            dict(banner, **{field_name: value}) if banner.get("id") == banner_id else banner
            for banner in self.form.banners
        ]
        return True

    def remove(self, banner_id) -> bool:
        remaining = [banner for banner in self.form.banners if banner.get("id") != banner_id]
        if len(remaining) == len(self.form.banners):
            return False
        self.form.banners = remaining
        return True

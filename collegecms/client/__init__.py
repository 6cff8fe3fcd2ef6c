from collegecms.client.api import AdminApiClient, ApiError
from collegecms.client.banners import BannerEditor, BannerFile
from collegecms.client.keys import CoursePageKey, LocationKey, SectionKey
from collegecms.client.notify import LoggingNotifier, Notifier, Toast
from collegecms.client.resolver import (
    ContentForm,
    CoursePageContentResolver,
    Found,
    LocationContentResolver,
    NotFound,
    SectionContentResolver,
)
from collegecms.client.session import AdminSession, sign_in
from collegecms.client.workflow import CoursePageWorkflow, LocationContentWorkflow

__all__ = [
    "AdminApiClient",
    "ApiError",
    "AdminSession",
    "sign_in",
    "BannerEditor",
    "BannerFile",
    "ContentForm",
    "Found",
    "NotFound",
    "SectionKey",
    "CoursePageKey",
    "LocationKey",
    "SectionContentResolver",
    "CoursePageContentResolver",
    "LocationContentResolver",
    "CoursePageWorkflow",
    "LocationContentWorkflow",
    "Notifier",
    "LoggingNotifier",
    "Toast",
]

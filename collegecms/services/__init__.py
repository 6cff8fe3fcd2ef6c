"""Service layer package."""

from collegecms.services import (
    auth_service,
    directory_service,
    version_service,
    college_content_service,
    course_page_service,
    location_content_service,
)

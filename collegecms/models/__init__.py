"""SQLAlchemy model package."""

from collegecms.models.user import AdminUser
from collegecms.models.author import ContentAuthor
from collegecms.models.course_type import CourseType
from collegecms.models.college import College, CollegeCourseType
from collegecms.models.college_content import CollegeContent
from collegecms.models.course_page_content import CoursePageContent
from collegecms.models.location_content import CourseLocationContent
from collegecms.models.content_version import ContentVersion

__all__ = [
    "AdminUser",
    "ContentAuthor",
    "CourseType",
    "College", "CollegeCourseType",
    "CollegeContent",
    "CoursePageContent",
    "CourseLocationContent",
    "ContentVersion",
]

"""Seed the database with admins, authors, course types and colleges."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from collegecms.database import SessionLocal, engine, Base
import collegecms.models  # noqa: F401

from collegecms.models.author import ContentAuthor
from collegecms.models.college import College, CollegeCourseType
from collegecms.models.course_type import CourseType
from collegecms.models.user import AdminUser
from collegecms.utils.permissions import ADMIN, EDITOR, VIEWER


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(AdminUser).count() > 0:
            print("Database already seeded. Skipping.")
            return

        # Authors
        authors = [
            ContentAuthor(name="Priya Sharma", designation="Senior Education Writer"),
            ContentAuthor(name="Rahul Verma", designation="Admissions Analyst"),
        ]
        db.add_all(authors)
        db.flush()

        # Admin users
        users = [
            AdminUser(email="admin@collegecms.local", name="Site Admin", role=ADMIN,
                      author_id=authors[0].author_id),
            AdminUser(email="editor@collegecms.local", name="Content Editor", role=EDITOR,
                      author_id=authors[1].author_id),
            AdminUser(email="viewer@collegecms.local", name="Read Only", role=VIEWER),
        ]
        db.add_all(users)
        db.flush()

        # Course types
        course_types = [
            CourseType(slug="btech", name="BTech", full_name="Bachelor of Technology", display_order=1),
            CourseType(slug="mba", name="MBA", full_name="Master of Business Administration", display_order=2),
            CourseType(slug=None, name="B.Sc Nursing", full_name="Bachelor of Science in Nursing", display_order=3),
        ]
        db.add_all(course_types)
        db.flush()

        # Colleges
        colleges = [
            College(name="IIT Bombay", slug="iit-bombay", city="Mumbai", state="Maharashtra"),
            College(name="VJTI Mumbai", slug="vjti-mumbai", city="Mumbai", state="Maharashtra"),
            College(name="COEP Technological University", slug="coep-pune", city="Pune", state="Maharashtra"),
            College(name="Symbiosis Institute of Business Management", slug="sibm-pune",
                    city="Pune", state="Maharashtra"),
        ]
        db.add_all(colleges)
        db.flush()

        btech, mba = course_types[0], course_types[1]
        offerings = [
            CollegeCourseType(college_id=colleges[0].college_id, course_type_id=btech.course_type_id),
            CollegeCourseType(college_id=colleges[1].college_id, course_type_id=btech.course_type_id),
            CollegeCourseType(college_id=colleges[2].college_id, course_type_id=btech.course_type_id),
            CollegeCourseType(college_id=colleges[0].college_id, course_type_id=mba.course_type_id),
            CollegeCourseType(college_id=colleges[3].college_id, course_type_id=mba.course_type_id),
        ]
        db.add_all(offerings)

        db.commit()
        print("Seed data inserted successfully.")
        print(f"  Authors: {len(authors)}")
        print(f"  Course types: {len(course_types)}")
        print(f"  Colleges: {len(colleges)}")
        print()
        print("Test login emails:")
        for u in users:
            print(f"  email={u.email}  role={u.role}  name={u.name}")

    except Exception as e:
        db.rollback()
        raise e
    finally:
        db.close()


if __name__ == "__main__":
    seed()

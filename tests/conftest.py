import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from collegecms.database import Base, get_db
from collegecms.main import app
from collegecms.models.author import ContentAuthor
from collegecms.models.college import College, CollegeCourseType
from collegecms.models.course_type import CourseType
from collegecms.models.user import AdminUser
from collegecms.client.api import AdminApiClient
from collegecms.client.notify import LoggingNotifier
from collegecms.client.session import sign_in

TEST_DB_URL = "sqlite:///./test_collegecms.db"

engine = create_engine(TEST_DB_URL, connect_args={"check_same_thread": False})
TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    db = TestingSession()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_authors(db):
    authors = {
        "priya": ContentAuthor(name="Priya Sharma", designation="Senior Education Writer"),
        "rahul": ContentAuthor(name="Rahul Verma", designation="Admissions Analyst"),
        "retired": ContentAuthor(name="Old Author", is_active=False),
    }
    for a in authors.values():
        db.add(a)
    db.commit()
    for a in authors.values():
        db.refresh(a)
    return authors


@pytest.fixture
def seed_users(db, seed_authors):
    users = {
        "admin": AdminUser(email="admin@collegecms.local", name="Site Admin", role="admin",
                           author_id=seed_authors["priya"].author_id),
        "editor": AdminUser(email="editor@collegecms.local", name="Content Editor", role="editor",
                            author_id=seed_authors["rahul"].author_id),
        "viewer": AdminUser(email="viewer@collegecms.local", name="Read Only", role="viewer"),
        "inactive": AdminUser(email="gone@collegecms.local", name="Gone", role="editor", is_active=False),
    }
    for u in users.values():
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_catalog(db):
    btech = CourseType(slug="btech", name="BTech", full_name="Bachelor of Technology", display_order=1)
    mba = CourseType(slug="mba", name="MBA", full_name="Master of Business Administration", display_order=2)
    nursing = CourseType(slug=None, name="B.Sc Nursing", display_order=3)
    legacy = CourseType(slug="diploma", name="Diploma", status="inactive", display_order=4)
    db.add_all([btech, mba, nursing, legacy])
    db.flush()

    colleges = {
        "iitb": College(name="IIT Bombay", slug="iit-bombay", city="Mumbai", state="Maharashtra"),
        "vjti": College(name="VJTI Mumbai", slug="vjti-mumbai", city="Mumbai", state="Maharashtra"),
        "coep": College(name="COEP Technological University", slug="coep-pune", city="Pune", state="Maharashtra"),
        "closed": College(name="Closed College", slug="closed-college", city="Nagpur",
                          state="Maharashtra", status="inactive"),
    }
    db.add_all(colleges.values())
    db.flush()

    for college in colleges.values():
        db.add(CollegeCourseType(college_id=college.college_id, course_type_id=btech.course_type_id))
    db.add(CollegeCourseType(college_id=colleges["iitb"].college_id, course_type_id=mba.course_type_id))
    db.commit()
    for row in [btech, mba, nursing, legacy, *colleges.values()]:
        db.refresh(row)
    return {"btech": btech, "mba": mba, "nursing": nursing, "diploma": legacy, "colleges": colleges}


def get_token(client, email: str) -> str:
    resp = client.post("/api/v1/admin/auth/login", json={"email": email})
    assert resp.status_code == 200, resp.text
    return resp.json()["access_token"]


def auth_headers(client, email: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, email)}"}


@pytest.fixture
def api(client):
    """Admin API client talking to the app in-process."""
    return AdminApiClient(client)


@pytest.fixture
def editor_session(api, seed_users):
    return sign_in(api, "editor@collegecms.local")


@pytest.fixture
def notifier():
    return LoggingNotifier()

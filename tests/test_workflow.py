"""Course page and location page workflows, including the banner list."""

import shutil
from pathlib import Path
from uuid import uuid4

import httpx
import pytest

from collegecms.client import (
    AdminApiClient,
    BannerEditor,
    BannerFile,
    ContentForm,
    CoursePageWorkflow,
    Found,
    LocationContentWorkflow,
    LocationKey,
    NotFound,
)
from collegecms.config import settings

PNG = b"\x89PNG\r\n\x1a\n"


def _set_test_upload_dir(monkeypatch):
    test_upload_dir = Path("test_uploads_runtime") / uuid4().hex / "uploads"
    test_upload_dir.mkdir(parents=True, exist_ok=True)
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(test_upload_dir))
    return test_upload_dir


def _mock_api(handler):
    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://testserver")
    return AdminApiClient(http, token="test-token")


def _by_key(rows, key):
    return next(row for row in rows if row["course_type"] == key)


# ---- course pages ----

def test_course_page_workflow(api, editor_session, seed_catalog, notifier):
    workflow = CoursePageWorkflow(api, session=editor_session, notifier=notifier)
    assert not workflow.ready
    assert not workflow.save("draft")

    rows = workflow.load_course_types()
    assert [row["course_type"] for row in rows] == ["btech", "mba", "bscnursing"]

    assert isinstance(workflow.select_course_type(_by_key(rows, "bscnursing")), NotFound)
    assert workflow.ready
    assert workflow.form.title == "B.Sc Nursing Colleges in India 2027"
    assert workflow.can_save

    assert workflow.save("published")
    assert _by_key(workflow.course_types, "bscnursing")["has_content"] is True
    assert _by_key(workflow.course_types, "btech")["has_content"] is False

    assert isinstance(workflow.select_course_type(_by_key(workflow.course_types, "bscnursing")), Found)
    assert workflow.form.status == "published"


def test_course_page_directory_failure_degrades_to_empty(notifier):
    def handler(request):
        return httpx.Response(500, json={"success": False, "message": "Database unavailable"})

    workflow = CoursePageWorkflow(_mock_api(handler), notifier=notifier)
    assert workflow.load_course_types() == []
    assert notifier.toasts == []


# ---- location pages ----

def test_location_workflow_builds_key_and_creates_then_updates(api, editor_session, seed_catalog, notifier):
    workflow = LocationContentWorkflow(api, session=editor_session, notifier=notifier)
    course_types = workflow.load_course_types()
    assert [row["name"] for row in course_types] == ["BTech", "MBA", "B.Sc Nursing"]

    btech = next(row for row in course_types if row["slug"] == "btech")
    locations = workflow.select_course_type(btech)
    assert [row["slug"] for row in locations["cities"]] == ["mumbai", "pune"]
    assert workflow.options("state")[0]["name"] == "Maharashtra"
    assert workflow.key is None
    assert not workflow.ready

    mumbai = workflow.options("city")[0]
    assert mumbai["college_count"] == 2
    assert isinstance(workflow.select_location(mumbai, "city"), NotFound)
    assert workflow.key == LocationKey("btech", "city", "mumbai-colleges", "Mumbai")
    assert workflow.form.title == "BTech Colleges in Mumbai 2027"

    assert workflow.save("draft")
    assert workflow.options("city")[0]["has_content"] is True
    assert notifier.last.message == "Draft saved!"
    record = workflow.resolver.result.record
    assert record["location_slug"] == "mumbai-colleges"
    assert record["author_name"] == "Rahul Verma"

    workflow.resolver.update_field("title", "Top BTech Colleges in Mumbai")
    assert workflow.save("published")
    assert workflow.resolver.result.record["content_id"] == record["content_id"]
    assert workflow.resolver.status_label == "Published"

    versions = api.list_versions("location_content", record["content_id"])
    assert [row["change_type"] for row in versions] == ["update", "create"]


def test_changing_course_type_discards_location(api, editor_session, seed_catalog, notifier):
    workflow = LocationContentWorkflow(api, session=editor_session, notifier=notifier)
    course_types = workflow.load_course_types()
    workflow.select_course_type(course_types[0])
    workflow.select_location(workflow.options("city")[0])
    assert workflow.ready

    mba = next(row for row in course_types if row["slug"] == "mba")
    workflow.select_course_type(mba)
    assert not workflow.ready
    assert workflow.location is None
    assert workflow.key is None
    assert [row["college_count"] for row in workflow.options("city")] == [1]


def test_location_requires_course_type_first(api, editor_session, seed_catalog, notifier):
    workflow = LocationContentWorkflow(api, session=editor_session, notifier=notifier)
    with pytest.raises(ValueError):
        workflow.select_location({"slug": "mumbai", "name": "Mumbai"})
    workflow.select_course_type({"slug": "btech", "name": "BTech"})
    with pytest.raises(ValueError):
        workflow.select_location({"slug": "mumbai", "name": "Mumbai"}, "district")


def test_location_title_is_required(api, editor_session, seed_catalog, notifier):
    workflow = LocationContentWorkflow(api, session=editor_session, notifier=notifier)
    workflow.select_course_type({"slug": "btech", "name": "BTech"})
    workflow.select_location({"slug": "pune", "name": "Pune"})
    workflow.resolver.update_field("title", "")
    assert not workflow.can_save
    assert not workflow.save("draft")
    assert notifier.last.message == "Title is required"


def test_location_directory_failures_degrade_to_empty(notifier):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    workflow = LocationContentWorkflow(_mock_api(handler), notifier=notifier)
    assert workflow.load_course_types() == []
    assert workflow.select_course_type({"slug": "btech", "name": "BTech"}) == {"cities": [], "states": []}
    assert workflow.options("city") == []


# ---- banners ----

def test_banner_list_is_capped(api, editor_session, seed_catalog, notifier, monkeypatch):
    test_upload_dir = _set_test_upload_dir(monkeypatch)
    try:
        workflow = LocationContentWorkflow(api, session=editor_session, notifier=notifier)
        workflow.select_course_type({"slug": "btech", "name": "BTech"})
        workflow.select_location({"slug": "mumbai", "name": "Mumbai"})
        banners = workflow.resolver.banner_editor(clock=lambda: 1000.0)

        added = [banners.add(BannerFile(f"b{i}.png", PNG, "image/png")) for i in range(3)]
        assert [banner["id"] for banner in added] == [1000000, 1000001, 1000002]
        assert all(banner["image"].startswith("/uploads/banners/") for banner in added)
        assert not banners.can_add
        assert banners.add(BannerFile("b3.png", PNG, "image/png")) is None
        assert len(workflow.form.banners) == 3

        assert banners.update(1000001, "alt", "Campus")
        assert banners.update(1000001, "href", "https://example.com/admissions")
        assert not banners.update(42, "alt", "x")
        with pytest.raises(ValueError):
            banners.update(1000001, "image", "/elsewhere.png")
        assert banners.remove(1000000)
        assert not banners.remove(1000000)
        assert banners.can_add

        assert workflow.save("published")
        saved = workflow.resolver.result.record["banners"]
        assert [banner["id"] for banner in saved] == [1000001, 1000002]
        assert saved[0]["alt"] == "Campus"
        assert saved[0]["href"] == "https://example.com/admissions"
    finally:
        shutil.rmtree(test_upload_dir.parent.parent, ignore_errors=True)


def test_banner_upload_failure_leaves_list_unchanged(notifier):
    def handler(request):
        return httpx.Response(400, json={"success": False, "message": "File type 'bmp' not allowed"})

    form = ContentForm(banners=[{"id": 1, "image": "/uploads/banners/a.png", "alt": "", "href": ""}])
    banners = BannerEditor(form, _mock_api(handler), notifier=notifier)
    assert banners.add(BannerFile("x.bmp", b"BM")) is None
    assert len(form.banners) == 1
    assert notifier.last.message == "File type 'bmp' not allowed"
    assert not banners.uploading


def test_banner_upload_network_error_uses_fallback(notifier):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    form = ContentForm()
    banners = BannerEditor(form, _mock_api(handler), notifier=notifier)
    assert banners.add(BannerFile("x.png", PNG)) is None
    assert form.banners == []
    assert notifier.last.message == "Failed to upload banner image"


def test_banner_list_is_replaced_not_mutated(notifier):
    def handler(request):
        return httpx.Response(200, json={"success": True, "data": {"url": "/uploads/banners/new.png"}})

    form = ContentForm()
    original = form.banners
    banners = BannerEditor(form, _mock_api(handler), notifier=notifier, max_banners=1)
    banners.add(BannerFile("x.png", PNG))
    assert original == []
    assert form.banners[0]["image"] == "/uploads/banners/new.png"
    assert not banners.can_add

"""Content resolvers: load by key, edit as a form, save with an explicit status."""

import httpx
import pytest

from collegecms.client import (
    AdminApiClient,
    CoursePageContentResolver,
    Found,
    NotFound,
    SectionContentResolver,
)
from collegecms.client.keys import course_page_key, location_key
from collegecms.client.notify import LoggingNotifier
from collegecms.client.resolver import ContentForm


def _section(api, seed_catalog, session, notifier, college="iitb", section="placement"):
    college_row = seed_catalog["colleges"][college]
    return SectionContentResolver(
        api,
        college_row.college_id,
        section,
        college_name=college_row.name,
        session=session,
        notifier=notifier,
    )


def _mock_api(handler):
    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://testserver")
    return AdminApiClient(http, token="test-token")


def test_missing_section_loads_defaults(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    result = resolver.load()

    assert isinstance(result, NotFound)
    assert not resolver.exists
    assert resolver.form == ContentForm(title="IIT Bombay Placements")
    assert resolver.status_label == "Draft"
    assert resolver.updated_label == ""
    assert resolver.can_save
    assert notifier.toasts == []


def test_save_publish_then_draft(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    resolver.load()
    editor = resolver.open_editor()
    editor.insert_text("Median package 21 LPA")
    editor.select_all()
    editor.toggle_bold()
    assert resolver.form.body == "<p><strong>Median package 21 LPA</strong></p>"

    assert resolver.save("published")
    assert isinstance(resolver.result, Found)
    assert resolver.status_label == "Published"
    assert notifier.last.message == "Content published!"
    assert resolver.updated_label.startswith("Updated: ")

    assert resolver.save("draft")
    assert resolver.status_label == "Draft"
    assert notifier.messages("success") == ["Content published!", "Draft saved!"]

    reloaded = _section(api, seed_catalog, editor_session, notifier)
    assert isinstance(reloaded.load(), Found)
    assert reloaded.form.body == editor.get_html()
    assert reloaded.form.status == "draft"
    assert reloaded.open_editor().get_html() == editor.get_html()


def test_record_without_author_is_not_credited_to_the_viewer(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    resolver.load()
    assert resolver.save("draft")
    assert resolver.form.author_id == ""
    assert resolver.updated_label.startswith("Updated: ")
    assert "by" not in resolver.updated_label

    fresh = _section(api, seed_catalog, editor_session, notifier)
    assert isinstance(fresh.load(), Found)
    assert fresh.updated_label.startswith("Updated: ")
    assert "by" not in fresh.updated_label


def test_status_badge_follows_the_saved_record(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    resolver.load()
    resolver.update_field("status", "published")
    assert resolver.status_label == "Draft"

    assert resolver.save("draft")
    resolver.update_field("status", "published")
    assert resolver.status_label == "Draft"

    assert resolver.save("published")
    assert resolver.status_label == "Published"
    reloaded = _section(api, seed_catalog, editor_session, notifier)
    reloaded.load()
    assert reloaded.status_label == "Published"


def test_saved_nulls_load_as_empty_strings(client, api, editor_session, seed_catalog, notifier):
    college_id = seed_catalog["colleges"]["coep"].college_id
    client.put(
        f"/api/v1/admin/colleges/{college_id}/content/overview",
        headers={"Authorization": f"Bearer {api.token}"},
        json={"title": None, "content": "<p>x</p>", "meta_title": None},
    )
    resolver = _section(api, seed_catalog, editor_session, notifier, college="coep", section="overview")
    assert isinstance(resolver.load(), Found)
    assert resolver.form.title == ""
    assert resolver.form.meta_title == ""
    assert resolver.form.author_id == ""


def test_section_title_is_optional(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    resolver.load()
    resolver.update_field("title", "")
    assert resolver.can_save
    assert resolver.save("draft")


def test_server_error_message_is_shown(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    resolver.load()
    resolver.update_field("author_id", 4242)
    assert not resolver.save("published")
    assert notifier.last.kind == "error"
    assert notifier.last.message == "Selected author does not exist"
    assert not resolver.exists
    assert not resolver.saving


def test_save_failure_without_message_uses_fallback(notifier):
    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json={"success": True, "data": {"content": None}})
        return httpx.Response(502, text="Bad Gateway")

    resolver = SectionContentResolver(_mock_api(handler), 1, "overview", college_name="IIT Bombay", notifier=notifier)
    resolver.load()
    assert not resolver.save("draft")
    assert notifier.last.message == "Failed to save content"


def test_unreachable_backend_loads_as_not_found(notifier):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    resolver = SectionContentResolver(_mock_api(handler), 1, "overview", college_name="IIT Bombay", notifier=notifier)
    assert isinstance(resolver.load(), NotFound)
    assert resolver.form.title == "IIT Bombay Overview"
    assert resolver.load_authors() == []
    assert notifier.toasts == []


def test_save_rules(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    with pytest.raises(ValueError):
        resolver.save("archived")
    assert not resolver.save("draft")

    resolver.load()
    resolver.saving = True
    assert not resolver.can_save
    assert not resolver.save("draft")
    resolver.saving = False

    resolver.update_field("meta_title", "t" * 201)
    assert not resolver.save("draft")
    assert notifier.last.message == "Meta title must be 200 characters or fewer"

    with pytest.raises(ValueError):
        resolver.update_field("colour", "red")


def test_seo_hints(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    resolver.load()
    resolver.update_field("meta_title", "IIT Bombay Placements 2027")
    assert resolver.seo_hints() == {
        "meta_title": "26/60 characters",
        "meta_description": "0/160 characters",
    }


def test_author_options(api, editor_session, seed_catalog, notifier):
    resolver = _section(api, seed_catalog, editor_session, notifier)
    assert [row["name"] for row in resolver.load_authors()] == ["Priya Sharma", "Rahul Verma"]


def test_course_page_requires_title(api, editor_session, seed_catalog, notifier):
    resolver = CoursePageContentResolver(
        api, "btech", display_name="Bachelor of Technology", session=editor_session, notifier=notifier,
    )
    assert isinstance(resolver.load(), NotFound)
    assert resolver.form.title == "Bachelor of Technology Colleges in India 2027"
    assert resolver.extras == {"intro_text": "", "key_points": [], "table_of_contents": [], "highlights_data": {}}

    resolver.update_field("title", "   ")
    assert not resolver.can_save
    assert not resolver.save("published")
    assert notifier.messages("error") == ["Title is required"]
    assert api.list_versions("course_page_content", 1) == []


def test_course_page_assigns_session_author(api, editor_session, seed_users, seed_catalog, notifier):
    resolver = CoursePageContentResolver(
        api, "btech", display_name="Bachelor of Technology", session=editor_session, notifier=notifier,
    )
    resolver.load()
    resolver.update_field("key_points", ["JEE Main accepted"])
    resolver.update_field("intro_text", "Engineering colleges")
    assert resolver.save("draft")

    assert resolver.form.author_id == seed_users["editor"].author_id
    assert resolver.updated_label.endswith("by Rahul Verma")

    reloaded = CoursePageContentResolver(api, "btech", display_name="Bachelor of Technology", notifier=notifier)
    reloaded.load()
    assert reloaded.form.author_id == seed_users["editor"].author_id
    assert reloaded.extras["key_points"] == ["JEE Main accepted"]
    assert reloaded.extras["intro_text"] == "Engineering colleges"


def test_explicit_author_is_kept(api, editor_session, seed_users, seed_catalog, notifier):
    resolver = CoursePageContentResolver(
        api, "mba", display_name="Master of Business Administration", session=editor_session, notifier=notifier,
    )
    resolver.load()
    resolver.update_field("author_id", str(seed_users["admin"].author_id))
    assert resolver.save("published")
    assert resolver.result.record["author_name"] == "Priya Sharma"


def test_content_keys():
    assert course_page_key({"slug": "btech", "name": "BTech"}).course_type == "btech"
    assert course_page_key({"slug": None, "name": "B.Sc Nursing"}).course_type == "bscnursing"
    key = location_key({"slug": "btech"}, {"slug": "navi-mumbai", "name": "Navi Mumbai"}, "city")
    assert key.course_type == "btech"
    assert key.location_slug == "navi-mumbai-colleges"
    assert key.location_name == "Navi Mumbai"


def test_logging_notifier_keeps_order():
    notifier = LoggingNotifier()
    notifier.success("a")
    notifier.error("b")
    assert notifier.messages() == ["a", "b"]
    assert notifier.messages("error") == ["b"]
    assert notifier.last.kind == "error"

"""Author and course type pickers."""

from tests.conftest import auth_headers


def test_authors_list_has_active_authors_only(client, seed_users):
    headers = auth_headers(client, "editor@collegecms.local")
    resp = client.get("/api/v1/admin/authors/list", headers=headers)
    assert resp.status_code == 200
    names = [row["name"] for row in resp.json()["data"]]
    assert names == ["Priya Sharma", "Rahul Verma"]
    assert set(resp.json()["data"][0]) == {"id", "name"}


def test_course_types_filtered_by_status(client, seed_users, seed_catalog):
    headers = auth_headers(client, "editor@collegecms.local")

    resp = client.get("/api/v1/admin/course-types", headers=headers, params={"status": "active"})
    assert resp.status_code == 200
    names = [row["name"] for row in resp.json()["data"]]
    assert names == ["BTech", "MBA", "B.Sc Nursing"]

    resp = client.get("/api/v1/admin/course-types", headers=headers)
    assert len(resp.json()["data"]) == 4


def test_course_types_rejects_unknown_status(client, seed_users, seed_catalog):
    headers = auth_headers(client, "editor@collegecms.local")
    resp = client.get("/api/v1/admin/course-types", headers=headers, params={"status": "archived"})
    assert resp.status_code == 400
    assert "archived" in resp.json()["message"]


def test_section_options(client, seed_users):
    headers = auth_headers(client, "viewer@collegecms.local")
    resp = client.get("/api/v1/admin/content/sections", headers=headers)
    assert resp.status_code == 200
    sections = {row["value"]: row["label"] for row in resp.json()["data"]}
    assert sections["overview"] == "Overview"
    assert sections["placement"] == "Placements"

"""
Tests for the console API served to the browser, wired to the in-memory backend.
"""

import asyncio

import httpx
import pytest
from fastapi.testclient import TestClient

from cms_console.main import create_app


@pytest.fixture
def api(client):
    return TestClient(create_app(client=client))


def test_root(api):
    assert api.get("/").json()["message"] == "CMS Console is running"


def test_dashboard(api):
    body = api.get("/console/dashboard").json()
    assert body["counts"] == {"courses": 3, "users": 3, "professors": 3}
    assert [s["name"] for s in body["coursesByCategory"]] == ["Foundations", "DevOps", "General"]
    assert {r["id"]: r["usersCount"] for r in body["usersPerCourse"]} == {1: 1, 2: 2, 3: 0}
    assert body["recentCourses"][-1]["professorName"] == "Dr. Carol Williams"


def test_course_rows_resolve_names_and_categories(api):
    rows = api.get("/console/courses").json()
    assert rows[2]["displayCategory"] == "General"
    assert rows[2]["category"] is None
    assert rows[0]["professorName"] == "Dr. Bob Johnson"

    assert [r["id"] for r in api.get("/console/courses", params={"q": "sql"}).json()] == [3]
    assert [r["id"] for r in api.get("/console/courses", params={"professorId": "1"}).json()] == [2]


def test_create_and_edit_course(api):
    response = api.post("/console/courses", json={"title": "Systems", "authorId": "3", "category": ""})
    assert response.status_code == 201
    created = response.json()
    assert created["authorId"] == 3

    response = api.put(f"/console/courses/{created['id']}", json={"description": "Kernels"})
    assert response.status_code == 200
    row = next(r for r in api.get("/console/courses").json() if r["id"] == created["id"])
    assert row["description"] == "Kernels"
    assert (row["title"], row["authorId"], row["category"]) == ("Systems", 3, "")
    assert row["displayCategory"] == "General"


def test_missing_required_fields(api):
    response = api.post("/console/courses", json={"title": "", "authorId": ""})
    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "Title and Professor are required!"
    assert body["fields"] == ["title", "authorId"]


def test_delete_requires_confirmation(api, backend):
    response = api.delete("/console/users/1")
    assert response.status_code == 409
    assert response.json()["error"] == "Cancelled"
    assert backend.state.catalog.users.get_by_id(1) is not None

    assert api.delete("/console/users/1", params={"confirm": "true"}).status_code == 204
    assert backend.state.catalog.users.get_by_id(1) is None


def test_edit_unknown_entity_is_404(api):
    response = api.put("/console/professors/99", json={"name": "Nobody"})
    assert response.status_code == 404
    assert response.json()["message"] == "Professor 99 not found"


def test_professor_crud(api):
    response = api.post("/console/professors", json={
        "name": "Dr. New",
        "skills": ["ML", " "],
        "publications": [{"title": "A", "year": "2020"}, {"title": "A", "year": "2021"}],
    })
    assert response.status_code == 201
    professor = response.json()
    assert professor["publications"] == {"A": "2021"}
    assert professor["skills"] == ["ML"]

    rows = api.get("/console/professors").json()
    assert rows[-1]["initials"] == "DR"

    response = api.put(f"/console/professors/{professor['id']}", json={"bio": "Machine learning"})
    assert response.json()["publications"] == {"A": "2021"}
    assert response.json()["bio"] == "Machine learning"


def test_toggle_enrolment(api):
    first = api.post("/console/users/3/courses/2/toggle").json()
    assert first["courseIds"] == [2]
    second = api.post("/console/users/3/courses/2/toggle").json()
    assert second["courseIds"] == []
    rows = api.get("/console/users").json()
    assert rows[2]["enrolledCount"] == 0


def test_backend_unreachable(recorder, recorded_client):
    recorder.responses[("GET", "/users")] = httpx.ConnectError
    api = TestClient(create_app(client=recorded_client))
    response = api.get("/console/users")
    assert response.status_code == 503
    assert response.json()["error"] == "Network Error"


def test_malformed_sub_lists_are_validation_errors(api):
    response = api.post("/console/professors", json={"name": "X", "publications": ["A"]})
    assert response.status_code == 422
    assert response.json()["fields"] == ["publications"]
    assert api.post("/console/users", json={"name": "N", "email": "e", "courseIds": None}).status_code == 422


@pytest.mark.anyio
@pytest.mark.parametrize("edit_first", [True, False])
async def test_concurrent_create_and_edit_stay_separate(client, backend, edit_first):
    console_app = create_app(client=client)
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=console_app), base_url="http://console") as http:
        edit = http.put("/console/courses/1", json={"description": "edited1"})
        create = http.post("/console/courses", json={"title": "New", "authorId": 1})
        first, second = (edit, create) if edit_first else (create, edit)
        responses = await asyncio.gather(first, second)

    assert [r.status_code for r in responses] == ([200, 201] if edit_first else [201, 200])
    courses = backend.state.catalog.courses
    edited = courses.get_by_id(1)
    assert (edited.title, edited.description) == ("Introduction to Computer Science", "edited1")
    created = courses.get_by_id(4)
    assert (created.title, created.author_id, created.description) == ("New", 1, "")
    assert len(courses.get_all()) == 4

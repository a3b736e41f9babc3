"""HTTP boundary — requester identity, status mapping, response shapes."""

from codify.models.favorites import UserFavorite
from codify.models.project import Project
from codify.models.user import User


def as_user(user_id: int) -> dict:
    return {"X-Requester-Id": str(user_id)}


async def _create_project(client, user_id=1, technologies=(10,)):
    resp = await client.post(
        "/api/v1/projects",
        json={
            "user_id": user_id,
            "name": "Alpha",
            "description": "first",
            "technologies": list(technologies),
        },
        headers=as_user(user_id),
    )
    assert resp.status_code == 201
    return resp.json()["project_id"]


# ─── identity ────────────────────────────────────────────────────

async def test_missing_requester_header_is_unauthorized(client, seed):
    resp = await client.post(
        "/api/v1/projects", json={"user_id": 1, "name": "Alpha"},
    )
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "UNAUTHORIZED_ACTOR"


async def test_acting_as_another_user_is_unauthorized(client, seed, count_rows):
    resp = await client.post(
        "/api/v1/projects",
        json={"user_id": 2, "name": "Alpha"},
        headers=as_user(1),
    )
    assert resp.status_code == 401
    assert await count_rows(Project) == 0


async def test_non_creator_edit_is_unauthorized(client, seed):
    project_id = await _create_project(client)
    resp = await client.patch(
        f"/api/v1/projects/{project_id}",
        json={"user_id": 2, "name": "Hijacked", "technologies": []},
        headers=as_user(2),
    )
    assert resp.status_code == 401


# ─── projects ────────────────────────────────────────────────────

async def test_create_edit_and_read_project(client, seed):
    project_id = await _create_project(client, technologies=(11, 10, 11))

    resp = await client.get(f"/api/v1/projects/{project_id}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Alpha"
    assert body["creator_name"] == "Ada"
    assert [t["id"] for t in body["technologies"]] == [10, 11]

    resp = await client.patch(
        f"/api/v1/projects/{project_id}",
        json={"user_id": 1, "name": "Alpha v2", "technologies": [12]},
        headers=as_user(1),
    )
    assert resp.json() == {"project_edited": True}

    resp = await client.get("/api/v1/projects/by-user/1")
    [project] = resp.json()
    assert project["name"] == "Alpha v2"
    assert [t["name"] for t in project["technologies"]] == ["Rust"]


async def test_unknown_technology_is_not_found(client, seed, count_rows):
    resp = await client.post(
        "/api/v1/projects",
        json={"user_id": 1, "name": "Alpha", "technologies": [999]},
        headers=as_user(1),
    )
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert await count_rows(Project) == 0


async def test_blank_name_is_validation_error(client, seed):
    resp = await client.post(
        "/api/v1/projects",
        json={"user_id": 1, "name": "   "},
        headers=as_user(1),
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_delete_project(client, seed, count_rows):
    project_id = await _create_project(client)
    resp = await client.request(
        "DELETE", f"/api/v1/projects/{project_id}",
        json={"user_id": 1}, headers=as_user(1),
    )
    assert resp.json() == {"project_deleted": True}
    assert await count_rows(Project) == 0


async def test_missing_project_is_not_found(client, seed):
    resp = await client.get("/api/v1/projects/404")
    assert resp.status_code == 404


async def test_technology_catalog(client, seed):
    resp = await client.get("/api/v1/projects/technologies")
    assert [t["name"] for t in resp.json()] == ["Python", "SQL", "Rust"]


# ─── favorites ───────────────────────────────────────────────────

async def test_self_favorite_is_unprocessable(client, seed, count_rows):
    resp = await client.post(
        "/api/v1/favorites/users/1", json={"user_id": 1}, headers=as_user(1),
    )
    assert resp.status_code == 422
    assert resp.json()["error"]["code"] == "SELF_REFERENCE"
    assert await count_rows(UserFavorite) == 0


async def test_duplicate_favorite_is_conflict(client, seed):
    first = await client.post(
        "/api/v1/favorites/users/2", json={"user_id": 1}, headers=as_user(1),
    )
    second = await client.post(
        "/api/v1/favorites/users/2", json={"user_id": 1}, headers=as_user(1),
    )
    assert first.status_code == 201
    assert second.status_code == 409
    assert second.json()["error"]["category"] == "conflict"


async def test_favorite_check_and_remove(client, seed):
    await client.post(
        "/api/v1/favorites/users/2", json={"user_id": 1}, headers=as_user(1),
    )
    resp = await client.post(
        "/api/v1/favorites/users/2/check", json={"user_id": 1}, headers=as_user(1),
    )
    assert resp.json() == {"is_favorite": True}

    resp = await client.request(
        "DELETE", "/api/v1/favorites/users/2",
        json={"user_id": 1}, headers=as_user(1),
    )
    assert resp.json() == {"user_removed": True}

    resp = await client.request(
        "DELETE", "/api/v1/favorites/users/2",
        json={"user_id": 1}, headers=as_user(1),
    )
    assert resp.status_code == 404


async def test_project_favorite_listing(client, seed):
    project_id = await _create_project(client)
    resp = await client.post(
        f"/api/v1/favorites/projects/{project_id}",
        json={"user_id": 2}, headers=as_user(2),
    )
    assert resp.status_code == 201

    resp = await client.get(
        "/api/v1/favorites/project-ids/2", headers=as_user(2),
    )
    assert resp.json() == {"project_ids": [project_id]}

    resp = await client.get("/api/v1/favorites/projects/2")
    assert [p["id"] for p in resp.json()] == [project_id]


# ─── users ───────────────────────────────────────────────────────

async def test_signup_creates_user(client, seed):
    resp = await client.post(
        "/api/v1/users",
        json={"email": "alan@example.com", "name": "Alan", "password_hash": "h"},
    )
    assert resp.status_code == 201
    user_id = resp.json()["user_id"]

    resp = await client.get(f"/api/v1/users/{user_id}")
    assert resp.json()["name"] == "Alan"


async def test_signup_with_taken_email_is_conflict(client, seed, count_rows):
    resp = await client.post(
        "/api/v1/users",
        json={"email": "ada@example.com", "name": "Ada 2", "password_hash": "h"},
    )
    assert resp.status_code == 409
    assert await count_rows(User) == 3


async def test_delete_user_cascades(client, seed, count_rows):
    project_id = await _create_project(client)
    await client.post(
        f"/api/v1/favorites/projects/{project_id}",
        json={"user_id": 2}, headers=as_user(2),
    )

    resp = await client.request(
        "DELETE", "/api/v1/users/1", json={"user_id": 1}, headers=as_user(1),
    )
    assert resp.status_code == 200
    assert resp.json() == {"user_deleted": True}
    assert await count_rows(User, User.id == 1) == 0
    assert await count_rows(Project) == 0

    resp = await client.get("/api/v1/favorites/projects/2")
    assert resp.json() == []


async def test_delete_other_user_is_unauthorized(client, seed, count_rows):
    resp = await client.request(
        "DELETE", "/api/v1/users/2", json={"user_id": 2}, headers=as_user(1),
    )
    assert resp.status_code == 401
    assert await count_rows(User, User.id == 2) == 1


async def test_edit_user_to_taken_email_is_conflict(client, seed):
    resp = await client.patch(
        "/api/v1/users/1",
        json={"user_id": 1, "name": "Ada", "email": "grace@example.com"},
        headers=as_user(1),
    )
    assert resp.status_code == 409


async def test_user_profile_and_email_exists(client, seed):
    resp = await client.get("/api/v1/users/2")
    assert resp.json()["name"] == "Grace"
    assert resp.json()["projects_count"] == 0

    resp = await client.get(
        "/api/v1/users/email-exists", params={"email": "ada@example.com"},
    )
    assert resp.json() == {"email_exists": True}


async def test_liveness_reports_healthy(client):
    resp = await client.get("/api/v1/health/")
    assert resp.json()["status"] == "healthy"


async def test_readiness_without_pool_is_unavailable(client):
    resp = await client.get("/api/v1/health/ready")
    assert resp.status_code == 503

from datetime import datetime, timedelta, timezone

import pytest

USERS = "/api/v1/users"
PROJECTS = "/api/v1/projects"
APPLICATIONS = "/api/v1/applications"
REVIEWS = "/api/v1/reviews"


def _as(user_id):
    return {"X-User-Id": user_id}


@pytest.fixture
def people(client):
    ids = {}
    for name in ("owner", "alice", "bob", "carol"):
        response = client.post(USERS, json={"name": name.title(), "email": f"{name}@example.com"})
        assert response.status_code == 201, response.text
        ids[name] = response.json()["data"]["id"]
    return ids


@pytest.fixture
def project(client, people):
    response = client.post(
        PROJECTS,
        headers=_as(people["owner"]),
        json={
            "title": "Trail map",
            "description": "Offline maps for hikers",
            "category": "mobile-development",
            "max_team_size": 2,
            "required_skills": [{"name": "Kotlin"}],
        },
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


def _add(client, project_id, user_id, owner_id, role="dev"):
    return client.post(f"{PROJECTS}/{project_id}/team", headers=_as(owner_id), json={"user_id": user_id, "role": role})


def _application_payload(project_id):
    start = (datetime.now(timezone.utc) + timedelta(days=7)).isoformat()
    return {
        "project_id": project_id,
        "cover_letter": "I have shipped two map apps",
        "proposed_role": "Mobile developer",
        "availability": {"hours_per_week": 10, "start_date": start},
    }


def _review_payload(project_id, reviewee_id, rating=4, **extra):
    payload = {
        "project_id": project_id,
        "reviewee_id": reviewee_id,
        "rating": rating,
        "title": "Solid teammate",
        "comment": "Delivered what was promised",
    }
    payload.update(extra)
    return payload


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

def test_user_profile_and_completion(client, people):
    body = client.get(f"{USERS}/{people['alice']}").json()
    assert body["data"]["name"] == "Alice"
    assert body["data"]["profile_completion"] == 38

    me = client.get(f"{USERS}/me", headers=_as(people["alice"])).json()
    assert me["data"]["id"] == people["alice"]


def test_duplicate_user_email_is_409(client, people):
    response = client.post(USERS, json={"name": "Other", "email": "alice@example.com"})
    assert response.status_code == 409


def test_users_change_only_themselves(client, people):
    response = client.put(f"{USERS}/{people['alice']}", headers=_as(people["bob"]), json={"bio": "Hacked"})
    assert response.status_code == 403
    assert response.json()["error"] == "authorization_denied"

    response = client.put(f"{USERS}/{people['alice']}", headers=_as(people["alice"]), json={"bio": "Maps"})
    assert response.status_code == 200
    assert response.json()["data"]["bio"] == "Maps"

    assert client.delete(f"{USERS}/{people['alice']}", headers=_as(people["bob"])).status_code == 403
    assert client.delete(f"{USERS}/{people['alice']}", headers=_as(people["alice"])).status_code == 200


def test_writes_need_an_identity(client, people):
    response = client.post(
        PROJECTS,
        json={"title": "Anon", "description": "No owner", "category": "other"},
    )
    assert response.status_code == 403
    assert response.json()["error"] == "authorization_denied"

    response = client.post(
        PROJECTS,
        headers=_as("nobody"),
        json={"title": "Anon", "description": "No owner", "category": "other"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_reference"


# ---------------------------------------------------------------------------
# Projects and teams
# ---------------------------------------------------------------------------

def test_team_capacity_over_http(client, people, project):
    owner = people["owner"]
    assert _add(client, project["id"], people["alice"], owner).status_code == 200
    assert _add(client, project["id"], people["bob"], owner).status_code == 200

    response = _add(client, project["id"], people["carol"], owner)
    assert response.status_code == 409
    assert response.json()["error"] == "capacity_exhausted"

    response = _add(client, project["id"], people["alice"], owner)
    assert response.status_code == 409

    response = client.delete(f"{PROJECTS}/{project['id']}/team/{people['alice']}", headers=_as(owner))
    assert response.status_code == 200
    assert response.json()["data"]["current_team_size"] == 1

    response = _add(client, project["id"], people["carol"], owner)
    data = response.json()["data"]
    assert response.status_code == 200
    assert data["current_team_size"] == 2
    assert data["available_spots"] == 0
    assert len(data["team_members"]) == 3


def test_non_owner_cannot_manage_team(client, people, project):
    response = _add(client, project["id"], people["bob"], people["alice"])
    assert response.status_code == 403

    response = client.delete(f"{PROJECTS}/{project['id']}/team/{people['bob']}", headers=_as(people["owner"]))
    assert response.status_code == 409
    assert response.json()["error"] == "not_an_active_member"


def test_team_role_is_trimmed_and_must_not_be_blank(client, people, project):
    response = _add(client, project["id"], people["alice"], people["owner"], role="   ")
    assert response.status_code == 422

    response = _add(client, project["id"], people["alice"], people["owner"], role="  Designer ")
    assert response.status_code == 200
    assert response.json()["data"]["team_members"][0]["role"] == "Designer"


def test_fetching_a_project_counts_views(client, project):
    client.get(f"{PROJECTS}/{project['id']}")
    body = client.get(f"{PROJECTS}/{project['id']}").json()
    assert body["data"]["views"] == 2


def test_list_projects_filters(client, people, project):
    body = client.get(PROJECTS, params={"skills": "Kotlin"}).json()
    assert [p["id"] for p in body["data"]] == [project["id"]]

    assert client.get(PROJECTS, params={"skills": "Rust"}).json()["pagination"]["total"] == 0
    assert client.get(PROJECTS, params={"status": "planning"}).json()["pagination"]["total"] == 1

    mine = client.get(f"{PROJECTS}/mine", headers=_as(people["owner"])).json()
    assert mine["pagination"]["total"] == 1


def test_stats_endpoints(client, people, project):
    assert client.get(f"{PROJECTS}/stats").status_code == 403

    body = client.get(f"{PROJECTS}/stats", headers=_as(people["alice"])).json()
    assert body["data"]["total_projects"] == 1
    assert body["data"]["by_status"] == {"planning": 1}
    assert body["data"]["by_category"] == {"mobile-development": 1}
    assert body["data"]["top_technologies"] == []

    body = client.get(f"{USERS}/stats", headers=_as(people["alice"])).json()
    assert body["data"]["available_users"] == 4
    assert body["data"]["by_experience_level"] == {"junior": 4}


def test_update_and_cancel_project(client, people, project):
    owner = people["owner"]
    response = client.put(f"{PROJECTS}/{project['id']}", headers=_as(people["alice"]), json={"title": "Stolen"})
    assert response.status_code == 403

    response = client.put(f"{PROJECTS}/{project['id']}", headers=_as(owner), json={"status": "open"})
    assert response.json()["data"]["status"] == "open"

    response = client.delete(f"{PROJECTS}/{project['id']}", headers=_as(owner))
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cancelled"


def test_timeline_order_is_validated(client, people):
    response = client.post(
        PROJECTS,
        headers=_as(people["owner"]),
        json={
            "title": "Backwards",
            "description": "Ends before it starts",
            "category": "other",
            "timeline": {"start_date": "2025-06-01T00:00:00Z", "end_date": "2025-01-01T00:00:00Z"},
        },
    )
    assert response.status_code == 422


# ---------------------------------------------------------------------------
# Applications
# ---------------------------------------------------------------------------

def test_application_lifecycle(client, people, project):
    response = client.post(APPLICATIONS, headers=_as(people["alice"]), json=_application_payload(project["id"]))
    assert response.status_code == 201, response.text
    application = response.json()["data"]
    assert application["status"] == "pending"
    assert application["applicant_id"] == people["alice"]

    response = client.post(APPLICATIONS, headers=_as(people["alice"]), json=_application_payload(project["id"]))
    assert response.status_code == 409
    assert response.json()["error"] == "already_applied"

    received = client.get(f"{APPLICATIONS}/project/{project['id']}", headers=_as(people["owner"])).json()
    assert received["pagination"]["total"] == 1
    assert client.get(f"{APPLICATIONS}/project/{project['id']}", headers=_as(people["alice"])).status_code == 403

    mine = client.get(f"{APPLICATIONS}/mine", headers=_as(people["alice"])).json()
    assert [a["id"] for a in mine["data"]] == [application["id"]]

    status_url = f"{APPLICATIONS}/{application['id']}/status"
    assert client.put(status_url, headers=_as(people["alice"]), json={"status": "accepted"}).status_code == 403

    response = client.put(status_url, headers=_as(people["owner"]), json={"status": "accepted", "review_notes": "Welcome"})
    assert response.status_code == 200
    assert response.json()["data"]["reviewed_by"] == people["owner"]

    response = client.put(status_url, headers=_as(people["owner"]), json={"status": "rejected"})
    assert response.status_code == 409
    assert response.json()["error"] == "invalid_status_transition"


def test_pending_is_not_a_target_status(client, people, project):
    created = client.post(APPLICATIONS, headers=_as(people["alice"]), json=_application_payload(project["id"]))
    application_id = created.json()["data"]["id"]
    response = client.put(
        f"{APPLICATIONS}/{application_id}/status", headers=_as(people["owner"]), json={"status": "pending"}
    )
    assert response.status_code == 422


def test_applicant_edits_and_deletes(client, people, project):
    created = client.post(APPLICATIONS, headers=_as(people["alice"]), json=_application_payload(project["id"]))
    application_id = created.json()["data"]["id"]

    response = client.put(
        f"{APPLICATIONS}/{application_id}", headers=_as(people["alice"]), json={"proposed_role": "Tech lead"}
    )
    assert response.status_code == 200
    assert response.json()["data"]["proposed_role"] == "Tech lead"

    assert client.delete(f"{APPLICATIONS}/{application_id}", headers=_as(people["bob"])).status_code == 403
    assert client.delete(f"{APPLICATIONS}/{application_id}", headers=_as(people["alice"])).status_code == 200
    assert client.get(f"{APPLICATIONS}/{application_id}", headers=_as(people["alice"])).status_code == 404


# ---------------------------------------------------------------------------
# Reviews
# ---------------------------------------------------------------------------

def test_review_rules_over_http(client, people, project):
    owner = people["owner"]
    _add(client, project["id"], people["alice"], owner)
    _add(client, project["id"], people["bob"], owner)

    response = client.post(REVIEWS, headers=_as(owner), json=_review_payload(project["id"], people["alice"], 5))
    assert response.status_code == 201, response.text
    review = response.json()["data"]

    response = client.post(REVIEWS, headers=_as(owner), json=_review_payload(project["id"], people["bob"]))
    assert response.status_code == 409
    assert response.json()["error"] == "already_reviewed"

    response = client.post(REVIEWS, headers=_as(people["alice"]), json=_review_payload(project["id"], people["alice"]))
    assert response.status_code == 400
    assert response.json()["error"] == "validation_failed"

    response = client.post(REVIEWS, headers=_as(people["carol"]), json=_review_payload(project["id"], people["alice"]))
    assert response.status_code == 403

    response = client.put(
        f"{REVIEWS}/{review['id']}", headers=_as(owner), json={"reviewee_id": people["bob"]}
    )
    assert response.status_code == 400

    response = client.post(f"{REVIEWS}/{review['id']}/response", headers=_as(people["alice"]), json={"content": "Thanks!"})
    assert response.status_code == 200
    assert response.json()["data"]["response"]["content"] == "Thanks!"

    response = client.post(f"{REVIEWS}/{review['id']}/helpful", headers=_as(people["bob"]))
    assert response.json()["data"]["helpful_count"] == 1


def test_user_reviews_include_stats(client, people, project):
    owner = people["owner"]
    _add(client, project["id"], people["alice"], owner)
    _add(client, project["id"], people["bob"], owner)
    client.post(REVIEWS, headers=_as(owner), json=_review_payload(project["id"], people["alice"], 5))
    client.post(REVIEWS, headers=_as(people["bob"]), json=_review_payload(project["id"], people["alice"], 3))

    body = client.get(f"{REVIEWS}/user/{people['alice']}").json()

    assert body["success"] is True
    assert body["stats"] == {"avg_rating": 4.0, "total_reviews": 2}
    assert body["pagination"]["total"] == 2
    assert client.get(f"{REVIEWS}/project/{project['id']}").json()["pagination"]["total"] == 2


def test_private_review_visibility(client, people, project):
    owner = people["owner"]
    _add(client, project["id"], people["alice"], owner)
    created = client.post(
        REVIEWS, headers=_as(owner), json=_review_payload(project["id"], people["alice"], is_public=False)
    )
    review_id = created.json()["data"]["id"]

    assert client.get(f"{REVIEWS}/{review_id}").status_code == 403
    assert client.get(f"{REVIEWS}/{review_id}", headers=_as(people["bob"])).status_code == 403
    assert client.get(f"{REVIEWS}/{review_id}", headers=_as(people["alice"])).status_code == 200
    assert client.get(REVIEWS).json()["pagination"]["total"] == 0

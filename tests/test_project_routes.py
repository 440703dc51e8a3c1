from bson import ObjectId
from fastapi.testclient import TestClient

import database
from conftest import auth, register
from main import app


def _team(client, user, name="Team Rocket"):
    response = client.post("/teams", json={"name": name}, headers=auth(user))
    assert response.status_code == 200, response.text
    return response.json()


def _project(client, user, team, name="Robot"):
    return client.post(
        "/projects",
        json={"name": name, "description": "beep", "url": "https://example.com", "team": team["_id"]},
        headers=auth(user),
    )


def _prize(client, admin, name="Best Hack"):
    response = client.post("/projects/prizes", json={"name": name, "provider": "Sponsor"}, headers=auth(admin))
    assert response.status_code == 200, response.text
    return response.json()


def test_create_project(client):
    user = register(client, "maker@hackathon.dev")
    team = _team(client, user)
    response = _project(client, user, team)
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Robot"
    assert body["team"] == team["_id"]
    assert body["prizes"] == []


def test_second_project_for_team_is_rejected(client, mongo):
    user = register(client, "maker@hackathon.dev")
    team = _team(client, user)
    assert _project(client, user, team).status_code == 200
    response = _project(client, user, team, name="Another")
    assert response.status_code == 400
    assert mongo["project"].count_documents({"team": ObjectId(team["_id"])}) == 1


def test_cannot_create_project_for_another_team(client, mongo):
    owner = register(client, "owner@hackathon.dev")
    other = register(client, "other@hackathon.dev")
    team = _team(client, owner)
    response = _project(client, other, team)
    assert response.status_code == 400
    assert mongo["project"].count_documents({}) == 0


def test_admin_can_create_project_for_any_team(client, admin):
    owner = register(client, "owner@hackathon.dev")
    team = _team(client, owner)
    assert _project(client, admin, team).status_code == 200


def test_create_project_with_bad_team_id(client):
    user = register(client, "maker@hackathon.dev")
    response = client.post("/projects", json={"name": "x", "team": "not-an-id"}, headers=auth(user))
    assert response.status_code == 400


def test_create_project_requires_login(client):
    response = client.post("/projects", json={"name": "x", "team": str(ObjectId())})
    assert response.status_code == 401


def test_owner_can_read_edit_and_delete_project(client, mongo):
    user = register(client, "maker@hackathon.dev")
    team = _team(client, user)
    project = _project(client, user, team).json()

    got = client.get(f"/projects/{project['_id']}", headers=auth(user))
    assert got.status_code == 200
    assert got.json()["name"] == "Robot"

    edited = client.patch(f"/projects/{project['_id']}", json={"video": "https://v.example"}, headers=auth(user))
    assert edited.status_code == 200
    assert edited.json()["video"] == "https://v.example"
    assert edited.json()["name"] == "Robot"

    deleted = client.delete(f"/projects/{project['_id']}", headers=auth(user))
    assert deleted.status_code == 200
    assert mongo["project"].count_documents({}) == 0


def test_edit_project_rejects_unknown_fields(client):
    user = register(client, "maker@hackathon.dev")
    team = _team(client, user)
    project = _project(client, user, team).json()
    response = client.patch(f"/projects/{project['_id']}", json={"team": str(ObjectId())}, headers=auth(user))
    assert response.status_code == 400


def test_list_projects_is_admin_only(client, admin):
    user = register(client, "maker@hackathon.dev")
    _project(client, user, _team(client, user))
    assert client.get("/projects", headers=auth(user)).status_code == 401
    response = client.get("/projects", headers=auth(admin))
    assert response.status_code == 200
    assert len(response.json()) == 1


def test_admin_gets_404_for_missing_project(client, admin):
    response = client.get(f"/projects/{ObjectId()}", headers=auth(admin))
    assert response.status_code == 404


# ----------------------- prizes -----------------------

def test_prize_crud(client, admin, mongo):
    prize = _prize(client, admin)
    assert prize["name"] == "Best Hack"

    assert client.get("/projects/prizes").json()[0]["_id"] == prize["_id"]
    assert client.get(f"/projects/prizes/{prize['_id']}").status_code == 200

    owner = register(client, "owner@hackathon.dev")
    team = _team(client, owner)
    edited = client.patch(f"/projects/prizes/{prize['_id']}", json={"winner": team["_id"]}, headers=auth(admin))
    assert edited.status_code == 200
    assert edited.json()["winner"] == team["_id"]

    deleted = client.delete(f"/projects/prizes/{prize['_id']}", headers=auth(admin))
    assert deleted.status_code == 200
    assert mongo["prize"].count_documents({}) == 0
    assert client.get(f"/projects/prizes/{prize['_id']}").status_code == 404


def test_prize_writes_are_admin_only(client):
    user = register(client, "maker@hackathon.dev")
    response = client.post("/projects/prizes", json={"name": "Mine"}, headers=auth(user))
    assert response.status_code == 401


def test_get_prize_with_bad_id(client):
    assert client.get("/projects/prizes/zzz").status_code == 400


def test_enter_project_for_prize(client, admin):
    user = register(client, "maker@hackathon.dev")
    project = _project(client, user, _team(client, user)).json()
    prize = _prize(client, admin)

    response = client.put(f"/projects/prizes/enter/{project['_id']}", params={"prizeID": prize["_id"]},
                          headers=auth(user))
    assert response.status_code == 200
    assert response.json()["prizes"] == [prize["_id"]]


def test_enter_project_twice_lists_prize_twice(client, admin):
    user = register(client, "maker@hackathon.dev")
    project = _project(client, user, _team(client, user)).json()
    prize = _prize(client, admin)
    url = f"/projects/prizes/enter/{project['_id']}"
    client.put(url, params={"prizeID": prize["_id"]}, headers=auth(user))
    response = client.put(url, params={"prizeID": prize["_id"]}, headers=auth(user))
    assert response.json()["prizes"] == [prize["_id"], prize["_id"]]


def test_enter_project_with_missing_prize(client, mongo, admin):
    user = register(client, "maker@hackathon.dev")
    project = _project(client, user, _team(client, user)).json()
    response = client.put(f"/projects/prizes/enter/{project['_id']}", params={"prizeID": str(ObjectId())},
                          headers=auth(user))
    assert response.status_code == 400
    assert mongo["project"].find_one({"_id": ObjectId(project["_id"])})["prizes"] == []


def test_enter_missing_project(client, admin):
    prize = _prize(client, admin)
    response = client.put(f"/projects/prizes/enter/{ObjectId()}", params={"prizeID": prize["_id"]},
                          headers=auth(admin))
    assert response.status_code == 400


def test_enter_project_without_prize_id(client, admin):
    user = register(client, "maker@hackathon.dev")
    project = _project(client, user, _team(client, user)).json()
    response = client.put(f"/projects/prizes/enter/{project['_id']}", headers=auth(user))
    assert response.status_code == 400


def test_second_project_race_hits_unique_index(client, mongo, blind_lookups):
    user = register(client, "maker@hackathon.dev")
    team = _team(client, user)
    assert _project(client, user, team).status_code == 200

    blind_lookups("project")
    response = _project(client, user, team, name="Another")
    assert response.status_code == 400
    assert mongo["project"].count_documents({"team": ObjectId(team["_id"])}) == 1


def test_unexpected_failure_returns_generic_500(mongo, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("connection reset by peer")

    monkeypatch.setattr(database, "get_documents", broken)
    with TestClient(app, raise_server_exceptions=False) as c:
        response = c.get("/projects/prizes")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}

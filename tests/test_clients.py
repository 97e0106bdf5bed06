import uuid

from fastapi.testclient import TestClient

from app.models.user import User
from tests.helpers import auth, create_admin, create_client, create_user


def test_list_clients_admin_only(client: TestClient, db_session):
    acme = create_client(db_session)
    r = client.get("/clients", headers=auth(acme))
    assert r.status_code == 403


def test_list_clients(client: TestClient, db_session):
    admin = create_admin(db_session)
    acme = create_client(db_session, "acme")
    create_client(db_session, "globex")
    create_user(db_session, "bob", client=acme)

    r = client.get("/clients", headers=auth(admin))
    assert r.status_code == 200
    body = r.json()
    # admins and end users are not clients
    assert [c["username"] for c in body["data"]] == ["acme", "globex"]
    assert body["data"][0]["users_count"] == 1
    assert body["meta"]["total_items"] == 2
    assert body["_links"]["current_page"]["href"].startswith("http://testserver/clients?")


def test_list_clients_desc(client: TestClient, db_session):
    admin = create_admin(db_session)
    create_client(db_session, "acme")
    create_client(db_session, "globex")

    r = client.get("/clients", params={"order": "desc"}, headers=auth(admin))
    assert [c["username"] for c in r.json()["data"]] == ["globex", "acme"]


def test_client_can_read_itself(client: TestClient, db_session):
    acme = create_client(db_session)

    r = client.get(f"/clients/{acme.id}", headers=auth(acme))
    assert r.status_code == 200
    assert r.json()["username"] == "acme"


def test_client_cannot_read_other_client(client: TestClient, db_session):
    acme = create_client(db_session, "acme")
    globex = create_client(db_session, "globex")

    r = client.get(f"/clients/{globex.id}", headers=auth(acme))
    assert r.status_code == 403


def test_get_client_not_found(client: TestClient, db_session):
    admin = create_admin(db_session)
    r = client.get(f"/clients/{uuid.uuid4()}", headers=auth(admin))
    assert r.status_code == 404


def test_create_client(client: TestClient, db_session):
    admin = create_admin(db_session)

    r = client.post("/clients", json={"username": "initech", "email": "it@initech.com"}, headers=auth(admin))
    assert r.status_code == 201
    data = r.json()
    assert data["users_count"] == 0
    assert r.headers["Location"] == f"/clients/{data['id']}"

    # the new client can use the API straight away
    r = client.get("/users", headers={"X-User-Email": "it@initech.com"})
    assert r.status_code == 200


def test_create_client_forbidden_for_client(client: TestClient, db_session):
    acme = create_client(db_session)
    r = client.post("/clients", json={"username": "initech", "email": "it@initech.com"}, headers=auth(acme))
    assert r.status_code == 403


def test_create_client_duplicate(client: TestClient, db_session):
    admin = create_admin(db_session)
    create_client(db_session, "acme")

    r = client.post("/clients", json={"username": "acme", "email": "new@acme.com"}, headers=auth(admin))
    assert r.status_code == 409


def test_client_patches_itself(client: TestClient, db_session):
    acme = create_client(db_session)

    r = client.patch(f"/clients/{acme.id}", json={"email": "contact@acme.com"}, headers=auth(acme))
    assert r.status_code == 200
    assert r.json()["email"] == "contact@acme.com"


def test_client_patch_rejects_null_is_active(client: TestClient, db_session):
    acme = create_client(db_session)

    r = client.patch(f"/clients/{acme.id}", json={"is_active": None}, headers=auth(acme))
    assert r.status_code == 422


def test_delete_client_removes_its_users(client: TestClient, db_session):
    admin = create_admin(db_session)
    acme = create_client(db_session)
    bob = create_user(db_session, "bob", client=acme)
    acme_id, bob_id = acme.id, bob.id

    r = client.delete(f"/clients/{acme_id}", headers=auth(admin))
    assert r.status_code == 204

    db_session.expire_all()
    assert db_session.get(User, acme_id) is None
    assert db_session.get(User, bob_id) is None


def test_client_cannot_delete_itself(client: TestClient, db_session):
    acme = create_client(db_session)
    r = client.delete(f"/clients/{acme.id}", headers=auth(acme))
    assert r.status_code == 403

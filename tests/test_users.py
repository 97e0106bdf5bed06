import uuid

from fastapi.testclient import TestClient

from app.models.user import User
from tests.helpers import auth, create_admin, create_client, create_user


def test_list_users_requires_auth(client: TestClient, db_session):
    r = client.get("/users")
    assert r.status_code == 401


def test_list_users_unknown_email(client: TestClient, db_session):
    r = client.get("/users", headers={"X-User-Email": "nobody@test.com"})
    assert r.status_code == 401


def test_list_users_inactive_client(client: TestClient, db_session):
    acme = create_client(db_session)
    acme.is_active = False
    db_session.commit()

    r = client.get("/users", headers=auth(acme))
    assert r.status_code == 401


def test_list_users_scoped_to_client(client: TestClient, db_session):
    acme = create_client(db_session, "acme")
    globex = create_client(db_session, "globex")
    create_user(db_session, "bob", client=acme)
    create_user(db_session, "alice", client=acme)
    create_user(db_session, "carol", client=globex)

    r = client.get("/users", headers=auth(acme))
    assert r.status_code == 200
    body = r.json()
    assert [u["username"] for u in body["data"]] == ["alice", "bob"]
    assert all(u["client_id"] == str(acme.id) for u in body["data"])
    assert body["meta"]["total_items"] == 2


def test_list_users_admin_sees_every_client(client: TestClient, db_session):
    admin = create_admin(db_session)
    acme = create_client(db_session, "acme")
    globex = create_client(db_session, "globex")
    create_user(db_session, "bob", client=acme)
    create_user(db_session, "carol", client=globex)

    r = client.get("/users", headers=auth(admin))
    assert r.status_code == 200
    assert [u["username"] for u in r.json()["data"]] == ["bob", "carol"]


def test_list_users_forbidden_without_role(client: TestClient, db_session):
    acme = create_client(db_session)
    end_user = create_user(db_session, "bob", client=acme)

    r = client.get("/users", headers=auth(end_user))
    assert r.status_code == 403


def test_list_users_pagination_links(client: TestClient, db_session):
    acme = create_client(db_session)
    for i in range(5):
        create_user(db_session, f"user{i}", client=acme)

    r = client.get("/users", params={"limit": 2, "page": 2}, headers=auth(acme))
    assert r.status_code == 200
    body = r.json()
    assert [u["username"] for u in body["data"]] == ["user2", "user3"]
    assert body["meta"] == {"limit": 2, "current_items": 2, "total_items": 5, "total_pages": 3}
    assert body["_links"]["previous_page"]["href"].startswith("http://testserver/users?")
    assert "page=1" in body["_links"]["previous_page"]["href"]
    assert "page=3" in body["_links"]["next_page"]["href"]
    assert r.headers["Cache-Control"] == "private, max-age=3600"


def test_list_users_keyword(client: TestClient, db_session):
    acme = create_client(db_session)
    create_user(db_session, "bob", email="bob@example.org", client=acme)
    create_user(db_session, "alice", email="alice@example.org", client=acme)

    r = client.get("/users", params={"keyword": "ali"}, headers=auth(acme))
    assert [u["username"] for u in r.json()["data"]] == ["alice"]


def test_get_own_user(client: TestClient, db_session):
    acme = create_client(db_session)
    bob = create_user(db_session, "bob", client=acme)

    r = client.get(f"/users/{bob.id}", headers=auth(acme))
    assert r.status_code == 200
    data = r.json()
    assert data["username"] == "bob"
    assert data["email"] == "bob@test.com"


def test_get_other_clients_user_forbidden(client: TestClient, db_session):
    acme = create_client(db_session, "acme")
    globex = create_client(db_session, "globex")
    carol = create_user(db_session, "carol", client=globex)

    r = client.get(f"/users/{carol.id}", headers=auth(acme))
    assert r.status_code == 403


def test_get_user_not_found(client: TestClient, db_session):
    acme = create_client(db_session)
    r = client.get(f"/users/{uuid.uuid4()}", headers=auth(acme))
    assert r.status_code == 404


def test_users_endpoint_does_not_expose_clients(client: TestClient, db_session):
    admin = create_admin(db_session)
    acme = create_client(db_session)

    r = client.get(f"/users/{acme.id}", headers=auth(admin))
    assert r.status_code == 404


def test_create_user_owned_by_caller(client: TestClient, db_session):
    acme = create_client(db_session)

    r = client.post("/users", json={"username": "dave", "email": "dave@example.org"}, headers=auth(acme))
    assert r.status_code == 201
    data = r.json()
    assert data["client_id"] == str(acme.id)
    assert r.headers["Location"] == f"/users/{data['id']}"

    created = db_session.get(User, uuid.UUID(data["id"]))
    assert created.client_id == acme.id


def test_create_user_duplicate(client: TestClient, db_session):
    acme = create_client(db_session)
    create_user(db_session, "dave", email="dave@example.org", client=acme)

    r = client.post("/users", json={"username": "dave", "email": "other@example.org"}, headers=auth(acme))
    assert r.status_code == 409


def test_create_user_invalid_email(client: TestClient, db_session):
    acme = create_client(db_session)
    r = client.post("/users", json={"username": "dave", "email": "not-an-email"}, headers=auth(acme))
    assert r.status_code == 422


def test_patch_user(client: TestClient, db_session):
    acme = create_client(db_session)
    bob = create_user(db_session, "bob", client=acme)

    r = client.patch(f"/users/{bob.id}", json={"email": "robert@example.org"}, headers=auth(acme))
    assert r.status_code == 200
    data = r.json()
    assert data["email"] == "robert@example.org"
    assert data["username"] == "bob"


def test_patch_user_rejects_null_email(client: TestClient, db_session):
    acme = create_client(db_session)
    bob = create_user(db_session, "bob", client=acme)

    r = client.patch(f"/users/{bob.id}", json={"email": None}, headers=auth(acme))
    assert r.status_code == 422


def test_patch_user_taken_username(client: TestClient, db_session):
    acme = create_client(db_session)
    bob = create_user(db_session, "bob", client=acme)
    create_user(db_session, "alice", client=acme)

    r = client.patch(f"/users/{bob.id}", json={"username": "alice"}, headers=auth(acme))
    assert r.status_code == 409


def test_patch_other_clients_user_forbidden(client: TestClient, db_session):
    acme = create_client(db_session, "acme")
    globex = create_client(db_session, "globex")
    carol = create_user(db_session, "carol", client=globex)

    r = client.patch(f"/users/{carol.id}", json={"username": "mallory"}, headers=auth(acme))
    assert r.status_code == 403


def test_delete_user(client: TestClient, db_session):
    acme = create_client(db_session)
    bob = create_user(db_session, "bob", client=acme)
    bob_id = bob.id

    r = client.delete(f"/users/{bob_id}", headers=auth(acme))
    assert r.status_code == 204
    assert db_session.get(User, bob_id) is None


def test_delete_other_clients_user_forbidden(client: TestClient, db_session):
    acme = create_client(db_session, "acme")
    globex = create_client(db_session, "globex")
    carol = create_user(db_session, "carol", client=globex)

    r = client.delete(f"/users/{carol.id}", headers=auth(acme))
    assert r.status_code == 403

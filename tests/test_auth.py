import sqlite3

from conftest import login
from subscription_tracker.app.core.config import settings
from subscription_tracker.app.core.security import sign_session_id, unsign_session_id


def test_login_creates_user_and_session(client, session_store):
    response = client.post("/api/auth/login", json={"email": "alice@example.com", "name": "Alice"})

    assert response.status_code == 200
    body = response.json()
    assert body["authenticated"] is True
    assert body["user"]["email"] == "alice@example.com"
    assert body["user"]["name"] == "Alice"
    assert "createdAt" in body["user"]
    assert settings.session_cookie_name in response.cookies
    assert len(session_store) == 1


def test_login_is_idempotent_per_email(make_client):
    first = login(make_client(), "Alice@Example.com", name="Alice")
    second = login(make_client(), "alice@example.com", name="Someone else")

    assert first["id"] == second["id"]
    assert second["email"] == "alice@example.com"
    # The name is only used when the account is created.
    assert second["name"] == "Alice"


def test_login_defaults_name(client):
    user = login(client, "bob@example.com")

    assert user["name"] == "User"


def test_login_rejects_invalid_email(client):
    for payload in ({}, {"email": ""}, {"email": "not-an-email"}):
        response = client.post("/api/auth/login", json=payload)
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        assert body["errors"][0]["field"] == "email"


def test_me_requires_login(client):
    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json() == {"message": "Authentication required", "authenticated": False}


def test_me_returns_logged_in_user(client):
    user = login(client)

    response = client.get("/api/auth/me")

    assert response.status_code == 200
    assert response.json() == {"user": user, "authenticated": True}


def test_logout_ends_session(client, session_store):
    login(client)

    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json() == {"message": "Logged out successfully", "authenticated": False}
    assert len(session_store) == 0
    assert client.get("/api/auth/me").status_code == 401


def test_logout_without_session_succeeds(client):
    response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.json()["authenticated"] is False


def test_login_issues_new_session_id(client, make_client, session_store):
    login(client)
    old_cookie = client.cookies.get(settings.session_cookie_name)
    old_sid = unsign_session_id(old_cookie)

    login(client)
    new_cookie = client.cookies.get(settings.session_cookie_name)

    assert new_cookie != old_cookie
    assert session_store.get(old_sid) is None
    assert len(session_store) == 1

    # A stolen pre-login cookie is worthless after the new login.
    attacker = make_client()
    attacker.cookies.set(settings.session_cookie_name, old_cookie)
    assert attacker.get("/api/auth/me").status_code == 401


def test_tampered_cookie_is_ignored(client, make_client, session_store):
    login(client)
    sid = unsign_session_id(client.cookies.get(settings.session_cookie_name))

    other = make_client()
    other.cookies.set(settings.session_cookie_name, sign_session_id(sid, secret="wrong-secret"))
    assert other.get("/api/auth/me").status_code == 401

    other.cookies.set(settings.session_cookie_name, sid)
    assert other.get("/api/auth/me").status_code == 401
    # The real session is untouched.
    assert session_store.get(sid) is not None


def test_deleted_user_session_is_discarded(client, db_path, session_store):
    user = login(client)
    with sqlite3.connect(db_path) as conn:
        conn.execute("DELETE FROM users WHERE id = ?", (user["id"],))

    response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert len(session_store) == 0


def test_login_after_user_deleted_creates_new_account(client, db_path):
    user = login(client)
    with sqlite3.connect(db_path) as conn:
        conn.execute("DELETE FROM users WHERE id = ?", (user["id"],))

    again = login(client)

    assert again["id"] != user["id"]
    assert client.get("/api/auth/me").json()["user"]["id"] == again["id"]

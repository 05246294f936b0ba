import uuid

from fastapi.testclient import TestClient

API = "/api/v1"
PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def test_register_login_profile(client: TestClient, make_user):
    user = make_user()

    r = client.get(f"{API}/users/profile", headers=user["headers"])
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["statusCode"] == 200
    assert body["data"]["username"] == user["username"]
    assert "hashedPassword" not in body["data"]
    assert "refreshToken" not in body["data"]

    # login por email
    r = client.post(f"{API}/users/login", json={"email": user["email"], "password": user["password"]})
    assert r.status_code == 200
    assert r.json()["data"]["user"]["id"] == user["id"]
    client.cookies.clear()


def test_login_sets_cookie_that_authenticates(client: TestClient, make_user):
    user = make_user()
    r = client.post(f"{API}/users/login", json={"username": user["username"], "password": user["password"]})
    assert r.status_code == 200
    assert "accessToken" in r.cookies

    r = client.get(f"{API}/users/profile")
    assert r.status_code == 200
    assert r.json()["data"]["id"] == user["id"]
    client.cookies.clear()


def test_register_with_avatar(client: TestClient):
    username = f"u{uuid.uuid4().hex[:10]}"
    r = client.post(
        f"{API}/users/register",
        data={
            "fullName": "Avatar User",
            "username": username,
            "email": f"{username}@example.com",
            "password": "secret123",
        },
        files={"avatar": ("me.png", PNG_BYTES, "image/png")},
    )
    assert r.status_code == 201, r.text
    avatar = r.json()["data"]["avatar"]
    assert avatar.startswith("/media/avatars/")

    r = client.get(avatar)
    assert r.status_code == 200
    assert r.content == PNG_BYTES


def test_duplicate_register_is_conflict(client: TestClient, make_user):
    user = make_user()
    r = client.post(
        f"{API}/users/register",
        data={
            "fullName": "Dup",
            "username": user["username"],
            "email": "other@example.com",
            "password": "secret123",
        },
    )
    assert r.status_code == 409
    body = r.json()
    assert body["success"] is False
    assert body["statusCode"] == 409


def test_invalid_register_is_bad_request(client: TestClient):
    r = client.post(
        f"{API}/users/register",
        data={"fullName": "X", "username": "ok_name", "email": "not-an-email", "password": "secret123"},
    )
    assert r.status_code == 400
    assert r.json()["errors"]


def test_wrong_password_and_missing_token(client: TestClient, make_user):
    user = make_user()
    r = client.post(f"{API}/users/login", json={"username": user["username"], "password": "nope-nope"})
    assert r.status_code == 401

    r = client.get(f"{API}/users/profile")
    assert r.status_code == 401
    assert r.json()["success"] is False

    r = client.get(f"{API}/users/profile", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401


def test_refresh_rotates_tokens(client: TestClient, make_user):
    user = make_user()

    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": user["refresh"]})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    client.cookies.clear()
    assert data["refreshToken"] != user["refresh"]

    r = client.get(f"{API}/users/profile", headers={"Authorization": f"Bearer {data['accessToken']}"})
    assert r.status_code == 200

    # el refresh viejo ya no sirve
    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": user["refresh"]})
    assert r.status_code == 401
    client.cookies.clear()


def test_access_token_is_not_a_refresh_token(client: TestClient, make_user):
    user = make_user()
    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": user["access"]})
    assert r.status_code == 401


def test_logout_revokes_access_token(client: TestClient, make_user):
    user = make_user()
    r = client.post(f"{API}/users/logout", headers=user["headers"])
    assert r.status_code == 200
    client.cookies.clear()

    r = client.get(f"{API}/users/profile", headers=user["headers"])
    assert r.status_code == 401

    r = client.post(f"{API}/users/refresh-token", json={"refreshToken": user["refresh"]})
    assert r.status_code == 401


def test_change_password(client: TestClient, make_user):
    user = make_user()
    r = client.post(
        f"{API}/users/change-password",
        headers=user["headers"],
        json={"currentPassword": "wrong-one", "newPassword": "brand-new-pass"},
    )
    assert r.status_code == 400

    r = client.post(
        f"{API}/users/change-password",
        headers=user["headers"],
        json={"currentPassword": user["password"], "newPassword": "brand-new-pass"},
    )
    assert r.status_code == 200

    r = client.post(f"{API}/users/login", json={"username": user["username"], "password": "brand-new-pass"})
    assert r.status_code == 200
    client.cookies.clear()


def test_update_details_conflict(client: TestClient, make_user):
    a = make_user()
    b = make_user()
    r = client.put(
        f"{API}/users/update-details",
        headers=b["headers"],
        json={"fullName": "B", "email": a["email"], "username": b["username"]},
    )
    assert r.status_code == 409

    r = client.put(
        f"{API}/users/update-details",
        headers=b["headers"],
        json={"fullName": "New Name", "email": b["email"], "username": b["username"]},
    )
    assert r.status_code == 200
    assert r.json()["data"]["fullName"] == "New Name"


def test_healthcheck(client: TestClient):
    r = client.get(f"{API}/healthcheck")
    assert r.status_code == 200
    assert r.json()["data"] == {"status": "ok"}

from sqlalchemy import func, select

from tests.conftest import API
from vidtube.models.users import Users


async def count_users(session_factory):
    async with session_factory() as session:
        return await session.scalar(select(func.count(Users.id)))


async def test_register_returns_public_user(register_user, media_store):
    response = await register_user("alice", cover=True)

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == 201
    user = body["data"]
    assert user["username"] == "alice"
    assert user["fullName"] == "Alice Doe"
    assert user["avatar"].startswith("https://media.test/")
    assert user["coverImage"].startswith("https://media.test/")
    assert "password" not in user and "passwordHash" not in user
    assert "refreshToken" not in user
    assert len(media_store.uploads) == 2


async def test_register_normalizes_username_and_email(register_user):
    response = await register_user("Bob", email="Bob@Example.com")

    user = response.json()["data"]
    assert user["username"] == "bob"
    assert user["email"] == "bob@example.com"


async def test_register_duplicate_email_conflicts_without_side_effects(
    register_user, session_factory, media_store
):
    assert (await register_user("alice")).status_code == 201
    uploads_before = len(media_store.uploads)

    response = await register_user("alice2", email="alice@example.com")

    assert response.status_code == 409
    assert response.json() == {"status": 409, "message": "User with email already exists"}
    assert await count_users(session_factory) == 1
    assert len(media_store.uploads) == uploads_before


async def test_register_duplicate_username_conflicts(register_user, session_factory):
    assert (await register_user("alice")).status_code == 201

    response = await register_user("ALICE", email="other@example.com")

    assert response.status_code == 409
    assert await count_users(session_factory) == 1


async def test_register_requires_avatar(client):
    response = await client.post(
        f"{API}/users/register",
        data={"fullName": "No Avatar", "email": "na@example.com", "username": "na", "password": "pw"},
    )

    assert response.status_code == 400
    assert response.json()["status"] == 400


async def test_register_rejects_blank_fields(client):
    response = await client.post(
        f"{API}/users/register",
        data={"fullName": "   ", "email": "x@example.com", "username": "x", "password": "pw"},
        files={"avatar": ("a.png", b"a", "image/png")},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "fullName is required"


async def test_login_by_email_sets_cookies(client, register_user):
    await register_user("carol")

    response = await client.post(f"{API}/users/login", json={"email": "carol@example.com", "password": "secret-pass"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["username"] == "carol"
    assert data["accessToken"] and data["refreshToken"]
    set_cookie = response.headers.get_list("set-cookie")
    assert any(cookie.startswith("accessToken=") and "HttpOnly" in cookie for cookie in set_cookie)
    assert any(cookie.startswith("refreshToken=") for cookie in set_cookie)


async def test_login_failures(client, register_user):
    await register_user("dave")

    wrong = await client.post(f"{API}/users/login", json={"username": "dave", "password": "nope"})
    unknown = await client.post(f"{API}/users/login", json={"username": "ghost", "password": "nope"})
    missing = await client.post(f"{API}/users/login", json={"password": "nope"})

    assert wrong.status_code == 401
    assert unknown.status_code == 404
    assert missing.status_code == 400


async def test_protected_route_requires_credentials(client):
    response = await client.get(f"{API}/users/current-user")

    assert response.status_code == 401
    assert response.json() == {"status": 401, "message": "Unauthorized request"}


async def test_protected_route_rejects_garbage_token(client):
    response = await client.get(f"{API}/users/current-user", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401


async def test_access_token_cookie_authenticates(client, make_user):
    user, headers = await make_user("erin")
    token = headers["Authorization"].removeprefix("Bearer ")
    client.cookies.set("accessToken", token)

    response = await client.get(f"{API}/users/current-user")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == user["id"]


async def test_refresh_rotates_and_logout_revokes(client, register_user):
    await register_user("frank")
    login = await client.post(f"{API}/users/login", json={"username": "frank", "password": "secret-pass"})
    client.cookies.clear()
    tokens = login.json()["data"]

    refreshed = await client.post(f"{API}/users/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert refreshed.status_code == 200
    client.cookies.clear()
    new_tokens = refreshed.json()["data"]
    assert new_tokens["accessToken"]

    headers = {"Authorization": f"Bearer {new_tokens['accessToken']}"}
    assert (await client.post(f"{API}/users/logout", headers=headers)).status_code == 200
    client.cookies.clear()

    again = await client.post(f"{API}/users/refresh-token", json={"refreshToken": new_tokens["refreshToken"]})
    assert again.status_code == 401


async def test_refresh_rejects_access_token(client, make_user):
    _, headers = await make_user("gina")
    access_token = headers["Authorization"].removeprefix("Bearer ")

    response = await client.post(f"{API}/users/refresh-token", json={"refreshToken": access_token})

    assert response.status_code == 401


async def test_used_refresh_token_cannot_be_replayed(client, register_user):
    await register_user("hana")
    login = await client.post(f"{API}/users/login", json={"username": "hana", "password": "secret-pass"})
    client.cookies.clear()
    old_refresh = login.json()["data"]["refreshToken"]

    rotated = await client.post(f"{API}/users/refresh-token", json={"refreshToken": old_refresh})
    client.cookies.clear()
    assert rotated.status_code == 200
    assert rotated.json()["data"]["refreshToken"] != old_refresh

    replay = await client.post(f"{API}/users/refresh-token", json={"refreshToken": old_refresh})
    assert replay.status_code == 401


async def test_register_discards_avatar_when_cover_upload_fails(register_user, session_factory, media_store):
    media_store.fail_after = len(media_store.uploads) + 1

    response = await register_user("ivan", cover=True)

    assert response.status_code == 500
    assert [public_id for public_id, _, _ in media_store.uploads] == ["image-1"]
    assert media_store.destroyed == [("image-1", "image")]
    assert await count_users(session_factory) == 0

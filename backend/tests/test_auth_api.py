"""Tests for registration, login, account settings and the current user."""
import asyncio
import time

from sqlalchemy import select

from linkshort.core.security import verify_password
from linkshort.models import Link, User
from linkshort.services import users as user_service


async def test_register_and_me(client):
    response = await client.post("/api/auth/register", json={
        "email": "New.User@Example.com",
        "password": "hunter22",
        "name": "New User",
    })

    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["tier"] == "free"
    assert data["user"]["isAdmin"] is False

    me = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {data['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "new.user@example.com"


async def test_register_duplicate_email(client, free_user):
    user, _ = free_user
    response = await client.post("/api/auth/register", json={"email": user.email, "password": "hunter22"})

    assert response.status_code == 409
    assert response.json() == {"error": "Email is already registered"}


async def test_register_short_password(client):
    response = await client.post("/api/auth/register", json={"email": "a@example.com", "password": "123"})
    assert response.status_code == 400


async def test_login_sets_cookie(client, free_user):
    user, _ = free_user
    response = await client.post("/api/auth/login", json={"email": user.email, "password": "secret123"})

    assert response.status_code == 200
    assert response.json()["access_token"]
    assert "access_token" in response.cookies

    me = await client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["id"] == user.id


async def test_login_wrong_password(client, free_user):
    user, _ = free_user
    response = await client.post("/api/auth/login", json={"email": user.email, "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"error": "Invalid email or password"}


async def test_logout_clears_cookie(client, free_user):
    user, _ = free_user
    await client.post("/api/auth/login", json={"email": user.email, "password": "secret123"})

    response = await client.post("/api/auth/logout")
    assert response.status_code == 200

    assert (await client.get("/api/auth/me")).status_code == 401


async def test_password_check_does_not_block_redirects(client, free_user, session_factory, monkeypatch):
    user, _ = free_user
    async with session_factory() as db:
        db.add(Link(user_id=user.id, original_url="https://example.com/fast", short_code="fast12"))
        await db.commit()

    def slow_verify(plain, hashed):
        time.sleep(0.5)
        return verify_password(plain, hashed)

    monkeypatch.setattr(user_service, "verify_password", slow_verify)

    async def timed(request):
        start = time.perf_counter()
        response = await request
        return response, time.perf_counter() - start

    login = asyncio.ensure_future(
        timed(client.post("/api/auth/login", json={"email": user.email, "password": "secret123"}))
    )
    await asyncio.sleep(0.05)
    redirect, redirect_time = await timed(client.get("/fast12"))
    (login_response, login_time) = await login

    assert login_response.status_code == 200
    assert redirect.status_code == 302
    assert login_time >= 0.5
    assert redirect_time < 0.4


async def test_update_profile(client, free_user):
    _, headers = free_user
    response = await client.put(
        "/api/auth/update-profile",
        json={"name": "Renamed", "email": "Renamed@Example.com"},
        headers=headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Profile updated successfully"
    assert data["user"]["name"] == "Renamed"
    assert data["user"]["email"] == "renamed@example.com"

    me = (await client.get("/api/auth/me", headers=headers)).json()
    assert me["email"] == "renamed@example.com"


async def test_update_profile_name_only_keeps_email(client, free_user):
    user, headers = free_user
    response = await client.put("/api/auth/update-profile", json={"name": "Just Name"}, headers=headers)

    assert response.status_code == 200
    assert response.json()["user"]["email"] == user.email


async def test_update_profile_duplicate_email(client, make_user):
    taken, _ = await make_user()
    _, headers = await make_user()

    response = await client.put("/api/auth/update-profile", json={"email": taken.email}, headers=headers)

    assert response.status_code == 409
    assert response.json() == {"error": "Email already exists"}


async def test_update_profile_requires_authentication(client):
    response = await client.put("/api/auth/update-profile", json={"name": "x"})
    assert response.status_code == 401


async def test_update_password(client, free_user, session_factory):
    user, headers = free_user
    response = await client.put(
        "/api/auth/update-password",
        json={"currentPassword": "secret123", "newPassword": "brand-new-pw"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Password updated successfully"}

    async with session_factory() as db:
        stored = await db.scalar(select(User.password_hash).where(User.id == user.id))
    assert verify_password("brand-new-pw", stored)

    old = await client.post("/api/auth/login", json={"email": user.email, "password": "secret123"})
    assert old.status_code == 401
    new = await client.post("/api/auth/login", json={"email": user.email, "password": "brand-new-pw"})
    assert new.status_code == 200


async def test_update_password_wrong_current(client, free_user):
    _, headers = free_user
    response = await client.put(
        "/api/auth/update-password",
        json={"currentPassword": "not-it", "newPassword": "brand-new-pw"},
        headers=headers,
    )

    assert response.status_code == 401
    assert response.json() == {"error": "Current password is incorrect"}


async def test_update_password_too_short(client, free_user):
    _, headers = free_user
    response = await client.put(
        "/api/auth/update-password",
        json={"currentPassword": "secret123", "newPassword": "123"},
        headers=headers,
    )
    assert response.status_code == 400

import asyncio
import time

import pytest
from jose import jwt

from alatmon import users
from alatmon.auth import Claims, create_token, decode_token, hash_password, verify_password
from alatmon.errors import DuplicateEmail, InvalidPassword, InvalidToken, UserNotFound

pytestmark = pytest.mark.anyio


def test_password_hash_is_salted():
    a = hash_password("rahasia")
    b = hash_password("rahasia")
    assert a != b
    assert verify_password("rahasia", a)
    assert not verify_password("salah", a)


def test_token_carries_username_and_email():
    token = create_token(Claims(username="budi", email="budi@example.com"))
    assert decode_token(token) == Claims(username="budi", email="budi@example.com")


def test_token_expires_after_24_hours():
    token = create_token(Claims(username="budi", email="budi@example.com"))
    claims = jwt.get_unverified_claims(token)
    assert claims["exp"] - claims["iat"] == 24 * 3600


def test_expired_token_rejected():
    token = create_token(Claims(username="budi", email="budi@example.com"), hours=-1)
    with pytest.raises(InvalidToken):
        decode_token(token)


def test_foreign_signature_rejected():
    token = jwt.encode({"username": "budi", "email": "budi@example.com"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        decode_token(token)


async def test_register_then_duplicate_email(db):
    user = await users.register(db, "budi", "budi@example.com", "0812", "rahasia")
    assert user.id is not None
    assert user.password_hash != "rahasia"
    with pytest.raises(DuplicateEmail):
        await users.register(db, "budi2", "budi@example.com", "0813", "lain")


async def test_verify(db):
    await users.register(db, "budi", "budi@example.com", "0812", "rahasia")
    user = await users.verify(db, "budi@example.com", "rahasia")
    assert user.username == "budi"
    with pytest.raises(InvalidPassword):
        await users.verify(db, "budi@example.com", "salah")
    with pytest.raises(UserNotFound):
        await users.verify(db, "siapa@example.com", "rahasia")


async def test_register_endpoint_hides_hash(client):
    resp = await client.post("/auth/register", json={
        "username": "budi", "email": "budi@example.com", "no_telp": "0812", "password": "rahasia",
    })
    assert resp.status_code == 201
    assert resp.json()["user"] == {"username": "budi", "email": "budi@example.com"}
    assert "password" not in resp.text


async def test_login_failures(client):
    await client.post("/auth/register", json={
        "username": "budi", "email": "budi@example.com", "no_telp": "0812", "password": "rahasia",
    })
    resp = await client.post("/auth/login", json={"email": "budi@example.com", "password": "salah"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "Invalid password"

    resp = await client.post("/auth/login", json={"email": "siapa@example.com", "password": "rahasia"})
    assert resp.status_code == 404
    assert resp.json()["error"] == "User not found"


async def test_protected_route_without_token(client):
    resp = await client.get("/alat/list-alat")
    assert resp.status_code == 401
    assert resp.json()["error"] == "Access denied, no token provided"


async def test_protected_route_with_bad_token(client):
    resp = await client.get("/alat/list-alat", headers={"Authorization": "Bearer not.a.jwt"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid token"


async def test_register_does_not_block_event_loop(client, monkeypatch):
    def slow_hash(password):
        time.sleep(0.3)
        return "slow$" + password

    monkeypatch.setattr(users, "hash_password", slow_hash)

    gaps = []

    async def ticker(done):
        last = time.perf_counter()
        while not done.is_set():
            await asyncio.sleep(0.005)
            now = time.perf_counter()
            gaps.append(now - last)
            last = now

    done = asyncio.Event()
    tick = asyncio.create_task(ticker(done))
    resp = await client.post("/auth/register", json={
        "username": "budi", "email": "budi@example.com", "no_telp": "0812", "password": "rahasia",
    })
    done.set()
    await tick

    assert resp.status_code == 201
    assert max(gaps) < 0.15


async def test_validation_error_uses_error_body(client):
    resp = await client.post("/auth/register", json={"username": "budi", "email": "bukan-email", "password": "x"})
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "Invalid request"
    assert body["details"][0]["loc"][-1] == "email"

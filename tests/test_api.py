"""
Integration tests for the REST API endpoints.

Uses an in-memory SQLite database through ``app.dependency_overrides`` so
the routes run against the real repositories and services.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from httpx import AsyncClient

from src.domain.enums import Role
from src.infrastructure.security import create_access_token
from tests.conftest import auth_header


async def _signup_user(client: AsyncClient, name: str, email: str | None = None) -> dict:
    resp = await client.post(
        "/user/signup",
        json={
            "name": name,
            "email": email or f"{name.lower()}@example.com",
            "password": "pw-123456",
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _signup_barber(
    client: AsyncClient, username: str, lat: float = 0.0, long: float = 0.0
) -> dict:
    resp = await client.post(
        "/barber/signup",
        json={
            "name": username.title(),
            "username": username,
            "password": "pw-123456",
            "lat": lat,
            "long": long,
        },
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


# ── Health ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "OK"


@pytest.mark.asyncio
async def test_root_banner(client: AsyncClient):
    resp = await client.get("/")
    assert resp.status_code == 200
    assert "running" in resp.json()["message"]


# ── Accounts ──────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_user_signup_returns_user_and_token(client: AsyncClient):
    data = await _signup_user(client, "Alice", "  Alice@Example.com ")
    assert data["user"]["email"] == "alice@example.com"
    assert data["user"]["name"] == "Alice"
    assert data["token"]
    assert "password" not in data["user"]


@pytest.mark.asyncio
async def test_user_signup_missing_fields_is_400(client: AsyncClient):
    resp = await client.post("/user/signup", json={"email": "x@example.com"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_user_signup_without_handle_is_400(client: AsyncClient):
    resp = await client.post("/user/signup", json={"name": "Nobody", "password": "pw"})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_user_signup_duplicate_is_409(client: AsyncClient):
    await _signup_user(client, "Bob")
    resp = await client.post(
        "/user/signup",
        json={"name": "Bob Again", "email": "bob@example.com", "password": "pw"},
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_phone_signup_and_signin_without_password(client: AsyncClient):
    resp = await client.post(
        "/user/signup", json={"name": "Phone", "phoneNumber": "+15550001"}
    )
    assert resp.status_code == 201
    assert resp.json()["user"]["phoneNumber"] == "+15550001"

    resp = await client.post("/user/signin", json={"phoneNumber": "+15550001"})
    assert resp.status_code == 200
    assert resp.json()["token"]


@pytest.mark.asyncio
async def test_user_signin(client: AsyncClient):
    await _signup_user(client, "Carol")
    resp = await client.post(
        "/user/signin", json={"email": "carol@example.com", "password": "pw-123456"}
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["name"] == "Carol"


@pytest.mark.asyncio
async def test_user_signin_bad_password_is_401(client: AsyncClient):
    await _signup_user(client, "Dave")
    resp = await client.post(
        "/user/signin", json={"email": "dave@example.com", "password": "wrong"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_barber_signup_and_signin(client: AsyncClient):
    data = await _signup_barber(client, "sharpcuts", lat=12.97, long=77.60)
    assert data["barber"]["lat"] == 12.97
    assert data["barber"]["long"] == 77.60

    resp = await client.post(
        "/barber/signin", json={"username": "sharpcuts", "password": "pw-123456"}
    )
    assert resp.status_code == 200

    resp = await client.post(
        "/barber/signin", json={"username": "sharpcuts", "password": "nope"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_barber_signup_duplicate_username_is_409(client: AsyncClient):
    await _signup_barber(client, "fadefactory")
    resp = await client.post(
        "/barber/signup",
        json={"name": "X", "username": "fadefactory", "password": "p", "lat": 1, "long": 1},
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_barber_signup_bad_coordinates_is_400(client: AsyncClient):
    resp = await client.post(
        "/barber/signup",
        json={"name": "X", "username": "x", "password": "p", "lat": 91, "long": 0},
    )
    assert resp.status_code == 400


# ── Authentication gate ───────────────────────────────────────────────


@pytest.mark.asyncio
async def test_missing_token_is_401(client: AsyncClient):
    resp = await client.post("/user/joinqueue", json={"barberId": 1})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_malformed_header_is_401(client: AsyncClient):
    resp = await client.get(
        "/user/queue-status", headers={"Authorization": "Token abc"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_expired_token_is_401(client: AsyncClient):
    user = await _signup_user(client, "Erin")
    token = create_access_token(
        user["user"]["id"], Role.USER, expires_delta=timedelta(seconds=-5)
    )
    resp = await client.get("/user/queue-status", headers=auth_header(token))
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_user_token_cannot_view_barber_queue(client: AsyncClient):
    user = await _signup_user(client, "Frank")
    resp = await client.get("/barber/queue", headers=auth_header(user["token"]))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_barber_token_cannot_join_queue(client: AsyncClient):
    barber = await _signup_barber(client, "clipperclub")
    resp = await client.post(
        "/user/joinqueue",
        json={"barberId": barber["barber"]["id"]},
        headers=auth_header(barber["token"]),
    )
    assert resp.status_code == 403


# ── Queue flow ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_join_queue(client: AsyncClient):
    barber = await _signup_barber(client, "urbantrim")
    user = await _signup_user(client, "Gina")

    resp = await client.post(
        "/user/joinqueue",
        json={"barberId": barber["barber"]["id"], "service": "beard"},
        headers=auth_header(user["token"]),
    )

    assert resp.status_code == 201
    queue = resp.json()["queue"]
    assert queue["barber"]["id"] == barber["barber"]["id"]
    assert queue["user"]["name"] == "Gina"
    assert queue["serviceType"] == "beard"
    assert queue["position"] == 1
    assert queue["enteredAt"]


@pytest.mark.asyncio
async def test_join_missing_barber_id_is_400(client: AsyncClient):
    user = await _signup_user(client, "Hank")
    resp = await client.post(
        "/user/joinqueue", json={}, headers=auth_header(user["token"])
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_join_unknown_barber_is_404(client: AsyncClient):
    user = await _signup_user(client, "Ivy")
    resp = await client.post(
        "/user/joinqueue", json={"barberId": 999}, headers=auth_header(user["token"])
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_join_transfers_between_barbers(client: AsyncClient):
    first = await _signup_barber(client, "firstshop")
    second = await _signup_barber(client, "secondshop")
    user = await _signup_user(client, "Jack")
    headers = auth_header(user["token"])

    await client.post("/user/joinqueue", json={"barberId": first["barber"]["id"]}, headers=headers)
    await client.post("/user/joinqueue", json={"barberId": second["barber"]["id"]}, headers=headers)

    first_queue = await client.get("/barber/queue", headers=auth_header(first["token"]))
    second_queue = await client.get("/barber/queue", headers=auth_header(second["token"]))
    assert first_queue.json()["queue"] == []
    assert [e["user"]["id"] for e in second_queue.json()["queue"]] == [user["user"]["id"]]


@pytest.mark.asyncio
async def test_leave_queue(client: AsyncClient):
    barber = await _signup_barber(client, "leaveshop")
    user = await _signup_user(client, "Kim")
    headers = auth_header(user["token"])
    await client.post("/user/joinqueue", json={"barberId": barber["barber"]["id"]}, headers=headers)

    resp = await client.post("/user/leavequeue", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["data"]["removedFrom"]["id"] == barber["barber"]["id"]
    status = await client.get("/user/queue-status", headers=headers)
    assert status.json()["queueStatus"]["inQueue"] is False


@pytest.mark.asyncio
async def test_leave_when_not_queued_is_400(client: AsyncClient):
    user = await _signup_user(client, "Lou")
    resp = await client.post("/user/leavequeue", headers=auth_header(user["token"]))
    assert resp.status_code == 400
    assert resp.json()["msg"] == "not in any queue"


@pytest.mark.asyncio
async def test_queue_scenario_positions_and_waits(client: AsyncClient):
    barber = await _signup_barber(client, "scenarioshop")
    users = []
    for name, service in [("Ann", "haircut"), ("Ben", "beard"), ("Cat", "haircut+beard")]:
        u = await _signup_user(client, name)
        resp = await client.post(
            "/user/joinqueue",
            json={"barberId": barber["barber"]["id"], "service": service},
            headers=auth_header(u["token"]),
        )
        assert resp.status_code == 201
        users.append(u)

    resp = await client.get("/barber/queue", headers=auth_header(barber["token"]))
    body = resp.json()
    assert body["queueLength"] == 3
    assert [e["user"]["name"] for e in body["queue"]] == ["Ann", "Ben", "Cat"]
    assert [e["position"] for e in body["queue"]] == [1, 2, 3]

    for u, (position, wait) in zip(users, [(1, 0), (2, 20), (3, 25)]):
        resp = await client.get("/user/queue-status", headers=auth_header(u["token"]))
        status = resp.json()["queueStatus"]
        assert status["inQueue"] is True
        assert status["queuePosition"] == position
        assert status["estimatedWaitTime"] == wait
        assert status["barber"]["id"] == barber["barber"]["id"]


@pytest.mark.asyncio
async def test_barber_removes_user(client: AsyncClient):
    barber = await _signup_barber(client, "removeshop")
    user = await _signup_user(client, "Max")
    await client.post(
        "/user/joinqueue",
        json={"barberId": barber["barber"]["id"]},
        headers=auth_header(user["token"]),
    )

    resp = await client.post(
        "/barber/remove-user",
        json={"userId": user["user"]["id"]},
        headers=auth_header(barber["token"]),
    )
    assert resp.status_code == 200

    again = await client.post(
        "/barber/remove-user",
        json={"userId": user["user"]["id"]},
        headers=auth_header(barber["token"]),
    )
    assert again.status_code == 400
    assert again.json()["msg"] == "user not in this barber's queue"


# ── Nearby search ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_nearby_finds_close_barber_only(client: AsyncClient):
    near = await _signup_barber(client, "nearshop", lat=0.01, long=0.0)
    await _signup_barber(client, "farshop", lat=1.0, long=0.0)
    user = await _signup_user(client, "Ned")

    resp = await client.get(
        "/user/nearby",
        params={"lat": 0, "long": 0, "radius": 5},
        headers=auth_header(user["token"]),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert [b["id"] for b in body["barbers"]] == [near["barber"]["id"]]
    assert body["barbers"][0]["distanceKm"] == pytest.approx(1.11, abs=0.01)
    assert body["barbers"][0]["queueLength"] == 0
    assert body["searchLocation"] == {"lat": 0.0, "long": 0.0}
    assert body["radiusKm"] == 5.0


@pytest.mark.asyncio
async def test_nearby_default_radius(client: AsyncClient):
    user = await _signup_user(client, "Oli")
    resp = await client.get(
        "/user/nearby", params={"lat": 10, "long": 10}, headers=auth_header(user["token"])
    )
    assert resp.status_code == 200
    assert resp.json()["radiusKm"] == 5.0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "params",
    [
        {"lat": 100, "long": 0},
        {"lat": 0, "long": 200},
        {"lat": 0, "long": 0, "radius": 0},
        {"lat": 0, "long": 0, "radius": -3},
        {"lat": 0, "long": 0, "radius": "inf"},
        {"lat": "abc", "long": 0},
        {"long": 0},
    ],
)
async def test_nearby_invalid_params_is_400(client: AsyncClient, params):
    user = await _signup_user(client, "Pat")
    resp = await client.get("/user/nearby", params=params, headers=auth_header(user["token"]))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_nearby_requires_auth(client: AsyncClient):
    resp = await client.get("/user/nearby", params={"lat": 0, "long": 0})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_validation_error_detail_lists_fields(client: AsyncClient):
    resp = await client.post("/barber/signup", json={"name": "X"})
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert isinstance(detail, list)
    assert {"username", "password", "lat", "long"} <= {e["loc"][-1] for e in detail}


@pytest.mark.asyncio
async def test_error_schema_documents_list_detail(client: AsyncClient):
    schema = (await client.get("/openapi.json")).json()
    detail = schema["components"]["schemas"]["ErrorResponse"]["properties"]["detail"]
    assert {"string", "array"} <= {v.get("type") for v in detail["anyOf"]}

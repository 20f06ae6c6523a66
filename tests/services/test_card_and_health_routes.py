"""Card & Health Routes — catalog endpoints and container probes.

Tests cover:
    - Expansions listed sorted, cards created with 201 and their catalog id
    - Boundary validation (blank text, blanks out of range) is 400
    - Liveness always 200; readiness reports database and store backend
"""

import cardczar.infrastructure.database as db_module
from tests.services.helpers import as_user

ANA = as_user("u-ana", "Ana")


# ─── cards ───────────────────────────────────────────────────────

async def test_list_expansions(client):
    res = await client.get("/api/v1/cards/expansions", headers=ANA)
    assert res.status_code == 200
    assert res.json() == {"expansions": ["base"]}


async def test_create_black_card(client):
    res = await client.post(
        "/api/v1/cards/black",
        json={"text": "  ____ and ____.  ", "expansion": "party", "blanks": 2},
        headers=ANA,
    )
    assert res.status_code == 201
    body = res.json()
    assert body["kind"] == "black"
    assert body["text"] == "____ and ____."
    assert body["blanks"] == 2

    res = await client.get("/api/v1/cards/expansions", headers=ANA)
    assert res.json()["expansions"] == ["base", "party"]


async def test_create_white_card(client):
    res = await client.post(
        "/api/v1/cards/white", json={"text": "Tacos", "expansion": "party"}, headers=ANA,
    )
    assert res.status_code == 201
    assert res.json()["blanks"] == 0


async def test_blank_text_rejected(client):
    res = await client.post(
        "/api/v1/cards/white", json={"text": "   ", "expansion": "party"}, headers=ANA,
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_too_many_blanks_rejected(client):
    res = await client.post(
        "/api/v1/cards/black",
        json={"text": "_ _ _ _ _ _", "expansion": "party", "blanks": 6},
        headers=ANA,
    )
    assert res.status_code == 400


# ─── health ──────────────────────────────────────────────────────

async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_reports_store_backend(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy", "store": "memory"}


async def test_readiness_without_database_is_503(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503

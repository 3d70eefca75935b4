"""Integration tests for the games and rolls API endpoints."""

import random

import pytest
from httpx import AsyncClient


@pytest.fixture
def all_sixes(monkeypatch):
    monkeypatch.setattr(random, "randint", lambda low, high: 6)


@pytest.fixture
def all_ones(monkeypatch):
    monkeypatch.setattr(random, "randint", lambda low, high: low)


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["engine"] == "yzroll"


# --- Games ---


@pytest.mark.asyncio
async def test_list_games(client: AsyncClient):
    resp = await client.get("/api/games")
    assert resp.status_code == 200
    ids = [g["id"] for g in resp.json()]
    assert {"myz", "fbl", "alien", "t2k", "br"} <= set(ids)


@pytest.mark.asyncio
async def test_get_game(client: AsyncClient):
    resp = await client.get("/api/games/t2k")
    assert resp.status_code == 200
    data = resp.json()
    assert data["modifier_rule"] == "ladder"
    assert data["dice"] == ["a", "b", "c", "d", "ammo", "loc"]


@pytest.mark.asyncio
async def test_get_unknown_game(client: AsyncClient):
    resp = await client.get("/api/games/nope")
    assert resp.status_code == 404
    assert "Unknown game" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_list_game_dice(client: AsyncClient):
    resp = await client.get("/api/games/fbl/dice")
    assert resp.status_code == 200
    dice = {d["key"]: d for d in resp.json()}
    assert dice["base"]["locked_values"] == [1, 6]
    assert dice["artoD12"]["faces"] == 12
    assert dice["artoD12"]["success_table"]["12"] == 4


# --- Rolls ---


@pytest.mark.asyncio
async def test_create_roll_from_dice(client: AsyncClient, all_sixes):
    resp = await client.post("/api/rolls", json={
        "game": "myz",
        "dice": {"base": 3, "skill": 2},
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["formula"] == "3db + 2ds"
    assert data["evaluated"] is True
    assert data["size"] == 5
    assert data["success_count"] == 5
    assert data["pushable"] is False
    assert data["terms"][0]["results"][0]["value"] == 6


@pytest.mark.asyncio
async def test_create_roll_from_formula(client: AsyncClient, all_sixes):
    resp = await client.post("/api/rolls", json={
        "game": "fbl",
        "formula": "2db + 1d10[Sword]",
        "name": "Attack",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Attack"
    assert data["formula"] == "2db + 1d10[Sword]"
    assert data["terms"][1]["die"] == "artoD10"
    assert data["success_count"] == 3


@pytest.mark.asyncio
async def test_create_roll_from_entries(client: AsyncClient):
    resp = await client.post("/api/rolls", json={
        "game": "alien",
        "entries": [
            {"die": "skill", "quantity": 3, "flavor": "Heavy Machinery"},
            {"die": "stress", "quantity": 1},
        ],
        "evaluate": False,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["formula"] == "3ds[Heavy Machinery] + 1dz"
    assert data["evaluated"] is False
    assert data["terms"][0]["success"] is None


@pytest.mark.asyncio
async def test_create_roll_fallback_die(client: AsyncClient):
    resp = await client.post("/api/rolls", json={"game": "t2k"})
    assert resp.status_code == 200
    assert resp.json()["formula"] == "1d6"


@pytest.mark.asyncio
async def test_create_roll_errors(client: AsyncClient):
    resp = await client.post("/api/rolls", json={"game": "myz", "formula": "3db 2ds"})
    assert resp.status_code == 400

    resp = await client.post("/api/rolls", json={"game": "myz", "formula": "1dz"})
    assert resp.status_code == 400

    resp = await client.post("/api/rolls", json={"game": "nope", "dice": {"base": 1}})
    assert resp.status_code == 400

    resp = await client.post("/api/rolls", json={
        "game": "myz", "dice": {"base": 1}, "formula": "1db",
    })
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_get_and_delete_roll(client: AsyncClient):
    roll_id = (await client.post("/api/rolls", json={"dice": {"skill": 2}})).json()["roll_id"]

    resp = await client.get(f"/api/rolls/{roll_id}")
    assert resp.status_code == 200
    assert resp.json()["roll_id"] == roll_id

    resp = await client.delete(f"/api/rolls/{roll_id}")
    assert resp.status_code == 200
    assert resp.json()["deleted"] is True

    resp = await client.get(f"/api/rolls/{roll_id}")
    assert resp.status_code == 404

    resp = await client.delete(f"/api/rolls/{roll_id}")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_push_roll(client: AsyncClient, all_ones):
    roll_id = (await client.post("/api/rolls", json={
        "game": "myz", "dice": {"base": 2, "skill": 1},
    })).json()["roll_id"]

    resp = await client.post(f"/api/rolls/{roll_id}/push")
    assert resp.status_code == 200
    data = resp.json()
    assert data["push_count"] == 1
    assert data["pushed"] is True
    assert data["pushable"] is False
    assert data["attribute_trauma"] == 2

    skill = data["terms"][1]
    assert len(skill["matrix"]) == 2
    assert skill["matrix"][0][0]["state"] == "pushed"
    assert skill["matrix"][1][0]["value"] == 1
    base = data["terms"][0]
    assert base["matrix"][1] == [None, None]

    # pushing again is a no-op
    resp = await client.post(f"/api/rolls/{roll_id}/push")
    assert resp.json()["push_count"] == 1


@pytest.mark.asyncio
async def test_modify_roll(client: AsyncClient):
    roll_id = (await client.post("/api/rolls", json={
        "game": "myz", "dice": {"base": 2, "skill": 1}, "evaluate": False,
    })).json()["roll_id"]

    resp = await client.post(f"/api/rolls/{roll_id}/modify", json={"delta": -2})
    assert resp.status_code == 200
    assert resp.json()["formula"] == "2db - 1dn"


@pytest.mark.asyncio
async def test_modify_ladder_roll(client: AsyncClient):
    roll_id = (await client.post("/api/rolls", json={
        "game": "t2k", "formula": "1d6", "evaluate": False,
    })).json()["roll_id"]

    resp = await client.post(f"/api/rolls/{roll_id}/modify", json={"delta": 4})
    assert resp.json()["formula"] == "1d12 + 1d6"


@pytest.mark.asyncio
async def test_add_and_remove_dice(client: AsyncClient, all_ones):
    roll_id = (await client.post("/api/rolls", json={
        "game": "myz", "dice": {"base": 2},
    })).json()["roll_id"]

    resp = await client.post(f"/api/rolls/{roll_id}/dice", json={
        "quantity": 2, "type": "gear", "value": 6,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["formula"] == "2db + 2dg"
    assert data["success_count"] == 2

    resp = await client.post(f"/api/rolls/{roll_id}/dice/remove", json={
        "quantity": 5, "type": "gear",
    })
    assert resp.status_code == 200
    assert resp.json()["formula"] == "2db"

    resp = await client.post(f"/api/rolls/{roll_id}/dice", json={
        "quantity": 1, "type": "stress",
    })
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_remove_dice_validation(client: AsyncClient):
    roll_id = (await client.post("/api/rolls", json={"dice": {"skill": 1}})).json()["roll_id"]
    resp = await client.post(f"/api/rolls/{roll_id}/dice/remove", json={
        "quantity": -1, "type": "skill",
    })
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_duplicate_roll(client: AsyncClient):
    original = (await client.post("/api/rolls", json={
        "game": "myz", "formula": "3db + 1ds",
    })).json()

    resp = await client.post(f"/api/rolls/{original['roll_id']}/duplicate")
    assert resp.status_code == 200
    copy = resp.json()
    assert copy["roll_id"] != original["roll_id"]
    assert copy["formula"] == original["formula"]
    assert copy["terms"][0]["results"] == original["terms"][0]["results"]


@pytest.mark.asyncio
async def test_unknown_roll(client: AsyncClient):
    resp = await client.post("/api/rolls/missing/push")
    assert resp.status_code == 404

import inspect
import json
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from tennis_api.api import create_app
from tennis_api.config import Settings
from tennis_api.persistence import DataSourceError, JsonPlayerStore
from tennis_api.repository import PlayerRepository


@pytest.fixture
async def client():
    app = create_app(Settings.from_env({}))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


def _new_player(**overrides) -> dict:
    payload = {
        "firstname": "John",
        "lastname": "Doe",
        "sex": "M",
        "country": {"code": "USA"},
        "data": {"rank": 100, "points": 500, "weight": 75000, "height": 180, "age": 28},
    }
    payload.update(overrides)
    return payload


@pytest.mark.anyio
async def test_index(client: AsyncClient):
    resp = await client.get("/")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert "Tennis Players API" in body["message"]
    assert body["endpoints"]["players"] == "/api/players"


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_list_players_sorted_by_rank(client: AsyncClient):
    resp = await client.get("/api/players")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["count"] == len(body["data"]) > 0
    ranks = [player["data"]["rank"] for player in body["data"]]
    assert ranks == sorted(ranks)
    assert ranks[0] == 1


@pytest.mark.anyio
async def test_get_player_by_id(client: AsyncClient):
    resp = await client.get("/api/players/52")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["id"] == 52
    assert body["data"]["firstname"] == "Novak"
    assert body["data"]["country"]["code"] == "SRB"


@pytest.mark.anyio
async def test_get_player_not_found(client: AsyncClient):
    resp = await client.get("/api/players/99999")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Not Found"
    assert body["message"] == "Player with ID 99999 not found"


@pytest.mark.anyio
async def test_get_player_invalid_id(client: AsyncClient):
    resp = await client.get("/api/players/abc")
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "Invalid player ID format" in body["message"]


@pytest.mark.anyio
async def test_create_player(client: AsyncClient):
    resp = await client.post("/api/players", json=_new_player())
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    created = body["data"]
    assert created["firstname"] == "John"
    assert created["id"] == 103
    assert created["shortname"] == "J.DOE"
    assert "USA" in created["country"]["picture"]

    fetched = await client.get(f"/api/players/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"] == created

    listing = await client.get("/api/players")
    assert listing.json()["count"] == 6


@pytest.mark.anyio
async def test_create_player_missing_fields(client: AsyncClient):
    resp = await client.post("/api/players", json={"firstname": "John", "sex": "M"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Validation Error"
    assert "Validation failed" in body["message"]
    messages = [detail["message"] for detail in body["details"]]
    assert "lastname is required" in messages
    assert "country is required" in messages


@pytest.mark.anyio
async def test_create_player_invalid_sex(client: AsyncClient):
    resp = await client.post("/api/players", json=_new_player(sex="X"))
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert "sex must be either M or F" in resp.json()["message"]


@pytest.mark.anyio
async def test_create_player_accepts_whole_number_floats(client: AsyncClient):
    resp = await client.post(
        "/api/players",
        json=_new_player(data={"rank": 100, "points": 500, "weight": 75000.0, "height": 185.0, "age": 28, "last": [1.0]}),
    )
    assert resp.status_code == 201
    data = resp.json()["data"]["data"]
    assert data["height"] == 185
    assert data["weight"] == 75000
    assert data["last"] == [1]


@pytest.mark.anyio
async def test_create_player_rejects_boolean_numbers(client: AsyncClient):
    resp = await client.post(
        "/api/players",
        json=_new_player(data={"rank": True, "points": 500, "weight": 75000, "height": 180, "age": 28}),
    )
    assert resp.status_code == 400
    assert "data.rank must be an integer" in resp.json()["message"]


def test_create_endpoint_runs_in_threadpool():
    app = create_app(Settings.from_env({}), repository=PlayerRepository())
    [route] = [
        route
        for route in app.routes
        if getattr(route, "path", None) == "/api/players" and "POST" in getattr(route, "methods", ())
    ]

    assert not inspect.iscoroutinefunction(route.endpoint)


def test_create_app_reports_duplicate_ids_as_data_source_error(tmp_path: Path):
    record = {
        "id": 7,
        "firstname": "Ann",
        "lastname": "One",
        "shortname": "A.ONE",
        "sex": "F",
        "country": {"code": "USA", "picture": ""},
        "picture": "",
        "data": {"rank": 1, "points": 10, "weight": 60000, "height": 170, "age": 25, "last": []},
    }
    path = tmp_path / "players.json"
    path.write_text(json.dumps({"players": [record, {**record, "lastname": "Two"}]}), encoding="utf-8")

    with pytest.raises(DataSourceError, match="Duplicate player id 7"):
        create_app(Settings.from_env({"TENNIS_API_DATA_PATH": str(path)}))


@pytest.mark.anyio
async def test_create_player_malformed_body(client: AsyncClient):
    resp = await client.post(
        "/api/players",
        content="{not json",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.anyio
async def test_create_duplicate_player_conflicts(client: AsyncClient):
    resp = await client.post("/api/players", json=_new_player(firstname="novak", lastname="DJOKOVIC"))
    assert resp.status_code == 409
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "Conflict"
    assert "already exists with ID 52" in body["message"]

    listing = await client.get("/api/players")
    assert listing.json()["count"] == 5


@pytest.mark.anyio
async def test_statistics(client: AsyncClient):
    resp = await client.get("/api/statistics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    data = body["data"]
    assert data["countryWithHighestWinRatio"] == {"country": "SRB", "winRatio": 1.0}
    assert data["averageBMI"] > 0
    assert data["medianHeight"] == 185


@pytest.mark.anyio
async def test_statistics_reflect_created_players():
    app = create_app(Settings.from_env({}), repository=PlayerRepository())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        empty = await client.get("/api/statistics")
        assert empty.json()["data"] == {
            "countryWithHighestWinRatio": {"country": "", "winRatio": 0.0},
            "averageBMI": 0.0,
            "medianHeight": 0.0,
        }

        await client.post(
            "/api/players",
            json=_new_player(data={"rank": 1, "points": 10, "weight": 80000, "height": 180, "age": 25, "last": [1, 0]}),
        )
        stats = (await client.get("/api/statistics")).json()["data"]
        assert stats["countryWithHighestWinRatio"] == {"country": "USA", "winRatio": 0.5}
        assert stats["medianHeight"] == 180
        assert stats["averageBMI"] == 24.69


@pytest.mark.anyio
async def test_unknown_route(client: AsyncClient):
    resp = await client.get("/api/unknown")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Route GET /api/unknown not found"


@pytest.mark.anyio
async def test_persisting_app_writes_document(tmp_path: Path):
    path = tmp_path / "players.json"
    path.write_text(json.dumps({"players": []}), encoding="utf-8")
    settings = Settings.from_env({"TENNIS_API_DATA_PATH": str(path), "TENNIS_API_PERSIST": "1"})
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.post("/api/players", json=_new_player())
        assert resp.status_code == 201

    stored = JsonPlayerStore(path).load()
    assert [player.firstname for player in stored] == ["John"]
    assert stored[0].id == 1


@pytest.mark.anyio
async def test_in_memory_app_leaves_document_untouched(tmp_path: Path):
    path = tmp_path / "players.json"
    original = json.dumps({"players": []})
    path.write_text(original, encoding="utf-8")
    app = create_app(Settings.from_env({"TENNIS_API_DATA_PATH": str(path)}))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        resp = await client.post("/api/players", json=_new_player())
        assert resp.status_code == 201

    assert path.read_text(encoding="utf-8") == original

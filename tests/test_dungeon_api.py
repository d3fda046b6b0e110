import pytest

from wfc_dungeon.dungeon import generate
from wfc_dungeon.routes import dungeon_api
from wfc_dungeon.routes.dungeon_api import _coerce_seed, get_cached_map

from dungeon_test_utils import boxed


def test_map_endpoint_shape(client):
    r = client.get("/api/dungeon/map?width=30&height=20&seed=42")
    assert r.status_code == 200
    data = r.get_json()
    assert set(data) == {"seed", "width", "height", "grid", "rows", "metrics"}
    assert (data["seed"], data["width"], data["height"]) == (42, 30, 20)
    assert data["rows"] == data["grid"].split("\n")
    assert len(data["rows"]) == 20
    assert "runtime_ms" in data["metrics"]


def test_map_matches_library_output(client):
    data = client.get("/api/dungeon/map?width=24&height=16&seed=7").get_json()
    assert data["grid"] == generate(24, 16, seed=7)


def test_map_defaults_from_config(client):
    data = client.get("/api/dungeon/map?seed=3").get_json()
    assert (data["width"], data["height"]) == (40, 25)


def test_seed_determinism(client):
    g1 = client.get("/api/dungeon/map?width=20&height=14&seed=777").get_json()["grid"]
    g2 = client.get("/api/dungeon/map?width=20&height=14&seed=777").get_json()["grid"]
    assert g1 == g2


def test_string_seed_hashed(client):
    data = client.get("/api/dungeon/map?width=12&height=9&seed=hello").get_json()
    assert data["seed"] == _coerce_seed("hello")
    assert isinstance(data["seed"], int)


@pytest.mark.parametrize(
    "query",
    ["width=0", "height=-4", "width=abc", "width=81", "height=100000"],
)
def test_map_rejects_bad_dimensions(client, query):
    r = client.get(f"/api/dungeon/map?{query}")
    assert r.status_code == 400
    assert "error" in r.get_json()


def test_cache_reuses_maps(client, test_app, monkeypatch):
    calls = []
    real = dungeon_api.MapGenerator

    def counting(*a, **k):
        calls.append(k)
        return real(*a, **k)

    monkeypatch.setattr(dungeon_api, "MapGenerator", counting)
    monkeypatch.setitem(test_app.config, "DUNGEON_DISABLE_CACHE", False)
    with test_app.app_context():
        a = get_cached_map(5, 14, 10)
        b = get_cached_map(5, 14, 10)
    assert a[0] == b[0]
    assert len(calls) == 1


def test_cache_tracks_generation_flags(client, test_app, monkeypatch):
    monkeypatch.setitem(test_app.config, "DUNGEON_DISABLE_CACHE", False)
    monkeypatch.setitem(test_app.config, "DUNGEON_ENABLE_GENERATION_METRICS", True)
    first = client.get("/api/dungeon/map?width=14&height=10&seed=5").get_json()
    assert "runtime_ms" in first["metrics"]

    monkeypatch.setitem(test_app.config, "DUNGEON_ENABLE_GENERATION_METRICS", False)
    second = client.get("/api/dungeon/map?width=14&height=10&seed=5").get_json()
    assert second["metrics"] == {}
    assert second["grid"] == first["grid"]


def test_cache_key_includes_connectivity_flag(client, test_app, monkeypatch):
    calls = []
    real = dungeon_api.MapGenerator

    def counting(*a, **k):
        calls.append(k)
        return real(*a, **k)

    monkeypatch.setattr(dungeon_api, "MapGenerator", counting)
    monkeypatch.setitem(test_app.config, "DUNGEON_DISABLE_CACHE", False)
    with test_app.app_context():
        monkeypatch.setitem(test_app.config, "DUNGEON_VERIFY_CONNECTIVITY", False)
        get_cached_map(6, 14, 10)
        monkeypatch.setitem(test_app.config, "DUNGEON_VERIFY_CONNECTIVITY", True)
        get_cached_map(6, 14, 10)
        get_cached_map(6, 14, 10)
    assert len(calls) == 2


def test_default_dimension_cap(client, test_app):
    assert test_app.config["DUNGEON_MAX_DIMENSION"] == 80
    r = client.get("/api/dungeon/map?width=80&height=81")
    assert r.status_code == 400
    assert "height" in r.get_json()["error"]


def test_cache_can_be_disabled(client, test_app, monkeypatch):
    calls = []
    real = dungeon_api.MapGenerator

    def counting(*a, **k):
        calls.append(k)
        return real(*a, **k)

    monkeypatch.setattr(dungeon_api, "MapGenerator", counting)
    monkeypatch.setitem(test_app.config, "DUNGEON_DISABLE_CACHE", True)
    with test_app.app_context():
        get_cached_map(5, 14, 10)
        get_cached_map(5, 14, 10)
    assert len(calls) == 2


def test_upscale_endpoint(client):
    r = client.post("/api/dungeon/upscale", json={"grid": ".#\n#.", "factor": 2})
    assert r.status_code == 200
    assert r.get_json() == {"grid": "..##\n..##\n##..\n##..", "factor": 2}


def test_upscale_accepts_row_lists(client):
    r = client.post("/api/dungeon/upscale", json={"grid": [".#", "#."], "factor": 1})
    assert r.get_json()["grid"] == ".#\n#."


@pytest.mark.parametrize("body", [{"grid": ".#", "factor": 0}, {"grid": ".#", "factor": 99}, {"grid": "", "factor": 2}, {"factor": 2}])
def test_upscale_rejects_bad_input(client, body):
    r = client.post("/api/dungeon/upscale", json=body)
    assert r.status_code == 400


def test_non_json_body_rejected(client):
    r = client.post("/api/dungeon/upscale", data="nope", content_type="text/plain")
    assert r.status_code == 400


def test_positions_endpoint(client):
    grid = boxed(["." * 12] * 6)
    r = client.post("/api/dungeon/positions", json={"grid": grid, "enemies": 3, "seed": 9})
    assert r.status_code == 200
    data = r.get_json()
    assert len(data["player"]) == 2
    assert len(data["enemies"]) == 3
    again = client.post("/api/dungeon/positions", json={"grid": grid, "enemies": 3, "seed": 9}).get_json()
    assert again == data


def test_positions_without_floor_is_422(client):
    r = client.post("/api/dungeon/positions", json={"grid": "###\n###", "enemies": 1})
    assert r.status_code == 422
    assert "error" in r.get_json()


def test_positions_rejects_negative_enemies(client):
    r = client.post("/api/dungeon/positions", json={"grid": "#.#", "enemies": -1})
    assert r.status_code == 400


def test_path_endpoint(client):
    grid = boxed(["...", "##.", "..."])
    r = client.post("/api/dungeon/path", json={"grid": grid, "start": [1, 1], "goal": [3, 1]})
    assert r.status_code == 200
    assert r.get_json()["path"] == [[1, 2], [1, 3], [2, 3], [3, 3], [3, 2], [3, 1]]


def test_path_endpoint_unreachable(client):
    grid = boxed([".#."])
    r = client.post("/api/dungeon/path", json={"grid": grid, "start": [1, 1], "goal": [1, 3]})
    assert r.get_json()["path"] == []


@pytest.mark.parametrize("start", [None, [1], "1,1", [1, "x"]])
def test_path_rejects_bad_coordinates(client, start):
    r = client.post("/api/dungeon/path", json={"grid": "#.#", "start": start, "goal": [0, 1]})
    assert r.status_code == 400


def test_visible_endpoint(client):
    grid = boxed(["......."])
    r = client.post("/api/dungeon/visible", json={"grid": grid, "origin": [1, 4], "radius": 1})
    assert r.status_code == 200
    tiles = r.get_json()["tiles"]
    assert tiles[0] == [1, 4]
    assert sorted(tiles) == [[1, 3], [1, 4], [1, 5]]


def test_visible_default_radius(client):
    grid = boxed(["." * 15])
    tiles = client.post("/api/dungeon/visible", json={"grid": grid, "origin": [1, 1]}).get_json()["tiles"]
    assert len(tiles) == 6


def test_coerce_seed_variants():
    assert _coerce_seed(12) == 12
    assert _coerce_seed("  34 ") == 34
    assert _coerce_seed("abc") == _coerce_seed("abc")
    assert 1 <= _coerce_seed(None) <= 1_000_000
    assert 1 <= _coerce_seed("") <= 1_000_000

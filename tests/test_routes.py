"""Tests for the FastAPI surface: health, assets, embed snippets and the
player JSON API (player/main.py, player/assets.py, player/routes_player.py).

The aggregator is served by ``httpx.MockTransport``.
"""

from __future__ import annotations

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from player.aggregator import AggregatorClient
from player.assets import discover_assets
from player.config import Settings
from player.controller import PlayerController
from player.main import create_app
from player.music_api import MusicAPI


def _records(n: int) -> list[dict]:
    return [{"id": i, "name": f"Song {i}", "artist": "Artist"} for i in range(1, n + 1)]


def _settings(tmp_path, **overrides) -> Settings:
    values = {"dist_dir": str(tmp_path / "dist"), "preload_pages": 2, "enable_shuffle": False}
    values.update(overrides)
    return Settings(**values)


def _controller(settings: Settings, handler) -> PlayerController:
    config = settings.music_config()
    client = AggregatorClient(config.meting_api, timeout=1.0, transport=httpx.MockTransport(handler))
    return PlayerController(MusicAPI(client, config, retries=0, backoff_base=0), config)


@pytest.fixture
def dist(tmp_path):
    d = tmp_path / "dist"
    d.mkdir()
    (d / "music-player.iife.js").write_text("console.log('player');")
    (d / "style.css").write_text(".player{}")
    (d / "index.html").write_text("<html></html>")
    return d


@pytest.fixture
def client(tmp_path, dist):
    settings = _settings(tmp_path)
    controller = _controller(settings, lambda request: httpx.Response(200, json=_records(150)))
    with TestClient(create_app(controller=controller, settings=settings)) as c:
        yield c


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

def test_health_returns_ok(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "version" in data


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

def test_discover_assets_maps_extensions(dist):
    routes = {r.path: r.media_type for r in discover_assets(dist)}
    assert routes == {
        "css/style.css": "text/css",
        "js/music-player.iife.js": "application/javascript",
    }


def test_discover_assets_missing_dir(tmp_path):
    assert discover_assets(tmp_path / "nope") == []


def test_serves_js_and_css(client):
    js = client.get("/js/music-player.iife.js")
    assert js.status_code == 200
    assert js.text == "console.log('player');"
    assert js.headers["content-type"].startswith("application/javascript")

    css = client.get("/css/style.css")
    assert css.status_code == 200
    assert css.text == ".player{}"


def test_unknown_or_misfiled_asset_is_404(client):
    assert client.get("/js/index.html").status_code == 404
    assert client.get("/css/music-player.iife.js").status_code == 404
    assert client.get("/js/missing.js").status_code == 404


# ---------------------------------------------------------------------------
# Embed snippets
# ---------------------------------------------------------------------------

def test_head_snippet(client):
    response = client.get("/embed/head")
    assert response.status_code == 200
    assert '<link rel="stylesheet" href="/css/style.css">' in response.text


def test_body_snippet_injects_config(client):
    response = client.get("/embed/body")
    assert response.status_code == 200
    text = response.text
    assert '<script src="/js/music-player.iife.js"></script>' in text

    raw = text.split("window.HEXO_MUSIC_CONFIG = ", 1)[1].split(";\n", 1)[0]
    config = json.loads(raw)
    assert config["metingApi"]["server"] == "netease"
    assert config["pageSize"] == 60
    assert config["preloadPages"] == 2


def test_snippets_empty_when_disabled(tmp_path, dist):
    settings = _settings(tmp_path, enable=False)
    controller = _controller(settings, lambda request: httpx.Response(200, json=[]))
    with TestClient(create_app(controller=controller, settings=settings)) as c:
        assert c.get("/embed/head").text.strip() == ""
        assert "<script" not in c.get("/embed/body").text


# ---------------------------------------------------------------------------
# Player API
# ---------------------------------------------------------------------------

def test_refresh_then_page_navigation(client):
    data = client.post("/api/player/refresh").json()
    assert data["applied"] is True
    assert len(data["fullPlaylist"]) == 120
    assert data["totalPages"] == 3
    assert data["isLoading"] is False

    data = client.post("/api/player/page/3").json()
    assert data["currentPage"] == 3
    assert len(data["playlist"]) == 30


def test_invalid_page_is_400(client):
    client.post("/api/player/refresh")
    assert client.post("/api/player/page/9").status_code == 400
    assert client.post("/api/player/page/0").status_code == 400


def test_next_prev_shuffle_repeat(client):
    client.post("/api/player/refresh")
    assert client.post("/api/player/next").json()["currentSong"]["id"] == 2
    assert client.post("/api/player/prev").json()["currentSong"]["id"] == 1
    assert client.post("/api/player/repeat").json()["isRepeat"] is True

    data = client.post("/api/player/shuffle").json()
    assert data["isShuffle"] is True
    assert data["currentSong"]["id"] == 1
    assert sorted(s["id"] for s in data["shuffledPlaylist"]) == list(range(1, 121))


def test_play_pause_volume_progress(client):
    assert client.post("/api/player/play").json()["isPlaying"] is True
    assert client.post("/api/player/pause").json()["isPlaying"] is False
    assert client.post("/api/player/volume", json={"volume": 0.25}).json()["volume"] == 0.25
    assert client.post("/api/player/volume", json={"volume": 2}).status_code == 422

    data = client.post("/api/player/progress", json={"current_time": 3.5, "duration": 99.0}).json()
    assert data["currentTime"] == 3.5
    assert data["duration"] == 99.0
    assert client.post("/api/player/expand").json()["isExpanded"] is True


def test_random_selection(client):
    data = client.post("/api/player/random").json()
    assert len(data["fullPlaylist"]) == 60
    assert data["totalPages"] == 3


def test_degraded_mode_when_aggregator_down(tmp_path, dist):
    settings = _settings(tmp_path)
    controller = _controller(settings, lambda request: httpx.Response(500))
    with TestClient(create_app(controller=controller, settings=settings)) as c:
        data = c.post("/api/player/refresh").json()
    assert len(data["fullPlaylist"]) == 100
    assert data["totalPages"] == 5
    assert data["currentSong"]["id"] == 1


def test_search_and_recommended_are_empty(client):
    assert client.get("/api/player/search", params={"q": "anything"}).json() == {"songs": []}
    assert client.get("/api/player/recommended").json() == {"songs": []}


def test_state_without_controller_is_503(tmp_path, dist):
    app = create_app(controller=None, settings=_settings(tmp_path))
    # No lifespan: the default controller is never built.
    assert TestClient(app).get("/api/player/state").status_code == 503

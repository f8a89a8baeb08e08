from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from engine.in_memory import clear_index_cache
from main import app
from scenarios.registry import clear_registry_cache


SCENARIO_YAML = """
id: tiny
title: Tiny test scenario
defaultView:
  center: {lat: 10.0, lon: 10.0}
  zoom: 3
source:
  type: geojson_points
  path: points.geojson
clustering:
  maxZoom: 16
  reduce: sum:weight
"""


def _point(lon, lat, weight, fid):
    return {
        "type": "Feature",
        "id": fid,
        "properties": {"weight": weight},
        "geometry": {"type": "Point", "coordinates": [lon, lat]},
    }


@pytest.fixture()
def client(tmp_path, monkeypatch):
    d = tmp_path / "tiny"
    d.mkdir()
    (d / "scenario.yaml").write_text(SCENARIO_YAML, encoding="utf-8")
    (d / "points.geojson").write_text(
        json.dumps(
            {
                "type": "FeatureCollection",
                "features": [
                    _point(10.0, 10.0, 1, "a"),
                    _point(10.0001, 10.0, 2, "b"),
                    _point(10.0, 10.0001, 3, "c"),
                    _point(-100.0, 40.0, 4, "d"),
                ],
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("GEOCLUSTER_SCENARIOS_DIR", str(tmp_path))
    monkeypatch.delenv("GEOCLUSTER_TELEMETRY", raising=False)
    clear_registry_cache()
    clear_index_cache()
    yield TestClient(app)
    clear_registry_cache()
    clear_index_cache()


def _cluster(client) -> dict:
    resp = client.get("/scenarios/tiny/clusters", params={"zoom": 0})
    assert resp.status_code == 200
    return next(f for f in resp.json()["features"] if f["properties"].get("cluster"))


def test_get_scenarios_lists_configured_scenarios(client):
    resp = client.get("/scenarios")
    assert resp.status_code == 200
    rows = resp.json()
    assert [r["id"] for r in rows] == ["tiny"]
    assert rows[0]["clustering"]["reduce"] == "sum:weight"


def test_clusters_endpoint_returns_a_feature_collection(client):
    resp = client.get("/scenarios/tiny/clusters", params={"zoom": 0, "bbox": "-180,-90,180,90"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["type"] == "FeatureCollection"

    feats = body["features"]
    assert len(feats) == 2
    cluster = next(f for f in feats if f["properties"].get("cluster"))
    point = next(f for f in feats if not f["properties"].get("cluster"))
    assert cluster["properties"]["point_count"] == 3
    assert cluster["properties"]["weight"] == 6
    assert cluster["id"] == cluster["properties"]["cluster_id"]
    assert point["id"] == "d"
    assert point["geometry"]["coordinates"] == [-100.0, 40.0]


def test_children_leaves_and_expansion_zoom(client):
    cid = _cluster(client)["id"]

    resp = client.get(f"/scenarios/tiny/clusters/{cid}/children")
    assert resp.status_code == 200
    assert sorted(f["id"] for f in resp.json()["features"]) == ["a", "b", "c"]

    resp = client.get(f"/scenarios/tiny/clusters/{cid}/leaves", params={"limit": 2, "offset": 0})
    assert resp.status_code == 200
    assert len(resp.json()["features"]) == 2

    resp = client.get(f"/scenarios/tiny/clusters/{cid}/expansion-zoom")
    assert resp.status_code == 200
    assert resp.json() == {"clusterId": cid, "zoom": 17}


def test_tiles_endpoint(client):
    resp = client.get("/scenarios/tiny/tiles/0/0/0")
    assert resp.status_code == 200
    feats = resp.json()["features"]
    assert len(feats) == 2
    assert all(f["type"] == 1 for f in feats)

    resp = client.get("/scenarios/tiny/tiles/5/25/25")
    assert resp.status_code == 204

    resp = client.get("/scenarios/tiny/tiles/1/5/0")
    assert resp.status_code == 422


def test_not_found_and_bad_input(client):
    assert client.get("/scenarios/nope/clusters", params={"zoom": 0}).status_code == 404
    assert client.get("/scenarios/tiny/clusters/999999/children").status_code == 404
    assert client.get("/scenarios/tiny/clusters/999999/leaves").status_code == 404
    resp = client.get("/scenarios/tiny/clusters", params={"zoom": 0, "bbox": "1,2,3"})
    assert resp.status_code == 422


def test_shipped_world_places_scenario(monkeypatch):
    monkeypatch.delenv("GEOCLUSTER_SCENARIOS_DIR", raising=False)
    monkeypatch.delenv("GEOCLUSTER_TELEMETRY", raising=False)
    clear_registry_cache()
    clear_index_cache()
    try:
        client = TestClient(app)
        ids = {r["id"] for r in client.get("/scenarios").json()}
        assert "world_places" in ids

        feats = client.get("/scenarios/world_places/clusters", params={"zoom": 0}).json()["features"]
        total = sum(f["properties"].get("point_count", 1) for f in feats)
        # 200 located places; the one without geometry is left out.
        assert total == 200
    finally:
        clear_registry_cache()
        clear_index_cache()

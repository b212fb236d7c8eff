"""Tests for the HTTP service and its client."""

from __future__ import annotations

import threading

import httpx
import pytest

from cityscope.cancellation import ViewportCoordinator
from cityscope.catalog import DEFAULT_CITY_CATALOG
from cityscope.client import CityscopeClient
from cityscope.models import ClusterableItem
from cityscope.service import create_app
from cityscope.store import ItemStore

NEARBY_PAIR = [
    {"id": "a", "lat": 40.7128, "lng": -74.0060},
    {"id": "b", "lat": 40.7138, "lng": -74.0060},
]


class AlwaysCancelled(ViewportCoordinator):
    """Coordinator whose requests are superseded before they start."""

    def begin(self, viewport_key):
        event = threading.Event()
        event.set()
        return event


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def api(app):
    with CityscopeClient(base_url="http://testserver", transport=httpx.WSGITransport(app=app)) as c:
        yield c


# ── Resolution endpoint tests ────────────────────────────────────────────


class TestCityEndpoints:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.get_json() == {"status": "ok", "cities": len(DEFAULT_CITY_CATALOG)}

    def test_nearest(self, client):
        resp = client.get("/cities/nearest?lat=40.7128&lng=-74.0060")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["city"]["id"] == "new-york"
        assert data["distance"] == 0.0
        assert data["fallback_used"] is False

    def test_nearest_with_filter_fallback(self, client):
        data = client.get("/cities/nearest?lat=45&lng=-110&max_distance=10").get_json()
        assert data["city"]["id"] == "billings"
        assert data["fallback_used"] is True

    def test_nearest_prefer_large_metros(self, client):
        url = "/cities/nearest?lat=39.9526&lng=-75.1652&max_distance=100&prefer_large_metros=true"
        assert client.get(url).get_json()["city"]["id"] == "new-york"

    def test_missing_coordinates(self, client):
        resp = client.get("/cities/nearest?lat=40.7")
        assert resp.status_code == 400
        assert "lng is required" in resp.get_json()["errors"]

    def test_out_of_range(self, client):
        resp = client.get("/cities/nearest?lat=95&lng=0")
        assert resp.status_code == 400
        assert resp.get_json()["error"].startswith("Invalid input")

    def test_not_a_number(self, client):
        assert client.get("/cities/nearest?lat=north&lng=0").status_code == 400

    def test_within(self, client):
        assert client.get("/cities/within?lat=40.7128&lng=-74.0060&max_distance=0").get_json() == {"within": True}
        assert client.get("/cities/within?lat=0&lng=-30&max_distance=0").get_json() == {"within": False}
        assert client.get("/cities/within?lat=0&lng=-30&max_distance=-1").status_code == 400

    def test_nearby(self, client):
        data = client.get("/cities/nearby?lat=40.7128&lng=-74.0060&max_distance=100").get_json()
        assert [c["id"] for c in data["cities"]] == ["new-york", "philadelphia"]

    def test_metros(self, client):
        data = client.get("/cities/metros?min_population=2000000").get_json()
        assert [c["id"] for c in data["cities"]] == ["new-york", "los-angeles", "chicago", "houston"]

    @pytest.mark.parametrize("value", ["inf", "nan", "1e6", "abc", "-5"])
    def test_nearest_rejects_bad_min_population(self, client, value):
        resp = client.get(f"/cities/nearest?lat=40&lng=-74&min_population={value}")
        assert resp.status_code == 400
        assert resp.get_json()["errors"][0].startswith("min_population")

    def test_nearest_with_min_population(self, client):
        data = client.get("/cities/nearest?lat=39.9526&lng=-75.1652&min_population=3000000").get_json()
        assert data["city"]["id"] == "new-york"

    @pytest.mark.parametrize("value", ["abc", "-1", "2.5"])
    def test_metros_rejects_bad_min_population(self, client, value):
        resp = client.get(f"/cities/metros?min_population={value}")
        assert resp.status_code == 400

    def test_metros_default_lists_all_cities(self, client):
        data = client.get("/cities/metros").get_json()
        assert len(data["cities"]) == len(DEFAULT_CITY_CATALOG)

    def test_search_radius(self, client):
        assert client.get("/search-radius?lat=40.7128&lng=-74.0060").get_json() == {"radius": 45}

    def test_market(self, client):
        data = client.get("/markets/new-york").get_json()
        assert data["market_id"] == "35"
        assert data["source"] == "catalog"

    def test_unknown_market_city(self, client):
        assert client.get("/markets/atlantis").status_code == 404


# ── Clustering endpoint tests ────────────────────────────────────────────


class TestClusterEndpoints:
    def test_cluster(self, client):
        resp = client.post("/clusters", json={"items": NEARBY_PAIR, "zoom": 10})
        assert resp.status_code == 200
        data = resp.get_json()
        assert len(data["clusters"]) == 1
        assert sorted(data["clusters"][0]["member_ids"]) == ["a", "b"]
        assert data["clusters"][0]["badge_tier"] == "sm"
        assert data["singles"] == []

    def test_cluster_high_zoom(self, client):
        data = client.post("/clusters", json={"items": NEARBY_PAIR, "zoom": 18}).get_json()
        assert data["clusters"] == []
        assert [s["id"] for s in data["singles"]] == ["a", "b"]

    def test_overrides(self, client):
        body = {"items": NEARBY_PAIR, "zoom": 10, "min_cluster_size": 3}
        assert client.post("/clusters", json=body).get_json()["clusters"] == []

    def test_missing_zoom(self, client):
        assert client.post("/clusters", json={"items": NEARBY_PAIR}).status_code == 400

    def test_bad_item(self, client):
        items = NEARBY_PAIR + [{"id": "c", "lat": 123, "lng": 0}, {"lat": 1, "lng": 1}]
        resp = client.post("/clusters", json={"items": items, "zoom": 10})
        assert resp.status_code == 400
        errors = resp.get_json()["errors"]
        assert errors[0].startswith("items[2]:")
        assert errors[-1] == "items[3]: missing id"

    def test_non_object_item(self, client):
        resp = client.post("/clusters", json={"items": ["x", 3], "zoom": 10})
        assert resp.status_code == 400
        assert resp.get_json()["errors"] == ["items[0]: must be an object", "items[1]: must be an object"]

    def test_viewport_must_be_string(self, client):
        body = {"items": NEARBY_PAIR, "zoom": 10, "viewport": ["north", "west"]}
        resp = client.post("/clusters", json=body)
        assert resp.status_code == 400
        assert "viewport" in resp.get_json()["error"]

    def test_body_must_be_object(self, client):
        assert client.post("/clusters", json=[1, 2]).status_code == 400

    def test_cancelled(self):
        client = create_app(coordinator=AlwaysCancelled()).test_client()
        resp = client.post("/clusters", json={"items": NEARBY_PAIR, "zoom": 10, "viewport": "vp"})
        assert resp.status_code == 503


class TestStoredItems:
    def test_add_and_cluster(self, app, client):
        resp = client.post("/items", json={"items": NEARBY_PAIR})
        assert resp.get_json() == {"added": 2, "version": 1, "total": 2}

        first = client.get("/items/clusters?zoom=10").get_json()
        assert first["version"] == 1
        assert len(first["clusters"]) == 1

        second = client.get("/items/clusters?zoom=10").get_json()
        assert second == first
        assert app.extensions["cityscope.cache"].hits == 1

    def test_new_items_change_result(self, client):
        client.post("/items", json={"items": NEARBY_PAIR})
        client.get("/items/clusters?zoom=10")
        client.post("/items", json={"items": [{"id": "c", "lat": 10, "lng": 10}]})
        data = client.get("/items/clusters?zoom=10").get_json()
        assert data["version"] == 2
        assert [s["id"] for s in data["singles"]] == ["c"]

    def test_payload_replacement_is_not_served_stale(self, client):
        item = {"id": "a", "lat": 40.7128, "lng": -74.0060}
        client.post("/items", json={"items": [dict(item, payload={"t": "old"})]})
        first = client.get("/items/clusters?zoom=18").get_json()
        assert first["singles"][0]["payload"] == {"t": "old"}

        client.post("/items", json={"items": [dict(item, payload={"t": "new"})]})
        second = client.get("/items/clusters?zoom=18").get_json()
        assert second["version"] == 2
        assert second["singles"][0]["payload"] == {"t": "new"}

    def test_injected_empty_store_is_used(self):
        store = ItemStore()
        client = create_app(store=store).test_client()
        client.post("/items", json={"items": NEARBY_PAIR})
        assert len(store) == 2

    def test_zoom_required(self, client):
        assert client.get("/items/clusters").status_code == 400


# ── Search plan endpoint tests ───────────────────────────────────────────


class TestSearchPlan:
    def test_point(self, client):
        data = client.post("/search-plan", json={"lat": 40.7128, "lng": -74.0060}).get_json()
        assert data["strategy"] == "primary-city"
        assert data["params"] == {"marketId": "35"}

    def test_bounds(self, client):
        bounds = {"north": 40.8, "south": 40.6, "east": -73.9, "west": -74.1}
        data = client.post("/search-plan", json={"bounds": bounds}).get_json()
        assert data["city"]["id"] == "new-york"

    def test_fallback(self, client):
        data = client.post("/search-plan", json={"lat": 45.0, "lng": -110.0}).get_json()
        assert data["strategy"] == "nearby-cities"
        assert data["fallback_used"] is True

    def test_missing_location(self, client):
        assert client.post("/search-plan", json={}).status_code == 400


# ── Client tests ─────────────────────────────────────────────────────────


class TestClient:
    def test_resolve_nearest_city(self, api):
        city, dist = api.resolve_nearest_city(40.7128, -74.0060)
        assert city == DEFAULT_CITY_CATALOG.get("new-york")
        assert dist == 0.0

    def test_radius_queries(self, api):
        assert api.is_within_event_radius(40.7128, -74.0060, 10) is True
        assert api.optimal_search_radius(40.7128, -74.0060) == 45
        ids = [c.id for c in api.cities_within_radius(40.7128, -74.0060, 100)]
        assert ids == ["new-york", "philadelphia"]

    def test_major_metros(self, api):
        assert [c.id for c in api.major_metros(3_000_000)] == ["new-york", "los-angeles"]

    def test_market_info(self, api):
        assert api.market_info("boulder")["market_id"] == "12"
        with pytest.raises(httpx.HTTPStatusError):
            api.market_info("atlantis")

    def test_cluster_points(self, api):
        items = [ClusterableItem.from_dict(raw) for raw in NEARBY_PAIR]
        data = api.cluster_points(items, 10, viewport="vp-1")
        assert len(data["clusters"]) == 1
        data = api.cluster_points(items, 10, max_cluster_radius_px=0)
        assert len(data["singles"]) == 2

    def test_invalid_input_raises(self, api):
        with pytest.raises(httpx.HTTPStatusError) as exc_info:
            api.resolve_nearest_city(95, 0)
        assert exc_info.value.response.status_code == 400

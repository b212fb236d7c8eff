"""HTTP client for the cityscope service."""

from __future__ import annotations

import logging
from typing import Iterable

import httpx

from cityscope.config import CLUSTER_TIMEOUT_MS
from cityscope.models import City, ClusterableItem

logger = logging.getLogger(__name__)


class CityscopeClient:
    """Thin synchronous client for the resolution and clustering endpoints.

    Requests are idempotent and never retried: every error surfaces as an
    ``httpx.HTTPStatusError`` or ``httpx.RequestError`` to the caller.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        timeout_seconds: float = max(1.0, 2 * CLUSTER_TIMEOUT_MS / 1000.0),
        transport: httpx.BaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=timeout_seconds, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> CityscopeClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _get(self, path: str, **params) -> dict:
        resp = self._client.get(path, params={k: v for k, v in params.items() if v is not None})
        resp.raise_for_status()
        return resp.json()

    def _post(self, path: str, body: dict) -> dict:
        resp = self._client.post(path, json=body)
        resp.raise_for_status()
        return resp.json()

    def resolve_nearest_city(self, lat: float, lng: float) -> tuple[City, float]:
        data = self._get("/cities/nearest", lat=lat, lng=lng)
        return City.from_dict(data["city"]), data["distance"]

    def is_within_event_radius(self, lat: float, lng: float, max_distance: float) -> bool:
        return self._get("/cities/within", lat=lat, lng=lng, max_distance=max_distance)["within"]

    def optimal_search_radius(self, lat: float, lng: float) -> float:
        return self._get("/search-radius", lat=lat, lng=lng)["radius"]

    def market_info(self, city_id: str) -> dict:
        return self._get(f"/markets/{city_id}")

    def cities_within_radius(self, lat: float, lng: float, max_distance: float) -> list[City]:
        data = self._get("/cities/nearby", lat=lat, lng=lng, max_distance=max_distance)
        return [City.from_dict(c) for c in data["cities"]]

    def major_metros(self, min_population: int) -> list[City]:
        data = self._get("/cities/metros", min_population=min_population)
        return [City.from_dict(c) for c in data["cities"]]

    def cluster_points(
        self,
        items: Iterable[ClusterableItem],
        zoom: float,
        max_cluster_radius_px: float | None = None,
        min_cluster_size: int | None = None,
        viewport: str | None = None,
    ) -> dict:
        body: dict = {"items": [item.to_dict() for item in items], "zoom": zoom}
        if max_cluster_radius_px is not None:
            body["max_cluster_radius_px"] = max_cluster_radius_px
        if min_cluster_size is not None:
            body["min_cluster_size"] = min_cluster_size
        if viewport is not None:
            body["viewport"] = viewport
        data = self._post("/clusters", body)
        logger.debug("Clustered %d items: %d clusters, %d singles",
                     len(body["items"]), len(data["clusters"]), len(data["singles"]))
        return data

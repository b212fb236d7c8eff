"""Tests for event-search planning."""

from __future__ import annotations

import pytest

from cityscope.catalog import DEFAULT_CITY_CATALOG
from cityscope.geo import GeoPoint
from cityscope.models import MarketInfo
from cityscope.planner import SearchPlan, SearchPlanner, plan_event_search, ticket_search_params
from cityscope.validation import InvalidInputError

NYC = GeoPoint(40.7128, -74.0060)
# Billings is ~90 mi away, nothing else within 200 mi
PRAIRIE = GeoPoint(45.0, -110.0)
# Cheyenne is the closest city at ~218 mi
BLACK_HILLS = GeoPoint(44.0, -103.0)


@pytest.fixture
def planner():
    return SearchPlanner()


# ── Primary strategy tests ───────────────────────────────────────────────


class TestPrimaryPlan:
    def test_city_centre(self, planner):
        plan = planner.plan(center=NYC)
        assert plan.city.id == "new-york"
        assert plan.city_distance == 0.0
        assert plan.strategy == "primary-city"
        assert plan.fallback_used is False
        assert plan.center == NYC
        assert plan.radius == 45
        assert plan.market.market_id == "35"

    def test_requested_radius_wins(self, planner):
        assert planner.plan(center=NYC, radius=10).radius == 10
        assert planner.plan(center=NYC, radius=0).radius == 0

    def test_negative_radius(self, planner):
        with pytest.raises(InvalidInputError):
            planner.plan(center=NYC, radius=-1)

    def test_bounds(self, planner):
        plan = planner.plan(bounds={"north": 40.8, "south": 40.6, "east": -73.9, "west": -74.1})
        assert plan.city.id == "new-york"
        assert plan.center.lat == pytest.approx(40.7)
        assert plan.center.lng == pytest.approx(-74.0)

    def test_requires_center_or_bounds(self, planner):
        with pytest.raises(InvalidInputError):
            planner.plan()

    def test_incomplete_bounds(self, planner):
        with pytest.raises(InvalidInputError, match="north"):
            planner.plan(bounds={"south": 40.6, "east": -73.9, "west": -74.1})

    def test_bounds_must_be_mapping(self, planner):
        with pytest.raises(InvalidInputError):
            planner.plan(bounds=[40.8, 40.6, -73.9, -74.1])

    def test_far_point_centres_on_market(self, planner):
        # ~40 mi from Philadelphia city hall
        plan = planner.plan(center=GeoPoint(39.9526, -74.42))
        assert plan.city.id == "philadelphia"
        assert plan.city_distance > 30
        assert plan.center == GeoPoint(39.9526, -75.1652)


# ── Fallback tests ───────────────────────────────────────────────────────


class TestFallback:
    def test_nearby_cities(self, planner):
        plan = planner.plan(center=PRAIRIE)
        assert plan.city.id == "billings"
        assert plan.strategy == "nearby-cities"
        assert plan.fallback_used is True
        assert plan.center == DEFAULT_CITY_CATALOG.get("billings").center
        assert plan.radius == 50
        assert plan.cities_checked == 1

    def test_nearby_keeps_requested_radius(self, planner):
        assert planner.plan(center=PRAIRIE, radius=20).radius == 20

    def test_regional(self, planner):
        plan = planner.plan(center=BLACK_HILLS)
        assert plan.city.id == "cheyenne"
        assert plan.strategy == "regional-fallback"
        assert plan.center == DEFAULT_CITY_CATALOG.get("denver").center
        assert plan.radius == 50
        assert plan.cities_checked >= 3

    def test_disabled(self, planner):
        plan = planner.plan(center=PRAIRIE, enable_fallback=False)
        assert plan.strategy == "primary-city"
        assert plan.fallback_used is False

    def test_nothing_in_range_keeps_primary(self, planner):
        plan = planner.plan(center=GeoPoint(30.0, -140.0))
        assert plan.strategy == "primary-city"
        assert plan.radius == 100

    def test_module_helper(self):
        assert plan_event_search(center=NYC).city.id == "new-york"


# ── Provider parameter tests ─────────────────────────────────────────────


class TestTicketSearchParams:
    def _plan(self, radius, market=None) -> SearchPlan:
        return SearchPlan(
            city=DEFAULT_CITY_CATALOG.get("billings"),
            city_distance=5.0,
            market=market or MarketInfo(),
            center=GeoPoint(45.5, -108.5),
            radius=radius,
            strategy="primary-city",
        )

    def test_market_scoped(self):
        plan = self._plan(30, MarketInfo(market_id="35", market_name="New York", source="catalog"))
        assert ticket_search_params(plan) == {"marketId": "35"}

    def test_lat_long(self):
        assert ticket_search_params(self._plan(30)) == {
            "latlong": "45.5,-108.5", "radius": "30", "unit": "miles",
        }

    def test_radius_clamped(self):
        assert ticket_search_params(self._plan(150))["radius"] == "100"
        assert ticket_search_params(self._plan(0.2))["radius"] == "1"

    def test_plan_serialises(self, planner):
        data = planner.plan(center=NYC).to_dict()
        assert data["strategy"] == "primary-city"
        assert data["market"]["market_id"] == "35"
        assert data["center"] == {"lat": 40.7128, "lng": -74.006}

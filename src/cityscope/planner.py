"""Event-search planning: where to centre a provider search and how wide to cast it.

Only the decision is made here; issuing the provider request is left to the
caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cityscope.geo import GeoPoint, midpoint_of_bounds
from cityscope.markets import MarketMapper
from cityscope.models import City, MarketInfo
from cityscope.resolver import NearestCityResolver, search_radius_for
from cityscope.validation import InvalidInputError, require, validate_distance

logger = logging.getLogger(__name__)

# Miles
MARKET_CENTER_MIN_DISTANCE = 30.0
FALLBACK_TRIGGER_DISTANCE = 75.0
NEARBY_SEARCH_DISTANCE = 200.0
NEARBY_MIN_RADIUS = 50.0
REGIONAL_SEARCH_DISTANCE = 500.0
REGIONAL_RADIUS_PADDING = 25.0
REGIONAL_MAX_RADIUS = 100.0
PROVIDER_MIN_RADIUS = 1
PROVIDER_MAX_RADIUS = 100


@dataclass(frozen=True)
class SearchPlan:
    """Resolved search parameters for a point or viewport."""

    city: City
    city_distance: float
    market: MarketInfo
    center: GeoPoint
    radius: float
    strategy: str               # "primary-city", "nearby-cities", "regional-fallback"
    fallback_used: bool = False
    cities_checked: int = 1

    def to_dict(self) -> dict:
        return {
            "city": self.city.to_dict(),
            "city_distance": self.city_distance,
            "market": self.market.to_dict(),
            "center": self.center.to_dict(),
            "radius": self.radius,
            "strategy": self.strategy,
            "fallback_used": self.fallback_used,
            "cities_checked": self.cities_checked,
        }


def _largest(cities: list[City]) -> City:
    return max(cities, key=lambda c: c.population)


class SearchPlanner:
    def __init__(
        self,
        resolver: NearestCityResolver | None = None,
        mapper: MarketMapper | None = None,
    ):
        self.resolver = resolver or NearestCityResolver()
        self.mapper = mapper or MarketMapper()

    def plan(
        self,
        center: Optional[GeoPoint] = None,
        bounds: Optional[dict] = None,
        radius: Optional[float] = None,
        prefer_large_metros: bool = True,
        enable_fallback: bool = True,
    ) -> SearchPlan:
        """Build a search plan from a centre point or a north/south/east/west viewport."""
        point = self._search_center(center, bounds)
        if radius is not None:
            require(validate_distance(radius, "radius"))

        nearest, market = self.resolver.detect_city_with_market(point, self.mapper)
        city, dist = nearest.city, nearest.distance

        search_center = point
        if market.found and dist > MARKET_CENTER_MIN_DISTANCE:
            known = self.mapper.market_by_id(market.market_id)
            if known is not None:
                search_center = known.center

        plan = SearchPlan(
            city=city,
            city_distance=dist,
            market=market,
            center=search_center,
            radius=radius if radius is not None else search_radius_for(city, dist),
            strategy="primary-city",
        )

        if enable_fallback and dist > FALLBACK_TRIGGER_DISTANCE:
            fallback = self._fallback(point, plan, radius, prefer_large_metros)
            if fallback is not None:
                logger.info("Search at (%.4f, %.4f) using %s strategy",
                            point.lat, point.lng, fallback.strategy)
                return fallback

        return plan

    @staticmethod
    def _search_center(center: Optional[GeoPoint], bounds: Optional[dict]) -> GeoPoint:
        if center is not None:
            return center
        if bounds is not None:
            if not isinstance(bounds, dict):
                raise InvalidInputError(["bounds must be an object with north/south/east/west"])
            try:
                return midpoint_of_bounds(
                    bounds["north"], bounds["south"], bounds["east"], bounds["west"],
                )
            except KeyError as exc:
                raise InvalidInputError([f"bounds missing '{exc.args[0]}'"]) from None
        raise InvalidInputError(["must provide either center coordinates or bounds"])

    def _fallback(
        self,
        point: GeoPoint,
        primary: SearchPlan,
        requested_radius: Optional[float],
        prefer_large_metros: bool,
    ) -> Optional[SearchPlan]:
        nearby = self.resolver.cities_within_radius(point, NEARBY_SEARCH_DISTANCE)
        if nearby:
            target = _largest(nearby) if prefer_large_metros else nearby[0]
            return SearchPlan(
                city=primary.city,
                city_distance=primary.city_distance,
                market=primary.market,
                center=target.center,
                radius=(
                    requested_radius if requested_radius is not None
                    else max(target.radius, NEARBY_MIN_RADIUS)
                ),
                strategy="nearby-cities",
                fallback_used=True,
                cities_checked=len(nearby),
            )

        regional = self.resolver.cities_within_radius(point, REGIONAL_SEARCH_DISTANCE)
        if regional:
            target = _largest(regional)
            return SearchPlan(
                city=primary.city,
                city_distance=primary.city_distance,
                market=primary.market,
                center=target.center,
                radius=(
                    requested_radius if requested_radius is not None
                    else min(REGIONAL_MAX_RADIUS, target.radius + REGIONAL_RADIUS_PADDING)
                ),
                strategy="regional-fallback",
                fallback_used=True,
                cities_checked=len(regional),
            )

        return None


def plan_event_search(
    center: Optional[GeoPoint] = None,
    bounds: Optional[dict] = None,
    radius: Optional[float] = None,
    prefer_large_metros: bool = True,
    enable_fallback: bool = True,
) -> SearchPlan:
    return SearchPlanner().plan(center, bounds, radius, prefer_large_metros, enable_fallback)


def ticket_search_params(plan: SearchPlan) -> dict[str, str]:
    """Provider query parameters: market-scoped when possible, else lat/long + radius."""
    if plan.market.market_id:
        return {"marketId": plan.market.market_id}
    radius = max(PROVIDER_MIN_RADIUS, min(PROVIDER_MAX_RADIUS, round(plan.radius)))
    return {
        "latlong": f"{plan.center.lat},{plan.center.lng}",
        "radius": str(radius),
        "unit": "miles",
    }

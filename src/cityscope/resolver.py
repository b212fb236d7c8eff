"""Nearest reference-city resolution.

Every query is a linear scan over the (small, immutable) city catalog. The
resolver always answers: a remote location simply receives a distant
"nearest" city, there is no "not found" path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from cityscope.catalog import DEFAULT_CITY_CATALOG, CityCatalog
from cityscope.geo import GeoPoint, distance
from cityscope.models import City, MarketInfo, NearestCity
from cityscope.validation import require, validate_distance, validate_population

logger = logging.getLogger(__name__)

# Search radius tuning (miles)
FAR_FROM_CITY_MILES = 25.0
FAR_FROM_CITY_PADDING = 15.0
MEGA_METRO_POPULATION = 2_000_000
MEGA_METRO_MIN_RADIUS = 45.0
LARGE_METRO_POPULATION = 1_000_000
LARGE_METRO_MIN_RADIUS = 35.0
SMALL_CITY_POPULATION = 500_000
SMALL_CITY_MIN_RADIUS = 35.0
MAX_SEARCH_RADIUS = 100.0


@dataclass(frozen=True)
class ResolveOptions:
    """Constraints for :meth:`NearestCityResolver.resolve_nearest_filtered`.

    Cities farther than ``max_distance`` or smaller than ``min_population``
    are discarded before ranking. ``prefer_large_metros`` ranks surviving
    candidates by population instead of distance.
    """

    max_distance: Optional[float] = None
    min_population: Optional[int] = None
    prefer_large_metros: bool = False


class NearestCityResolver:
    """Answers "which reference city is this point in/near" queries."""

    def __init__(self, catalog: CityCatalog = DEFAULT_CITY_CATALOG):
        self.catalog = catalog

    def _distances(self, point: GeoPoint) -> list[tuple[City, float]]:
        return [(city, distance(point, city.center)) for city in self.catalog]

    def resolve_nearest(self, point: GeoPoint) -> NearestCity:
        """Return the catalog city closest to ``point``. Ties go to the earlier entry."""
        best_city: City | None = None
        best_distance = float("inf")

        for city, dist in self._distances(point):
            if dist < best_distance:
                best_city = city
                best_distance = dist

        # The catalog is never empty, so best_city is always set
        logger.debug("Nearest city to (%.4f, %.4f): %s at %.1f mi",
                     point.lat, point.lng, best_city.id, best_distance)
        return NearestCity(city=best_city, distance=best_distance)

    def resolve_nearest_filtered(self, point: GeoPoint, options: ResolveOptions) -> NearestCity:
        """Filter the catalog by ``options``, then rank; fall back to the plain nearest city.

        The returned ``fallback_used`` flag is True when no city satisfied the
        constraints and the unfiltered nearest city was returned instead.
        """
        errors: list[str] = []
        if options.max_distance is not None:
            errors.extend(validate_distance(options.max_distance))
        if options.min_population is not None:
            errors.extend(validate_population(options.min_population))
        require(errors)

        candidates = [
            (city, dist)
            for city, dist in self._distances(point)
            if (options.max_distance is None or dist <= options.max_distance)
            and (options.min_population is None or city.population >= options.min_population)
        ]

        if not candidates:
            nearest = self.resolve_nearest(point)
            logger.debug("No city satisfies %s; falling back to %s", options, nearest.city.id)
            return NearestCity(city=nearest.city, distance=nearest.distance, fallback_used=True)

        if options.prefer_large_metros:
            city, dist = min(candidates, key=lambda cd: (-cd[0].population, cd[1]))
        else:
            city, dist = min(candidates, key=lambda cd: cd[1])
        return NearestCity(city=city, distance=dist)

    def is_within_radius(self, point: GeoPoint, max_distance: float) -> bool:
        """True iff some catalog city lies within ``max_distance`` miles of ``point``."""
        require(validate_distance(max_distance))
        return any(distance(point, city.center) <= max_distance for city in self.catalog)

    def optimal_search_radius(self, point: GeoPoint) -> float:
        """Recommended event search radius (miles) around ``point``.

        Starts from the nearest city's own radius, widens it for points far
        from that city, applies population floors and caps the result.
        """
        nearest = self.resolve_nearest(point)
        return search_radius_for(nearest.city, nearest.distance)

    def cities_within_radius(self, point: GeoPoint, max_distance: float) -> list[City]:
        """Cities within ``max_distance`` miles, nearest first."""
        require(validate_distance(max_distance))
        within = [(city, dist) for city, dist in self._distances(point) if dist <= max_distance]
        within.sort(key=lambda cd: cd[1])
        return [city for city, _ in within]

    def major_metros(self, min_population: int) -> list[City]:
        """Cities with at least ``min_population`` residents, largest first."""
        require(validate_population(min_population))
        return [c for c in self.catalog.by_population() if c.population >= min_population]

    def city_by_id(self, city_id: str) -> Optional[City]:
        return self.catalog.get(city_id)

    def all_cities(self) -> list[City]:
        return list(self.catalog.by_population())

    def cities_by_state(self, state: str) -> list[City]:
        return self.catalog.by_state(state)

    def detect_city_with_market(self, point: GeoPoint, mapper=None) -> tuple[NearestCity, MarketInfo]:
        """Resolve the nearest city and its market in one call."""
        if mapper is None:
            from cityscope.markets import MarketMapper
            mapper = MarketMapper()
        nearest = self.resolve_nearest(point)
        return nearest, mapper.market_info(nearest.city)


def search_radius_for(city: City, distance_to_city: float) -> float:
    """Search radius for a query ``distance_to_city`` miles from ``city``."""
    radius = float(city.radius)

    if distance_to_city > FAR_FROM_CITY_MILES:
        radius = max(radius, distance_to_city + FAR_FROM_CITY_PADDING)

    if city.population > MEGA_METRO_POPULATION:
        radius = max(radius, MEGA_METRO_MIN_RADIUS)
    elif city.population >= LARGE_METRO_POPULATION:
        radius = max(radius, LARGE_METRO_MIN_RADIUS)
    elif city.population < SMALL_CITY_POPULATION:
        radius = max(radius, SMALL_CITY_MIN_RADIUS)

    return min(radius, MAX_SEARCH_RADIUS)

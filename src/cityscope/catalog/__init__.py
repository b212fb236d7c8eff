"""Immutable reference catalogs of cities and markets.

Both catalogs are built once at import time and never mutated afterwards;
every resolver and mapper holds a reference to one of them.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from cityscope.catalog.cities import CITY_EMOJI, US_CITIES
from cityscope.catalog.markets import ALL_MARKETS, PRIMARY_MARKETS, SECONDARY_MARKETS
from cityscope.models import City, Market


class CityCatalog:
    """Read-only collection of reference cities. Never empty."""

    def __init__(self, cities: Iterable[City]):
        self._cities: tuple[City, ...] = tuple(cities)
        if not self._cities:
            raise ValueError("city catalog must contain at least one city")

        self._by_id: dict[str, City] = {}
        for city in self._cities:
            if city.id in self._by_id:
                raise ValueError(f"duplicate city id '{city.id}'")
            self._by_id[city.id] = city

        # Stable sort keeps catalog order among equal populations
        self._by_population: tuple[City, ...] = tuple(
            sorted(self._cities, key=lambda c: c.population, reverse=True)
        )

    def __iter__(self) -> Iterator[City]:
        return iter(self._cities)

    def __len__(self) -> int:
        return len(self._cities)

    def __contains__(self, city_id: object) -> bool:
        return city_id in self._by_id

    @property
    def cities(self) -> tuple[City, ...]:
        return self._cities

    def get(self, city_id: str) -> Optional[City]:
        return self._by_id.get(city_id)

    def by_population(self) -> tuple[City, ...]:
        """Cities in descending population order (the canonical "major metro" order)."""
        return self._by_population

    def by_state(self, state: str) -> list[City]:
        state = state.upper()
        return [c for c in self._cities if c.state == state]

    @property
    def states(self) -> set[str]:
        return {c.state for c in self._cities}


class MarketCatalog:
    """Read-only collection of markets. May be empty."""

    def __init__(self, markets: Iterable[Market] = ()):
        self._markets: tuple[Market, ...] = tuple(markets)
        self._by_id: dict[str, Market] = {}
        self._by_city: dict[str, Market] = {}

        for market in self._markets:
            self._by_id.setdefault(market.id, market)

        # A market whose primary city matches wins over mere membership;
        # among members, the first market in catalog order wins.
        for market in self._markets:
            if market.primary_city_id:
                self._by_city.setdefault(market.primary_city_id, market)
        for market in self._markets:
            for city_id in market.city_ids:
                self._by_city.setdefault(city_id, market)

    def __iter__(self) -> Iterator[Market]:
        return iter(self._markets)

    def __len__(self) -> int:
        return len(self._markets)

    def __bool__(self) -> bool:
        return bool(self._markets)

    def get(self, market_id: str) -> Optional[Market]:
        return self._by_id.get(market_id)

    def for_city(self, city_id: str) -> Optional[Market]:
        return self._by_city.get(city_id)

    def ids(self) -> list[str]:
        return [m.id for m in self._markets]


DEFAULT_CITY_CATALOG = CityCatalog(US_CITIES)
DEFAULT_MARKET_CATALOG = MarketCatalog(ALL_MARKETS)


def format_city_display(city: City) -> str:
    """Display label with the city's emoji, e.g. "🗽 NYC"."""
    return f"{CITY_EMOJI.get(city.id, '🏙️')} {city.display_name}"


__all__ = [
    "CityCatalog",
    "MarketCatalog",
    "DEFAULT_CITY_CATALOG",
    "DEFAULT_MARKET_CATALOG",
    "US_CITIES",
    "PRIMARY_MARKETS",
    "SECONDARY_MARKETS",
    "ALL_MARKETS",
    "format_city_display",
]

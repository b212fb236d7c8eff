"""City → market resolution with a three-tier fallback.

1. the market catalog's own entry for the city id,
2. the market id embedded in the city record,
3. the geographically nearest market centre.

An empty market catalog yields an explicit "no market" result.
"""

from __future__ import annotations

import logging
from typing import Optional

from cityscope.catalog import DEFAULT_MARKET_CATALOG, MarketCatalog
from cityscope.geo import GeoPoint, distance
from cityscope.models import City, Market, MarketInfo

logger = logging.getLogger(__name__)

NO_MARKET = MarketInfo()


def _info(market: Market, source: str) -> MarketInfo:
    return MarketInfo(
        market_id=market.id,
        market_name=market.name,
        region_id=market.region_id,
        source=source,
    )


class MarketMapper:
    """Maps cities (or raw points) to promotional market regions."""

    def __init__(self, markets: MarketCatalog = DEFAULT_MARKET_CATALOG):
        self.markets = markets

    def market_info(self, city: City) -> MarketInfo:
        market = self.markets.for_city(city.id)
        if market is not None:
            return _info(market, "catalog")

        if city.market_id:
            known = self.markets.get(city.market_id)
            if known is not None:
                return _info(known, "city")
            # Id not in our table; still usable for provider lookups
            return MarketInfo(market_id=city.market_id, source="city")

        nearest = self.nearest_market(city.center)
        if nearest is not None:
            logger.debug("No market entry for %s; using nearest market %s", city.id, nearest.id)
            return _info(nearest, "nearest")

        return NO_MARKET

    def nearest_market(self, point: GeoPoint) -> Optional[Market]:
        """Market whose centre is closest to ``point``; None for an empty catalog."""
        best: Market | None = None
        best_distance = float("inf")
        for market in self.markets:
            dist = distance(point, market.center)
            if dist < best_distance:
                best = market
                best_distance = dist
        return best

    def market_by_id(self, market_id: str) -> Optional[Market]:
        return self.markets.get(market_id)

    def all_market_ids(self) -> list[str]:
        return self.markets.ids()

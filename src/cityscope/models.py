"""Data models for reference cities, markets and clustered map items."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional

from cityscope.geo import GeoPoint


@dataclass(frozen=True)
class City:
    """Reference population centre used for location resolution."""

    id: str                     # slug, e.g. "new-york"
    name: str
    display_name: str
    center: GeoPoint
    radius: float               # default search radius, miles
    population: int
    timezone: str               # IANA name
    state: str                  # two-letter region code
    market_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "display_name": self.display_name,
            "center": self.center.to_dict(),
            "radius": self.radius,
            "population": self.population,
            "timezone": self.timezone,
            "state": self.state,
            "market_id": self.market_id,
        }

    @classmethod
    def from_dict(cls, d: dict) -> City:
        d = dict(d)
        d["center"] = GeoPoint.from_dict(d["center"])
        return cls(**d)


@dataclass(frozen=True)
class Market:
    """Promotional market region (Ticketmaster-style market, optional DMA id)."""

    id: str
    name: str
    center: GeoPoint
    radius: float               # recommended search radius, miles
    region_id: Optional[str] = None     # DMA id
    city_ids: tuple[str, ...] = ()
    primary_city_id: Optional[str] = None


@dataclass(frozen=True)
class MarketInfo:
    """Outcome of market resolution. Any field may be absent."""

    market_id: Optional[str] = None
    market_name: Optional[str] = None
    region_id: Optional[str] = None
    source: str = "none"        # "catalog", "city", "nearest", "none"

    @property
    def found(self) -> bool:
        return self.market_id is not None

    def to_dict(self) -> dict:
        return {
            "market_id": self.market_id,
            "market_name": self.market_name,
            "region_id": self.region_id,
            "source": self.source,
        }


@dataclass(frozen=True)
class NearestCity:
    """A resolved city and its distance (miles) from the query point."""

    city: City
    distance: float
    fallback_used: bool = False

    def to_dict(self) -> dict:
        return {
            "city": self.city.to_dict(),
            "distance": self.distance,
            "fallback_used": self.fallback_used,
        }


@dataclass(frozen=True)
class ClusterableItem:
    """A geo-tagged map item. ``point`` is None when the item has no coordinates."""

    id: str
    point: Optional[GeoPoint] = None
    payload: Any = field(default=None, compare=False, hash=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "lat": self.point.lat if self.point else None,
            "lng": self.point.lng if self.point else None,
            "payload": self.payload,
        }

    @classmethod
    def from_dict(cls, d: dict) -> ClusterableItem:
        lat, lng = d.get("lat"), d.get("lng")
        point = GeoPoint(lat=lat, lng=lng) if lat is not None and lng is not None else None
        return cls(id=str(d["id"]), point=point, payload=d.get("payload"))


@dataclass(frozen=True)
class Cluster:
    """Group of nearby items rendered as one marker."""

    id: str
    centroid: GeoPoint
    member_ids: tuple[str, ...]

    @property
    def size(self) -> int:
        return len(self.member_ids)

    @property
    def badge_tier(self) -> str:
        """Marker size bucket for the rendering layer."""
        if self.size > 20:
            return "xl"
        if self.size > 10:
            return "lg"
        if self.size > 5:
            return "md"
        return "sm"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "centroid": self.centroid.to_dict(),
            "member_ids": list(self.member_ids),
            "size": self.size,
            "badge_tier": self.badge_tier,
        }


@dataclass
class ClusterResult:
    """Partition of the input items into clusters and individually drawn singles."""

    clusters: list[Cluster] = field(default_factory=list)
    singles: list[ClusterableItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "clusters": [c.to_dict() for c in self.clusters],
            "singles": [s.to_dict() for s in self.singles],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

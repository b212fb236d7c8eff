"""Zoom-adaptive proximity clustering of map items.

Items are put in a canonical ``(lat, lng, id)`` order, then grouped greedily:
each not-yet-assigned item seeds a group and absorbs every later unassigned
item whose on-screen distance from the seed is below the zoom-dependent
radius. Groups that reach the minimum size become clusters; the rest are
drawn individually.

The scan is O(n²) in the worst case (every item in one latitude band).
Because canonical order is latitude-ascending and a great-circle distance is
never shorter than the meridional separation, the inner loop stops as soon as
the latitude gap alone puts a candidate out of reach.
"""

from __future__ import annotations

import hashlib
import logging
import math
import threading
from typing import Iterable, Optional

from cityscope.config import ClusterConfig
from cityscope.geo import EARTH_RADIUS_M, GeoPoint, haversine_km, meters_per_pixel
from cityscope.models import Cluster, ClusterableItem, ClusterResult
from cityscope.validation import require, validate_cluster_params

logger = logging.getLogger(__name__)

# (zoom upper bound, radius multiplier); coarser grouping when zoomed out
ZOOM_RADIUS_TIERS: tuple[tuple[float, float], ...] = (
    (12, 2.0),
    (14, 1.5),
    (16, 1.0),
)
HIGH_ZOOM_MULTIPLIER = 0.5

_METERS_PER_DEGREE_LAT = EARTH_RADIUS_M * math.pi / 180


class ClusterCancelled(Exception):
    """Raised when a caller-supplied cancel event is set mid-computation."""


def canonical_order(items: Iterable[ClusterableItem]) -> list[ClusterableItem]:
    """Drop items without coordinates and sort the rest by (lat, lng, id)."""
    located = [item for item in items if item.point is not None]
    return sorted(located, key=lambda i: (i.point.lat, i.point.lng, i.id))


def _cluster_id(member_ids: Iterable[str]) -> str:
    """Stable cluster id derived from the member ids."""
    content = "|".join(sorted(member_ids))
    return "cluster-" + hashlib.sha256(content.encode()).hexdigest()[:16]


def _centroid(members: list[ClusterableItem]) -> GeoPoint:
    """Mean position, clamped into the members' bounding box against float drift."""
    lats = [m.point.lat for m in members]
    lngs = [m.point.lng for m in members]
    lat = min(max(sum(lats) / len(lats), min(lats)), max(lats))
    lng = min(max(sum(lngs) / len(lngs), min(lngs)), max(lngs))
    return GeoPoint(lat=lat, lng=lng)


class ClusterEngine:
    """Partitions items into clusters and singles for a given zoom level."""

    def __init__(self, config: ClusterConfig | None = None):
        self.config = config or ClusterConfig()
        require(validate_cluster_params(0, self.config.max_cluster_radius_px,
                                        self.config.min_cluster_size))

    def effective_radius(self, zoom: float) -> float:
        """Clustering radius in pixels; non-increasing as zoom grows."""
        base = self.config.max_cluster_radius_px
        for upper, multiplier in ZOOM_RADIUS_TIERS:
            if zoom < upper:
                return base * multiplier
        return base * HIGH_ZOOM_MULTIPLIER

    @staticmethod
    def screen_distance_px(seed: GeoPoint, other: GeoPoint, zoom: float) -> float:
        """Approximate pixel distance between two points, scaled at the seed's latitude."""
        ground_m = haversine_km(seed.lat, seed.lng, other.lat, other.lng) * 1000.0
        if ground_m == 0.0:
            return 0.0
        mpp = meters_per_pixel(seed.lat, zoom)
        if mpp <= 0.0:
            return math.inf
        return ground_m / mpp

    def cluster(
        self,
        items: Iterable[ClusterableItem],
        zoom: float,
        cancel: Optional[threading.Event] = None,
    ) -> ClusterResult:
        """Group ``items`` for display at ``zoom``.

        Items without coordinates are skipped. Raises ``ClusterCancelled`` if
        ``cancel`` becomes set before the scan finishes.
        """
        require(validate_cluster_params(zoom, self.config.max_cluster_radius_px,
                                        self.config.min_cluster_size))

        ordered = canonical_order(items)
        radius_px = self.effective_radius(zoom)
        result = ClusterResult()
        assigned = [False] * len(ordered)

        for i, seed in enumerate(ordered):
            if assigned[i]:
                continue
            if cancel is not None and cancel.is_set():
                raise ClusterCancelled(f"clustering cancelled after {i} of {len(ordered)} items")

            assigned[i] = True
            group = [seed]

            # Ground distance that maps to radius_px at the seed's latitude
            reach_m = radius_px * meters_per_pixel(seed.point.lat, zoom)
            max_dlat = reach_m / _METERS_PER_DEGREE_LAT

            for j in range(i + 1, len(ordered)):
                other = ordered[j]
                if other.point.lat - seed.point.lat > max_dlat:
                    break
                if assigned[j]:
                    continue
                if self.screen_distance_px(seed.point, other.point, zoom) < radius_px:
                    group.append(other)
                    assigned[j] = True

            if len(group) >= self.config.min_cluster_size:
                result.clusters.append(Cluster(
                    id=_cluster_id(m.id for m in group),
                    centroid=_centroid(group),
                    member_ids=tuple(m.id for m in group),
                ))
            else:
                result.singles.extend(group)

        logger.debug(
            "Clustered %d items at zoom %s (radius %.1fpx): %d clusters, %d singles",
            len(ordered), zoom, radius_px, len(result.clusters), len(result.singles),
        )
        return result


def cluster_points(
    items: Iterable[ClusterableItem],
    zoom: float,
    max_cluster_radius_px: float | None = None,
    min_cluster_size: int | None = None,
    cancel: Optional[threading.Event] = None,
) -> ClusterResult:
    """Cluster ``items`` at ``zoom`` with optional overrides of the configured defaults."""
    defaults = ClusterConfig()
    config = ClusterConfig(
        max_cluster_radius_px=(
            defaults.max_cluster_radius_px if max_cluster_radius_px is None else max_cluster_radius_px
        ),
        min_cluster_size=defaults.min_cluster_size if min_cluster_size is None else min_cluster_size,
    )
    return ClusterEngine(config).cluster(items, zoom, cancel=cancel)

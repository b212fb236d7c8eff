"""Nearest-city resolution, market mapping and zoom-adaptive map clustering."""

from cityscope.clustering import ClusterCancelled, ClusterEngine, cluster_points
from cityscope.geo import GeoPoint, distance
from cityscope.markets import MarketMapper
from cityscope.models import City, Cluster, ClusterableItem, ClusterResult, Market, MarketInfo, NearestCity
from cityscope.resolver import NearestCityResolver, ResolveOptions
from cityscope.validation import InvalidInputError

__version__ = "0.1.0"

__all__ = [
    "City",
    "Cluster",
    "ClusterCancelled",
    "ClusterEngine",
    "ClusterResult",
    "ClusterableItem",
    "GeoPoint",
    "InvalidInputError",
    "Market",
    "MarketInfo",
    "MarketMapper",
    "NearestCity",
    "NearestCityResolver",
    "ResolveOptions",
    "cluster_points",
    "distance",
]

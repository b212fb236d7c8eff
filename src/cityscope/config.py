"""Runtime configuration read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

MAX_CLUSTER_RADIUS_PX = float(os.getenv("CITYSCOPE_MAX_CLUSTER_RADIUS_PX", "50"))
MIN_CLUSTER_SIZE = int(os.getenv("CITYSCOPE_MIN_CLUSTER_SIZE", "2"))

# Upper bound on a single clustering request served over HTTP
CLUSTER_TIMEOUT_MS = int(os.getenv("CITYSCOPE_CLUSTER_TIMEOUT_MS", "300"))

# Number of (items, zoom) results memoised by the service
CACHE_SIZE = int(os.getenv("CITYSCOPE_CACHE_SIZE", "128"))

LOG_LEVEL = os.getenv("CITYSCOPE_LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "8080"))


@dataclass(frozen=True)
class ClusterConfig:
    """Tuning for the zoom-adaptive clustering engine."""

    max_cluster_radius_px: float = MAX_CLUSTER_RADIUS_PX
    min_cluster_size: int = MIN_CLUSTER_SIZE

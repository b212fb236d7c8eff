"""HTTP entrypoint exposing city resolution and clustering to the map layer."""

from __future__ import annotations

import logging
import uuid

from flask import Flask, jsonify, request

from cityscope.cancellation import ViewportCoordinator
from cityscope.clustering import ClusterCancelled, ClusterEngine
from cityscope.config import LOG_LEVEL, PORT, ClusterConfig
from cityscope.geo import GeoPoint
from cityscope.markets import MarketMapper
from cityscope.models import ClusterableItem
from cityscope.planner import SearchPlanner, ticket_search_params
from cityscope.resolver import NearestCityResolver, ResolveOptions
from cityscope.store import ClusterCache, ItemStore, items_key
from cityscope.validation import InvalidInputError, require, validate_population

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _float_arg(name: str, errors: list[str], required: bool = True) -> float | None:
    raw = request.args.get(name)
    if raw is None:
        if required:
            errors.append(f"{name} is required")
        return None
    try:
        return float(raw)
    except ValueError:
        errors.append(f"{name} {raw!r} is not a number")
        return None


def _int_arg(name: str, errors: list[str], default: int | None = None) -> int | None:
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        errors.append(f"{name} {raw!r} is not an integer")
        return None
    errors.extend(validate_population(value, name))
    return value


def _point_from_args() -> GeoPoint:
    errors: list[str] = []
    lat = _float_arg("lat", errors)
    lng = _float_arg("lng", errors)
    require(errors)
    return GeoPoint(lat, lng)


def _parse_items(raw_items) -> list[ClusterableItem]:
    if not isinstance(raw_items, list):
        raise InvalidInputError(["items must be a list"])
    items: list[ClusterableItem] = []
    errors: list[str] = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            errors.append(f"items[{index}]: must be an object")
            continue
        try:
            items.append(ClusterableItem.from_dict(raw))
        except InvalidInputError as exc:
            errors.extend(f"items[{index}]: {e}" for e in exc.errors)
        except (KeyError, TypeError):
            errors.append(f"items[{index}]: missing id")
    require(errors)
    return items


def _json_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise InvalidInputError(["request body must be a JSON object"])
    return body


def create_app(
    resolver: NearestCityResolver | None = None,
    mapper: MarketMapper | None = None,
    store: ItemStore | None = None,
    cache: ClusterCache | None = None,
    coordinator: ViewportCoordinator | None = None,
) -> Flask:
    app = Flask(__name__)
    resolver = resolver or NearestCityResolver()
    mapper = mapper or MarketMapper()
    # Both define __len__, so an empty instance is falsy
    store = store if store is not None else ItemStore()
    cache = cache if cache is not None else ClusterCache()
    coordinator = coordinator or ViewportCoordinator()
    planner = SearchPlanner(resolver, mapper)

    app.extensions["cityscope.store"] = store
    app.extensions["cityscope.cache"] = cache

    def run_clustering(items, zoom, engine: ClusterEngine, viewport):
        key = viewport if viewport is not None else uuid.uuid4().hex
        cancel = coordinator.begin(key)
        try:
            return engine.cluster(items, zoom, cancel=cancel)
        finally:
            coordinator.finish(key, cancel)

    @app.errorhandler(InvalidInputError)
    def invalid_input(exc: InvalidInputError):
        return jsonify({"error": str(exc), "errors": exc.errors}), 400

    @app.errorhandler(ClusterCancelled)
    def cancelled(exc: ClusterCancelled):
        logger.warning("Clustering abandoned: %s", exc)
        return jsonify({"error": "clustering cancelled or timed out"}), 503

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "cities": len(resolver.catalog)}), 200

    @app.route("/cities/nearest", methods=["GET"])
    def nearest_city():
        point = _point_from_args()
        errors: list[str] = []
        max_distance = _float_arg("max_distance", errors, required=False)
        min_population = _int_arg("min_population", errors)
        require(errors)
        prefer = request.args.get("prefer_large_metros", "false").lower() in ("1", "true", "yes")

        if max_distance is None and min_population is None and not prefer:
            result = resolver.resolve_nearest(point)
        else:
            result = resolver.resolve_nearest_filtered(point, ResolveOptions(
                max_distance=max_distance,
                min_population=min_population,
                prefer_large_metros=prefer,
            ))
        return jsonify(result.to_dict()), 200

    @app.route("/cities/within", methods=["GET"])
    def within_radius():
        point = _point_from_args()
        errors: list[str] = []
        max_distance = _float_arg("max_distance", errors)
        require(errors)
        return jsonify({"within": resolver.is_within_radius(point, max_distance)}), 200

    @app.route("/cities/nearby", methods=["GET"])
    def nearby_cities():
        point = _point_from_args()
        errors: list[str] = []
        max_distance = _float_arg("max_distance", errors)
        require(errors)
        cities = resolver.cities_within_radius(point, max_distance)
        return jsonify({"cities": [c.to_dict() for c in cities]}), 200

    @app.route("/cities/metros", methods=["GET"])
    def major_metros():
        errors: list[str] = []
        min_population = _int_arg("min_population", errors, default=0)
        require(errors)
        cities = resolver.major_metros(min_population)
        return jsonify({"cities": [c.to_dict() for c in cities]}), 200

    @app.route("/search-radius", methods=["GET"])
    def search_radius():
        point = _point_from_args()
        return jsonify({"radius": resolver.optimal_search_radius(point)}), 200

    @app.route("/markets/<city_id>", methods=["GET"])
    def market_info(city_id: str):
        city = resolver.city_by_id(city_id)
        if city is None:
            return jsonify({"error": f"unknown city '{city_id}'"}), 404
        return jsonify(mapper.market_info(city).to_dict()), 200

    @app.route("/clusters", methods=["POST"])
    def cluster():
        body = _json_body()
        items = _parse_items(body.get("items", []))
        defaults = ClusterConfig()
        engine = ClusterEngine(ClusterConfig(
            max_cluster_radius_px=body.get("max_cluster_radius_px", defaults.max_cluster_radius_px),
            min_cluster_size=body.get("min_cluster_size", defaults.min_cluster_size),
        ))
        viewport = body.get("viewport")
        if viewport is not None and not isinstance(viewport, str):
            raise InvalidInputError([f"viewport {viewport!r} is not a string"])
        result = run_clustering(items, body.get("zoom"), engine, viewport)
        return jsonify(result.to_dict()), 200

    @app.route("/items", methods=["POST"])
    def add_items():
        body = _json_body()
        added = store.extend(_parse_items(body.get("items", [])))
        return jsonify({"added": added, "version": store.version, "total": len(store)}), 200

    @app.route("/items/clusters", methods=["GET"])
    def cluster_stored_items():
        errors: list[str] = []
        zoom = _float_arg("zoom", errors)
        require(errors)
        engine = ClusterEngine()
        version, items = store.snapshot()
        # version covers payload-only replacements that items_key cannot see
        key = (version, items_key(items), zoom,
               engine.config.max_cluster_radius_px, engine.config.min_cluster_size)
        result = cache.get_or_compute(
            key, lambda: run_clustering(items, zoom, engine, request.args.get("viewport")),
        )
        payload = result.to_dict()
        payload["version"] = version
        return jsonify(payload), 200

    @app.route("/search-plan", methods=["POST"])
    def search_plan():
        body = _json_body()
        center = None
        if body.get("lat") is not None or body.get("lng") is not None:
            center = GeoPoint(body.get("lat"), body.get("lng"))
        plan = planner.plan(
            center=center,
            bounds=body.get("bounds"),
            radius=body.get("radius"),
            prefer_large_metros=bool(body.get("prefer_large_metros", True)),
            enable_fallback=bool(body.get("enable_fallback", True)),
        )
        payload = plan.to_dict()
        payload["params"] = ticket_search_params(plan)
        return jsonify(payload), 200

    return app


def main() -> None:
    configure_logging()
    app = create_app()
    logger.info("cityscope service listening on port %d", PORT)
    app.run(host="0.0.0.0", port=PORT, debug=False)


if __name__ == "__main__":
    main()

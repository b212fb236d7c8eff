"""CLI entrypoint for cityscope."""

from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from cityscope.catalog import format_city_display
from cityscope.clustering import cluster_points
from cityscope.config import MAX_CLUSTER_RADIUS_PX, MIN_CLUSTER_SIZE, PORT
from cityscope.geo import GeoPoint, distance
from cityscope.markets import MarketMapper
from cityscope.models import ClusterableItem
from cityscope.planner import plan_event_search, ticket_search_params
from cityscope.resolver import NearestCityResolver
from cityscope.validation import InvalidInputError

console = Console()

lat_option = click.option("--lat", type=float, required=True, help="Latitude, decimal degrees.")
lng_option = click.option("--lng", type=float, required=True, help="Longitude, decimal degrees.")


def _point(lat: float, lng: float) -> GeoPoint:
    try:
        return GeoPoint(lat, lng)
    except InvalidInputError as exc:
        raise click.BadParameter("; ".join(exc.errors)) from None


def _city_table(title: str, cities, origin: GeoPoint | None = None) -> Table:
    table = Table(title=title)
    table.add_column("City")
    table.add_column("State", width=5)
    table.add_column("Population", justify="right")
    table.add_column("Radius (mi)", justify="right")
    if origin is not None:
        table.add_column("Distance (mi)", justify="right")

    for city in cities:
        row = [format_city_display(city), city.state, f"{city.population:,}", f"{city.radius:.0f}"]
        if origin is not None:
            row.append(f"{distance(origin, city.center):.1f}")
        table.add_row(*row)
    return table


@click.group()
def cli():
    """Cityscope — nearest-city resolution and zoom-adaptive map clustering."""


@cli.command()
@lat_option
@lng_option
def resolve(lat: float, lng: float):
    """Resolve the nearest reference city and its market."""
    point = _point(lat, lng)
    nearest, market = NearestCityResolver().detect_city_with_market(point)
    city = nearest.city

    console.print(f"[bold]{format_city_display(city)}[/] — {city.name}, {city.state}")
    console.print(f"Distance: {nearest.distance:.1f} mi   Timezone: {city.timezone}")
    if market.found:
        console.print(
            f"Market: {market.market_name or '?'} (id {market.market_id}, "
            f"DMA {market.region_id or '-'}, via {market.source})"
        )
    else:
        console.print("[yellow]No market available[/]")


@cli.command()
@lat_option
@lng_option
@click.option("--max-distance", default=50.0, type=click.FloatRange(min=0), help="Maximum distance in miles.")
def within(lat: float, lng: float, max_distance: float):
    """Check whether any reference city lies within --max-distance miles."""
    point = _point(lat, lng)
    inside = NearestCityResolver().is_within_radius(point, max_distance)
    color = "green" if inside else "red"
    click.echo(f"Within {max_distance:g} mi of a city: ", nl=False)
    console.print(f"[{color}]{'yes' if inside else 'no'}[/]")


@cli.command()
@lat_option
@lng_option
def radius(lat: float, lng: float):
    """Recommended event search radius around a point."""
    point = _point(lat, lng)
    click.echo(f"{NearestCityResolver().optimal_search_radius(point):.1f}")


@cli.command()
@click.argument("city_id")
def market(city_id: str):
    """Show market information for a catalog CITY_ID."""
    city = NearestCityResolver().city_by_id(city_id)
    if city is None:
        raise click.ClickException(f"unknown city '{city_id}'")
    click.echo(json.dumps(MarketMapper().market_info(city).to_dict(), indent=2))


@cli.command()
@lat_option
@lng_option
@click.option("--max-distance", default=100.0, type=click.FloatRange(min=0), help="Search distance in miles.")
def nearby(lat: float, lng: float, max_distance: float):
    """List reference cities within --max-distance miles, nearest first."""
    point = _point(lat, lng)
    cities = NearestCityResolver().cities_within_radius(point, max_distance)
    console.print(_city_table(f"Cities within {max_distance:g} mi", cities, origin=point))


@cli.command()
@click.option("--min-population", default=1_000_000, type=click.IntRange(min=0), help="Minimum city population.")
def metros(min_population: int):
    """List major metros, largest first."""
    cities = NearestCityResolver().major_metros(min_population)
    console.print(_city_table(f"Metros with {min_population:,}+ residents", cities))


@cli.command()
@click.argument("items_file", type=click.File("r"))
@click.option("--zoom", type=float, required=True, help="Map zoom level.")
@click.option("--radius-px", default=MAX_CLUSTER_RADIUS_PX, help="Base cluster radius in pixels.")
@click.option("--min-size", default=MIN_CLUSTER_SIZE, help="Minimum items per cluster.")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON instead of a table.")
def cluster(items_file, zoom: float, radius_px: float, min_size: int, as_json: bool):
    """Cluster the items in ITEMS_FILE (a JSON list of {id, lat, lng})."""
    try:
        raw_items = json.load(items_file)
    except ValueError as exc:
        raise click.ClickException(f"{items_file.name} is not valid JSON: {exc}") from None
    if not isinstance(raw_items, list) or not all(isinstance(raw, dict) for raw in raw_items):
        raise click.ClickException(f"{items_file.name} must hold a JSON list of objects")

    try:
        items = [ClusterableItem.from_dict(raw) for raw in raw_items]
        result = cluster_points(items, zoom, max_cluster_radius_px=radius_px, min_cluster_size=min_size)
    except InvalidInputError as exc:
        raise click.ClickException(str(exc)) from None
    except KeyError:
        raise click.ClickException("every item must be an object with an 'id'") from None

    if as_json:
        click.echo(result.to_json())
        return

    table = Table(title=f"Clusters at zoom {zoom:g}")
    table.add_column("Cluster")
    table.add_column("Size", justify="right")
    table.add_column("Badge", width=6)
    table.add_column("Centroid", width=22)
    table.add_column("Members")
    for c in result.clusters:
        table.add_row(
            c.id, str(c.size), c.badge_tier,
            f"{c.centroid.lat:.4f}, {c.centroid.lng:.4f}",
            ", ".join(c.member_ids),
        )
    console.print(table)
    console.print(f"Singles: [bold]{len(result.singles)}[/] "
                  f"({', '.join(s.id for s in result.singles) or '-'})")


@cli.command()
@lat_option
@lng_option
@click.option("--radius", "requested_radius", type=float, default=None, help="Override search radius (mi).")
@click.option("--nearest/--largest", default=False, help="Fallback target: nearest city or largest metro.")
def plan(lat: float, lng: float, requested_radius: float | None, nearest: bool):
    """Plan an event search around a point."""
    point = _point(lat, lng)
    try:
        search = plan_event_search(center=point, radius=requested_radius, prefer_large_metros=not nearest)
    except InvalidInputError as exc:
        raise click.ClickException(str(exc)) from None
    payload = search.to_dict()
    payload["params"] = ticket_search_params(search)
    click.echo(json.dumps(payload, indent=2))


@cli.command()
@click.option("--port", default=PORT, help="HTTP port.")
def serve(port: int):
    """Run the HTTP service."""
    from cityscope.service import configure_logging, create_app

    configure_logging()
    create_app().run(host="0.0.0.0", port=port, debug=False)

"""Boundary validation for coordinates, radii and clustering parameters."""

from __future__ import annotations

import math


class InvalidInputError(ValueError):
    """Raised when a caller passes coordinates or parameters outside the contract."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"Invalid input: {'; '.join(errors)}")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_coordinates(lat, lng) -> list[str]:
    """Validate a latitude/longitude pair. Returns list of error messages (empty = valid)."""
    errors: list[str] = []

    if not _is_number(lat) or not math.isfinite(lat):
        errors.append(f"latitude {lat!r} is not a finite number")
    elif not -90 <= lat <= 90:
        errors.append(f"latitude {lat} out of range [-90, 90]")

    if not _is_number(lng) or not math.isfinite(lng):
        errors.append(f"longitude {lng!r} is not a finite number")
    elif not -180 <= lng <= 180:
        errors.append(f"longitude {lng} out of range [-180, 180]")

    return errors


def validate_distance(value, name: str = "max_distance") -> list[str]:
    if not _is_number(value) or not math.isfinite(value):
        return [f"{name} {value!r} is not a finite number"]
    if value < 0:
        return [f"{name} {value} is negative"]
    return []


def validate_population(value, name: str = "min_population") -> list[str]:
    if not isinstance(value, int) or isinstance(value, bool):
        return [f"{name} {value!r} is not an integer"]
    if value < 0:
        return [f"{name} {value} is negative"]
    return []


def validate_cluster_params(zoom, max_cluster_radius_px, min_cluster_size) -> list[str]:
    """Validate the inputs of a clustering call."""
    errors: list[str] = []

    if not _is_number(zoom) or not math.isfinite(zoom):
        errors.append(f"zoom {zoom!r} is not a finite number")
    elif zoom < 0:
        errors.append(f"zoom {zoom} is negative")

    errors.extend(validate_distance(max_cluster_radius_px, "max_cluster_radius_px"))

    if not isinstance(min_cluster_size, int) or isinstance(min_cluster_size, bool):
        errors.append(f"min_cluster_size {min_cluster_size!r} is not an integer")
    elif min_cluster_size < 0:
        errors.append(f"min_cluster_size {min_cluster_size} is negative")

    return errors


def require(errors: list[str]) -> None:
    """Raise InvalidInputError if any errors were collected."""
    if errors:
        raise InvalidInputError(errors)

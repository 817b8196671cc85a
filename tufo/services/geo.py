"""Nearest-neighbor search over parent areas using great-circle distance."""
import math
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from tufo.db import Area
from tufo.errors import ValidationFailure
from .aggregation import AreaTree

EARTH_RADIUS_MILES = 3959.0
DEFAULT_RADIUS_MILES = 50.0
MAX_RESULTS = 20


@dataclass
class NearbyArea:
    area: Area
    distance_miles: float
    climb_count: int


def haversine_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in miles between two lat/lng points in degrees."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # Rounding can push a a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_MILES * math.asin(math.sqrt(min(1.0, a)))


def validate_coordinates(lat: float, lng: float, radius_miles: Optional[float] = None):
    if not -90 <= lat <= 90:
        raise ValidationFailure(f"Latitude {lat} is out of range")
    if not -180 <= lng <= 180:
        raise ValidationFailure(f"Longitude {lng} is out of range")
    if radius_miles is not None and radius_miles < 0:
        raise ValidationFailure("Radius must not be negative")


def nearby_areas(
    session: Session,
    lat: float,
    lng: float,
    radius_miles: float = DEFAULT_RADIUS_MILES,
    limit: int = MAX_RESULTS,
) -> list[NearbyArea]:
    """
    Parent areas within ``radius_miles`` of a point, nearest first.

    A parent area has children or has no parent itself; walls and other
    parented leaves are left out.
    """
    validate_coordinates(lat, lng, radius_miles)

    tree = AreaTree.load(session)
    candidates = [
        node for node in tree.nodes.values()
        if node.lat is not None and node.lng is not None
        and (node.parent_id is None or tree.has_children(node.id))
    ]

    in_range = []
    for node in candidates:
        distance = haversine_miles(lat, lng, node.lat, node.lng)
        if distance <= radius_miles:
            in_range.append((distance, node.id))

    in_range.sort()
    nearest = in_range[:min(limit, MAX_RESULTS)]
    if not nearest:
        return []

    areas = {
        a.id: a
        for a in session.query(Area).filter(Area.id.in_([area_id for _, area_id in nearest])).all()
    }

    return [
        NearbyArea(
            area=areas[area_id],
            distance_miles=distance,
            climb_count=tree.total_climb_count(area_id),
        )
        for distance, area_id in nearest
    ]

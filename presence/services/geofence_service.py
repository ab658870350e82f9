"""
Geofence evaluation: great-circle distance to the office and radius admission.

Pure computation. Out-of-radius is a normal False result; callers turn it into
a user-facing rejection.
"""
import math
from dataclasses import dataclass
from typing import Optional

from presence.core.config import settings

EARTH_RADIUS_METERS = 6_371_000


@dataclass(frozen=True)
class Coordinate:
    """WGS-84 position in decimal degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class OfficeLocation:
    coordinate: Coordinate
    radius_meters: float

    def __post_init__(self):
        if not self.radius_meters > 0:
            raise ValueError("radius_meters must be greater than 0")


@dataclass(frozen=True)
class GeofenceResult:
    distance_meters: float
    within_radius: bool
    office: OfficeLocation


def distance(a: Coordinate, b: Coordinate) -> float:
    """
    Haversine distance in meters between two coordinates.

    Symmetric, non-negative and zero for identical points. Inputs are not
    clamped to valid latitude/longitude ranges.
    """
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_METERS * c


def get_office_location() -> OfficeLocation:
    """Office location and admission radius from settings."""
    return OfficeLocation(
        coordinate=Coordinate(settings.OFFICE_LATITUDE, settings.OFFICE_LONGITUDE),
        radius_meters=settings.OFFICE_RADIUS_METERS,
    )


def is_within_radius(user: Coordinate, office: Optional[OfficeLocation] = None) -> bool:
    """True when user is at most office.radius_meters from the office (inclusive)."""
    office = office or get_office_location()
    return distance(office.coordinate, user) <= office.radius_meters


def evaluate_position(user: Coordinate, office: Optional[OfficeLocation] = None) -> GeofenceResult:
    """Distance and admission decision, for display and audit."""
    office = office or get_office_location()
    meters = distance(office.coordinate, user)
    return GeofenceResult(
        distance_meters=meters,
        within_radius=meters <= office.radius_meters,
        office=office,
    )

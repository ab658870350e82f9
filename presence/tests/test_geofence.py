"""
Tests for geofence distance and radius admission
"""
import pytest
from presence.services.geofence_service import (
    Coordinate,
    OfficeLocation,
    distance,
    evaluate_position,
    get_office_location,
    is_within_radius,
)

OFFICE = Coordinate(-5.1597320842062295, 119.4099062887864)


def test_distance_zero_for_same_point():
    assert distance(OFFICE, OFFICE) == 0


def test_distance_is_symmetric():
    other = Coordinate(-5.1707, 119.4099)
    assert distance(OFFICE, other) == pytest.approx(distance(other, OFFICE))


def test_distance_one_degree_latitude():
    """One degree of latitude is about 111.2 km on a 6,371 km sphere"""
    meters = distance(Coordinate(0, 0), Coordinate(1, 0))
    assert meters == pytest.approx(111_194.9, abs=1)


def test_distance_known_offset_from_office():
    """About 1.2 km south of the office"""
    meters = distance(OFFICE, Coordinate(-5.1707, 119.4099))
    assert 1_200 < meters < 1_230


def test_office_point_is_within_radius():
    assert is_within_radius(OFFICE) is True


def test_far_point_is_outside_radius():
    assert is_within_radius(Coordinate(-5.1707, 119.4099)) is False


def test_radius_boundary_is_inclusive():
    point = Coordinate(OFFICE.latitude + 0.0005, OFFICE.longitude)
    meters = distance(OFFICE, point)

    assert is_within_radius(point, OfficeLocation(OFFICE, meters)) is True
    assert is_within_radius(point, OfficeLocation(OFFICE, meters - 1e-6)) is False


def test_office_location_rejects_non_positive_radius():
    with pytest.raises(ValueError):
        OfficeLocation(OFFICE, 0)
    with pytest.raises(ValueError):
        OfficeLocation(OFFICE, -5)


def test_get_office_location_uses_settings():
    office = get_office_location()
    assert office.coordinate == OFFICE
    assert office.radius_meters == 100


def test_evaluate_position_reports_distance():
    result = evaluate_position(Coordinate(OFFICE.latitude + 0.0005, OFFICE.longitude))
    assert result.within_radius is True
    assert result.distance_meters == pytest.approx(55.6, abs=0.5)
    assert result.office.radius_meters == 100

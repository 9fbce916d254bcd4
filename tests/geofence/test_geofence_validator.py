import math

import pytest

from src.hr_attendance.hr_attendance.core.enums import GeofenceOutcome
from src.hr_attendance.hr_attendance.core.exceptions import InvalidCoordinates, ValidationError
from src.hr_attendance.hr_attendance.geofence.model import Position, WorkLocation
from src.hr_attendance.hr_attendance.geofence.validator import GeofenceValidator, haversine_distance_m

OFFICE = WorkLocation(location_id=1, name="Head Office", latitude=51.5, longitude=-0.1, radius_m=100)

# ~1 m of latitude, in degrees
METER = 1 / 111_194.93


def _north_of(loc: WorkLocation, meters: float, accuracy=None) -> Position:
    return Position(latitude=loc.latitude + meters * METER, longitude=loc.longitude, accuracy=accuracy)


def test_position_inside_radius_matches():
    result = GeofenceValidator().classify(_north_of(OFFICE, 50), [OFFICE])

    assert result.outcome == GeofenceOutcome.MATCHED
    assert result.is_location_valid is True
    assert result.requires_approval is False
    assert result.location == OFFICE
    assert result.label == "Head Office"
    assert result.distance_m == pytest.approx(50, abs=0.5)


def test_position_far_away_requires_approval():
    result = GeofenceValidator().classify(_north_of(OFFICE, 500), [OFFICE])

    assert result.outcome == GeofenceOutcome.OUTSIDE
    assert result.is_location_valid is False
    assert result.requires_approval is True
    assert result.location is None
    assert result.distance_m == pytest.approx(500, abs=1)


def test_exact_center_matches_even_with_zero_radius():
    kiosk = WorkLocation(location_id=2, name="Kiosk", latitude=10.0, longitude=20.0, radius_m=0)

    result = GeofenceValidator().classify(Position(latitude=10.0, longitude=20.0), [kiosk])

    assert result.outcome == GeofenceOutcome.MATCHED
    assert result.distance_m == 0


def test_just_beyond_radius_is_outside():
    position = _north_of(OFFICE, 80)
    distance = haversine_distance_m(position.latitude, position.longitude, OFFICE.latitude, OFFICE.longitude)
    tight = WorkLocation(location_id=3, name="Tight", latitude=OFFICE.latitude, longitude=OFFICE.longitude, radius_m=distance - 1e-6)

    assert GeofenceValidator().classify(position, [tight]).outcome == GeofenceOutcome.OUTSIDE


def test_smallest_radius_wins_on_overlap():
    campus = WorkLocation(location_id=10, name="Campus", latitude=51.5, longitude=-0.1, radius_m=1000)
    lab = WorkLocation(location_id=11, name="Lab", latitude=51.5 + 30 * METER, longitude=-0.1, radius_m=50)

    result = GeofenceValidator().classify(_north_of(OFFICE, 20), [campus, lab])

    assert result.location == lab


def test_remote_allowed_site_makes_far_position_remote():
    hub = WorkLocation(location_id=4, name="Hub", latitude=40.0, longitude=-74.0, is_remote_allowed=True)

    result = GeofenceValidator().classify(_north_of(OFFICE, 500), [OFFICE, hub])

    assert result.outcome == GeofenceOutcome.REMOTE
    assert result.is_location_valid is False
    assert result.requires_approval is False
    assert result.label == "Remote"


def test_inactive_locations_are_ignored():
    closed = WorkLocation(location_id=5, name="Closed", latitude=51.5, longitude=-0.1, is_active=False, is_remote_allowed=True)

    result = GeofenceValidator().classify(_north_of(OFFICE, 10), [closed])

    assert result.outcome == GeofenceOutcome.OUTSIDE
    assert result.distance_m is None


def test_no_locations_is_outside():
    result = GeofenceValidator().classify(Position(latitude=0.0, longitude=0.0), [])

    assert result.outcome == GeofenceOutcome.OUTSIDE
    assert result.label == "Outside Work Locations"


@pytest.mark.parametrize(
    "lat, lon",
    [(91, 0), (-90.5, 0), (0, 181), (0, -180.01), (math.nan, 0), ("abc", 0), (None, None), (True, 0), (0, False)],
)
def test_invalid_coordinates_are_rejected(lat, lon):
    with pytest.raises(InvalidCoordinates):
        GeofenceValidator().classify(Position(latitude=lat, longitude=lon), [OFFICE])


def test_boundary_coordinates_are_accepted():
    result = GeofenceValidator().classify(Position(latitude=90, longitude=-180), [OFFICE])

    assert result.outcome == GeofenceOutcome.OUTSIDE


@pytest.mark.parametrize("accuracy", [None, 0])
def test_missing_accuracy_is_unknown_not_invalid(accuracy):
    position = GeofenceValidator().validate_position(_north_of(OFFICE, 10, accuracy=accuracy))

    assert position.accuracy is None


def test_negative_accuracy_is_rejected():
    with pytest.raises(ValidationError):
        GeofenceValidator().validate_position(_north_of(OFFICE, 10, accuracy=-3))


def test_haversine_is_symmetric():
    a = haversine_distance_m(51.5, -0.1, 48.85, 2.35)
    b = haversine_distance_m(48.85, 2.35, 51.5, -0.1)

    assert a == pytest.approx(b)
    assert 330_000 < a < 350_000


def test_boolean_accuracy_is_rejected():
    with pytest.raises(ValidationError):
        GeofenceValidator().validate_position(_north_of(OFFICE, 10, accuracy=True))

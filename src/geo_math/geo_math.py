import math
from itertools import pairwise
from typing import Sequence

from pyproj import Geod

from geo_math.exceptions import InvalidCoordinates
from geo_math.point import Point
from geo_math.turn_direction import TurnDirection

EARTH_RADIUS_METERS = 6_371_000.0

_STRAIGHT_THRESHOLD_DEGREES = 15.0
_SLIGHT_THRESHOLD_DEGREES = 45.0
_TURN_THRESHOLD_DEGREES = 135.0
_U_TURN_THRESHOLD_DEGREES = 170.0

_geod = Geod(ellps="WGS84")


def distance(a: Point, b: Point) -> float:
    """
    Great-circle distance in meters between two points (haversine formula).
    """

    phi_1 = math.radians(a.latitude)
    phi_2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi_1) * math.cos(phi_2) * math.sin(delta_lambda / 2) ** 2
    )

    return 2 * EARTH_RADIUS_METERS * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def polyline_length(points: Sequence[Point]) -> float:
    return sum(distance(a, b) for a, b in pairwise(points))


def bearing(a: Point, b: Point) -> float:
    """
    Initial compass bearing in degrees, in range [0, 360), from `a` towards `b`.
    """

    azimuth, _, _ = _geod.inv(a.longitude, a.latitude, b.longitude, b.latitude)
    return azimuth % 360.0


def signed_angle_difference(bearing_in: float, bearing_out: float) -> float:
    """
    Difference between two bearings normalized to (-180, 180].
    Positive values mean clockwise rotation (a right turn).
    """

    difference = (bearing_out - bearing_in) % 360.0
    return difference - 360.0 if difference > 180.0 else difference


def classify_turn(bearing_in: float, bearing_out: float) -> TurnDirection:
    angle = signed_angle_difference(bearing_in, bearing_out)
    magnitude = abs(angle)

    if magnitude < _STRAIGHT_THRESHOLD_DEGREES:
        return TurnDirection.STRAIGHT
    if magnitude > _U_TURN_THRESHOLD_DEGREES:
        return TurnDirection.U_TURN

    is_right = angle > 0
    if magnitude <= _SLIGHT_THRESHOLD_DEGREES:
        return TurnDirection.SLIGHT_RIGHT if is_right else TurnDirection.SLIGHT_LEFT
    if magnitude <= _TURN_THRESHOLD_DEGREES:
        return TurnDirection.RIGHT if is_right else TurnDirection.LEFT

    return TurnDirection.SHARP_RIGHT if is_right else TurnDirection.SHARP_LEFT


def midpoint(a: Point, b: Point) -> Point:
    return Point(
        latitude=(a.latitude + b.latitude) / 2,
        longitude=(a.longitude + b.longitude) / 2,
    )


def offset(origin: Point, north_meters: float, east_meters: float) -> Point:
    """
    Point displaced from `origin` by the given distances on a local
    spherical approximation. Good enough for grids spanning a few kilometers.
    """

    latitude = origin.latitude + math.degrees(north_meters / EARTH_RADIUS_METERS)
    longitude = origin.longitude + math.degrees(
        east_meters / (EARTH_RADIUS_METERS * math.cos(math.radians(origin.latitude)))
    )
    return Point(latitude=latitude, longitude=longitude)


def validate_point(point: Point) -> Point:
    latitude, longitude = point.coordinates

    if not all(math.isfinite(value) for value in (latitude, longitude)):
        raise InvalidCoordinates(latitude, longitude, "coordinates must be finite")
    if not -90.0 <= latitude <= 90.0:
        raise InvalidCoordinates(latitude, longitude, "latitude out of range")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidCoordinates(latitude, longitude, "longitude out of range")

    return point


from .exceptions import InvalidCoordinates
from .geo_math import (
    bearing,
    classify_turn,
    distance,
    EARTH_RADIUS_METERS,
    midpoint,
    offset,
    polyline_length,
    signed_angle_difference,
    validate_point,
)
from .point import Point
from .turn_direction import TurnDirection

__all__ = [
    "Point",
    "TurnDirection",
    "InvalidCoordinates",
    "EARTH_RADIUS_METERS",
    "distance",
    "polyline_length",
    "bearing",
    "signed_angle_difference",
    "classify_turn",
    "midpoint",
    "offset",
    "validate_point",
]

from typing import Self

from shapely.geometry import box, Point as ShapelyPoint

from geo_math import InvalidCoordinates, Point
from route_planner.router_configuration import GeofenceConfiguration


class Geofence:
    """
    Rectangular operating area of the service. Points on the boundary
    are considered inside.
    """

    def __init__(self, south: float, west: float, north: float, east: float) -> None:
        self._polygon = box(west, south, east, north)

    @classmethod
    def from_configuration(cls, configuration: GeofenceConfiguration) -> Self:
        return cls(
            configuration.south,
            configuration.west,
            configuration.north,
            configuration.east,
        )

    def contains(self, point: Point) -> bool:
        return self._polygon.covers(ShapelyPoint(point.lon_lat))

    def validate(self, point: Point) -> Point:
        if not self.contains(point):
            raise InvalidCoordinates(
                point.latitude, point.longitude, "outside of the operating area"
            )

        return point

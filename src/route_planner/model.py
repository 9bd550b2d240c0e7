from enum import StrEnum
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from geo_math import Point, TurnDirection
from road_graph import NodeRef


class DegradedReason(StrEnum):
    """
    Why a route does not follow the road network:
    - no_path_found: destination is unreachable from the origin over the roads,
    - endpoint_off_network: origin or destination is too far from any road,
    - network_unavailable: the road network could not be fetched.
    """

    NO_PATH_FOUND = "no_path_found"
    ENDPOINT_OFF_NETWORK = "endpoint_off_network"
    NETWORK_UNAVAILABLE = "network_unavailable"

    @property
    def message(self) -> str:
        match self:
            case DegradedReason.NO_PATH_FOUND:
                return "No road connection was found, showing a direct line."
            case DegradedReason.ENDPOINT_OFF_NETWORK:
                return "Pickup or drop-off is far from any road, showing a direct line."
            case DegradedReason.NETWORK_UNAVAILABLE:
                return "Road map is unavailable, the route is approximate."


class RouteManeuver(BaseModel):
    """
    Turn to take at a vertex of the route polyline.
    Attributes:
        index (int): Index of the vertex in the polyline.
        point (Point): Position of the vertex.
        direction (TurnDirection): Direction of the turn.
    """

    index: int
    point: Point
    direction: TurnDirection


class PathResult(BaseModel):
    path: list[NodeRef]
    polyline: list[Point]
    distance_meters: float
    duration_seconds: float
    fare: float


class RouteResult(BaseModel):
    polyline: list[Point]
    distance_meters: float
    duration_seconds: float
    fare: float
    currency: str
    degraded: bool = False
    degraded_reason: DegradedReason | None = None
    path: list[str] = Field(default_factory=list)
    maneuvers: list[RouteManeuver] = Field(default_factory=list)

    @property
    def distance_km(self) -> float:
        return self.distance_meters / 1000

    @property
    def degraded_message(self) -> str | None:
        return self.degraded_reason.message if self.degraded_reason else None


class RouteRequest(BaseModel):
    origin: Point
    destination: Point
    search_radius_meters: float | None = Field(default=None, gt=0)


class RideRequestDraft(RouteRequest):
    pickup_address: str
    dropoff_address: str


class RideLocation(BaseModel):
    """
    GeoJSON-style point, `coordinates` are `[longitude, latitude]`.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]
    address: str

    @classmethod
    def from_point(cls, point: Point, address: str) -> Self:
        return cls(coordinates=point.lon_lat, address=address)


class RideRequestPayload(BaseModel):
    """
    Plain data handed over to the ride submission service.
    Distance is in meters and duration in seconds.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    pickup_location: RideLocation
    dropoff_location: RideLocation
    distance: float
    duration: float
    fare: float
    currency: str
    degraded: bool

    @classmethod
    def from_route(
        cls,
        route: RouteResult,
        origin: Point,
        destination: Point,
        pickup_address: str,
        dropoff_address: str,
    ) -> Self:
        return cls(
            pickup_location=RideLocation.from_point(origin, pickup_address),
            dropoff_location=RideLocation.from_point(destination, dropoff_address),
            distance=route.distance_meters,
            duration=route.duration_seconds,
            fare=route.fare,
            currency=route.currency,
            degraded=route.degraded,
        )


class FareEstimate(BaseModel):
    distance_km: float
    fare: float
    currency: str

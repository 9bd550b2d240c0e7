from .exceptions import NoNodeFound, NoPathFound, RouteComputationCancelled
from .fare_estimator import FareEstimator
from .geofence import Geofence
from .model import (
    DegradedReason,
    FareEstimate,
    PathResult,
    RideLocation,
    RideRequestDraft,
    RideRequestPayload,
    RouteManeuver,
    RouteRequest,
    RouteResult,
)
from .nearest_node_locator import NearestNode, NearestNodeLocator
from .path_planner import describe_maneuvers, PathPlanner, straight_line_route
from .router import Router
from .router_configuration import (
    FareConfiguration,
    FetchConfiguration,
    GeofenceConfiguration,
    LocatorConfiguration,
    RetryConfiguration,
    RouterConfiguration,
)

__all__ = [
    "Router",
    "RouterConfiguration",
    "FareConfiguration",
    "FetchConfiguration",
    "GeofenceConfiguration",
    "LocatorConfiguration",
    "RetryConfiguration",
    "FareEstimator",
    "Geofence",
    "NearestNode",
    "NearestNodeLocator",
    "PathPlanner",
    "straight_line_route",
    "describe_maneuvers",
    "RouteResult",
    "PathResult",
    "RouteManeuver",
    "DegradedReason",
    "RouteRequest",
    "RideRequestDraft",
    "RideRequestPayload",
    "RideLocation",
    "FareEstimate",
    "NoNodeFound",
    "NoPathFound",
    "RouteComputationCancelled",
]

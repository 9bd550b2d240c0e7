from geo_math import Point
from road_graph import NodeRef
from routing_errors import RoutingError, RoutingStage


class NoNodeFound(RoutingError):
    """
    Coordinates can't be resolved to a graph node,
    because the road graph is empty or was never built.
    """

    def __init__(self, point: Point) -> None:
        super().__init__(
            RoutingStage.LOCATE,
            f"No road graph node found near ({point.latitude}, {point.longitude})",
        )

        self.point = point


class NoPathFound(RoutingError):
    def __init__(self, start: NodeRef, end: NodeRef, reason: str) -> None:
        super().__init__(
            RoutingStage.PLAN, f"No path found from {start} to {end}: {reason}"
        )

        self.start = start
        self.end = end
        self.reason = reason


class RouteComputationCancelled(RoutingError):
    def __init__(self) -> None:
        super().__init__(RoutingStage.PLAN, "Route computation was cancelled")

import logging
import math
import threading
from itertools import pairwise
from typing import Any

import networkx as nx
from networkx.exception import NetworkXNoPath

from geo_math import bearing, classify_turn, distance, Point, polyline_length, TurnDirection
from road_graph import NodeRef, RoadGraph, RoadGraphBuilder
from route_planner.exceptions import NoPathFound, RouteComputationCancelled
from route_planner.fare_estimator import FareEstimator
from route_planner.model import PathResult, RouteManeuver

logger = logging.getLogger(__name__)


class PathPlanner:
    """
    Computes the fastest path between two nodes of a road graph with
    Dijkstra's algorithm, stopping as soon as the destination is settled.

    Impassable edges, those with infinite travel time, are never traversed.
    Long computations may be abandoned by setting `cancel_event`, which is
    checked every time an edge is relaxed. The graph is only read, so
    a cancelled computation leaves it untouched.
    """

    def __init__(self, graph: RoadGraph, fare_estimator: FareEstimator | None = None):
        self.graph = graph
        self.fare_estimator = fare_estimator or FareEstimator()

    @staticmethod
    def _get_weight_function(cancel_event: threading.Event | None):
        def weight(source: NodeRef, target: NodeRef, data: dict[str, Any]) -> float | None:
            if cancel_event is not None and cancel_event.is_set():
                raise RouteComputationCancelled()

            edge_weight = data["weight"]
            return None if math.isinf(edge_weight) else edge_weight

        return weight

    def expand_path(self, path: list[NodeRef]) -> list[Point]:
        """
        Polyline following the full shape of the roads along `path`.
        """

        if not path:
            return []

        polyline = [self.graph.point(path[0])]
        for source, target in pairwise(path):
            polyline.extend(self.graph.edge(source, target).get("geometry", ()))
            polyline.append(self.graph.point(target))

        return polyline

    def find_shortest_path(
        self,
        start: NodeRef,
        end: NodeRef,
        *,
        cancel_event: threading.Event | None = None,
    ) -> PathResult:
        for node_ref in (start, end):
            if node_ref not in self.graph:
                raise NoPathFound(start, end, f"{node_ref} is not in the road graph")

        try:
            duration_seconds, path = nx.single_source_dijkstra(
                self.graph.nx_graph,
                start,
                target=end,
                weight=self._get_weight_function(cancel_event),
            )
        except NetworkXNoPath:
            raise NoPathFound(start, end, "destination is unreachable")

        polyline = self.expand_path(path)
        distance_meters = polyline_length(polyline)

        logger.debug(
            "Found path of %d nodes, %.1f m, %.1f s from %s to %s",
            len(path),
            distance_meters,
            duration_seconds,
            start,
            end,
        )

        return PathResult(
            path=path,
            polyline=polyline,
            distance_meters=distance_meters,
            duration_seconds=duration_seconds,
            fare=self.fare_estimator.estimate(distance_meters / 1000),
        )


def straight_line_route(
    origin: Point,
    destination: Point,
    average_speed_kph: float = 40.0,
    fare_estimator: FareEstimator | None = None,
) -> PathResult:
    """
    Direct two-point route used when the road network can't provide one.
    """

    fare_estimator = fare_estimator or FareEstimator()
    distance_meters = distance(origin, destination)

    return PathResult(
        path=[],
        polyline=[origin, destination],
        distance_meters=distance_meters,
        duration_seconds=RoadGraphBuilder.get_travel_time(
            distance_meters, average_speed_kph
        ),
        fare=fare_estimator.estimate(distance_meters / 1000),
    )


def describe_maneuvers(polyline: list[Point]) -> list[RouteManeuver]:
    """
    Turns to take along the polyline. Going straight is not a maneuver,
    and repeated vertices are ignored since they have no bearing.
    """

    vertices = [
        (index, point)
        for index, point in enumerate(polyline)
        if index == 0 or distance(polyline[index - 1], point) > 0
    ]

    maneuvers: list[RouteManeuver] = []
    for (_, previous), (index, current), (_, following) in zip(
        vertices, vertices[1:], vertices[2:]
    ):
        direction = classify_turn(bearing(previous, current), bearing(current, following))
        if direction != TurnDirection.STRAIGHT:
            maneuvers.append(RouteManeuver(index=index, point=current, direction=direction))

    return maneuvers

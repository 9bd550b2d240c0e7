import logging
import math

from pydantic import BaseModel

from geo_math import distance, Point
from road_graph import NodeRef, RoadGraph
from route_planner.exceptions import NoNodeFound

logger = logging.getLogger(__name__)


class NearestNode(BaseModel):
    node_ref: NodeRef
    point: Point
    distance_meters: float


class NearestNodeLocator:
    """
    Resolves coordinates to the node of a road graph a route should start
    or end at.

    Preferred nodes lie on a road segment and have at least one outgoing
    edge. The search looks for them within growing radii `r`, `2r`, `4r` and
    then without a limit. The nearest node within the first radius containing
    any wins, ties are broken by the order in which nodes were added to the
    graph. If the graph holds no preferred node at all, the absolute nearest
    node is returned.
    """

    RADIUS_MULTIPLIERS = (1, 2, 4, math.inf)

    def __init__(self, graph: RoadGraph) -> None:
        self.graph = graph
        self._preferred_nodes = [
            (node_ref, point)
            for node_ref, point in graph.nodes()
            if graph.is_in_segment(node_ref) and graph.out_degree(node_ref) > 0
        ]

    @staticmethod
    def _find_nearest(
        point: Point, nodes: list[tuple[NodeRef, Point]]
    ) -> NearestNode | None:
        nearest: NearestNode | None = None

        for node_ref, node_point in nodes:
            node_distance = distance(point, node_point)
            if nearest is None or node_distance < nearest.distance_meters:
                nearest = NearestNode(
                    node_ref=node_ref, point=node_point, distance_meters=node_distance
                )

        return nearest

    def locate(self, point: Point, initial_radius_meters: float = 500.0) -> NearestNode:
        if initial_radius_meters <= 0:
            raise ValueError("Initial search radius must be positive.")

        if self.graph.is_empty:
            raise NoNodeFound(point)

        nearest = self._find_nearest(point, self._preferred_nodes)
        if nearest is not None:
            # The nearest preferred node is also the nearest one within
            # the first radius that contains any, so a single pass suffices.
            multiplier = next(
                multiplier
                for multiplier in self.RADIUS_MULTIPLIERS
                if nearest.distance_meters <= initial_radius_meters * multiplier
            )
            if math.isinf(multiplier):
                logger.warning(
                    "Nearest road node %s is %.1f m away from (%f, %f)",
                    nearest.node_ref,
                    nearest.distance_meters,
                    point.latitude,
                    point.longitude,
                )

            return nearest

        logger.warning(
            "No road segment node with outgoing edges found, using the nearest node."
        )
        nearest = self._find_nearest(point, list(self.graph.nodes()))
        if nearest is None:
            raise NoNodeFound(point)

        return nearest

    def is_in_disconnected_component(self, point: Point) -> bool:
        """
        Whether `point` lies closer to a road left out of the graph for not
        being connected to it than to any vertex of the roads in the graph.
        Such a point can't be reached over the roads, even when a node of the
        graph is within connector distance.
        """

        if not self.graph.disconnected_points:
            return False

        nearest_disconnected = min(
            distance(point, road_point) for road_point in self.graph.disconnected_points
        )
        nearest_connected = min(
            (distance(point, road_point) for road_point in self.graph.road_points()),
            default=math.inf,
        )

        return nearest_disconnected < nearest_connected

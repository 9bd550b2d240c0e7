import logging
import math
from typing import Any, Iterable, Iterator

import networkx as nx

from geo_math import distance, Point
from road_graph.exceptions import (
    EdgeNotFoundError,
    FrozenRoadGraphError,
    NodeNotFoundError,
)
from road_graph.node_ref import NodeRef

logger = logging.getLogger(__name__)


class RoadGraph:
    """
    RoadGraph is the in-memory road network of one geographic area. It wraps
    a directed NetworkX graph whose nodes are `NodeRef` instances carrying
    a `point` and the IDs of the road segments they belong to, and whose
    edges carry the travel time in seconds as `weight` together with
    the road `distance` in meters and the intermediate shape `geometry`.

    Two-way roads are stored as two directed edges. A graph is mutable
    while being built and should be frozen with `freeze` before it is
    shared with locators and planners, so that queries never observe
    a graph in the middle of a rebuild.
    """

    SPARSE_AVERAGE_DEGREE = 1.5
    SPARSE_MIN_NODE_COUNT = 10

    def __init__(
        self,
        *,
        center: Point | None = None,
        radius_meters: float = 0.0,
        is_synthetic: bool = False,
    ) -> None:
        self._graph: "nx.DiGraph[NodeRef]" = nx.DiGraph()
        self._is_frozen = False

        self._disconnected_points: tuple[Point, ...] = ()

        self.center = center
        self.radius_meters = radius_meters
        self.is_synthetic = is_synthetic

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, node_ref: object) -> bool:
        return node_ref in self._graph

    @property
    def nx_graph(self) -> "nx.DiGraph[NodeRef]":
        return self._graph

    @property
    def is_empty(self) -> bool:
        return self._graph.number_of_nodes() == 0

    @property
    def is_frozen(self) -> bool:
        return self._is_frozen

    @property
    def disconnected_points(self) -> tuple[Point, ...]:
        return self._disconnected_points

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    @property
    def average_out_degree(self) -> float:
        node_count = self._graph.number_of_nodes()
        return self._graph.number_of_edges() / node_count if node_count else 0.0

    @property
    def is_sparse(self) -> bool:
        return (
            len(self) > self.SPARSE_MIN_NODE_COUNT
            and self.average_out_degree < self.SPARSE_AVERAGE_DEGREE
        )

    def _ensure_mutable(self) -> None:
        if self._is_frozen:
            raise FrozenRoadGraphError()

    def freeze(self) -> "RoadGraph":
        nx.freeze(self._graph)
        self._is_frozen = True
        return self

    def add_node(
        self, node_ref: NodeRef, point: Point, *, segment_ids: Iterable[int | str] = ()
    ) -> None:
        """
        Inserts a node. Adding a node which already exists is a no-op,
        its point and segment membership are not overwritten.
        """

        self._ensure_mutable()
        if node_ref in self._graph:
            return

        self._graph.add_node(node_ref, point=point, segment_ids=frozenset(segment_ids))

    def add_edge(
        self, source: NodeRef, target: NodeRef, weight: float, **attributes: Any
    ) -> None:
        """
        Sets the directed edge `source` -> `target`, overwriting its previous
        weight. Both endpoints have to be added beforehand, otherwise the call
        is ignored and a warning is logged.
        """

        self._ensure_mutable()
        if math.isnan(weight) or weight < 0:
            raise ValueError(f"Edge weight must be a non-negative number, got {weight}.")

        missing = [ref for ref in (source, target) if ref not in self._graph]
        if missing:
            logger.warning(
                "Ignoring edge %s -> %s, missing endpoints: %s",
                source,
                target,
                ", ".join(map(str, missing)),
            )
            return

        self._graph.add_edge(source, target, weight=weight, **attributes)

    def mark_disconnected(self, points: Iterable[Point]) -> None:
        """
        Records the shape of roads left out of the graph for not being
        connected to it, so that coordinates next to them can be told apart
        from coordinates next to the roads kept in the graph.
        """

        self._ensure_mutable()
        self._disconnected_points = tuple(dict.fromkeys(points))

    def has_edge(self, source: NodeRef, target: NodeRef) -> bool:
        return self._graph.has_edge(source, target)

    def edge(self, source: NodeRef, target: NodeRef) -> dict[str, Any]:
        try:
            return self._graph.edges[source, target]
        except KeyError:
            raise EdgeNotFoundError(source, target)

    def point(self, node_ref: NodeRef) -> Point:
        if node_ref not in self._graph:
            raise NodeNotFoundError(node_ref)

        return self._graph.nodes[node_ref]["point"]

    def nodes(self) -> Iterator[tuple[NodeRef, Point]]:
        """
        Yields nodes with their points in insertion order.
        """

        for node_ref, point in self._graph.nodes(data="point"):
            yield node_ref, point

    def road_points(self) -> Iterator[Point]:
        """
        Yields node points followed by the shape points of every edge.
        """

        for _, point in self.nodes():
            yield point

        for _, _, geometry in self._graph.edges(data="geometry", default=()):
            yield from geometry

    def neighbors(self, node_ref: NodeRef) -> dict[NodeRef, float]:
        if node_ref not in self._graph:
            raise NodeNotFoundError(node_ref)

        return {
            neighbor: data["weight"]
            for neighbor, data in self._graph.adj[node_ref].items()
        }

    def out_degree(self, node_ref: NodeRef) -> int:
        if node_ref not in self._graph:
            raise NodeNotFoundError(node_ref)

        return self._graph.out_degree(node_ref)

    def is_in_segment(self, node_ref: NodeRef) -> bool:
        if node_ref not in self._graph:
            raise NodeNotFoundError(node_ref)

        return bool(self._graph.nodes[node_ref]["segment_ids"])

    def covers(self, center: Point, radius_meters: float) -> bool:
        """
        Whether the area this graph was built for fully contains the circle
        of `radius_meters` around `center`.
        """

        if self.center is None:
            return False

        return distance(self.center, center) + radius_meters <= self.radius_meters

    def prune_unreachable(self) -> set[NodeRef]:
        """
        Removes every node which can't be reached from the main body of the
        graph, along with all edges referencing it. Reachability is a
        traversal over edges in either direction, started from the first
        node of the largest weakly connected component. Nodes without any
        edge are always removed.

        Returns the set of removed nodes.
        """

        self._ensure_mutable()
        if self.is_empty:
            logger.warning("Road graph is empty, nothing to prune.")
            return set()

        isolated = {node for node, degree in self._graph.degree() if degree == 0}
        self._graph.remove_nodes_from(isolated)

        removed = set(isolated)
        if not self.is_empty:
            largest_component = max(nx.weakly_connected_components(self._graph), key=len)
            start_node = next(node for node in self._graph if node in largest_component)

            reachable = set(
                nx.bfs_tree(self._graph.to_undirected(as_view=True), start_node)
            )
            unreachable = set(self._graph) - reachable
            self._graph.remove_nodes_from(unreachable)
            removed |= unreachable

        if removed:
            logger.warning("Removed %d unreachable nodes from the road graph.", len(removed))

        return removed

import logging
import math
from collections import Counter, defaultdict

from geo_math import Point, polyline_length
from road_graph.node_ref import ProviderNodeRef
from road_graph.road_graph import RoadGraph
from road_graph.road_network_payload import RoadNetworkPayload
from road_graph.road_segment import RoadSegment
from road_graph.speed_configuration import SpeedConfiguration

logger = logging.getLogger(__name__)


class RoadGraphBuilder:
    """
    RoadGraphBuilder turns a raw road network payload into a time-weighted
    `RoadGraph`.

    Only vertices which are crucial to the topology become graph nodes:
    segment endpoints and vertices shared by more than one segment (or
    visited twice by the same segment). Such vertices are called junctions.
    The vertices between two junctions only describe the road shape, so they
    are folded into the `geometry` of the edge connecting the junctions.
    Edge weight is the travel time in seconds over the whole shape.

    Segments which are not usable roads are discarded, and vertices missing
    from the payload split a segment into separate pieces. After the graph
    is built, nodes unreachable from the main body of the network are pruned
    and the graph is frozen. The shape of pruned roads is kept in
    `disconnected_points`.
    """

    _MS_TO_KPH = 3.6

    def __init__(self, speed_configuration: SpeedConfiguration | None = None):
        self._speed_configuration = speed_configuration or SpeedConfiguration()

    @classmethod
    def get_travel_time(cls, distance_meters: float, speed_kph: float) -> float:
        """
        Travel time in seconds. Non-positive speed makes the road impassable.
        """

        speed_ms = speed_kph / cls._MS_TO_KPH
        return distance_meters / speed_ms if speed_ms > 0 else math.inf

    @staticmethod
    def _split_by_known_nodes(
        segment: RoadSegment, nodes: dict[int, Point]
    ) -> list[list[int]]:
        pieces: list[list[int]] = [[]]
        for node_id in segment.node_ids:
            if node_id in nodes:
                pieces[-1].append(node_id)
            elif pieces[-1]:
                pieces.append([])

        return [piece for piece in pieces if len(piece) >= 2]

    def _get_usable_pieces(
        self, payload: RoadNetworkPayload
    ) -> list[tuple[RoadSegment, list[int]]]:
        usable_pieces: list[tuple[RoadSegment, list[int]]] = []
        discarded_count = 0

        for segment in payload.segments:
            if not segment.is_usable:
                discarded_count += 1
                continue

            pieces = self._split_by_known_nodes(segment, payload.nodes)
            if len(pieces) != 1 or len(pieces[0]) != len(segment.node_ids):
                logger.warning(
                    "Segment %d references vertices missing from the payload.",
                    segment.id,
                )

            usable_pieces.extend((segment, piece) for piece in pieces)

        if discarded_count:
            logger.info("Discarded %d segments which are not usable roads.", discarded_count)

        return usable_pieces

    @staticmethod
    def _find_junctions(pieces: list[tuple[RoadSegment, list[int]]]) -> set[int]:
        occurrences = Counter(node_id for _, piece in pieces for node_id in piece)

        junctions = {node_id for node_id, count in occurrences.items() if count > 1}
        for _, piece in pieces:
            junctions.add(piece[0])
            junctions.add(piece[-1])

        return junctions

    @staticmethod
    def _split_into_chains(piece: list[int], junctions: set[int]) -> list[list[int]]:
        chains: list[list[int]] = []
        current_chain = [piece[0]]

        for node_id in piece[1:]:
            current_chain.append(node_id)
            if node_id in junctions:
                chains.append(current_chain)
                current_chain = [node_id]

        return chains

    def _add_chain_edge(
        self,
        graph: RoadGraph,
        segment: RoadSegment,
        chain_points: list[Point],
        source: ProviderNodeRef,
        target: ProviderNodeRef,
        speed_kph: float,
    ) -> None:
        distance_meters = polyline_length(chain_points)
        weight = self.get_travel_time(distance_meters, speed_kph)

        if graph.has_edge(source, target) and graph.edge(source, target)["weight"] <= weight:
            return

        graph.add_edge(
            source,
            target,
            weight,
            distance=distance_meters,
            geometry=tuple(chain_points[1:-1]),
            segment_id=segment.id,
            road_class=segment.road_class,
            speed_kph=speed_kph,
        )

    def _add_chain(
        self,
        graph: RoadGraph,
        segment: RoadSegment,
        chain: list[int],
        nodes: dict[int, Point],
    ) -> None:
        source, target = ProviderNodeRef(id=chain[0]), ProviderNodeRef(id=chain[-1])
        if source == target:
            return

        chain_points = [nodes[node_id] for node_id in chain]
        speed_kph = self._speed_configuration.effective_speed_kph(segment)

        if not segment.is_reversed:
            self._add_chain_edge(graph, segment, chain_points, source, target, speed_kph)
        if not segment.is_oneway or segment.is_reversed:
            self._add_chain_edge(
                graph, segment, chain_points[::-1], target, source, speed_kph
            )

    def build(
        self,
        payload: RoadNetworkPayload,
        *,
        center: Point | None = None,
        radius_meters: float = 0.0,
    ) -> RoadGraph:
        graph = RoadGraph(center=center, radius_meters=radius_meters)

        pieces = self._get_usable_pieces(payload)
        junctions = self._find_junctions(pieces)

        segment_ids_by_node_id: defaultdict[int, set[int]] = defaultdict(set)
        for segment, piece in pieces:
            for node_id in piece:
                segment_ids_by_node_id[node_id].add(segment.id)

        for node_id in sorted(junctions):
            graph.add_node(
                ProviderNodeRef(id=node_id),
                payload.nodes[node_id],
                segment_ids=segment_ids_by_node_id[node_id],
            )

        for segment, piece in pieces:
            for chain in self._split_into_chains(piece, junctions):
                self._add_chain(graph, segment, chain, payload.nodes)

        removed = graph.prune_unreachable()
        # Piece endpoints are junctions, so a pruned piece lost its first node.
        graph.mark_disconnected(
            payload.nodes[node_id]
            for _, piece in pieces
            if ProviderNodeRef(id=piece[0]) in removed
            for node_id in piece
        )

        if graph.is_sparse:
            logger.warning(
                "Road graph is sparse, routes may be poor. Average degree: %.2f",
                graph.average_out_degree,
            )

        logger.info(
            "Built road graph with %d nodes and %d edges from %d segments.",
            len(graph),
            graph.edge_count,
            len(payload.segments),
        )

        return graph.freeze()

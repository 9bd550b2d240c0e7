import logging
import math

import pytest

from geo_math import distance, Point
from road_graph import (
    ProviderNodeRef,
    RoadClass,
    RoadGraph,
    RoadGraphBuilder,
    RoadNetworkPayload,
    RoadSegment,
    SpeedConfiguration,
)

NODE_1 = ProviderNodeRef(id=1)
NODE_2 = ProviderNodeRef(id=2)
NODE_3 = ProviderNodeRef(id=3)


class TestRoadGraphBuilder:
    @pytest.mark.parametrize(
        ("distance_meters", "speed_kph", "expected_time"),
        [
            pytest.param(1200.0, 60.0, 72.0, id="primary"),
            pytest.param(0.0, 30.0, 0.0, id="zero_distance"),
            pytest.param(100.0, 0.0, math.inf, id="zero_speed"),
            pytest.param(100.0, -10.0, math.inf, id="negative_speed"),
        ],
    )
    def test_get_travel_time(
        self, distance_meters: float, speed_kph: float, expected_time: float
    ) -> None:
        # Act
        result = RoadGraphBuilder.get_travel_time(distance_meters, speed_kph)

        # Assert
        assert result == pytest.approx(expected_time)

    def test_build_keeps_only_junctions(self, road_graph: RoadGraph) -> None:
        # Act
        node_refs = [node_ref for node_ref, _ in road_graph.nodes()]

        # Assert
        assert node_refs == [NODE_1, NODE_2, NODE_3]
        assert road_graph.is_frozen
        assert not road_graph.is_synthetic

    def test_build_edges(
        self, road_graph: RoadGraph, road_network_payload: RoadNetworkPayload
    ) -> None:
        # Arrange
        points = road_network_payload.nodes

        # Act
        edges = set(road_graph.nx_graph.edges)

        # Assert
        assert edges == {
            (NODE_1, NODE_2),
            (NODE_2, NODE_1),
            (NODE_2, NODE_3),
            (NODE_3, NODE_1),
            (NODE_1, NODE_3),
        }

        primary_edge = road_graph.edge(NODE_1, NODE_2)
        assert primary_edge["road_class"] == RoadClass.PRIMARY
        assert primary_edge["distance"] == pytest.approx(distance(points[1], points[2]))
        assert primary_edge["weight"] == pytest.approx(
            distance(points[1], points[2]) / (60 / 3.6)
        )

    def test_shape_points_are_folded_into_geometry(
        self, road_graph: RoadGraph, road_network_payload: RoadNetworkPayload
    ) -> None:
        # Arrange
        points = road_network_payload.nodes
        expected_distance = distance(points[3], points[4]) + distance(points[4], points[1])

        # Act
        forward = road_graph.edge(NODE_3, NODE_1)
        backward = road_graph.edge(NODE_1, NODE_3)

        # Assert
        assert forward["geometry"] == (points[4],)
        assert backward["geometry"] == (points[4],)
        assert forward["distance"] == pytest.approx(expected_distance)
        assert forward["weight"] == pytest.approx(expected_distance / (30 / 3.6))

    def test_unconnected_piece_is_pruned(
        self, road_graph: RoadGraph, road_network_payload: RoadNetworkPayload
    ) -> None:
        # Arrange
        points = road_network_payload.nodes

        # Act & Assert
        assert ProviderNodeRef(id=20) not in road_graph
        assert ProviderNodeRef(id=21) not in road_graph
        assert road_graph.disconnected_points == (points[20], points[21])

    def test_reversed_oneway(self) -> None:
        # Arrange
        payload = RoadNetworkPayload(
            nodes={
                1: Point(latitude=13.6195, longitude=123.1814),
                2: Point(latitude=13.6205, longitude=123.1814),
            },
            segments=[
                RoadSegment(
                    id=1, node_ids=[1, 2], tags={"highway": "tertiary", "oneway": "-1"}
                )
            ],
        )

        # Act
        graph = RoadGraphBuilder().build(payload)

        # Assert
        assert set(graph.nx_graph.edges) == {(NODE_2, NODE_1)}

    def test_parallel_roads_keep_faster_edge(self) -> None:
        # Arrange
        payload = RoadNetworkPayload(
            nodes={
                1: Point(latitude=13.6195, longitude=123.1814),
                2: Point(latitude=13.6205, longitude=123.1814),
            },
            segments=[
                RoadSegment(id=1, node_ids=[1, 2], tags={"highway": "residential"}),
                RoadSegment(id=2, node_ids=[1, 2], tags={"highway": "primary"}),
                RoadSegment(id=3, node_ids=[1, 2], tags={"highway": "service"}),
            ],
        )

        # Act
        graph = RoadGraphBuilder().build(payload)

        # Assert
        assert graph.edge(NODE_1, NODE_2)["segment_id"] == 2
        assert graph.edge(NODE_2, NODE_1)["segment_id"] == 2

    def test_zero_speed_makes_edge_impassable(self) -> None:
        # Arrange
        payload = RoadNetworkPayload(
            nodes={
                1: Point(latitude=13.6195, longitude=123.1814),
                2: Point(latitude=13.6205, longitude=123.1814),
            },
            segments=[RoadSegment(id=1, node_ids=[1, 2], tags={"highway": "service"})],
        )
        speed_configuration = SpeedConfiguration(
            class_speeds_kph={RoadClass.SERVICE: 0.0}
        )

        # Act
        graph = RoadGraphBuilder(speed_configuration).build(payload)

        # Assert
        assert graph.neighbors(NODE_1) == {NODE_2: math.inf}

    def test_missing_vertices_split_segment(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        # Arrange
        payload = RoadNetworkPayload(
            nodes={
                1: Point(latitude=13.6195, longitude=123.1814),
                2: Point(latitude=13.6205, longitude=123.1814),
                4: Point(latitude=13.6225, longitude=123.1814),
            },
            segments=[
                RoadSegment(id=1, node_ids=[1, 2, 3, 4], tags={"highway": "primary"})
            ],
        )

        # Act
        with caplog.at_level(logging.WARNING):
            graph = RoadGraphBuilder().build(payload)

        # Assert
        assert "Segment 1 references vertices missing from the payload." in caplog.text
        assert set(graph.nx_graph.edges) == {(NODE_1, NODE_2), (NODE_2, NODE_1)}

    def test_empty_payload_builds_empty_graph(self) -> None:
        # Act
        graph = RoadGraphBuilder().build(RoadNetworkPayload())

        # Assert
        assert graph.is_empty
        assert graph.is_frozen

    def test_sparse_graph_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        # Arrange
        node_count = 12
        payload = RoadNetworkPayload(
            nodes={
                node_id: Point(latitude=13.6 + node_id * 0.001, longitude=123.18)
                for node_id in range(node_count)
            },
            segments=[
                RoadSegment(
                    id=node_id,
                    node_ids=[node_id, node_id + 1],
                    tags={"highway": "primary", "oneway": "yes"},
                )
                for node_id in range(node_count - 1)
            ],
        )

        # Act
        with caplog.at_level(logging.WARNING):
            graph = RoadGraphBuilder().build(payload)

        # Assert
        assert len(graph) == node_count
        assert "Road graph is sparse" in caplog.text

import logging
import math

import pytest

from geo_math import Point
from road_graph import (
    EdgeNotFoundError,
    FrozenRoadGraphError,
    NodeNotFoundError,
    ProviderNodeRef,
    RoadGraph,
    SyntheticNodeRef,
)

A = ProviderNodeRef(id=1)
B = ProviderNodeRef(id=2)
C = ProviderNodeRef(id=3)
ISOLATED = ProviderNodeRef(id=4)

POINT_A = Point(latitude=13.6195, longitude=123.1814)
POINT_B = Point(latitude=13.6195, longitude=123.1834)
POINT_C = Point(latitude=13.6215, longitude=123.1834)


class TestNodeRef:
    def test_provider_and_synthetic_refs_never_collide(self) -> None:
        # Arrange
        provider_ref = ProviderNodeRef(id=1)
        synthetic_ref = SyntheticNodeRef(tag="1")

        # Act
        graph = RoadGraph()
        graph.add_node(provider_ref, POINT_A)
        graph.add_node(synthetic_ref, POINT_B)

        # Assert
        assert provider_ref != synthetic_ref
        assert len(graph) == 2
        assert str(provider_ref) == "provider:1"
        assert str(synthetic_ref) == "synthetic:1"


class TestRoadGraph:
    @pytest.fixture
    def graph(self) -> RoadGraph:
        graph = RoadGraph()
        graph.add_node(A, POINT_A, segment_ids=[10])
        graph.add_node(B, POINT_B, segment_ids=[10, 11])
        graph.add_node(C, POINT_C, segment_ids=[11])
        graph.add_edge(A, B, 10.0)
        graph.add_edge(B, A, 10.0)
        graph.add_edge(B, C, 20.0)
        return graph

    def test_add_node_is_idempotent(self, graph: RoadGraph) -> None:
        # Act
        graph.add_node(A, POINT_C, segment_ids=[99])

        # Assert
        assert len(graph) == 3
        assert graph.point(A) == POINT_A

    def test_add_edge_overwrites_weight(self, graph: RoadGraph) -> None:
        # Act
        graph.add_edge(A, B, 5.0)

        # Assert
        assert graph.neighbors(A) == {B: 5.0}
        assert graph.edge_count == 3

    def test_add_edge_with_missing_endpoint_is_ignored(
        self, graph: RoadGraph, caplog: pytest.LogCaptureFixture
    ) -> None:
        # Act
        with caplog.at_level(logging.WARNING):
            graph.add_edge(A, ISOLATED, 1.0)

        # Assert
        assert ISOLATED not in graph
        assert graph.neighbors(A) == {B: 10.0}
        assert "missing endpoints: provider:4" in caplog.text

    @pytest.mark.parametrize(
        "weight",
        [pytest.param(-1.0, id="negative"), pytest.param(math.nan, id="nan")],
    )
    def test_add_edge_with_invalid_weight(self, graph: RoadGraph, weight: float) -> None:
        # Act & Assert
        with pytest.raises(ValueError):
            graph.add_edge(A, C, weight)

    def test_neighbors(self, graph: RoadGraph) -> None:
        # Act
        neighbors = graph.neighbors(B)

        # Assert
        assert neighbors == {A: 10.0, C: 20.0}
        assert graph.neighbors(C) == {}

    def test_unknown_node(self, graph: RoadGraph) -> None:
        # Act & Assert
        with pytest.raises(NodeNotFoundError):
            graph.point(ISOLATED)
        with pytest.raises(NodeNotFoundError):
            graph.neighbors(ISOLATED)
        with pytest.raises(EdgeNotFoundError):
            graph.edge(C, A)

    def test_is_in_segment(self, graph: RoadGraph) -> None:
        # Arrange
        graph.add_node(ISOLATED, POINT_A)

        # Act & Assert
        assert graph.is_in_segment(A)
        assert not graph.is_in_segment(ISOLATED)

    def test_average_out_degree(self, graph: RoadGraph) -> None:
        # Act
        result = graph.average_out_degree

        # Assert
        assert result == pytest.approx(1.0)
        assert RoadGraph().average_out_degree == 0.0

    def test_prune_removes_isolated_node(self, graph: RoadGraph) -> None:
        # Arrange
        graph.add_node(ISOLATED, POINT_A, segment_ids=[12])

        # Act
        removed = graph.prune_unreachable()

        # Assert
        assert removed == {ISOLATED}
        assert ISOLATED not in graph
        assert len(graph) == 3

    def test_prune_keeps_nodes_reachable_against_edge_direction(
        self, graph: RoadGraph
    ) -> None:
        # Act
        removed = graph.prune_unreachable()

        # Assert
        assert removed == set()
        assert C in graph

    def test_prune_removes_smaller_component(self, graph: RoadGraph) -> None:
        # Arrange
        far_a, far_b = SyntheticNodeRef(tag="far_a"), SyntheticNodeRef(tag="far_b")
        graph.add_node(far_a, POINT_A, segment_ids=["x"])
        graph.add_node(far_b, POINT_B, segment_ids=["x"])
        graph.add_edge(far_a, far_b, 1.0)

        # Act
        removed = graph.prune_unreachable()

        # Assert
        assert removed == {far_a, far_b}
        assert set(ref for ref, _ in graph.nodes()) == {A, B, C}
        assert graph.edge_count == 3

    def test_prune_empty_graph(self) -> None:
        # Act
        removed = RoadGraph().prune_unreachable()

        # Assert
        assert removed == set()

    def test_frozen_graph_rejects_changes(self, graph: RoadGraph) -> None:
        # Arrange
        graph.freeze()

        # Act & Assert
        assert graph.is_frozen
        with pytest.raises(FrozenRoadGraphError):
            graph.add_node(ISOLATED, POINT_A)
        with pytest.raises(FrozenRoadGraphError):
            graph.add_edge(C, A, 1.0)
        with pytest.raises(FrozenRoadGraphError):
            graph.mark_disconnected([POINT_A])

    def test_road_points_include_edge_geometry(self) -> None:
        # Arrange
        shape_point = Point(latitude=13.6205, longitude=123.1834)
        graph = RoadGraph()
        graph.add_node(B, POINT_B, segment_ids=[11])
        graph.add_node(C, POINT_C, segment_ids=[11])
        graph.add_edge(B, C, 20.0, geometry=(shape_point,))
        graph.add_edge(C, B, 20.0)

        # Act
        result = list(graph.road_points())

        # Assert
        assert result == [POINT_B, POINT_C, shape_point]

    def test_mark_disconnected(self, graph: RoadGraph) -> None:
        # Act
        graph.mark_disconnected([POINT_C, POINT_A, POINT_C])

        # Assert
        assert graph.disconnected_points == (POINT_C, POINT_A)
        assert RoadGraph().disconnected_points == ()

    @pytest.mark.parametrize(
        ("center", "radius_meters", "expected_covers"),
        [
            pytest.param(POINT_A, 500.0, True, id="same_center"),
            pytest.param(POINT_A, 1000.0, True, id="same_circle"),
            pytest.param(POINT_A, 1001.0, False, id="bigger_circle"),
            pytest.param(POINT_B, 900.0, False, id="sticks_out"),
        ],
    )
    def test_covers(
        self, center: Point, radius_meters: float, expected_covers: bool
    ) -> None:
        # Arrange
        graph = RoadGraph(center=POINT_A, radius_meters=1000.0)

        # Act
        result = graph.covers(center, radius_meters)

        # Assert
        assert result is expected_covers

    def test_graph_without_center_covers_nothing(self) -> None:
        # Act & Assert
        assert not RoadGraph().covers(POINT_A, 1.0)

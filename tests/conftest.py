import math
from typing import Any
from unittest.mock import MagicMock

import pytest

from geo_math import EARTH_RADIUS_METERS, Point
from road_graph import RoadGraph, RoadGraphBuilder, RoadNetworkPayload, RoadSegment
from road_network_fetcher import RoadNetworkFetcher
from route_planner import RouterConfiguration

NAGA_CITY_HALL = Point(latitude=13.6195, longitude=123.1814)


def point_north_of(origin: Point, meters: float) -> Point:
    """
    Point exactly `meters` away from `origin` by haversine distance.
    """

    return Point(
        latitude=origin.latitude + math.degrees(meters / EARTH_RADIUS_METERS),
        longitude=origin.longitude,
    )


@pytest.fixture
def origin() -> Point:
    return NAGA_CITY_HALL


@pytest.fixture
def road_network_payload() -> RoadNetworkPayload:
    """
    A block of four streets around the city hall, with a one-way street
    on its eastern side, a footway across it and a piece of road far away
    which is not connected to the block.

        4 ------ 3
        |        ^
        |        |
        1 ------ 2
    """

    return RoadNetworkPayload(
        nodes={
            1: Point(latitude=13.6195, longitude=123.1814),
            2: Point(latitude=13.6195, longitude=123.1834),
            3: Point(latitude=13.6215, longitude=123.1834),
            4: Point(latitude=13.6215, longitude=123.1814),
            20: Point(latitude=13.6400, longitude=123.1900),
            21: Point(latitude=13.6410, longitude=123.1900),
        },
        segments=[
            RoadSegment(id=10, node_ids=[1, 2], tags={"highway": "primary"}),
            RoadSegment(
                id=11,
                node_ids=[2, 3],
                tags={"highway": "residential", "oneway": "yes"},
            ),
            RoadSegment(id=12, node_ids=[3, 4, 1], tags={"highway": "residential"}),
            RoadSegment(id=13, node_ids=[20, 21], tags={"highway": "service"}),
            RoadSegment(id=14, node_ids=[1, 3], tags={"highway": "footway"}),
        ],
    )


@pytest.fixture
def road_graph(road_network_payload: RoadNetworkPayload) -> RoadGraph:
    return RoadGraphBuilder().build(
        road_network_payload, center=NAGA_CITY_HALL, radius_meters=5000
    )


@pytest.fixture
def overpass_response_body() -> dict[str, Any]:
    return {
        "version": 0.6,
        "generator": "Overpass API",
        "elements": [
            {"type": "node", "id": 1, "lat": 13.6195, "lon": 123.1814},
            {"type": "node", "id": 2, "lat": 13.6195, "lon": 123.1834},
            {
                "type": "node",
                "id": 3,
                "lat": 13.6215,
                "lon": 123.1834,
                "tags": {"highway": "traffic_signals"},
            },
            {
                "type": "way",
                "id": 10,
                "nodes": [1, 2],
                "tags": {"highway": "primary", "name": "Panganiban Drive"},
            },
            {
                "type": "way",
                "id": 11,
                "nodes": [2, 3],
                "tags": {"highway": "residential", "oneway": "yes"},
            },
            {"type": "relation", "id": 100, "members": []},
        ],
    }


@pytest.fixture
def router_configuration() -> RouterConfiguration:
    return RouterConfiguration()


@pytest.fixture
def fetcher_mock() -> MagicMock:
    return MagicMock(spec=RoadNetworkFetcher)


@pytest.fixture(name="point_north_of")
def point_north_of_fixture():
    return point_north_of

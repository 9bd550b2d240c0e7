import logging
import os
from typing import ClassVar, Iterable

import overpy
import requests
from overpy.exception import OverpassRuntimeError, OverPyException

from geo_math import Point
from overpass_client.exceptions import OverpassPayloadError, OverpassRequestError
from road_graph import RoadClass, RoadNetworkPayload, RoadSegment

logger = logging.getLogger(__name__)


class OverpassClient:
    """
    Downloads drivable roads from the Overpass API.

    Requests go through `requests` with a bounded timeout, responses are
    parsed by `overpy`, which also reports Overpass runtime errors sent
    as a `remark` in an otherwise successful response.
    """

    DEFAULT_API_URL: ClassVar[str] = os.environ.get(
        "OVERPASS_API_URL", "https://overpass-api.de/api/interpreter"
    )
    DEFAULT_TIMEOUT_SECONDS: ClassVar[float] = 30.0

    _ROAD_NETWORK_QUERY_TEMPLATE = """
    [out:json][timeout:{server_timeout}];
    (
        way["highway"~"^({road_classes})$"](around:{radius},{latitude},{longitude});
    );
    (._; >;);
    out body;
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self._overpass = overpy.Overpass(url=api_url)

    @classmethod
    def get_road_network_query(
        cls,
        center: Point,
        radius_meters: float,
        road_classes: Iterable[RoadClass],
        server_timeout: int,
    ) -> str:
        return cls._ROAD_NETWORK_QUERY_TEMPLATE.format(
            server_timeout=server_timeout,
            road_classes="|".join(road_class.value for road_class in road_classes),
            radius=round(radius_meters),
            latitude=center.latitude,
            longitude=center.longitude,
        )

    @staticmethod
    def to_road_network_payload(result: overpy.Result) -> RoadNetworkPayload:
        nodes: dict[int, Point] = {}
        for node in result.nodes:
            if node.lat is None or node.lon is None:
                raise OverpassPayloadError(f"node {node.id} has no coordinates")

            nodes[node.id] = Point(latitude=float(node.lat), longitude=float(node.lon))

        return RoadNetworkPayload(
            nodes=nodes,
            segments=[
                # `Way.nodes` would query the API for vertices missing from the result.
                RoadSegment(id=way.id, node_ids=way._node_ids or [], tags=way.tags)
                for way in result.ways
            ],
        )

    def _post_query(self, query: str) -> requests.Response:
        try:
            response = self._session.post(
                self.api_url, data={"data": query}, timeout=self.timeout_seconds
            )
        except requests.RequestException as exc:
            raise OverpassRequestError(str(exc)) from exc

        if response.status_code == 400:
            raise OverpassPayloadError(f"query rejected: {response.text[:200]}")
        if response.status_code != 200:
            raise OverpassRequestError(response.reason, status_code=response.status_code)

        return response

    def _parse_response(self, response: requests.Response) -> overpy.Result:
        try:
            return self._overpass.parse_json(response.content)
        except OverpassRuntimeError as exc:
            # Server side query timeouts and memory limits.
            raise OverpassRequestError(str(exc.msg)) from exc
        except (OverPyException, ValueError) as exc:
            raise OverpassPayloadError(str(exc) or type(exc).__name__) from exc

    def get_road_network(
        self,
        center: Point,
        radius_meters: float,
        road_classes: Iterable[RoadClass] = tuple(RoadClass),
    ) -> RoadNetworkPayload:
        query = self.get_road_network_query(
            center, radius_meters, road_classes, round(self.timeout_seconds)
        )
        logger.info(
            "Fetching road network around (%f, %f) with radius %.0f m",
            center.latitude,
            center.longitude,
            radius_meters,
        )

        result = self._parse_response(self._post_query(query))
        payload = self.to_road_network_payload(result)

        logger.info(
            "Fetched %d nodes and %d ways from Overpass API",
            len(payload.nodes),
            len(payload.segments),
        )
        return payload

import asyncio
import logging
import threading
from datetime import timedelta

from geo_math import distance, midpoint, Point, polyline_length, validate_point
from overpass_client import OverpassClient, OverpassRequestError
from road_graph import RoadGraph, RoadGraphBuilder
from road_network_fetcher import (
    DirectoryRoadNetworkCache,
    FetchFailurePolicy,
    linear_backoff,
    NetworkUnavailable,
    RetryPolicy,
    RoadNetworkCache,
    RoadNetworkCacheBackend,
    RoadNetworkFetcher,
)
from route_planner.exceptions import NoPathFound
from route_planner.fare_estimator import FareEstimator
from route_planner.geofence import Geofence
from route_planner.model import DegradedReason, PathResult, RouteResult
from route_planner.nearest_node_locator import NearestNodeLocator
from route_planner.path_planner import (
    describe_maneuvers,
    PathPlanner,
    straight_line_route,
)
from route_planner.router_configuration import RouterConfiguration

logger = logging.getLogger(__name__)


class Router:
    """
    Router answers route requests between two coordinates.

    The road graph of the area around the request is fetched on demand and
    kept for following requests it covers. A refreshed graph is always built
    from scratch and only then swapped in, so requests in progress keep
    working on the snapshot they started with.

    Failures the rider can't do anything about (no road connection, endpoint
    far from roads, map data unavailable) don't raise. They produce
    a straight-line or synthetic-grid route flagged as degraded instead.
    """

    def __init__(
        self,
        configuration: RouterConfiguration | None = None,
        fetcher: RoadNetworkFetcher | None = None,
    ) -> None:
        self.configuration = configuration or RouterConfiguration.get_default()
        self.fare_estimator = FareEstimator(self.configuration.fare)
        self.geofence = (
            Geofence.from_configuration(self.configuration.geofence)
            if self.configuration.geofence is not None
            else None
        )
        self._fetcher = fetcher or self._create_fetcher(self.configuration)

        self._graph: RoadGraph | None = None
        self._graph_lock = threading.Lock()

    @staticmethod
    def _create_fetcher(configuration: RouterConfiguration) -> RoadNetworkFetcher:
        fetch_configuration = configuration.fetch
        ttl = timedelta(hours=fetch_configuration.cache_ttl_hours)

        cache: RoadNetworkCacheBackend
        if fetch_configuration.cache_directory is not None:
            cache = DirectoryRoadNetworkCache(
                fetch_configuration.cache_directory,
                ttl=ttl,
                max_entry_count=fetch_configuration.cache_max_entry_count,
            )
        else:
            cache = RoadNetworkCache(
                ttl=ttl, max_entry_count=fetch_configuration.cache_max_entry_count
            )

        return RoadNetworkFetcher(
            OverpassClient(timeout_seconds=fetch_configuration.timeout_seconds),
            RoadGraphBuilder(configuration.speeds),
            cache=cache,
            retry_policy=RetryPolicy(
                configuration.retry.max_attempts,
                linear_backoff(configuration.retry.backoff_seconds),
                retry_on=(OverpassRequestError,),
            ),
            failure_policy=fetch_configuration.failure_policy,
            grid_spacing_meters=fetch_configuration.grid_spacing_meters,
        )

    @property
    def current_graph(self) -> RoadGraph | None:
        with self._graph_lock:
            return self._graph

    def refresh_road_network(self, center: Point, radius_meters: float) -> RoadGraph:
        graph = self._fetcher.fetch_road_network(center, radius_meters)

        with self._graph_lock:
            self._graph = graph

        return graph

    def _get_graph(self, center: Point, radius_meters: float) -> RoadGraph:
        current_graph = self.current_graph
        if (
            current_graph is not None
            and not current_graph.is_synthetic
            and current_graph.covers(center, radius_meters)
        ):
            return current_graph

        return self.refresh_road_network(center, radius_meters)

    def _validate(self, point: Point) -> None:
        validate_point(point)
        if self.geofence is not None:
            self.geofence.validate(point)

    def _get_fetch_radius(
        self, origin: Point, destination: Point, search_radius_meters: float | None
    ) -> float:
        search_radius_meters = (
            search_radius_meters or self.configuration.fetch.default_search_radius_meters
        )
        return max(
            search_radius_meters,
            distance(origin, destination) / 2
            + self.configuration.locator.initial_radius_meters,
        )

    def _to_route_result(
        self,
        path_result: PathResult,
        degraded_reason: DegradedReason | None = None,
    ) -> RouteResult:
        return RouteResult(
            polyline=path_result.polyline,
            distance_meters=path_result.distance_meters,
            duration_seconds=path_result.duration_seconds,
            fare=path_result.fare,
            currency=self.fare_estimator.currency,
            degraded=degraded_reason is not None,
            degraded_reason=degraded_reason,
            path=[str(node_ref) for node_ref in path_result.path],
            maneuvers=describe_maneuvers(path_result.polyline),
        )

    def _straight_line_result(
        self, origin: Point, destination: Point, reason: DegradedReason
    ) -> RouteResult:
        logger.warning(
            "Returning a straight-line route from (%f, %f) to (%f, %f): %s",
            origin.latitude,
            origin.longitude,
            destination.latitude,
            destination.longitude,
            reason,
        )

        path_result = straight_line_route(
            origin,
            destination,
            self.configuration.fetch.straight_line_speed_kph,
            self.fare_estimator,
        )
        return self._to_route_result(path_result, reason)

    def _add_connectors(
        self, origin: Point, destination: Point, path_result: PathResult
    ) -> PathResult:
        """
        Extends the road path with direct legs from the actual origin to the
        first node and from the last node to the actual destination.
        """

        polyline = list(path_result.polyline)
        origin_leg = distance(origin, polyline[0])
        destination_leg = distance(polyline[-1], destination)

        if origin_leg > 0:
            polyline.insert(0, origin)
        if destination_leg > 0:
            polyline.append(destination)

        distance_meters = polyline_length(polyline)
        connector_duration = RoadGraphBuilder.get_travel_time(
            origin_leg + destination_leg,
            self.configuration.fetch.straight_line_speed_kph,
        )

        return PathResult(
            path=path_result.path,
            polyline=polyline,
            distance_meters=distance_meters,
            duration_seconds=path_result.duration_seconds + connector_duration,
            fare=self.fare_estimator.estimate(distance_meters / 1000),
        )

    def plan_route(
        self,
        origin: Point,
        destination: Point,
        search_radius_meters: float | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> RouteResult:
        """
        Plans the fastest route from `origin` to `destination`.

        Raises `InvalidCoordinates` before any network or graph work
        for coordinates out of range or outside of the operating area,
        `NoNodeFound` when the fetched road graph is empty,
        `NetworkUnavailable` when the map data can't be fetched and the
        failure policy is `raise`, and `RouteComputationCancelled`
        once `cancel_event` is set.
        """

        self._validate(origin)
        self._validate(destination)

        if distance(origin, destination) == 0:
            return RouteResult(
                polyline=[origin],
                distance_meters=0.0,
                duration_seconds=0.0,
                fare=self.fare_estimator.minimum_fare,
                currency=self.fare_estimator.currency,
            )

        try:
            graph = self._get_graph(
                midpoint(origin, destination),
                self._get_fetch_radius(origin, destination, search_radius_meters),
            )
        except NetworkUnavailable:
            if self.configuration.fetch.failure_policy != FetchFailurePolicy.STRAIGHT_LINE:
                raise

            return self._straight_line_result(
                origin, destination, DegradedReason.NETWORK_UNAVAILABLE
            )

        locator = NearestNodeLocator(graph)
        initial_radius_meters = self.configuration.locator.initial_radius_meters
        start = locator.locate(origin, initial_radius_meters)
        end = locator.locate(destination, initial_radius_meters)

        if any(
            locator.is_in_disconnected_component(point) for point in (origin, destination)
        ):
            return self._straight_line_result(
                origin, destination, DegradedReason.NO_PATH_FOUND
            )

        max_connector_meters = self.configuration.locator.max_connector_meters
        if max(start.distance_meters, end.distance_meters) > max_connector_meters:
            return self._straight_line_result(
                origin, destination, DegradedReason.ENDPOINT_OFF_NETWORK
            )

        planner = PathPlanner(graph, self.fare_estimator)
        try:
            path_result = planner.find_shortest_path(
                start.node_ref, end.node_ref, cancel_event=cancel_event
            )
        except NoPathFound as exc:
            logger.warning("%s", exc)
            return self._straight_line_result(
                origin, destination, DegradedReason.NO_PATH_FOUND
            )

        return self._to_route_result(
            self._add_connectors(origin, destination, path_result),
            DegradedReason.NETWORK_UNAVAILABLE if graph.is_synthetic else None,
        )

    async def plan_route_async(
        self,
        origin: Point,
        destination: Point,
        search_radius_meters: float | None = None,
    ) -> RouteResult:
        """
        Runs `plan_route` in a worker thread. Cancelling the awaiting task
        stops the path search at the next edge relaxation.
        """

        cancel_event = threading.Event()
        try:
            return await asyncio.to_thread(
                self.plan_route,
                origin,
                destination,
                search_radius_meters,
                cancel_event=cancel_event,
            )
        except asyncio.CancelledError:
            cancel_event.set()
            raise

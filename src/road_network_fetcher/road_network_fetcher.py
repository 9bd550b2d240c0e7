import logging

from geo_math import Point
from overpass_client import OverpassClient, OverpassPayloadError, OverpassRequestError
from road_graph import RoadGraph, RoadGraphBuilder, RoadNetworkPayload
from road_network_fetcher.exceptions import (
    MalformedRoadNetworkPayload,
    NetworkUnavailable,
    RetryAttemptsExhausted,
)
from road_network_fetcher.fetch_failure_policy import FetchFailurePolicy
from road_network_fetcher.model import RoadNetworkCacheBackend
from road_network_fetcher.retry_policy import RetryPolicy
from road_network_fetcher.road_network_cache import RoadNetworkCache
from road_network_fetcher.synthetic_grid import (
    build_synthetic_grid,
    DEFAULT_GRID_SPACING_METERS,
)

logger = logging.getLogger(__name__)


class RoadNetworkFetcher:
    """
    RoadNetworkFetcher provides a freshly built `RoadGraph` for a circular area.

    Raw payloads with at least one road are cached, so a repeated request for
    an area covered by a cached payload is served without contacting the
    provider. Otherwise the payload is downloaded with retries. Transport
    failures are retried, malformed payloads are not.

    When the road network can't be obtained, `failure_policy` decides whether
    a synthetic grid graph is returned or `NetworkUnavailable` is raised.
    """

    def __init__(
        self,
        overpass_client: OverpassClient | None = None,
        graph_builder: RoadGraphBuilder | None = None,
        *,
        cache: RoadNetworkCacheBackend | None = None,
        retry_policy: RetryPolicy | None = None,
        failure_policy: FetchFailurePolicy = FetchFailurePolicy.SYNTHETIC_GRID,
        grid_spacing_meters: float = DEFAULT_GRID_SPACING_METERS,
    ) -> None:
        self._overpass_client = overpass_client or OverpassClient()
        self._graph_builder = graph_builder or RoadGraphBuilder()
        self._cache = cache if cache is not None else RoadNetworkCache()
        self._retry_policy = retry_policy or RetryPolicy(
            retry_on=(OverpassRequestError,)
        )
        self.failure_policy = failure_policy
        self.grid_spacing_meters = grid_spacing_meters

    def _download_payload(self, center: Point, radius_meters: float) -> RoadNetworkPayload:
        try:
            return self._retry_policy.call(
                lambda: self._overpass_client.get_road_network(center, radius_meters),
                description="Road network download",
            )
        except RetryAttemptsExhausted as exc:
            raise NetworkUnavailable(
                str(exc.last_error), attempts=exc.attempts
            ) from exc.last_error
        except OverpassPayloadError as exc:
            raise MalformedRoadNetworkPayload(exc.message) from exc

    def get_road_network_payload(
        self, center: Point, radius_meters: float
    ) -> RoadNetworkPayload:
        cached = self._cache.get(center, radius_meters)
        if cached is not None:
            logger.info(
                "Using cached road network fetched at %s", cached.fetched_at.isoformat()
            )
            return cached.payload

        payload = self._download_payload(center, radius_meters)
        if payload.segments:
            self._cache.store(center, radius_meters, payload)
        else:
            logger.warning(
                "Road network around (%f, %f) is empty, not caching it.",
                center.latitude,
                center.longitude,
            )

        return payload

    def fetch_road_network(self, center: Point, radius_meters: float) -> RoadGraph:
        """
        Returns a new frozen graph covering the circle of `radius_meters`
        around `center`. An empty but well-formed payload results in an empty
        graph. A synthetic graph is returned only under the
        `SYNTHETIC_GRID` failure policy.
        """

        if radius_meters <= 0:
            raise ValueError("Fetch radius must be positive.")

        try:
            payload = self.get_road_network_payload(center, radius_meters)
        except NetworkUnavailable as exc:
            if self.failure_policy != FetchFailurePolicy.SYNTHETIC_GRID:
                raise

            logger.warning("%s. Falling back to a synthetic road grid.", exc)
            return build_synthetic_grid(
                center, radius_meters, spacing_meters=self.grid_spacing_meters
            )

        return self._graph_builder.build(
            payload, center=center, radius_meters=radius_meters
        )

    def clear_cache(self) -> None:
        self._cache.clear()

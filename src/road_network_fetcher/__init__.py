from .directory_road_network_cache import DirectoryRoadNetworkCache
from .exceptions import MalformedRoadNetworkPayload, NetworkUnavailable, RetryAttemptsExhausted
from .fetch_failure_policy import FetchFailurePolicy
from .model import CachedRoadNetwork, RoadNetworkCacheBackend
from .retry_policy import linear_backoff, RetryPolicy
from .road_network_cache import RoadNetworkCache
from .road_network_fetcher import RoadNetworkFetcher
from .synthetic_grid import build_synthetic_grid

__all__ = [
    "RoadNetworkFetcher",
    "RoadNetworkCache",
    "DirectoryRoadNetworkCache",
    "RoadNetworkCacheBackend",
    "CachedRoadNetwork",
    "RetryPolicy",
    "linear_backoff",
    "FetchFailurePolicy",
    "build_synthetic_grid",
    "NetworkUnavailable",
    "MalformedRoadNetworkPayload",
    "RetryAttemptsExhausted",
]

import os
import threading
from collections import OrderedDict
from datetime import timedelta

from geo_math import Point
from road_graph import RoadNetworkPayload
from road_network_fetcher.model import CachedRoadNetwork


class RoadNetworkCache:
    """
    In-memory cache of fetched road networks. An entry serves every request
    whose circle lies entirely inside the cached circle. Entries expire after
    `ttl`, and once `max_entry_count` is reached the least recently used
    entry is evicted.
    """

    DEFAULT_TTL = timedelta(hours=24)
    DEFAULT_MAX_ENTRY_COUNT = int(
        os.environ.get("ROAD_NETWORK_CACHE_MAX_ENTRY_COUNT", "8")
    )

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        max_entry_count: int = DEFAULT_MAX_ENTRY_COUNT,
    ) -> None:
        if max_entry_count < 1:
            raise ValueError("max_entry_count must be at least 1.")

        self.ttl = ttl
        self.max_entry_count = max_entry_count

        self._entries: OrderedDict[str, CachedRoadNetwork] = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _remove_stale_entries(self) -> None:
        for key in [
            key for key, entry in self._entries.items() if not entry.is_fresh(self.ttl)
        ]:
            del self._entries[key]

    def get(self, center: Point, radius_meters: float) -> CachedRoadNetwork | None:
        with self._lock:
            self._remove_stale_entries()

            for key, entry in reversed(self._entries.items()):
                if entry.covers(center, radius_meters):
                    self._entries.move_to_end(key)
                    return entry

        return None

    def store(
        self, center: Point, radius_meters: float, payload: RoadNetworkPayload
    ) -> CachedRoadNetwork:
        entry = CachedRoadNetwork(
            center=center, radius_meters=radius_meters, payload=payload
        )

        with self._lock:
            self._entries[entry.key] = entry
            self._entries.move_to_end(entry.key)

            while len(self._entries) > self.max_entry_count:
                self._entries.popitem(last=False)

        return entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

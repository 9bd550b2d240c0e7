import logging
import os
from datetime import timedelta
from pathlib import Path

from filelock import FileLock
from pydantic import ValidationError

from geo_math import Point
from road_graph import RoadNetworkPayload
from road_network_fetcher.model import CachedRoadNetwork

logger = logging.getLogger(__name__)


class DirectoryRoadNetworkCache:
    """
    Road network cache persisted as JSON files in a directory, so that it
    survives restarts and can be shared by several processes. Follows the
    contract of `RoadNetworkCache`, except that once `max_entry_count`
    is reached the entry fetched the longest time ago is evicted.
    """

    DEFAULT_CACHE_DIRECTORY = Path(
        os.environ.get("ROAD_NETWORK_CACHE_DIRECTORY", "./cache/road_networks")
    )
    DEFAULT_TTL = timedelta(hours=24)
    DEFAULT_MAX_ENTRY_COUNT = int(
        os.environ.get("ROAD_NETWORK_CACHE_MAX_ENTRY_COUNT", "8")
    )

    def __init__(
        self,
        cache_directory: Path = DEFAULT_CACHE_DIRECTORY,
        ttl: timedelta = DEFAULT_TTL,
        max_entry_count: int = DEFAULT_MAX_ENTRY_COUNT,
    ) -> None:
        if max_entry_count < 1:
            raise ValueError("max_entry_count must be at least 1.")

        self.cache_directory = cache_directory
        self.cache_directory.mkdir(parents=True, exist_ok=True)
        self.ttl = ttl
        self.max_entry_count = max_entry_count

    def lock(self) -> FileLock:
        return FileLock(self.cache_directory / "road_networks.lock")

    def _entry_path(self, entry: CachedRoadNetwork) -> Path:
        return self.cache_directory / f"{entry.key}.json"

    def _load_fresh_entries(self) -> list[tuple[Path, CachedRoadNetwork]]:
        entries: list[tuple[Path, CachedRoadNetwork]] = []

        for path in self.cache_directory.glob("*.json"):
            try:
                entry = CachedRoadNetwork.model_validate_json(path.read_text())
            except ValidationError:
                logger.warning("Removing corrupted road network cache file %s", path)
                path.unlink(missing_ok=True)
                continue

            if not entry.is_fresh(self.ttl):
                path.unlink(missing_ok=True)
                continue

            entries.append((path, entry))

        return sorted(entries, key=lambda item: item[1].fetched_at)

    def get(self, center: Point, radius_meters: float) -> CachedRoadNetwork | None:
        with self.lock():
            entries = self._load_fresh_entries()

        return next(
            (
                entry
                for _, entry in reversed(entries)
                if entry.covers(center, radius_meters)
            ),
            None,
        )

    def store(
        self, center: Point, radius_meters: float, payload: RoadNetworkPayload
    ) -> CachedRoadNetwork:
        entry = CachedRoadNetwork(
            center=center, radius_meters=radius_meters, payload=payload
        )

        with self.lock():
            entry_path = self._entry_path(entry)
            entry_path.write_text(entry.model_dump_json())

            other_entries = [
                item for item in self._load_fresh_entries() if item[0] != entry_path
            ]
            redundant_count = len(other_entries) + 1 - self.max_entry_count
            for path, _ in other_entries[: max(redundant_count, 0)]:
                path.unlink(missing_ok=True)

        return entry

    def clear(self) -> None:
        with self.lock():
            for path in self.cache_directory.glob("*.json"):
                path.unlink(missing_ok=True)

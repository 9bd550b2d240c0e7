from datetime import datetime, timedelta
from typing import Protocol

from pydantic import BaseModel, Field

from geo_math import distance, Point
from road_graph import RoadNetworkPayload


class CachedRoadNetwork(BaseModel):
    center: Point
    radius_meters: float
    payload: RoadNetworkPayload
    fetched_at: datetime = Field(default_factory=lambda: datetime.now())

    @property
    def key(self) -> str:
        return (
            f"{self.center.latitude:.6f}_{self.center.longitude:.6f}"
            f"_{self.radius_meters:.0f}"
        )

    def covers(self, center: Point, radius_meters: float) -> bool:
        return distance(self.center, center) + radius_meters <= self.radius_meters

    def is_fresh(self, ttl: timedelta) -> bool:
        return datetime.now() - self.fetched_at < ttl


class RoadNetworkCacheBackend(Protocol):
    def get(self, center: Point, radius_meters: float) -> CachedRoadNetwork | None: ...

    def store(
        self, center: Point, radius_meters: float, payload: RoadNetworkPayload
    ) -> CachedRoadNetwork: ...

    def clear(self) -> None: ...

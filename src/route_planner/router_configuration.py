import logging
import os
from pathlib import Path
from typing import ClassVar, Self

from pydantic import BaseModel, Field, model_validator, ValidationError

from road_graph import SpeedConfiguration
from road_network_fetcher import FetchFailurePolicy

logger = logging.getLogger(__name__)


class FareConfiguration(BaseModel):
    base_fare: float = Field(default=15.0, ge=0)
    base_distance_km: float = Field(default=1.0, ge=0)
    per_km_rate: float = Field(default=11.0, ge=0)
    minimum_fare: float = Field(default=15.0, ge=0)
    currency: str = "PHP"


class RetryConfiguration(BaseModel):
    max_attempts: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=1.0, ge=0)


class GeofenceConfiguration(BaseModel):
    """
    Operating area of the service as a latitude/longitude bounding box.
    """

    south: float = Field(ge=-90, le=90)
    west: float = Field(ge=-180, le=180)
    north: float = Field(ge=-90, le=90)
    east: float = Field(ge=-180, le=180)

    @model_validator(mode="after")
    def check_bounds_order(self) -> Self:
        if self.south >= self.north or self.west >= self.east:
            raise ValueError("Geofence bounds must satisfy south < north and west < east")

        return self


class LocatorConfiguration(BaseModel):
    initial_radius_meters: float = Field(default=500.0, gt=0)
    max_connector_meters: float = Field(default=500.0, ge=0)


class FetchConfiguration(BaseModel):
    default_search_radius_meters: float = Field(default=1000.0, gt=0)
    timeout_seconds: float = Field(default=30.0, gt=0)
    failure_policy: FetchFailurePolicy = FetchFailurePolicy.SYNTHETIC_GRID
    grid_spacing_meters: float = Field(default=200.0, gt=0)
    straight_line_speed_kph: float = Field(default=40.0, gt=0)
    cache_ttl_hours: float = Field(default=24.0, gt=0)
    cache_max_entry_count: int = Field(default=8, ge=1)
    cache_directory: Path | None = None


class RouterConfiguration(BaseModel):
    CONFIGURATION_PATH: ClassVar[Path] = Path(
        os.environ.get(
            "ROUTER_CONFIGURATION_PATH", "./config/router_configuration.json"
        )
    )

    fare: FareConfiguration = Field(default_factory=FareConfiguration)
    speeds: SpeedConfiguration = Field(default_factory=SpeedConfiguration)
    retry: RetryConfiguration = Field(default_factory=RetryConfiguration)
    locator: LocatorConfiguration = Field(default_factory=LocatorConfiguration)
    fetch: FetchConfiguration = Field(default_factory=FetchConfiguration)
    geofence: GeofenceConfiguration | None = Field(
        default_factory=lambda: GeofenceConfiguration(
            south=13.58, west=123.15, north=13.65, east=123.20
        )
    )

    @classmethod
    def from_path(cls, path: Path) -> Self:
        try:
            return cls.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as exc:
            logger.exception(f"Invalid configuration file: {path}", exc_info=exc)
            raise

    @classmethod
    def get_default(cls) -> Self:
        """
        Loads the configuration file pointed to by `ROUTER_CONFIGURATION_PATH`.
        Built-in defaults are used when the file does not exist.
        """

        if not cls.CONFIGURATION_PATH.is_file():
            logger.info(
                "Configuration file %s not found, using defaults",
                cls.CONFIGURATION_PATH,
            )
            return cls()

        return cls.from_path(cls.CONFIGURATION_PATH)

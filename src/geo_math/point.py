from pydantic import BaseModel, ConfigDict


class Point(BaseModel):
    """
    Geographic position in WGS84 degrees.
    Attributes:
        latitude (float): Latitude, positive to the north.
        longitude (float): Longitude, positive to the east.
    """

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    @property
    def lon_lat(self) -> tuple[float, float]:
        return (self.longitude, self.latitude)

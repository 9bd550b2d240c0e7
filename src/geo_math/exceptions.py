from routing_errors import RoutingError, RoutingStage


class InvalidCoordinates(RoutingError):
    """
    Coordinates are not a usable location: NaN, out of range
    or outside of the operating area of the service.
    """

    def __init__(self, latitude: float, longitude: float, reason: str) -> None:
        super().__init__(
            RoutingStage.VALIDATION,
            f"Invalid coordinates ({latitude}, {longitude}): {reason}",
        )

        self.latitude = latitude
        self.longitude = longitude
        self.reason = reason

from routing_errors import RoutingError, RoutingStage


class NetworkUnavailable(RoutingError):
    """
    Road network for the requested area could not be obtained
    from the map-data provider.
    """

    def __init__(self, reason: str, *, attempts: int = 1) -> None:
        super().__init__(
            RoutingStage.FETCH,
            f"Road network unavailable after {attempts} attempt(s): {reason}",
        )

        self.reason = reason
        self.attempts = attempts


class MalformedRoadNetworkPayload(NetworkUnavailable):
    """
    The provider answered with data which is not a valid road network.
    Such failures are not retried.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(f"malformed payload: {reason}", attempts=1)


class RetryAttemptsExhausted(Exception):
    def __init__(self, description: str, attempts: int, last_error: Exception):
        super().__init__(description, attempts, last_error)

        self.description = description
        self.attempts = attempts
        self.last_error = last_error

    def __str__(self) -> str:
        return f"{self.description} failed {self.attempts} times: {self.last_error}"

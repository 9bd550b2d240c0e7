class OverpassRequestError(Exception):
    """
    Overpass API could not be reached or refused to answer for a reason
    which may go away on its own (timeout, rate limit, server error).
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)

        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return f"Overpass request failed: {self.message}"

        return f"Overpass request failed with status {self.status_code}: {self.message}"


class OverpassPayloadError(Exception):
    """
    Overpass API answered, but the query was rejected or the response
    body is not a valid road network payload. Repeating the request won't help.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)

        self.message = message

    def __str__(self) -> str:
        return f"Invalid Overpass payload: {self.message}"

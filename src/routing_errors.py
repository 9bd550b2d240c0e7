from enum import StrEnum


class RoutingStage(StrEnum):
    VALIDATION = "validation"
    FETCH = "fetch"
    LOCATE = "locate"
    PLAN = "plan"


class RoutingError(Exception):
    """
    Base class for failures surfaced to the caller of the router.
    The `stage` attribute tells which step of the routing request failed,
    so the caller can decide whether to retry, fall back or abort.
    """

    stage: RoutingStage

    def __init__(self, stage: RoutingStage, message: str) -> None:
        super().__init__(message)

        self.stage = stage
        self.message = message

    def __str__(self) -> str:
        return f"[{self.stage}] {self.message}"

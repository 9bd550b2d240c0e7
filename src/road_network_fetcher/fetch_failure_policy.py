from enum import StrEnum


class FetchFailurePolicy(StrEnum):
    """
    What happens when the road network can't be fetched:
    - synthetic_grid: route over a regular grid of roads around the requested area,
    - straight_line: return a direct origin-destination route,
    - raise: surface `NetworkUnavailable` to the caller.
    Routes produced by the first two policies are flagged as degraded.
    """

    SYNTHETIC_GRID = "synthetic_grid"
    STRAIGHT_LINE = "straight_line"
    RAISE = "raise"

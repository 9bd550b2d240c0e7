import math

from route_planner.router_configuration import FareConfiguration


class FareEstimator:
    """
    Flat base fare covering the first `base_distance_km`, then a per-kilometer
    rate for the rest of the distance. The result never drops below
    the minimum fare and is rounded to two decimal places.
    """

    def __init__(self, fare_configuration: FareConfiguration | None = None) -> None:
        self.fare_configuration = fare_configuration or FareConfiguration()

    @property
    def currency(self) -> str:
        return self.fare_configuration.currency

    @property
    def minimum_fare(self) -> float:
        return round(self.fare_configuration.minimum_fare, 2)

    def estimate(self, distance_km: float) -> float:
        if not math.isfinite(distance_km) or distance_km < 0:
            raise ValueError(f"Distance must be a non-negative number, got {distance_km}")

        configuration = self.fare_configuration
        extra_distance_km = max(distance_km - configuration.base_distance_km, 0.0)
        fare = configuration.base_fare + extra_distance_km * configuration.per_km_rate

        return round(max(fare, configuration.minimum_fare), 2)

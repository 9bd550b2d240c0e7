from pydantic import BaseModel, Field

from road_graph.road_class import RoadClass
from road_graph.road_segment import RoadSegment

DEFAULT_CLASS_SPEEDS_KPH: dict[RoadClass, float] = {
    RoadClass.MOTORWAY: 100.0,
    RoadClass.TRUNK: 80.0,
    RoadClass.PRIMARY: 60.0,
    RoadClass.SECONDARY: 50.0,
    RoadClass.TERTIARY: 40.0,
    RoadClass.RESIDENTIAL: 30.0,
    RoadClass.UNCLASSIFIED: 30.0,
    RoadClass.SERVICE: 20.0,
    RoadClass.LIVING_STREET: 15.0,
}


class SpeedConfiguration(BaseModel):
    """
    Speeds used to turn segment lengths into travel times.
    `_link` classes without their own entry use the speed of their base class,
    anything else missing from the table uses the city-average fallback.
    """

    class_speeds_kph: dict[RoadClass, float] = Field(
        default_factory=lambda: dict(DEFAULT_CLASS_SPEEDS_KPH)
    )
    fallback_speed_kph: float = 40.0

    def speed_for_class(self, road_class: RoadClass) -> float:
        if road_class in self.class_speeds_kph:
            return self.class_speeds_kph[road_class]

        return self.class_speeds_kph.get(road_class.base_class, self.fallback_speed_kph)

    def effective_speed_kph(self, segment: RoadSegment) -> float:
        if segment.max_speed_kph is not None:
            return segment.max_speed_kph
        if segment.road_class is None:
            return self.fallback_speed_kph

        return self.speed_for_class(segment.road_class)

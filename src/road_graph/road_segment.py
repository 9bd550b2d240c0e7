import re
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from road_graph.road_class import RoadClass


class RoadSegment(BaseModel):
    """
    A way of the map-data provider: an ordered list of vertex IDs describing
    the road centerline and the tags shared by the whole road piece.
    """

    _MAX_SPEED_REGEX: ClassVar[re.Pattern[str]] = re.compile(
        r"^\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<unit>km/h|kmh|kph|mph)?\s*$"
    )
    _MPH_TO_KPH: ClassVar[float] = 1.609344
    _ONEWAY_VALUES: ClassVar[frozenset[str]] = frozenset({"yes", "true", "1"})
    _CIRCULAR_JUNCTIONS: ClassVar[frozenset[str]] = frozenset(
        {"roundabout", "circular"}
    )

    model_config = ConfigDict(frozen=True)

    id: int
    node_ids: list[int]
    tags: dict[str, str] = Field(default_factory=dict)

    @property
    def road_class(self) -> RoadClass | None:
        return RoadClass.get_by_value_safe(self.tags.get("highway"))

    @property
    def is_usable(self) -> bool:
        return len(self.node_ids) >= 2 and self.road_class is not None

    @property
    def is_reversed(self) -> bool:
        """
        `oneway=-1` means the road may only be driven against
        the order of its vertices.
        """

        return self.tags.get("oneway") == "-1"

    @property
    def is_oneway(self) -> bool:
        return (
            self.is_reversed
            or self.tags.get("oneway") in self._ONEWAY_VALUES
            or self.tags.get("junction") in self._CIRCULAR_JUNCTIONS
            or (self.road_class is not None and self.road_class.is_motorway_like)
        )

    @property
    def max_speed_kph(self) -> float | None:
        """
        Explicit speed limit from the `maxspeed` tag. Values like `none`,
        `signals` or non-positive numbers are treated as absent.
        """

        raw_value = self.tags.get("maxspeed")
        if raw_value is None:
            return None

        match = self._MAX_SPEED_REGEX.match(raw_value.lower())
        if match is None:
            return None

        speed = float(match["value"])
        if match["unit"] == "mph":
            speed *= self._MPH_TO_KPH

        return speed if speed > 0 else None

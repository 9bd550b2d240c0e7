from enum import StrEnum
from typing import Self


class RoadClass(StrEnum):
    """
    Values of the OpenStreetMap `highway` tag accepted as drivable roads,
    ordered from the fastest to the slowest class.
    """

    MOTORWAY = "motorway"
    MOTORWAY_LINK = "motorway_link"
    TRUNK = "trunk"
    TRUNK_LINK = "trunk_link"
    PRIMARY = "primary"
    PRIMARY_LINK = "primary_link"
    SECONDARY = "secondary"
    SECONDARY_LINK = "secondary_link"
    TERTIARY = "tertiary"
    TERTIARY_LINK = "tertiary_link"
    RESIDENTIAL = "residential"
    UNCLASSIFIED = "unclassified"
    LIVING_STREET = "living_street"
    SERVICE = "service"

    @classmethod
    def get_by_value_safe(cls, value: str | None) -> Self | None:
        try:
            return cls(value)
        except ValueError:
            return None

    @property
    def base_class(self) -> "RoadClass":
        return RoadClass(self.value.removesuffix("_link"))

    @property
    def is_motorway_like(self) -> bool:
        return self.base_class == RoadClass.MOTORWAY

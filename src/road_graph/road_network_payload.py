from pydantic import BaseModel, Field

from geo_math import Point
from road_graph.road_segment import RoadSegment


class RoadNetworkPayload(BaseModel):
    """
    Provider-neutral raw road data for an area: vertex coordinates by ID
    and the ways referencing them. This is what gets cached, the graph
    is always rebuilt from it.
    """

    nodes: dict[int, Point] = Field(default_factory=dict)
    segments: list[RoadSegment] = Field(default_factory=list)

from .exceptions import EdgeNotFoundError, FrozenRoadGraphError, NodeNotFoundError
from .node_ref import NodeRef, ProviderNodeRef, SyntheticNodeRef
from .road_class import RoadClass
from .road_graph import RoadGraph
from .road_graph_builder import RoadGraphBuilder
from .road_network_payload import RoadNetworkPayload
from .road_segment import RoadSegment
from .speed_configuration import DEFAULT_CLASS_SPEEDS_KPH, SpeedConfiguration

__all__ = [
    "RoadGraph",
    "RoadGraphBuilder",
    "RoadNetworkPayload",
    "RoadSegment",
    "RoadClass",
    "SpeedConfiguration",
    "DEFAULT_CLASS_SPEEDS_KPH",
    "NodeRef",
    "ProviderNodeRef",
    "SyntheticNodeRef",
    "NodeNotFoundError",
    "EdgeNotFoundError",
    "FrozenRoadGraphError",
]

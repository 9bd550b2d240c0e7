import logging
import math

from geo_math import distance, offset, Point
from road_graph import RoadGraph, RoadGraphBuilder, SyntheticNodeRef

logger = logging.getLogger(__name__)

DEFAULT_GRID_SPACING_METERS = 200.0
DEFAULT_GRID_SPEED_KPH = 30.0
MAX_GRID_HALF_SIZE = 15


def _grid_node_ref(row: int, column: int) -> SyntheticNodeRef:
    return SyntheticNodeRef(tag=f"grid:{row}:{column}")


def build_synthetic_grid(
    center: Point,
    radius_meters: float,
    *,
    spacing_meters: float = DEFAULT_GRID_SPACING_METERS,
    speed_kph: float = DEFAULT_GRID_SPEED_KPH,
) -> RoadGraph:
    """
    Builds a square grid of two-way roads centered on `center` and spanning
    at least `radius_meters` in each cardinal direction. The grid has at most
    `2 * MAX_GRID_HALF_SIZE + 1` rows and columns, so very large radii get
    a coarser spacing.

    The graph stands in for the real road network when the map-data provider
    is unreachable, so routes computed over it are always reported as degraded.
    """

    if spacing_meters <= 0:
        raise ValueError("Grid spacing must be positive.")

    half_size = max(math.ceil(radius_meters / spacing_meters), 1)
    if half_size > MAX_GRID_HALF_SIZE:
        spacing_meters = radius_meters / MAX_GRID_HALF_SIZE
        half_size = MAX_GRID_HALF_SIZE

    graph = RoadGraph(center=center, radius_meters=radius_meters, is_synthetic=True)
    indices = range(-half_size, half_size + 1)

    for row in indices:
        for column in indices:
            graph.add_node(
                _grid_node_ref(row, column),
                offset(center, row * spacing_meters, column * spacing_meters),
                segment_ids=(f"grid:row:{row}", f"grid:column:{column}"),
            )

    for row in indices:
        for column in indices:
            source = _grid_node_ref(row, column)
            for target in (_grid_node_ref(row + 1, column), _grid_node_ref(row, column + 1)):
                if target not in graph:
                    continue

                length = distance(graph.point(source), graph.point(target))
                weight = RoadGraphBuilder.get_travel_time(length, speed_kph)
                graph.add_edge(source, target, weight, distance=length, geometry=())
                graph.add_edge(target, source, weight, distance=length, geometry=())

    logger.warning(
        "Built synthetic %dx%d road grid around (%f, %f) with %.0f m spacing.",
        2 * half_size + 1,
        2 * half_size + 1,
        center.latitude,
        center.longitude,
        spacing_meters,
    )

    return graph.freeze()

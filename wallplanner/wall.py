"""
Wall outline editing

The outline is traced point by point and closes when a new point lands near
the first vertex. Once closed the vertex count is fixed; vertices can still
be moved and edges resized to an exact length in meters.
"""

import logging
import math

from shapely.geometry import Polygon

from .config import EditorConfig, DEFAULT_CONFIG
from .errors import WallEditError
from .geometry import polygon_area, polygon_perimeter, polygon_bounds
from .models import Point, Rect, WallDimensions, WallOutline

logger = logging.getLogger(__name__)


def add_point(wall: WallOutline, x: float, y: float,
              config: EditorConfig = DEFAULT_CONFIG) -> WallOutline:
    """Append a vertex, or close the outline when snapping to the first one"""
    if wall.is_closed:
        return wall

    if len(wall.points) >= 3:
        first = wall.points[0]
        if math.hypot(first.x - x, first.y - y) < config.snap_close_px:
            logger.debug("Outline closed with %d vertices", len(wall.points))
            closed = WallOutline(points=list(wall.points), is_closed=True)
            if not is_simple(closed):
                logger.warning("Closed outline intersects itself")
            return closed

    return WallOutline(points=[*wall.points, Point(x=x, y=y)], is_closed=False)


def _check_index(wall: WallOutline, index: int) -> None:
    if not 0 <= index < len(wall.points):
        raise WallEditError(f"Vertex index {index} out of range for {len(wall.points)} points")


def move_point(wall: WallOutline, index: int, x: float, y: float,
               config: EditorConfig = DEFAULT_CONFIG) -> WallOutline:
    """
    Move a vertex, snapping it into horizontal/vertical alignment

    Each coordinate snaps to the matching coordinate of the previous and next
    vertex when within ``snap_align_px``. The first and last vertices only
    count as neighbours of each other once the outline is closed.
    """
    _check_index(wall, index)
    points = list(wall.points)
    n = len(points)

    neighbours = []
    if index > 0:
        neighbours.append(points[index - 1])
    elif wall.is_closed:
        neighbours.append(points[n - 1])
    if index < n - 1:
        neighbours.append(points[index + 1])
    elif wall.is_closed:
        neighbours.append(points[0])

    for nb in neighbours:
        if abs(x - nb.x) < config.snap_align_px:
            x = nb.x
        if abs(y - nb.y) < config.snap_align_px:
            y = nb.y

    points[index] = Point(x=x, y=y)
    return WallOutline(points=points, is_closed=wall.is_closed)


def set_edge_length(wall: WallOutline, index: int, length_m: float,
                    config: EditorConfig = DEFAULT_CONFIG) -> WallOutline:
    """Stretch edge ``index -> index + 1`` to ``length_m`` by moving its end vertex"""
    _check_index(wall, index)
    if length_m <= 0:
        return wall

    points = list(wall.points)
    end = (index + 1) % len(points)
    p1, p2 = points[index], points[end]

    current = math.hypot(p2.x - p1.x, p2.y - p1.y)
    if current == 0:
        return wall

    ratio = (length_m * config.scale) / current
    points[end] = Point(x=p1.x + (p2.x - p1.x) * ratio, y=p1.y + (p2.y - p1.y) * ratio)
    return WallOutline(points=points, is_closed=wall.is_closed)


def wall_dimensions(wall: WallOutline, config: EditorConfig = DEFAULT_CONFIG) -> WallDimensions:
    """Area in m² and perimeter in m; zero until the outline is closed"""
    if not wall.is_closed or len(wall.points) < 3:
        return WallDimensions(area_m2=0.0, perimeter_m=0.0)
    return WallDimensions(
        area_m2=polygon_area(wall.points) / (config.scale * config.scale),
        perimeter_m=polygon_perimeter(wall.points) / config.scale,
    )


def wall_bounds(wall: WallOutline) -> Rect:
    return polygon_bounds(wall.points)


def is_simple(wall: WallOutline) -> bool:
    """False for a closed outline whose edges cross each other"""
    if not wall.is_closed or len(wall.points) < 3:
        return True
    return Polygon([(p.x, p.y) for p in wall.points]).is_valid

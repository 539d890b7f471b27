"""
Occlusion resolution for design areas

A design area loses every part covered by an opening (regardless of drawing
order) and every part covered by a design area drawn after it. Design areas
drawn before it never take anything away.
"""

import logging
from typing import List

from .geometry import subtract_many, total_area
from .models import Rect, Scene

logger = logging.getLogger(__name__)


def resolve_design_area(scene: Scene, index: int) -> List[Rect]:
    """
    Net uncovered rectangles of the design area at ``index``

    Returns: disjoint rectangles, empty when the area is fully covered
    """
    area = scene.design_areas[index]
    current = [area.rect.normalized()]

    for opening in scene.openings:
        current = subtract_many(current, opening.rect.normalized())
        if not current:
            return []

    for top in scene.design_areas[index + 1:]:
        current = subtract_many(current, top.rect.normalized())
        if not current:
            return []

    return current


def resolve_net_rects(scene: Scene) -> List[List[Rect]]:
    """Net rectangles for every design area, in z-order"""
    resolved = [resolve_design_area(scene, i) for i in range(len(scene.design_areas))]
    logger.debug(
        "Resolved %d design areas against %d openings",
        len(scene.design_areas), len(scene.openings)
    )
    return resolved


def net_area_m2(rects: List[Rect], scale: float) -> float:
    """Summed area of ``rects`` converted from px² to m²"""
    return total_area(rects) / (scale * scale)

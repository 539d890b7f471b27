"""
Scene mutations

Every function here that changes the scene records a snapshot in the history
first and returns the new scene; the scene passed in is left untouched.
Drag gestures go through ``*_from_drag`` first, which discards shapes that
are too small to be intentional before they can reach the scene.
"""

import logging
import uuid
from typing import Optional

from .config import EditorConfig, DEFAULT_CONFIG
from .errors import ShapeNotFoundError
from .geometry import rect_from_corners, segment_length
from .history import commit
from .models import (
    DesignArea,
    History,
    ListSegment,
    Opening,
    OpeningType,
    Scene,
    Shape,
)

logger = logging.getLogger(__name__)


def new_shape_id() -> str:
    return uuid.uuid4().hex[:9]


# ============================================================================
# DRAWING GATE
# ============================================================================

def design_area_from_drag(
    product_id: str,
    x1: float, y1: float, x2: float, y2: float,
    config: EditorConfig = DEFAULT_CONFIG,
) -> Optional[DesignArea]:
    """Normalized design area for a finished drag, None if too small"""
    if abs(x2 - x1) < config.min_shape_px or abs(y2 - y1) < config.min_shape_px:
        logger.debug("Discarded design area drag (%.1f x %.1f px)", x2 - x1, y2 - y1)
        return None
    return DesignArea(
        id=new_shape_id(),
        product_id=product_id,
        rect=rect_from_corners(x1, y1, x2, y2),
    )


def opening_from_drag(
    opening_type: OpeningType,
    x1: float, y1: float, x2: float, y2: float,
    config: EditorConfig = DEFAULT_CONFIG,
) -> Optional[Opening]:
    if abs(x2 - x1) < config.min_shape_px or abs(y2 - y1) < config.min_shape_px:
        logger.debug("Discarded %s drag (%.1f x %.1f px)", opening_type.value, x2 - x1, y2 - y1)
        return None
    return Opening(
        id=new_shape_id(),
        opening_type=opening_type,
        rect=rect_from_corners(x1, y1, x2, y2),
    )


def list_from_drag(
    product_id: str,
    x1: float, y1: float, x2: float, y2: float,
    config: EditorConfig = DEFAULT_CONFIG,
) -> Optional[ListSegment]:
    if segment_length(x1, y1, x2, y2) < config.min_shape_px:
        logger.debug("Discarded list drag at (%.1f, %.1f)", x1, y1)
        return None
    return ListSegment(id=new_shape_id(), product_id=product_id, x1=x1, y1=y1, x2=x2, y2=y2)


# ============================================================================
# MUTATORS
# ============================================================================

def add_shape(
    history: History,
    scene: Scene,
    shape: Shape,
    config: EditorConfig = DEFAULT_CONFIG,
) -> Scene:
    """Append ``shape`` on top of the others of its kind"""
    def mutation(s: Scene) -> Scene:
        if isinstance(shape, DesignArea):
            s.design_areas.append(shape.model_copy(update={"rect": shape.rect.normalized()}))
        elif isinstance(shape, Opening):
            s.openings.append(shape.model_copy(update={"rect": shape.rect.normalized()}))
        elif isinstance(shape, ListSegment):
            s.lists.append(shape)
        else:
            raise TypeError(f"Unsupported shape: {type(shape).__name__}")
        return s

    return commit(history, scene, mutation, config.history_limit)


def add_design_area(history: History, scene: Scene, area: DesignArea,
                    config: EditorConfig = DEFAULT_CONFIG) -> Scene:
    return add_shape(history, scene, area, config)


def add_opening(history: History, scene: Scene, opening: Opening,
                config: EditorConfig = DEFAULT_CONFIG) -> Scene:
    return add_shape(history, scene, opening, config)


def add_list_segment(history: History, scene: Scene, segment: ListSegment,
                     config: EditorConfig = DEFAULT_CONFIG) -> Scene:
    return add_shape(history, scene, segment, config)


def _remove(history: History, scene: Scene, field: str, kind: str,
            shape_id: str, config: EditorConfig) -> Scene:
    if not any(s.id == shape_id for s in getattr(scene, field)):
        raise ShapeNotFoundError(kind, shape_id)

    def mutation(s: Scene) -> Scene:
        setattr(s, field, [x for x in getattr(s, field) if x.id != shape_id])
        return s

    return commit(history, scene, mutation, config.history_limit)


def remove_design_area(history: History, scene: Scene, area_id: str,
                       config: EditorConfig = DEFAULT_CONFIG) -> Scene:
    """
    Remove a design area by id

    Raises: ShapeNotFoundError, without touching the history, for unknown ids
    """
    return _remove(history, scene, "design_areas", "Design area", area_id, config)


def remove_opening(history: History, scene: Scene, opening_id: str,
                   config: EditorConfig = DEFAULT_CONFIG) -> Scene:
    return _remove(history, scene, "openings", "Opening", opening_id, config)


def remove_list_segment(history: History, scene: Scene, list_id: str,
                        config: EditorConfig = DEFAULT_CONFIG) -> Scene:
    return _remove(history, scene, "lists", "List", list_id, config)


def clear_all(history: History, scene: Scene,
              config: EditorConfig = DEFAULT_CONFIG) -> Scene:
    """Remove every shape as one undoable step"""
    return commit(history, scene, lambda s: Scene(), config.history_limit)

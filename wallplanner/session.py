"""
Wall editing session

Bundles the wall outline, the scene and its history for one editor. The
session owns these values and threads them through the pure functions of
the other modules; nothing here is global.
"""

import logging
import uuid
from typing import List, Optional, Sequence

from .catalog import PRODUCTS, find_product
from .config import EditorConfig, DEFAULT_CONFIG
from . import history as hist
from . import scene as ops
from . import wall as walls
from .models import (
    BillOfMaterials,
    CountingMode,
    DesignArea,
    History,
    ListSegment,
    Opening,
    OpeningType,
    Product,
    Rect,
    Scene,
    SessionState,
    WallOutline,
    WallState,
)
from .occlusion import resolve_design_area
from .errors import ProductModeError, ShapeNotFoundError
from .quantities import compute_bill_of_materials

logger = logging.getLogger(__name__)


class WallSession:
    """One editor's wall, scene and undo history"""

    def __init__(self, config: EditorConfig = DEFAULT_CONFIG,
                 catalog: Optional[Sequence[Product]] = None,
                 session_id: Optional[str] = None):
        self.id = session_id or str(uuid.uuid4())
        self.config = config
        self.catalog: List[Product] = list(PRODUCTS if catalog is None else catalog)
        self.wall = WallOutline()
        self.scene = Scene()
        self.history = History()

    # ------------------------------------------------------------------
    # Wall
    # ------------------------------------------------------------------
    def add_point(self, x: float, y: float) -> WallOutline:
        self.wall = walls.add_point(self.wall, x, y, self.config)
        return self.wall

    def move_point(self, index: int, x: float, y: float) -> WallOutline:
        self.wall = walls.move_point(self.wall, index, x, y, self.config)
        return self.wall

    def set_edge_length(self, index: int, length_m: float) -> WallOutline:
        self.wall = walls.set_edge_length(self.wall, index, length_m, self.config)
        return self.wall

    def reset(self) -> None:
        """Clear the wall and every shape; history does not survive a reset"""
        self.wall = WallOutline()
        self.scene = Scene()
        hist.clear(self.history)
        logger.info("Session %s reset", self.id)

    def wall_state(self) -> WallState:
        return WallState(
            outline=self.wall,
            dimensions=walls.wall_dimensions(self.wall, self.config),
            bounds=walls.wall_bounds(self.wall),
            is_simple=walls.is_simple(self.wall),
        )

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------
    def draw_design_area(self, product_id: str, x1: float, y1: float,
                         x2: float, y2: float) -> Optional[DesignArea]:
        area = ops.design_area_from_drag(product_id, x1, y1, x2, y2, self.config)
        if area is not None:
            self.scene = ops.add_design_area(self.history, self.scene, area, self.config)
        return area

    def draw_opening(self, opening_type: OpeningType, x1: float, y1: float,
                     x2: float, y2: float) -> Optional[Opening]:
        opening = ops.opening_from_drag(opening_type, x1, y1, x2, y2, self.config)
        if opening is not None:
            self.scene = ops.add_opening(self.history, self.scene, opening, self.config)
        return opening

    def draw_list(self, product_id: str, x1: float, y1: float,
                  x2: float, y2: float) -> Optional[ListSegment]:
        """Lists take length-counted products; unknown ids are placed and counted as nothing"""
        product = find_product(self.catalog, product_id)
        if product is not None and product.counting_mode != CountingMode.LENGTH:
            raise ProductModeError(product_id, product.counting_mode.value, "list")
        segment = ops.list_from_drag(product_id, x1, y1, x2, y2, self.config)
        if segment is not None:
            self.scene = ops.add_list_segment(self.history, self.scene, segment, self.config)
        return segment

    def remove_design_area(self, area_id: str) -> None:
        self.scene = ops.remove_design_area(self.history, self.scene, area_id, self.config)

    def remove_opening(self, opening_id: str) -> None:
        self.scene = ops.remove_opening(self.history, self.scene, opening_id, self.config)

    def remove_list(self, list_id: str) -> None:
        self.scene = ops.remove_list_segment(self.history, self.scene, list_id, self.config)

    def clear_shapes(self) -> None:
        self.scene = ops.clear_all(self.history, self.scene, self.config)

    def undo(self) -> Scene:
        self.scene = hist.undo(self.history, self.scene)
        return self.scene

    def redo(self) -> Scene:
        self.scene = hist.redo(self.history, self.scene)
        return self.scene

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def bill_of_materials(self) -> BillOfMaterials:
        return compute_bill_of_materials(self.scene, self.catalog, self.config, self.wall)

    def net_rects(self, area_id: str) -> List[Rect]:
        for i, area in enumerate(self.scene.design_areas):
            if area.id == area_id:
                return resolve_design_area(self.scene, i)
        raise ShapeNotFoundError("Design area", area_id)

    def state(self) -> SessionState:
        return SessionState(
            id=self.id,
            wall=self.wall_state(),
            scene=self.scene,
            can_undo=self.history.can_undo,
            can_redo=self.history.can_redo,
        )

"""
Data models for the Wall Planner API

Pydantic models for the scene graph, the product catalog, request/response
validation and serialization.
"""

from enum import Enum
from typing import Annotated, List, Optional, Dict, Union, Literal

from pydantic import BaseModel, Field


class Point(BaseModel):
    """Planar coordinate in canvas pixels"""
    x: float
    y: float

    class Config:
        frozen = True


class Rect(BaseModel):
    """Axis-aligned rectangle, top-left origin"""
    x: float
    y: float
    width: float
    height: float

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {"x": 100.0, "y": 50.0, "width": 200.0, "height": 290.0}
        }

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def normalized(self) -> "Rect":
        """Same footprint with non-negative width and height"""
        if self.width >= 0 and self.height >= 0:
            return self
        return Rect(
            x=self.x if self.width >= 0 else self.x + self.width,
            y=self.y if self.height >= 0 else self.y + self.height,
            width=abs(self.width),
            height=abs(self.height),
        )

    def corners(self) -> List[Point]:
        return [
            Point(x=self.x, y=self.y),
            Point(x=self.right, y=self.y),
            Point(x=self.right, y=self.bottom),
            Point(x=self.x, y=self.bottom),
        ]


class CountingMode(str, Enum):
    AREA = "area"
    LENGTH = "length"


class Product(BaseModel):
    """Static catalog entry, dimensions in meters"""
    id: str
    name: str
    unit_width: float = Field(ge=0)
    unit_height: float = Field(ge=0)
    unit_length: Optional[float] = Field(None, gt=0)
    counting_mode: CountingMode = CountingMode.AREA
    color: str = "rgba(14, 165, 233, 0.4)"

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "wallpanel",
                "name": "Wallpanel (16cm)",
                "unit_width": 0.16,
                "unit_height": 2.9,
                "unit_length": None,
                "counting_mode": "area",
                "color": "rgba(14, 165, 233, 0.4)"
            }
        }

    @property
    def unit_area(self) -> float:
        return self.unit_width * self.unit_height


# ============================================================================
# SCENE SHAPES
# ============================================================================
# Shapes are a tagged union discriminated by ``kind``. Position inside the
# owning sequence is the z-order: later entries are drawn on top.

class DesignArea(BaseModel):
    """Rectangle of material assigned to one product"""
    kind: Literal["design_area"] = "design_area"
    id: str
    product_id: str
    rect: Rect


class OpeningType(str, Enum):
    WINDOW = "window"
    DOOR = "door"


class Opening(BaseModel):
    """Window or door, occludes every design area"""
    kind: Literal["opening"] = "opening"
    id: str
    opening_type: OpeningType
    rect: Rect


class ListSegment(BaseModel):
    """Length-counted product run, e.g. moulding"""
    kind: Literal["list"] = "list"
    id: str
    product_id: str
    x1: float
    y1: float
    x2: float
    y2: float


Shape = Annotated[Union[DesignArea, Opening, ListSegment], Field(discriminator="kind")]


class Scene(BaseModel):
    """Mutable aggregate of everything placed on the wall"""
    design_areas: List[DesignArea] = Field(default_factory=list)
    openings: List[Opening] = Field(default_factory=list)
    lists: List[ListSegment] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.design_areas or self.openings or self.lists)

    def snapshot(self) -> "Scene":
        """Structural copy, later mutation of self never reaches it"""
        return self.model_copy(deep=True)


class History(BaseModel):
    """Linear undo/redo stacks of pre-mutation snapshots"""
    past: List[Scene] = Field(default_factory=list)
    future: List[Scene] = Field(default_factory=list)

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)


class WallOutline(BaseModel):
    """Polygon traced by the user, vertices in drawing order"""
    points: List[Point] = Field(default_factory=list)
    is_closed: bool = False


# ============================================================================
# DERIVED RESULTS
# ============================================================================

class ResolvedArea(BaseModel):
    """Net visible footprint of one design area"""
    area_id: str
    product_id: str
    rects: List[Rect]
    gross_area_m2: float
    net_area_m2: float
    piece_count: int = 0
    inside_wall: Optional[bool] = None


class ResolvedList(BaseModel):
    """Measured length of one list segment"""
    list_id: str
    product_id: str
    length_m: float
    piece_count: int = 0


class ProductQuantity(BaseModel):
    """Accumulated quantity and purchase count for one product"""
    product_id: str
    name: str
    counting_mode: CountingMode
    quantity: float = Field(description="m² for area products, m for length products")
    count: int


class BillOfMaterials(BaseModel):
    """Fully derived from the current scene on every query"""
    per_product_count: Dict[str, int]
    total_design_area_m2: float
    products: List[ProductQuantity] = Field(default_factory=list)
    areas: List[ResolvedArea] = Field(default_factory=list)
    lists: List[ResolvedList] = Field(default_factory=list)
    wall_area_m2: float = 0.0
    wall_perimeter_m: float = 0.0
    covered_wall_area_m2: float = 0.0


class WallDimensions(BaseModel):
    area_m2: float
    perimeter_m: float


# ============================================================================
# REQUEST / RESPONSE BODIES
# ============================================================================

class PointRequest(BaseModel):
    x: float
    y: float


class EdgeLengthRequest(BaseModel):
    length_m: float = Field(gt=0, description="Target edge length in meters")


class DragRequest(BaseModel):
    """A finished drag gesture from (x1, y1) to (x2, y2)"""
    x1: float
    y1: float
    x2: float
    y2: float

    class Config:
        json_schema_extra = {
            "example": {"x1": 100.0, "y1": 50.0, "x2": 300.0, "y2": 340.0}
        }


class DesignAreaRequest(DragRequest):
    product_id: str


class OpeningRequest(DragRequest):
    opening_type: OpeningType = OpeningType.WINDOW


class ListRequest(DragRequest):
    product_id: str


class DrawResult(BaseModel):
    """Outcome of a drawing gesture; discarded gestures carry no shape"""
    committed: bool
    shape: Optional[Shape] = None
    message: Optional[str] = None


class WallState(BaseModel):
    outline: WallOutline
    dimensions: WallDimensions
    bounds: Rect
    is_simple: bool


class SessionState(BaseModel):
    id: str
    wall: WallState
    scene: Scene
    can_undo: bool
    can_redo: bool


class ErrorResponse(BaseModel):
    """Error response format"""
    success: bool = False
    error: str
    detail: Optional[str] = None

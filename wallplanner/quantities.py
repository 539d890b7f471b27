"""
Quantity aggregation

Turns the resolved net geometry of a scene into purchase counts per product.
The bill of materials is re-derived from the scene on every call; nothing
is cached between calls.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .catalog import catalog_index
from .config import EditorConfig, DEFAULT_CONFIG
from .geometry import (
    polygon_area,
    polygon_perimeter,
    polygon_rect_intersection_area,
    is_rect_in_polygon,
    rect_perimeter,
    segment_length,
)
from .models import (
    BillOfMaterials,
    CountingMode,
    Product,
    ProductQuantity,
    ResolvedArea,
    ResolvedList,
    Scene,
    WallOutline,
)
from .occlusion import resolve_net_rects, net_area_m2

logger = logging.getLogger(__name__)

EPS = 1e-9


def _ceil_ratio(quantity: float, unit_size: Optional[float]) -> int:
    """ceil(quantity / unit_size), tolerant to float noise around integers"""
    if not unit_size or unit_size <= 0 or quantity <= 0:
        return 0
    ratio = quantity / unit_size
    nearest = round(ratio)
    if abs(ratio - nearest) < EPS:
        ratio = nearest
    return int(math.ceil(ratio))


def count_units(quantity: float, unit_size: Optional[float]) -> int:
    """
    Purchase count for ``quantity`` of material sold in ``unit_size`` units

    One extra unit is added to any non-zero count to cover cut waste.
    """
    raw = _ceil_ratio(quantity, unit_size)
    return raw + 1 if raw > 0 else 0


def product_unit_size(product: Product) -> Optional[float]:
    if product.counting_mode == CountingMode.LENGTH:
        return product.unit_length
    return product.unit_area


def compute_bill_of_materials(
    scene: Scene,
    catalog: Sequence[Product],
    config: EditorConfig = DEFAULT_CONFIG,
    wall: Optional[WallOutline] = None,
) -> BillOfMaterials:
    """
    Compute per-product purchase counts for the current scene

    Area products accumulate the net (occlusion-resolved) area of their
    design areas. Length products accumulate list segment lengths plus the
    perimeter of any design area drawn with them; neither is occluded.
    Shapes referring to unknown products contribute nothing, and neither
    do list segments drawn with an area product.
    """
    scale = config.scale
    products = catalog_index(catalog)
    totals: Dict[str, float] = {pid: 0.0 for pid in products}
    total_design_area = 0.0

    outline = None
    if wall is not None and wall.is_closed and len(wall.points) >= 3:
        outline = wall.points
    covered = 0.0

    areas: List[ResolvedArea] = []
    for area, rects in zip(scene.design_areas, resolve_net_rects(scene)):
        product = products.get(area.product_id)
        rect = area.rect.normalized()
        gross = rect.area / (scale * scale)
        net = net_area_m2(rects, scale)
        piece_count = 0

        if product is None:
            logger.warning("Design area %s refers to unknown product '%s'", area.id, area.product_id)
        elif product.counting_mode == CountingMode.LENGTH:
            length = rect_perimeter(rect) / scale
            totals[product.id] += length
            piece_count = _ceil_ratio(length, product.unit_length)
        else:
            totals[product.id] += net
            total_design_area += net
            piece_count = _ceil_ratio(net, product.unit_area)
            if outline is not None:
                covered += sum(polygon_rect_intersection_area(outline, r) for r in rects)

        areas.append(ResolvedArea(
            area_id=area.id,
            product_id=area.product_id,
            rects=rects,
            gross_area_m2=gross,
            net_area_m2=net,
            piece_count=piece_count,
            inside_wall=is_rect_in_polygon(rect, outline) if outline is not None else None,
        ))

    lists: List[ResolvedList] = []
    for seg in scene.lists:
        product = products.get(seg.product_id)
        length = segment_length(seg.x1, seg.y1, seg.x2, seg.y2) / scale
        piece_count = 0
        if product is None:
            logger.warning("List %s refers to unknown product '%s'", seg.id, seg.product_id)
        elif product.counting_mode != CountingMode.LENGTH:
            # metres must not land in an m² total
            logger.warning("List %s uses area product '%s'; not counted", seg.id, seg.product_id)
        else:
            totals[product.id] += length
            piece_count = _ceil_ratio(length, product.unit_length)
        lists.append(ResolvedList(
            list_id=seg.id,
            product_id=seg.product_id,
            length_m=length,
            piece_count=piece_count,
        ))

    quantities = [
        ProductQuantity(
            product_id=product.id,
            name=product.name,
            counting_mode=product.counting_mode,
            quantity=totals[product.id],
            count=count_units(totals[product.id], product_unit_size(product)),
        )
        for product in products.values()
    ]

    bom = BillOfMaterials(
        per_product_count={q.product_id: q.count for q in quantities},
        total_design_area_m2=total_design_area,
        products=quantities,
        areas=areas,
        lists=lists,
    )
    if outline is not None:
        bom.wall_area_m2 = polygon_area(outline) / (scale * scale)
        bom.wall_perimeter_m = polygon_perimeter(outline) / scale
        bom.covered_wall_area_m2 = covered / (scale * scale)
    return bom


def bill_of_materials_frame(bom: BillOfMaterials, precision: int = 2) -> pd.DataFrame:
    """Generate the material list DataFrame"""
    rows = []
    for q in bom.products:
        rows.append({
            "Product": q.name,
            "Mode": q.counting_mode.value,
            "Quantity": round(q.quantity, precision),
            "Unit": "m²" if q.counting_mode == CountingMode.AREA else "m",
            "Count": q.count,
        })
    return pd.DataFrame(rows, columns=["Product", "Mode", "Quantity", "Unit", "Count"])

"""
Default product catalog

Static list of purchasable products. Never mutated at runtime; shapes refer
to products by id.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .models import Product, CountingMode

logger = logging.getLogger(__name__)


PRODUCTS: List[Product] = [
    Product(
        id="wallpanel",
        name="Wallpanel (16cm)",
        unit_width=0.16,
        unit_height=2.9,
        counting_mode=CountingMode.AREA,
        color="rgba(14, 165, 233, 0.4)",
    ),
    Product(
        id="wallboard",
        name="Wallboard (30cm)",
        unit_width=0.30,
        unit_height=2.9,
        counting_mode=CountingMode.AREA,
        color="rgba(16, 185, 129, 0.4)",
    ),
    Product(
        id="moulding",
        name="Moulding list (2.9m)",
        unit_width=0.02,
        unit_height=0.02,
        unit_length=2.9,
        counting_mode=CountingMode.LENGTH,
        color="rgba(139, 92, 246, 0.4)",
    ),
]


def catalog_index(products: Iterable[Product]) -> Dict[str, Product]:
    """Map product id -> product"""
    return {p.id: p for p in products}


def find_product(products: Iterable[Product], product_id: str) -> Optional[Product]:
    """Look up a product; a miss is logged and answered with None"""
    product = next((p for p in products if p.id == product_id), None)
    if product is None:
        logger.warning("Unknown product id '%s'", product_id)
    return product

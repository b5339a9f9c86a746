"""
Product catalog — Prodigi SKUs and prices.

Prices are integer cents. The catalog is fixed at import time; there are
no mutation operations.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    price: int = Field(..., gt=0, description="Price in cents")
    sku: str = Field(..., min_length=1, description="Base Prodigi SKU")
    frame_sku: Optional[str] = None
    quantity: int = Field(1, ge=1, description="Copies per order")
    attributes: Dict[str, str] = Field(default_factory=dict)

    @property
    def fulfillment_sku(self) -> str:
        """Framed products are ordered by their frame SKU."""
        return self.frame_sku or self.sku

    @property
    def display_price(self) -> float:
        return self.price / 100


_BLACK_FRAME = {"color": "black"}
_GOLD_FRAME = {"color": "gold"}

PRODUCTS: Dict[str, CatalogEntry] = {
    entry.id: entry
    for entry in [
        CatalogEntry(
            id="postcard-set",
            name="Postcard Set (6 cards)",
            price=2500,
            sku="GLOBAL-PHO-4x6-PRO",
            quantity=6,
        ),
        CatalogEntry(id="mini-print", name="Mini Art Print 5×7\"", price=1800, sku="GLOBAL-PHO-5x7-PRO"),
        CatalogEntry(id="poster-8x10", name="Glossy Photo Print 8×10\"", price=2900, sku="GLOBAL-PHO-8x10-PRO"),
        CatalogEntry(id="poster-11x14", name="Glossy Photo Print 11×14\"", price=3900, sku="GLOBAL-PHO-11x14-PRO"),
        CatalogEntry(id="poster-18x24", name="Fine Art Poster 18×24\"", price=5500, sku="GLOBAL-FAP-18x24"),
        CatalogEntry(
            id="standard-8x10",
            name="Standard Giclée 8×10\" Framed",
            price=12500,
            sku="GLOBAL-FAP-8x10",
            frame_sku="GLOBAL-CFPM-8x10-BK",
            attributes=_BLACK_FRAME,
        ),
        CatalogEntry(
            id="standard-16x20",
            name="Standard Giclée 16×20\" Framed",
            price=22500,
            sku="GLOBAL-FAP-16x20",
            frame_sku="GLOBAL-CFPM-16x20-BK",
            attributes=_BLACK_FRAME,
        ),
        CatalogEntry(
            id="gallery-16x20",
            name="Gallery Giclée + Gold Frame 16×20\"",
            price=35000,
            sku="GLOBAL-FAP-16x20",
            frame_sku="GLOBAL-AFPM-16x20-GD",
            attributes=_GOLD_FRAME,
        ),
        CatalogEntry(
            id="gallery-24x36",
            name="Gallery Giclée + Gold Frame 24×36\"",
            price=55000,
            sku="GLOBAL-FAP-24x36",
            frame_sku="GLOBAL-AFPM-24x36-GD",
            attributes=_GOLD_FRAME,
        ),
        CatalogEntry(id="collector-16", name="Collector Metal Print 16×16\"", price=39500, sku="GLOBAL-ALU-16x16"),
        CatalogEntry(id="collector-24", name="Collector Metal Print 24×24\"", price=59500, sku="GLOBAL-ALU-24x24"),
        CatalogEntry(
            id="museum-24x36",
            name="Museum Giclée + Ornate Frame 24×36\"",
            price=85000,
            sku="GLOBAL-FAP-24x36",
            frame_sku="GLOBAL-CFPM-24x36-GD",
            attributes=_GOLD_FRAME,
        ),
    ]
}


class Catalog:
    """Read-only view over a product mapping."""

    def __init__(self, products: Optional[Dict[str, CatalogEntry]] = None):
        self._products = dict(PRODUCTS if products is None else products)

    def lookup(self, product_id: Optional[str]) -> Optional[CatalogEntry]:
        if not product_id:
            return None
        return self._products.get(product_id)

    def ids(self) -> List[str]:
        return list(self._products)

    def list(self) -> List[dict]:
        """Products for client display, price in major currency units."""
        return [
            {"id": entry.id, "name": entry.name, "price": entry.display_price}
            for entry in self._products.values()
        ]

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._products

    def __iter__(self):
        return iter(self._products.values())

    def __len__(self) -> int:
        return len(self._products)


catalog = Catalog()

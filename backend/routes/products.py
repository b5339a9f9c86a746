"""
Catalog endpoints.
"""
from typing import List

from fastapi import APIRouter, Depends

from deps import get_catalog
from domain.catalog import Catalog
from models import ProductSummary

router = APIRouter(tags=["products"])


@router.get("/products", response_model=List[ProductSummary])
async def list_products(catalog: Catalog = Depends(get_catalog)):
    """All products in catalog order, price in major currency units."""
    return catalog.list()

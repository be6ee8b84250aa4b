# storefront/api/routers/products.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import CategoryOut, ProductListOut, ProductOut
from storefront.services.catalog_service import MAX_PAGE_SIZE, CatalogService

router = APIRouter(tags=["catalog"])

SortOption = Literal["newest", "price_asc", "price_desc", "name_asc", "name_desc"]


@router.get("/products", response_model=ProductListOut)
def list_products(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    sort: SortOption = "newest",
    db: Session = Depends(get_db),
):
    return CatalogService(db).list_products(
        category=category,
        search=search,
        page=page,
        limit=limit,
        sort=sort,
    )


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return CatalogService(db).get_product(product_id)


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CatalogService(db).list_categories()
